"""Translate predicate trees and sort specs into SQLAlchemy expressions."""

from __future__ import annotations

from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.orm import InstrumentedAttribute

from member_query.db.models import Member, Team
from member_query.exceptions import ValidationError
from member_query.search.predicate import Combination, Combinator, Leaf, Operator, Predicate
from member_query.search.query import Direction, NullsPosition, SortSpec

# Map predicate/sort field names to ORM columns.
# "team_name" lives on the outer-joined team table.
FIELD_COLUMNS: dict[str, InstrumentedAttribute[Any]] = {
    "id": Member.id,
    "username": Member.username,
    "age": Member.age,
    "team_name": Team.name,
}


def get_column(field: str) -> InstrumentedAttribute[Any]:
    """Get the SQLAlchemy column attribute for a field name.

    Raises:
        ValidationError: If the field is not queryable.
    """
    col = FIELD_COLUMNS.get(field)
    if col is None:
        raise ValidationError(
            "field", field, f"unknown field (available: {', '.join(FIELD_COLUMNS)})"
        )
    return col


def _leaf_clause(node: Leaf):
    col = get_column(node.field)
    value = node.value
    op = node.operator

    if op is Operator.EQ:
        return col == value
    if op is Operator.GOE:
        return col >= value
    if op is Operator.LOE:
        return col <= value
    if op is Operator.GT:
        return col > value
    if op is Operator.LT:
        return col < value
    raise ValidationError("operator", op, "unsupported operator")


def to_clause(predicate: Predicate):
    """Build a SQL boolean clause for a predicate tree.

    Children are emitted in tree order; a one-child combination collapses
    to its child.
    """
    if isinstance(predicate, Leaf):
        return _leaf_clause(predicate)

    if isinstance(predicate, Combination):
        clauses = [to_clause(child) for child in predicate.children]
        if len(clauses) == 1:
            return clauses[0]
        if predicate.kind is Combinator.AND:
            return and_(*clauses)
        if predicate.kind is Combinator.OR:
            return or_(*clauses)
        raise ValidationError("kind", predicate.kind, "unsupported combinator")

    raise TypeError(f"Not a predicate: {predicate!r}")


def to_order_by(sort: SortSpec) -> list:
    """Build ORDER BY expressions for a sort spec."""
    order = []
    for key in sort:
        col = get_column(key.field)
        expr = col.desc() if key.direction is Direction.DESC else col.asc()
        if key.nulls is NullsPosition.FIRST:
            expr = expr.nulls_first()
        else:
            expr = expr.nulls_last()
        order.append(expr)
    return order
