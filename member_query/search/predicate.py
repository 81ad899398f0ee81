"""Immutable predicate trees for member queries.

A predicate is either a :class:`Leaf` (a single ``field <op> value``
comparison) or a :class:`Combination` of child predicates joined with
AND or OR. Trees are plain data: they are built by the helper functions
below, compared by value, and translated to SQL by
:mod:`member_query.search.sql`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from member_query.exceptions import EmptyCombinatorError, ValidationError


class Operator(str, Enum):
    """Comparison operators supported by a leaf predicate."""

    EQ = "eq"
    GOE = "goe"
    LOE = "loe"
    GT = "gt"
    LT = "lt"


class Combinator(str, Enum):
    """Boolean combinators for grouping predicates."""

    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class Leaf:
    """A single ``field <operator> value`` comparison."""

    field: str
    operator: Operator
    value: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", _coerce_operator(self.operator))

    def __str__(self) -> str:
        return f"{self.field} {self.operator.value} {self.value!r}"


@dataclass(frozen=True)
class Combination:
    """An AND/OR group of child predicates.

    Children keep the order they were given in; it decides the order of
    the generated SQL clauses.
    """

    kind: Combinator
    children: tuple[Predicate, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _coerce_combinator(self.kind))
        object.__setattr__(self, "children", tuple(self.children))
        if not self.children:
            raise EmptyCombinatorError(self.kind.value)

    def __str__(self) -> str:
        joiner = f" {self.kind.value} "
        return "(" + joiner.join(str(child) for child in self.children) + ")"


Predicate = Union[Leaf, Combination]


def _coerce_operator(op: Operator | str) -> Operator:
    if isinstance(op, Operator):
        return op
    try:
        return Operator(str(op).lower())
    except ValueError:
        valid = ", ".join(o.value for o in Operator)
        raise ValidationError("operator", op, f"must be one of: {valid}") from None


def _coerce_combinator(kind: Combinator | str) -> Combinator:
    if isinstance(kind, Combinator):
        return kind
    try:
        return Combinator(str(kind).lower())
    except ValueError:
        valid = ", ".join(c.value for c in Combinator)
        raise ValidationError("kind", kind, f"must be one of: {valid}") from None


def leaf(field: str, op: Operator | str, value: Any) -> Leaf:
    """Build a single comparison predicate.

    Args:
        field: Logical field name (e.g. ``"age"``).
        op: Operator member or its name (``"goe"``).
        value: Literal to compare against.

    Raises:
        ValidationError: If ``op`` is not a known operator.
    """
    return Leaf(field=field, operator=op, value=value)


def and_(*predicates: Predicate) -> Combination:
    """AND together one or more predicates.

    Raises:
        EmptyCombinatorError: If called without predicates.
    """
    return Combination(kind=Combinator.AND, children=tuple(predicates))


def or_(*predicates: Predicate) -> Combination:
    """OR together one or more predicates.

    Raises:
        EmptyCombinatorError: If called without predicates.
    """
    return Combination(kind=Combinator.OR, children=tuple(predicates))
