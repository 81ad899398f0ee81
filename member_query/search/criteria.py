"""Search criteria and their compilation into predicates."""

from __future__ import annotations

from dataclasses import dataclass

from member_query.exceptions import ValidationError
from member_query.search.predicate import Leaf, Operator, Predicate, and_, leaf


@dataclass(frozen=True)
class SearchCriteria:
    """Sparse member search criteria.

    Every field is optional; ``None`` means "no filter on this field".

    Attributes:
        username: Exact username match.
        team_name: Exact team name match.
        age_goe: Minimum age, inclusive.
        age_loe: Maximum age, inclusive.
    """

    username: str | None = None
    team_name: str | None = None
    age_goe: int | None = None
    age_loe: int | None = None

    def is_empty(self) -> bool:
        """Return True if no field is set."""
        return all(
            value is None
            for value in (self.username, self.team_name, self.age_goe, self.age_loe)
        )


# (criteria attribute, predicate field, operator) in clause order.
_FIELD_ORDER: tuple[tuple[str, str, Operator], ...] = (
    ("username", "username", Operator.EQ),
    ("team_name", "team_name", Operator.EQ),
    ("age_goe", "age", Operator.GOE),
    ("age_loe", "age", Operator.LOE),
)


def compile_criteria(criteria: SearchCriteria) -> Predicate | None:
    """Compile search criteria into a predicate.

    Fields are visited in a fixed order (username, team name, minimum age,
    maximum age) and unset fields are skipped, so identical criteria always
    produce identical trees.

    Bounds are not checked against each other here: ``age_goe > age_loe``
    compiles fine and simply matches nothing. See :func:`validate_criteria`.

    Args:
        criteria: The criteria to compile.

    Returns:
        ``None`` when no field is set (match all rows), the bare leaf when
        exactly one field is set, otherwise an AND of the leaves.
    """
    leaves: list[Leaf] = []
    for attr, field_name, op in _FIELD_ORDER:
        value = getattr(criteria, attr)
        if value is not None:
            leaves.append(leaf(field_name, op, value))

    if not leaves:
        return None
    if len(leaves) == 1:
        return leaves[0]
    return and_(*leaves)


def validate_criteria(criteria: SearchCriteria) -> None:
    """Reject criteria whose age bounds can never match.

    Raises:
        ValidationError: If an age bound is negative or the minimum age
            exceeds the maximum age.
    """
    for attr in ("age_goe", "age_loe"):
        value = getattr(criteria, attr)
        if value is not None and value < 0:
            raise ValidationError(attr, value, "must not be negative")

    if (
        criteria.age_goe is not None
        and criteria.age_loe is not None
        and criteria.age_goe > criteria.age_loe
    ):
        raise ValidationError(
            "age_goe",
            criteria.age_goe,
            f"minimum age {criteria.age_goe} exceeds maximum age {criteria.age_loe}",
        )
