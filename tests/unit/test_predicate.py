"""Unit tests for predicate trees."""

from __future__ import annotations

import pytest

from member_query.exceptions import EmptyCombinatorError, ValidationError
from member_query.search.predicate import (
    Combination,
    Combinator,
    Leaf,
    Operator,
    and_,
    leaf,
    or_,
)


class TestLeaf:
    def test_build(self) -> None:
        node = leaf("age", Operator.GOE, 35)
        assert node.field == "age"
        assert node.operator is Operator.GOE
        assert node.value == 35

    def test_operator_by_name(self) -> None:
        assert leaf("age", "loe", 20).operator is Operator.LOE
        assert leaf("age", "GT", 20).operator is Operator.GT

    def test_unknown_operator(self) -> None:
        with pytest.raises(ValidationError):
            leaf("age", "between", 20)

    def test_direct_construction_coerces_operator(self) -> None:
        node = Leaf("age", "goe", 35)
        assert node.operator is Operator.GOE
        assert node == leaf("age", Operator.GOE, 35)

    def test_direct_construction_rejects_unknown_operator(self) -> None:
        with pytest.raises(ValidationError):
            Leaf("age", "between", 35)

    def test_equality_by_value(self) -> None:
        assert leaf("age", Operator.EQ, 35) == leaf("age", Operator.EQ, 35)
        assert leaf("age", Operator.EQ, 35) == leaf("age", Operator.EQ, 35.0)
        assert leaf("age", Operator.EQ, 35) != leaf("age", Operator.GOE, 35)
        assert leaf("age", Operator.EQ, 35) != leaf("username", Operator.EQ, 35)

    def test_string_values_compare_by_content(self) -> None:
        name = "".join(["member", "1"])
        assert leaf("username", Operator.EQ, name) == leaf("username", Operator.EQ, "member1")

    def test_immutable(self) -> None:
        node = leaf("age", Operator.EQ, 1)
        with pytest.raises(AttributeError):
            node.value = 2  # type: ignore[misc]

    def test_str(self) -> None:
        assert str(leaf("age", Operator.GOE, 35)) == "age goe 35"


class TestCombination:
    def test_and_keeps_order(self) -> None:
        a = leaf("username", Operator.EQ, "member1")
        b = leaf("age", Operator.GOE, 10)
        node = and_(a, b)
        assert node.kind is Combinator.AND
        assert node.children == (a, b)

    def test_or(self) -> None:
        node = or_(leaf("age", Operator.LT, 20), leaf("age", Operator.GT, 30))
        assert node.kind is Combinator.OR
        assert len(node.children) == 2

    def test_single_child_allowed(self) -> None:
        node = and_(leaf("age", Operator.EQ, 10))
        assert len(node.children) == 1

    def test_nested(self) -> None:
        inner = or_(leaf("team_name", Operator.EQ, "teamA"), leaf("team_name", Operator.EQ, "teamB"))
        node = and_(inner, leaf("age", Operator.GOE, 20))
        assert node.children[0] == inner
        assert str(node) == "((team_name eq 'teamA' or team_name eq 'teamB') and age goe 20)"

    def test_empty_and_raises(self) -> None:
        with pytest.raises(EmptyCombinatorError):
            and_()

    def test_empty_or_raises(self) -> None:
        with pytest.raises(EmptyCombinatorError):
            or_()

    def test_direct_construction_validates(self) -> None:
        with pytest.raises(EmptyCombinatorError):
            Combination(kind=Combinator.AND, children=())

    def test_direct_construction_coerces_kind(self) -> None:
        a = leaf("age", "goe", 35)
        node = Combination(kind="and", children=[a])  # type: ignore[arg-type]
        assert node.kind is Combinator.AND
        assert node.children == (a,)
        assert node == and_(a)

    def test_string_kind_without_children_raises(self) -> None:
        with pytest.raises(EmptyCombinatorError):
            Combination(kind="or", children=())  # type: ignore[arg-type]

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValidationError):
            Combination(kind="xor", children=(leaf("age", "eq", 1),))  # type: ignore[arg-type]

    def test_equality(self) -> None:
        assert and_(leaf("age", "eq", 1)) == and_(leaf("age", "eq", 1))
        assert and_(leaf("age", "eq", 1)) != or_(leaf("age", "eq", 1))

    def test_hashable(self) -> None:
        nodes = {and_(leaf("age", "eq", 1)), and_(leaf("age", "eq", 1)), Leaf("age", Operator.EQ, 1)}
        assert len(nodes) == 2
