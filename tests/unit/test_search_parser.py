"""Unit tests for the search query parser."""

from __future__ import annotations

import pytest

from member_query.exceptions import SearchParseError
from member_query.search.criteria import SearchCriteria
from member_query.search.parser import parse_query


class TestFields:
    def test_empty_query(self) -> None:
        assert parse_query("") == SearchCriteria()
        assert parse_query("   ") == SearchCriteria()

    def test_username(self) -> None:
        assert parse_query("username:member1") == SearchCriteria(username="member1")

    def test_username_aliases(self) -> None:
        assert parse_query("name:member1") == SearchCriteria(username="member1")
        assert parse_query("user:member1") == SearchCriteria(username="member1")

    def test_team(self) -> None:
        assert parse_query("team:teamA") == SearchCriteria(team_name="teamA")
        assert parse_query("team_name:teamA") == SearchCriteria(team_name="teamA")

    def test_field_name_case_insensitive(self) -> None:
        assert parse_query("Team:teamA") == SearchCriteria(team_name="teamA")

    def test_quoted_value(self) -> None:
        assert parse_query('team:"team A"') == SearchCriteria(team_name="team A")

    def test_combined(self) -> None:
        q = parse_query("username:member1 team:teamA age:>=10 age:<=30")
        assert q == SearchCriteria(username="member1", team_name="teamA", age_goe=10, age_loe=30)


class TestAge:
    @pytest.mark.parametrize(
        ("expr", "expected"),
        [
            ("age:>=20", SearchCriteria(age_goe=20)),
            ("age:<=20", SearchCriteria(age_loe=20)),
            ("age:>20", SearchCriteria(age_goe=21)),
            ("age:<20", SearchCriteria(age_loe=19)),
            ("age:20", SearchCriteria(age_goe=20, age_loe=20)),
            ("age:=20", SearchCriteria(age_goe=20, age_loe=20)),
            ("age:20-30", SearchCriteria(age_goe=20, age_loe=30)),
        ],
    )
    def test_expressions(self, expr: str, expected: SearchCriteria) -> None:
        assert parse_query(expr) == expected

    def test_inverted_range_passes_through(self) -> None:
        assert parse_query("age:40-10") == SearchCriteria(age_goe=40, age_loe=10)

    def test_invalid_age(self) -> None:
        with pytest.raises(SearchParseError):
            parse_query("age:old")


class TestErrors:
    def test_unknown_field(self) -> None:
        with pytest.raises(SearchParseError, match="unknown field"):
            parse_query("email:a@b.c")

    def test_bare_word(self) -> None:
        with pytest.raises(SearchParseError):
            parse_query("member1")

    def test_missing_value(self) -> None:
        with pytest.raises(SearchParseError):
            parse_query("username:")

    def test_conflicting_values(self) -> None:
        with pytest.raises(SearchParseError, match="conflicting"):
            parse_query("username:a username:b")

    def test_repeated_same_value_is_fine(self) -> None:
        assert parse_query("team:teamA team:teamA") == SearchCriteria(team_name="teamA")

    def test_error_keeps_query(self) -> None:
        with pytest.raises(SearchParseError) as exc_info:
            parse_query("age:old")
        assert exc_info.value.query == "age:old"
