"""Parse ``field:value`` query strings into search criteria."""

from __future__ import annotations

import re
from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedInput

from member_query.exceptions import SearchParseError
from member_query.search.criteria import SearchCriteria

# Field name aliases
_FIELD_ALIASES: dict[str, str] = {
    "name": "username",
    "user": "username",
    "team": "team_name",
}

KNOWN_FIELDS: frozenset[str] = frozenset({"username", "team_name", "age"})

_AGE_CMP_RE = re.compile(r"^(>=|<=|>|<|=)?(\d+)$")
_AGE_RANGE_RE = re.compile(r"^(\d+)-(\d+)$")


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("member_query.search").joinpath("grammar.lark").read_text()


_parser = Lark(_load_grammar(), parser="lalr")


class _ClauseTransformer(Transformer):
    """Turn the parse tree into a list of ``(field, raw value)`` pairs."""

    def start(self, items: list[Any]) -> list[tuple[str, str]]:
        return list(items)

    def clause(self, items: list[Any]) -> tuple[str, str]:
        field_name = str(items[0]).lower()
        return _FIELD_ALIASES.get(field_name, field_name), str(items[1])

    def QUOTED_STRING(self, token: Token) -> str:
        # Strip surrounding quotes
        return str(token)[1:-1]


_transformer = _ClauseTransformer()


def _age_bounds(value: str) -> dict[str, int]:
    """Map an age expression to ``age_goe``/``age_loe`` bounds."""
    match = _AGE_RANGE_RE.match(value)
    if match:
        return {"age_goe": int(match.group(1)), "age_loe": int(match.group(2))}

    match = _AGE_CMP_RE.match(value)
    if match is None:
        raise ValueError(f"invalid age expression '{value}'")

    op, number = match.group(1) or "=", int(match.group(2))
    if op == ">=":
        return {"age_goe": number}
    if op == ">":
        return {"age_goe": number + 1}
    if op == "<=":
        return {"age_loe": number}
    if op == "<":
        return {"age_loe": number - 1}
    return {"age_goe": number, "age_loe": number}


def parse_query(query_string: str) -> SearchCriteria:
    """Parse a member search query into criteria.

    Supported clauses:
        - ``username:NAME`` (aliases ``name``, ``user``): exact username
        - ``team:NAME`` (alias ``team_name``): exact team name
        - ``age:N``, ``age:>=N``, ``age:<=N``, ``age:>N``, ``age:<N``,
          ``age:N-M``: age bounds, inclusive

    Values containing spaces must be double-quoted. Repeating a field with
    a different value is an error.

    Args:
        query_string: The search query to parse.

    Returns:
        SearchCriteria; empty criteria for an empty query.

    Raises:
        SearchParseError: If the query cannot be parsed.
    """
    query_string = query_string.strip()
    if not query_string:
        return SearchCriteria()

    try:
        tree = _parser.parse(query_string)
    except UnexpectedInput as e:
        raise SearchParseError(query_string, str(e)) from e
    clauses: list[tuple[str, str]] = _transformer.transform(tree)

    values: dict[str, Any] = {}
    for field_name, raw in clauses:
        if field_name not in KNOWN_FIELDS:
            raise SearchParseError(
                query_string,
                f"unknown field '{field_name}' (available: {', '.join(sorted(KNOWN_FIELDS))})",
            )
        if field_name == "age":
            try:
                updates: dict[str, Any] = _age_bounds(raw)
            except ValueError as e:
                raise SearchParseError(query_string, str(e)) from e
        else:
            updates = {field_name: raw}

        for attr, value in updates.items():
            if attr in values and values[attr] != value:
                raise SearchParseError(
                    query_string, f"conflicting values for {attr}: {values[attr]!r} and {value!r}"
                )
            values[attr] = value

    return SearchCriteria(**values)
