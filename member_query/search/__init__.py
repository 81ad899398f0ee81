"""Dynamic member search: predicates, criteria compilation and paging."""

from member_query.search.criteria import SearchCriteria, compile_criteria, validate_criteria
from member_query.search.executor import Executor, MemberTeamRow, SqlAlchemyExecutor
from member_query.search.parser import parse_query
from member_query.search.predicate import (
    Combination,
    Combinator,
    Leaf,
    Operator,
    Predicate,
    and_,
    leaf,
    or_,
)
from member_query.search.query import (
    Direction,
    NullsPosition,
    Page,
    PageStrategy,
    QuerySpec,
    SortKey,
    build_query,
    parse_sort,
)
from member_query.search.service import MemberSearchService

__all__ = [
    "Combination",
    "Combinator",
    "Direction",
    "Executor",
    "Leaf",
    "MemberSearchService",
    "MemberTeamRow",
    "NullsPosition",
    "Operator",
    "Page",
    "PageStrategy",
    "Predicate",
    "QuerySpec",
    "SearchCriteria",
    "SortKey",
    "SqlAlchemyExecutor",
    "and_",
    "build_query",
    "compile_criteria",
    "leaf",
    "or_",
    "parse_query",
    "parse_sort",
    "validate_criteria",
]
