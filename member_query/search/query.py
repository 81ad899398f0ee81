"""Query descriptors: ordering, query specs and pages."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from member_query.exceptions import ValidationError
from member_query.search.predicate import Predicate

RowT = TypeVar("RowT")


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


class NullsPosition(str, Enum):
    FIRST = "first"
    LAST = "last"


class PageStrategy(str, Enum):
    """How a page and its total count are fetched.

    SIMPLE asks the executor for rows and total in one call. COMPLEX runs a
    bounded fetch and a separate count, skipping the count when the first
    page already comes back short.
    """

    SIMPLE = "simple"
    COMPLEX = "complex"


@dataclass(frozen=True)
class SortKey:
    """One ordering key; direction and nulls policy apply to this key only."""

    field: str
    direction: Direction = Direction.ASC
    nulls: NullsPosition = NullsPosition.LAST


SortSpec = tuple[SortKey, ...]


def parse_sort(text: str | None) -> SortSpec:
    """Parse a comma-separated sort string.

    ``-`` prefix sorts descending, ``~`` suffix puts nulls first.

    Examples:
        ``"-age,username"`` -> age DESC, username ASC (nulls last)
        ``"username~"`` -> username ASC nulls first
    """
    if not text:
        return ()

    keys: list[SortKey] = []
    for raw in text.split(","):
        part = raw.strip()
        if not part:
            continue
        direction = Direction.ASC
        nulls = NullsPosition.LAST
        if part.startswith("-"):
            direction = Direction.DESC
            part = part[1:]
        if part.endswith("~"):
            nulls = NullsPosition.FIRST
            part = part[:-1]
        if not part:
            raise ValidationError("sort", raw, "missing field name")
        keys.append(SortKey(field=part, direction=direction, nulls=nulls))
    return tuple(keys)


@dataclass(frozen=True)
class QuerySpec:
    """Immutable filter + ordering descriptor handed to an executor."""

    predicate: Predicate | None = None
    sort: SortSpec = ()


def build_query(
    predicate: Predicate | None = None,
    sort: Iterable[SortKey] | None = None,
) -> QuerySpec:
    """Combine an optional filter and ordering into a :class:`QuerySpec`."""
    return QuerySpec(predicate=predicate, sort=tuple(sort) if sort else ())


@dataclass(frozen=True)
class Page(Generic[RowT]):
    """A window of rows plus the total number of matching rows."""

    content: tuple[RowT, ...]
    total_count: int
    offset: int
    limit: int
    strategy: PageStrategy | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if len(self.content) > self.limit:
            raise ValueError(
                f"Page holds {len(self.content)} rows but limit is {self.limit}"
            )
        if self.total_count < len(self.content):
            raise ValueError(
                f"Total count {self.total_count} is smaller than page size {len(self.content)}"
            )

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.content) < self.total_count

    @property
    def page_number(self) -> int:
        """Zero-based page index."""
        return self.offset // self.limit

    @property
    def total_pages(self) -> int:
        if self.total_count == 0:
            return 0
        return -(-self.total_count // self.limit)
