"""Caller-facing member search: criteria in, rows or pages out."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from member_query.exceptions import ValidationError
from member_query.search.criteria import SearchCriteria, compile_criteria, validate_criteria
from member_query.search.executor import Executor, MemberTeamRow
from member_query.search.query import Page, PageStrategy, QuerySpec, SortKey, build_query

log = logging.getLogger(__name__)


class MemberSearchService:
    """Compile criteria, assemble queries and run them through an executor.

    The service holds no state besides its executor; errors raised by the
    executor propagate unchanged.

    Attributes:
        executor: Backend that runs query specs.
        strict_bounds: Reject criteria whose age bounds cannot match
            instead of running them.
    """

    def __init__(self, executor: Executor, *, strict_bounds: bool = False) -> None:
        self.executor = executor
        self.strict_bounds = strict_bounds

    def execute_list(self, spec: QuerySpec) -> list[MemberTeamRow]:
        """Run a query spec without any limit."""
        return list(self.executor.fetch(spec))

    def execute_page(
        self,
        spec: QuerySpec,
        offset: int,
        limit: int,
        strategy: PageStrategy = PageStrategy.SIMPLE,
    ) -> Page[MemberTeamRow]:
        """Run a query spec for one page.

        Args:
            spec: Query to run.
            offset: Number of rows to skip, >= 0.
            limit: Maximum rows on the page, >= 1.
            strategy: SIMPLE fetches rows and total together; COMPLEX fetches
                the rows first and then counts, unless the first page is
                already short, in which case the total is the page length.

        Raises:
            ValidationError: If offset or limit is out of range.
        """
        if offset < 0:
            raise ValidationError("offset", offset, "must not be negative")
        if limit < 1:
            raise ValidationError("limit", limit, "must be at least 1")

        strategy = PageStrategy(strategy)
        if strategy is PageStrategy.SIMPLE:
            rows, total = self.executor.fetch_with_count(spec, offset, limit)
        else:
            rows = self.executor.fetch(spec, offset=offset, limit=limit)
            if offset == 0 and len(rows) < limit:
                log.debug("Short first page (%d < %d), skipping count query", len(rows), limit)
                total = len(rows)
            else:
                total = self.executor.count(spec.predicate)

        return Page(
            content=tuple(rows),
            total_count=total,
            offset=offset,
            limit=limit,
            strategy=strategy,
        )

    def _spec_for(
        self, criteria: SearchCriteria, sort: Iterable[SortKey] | None
    ) -> QuerySpec:
        if self.strict_bounds:
            validate_criteria(criteria)
        predicate = compile_criteria(criteria)
        log.debug("Compiled %s -> %s", criteria, predicate)
        return build_query(predicate, sort)

    def search(
        self,
        criteria: SearchCriteria,
        sort: Iterable[SortKey] | None = None,
    ) -> list[MemberTeamRow]:
        """Return every member matching the criteria."""
        return self.execute_list(self._spec_for(criteria, sort))

    def search_page(
        self,
        criteria: SearchCriteria,
        offset: int,
        limit: int,
        strategy: PageStrategy = PageStrategy.SIMPLE,
        sort: Iterable[SortKey] | None = None,
    ) -> Page[MemberTeamRow]:
        """Return one page of members matching the criteria."""
        return self.execute_page(self._spec_for(criteria, sort), offset, limit, strategy)

    def find_one(self, criteria: SearchCriteria) -> MemberTeamRow | None:
        """Return the single matching member, or None.

        Raises:
            NonUniqueResultError: If more than one member matches.
        """
        return self.executor.fetch_one(self._spec_for(criteria, None))
