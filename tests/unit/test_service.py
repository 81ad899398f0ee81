"""Unit tests for the member search service."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from member_query.exceptions import ExecutionError, ValidationError
from member_query.search.criteria import SearchCriteria
from member_query.search.executor import MemberTeamRow, SqlAlchemyExecutor
from member_query.search.predicate import Predicate
from member_query.search.query import PageStrategy, QuerySpec, parse_sort
from member_query.search.service import MemberSearchService


def _rows(count: int) -> list[MemberTeamRow]:
    return [
        MemberTeamRow(member_id=i, username=f"member{i}", age=i * 10, team_id=None, team_name=None)
        for i in range(1, count + 1)
    ]


class RecordingExecutor:
    """In-memory executor that records every call in order."""

    def __init__(self, rows: list[MemberTeamRow]) -> None:
        self.rows = rows
        self.calls: list[str] = []
        self.specs: list[QuerySpec] = []

    def fetch(self, spec: QuerySpec, *, offset: int = 0, limit: int | None = None):
        self.calls.append("fetch")
        self.specs.append(spec)
        end = None if limit is None else offset + limit
        return self.rows[offset:end]

    def fetch_one(self, spec: QuerySpec):
        self.calls.append("fetch_one")
        self.specs.append(spec)
        return self.rows[0] if self.rows else None

    def count(self, predicate: Predicate | None) -> int:
        self.calls.append("count")
        return len(self.rows)

    def fetch_with_count(self, spec: QuerySpec, offset: int, limit: int):
        self.calls.append("fetch_with_count")
        self.specs.append(spec)
        return self.rows[offset : offset + limit], len(self.rows)


class FailingExecutor(RecordingExecutor):
    def fetch(self, spec: QuerySpec, *, offset: int = 0, limit: int | None = None):
        raise ExecutionError("connection lost")


class TestComplexStrategy:
    def test_short_first_page_skips_count(self) -> None:
        executor = RecordingExecutor(_rows(3))
        page = MemberSearchService(executor).search_page(
            SearchCriteria(), offset=0, limit=5, strategy=PageStrategy.COMPLEX
        )
        assert executor.calls == ["fetch"]
        assert page.total_count == 3
        assert len(page.content) == 3

    def test_full_first_page_counts(self) -> None:
        executor = RecordingExecutor(_rows(5))
        page = MemberSearchService(executor).search_page(
            SearchCriteria(), offset=0, limit=5, strategy=PageStrategy.COMPLEX
        )
        assert executor.calls == ["fetch", "count"]
        assert page.total_count == 5

    def test_later_short_page_still_counts(self) -> None:
        executor = RecordingExecutor(_rows(4))
        page = MemberSearchService(executor).search_page(
            SearchCriteria(), offset=3, limit=2, strategy=PageStrategy.COMPLEX
        )
        assert executor.calls == ["fetch", "count"]
        assert page.total_count == 4
        assert len(page.content) == 1

    def test_empty_result_skips_count(self) -> None:
        executor = RecordingExecutor([])
        page = MemberSearchService(executor).search_page(
            SearchCriteria(), offset=0, limit=5, strategy="complex"
        )
        assert executor.calls == ["fetch"]
        assert page.total_count == 0


class TestSimpleStrategy:
    @pytest.mark.parametrize("offset", [0, 2, 4, 10])
    def test_always_one_combined_call(self, offset: int) -> None:
        executor = RecordingExecutor(_rows(5))
        page = MemberSearchService(executor).search_page(
            SearchCriteria(), offset=offset, limit=2, strategy=PageStrategy.SIMPLE
        )
        assert executor.calls == ["fetch_with_count"]
        assert page.total_count == 5
        assert page.strategy is PageStrategy.SIMPLE


class TestPagingArguments:
    def test_negative_offset(self) -> None:
        executor = RecordingExecutor(_rows(1))
        with pytest.raises(ValidationError):
            MemberSearchService(executor).search_page(SearchCriteria(), offset=-1, limit=2)
        assert executor.calls == []

    def test_zero_limit(self) -> None:
        executor = RecordingExecutor(_rows(1))
        with pytest.raises(ValidationError):
            MemberSearchService(executor).search_page(SearchCriteria(), offset=0, limit=0)
        assert executor.calls == []


class TestSearchDelegation:
    def test_search_passes_compiled_spec(self) -> None:
        executor = RecordingExecutor(_rows(2))
        sort = parse_sort("-age")
        MemberSearchService(executor).search(SearchCriteria(age_goe=20), sort=sort)
        spec = executor.specs[0]
        assert spec.sort == sort
        assert spec.predicate is not None
        assert spec.predicate.field == "age"

    def test_empty_criteria_means_no_predicate(self) -> None:
        executor = RecordingExecutor(_rows(2))
        result = MemberSearchService(executor).search(SearchCriteria())
        assert executor.specs[0].predicate is None
        assert len(result) == 2

    def test_find_one(self) -> None:
        executor = RecordingExecutor(_rows(1))
        row = MemberSearchService(executor).find_one(SearchCriteria(username="member1"))
        assert row is not None
        assert executor.calls == ["fetch_one"]

    def test_execution_error_propagates(self) -> None:
        with pytest.raises(ExecutionError, match="connection lost"):
            MemberSearchService(FailingExecutor([])).search(SearchCriteria())

    def test_strict_bounds(self) -> None:
        executor = RecordingExecutor(_rows(2))
        service = MemberSearchService(executor, strict_bounds=True)
        with pytest.raises(ValidationError):
            service.search(SearchCriteria(age_goe=40, age_loe=10))
        assert executor.calls == []

    def test_contradictory_bounds_run_when_not_strict(self) -> None:
        executor = RecordingExecutor([])
        assert MemberSearchService(executor).search(SearchCriteria(age_goe=40, age_loe=10)) == []
        assert executor.calls == ["fetch"]


class TestAgainstDatabase:
    def test_age_goe_35(self, session: Session) -> None:
        service = MemberSearchService(SqlAlchemyExecutor(session))
        rows = service.search(SearchCriteria(age_goe=35))
        assert [r.username for r in rows] == ["member4"]
        assert rows[0].age == 40

    def test_no_criteria_returns_all(self, session: Session) -> None:
        service = MemberSearchService(SqlAlchemyExecutor(session))
        rows = service.search(SearchCriteria())
        assert [r.username for r in rows] == ["member1", "member2", "member3", "member4"]

    @pytest.mark.parametrize("strategy", list(PageStrategy))
    def test_second_window_sorted_desc(self, session: Session, strategy: PageStrategy) -> None:
        service = MemberSearchService(SqlAlchemyExecutor(session))
        page = service.search_page(
            SearchCriteria(), offset=1, limit=2, strategy=strategy, sort=parse_sort("-username")
        )
        assert len(page.content) == 2
        assert page.total_count == 4
        assert [r.username for r in page.content] == ["member3", "member2"]

    def test_all_fields(self, session: Session) -> None:
        service = MemberSearchService(SqlAlchemyExecutor(session))
        rows = service.search(
            SearchCriteria(username="member2", team_name="teamA", age_goe=10, age_loe=20)
        )
        assert [r.member_id for r in rows] == [2]

    def test_contradictory_bounds_return_nothing(self, session: Session) -> None:
        service = MemberSearchService(SqlAlchemyExecutor(session))
        assert service.search(SearchCriteria(age_goe=40, age_loe=10)) == []

    def test_find_one(self, session: Session) -> None:
        service = MemberSearchService(SqlAlchemyExecutor(session))
        row = service.find_one(SearchCriteria(team_name="teamB", age_loe=30))
        assert row is not None
        assert row.username == "member3"
