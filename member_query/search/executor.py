"""Execution layer: run query specs against the member database."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError

from member_query.db.models import Member, Team
from member_query.exceptions import ExecutionError, NonUniqueResultError
from member_query.search.predicate import Predicate
from member_query.search.query import QuerySpec
from member_query.search.sql import to_clause, to_order_by

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberTeamRow:
    """A member joined with its team (team fields are None without a team)."""

    member_id: int
    username: str | None
    age: int
    team_id: int | None
    team_name: str | None


class Executor(Protocol):
    """Contract the search service needs from a storage backend."""

    def fetch(
        self, spec: QuerySpec, *, offset: int = 0, limit: int | None = None
    ) -> list[MemberTeamRow]: ...

    def fetch_one(self, spec: QuerySpec) -> MemberTeamRow | None: ...

    def count(self, predicate: Predicate | None) -> int: ...

    def fetch_with_count(
        self, spec: QuerySpec, offset: int, limit: int
    ) -> tuple[list[MemberTeamRow], int]: ...


class SqlAlchemyExecutor:
    """Executor backed by a SQLAlchemy session.

    Members are outer-joined to teams. Rows come back ordered by the query's
    sort keys followed by member id, so results are stable across calls.
    Any ``SQLAlchemyError`` is re-raised as :class:`ExecutionError`.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _select(self, spec: QuerySpec, *extra_columns) -> Select:
        stmt = (
            select(
                Member.id.label("member_id"),
                Member.username.label("username"),
                Member.age.label("age"),
                Team.id.label("team_id"),
                Team.name.label("team_name"),
                *extra_columns,
            )
            .select_from(Member)
            .outerjoin(Team, Member.team_id == Team.id)
        )
        if spec.predicate is not None:
            stmt = stmt.where(to_clause(spec.predicate))
        return stmt.order_by(*to_order_by(spec.sort), Member.id.asc())

    def _all(self, stmt: Select) -> list:
        try:
            return list(self.session.execute(stmt).all())
        except SQLAlchemyError as e:
            raise ExecutionError(f"Query failed: {e}") from e

    @staticmethod
    def _to_row(row) -> MemberTeamRow:
        return MemberTeamRow(
            member_id=row.member_id,
            username=row.username,
            age=row.age,
            team_id=row.team_id,
            team_name=row.team_name,
        )

    def fetch(
        self, spec: QuerySpec, *, offset: int = 0, limit: int | None = None
    ) -> list[MemberTeamRow]:
        """Fetch matching rows, optionally bounded by offset/limit."""
        stmt = self._select(spec)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return [self._to_row(row) for row in self._all(stmt)]

    def fetch_one(self, spec: QuerySpec) -> MemberTeamRow | None:
        """Fetch the single matching row.

        Raises:
            NonUniqueResultError: If more than one row matches.
        """
        rows = self._all(self._select(spec).limit(2))
        if len(rows) > 1:
            raise NonUniqueResultError()
        return self._to_row(rows[0]) if rows else None

    def count(self, predicate: Predicate | None) -> int:
        """Count rows matching a predicate (None counts everything)."""
        stmt = (
            select(func.count(Member.id))
            .select_from(Member)
            .outerjoin(Team, Member.team_id == Team.id)
        )
        if predicate is not None:
            stmt = stmt.where(to_clause(predicate))
        try:
            return int(self.session.execute(stmt).scalar() or 0)
        except SQLAlchemyError as e:
            raise ExecutionError(f"Count query failed: {e}") from e

    def fetch_with_count(
        self, spec: QuerySpec, offset: int, limit: int
    ) -> tuple[list[MemberTeamRow], int]:
        """Fetch one page and the total match count in a single SELECT.

        The total rides along as ``count(*) OVER ()``. A page past the end
        has no rows to carry it, so that case falls back to :meth:`count`.
        """
        stmt = (
            self._select(spec, func.count().over().label("total_count"))
            .offset(offset)
            .limit(limit)
        )
        rows = self._all(stmt)
        if rows:
            total = int(rows[0].total_count)
        elif offset == 0:
            total = 0
        else:
            log.debug("Empty page at offset %d, counting separately", offset)
            total = self.count(spec.predicate)
        return [self._to_row(row) for row in rows], total
