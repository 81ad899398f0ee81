"""Repository functions for members and teams."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, joinedload

from member_query.db.models import Member, Team
from member_query.exceptions import MemberNotFoundError, ValidationError

log = logging.getLogger(__name__)

# (team name, [(username, age), ...])
SAMPLE_DATA: tuple[tuple[str, tuple[tuple[str, int], ...]], ...] = (
    ("teamA", (("member1", 10), ("member2", 20))),
    ("teamB", (("member3", 30), ("member4", 40))),
)


@dataclass(frozen=True)
class TeamStats:
    """Aggregated member ages for one team."""

    team_name: str
    member_count: int
    avg_age: float
    min_age: int
    max_age: int


def get_member_by_id(session: Session, member_id: int) -> Member:
    """Get a single member by ID, with its team loaded.

    Raises:
        MemberNotFoundError: If the member doesn't exist.
    """
    stmt = select(Member).options(joinedload(Member.team)).where(Member.id == member_id)
    member = session.execute(stmt).scalar_one_or_none()
    if member is None:
        raise MemberNotFoundError(member_id)
    return member


def find_by_username(session: Session, username: str) -> list[Member]:
    """Return all members with exactly this username, by id."""
    stmt = select(Member).where(Member.username == username).order_by(Member.id)
    return list(session.execute(stmt).scalars().all())


def get_or_create_team(session: Session, name: str) -> Team:
    """Return the first team with this name, creating it if missing."""
    team = session.execute(
        select(Team).where(Team.name == name).order_by(Team.id).limit(1)
    ).scalar_one_or_none()
    if team is None:
        team = Team(name=name)
        session.add(team)
        session.flush()
    return team


def add_member(session: Session, username: str, age: int, team: Team | None = None) -> Member:
    """Persist a new member.

    Raises:
        ValidationError: If age is negative.
    """
    if age < 0:
        raise ValidationError("age", age, "must not be negative")
    member = Member(username=username, age=age)
    if team is not None:
        member.change_team(team)
    session.add(member)
    session.flush()
    return member


def clear_all(session: Session) -> None:
    """Delete all members and teams."""
    session.execute(delete(Member))
    session.execute(delete(Team))
    session.flush()


def seed_sample_data(session: Session, *, reset: bool = False) -> int:
    """Insert the sample teams and members.

    Members that already exist (by username) are left alone, so running
    this twice is harmless.

    Args:
        session: Active database session.
        reset: Delete all existing members and teams first.

    Returns:
        Number of members created.
    """
    if reset:
        clear_all(session)

    created = 0
    for team_name, members in SAMPLE_DATA:
        team = get_or_create_team(session, team_name)
        for username, age in members:
            if find_by_username(session, username):
                continue
            add_member(session, username, age, team)
            created += 1

    log.info("Seeded %d sample members", created)
    return created


def bulk_rename_younger_than(session: Session, age: int, new_username: str) -> int:
    """Rename every member younger than ``age`` in one UPDATE.

    The statement bypasses objects already loaded in the session, so the
    identity map is expired afterwards to avoid stale reads.

    Returns:
        Number of rows updated.
    """
    result = session.execute(
        update(Member)
        .where(Member.age < age)
        .values(username=new_username)
        .execution_options(synchronize_session=False)
    )
    session.expire_all()
    log.info("Renamed %d members younger than %d to %r", result.rowcount, age, new_username)
    return result.rowcount


def bulk_add_age(session: Session, delta: int) -> int:
    """Add ``delta`` to every member's age in one UPDATE.

    Returns:
        Number of rows updated.
    """
    result = session.execute(
        update(Member)
        .values(age=Member.age + delta)
        .execution_options(synchronize_session=False)
    )
    session.expire_all()
    log.info("Added %d to the age of %d members", delta, result.rowcount)
    return result.rowcount


def team_age_stats(session: Session) -> list[TeamStats]:
    """Per-team member count and average/min/max age, ordered by team name.

    Teams without members are omitted.
    """
    stmt = (
        select(
            Team.name,
            func.count(Member.id),
            func.avg(Member.age),
            func.min(Member.age),
            func.max(Member.age),
        )
        .join(Member, Member.team_id == Team.id)
        .group_by(Team.name)
        .order_by(Team.name)
    )
    return [
        TeamStats(
            team_name=name,
            member_count=int(count),
            avg_age=float(avg_age),
            min_age=int(min_age),
            max_age=int(max_age),
        )
        for name, count, avg_age, min_age, max_age in session.execute(stmt).all()
    ]
