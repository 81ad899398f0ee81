"""SQLAlchemy ORM models for the member database."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class Team(Base):
    """A team that members belong to."""

    __tablename__ = "team"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)

    members: Mapped[list[Member]] = relationship(
        "Member", back_populates="team", order_by="Member.id"
    )

    __table_args__ = (Index("ix_team_name", "name"),)

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.name}')>"


class Member(Base):
    """A member, optionally assigned to a team."""

    __tablename__ = "member"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str | None] = mapped_column(String(128))
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    team_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("team.id"), nullable=True)

    team: Mapped[Team | None] = relationship("Team", back_populates="members")

    __table_args__ = (
        Index("ix_member_username", "username"),
        Index("ix_member_age", "age"),
    )

    def change_team(self, team: Team) -> None:
        """Move the member to another team.

        ``back_populates`` keeps ``Team.members`` of both teams in sync.
        """
        self.team = team

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, username='{self.username}', age={self.age})>"


class Hello(Base):
    """Bare entity used to check that the schema and session work."""

    __tablename__ = "hello"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        return f"<Hello(id={self.id})>"
