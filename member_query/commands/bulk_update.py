"""Bulk UPDATE operations on members."""

from __future__ import annotations

import click
from sqlalchemy.exc import SQLAlchemyError

from member_query.cli import Context, pass_context
from member_query.db.repository import bulk_add_age, bulk_rename_younger_than
from member_query.db.session import get_session
from member_query.utils.output import error, success

EXIT_USAGE_ERROR = 1
EXIT_DB_ERROR = 2


@click.command("bulk-update")
@click.option(
    "--rename-below",
    type=click.IntRange(min=0),
    default=None,
    help="Rename members younger than this age (requires --to)",
)
@click.option(
    "--to",
    "new_username",
    default=None,
    help="New username for --rename-below",
)
@click.option(
    "--add-age",
    type=int,
    default=None,
    help="Add this many years to every member's age",
)
@pass_context
def cli(
    ctx: Context,
    rename_below: int | None,
    new_username: str | None,
    add_age: int | None,
) -> None:
    """Update many members with a single statement.

    \b
    Examples:
      member-query bulk-update --rename-below 28 --to guest
      member-query bulk-update --add-age 1
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_DB_ERROR)

    if rename_below is None and add_age is None:
        error("Nothing to do", hint="Use --rename-below/--to or --add-age")
        raise SystemExit(EXIT_USAGE_ERROR)
    if rename_below is not None and not new_username:
        error("--rename-below requires --to")
        raise SystemExit(EXIT_USAGE_ERROR)

    messages: list[str] = []
    try:
        with get_session(config.db_path, echo=config.echo_sql) as session:
            if rename_below is not None:
                count = bulk_rename_younger_than(session, rename_below, new_username)
                messages.append(f"Renamed {count} members to '{new_username}'")
            if add_age is not None:
                count = bulk_add_age(session, add_age)
                messages.append(f"Updated age of {count} members")
    except SQLAlchemyError as e:
        error(f"Database error: {e}")
        raise SystemExit(EXIT_DB_ERROR)

    for message in messages:
        success(message)
