"""Load the sample teams and members."""

from __future__ import annotations

import click
from sqlalchemy.exc import SQLAlchemyError

from member_query.cli import Context, pass_context
from member_query.db.repository import seed_sample_data
from member_query.db.session import get_session
from member_query.utils.output import error, info, success

EXIT_DB_ERROR = 2


@click.command("seed")
@click.option(
    "--reset",
    is_flag=True,
    default=False,
    help="Delete all members and teams before seeding",
)
@pass_context
def cli(ctx: Context, reset: bool) -> None:
    """Insert teamA/teamB with member1..member4 (ages 10-40).

    Existing members with the same username are kept, so the command can
    be run repeatedly.
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_DB_ERROR)

    try:
        with get_session(config.db_path, echo=config.echo_sql) as session:
            created = seed_sample_data(session, reset=reset)
    except SQLAlchemyError as e:
        error(f"Database error: {e}")
        raise SystemExit(EXIT_DB_ERROR)

    if created:
        success(f"Created {created} members in {config.db_path}")
    else:
        info("Sample members already present")
