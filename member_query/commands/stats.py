"""Per-team age statistics."""

from __future__ import annotations

import click
from sqlalchemy.exc import SQLAlchemyError

from member_query.cli import Context, pass_context
from member_query.db.repository import team_age_stats
from member_query.db.session import get_session
from member_query.utils.output import console, create_table, error, info

EXIT_SUCCESS = 0
EXIT_DB_ERROR = 2


@click.command("stats")
@pass_context
def cli(ctx: Context) -> None:
    """Show member count and average/min/max age per team.

    Members without a team are not counted.
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_DB_ERROR)

    try:
        with get_session(config.db_path, echo=config.echo_sql) as session:
            stats = team_age_stats(session)
    except SQLAlchemyError as e:
        error(f"Database error: {e}")
        raise SystemExit(EXIT_DB_ERROR)

    if not stats:
        info("No teams with members")
        raise SystemExit(EXIT_SUCCESS)

    table = create_table(show_header=True, header_style="bold")
    table.add_column("Team", style="team.name")
    table.add_column("Members", justify="right")
    table.add_column("Avg age", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    for row in stats:
        table.add_row(
            row.team_name,
            str(row.member_count),
            f"{row.avg_age:.1f}",
            str(row.min_age),
            str(row.max_age),
        )
    console.print(table)
