"""Search members with the field:value query language."""

from __future__ import annotations

import json
from dataclasses import asdict

import click
from sqlalchemy.exc import SQLAlchemyError

from member_query.cli import Context, pass_context
from member_query.db.session import get_session
from member_query.exceptions import ExecutionError, SearchParseError, ValidationError
from member_query.search.executor import MemberTeamRow, SqlAlchemyExecutor
from member_query.search.parser import parse_query
from member_query.search.query import Page, PageStrategy, parse_sort
from member_query.search.service import MemberSearchService
from member_query.search.sql import FIELD_COLUMNS
from member_query.utils.output import console, create_table, debug, error, info, verbose

EXIT_SUCCESS = 0
EXIT_NO_RESULTS = 0
EXIT_PARSE_ERROR = 1
EXIT_DB_ERROR = 2


@click.command("search")
@click.argument("query", nargs=-1)
@click.option(
    "--offset",
    type=click.IntRange(min=0),
    default=None,
    help="Skip this many rows (enables paging)",
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=1),
    default=None,
    help="Page size (enables paging; default from config when --offset is given)",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in PageStrategy]),
    default=None,
    help="Paging strategy (default from config)",
)
@click.option(
    "--sort",
    "-s",
    "sort_text",
    default=None,
    help="Comma-separated sort fields. Prefix with - for descending, "
    f"suffix with ~ for nulls first. Fields: {', '.join(FIELD_COLUMNS)}",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    offset: int | None,
    limit: int | None,
    strategy: str | None,
    sort_text: str | None,
    output_format: str,
) -> None:
    """Search members by username, team and age.

    QUERY is a list of field:value clauses, all of which must match.
    Without a query every member is listed.

    \b
    Syntax examples:
      member-query search username:member1
      member-query search team:teamB age:>=35
      member-query search 'team:"team A"' age:20-30
      member-query search --sort -age --offset 0 --limit 2

    \b
    Paging:
      Without --offset/--limit all matches are printed. With either,
      one page is fetched together with the total match count.
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_DB_ERROR)

    query_string = " ".join(query)
    try:
        criteria = parse_query(query_string)
        sort = parse_sort(sort_text)
    except (SearchParseError, ValidationError) as e:
        error(f"Invalid search query: {e}")
        raise SystemExit(EXIT_PARSE_ERROR)

    paged = offset is not None or limit is not None
    page_strategy = PageStrategy(strategy) if strategy else config.page_strategy
    debug(f"Parsed {query_string!r} -> {criteria}")
    if sort:
        keys = ", ".join(f"{k.field} {k.direction.value} nulls {k.nulls.value}" for k in sort)
        debug(f"Sort: {keys}")
    if paged:
        debug(
            f"Paging: offset={offset or 0} limit={limit or config.page_size} "
            f"strategy={page_strategy.value}"
        )

    try:
        with get_session(config.db_path, echo=config.echo_sql) as session:
            service = MemberSearchService(
                SqlAlchemyExecutor(session), strict_bounds=config.strict_bounds
            )
            if paged:
                page = service.search_page(
                    criteria,
                    offset=offset or 0,
                    limit=limit or config.page_size,
                    strategy=page_strategy,
                    sort=sort,
                )
                rows = list(page.content)
            else:
                page = None
                rows = service.search(criteria, sort=sort)
    except ValidationError as e:
        error(f"Invalid search: {e}")
        raise SystemExit(EXIT_PARSE_ERROR)
    except (ExecutionError, SQLAlchemyError) as e:
        error(f"Database error: {e}")
        raise SystemExit(EXIT_DB_ERROR)

    if output_format == "json":
        _print_json(rows, page)
    elif not rows:
        info(f"No results for: {query_string or '(all)'}")
        raise SystemExit(EXIT_NO_RESULTS)
    else:
        _print_table(rows, query_string, page)

    raise SystemExit(EXIT_SUCCESS)


def _print_table(rows: list[MemberTeamRow], query_string: str, page: Page | None) -> None:
    """Print results as a Rich table."""
    if page is None:
        info(f"Search: {query_string or '(all)'} ({len(rows)} results)")
    else:
        info(
            f"Search: {query_string or '(all)'} "
            f"(rows {page.offset + 1}-{page.offset + len(rows)} of {page.total_count})"
        )
        verbose(f"Page strategy: {page.strategy.value if page.strategy else '?'}")

    table = create_table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Username", style="member.name")
    table.add_column("Age", justify="right")
    table.add_column("Team", style="team.name")

    for row in rows:
        table.add_row(
            str(row.member_id),
            row.username or "",
            str(row.age),
            row.team_name or "",
        )

    console.print(table)


def _print_json(rows: list[MemberTeamRow], page: Page | None) -> None:
    """Print results as JSON; paged output wraps rows with paging fields."""
    content = [asdict(row) for row in rows]
    if page is None:
        click.echo(json.dumps(content, indent=2))
        return
    click.echo(
        json.dumps(
            {
                "content": content,
                "total_count": page.total_count,
                "offset": page.offset,
                "limit": page.limit,
                "has_next": page.has_next,
            },
            indent=2,
        )
    )
