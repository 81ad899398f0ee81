"""Write a starter config file for member-query."""

from __future__ import annotations

import re
from importlib import resources
from pathlib import Path

import click
import tomli_w

from member_query.cli import Context, pass_context
from member_query.config import get_default_config_path, load_config
from member_query.exceptions import ConfigError
from member_query.utils.output import error, info, success, verbose

EXIT_WRITE_ERROR = 1

# The commented-out default in the [database] section of the example.
_DB_PATH_LINE = re.compile(r"^# path = .*$", re.MULTILINE)


def _load_example_config() -> str:
    """Return the packaged, fully commented example configuration."""
    return resources.files("member_query").joinpath("config.example.toml").read_text()


def render_config(db_path: Path | None = None) -> str:
    """Render the example configuration.

    With ``db_path`` the commented default database path is replaced by an
    active ``path`` setting; everything else stays commented.
    """
    text = _load_example_config()
    if db_path is None:
        return text
    line = tomli_w.dumps({"path": str(db_path.expanduser())}).rstrip("\n")
    return _DB_PATH_LINE.sub(lambda _: line, text, count=1)


@click.command("init-config")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite an existing file")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the file (default: ~/.config/member-query/config.toml)",
)
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Member database to store in the new file",
)
@pass_context
def cli(ctx: Context, force: bool, output: Path | None, db_path: Path | None) -> None:
    """Create a config file from the documented example.

    \b
    Examples:
      member-query init-config
      member-query init-config --db ./members.db --output ./member-query.toml
    """
    target = (output or get_default_config_path()).expanduser().resolve()

    if target.exists() and not force:
        error(f"Config file already exists: {target}", hint="Use --force to overwrite")
        raise SystemExit(EXIT_WRITE_ERROR)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_config(db_path))
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(EXIT_WRITE_ERROR)

    try:
        written, warnings = load_config(target)
    except ConfigError as e:
        error(f"Written config does not load: {e}")
        raise SystemExit(EXIT_WRITE_ERROR)

    success(f"Created config file: {target}")
    info(f"Member database: {written.db_path}")
    for warn in warnings:
        verbose(warn)
