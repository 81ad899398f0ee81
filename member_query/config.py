"""Configuration management for member-query."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from member_query.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)
from member_query.search.query import PageStrategy

MAX_PAGE_SIZE = 1000


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "member-query" / "config.toml"


def get_default_db_path() -> Path:
    """Get the default member database path."""
    return Path.home() / ".local" / "share" / "member-query" / "members.db"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        db_path: Path to the SQLite member database.
        echo_sql: Log every SQL statement.
        colored_output: Whether to use colored terminal output.
        page_size: Default page size for paged searches.
        page_strategy: Default paging strategy.
        strict_bounds: Reject searches whose age bounds can never match.
        config_path: Path where config was loaded from (None if defaults).
    """

    db_path: Path = field(default_factory=get_default_db_path)
    echo_sql: bool = False
    colored_output: bool = True
    page_size: int = 20
    page_strategy: PageStrategy = PageStrategy.SIMPLE
    strict_bounds: bool = False
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        self.db_path = self.db_path.expanduser().resolve()

        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ConfigValidationError(
                "search.page_size", self.page_size, f"must be between 1 and {MAX_PAGE_SIZE}"
            )

        # Missing database is created on first use
        if not self.db_path.exists():
            warnings.append(f"Member database not found (will be created): {self.db_path}")

        return warnings


def load_config(
    config_path: Path | None = None, db_path: Path | None = None
) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.
        db_path: Database path that replaces the configured one before
            validation.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        if db_path is not None:
            config.db_path = db_path
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: member-query init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    if db_path is not None:
        config.db_path = db_path
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [database] section
    database = data.get("database", {})
    if "path" in database:
        value = database["path"]
        if not isinstance(value, str):
            raise ConfigValidationError("database.path", value, "must be a string path")
        config.db_path = Path(value)

    if "echo" in database:
        value = database["echo"]
        if not isinstance(value, bool):
            raise ConfigValidationError("database.echo", value, "must be a boolean")
        config.echo_sql = value

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    # Parse [search] section
    search = data.get("search", {})
    if "page_size" in search:
        value = search["page_size"]
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigValidationError("search.page_size", value, "must be an integer")
        config.page_size = value

    if "page_strategy" in search:
        value = search["page_strategy"]
        try:
            config.page_strategy = PageStrategy(str(value).lower())
        except ValueError:
            raise ConfigValidationError(
                "search.page_strategy", value, "must be 'simple' or 'complex'"
            ) from None

    if "strict_bounds" in search:
        value = search["strict_bounds"]
        if not isinstance(value, bool):
            raise ConfigValidationError("search.strict_bounds", value, "must be a boolean")
        config.strict_bounds = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "database": {
            "path": str(config.db_path),
            "echo": config.echo_sql,
        },
        "display": {
            "colored_output": config.colored_output,
        },
        "search": {
            "page_size": config.page_size,
            "page_strategy": config.page_strategy.value,
            "strict_bounds": config.strict_bounds,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
