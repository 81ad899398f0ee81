"""Subcommands of the member-query CLI.

Every public module here exposes its click command as ``cli``; the
group in :mod:`member_query.cli` picks them up at import time.
"""

from __future__ import annotations

import importlib
import pkgutil
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from collections.abc import Iterator


def discover_commands() -> Iterator[click.Command]:
    """Yield the ``cli`` command of each public submodule, by module name."""
    import member_query.commands as commands_pkg

    names = sorted(
        info.name
        for info in pkgutil.iter_modules(commands_pkg.__path__)
        if not info.name.startswith("_")
    )
    for name in names:
        module = importlib.import_module(f"{commands_pkg.__name__}.{name}")
        command = getattr(module, "cli", None)
        if isinstance(command, click.Command):
            yield command
