"""Subcommand modules for pagelinks.

Provides register_commands() which uses deferred imports to keep
``pagelinks --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from pagelinks.commands.run import run

    cli.add_command(run)
