"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Owns the graph store for the invocation and
centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pagelinks.config.logging import configure_logging
from pagelinks.infrastructure.graph.store import GraphStore
from pagelinks.output.formatters import OutputSettings, format_result
from pagelinks.services.interpreter import CommandInterpreter
from pagelinks.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from pagelinks.config.settings import PagelinksSettings
    from pagelinks.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.
    """

    def __init__(self, settings: PagelinksSettings) -> None:
        self.settings = settings
        self.store = GraphStore()

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def interpreter(self) -> CommandInterpreter:
        """Build an interpreter over this invocation's store."""
        return CommandInterpreter(
            self.store,
            skip_blank_lines=self.settings.interpreter.skip_blank_lines,
        )

    def emit_line(self, result: ServiceResult) -> None:
        """Output one line's result without ending the run.

        * Success: writes to stdout (construction commands write nothing).
        * Failure: writes the diagnostic to stderr.
        """
        output = format_result(result, settings=self.output_settings)
        if result.ok:
            if output:
                click.echo(output)
        else:
            click.echo(output, err=True)

    def finish(self, interpreter: CommandInterpreter) -> None:
        """End the run: optional summary to stderr, exit 1 if any line failed."""
        settings = self.output_settings
        if settings.verbose and not settings.quiet and self.settings.output.summary:
            click.echo(format_result(interpreter.summary(), settings=settings), err=True)
        if interpreter.failed:
            raise SystemExit(1)
