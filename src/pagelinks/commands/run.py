"""Command: execute a page/link command script."""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO

import click

from pagelinks.commands._base import PagelinksCommand

if TYPE_CHECKING:
    from pagelinks.commands._context import AppContext


@click.command(
    cls=PagelinksCommand,
    examples="""\
  pagelinks run links.txt
  cat links.txt | pagelinks run
  pagelinks --json run links.txt
  pagelinks -v run links.txt

Script format (one command per line):
  @addPages Home About Contact
  @addLinks Home About Contact
  @isConnected Home Contact""",
)
@click.argument("script", type=click.File("rb"), default="-")
@click.pass_obj
def run(app: AppContext, script: BinaryIO) -> None:
    """Build the page graph from SCRIPT and answer reachability queries.

    SCRIPT defaults to standard input and is read as UTF-8, one line at a
    time. Each @isConnected line prints 1 or 0.
    Exits with status 1 if any line failed.
    """
    interpreter = app.interpreter()
    for result in interpreter.run(script):
        app.emit_line(result)
    app.finish(interpreter)
