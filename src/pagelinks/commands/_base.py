"""Click classes that accept an ``examples=`` block shown by ``--examples``."""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if not examples:
            return

        def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if value:
                click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
                ctx.exit(0)

        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=show,
                help="Show usage examples and exit.",
            )
        )


class PagelinksCommand(_ExamplesMixin, click.Command):
    pass


class PagelinksGroup(_ExamplesMixin, click.Group):
    """Root group; its subcommands default to :class:`PagelinksCommand`."""

    command_class = PagelinksCommand
