"""Click base classes adding an eager ``--examples`` flag.

``--help`` stays short; ``--examples`` prints sample invocations
(e.g. a full weighbridge cycle) and exits.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Registers ``--examples`` when an ``examples`` text is supplied."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if value:
                click.echo(f"Examples for '{ctx.command_path}':\n")
                click.echo(examples)
                ctx.exit(0)

        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=show,
                help="Show usage examples.",
            )
        )


class TruckflowCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class TruckflowGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`TruckflowCommand`."""

    command_class = TruckflowCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
