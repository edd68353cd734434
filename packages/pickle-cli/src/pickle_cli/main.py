"""CLI entry point for pickle-runtime.

Subcommands live in pickle_cli.commands and are imported on first use,
so `pickle --help` never loads pickle-core.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from pickle_cli import __version__
from pickle_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True

# Command name -> (module, attribute)
LAZY_COMMANDS: dict[str, tuple[str, str]] = {
    "generate": ("pickle_cli.commands.generate", "generate"),
    "hash": ("pickle_cli.commands.hash", "hash_cmd"),
    "inspect": ("pickle_cli.commands.inspect", "inspect_cmd"),
    "validate": ("pickle_cli.commands.validate", "validate"),
}


class LazyGroup(rclick.RichGroup):
    """Rich group whose commands are imported when first looked up."""

    def __init__(self, *args: Any, lazy_commands: dict[str, tuple[str, str]], **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_commands = lazy_commands

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted({*super().list_commands(ctx), *self.lazy_commands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in self.commands and cmd_name in self.lazy_commands:
            module_name, attr = self.lazy_commands[cmd_name]
            self.add_command(getattr(importlib.import_module(module_name), attr), cmd_name)
        return super().get_command(ctx, cmd_name)


def _disable_color(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if value:
        set_no_color(True)


@click.command(cls=LazyGroup, lazy_commands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="pickle")
@click.option(
    "--no-color",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_disable_color,
    help="Disable colored output.",
)
def cli() -> None:
    """Pickle - feature fingerprinting for Android test builds.

    Generates the PickleHash class that ties compiled tests to the
    .feature files they were generated from.

    - `pickle hash` - Fingerprint a features directory
    - `pickle generate` - Write PickleHash.java for a features directory
    - `pickle inspect` - Show the values embedded in a generated PickleHash.java
    - `pickle validate` - Validate pickle.yaml
    """
