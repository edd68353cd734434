"""Console output for pickle-cli.

Every message goes through one rich Console. Messages are printed
literally (no markup, no wrapping), so paths and YAML snippets survive
intact. Color is off when NO_COLOR is set or --no-color is passed.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console
from rich.markup import escape

SUCCESS_MARK = "[green]✓[/green]"
ERROR_MARK = "[red]✗[/red]"


def _make_console(no_color: bool) -> Console:
    no_color = no_color or "NO_COLOR" in os.environ
    return Console(
        no_color=no_color,
        force_terminal=False if no_color else None,
        highlight=False,
        soft_wrap=True,
    )


console = _make_console(no_color=False)


def set_no_color(no_color: bool) -> None:
    """Rebuild the module console with or without color."""
    global console
    console = _make_console(no_color)


def success(message: str) -> None:
    """Print a message prefixed with a green check mark.

    Example:
        >>> success("Generated build/generated/source/pickle/PickleHash.java")
        ✓ Generated build/generated/source/pickle/PickleHash.java
    """
    console.print(f"{SUCCESS_MARK} {escape(message)}")


def error(message: str) -> None:
    """Print a message prefixed with a red cross."""
    console.print(f"{ERROR_MARK} {escape(message)}")


def info(message: str) -> None:
    console.print(message, markup=False)


def print_json(data: dict[str, Any]) -> None:
    """Print data as indented JSON."""
    console.print_json(data=data)
