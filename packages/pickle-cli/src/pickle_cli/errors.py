"""CLI error handling for pickle-cli.

This module wraps pickle-core exceptions into user-friendly messages
with appropriate exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError

from pickle_cli.output import error

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

    from pickle_core.errors import PickleError


# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # User error (validation, missing configuration)
EXIT_SYSTEM_ERROR = 2  # System error (missing input, write failure)


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        """Initialize CLIError.

        Args:
            message: User-facing error message.
            exit_code: Exit code for the CLI.
        """
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting."""
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - androidTest.enabled: Input should be a valid boolean"
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"]) or "<root>"
        lines.append(f"  - {loc}: {e['msg']}")

    return "\n".join(lines)


def exit_code_for(err: PickleError) -> int:
    """Map a pickle-core error to a CLI exit code."""
    from pickle_core.errors import ErrorKind

    if err.kind in (ErrorKind.INPUT_NOT_FOUND, ErrorKind.INPUT_UNREADABLE, ErrorKind.WRITE_FAILED):
        return EXIT_SYSTEM_ERROR
    return EXIT_USER_ERROR


def handle_pickle_error(err: PickleError) -> NoReturn:
    """Raise a CLIError carrying the error's user message.

    Raises:
        CLIError: Always.
    """
    raise CLIError(err.user_message, exit_code=exit_code_for(err))


def handle_yaml_error(err: Exception, file_path: str) -> NoReturn:
    """Handle YAML parsing errors with line number information.

    Raises:
        CLIError: Always raises with formatted error message.
    """
    error_msg = str(err)
    mark = getattr(err, "problem_mark", None)
    if mark is not None:
        error_msg = (
            f"YAML syntax error at line {mark.line + 1}, column {mark.column + 1}: "
            f"{getattr(err, 'problem', '')}"
        )

    raise CLIError(f"Invalid YAML in {file_path}: {error_msg}")


def handle_file_not_found(file_path: str) -> NoReturn:
    """Handle a missing configuration file.

    Raises:
        CLIError: Always raises with formatted error message.
    """
    raise CLIError(
        f"File not found: {file_path}\n\nUse --config to specify a path.",
        exit_code=EXIT_SYSTEM_ERROR,
    )
