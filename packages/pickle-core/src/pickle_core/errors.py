"""Custom exception hierarchy for pickle-core.

This module defines the exception classes raised by the generator:
- PickleError: Base exception for all pickle-related errors
- ConfigurationError: Raised when configuration is invalid or incomplete
- InputNotFoundError: Raised when a features directory is missing
- InputReadError: Raised when a feature file cannot be read
- IncompatibleHostError: Raised when no host API shape could be resolved
- WriteFailedError / InvalidIdentifierError: Raised by artifact emission

Every error carries an ErrorKind so callers (the CLI, host adapters) can
decide between failing the whole configuration phase and failing a single
graph node.

- User-facing messages are safe to display
- Technical details are logged internally via structlog
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class ErrorKind(str, Enum):
    """Classification of generator failures.

    Configuration-time kinds abort the whole configuration phase;
    execution-time kinds are scoped to a single graph node or variant.
    """

    INVALID_CONFIGURATION = "invalid_configuration"
    MISSING_CONFIGURATION = "missing_configuration"
    INPUT_NOT_FOUND = "input_not_found"
    INPUT_UNREADABLE = "input_unreadable"
    INCOMPATIBLE_HOST = "incompatible_host"
    WRITE_FAILED = "write_failed"
    INVALID_IDENTIFIER = "invalid_identifier"
    GRAPH_STATE = "graph_state"


class PickleError(Exception):
    """Base exception for pickle-runtime.

    All pickle exceptions inherit from this class. User-facing messages
    are safe to display; technical details are logged internally.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but never part of str(error).

    Example:
        >>> raise PickleError(
        ...     "Generation failed",
        ...     internal_details="OSError(28, 'No space left on device')",
        ... )
    """

    kind: ErrorKind | None = None

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize PickleError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "pickle_error",
                error_type=self.__class__.__name__,
                error_kind=self.kind.value if self.kind else None,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(PickleError):
    """Raised when configuration file parsing or validation fails.

    Provides file path and field context for actionable error messages.

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (e.g., "androidTest.featuresDir").

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid package name",
        ...     file_path="pickle.yaml",
        ...     field_path="packageName",
        ... )
    """

    kind = ErrorKind.INVALID_CONFIGURATION

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Safe message to display to the user.
            file_path: Path to the configuration file (optional).
            field_path: Dot-separated path to the field (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path


class MissingConfigurationError(ConfigurationError):
    """Raised when a key required at resolution time is absent.

    This error is fatal: it aborts the configuration phase before any
    graph node is created.

    Attributes:
        key: Name of the missing key (e.g., "featuresDir").
        scope: Block the key belongs in (e.g., "androidTest"), or None
            for top-level keys.

    Example:
        >>> raise MissingConfigurationError("featuresDir", scope="androidTest")
        # User sees: 'You must specify "featuresDir" inside "androidTest" ...'
    """

    kind = ErrorKind.MISSING_CONFIGURATION

    def __init__(
        self,
        key: str,
        *,
        scope: str | None = None,
        file_path: str | None = None,
    ) -> None:
        """Initialize MissingConfigurationError.

        Args:
            key: Name of the missing key.
            scope: Enclosing configuration block, if any.
            file_path: Configuration file the key was expected in.
        """
        if scope:
            user_message = f'You must specify "{key}" inside "{scope}" for pickle to work'
            field_path = f"{scope}.{key}"
        else:
            user_message = f'You must specify "{key}" for pickle to work'
            field_path = key

        super().__init__(user_message, file_path=file_path, field_path=field_path)

        self.key = key
        self.scope = scope


class GraphConfigurationError(ConfigurationError):
    """Raised when bound graph nodes would collide in the host graph."""

    pass


class InputNotFoundError(PickleError):
    """Raised when the features directory does not exist at execution time.

    Attributes:
        path: The directory that was expected.
    """

    kind = ErrorKind.INPUT_NOT_FOUND

    def __init__(self, path: Path | str, *, internal_details: str | None = None) -> None:
        super().__init__(f"Features directory not found: {path}", internal_details=internal_details)
        self.path = Path(path)


class InputReadError(PickleError):
    """Raised when a feature file exists but cannot be read.

    Attributes:
        path: The unreadable file.
    """

    kind = ErrorKind.INPUT_UNREADABLE

    def __init__(self, path: Path | str, *, internal_details: str | None = None) -> None:
        super().__init__(f"Cannot read feature file: {path}", internal_details=internal_details)
        self.path = Path(path)


class IncompatibleHostError(PickleError):
    """Raised when every known host API shape failed for a variant.

    Carries each attempted strategy and its failure so that a host version
    mismatch can be identified from the logs.

    Attributes:
        variant_name: Name of the variant that could not be resolved.
        attempts: Mapping of strategy name to failure description.

    Example:
        >>> raise IncompatibleHostError(
        ...     "debugAndroidTest",
        ...     {"lazy_provider": "AttributeError: ...", "eager_task": "AttributeError: ..."},
        ... )
    """

    kind = ErrorKind.INCOMPATIBLE_HOST

    def __init__(self, variant_name: str, attempts: dict[str, str]) -> None:
        tried = ", ".join(attempts) if attempts else "none"
        user_message = (
            f"Cannot locate merged assets for variant '{variant_name}': "
            f"host build API not supported (tried: {tried})"
        )
        details = "; ".join(f"{name}: {reason}" for name, reason in attempts.items())
        super().__init__(user_message, internal_details=details or None)

        self.variant_name = variant_name
        self.attempts = attempts


class WriteFailedError(PickleError):
    """Raised when the generated artifact cannot be written.

    Attributes:
        path: Output file that could not be written.
    """

    kind = ErrorKind.WRITE_FAILED

    def __init__(self, path: Path | str, *, internal_details: str | None = None) -> None:
        super().__init__(f"Cannot write generated source: {path}", internal_details=internal_details)
        self.path = Path(path)


class InvalidIdentifierError(PickleError):
    """Raised when a package name is not a valid Java qualified name.

    Attributes:
        value: The rejected identifier.
    """

    kind = ErrorKind.INVALID_IDENTIFIER

    def __init__(self, value: str, *, reason: str | None = None) -> None:
        message = f"Invalid Java package name: '{value}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.value = value
        self.reason = reason


class GraphStateError(PickleError):
    """Raised on an illegal graph node state transition."""

    kind = ErrorKind.GRAPH_STATE
