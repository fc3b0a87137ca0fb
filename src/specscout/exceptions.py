"""Exception hierarchy for specscout.

All exceptions inherit from :class:`SpecscoutError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specscout.exit_codes`.
The top-level error handler in :func:`specscout.app.main` catches
``SpecscoutError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The endpoint engine itself never raises: an empty match set is a normal
result. These exceptions belong to the collaborators around it (document
sources, configuration, the MCP server and the CLI).

Subclass hierarchy::

    SpecscoutError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- NotFoundError        (exit 4)
    +-- DocumentSourceError  (exit 6)
    +-- ProtocolError        (exit 7)
    +-- ConfigError          (exit 1)
"""

from specscout.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_PROTOCOL_ERROR,
    EXIT_SOURCE_ERROR,
)


class SpecscoutError(Exception):
    """Base exception for all specscout errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specscout.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecscoutError):
    """Raised for invalid CLI arguments or missing/mistyped tool arguments."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(SpecscoutError):
    """Raised when a requested document key does not exist in the store."""

    exit_code = EXIT_NOT_FOUND


class DocumentSourceError(SpecscoutError):
    """Raised when the document store cannot be listed or read.

    Covers network failures, HTTP errors from a bucket endpoint, unreadable
    local files, and requests for keys that are not YAML documents.
    """

    exit_code = EXIT_SOURCE_ERROR


class ProtocolError(SpecscoutError):
    """Raised when an MCP message cannot be decoded or encoded."""

    exit_code = EXIT_PROTOCOL_ERROR


class ConfigError(SpecscoutError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
