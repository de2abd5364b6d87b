"""Exception hierarchy for reqtree.

All exceptions inherit from :class:`ReqtreeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`reqtree.exit_codes`.
The top-level error handler in :func:`reqtree.app.main` catches
``ReqtreeError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The importers and the tree repository raise very little: a
malformed field degrades to a safe default and an unresolvable tree address
is reported through the return value. These exceptions are raised by the
strict entry points used from the command line.

Subclass hierarchy::

    ReqtreeError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- NotFoundError       (exit 4)
    +-- ImportParseError    (exit 7)
    +-- UnknownFormatError  (exit 7)
    +-- StorageError        (exit 8)
    +-- ConfigError         (exit 1)
"""

from reqtree.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_IMPORT_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_STORAGE_ERROR,
)


class ReqtreeError(Exception):
    """Base exception for all reqtree errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ReqtreeError):
    """Raised for invalid CLI arguments or malformed tree addresses."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(ReqtreeError):
    """Raised when an item id does not exist anywhere in the forest."""

    exit_code = EXIT_NOT_FOUND


class ImportParseError(ReqtreeError):
    """Raised when import input is not valid JSON/YAML or cannot be read."""

    exit_code = EXIT_IMPORT_ERROR


class UnknownFormatError(ReqtreeError):
    """Raised when syntactically valid input matches no known collection format.

    Detection never guesses: a document that carries none of the structural
    signatures is reported rather than imported on a best-effort basis.
    """

    exit_code = EXIT_IMPORT_ERROR


class StorageError(ReqtreeError):
    """Raised when a collection snapshot cannot be serialised or deserialised."""

    exit_code = EXIT_STORAGE_ERROR


class ConfigError(ReqtreeError):
    """Raised for configuration problems (invalid JSON, bad field values)."""

    exit_code = EXIT_GENERIC_FAILURE
