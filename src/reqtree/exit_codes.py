"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~reqtree.exceptions.ReqtreeError` subclass.
Shell wrappers can inspect the exit code to tell an unreadable import file
apart from a missing tree item without parsing stderr.

Example::

    $ reqtree import notes.txt
    $ echo $?
    7   # EXIT_IMPORT_ERROR -- the file matched no known collection format
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The addressed collection, folder, or request does not exist."""

EXIT_IMPORT_ERROR = 7
"""The import source could not be parsed or matched no known format."""

EXIT_STORAGE_ERROR = 8
"""The collection snapshot could not be read from or written to storage."""
