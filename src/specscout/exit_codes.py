"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specscout.exceptions.SpecscoutError` subclass.

Example::

    $ specscout --bucket api-docs files
    $ echo $?
    6   # EXIT_SOURCE_ERROR -- the bucket could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The requested document was not found in the store."""

EXIT_SOURCE_ERROR = 6
"""The document store could not be reached or returned an error."""

EXIT_PROTOCOL_ERROR = 7
"""The MCP server received or produced a malformed protocol message."""
