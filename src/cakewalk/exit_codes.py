"""Numeric process exit codes used by the ``cakewalk`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~cakewalk.exceptions.CakewalkError` subclass.
Shell scripts can inspect the exit code to tell a missing post apart from
a rejected API key without parsing stderr.

Example::

    $ cakewalk posts slug does-not-exist
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The API key was rejected (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested post, article or taxonomy was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The Cakewalk API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
