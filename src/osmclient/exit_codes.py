"""Numeric process exit codes used by the ``osm`` command line.

Each constant maps to an error category. :class:`~osmclient.exceptions.OSMError`
subclasses carry one of these so that shell wrappers can tell failures apart
without parsing stderr.

Example::

    $ osm terms
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- run ``osm auth login`` first
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required values."""

EXIT_AUTH_FAILURE = 3
"""The client is not authorized, or the login was rejected."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_MALFORMED_RESPONSE = 8
"""The service answered with a body that is not valid JSON."""
