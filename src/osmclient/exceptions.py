"""Exception hierarchy for osmclient.

All exceptions inherit from :class:`OSMError`, which carries an ``exit_code``
attribute mapped to a constant from :mod:`osmclient.exit_codes`. The command
line entry point catches ``OSMError`` and exits with that code.

The client raises very little of its own. Transport failures
(:class:`httpx.HTTPError`) and undecodable bodies
(:class:`json.JSONDecodeError`) reach the caller unchanged, and a rejected
login is reported by :meth:`~osmclient.client.OSMClient.authorize` returning
``False``.

Subclass hierarchy::

    OSMError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthorizationError  (exit 3)
    +-- ConfigError         (exit 1)
"""

from osmclient.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class OSMError(Exception):
    """Base exception for all osmclient errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(OSMError):
    """Raised for missing or unknown endpoint arguments and bad CLI values."""

    exit_code = EXIT_INVALID_USAGE


class AuthorizationError(OSMError):
    """Raised when a data-retrieval call is made before :meth:`authorize` succeeded."""

    exit_code = EXIT_AUTH_FAILURE


class ConfigError(OSMError):
    """Raised for configuration problems (invalid JSON, unresolved credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
