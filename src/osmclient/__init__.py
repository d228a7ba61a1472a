"""osmclient -- a small client for the Online Scout Manager (OSM) API.

The package wraps the service's form-encoded POST API: it logs a user in,
signs every request with the application's API id and token plus the user's
id and secret, and can cache decoded responses per client instance, per
session, or both.

Typical use::

    from osmclient import OSMClient, MemorySessionStore, CACHE_NONPERSISTENT

    osm = OSMClient(api_id, api_token, session=MemorySessionStore(flask_session))
    if not osm.is_authorized():
        osm.authorize(email, password)
    terms = osm.get_terms(cache_mode=CACHE_NONPERSISTENT)

The same operations are available from the ``osm`` command line.

Modules:
    client: :class:`OSMClient` and the endpoint table.
    cache: the two-tier response cache.
    session: session stores (in-memory and diskcache-backed).
    models: Pydantic models, cache modes and badge types.
    config: XDG-aware settings and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
    app: Typer application and CLI entry point.
"""

__version__ = "0.3.0"

from osmclient.client import OSMClient
from osmclient.exceptions import AuthorizationError, ConfigError, InvalidUsageError, OSMError
from osmclient.models import (
    CACHE_NONE,
    CACHE_NONPERSISTENT,
    CACHE_PERSISTENT,
    CACHE_PERSISTENT_EXCLUSIVE,
    BadgeType,
    CacheTier,
)
from osmclient.session import DiskSessionStore, MemorySessionStore, SessionStore

__all__ = [
    "CACHE_NONE",
    "CACHE_NONPERSISTENT",
    "CACHE_PERSISTENT",
    "CACHE_PERSISTENT_EXCLUSIVE",
    "AuthorizationError",
    "BadgeType",
    "CacheTier",
    "ConfigError",
    "DiskSessionStore",
    "InvalidUsageError",
    "MemorySessionStore",
    "OSMClient",
    "OSMError",
    "SessionStore",
]
