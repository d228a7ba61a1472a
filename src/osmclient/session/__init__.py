"""Session storage for authorization and the persistent cache tier.

The client never reaches for global state. Whatever plays the role of "the
user's session" in the host application is handed to
:class:`~osmclient.client.OSMClient` as a :class:`SessionStore`:

- :class:`MemorySessionStore` -- a plain dict, for web frameworks that already
  give you a per-user mapping, and for tests.
- :class:`DiskSessionStore` -- a :mod:`diskcache` directory, used by the ``osm``
  command line so that a login survives between invocations.
"""

from osmclient.session.base import (
    SESSION_CACHE_KEY,
    SESSION_SECRET_KEY,
    SESSION_USERID_KEY,
    SessionStore,
)
from osmclient.session.disk import DiskSessionStore
from osmclient.session.memory import MemorySessionStore

__all__ = [
    "SESSION_CACHE_KEY",
    "SESSION_SECRET_KEY",
    "SESSION_USERID_KEY",
    "DiskSessionStore",
    "MemorySessionStore",
    "SessionStore",
]
