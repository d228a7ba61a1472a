"""Abstract base class for session stores.

A session store is a small key/value mapping scoped to one user's session.
The client reads and writes exactly three keys:

- :data:`SESSION_USERID_KEY` and :data:`SESSION_SECRET_KEY` -- the persisted
  authorization, read at construction and written by a successful login.
- :data:`SESSION_CACHE_KEY` -- a ``dict`` mapping request fingerprints to
  decoded responses (the session-persistent cache tier).

Creating, expiring and locking sessions is the host's business; a store only
has to answer ``get``/``set``/``delete`` and say whether a session is
currently :attr:`~SessionStore.active`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

SESSION_USERID_KEY = "osm_userid"
SESSION_SECRET_KEY = "osm_secret"
SESSION_CACHE_KEY = "osm_cache"


class SessionStore(ABC):
    """Key/value storage bound to one user session.

    Subclasses implement :meth:`get`, :meth:`set` and :meth:`delete`.
    :attr:`active` defaults to ``True``; override it for hosts where a
    session may not have been started yet.
    """

    @property
    def active(self) -> bool:
        """Whether a session exists that writes can be persisted to."""
        return True

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under *key*, or *default*."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*. A missing key is not an error."""
        ...

    def __contains__(self, key: object) -> bool:
        sentinel = object()
        return isinstance(key, str) and self.get(key, sentinel) is not sentinel
