"""Disk-backed session store built on :mod:`diskcache`.

Used by the ``osm`` command line, where every invocation is a new process:
the persisted login and the session cache tier live in a
:class:`diskcache.Cache` directory under the user's data directory
(see :func:`~osmclient.config.get_session_dir`).

Values are stored without expiry. The cached response map is written back
as a whole on each update, so a ``dict`` read from the store is a copy and
mutating it has no effect until it is passed to :meth:`DiskSessionStore.set`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import diskcache

from osmclient.session.base import SessionStore


class DiskSessionStore(SessionStore):
    """Session store persisted in a :class:`diskcache.Cache` directory.

    Args:
        directory: Directory holding the cache files; created if missing.

    Example::

        store = DiskSessionStore(get_session_dir())
        try:
            client = OSMClient(api_id, token, session=store)
            ...
        finally:
            store.close()
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._cache: Optional[diskcache.Cache] = diskcache.Cache(str(self._directory))

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def active(self) -> bool:
        """``False`` once :meth:`close` has been called."""
        return self._cache is not None

    def get(self, key: str, default: Any = None) -> Any:
        if self._cache is None:
            return default
        return self._cache.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if self._cache is None:
            return
        self._cache.set(key, value)

    def delete(self, key: str) -> None:
        if self._cache is not None:
            self._cache.delete(key)

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`. Safe to call twice."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None
