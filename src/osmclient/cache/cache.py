"""Process-local and session-persistent caching of decoded responses.

Keys are SHA-256 hashes of ``relative_url?encoded_params`` where the
parameters are form-encoded with sorted keys (:func:`encode_params`), so two
requests that differ only in parameter insertion order share an entry.

Entries never expire. The process-local tier dies with its
:class:`ResponseCache`; the session tier is emptied by
:meth:`ResponseCache.clear_persistent`, which the client calls after every
successful login.
"""

from __future__ import annotations

import hashlib
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from osmclient.models import CacheTier
from osmclient.output import get_output
from osmclient.session.base import SESSION_CACHE_KEY, SessionStore


def encode_params(params: Mapping[str, Any]) -> str:
    """Form-encode *params* with keys in sorted order.

    ``None`` values are dropped and booleans are sent as ``1``/``0``.
    The result is both the request body and half of the cache key.
    """
    items: list[tuple[str, str]] = []
    for key in sorted(params):
        value = params[key]
        if value is None:
            continue
        if isinstance(value, bool):
            value = int(value)
        items.append((key, str(value)))
    return urlencode(items)


def fingerprint(relative_url: str, encoded: str) -> str:
    """Return the cache key for a request to *relative_url* with body *encoded*."""
    raw = f"{relative_url}?{encoded}"
    return hashlib.sha256(raw.encode()).hexdigest()


class ResponseCache:
    """Decoded-response cache with a local tier and a session tier.

    Args:
        session: Store backing the session tier. When ``None`` or inactive
            the session tier is skipped on both reads and writes.

    Example::

        cache = ResponseCache(MemorySessionStore())
        key = fingerprint("api.php?action=getTerms", "apiid=1&token=t")
        cache.set(key, CACHE_PERSISTENT, {"terms": []})
        assert cache.get(key, CACHE_PERSISTENT_EXCLUSIVE) == (True, {"terms": []})
    """

    def __init__(self, session: Optional[SessionStore] = None) -> None:
        self._session = session
        self._local: dict[str, Any] = {}

    def get(self, key: str, mode: frozenset[CacheTier]) -> tuple[bool, Any]:
        """Look *key* up in the tiers named by *mode*, local tier first.

        Returns:
            ``(True, value)`` on a hit and ``(False, None)`` on a miss. A
            cached ``None`` (the service answered ``null``) is still a hit.
        """
        if CacheTier.PROCESS_LOCAL in mode and key in self._local:
            return True, self._local[key]

        if CacheTier.SESSION_PERSISTENT in mode:
            stored = self._session_map()
            if stored is not None and key in stored:
                return True, stored[key]

        return False, None

    def set(self, key: str, mode: frozenset[CacheTier], value: Any) -> None:
        """Store *value* under *key* in every tier named by *mode*."""
        if CacheTier.PROCESS_LOCAL in mode:
            self._local[key] = value

        if CacheTier.SESSION_PERSISTENT in mode:
            if not self._session_active():
                get_output().debug("No active session; skipping session cache write")
                return
            assert self._session is not None
            stored = dict(self._session.get(SESSION_CACHE_KEY) or {})
            stored[key] = value
            self._session.set(SESSION_CACHE_KEY, stored)

    def clear_persistent(self) -> None:
        """Empty the session tier. A no-op if it was never created."""
        if not self._session_active():
            return
        assert self._session is not None
        if SESSION_CACHE_KEY in self._session:
            self._session.set(SESSION_CACHE_KEY, {})

    def clear_local(self) -> None:
        """Empty the process-local tier."""
        self._local.clear()

    def stats(self) -> dict[str, Any]:
        """Return entry counts per tier and whether the session tier is usable."""
        stored = self._session_map()
        return {
            "local_entries": len(self._local),
            "session_active": self._session_active(),
            "session_entries": len(stored) if stored is not None else 0,
        }

    def _session_active(self) -> bool:
        return self._session is not None and self._session.active

    def _session_map(self) -> Optional[dict[str, Any]]:
        if not self._session_active():
            return None
        assert self._session is not None
        return self._session.get(SESSION_CACHE_KEY)
