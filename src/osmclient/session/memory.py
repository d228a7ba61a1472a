"""In-memory session store backed by a plain ``dict``."""

from __future__ import annotations

from typing import Any, MutableMapping, Optional

from osmclient.session.base import SessionStore


class MemorySessionStore(SessionStore):
    """Session store over a mutable mapping.

    Pass the mapping your web framework keeps per user (for example a Flask
    ``session`` object) to share it with the client, or omit it to get a
    fresh private dict.

    Args:
        data: The mapping to read and write. A new ``dict`` when ``None``.

    Example::

        store = MemorySessionStore()
        client = OSMClient("1", "token", session=store)
    """

    def __init__(self, data: Optional[MutableMapping[str, Any]] = None) -> None:
        self._data: MutableMapping[str, Any] = {} if data is None else data

    @property
    def data(self) -> MutableMapping[str, Any]:
        """The underlying mapping."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
