"""Pydantic models and enumerations shared across osmclient.

Every other module imports its data shapes from here. The models fall into
two groups:

**Client state** -- :class:`Identity`, :class:`Authorization`,
:class:`CacheTier` (plus the ``CACHE_*`` modes built from it) and
:class:`BadgeType`.

**Configuration** -- :class:`RequestConfig` and :class:`Settings`, serialised
as JSON in the user's config directory by :mod:`osmclient.config`.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://www.onlinescoutmanager.co.uk/"
"""The absolute URL every endpoint path is relative to."""


# --- Client state ---


class Identity(BaseModel):
    """The application identity issued by the service operator.

    Sent with every request, including the login exchange. Set once when a
    client is constructed and never changed afterwards.
    """

    model_config = ConfigDict(frozen=True)

    api_id: str
    api_token: str


class Authorization(BaseModel):
    """User credentials returned by a successful login.

    The service returns ``userid`` as a number; it is stored as a string so
    that it round-trips unchanged through the form-encoded request body and
    the session store.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    secret: str


class CacheTier(str, enum.Enum):
    """A place where decoded responses can be cached.

    ``PROCESS_LOCAL`` entries live on the client instance and disappear with
    it. ``SESSION_PERSISTENT`` entries live in the session store, survive
    across client instances sharing that store, and are dropped whenever a
    new login succeeds.
    """

    PROCESS_LOCAL = "local"
    SESSION_PERSISTENT = "session"


# A cache mode is a frozenset of CacheTier values; modes combine with ``|``.
CACHE_NONE: frozenset[CacheTier] = frozenset()
CACHE_NONPERSISTENT: frozenset[CacheTier] = frozenset({CacheTier.PROCESS_LOCAL})
CACHE_PERSISTENT_EXCLUSIVE: frozenset[CacheTier] = frozenset({CacheTier.SESSION_PERSISTENT})
CACHE_PERSISTENT: frozenset[CacheTier] = CACHE_NONPERSISTENT | CACHE_PERSISTENT_EXCLUSIVE

CACHE_MODES: dict[str, frozenset[CacheTier]] = {
    "none": CACHE_NONE,
    "local": CACHE_NONPERSISTENT,
    "session": CACHE_PERSISTENT_EXCLUSIVE,
    "all": CACHE_PERSISTENT,
}
"""Names accepted by :func:`parse_cache_mode` and the ``--cache`` CLI option."""


def parse_cache_mode(name: str) -> frozenset[CacheTier]:
    """Return the cache mode registered under *name* (case-insensitive).

    Raises:
        ValueError: If *name* is not one of :data:`CACHE_MODES`.
    """
    try:
        return CACHE_MODES[name.strip().lower()]
    except KeyError:
        choices = ", ".join(CACHE_MODES)
        raise ValueError(f"Unknown cache mode '{name}' (choose from: {choices})") from None


class BadgeType(str, enum.Enum):
    """Badge families understood by the badge details endpoint."""

    CHALLENGE = "challenge"
    STAGED = "staged"
    ACTIVITY = "activity"


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every call a client makes."""

    connect_timeout: float = Field(
        default=2.0, description="Seconds allowed to establish a connection"
    )
    timeout: float = Field(default=30.0, description="Read/write timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class Settings(BaseModel):
    """User-wide configuration persisted at ``~/.config/osmclient/config.json``.

    Loaded and saved by :func:`~osmclient.config.load_settings` and
    :func:`~osmclient.config.save_settings`. Values here have the lowest
    precedence; see :func:`~osmclient.config.resolve_settings`.
    """

    api_id: Optional[str] = Field(default=None, description="API id issued by the operator")
    api_token_source: str = Field(
        default="env:OSM_API_TOKEN",
        description="Where to read the API token: env:VAR, file:/path or prompt",
    )
    base_url: str = DEFAULT_BASE_URL
    default_cache: str = Field(
        default="none", description="Cache mode used when --cache is not given"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
