"""Synchronous OSM API client with login handling and response caching.

This module provides :class:`OSMClient`. It wraps :class:`httpx.Client` and
layers on:

- **Request signing** -- the API id and token, plus the user id and secret
  obtained by :meth:`OSMClient.authorize`, are added to every form body.
- **Session persistence** -- the login is restored from and written to an
  injected :class:`~osmclient.session.SessionStore`.
- **Response caching** -- decoded bodies can be kept per client instance,
  per session, or both (see :class:`~osmclient.cache.ResponseCache`).

Nothing is retried and nothing is translated: :class:`httpx.HTTPError` and
:class:`json.JSONDecodeError` reach the caller as raised. The one error the
client raises itself is :class:`~osmclient.exceptions.AuthorizationError`,
for data calls made before a login.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from osmclient.cache import ResponseCache, encode_params, fingerprint
from osmclient.client.endpoints import AUTHORIZE_PATH, ENDPOINTS
from osmclient.exceptions import AuthorizationError
from osmclient.models import (
    CACHE_NONE,
    DEFAULT_BASE_URL,
    Authorization,
    BadgeType,
    CacheTier,
    Identity,
    RequestConfig,
)
from osmclient.output import get_output
from osmclient.session.base import SESSION_SECRET_KEY, SESSION_USERID_KEY, SessionStore

_FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class OSMClient:
    """Client for the Online Scout Manager API.

    Construction never touches the network. If *session* already holds a
    login (from an earlier client in the same session) the client starts
    out authorized.

    Args:
        api_id: API id issued by the service operator.
        api_token: API token issued with the id.
        session: Store for the persisted login and the session cache tier.
            ``None`` means no session: nothing is restored or persisted and
            session-tier caching is skipped.
        base_url: Absolute URL all endpoint paths are relative to.
        request: Timeouts and SSL verification for the owned transport.
        http_client: A preconfigured :class:`httpx.Client` to use instead of
            creating one. Its ``base_url`` must already be set. The caller
            keeps ownership and must close it.

    Example::

        with OSMClient(api_id, token, session=MemorySessionStore()) as osm:
            if not osm.is_authorized():
                osm.authorize("leader@example.org", password)
            terms = osm.get_terms(cache_mode=CACHE_NONPERSISTENT)
    """

    def __init__(
        self,
        api_id: str,
        api_token: str,
        session: Optional[SessionStore] = None,
        base_url: str = DEFAULT_BASE_URL,
        request: Optional[RequestConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._identity = Identity(api_id=str(api_id), api_token=api_token)
        self._session = session
        self._cache = ResponseCache(session)
        self._authorization: Optional[Authorization] = self._load_authorization()

        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            config = request or RequestConfig()
            self._client = httpx.Client(
                base_url=base_url,
                timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
                verify=config.verify_ssl,
            )
            self._owns_client = True

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> OSMClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP transport if this client created it."""
        if self._owns_client:
            self._client.close()

    # ------------------------------------------------------------------ #
    # Authorization lifecycle
    # ------------------------------------------------------------------ #

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def authorization(self) -> Optional[Authorization]:
        """The current login, or ``None`` before :meth:`authorize` succeeds."""
        return self._authorization

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    def is_authorized(self) -> bool:
        """Return ``True`` if a login is held by this client."""
        return self._authorization is not None

    def authorize(self, email: str, password: str) -> bool:
        """Exchange an email and password for a user id and secret.

        This is the only call made without user credentials. On success the
        login is kept on the client, written to the session store when a
        session is active, and the session cache tier is emptied because
        its entries may belong to a different user.

        Args:
            email: The user's login email.
            password: The user's password.

        Returns:
            ``True`` if the service issued a secret, ``False`` if it did not.
            On ``False`` the previous login (if any) is kept.

        Raises:
            httpx.HTTPError: On transport failures.
            json.JSONDecodeError: If the response body is not JSON.
        """
        params = {
            "email": email,
            "password": password,
            "apiid": self._identity.api_id,
            "token": self._identity.api_token,
        }
        payload = self._post(AUTHORIZE_PATH, encode_params(params))

        if (
            not isinstance(payload, dict)
            or payload.get("secret") is None
            or payload.get("userid") is None
        ):
            get_output().debug("Login rejected: response carried no secret")
            return False

        self._authorization = Authorization(
            user_id=str(payload["userid"]), secret=str(payload["secret"])
        )
        if self._session is not None and self._session.active:
            self._session.set(SESSION_USERID_KEY, self._authorization.user_id)
            self._session.set(SESSION_SECRET_KEY, self._authorization.secret)
        self.destroy_persistent_cache()
        get_output().debug(f"Authorized as user {self._authorization.user_id}")
        return True

    def destroy_persistent_cache(self) -> None:
        """Empty the session cache tier. The local tier and the login are untouched."""
        self._cache.clear_persistent()

    # ------------------------------------------------------------------ #
    # Request execution
    # ------------------------------------------------------------------ #

    def perform_query(
        self,
        relative_url: str,
        params: Optional[Mapping[str, Any]] = None,
        cache_mode: frozenset[CacheTier] = CACHE_NONE,
    ) -> Any:
        """POST a signed request and return the decoded JSON body.

        The API id, token, user id and secret are merged over *params*.
        When *cache_mode* names a tier holding an entry for the same URL and
        parameters, that entry is returned without a network call.
        Otherwise the response is decoded and stored in every tier named by
        *cache_mode*.

        Args:
            relative_url: Path (with optional query string) relative to the
                base URL, e.g. ``"api.php?action=getTerms"``.
            params: Endpoint-specific form fields.
            cache_mode: Tiers to read from and write to.

        Returns:
            The decoded JSON value, unchanged.

        Raises:
            AuthorizationError: If no login is held. Raised before any cache
                or network access.
            httpx.HTTPError: On transport failures.
            json.JSONDecodeError: If the response body is not JSON.
        """
        if self._authorization is None:
            raise AuthorizationError("OSM API not authorized; call authorize() first")

        merged: dict[str, Any] = dict(params or {})
        merged["apiid"] = self._identity.api_id
        merged["token"] = self._identity.api_token
        merged["userid"] = self._authorization.user_id
        merged["secret"] = self._authorization.secret

        encoded = encode_params(merged)
        key = fingerprint(relative_url, encoded)

        hit, cached = self._cache.get(key, cache_mode)
        if hit:
            get_output().debug(f"Cache hit: {relative_url}")
            return cached

        payload = self._post(relative_url, encoded)
        self._cache.set(key, cache_mode, payload)
        return payload

    # ------------------------------------------------------------------ #
    # Convenience endpoints
    # ------------------------------------------------------------------ #

    def get_terms(self, cache_mode: frozenset[CacheTier] = CACHE_NONE) -> Any:
        """Return the programme terms for every section the user can see."""
        return self._call("terms", cache_mode)

    def get_badges(
        self,
        badge_type: Optional[BadgeType | str] = None,
        cache_mode: frozenset[CacheTier] = CACHE_NONE,
    ) -> Any:
        """Return badge details, optionally narrowed to one :class:`BadgeType`."""
        return self._call("badges", cache_mode, badgeType=badge_type)

    def get_events(
        self, section_id: str | int, cache_mode: frozenset[CacheTier] = CACHE_NONE
    ) -> Any:
        """Return the events of *section_id* (an id returned by :meth:`get_terms`)."""
        return self._call("events", cache_mode, sectionid=section_id)

    def get_kids_by_term_id(
        self,
        section_id: str | int,
        term_id: str | int,
        cache_mode: frozenset[CacheTier] = CACHE_NONE,
    ) -> Any:
        """Return the members of *section_id* present during *term_id*."""
        return self._call("kids", cache_mode, sectionid=section_id, termid=term_id)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _call(self, name: str, cache_mode: frozenset[CacheTier], **values: Any) -> Any:
        relative_url, params = ENDPOINTS[name].build(**values)
        return self.perform_query(relative_url, params, cache_mode)

    def _post(self, relative_url: str, encoded: str) -> Any:
        get_output().debug(f"POST {relative_url}")
        response = self._client.post(relative_url, content=encoded, headers=_FORM_HEADERS)
        return response.json()

    def _load_authorization(self) -> Optional[Authorization]:
        """Restore a login saved in the session store by an earlier client."""
        if self._session is None or not self._session.active:
            return None
        user_id = self._session.get(SESSION_USERID_KEY)
        secret = self._session.get(SESSION_SECRET_KEY)
        if user_id is None or secret is None:
            return None
        return Authorization(user_id=str(user_id), secret=str(secret))
