"""Client setup shared by the command modules.

:func:`open_client` resolves settings, opens the on-disk session and yields a
ready :class:`~osmclient.client.OSMClient`. Errors raised inside the ``with``
block are reported on stderr and turned into :class:`typer.Exit` with the
matching exit code, so commands only deal with the happy path.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

import httpx
import typer

from osmclient.exceptions import AuthorizationError, OSMError
from osmclient.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_RESPONSE,
)
from osmclient.models import CacheTier, Settings, parse_cache_mode
from osmclient.output import error, suggest

if TYPE_CHECKING:
    from osmclient.client import OSMClient


def build_http_client(settings: Settings) -> httpx.Client:
    """Create the transport for *settings*. Replaced in tests with a mock transport."""
    return httpx.Client(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.request.timeout, connect=settings.request.connect_timeout),
        verify=settings.request.verify_ssl,
    )


def settings_from_context(ctx: typer.Context) -> Settings:
    """Resolve settings using the ``--api-id`` / ``--base-url`` flags stored on *ctx*."""
    from osmclient.config import resolve_settings

    obj = ctx.obj or {}
    return resolve_settings(cli_api_id=obj.get("api_id"), cli_base_url=obj.get("base_url"))


def cache_mode_option(settings: Settings, value: Optional[str]) -> frozenset[CacheTier]:
    """Parse a ``--cache`` value, falling back to the configured default."""
    try:
        return parse_cache_mode(value if value is not None else settings.default_cache)
    except ValueError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None


@contextmanager
def open_client(
    ctx: typer.Context, settings: Optional[Settings] = None
) -> Iterator[OSMClient]:
    """Yield an :class:`OSMClient` bound to the command line's disk session.

    Pass *settings* when the command has already resolved them.
    """
    from osmclient.client import OSMClient
    from osmclient.config import get_session_dir, resolve_credential
    from osmclient.session import DiskSessionStore

    try:
        if settings is None:
            settings = settings_from_context(ctx)
        if not settings.api_id:
            error("No API id configured.")
            suggest("Set one: osm config set api_id <id>  (or export OSM_API_ID)")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        token = resolve_credential(settings.api_token_source)
    except OSMError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    http_client = build_http_client(settings)
    store = DiskSessionStore(get_session_dir())
    try:
        client = OSMClient(settings.api_id, token, session=store, http_client=http_client)
        yield client
    except AuthorizationError as exc:
        error(str(exc))
        suggest("Log in first: osm auth login")
        raise typer.Exit(code=exc.exit_code) from None
    except OSMError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except httpx.HTTPError as exc:
        error(f"Request failed: {exc}")
        raise typer.Exit(code=EXIT_CONNECTION_ERROR) from None
    except json.JSONDecodeError as exc:
        error(f"Response was not valid JSON: {exc}")
        raise typer.Exit(code=EXIT_MALFORMED_RESPONSE) from None
    finally:
        http_client.close()
        store.close()
