"""Cache commands -- inspect and empty the session cache tier.

Only the session tier outlives a command, so that is the one these commands
look at. Clearing it leaves the stored login alone.
"""

from __future__ import annotations

import typer

from osmclient.commands.common import open_client
from osmclient.output import format_response, success


cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Remove every cached response from the session.

    Example::

        osm cache clear
    """
    with open_client(ctx) as client:
        client.destroy_persistent_cache()
    success("Session cache cleared.")


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show how many responses are cached in the session.

    Example::

        osm --json cache stats
    """
    with open_client(ctx) as client:
        stats = client.cache.stats()
    format_response(
        {
            "session_active": stats["session_active"],
            "session_entries": stats["session_entries"],
        }
    )
