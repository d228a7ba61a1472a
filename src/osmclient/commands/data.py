"""Data commands -- fetch terms, badges, events and section members.

Each command maps onto one :class:`~osmclient.client.OSMClient` convenience
method and prints the decoded response. ``--cache`` picks the cache tiers:
``none`` (default), ``local``, ``session`` or ``all``. Only ``session``
and ``all`` help across separate invocations.

Example::

    osm terms
    osm events 1234 --cache session
    osm kids 1234 5678 --json
"""

from __future__ import annotations

from typing import Optional

import typer

from osmclient.commands.common import cache_mode_option, open_client, settings_from_context
from osmclient.models import BadgeType
from osmclient.output import format_response

_CACHE_HELP = "Cache tiers to use: none, local, session, all."


def terms_command(
    ctx: typer.Context,
    cache: Optional[str] = typer.Option(None, "--cache", "-c", help=_CACHE_HELP),
) -> None:
    """List programme terms for every section you can access."""
    settings = settings_from_context(ctx)
    mode = cache_mode_option(settings, cache)
    with open_client(ctx, settings) as client:
        format_response(client.get_terms(cache_mode=mode))


def badges_command(
    ctx: typer.Context,
    badge_type: Optional[BadgeType] = typer.Option(
        None, "--type", "-t", case_sensitive=False, help="Badge family."
    ),
    cache: Optional[str] = typer.Option(None, "--cache", "-c", help=_CACHE_HELP),
) -> None:
    """Show badge details, optionally for one badge family."""
    settings = settings_from_context(ctx)
    mode = cache_mode_option(settings, cache)
    with open_client(ctx, settings) as client:
        format_response(client.get_badges(badge_type, cache_mode=mode))


def events_command(
    ctx: typer.Context,
    section_id: str = typer.Argument(help="Section id, as listed by 'osm terms'."),
    cache: Optional[str] = typer.Option(None, "--cache", "-c", help=_CACHE_HELP),
) -> None:
    """List the events of a section."""
    settings = settings_from_context(ctx)
    mode = cache_mode_option(settings, cache)
    with open_client(ctx, settings) as client:
        format_response(client.get_events(section_id, cache_mode=mode))


def kids_command(
    ctx: typer.Context,
    section_id: str = typer.Argument(help="Section id, as listed by 'osm terms'."),
    term_id: str = typer.Argument(help="Term id, as listed by 'osm terms'."),
    cache: Optional[str] = typer.Option(None, "--cache", "-c", help=_CACHE_HELP),
) -> None:
    """List the members of a section present during a term."""
    settings = settings_from_context(ctx)
    mode = cache_mode_option(settings, cache)
    with open_client(ctx, settings) as client:
        format_response(client.get_kids_by_term_id(section_id, term_id, cache_mode=mode))
