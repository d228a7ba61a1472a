"""Auth commands -- log in to OSM and show the current login.

The login is kept in the command line's disk session
(:func:`~osmclient.config.get_session_dir`), so later commands run
authorized until the session directory is removed.

Typical workflow::

    osm auth login --email leader@example.org
    osm auth status
"""

from __future__ import annotations

from typing import Optional

import typer

from osmclient.commands.common import open_client, settings_from_context
from osmclient.exit_codes import EXIT_AUTH_FAILURE
from osmclient.output import error, get_output, success, suggest


auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("login")
def auth_login(
    ctx: typer.Context,
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Login email."),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        envvar="OSM_PASSWORD",
        help="Password. Prompted for when omitted.",
    ),
) -> None:
    """Exchange an email and password for an OSM login.

    On success the user id and secret are stored in the session and the
    session cache is emptied.

    Raises:
        typer.Exit: With code 3 if the service rejects the credentials.

    Example::

        osm auth login --email leader@example.org
    """
    if email is None:
        email = typer.prompt("Email")
    if password is None:
        password = typer.prompt("Password", hide_input=True)

    with open_client(ctx) as client:
        if not client.authorize(email, password):
            error("Login rejected: check the email and password.")
            raise typer.Exit(code=EXIT_AUTH_FAILURE)
        assert client.authorization is not None
        success(f"Logged in as user {client.authorization.user_id}.")
        suggest("List your terms: osm terms")


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    """Show the configured API id and whether a login is held.

    Example::

        osm auth status
        osm --json auth status
    """
    settings = settings_from_context(ctx)
    with open_client(ctx, settings) as client:
        authorization = client.authorization
        stats = client.cache.stats()

    rows = [
        ["API id", settings.api_id or "-"],
        ["Base URL", settings.base_url],
        ["Authorized", "yes" if authorization else "no"],
        ["User id", authorization.user_id if authorization else "-"],
        ["Session cache entries", str(stats["session_entries"])],
    ]
    get_output().print_table(["Field", "Value"], rows, title="OSM Login")
