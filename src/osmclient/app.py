"""Typer application and CLI entry point for osmclient.

This module builds the ``osm`` command line: the root callback that sets up
output and stores the shared ``--api-id`` / ``--base-url`` overrides, the
``auth``, ``cache`` and ``config`` sub-groups, and the data commands
(``terms``, ``badges``, ``events``, ``kids``).

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Known errors exit with their mapped code; anything else
is written to a crash log under the data directory.
"""

from __future__ import annotations

import json
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import httpx
import typer

from osmclient import __version__
from osmclient.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_MALFORMED_RESPONSE,
)


app = typer.Typer(
    name="osm",
    help="Query the Online Scout Manager API.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"osm {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    api_id: Optional[str] = typer.Option(None, "--api-id", help="API id override."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Base URL override."),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~osmclient.output.OutputManager` and keeps
    the settings overrides in ``ctx.obj`` for the sub-commands.
    """
    from osmclient.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["api_id"] = api_id
    ctx.obj["base_url"] = base_url


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from osmclient.commands.auth import auth_app  # noqa: E402
from osmclient.commands.cache import cache_app  # noqa: E402
from osmclient.commands.config import config_app  # noqa: E402
from osmclient.commands.data import (  # noqa: E402
    badges_command,
    events_command,
    kids_command,
    terms_command,
)

app.add_typer(auth_app, name="auth", help="Log in and show the login status.")
app.add_typer(cache_app, name="cache", help="Session cache management.")
app.add_typer(config_app, name="config", help="Settings management.")
app.command("terms")(terms_command)
app.command("badges")(badges_command)
app.command("events")(events_command)
app.command("kids")(kids_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from osmclient.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``osm`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from osmclient.exceptions import OSMError
        from osmclient.output import error

        if isinstance(exc, OSMError):
            error(str(exc))
            sys.exit(exc.exit_code)
        if isinstance(exc, httpx.HTTPError):
            error(f"Request failed: {exc}")
            sys.exit(EXIT_CONNECTION_ERROR)
        if isinstance(exc, json.JSONDecodeError):
            error(f"Response was not valid JSON: {exc}")
            sys.exit(EXIT_MALFORMED_RESPONSE)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
