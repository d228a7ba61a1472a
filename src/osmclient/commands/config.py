"""Config commands -- view and modify settings.

Provides ``osm config show`` and ``osm config set``. Settings are stored as
JSON (:class:`~osmclient.models.Settings`) in the osmclient config
directory and supply defaults such as the API id and the token source.
"""

from __future__ import annotations

import typer

from osmclient.exit_codes import EXIT_INVALID_USAGE
from osmclient.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the settings file contents (defaults filled in).

    Example::

        osm config show --json
    """
    from osmclient.config import load_settings, settings_path

    settings = load_settings()
    info(f"Settings file: {settings_path()}")
    format_response(settings.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting key (dot notation, e.g. 'request.timeout')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a single value, validated before it is saved.

    Example::

        osm config set api_id 123
        osm config set api_token_source file:~/.osm-token
        osm config set request.connect_timeout 5
    """
    from osmclient.config import load_settings, save_settings
    from osmclient.models import Settings, parse_cache_mode

    data = load_settings().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if not isinstance(target.get(k), dict):
            error(f"Invalid setting key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown setting key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    if key == "default_cache":
        try:
            parse_cache_mode(value)
        except ValueError as exc:
            error(str(exc))
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    # pydantic coerces the string to the field's type
    target[final_key] = value
    try:
        settings = Settings.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_settings(settings)
    success(f"Set {key} = {value}")
