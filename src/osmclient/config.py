"""Configuration management with XDG paths, atomic writes, and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.osmclient/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Settings** -- a single :class:`~osmclient.models.Settings` JSON file
  holding the API id, where to find the API token, the base URL and request
  defaults.
* **Precedence resolution** -- :func:`resolve_settings` layers CLI flags and
  environment variables over the settings file.
* **Credential resolution** -- :func:`resolve_credential` reads the API token
  from an env var, a file, or an interactive prompt.

The persisted login and the session cache tier are not configuration; they
live in :func:`get_session_dir` and are managed through
:class:`~osmclient.session.DiskSessionStore`.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from osmclient.exceptions import ConfigError
from osmclient.models import Settings

_APP_NAME = "osmclient"
_SETTINGS_FILENAME = "config.json"

ENV_API_ID = "OSM_API_ID"
ENV_BASE_URL = "OSM_BASE_URL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on platforms that follow the XDG Base Directory spec (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, falling back to segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/osmclient/`` (default ``~/.config/osmclient/``).
    On macOS/Windows: ``~/.osmclient/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (session, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/osmclient/`` (default ``~/.local/share/osmclient/``).
    On macOS/Windows: ``~/.osmclient/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_session_dir() -> Path:
    """Return the directory of the command line's :class:`DiskSessionStore`."""
    path = get_data_dir() / "session"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory and ``os.replace``.

    The file is created with ``0o600`` permissions since it names where the
    API token comes from. On any failure the temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        os.chmod(tmp_path, 0o600)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Settings file ---


def settings_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _SETTINGS_FILENAME


def load_settings() -> Settings:
    """Load the settings file.

    Returns:
        The deserialised :class:`~osmclient.models.Settings`, or defaults when
        the file does not exist.

    Raises:
        ConfigError: If the file exists but is not valid JSON or fails
            validation.
    """
    path = settings_path()
    if not path.is_file():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Settings.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid settings at {path}: {exc}") from exc


def save_settings(settings: Settings) -> None:
    """Persist *settings* atomically."""
    data = settings.model_dump(mode="json")
    _atomic_write(settings_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def resolve_settings(
    cli_api_id: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> Settings:
    """Return the effective settings.

    Precedence (high to low):
        1. CLI flags (``--api-id``, ``--base-url``)
        2. Environment variables (``OSM_API_ID``, ``OSM_BASE_URL``)
        3. Settings file (``~/.config/osmclient/config.json``)
        4. Defaults
    """
    settings = load_settings()

    env_api_id = os.environ.get(ENV_API_ID)
    if env_api_id:
        settings.api_id = env_api_id
    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        settings.base_url = env_base_url

    if cli_api_id is not None:
        settings.api_id = cli_api_id
    if cli_base_url is not None:
        settings.base_url = cli_base_url

    return settings


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a secret from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads the file, stripped of whitespace
        - ``"prompt"`` -- asks interactively (requires a TTY)

    Raises:
        ConfigError: If the source cannot be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for the API token: stdin is not a TTY")
        return getpass.getpass("API token: ")

    raise ConfigError(f"Unknown credential source format: {source}")
