"""Shared test fixtures for osmclient.

Provides a fake OSM service served through :class:`httpx.MockTransport`,
isolated config/data directories, and output-state management. These
fixtures are discovered by pytest and available to every test module.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Union
from urllib.parse import parse_qsl

import httpx
import pytest

from osmclient.output import OutputFormat, OutputManager, reset_output, set_output

BASE_URL = "https://osm.test/"

Route = Union[Any, httpx.Response, Exception, Callable[[httpx.Request], Any]]


class FakeOSM:
    """In-process stand-in for the OSM service.

    ``routes`` maps a relative URL (path plus query string, no leading slash)
    to what the service answers with: a JSON-serialisable value, a ready
    :class:`httpx.Response`, an exception to raise, or a callable taking the
    request and returning one of those. Unknown URLs answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Route] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = request.url.raw_path.decode().lstrip("/")
        if key not in self.routes:
            return httpx.Response(404, json={"error": f"no route for {key}"})
        answer = self.routes[key]
        if callable(answer) and not isinstance(answer, httpx.Response):
            answer = answer(request)
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    def client(self) -> httpx.Client:
        return httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))

    def calls(self, relative_url: str) -> list[httpx.Request]:
        """Requests made to *relative_url*."""
        return [r for r in self.requests if r.url.raw_path.decode().lstrip("/") == relative_url]

    @staticmethod
    def form(request: httpx.Request) -> dict[str, str]:
        """Decode the form body of *request*."""
        return dict(parse_qsl(request.content.decode()))


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The CLI callback installs a manager per invocation; without a reset the
    last one (and its verbosity or format) would leak into the next test.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake service fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_osm() -> FakeOSM:
    """A fake service with a working login and an empty terms listing."""
    fake = FakeOSM()
    fake.routes["users.php?action=authorise"] = _login_handler
    fake.routes["api.php?action=getTerms"] = {"terms": []}
    return fake


def _login_handler(request: httpx.Request) -> Any:
    form = FakeOSM.form(request)
    if form.get("email") == "a@b.com" and form.get("password") == "pw":
        return {"secret": "S", "userid": 42}
    return {"error": "Incorrect password"}


@pytest.fixture
def http_client(fake_osm: FakeOSM) -> httpx.Client:
    client = fake_osm.client()
    yield client
    client.close()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and session data to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of tmp_path,
    clears the OSM_* environment variables and changes into tmp_path.
    """
    monkeypatch.setattr("osmclient.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["OSM_API_ID", "OSM_API_TOKEN", "OSM_BASE_URL", "OSM_PASSWORD"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a plain, verbose OutputManager so debug lines reach stderr."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
