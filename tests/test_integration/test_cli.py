"""End-to-end tests of the ``osm`` command line against the fake service.

Each invocation is a fresh Typer run, so state only carries over through the
on-disk session and settings file under the isolated XDG directories.
"""

from __future__ import annotations

import json

import httpx
import pytest

from osmclient import __version__
from osmclient.app import app, main
from osmclient.exceptions import InvalidUsageError
from osmclient.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_RESPONSE,
)


@pytest.fixture()
def env(isolated_config, fake_osm, monkeypatch):
    """Configure credentials and route every CLI request to the fake service."""
    monkeypatch.setenv("OSM_API_ID", "1")
    monkeypatch.setenv("OSM_API_TOKEN", "tok")
    monkeypatch.setattr(
        "osmclient.commands.common.build_http_client", lambda settings: fake_osm.client()
    )
    return fake_osm


@pytest.fixture()
def logged_in(env, cli_runner):
    result = cli_runner.invoke(app, ["auth", "login", "--email", "a@b.com", "--password", "pw"])
    assert result.exit_code == 0, result.output
    return env


class TestVersion:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"osm {__version__}" in result.output


class TestLogin:
    def test_success(self, env, cli_runner):
        result = cli_runner.invoke(
            app, ["auth", "login", "--email", "a@b.com", "--password", "pw"]
        )
        assert result.exit_code == 0, result.output
        assert "Logged in as user 42." in result.output

        form = env.form(env.calls("users.php?action=authorise")[0])
        assert form == {"email": "a@b.com", "password": "pw", "apiid": "1", "token": "tok"}

    def test_rejected(self, env, cli_runner):
        result = cli_runner.invoke(
            app, ["auth", "login", "--email", "a@b.com", "--password", "wrong"]
        )
        assert result.exit_code == 3
        assert "Login rejected" in result.output

    def test_password_from_env(self, env, cli_runner, monkeypatch):
        monkeypatch.setenv("OSM_PASSWORD", "pw")
        result = cli_runner.invoke(app, ["auth", "login", "-e", "a@b.com"])
        assert result.exit_code == 0, result.output

    def test_prompts_for_missing_values(self, env, cli_runner):
        result = cli_runner.invoke(app, ["auth", "login"], input="a@b.com\npw\n")
        assert result.exit_code == 0, result.output

    def test_status_after_login(self, logged_in, cli_runner):
        result = cli_runner.invoke(app, ["--plain", "auth", "status"])
        assert result.exit_code == 0, result.output
        assert "Authorized\tyes" in result.output
        assert "User id\t42" in result.output

    def test_status_before_login(self, env, cli_runner):
        result = cli_runner.invoke(app, ["--plain", "auth", "status"])
        assert result.exit_code == 0, result.output
        assert "Authorized\tno" in result.output
        assert env.requests == []


class TestDataCommands:
    def test_terms_requires_login(self, env, cli_runner):
        result = cli_runner.invoke(app, ["terms"])
        assert result.exit_code == 3
        assert "osm auth login" in result.output
        assert env.requests == []

    def test_terms_json(self, logged_in, cli_runner):
        result = cli_runner.invoke(app, ["--json", "--quiet", "terms"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"terms": []}

        form = logged_in.form(logged_in.calls("api.php?action=getTerms")[0])
        assert form == {"apiid": "1", "token": "tok", "userid": "42", "secret": "S"}

    def test_events(self, logged_in, cli_runner):
        logged_in.routes["events.php?action=getEvents&sectionid=12"] = {"items": [{"eventid": "9"}]}
        result = cli_runner.invoke(app, ["--json", "--quiet", "events", "12"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"items": [{"eventid": "9"}]}

    def test_kids(self, logged_in, cli_runner):
        url = "challenges.php?type=challenge&section=scouts&c=community&termid=7&sectionid=12"
        logged_in.routes[url] = {"items": []}
        result = cli_runner.invoke(app, ["--json", "--quiet", "kids", "12", "7"])
        assert result.exit_code == 0, result.output
        assert len(logged_in.calls(url)) == 1

    def test_badges_type(self, logged_in, cli_runner):
        url = "challenges.php?action=getBadgeDetails&section=scouts&badgeType=challenge"
        logged_in.routes[url] = {"details": {}}
        result = cli_runner.invoke(app, ["--json", "--quiet", "badges", "--type", "ACTIVITY"])
        assert result.exit_code == 0, result.output
        assert logged_in.form(logged_in.calls(url)[0])["badgeType"] == "activity"

    def test_session_cache_spans_invocations(self, logged_in, cli_runner):
        for _ in range(2):
            result = cli_runner.invoke(app, ["--json", "--quiet", "terms", "--cache", "session"])
            assert result.exit_code == 0, result.output
            assert json.loads(result.stdout) == {"terms": []}
        assert len(logged_in.calls("api.php?action=getTerms")) == 1

    def test_local_cache_does_not_span_invocations(self, logged_in, cli_runner):
        for _ in range(2):
            cli_runner.invoke(app, ["--quiet", "terms", "--cache", "local"])
        assert len(logged_in.calls("api.php?action=getTerms")) == 2

    def test_default_cache_from_settings(self, logged_in, cli_runner):
        cli_runner.invoke(app, ["config", "set", "default_cache", "session"])
        for _ in range(2):
            cli_runner.invoke(app, ["--quiet", "terms"])
        assert len(logged_in.calls("api.php?action=getTerms")) == 1

    def test_bad_cache_mode(self, logged_in, cli_runner):
        result = cli_runner.invoke(app, ["terms", "--cache", "forever"])
        assert result.exit_code == 2
        assert "Unknown cache mode" in result.output

    def test_connection_error(self, logged_in, cli_runner):
        logged_in.routes["api.php?action=getTerms"] = httpx.ConnectError("unreachable")
        result = cli_runner.invoke(app, ["terms"])
        assert result.exit_code == 6
        assert "Request failed" in result.output

    def test_malformed_response(self, logged_in, cli_runner):
        logged_in.routes["api.php?action=getTerms"] = httpx.Response(200, text="<html>")
        result = cli_runner.invoke(app, ["terms"])
        assert result.exit_code == 8
        assert "not valid JSON" in result.output


class TestCacheCommands:
    def test_stats_and_clear(self, logged_in, cli_runner):
        cli_runner.invoke(app, ["--quiet", "terms", "--cache", "all"])

        result = cli_runner.invoke(app, ["--json", "--quiet", "cache", "stats"])
        assert json.loads(result.stdout) == {"session_active": True, "session_entries": 1}

        result = cli_runner.invoke(app, ["cache", "clear"])
        assert result.exit_code == 0
        assert "Session cache cleared." in result.output

        result = cli_runner.invoke(app, ["--json", "--quiet", "cache", "stats"])
        assert json.loads(result.stdout)["session_entries"] == 0

    def test_clear_keeps_login(self, logged_in, cli_runner):
        cli_runner.invoke(app, ["cache", "clear"])
        result = cli_runner.invoke(app, ["--quiet", "terms"])
        assert result.exit_code == 0, result.output

    def test_login_empties_session_cache(self, logged_in, cli_runner):
        cli_runner.invoke(app, ["--quiet", "terms", "--cache", "session"])
        cli_runner.invoke(app, ["auth", "login", "-e", "a@b.com", "--password", "pw"])
        cli_runner.invoke(app, ["--quiet", "terms", "--cache", "session"])
        assert len(logged_in.calls("api.php?action=getTerms")) == 2


class TestConfigCommands:
    def test_set_and_show(self, isolated_config, cli_runner):
        result = cli_runner.invoke(app, ["config", "set", "api_id", "99"])
        assert result.exit_code == 0, result.output
        assert "Set api_id = 99" in result.output

        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["api_id"] == "99"

    def test_set_nested(self, isolated_config, cli_runner):
        result = cli_runner.invoke(app, ["config", "set", "request.connect_timeout", "5"])
        assert result.exit_code == 0, result.output
        result = cli_runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert json.loads(result.stdout)["request"]["connect_timeout"] == 5.0

    def test_unknown_key(self, isolated_config, cli_runner):
        result = cli_runner.invoke(app, ["config", "set", "colour", "blue"])
        assert result.exit_code == 2

    def test_invalid_value(self, isolated_config, cli_runner):
        result = cli_runner.invoke(app, ["config", "set", "request.timeout", "soon"])
        assert result.exit_code == 2

    def test_invalid_cache_mode(self, isolated_config, cli_runner):
        result = cli_runner.invoke(app, ["config", "set", "default_cache", "forever"])
        assert result.exit_code == 2

    def test_configured_api_id_used(self, isolated_config, fake_osm, cli_runner, monkeypatch):
        monkeypatch.setenv("OSM_API_TOKEN", "tok")
        monkeypatch.setattr(
            "osmclient.commands.common.build_http_client", lambda settings: fake_osm.client()
        )
        cli_runner.invoke(app, ["config", "set", "api_id", "77"])
        result = cli_runner.invoke(app, ["auth", "login", "-e", "a@b.com", "--password", "pw"])
        assert result.exit_code == 0, result.output
        assert fake_osm.form(fake_osm.requests[0])["apiid"] == "77"


class TestMissingSettings:
    def test_missing_api_id(self, isolated_config, cli_runner, monkeypatch):
        monkeypatch.setenv("OSM_API_TOKEN", "tok")
        result = cli_runner.invoke(app, ["terms"])
        assert result.exit_code == 2
        assert "No API id configured" in result.output

    def test_missing_token(self, isolated_config, cli_runner, monkeypatch):
        monkeypatch.setenv("OSM_API_ID", "1")
        result = cli_runner.invoke(app, ["terms"])
        assert result.exit_code == 1
        assert "OSM_API_TOKEN" in result.output

    def test_api_id_flag(self, env, cli_runner):
        result = cli_runner.invoke(
            app, ["--api-id", "5", "auth", "login", "-e", "a@b.com", "--password", "pw"]
        )
        assert result.exit_code == 0, result.output
        assert env.form(env.requests[0])["apiid"] == "5"


class TestSettingsResolvedOnce:
    @pytest.mark.parametrize("args", [["terms"], ["events", "12"], ["auth", "status"]])
    def test_single_settings_read(self, logged_in, cli_runner, monkeypatch, args):
        import osmclient.config

        logged_in.routes["events.php?action=getEvents&sectionid=12"] = {"items": []}
        real_load = osmclient.config.load_settings
        reads = []

        def counting_load():
            reads.append(1)
            return real_load()

        monkeypatch.setattr("osmclient.config.load_settings", counting_load)
        result = cli_runner.invoke(app, ["--quiet", *args])
        assert result.exit_code == 0, result.output
        assert len(reads) == 1


# ---------------------------------------------------------------------------
# Console-script entry point
# ---------------------------------------------------------------------------


def _run_main(monkeypatch, *args: str) -> int:
    """Run ``osm`` through :func:`main` and return the exit code."""
    monkeypatch.setattr("osmclient.app._setup_signal_handlers", lambda: None)
    monkeypatch.setattr("sys.argv", ["osm", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


class TestMain:
    def test_success_exits_zero(self, env, monkeypatch, capsys):
        assert _run_main(monkeypatch, "config", "show") in (0, None)

    def test_invalid_settings_file(self, env, monkeypatch, capsys):
        from osmclient.config import settings_path

        settings_path().write_text("{not json", encoding="utf-8")
        assert _run_main(monkeypatch, "terms") == EXIT_GENERIC_FAILURE
        captured = capsys.readouterr()
        assert "Error:" in captured.err
        assert "Invalid settings" in captured.err

    @pytest.mark.parametrize(
        ("raised", "code", "message"),
        [
            (httpx.ConnectError("unreachable"), EXIT_CONNECTION_ERROR, "Request failed"),
            (
                json.JSONDecodeError("Expecting value", "<html>", 0),
                EXIT_MALFORMED_RESPONSE,
                "not valid JSON",
            ),
            (InvalidUsageError("bad value"), EXIT_INVALID_USAGE, "bad value"),
        ],
    )
    def test_known_errors_mapped(self, env, monkeypatch, capsys, raised, code, message):
        def failing_client(settings):
            raise raised

        monkeypatch.setattr("osmclient.commands.common.build_http_client", failing_client)
        assert _run_main(monkeypatch, "terms") == code
        assert message in capsys.readouterr().err

    def test_unexpected_error_writes_crash_log(self, env, isolated_config, monkeypatch, capsys):
        def failing_client(settings):
            raise RuntimeError("boom")

        monkeypatch.setattr("osmclient.commands.common.build_http_client", failing_client)
        assert _run_main(monkeypatch, "terms") == EXIT_GENERIC_FAILURE

        logs = list((isolated_config / "data" / "osmclient" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text()
        assert "Debug log:" in capsys.readouterr().err
