"""End-to-end tests for the tryout CLI, driven through Typer's CliRunner."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from tryout import __version__
from tryout.app import app, main
from tryout.models import ApiResponse

SPEC = str(Path(__file__).parent / "fixtures" / "petstore.json")
SERVER = "https://api.petstore.example.com/v1"


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger = logging.getLogger("tryout")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def _mock_client(response: ApiResponse) -> MagicMock:
    """A SyncClient class double whose ``send`` returns *response*."""
    client_cls = MagicMock()
    client_cls.return_value.__enter__.return_value.send.return_value = response
    return client_cls


# ---------------------------------------------------------------------------
# Root callback
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"tryout {__version__}" in result.output

    def test_no_args_shows_help(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, [])
        assert "curl" in result.output
        assert "operations" in result.output


# ---------------------------------------------------------------------------
# Inspect commands
# ---------------------------------------------------------------------------


class TestInspect:
    def test_info(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "info", SPEC])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["title"] == "Petstore"
        assert data["openapi"] == "3.0.3"
        assert data["contact"]["email"] == "api@example.com"
        assert data["license"]["name"] == "MIT"
        assert data["servers"][0]["url"] == SERVER

    def test_operations_plain(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "operations", SPEC])
        assert result.exit_code == 0, result.output
        lines = result.stdout.strip().split("\n")
        assert lines[0] == "Method\tPath\tOperation ID\tSummary"
        assert "GET\t/pets\tlistPets\tList pets" in lines
        assert "DELETE\t/pets/{petId}\tdeletePet\tDelete a pet (deprecated)" in lines
        assert len(lines) == 6

    def test_example(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "example", SPEC, "addPet"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["parameters"] == {}
        assert data["request_body"]["application/json"]["name"] == "string"

    def test_example_by_method_and_path(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "example", SPEC, "GET /pets/{petId}"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["parameters"]["path"] == {"petId": "integer (int64)"}

    def test_unknown_operation(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "example", SPEC, "nope"])
        assert result.exit_code == 2
        assert "No operation 'nope'" in result.output

    def test_missing_document(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "info", "missing.yaml"])
        assert result.exit_code == 7
        assert "not found" in result.output


# ---------------------------------------------------------------------------
# curl
# ---------------------------------------------------------------------------


class TestCurl:
    def test_explicit_host(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app,
            ["-q", "curl", SPEC, "getPetById", "-P", "petId=7", "--host", "http://localhost:8080/"],
        )
        assert result.exit_code == 0, result.output
        assert result.stdout == "curl -XGET \\\n    http://localhost:8080/pets/7\n"

    def test_default_host_from_servers(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["-q", "curl", SPEC, "listPets", "-Q", "limit=5", "-Q", 'tags=["a","b"]']
        )
        assert result.exit_code == 0, result.output
        assert f"{SERVER}/pets?limit=5&tags=a&tags=b" in result.stdout

    def test_host_from_environment(
        self, cli_runner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TRYOUT_HOST", "http://env-host")
        result = cli_runner.invoke(app, ["-q", "curl", SPEC, "getPetById", "-P", "petId=1"])
        assert result.exit_code == 0, result.output
        assert "http://env-host/pets/1" in result.stdout

    def test_label_style_and_headers(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["-q", "curl", SPEC, "deletePet", "-P", "petId=5", "--host", "http://h"]
        )
        assert result.exit_code == 0, result.output
        assert "curl -XDELETE \\\n    http://h/pets/.5" in result.stdout

    def test_header_and_cookie(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app,
            ["-q", "curl", SPEC, "listPets", "-H", "X-Request-Id=abc", "-C", "session=s1"],
        )
        assert result.exit_code == 0, result.output
        assert "-H abc" in result.stdout
        assert "--cookie session=s1" in result.stdout

    def test_body(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["-q", "curl", SPEC, "addPet", "--body", '{"name": "Rex"}', "--host", "http://h"]
        )
        assert result.exit_code == 0, result.output
        assert result.stdout.endswith("-d \\\n'{\n    \"name\": \"Rex\"\n}'\n")

    def test_missing_required_is_a_warning(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "curl", SPEC, "getPetById", "--host", "http://h"])
        assert result.exit_code == 0
        assert "Required parameter 'path.petId' has no value" in result.output
        assert "Set it with -P petId=VALUE" in result.output
        assert "http://h/pets/{petId}" in result.output

    def test_undeclared_parameter(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "curl", SPEC, "listPets", "-Q", "nope=1"])
        assert result.exit_code == 8
        assert "nope" in result.output

    def test_malformed_assignment(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "curl", SPEC, "listPets", "-Q", "limit"])
        assert result.exit_code == 2
        assert "NAME=VALUE" in result.output

    def test_malformed_shape(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app, ["--no-color", "curl", SPEC, "searchPets", "-Q", "filter=[1,2]"]
        )
        assert result.exit_code == 8


# ---------------------------------------------------------------------------
# call
# ---------------------------------------------------------------------------


class TestCall:
    def test_success(self, cli_runner, isolated_config: Path) -> None:
        response = ApiResponse(
            method="GET",
            url="http://h/pets/7",
            status_code=200,
            reason="OK",
            text='{"id": 7, "name": "Rex"}',
        )
        client_cls = _mock_client(response)
        with patch("tryout.client.SyncClient", client_cls):
            result = cli_runner.invoke(
                app,
                ["-q", "--json", "call", SPEC, "getPetById", "-P", "petId=7", "--host", "http://h"],
            )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"id": 7, "name": "Rex"}
        send = client_cls.return_value.__enter__.return_value.send
        descriptor = send.call_args.args[0]
        assert descriptor.method == "GET"
        assert descriptor.url == "http://h/pets/7"
        assert send.call_args.kwargs == {"timeout": None}

    def test_timeout_passed_through(self, cli_runner, isolated_config: Path) -> None:
        client_cls = _mock_client(
            ApiResponse(method="GET", url="http://h/pets", status_code=204, reason="No Content")
        )
        with patch("tryout.client.SyncClient", client_cls):
            result = cli_runner.invoke(
                app, ["-q", "call", SPEC, "listPets", "--host", "http://h", "--timeout", "2.5"]
            )

        assert result.exit_code == 0, result.output
        config = client_cls.call_args.args[0]
        assert config.timeout == 2.5
        send = client_cls.return_value.__enter__.return_value.send
        assert send.call_args.kwargs == {"timeout": 2.5}

    def test_error_status_exits_zero(self, cli_runner, isolated_config: Path) -> None:
        client_cls = _mock_client(
            ApiResponse(method="GET", url="http://h/pets/7", status_code=404, reason="Not Found")
        )
        with patch("tryout.client.SyncClient", client_cls):
            result = cli_runner.invoke(
                app,
                ["--no-color", "call", SPEC, "getPetById", "-P", "petId=7", "--host", "http://h"],
            )

        assert result.exit_code == 0
        assert "Warning: HTTP 404 Not Found" in result.output

    def test_transport_failure_exits_non_zero(self, cli_runner, isolated_config: Path) -> None:
        client_cls = _mock_client(
            ApiResponse(method="GET", url="http://h/pets", error="Request failed: refused")
        )
        with patch("tryout.client.SyncClient", client_cls):
            result = cli_runner.invoke(
                app, ["--no-color", "call", SPEC, "listPets", "--host", "http://h"]
            )

        assert result.exit_code == 6
        assert "Error: Request failed: refused" in result.output

    def test_undeclared_parameter_sends_nothing(self, cli_runner, isolated_config: Path) -> None:
        client_cls = MagicMock()
        with patch("tryout.client.SyncClient", client_cls):
            result = cli_runner.invoke(
                app, ["--no-color", "call", SPEC, "listPets", "-H", "X-Nope=1", "--host", "http://h"]
            )

        assert result.exit_code == 8
        client_cls.assert_not_called()


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_set_then_show(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "request.timeout", "5"])
        assert result.exit_code == 0, result.output

        result = cli_runner.invoke(app, ["-q", "--json", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["request"]["timeout"] == 5.0

    def test_set_reports_success(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "request.timeout", "5"])
        assert result.exit_code == 0, result.output
        assert "Set request.timeout = 5" in result.output

    def test_show_effective(
        self, cli_runner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TRYOUT_HOST", "http://env-host")
        result = cli_runner.invoke(app, ["-q", "--json", "config", "show", "--effective"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["default_host"] == "http://env-host"

    def test_configured_host_used_by_curl(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "default_host", "http://configured"])
        result = cli_runner.invoke(app, ["-q", "curl", SPEC, "getPetById", "-P", "petId=2"])
        assert "http://configured/pets/2" in result.stdout

    def test_configured_output_format(self, cli_runner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "output.format", "json"])
        result = cli_runner.invoke(app, ["operations", SPEC])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)[0]["Operation ID"] == "listPets"

    def test_unknown_key(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "nope", "1"])
        assert result.exit_code == 1
        assert "Unknown config key 'nope'" in result.output


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


class TestMain:
    def test_unexpected_error_writes_crash_log(self, isolated_config: Path) -> None:
        with patch("tryout.app.app", side_effect=RuntimeError("boom")), patch(
            "tryout.app._setup_signal_handlers"
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        logs = list((isolated_config / "data" / "tryout" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text()
