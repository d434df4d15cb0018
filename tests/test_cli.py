"""Tests for the termload CLI."""

import json

import pytest
from typer.testing import CliRunner

from cli.main import app
from conftest import UPLOAD_RESPONSE, RecordingServer
from core.config import AppSettings, read_user_env_vars

runner = CliRunner()

BASE_ARGS = ["upload-terminology", "-t", "http://example.org/fhir", "-u", "http://example.org/vocab"]


@pytest.fixture
def cli_server(monkeypatch):
    server = RecordingServer()
    monkeypatch.setattr("cli.main.AppSettings", lambda: AppSettings(_env_file=None))
    monkeypatch.setattr("core.services.upload_terminology.create_operation_client", server.client_factory())
    return server


class TestUploadTerminologyCommand:
    """Test suite for `termload upload-terminology`."""

    def test_upload__success__exit_zero_and_prints_response(self, cli_server):
        result = runner.invoke(app, [*BASE_ARGS, "-d", "a.zip"])

        assert result.exit_code == 0, result.output
        assert json.dumps(UPLOAD_RESPONSE, indent=2) in result.output
        assert len(cli_server.requests) == 1

    def test_upload__repeated_data_flag__keeps_order(self, cli_server):
        result = runner.invoke(app, [*BASE_ARGS, "-d", "a.zip", "--data", "b.zip"])

        assert result.exit_code == 0, result.output
        params = cli_server.last_payload["parameter"]
        assert [p["name"] for p in params] == ["url", "localfile", "localfile"]
        assert [p.get("valueString") for p in params[1:]] == ["a.zip", "b.zip"]

    def test_upload__bearer_token_flag__sent(self, cli_server):
        result = runner.invoke(app, [*BASE_ARGS, "-d", "a.zip", "-b", "tok"])

        assert result.exit_code == 0, result.output
        assert cli_server.requests[0].headers["Authorization"] == "Bearer tok"

    def test_upload__configured_token__used_when_flag_missing(self, monkeypatch):
        server = RecordingServer()
        monkeypatch.setattr(
            "cli.main.AppSettings",
            lambda: AppSettings(_env_file=None, bearer_token="from-config"),
        )
        monkeypatch.setattr("core.services.upload_terminology.create_operation_client", server.client_factory())

        result = runner.invoke(app, [*BASE_ARGS, "-d", "a.zip"])

        assert result.exit_code == 0, result.output
        assert server.requests[0].headers["Authorization"] == "Bearer from-config"

    def test_upload__missing_target__exit_one_without_network(self, cli_server):
        result = runner.invoke(app, ["upload-terminology", "-u", "http://example.org/vocab", "-d", "a.zip"])

        assert result.exit_code == 1
        assert "No target server (-t) specified" in result.output
        assert cli_server.requests == []

    def test_upload__missing_data__exit_one(self, cli_server):
        result = runner.invoke(app, BASE_ARGS)

        assert result.exit_code == 1
        assert "No data file (-d) provided" in result.output
        assert cli_server.requests == []

    def test_upload__bad_scheme__exit_one(self, cli_server):
        result = runner.invoke(
            app, ["upload-terminology", "-t", "ftp://x", "-u", "http://example.org/vocab", "-d", "a.zip"]
        )

        assert result.exit_code == 1
        assert "must begin with 'http' or 'file'" in result.output

    def test_upload__unsupported_version__exit_one_without_network(self, cli_server):
        result = runner.invoke(app, [*BASE_ARGS, "-d", "a.zip", "-f", "r4"])

        assert result.exit_code == 1
        assert "does not support FHIR version R4" in result.output
        assert cli_server.requests == []

    def test_upload__server_error__exit_one_with_detail(self, monkeypatch):
        server = RecordingServer(
            status_code=500,
            body={"resourceType": "OperationOutcome", "issue": [{"diagnostics": "disk full"}]},
        )
        monkeypatch.setattr("cli.main.AppSettings", lambda: AppSettings(_env_file=None))
        monkeypatch.setattr("core.services.upload_terminology.create_operation_client", server.client_factory())

        result = runner.invoke(app, [*BASE_ARGS, "-d", "a.zip"])

        assert result.exit_code == 1
        assert "disk full" in result.output

    @pytest.mark.parametrize(
        ("env_key", "value"),
        [("TERMLOAD_LOG_LEVEL", "loud"), ("TERMLOAD_FHIR_VERSION", "bogus")],
    )
    def test_upload__invalid_setting__exit_one_as_configuration_error(self, cli_server, monkeypatch, env_key, value):
        monkeypatch.setenv(env_key, value)

        result = runner.invoke(app, [*BASE_ARGS, "-d", "a.zip"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "(-f)" not in result.output
        assert not isinstance(result.exception, ValueError)
        assert cli_server.requests == []

    def test_upload__output_flag__writes_response_file(self, cli_server, tmp_path):
        out = tmp_path / "out" / "response.json"

        result = runner.invoke(app, [*BASE_ARGS, "-d", "a.zip", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text(encoding="utf-8")) == UPLOAD_RESPONSE


class TestConfigCommands:
    """Test suite for `termload config`."""

    def test_config_set__writes_user_env(self):
        result = runner.invoke(app, ["config", "set", "--fhir-version", "DSTU3", "--timeout", "120"])

        assert result.exit_code == 0, result.output
        stored = read_user_env_vars()
        assert stored["TERMLOAD_FHIR_VERSION"] == "dstu3"
        assert stored["TERMLOAD_HTTP_TIMEOUT_SECONDS"] == "120"

    def test_config_set__unknown_version__usage_error(self):
        result = runner.invoke(app, ["config", "set", "--fhir-version", "r9"])

        assert result.exit_code == 2
        assert read_user_env_vars() == {}

    def test_config_set__nothing_to_set__usage_error(self):
        result = runner.invoke(app, ["config", "set"])

        assert result.exit_code == 2

    def test_config_show__invalid_setting__exit_one(self, monkeypatch):
        monkeypatch.setenv("TERMLOAD_FHIR_VERSION", "bogus")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_config_show__masks_token(self, monkeypatch):
        monkeypatch.setenv("TERMLOAD_BEARER_TOKEN", "supersecretvalue")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0, result.output
        assert "supersecretvalue" not in result.output
        assert "supe...ue" in result.output


def test_version_flag():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.startswith("termload ")
