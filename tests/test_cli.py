from __future__ import annotations

import json

import httpx
import pytest
from typer.testing import CliRunner

from checkpoint.adapters.checkpoint_client import CheckpointClient, ClientConfig
from checkpoint.cli import doctor
from checkpoint.cli import main as cli_main
from checkpoint.core.config import get_user_env_file
from checkpoint.core.domain.errors import RequestError
from checkpoint.core.domain.models import Identity, Profile
from tests.helpers import user_payload

runner = CliRunner()


def _fake_fetch(result=None, error: Exception | None = None, seen: list | None = None):
    async def fetch(settings):
        if seen is not None:
            seen.append(settings)
        if error is not None:
            raise error
        return result

    return fetch


def test_whoami_json(monkeypatch):
    seen: list = []
    monkeypatch.setattr(
        cli_main, "_fetch_user", _fake_fetch((Identity(id="u1"), Profile(name="Ann")), seen=seen)
    )

    result = runner.invoke(cli_main.app, ["whoami", "--json", "--session", "tok"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"identity": {"id": "u1"}, "profile": {"name": "Ann"}}
    assert seen[0].session == "tok"


def test_whoami_renders_panel(monkeypatch):
    monkeypatch.setattr(cli_main, "_fetch_user", _fake_fetch((Identity(id="u1"), None)))

    result = runner.invoke(cli_main.app, ["whoami"])

    assert result.exit_code == 0, result.output
    assert "u1" in result.output


def test_whoami_without_identity_exits_1(monkeypatch):
    monkeypatch.setattr(cli_main, "_fetch_user", _fake_fetch((None, None)))

    result = runner.invoke(cli_main.app, ["whoami"])

    assert result.exit_code == 1
    assert "No current identity" in result.output


def test_whoami_request_error_exits_2(monkeypatch):
    error = RequestError(
        method="GET",
        url="http://localhost/api/checkpoint/v1/identities/me",
        status_code=500,
        reason_phrase="Internal Server Error",
        body="boom",
        message="Checkpoint",
    )
    monkeypatch.setattr(cli_main, "_fetch_user", _fake_fetch(error=error))

    result = runner.invoke(cli_main.app, ["whoami"])

    assert result.exit_code == 2
    assert "Request failed" in result.output


def test_whoami_transport_error_exits_2(monkeypatch):
    monkeypatch.setattr(cli_main, "_fetch_user", _fake_fetch(error=httpx.ConnectError("refused")))
    assert runner.invoke(cli_main.app, ["whoami"]).exit_code == 2


def test_doctor_setup_writes_user_config():
    result = runner.invoke(cli_main.app, ["doctor", "setup"], input="https\ncp.example.com\nsecret\n")

    assert result.exit_code == 0, result.output
    content = get_user_env_file().read_text(encoding="utf-8")
    assert "CHECKPOINT_SCHEME=https" in content
    assert "CHECKPOINT_HOST=cp.example.com" in content
    assert "CHECKPOINT_SESSION=secret" in content


def test_doctor_setup_rejects_bad_scheme():
    result = runner.invoke(cli_main.app, ["doctor", "setup"], input="ftp\ncp.example.com\n\n")
    assert result.exit_code != 0
    assert not get_user_env_file().exists()


def _serve_identities(monkeypatch, respond) -> list[httpx.Request]:
    """Route `doctor run` through a client whose transport answers with `respond`."""

    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return respond(request)

    def from_settings(settings=None, **kwargs):
        transport = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return CheckpointClient(
            ClientConfig(host=settings.host, scheme=settings.scheme, session=settings.session, transport=transport)
        )

    monkeypatch.setattr(doctor.CheckpointClient, "from_settings", from_settings)
    return seen


def test_doctor_run_reports_resolved_identity(monkeypatch):
    monkeypatch.setenv("CHECKPOINT_SESSION", "tok")
    seen = _serve_identities(
        monkeypatch,
        lambda request: httpx.Response(200, content=user_payload(), headers={"Content-Type": "application/json"}),
    )

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "Checkpoint Doctor" in result.output
    assert "Reachable" in result.output
    assert "FAIL" not in result.output
    assert seen[0].url.path == "/api/checkpoint/v1/identities/me"
    assert seen[0].headers["Cookie"] == "checkpoint.session=tok"


def test_doctor_run_without_identity_is_not_a_failure(monkeypatch):
    _serve_identities(monkeypatch, lambda request: httpx.Response(412))

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "Reachable" in result.output
    assert "412" in result.output
    assert "OPTIONAL" in result.output
    assert "FAIL" not in result.output


@pytest.mark.parametrize(
    "respond",
    [
        lambda request: httpx.Response(500, text="boom"),
        lambda request: httpx.Response(200, text="<html>", headers={"Content-Type": "text/html"}),
    ],
)
def test_doctor_run_fails_on_unusable_endpoint(monkeypatch, respond):
    _serve_identities(monkeypatch, respond)

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert "Reachable" not in result.output


def test_doctor_run_fails_when_checkpoint_is_unreachable(monkeypatch):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _serve_identities(monkeypatch, refuse)

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "FAIL" in result.output


def test_doctor_run_shows_bracketed_error_details(monkeypatch):
    _serve_identities(monkeypatch, lambda request: httpx.Response(503))

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "[no" in result.output
