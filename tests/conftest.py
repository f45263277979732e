from __future__ import annotations

import logging
from typing import Callable

import httpx
import pytest

from checkpoint.adapters.checkpoint_client import CheckpointClient, ClientConfig
from tests.helpers import HOST, RecordingHandler


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for name in ("CHECKPOINT_SCHEME", "CHECKPOINT_HOST", "CHECKPOINT_SESSION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("checkpoint.tests")


@pytest.fixture
def make_client(logger):
    """Build a client whose transport answers with `respond(request)`."""

    def _make(
        respond: Callable[[httpx.Request], httpx.Response],
        *,
        session: str | None = None,
    ) -> tuple[CheckpointClient, RecordingHandler]:
        handler = RecordingHandler(respond)
        transport = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        config = ClientConfig(host=HOST, session=session, transport=transport, logger=logger)
        return CheckpointClient(config), handler

    return _make
