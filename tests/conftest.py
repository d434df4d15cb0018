"""Pytest configuration for termload tests."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable

import httpx
import pytest

from adapters.fhir_client import create_operation_client
from core.config import AppSettings

UPLOAD_RESPONSE = {
    "resourceType": "Parameters",
    "parameter": [
        {"name": "conceptCount", "valueInteger": 2},
        {"name": "target", "valueReference": {"reference": "CodeSystem/1"}},
    ],
}


class RecordingServer:
    """`httpx.MockTransport` that records every request it receives."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        body: Any = UPLOAD_RESPONSE,
        raw: bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.raw = raw
        self.error = error
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(
            self.status_code,
            content=json.dumps(self.body).encode("utf-8"),
            headers={"Content-Type": "application/fhir+json"},
        )

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def client_factory(self) -> Callable:
        def factory(settings, request, logger):
            return create_operation_client(settings, request, logger, transport=self.transport)

        return factory


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the developer's env vars and user config."""
    for key in list(os.environ):
        if key.startswith("TERMLOAD_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings():
    return AppSettings(_env_file=None)


@pytest.fixture
def server():
    return RecordingServer()


@pytest.fixture
def test_logger():
    logger = logging.getLogger("tests.termload")
    logger.setLevel(logging.DEBUG)
    return logger
