"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers, auth and wire logging for every FHIR call.
- Eases testing: a `transport` (e.g. `httpx.MockTransport`) can be injected.
"""

from __future__ import annotations

import logging
from typing import Generator

import httpx

from core.config import AppSettings

FHIR_JSON = "application/fhir+json"

_MASKED_HEADERS = {"authorization", "proxy-authorization", "cookie", "set-cookie"}


class BearerTokenAuth(httpx.Auth):
    """Attach `Authorization: Bearer <token>` to every request of one client."""

    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


def _mask_headers(headers: httpx.Headers) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in _MASKED_HEADERS:
            scheme, _, _ = value.partition(" ")
            out[key] = f"{scheme} ***" if scheme and scheme != value else "***"
        else:
            out[key] = value
    return out


def _body_text(content: bytes) -> str:
    if not content:
        return ""
    return content.decode("utf-8", errors="replace")


def build_wire_hooks(logger: logging.Logger) -> dict[str, list]:
    """Event hooks that log method, URL, headers and body of every exchange.

    Hooks only read; the request and response are left untouched.
    """

    def log_request(request: httpx.Request) -> None:
        logger.debug(
            "Client request: %s %s\nHeaders: %s\nBody:\n%s",
            request.method,
            request.url,
            _mask_headers(request.headers),
            _body_text(request.content),
        )

    def log_response(response: httpx.Response) -> None:
        response.read()
        logger.debug(
            "Client response: HTTP %s %s (%s %s)\nHeaders: %s\nBody:\n%s",
            response.status_code,
            response.reason_phrase,
            response.request.method,
            response.request.url,
            _mask_headers(response.headers),
            _body_text(response.content),
        )

    return {"request": [log_request], "response": [log_response]}


def build_client(
    settings: AppSettings | None = None,
    *,
    base_url: str,
    auth: httpx.Auth | None = None,
    wire_logger: logging.Logger | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` for one FHIR server.

    Why a builder:
    - Auth is bound to this client only, never process-wide.
    - Passing `wire_logger` turns on full request/response tracing.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": FHIR_JSON,
        "Content-Type": f"{FHIR_JSON}; charset=UTF-8",
    }
    return httpx.Client(
        base_url=base_url.rstrip("/") + "/",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        auth=auth,
        event_hooks=build_wire_hooks(wire_logger) if wire_logger is not None else None,
        transport=transport,
    )
