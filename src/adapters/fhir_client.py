"""FHIR named-operation client over httpx.

Implements `OperationClient`: one POST of a `Parameters` resource to
`[base]/$name`, response parsed as JSON. Every failure mode (network error,
non-2xx status, body that is not a JSON resource) becomes a `TransportError`
carrying the server's OperationOutcome diagnostics when there are any.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from adapters.http_client import BearerTokenAuth, build_client
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import OperationRequest, ParameterPayload


def extract_outcome_detail(body: Any) -> str | None:
    """Join `issue[].diagnostics` (or `details.text`) of an OperationOutcome."""

    if not isinstance(body, dict) or body.get("resourceType") != "OperationOutcome":
        return None
    messages: list[str] = []
    for issue in body.get("issue") or []:
        if not isinstance(issue, dict):
            continue
        text = issue.get("diagnostics") or (issue.get("details") or {}).get("text")
        if isinstance(text, str) and text.strip():
            messages.append(text.strip())
    return "; ".join(messages) or None


class FhirOperationClient:
    """httpx-backed client for server-level FHIR operations."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    def invoke_server_operation(self, name: str, parameters: ParameterPayload) -> dict[str, Any]:
        url = f"${name}"
        content = json.dumps(parameters.to_fhir(), ensure_ascii=False).encode("utf-8")
        try:
            response = self._client.post(url, content=content)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to ${name} failed", detail=str(exc)) from exc

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None

        if not response.is_success:
            detail = extract_outcome_detail(body) or response.text[:500] or None
            raise TransportError(
                f"HTTP {response.status_code} {response.reason_phrase} from ${name}",
                status_code=response.status_code,
                detail=detail,
            )

        if not isinstance(body, dict) or "resourceType" not in body:
            raise TransportError(
                f"Malformed response from ${name}",
                status_code=response.status_code,
                detail="expected a FHIR resource in JSON",
            )
        return body

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "FhirOperationClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def build_auth(request: OperationRequest) -> httpx.Auth | None:
    if request.bearer_token:
        return BearerTokenAuth(request.bearer_token)
    if request.basic_auth:
        return httpx.BasicAuth(*request.basic_auth)
    return None


def create_operation_client(
    settings: AppSettings,
    request: OperationRequest,
    logger: logging.Logger,
    *,
    transport: httpx.BaseTransport | None = None,
) -> FhirOperationClient:
    """Client for `request.target_server_url` with per-call auth and tracing."""

    wire_logger = logger.getChild("wire") if request.verbose else None
    client = build_client(
        settings,
        base_url=request.target_server_url,
        auth=build_auth(request),
        wire_logger=wire_logger,
        transport=transport,
    )
    return FhirOperationClient(client)
