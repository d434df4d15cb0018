"""Contract for clients that invoke FHIR named operations.

Why Protocol:
- A structural contract (duck typing) without rigid inheritance.
- The upload service can run against the httpx adapter or a test double
  without knowing which.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import ParameterPayload


@runtime_checkable
class OperationClient(Protocol):
    """Minimal contract for a named-operation transport.

    Design rules:
    - `invoke_server_operation` targets the server level (`[base]/$name`),
      never a resource type or instance.
    - One call is one request: no chunking, no retries.
    - Failures surface as `TransportError`.
    """

    def invoke_server_operation(self, name: str, parameters: ParameterPayload) -> dict[str, Any]:
        """Send `parameters` to `$name` and return the response resource."""

        ...

    def close(self) -> None:
        ...
