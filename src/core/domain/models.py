"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  core to any I/O library.
- The FHIR `Parameters` payload serializes straight to the wire shape through
  aliases (`resourceType`, `valueUri`, ...).

Note:
- These models describe *what* an upload is, not *how* it is sent.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.valuesets import FhirVersion


class UploadArguments(BaseModel):
    """Raw inputs for one upload, exactly as the caller supplied them.

    Nothing here is trusted: the upload service validates every field before
    an `OperationRequest` exists.
    """

    target: str | None = Field(
        default=None,
        description="Base URL of the target FHIR server.",
    )
    url: str | None = Field(
        default=None,
        description="Code system URI the uploaded package belongs to.",
    )
    data: list[str] = Field(
        default_factory=list,
        description="Local files (raw or ZIP) the server should load, in order.",
    )
    bearer_token: str | None = Field(
        default=None,
        description="Bearer token attached to every request of this upload.",
    )
    basic_auth: str | None = Field(
        default=None,
        description="HTTP basic credentials as 'username:password'.",
    )
    verbose: bool = Field(
        default=False,
        description="Log full request/response traces.",
    )
    fhir_version: str | None = Field(
        default=None,
        description="FHIR version code (e.g. 'dstu3').",
    )


class OperationRequest(BaseModel):
    """Validated, immutable representation of one upload invocation."""

    model_config = ConfigDict(frozen=True)

    target_server_url: str = Field(..., min_length=1)
    vocabulary_uri: str = Field(..., min_length=1)
    local_files: tuple[str, ...] = Field(..., min_length=1)
    bearer_token: str | None = None
    basic_auth: tuple[str, str] | None = None
    verbose: bool = False
    fhir_version: FhirVersion = FhirVersion.DSTU3


class ParametersParameter(BaseModel):
    """One named entry of a FHIR `Parameters` resource."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    value_uri: str | None = Field(default=None, alias="valueUri")
    value_string: str | None = Field(default=None, alias="valueString")

    @property
    def value(self) -> str | None:
        return self.value_uri if self.value_uri is not None else self.value_string


class ParameterPayload(BaseModel):
    """FHIR `Parameters` resource sent to a named operation.

    Entries keep insertion order; repeated names (one `localfile` per file)
    are legal and meaningful.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    resource_type: Literal["Parameters"] = Field(default="Parameters", alias="resourceType")
    parameter: tuple[ParametersParameter, ...] = Field(default_factory=tuple)

    def values(self, name: str) -> list[str | None]:
        """All values for `name`, in payload order."""

        return [p.value for p in self.parameter if p.name == name]

    def to_fhir(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OperationResult(BaseModel):
    """Outcome of a successful operation call."""

    operation: str = Field(..., min_length=1)
    target_server_url: str = Field(..., min_length=1)
    response: dict[str, Any] = Field(
        default_factory=dict,
        description="Resource returned by the server, as parsed JSON.",
    )
    rendered: str = Field(
        default="",
        description="Stable pretty-printed form of `response`.",
    )
    elapsed_seconds: float = Field(default=0.0, ge=0.0)
