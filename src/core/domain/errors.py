"""Domain exceptions for termload.

Why a single hierarchy:
- The CLI is the only place that turns failures into exit codes, so it
  catches `TermloadError` and nothing broader.
- Each subclass carries the input or remote detail needed for an actionable
  message.
"""

from __future__ import annotations


class TermloadError(Exception):
    """Base class for every failure raised by the core."""


class ValidationError(TermloadError):
    """Caller input is malformed. Raised before any network I/O."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class UnsupportedProfileError(TermloadError):
    """The active FHIR version has no encoding path for the operation."""

    def __init__(self, version: str) -> None:
        super().__init__(f"This command does not support FHIR version {version}")
        self.version = version


class TransportError(TermloadError):
    """The remote call failed (network error, non-2xx status, bad body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class UnrecognizedCodeError(TermloadError, ValueError):
    """A wire code is not part of a closed vocabulary."""

    def __init__(self, code: str | None, vocabulary: str) -> None:
        super().__init__(f"Unknown {vocabulary} code '{code}'")
        self.code = code
        self.vocabulary = vocabulary
