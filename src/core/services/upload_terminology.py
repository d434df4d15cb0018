"""Terminology upload orchestration.

This module owns the whole `upload-terminology` flow so the CLI only has to
parse flags and print. The sequence is fixed:

1. validate the raw arguments (no I/O yet),
2. check the FHIR version profile (still no I/O),
3. build the `Parameters` payload,
4. open one client with per-call auth and optional wire tracing,
5. call `$upload-external-code-system` exactly once at the server level,
6. render the response.

Every failure is raised as a `TermloadError` subclass; nothing is retried.
"""

from __future__ import annotations

import logging
import time
from contextlib import closing
from typing import Callable

from adapters.fhir_client import create_operation_client
from adapters.json_exporter import render_resource
from core.config import AppSettings
from core.domain.errors import UnrecognizedCodeError, UnsupportedProfileError, ValidationError
from core.domain.models import (
    OperationRequest,
    OperationResult,
    ParameterPayload,
    ParametersParameter,
    UploadArguments,
)
from core.domain.valuesets import FHIR_VERSION, FhirVersion
from core.interfaces.operation_client import OperationClient

UPLOAD_EXTERNAL_CODE_SYSTEM = "upload-external-code-system"

ACCEPTED_TARGET_PREFIXES: tuple[str, ...] = ("http", "file")

SUPPORTED_VERSIONS: frozenset[FhirVersion] = frozenset({FhirVersion.DSTU3})

ClientFactory = Callable[[AppSettings, OperationRequest, logging.Logger], OperationClient]

_log = logging.getLogger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _parse_basic_auth(value: str) -> tuple[str, str]:
    username, sep, password = value.partition(":")
    if not sep or not username:
        raise ValidationError(
            "basic_auth",
            "Invalid basic auth (--basic-auth) value, expected 'username:password'",
        )
    return username, password


def validate_arguments(
    arguments: UploadArguments, *, default_version: FhirVersion | None = None
) -> OperationRequest:
    """Turn raw arguments into an `OperationRequest` or raise `ValidationError`.

    Rules run in a fixed order and the first violation wins, so the message
    always names a single input.
    """

    target = arguments.target
    if _is_blank(target):
        raise ValidationError("target", "No target server (-t) specified")
    target = target.strip()
    if not target.startswith(ACCEPTED_TARGET_PREFIXES):
        raise ValidationError(
            "target",
            "Invalid target server specified, must begin with 'http' or 'file'",
        )

    if _is_blank(arguments.url):
        raise ValidationError("url", "No URL (-u) provided")

    if not arguments.data:
        raise ValidationError("data", "No data file (-d) provided")
    for position, path in enumerate(arguments.data, start=1):
        if _is_blank(path):
            raise ValidationError("data", f"Blank data file (-d) entry at position {position}")

    basic_auth = None
    if not _is_blank(arguments.basic_auth):
        if not _is_blank(arguments.bearer_token):
            raise ValidationError(
                "basic_auth",
                "Use either a bearer token (-b) or basic auth (--basic-auth), not both",
            )
        basic_auth = _parse_basic_auth(arguments.basic_auth.strip())

    if _is_blank(arguments.fhir_version):
        version = default_version or FhirVersion.default()
    else:
        try:
            version = FHIR_VERSION.decode(arguments.fhir_version.strip().lower())
        except UnrecognizedCodeError:
            raise ValidationError(
                "fhir_version",
                f"Invalid FHIR version (-f) '{arguments.fhir_version}', "
                f"expected one of: {', '.join(FHIR_VERSION.codes())}",
            ) from None

    bearer_token = None if _is_blank(arguments.bearer_token) else arguments.bearer_token.strip()

    return OperationRequest(
        target_server_url=target,
        vocabulary_uri=arguments.url.strip(),
        local_files=tuple(arguments.data),
        bearer_token=bearer_token,
        basic_auth=basic_auth,
        verbose=arguments.verbose,
        fhir_version=version,
    )


def check_profile(version: FhirVersion) -> None:
    """Fail fast when `version` has no encoding path for the upload operation."""

    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedProfileError(version.label())


def build_parameters(request: OperationRequest) -> ParameterPayload:
    """One `url` entry, then one `localfile` entry per file in input order."""

    entries = [ParametersParameter(name="url", value_uri=request.vocabulary_uri)]
    entries.extend(ParametersParameter(name="localfile", value_string=path) for path in request.local_files)
    return ParameterPayload(parameter=tuple(entries))


def upload_terminology(
    *,
    settings: AppSettings,
    arguments: UploadArguments,
    client_factory: ClientFactory | None = None,
    logger: logging.Logger | None = None,
) -> OperationResult:
    """Run one validated `$upload-external-code-system` call.

    Raises:
        ValidationError: raw arguments are malformed.
        UnsupportedProfileError: the selected FHIR version is not DSTU3.
        TransportError: the call failed or the response is unusable.
    """

    logger = logger or _log
    client_factory = client_factory or create_operation_client

    request = validate_arguments(arguments, default_version=settings.fhir_version)
    check_profile(request.fhir_version)
    parameters = build_parameters(request)

    started = time.perf_counter()
    with closing(client_factory(settings, request, logger)) as client:
        logger.info("Beginning upload - This may take a while...")
        response = client.invoke_server_operation(UPLOAD_EXTERNAL_CODE_SYSTEM, parameters)
    elapsed = time.perf_counter() - started

    logger.info("Upload complete!")
    rendered = render_resource(response)
    logger.debug("Response:\n%s", rendered)

    return OperationResult(
        operation=UPLOAD_EXTERNAL_CODE_SYSTEM,
        target_server_url=request.target_server_url,
        response=response,
        rendered=rendered,
        elapsed_seconds=elapsed,
    )
