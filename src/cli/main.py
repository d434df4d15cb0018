"""termload CLI (Typer).

Why Typer:
- Declarative flags with types and help from the signature.
- Sub-apps (`config`) plug in without a hand-written dispatcher.

The commands only parse flags and print; the upload flow itself lives in
`core.services.upload_terminology`.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path

import typer
from pydantic import ValidationError as SettingsValidationError
from rich.console import Console

from adapters.json_exporter import export_resource_json
from cli import config_cmd
from cli.ui_components import build_result_panel, print_banner, print_config_error, print_failure
from core.config import AppSettings
from core.domain.errors import TermloadError
from core.domain.models import UploadArguments
from core.domain.valuesets import FHIR_VERSION
from core.logging_config import setup_logging
from core.services.upload_terminology import UPLOAD_EXTERNAL_CODE_SYSTEM, upload_terminology

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Upload terminology packages (e.g. a SNOMED CT ZIP) to FHIR servers.",
)
app.add_typer(config_cmd.app, name="config")

_err_console = Console(stderr=True)


def _installed_version() -> str:
    try:
        return package_version("termload")
    except PackageNotFoundError:
        return "unknown"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"termload {_installed_version()}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """termload: FHIR terminology upload tool."""


@app.command(
    name="upload-terminology",
    help=(
        "Uploads a terminology package (e.g. a SNOMED CT ZIP file) to a server, "
        f"using the ${UPLOAD_EXTERNAL_CODE_SYSTEM} operation."
    ),
)
def upload_terminology_command(
    target: str | None = typer.Option(
        None,
        "--target",
        "-t",
        help='Base URL for the target server (e.g. "http://example.com/fhir"). Required.',
    ),
    url: str | None = typer.Option(
        None,
        "--url",
        "-u",
        help="The code system URL associated with this upload (e.g. http://snomed.info/sct).",
    ),
    data: list[str] | None = typer.Option(
        None,
        "--data",
        "-d",
        help="Local file to upload (a raw file or a ZIP containing it). Repeatable.",
    ),
    bearer_token: str | None = typer.Option(
        None,
        "--bearer-token",
        "-b",
        help="Bearer token added to every request of this upload.",
    ),
    basic_auth: str | None = typer.Option(
        None,
        "--basic-auth",
        help="HTTP basic credentials as username:password.",
    ),
    fhir_version: str | None = typer.Option(
        None,
        "--fhir-version",
        "-f",
        help=f"FHIR version ({', '.join(FHIR_VERSION.codes())}). Defaults to the configured one.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the response resource to this JSON file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output (full request/response traces).",
    ),
) -> None:
    try:
        settings = AppSettings()
    except SettingsValidationError as exc:
        print_config_error(_err_console, exc)
        raise typer.Exit(code=1) from exc

    logger = setup_logging(verbose=verbose, level=settings.log_level, console=_err_console)

    # A configured default token only applies when no other credential was given.
    if bearer_token is None and basic_auth is None and settings.bearer_token is not None:
        bearer_token = settings.bearer_token.get_secret_value()

    arguments = UploadArguments(
        target=target,
        url=url,
        data=list(data or []),
        bearer_token=bearer_token,
        basic_auth=basic_auth,
        verbose=verbose,
        fhir_version=fhir_version,
    )

    print_banner(_err_console)
    try:
        result = upload_terminology(settings=settings, arguments=arguments, logger=logger)
    except TermloadError as exc:
        print_failure(_err_console, exc)
        raise typer.Exit(code=1) from exc

    _err_console.print(build_result_panel(result))
    typer.echo(result.rendered)

    if output is not None:
        path = export_resource_json(resource=result.response, output_path=output)
        logger.info("Response written to %s", path)


def run() -> None:
    app()
