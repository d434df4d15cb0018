"""Config commands: inspect and persist termload defaults."""

from __future__ import annotations

import os

import typer
from pydantic import ValidationError as SettingsValidationError
from rich.console import Console

from cli.ui_components import build_settings_table, print_config_error
from core.config import AppSettings, get_user_env_file, read_user_env_vars, write_user_env_vars
from core.domain.errors import UnrecognizedCodeError
from core.domain.valuesets import FHIR_VERSION

app = typer.Typer(no_args_is_help=True, help="Show or store default settings.")

_console = Console()
_err_console = Console(stderr=True)


def _mask(value: str | None) -> str:
    if not value:
        return "-"
    if len(value) <= 8:
        return "***"
    return f"{value[:4]}...{value[-2:]}"


def _source(env_key: str, stored: dict[str, str]) -> str:
    if env_key in os.environ:
        return "environment"
    if env_key in stored:
        return "user .env"
    return "default"


@app.command()
def show() -> None:
    """Print the effective settings (secrets masked)."""

    try:
        settings = AppSettings()
    except SettingsValidationError as exc:
        print_config_error(_err_console, exc)
        raise typer.Exit(code=1) from exc

    stored = read_user_env_vars()
    token = settings.bearer_token.get_secret_value() if settings.bearer_token else None

    rows = [
        ("fhir_version", settings.fhir_version.value, _source("TERMLOAD_FHIR_VERSION", stored)),
        ("bearer_token", _mask(token), _source("TERMLOAD_BEARER_TOKEN", stored)),
        ("http_timeout_seconds", f"{settings.http_timeout_seconds:g}", _source("TERMLOAD_HTTP_TIMEOUT_SECONDS", stored)),
        ("user_agent", settings.user_agent, _source("TERMLOAD_USER_AGENT", stored)),
        ("log_level", settings.log_level, _source("TERMLOAD_LOG_LEVEL", stored)),
    ]
    _console.print(build_settings_table(rows))
    _console.print(f"[dim]User config file:[/dim] {get_user_env_file()}")


@app.command(name="set")
def set_values(
    fhir_version: str | None = typer.Option(None, "--fhir-version", "-f", help="Default FHIR version code."),
    bearer_token: str | None = typer.Option(None, "--bearer-token", "-b", help="Default bearer token."),
    timeout: float | None = typer.Option(None, "--timeout", min=0.001, help="HTTP timeout in seconds."),
) -> None:
    """Store defaults in the user config .env."""

    values: dict[str, str | None] = {}
    if fhir_version is not None:
        try:
            version = FHIR_VERSION.decode(fhir_version.strip().lower())
        except UnrecognizedCodeError as exc:
            raise typer.BadParameter(
                f"{exc}; expected one of: {', '.join(FHIR_VERSION.codes())}",
                param_hint="--fhir-version",
            ) from exc
        values["TERMLOAD_FHIR_VERSION"] = FHIR_VERSION.encode(version)
    if bearer_token is not None:
        values["TERMLOAD_BEARER_TOKEN"] = bearer_token.strip()
    if timeout is not None:
        values["TERMLOAD_HTTP_TIMEOUT_SECONDS"] = f"{timeout:g}"

    if not values:
        raise typer.BadParameter("nothing to set; pass at least one option")

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {env_path}")
