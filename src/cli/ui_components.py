"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Panels/tables are shared by the upload and config commands.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.errors import TermloadError, TransportError, UnsupportedProfileError, ValidationError
from core.domain.models import OperationResult


def print_banner(console: Console) -> None:
    """Print the welcome banner (stderr console keeps stdout pipeable)."""

    title = Text("termload", style="bold cyan")
    subtitle = Text("FHIR terminology upload", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(0, 4)))


def build_result_panel(result: OperationResult) -> Panel:
    """Summary panel for a completed upload."""

    body = Text()
    body.append("Operation: ", style="bold")
    body.append(f"${result.operation}\n")
    body.append("Server: ", style="bold")
    body.append(f"{result.target_server_url}\n")
    body.append("Response: ", style="bold")
    body.append(str(result.response.get("resourceType", "?")))
    body.append(f"\nElapsed: {result.elapsed_seconds:.2f}s", style="dim")
    return Panel(body, title=Text("Upload complete", style="bold green"), border_style="green")


def failure_title(exc: TermloadError) -> str:
    if isinstance(exc, ValidationError):
        return "Invalid input"
    if isinstance(exc, UnsupportedProfileError):
        return "Unsupported FHIR version"
    if isinstance(exc, TransportError):
        return "Upload failed"
    return "Error"


def print_failure(console: Console, exc: TermloadError) -> None:
    console.print(Text.assemble((f"{failure_title(exc)}: ", "bold red"), str(exc)))


def build_settings_table(rows: list[tuple[str, str, str]]) -> Table:
    table = Table(title="termload settings")
    table.add_column("Setting", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_column("Source", style="dim")
    for row in rows:
        table.add_row(*row)
    return table


def print_config_error(console: Console, exc: Exception) -> None:
    console.print(Text.assemble(("Invalid configuration: ", "bold red"), str(exc)))
