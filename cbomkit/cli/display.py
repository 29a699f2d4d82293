"""Display components for CLI using Rich."""

import json

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cbomkit.layers.indexing.strategy import BuildKind
from cbomkit.layers.scanning.cbom import CBOMDocument
from cbomkit.layers.scanning.models import ScanResult
from cbomkit.models.progress import ProgressDispatcher, ProgressMessage, ProgressMessageType
from cbomkit.models.project import ProjectModule

console = Console()


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="green",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_modules(modules: list[ProjectModule], build_kind: BuildKind | None = None) -> None:
    """Display indexed modules in a table.

    Args:
        modules: Modules returned by the indexer.
        build_kind: Build kind of the first module, if any.
    """
    console.print()
    table = Table(title="[bold]Project Modules[/]", show_lines=False)
    table.add_column("Module", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Lines", justify="right")

    for module in modules:
        table.add_row(
            escape(module.identifier or "."),
            str(len(module.files)),
            str(module.line_count),
        )

    console.print(table)
    if build_kind is not None:
        console.print(f"[dim]Build system: {build_kind.value}[/]")


def show_scan_result(result: ScanResult, output: str | None = None) -> None:
    """Display the summary of a scan.

    Args:
        result: Scan result.
        output: File the CBOM was written to.
    """
    console.print()
    table = Table(title="[bold]Scan Result[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Scanned Files", str(result.scanned_files))
    table.add_row("Scanned Lines", str(result.scanned_lines))
    table.add_row("Duration", f"{result.duration:.2f}s")
    if result.cbom is not None:
        table.add_row("Components", str(len(result.cbom.bom.components)))
        table.add_row("Findings", str(result.cbom.finding_count()))
    if output:
        table.add_row("Output", escape(output))

    console.print(Panel(table, border_style="green"))


def show_cbom_stats(document: CBOMDocument) -> None:
    """Display component and finding counts of a CBOM."""
    console.print()
    table = Table(title="[bold]CBOM Statistics[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    bom = document.bom
    table.add_row("Serial Number", bom.serial_number or "-")
    table.add_row("Components", str(len(bom.components)))
    table.add_row("Dependencies", str(len(bom.dependencies)))
    table.add_row("Findings", str(document.finding_count()))

    if bom.metadata is not None:
        if bom.metadata.timestamp is not None:
            table.add_row("Timestamp", bom.metadata.timestamp.isoformat())
        for prop in bom.metadata.properties or []:
            table.add_row(escape(prop.name), escape(prop.value or ""))

    console.print(Panel(table, border_style="blue"))


class ConsoleProgressDispatcher(ProgressDispatcher):
    """Prints progress labels and new detections to the console."""

    def __init__(self, show_detections: bool = False) -> None:
        self.show_detections = show_detections
        self.detections = 0

    def send(self, message: ProgressMessage) -> None:
        if message.type == ProgressMessageType.LABEL:
            console.print(f"[dim]{escape(message.message)}[/]")
            return

        self.detections += 1
        if self.show_detections:
            component = json.loads(message.message)
            locations = ", ".join(
                f"{o.get('location')}:{o.get('line')}"
                for o in component.get("evidence", {}).get("occurrences", [])
            )
            console.print(f"  [green]+[/] {escape(component.get('name', '?'))} [dim]{escape(locations)}[/]")
