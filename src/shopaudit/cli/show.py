"""CLI command: shopaudit show <report> — print a saved report."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from shopaudit.engine.models import ResultStatus
from shopaudit.report.writer import load_report

console = Console(stderr=True)

STATUS_COLORS = {
    ResultStatus.PASS.value: "green",
    ResultStatus.FAIL.value: "red",
    ResultStatus.WARN.value: "yellow",
    ResultStatus.SKIPPED.value: "dim",
}


@click.command()
@click.argument("report", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--status",
    "-s",
    "statuses",
    multiple=True,
    type=click.Choice([s.value for s in ResultStatus], case_sensitive=False),
    help="Only show results with this status (repeatable).",
)
def show(report: str, statuses: tuple[str, ...]) -> None:
    """Print the summary and results of a saved compliance report."""
    try:
        data = load_report(report)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    print_report(data, {s.upper() for s in statuses})


def print_report(data: dict, statuses: set[str] | None = None) -> None:
    meta = data.get("meta", {})
    console.print(
        f"[bold]Compliance report[/bold] [cyan]{meta.get('siteId', '?')}[/cyan] "
        f"({meta.get('baseUrl', '')}) generated {meta.get('generatedAt', '?')}"
    )
    if meta.get("checklistTitle"):
        version = meta.get("checklistVersion")
        suffix = f" v{version}" if version else ""
        console.print(f"Checklist: {meta['checklistTitle']}{suffix}")

    results = [
        r for r in data.get("results", []) if not statuses or r.get("status") in statuses
    ]
    if results:
        table = Table(title="Results", show_lines=False)
        table.add_column("Status", style="bold", width=8)
        table.add_column("ID")
        table.add_column("Section", style="cyan")
        table.add_column("Severity")
        table.add_column("Reason", max_width=70)
        for r in results:
            status = r.get("status", "?")
            color = STATUS_COLORS.get(status, "white")
            table.add_row(
                f"[{color}]{status}[/{color}]",
                str(r.get("id", "")),
                str(r.get("sectionKey", "")),
                str(r.get("severity", "")),
                str(r.get("reason", "")),
            )
        console.print(table)

    summary = data.get("summary", {})
    console.print(
        f"\nTotal {summary.get('total', 0)}: "
        f"[green]{summary.get('pass', 0)} pass[/green], "
        f"[red]{summary.get('fail', 0)} fail[/red], "
        f"[yellow]{summary.get('warn', 0)} warn[/yellow], "
        f"[dim]{summary.get('skipped', 0)} skipped[/dim]"
    )
