"""CLI command: shopaudit plan — show what a run would check, without a browser."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from shopaudit.checklist.filters import apply_filters
from shopaudit.checklist.loader import load_checklist
from shopaudit.cli._context import resolve_inputs
from shopaudit.engine.runner import plan_checks

console = Console(stderr=True)


@click.command()
@click.pass_context
def plan(ctx: click.Context) -> None:
    """List in-scope requirements with their resolved route and session."""
    config, profile, checklist_path = resolve_inputs(ctx)
    try:
        checklist = load_checklist(checklist_path)
    except ValueError as e:
        raise click.ClickException(f"Invalid checklist {checklist_path}: {e}") from e

    requirements = apply_filters(checklist.requirements, config.filters)
    planned = plan_checks(requirements, profile)

    console.print(
        f"[bold]shopaudit[/bold] plan for [cyan]{profile.id}[/cyan] "
        f"({profile.base_url}) — {len(planned)} of "
        f"{len(checklist.requirements)} requirement(s) in scope\n"
    )

    table = Table(title="Planned checks", show_lines=False)
    table.add_column("ID", style="bold")
    table.add_column("Section", style="cyan")
    table.add_column("Severity")
    table.add_column("Scope")
    table.add_column("Automation")
    table.add_column("Route")
    table.add_column("Session")

    unrouted = 0
    for item in planned:
        req = item.requirement
        if item.route is None:
            route_cell = "[dim](context-free)[/dim]"
        elif item.url is None:
            route_cell = f"[red]{item.route.value} (not configured)[/red]"
            unrouted += 1
        else:
            route_cell = item.route.value
        table.add_row(
            req.id,
            req.section_key,
            req.severity.value,
            req.scope.value,
            req.automation.label,
            route_cell,
            "isolated" if item.isolated else "shared",
        )

    console.print(table)
    if unrouted:
        console.print(
            f"\n[yellow]{unrouted} check(s) will be SKIPPED: route not configured[/yellow]"
        )
