"""CLI command: shopaudit run — drive a browser through the checklist."""

from __future__ import annotations

import sys

import click
from playwright.sync_api import Error as PlaywrightError
from rich.console import Console

from shopaudit.cli._context import resolve_inputs
from shopaudit.cli.show import print_report
from shopaudit.engine.runner import ComplianceRunner
from shopaudit.engine.session import open_browser

console = Console(stderr=True)


@click.command()
@click.option("--headed", is_flag=True, help="Show the browser window.")
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 when any requirement FAILs.",
)
@click.pass_context
def run(ctx: click.Context, headed: bool, strict: bool) -> None:
    """Run the compliance checklist against the configured site."""
    config, profile, checklist_path = resolve_inputs(ctx)
    headless = config.headless and not headed

    console.print(
        f"[bold]shopaudit[/bold] checking [cyan]{profile.base_url}[/cyan] "
        f"(site [cyan]{profile.id}[/cyan], scope {config.filters.scope.value}, "
        f"min severity {config.filters.min_severity.value})\n"
    )

    try:
        with open_browser(
            headless=headless, navigation_timeout_ms=config.navigation_timeout_ms
        ) as (session, page):
            runner = ComplianceRunner(
                page=page,
                session=session,
                profile=profile,
                filters=config.filters,
                checklist_path=checklist_path,
                reports_dir=config.reports_dir,
                screenshots=config.screenshots,
            )
            report = runner.run()
    except ValueError as e:
        raise click.ClickException(f"Invalid checklist {checklist_path}: {e}") from e
    except PlaywrightError as e:
        console.print(f"[red]Browser error:[/red] {e.message}")
        sys.exit(2)
    except OSError as e:
        console.print(f"[red]Could not write report:[/red] {e}")
        sys.exit(2)

    print_report(report.to_dict())
    console.print(f"\nReport: [cyan]{runner.report_path}[/cyan]")

    if strict and report.summary.failed > 0:
        console.print(f"\n[red]{report.summary.failed} requirement(s) failed[/red]")
        sys.exit(1)
