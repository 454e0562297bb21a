"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from shopaudit import __version__


@click.group()
@click.version_option(version=__version__, prog_name="shopaudit")
@click.option(
    "--profile",
    "-p",
    help="Site profile: YAML path, preset:<id>, or a preset id. "
    "Defaults to COMPLIANCE_SITE.",
)
@click.option(
    "--checklist",
    "-c",
    type=click.Path(dir_okay=False),
    help="Checklist JSON path. Defaults to COMPLIANCE_CHECKLIST.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(
    ctx: click.Context,
    profile: str | None,
    checklist: str | None,
    verbose: bool,
) -> None:
    """shopaudit — evidence-backed compliance checks for e-commerce sites."""
    ctx.ensure_object(dict)
    ctx.obj["profile_ref"] = profile
    ctx.obj["checklist_path"] = checklist
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _register_commands() -> None:
    from shopaudit.cli.plan import plan  # noqa: F811
    from shopaudit.cli.run import run  # noqa: F811
    from shopaudit.cli.show import show  # noqa: F811

    main.add_command(run)
    main.add_command(plan)
    main.add_command(show)


_register_commands()
