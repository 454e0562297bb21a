"""Resolve config, site profile and checklist path from CLI options + env."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import click

from shopaudit.config import ShopAuditConfig
from shopaudit.site.profile import SiteProfile, load_profile


def resolve_inputs(ctx: click.Context) -> tuple[ShopAuditConfig, SiteProfile, Path]:
    """Return (config, profile, checklist path); raise ClickException on bad input."""
    config = ShopAuditConfig.load()
    profile_ref = ctx.obj.get("profile_ref") or config.site_id
    try:
        profile = load_profile(profile_ref)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Cannot load site profile '{profile_ref}': {e}") from e
    config.filters = replace(config.filters, site_id=profile.id)

    checklist_path = Path(ctx.obj.get("checklist_path") or config.checklist_path)
    if not checklist_path.is_file():
        raise click.ClickException(f"Checklist not found: {checklist_path}")
    return config, profile, checklist_path
