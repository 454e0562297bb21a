"""Global configuration — env vars, defaults."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from shopaudit.checklist.filters import RunFilters
from shopaudit.checklist.models import Severity
from shopaudit.engine.evidence import ScreenshotPolicy

logger = logging.getLogger(__name__)

DEFAULT_SITE_ID = "smart"
DEFAULT_MIN_SEVERITY = Severity.RIDICAT

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ShopAuditConfig:
    """Run-wide configuration."""

    site_id: str = DEFAULT_SITE_ID
    checklist_path: Path = field(
        default_factory=lambda: Path("checklists") / "audit_master.json"
    )
    reports_dir: Path = field(default_factory=lambda: Path("reports"))
    screenshots: ScreenshotPolicy = field(default_factory=ScreenshotPolicy)
    navigation_timeout_ms: int = 30_000
    headless: bool = True
    filters: RunFilters = field(
        default_factory=lambda: RunFilters(
            site_id=DEFAULT_SITE_ID, min_severity=DEFAULT_MIN_SEVERITY
        )
    )

    @classmethod
    def load(cls, environ: Mapping[str, str] | None = None) -> ShopAuditConfig:
        """Load config from COMPLIANCE_* environment variables."""
        env = os.environ if environ is None else environ
        config = cls()

        site = env.get("COMPLIANCE_SITE")
        if site and site.strip():
            config.site_id = site.strip().lower()

        checklist = env.get("COMPLIANCE_CHECKLIST")
        if checklist:
            config.checklist_path = Path(checklist)

        reports = env.get("COMPLIANCE_REPORTS_DIR")
        if reports:
            config.reports_dir = Path(reports)

        config.screenshots = ScreenshotPolicy.from_strings(
            env.get("COMPLIANCE_SCREENSHOTS", ""),
            env.get("COMPLIANCE_SCREENSHOT_IDS", ""),
        )

        env_timeout = env.get("COMPLIANCE_NAV_TIMEOUT_MS")
        if env_timeout:
            try:
                config.navigation_timeout_ms = int(env_timeout)
            except ValueError:
                logger.warning(
                    "Ignoring invalid COMPLIANCE_NAV_TIMEOUT_MS=%r", env_timeout
                )

        headed = env.get("COMPLIANCE_HEADED", "")
        if headed.strip().lower() in _TRUTHY:
            config.headless = False

        config.filters = RunFilters.from_env(
            config.site_id, DEFAULT_MIN_SEVERITY, environ=env
        )
        return config
