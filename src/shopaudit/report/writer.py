"""Persist compliance reports as JSON under a per-site directory."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from shopaudit.engine.models import ComplianceReport

logger = logging.getLogger(__name__)

REPORT_PREFIX = "compliance-report"


def iso_timestamp(now: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    utc = now.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def report_stamp(now: datetime) -> str:
    """Filesystem-safe run stamp: the ISO timestamp with ``:`` and ``.`` → ``-``."""
    return iso_timestamp(now).replace(":", "-").replace(".", "-")


def site_report_dir(reports_dir: Path, site_id: str) -> Path:
    return reports_dir / site_id


def assets_subdir(stamp: str) -> str:
    """Screenshot folder for a run, relative to the report file."""
    return f"assets/{REPORT_PREFIX}.{stamp}"


def write_report(
    report: ComplianceReport, reports_dir: Path, stamp: str
) -> Path:
    """Write the report and return its path. OSError propagates to the caller."""
    out_dir = site_report_dir(reports_dir, report.meta.site_id)
    out_dir.mkdir(parents=True, exist_ok=True)

    path = out_dir / f"{REPORT_PREFIX}.{stamp}.json"
    text = json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote compliance report to %s", path)
    return path


def load_report(path: str | Path) -> dict:
    """Read a saved report back as a plain dict."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or "results" not in data:
        raise ValueError(f"Not a compliance report: {path}")
    return data
