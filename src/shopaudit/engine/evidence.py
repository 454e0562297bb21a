"""Evidence capture — screenshot policy and best-effort full-page captures."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from shopaudit.engine.models import ResultStatus, Screenshot

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


class ScreenshotMode(enum.Enum):
    ALL = "all"
    FAIL = "fail"
    NONE = "none"


@dataclass(frozen=True)
class ScreenshotPolicy:
    """Decides which results get a screenshot attached."""

    mode: ScreenshotMode = ScreenshotMode.FAIL
    forced_ids: frozenset[str] = frozenset()

    @classmethod
    def from_strings(cls, mode: str, forced_ids: str = "") -> ScreenshotPolicy:
        """Parse ``all``/``fail``/``none`` and a comma-separated id list.

        An unrecognized or empty mode means ``fail``.
        """
        try:
            parsed = ScreenshotMode((mode or "fail").strip().lower())
        except ValueError:
            logger.warning("Unknown screenshot mode %r — using 'fail'", mode)
            parsed = ScreenshotMode.FAIL
        ids = frozenset(p.strip() for p in (forced_ids or "").split(",") if p.strip())
        return cls(mode=parsed, forced_ids=ids)

    def should_capture(self, req_id: str, status: ResultStatus) -> bool:
        if req_id in self.forced_ids:
            return True
        if self.mode == ScreenshotMode.ALL:
            return True
        return self.mode == ScreenshotMode.FAIL and status in (
            ResultStatus.FAIL,
            ResultStatus.WARN,
        )


def safe_filename_part(value: str) -> str:
    return _UNSAFE_CHARS.sub("_", value)


def capture_screenshot(
    page: Page,
    req_id: str,
    status: ResultStatus,
    assets_dir: Path,
    assets_rel: str,
) -> Screenshot | None:
    """Take a full-page screenshot. Returns None on any failure; never raises.

    ``assets_rel`` is the assets directory relative to the report file, so
    the returned path stays valid wherever the reports folder is moved.
    """
    file_name = f"{safe_filename_part(req_id)}.{safe_filename_part(status.value)}.png"
    out_path = assets_dir / file_name
    try:
        assets_dir.mkdir(parents=True, exist_ok=True)
        page.screenshot(path=str(out_path), full_page=True)
    except (PlaywrightError, OSError) as e:
        logger.debug("Screenshot for %s failed: %s", req_id, e)
        return None

    if not out_path.exists():
        logger.debug("Screenshot for %s was not written", req_id)
        return None
    return Screenshot(
        path=f"{assets_rel}/{file_name}".replace("\\", "/"),
        caption=f"{req_id} ({status.value})",
    )
