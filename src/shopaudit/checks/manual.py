"""Manual checks are never automated."""

from __future__ import annotations

from playwright.sync_api import Page

from shopaudit.checklist.models import NormalizedRequirement
from shopaudit.engine.models import CheckOutcome, ResultStatus

MANUAL_CHECK_REASON = "manual_check: always SKIPPED"


def manual_check(page: Page | None, req: NormalizedRequirement) -> CheckOutcome:
    return CheckOutcome(ResultStatus.SKIPPED, MANUAL_CHECK_REASON)
