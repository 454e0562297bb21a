"""Element visibility check driven by per-requirement selectors in the site profile."""

from __future__ import annotations

from playwright.sync_api import Page

from shopaudit.checklist.models import NormalizedRequirement
from shopaudit.checks._common import is_visible, page_url, skipped
from shopaudit.engine.models import CheckOutcome, Evidence, ResultStatus
from shopaudit.site.profile import SiteProfile


def element_visibility_check(
    page: Page, req: NormalizedRequirement, profile: SiteProfile
) -> CheckOutcome:
    mapping = profile.element_visibility_by_id.get(req.id)
    if mapping is None or not mapping.selectors:
        return skipped(
            "element_visibility: no selectors mapped for this requirement id "
            "in site profile",
            page,
        )

    for selector in mapping.selectors:
        if is_visible(page.locator(selector), 2000):
            return CheckOutcome(
                ResultStatus.PASS,
                "element_visibility: element is visible",
                Evidence(url=page_url(page), selectors_used=[selector]),
            )

    return CheckOutcome(
        ResultStatus.FAIL,
        "element_visibility: none of the mapped selectors were visible",
        Evidence(url=page_url(page), selectors_used=list(mapping.selectors)),
    )
