"""Currency disclosure check on listing/product pages."""

from __future__ import annotations

import re

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from shopaudit.checklist.models import NormalizedRequirement
from shopaudit.checks._common import body_text, is_visible, normalize_space, page_url, skipped
from shopaudit.engine.models import CheckOutcome, Evidence, ResultStatus
from shopaudit.site.profile import SiteProfile

_DEFAULT_EXPECTED = "MDL|lei"
_DEFAULT_ROOTS = ("#custom_products_content", "main", "body")
# Prices are often rendered client-side after DOMContentLoaded.
_READY_TIMEOUT_MS = 30_000
_SNIPPET_LEN = 220


def currency_check(
    page: Page, req: NormalizedRequirement, profile: SiteProfile | None = None
) -> CheckOutcome:
    """PASS when the ``automation.expected`` regex matches the product area text."""
    expected = str(req.automation.raw.get("expected") or _DEFAULT_EXPECTED)
    try:
        regex = re.compile(expected, re.IGNORECASE)
    except re.error as e:
        return skipped(f"currency_check: invalid expected pattern ({e})", page)

    roots = _DEFAULT_ROOTS
    ready: tuple[str, ...] = ()
    if profile is not None:
        roots = profile.selectors.currency_text_root or _DEFAULT_ROOTS
        ready = profile.selectors.currency_ready_selector

    root = page.locator(",".join(roots)).first
    is_visible(root, _READY_TIMEOUT_MS)
    if ready:
        is_visible(page.locator(",".join(ready)), _READY_TIMEOUT_MS)
    is_visible(root.get_by_text(regex), _READY_TIMEOUT_MS)

    try:
        text = root.inner_text(timeout=5000)
    except PlaywrightError:
        text = body_text(page)

    selectors_used = [f"currencyTextRoot={','.join(roots)}"]
    if ready:
        selectors_used.append(f"currencyReadySelector={','.join(ready)}")

    match = regex.search(text)
    url = page_url(page)
    if match is None:
        return CheckOutcome(
            ResultStatus.FAIL,
            f"currency_check: missing expected currency ({expected})",
            Evidence(url=url, matched_snippets=[], selectors_used=selectors_used),
        )

    snippet = normalize_space(text)[:_SNIPPET_LEN].strip()
    return CheckOutcome(
        ResultStatus.PASS,
        f"currency_check: matched ({expected})",
        Evidence(
            url=url,
            matched_snippets=[s for s in (match.group(0), snippet) if s],
            selectors_used=selectors_used,
        ),
    )
