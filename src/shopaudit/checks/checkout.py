"""Checkout checks: terms checkbox state and exact finalize-button text."""

from __future__ import annotations

from playwright.sync_api import Locator, Page

from shopaudit.checklist.models import NormalizedRequirement
from shopaudit.checks._common import (
    any_label_regex,
    first_visible,
    normalize_space,
    page_url,
    skipped,
)
from shopaudit.engine.models import CheckOutcome, Evidence, ResultStatus
from shopaudit.site.profile import SiteProfile


def checkbox_state_check(
    page: Page, req: NormalizedRequirement, profile: SiteProfile
) -> CheckOutcome:
    """Compare the terms checkbox against ``automation.expected_state``."""
    expected = str(req.automation.raw.get("expected_state") or "").lower().strip()
    if expected not in ("checked", "unchecked"):
        return skipped(
            "checkbox_state: missing/invalid automation.expected_state "
            "(checked|unchecked)",
            page,
        )

    selectors = list(profile.selectors.checkout_terms_checkbox)
    candidates: list[Locator] = [page.locator(s) for s in selectors]
    label_regex = any_label_regex(profile.i18n.terms_checkbox_labels)
    if label_regex is not None:
        candidates.append(page.get_by_role("checkbox", name=label_regex))

    checkbox = first_visible(candidates)
    if checkbox is None:
        return skipped(
            "checkbox_state: no checkbox candidate found/visible",
            page,
            selectors_used=selectors,
        )

    actual = "checked" if checkbox.is_checked() else "unchecked"
    evidence = Evidence(url=page_url(page), selectors_used=selectors)
    if actual != expected:
        return CheckOutcome(
            ResultStatus.FAIL,
            f"checkbox_state: expected {expected} but was {actual}",
            evidence,
        )
    return CheckOutcome(ResultStatus.PASS, f"checkbox_state: is {expected}", evidence)


def button_text_exact_check(
    page: Page, req: NormalizedRequirement, profile: SiteProfile
) -> CheckOutcome:
    """The finalize-order button text must equal one of the expected labels."""
    raw_expected = req.automation.raw.get("expected_text")
    if isinstance(raw_expected, list):
        expected_list = [str(t) for t in raw_expected]
    else:
        expected_list = list(profile.i18n.finalize_order_button_labels)

    name_regex = any_label_regex(expected_list)
    if name_regex is None:
        return skipped("button_text_exact: missing expected_text list", page)

    selectors = list(profile.selectors.checkout_finalize_button)
    candidates = [page.get_by_role("button", name=name_regex)]
    candidates.extend(page.locator(s) for s in selectors)

    button = first_visible(candidates)
    if button is None:
        return skipped(
            "button_text_exact: no button candidate found/visible",
            page,
            selectors_used=selectors,
        )

    actual = normalize_space(button.inner_text(timeout=2000)).lower()
    normalized = [normalize_space(t).lower() for t in expected_list]
    url = page_url(page)

    if actual not in normalized:
        return CheckOutcome(
            ResultStatus.FAIL,
            f'button_text_exact: actual="{actual}" did not match expected list',
            Evidence(
                url=url,
                selectors_used=selectors,
                matched_snippets=[actual, *normalized[:5]],
            ),
        )
    return CheckOutcome(
        ResultStatus.PASS,
        "button_text_exact: matched expected text",
        Evidence(url=url, selectors_used=selectors, matched_snippets=[actual]),
    )
