"""Consent checks: cookie banner choices and trackers before consent.

Both run in an isolated session so the page is seen as a first visit.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Frame, Locator, Page, Request

from shopaudit.checklist.models import NormalizedRequirement
from shopaudit.checks._common import any_label_regex, is_visible, normalize_space, page_url
from shopaudit.engine.models import CheckOutcome, Evidence, ResultStatus
from shopaudit.site.profile import SiteProfile

logger = logging.getLogger(__name__)

COOKIE_WORD = re.compile(
    r"cookie|cookies|fișiere cookie|fisiere cookie|файл(ы)? cookie|куки",
    re.IGNORECASE,
)

CLICKABLE_SELECTOR = (
    'button, a, [role="button"], [role="link"], input[type="button"], '
    'input[type="submit"], [onclick], [tabindex], [class*="btn" i], '
    '[class*="button" i]'
)

TRACKER_NEEDLES = (
    "googletagmanager",
    "google-analytics",
    "doubleclick",
    "facebook",
    "hotjar",
    "clarity.ms",
)

_MAX_CLICKABLES = 80
_MAX_SAMPLES = 25
_MAX_REQUESTS = 200
_DEFAULT_SNIFF_MS = 5000

# Text, aria-label and (for inputs) value of a clickable, whitespace-collapsed.
_DESCRIBE_JS = """(n) => {
  const clean = (s) => (s || '').replace(/\\s+/g, ' ').trim();
  const tag = n.tagName.toLowerCase();
  return [
    clean(n.textContent),
    clean(n.getAttribute('aria-label')),
    tag === 'input' ? clean(n.getAttribute('value')) : '',
  ].filter(Boolean).join(' | ');
}"""


@dataclass
class _Action:
    locator: Locator
    label: str


def cookie_banner_compliance_check(
    page: Page, req: NormalizedRequirement, profile: SiteProfile
) -> CheckOutcome:
    """PASS iff Accept, Reject and Manage choices are all visible in the banner."""
    accept_re = any_label_regex(profile.i18n.cookie_accept, bound_short_tokens=True)
    reject_re = any_label_regex(profile.i18n.cookie_reject, bound_short_tokens=True)
    manage_re = any_label_regex(profile.i18n.cookie_manage, bound_short_tokens=True)

    page.wait_for_timeout(500)

    root: Locator | None = None
    root_label = "body"
    frame_url = page_url(page)
    accept: _Action | None = None
    if accept_re is not None:
        # Some consent managers render inside iframes.
        for frame in page.frames:
            found = _find_banner(frame, profile, accept_re)
            if found is not None:
                root, root_label, accept = found
                frame_url = frame.url
                break
    if root is None:
        root = page.locator("body")

    if accept is None:
        accept = _find_action(root, accept_re)
    reject = _find_action(root, reject_re)
    manage = _find_action(root, manage_re)

    accept_ok = accept is not None and is_visible(accept.locator, 4000)
    reject_ok = reject is not None and is_visible(reject.locator)
    manage_ok = manage is not None and is_visible(manage.locator)

    selectors_used = [f"cookieBannerRoot={root_label}", f"frameUrl={frame_url}"]
    if accept_ok and reject_ok and manage_ok:
        return CheckOutcome(
            ResultStatus.PASS,
            "cookie_banner_compliance: Accept/Reject/Manage all visible",
            Evidence(url=page_url(page), selectors_used=selectors_used),
        )

    snippets = [
        f"{name}Candidate={action.label}"
        for name, action in (("accept", accept), ("reject", reject), ("manage", manage))
        if action is not None
    ]
    snippets.extend(_sample_clickables(root))
    return CheckOutcome(
        ResultStatus.FAIL,
        "cookie_banner_compliance: missing buttons "
        f"(accept={_js_bool(accept_ok)}, reject={_js_bool(reject_ok)}, "
        f"manage={_js_bool(manage_ok)})",
        Evidence(
            url=page_url(page),
            selectors_used=selectors_used,
            matched_snippets=snippets,
        ),
    )


def network_sniffing_check(
    page: Page, req: NormalizedRequirement, profile: SiteProfile
) -> CheckOutcome:
    """Record requests for a window and flag known trackers fired before consent."""
    try:
        duration_ms = int(req.automation.raw.get("duration_ms") or _DEFAULT_SNIFF_MS)
    except (TypeError, ValueError):
        duration_ms = _DEFAULT_SNIFF_MS

    urls: list[str] = []

    def on_request(request: Request) -> None:
        if request.url:
            urls.append(request.url)

    page.on("request", on_request)
    try:
        page.wait_for_timeout(duration_ms)
    finally:
        page.remove_listener("request", on_request)

    sample = urls[:_MAX_REQUESTS]
    trackers = [u for u in sample if any(n in u.lower() for n in TRACKER_NEEDLES)]

    if trackers:
        return CheckOutcome(
            ResultStatus.FAIL,
            "network_sniffing: detected trackers before consent window "
            f"({len(trackers)} URL(s))",
            Evidence(url=page_url(page), requests_sample=trackers),
        )

    if not _banner_likely_present(page, profile):
        return CheckOutcome(
            ResultStatus.WARN,
            "network_sniffing: no trackers detected, but cookie banner not "
            "detected (cannot confirm consent gating)",
            Evidence(url=page_url(page), requests_sample=sample[:30]),
        )

    return CheckOutcome(
        ResultStatus.PASS,
        "network_sniffing: no known trackers detected before consent window",
        Evidence(url=page_url(page), requests_sample=sample[:30]),
    )


def _find_banner(
    frame: Frame, profile: SiteProfile, accept_re: re.Pattern[str]
) -> tuple[Locator, str, _Action] | None:
    """Locate a banner root that actually contains a visible Accept action."""
    for role in ("dialog", "alertdialog"):
        dialog = frame.get_by_role(role).filter(has_text=COOKIE_WORD).first
        if not is_visible(dialog, 1500):
            continue
        accept = _find_action(dialog, accept_re)
        if accept is not None and is_visible(accept.locator):
            return dialog, f"role={role} + hasText(cookie)", accept

    roots = profile.selectors.cookie_banner_root
    if roots:
        is_visible(frame.locator(",".join(roots)), 4000)
    for selector in roots:
        root = frame.locator(selector).first
        if not is_visible(root):
            continue
        accept = _find_action(root, accept_re)
        if accept is not None and is_visible(accept.locator):
            return root, selector, accept
    return None


def _find_action(container: Locator, name: re.Pattern[str] | None) -> _Action | None:
    if name is None:
        return None

    for role in ("button", "link"):
        candidate = container.get_by_role(role, name=name).first
        if is_visible(candidate, 500):
            label = _text_of(candidate) or f"role={role}(nameMatch)"
            return _Action(candidate, label)

    clickables = container.locator(CLICKABLE_SELECTOR)
    for i in range(min(_safe_count(clickables), _MAX_CLICKABLES)):
        el = clickables.nth(i)
        description = _describe(el)
        if description and name.search(description):
            return _Action(el, description)
    return None


def _sample_clickables(container: Locator) -> list[str]:
    """Distinct clickable labels inside the root, for diagnosing a FAIL."""
    clickables = container.locator(CLICKABLE_SELECTOR)
    seen: dict[str, None] = {}
    for i in range(min(_safe_count(clickables), 60)):
        description = _describe(clickables.nth(i))
        if description:
            seen.setdefault(description, None)
            if len(seen) >= _MAX_SAMPLES:
                break
    return list(seen)


def _banner_likely_present(page: Page, profile: SiteProfile) -> bool:
    accept_re = any_label_regex(profile.i18n.cookie_accept, bound_short_tokens=True)
    if accept_re is None:
        return False

    def has_accept(container: Locator | Page) -> bool:
        button = container.get_by_role("button", name=accept_re)
        link = container.get_by_role("link", name=accept_re)
        return is_visible(button.or_(link), 500)

    for role in ("dialog", "alertdialog"):
        dialog = page.get_by_role(role).filter(has_text=COOKIE_WORD).first
        if is_visible(dialog, 500) and has_accept(dialog):
            return True

    for selector in profile.selectors.cookie_banner_root:
        root = page.locator(selector).first
        if is_visible(root, 500) and has_accept(root):
            return True

    # Last resort: an accept action anywhere on the page.
    return has_accept(page)


def _describe(el: Locator) -> str:
    try:
        return normalize_space(el.evaluate(_DESCRIBE_JS, timeout=1000) or "")
    except PlaywrightError:
        return ""


def _text_of(locator: Locator) -> str:
    try:
        return normalize_space(locator.text_content(timeout=500) or "")
    except PlaywrightError:
        return ""


def _safe_count(locator: Locator) -> int:
    try:
        return locator.count()
    except PlaywrightError as e:
        logger.debug("Could not count clickables: %s", e)
        return 0


def _js_bool(value: bool) -> str:
    return "true" if value else "false"
