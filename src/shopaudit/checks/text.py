"""Text-level checks: keyword search, regex search and link presence."""

from __future__ import annotations

import re

from playwright.sync_api import Page

from shopaudit.checklist.models import NormalizedRequirement
from shopaudit.checks._common import body_text, normalize_space, page_url, skipped
from shopaudit.engine.models import CheckOutcome, Evidence, ResultStatus

_SNIPPET_RADIUS = 180
_MAX_ANCHORS = 300
_MAX_LINK_SAMPLES = 5

_JS_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def keyword_search_check(page: Page, req: NormalizedRequirement) -> CheckOutcome:
    """PASS when any configured keyword appears in the page body text."""
    keywords = req.automation.raw.get("keywords")
    if not isinstance(keywords, list) or not keywords:
        return skipped("keyword_search: missing automation.keywords[]", page)

    text = body_text(page).lower()
    needles = [str(k).lower() for k in keywords if str(k)]
    found = next((k for k in needles if k in text), None)
    url = page_url(page)

    if found is None:
        return CheckOutcome(
            ResultStatus.FAIL,
            f"keyword_search: none of {len(needles)} keywords found",
            Evidence(url=url, matched_snippets=[]),
        )
    return CheckOutcome(
        ResultStatus.PASS,
        f'keyword_search: matched keyword "{found}"',
        Evidence(url=url, matched_snippets=[found]),
    )


def regex_search_check(page: Page, req: NormalizedRequirement) -> CheckOutcome:
    """PASS when ``automation.pattern`` matches the page body text.

    ``automation.flags`` accepts JavaScript-style letters; i, m and s are
    honoured and the rest ignored. Defaults to ``i``.
    """
    pattern = str(req.automation.raw.get("pattern") or "")
    if not pattern:
        return skipped("regex_search: missing automation.pattern", page)

    flags_raw = str(req.automation.raw.get("flags") or "i")
    flags = 0
    for letter in flags_raw:
        flags |= _JS_FLAGS.get(letter, 0)

    try:
        regex = re.compile(pattern, flags)
    except re.error as e:
        return skipped(f"regex_search: invalid regex ({e})", page)

    text = body_text(page)
    match = regex.search(text)
    url = page_url(page)
    if match is None:
        return CheckOutcome(
            ResultStatus.FAIL,
            f"regex_search: no match for /{pattern}/{flags_raw}",
            Evidence(url=url),
        )

    start = max(0, match.start() - _SNIPPET_RADIUS)
    end = min(len(text), match.start() + _SNIPPET_RADIUS)
    return CheckOutcome(
        ResultStatus.PASS,
        f"regex_search: matched /{pattern}/{flags_raw}",
        Evidence(url=url, matched_snippets=[normalize_space(text[start:end])]),
    )


def link_presence_check(page: Page, req: NormalizedRequirement) -> CheckOutcome:
    """PASS when an anchor href contains ``automation.target_url``."""
    target = str(req.automation.raw.get("target_url") or "").strip()
    if not target:
        return skipped("link_presence: missing automation.target_url", page)

    needle = target.lower()
    anchors = page.locator("a[href]")
    matches: list[str] = []
    for i in range(min(anchors.count(), _MAX_ANCHORS)):
        href = anchors.nth(i).get_attribute("href")
        if href and needle in href.lower():
            matches.append(href)
            if len(matches) >= _MAX_LINK_SAMPLES:
                break

    url = page_url(page)
    if not matches:
        return CheckOutcome(
            ResultStatus.FAIL,
            f'link_presence: no link href contains "{target}"',
            Evidence(url=url, matched_snippets=[]),
        )
    return CheckOutcome(
        ResultStatus.PASS,
        f"link_presence: found {len(matches)} matching link(s)",
        Evidence(url=url, matched_snippets=matches),
    )
