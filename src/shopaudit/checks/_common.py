"""Helpers shared by the check strategies. Every wait here is bounded."""

from __future__ import annotations

import re
from collections.abc import Iterable

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page

from shopaudit.engine.models import CheckOutcome, Evidence, ResultStatus

_WHITESPACE = re.compile(r"\s+")
_SHORT_TOKEN = re.compile(r"^[A-Za-z0-9]{1,2}$")


def page_url(page: Page) -> str | None:
    try:
        return page.url
    except PlaywrightError:
        return None


def normalize_space(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def body_text(page: Page, timeout_ms: int = 5000) -> str:
    return page.locator("body").inner_text(timeout=timeout_ms)


def is_visible(locator: Locator, timeout_ms: int = 1000) -> bool:
    """Wait up to ``timeout_ms`` for the first match to become visible."""
    try:
        locator.first.wait_for(state="visible", timeout=timeout_ms)
    except PlaywrightError:
        return False
    return True


def first_visible(
    candidates: Iterable[Locator], timeout_ms: int = 1000
) -> Locator | None:
    for loc in candidates:
        if is_visible(loc, timeout_ms):
            return loc.first
    return None


def any_label_regex(
    labels: Iterable[str], bound_short_tokens: bool = False
) -> re.Pattern[str] | None:
    """Case-insensitive alternation of literal labels; None when empty.

    With ``bound_short_tokens``, one- or two-character ASCII labels (e.g.
    "OK") require word boundaries so they do not match inside other words.
    """
    parts = []
    for label in labels:
        label = label.strip()
        if not label:
            continue
        escaped = re.escape(label)
        if bound_short_tokens and _SHORT_TOKEN.match(label):
            escaped = rf"\b{escaped}\b"
        parts.append(escaped)
    if not parts:
        return None
    return re.compile("|".join(parts), re.IGNORECASE)


def skipped(reason: str, page: Page | None = None, **evidence) -> CheckOutcome:
    url = page_url(page) if page is not None else None
    return CheckOutcome(ResultStatus.SKIPPED, reason, Evidence(url=url, **evidence))
