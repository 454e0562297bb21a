"""SSL check — https base URL reachable without certificate errors."""

from __future__ import annotations

from playwright.sync_api import Error as PlaywrightError

from shopaudit.checklist.models import NormalizedRequirement
from shopaudit.engine.models import CheckOutcome, Evidence, ResultStatus
from shopaudit.engine.session import BrowserSession


def ssl_check(
    session: BrowserSession, req: NormalizedRequirement, base_url: str
) -> CheckOutcome:
    if not base_url.lower().startswith("https://"):
        return CheckOutcome(
            ResultStatus.FAIL,
            "ssl_check: baseUrl is not https://",
            Evidence(url=base_url),
        )

    with session.isolated_page(ignore_https_errors=False) as page:
        try:
            session.navigate(page, base_url)
        except PlaywrightError as e:
            return CheckOutcome(
                ResultStatus.FAIL,
                f"ssl_check: navigation failed ({e.message})",
                Evidence(url=base_url),
            )
        return CheckOutcome(
            ResultStatus.PASS,
            "ssl_check: https navigation succeeded without cert errors",
            Evidence(url=page.url),
        )
