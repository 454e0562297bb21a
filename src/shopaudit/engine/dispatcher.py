"""Check dispatcher — routes a requirement to its strategy by automation type."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from playwright.sync_api import Page

from shopaudit.checklist.models import (
    CONCRETE_AUTOMATION_TYPES,
    AutomationType,
    NormalizedRequirement,
)
from shopaudit.checks import (
    button_text_exact_check,
    checkbox_state_check,
    cookie_banner_compliance_check,
    currency_check,
    element_visibility_check,
    keyword_search_check,
    link_presence_check,
    manual_check,
    network_sniffing_check,
    regex_search_check,
    ssl_check,
)
from shopaudit.checks._common import page_url
from shopaudit.engine.models import CheckOutcome, Evidence, ResultStatus
from shopaudit.engine.session import BrowserSession
from shopaudit.site.profile import SiteProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchContext:
    """Everything a strategy may need. Passed explicitly, never global."""

    page: Page
    session: BrowserSession
    profile: SiteProfile


_Adapter = Callable[[DispatchContext, NormalizedRequirement], CheckOutcome]

# Each adapter passes exactly the inputs its strategy declares.
_STRATEGIES: dict[AutomationType, _Adapter] = {
    AutomationType.MANUAL_CHECK: lambda ctx, req: manual_check(ctx.page, req),
    AutomationType.KEYWORD_SEARCH: lambda ctx, req: keyword_search_check(ctx.page, req),
    AutomationType.REGEX_SEARCH: lambda ctx, req: regex_search_check(ctx.page, req),
    AutomationType.LINK_PRESENCE: lambda ctx, req: link_presence_check(ctx.page, req),
    AutomationType.CHECKBOX_STATE: lambda ctx, req: checkbox_state_check(
        ctx.page, req, ctx.profile
    ),
    AutomationType.BUTTON_TEXT_EXACT: lambda ctx, req: button_text_exact_check(
        ctx.page, req, ctx.profile
    ),
    AutomationType.CURRENCY_CHECK: lambda ctx, req: currency_check(
        ctx.page, req, ctx.profile
    ),
    AutomationType.SSL_CHECK: lambda ctx, req: ssl_check(
        ctx.session, req, ctx.profile.base_url
    ),
    AutomationType.COOKIE_BANNER_COMPLIANCE: lambda ctx, req: cookie_banner_compliance_check(
        ctx.page, req, ctx.profile
    ),
    AutomationType.NETWORK_SNIFFING: lambda ctx, req: network_sniffing_check(
        ctx.page, req, ctx.profile
    ),
    AutomationType.ELEMENT_VISIBILITY: lambda ctx, req: element_visibility_check(
        ctx.page, req, ctx.profile
    ),
}

_unmapped = [t.value for t in CONCRETE_AUTOMATION_TYPES if t not in _STRATEGIES]
if _unmapped:
    raise RuntimeError(f"No check strategy registered for: {', '.join(_unmapped)}")


def dispatch_check(ctx: DispatchContext, req: NormalizedRequirement) -> CheckOutcome:
    """Run the strategy for ``req``. Never raises; always returns an outcome."""
    kind = req.automation.type

    if kind == AutomationType.MISSING:
        return _skip("missing automation definition", ctx)

    if kind == AutomationType.UNKNOWN:
        return _skip(
            f"unknown automation.type: {req.automation.raw_type or 'unknown'}", ctx
        )

    adapter = _STRATEGIES.get(kind)
    if adapter is None:
        return _skip(f"unsupported automation.type: {kind.value}", ctx)

    try:
        outcome = adapter(ctx, req)
    except Exception as e:  # noqa: BLE001
        logger.warning("Check %s (%s) raised: %s", req.id, kind.value, e, exc_info=True)
        return _skip(f"{kind.value}: check error ({type(e).__name__}: {e})", ctx)

    if not isinstance(outcome, CheckOutcome):
        logger.warning("Check %s (%s) returned %r", req.id, kind.value, outcome)
        return _skip(f"{kind.value}: check returned no verdict", ctx)
    return outcome


def _skip(reason: str, ctx: DispatchContext) -> CheckOutcome:
    return CheckOutcome(ResultStatus.SKIPPED, reason, Evidence(url=page_url(ctx.page)))
