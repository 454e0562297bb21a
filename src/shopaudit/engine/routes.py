"""Route resolver — maps each requirement to the page it is checked on."""

from __future__ import annotations

import re

from shopaudit.checklist.models import AutomationType, NormalizedRequirement
from shopaudit.site.profile import RouteKey, SiteProfile

# Automation types pinned to a route regardless of the free-text hint.
_FIXED_ROUTES: dict[AutomationType, RouteKey] = {
    AutomationType.COOKIE_BANNER_COMPLIANCE: RouteKey.HOME,
    AutomationType.NETWORK_SNIFFING: RouteKey.HOME,
    AutomationType.CHECKBOX_STATE: RouteKey.CHECKOUT,
    AutomationType.BUTTON_TEXT_EXACT: RouteKey.CHECKOUT,
}

# Ordered, first match wins. Substrings are matched against the lower-cased
# "where to verify" hint. "cart" and the bare "cos" both land on checkout.
_HINT_KEYWORDS: tuple[tuple[tuple[str, ...], RouteKey], ...] = (
    (("contact",), RouteKey.CONTACT),
    (("confiden", "privacy"), RouteKey.PRIVACY),
    (("cookie",), RouteKey.COOKIES),
    (("t&c", "termeni", "conditii", "condiții"), RouteKey.TERMS),
    (("checkout", "coș", "cos", "cart"), RouteKey.CHECKOUT),
    (("retur", "returns"), RouteKey.RETURNS),
    (("pagina produs", "produs"), RouteKey.PRODUCT),
)

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def resolve_route(req: NormalizedRequirement, profile: SiteProfile) -> RouteKey:
    """Resolve the route for a requirement. Deterministic and total."""
    kind = req.automation.type

    if kind == AutomationType.ELEMENT_VISIBILITY:
        mapping = profile.element_visibility_by_id.get(req.id)
        if mapping is not None and mapping.route is not None:
            return mapping.route

    fixed = _FIXED_ROUTES.get(kind)
    if fixed is not None:
        return fixed

    if kind == AutomationType.CURRENCY_CHECK:
        if profile.route_path(RouteKey.LISTING):
            return RouteKey.LISTING
        if profile.route_path(RouteKey.PRODUCT):
            return RouteKey.PRODUCT
        return RouteKey.HOME

    return route_from_hint(req.where_to_verify)


def route_from_hint(hint: str) -> RouteKey:
    """Keyword scan of a free-text hint; falls back to home."""
    where = (hint or "").lower()
    for needles, route in _HINT_KEYWORDS:
        if any(n in where for n in needles):
            return route
    return RouteKey.HOME


def join_url(base_url: str, route_path: str) -> str:
    if not route_path:
        return base_url
    if _ABSOLUTE_URL.match(route_path):
        return route_path
    base = base_url.rstrip("/")
    rel = route_path if route_path.startswith("/") else f"/{route_path}"
    return f"{base}{rel}"
