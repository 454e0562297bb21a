"""Site profiles — per-site routes, localized labels and selector hints."""

from __future__ import annotations

import enum
import importlib.resources
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_PRESET_PREFIX = "preset:"


class RouteKey(enum.Enum):
    """Logical destinations a requirement can be evaluated against."""

    HOME = "home"
    CONTACT = "contact"
    PRIVACY = "privacy"
    COOKIES = "cookies"
    TERMS = "terms"
    RETURNS = "returns"
    LISTING = "listing"
    PRODUCT = "product"
    CART = "cart"
    CHECKOUT = "checkout"


@dataclass(frozen=True)
class Applicability:
    has_checkout: bool = True
    redirects_to_partners: bool = False
    requires_login_for_checkout: bool = False


@dataclass(frozen=True)
class Labels:
    """Localized label synonyms used to find buttons and checkboxes."""

    cookie_accept: tuple[str, ...] = ()
    cookie_reject: tuple[str, ...] = ()
    cookie_manage: tuple[str, ...] = ()
    terms_checkbox_labels: tuple[str, ...] = ()
    finalize_order_button_labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class SelectorHints:
    cookie_banner_root: tuple[str, ...] = ()
    checkout_terms_checkbox: tuple[str, ...] = ()
    checkout_finalize_button: tuple[str, ...] = ()
    currency_text_root: tuple[str, ...] = ()
    currency_ready_selector: tuple[str, ...] = ()


@dataclass(frozen=True)
class VisibilityMapping:
    """Selectors proving an element_visibility requirement, plus optional route."""

    selectors: tuple[str, ...] = ()
    route: RouteKey | None = None


@dataclass(frozen=True)
class SiteProfile:
    """Per-site constants consumed by the engine and the check strategies."""

    id: str
    base_url: str
    routes: dict[RouteKey, str] = field(default_factory=dict)
    applicability: Applicability = field(default_factory=Applicability)
    i18n: Labels = field(default_factory=Labels)
    selectors: SelectorHints = field(default_factory=SelectorHints)
    element_visibility_by_id: dict[str, VisibilityMapping] = field(
        default_factory=dict
    )

    def route_path(self, route: RouteKey) -> str | None:
        """Configured path for a route, or None when the route is not set."""
        return self.routes.get(route) or None


def load_profile(ref: str | Path) -> SiteProfile:
    """Load a profile from a YAML path, ``preset:<id>``, or a bare preset id."""
    ref_str = str(ref)
    if ref_str.startswith(_PRESET_PREFIX):
        return load_preset(ref_str[len(_PRESET_PREFIX) :])
    path = Path(ref_str)
    if path.suffix in (".yaml", ".yml") or path.exists():
        return _build_profile(_read_yaml(path.read_text(encoding="utf-8")))
    return load_preset(ref_str)


def load_profile_from_string(text: str) -> SiteProfile:
    return _build_profile(_read_yaml(text))


def load_preset(name: str) -> SiteProfile:
    """Load a packaged preset profile by site id."""
    filename = f"{name.strip().lower()}.yaml"
    pkg = importlib.resources.files("shopaudit.site.presets")
    resource = pkg.joinpath(filename)
    if not resource.is_file():
        raise ValueError(f"Unknown site profile preset: {name}")
    return _build_profile(_read_yaml(resource.read_text(encoding="utf-8")))


def _read_yaml(text: str) -> dict:
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("Site profile YAML must be a mapping")
    return data


def _build_profile(data: dict) -> SiteProfile:
    if "id" not in data or "base_url" not in data:
        raise ValueError("Site profile requires 'id' and 'base_url'")

    routes: dict[RouteKey, str] = {}
    for key, value in _mapping(data, "routes").items():
        route = _route_or_none(key)
        if route is not None and value:
            routes[route] = str(value)

    app = _mapping(data, "applicability")
    i18n = _mapping(data, "i18n")
    sel = _mapping(data, "selectors")

    visibility: dict[str, VisibilityMapping] = {}
    for req_id, mapping in _mapping(data, "element_visibility_by_id").items():
        if not isinstance(mapping, dict):
            continue
        visibility[str(req_id)] = VisibilityMapping(
            selectors=_strings(mapping.get("selectors")),
            route=_route_or_none(mapping.get("route")),
        )

    return SiteProfile(
        id=str(data["id"]).lower(),
        base_url=str(data["base_url"]),
        routes=routes,
        applicability=Applicability(
            has_checkout=bool(app.get("has_checkout", True)),
            redirects_to_partners=bool(app.get("redirects_to_partners", False)),
            requires_login_for_checkout=bool(
                app.get("requires_login_for_checkout", False)
            ),
        ),
        i18n=Labels(
            cookie_accept=_strings(i18n.get("cookie_accept")),
            cookie_reject=_strings(i18n.get("cookie_reject")),
            cookie_manage=_strings(i18n.get("cookie_manage")),
            terms_checkbox_labels=_strings(i18n.get("terms_checkbox_labels")),
            finalize_order_button_labels=_strings(
                i18n.get("finalize_order_button_labels")
            ),
        ),
        selectors=SelectorHints(
            cookie_banner_root=_strings(sel.get("cookie_banner_root")),
            checkout_terms_checkbox=_strings(sel.get("checkout_terms_checkbox")),
            checkout_finalize_button=_strings(sel.get("checkout_finalize_button")),
            currency_text_root=_strings(sel.get("currency_text_root")),
            currency_ready_selector=_strings(sel.get("currency_ready_selector")),
        ),
        element_visibility_by_id=visibility,
    )


def _mapping(data: dict, key: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping")
    return value


def _route_or_none(value: Any) -> RouteKey | None:
    if not value:
        return None
    try:
        return RouteKey(str(value).lower())
    except ValueError:
        logger.warning("Ignoring unknown route key %r", value)
        return None


def _strings(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)
