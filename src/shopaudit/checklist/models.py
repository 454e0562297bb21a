"""Requirement data models — immutable dataclasses used across the entire codebase."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class Severity(enum.Enum):
    """Requirement severity, highest first. Compare with ``rank``."""

    CRITIC = "CRITIC"
    RIDICAT = "RIDICAT"
    MEDIU = "MEDIU"
    SCAZUT = "SCAZUT"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITIC: 4,
    Severity.RIDICAT: 3,
    Severity.MEDIU: 2,
    Severity.SCAZUT: 1,
}


class Scope(enum.Enum):
    """Whether a requirement is legally required or only recommended."""

    MANDATORY = "MANDATORY"
    BEST_PRACTICE = "BEST_PRACTICE"


class AutomationType(enum.Enum):
    """Closed set of check strategies, plus two sentinels.

    ``UNKNOWN`` marks an automation block whose type was not recognized,
    ``MISSING`` marks a requirement with no automation block at all.
    """

    KEYWORD_SEARCH = "keyword_search"
    REGEX_SEARCH = "regex_search"
    LINK_PRESENCE = "link_presence"
    CHECKBOX_STATE = "checkbox_state"
    BUTTON_TEXT_EXACT = "button_text_exact"
    CURRENCY_CHECK = "currency_check"
    SSL_CHECK = "ssl_check"
    COOKIE_BANNER_COMPLIANCE = "cookie_banner_compliance"
    NETWORK_SNIFFING = "network_sniffing"
    ELEMENT_VISIBILITY = "element_visibility"
    MANUAL_CHECK = "manual_check"

    UNKNOWN = "unknown"
    MISSING = "missing"

    @property
    def is_sentinel(self) -> bool:
        return self in (AutomationType.UNKNOWN, AutomationType.MISSING)


CONCRETE_AUTOMATION_TYPES: tuple[AutomationType, ...] = tuple(
    t for t in AutomationType if not t.is_sentinel
)

# Types whose verdict depends on first-visit state (no cookies, no storage).
ISOLATED_AUTOMATION_TYPES: frozenset[AutomationType] = frozenset(
    {
        AutomationType.COOKIE_BANNER_COMPLIANCE,
        AutomationType.NETWORK_SNIFFING,
    }
)


@dataclass(frozen=True)
class Automation:
    """The automation descriptor attached to a requirement."""

    type: AutomationType
    raw_type: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def label(self) -> str:
        """Type name as shown in reports; the raw string for sentinels."""
        if self.type.is_sentinel:
            return self.raw_type or self.type.value
        return self.type.value


@dataclass(frozen=True)
class NormalizedRequirement:
    """A single checklist requirement after normalization."""

    id: str
    section_key: str
    desc: str
    where_to_verify: str
    severity: Severity
    scope: Scope
    automation: Automation
    section_title: str | None = None
    law: str | None = None
    risk: str | None = None

    @property
    def needs_isolated_session(self) -> bool:
        return self.automation.type in ISOLATED_AUTOMATION_TYPES


@dataclass(frozen=True)
class Checklist:
    """A normalized checklist document."""

    requirements: tuple[NormalizedRequirement, ...] = ()
    title: str | None = None
    version: str | None = None
