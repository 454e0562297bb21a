"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from shopaudit.checklist.filters import RunFilters, ScopeFilter
from shopaudit.checklist.loader import parse_automation_type
from shopaudit.checklist.models import (
    Automation,
    AutomationType,
    NormalizedRequirement,
    Scope,
    Severity,
)
from shopaudit.site.profile import RouteKey, SiteProfile


def make_requirement(
    req_id: str = "R-01",
    automation: str | None = "keyword_search",
    where: str = "",
    section_key: str = "general",
    severity: Severity = Severity.CRITIC,
    scope: Scope = Scope.MANDATORY,
    **raw,
) -> NormalizedRequirement:
    """Build a requirement; an unrecognized automation string becomes UNKNOWN."""
    if automation is None:
        auto = Automation(type=AutomationType.MISSING)
    else:
        parsed = parse_automation_type(automation)
        auto = Automation(
            type=parsed or AutomationType.UNKNOWN,
            raw_type=automation,
            raw={"type": automation, **raw},
        )
    return NormalizedRequirement(
        id=req_id,
        section_key=section_key,
        desc=f"{req_id} description",
        where_to_verify=where,
        severity=severity,
        scope=scope,
        automation=auto,
    )


@pytest.fixture
def make_req():
    return make_requirement


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def checklist_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "checklist.json"


@pytest.fixture
def profile_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "profile.yaml"


@pytest.fixture
def profile() -> SiteProfile:
    return SiteProfile(
        id="testshop",
        base_url="https://shop.example.md",
        routes={
            RouteKey.HOME: "/",
            RouteKey.CONTACT: "/contact",
            RouteKey.PRIVACY: "/privacy",
            RouteKey.LISTING: "/catalog",
        },
    )


@pytest.fixture
def all_filters() -> RunFilters:
    return RunFilters(
        site_id="testshop", scope=ScopeFilter.ALL, min_severity=Severity.SCAZUT
    )


@pytest.fixture
def page() -> MagicMock:
    page = MagicMock()
    page.url = "https://shop.example.md/"
    return page


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()
