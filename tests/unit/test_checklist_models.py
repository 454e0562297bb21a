"""Tests for checklist data models."""

from shopaudit.checklist.models import (
    CONCRETE_AUTOMATION_TYPES,
    ISOLATED_AUTOMATION_TYPES,
    Automation,
    AutomationType,
    Severity,
)


def test_severity_rank_order():
    ranks = [s.rank for s in (Severity.CRITIC, Severity.RIDICAT, Severity.MEDIU, Severity.SCAZUT)]
    assert ranks == [4, 3, 2, 1]


def test_concrete_types_exclude_sentinels():
    assert len(CONCRETE_AUTOMATION_TYPES) == 11
    assert AutomationType.UNKNOWN not in CONCRETE_AUTOMATION_TYPES
    assert AutomationType.MISSING not in CONCRETE_AUTOMATION_TYPES


def test_isolated_types():
    assert ISOLATED_AUTOMATION_TYPES == {
        AutomationType.COOKIE_BANNER_COMPLIANCE,
        AutomationType.NETWORK_SNIFFING,
    }


def test_automation_label():
    assert Automation(AutomationType.SSL_CHECK, raw_type="ssl_check").label == "ssl_check"
    assert Automation(AutomationType.UNKNOWN, raw_type="Fancy").label == "Fancy"
    assert Automation(AutomationType.MISSING).label == "missing"


def test_needs_isolated_session(make_req):
    assert make_req(automation="network_sniffing").needs_isolated_session
    assert make_req(automation="cookie_banner_compliance").needs_isolated_session
    assert not make_req(automation="keyword_search").needs_isolated_session
    assert not make_req(automation=None).needs_isolated_session
