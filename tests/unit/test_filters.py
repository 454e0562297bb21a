"""Tests for run filters."""

from shopaudit.checklist.filters import (
    RunFilters,
    ScopeFilter,
    apply_filters,
    parse_csv,
    passes_filters,
)
from shopaudit.checklist.models import Scope, Severity


def _filters(**kwargs) -> RunFilters:
    defaults = dict(site_id="smart", scope=ScopeFilter.ALL, min_severity=Severity.SCAZUT)
    defaults.update(kwargs)
    return RunFilters(**defaults)


def test_mandatory_scope_rejects_best_practice(make_req):
    req = make_req(scope=Scope.BEST_PRACTICE)
    assert not passes_filters(req, _filters(scope=ScopeFilter.MANDATORY))
    assert passes_filters(req, _filters(scope=ScopeFilter.ALL))


def test_min_severity_threshold(make_req):
    filters = _filters(min_severity=Severity.RIDICAT)
    assert passes_filters(make_req(severity=Severity.CRITIC), filters)
    assert passes_filters(make_req(severity=Severity.RIDICAT), filters)
    assert not passes_filters(make_req(severity=Severity.MEDIU), filters)
    assert not passes_filters(make_req(severity=Severity.SCAZUT), filters)


def test_section_and_id_lists(make_req):
    req = make_req(req_id="A-1", section_key="alpha")
    assert passes_filters(req, _filters(section_keys=("alpha", "beta")))
    assert not passes_filters(req, _filters(section_keys=("beta",)))
    assert passes_filters(req, _filters(ids=("A-1",)))
    assert not passes_filters(req, _filters(ids=("A-2",)))


def test_conditions_are_anded(make_req):
    req = make_req(req_id="A-1", section_key="alpha", severity=Severity.MEDIU)
    filters = _filters(ids=("A-1",), min_severity=Severity.CRITIC)
    assert not passes_filters(req, filters)


def test_apply_filters_preserves_order(make_req):
    reqs = [
        make_req(req_id="3"),
        make_req(req_id="1", severity=Severity.SCAZUT),
        make_req(req_id="2"),
    ]
    kept = apply_filters(reqs, _filters(min_severity=Severity.MEDIU))
    assert [r.id for r in kept] == ["3", "2"]


def test_parse_csv():
    assert parse_csv(None) is None
    assert parse_csv("") is None
    assert parse_csv(" , ,") is None
    assert parse_csv(" a, b ,,c ") == ("a", "b", "c")


def test_from_env_defaults():
    filters = RunFilters.from_env("smart", Severity.RIDICAT, environ={})
    assert filters.site_id == "smart"
    assert filters.scope == ScopeFilter.MANDATORY
    assert filters.min_severity == Severity.RIDICAT
    assert filters.section_keys is None
    assert filters.ids is None


def test_from_env_overrides():
    env = {
        "COMPLIANCE_SITE": " Other ",
        "COMPLIANCE_SCOPE": "all",
        "COMPLIANCE_MIN_SEVERITY": "mediu",
        "COMPLIANCE_SECTIONS": "a,b",
        "COMPLIANCE_IDS": "X-1",
    }
    filters = RunFilters.from_env("smart", Severity.RIDICAT, environ=env)
    assert filters.site_id == "other"
    assert filters.scope == ScopeFilter.ALL
    assert filters.min_severity == Severity.MEDIU
    assert filters.section_keys == ("a", "b")
    assert filters.ids == ("X-1",)


def test_from_env_unknown_values_fall_back():
    env = {"COMPLIANCE_SCOPE": "everything", "COMPLIANCE_MIN_SEVERITY": "HIGH"}
    filters = RunFilters.from_env("smart", Severity.CRITIC, environ=env)
    assert filters.scope == ScopeFilter.MANDATORY
    assert filters.min_severity == Severity.CRITIC


def test_to_dict_omits_unset_lists():
    assert _filters().to_dict() == {
        "siteId": "smart",
        "scope": "ALL",
        "minSeverity": "SCAZUT",
    }
    data = _filters(section_keys=("a",), ids=("b",)).to_dict()
    assert data["sectionKeys"] == ["a"]
    assert data["ids"] == ["b"]


def test_from_env_blank_site_means_unset():
    filters = RunFilters.from_env("smart", Severity.RIDICAT, environ={"COMPLIANCE_SITE": "   "})
    assert filters.site_id == "smart"
