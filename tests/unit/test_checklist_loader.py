"""Tests for checklist JSON loading and normalization."""

from pathlib import Path

import pytest

from shopaudit.checklist.loader import (
    fold_diacritics,
    load_checklist,
    load_checklist_from_string,
    normalize_checklist,
    parse_automation_type,
    parse_scope,
    parse_severity,
)
from shopaudit.checklist.models import AutomationType, Scope, Severity


def test_load_fixture_checklist(checklist_path: Path):
    checklist = load_checklist(checklist_path)
    assert checklist.title == "Test checklist"
    assert checklist.version == "0.9"
    assert [r.id for r in checklist.requirements] == [
        "C-01",
        "C-02",
        "K-01",
        "K-02",
        "K-03",
        "O-01",
        "O-02",
    ]


def test_fields_are_carried_over(checklist_path: Path):
    reqs = {r.id: r for r in load_checklist(checklist_path).requirements}
    c01 = reqs["C-01"]
    assert c01.section_key == "contact"
    assert c01.section_title == "Contact"
    assert c01.where_to_verify == "Pagina Contact"
    assert c01.law == "Legea 105/2003"
    assert c01.risk is None
    assert c01.severity == Severity.CRITIC
    assert c01.automation.type == AutomationType.KEYWORD_SEARCH
    assert c01.automation.raw["keywords"] == ["telefon"]


def test_diacritic_severity_and_lowercase_scope(checklist_path: Path):
    reqs = {r.id: r for r in load_checklist(checklist_path).requirements}
    assert reqs["C-02"].severity == Severity.SCAZUT
    assert reqs["C-02"].scope == Scope.BEST_PRACTICE


def test_unknown_and_missing_automation(checklist_path: Path):
    reqs = {r.id: r for r in load_checklist(checklist_path).requirements}
    k02 = reqs["K-02"]
    assert k02.automation.type == AutomationType.UNKNOWN
    assert k02.automation.raw_type == "bogus_type"
    assert k02.automation.label == "bogus_type"

    k03 = reqs["K-03"]
    assert k03.automation.type == AutomationType.MISSING
    assert k03.severity == Severity.MEDIU
    assert k03.scope == Scope.MANDATORY


def test_top_level_must_be_mapping():
    with pytest.raises(ValueError, match="mapping"):
        load_checklist_from_string("[1, 2, 3]")


def test_empty_document_yields_no_requirements():
    checklist = load_checklist_from_string("{}")
    assert checklist.requirements == ()
    assert checklist.title is None


def test_malformed_entries_degrade():
    data = {
        "sections": {
            "broken": "not a section",
            "bad_reqs": {"requirements": ["x"]},
            "ok": {
                "requirements": {
                    "A": "just a string",
                    "B": {"desc": 42, "automation": {}},
                    "C": {"automation": {"type": "  Keyword_Search "}},
                    "D": {"automation": {"keywords": ["x"]}},
                }
            },
        }
    }
    reqs = normalize_checklist(data)
    assert [r.id for r in reqs] == ["A", "B", "C", "D"]

    a, b, c, d = reqs
    assert a.desc == ""
    assert a.severity == Severity.MEDIU
    assert a.automation.type == AutomationType.MISSING
    assert b.desc == "42"
    assert b.automation.type == AutomationType.MISSING
    assert c.automation.type == AutomationType.KEYWORD_SEARCH
    assert d.automation.type == AutomationType.UNKNOWN
    assert d.automation.raw_type is None
    assert d.automation.label == "unknown"


def test_order_follows_sections_then_requirements():
    data = {
        "sections": {
            "z": {"requirements": {"z2": {}, "z1": {}}},
            "a": {"requirements": {"a1": {}}},
        }
    }
    assert [r.id for r in normalize_checklist(data)] == ["z2", "z1", "a1"]


def test_non_mapping_sections_ignored():
    assert normalize_checklist({"sections": ["a", "b"]}) == []


def test_fold_diacritics():
    assert fold_diacritics("Scăzut") == "Scazut"
    assert fold_diacritics("ȘȚșțŞŢşţ") == "STstSTst"
    assert fold_diacritics("Condiții îâ") == "Conditii ia"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("CRITIC", Severity.CRITIC),
        (" ridicat ", Severity.RIDICAT),
        ("Mediu", Severity.MEDIU),
        ("SCĂZUT", Severity.SCAZUT),
        ("high", None),
        (None, None),
    ],
)
def test_parse_severity(raw, expected):
    assert parse_severity(raw) == expected


def test_parse_scope():
    assert parse_scope("best_practice") == Scope.BEST_PRACTICE
    assert parse_scope("MANDATORY ") == Scope.MANDATORY
    assert parse_scope("optional") is None
    assert parse_scope(None) is None


def test_parse_automation_type_never_returns_sentinels():
    assert parse_automation_type("SSL_CHECK") == AutomationType.SSL_CHECK
    assert parse_automation_type("unknown") is None
    assert parse_automation_type("missing") is None
    assert parse_automation_type("") is None
    assert parse_automation_type(None) is None


def test_raw_automation_type_kept_verbatim():
    checklist = load_checklist_from_string(
        '{"sections": {"s": {"requirements": {'
        '"A": {"automation": {"type": " Bogus_Type "}},'
        '"B": {"automation": {"type": " SSL_Check "}}}}}}'
    )
    a, b = checklist.requirements
    assert a.automation.type == AutomationType.UNKNOWN
    assert a.automation.raw_type == " Bogus_Type "
    assert a.automation.label == " Bogus_Type "
    assert b.automation.type == AutomationType.SSL_CHECK
    assert b.automation.raw_type == " SSL_Check "
