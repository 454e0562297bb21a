"""Tests for check dispatch by automation type."""

from unittest.mock import MagicMock, patch

import pytest

from shopaudit.checklist.loader import load_checklist_from_string
from shopaudit.checklist.models import CONCRETE_AUTOMATION_TYPES, AutomationType
from shopaudit.checks import MANUAL_CHECK_REASON
from shopaudit.engine import dispatcher
from shopaudit.engine.dispatcher import DispatchContext, dispatch_check
from shopaudit.engine.models import CheckOutcome, CheckResult, Evidence, ResultStatus


@pytest.fixture
def ctx(page, session, profile) -> DispatchContext:
    return DispatchContext(page=page, session=session, profile=profile)


def test_every_concrete_type_has_a_strategy():
    assert set(dispatcher._STRATEGIES) == set(CONCRETE_AUTOMATION_TYPES)


def test_missing_automation(ctx, make_req):
    outcome = dispatch_check(ctx, make_req(automation=None))
    assert outcome.status == ResultStatus.SKIPPED
    assert outcome.reason == "missing automation definition"
    assert outcome.evidence.url == "https://shop.example.md/"


def test_unknown_automation_keeps_raw_type(ctx, make_req):
    outcome = dispatch_check(ctx, make_req(automation="bogus_type"))
    assert outcome.status == ResultStatus.SKIPPED
    assert outcome.reason == "unknown automation.type: bogus_type"


def test_manual_check_always_skipped(ctx, make_req):
    outcome = dispatch_check(ctx, make_req(automation="manual_check"))
    assert outcome.status == ResultStatus.SKIPPED
    assert outcome.reason == MANUAL_CHECK_REASON


@pytest.mark.parametrize("kind", list(AutomationType))
def test_dispatch_is_total_and_never_raises(kind, ctx, make_req):
    def boom(ctx, req):
        raise RuntimeError("boom")

    failing = {t: boom for t in CONCRETE_AUTOMATION_TYPES}
    if kind == AutomationType.MISSING:
        req = make_req(automation=None)
    else:
        req = make_req(automation=kind.value)
        if kind == AutomationType.UNKNOWN:
            req = make_req(automation="whatever")

    with patch.dict(dispatcher._STRATEGIES, failing):
        outcome = dispatch_check(ctx, req)
    assert isinstance(outcome, CheckOutcome)
    assert outcome.status == ResultStatus.SKIPPED


@patch("shopaudit.engine.dispatcher.keyword_search_check")
def test_strategy_exception_becomes_skipped(mock_check: MagicMock, ctx, make_req):
    mock_check.side_effect = ValueError("bad keywords")
    outcome = dispatch_check(ctx, make_req(automation="keyword_search"))
    assert outcome.status == ResultStatus.SKIPPED
    assert outcome.reason == "keyword_search: check error (ValueError: bad keywords)"


@patch("shopaudit.engine.dispatcher.keyword_search_check")
def test_non_outcome_return_is_skipped(mock_check: MagicMock, ctx, make_req):
    mock_check.return_value = None
    outcome = dispatch_check(ctx, make_req(automation="keyword_search"))
    assert outcome.status == ResultStatus.SKIPPED
    assert "no verdict" in outcome.reason


@patch("shopaudit.engine.dispatcher.ssl_check")
def test_ssl_receives_session_and_base_url(mock_ssl: MagicMock, ctx, make_req):
    expected = CheckOutcome(ResultStatus.PASS, "ok", Evidence())
    mock_ssl.return_value = expected
    req = make_req(automation="ssl_check")
    assert dispatch_check(ctx, req) is expected
    mock_ssl.assert_called_once_with(ctx.session, req, "https://shop.example.md")


@patch("shopaudit.engine.dispatcher.checkbox_state_check")
def test_profile_strategies_receive_profile(mock_check: MagicMock, ctx, make_req):
    mock_check.return_value = CheckOutcome(ResultStatus.FAIL, "no")
    req = make_req(automation="checkbox_state")
    assert dispatch_check(ctx, req).status == ResultStatus.FAIL
    mock_check.assert_called_once_with(ctx.page, req, ctx.profile)


def test_unknown_reason_contains_literal_raw_type(ctx):
    checklist = load_checklist_from_string(
        '{"sections": {"s": {"requirements": {"A": {"automation": {"type": " Bogus_Type "}}}}}}'
    )
    req = checklist.requirements[0]
    outcome = dispatch_check(ctx, req)
    assert outcome.reason == "unknown automation.type:  Bogus_Type "
    assert CheckResult.from_outcome(req, outcome).to_dict()["meta"]["automationType"] == " Bogus_Type "
