"""Tests for the screenshot policy and capture."""

from pathlib import Path
from unittest.mock import MagicMock

from playwright.sync_api import Error as PlaywrightError

from shopaudit.engine.evidence import (
    ScreenshotMode,
    ScreenshotPolicy,
    capture_screenshot,
    safe_filename_part,
)
from shopaudit.engine.models import ResultStatus


def test_policy_parsing():
    assert ScreenshotPolicy.from_strings("").mode == ScreenshotMode.FAIL
    assert ScreenshotPolicy.from_strings("None ").mode == ScreenshotMode.NONE
    assert ScreenshotPolicy.from_strings("sometimes").mode == ScreenshotMode.FAIL
    policy = ScreenshotPolicy.from_strings("none", " A ,,B")
    assert policy.forced_ids == {"A", "B"}


def test_fail_mode_captures_fail_and_warn():
    policy = ScreenshotPolicy(mode=ScreenshotMode.FAIL)
    assert policy.should_capture("x", ResultStatus.FAIL)
    assert policy.should_capture("x", ResultStatus.WARN)
    assert not policy.should_capture("x", ResultStatus.PASS)
    assert not policy.should_capture("x", ResultStatus.SKIPPED)


def test_all_and_none_modes():
    assert ScreenshotPolicy(mode=ScreenshotMode.ALL).should_capture("x", ResultStatus.PASS)
    assert not ScreenshotPolicy(mode=ScreenshotMode.NONE).should_capture("x", ResultStatus.FAIL)


def test_forced_ids_override_mode():
    policy = ScreenshotPolicy(mode=ScreenshotMode.NONE, forced_ids=frozenset({"K-1"}))
    assert policy.should_capture("K-1", ResultStatus.PASS)
    assert not policy.should_capture("K-2", ResultStatus.FAIL)


def test_safe_filename_part():
    assert safe_filename_part("GDPR 1/ä") == "GDPR_1__"
    assert safe_filename_part("ok-1.2_x") == "ok-1.2_x"


def _writing_page() -> MagicMock:
    page = MagicMock()
    page.screenshot.side_effect = lambda path, full_page: Path(path).write_bytes(b"png")
    return page


def test_capture_writes_file(tmp_path: Path):
    page = _writing_page()
    shot = capture_screenshot(
        page, "A/1", ResultStatus.FAIL, tmp_path / "assets" / "run", "assets/run"
    )
    assert shot is not None
    assert shot.path == "assets/run/A_1.FAIL.png"
    assert shot.caption == "A/1 (FAIL)"
    assert (tmp_path / "assets" / "run" / "A_1.FAIL.png").exists()
    page.screenshot.assert_called_once()
    assert page.screenshot.call_args.kwargs["full_page"] is True


def test_capture_swallows_browser_errors(tmp_path: Path):
    page = MagicMock()
    page.screenshot.side_effect = PlaywrightError("Target closed")
    assert capture_screenshot(page, "A", ResultStatus.WARN, tmp_path, "assets") is None


def test_capture_returns_none_when_nothing_written(tmp_path: Path):
    page = MagicMock()
    assert capture_screenshot(page, "A", ResultStatus.WARN, tmp_path, "assets") is None
