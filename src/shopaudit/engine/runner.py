"""Compliance runner — load, filter, route, check, summarize, persist."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from shopaudit.checklist.filters import RunFilters, apply_filters
from shopaudit.checklist.loader import load_checklist
from shopaudit.checklist.models import AutomationType, NormalizedRequirement
from shopaudit.checks import MANUAL_CHECK_REASON
from shopaudit.checks._common import page_url
from shopaudit.engine.dispatcher import DispatchContext, dispatch_check
from shopaudit.engine.evidence import ScreenshotPolicy, capture_screenshot
from shopaudit.engine.models import (
    CheckOutcome,
    CheckResult,
    ComplianceReport,
    Evidence,
    ReportMeta,
    ResultStatus,
    Summary,
)
from shopaudit.engine.routes import join_url, resolve_route
from shopaudit.engine.session import BrowserSession
from shopaudit.report.writer import (
    assets_subdir,
    iso_timestamp,
    report_stamp,
    site_report_dir,
    write_report,
)
from shopaudit.site.profile import RouteKey, SiteProfile

logger = logging.getLogger(__name__)

# Checks that do not depend on any navigated page state.
_CONTEXT_FREE_TYPES = frozenset({AutomationType.SSL_CHECK})


@dataclass(frozen=True)
class PlannedCheck:
    """Where a requirement will run. ``route`` is None for context-free checks."""

    requirement: NormalizedRequirement
    route: RouteKey | None
    url: str | None

    @property
    def isolated(self) -> bool:
        return self.requirement.needs_isolated_session


def plan_checks(
    requirements: Iterable[NormalizedRequirement], profile: SiteProfile
) -> list[PlannedCheck]:
    """Resolve route and target URL per requirement without touching a browser."""
    planned: list[PlannedCheck] = []
    for req in requirements:
        if req.automation.type in _CONTEXT_FREE_TYPES:
            planned.append(PlannedCheck(req, None, profile.base_url))
            continue
        route = resolve_route(req, profile)
        path = profile.route_path(route)
        url = join_url(profile.base_url, path) if path else None
        planned.append(PlannedCheck(req, route, url))
    return planned


def group_by_route(
    requirements: Iterable[NormalizedRequirement], profile: SiteProfile
) -> dict[RouteKey, list[NormalizedRequirement]]:
    """Partition by resolved route; groups keep first-appearance and requirement order."""
    groups: dict[RouteKey, list[NormalizedRequirement]] = {}
    for req in requirements:
        groups.setdefault(resolve_route(req, profile), []).append(req)
    return groups


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ComplianceRunner:
    """Runs one compliance pass for a site and writes the JSON report.

    Checks run sequentially: requirements on the same route share one
    navigated page. Consent-related checks get a fresh isolated context per
    route, closed before the next route is visited.
    """

    def __init__(
        self,
        page: Page,
        session: BrowserSession,
        profile: SiteProfile,
        filters: RunFilters,
        checklist_path: str | Path,
        reports_dir: str | Path = "reports",
        screenshots: ScreenshotPolicy | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._page = page
        self._session = session
        self._profile = profile
        self._filters = filters
        self._checklist_path = Path(checklist_path)
        self._reports_dir = Path(reports_dir)
        self._screenshots = screenshots or ScreenshotPolicy()
        self._clock = clock
        self._assets_dir = self._reports_dir
        self._assets_rel = ""
        self.report_path: Path | None = None

    def run(self) -> ComplianceReport:
        stamp = report_stamp(self._clock())
        self._assets_rel = assets_subdir(stamp)
        self._assets_dir = (
            site_report_dir(self._reports_dir, self._profile.id) / self._assets_rel
        )

        logger.info("Loading checklist %s", self._checklist_path)
        checklist = load_checklist(self._checklist_path)
        requirements = apply_filters(checklist.requirements, self._filters)
        logger.info(
            "%d of %d requirements in scope for site '%s'",
            len(requirements),
            len(checklist.requirements),
            self._profile.id,
        )

        results: list[CheckResult] = []

        shared = DispatchContext(self._page, self._session, self._profile)
        for req in requirements:
            if req.automation.type in _CONTEXT_FREE_TYPES:
                logger.debug("Context-free check %s", req.id)
                results.append(CheckResult.from_outcome(req, dispatch_check(shared, req)))

        page_requirements = [
            r for r in requirements if r.automation.type not in _CONTEXT_FREE_TYPES
        ]
        for route, reqs in group_by_route(page_requirements, self._profile).items():
            results.extend(self._run_route(route, reqs))

        report = ComplianceReport(
            meta=ReportMeta(
                site_id=self._profile.id,
                base_url=self._profile.base_url,
                generated_at=iso_timestamp(self._clock()),
                filters=self._filters.to_dict(),
                checklist_version=checklist.version,
                checklist_title=checklist.title,
            ),
            summary=Summary.from_statuses([r.status for r in results]),
            results=tuple(results),
        )
        self.report_path = write_report(report, self._reports_dir, stamp)
        logger.info(
            "Summary: total=%d pass=%d fail=%d warn=%d skipped=%d",
            report.summary.total,
            report.summary.passed,
            report.summary.failed,
            report.summary.warned,
            report.summary.skipped,
        )
        return report

    def _run_route(
        self, route: RouteKey, reqs: list[NormalizedRequirement]
    ) -> list[CheckResult]:
        route_path = self._profile.route_path(route)
        if not route_path:
            logger.info("Route '%s' not configured — skipping %d check(s)", route.value, len(reqs))
            return _skip_all(
                reqs,
                f'route not configured for key "{route.value}" in site profile',
                url=None,
            )

        url = join_url(self._profile.base_url, route_path)
        try:
            self._session.navigate(self._page, url)
        except PlaywrightError as e:
            logger.warning("Navigation to %s failed: %s", url, e.message)
            return _skip_all(
                reqs, f"navigation failed for {route.value} ({e.message})", url=url
            )

        inline = [r for r in reqs if not r.needs_isolated_session]
        isolated = [r for r in reqs if r.needs_isolated_session]

        results: list[CheckResult] = []
        ctx = DispatchContext(self._page, self._session, self._profile)
        for req in inline:
            if req.automation.type == AutomationType.MANUAL_CHECK:
                outcome = CheckOutcome(
                    ResultStatus.SKIPPED,
                    MANUAL_CHECK_REASON,
                    Evidence(url=page_url(self._page)),
                )
                results.append(CheckResult.from_outcome(req, outcome))
                continue
            results.append(self._check(ctx, req))

        if isolated:
            results.extend(self._run_isolated(url, isolated))
        return results

    def _run_isolated(
        self, url: str, reqs: list[NormalizedRequirement]
    ) -> list[CheckResult]:
        logger.debug("Opening isolated session for %d check(s) on %s", len(reqs), url)
        try:
            with self._session.isolated_page() as page:
                self._session.navigate(page, url)
                ctx = DispatchContext(page, self._session, self._profile)
                return [self._check(ctx, req) for req in reqs]
        except PlaywrightError as e:
            logger.warning("Isolated navigation to %s failed: %s", url, e.message)
            return _skip_all(reqs, f"isolated navigation failed ({e.message})", url=url)

    def _check(self, ctx: DispatchContext, req: NormalizedRequirement) -> CheckResult:
        result = CheckResult.from_outcome(req, dispatch_check(ctx, req))
        logger.debug("%s → %s: %s", req.id, result.status.value, result.reason)

        if self._screenshots.should_capture(req.id, result.status):
            shot = capture_screenshot(
                ctx.page, req.id, result.status, self._assets_dir, self._assets_rel
            )
            if shot is not None:
                result.evidence.screenshots = [*(result.evidence.screenshots or []), shot]
        return result


def _skip_all(
    reqs: list[NormalizedRequirement], reason: str, url: str | None
) -> list[CheckResult]:
    return [
        CheckResult.from_outcome(
            req, CheckOutcome(ResultStatus.SKIPPED, reason, Evidence(url=url))
        )
        for req in reqs
    ]
