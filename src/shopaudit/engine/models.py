"""Result data models — check outcomes, evidence, and the compliance report."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from shopaudit.checklist.models import NormalizedRequirement, Scope, Severity


class ResultStatus(enum.Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class Screenshot:
    """A screenshot path relative to the report file, plus a caption."""

    path: str
    caption: str | None = None


@dataclass
class Evidence:
    """Auxiliary data supporting manual review of a result."""

    url: str | None = None
    matched_snippets: list[str] | None = None
    selectors_used: list[str] | None = None
    requests_sample: list[str] | None = None
    screenshots: list[Screenshot] | None = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.url is not None:
            data["url"] = self.url
        if self.matched_snippets is not None:
            data["matchedSnippets"] = list(self.matched_snippets)
        if self.selectors_used is not None:
            data["selectorsUsed"] = list(self.selectors_used)
        if self.requests_sample is not None:
            data["requestsSample"] = list(self.requests_sample)
        if self.screenshots is not None:
            data["screenshots"] = [
                {"path": s.path, "caption": s.caption}
                if s.caption is not None
                else {"path": s.path}
                for s in self.screenshots
            ]
        return data


@dataclass
class CheckOutcome:
    """What a check strategy returns: status, reason and evidence."""

    status: ResultStatus
    reason: str
    evidence: Evidence = field(default_factory=Evidence)


@dataclass
class CheckResult:
    """One report row — exactly one per filtered requirement."""

    id: str
    section_key: str
    status: ResultStatus
    reason: str
    severity: Severity
    scope: Scope
    where_to_verify: str
    automation_type: str
    evidence: Evidence = field(default_factory=Evidence)
    law: str | None = None
    risk: str | None = None
    desc: str | None = None

    @classmethod
    def from_outcome(
        cls, req: NormalizedRequirement, outcome: CheckOutcome
    ) -> CheckResult:
        return cls(
            id=req.id,
            section_key=req.section_key,
            status=outcome.status,
            reason=outcome.reason,
            severity=req.severity,
            scope=req.scope,
            where_to_verify=req.where_to_verify,
            automation_type=req.automation.label,
            evidence=outcome.evidence,
            law=req.law,
            risk=req.risk,
            desc=req.desc,
        )

    def to_dict(self) -> dict:
        meta: dict = {}
        if self.law is not None:
            meta["law"] = self.law
        if self.risk is not None:
            meta["risk"] = self.risk
        if self.desc is not None:
            meta["desc"] = self.desc
        meta["automationType"] = self.automation_type
        return {
            "id": self.id,
            "sectionKey": self.section_key,
            "status": self.status.value,
            "reason": self.reason,
            "severity": self.severity.value,
            "scope": self.scope.value,
            "whereToVerify": self.where_to_verify,
            "evidence": self.evidence.to_dict(),
            "meta": meta,
        }


@dataclass(frozen=True)
class Summary:
    total: int = 0
    passed: int = 0
    failed: int = 0
    warned: int = 0
    skipped: int = 0

    @classmethod
    def from_statuses(cls, statuses: list) -> Summary:
        """Count statuses; anything not PASS/FAIL/WARN counts as skipped."""
        passed = failed = warned = skipped = 0
        for status in statuses:
            if status == ResultStatus.PASS:
                passed += 1
            elif status == ResultStatus.FAIL:
                failed += 1
            elif status == ResultStatus.WARN:
                warned += 1
            else:
                skipped += 1
        return cls(
            total=len(statuses),
            passed=passed,
            failed=failed,
            warned=warned,
            skipped=skipped,
        )

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "pass": self.passed,
            "fail": self.failed,
            "warn": self.warned,
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class ReportMeta:
    site_id: str
    base_url: str
    generated_at: str
    filters: dict
    checklist_version: str | None = None
    checklist_title: str | None = None

    def to_dict(self) -> dict:
        data: dict = {
            "siteId": self.site_id,
            "baseUrl": self.base_url,
            "generatedAt": self.generated_at,
            "filters": dict(self.filters),
        }
        if self.checklist_version is not None:
            data["checklistVersion"] = self.checklist_version
        if self.checklist_title is not None:
            data["checklistTitle"] = self.checklist_title
        return data


@dataclass(frozen=True)
class ComplianceReport:
    """Aggregate result of a compliance run. Built once, written once."""

    meta: ReportMeta
    summary: Summary
    results: tuple[CheckResult, ...] = ()

    def to_dict(self) -> dict:
        return {
            "meta": self.meta.to_dict(),
            "summary": self.summary.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }
