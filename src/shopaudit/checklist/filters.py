"""Run filters — which normalized requirements are in scope for a run."""

from __future__ import annotations

import enum
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from shopaudit.checklist.models import NormalizedRequirement, Scope, Severity


class ScopeFilter(enum.Enum):
    """Run-level scope: only MANDATORY requirements, or everything."""

    MANDATORY = "MANDATORY"
    ALL = "ALL"


@dataclass(frozen=True)
class RunFilters:
    """Immutable per-run filter settings."""

    site_id: str
    scope: ScopeFilter = ScopeFilter.MANDATORY
    min_severity: Severity = Severity.RIDICAT
    section_keys: tuple[str, ...] | None = None
    ids: tuple[str, ...] | None = None

    @classmethod
    def from_env(
        cls,
        default_site_id: str,
        default_min_severity: Severity,
        environ: Mapping[str, str] | None = None,
    ) -> RunFilters:
        """Build filters from COMPLIANCE_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        site_id = (env.get("COMPLIANCE_SITE") or "").strip().lower() or default_site_id

        scope_raw = (env.get("COMPLIANCE_SCOPE") or "MANDATORY").upper().strip()
        scope = ScopeFilter.ALL if scope_raw == "ALL" else ScopeFilter.MANDATORY

        min_raw = (env.get("COMPLIANCE_MIN_SEVERITY") or "").upper().strip()
        try:
            min_severity = Severity(min_raw)
        except ValueError:
            min_severity = default_min_severity

        return cls(
            site_id=site_id,
            scope=scope,
            min_severity=min_severity,
            section_keys=parse_csv(env.get("COMPLIANCE_SECTIONS")),
            ids=parse_csv(env.get("COMPLIANCE_IDS")),
        )

    def to_dict(self) -> dict:
        data: dict = {
            "siteId": self.site_id,
            "scope": self.scope.value,
            "minSeverity": self.min_severity.value,
        }
        if self.section_keys is not None:
            data["sectionKeys"] = list(self.section_keys)
        if self.ids is not None:
            data["ids"] = list(self.ids)
        return data


def parse_csv(value: str | None) -> tuple[str, ...] | None:
    """Split a comma-separated list; empty input yields None (unset)."""
    if not value:
        return None
    parts = tuple(p.strip() for p in value.split(",") if p.strip())
    return parts or None


def passes_filters(req: NormalizedRequirement, filters: RunFilters) -> bool:
    """Return True when the requirement is in scope. All conditions must hold."""
    if filters.scope == ScopeFilter.MANDATORY and req.scope != Scope.MANDATORY:
        return False
    if req.severity.rank < filters.min_severity.rank:
        return False
    if filters.section_keys is not None and req.section_key not in filters.section_keys:
        return False
    if filters.ids is not None and req.id not in filters.ids:
        return False
    return True


def apply_filters(
    requirements: Iterable[NormalizedRequirement], filters: RunFilters
) -> list[NormalizedRequirement]:
    return [r for r in requirements if passes_filters(r, filters)]
