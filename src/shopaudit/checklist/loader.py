"""Load checklist JSON and flatten it into NormalizedRequirement records."""

from __future__ import annotations

import json
import logging
import unicodedata
from pathlib import Path
from typing import Any

from shopaudit.checklist.models import (
    CONCRETE_AUTOMATION_TYPES,
    Automation,
    AutomationType,
    Checklist,
    NormalizedRequirement,
    Scope,
    Severity,
)

logger = logging.getLogger(__name__)

# Romanian letters that are not always decomposed by NFD (comma-below forms).
_FOLD_MAP = str.maketrans(
    {
        "ă": "a",
        "Ă": "A",
        "î": "i",
        "Î": "I",
        "â": "a",
        "Â": "A",
        "ș": "s",
        "Ș": "S",
        "ş": "s",
        "Ş": "S",
        "ț": "t",
        "Ț": "T",
        "ţ": "t",
        "Ţ": "T",
    }
)

_AUTOMATION_BY_VALUE = {t.value: t for t in CONCRETE_AUTOMATION_TYPES}


def load_checklist(path: str | Path) -> Checklist:
    """Load and normalize a checklist from a JSON file path."""
    text = Path(path).read_text(encoding="utf-8")
    return load_checklist_from_string(text)


def load_checklist_from_string(text: str) -> Checklist:
    """Parse a JSON string into a normalized Checklist."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Checklist JSON must be a mapping")

    meta = data.get("meta")
    if not isinstance(meta, dict):
        meta = {}

    return Checklist(
        requirements=tuple(normalize_checklist(data)),
        title=_opt_str(meta.get("document_title")),
        version=_opt_str(meta.get("version")),
    )


def normalize_checklist(data: dict[str, Any]) -> list[NormalizedRequirement]:
    """Flatten sections → requirements, preserving insertion order of both.

    Malformed entries degrade to defaults instead of aborting the checklist.
    """
    out: list[NormalizedRequirement] = []
    sections = data.get("sections") or {}
    if not isinstance(sections, dict):
        logger.warning("Checklist 'sections' is not a mapping — ignoring it")
        return out

    for section_key, section in sections.items():
        if not isinstance(section, dict):
            logger.warning("Skipping malformed section %r", section_key)
            continue

        requirements = section.get("requirements") or {}
        if not isinstance(requirements, dict):
            logger.warning(
                "Section %r has malformed 'requirements' — skipping", section_key
            )
            continue

        section_title = _opt_str(section.get("title"))
        for req_id, raw in requirements.items():
            out.append(_normalize_requirement(str(section_key), section_title, str(req_id), raw))

    return out


def _normalize_requirement(
    section_key: str,
    section_title: str | None,
    req_id: str,
    raw: Any,
) -> NormalizedRequirement:
    if not isinstance(raw, dict):
        logger.warning("Requirement %r in %r is not a mapping", req_id, section_key)
        raw = {}

    severity = parse_severity(raw.get("severity"))
    if severity is None:
        logger.debug("Requirement %s: severity %r defaulted to MEDIU", req_id, raw.get("severity"))
        severity = Severity.MEDIU

    return NormalizedRequirement(
        id=req_id,
        section_key=section_key,
        section_title=section_title,
        desc=_str(raw.get("desc")),
        where_to_verify=_str(raw.get("where_to_verify")),
        law=_opt_str(raw.get("law")),
        risk=_opt_str(raw.get("risk")),
        severity=severity,
        scope=parse_scope(raw.get("scope")) or Scope.MANDATORY,
        automation=_parse_automation(raw.get("automation")),
    )


def _parse_automation(block: Any) -> Automation:
    if not isinstance(block, dict) or not block:
        return Automation(type=AutomationType.MISSING)

    raw_type = block.get("type")
    raw_type = str(raw_type) if raw_type not in (None, "") else None
    parsed = parse_automation_type(raw_type)
    if parsed is None:
        return Automation(type=AutomationType.UNKNOWN, raw_type=raw_type, raw=dict(block))
    return Automation(type=parsed, raw_type=raw_type, raw=dict(block))


def fold_diacritics(text: str) -> str:
    """Strip combining marks and fold Romanian letters to plain ASCII."""
    decomposed = unicodedata.normalize("NFD", text.translate(_FOLD_MAP))
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def parse_severity(value: Any) -> Severity | None:
    if value is None:
        return None
    normalized = fold_diacritics(str(value)).upper().strip()
    try:
        return Severity(normalized)
    except ValueError:
        return None


def parse_scope(value: Any) -> Scope | None:
    if value is None:
        return None
    try:
        return Scope(str(value).upper().strip())
    except ValueError:
        return None


def parse_automation_type(value: str | None) -> AutomationType | None:
    """Match against the concrete types only — sentinels are never parsed."""
    if not value:
        return None
    return _AUTOMATION_BY_VALUE.get(value.strip().lower())


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)
