"""
Org Chart Kernel — Directory Ingestion

Turns raw directory rows (the HR service's French keys or English keys)
into EmployeeRecord values, and carries the page-level helpers that work
on the flat list: display cleanup, active filter, search.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping, Optional

from .constants import ACTIVE_STATUSES, UNNAMED_LABEL, UNSPECIFIED_TITLE
from .domain_types import EmployeeRecord


# Directory field → record field. First key present wins.
_FIELD_ALIASES = {
    "id": ("id", "employee_id"),
    "first_name": ("first_name", "prenom"),
    "last_name": ("last_name", "nom"),
    "email": ("email", "adresse_mail"),
    "manager_email_1": ("manager_email_1", "mail_responsable1"),
    "manager_email_2": ("manager_email_2", "mail_responsable2"),
    "job_title": ("job_title", "poste"),
    "department": ("department", "site_dep"),
    "photo": ("photo",),
    "status": ("status", "statut"),
    "employee_number": ("employee_number", "matricule"),
    "phone": ("phone", "telephone"),
}

_OPTIONAL_FIELDS = {"email", "manager_email_1", "manager_email_2", "photo", "status"}


def _pick(row: Mapping[str, Any], keys) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def record_from_dict(row: Mapping[str, Any], position: int = 0) -> EmployeeRecord:
    """
    Build an EmployeeRecord from a directory row.

    Missing ids fall back to the row position so every record stays
    addressable; optional fields left blank become None.
    """
    values = {}
    for fname, keys in _FIELD_ALIASES.items():
        text = _text(_pick(row, keys))
        if fname in _OPTIONAL_FIELDS:
            values[fname] = text or None
        else:
            values[fname] = text
    if not values["id"]:
        values["id"] = str(position)
    return EmployeeRecord(**values)


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> List[EmployeeRecord]:
    return [record_from_dict(row, pos) for pos, row in enumerate(rows)]


# ── Display cleanup ───────────────────────────────────────────

_CAPS = "A-ZÀ-Ÿ"
_ABBREVIATION_RULES = (
    (re.compile(rf"\s+[{_CAPS}]{{2,}}$"), ""),
    (re.compile(rf"[-–—]\s*[{_CAPS}]{{2,}}$"), ""),
    (re.compile(rf"\s+[{_CAPS}]{{2,}}\s+"), " "),
    (re.compile(rf"^[{_CAPS}]{{2,}}\s+"), ""),
    (re.compile(rf"\s*\([{_CAPS}]{{2,}}\)\s*"), " "),
    (re.compile(rf"\s*\[[{_CAPS}]{{2,}}\]\s*"), " "),
)
_TITLE_SUFFIX_RULES = (
    re.compile(r"\s+[A-Z]{2,}$"),
    re.compile(r"[-–—][A-Z]{2,}$"),
)
_WHITESPACE = re.compile(r"\s+")


def _strip_abbreviations(value: str) -> str:
    cleaned = value or ""
    for pattern, repl in _ABBREVIATION_RULES:
        cleaned = pattern.sub(repl, cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def clean_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    """Display name with department/site abbreviations removed."""
    if not first_name and not last_name:
        return UNNAMED_LABEL
    first = _strip_abbreviations(first_name or "")
    last = _strip_abbreviations(last_name or "")
    if not first and not last:
        return UNNAMED_LABEL
    if not first:
        return last
    if not last:
        return first
    return f"{first} {last}"


def clean_position(job_title: Optional[str]) -> str:
    """Job title without a trailing upper-case site code."""
    if not job_title:
        return UNSPECIFIED_TITLE
    cleaned = job_title
    for pattern in _TITLE_SUFFIX_RULES:
        cleaned = pattern.sub("", cleaned)
    return cleaned.strip()


# ── List helpers ──────────────────────────────────────────────

def is_active(record: EmployeeRecord) -> bool:
    """No status counts as active."""
    if not record.status:
        return True
    return record.status.strip().lower() in ACTIVE_STATUSES


def filter_active(records: Iterable[EmployeeRecord]) -> List[EmployeeRecord]:
    return [r for r in records if is_active(r)]


def search_records(records: Iterable[EmployeeRecord], query: str) -> List[EmployeeRecord]:
    """
    Case-insensitive substring search on cleaned name, cleaned title,
    department and employee number. Blank query returns everything.
    """
    items = list(records)
    needle = (query or "").strip().lower()
    if not needle:
        return items

    def _matches(rec: EmployeeRecord) -> bool:
        haystacks = (
            clean_name(rec.first_name, rec.last_name),
            clean_position(rec.job_title),
            rec.department,
            rec.employee_number,
        )
        return any(needle in (h or "").lower() for h in haystacks)

    return [r for r in items if _matches(r)]
