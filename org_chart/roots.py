"""
Org Chart Kernel — Root Strategies

A root strategy picks the top-of-hierarchy record:
    strategy(records) -> index into records, or None.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Sequence

from .classification import fold, record_sort_key
from .domain_types import EmployeeRecord, normalize_email

RootStrategy = Callable[[Sequence[EmployeeRecord]], Optional[int]]


def most_directs_root(records: Sequence[EmployeeRecord]) -> Optional[int]:
    """
    The record with an email and no manager reference that the most
    other records name as manager-email-1.

    Ties: collation order of the name, then email.
    """
    direct_counts: Dict[str, int] = {}
    for rec in records:
        mgr = rec.manager_key
        if mgr and mgr != rec.email_key:
            direct_counts[mgr] = direct_counts.get(mgr, 0) + 1

    candidates = [
        idx for idx, rec in enumerate(records)
        if rec.email_key and not rec.manager_key and not rec.secondary_manager_key
    ]
    if not candidates:
        return None
    return min(
        candidates,
        key=lambda idx: (
            -direct_counts.get(records[idx].email_key, 0),
            record_sort_key(records[idx], idx),
        ),
    )


def name_match_root(first_name: str, last_name: str = "") -> RootStrategy:
    """First record whose names contain the given fragments (case/accent-insensitive)."""
    first = fold(first_name)
    last = fold(last_name)

    def _strategy(records: Sequence[EmployeeRecord]) -> Optional[int]:
        for idx, rec in enumerate(records):
            if first in fold(rec.first_name) and last in fold(rec.last_name):
                return idx
        return None

    return _strategy


def email_root(email: str) -> RootStrategy:
    """The record holding ``email`` (last one wins, like the email index)."""
    wanted = normalize_email(email)

    def _strategy(records: Sequence[EmployeeRecord]) -> Optional[int]:
        if wanted is None:
            return None
        found: Optional[int] = None
        for idx, rec in enumerate(records):
            if rec.email_key == wanted:
                found = idx
        return found

    return _strategy
