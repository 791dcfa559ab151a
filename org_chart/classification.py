"""
Org Chart Kernel — Classification & Sibling Order

Manager-like predicates are injectable capabilities of the resolver:
the keyword list can be swapped or localized without touching the
placement logic.
"""

from __future__ import annotations

import unicodedata
from typing import Callable, Iterable, Sequence, Tuple

from .constants import DEFAULT_MANAGER_KEYWORDS
from .domain_types import EmployeeRecord, HierarchyNode

ManagerPredicate = Callable[[EmployeeRecord], bool]


def fold(text: str) -> str:
    """Accent-stripped, case-folded form. Locale independent."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def title_keyword_predicate(
    keywords: Iterable[str] = DEFAULT_MANAGER_KEYWORDS,
) -> ManagerPredicate:
    """Manager-like when the job title contains any keyword."""
    folded = tuple(fold(k) for k in keywords if k)

    def _is_manager_like(record: EmployeeRecord) -> bool:
        title = fold(record.job_title)
        if not title:
            return False
        return any(k in title for k in folded)

    return _is_manager_like


def referenced_manager_predicate(
    records: Sequence[EmployeeRecord],
    base: ManagerPredicate | None = None,
) -> ManagerPredicate:
    """
    Manager-like when ``base`` matches or any other record names this
    one as manager-email-1 or manager-email-2.
    """
    base = base or title_keyword_predicate()
    referenced = set()
    for rec in records:
        own = rec.email_key
        for key in (rec.manager_key, rec.secondary_manager_key):
            if key and key != own:
                referenced.add(key)

    def _is_manager_like(record: EmployeeRecord) -> bool:
        return base(record) or (record.email_key in referenced)

    return _is_manager_like


def sibling_sort_key(node: HierarchyNode) -> Tuple:
    """
    Managers first, then first name (collated), last name, email.
    Input position only breaks exact ties.
    """
    return (0 if node.is_manager_like else 1,) + record_sort_key(node.record, node.position)


def record_sort_key(record: EmployeeRecord, position: int) -> Tuple:
    """Collation order for records outside the tree (root tie-break)."""
    return (
        fold(record.first_name),
        record.first_name,
        fold(record.last_name),
        record.last_name,
        record.email_key or "",
        position,
    )
