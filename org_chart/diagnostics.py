"""
Org Chart Kernel — Diagnostics

Summary statistics and warnings for one resolved chart.
"""

from __future__ import annotations

from typing import Sequence

from .domain_types import EmployeeRecord, ResolutionResult


def compute_diagnostics(
    records: Sequence[EmployeeRecord],
    resolution: ResolutionResult,
) -> dict:
    """
    Return a diagnostic dict for the header cards and the warning list.

    ``managers`` counts records that someone else names as
    manager-email-1; ``manager_like`` counts title-classified nodes.
    """
    emails = {r.email_key for r in records if r.email_key}
    referenced = {
        r.manager_key for r in records
        if r.manager_key and r.manager_key != r.email_key
    }
    departments = sorted({r.department for r in records if r.department})

    warnings = list(resolution.warnings)
    fallback_ids: list = []
    manager_like = 0
    max_depth = 0

    if resolution.root is None:
        if records:
            warnings.append(f"Hierarchy unavailable: {resolution.reason}")
    else:
        for node in resolution.root.iter_nodes():
            max_depth = max(max_depth, node.depth)
            if node.is_manager_like:
                manager_like += 1
            if node.placement == "fallback":
                fallback_ids.append(node.node_id)
        if fallback_ids:
            warnings.append(
                f"{len(fallback_ids)} employee(s) attached under root by "
                f"fallback: {', '.join(fallback_ids)}"
            )

    return {
        "total": len(records),
        "departments": len(departments),
        "department_names": departments,
        "managers": len(emails & referenced),
        "manager_like": manager_like,
        "max_depth": max_depth,
        "fallback_count": len(fallback_ids),
        "fallback_ids": fallback_ids,
        "warnings": warnings,
    }
