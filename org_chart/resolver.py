"""
Org Chart Kernel — Hierarchy Resolver

Reconstructs one rooted management tree from a flat employee list in
which managers are referenced by email.

Algorithm:
  1. Index records by normalized email (later duplicate wins, warned)
  2. Pick the root through a pluggable strategy
  3. Attach the root's direct reports
  4. Classify nodes as manager-like (injectable predicate)
  5. Descend from every placed manager-like node along manager-email-1
  6. Attach everything still unplaced directly under the root

Placement never loops: a record enters ``visited`` when attached and is
never reconsidered. Pure function: no state survives between calls.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .classification import ManagerPredicate, sibling_sort_key, title_keyword_predicate
from .domain_types import EmployeeRecord, HierarchyNode, ResolutionResult
from .roots import RootStrategy, most_directs_root

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve(
    employees: Iterable[EmployeeRecord],
    *,
    root_strategy: Optional[RootStrategy] = None,
    is_manager_like: Optional[ManagerPredicate] = None,
) -> ResolutionResult:
    """
    Build the management tree.

    Returns ``ResolutionResult.empty(...)`` when no root candidate exists;
    never raises for bad data.
    """
    records = list(employees)
    strategy = root_strategy or most_directs_root
    predicate = is_manager_like or title_keyword_predicate()

    index, warnings = build_email_index(records)
    for msg in warnings:
        logger.warning(msg)

    root_idx = strategy(records)
    if root_idx is None or not 0 <= root_idx < len(records):
        reason = "no root candidate" if records else "empty employee list"
        logger.warning("Hierarchy unavailable: %s", reason)
        return ResolutionResult.empty(reason, warnings)

    nodes = [
        HierarchyNode(
            node_id=_node_id(idx, rec, index),
            record=rec,
            is_manager_like=predicate(rec),
            position=idx,
        )
        for idx, rec in enumerate(records)
    ]

    root = nodes[root_idx]
    root.is_root = True
    root.depth = 0
    root.placement = "root"
    visited: Set[int] = {root_idx}

    direct = _direct_reports(records, index, root_idx, visited)
    for idx in direct:
        _attach(root, nodes[idx], visited, "direct")

    reports = _reports_by_manager(records, index)
    stack: List[HierarchyNode] = [n for n in root.children if n.is_manager_like]
    while stack:
        manager = stack.pop()
        stack.extend(_attach_subordinates(manager, nodes, reports, visited))

    orphans = [idx for idx in range(len(records)) if idx not in visited]
    for idx in orphans:
        _attach(root, nodes[idx], visited, "fallback")
    if orphans:
        logger.info(
            "%d employee(s) unreachable from %s attached under root",
            len(orphans), root.node_id,
        )
    root.children.sort(key=sibling_sort_key)

    return ResolutionResult(root=root, ok=True, warnings=warnings)


def build_email_index(
    records: List[EmployeeRecord],
) -> Tuple[Dict[str, int], List[str]]:
    """
    Map normalized email → record position.

    Duplicates: the later record overwrites the earlier one; one warning
    per overwrite.
    """
    index: Dict[str, int] = {}
    warnings: List[str] = []
    for idx, rec in enumerate(records):
        key = rec.email_key
        if key is None:
            continue
        if key in index:
            warnings.append(
                f"Duplicate email {key!r}: record #{idx} replaces record "
                f"#{index[key]} in the manager lookup"
            )
        index[key] = idx
    return index, warnings


# ---------------------------------------------------------------------------
# Placement steps (private)
# ---------------------------------------------------------------------------

def _node_id(idx: int, rec: EmployeeRecord, index: Dict[str, int]) -> str:
    key = rec.email_key
    if key is not None and index.get(key) == idx:
        return key
    return f"row-{idx}"


def _direct_reports(
    records: List[EmployeeRecord],
    index: Dict[str, int],
    root_idx: int,
    visited: Set[int],
) -> List[int]:
    """
    Records placed directly under the root: manager-email-1 is the root,
    no manager reference at all, or a manager-email-1 nobody holds.
    """
    root_key = records[root_idx].email_key
    direct: List[int] = []
    for idx, rec in enumerate(records):
        if idx in visited or rec.email_key is None:
            continue
        mgr = rec.manager_key
        if root_key is not None and mgr == root_key:
            direct.append(idx)
        elif mgr is None and rec.secondary_manager_key is None:
            direct.append(idx)
        elif mgr is not None and mgr not in index:
            direct.append(idx)
    return direct


def _reports_by_manager(
    records: List[EmployeeRecord],
    index: Dict[str, int],
) -> Dict[int, List[int]]:
    """Manager position → positions naming it as manager-email-1."""
    reports: Dict[int, List[int]] = {}
    for idx, rec in enumerate(records):
        if rec.email_key is None:
            continue
        mgr_idx = index.get(rec.manager_key) if rec.manager_key else None
        if mgr_idx is not None and mgr_idx != idx:
            reports.setdefault(mgr_idx, []).append(idx)
    return reports


def _attach_subordinates(
    manager: HierarchyNode,
    nodes: List[HierarchyNode],
    reports: Dict[int, List[int]],
    visited: Set[int],
) -> List[HierarchyNode]:
    """
    Attach every unvisited report of ``manager``.
    Returns the newly attached manager-like nodes, to descend into next.
    """
    added: List[HierarchyNode] = []
    for idx in reports.get(manager.position, []):
        if idx in visited:
            continue
        _attach(manager, nodes[idx], visited, "managed")
        added.append(nodes[idx])
    manager.children.sort(key=sibling_sort_key)
    return [n for n in added if n.is_manager_like]


def _attach(
    parent: HierarchyNode,
    child: HierarchyNode,
    visited: Set[int],
    placement: str,
) -> None:
    child.depth = parent.depth + 1
    child.placement = placement
    parent.children.append(child)
    visited.add(child.position)
