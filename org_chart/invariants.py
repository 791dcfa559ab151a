"""
Org Chart Kernel — Tree Invariant Checks

Hard-fail validation of a resolved tree. Every check raises
TreeInvariantError on failure. Bad input data never trips these;
only a resolver defect does.
"""

from __future__ import annotations

from typing import List, Sequence, Set

from .classification import sibling_sort_key
from .domain_types import EmployeeRecord, HierarchyNode, ResolutionResult


class TreeInvariantError(Exception):
    """Raised when a resolved tree violates a structural invariant."""

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[INVARIANT:{rule}] {detail}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_tree(
    resolution: ResolutionResult,
    records: Sequence[EmployeeRecord],
) -> None:
    """
    Run all checks. The empty-tree sentinel is valid by definition.
    """
    root = resolution.root
    if root is None:
        return
    seen = _check_acyclic_and_unique(root)
    _check_single_root(root)
    _check_every_record_placed(seen, len(records))
    _check_depths(root)
    _check_sibling_order(root)


# ---------------------------------------------------------------------------
# Individual checks (private)
# ---------------------------------------------------------------------------

def _check_single_root(root: HierarchyNode) -> None:
    if not root.is_root or root.depth != 0:
        raise TreeInvariantError(
            "single_root", f"Top node {root.node_id!r} is not flagged as root at depth 0"
        )
    for node in root.iter_nodes():
        if node is not root and node.is_root:
            raise TreeInvariantError(
                "single_root", f"Second root flag on {node.node_id!r}"
            )


def _check_acyclic_and_unique(root: HierarchyNode) -> Set[int]:
    """Each node reached once: no shared ownership, no node is its own ancestor."""
    seen_objects: Set[int] = set()
    seen_positions: Set[int] = set()
    seen_ids: Set[str] = set()
    stack: List[HierarchyNode] = [root]
    while stack:
        node = stack.pop()
        if id(node) in seen_objects:
            raise TreeInvariantError(
                "acyclic", f"Node {node.node_id!r} reached twice (cycle or shared child)"
            )
        seen_objects.add(id(node))
        if node.node_id in seen_ids or node.position in seen_positions:
            raise TreeInvariantError(
                "unique_placement", f"Record {node.node_id!r} placed more than once"
            )
        seen_ids.add(node.node_id)
        seen_positions.add(node.position)
        stack.extend(node.children)
    return seen_positions


def _check_every_record_placed(seen_positions: Set[int], record_count: int) -> None:
    missing = sorted(set(range(record_count)) - seen_positions)
    if missing:
        raise TreeInvariantError(
            "all_placed", f"{len(missing)} record(s) missing from tree: {missing}"
        )


def _check_depths(root: HierarchyNode) -> None:
    for node in root.iter_nodes():
        for child in node.children:
            if child.depth != node.depth + 1:
                raise TreeInvariantError(
                    "depth",
                    f"Child {child.node_id!r} at depth {child.depth} under "
                    f"{node.node_id!r} at depth {node.depth}",
                )


def _check_sibling_order(root: HierarchyNode) -> None:
    for node in root.iter_nodes():
        keys = [sibling_sort_key(c) for c in node.children]
        if keys != sorted(keys):
            raise TreeInvariantError(
                "sibling_order", f"Children of {node.node_id!r} are not in collation order"
            )
