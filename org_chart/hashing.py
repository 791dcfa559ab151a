"""
Org Chart Kernel — Canonical Tree Hashing

Deterministic canonical serialization + SHA-256 of a resolved tree.
Two resolutions with the same parent/child assignment and the same
sibling order hash identically.

Rules:
  - Pre-order walk, children in stored order
  - Per node: id, depth, placement, manager-like flag, child count
  - UTF-8 JSON, no whitespace
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, List, Optional

from .domain_types import HierarchyNode, ResolutionResult


def canonical_serialize(root: Optional[HierarchyNode]) -> bytes:
    """Canonical bytes for the tree. The empty tree serializes to ``[]``."""
    obj = _build_canonical_list(root)
    return json.dumps(obj, ensure_ascii=True, separators=(",", ":"), sort_keys=False).encode("utf-8")


def canonical_hash(root: Optional[HierarchyNode]) -> str:
    """SHA-256 of canonical serialization. Lowercase hex string."""
    return hashlib.sha256(canonical_serialize(root)).hexdigest()


def resolution_hash(resolution: ResolutionResult) -> str:
    return canonical_hash(resolution.root)


def _build_canonical_list(root: Optional[HierarchyNode]) -> List[Dict[str, Any]]:
    if root is None:
        return []
    return [
        {
            "id": node.node_id,
            "depth": node.depth,
            "placement": node.placement,
            "manager_like": node.is_manager_like,
            "children": len(node.children),
        }
        for node in root.iter_nodes()
    ]
