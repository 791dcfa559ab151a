"""
Tree Layout Engine — Tidy Tree (Reingold–Tilford contours)

Deterministic positioning of a resolved tree.

Algorithm:
  1. Post-order: lay out every subtree relative to its own root
     - children placed left to right in resolver order (never re-sorted)
     - each child shifted right just enough to clear the accumulated
       right contour of its left siblings, level by level
     - gap: sibling_gap between siblings, cousin_gap between
       neighbours with different parents
     - parent centred between its first and last child
  2. Pre-order: accumulate offsets into absolute x, root at x = 0
  3. y = depth * (node height + level_gap)

Coordinates are box centres. Bounds include the full box extent.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .constants import COUSIN_GAP, LEVEL_GAP, NODE_HEIGHT, NODE_WIDTH, SIBLING_GAP
from .domain_types import (
    BoundingBox,
    Edge,
    HierarchyNode,
    NodeExtent,
    PositionedNode,
    Spacing,
    TreeLayout,
)

Contour = Tuple[List[float], List[float]]  # (left, right) per relative depth

DEFAULT_EXTENT = NodeExtent(NODE_WIDTH, NODE_HEIGHT)
DEFAULT_SPACING = Spacing(level_gap=LEVEL_GAP, sibling_gap=SIBLING_GAP, cousin_gap=COUSIN_GAP)


# ── Public API ────────────────────────────────────────────────

def layout(
    root: Optional[HierarchyNode],
    extent: Optional[NodeExtent] = None,
    spacing: Optional[Spacing] = None,
) -> TreeLayout:
    """
    Position every node of the tree rooted at ``root``.

    ``root is None`` (resolution failure) → empty layout with a
    zero-area bounding box.
    """
    extent = extent or DEFAULT_EXTENT
    spacing = spacing or DEFAULT_SPACING
    if extent.width < 0 or extent.height < 0:
        raise ValueError(f"Node extent must be non-negative, got {extent}")
    if spacing.level_gap < 0 or spacing.sibling_gap < 0 or spacing.effective_cousin_gap < 0:
        raise ValueError(f"Spacing must be non-negative, got {spacing}")

    if root is None:
        return TreeLayout(extent=extent)

    order = _preorder(root)
    offsets = _relative_offsets(order, extent, spacing)

    row_height = extent.height + spacing.level_gap
    placed: Dict[int, PositionedNode] = {}
    nodes: List[PositionedNode] = []
    edges: List[Edge] = []

    for node, depth, parent in order:
        if parent is None:
            x = 0.0
        else:
            x = placed[id(parent)].x + offsets[id(node)]
        pos = PositionedNode(
            node_id=node.node_id,
            x=x,
            y=depth * row_height,
            depth=depth,
            node=node,
        )
        placed[id(node)] = pos
        nodes.append(pos)
        if parent is not None:
            edges.append(Edge(parent=placed[id(parent)], child=pos))

    return TreeLayout(
        nodes=nodes,
        edges=edges,
        bounds=compute_bounds(nodes, extent),
        extent=extent,
    )


def compute_bounds(nodes: List[PositionedNode], extent: NodeExtent) -> BoundingBox:
    """Minimal box covering every node's drawn extent."""
    if not nodes:
        return BoundingBox()
    half_w = extent.width / 2
    half_h = extent.height / 2
    return BoundingBox(
        min_x=min(n.x for n in nodes) - half_w,
        min_y=min(n.y for n in nodes) - half_h,
        max_x=max(n.x for n in nodes) + half_w,
        max_y=max(n.y for n in nodes) + half_h,
    )


def edge_path(edge: Edge, extent: NodeExtent) -> List[Tuple[float, float]]:
    """
    Orthogonal connector from the bottom of the parent box to the top of
    the child box: straight when aligned, else down / across / down
    through the vertical midpoint.
    """
    sx, sy = edge.parent.x, edge.parent.y + extent.height / 2
    tx, ty = edge.child.x, edge.child.y - extent.height / 2
    if sx == tx:
        return [(sx, sy), (tx, ty)]
    mid_y = sy + (ty - sy) * 0.5
    return [(sx, sy), (sx, mid_y), (tx, mid_y), (tx, ty)]


# ── Traversal ─────────────────────────────────────────────────

def _preorder(
    root: HierarchyNode,
) -> List[Tuple[HierarchyNode, int, Optional[HierarchyNode]]]:
    """(node, depth, parent) in pre-order, children in stored order."""
    out: List[Tuple[HierarchyNode, int, Optional[HierarchyNode]]] = []
    stack: List[Tuple[HierarchyNode, int, Optional[HierarchyNode]]] = [(root, 0, None)]
    while stack:
        node, depth, parent = stack.pop()
        out.append((node, depth, parent))
        for child in reversed(node.children):
            stack.append((child, depth + 1, node))
    return out


# ── Subtree packing ───────────────────────────────────────────

def _relative_offsets(
    order: List[Tuple[HierarchyNode, int, Optional[HierarchyNode]]],
    extent: NodeExtent,
    spacing: Spacing,
) -> Dict[int, float]:
    """
    x offset of every non-root node relative to its parent.
    Reversed pre-order visits all children before their parent.
    """
    sibling_sep = extent.width + spacing.sibling_gap
    cousin_sep = extent.width + spacing.effective_cousin_gap

    contours: Dict[int, Contour] = {}
    offsets: Dict[int, float] = {}

    for node, _depth, _parent in reversed(order):
        if not node.children:
            contours[id(node)] = ([0.0], [0.0])
            continue

        positions: List[float] = []
        acc_left: List[float] = []
        acc_right: List[float] = []
        for child in node.children:
            c_left, c_right = contours.pop(id(child))
            if not positions:
                shift = 0.0
            else:
                shift = float("-inf")
                for k in range(min(len(acc_right), len(c_left))):
                    sep = sibling_sep if k == 0 else cousin_sep
                    shift = max(shift, acc_right[k] - c_left[k] + sep)
            for k in range(len(c_left)):
                if k < len(acc_left):
                    acc_right[k] = c_right[k] + shift
                else:
                    acc_left.append(c_left[k] + shift)
                    acc_right.append(c_right[k] + shift)
            positions.append(shift)

        mid = (positions[0] + positions[-1]) / 2
        for child, pos in zip(node.children, positions):
            offsets[id(child)] = pos - mid
        contours[id(node)] = (
            [0.0] + [v - mid for v in acc_left],
            [0.0] + [v - mid for v in acc_right],
        )

    return offsets
