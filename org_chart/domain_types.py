"""
Org Chart Kernel — Core Domain Types

Pure data. No resolution or layout logic.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Root:
    The single top-of-hierarchy employee node with no parent.

Direct report:
    An employee whose manager reference resolves to a given node.

Manager-like:
    A node whose job title matches a supervisory-keyword heuristic,
    used for sibling ordering and recursive descent.

Fallback:
    Placement directly under the root for employees that cannot be
    reached through the manager chain.

────────────────────────────────────────────────
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Strip + lower-case an email. Empty or missing → None."""
    if value is None:
        return None
    cleaned = str(value).strip().lower()
    return cleaned or None


# ── Input ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class EmployeeRecord:
    """One row of the employee directory. Read-only to the kernel."""

    id: str = ""
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    manager_email_1: Optional[str] = None
    manager_email_2: Optional[str] = None  # secondary approver, not used for placement
    job_title: str = ""
    department: str = ""
    photo: Optional[str] = None
    status: Optional[str] = None
    employee_number: str = ""
    phone: str = ""

    @property
    def email_key(self) -> Optional[str]:
        return normalize_email(self.email)

    @property
    def manager_key(self) -> Optional[str]:
        return normalize_email(self.manager_email_1)

    @property
    def secondary_manager_key(self) -> Optional[str]:
        return normalize_email(self.manager_email_2)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "manager_email_1": self.manager_email_1,
            "manager_email_2": self.manager_email_2,
            "job_title": self.job_title,
            "department": self.department,
            "photo": self.photo,
            "status": self.status,
            "employee_number": self.employee_number,
            "phone": self.phone,
        }


# ── Resolved hierarchy ────────────────────────────────────────

@dataclass
class HierarchyNode:
    """
    One employee placed in the management tree.

    A node is owned by exactly one parent; ``children`` is ordered by
    the resolver and must not be re-sorted downstream.
    """

    node_id: str
    record: EmployeeRecord
    children: List["HierarchyNode"] = field(default_factory=list)
    depth: int = 0
    is_root: bool = False
    is_manager_like: bool = False
    placement: str = "direct"  # root | direct | managed | fallback
    position: int = 0  # index in the input list

    def iter_nodes(self) -> Iterator["HierarchyNode"]:
        """Pre-order walk of the subtree (explicit stack)."""
        stack: List[HierarchyNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> dict:
        """Nested plain-dict form (for the service / diagnostics)."""
        return {
            "id": self.node_id,
            "name": self.record.display_name,
            "job_title": self.record.job_title,
            "department": self.record.department,
            "depth": self.depth,
            "is_root": self.is_root,
            "is_manager_like": self.is_manager_like,
            "placement": self.placement,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class ResolutionResult:
    """
    Outcome of one resolution pass.

    ``root is None`` is the empty-tree sentinel: callers render a
    "hierarchy unavailable" state instead of failing.
    """

    root: Optional[HierarchyNode] = None
    ok: bool = True
    reason: str = ""
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def empty(cls, reason: str, warnings: Optional[List[str]] = None) -> "ResolutionResult":
        return cls(root=None, ok=False, reason=reason, warnings=list(warnings or []))

    @property
    def is_empty(self) -> bool:
        return self.root is None

    @property
    def node_count(self) -> int:
        if self.root is None:
            return 0
        return sum(1 for _ in self.root.iter_nodes())


# ── Geometry ──────────────────────────────────────────────────

@dataclass(frozen=True)
class NodeExtent:
    """Drawn size of one node box."""

    width: float = 340.0
    height: float = 150.0


@dataclass(frozen=True)
class Spacing:
    """
    Layout spacing.

    level_gap:   vertical gap between the boxes of consecutive depths.
    sibling_gap: horizontal gap between neighbours sharing a parent.
    cousin_gap:  horizontal gap between neighbours with different parents
                 (None → 2 * sibling_gap).
    """

    level_gap: float = 30.0
    sibling_gap: float = 10.0
    cousin_gap: Optional[float] = None

    @property
    def effective_cousin_gap(self) -> float:
        if self.cousin_gap is None:
            return 2 * self.sibling_gap
        return self.cousin_gap


@dataclass(frozen=True)
class PositionedNode:
    """A hierarchy node with its box centre in chart coordinates."""

    node_id: str
    x: float
    y: float
    depth: int
    node: HierarchyNode = field(compare=False, repr=False)

    @property
    def record(self) -> EmployeeRecord:
        return self.node.record

    def to_dict(self) -> dict:
        rec = self.node.record
        return {
            "id": self.node_id,
            "x": self.x,
            "y": self.y,
            "depth": self.depth,
            "name": rec.display_name,
            "job_title": rec.job_title,
            "department": rec.department,
            "email": rec.email,
            "is_root": self.node.is_root,
            "is_manager_like": self.node.is_manager_like,
            "placement": self.node.placement,
            "child_count": len(self.node.children),
        }


@dataclass(frozen=True)
class Edge:
    """Parent → child link, derived from the tree."""

    parent: PositionedNode
    child: PositionedNode

    def to_dict(self) -> dict:
        return {"source": self.parent.node_id, "target": self.child.node_id}


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in chart coordinates."""

    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, node: PositionedNode, extent: NodeExtent) -> bool:
        """True if the full drawn box of ``node`` lies inside."""
        half_w = extent.width / 2
        half_h = extent.height / 2
        return (
            node.x - half_w >= self.min_x
            and node.x + half_w <= self.max_x
            and node.y - half_h >= self.min_y
            and node.y + half_h <= self.max_y
        )

    def to_dict(self) -> dict:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class TreeLayout:
    """Positioned node/edge set plus bounds. Empty when nothing to draw."""

    nodes: List[PositionedNode] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    bounds: BoundingBox = field(default_factory=BoundingBox)
    extent: NodeExtent = field(default_factory=NodeExtent)

    @property
    def is_empty(self) -> bool:
        return not self.nodes


# ── Viewport ──────────────────────────────────────────────────

@dataclass(frozen=True)
class ViewportSize:
    width: float
    height: float


@dataclass(frozen=True)
class ViewTransform:
    """screen = chart * scale + (tx, ty)."""

    tx: float = 0.0
    ty: float = 0.0
    scale: float = 1.0

    @classmethod
    def identity(cls) -> "ViewTransform":
        return cls(0.0, 0.0, 1.0)

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        """Chart → screen."""
        return (x * self.scale + self.tx, y * self.scale + self.ty)

    def invert(self, x: float, y: float) -> Tuple[float, float]:
        """Screen → chart."""
        return ((x - self.tx) / self.scale, (y - self.ty) / self.scale)

    def to_dict(self) -> dict:
        return {"tx": self.tx, "ty": self.ty, "scale": self.scale}
