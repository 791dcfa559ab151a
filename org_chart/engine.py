"""
Org Chart Kernel — Engine

Top-level orchestrator. Delegates placement to resolver.py,
validates via invariants.py, positions via layout.py, reports via
diagnostics.py.

Every build starts from scratch: the engine holds configuration only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Union

from .classification import ManagerPredicate
from .diagnostics import compute_diagnostics
from .domain_types import (
    EmployeeRecord,
    NodeExtent,
    ResolutionResult,
    Spacing,
    TreeLayout,
)
from .hashing import canonical_hash
from .invariants import validate_tree
from .layout import edge_path, layout
from .records import filter_active, record_from_dict
from .resolver import resolve
from .roots import RootStrategy

logger = logging.getLogger(__name__)

EmployeeInput = Union[EmployeeRecord, Mapping[str, Any]]


@dataclass
class OrgChart:
    """Everything the renderer and the detail panel need for one refresh."""

    records: List[EmployeeRecord]
    resolution: ResolutionResult
    layout: TreeLayout
    diagnostics: dict = field(default_factory=dict)
    tree_hash: str = ""

    @property
    def is_empty(self) -> bool:
        return self.layout.is_empty

    def to_dict(self) -> dict:
        extent = self.layout.extent
        return {
            "ok": self.resolution.ok,
            "reason": self.resolution.reason,
            "tree_hash": self.tree_hash,
            "root_id": self.resolution.root.node_id if self.resolution.root else None,
            "extent": {"width": extent.width, "height": extent.height},
            "bounds": self.layout.bounds.to_dict(),
            "nodes": [n.to_dict() for n in self.layout.nodes],
            "edges": [
                {**e.to_dict(), "points": [list(p) for p in edge_path(e, extent)]}
                for e in self.layout.edges
            ],
            "diagnostics": self.diagnostics,
        }


class OrgChartEngine:
    """
    Pipeline: ingest → resolve → validate → layout → diagnose.

    Raises TreeInvariantError only on a resolver defect; data problems
    surface as warnings or as the empty chart.
    """

    def __init__(
        self,
        root_strategy: Optional[RootStrategy] = None,
        is_manager_like: Optional[ManagerPredicate] = None,
        extent: Optional[NodeExtent] = None,
        spacing: Optional[Spacing] = None,
        active_only: bool = True,
    ) -> None:
        self.root_strategy = root_strategy
        self.is_manager_like = is_manager_like
        self.extent = extent
        self.spacing = spacing
        self.active_only = active_only

    # -- Public API ---------------------------------------------------------

    def ingest(self, employees: Iterable[EmployeeInput]) -> List[EmployeeRecord]:
        """Normalize raw rows / records; drop inactive ones when configured."""
        records = [
            e if isinstance(e, EmployeeRecord) else record_from_dict(e, pos)
            for pos, e in enumerate(employees)
        ]
        if self.active_only:
            records = filter_active(records)
        return records

    def build(self, employees: Iterable[EmployeeInput]) -> OrgChart:
        records = self.ingest(employees)
        resolution = resolve(
            records,
            root_strategy=self.root_strategy,
            is_manager_like=self.is_manager_like,
        )
        validate_tree(resolution, records)
        tree_layout = layout(resolution.root, self.extent, self.spacing)
        diagnostics = compute_diagnostics(records, resolution)
        chart = OrgChart(
            records=records,
            resolution=resolution,
            layout=tree_layout,
            diagnostics=diagnostics,
            tree_hash=canonical_hash(resolution.root),
        )
        logger.debug(
            "Built org chart: %d record(s), %d node(s), hash=%s",
            len(records), len(tree_layout.nodes), chart.tree_hash[:12],
        )
        return chart
