"""
Org Chart Kernel
Deterministic management-tree resolution and tidy-tree layout for the
org-chart view. Pure functions of the employee list; no I/O.
"""

from .domain_types import (
    EmployeeRecord, HierarchyNode, ResolutionResult, NodeExtent, Spacing,
    PositionedNode, Edge, BoundingBox, TreeLayout, ViewportSize,
    ViewTransform, normalize_email,
)
from .classification import (
    title_keyword_predicate,
    referenced_manager_predicate,
    sibling_sort_key,
)
from .roots import most_directs_root, name_match_root, email_root
from .resolver import resolve, build_email_index
from .invariants import TreeInvariantError, validate_tree
from .layout import layout, compute_bounds, edge_path
from .viewport import (
    ExportFrame,
    apply_pan,
    apply_zoom,
    clamp_scale,
    compute_export_frame,
    compute_initial_transform,
    reset,
)
from .records import (
    record_from_dict,
    records_from_rows,
    clean_name,
    clean_position,
    filter_active,
    search_records,
)
from .diagnostics import compute_diagnostics
from .hashing import canonical_serialize, canonical_hash
from .engine import OrgChart, OrgChartEngine
from .controller import OrgChartController, find_node

__all__ = [
    "EmployeeRecord",
    "HierarchyNode",
    "ResolutionResult",
    "NodeExtent",
    "Spacing",
    "PositionedNode",
    "Edge",
    "BoundingBox",
    "TreeLayout",
    "ViewportSize",
    "ViewTransform",
    "normalize_email",
    "title_keyword_predicate",
    "referenced_manager_predicate",
    "sibling_sort_key",
    "most_directs_root",
    "name_match_root",
    "email_root",
    "resolve",
    "build_email_index",
    "TreeInvariantError",
    "validate_tree",
    "layout",
    "compute_bounds",
    "edge_path",
    "ExportFrame",
    "apply_pan",
    "apply_zoom",
    "clamp_scale",
    "compute_export_frame",
    "compute_initial_transform",
    "reset",
    "record_from_dict",
    "records_from_rows",
    "clean_name",
    "clean_position",
    "filter_active",
    "search_records",
    "compute_diagnostics",
    "canonical_serialize",
    "canonical_hash",
    "OrgChart",
    "OrgChartEngine",
    "OrgChartController",
    "find_node",
]
