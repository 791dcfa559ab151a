"""
Org Chart Interaction Controller

Holds the only mutable state of the org-chart view: one current
transform (plus the last fit) and at most one selected node. Selection
and viewing are independent of each other.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from .constants import MAX_SCALE, MIN_SCALE, ZOOM_IN_FACTOR, ZOOM_OUT_FACTOR
from .domain_types import PositionedNode, TreeLayout, ViewportSize, ViewTransform
from .engine import OrgChart
from .viewport import apply_pan, apply_zoom, compute_initial_transform
from .viewport import reset as reset_transform


def find_node(chart: Optional[OrgChart], node_id: Optional[str]) -> Optional[PositionedNode]:
    """Pure lookup by node id. None / unknown id → None."""
    if chart is None or node_id is None:
        return None
    for node in chart.layout.nodes:
        if node.node_id == node_id:
            return node
    return None


class OrgChartController:
    """
    View state for one chart.

    ``load`` is the recompute trigger after the employee list changed;
    everything else reacts to a discrete user gesture.
    """

    def __init__(
        self,
        viewport: ViewportSize,
        min_scale: float = MIN_SCALE,
        max_scale: float = MAX_SCALE,
    ) -> None:
        self._viewport = viewport
        self._min_scale = min_scale
        self._max_scale = max_scale
        self._chart: Optional[OrgChart] = None
        self._by_id: Dict[str, PositionedNode] = {}
        self._initial = compute_initial_transform(
            TreeLayout().bounds, viewport, min_scale, max_scale,
        )
        self._transform = self._initial
        self._selected_id: Optional[str] = None

    # -- State access -------------------------------------------------------

    @property
    def chart(self) -> Optional[OrgChart]:
        return self._chart

    @property
    def transform(self) -> ViewTransform:
        return self._transform

    @property
    def initial_transform(self) -> ViewTransform:
        return self._initial

    @property
    def viewport(self) -> ViewportSize:
        return self._viewport

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected(self) -> Optional[PositionedNode]:
        if self._selected_id is None:
            return None
        return self._by_id.get(self._selected_id)

    # -- Recompute ----------------------------------------------------------

    def load(self, chart: OrgChart, viewport: Optional[ViewportSize] = None) -> ViewTransform:
        """
        Adopt a freshly built chart and re-fit. A selection survives only
        if the same node id exists in the new chart.
        """
        self._chart = chart
        self._by_id = {n.node_id: n for n in chart.layout.nodes}
        if viewport is not None:
            self._viewport = viewport
        if self._selected_id not in self._by_id:
            self._selected_id = None
        return self.fit()

    def resize(self, viewport: ViewportSize) -> ViewTransform:
        self._viewport = viewport
        return self.fit()

    def fit(self) -> ViewTransform:
        bounds = self._chart.layout.bounds if self._chart else TreeLayout().bounds
        self._initial = compute_initial_transform(
            bounds, self._viewport, self._min_scale, self._max_scale,
        )
        self._transform = self._initial
        return self._transform

    # -- Gestures -----------------------------------------------------------

    def zoom(self, factor: float, pivot: Optional[Tuple[float, float]] = None) -> ViewTransform:
        if pivot is None:
            pivot = (self._viewport.width / 2, self._viewport.height / 2)
        self._transform = apply_zoom(
            self._transform, factor, pivot, self._min_scale, self._max_scale,
        )
        return self._transform

    def zoom_in(self) -> ViewTransform:
        return self.zoom(ZOOM_IN_FACTOR)

    def zoom_out(self) -> ViewTransform:
        return self.zoom(ZOOM_OUT_FACTOR)

    def pan(self, dx: float, dy: float) -> ViewTransform:
        self._transform = apply_pan(self._transform, dx, dy)
        return self._transform

    def reset(self) -> ViewTransform:
        self._transform = reset_transform(self._initial)
        return self._transform

    # -- Selection ----------------------------------------------------------

    def select(self, node_id: Optional[str]) -> Optional[PositionedNode]:
        """Select by id; None or an unknown id clears the detail panel."""
        node = self._by_id.get(node_id) if node_id is not None else None
        self._selected_id = node.node_id if node is not None else None
        return node

    def node_at(self, screen_x: float, screen_y: float) -> Optional[PositionedNode]:
        """Hit test in screen space against the drawn node boxes."""
        if self._chart is None:
            return None
        x, y = self._transform.invert(screen_x, screen_y)
        extent = self._chart.layout.extent
        half_w, half_h = extent.width / 2, extent.height / 2
        for node in reversed(self._chart.layout.nodes):
            if abs(x - node.x) <= half_w and abs(y - node.y) <= half_h:
                return node
        return None
