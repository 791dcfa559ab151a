"""
Viewport Fit — pure transform arithmetic.

screen = chart * scale + (tx, ty)

No state here; OrgChartController holds the current transform.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .constants import (
    EXPORT_PADDING,
    FIT_MARGIN,
    MAX_SCALE,
    MIN_SCALE,
    TOP_MARGIN,
)
from .domain_types import BoundingBox, ViewportSize, ViewTransform


def clamp_scale(scale: float, min_scale: float = MIN_SCALE, max_scale: float = MAX_SCALE) -> float:
    if min_scale <= 0 or max_scale < min_scale:
        raise ValueError(
            f"Invalid scale range [{min_scale}, {max_scale}]"
        )
    return max(min_scale, min(max_scale, scale))


def compute_initial_transform(
    bounds: BoundingBox,
    viewport: ViewportSize,
    min_scale: float = MIN_SCALE,
    max_scale: float = MAX_SCALE,
    margin: float = FIT_MARGIN,
    top_margin: float = TOP_MARGIN,
) -> ViewTransform:
    """
    Largest scale that shows the whole box plus margins, clamped to
    [min_scale, max_scale]. Horizontally centred; the top of the box sits
    at ``top_margin`` unless that would push the box centre below the
    viewport, in which case the box centre goes to the viewport centre.

    Empty bounds (nothing to draw): min_scale, chart origin at the
    viewport centre.
    """
    if bounds.is_empty:
        return ViewTransform(
            tx=viewport.width / 2,
            ty=viewport.height / 2,
            scale=clamp_scale(min_scale, min_scale, max_scale),
        )

    room_w = viewport.width - 2 * margin
    room_h = viewport.height - top_margin - margin
    if room_w <= 0 or room_h <= 0:
        scale = min_scale
    else:
        scale = min(room_w / bounds.width, room_h / bounds.height)
    scale = clamp_scale(scale, min_scale, max_scale)

    cx, cy = bounds.center
    tx = viewport.width / 2 - cx * scale
    ty = top_margin - bounds.min_y * scale
    if ty + cy * scale >= viewport.height:
        ty = viewport.height / 2 - cy * scale
    return ViewTransform(tx=tx, ty=ty, scale=scale)


def apply_zoom(
    current: ViewTransform,
    factor: float,
    pivot: Tuple[float, float],
    min_scale: float = MIN_SCALE,
    max_scale: float = MAX_SCALE,
) -> ViewTransform:
    """Scale by ``factor`` (clamped) keeping the chart point under ``pivot`` fixed."""
    if factor <= 0:
        raise ValueError(f"Zoom factor must be positive, got {factor}")
    scale = clamp_scale(current.scale * factor, min_scale, max_scale)
    px, py = pivot
    wx, wy = current.invert(px, py)
    return ViewTransform(tx=px - wx * scale, ty=py - wy * scale, scale=scale)


def apply_pan(current: ViewTransform, dx: float, dy: float) -> ViewTransform:
    """Translate. Not clamped: the chart may be panned fully off-screen."""
    return ViewTransform(tx=current.tx + dx, ty=current.ty + dy, scale=current.scale)


def reset(initial: ViewTransform) -> ViewTransform:
    """Back to the most recently computed fit."""
    return initial


@dataclass(frozen=True)
class ExportFrame:
    """Canvas size and transform that show the whole chart at scale 1."""

    width: int
    height: int
    transform: ViewTransform

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "transform": self.transform.to_dict(),
        }


def compute_export_frame(bounds: BoundingBox, padding: float = EXPORT_PADDING) -> ExportFrame:
    """Full-chart frame for print / PDF rendering."""
    if padding < 0:
        raise ValueError(f"Padding must be non-negative, got {padding}")
    width = math.ceil(bounds.width + 2 * padding)
    height = math.ceil(bounds.height + 2 * padding)
    return ExportFrame(
        width=width,
        height=height,
        transform=ViewTransform(
            tx=padding - bounds.min_x,
            ty=padding - bounds.min_y,
            scale=1.0,
        ),
    )
