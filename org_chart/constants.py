"""
Org Chart Kernel — Default Values

All magic numbers live here as module-level defaults.
Runtime overrides are passed to OrgChartEngine / the viewport functions.

Geometry values are chart units (pixels at scale 1.0).
"""

from typing import Tuple

# --- Manager-like classification ---
# Matched as case- and accent-insensitive substrings of the job title.
DEFAULT_MANAGER_KEYWORDS: Tuple[str, ...] = (
    "manager",
    "responsable",
    "responsible",
    "supervisor",
    "superviseur",
    "director",
    "directeur",
    "directrice",
    "head",
    "chef",
    "chief",
)

# --- Directory status ---
ACTIVE_STATUSES: Tuple[str, ...] = ("actif", "active")

# --- Node box ---
NODE_WIDTH: float = 340.0
NODE_HEIGHT: float = 150.0

# --- Spacing ---
LEVEL_GAP: float = 30.0      # 180 between rows, centre to centre
SIBLING_GAP: float = 10.0    # 350 between siblings, centre to centre
COUSIN_GAP: float = 2 * SIBLING_GAP

# --- Viewport ---
MIN_SCALE: float = 0.15
MAX_SCALE: float = 3.0
FIT_MARGIN: float = 40.0
TOP_MARGIN: float = 120.0
ZOOM_IN_FACTOR: float = 1.2
ZOOM_OUT_FACTOR: float = 0.8

# --- Export ---
EXPORT_PADDING: float = 60.0

# --- Labels ---
UNNAMED_LABEL: str = "Unnamed"
UNSPECIFIED_TITLE: str = "Unspecified"
