"""
Per-variant override patches and end-of-clip event propagation.

Exports:
    compute_override_patch: Sparse canonical -> substitute table for a variant
    OverridePatch: The patch value type
    propagate_end_markers: Markers a substitute must gain
"""

from src.patcher.events import add_marker, end_markers, has_marker, propagate_end_markers
from src.patcher.overrides import OverridePatch, compute_override_patch

__all__ = [
    "OverridePatch",
    "add_marker",
    "compute_override_patch",
    "end_markers",
    "has_marker",
    "propagate_end_markers",
]
