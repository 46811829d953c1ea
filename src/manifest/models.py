"""Value types shared by the manifest, graph and patcher stages."""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

# Two marker times closer than this are the same instant
MARKER_TIME_TOLERANCE = 1e-5


@dataclass(frozen=True)
class EventMarker:
    """
    A named timestamp attached to a motion clip.

    Attributes:
        name: Event name, e.g. "OnSlideAnimationEnd"
        time: Offset in seconds from the start of the clip
    """

    name: str
    time: float

    def matches(self, name: str, time: float, tolerance: float = MARKER_TIME_TOLERANCE) -> bool:
        """True if this marker has `name` and sits at `time` (within tolerance)."""
        return self.name == name and math.isclose(self.time, time, rel_tol=0.0, abs_tol=tolerance)


@dataclass(frozen=True)
class ManifestEntry:
    """
    One motion asset listed in a manifest.

    Attributes:
        name: Logical clip name, e.g. "walk_side"
        path: Storage path; must contain a "/<variant>/" segment to be filtered
        duration: Clip length in seconds, when known
        events: Markers authored on the clip
    """

    name: str
    path: str
    duration: Optional[float] = None
    events: Tuple[EventMarker, ...] = ()


@dataclass(frozen=True)
class ClipInfo:
    """What the asset catalog knows about one resolvable clip."""

    path: str
    duration: Optional[float] = None
    markers: Tuple[EventMarker, ...] = ()


@dataclass(frozen=True)
class AssetRef:
    """Reference to a motion asset by logical name and storage path."""

    name: str
    path: str

    def __str__(self) -> str:
        return f"{self.name} ({self.path})"
