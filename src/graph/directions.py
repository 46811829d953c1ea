"""
Direction bucketing for 2D directional blend nodes.

Clips are authored in three orientations per state: facing down (toward the
camera), up, and side. The side clip is reused for left, right and all four
diagonals, so one source asset fills six compass slots.
"""

from enum import Enum
from typing import Dict, NamedTuple, Tuple

from src.utils.logging import get_logger

logger = get_logger(__name__)


class Vector2(NamedTuple):
    x: float
    y: float


class CompassSlot(str, Enum):
    """The eight compass points plus center."""

    CENTER = "C"
    N = "N"
    S = "S"
    E = "E"
    W = "W"
    NE = "NE"
    NW = "NW"
    SE = "SE"
    SW = "SW"


SLOT_VECTORS: Dict[CompassSlot, Vector2] = {
    CompassSlot.CENTER: Vector2(0.0, 0.0),
    CompassSlot.N: Vector2(0.0, 1.0),
    CompassSlot.S: Vector2(0.0, -1.0),
    CompassSlot.E: Vector2(1.0, 0.0),
    CompassSlot.W: Vector2(-1.0, 0.0),
    CompassSlot.NE: Vector2(1.0, 1.0),
    CompassSlot.NW: Vector2(-1.0, 1.0),
    CompassSlot.SE: Vector2(1.0, -1.0),
    CompassSlot.SW: Vector2(-1.0, -1.0),
}

_VECTOR_SLOTS: Dict[Vector2, CompassSlot] = {vec: slot for slot, vec in SLOT_VECTORS.items()}

DOWN_SUFFIX = "_down"
UP_SUFFIX = "_up"
SIDE_SUFFIX = "_side"

# Order matters: it is the child order inside every blend node
SIDE_SLOTS: Tuple[CompassSlot, ...] = (
    CompassSlot.E,
    CompassSlot.W,
    CompassSlot.NE,
    CompassSlot.NW,
    CompassSlot.SE,
    CompassSlot.SW,
)


def bucket_directions(sub_name: str) -> Tuple[Vector2, ...]:
    """
    Map a clip sub-name to the blend directions it occupies.

    Args:
        sub_name: Canonical clip name such as "walk_down" or "slide_side"

    Returns:
        Direction vectors in child order; empty for unrecognized suffixes

    Example:
        >>> bucket_directions("idle_up")
        (Vector2(x=0.0, y=1.0),)
        >>> len(bucket_directions("idle_side"))
        6
    """
    if sub_name.endswith(DOWN_SUFFIX):
        return (SLOT_VECTORS[CompassSlot.S],)
    if sub_name.endswith(UP_SUFFIX):
        return (SLOT_VECTORS[CompassSlot.N],)
    if sub_name.endswith(SIDE_SUFFIX):
        return tuple(SLOT_VECTORS[slot] for slot in SIDE_SLOTS)

    logger.debug(f"No direction bucket for '{sub_name}'")
    return ()


def compass_slot(direction: Tuple[float, float]) -> CompassSlot:
    """
    Name the compass slot of a direction vector.

    Raises:
        ValueError: If the vector is not one of the nine slot vectors
    """
    slot = _VECTOR_SLOTS.get(Vector2(float(direction[0]), float(direction[1])))
    if slot is None:
        raise ValueError(f"Direction {tuple(direction)} is not a compass slot")
    return slot
