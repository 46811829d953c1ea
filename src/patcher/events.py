"""
End-of-clip event propagation.

Gameplay listens for events fired on a clip's last frame (for example
``OnSlideAnimationEnd`` clears the sliding flag). When a variant substitutes
a clip, the substitute must fire the same events even if it was authored
without them. Markers are placed at the substitute's own duration, since
clip lengths differ between variants.

Marker identity is (name, time within MARKER_TIME_TOLERANCE); propagation
never creates a second marker with the same identity, so running it again
on its own output adds nothing.
"""

from typing import Iterable, List, Optional, Tuple

from src.manifest.models import MARKER_TIME_TOLERANCE, ClipInfo, EventMarker


def end_markers(
    markers: Iterable[EventMarker],
    duration: Optional[float],
    tolerance: float = MARKER_TIME_TOLERANCE,
) -> Tuple[EventMarker, ...]:
    """Markers sitting on the clip's last frame (time == duration)."""
    if duration is None:
        return ()
    return tuple(m for m in markers if m.matches(m.name, duration, tolerance))


def has_marker(
    markers: Iterable[EventMarker],
    name: str,
    time: float,
    tolerance: float = MARKER_TIME_TOLERANCE,
) -> bool:
    return any(m.matches(name, time, tolerance) for m in markers)


def add_marker(
    markers: Tuple[EventMarker, ...],
    marker: EventMarker,
    tolerance: float = MARKER_TIME_TOLERANCE,
) -> Tuple[EventMarker, ...]:
    """Append `marker` unless an equivalent one is already present."""
    if has_marker(markers, marker.name, marker.time, tolerance):
        return markers
    return markers + (marker,)


def propagate_end_markers(
    canonical_markers: Iterable[EventMarker],
    canonical_duration: Optional[float],
    substitute: ClipInfo,
    tolerance: float = MARKER_TIME_TOLERANCE,
) -> Tuple[EventMarker, ...]:
    """
    Markers the substitute clip must gain to keep the canonical end events.

    Args:
        canonical_markers: Markers on the canonical clip
        canonical_duration: Canonical clip length; markers at this time are
            end-of-clip markers
        substitute: The replacing clip (its duration places the new markers)
        tolerance: Time tolerance for marker equality

    Returns:
        New markers only (empty when nothing is missing). Equivalent markers
        already on the substitute are not repeated.

    Raises:
        ValueError: If end markers must be propagated but the substitute's
            duration is unknown

    Example:
        >>> slide_a = ClipInfo("A/slide_side.anim", 0.75, (EventMarker("OnSlideAnimationEnd", 0.75),))
        >>> slide_c = ClipInfo("C/slide_side.anim", 0.9)
        >>> propagate_end_markers(slide_a.markers, slide_a.duration, slide_c)
        (EventMarker(name='OnSlideAnimationEnd', time=0.9),)
    """
    wanted = end_markers(canonical_markers, canonical_duration, tolerance)
    if not wanted:
        return ()

    if substitute.duration is None:
        raise ValueError(f"Duration of {substitute.path} is unknown; cannot place end markers")

    existing = substitute.markers
    gained: List[EventMarker] = []
    for marker in wanted:
        candidate = EventMarker(name=marker.name, time=substitute.duration)
        if has_marker(existing, candidate.name, candidate.time, tolerance):
            continue
        if has_marker(gained, candidate.name, candidate.time, tolerance):
            continue
        gained.append(candidate)
    return tuple(gained)
