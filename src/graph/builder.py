"""
Graph builder.

Assembles the canonical motion graph from the base variant's filtered
manifest. Topology is fixed; only the clip bindings come from the manifest.

Every state gets a 2D directional blend node populated from its three
canonical clips (``<prefix>_down``, ``<prefix>_up``, ``<prefix>_side``).
Missing clips simply leave holes: a node with only down/up children is valid.

Exit policy per action state (returning to Idle):

    Jump    wait for completion (exit time 1.0), guard IsJumping=false
    Attack  wait for completion (exit time 1.0), guard IsAttacking=false
    Duck    immediate on IsDucking=false
    Slide   wait for completion (exit time 1.0), guard IsSliding=false;
            slide clips also carry an OnSlideAnimationEnd marker at their
            last frame so gameplay can clear IsSliding on completion
"""

from typing import Dict, List, Optional, Tuple

from src.graph.directions import bucket_directions
from src.graph.model import (
    ANY_STATE,
    PARAMETERS,
    Axis,
    BlendChild,
    BlendNode,
    ExitPolicy,
    Guard,
    LogicalState,
    MotionGraph,
    StateNode,
    Transition,
    sub_name,
)
from src.manifest.catalog import AssetCatalog
from src.manifest.models import AssetRef, EventMarker
from src.manifest.variants import FilteredMap
from src.patcher.events import add_marker, end_markers
from src.utils.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    MissingBaseAnimations,
    record,
)
from src.utils.logging import get_logger, log_function_call

logger = get_logger(__name__)

# Normalized clip time at which waiting transitions leave their state
COMPLETION_EXIT_TIME = 1.0

_ACTION_FLAGS: Tuple[Tuple[LogicalState, str], ...] = (
    (LogicalState.JUMP, "IsJumping"),
    (LogicalState.ATTACK, "IsAttacking"),
    (LogicalState.DUCK, "IsDucking"),
    (LogicalState.SLIDE, "IsSliding"),
)

_RETURN_POLICIES: Dict[LogicalState, ExitPolicy] = {
    LogicalState.JUMP: ExitPolicy.WAIT_FOR_COMPLETION,
    LogicalState.ATTACK: ExitPolicy.WAIT_FOR_COMPLETION,
    LogicalState.DUCK: ExitPolicy.IMMEDIATE,
    LogicalState.SLIDE: ExitPolicy.WAIT_FOR_COMPLETION,
}


def standard_transitions() -> Tuple[Transition, ...]:
    """The fixed transition topology, locomotion chain first."""
    transitions: List[Transition] = [
        Transition(LogicalState.IDLE, LogicalState.WALK, (Guard("IsMoving", True),)),
        Transition(LogicalState.WALK, LogicalState.IDLE, (Guard("IsMoving", False),)),
        Transition(LogicalState.WALK, LogicalState.RUN, (Guard("IsRunning", True),)),
        Transition(LogicalState.RUN, LogicalState.WALK, (Guard("IsRunning", False),)),
    ]

    for state, flag in _ACTION_FLAGS:
        transitions.append(
            Transition(ANY_STATE, state, (Guard(flag, True),), can_transition_to_self=False)
        )

    for state, flag in _ACTION_FLAGS:
        policy = _RETURN_POLICIES[state]
        transitions.append(
            Transition(
                state,
                LogicalState.IDLE,
                (Guard(flag, False),),
                exit_policy=policy,
                exit_time=COMPLETION_EXIT_TIME if policy is ExitPolicy.WAIT_FOR_COMPLETION else None,
            )
        )

    return tuple(transitions)


@log_function_call
def build_motion_graph(
    base_map: FilteredMap,
    catalog: Optional[AssetCatalog] = None,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> MotionGraph:
    """
    Build the canonical motion graph from the base variant's clips.

    Args:
        base_map: Filtered manifest of the base variant
        catalog: Optional clip catalog; when given, unresolvable clips are
            skipped and clip durations drive end-of-clip markers
        diagnostics: Optional list collecting non-fatal problems

    Returns:
        Immutable MotionGraph with Idle as entry state

    Raises:
        MissingBaseAnimations: If `base_map` is empty

    Example:
        >>> base = filter_variant(entries, "Variant A")
        >>> graph = build_motion_graph(base, AssetCatalog.from_entries(entries))
        >>> len(graph.state(LogicalState.IDLE).binding.children)
        8
    """
    if len(base_map) == 0:
        raise MissingBaseAnimations(base_map.variant)

    variant = base_map.variant
    states: List[StateNode] = []
    markers: Dict[str, Tuple[EventMarker, ...]] = {}

    for state in LogicalState:
        children: List[BlendChild] = []

        for axis in Axis:
            clip_name = sub_name(state, axis)
            path = base_map.get(clip_name)
            if path is None:
                logger.debug(f"{state.value}: no '{clip_name}' clip in {variant}")
                continue

            clip_markers: Tuple[EventMarker, ...] = ()
            duration: Optional[float] = None
            if catalog is not None:
                clip = catalog.resolve(path)
                if clip is None:
                    logger.warning(f"{state.value}: cannot resolve '{clip_name}' at {path}")
                    record(
                        diagnostics,
                        DiagnosticKind.UNRESOLVED_BASE_ASSET,
                        f"Base clip could not be resolved at {path}; slot left empty",
                        variant=variant,
                        asset=clip_name,
                        detail=path,
                    )
                    continue
                clip_markers = clip.markers
                duration = clip.duration

            asset = AssetRef(name=clip_name, path=path)
            children.extend(BlendChild(direction, asset) for direction in bucket_directions(clip_name))

            if catalog is not None:
                clip_markers = _with_end_event(
                    state, asset, duration, clip_markers, variant, diagnostics
                )
            if clip_markers:
                markers[clip_name] = clip_markers

        node = BlendNode(name=f"{state.value} Blend Tree", children=tuple(children))
        states.append(StateNode(state=state, binding=node))
        logger.debug(f"{state.value}: {len(children)} blend children")

    graph = MotionGraph(
        base_variant=variant,
        states=tuple(states),
        transitions=standard_transitions(),
        parameters=PARAMETERS,
        entry_state=LogicalState.IDLE,
        markers=markers,
    )

    bound = len(graph.asset_refs())
    logger.info(f"✓ Built motion graph for '{variant}': {len(states)} states, {bound} clips bound")
    return graph


def _with_end_event(
    state: LogicalState,
    asset: AssetRef,
    duration: Optional[float],
    clip_markers: Tuple[EventMarker, ...],
    variant: str,
    diagnostics: Optional[List[Diagnostic]],
) -> Tuple[EventMarker, ...]:
    """Add the state's end-of-clip event to a bound clip when it declares one."""
    event = state.end_event
    if event is None:
        return clip_markers

    if duration is None:
        record(
            diagnostics,
            DiagnosticKind.MISSING_CLIP_DURATION,
            f"Clip duration unknown; '{event}' end marker not added",
            variant=variant,
            asset=asset.name,
            detail=asset.path,
        )
        return clip_markers

    if any(m.name == event for m in end_markers(clip_markers, duration)):
        return clip_markers
    return add_marker(clip_markers, EventMarker(name=event, time=duration))
