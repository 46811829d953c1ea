"""
Motion graph value types.

The graph is plain immutable data: logical states bound to blend nodes,
guarded transitions between them, and the parameters the runtime controller
drives. Serializing it to an engine format is a separate, final step
(see src.exporter).
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple, Optional, Tuple, Union

from src.graph.directions import CompassSlot, Vector2, compass_slot
from src.manifest.models import AssetRef, EventMarker

HORIZONTAL_PARAMETER = "Horizontal"
VERTICAL_PARAMETER = "Vertical"
DEFAULT_BLEND_DURATION = 0.1


class LogicalState(str, Enum):
    """The closed set of states every motion graph contains, in canonical order."""

    IDLE = "Idle"
    WALK = "Walk"
    RUN = "Run"
    JUMP = "Jump"
    ATTACK = "Attack"
    DUCK = "Duck"
    SLIDE = "Slide"

    @property
    def clip_prefix(self) -> str:
        """Prefix shared by this state's clip names (e.g. "sword_attack")."""
        return _CLIP_PREFIXES[self]

    @property
    def end_event(self) -> Optional[str]:
        """Event fired at the end of this state's clips, if the state has one."""
        return _END_EVENTS.get(self)


_CLIP_PREFIXES: Dict[LogicalState, str] = {
    LogicalState.IDLE: "idle",
    LogicalState.WALK: "walk",
    LogicalState.RUN: "run",
    LogicalState.JUMP: "jump",
    LogicalState.ATTACK: "sword_attack",
    LogicalState.DUCK: "duck",
    LogicalState.SLIDE: "slide",
}

_END_EVENTS: Dict[LogicalState, str] = {
    LogicalState.SLIDE: "OnSlideAnimationEnd",
}


class Axis(str, Enum):
    """Authored clip orientations, in blend-node child order."""

    DOWN = "down"
    UP = "up"
    SIDE = "side"


def sub_name(state: LogicalState, axis: Axis) -> str:
    """
    Canonical clip name for one orientation of a state.

    Example:
        >>> sub_name(LogicalState.ATTACK, Axis.SIDE)
        'sword_attack_side'
    """
    return f"{state.clip_prefix}_{axis.value}"


class AnyState(str, Enum):
    """Source of transitions that may fire from every state."""

    ANY = "AnyState"


ANY_STATE = AnyState.ANY

TransitionSource = Union[LogicalState, AnyState]


class ParameterKind(str, Enum):
    FLOAT = "float"
    BOOL = "bool"
    TRIGGER = "trigger"


@dataclass(frozen=True)
class Parameter:
    name: str
    kind: ParameterKind


PARAMETERS: Tuple[Parameter, ...] = (
    Parameter(HORIZONTAL_PARAMETER, ParameterKind.FLOAT),
    Parameter(VERTICAL_PARAMETER, ParameterKind.FLOAT),
    Parameter("Speed", ParameterKind.FLOAT),
    Parameter("IsMoving", ParameterKind.BOOL),
    Parameter("IsJumping", ParameterKind.BOOL),
    Parameter("IsDucking", ParameterKind.BOOL),
    Parameter("IsRunning", ParameterKind.BOOL),
    Parameter("IsAttacking", ParameterKind.BOOL),
    Parameter("IsSliding", ParameterKind.BOOL),
    Parameter("Jump", ParameterKind.TRIGGER),
    Parameter("Attack", ParameterKind.TRIGGER),
    Parameter("Slide", ParameterKind.TRIGGER),
)


class Guard(NamedTuple):
    """Transition condition: `parameter` must equal `required`."""

    parameter: str
    required: bool


class ExitPolicy(str, Enum):
    IMMEDIATE = "immediate"
    WAIT_FOR_COMPLETION = "wait_for_completion"


@dataclass(frozen=True)
class Transition:
    """
    Guarded edge between two states.

    Attributes:
        source: Origin state, or ANY_STATE
        dest: Destination state
        guards: Conditions that must all hold
        exit_policy: Leave at once, or only after the current clip finishes
        exit_time: Normalized clip time to leave at (waiting transitions only)
        blend_duration: Cross-fade length in seconds
        can_transition_to_self: Whether an any-state edge may re-enter `dest`
    """

    source: TransitionSource
    dest: LogicalState
    guards: Tuple[Guard, ...]
    exit_policy: ExitPolicy = ExitPolicy.IMMEDIATE
    exit_time: Optional[float] = None
    blend_duration: float = DEFAULT_BLEND_DURATION
    can_transition_to_self: bool = True

    def __post_init__(self) -> None:
        if self.exit_policy is ExitPolicy.WAIT_FOR_COMPLETION and self.exit_time is None:
            raise ValueError(f"{self.source.value}->{self.dest.value}: waiting exit needs exit_time")
        if self.exit_policy is ExitPolicy.IMMEDIATE and self.exit_time is not None:
            raise ValueError(f"{self.source.value}->{self.dest.value}: immediate exit has no exit_time")


@dataclass(frozen=True)
class BlendChild:
    direction: Vector2
    asset: AssetRef

    def __post_init__(self) -> None:
        compass_slot(self.direction)

    @property
    def slot(self) -> CompassSlot:
        return compass_slot(self.direction)


@dataclass(frozen=True)
class BlendNode:
    """2D directional blend over the Horizontal/Vertical parameters."""

    name: str
    children: Tuple[BlendChild, ...] = ()
    horizontal_parameter: str = HORIZONTAL_PARAMETER
    vertical_parameter: str = VERTICAL_PARAMETER

    def asset_refs(self) -> Tuple[AssetRef, ...]:
        """Distinct assets in child order."""
        return tuple(dict.fromkeys(child.asset for child in self.children))


Binding = Union[AssetRef, BlendNode]


@dataclass(frozen=True)
class StateNode:
    state: LogicalState
    binding: Binding

    @property
    def name(self) -> str:
        return self.state.value

    def asset_refs(self) -> Tuple[AssetRef, ...]:
        if isinstance(self.binding, BlendNode):
            return self.binding.asset_refs()
        return (self.binding,)


@dataclass(frozen=True)
class MotionGraph:
    """
    Canonical motion graph for one base variant.

    Built once per compilation run and shared read-only by every override
    patch. `state()` uses an index built at construction instead of searching
    the state list.
    """

    base_variant: str
    states: Tuple[StateNode, ...]
    transitions: Tuple[Transition, ...]
    parameters: Tuple[Parameter, ...] = PARAMETERS
    entry_state: LogicalState = LogicalState.IDLE
    markers: Mapping[str, Tuple[EventMarker, ...]] = field(default_factory=dict)
    _index: Mapping[LogicalState, StateNode] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        index: Dict[LogicalState, StateNode] = {}
        for node in self.states:
            if node.state in index:
                raise ValueError(f"Duplicate state in graph: {node.name}")
            index[node.state] = node

        if self.entry_state not in index:
            raise ValueError(f"Entry state {self.entry_state.value} is not in the graph")
        for transition in self.transitions:
            for end in (transition.source, transition.dest):
                if isinstance(end, LogicalState) and end not in index:
                    raise ValueError(f"Transition references missing state {end.value}")

        object.__setattr__(self, "_index", MappingProxyType(index))
        object.__setattr__(self, "markers", MappingProxyType(dict(self.markers)))

    def state(self, state: LogicalState) -> StateNode:
        """Look up a state node by logical state."""
        return self._index[state]

    def asset_refs(self) -> Tuple[AssetRef, ...]:
        """
        Every distinct asset bound in the graph.

        Canonical order: state declaration order, then child order within
        each blend node.
        """
        refs: Dict[AssetRef, None] = {}
        for node in self.states:
            for ref in node.asset_refs():
                refs.setdefault(ref, None)
        return tuple(refs)

    def markers_for(self, asset_name: str) -> Tuple[EventMarker, ...]:
        return self.markers.get(asset_name, ())
