"""
Canonical motion graph: model, direction bucketing and the builder.

Exports:
    build_motion_graph: Build the graph from the base variant's clips
    bucket_directions: Clip sub-name -> blend directions
    MotionGraph, LogicalState, BlendNode, Transition, ...: Graph value types
"""

from src.graph.directions import CompassSlot, Vector2, bucket_directions, compass_slot
from src.graph.model import (
    ANY_STATE,
    PARAMETERS,
    AnyState,
    Axis,
    BlendChild,
    BlendNode,
    ExitPolicy,
    Guard,
    LogicalState,
    MotionGraph,
    Parameter,
    ParameterKind,
    StateNode,
    Transition,
    sub_name,
)
from src.graph.builder import build_motion_graph, standard_transitions

__all__ = [
    "ANY_STATE",
    "PARAMETERS",
    "AnyState",
    "Axis",
    "BlendChild",
    "BlendNode",
    "CompassSlot",
    "ExitPolicy",
    "Guard",
    "LogicalState",
    "MotionGraph",
    "Parameter",
    "ParameterKind",
    "StateNode",
    "Transition",
    "Vector2",
    "bucket_directions",
    "build_motion_graph",
    "compass_slot",
    "standard_transitions",
]
