"""
JSON-ready rendering of compiler output.

Key order and list order are fixed, so two renders of equal values are
byte-identical once dumped; downstream tooling diffs these documents across
builds.
"""

import json
from typing import Any, Dict, Iterable, List

from src.graph.directions import compass_slot
from src.graph.model import BlendNode, MotionGraph, Transition
from src.manifest.models import AssetRef, EventMarker
from src.patcher.overrides import OverridePatch
from src.utils.diagnostics import Diagnostic

DOCUMENT_VERSION = "1.0"


def _asset(ref: AssetRef) -> Dict[str, str]:
    return {"name": ref.name, "path": ref.path}


def _markers(markers: Iterable[EventMarker]) -> List[Dict[str, Any]]:
    return [{"name": m.name, "time": m.time} for m in markers]


def _transition(transition: Transition) -> Dict[str, Any]:
    return {
        "source": transition.source.value,
        "dest": transition.dest.value,
        "guards": [{"parameter": g.parameter, "value": g.required} for g in transition.guards],
        "exit_policy": transition.exit_policy.value,
        "exit_time": transition.exit_time,
        "blend_duration": transition.blend_duration,
        "can_transition_to_self": transition.can_transition_to_self,
    }


def graph_to_dict(graph: MotionGraph) -> Dict[str, Any]:
    """Render a motion graph as plain data."""
    states = []
    for node in graph.states:
        if isinstance(node.binding, BlendNode):
            binding: Dict[str, Any] = {
                "type": "blend_node",
                "name": node.binding.name,
                "horizontal_parameter": node.binding.horizontal_parameter,
                "vertical_parameter": node.binding.vertical_parameter,
                "children": [
                    {
                        "slot": compass_slot(child.direction).value,
                        "direction": [child.direction.x, child.direction.y],
                        "asset": _asset(child.asset),
                    }
                    for child in node.binding.children
                ],
            }
        else:
            binding = {"type": "asset", "asset": _asset(node.binding)}
        states.append({"name": node.name, "binding": binding})

    return {
        "version": DOCUMENT_VERSION,
        "kind": "motion_graph",
        "base_variant": graph.base_variant,
        "entry_state": graph.entry_state.value,
        "parameters": [{"name": p.name, "kind": p.kind.value} for p in graph.parameters],
        "states": states,
        "transitions": [_transition(t) for t in graph.transitions],
        "markers": {name: _markers(markers) for name, markers in graph.markers.items()},
    }


def patch_to_dict(patch: OverridePatch) -> Dict[str, Any]:
    """Render an override patch as plain data."""
    return {
        "version": DOCUMENT_VERSION,
        "kind": "override_patch",
        "variant": patch.variant,
        "base_variant": patch.base_variant,
        "substitutions": [
            {"canonical": _asset(canonical), "substitute": _asset(substitute)}
            for canonical, substitute in patch.substitutions.items()
        ],
        "markers": [
            {"asset": _asset(substitute), "markers": _markers(markers)}
            for substitute, markers in patch.markers.items()
        ],
    }


def diagnostics_to_list(diagnostics: Iterable[Diagnostic]) -> List[Dict[str, Any]]:
    return [diag.to_dict() for diag in diagnostics]


def to_json(document: Any) -> str:
    """Dump a rendered document with stable formatting."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
