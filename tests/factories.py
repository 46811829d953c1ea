"""Manifest builders shared by the test modules."""

import json
from typing import Iterable, List, Optional

from src.graph.model import Axis, LogicalState, sub_name
from src.manifest.models import ManifestEntry

CLIP_ROOT = "Assets/Clips"
ALL_CLIP_NAMES = [sub_name(state, axis) for state in LogicalState for axis in Axis]


def clip_path(variant: str, name: str) -> str:
    return f"{CLIP_ROOT}/{variant}/{name}.anim"


def make_entries(
    variant: str,
    names: Optional[Iterable[str]] = None,
    duration: Optional[float] = 1.0,
) -> List[ManifestEntry]:
    """One entry per clip name for `variant` (all 21 canonical clips by default)."""
    return [
        ManifestEntry(name=name, path=clip_path(variant, name), duration=duration)
        for name in (ALL_CLIP_NAMES if names is None else names)
    ]


def manifest_json(entries: Iterable[ManifestEntry]) -> str:
    records = []
    for entry in entries:
        record = {"name": entry.name, "path": entry.path}
        if entry.duration is not None:
            record["duration"] = entry.duration
        if entry.events:
            record["events"] = [{"name": m.name, "time": m.time} for m in entry.events]
        records.append(record)
    return json.dumps({"animations": records}, indent=2)
