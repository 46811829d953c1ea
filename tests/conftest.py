"""Shared fixtures for compiler tests."""

from pathlib import Path
from typing import List

import pytest

from src.manifest.models import EventMarker, ManifestEntry
from tests.factories import make_entries, manifest_json


@pytest.fixture
def base_entries() -> List[ManifestEntry]:
    """Complete Variant A clip set; slide clips carry their end event."""
    entries = []
    for entry in make_entries("Variant A"):
        if entry.name.startswith("slide_"):
            entry = ManifestEntry(
                name=entry.name,
                path=entry.path,
                duration=0.75,
                events=(EventMarker("OnSlideAnimationEnd", 0.75),),
            )
        entries.append(entry)
    return entries


@pytest.fixture
def sample_entries(base_entries: List[ManifestEntry]) -> List[ManifestEntry]:
    """
    Variant A (complete), plus:

    - Variant B: walk_side and idle_down replacements
    - Variant C: slide_side replacement (0.9 s, no markers) and run_up
    """
    return (
        base_entries
        + make_entries("Variant B", ["walk_side", "idle_down"])
        + make_entries("Variant C", ["slide_side"], duration=0.9)
        + make_entries("Variant C", ["run_up"])
    )


@pytest.fixture
def manifest_file(tmp_path: Path, sample_entries: List[ManifestEntry]) -> Path:
    path = tmp_path / "animationList.json"
    path.write_text(manifest_json(sample_entries), encoding="utf-8")
    return path
