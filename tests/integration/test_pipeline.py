"""Integration tests for end-to-end compile workflows.

These tests verify that all components work together correctly:
- Scan → manifest → job file → compile → documents on disk
- Patch independence and deterministic output
- Manifest drift against the content tree
"""

import json
from pathlib import Path
from typing import Dict, List

import pytest

from src.compiler import compile_motion_graph
from src.manifest import dump_manifest, scan_clip_directory
from src.manifest.models import ManifestEntry
from src.utils.config import CompilerConfig
from src.utils.config_loader import config_from_job, load_config
from src.utils.diagnostics import DiagnosticKind
from src.utils.metrics import CompilerMetrics
from tests.factories import ALL_CLIP_NAMES, make_entries, manifest_json


@pytest.fixture(autouse=True)
def fresh_metrics(monkeypatch):
    from src.utils import metrics

    monkeypatch.setattr(metrics, "_metrics_instance", CompilerMetrics())


@pytest.fixture
def content_tree(tmp_path: Path) -> Path:
    """Project-like tree: Assets/Clips/<variant>/<clip>.anim."""
    clips = tmp_path / "project" / "Assets" / "Clips"
    layout: Dict[str, List[str]] = {
        "Variant A": ALL_CLIP_NAMES,
        "Variant B": ["walk_side", "idle_down"],
        "Variant C": ["slide_side", "run_up"],
    }
    for variant, names in layout.items():
        (clips / variant).mkdir(parents=True)
        for name in names:
            (clips / variant / f"{name}.anim").write_text("clip")
    return tmp_path / "project"


def read_json(path: Path):
    return json.loads(path.read_text())


class TestScanAndCompile:
    """Scan a content tree, write a job file, compile from it."""

    def test_end_to_end(self, content_tree: Path, tmp_path: Path):
        entries = scan_clip_directory(content_tree / "Assets", relative_to=content_tree)
        manifest = tmp_path / "animationList.json"
        manifest.write_text(dump_manifest(entries))

        out = tmp_path / "build"
        job_file = tmp_path / "job.yaml"
        job_file.write_text(
            f"""version: "1.0"
workflow: compile_motion_graph
manifest: {manifest.as_posix()}
output: {out.as_posix()}
asset_root: {content_tree.as_posix()}
variants:
  - Variant B
  - Variant C
  - Variant D
"""
        )

        config = config_from_job(load_config(job_file))
        result = compile_motion_graph(config)

        assert result.success, result.error_message
        assert sorted(p.name for p in out.iterdir()) == [
            "diagnostics.json",
            "variant_a_motion_graph.json",
            "variant_b_override_patch.json",
            "variant_c_override_patch.json",
        ]

        graph_doc = read_json(out / "variant_a_motion_graph.json")
        assert graph_doc["entry_state"] == "Idle"
        assert len(graph_doc["states"]) == 7
        assert len(graph_doc["transitions"]) == 12

        patch_b = read_json(out / "variant_b_override_patch.json")
        assert [s["canonical"]["name"] for s in patch_b["substitutions"]] == [
            "idle_down",
            "walk_side",
        ]
        assert patch_b["substitutions"][1]["substitute"]["path"] == (
            "Assets/Clips/Variant B/walk_side.anim"
        )

        # Scanned manifests carry no durations, so slide end events cannot be placed
        diagnostics = read_json(out / "diagnostics.json")
        kinds = [d["kind"] for d in diagnostics]
        assert kinds.count("MissingClipDuration") == 3
        assert kinds.count("EmptyVariantFilter") == 1
        empty = next(d for d in diagnostics if d["kind"] == "EmptyVariantFilter")
        assert empty["variant"] == "Variant D"

    def test_manifest_drift_reported(self, content_tree: Path, tmp_path: Path):
        entries = scan_clip_directory(content_tree / "Assets", relative_to=content_tree)
        entries.append(
            ManifestEntry(name="run_side", path="Assets/Clips/Variant C/run_side.anim")
        )
        manifest = tmp_path / "animationList.json"
        manifest.write_text(dump_manifest(entries))

        result = compile_motion_graph(
            CompilerConfig(
                manifest_source=str(manifest),
                output_sink=str(tmp_path / "build"),
                variants_to_generate=("Variant C",),
                asset_root=str(content_tree),
            )
        )

        assert result.success
        unresolved = [
            d for d in result.diagnostics if d.kind is DiagnosticKind.UNRESOLVED_OVERRIDE
        ]
        assert [(d.variant, d.asset) for d in unresolved] == [("Variant C", "run_side")]
        patch = result.patches["Variant C"]
        assert {c.name for c in patch.substitutions} == {"slide_side", "run_up"}


class TestDocumentStability:
    """Compiled output does not depend on which variants are requested."""

    def compile_to(self, manifest: Path, out: Path, variants) -> None:
        result = compile_motion_graph(
            CompilerConfig(
                manifest_source=str(manifest),
                output_sink=str(out),
                variants_to_generate=tuple(variants),
            )
        )
        assert result.success, result.error_message

    def test_patches_independent_of_order(self, sample_entries, tmp_path: Path):
        manifest = tmp_path / "animationList.json"
        manifest.write_text(manifest_json(sample_entries))

        self.compile_to(manifest, tmp_path / "one", ["Variant B", "Variant C"])
        self.compile_to(manifest, tmp_path / "two", ["Variant C"])
        self.compile_to(manifest, tmp_path / "three", ["Variant C", "Variant B"])

        graph_name = "variant_a_motion_graph.json"
        patch_name = "variant_c_override_patch.json"
        graph_one = (tmp_path / "one" / graph_name).read_bytes()
        assert (tmp_path / "two" / graph_name).read_bytes() == graph_one
        assert (tmp_path / "three" / graph_name).read_bytes() == graph_one
        patch_one = (tmp_path / "one" / patch_name).read_bytes()
        assert (tmp_path / "two" / patch_name).read_bytes() == patch_one
        assert (tmp_path / "three" / patch_name).read_bytes() == patch_one

    def test_slide_substitute_gains_end_marker(self, sample_entries, tmp_path: Path):
        manifest = tmp_path / "animationList.json"
        manifest.write_text(manifest_json(sample_entries))

        self.compile_to(manifest, tmp_path / "out", ["Variant C"])

        patch = read_json(tmp_path / "out" / "variant_c_override_patch.json")
        assert patch["markers"] == [
            {
                "asset": {
                    "name": "slide_side",
                    "path": "Assets/Clips/Variant C/slide_side.anim",
                },
                "markers": [{"name": "OnSlideAnimationEnd", "time": 0.9}],
            }
        ]

    def test_base_only_manifest(self, tmp_path: Path):
        manifest = tmp_path / "animationList.json"
        manifest.write_text(manifest_json(make_entries("Variant A")))

        result = compile_motion_graph(
            CompilerConfig(
                manifest_source=str(manifest),
                output_sink=str(tmp_path / "out"),
                variants_to_generate=("Variant A",),
            )
        )

        assert result.success
        assert result.patches["Variant A"].is_empty
        assert result.persisted_patches == []
