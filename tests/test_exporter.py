"""Tests for document rendering and output sinks."""

import json
from pathlib import Path
from typing import Dict, List

import pytest

from src.exporter import (
    GcsSink,
    LocalDirectorySink,
    diagnostics_to_list,
    graph_to_dict,
    open_sink,
    parse_gcs_uri,
    patch_to_dict,
    slugify,
    summarize_locations,
    to_json,
    write_all,
)
from src.graph import build_motion_graph
from src.manifest import AssetCatalog, filter_variant
from src.patcher import compute_override_patch
from src.utils.diagnostics import Diagnostic, DiagnosticKind


class FakeBlob:
    def __init__(self, store: Dict[str, str], name: str, failures: List[Exception]) -> None:
        self.store = store
        self.name = name
        self.failures = failures

    def upload_from_string(self, text, content_type=None, timeout=None):
        if self.failures:
            raise self.failures.pop(0)
        self.store[self.name] = text


class FakeBucket:
    def __init__(self, store, failures) -> None:
        self.store = store
        self.failures = failures

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self.store, name, self.failures)


class FakeStorageClient:
    """Stands in for google.cloud.storage.Client."""

    def __init__(self, failures: List[Exception] = None) -> None:
        self.uploads: Dict[str, str] = {}
        self.failures = list(failures or [])
        self.buckets: List[str] = []

    def bucket(self, name: str) -> FakeBucket:
        self.buckets.append(name)
        return FakeBucket(self.uploads, self.failures)


@pytest.fixture
def compiled(sample_entries):
    catalog = AssetCatalog.from_entries(sample_entries)
    graph = build_motion_graph(filter_variant(sample_entries, "Variant A"), catalog)
    patches = [
        compute_override_patch(graph, sample_entries, v, catalog) for v in ("Variant B", "Variant C")
    ]
    return graph, patches


class TestSerialize:
    """Tests for graph_to_dict / patch_to_dict."""

    def test_graph_document(self, compiled):
        graph, _ = compiled

        doc = graph_to_dict(graph)

        assert doc["kind"] == "motion_graph"
        assert doc["version"] == "1.0"
        assert doc["base_variant"] == "Variant A"
        assert doc["entry_state"] == "Idle"
        assert [s["name"] for s in doc["states"]] == [
            "Idle", "Walk", "Run", "Jump", "Attack", "Duck", "Slide",
        ]
        idle = doc["states"][0]["binding"]
        assert idle["type"] == "blend_node"
        assert idle["children"][0] == {
            "slot": "S",
            "direction": [0.0, -1.0],
            "asset": {"name": "idle_down", "path": "Assets/Clips/Variant A/idle_down.anim"},
        }
        assert len(doc["transitions"]) == 12
        assert doc["transitions"][4]["source"] == "AnyState"
        assert doc["markers"]["slide_up"] == [{"name": "OnSlideAnimationEnd", "time": 0.75}]

    def test_patch_document(self, compiled):
        _, patches = compiled

        doc = patch_to_dict(patches[1])

        assert doc["kind"] == "override_patch"
        assert doc["variant"] == "Variant C"
        assert [s["canonical"]["name"] for s in doc["substitutions"]] == ["run_up", "slide_side"]
        assert doc["markers"] == [
            {
                "asset": {"name": "slide_side", "path": "Assets/Clips/Variant C/slide_side.anim"},
                "markers": [{"name": "OnSlideAnimationEnd", "time": 0.9}],
            }
        ]

    def test_to_json_is_stable(self, compiled):
        graph, _ = compiled

        text = to_json(graph_to_dict(graph))

        assert text.endswith("\n")
        assert json.loads(text) == graph_to_dict(graph)
        assert text == to_json(graph_to_dict(graph))

    def test_diagnostics_list(self):
        diag = Diagnostic(DiagnosticKind.EMPTY_VARIANT_FILTER, "nothing", variant="Variant Z")

        assert diagnostics_to_list([diag]) == [
            {
                "kind": "EmptyVariantFilter",
                "message": "nothing",
                "variant": "Variant Z",
                "asset": None,
                "detail": None,
            }
        ]


class TestLocalDirectorySink:
    """Tests for LocalDirectorySink."""

    def test_write_all(self, tmp_path: Path, compiled):
        graph, patches = compiled
        sink = LocalDirectorySink(tmp_path / "out")

        locations = write_all(sink, graph, patches, [])

        assert [Path(loc).name for loc in locations] == [
            "variant_a_motion_graph.json",
            "variant_b_override_patch.json",
            "variant_c_override_patch.json",
            "diagnostics.json",
        ]
        assert json.loads((tmp_path / "out" / "diagnostics.json").read_text()) == []
        assert summarize_locations(locations) == {"graphs": 1, "patches": 2, "other": 1}


class TestGcsSink:
    """Tests for GcsSink with a fake storage client."""

    def test_upload(self, compiled):
        graph, _ = compiled
        client = FakeStorageClient()
        sink = GcsSink("anim-builds", prefix="/controllers/", client=client)

        uri = sink.write_graph(graph)

        assert uri == "gs://anim-builds/controllers/variant_a_motion_graph.json"
        assert client.buckets == ["anim-builds"]
        assert json.loads(client.uploads["controllers/variant_a_motion_graph.json"])["kind"] == (
            "motion_graph"
        )

    def test_upload_retries_transient_errors(self, monkeypatch, compiled):
        monkeypatch.setattr("src.utils.retry.time.sleep", lambda _: None)
        graph, _ = compiled
        client = FakeStorageClient(failures=[ConnectionError("reset")])
        sink = GcsSink("anim-builds", client=client)

        sink.write_graph(graph)

        assert "variant_a_motion_graph.json" in client.uploads

    def test_upload_gives_up(self, monkeypatch, compiled):
        monkeypatch.setattr("src.utils.retry.time.sleep", lambda _: None)
        graph, _ = compiled
        client = FakeStorageClient(failures=[ConnectionError("down")] * 3)
        sink = GcsSink("anim-builds", client=client)

        with pytest.raises(ConnectionError):
            sink.write_graph(graph)

    def test_empty_bucket_rejected(self):
        with pytest.raises(ValueError, match="Bucket"):
            GcsSink("")


class TestOpenSink:
    """Tests for open_sink and URI helpers."""

    def test_local_directory(self, tmp_path: Path):
        sink = open_sink(tmp_path)

        assert isinstance(sink, LocalDirectorySink)
        assert sink.root == tmp_path

    def test_gcs_uri(self):
        sink = open_sink("gs://anim-builds/controllers")

        assert isinstance(sink, GcsSink)
        assert sink.bucket_name == "anim-builds"
        assert sink.prefix == "controllers"

    def test_parse_gcs_uri(self):
        assert parse_gcs_uri("gs://bucket") == ("bucket", "")
        assert parse_gcs_uri("gs://bucket/a/b/") == ("bucket", "a/b")
        with pytest.raises(ValueError):
            parse_gcs_uri("gs:///prefix")
        with pytest.raises(ValueError):
            parse_gcs_uri("s3://bucket")

    @pytest.mark.parametrize(
        "value, slug",
        [("Variant A", "variant_a"), ("Hero-Skin 2", "hero_skin_2"), ("!!!", "variant")],
    )
    def test_slugify(self, value: str, slug: str):
        assert slugify(value) == slug
