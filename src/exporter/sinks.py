"""
Output sinks for compiled graphs and patches.

A sink receives rendered documents and persists them. Two destinations are
supported:

- a local directory (default), e.g. ``./build/animators``
- a Google Cloud Storage prefix, e.g. ``gs://my-bucket/animators/``

Example usage:
    >>> sink = open_sink("gs://animation-builds/controllers")
    >>> location = sink.write_graph(graph)
    >>> print(location)
    gs://animation-builds/controllers/variant_a_motion_graph.json
"""

import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from src.exporter.serialize import diagnostics_to_list, graph_to_dict, patch_to_dict, to_json
from src.graph.model import MotionGraph
from src.patcher.overrides import OverridePatch
from src.utils.diagnostics import Diagnostic
from src.utils.logging import get_logger, log_function_call
from src.utils.retry import retry_with_backoff

logger = get_logger(__name__)

GCS_SCHEME = "gs://"
MAX_RETRIES = 3
UPLOAD_TIMEOUT_SECONDS = 300
DIAGNOSTICS_FILENAME = "diagnostics.json"

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """
    File-name-safe form of a variant tag.

    Example:
        >>> slugify("Variant C")
        'variant_c'
    """
    slug = _SLUG_RE.sub("_", value.lower()).strip("_")
    return slug or "variant"


def graph_filename(graph: MotionGraph) -> str:
    return f"{slugify(graph.base_variant)}_motion_graph.json"


def patch_filename(patch: OverridePatch) -> str:
    return f"{slugify(patch.variant)}_override_patch.json"


class OutputSink:
    """Base class: subclasses implement `write_text`."""

    def write_text(self, filename: str, text: str) -> str:
        """Persist `text` under `filename` and return its location."""
        raise NotImplementedError

    def write_document(self, filename: str, document: Any) -> str:
        return self.write_text(filename, to_json(document))

    def write_graph(self, graph: MotionGraph) -> str:
        return self.write_document(graph_filename(graph), graph_to_dict(graph))

    def write_patch(self, patch: OverridePatch) -> str:
        return self.write_document(patch_filename(patch), patch_to_dict(patch))

    def write_diagnostics(self, diagnostics: Iterable[Diagnostic]) -> str:
        return self.write_document(DIAGNOSTICS_FILENAME, diagnostics_to_list(diagnostics))


class LocalDirectorySink(OutputSink):
    """Writes documents as files in a local directory (created on demand)."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def write_text(self, filename: str, text: str) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.root / filename
        target.write_text(text, encoding="utf-8")
        logger.info(f"Wrote {target}")
        return str(target)

    def __repr__(self) -> str:
        return f"LocalDirectorySink({str(self.root)!r})"


class GcsSink(OutputSink):
    """
    Uploads documents to a GCS bucket under a prefix.

    Args:
        bucket_name: Bucket name (without gs://)
        prefix: Folder path inside the bucket
        client: Optional pre-built google.cloud.storage.Client
        timeout_seconds: Per-upload timeout
    """

    def __init__(
        self,
        bucket_name: str,
        prefix: str = "",
        client: Optional[Any] = None,
        timeout_seconds: int = UPLOAD_TIMEOUT_SECONDS,
    ) -> None:
        if not bucket_name:
            raise ValueError("Bucket name cannot be empty")
        self.bucket_name = bucket_name
        self.prefix = prefix.strip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client

    def blob_name(self, filename: str) -> str:
        return f"{self.prefix}/{filename}" if self.prefix else filename

    def write_text(self, filename: str, text: str) -> str:
        blob_name = self.blob_name(filename)
        self._upload(blob_name, text)
        uri = f"{GCS_SCHEME}{self.bucket_name}/{blob_name}"
        logger.info(f"Uploaded {uri} ({len(text.encode('utf-8'))} bytes)")
        return uri

    @retry_with_backoff(max_attempts=MAX_RETRIES, base_delay=2.0, max_delay=30.0)
    def _upload(self, blob_name: str, text: str) -> None:
        if self._client is None:
            from google.cloud import storage

            self._client = storage.Client()

        blob = self._client.bucket(self.bucket_name).blob(blob_name)
        blob.upload_from_string(
            text,
            content_type="application/json",
            timeout=self.timeout_seconds,
        )

    def __repr__(self) -> str:
        return f"GcsSink({GCS_SCHEME}{self.bucket_name}/{self.prefix})"


def parse_gcs_uri(uri: str) -> Tuple[str, str]:
    """
    Split ``gs://bucket/prefix`` into (bucket, prefix).

    Raises:
        ValueError: If the URI is not a gs:// URI or has no bucket
    """
    if not uri.startswith(GCS_SCHEME):
        raise ValueError(f"Not a GCS URI: {uri}")
    bucket, _, prefix = uri[len(GCS_SCHEME):].partition("/")
    if not bucket:
        raise ValueError(f"GCS URI has no bucket: {uri}")
    return bucket, prefix.strip("/")


@log_function_call
def open_sink(destination: Union[str, Path]) -> OutputSink:
    """
    Create the sink for an output location.

    ``gs://bucket/prefix`` gives a GcsSink; anything else is a local directory.
    """
    text = str(destination)
    if text.startswith(GCS_SCHEME):
        bucket, prefix = parse_gcs_uri(text)
        return GcsSink(bucket, prefix)
    return LocalDirectorySink(text)


def write_all(
    sink: OutputSink,
    graph: MotionGraph,
    patches: Iterable[OverridePatch],
    diagnostics: Iterable[Diagnostic],
) -> List[str]:
    """Persist a graph, then patches in order, then diagnostics."""
    locations = [sink.write_graph(graph)]
    locations.extend(sink.write_patch(patch) for patch in patches)
    locations.append(sink.write_diagnostics(diagnostics))
    return locations


def summarize_locations(locations: Iterable[str]) -> Dict[str, int]:
    """Count written documents per kind, for CLI summaries."""
    summary = {"graphs": 0, "patches": 0, "other": 0}
    for location in locations:
        if location.endswith("_motion_graph.json"):
            summary["graphs"] += 1
        elif location.endswith("_override_patch.json"):
            summary["patches"] += 1
        else:
            summary["other"] += 1
    return summary
