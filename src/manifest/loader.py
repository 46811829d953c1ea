"""
Manifest loader.

Parses the flat list of motion assets exported from the content project.
The canonical form wraps the records in an "animations" container:

    {
      "animations": [
        {"name": "walk_side", "path": "Assets/Clips/Variant A/walk_side.anim"},
        {"name": "slide_down", "path": "Assets/Clips/Variant A/slide_down.anim",
         "duration": 0.75,
         "events": [{"name": "OnSlideAnimationEnd", "time": 0.75}]}
      ]
    }

Older exports omit the container and contain only the bare array. Those are
re-wrapped and parsed a second time; that single fallback is the only
alternative shape accepted.
"""

import json
import math
from pathlib import Path
from typing import Any, List, Tuple, Union

from src.manifest.models import EventMarker, ManifestEntry
from src.utils.diagnostics import MalformedManifest
from src.utils.logging import get_logger, log_function_call

logger = get_logger(__name__)

CONTAINER_KEY = "animations"


@log_function_call
def parse_manifest(text: str) -> List[ManifestEntry]:
    """
    Parse manifest text into entries, in declaration order.

    Args:
        text: Raw manifest JSON

    Returns:
        List of ManifestEntry in the order they appear in the manifest

    Raises:
        MalformedManifest: If the text does not parse into the expected shape,
            or any record is invalid (e.g. an empty name)

    Example:
        >>> entries = parse_manifest('[{"name": "idle_up", "path": "x/Variant A/idle_up.anim"}]')
        >>> entries[0].name
        'idle_up'
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedManifest("Manifest is empty")

    try:
        records = _parse_wrapped(text)
    except MalformedManifest as first_error:
        logger.debug(f"Wrapped parse failed ({first_error}), retrying as bare array")
        try:
            records = _parse_wrapped('{"%s": %s}' % (CONTAINER_KEY, text))
        except MalformedManifest:
            raise MalformedManifest(f"Manifest could not be parsed: {first_error}") from None

    entries = [_parse_record(index, record) for index, record in enumerate(records)]
    logger.info(f"✓ Parsed manifest with {len(entries)} entries")
    return entries


def load_manifest(manifest_path: Union[str, Path]) -> List[ManifestEntry]:
    """
    Read and parse a manifest file.

    Raises:
        FileNotFoundError: If the manifest file does not exist
        MalformedManifest: If the file content is not a valid manifest
    """
    path = Path(manifest_path)
    logger.info(f"Loading manifest from: {path}")

    if not path.exists():
        raise FileNotFoundError(f"Manifest file not found: {path}")
    if not path.is_file():
        raise MalformedManifest(f"Manifest path is not a file: {path}")

    return parse_manifest(path.read_text(encoding="utf-8-sig"))


def _parse_wrapped(text: str) -> List[Any]:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedManifest(f"Invalid JSON: {e}") from None

    if not isinstance(document, dict):
        raise MalformedManifest(
            f"Expected an object with an '{CONTAINER_KEY}' list, got {type(document).__name__}"
        )
    records = document.get(CONTAINER_KEY)
    if not isinstance(records, list):
        raise MalformedManifest(f"Missing or non-list '{CONTAINER_KEY}' field")
    return records


def _parse_record(index: int, record: Any) -> ManifestEntry:
    prefix = f"{CONTAINER_KEY}[{index}]"

    if not isinstance(record, dict):
        raise MalformedManifest(f"{prefix}: expected an object, got {type(record).__name__}")

    name = record.get("name")
    path = record.get("path")
    if not isinstance(name, str):
        raise MalformedManifest(f"{prefix}.name: missing or not a string")
    if not name.strip():
        raise MalformedManifest(f"{prefix}.name: must not be empty")
    if not isinstance(path, str):
        raise MalformedManifest(f"{prefix}.path: missing or not a string")

    duration = record.get("duration")
    if duration is not None:
        duration = _parse_seconds(f"{prefix}.duration", duration)

    return ManifestEntry(
        name=name,
        path=path,
        duration=duration,
        events=_parse_events(prefix, record.get("events")),
    )


def _parse_events(prefix: str, raw: Any) -> Tuple[EventMarker, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise MalformedManifest(f"{prefix}.events: must be a list")

    markers = []
    for i, event in enumerate(raw):
        field = f"{prefix}.events[{i}]"
        if not isinstance(event, dict):
            raise MalformedManifest(f"{field}: expected an object")
        name = event.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedManifest(f"{field}.name: missing or empty")
        markers.append(EventMarker(name=name, time=_parse_seconds(f"{field}.time", event.get("time"))))
    return tuple(markers)


def _parse_seconds(field: str, value: Any) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedManifest(f"{field}: must be a number (got: {value!r})")
    if not math.isfinite(value):
        raise MalformedManifest(f"{field}: must be a finite number (got: {value})")
    if value < 0:
        raise MalformedManifest(f"{field}: must not be negative (got: {value})")
    return float(value)
