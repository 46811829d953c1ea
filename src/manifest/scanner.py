"""
Manifest scanner.

Builds a manifest by walking a clip directory, so a content tree can be
listed without opening the editor. File stems become logical clip names.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from src.manifest.loader import CONTAINER_KEY
from src.manifest.models import ManifestEntry
from src.utils.logging import get_logger, log_function_call

logger = get_logger(__name__)

DEFAULT_CLIP_EXTENSIONS = (".anim", ".fbx", ".bvh")


@log_function_call
def scan_clip_directory(
    root: Union[str, Path],
    extensions: Sequence[str] = DEFAULT_CLIP_EXTENSIONS,
    relative_to: Optional[Union[str, Path]] = None,
) -> List[ManifestEntry]:
    """
    List every clip file under `root`.

    Args:
        root: Directory to walk recursively
        extensions: File suffixes treated as clips (case-insensitive)
        relative_to: Base that recorded paths are relative to
            (default: the parent of `root`, so the root folder name is kept)

    Returns:
        Entries sorted by path, so repeated scans produce identical manifests

    Raises:
        FileNotFoundError: If `root` does not exist
        NotADirectoryError: If `root` is not a directory
    """
    root_path = Path(root)
    if not root_path.exists():
        raise FileNotFoundError(f"Clip directory not found: {root_path}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Not a directory: {root_path}")

    base = Path(relative_to) if relative_to is not None else root_path.parent
    suffixes = {ext.lower() for ext in extensions}

    entries = []
    for file_path in sorted(root_path.rglob("*")):
        if not file_path.is_file() or file_path.suffix.lower() not in suffixes:
            continue
        entries.append(
            ManifestEntry(name=file_path.stem, path=file_path.relative_to(base).as_posix())
        )

    logger.info(f"Found {len(entries)} clips under {root_path}")
    return entries


def dump_manifest(entries: Iterable[ManifestEntry], indent: int = 2) -> str:
    """Render entries in the wrapped manifest form accepted by parse_manifest."""
    records: List[Dict[str, Any]] = []
    for entry in entries:
        item: Dict[str, Any] = {"name": entry.name, "path": entry.path}
        if entry.duration is not None:
            item["duration"] = entry.duration
        if entry.events:
            item["events"] = [{"name": m.name, "time": m.time} for m in entry.events]
        records.append(item)
    return json.dumps({CONTAINER_KEY: records}, indent=indent)
