"""
Asset catalog.

Resolves a clip path to what is known about the clip (duration, authored
event markers). A path that the catalog cannot resolve is treated like a
missing asset: the graph builder skips it and the override patcher reports it.

When `asset_root` is configured, a clip only resolves if its file also exists
on disk under that root, which catches manifests that drifted from the
content tree.
"""

from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Union

from src.manifest.models import ClipInfo, ManifestEntry
from src.manifest.variants import normalize_path
from src.utils.logging import get_logger

logger = get_logger(__name__)


class AssetCatalog:
    """
    Lookup of clip metadata by path.

    Example:
        >>> catalog = AssetCatalog.from_entries(entries, asset_root="/work/unity")
        >>> clip = catalog.resolve("Assets/Clips/Variant C/slide_side.anim")
        >>> clip.duration if clip else None
        0.8
    """

    def __init__(
        self,
        clips: Mapping[str, ClipInfo],
        asset_root: Optional[Union[str, Path]] = None,
    ) -> None:
        self._clips: Dict[str, ClipInfo] = {normalize_path(path): clip for path, clip in clips.items()}
        self.asset_root = Path(asset_root) if asset_root is not None else None

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[ManifestEntry],
        asset_root: Optional[Union[str, Path]] = None,
    ) -> "AssetCatalog":
        """
        Build a catalog from manifest metadata.

        When the same path is listed twice, the first record's metadata wins,
        matching the filter's first-occurrence rule.
        """
        clips: Dict[str, ClipInfo] = {}
        for entry in entries:
            key = normalize_path(entry.path)
            if key not in clips:
                clips[key] = ClipInfo(path=entry.path, duration=entry.duration, markers=entry.events)
        return cls(clips, asset_root=asset_root)

    def resolve(self, path: str) -> Optional[ClipInfo]:
        """Return clip metadata for `path`, or None if it cannot be resolved."""
        clip = self._clips.get(normalize_path(path))
        if clip is None:
            return None
        if self.asset_root is not None and not (self.asset_root / normalize_path(path)).is_file():
            logger.debug(f"Clip listed but missing on disk: {self.asset_root / path}")
            return None
        return clip

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.resolve(path) is not None

    def __len__(self) -> int:
        return len(self._clips)
