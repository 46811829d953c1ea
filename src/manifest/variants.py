"""
Variant filtering.

A variant ("Variant A", "Variant C", ...) is an alternate content set whose
clips share logical names with the canonical set. Membership is encoded in the
clip path as a delimited segment, e.g. ``Assets/Clips/Variant C/walk_side.anim``.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from src.manifest.models import ManifestEntry
from src.utils.diagnostics import Diagnostic, DiagnosticKind, record
from src.utils.logging import get_logger, log_function_call

logger = get_logger(__name__)


class FilteredMap(Mapping[str, str]):
    """
    Read-only ``name -> path`` lookup for one (manifest, variant) pair.

    Iteration order is manifest declaration order of the winning entries.
    """

    def __init__(self, variant: str, items: Iterable[Tuple[str, str]] = ()) -> None:
        self._variant = variant
        self._paths: Dict[str, str] = dict(items)

    @property
    def variant(self) -> str:
        return self._variant

    def __getitem__(self, name: str) -> str:
        return self._paths[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilteredMap):
            return self._variant == other._variant and list(self.items()) == list(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._variant, tuple(self._paths.items())))

    def __repr__(self) -> str:
        return f"FilteredMap(variant={self._variant!r}, entries={len(self._paths)})"


def variant_segment(variant: str) -> str:
    """
    Path segment that marks membership in `variant`.

    Example:
        >>> variant_segment("Variant C")
        '/Variant C/'
    """
    return f"/{variant}/"


def normalize_path(path: str) -> str:
    """Use forward slashes so Windows-style exports match the same segment."""
    return path.replace("\\", "/")


def path_in_variant(path: str, variant: str) -> bool:
    """True if `path` contains the delimited segment for `variant`."""
    return variant_segment(variant) in normalize_path(path)


@log_function_call
def filter_variant(
    entries: Iterable[ManifestEntry],
    variant: str,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> FilteredMap:
    """
    Restrict a manifest to one variant, first occurrence wins.

    Entries are visited in manifest order. An entry is kept when its path
    contains the variant segment and its name has not been kept yet. Later
    duplicates are dropped and each is reported as a DuplicateNameCollision.

    Args:
        entries: Manifest entries in declaration order
        variant: Variant tag, e.g. "Variant A"
        diagnostics: Optional list that collects duplicate-name diagnostics

    Returns:
        FilteredMap (empty when nothing matches; that is not an error here)

    Example:
        >>> lookup = filter_variant(entries, "Variant A")
        >>> lookup["walk_side"]
        'Assets/Clips/Variant A/walk_side.anim'
    """
    if not variant or not variant.strip():
        raise ValueError("variant cannot be empty")

    kept: Dict[str, str] = {}
    for entry in entries:
        if not path_in_variant(entry.path, variant):
            continue
        if entry.name in kept:
            logger.debug(
                f"Duplicate '{entry.name}' in {variant}: keeping {kept[entry.name]}, "
                f"dropping {entry.path}"
            )
            record(
                diagnostics,
                DiagnosticKind.DUPLICATE_NAME_COLLISION,
                f"Duplicate name; kept the first declared entry ({kept[entry.name]})",
                variant=variant,
                asset=entry.name,
                detail=entry.path,
            )
            continue
        kept[entry.name] = entry.path

    if not kept:
        logger.warning(f"No manifest entries matched variant '{variant}'")
    else:
        logger.info(f"Variant '{variant}': {len(kept)} clips")

    return FilteredMap(variant, kept.items())
