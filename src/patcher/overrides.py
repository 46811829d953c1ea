"""
Override patcher.

Computes, for one variant, which canonical clips the variant replaces. The
result is a sparse table applied on top of the base graph's bindings; graph
topology is never touched. Clips without an override keep their canonical
binding at use time, so the patch has no entry for them.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from src.graph.model import MotionGraph
from src.manifest.catalog import AssetCatalog
from src.manifest.models import AssetRef, EventMarker, ManifestEntry
from src.manifest.variants import filter_variant, normalize_path
from src.patcher.events import propagate_end_markers
from src.utils.diagnostics import Diagnostic, DiagnosticKind, record
from src.utils.logging import get_logger, log_function_call

logger = get_logger(__name__)


@dataclass(frozen=True)
class OverridePatch:
    """
    Per-variant substitution table.

    Attributes:
        variant: Variant this patch was computed for
        base_variant: Variant the underlying graph was built from
        substitutions: canonical clip -> substitute clip, in canonical order
        markers: substitute clip -> end-of-clip markers it must gain
    """

    variant: str
    base_variant: str
    substitutions: Mapping[AssetRef, AssetRef] = field(default_factory=dict)
    markers: Mapping[AssetRef, Tuple[EventMarker, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "substitutions", MappingProxyType(dict(self.substitutions)))
        object.__setattr__(self, "markers", MappingProxyType(dict(self.markers)))

    @property
    def is_empty(self) -> bool:
        return not self.substitutions

    def substitute_for(self, canonical: AssetRef) -> Optional[AssetRef]:
        return self.substitutions.get(canonical)

    def resolve(self, canonical: AssetRef) -> AssetRef:
        """Clip to play for `canonical` under this variant."""
        return self.substitutions.get(canonical, canonical)

    def markers_for(self, substitute: AssetRef) -> Tuple[EventMarker, ...]:
        return self.markers.get(substitute, ())


@log_function_call
def compute_override_patch(
    graph: MotionGraph,
    entries: Iterable[ManifestEntry],
    variant: str,
    catalog: Optional[AssetCatalog] = None,
    diagnostics: Optional[List[Diagnostic]] = None,
) -> OverridePatch:
    """
    Compute the override patch for one variant.

    Steps:
        1. Filter the manifest for `variant`
        2. Walk the graph's canonical clips in canonical order
        3. Look each clip name up in the variant; record the pair when the
           substitute resolves, report it when it does not, skip it when the
           variant has no such clip or the substitute is the canonical clip
        4. Propagate end-of-clip markers onto each recorded substitute

    Args:
        graph: Base motion graph (read only)
        entries: Full manifest, in declaration order
        variant: Target variant tag
        catalog: Optional clip catalog; without one every listed path is
            considered resolvable and no markers are propagated
        diagnostics: Optional list collecting non-fatal problems

    Returns:
        OverridePatch (possibly empty; empty patches are valid output)

    Example:
        >>> patch = compute_override_patch(graph, entries, "Variant C", catalog)
        >>> [canonical.name for canonical in patch.substitutions]
        ['walk_side']
    """
    # Collisions in the base variant were already reported when the graph was built
    collisions = None if variant == graph.base_variant else diagnostics
    lookup = filter_variant(entries, variant, collisions)

    if len(lookup) == 0:
        record(
            diagnostics,
            DiagnosticKind.EMPTY_VARIANT_FILTER,
            "No manifest entries matched this variant; patch is empty",
            variant=variant,
        )
        return OverridePatch(variant=variant, base_variant=graph.base_variant)

    substitutions: Dict[AssetRef, AssetRef] = {}
    markers: Dict[AssetRef, Tuple[EventMarker, ...]] = {}

    for canonical in graph.asset_refs():
        path = lookup.get(canonical.name)
        if path is None:
            continue
        if normalize_path(path) == normalize_path(canonical.path):
            logger.debug(f"{variant}: '{canonical.name}' already is the canonical clip")
            continue

        substitute = AssetRef(name=canonical.name, path=path)

        if catalog is None:
            substitutions[canonical] = substitute
            continue

        clip = catalog.resolve(path)
        if clip is None:
            logger.warning(f"{variant}: could not resolve override for '{canonical.name}': {path}")
            record(
                diagnostics,
                DiagnosticKind.UNRESOLVED_OVERRIDE,
                f"Override clip could not be resolved at {path}; canonical clip kept",
                variant=variant,
                asset=canonical.name,
                detail=path,
            )
            continue

        substitutions[canonical] = substitute

        canonical_clip = catalog.resolve(canonical.path)
        canonical_duration = canonical_clip.duration if canonical_clip is not None else None
        # Graph markers include events injected at build time; fall back to authored ones
        canonical_markers = graph.markers_for(canonical.name)
        if not canonical_markers and canonical_clip is not None:
            canonical_markers = canonical_clip.markers
        try:
            gained = propagate_end_markers(canonical_markers, canonical_duration, clip)
        except ValueError as e:
            record(
                diagnostics,
                DiagnosticKind.MISSING_CLIP_DURATION,
                f"End markers not propagated: {e}",
                variant=variant,
                asset=canonical.name,
                detail=path,
            )
            continue

        if gained:
            markers[substitute] = gained
            logger.info(
                f"{variant}: '{canonical.name}' gains "
                f"{', '.join(m.name for m in gained)}"
            )

    patch = OverridePatch(
        variant=variant,
        base_variant=graph.base_variant,
        substitutions=substitutions,
        markers=markers,
    )

    if patch.is_empty:
        logger.warning(f"Override patch for '{variant}' is empty")
    else:
        logger.info(f"✓ Override patch for '{variant}': {len(substitutions)} substitutions")
    return patch
