"""
Compiler entry point.

Runs one compilation: load the manifest, build the canonical graph from the
base variant, compute an override patch per requested variant, and persist
everything to the configured output sink.

Fatal problems (malformed manifest, no base animations, missing manifest
file, sink failures) never escape as exceptions; they come back as a failed
CompilationResult carrying the error message, like every other stage result
in this package.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.exporter.sinks import OutputSink, open_sink, write_all
from src.graph.builder import build_motion_graph
from src.graph.model import MotionGraph
from src.manifest.catalog import AssetCatalog
from src.manifest.loader import load_manifest
from src.manifest.variants import filter_variant
from src.patcher.overrides import OverridePatch, compute_override_patch
from src.utils.config import CompilerConfig
from src.utils.diagnostics import CompilerError, Diagnostic, DiagnosticKind
from src.utils.logging import get_logger, log_function_call, set_correlation_id
from src.utils.metrics import get_metrics

logger = get_logger(__name__)


@dataclass
class CompilationResult:
    """
    Result of one compilation run.

    Attributes:
        success: Whether the graph and patches were built and persisted
        graph: Canonical motion graph (None if failed)
        patches: variant -> override patch, in the requested order
        diagnostics: Non-fatal conditions found along the way
        written: Output locations, in write order
        duration_seconds: Processing time in seconds
        error_message: Error description (None if successful)
    """

    success: bool
    graph: Optional[MotionGraph] = None
    patches: Dict[str, OverridePatch] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    written: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    error_message: Optional[str] = None

    @property
    def persisted_patches(self) -> List[str]:
        """Locations of written patch documents."""
        return [loc for loc in self.written if loc.endswith("_override_patch.json")]


def _empty_filter_variants(diagnostics: List[Diagnostic]) -> set:
    return {
        diag.variant
        for diag in diagnostics
        if diag.kind is DiagnosticKind.EMPTY_VARIANT_FILTER
    }


@log_function_call
def compile_motion_graph(
    config: CompilerConfig,
    sink: Optional[OutputSink] = None,
    catalog: Optional[AssetCatalog] = None,
) -> CompilationResult:
    """
    Compile the canonical motion graph and every requested override patch.

    Sequence:
        1. Load the manifest and build the asset catalog
        2. Filter the base variant and build the graph (once)
        3. Compute one patch per variant, in the order given
        4. Persist the graph, then each patch, then the diagnostics

    Patches whose variant matched no manifest entries are never persisted;
    other empty patches are skipped when `config.skip_empty_patches` is set.

    Args:
        config: Compilation inputs
        sink: Output sink (defaults to `open_sink(config.output_sink)`)
        catalog: Clip catalog (defaults to one built from the manifest
            metadata, checked against `config.asset_root`)

    Returns:
        CompilationResult with graph, patches, diagnostics and output locations

    Example:
        >>> config = CompilerConfig(
        ...     manifest_source="Assets/Data/animationList.json",
        ...     output_sink="build/animators",
        ...     base_variant="Variant A",
        ...     variants_to_generate=["Variant B", "Variant C"],
        ... )
        >>> result = compile_motion_graph(config)
        >>> if result.success:
        ...     print(f"Wrote {len(result.written)} documents")
    """
    set_correlation_id(f"compile-{uuid.uuid4().hex[:12]}")
    metrics = get_metrics()
    start_time = time.time()
    diagnostics: List[Diagnostic] = []

    logger.info(
        f"Compiling '{config.base_variant}' graph from {config.manifest_source} "
        f"with {len(config.variants_to_generate)} variants"
    )

    with metrics.track_compile():
        try:
            entries = load_manifest(config.manifest_source)
            if catalog is None:
                catalog = AssetCatalog.from_entries(entries, asset_root=config.asset_root)

            base_map = filter_variant(entries, config.base_variant, diagnostics)
            graph = build_motion_graph(base_map, catalog, diagnostics)

            patches: Dict[str, OverridePatch] = {}
            for variant in config.variants_to_generate:
                patch = compute_override_patch(graph, entries, variant, catalog, diagnostics)
                patches[variant] = patch
                metrics.record_substitutions(variant, len(patch.substitutions))
                metrics.record_markers(sum(len(m) for m in patch.markers.values()))

            if sink is None:
                sink = open_sink(config.output_sink)

            unmatched = _empty_filter_variants(diagnostics)
            persisted = []
            for variant, patch in patches.items():
                if variant in unmatched:
                    logger.info(f"Not persisting patch for '{variant}': no matching entries")
                    continue
                if patch.is_empty and config.skip_empty_patches:
                    logger.info(f"Not persisting empty patch for '{variant}'")
                    continue
                persisted.append(patch)
            written = write_all(sink, graph, persisted, diagnostics)

        except (CompilerError, FileNotFoundError) as e:
            logger.error(f"Compilation failed: {e}")
            metrics.record_compile(False)
            metrics.record_diagnostics(diagnostics)
            return CompilationResult(
                success=False,
                diagnostics=diagnostics,
                duration_seconds=time.time() - start_time,
                error_message=str(e),
            )

        except Exception as e:
            logger.error(f"Compilation failed unexpectedly: {e}", exc_info=True)
            metrics.record_compile(False)
            metrics.record_diagnostics(diagnostics)
            return CompilationResult(
                success=False,
                diagnostics=diagnostics,
                duration_seconds=time.time() - start_time,
                error_message=f"{type(e).__name__}: {e}",
            )

    duration = time.time() - start_time
    metrics.record_compile(True)
    metrics.record_diagnostics(diagnostics)

    logger.info(
        f"✓ Compiled '{config.base_variant}' with {len(patches)} patches "
        f"({len(diagnostics)} diagnostics) in {duration:.2f}s"
    )

    return CompilationResult(
        success=True,
        graph=graph,
        patches=patches,
        diagnostics=diagnostics,
        written=written,
        duration_seconds=duration,
    )
