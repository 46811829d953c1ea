"""
Prometheus metrics for compilation runs.

Tracks compile outcomes, substitutions per variant, diagnostics per kind and
marker propagation. Collectors live on a dedicated CollectorRegistry so
repeated instantiation (tests, long-lived processes) never collides with the
global default registry.

Metrics Provided:
    - compile_runs_total{status}: Counter for compilation runs
    - compile_duration_seconds: Histogram for compilation latency
    - patch_substitutions_total{variant}: Counter for clip substitutions
    - diagnostics_total{kind}: Counter for non-fatal diagnostics
    - markers_propagated_total: Counter for event markers added to substitutes

Usage:
    from src.utils.metrics import get_metrics

    metrics = get_metrics()
    with metrics.track_compile():
        result = compile_motion_graph(config)
    metrics.record_compile(result.success)

    # Batch jobs can dump a textfile for node_exporter:
    metrics.write_textfile("build/compile.prom")
"""

import os
from contextlib import nullcontext
from pathlib import Path
from typing import Iterable, Optional, Union

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    Info,
    generate_latest,
    write_to_textfile,
)

from src.utils.diagnostics import Diagnostic
from src.utils.logging import get_logger

logger = get_logger(__name__)


class CompilerMetrics:
    """
    Prometheus collectors for the motion graph compiler.

    Example:
        >>> metrics = CompilerMetrics()
        >>> metrics.record_substitutions("Variant B", 12)
        >>> metrics.substitutions.labels(variant="Variant B")._value.get()
        12.0
    """

    def __init__(
        self,
        enabled: bool = True,
        registry: Optional[CollectorRegistry] = None,
    ) -> None:
        """
        Initialize metrics collectors.

        Args:
            enabled: Whether metrics collection is enabled
            registry: Registry to register collectors on (a fresh one if None)
        """
        self.enabled = enabled
        self.registry = registry if registry is not None else CollectorRegistry()

        if not self.enabled:
            logger.debug("Metrics collection disabled")
            return

        self.compile_runs = Counter(
            name="compile_runs_total",
            documentation="Total number of compilation runs",
            labelnames=["status"],  # success, failure
            registry=self.registry,
        )

        self.compile_duration = Histogram(
            name="compile_duration_seconds",
            documentation="Time spent compiling a motion graph and its patches",
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )

        self.substitutions = Counter(
            name="patch_substitutions_total",
            documentation="Clip substitutions emitted in override patches",
            labelnames=["variant"],
            registry=self.registry,
        )

        self.diagnostics = Counter(
            name="diagnostics_total",
            documentation="Non-fatal diagnostics recorded during compilation",
            labelnames=["kind"],
            registry=self.registry,
        )

        self.markers_propagated = Counter(
            name="markers_propagated_total",
            documentation="Event markers added to substitute clips",
            registry=self.registry,
        )

        self.app_info = Info(
            name="motion_graph_compiler",
            documentation="Compiler metadata",
            registry=self.registry,
        )
        from src import __version__

        self.app_info.info({"version": __version__})

    def track_compile(self):
        """Context manager timing one compilation run."""
        if not self.enabled:
            return nullcontext()
        return self.compile_duration.time()

    def record_compile(self, success: bool) -> None:
        if not self.enabled:
            return
        self.compile_runs.labels(status="success" if success else "failure").inc()

    def record_substitutions(self, variant: str, count: int) -> None:
        if not self.enabled or count <= 0:
            return
        self.substitutions.labels(variant=variant).inc(count)

    def record_markers(self, count: int) -> None:
        if not self.enabled or count <= 0:
            return
        self.markers_propagated.inc(count)

    def record_diagnostics(self, diagnostics: Iterable[Diagnostic]) -> None:
        if not self.enabled:
            return
        for diagnostic in diagnostics:
            self.diagnostics.labels(kind=diagnostic.kind.value).inc()

    def render(self) -> str:
        """Current metrics in the Prometheus text exposition format."""
        return generate_latest(self.registry).decode("utf-8")

    def write_textfile(self, path: Union[str, Path]) -> None:
        """
        Write all metrics to a file for the node_exporter textfile collector.

        Args:
            path: Target .prom file; parent directories are created
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        write_to_textfile(str(target), self.registry)
        logger.info(f"Metrics written to {target}")


_metrics_instance: Optional[CompilerMetrics] = None


def get_metrics() -> CompilerMetrics:
    """
    Get the process-wide metrics instance (singleton).

    Collection can be switched off with METRICS_ENABLED=false.
    """
    global _metrics_instance

    if _metrics_instance is None:
        enabled = os.getenv("METRICS_ENABLED", "true").lower() == "true"
        _metrics_instance = CompilerMetrics(enabled=enabled)

    return _metrics_instance
