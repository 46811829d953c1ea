"""
Motion Graph Compiler

Builds one canonical character motion graph (states, directional blend trees,
transitions, parameters) from an animation manifest, then computes a sparse
override patch per character variant that swaps clips without duplicating
the graph.

This package provides modular components for each stage:
- manifest: Manifest parsing, variant filtering, asset catalog, clip scanning
- graph: Motion graph model, direction bucketing, canonical graph builder
- patcher: Override patch computation and event marker propagation
- exporter: JSON documents and output sinks (local directory, GCS)
- compiler: The end-to-end compile entry point
- utils: Logging, diagnostics, configuration, metrics, charts

See DESIGN.md for how the pieces fit together.
"""

__version__ = "0.2.0"

# Package-level imports
from src.utils.logging import setup_logging

# Initialize default logging configuration
setup_logging()
