"""
Serialization of compiler output to JSON documents and output sinks.

Exports:
    graph_to_dict / patch_to_dict: Stable plain-data renders
    open_sink: LocalDirectorySink or GcsSink for an output location
    write_all: Persist graph, patches and diagnostics in order
"""

from .serialize import diagnostics_to_list, graph_to_dict, patch_to_dict, to_json
from .sinks import (
    GcsSink,
    LocalDirectorySink,
    OutputSink,
    open_sink,
    parse_gcs_uri,
    slugify,
    summarize_locations,
    write_all,
)

__all__ = [
    "GcsSink",
    "LocalDirectorySink",
    "OutputSink",
    "diagnostics_to_list",
    "graph_to_dict",
    "open_sink",
    "parse_gcs_uri",
    "patch_to_dict",
    "slugify",
    "summarize_locations",
    "to_json",
    "write_all",
]
