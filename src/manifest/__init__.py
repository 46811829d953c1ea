"""
Manifest handling: loading, variant filtering, clip metadata and scanning.

Exports:
    parse_manifest / load_manifest: Read the flat clip list
    filter_variant: Restrict a manifest to one variant (first occurrence wins)
    AssetCatalog: Resolve clip paths to durations and authored markers
    scan_clip_directory / dump_manifest: Generate a manifest from a clip tree
"""

from src.manifest.catalog import AssetCatalog
from src.manifest.loader import load_manifest, parse_manifest
from src.manifest.models import (
    MARKER_TIME_TOLERANCE,
    AssetRef,
    ClipInfo,
    EventMarker,
    ManifestEntry,
)
from src.manifest.scanner import dump_manifest, scan_clip_directory
from src.manifest.variants import FilteredMap, filter_variant, variant_segment

__all__ = [
    "MARKER_TIME_TOLERANCE",
    "AssetCatalog",
    "AssetRef",
    "ClipInfo",
    "EventMarker",
    "FilteredMap",
    "ManifestEntry",
    "dump_manifest",
    "filter_variant",
    "load_manifest",
    "parse_manifest",
    "scan_clip_directory",
    "variant_segment",
]
