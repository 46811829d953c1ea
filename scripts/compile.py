#!/usr/bin/env python3
"""
Compile the canonical motion graph and per-variant override patches.

Inputs come from a YAML job file (--config), from command-line flags, or,
when neither names a manifest, from the environment / .env file.

Usage:
    python scripts/compile.py --config jobs/all_variants.yaml
    python scripts/compile.py -m Assets/Data/animationList.json -o build/animators \\
        --base-variant "Variant A" --variants "Variant B,Variant C"
    python scripts/compile.py -m animationList.json -o gs://my-bucket/animators --strict

Exit codes:
    0    success
    1    compilation failed (malformed manifest, no base animations, bad config)
    2    success with diagnostics, when --strict is given
    130  cancelled by user
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports (before other imports)
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from src.compiler import compile_motion_graph  # noqa: E402
from src.exporter import summarize_locations  # noqa: E402
from src.graph.model import BlendNode  # noqa: E402
from src.utils.config import (  # noqa: E402
    DEFAULT_BASE_VARIANT,
    DEFAULT_VARIANTS,
    CompilerConfig,
    get_config,
    parse_variant_list,
)
from src.utils.config_loader import config_from_job, load_config  # noqa: E402
from src.utils.diagnostics import count_by_kind  # noqa: E402
from src.utils.logging import get_logger  # noqa: E402
from src.utils.metrics import get_metrics  # noqa: E402

logger = get_logger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Compile a motion graph and its variant override patches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run a YAML job
  %(prog)s --config jobs/all_variants.yaml

  # Compile two variants into a local directory
  %(prog)s -m animationList.json -o build/animators --variants "Variant B,Variant C"

  # Upload to GCS and fail the build on any diagnostic
  %(prog)s -m animationList.json -o gs://my-bucket/animators --strict

  # Save blend node and coverage charts
  %(prog)s -m animationList.json -o build/animators --plots build/plots
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        help="YAML job file (workflow: compile_motion_graph)",
    )

    parser.add_argument(
        "-m",
        "--manifest",
        help="Manifest JSON path",
    )

    parser.add_argument(
        "-o",
        "--output",
        help="Output directory or gs://bucket/prefix",
    )

    parser.add_argument(
        "-b",
        "--base-variant",
        default=DEFAULT_BASE_VARIANT,
        help=f"Variant the canonical graph is built from (default: {DEFAULT_BASE_VARIANT})",
    )

    parser.add_argument(
        "--variants",
        default=",".join(DEFAULT_VARIANTS),
        help="Comma-separated variants to generate patches for",
    )

    parser.add_argument(
        "--asset-root",
        help="Content root; clips must exist on disk under it",
    )

    parser.add_argument(
        "--keep-empty-patches",
        action="store_true",
        help="Also write patches that contain no substitutions",
    )

    parser.add_argument(
        "--plots",
        help="Directory to save blend node and patch coverage charts (PNG)",
    )

    parser.add_argument(
        "--metrics-file",
        help="Write Prometheus metrics to this .prom file after the run",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with code 2 when any diagnostic was recorded",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args(argv)


def build_config(args) -> CompilerConfig:
    """
    Resolve the compiler configuration from a job file, flags, or environment.

    Raises:
        ValueError: If the job file or flags are invalid
    """
    if args.config:
        return config_from_job(load_config(args.config))

    if args.manifest or args.output:
        if not (args.manifest and args.output):
            raise ValueError("--manifest and --output must be given together")
        return CompilerConfig(
            manifest_source=args.manifest,
            output_sink=args.output,
            base_variant=args.base_variant,
            variants_to_generate=parse_variant_list(args.variants),
            asset_root=args.asset_root,
            skip_empty_patches=not args.keep_empty_patches,
        )

    return get_config()


def save_plots(result, plots_dir: Path) -> None:
    """Save one chart per blend node plus the patch coverage heatmap."""
    from src.utils.visualizations import (
        close_all_figures,
        plot_blend_node,
        plot_patch_coverage,
        save_figure,
    )

    plots_dir.mkdir(parents=True, exist_ok=True)
    for node in result.graph.states:
        if isinstance(node.binding, BlendNode):
            fig = plot_blend_node(node.binding)
            save_figure(fig, str(plots_dir / f"{node.name.lower()}_blend.png"))

    if result.patches:
        fig = plot_patch_coverage(result.graph, list(result.patches.values()))
        save_figure(fig, str(plots_dir / "patch_coverage.png"))

    close_all_figures()
    print(f"📊 Charts saved to {plots_dir}")


def main(argv=None):
    """Main entry point for the compiler CLI."""
    args = parse_args(argv)

    if args.verbose:
        import logging

        logging.getLogger("src").setLevel(logging.DEBUG)

    print("=" * 60)
    print("MOTION GRAPH COMPILER")
    print("=" * 60)

    try:
        try:
            config = build_config(args)
        except (ValueError, FileNotFoundError) as e:
            print(f"❌ Configuration error: {e}")
            return 1

        print(f"\nManifest:     {config.manifest_source}")
        print(f"Output:       {config.output_sink}")
        print(f"Base variant: {config.base_variant}")
        print(f"Variants:     {', '.join(config.variants_to_generate) or '(none)'}")

        result = compile_motion_graph(config)

        if args.metrics_file:
            get_metrics().write_textfile(args.metrics_file)

        if not result.success:
            print("\n❌ Compilation failed")
            print(f"   Error: {result.error_message}")
            return 1

        print(f"\n✅ Graph: {len(result.graph.states)} states, "
              f"{len(result.graph.transitions)} transitions")
        for variant, patch in result.patches.items():
            marker = "⚪" if patch.is_empty else "🔁"
            print(f"   {marker} {variant}: {len(patch.substitutions)} substitutions")

        summary = summarize_locations(result.written)
        print(
            f"\n📁 Wrote {len(result.written)} documents "
            f"({summary['graphs']} graph, {summary['patches']} patches):"
        )
        for location in result.written:
            print(f"   {location}")

        if result.diagnostics:
            print(f"\n⚠️  {len(result.diagnostics)} diagnostics:")
            for kind, count in count_by_kind(result.diagnostics).items():
                print(f"   {kind.value}: {count}")
            if args.verbose:
                for diagnostic in result.diagnostics:
                    print(f"   - {diagnostic}")

        if args.plots:
            save_plots(result, Path(args.plots))

        print("\n" + "=" * 60)
        print(f"✅ COMPILE COMPLETE ({result.duration_seconds:.2f}s)")
        print("=" * 60)

        if args.strict and result.diagnostics:
            print("❌ --strict: diagnostics were recorded")
            return 2
        return 0

    except KeyboardInterrupt:
        print("\n⚠️  Compilation cancelled by user")
        return 130

    except Exception as e:
        logger.error(f"Compiler CLI error: {e}", exc_info=True)
        print(f"\n❌ Compilation failed: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
