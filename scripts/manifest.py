#!/usr/bin/env python3
"""
Generate an animation manifest by scanning a clip directory.

Usage:
    python scripts/manifest.py Assets/Animations -o Assets/Data/animationList.json
    python scripts/manifest.py Assets/Animations --relative-to . --ext .anim
    python scripts/manifest.py --config jobs/scan.yaml
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports (before other imports)
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from src.manifest import dump_manifest, scan_clip_directory  # noqa: E402
from src.manifest.scanner import DEFAULT_CLIP_EXTENSIONS  # noqa: E402
from src.utils.config_loader import load_config, validate_config  # noqa: E402
from src.utils.logging import get_logger  # noqa: E402

logger = get_logger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Scan a clip directory and write the animation manifest",
    )

    parser.add_argument(
        "clips_root",
        nargs="?",
        help="Directory containing animation clips",
    )

    parser.add_argument(
        "-o",
        "--output",
        help="Manifest file to write (default: print to stdout)",
    )

    parser.add_argument(
        "--relative-to",
        help="Base directory recorded paths are relative to (default: parent of clips_root)",
    )

    parser.add_argument(
        "--ext",
        action="append",
        dest="extensions",
        help=f"Clip file suffix, repeatable (default: {' '.join(DEFAULT_CLIP_EXTENSIONS)})",
    )

    parser.add_argument(
        "-c",
        "--config",
        help="YAML job file (workflow: scan_manifest)",
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for manifest generation."""
    args = parse_args(argv)

    clips_root = args.clips_root
    output = args.output
    extensions = args.extensions or list(DEFAULT_CLIP_EXTENSIONS)

    try:
        if args.config:
            job = load_config(args.config)
            errors = validate_config(job)
            if not errors and job["workflow"] != "scan_manifest":
                print(f"❌ Job workflow is {job['workflow']}, not scan_manifest")
                return 1
            if errors:
                for error in errors:
                    print(f"❌ {error}")
                return 1
            clips_root = job["clips_root"]
            output = job["manifest"]
            extensions = job.get("extensions", extensions)

        if not clips_root:
            print("❌ Error: clips_root or --config is required")
            return 1

        entries = scan_clip_directory(clips_root, extensions, relative_to=args.relative_to)
        text = dump_manifest(entries) + "\n"

        if output:
            out_path = Path(output)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(text, encoding="utf-8")
            print(f"✅ Wrote {len(entries)} clips to {out_path}")
        else:
            sys.stdout.write(text)
        return 0

    except (FileNotFoundError, NotADirectoryError, ValueError) as e:
        print(f"❌ Error: {e}")
        return 1

    except KeyboardInterrupt:
        print("\n⚠️  Scan cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
