"""
Compiler configuration.

The compiler takes one explicit configuration value instead of constants
baked into the generator. It can be built directly, loaded from a YAML job
file (see src.utils.config_loader), or read from the environment / a .env
file for CI jobs.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Tuple

from dotenv import load_dotenv

DEFAULT_BASE_VARIANT = "Variant A"
DEFAULT_VARIANTS: Tuple[str, ...] = (
    "Variant A",
    "Variant B",
    "Variant C",
    "Variant D",
    "Variant E",
)


def parse_variant_list(raw: str) -> Tuple[str, ...]:
    """
    Split a comma-separated variant list, keeping order and dropping blanks.

    Example:
        >>> parse_variant_list("Variant B, Variant C,,")
        ('Variant B', 'Variant C')
    """
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass
class CompilerConfig:
    """
    Inputs of one compilation run.

    Attributes:
        manifest_source: Path to the manifest JSON
        output_sink: Local directory or gs://bucket/prefix for output documents
        base_variant: Variant the canonical graph is built from
        variants_to_generate: Variants to compute override patches for, in order
        asset_root: Optional content root; when set, clips must exist on disk
        skip_empty_patches: Do not persist patches with no substitutions
    """

    manifest_source: str
    output_sink: str
    base_variant: str = DEFAULT_BASE_VARIANT
    variants_to_generate: Sequence[str] = field(default_factory=lambda: DEFAULT_VARIANTS)
    asset_root: Optional[str] = None
    skip_empty_patches: bool = True

    def __post_init__(self) -> None:
        if not self.manifest_source:
            raise ValueError("manifest_source is required")
        if not self.output_sink:
            raise ValueError("output_sink is required")
        if not self.base_variant or not self.base_variant.strip():
            raise ValueError("base_variant cannot be empty")
        self.variants_to_generate = tuple(self.variants_to_generate)
        if any(not v or not v.strip() for v in self.variants_to_generate):
            raise ValueError("variants_to_generate cannot contain empty variants")

    @classmethod
    def from_env(cls) -> "CompilerConfig":
        """
        Load configuration from environment variables.

        Loads a .env file from the project root if present, then reads:
        MANIFEST_SOURCE, OUTPUT_SINK (required), BASE_VARIANT, VARIANTS
        (comma-separated), ASSET_ROOT, SKIP_EMPTY_PATCHES.

        Raises:
            ValueError: If required environment variables are missing
        """
        env_path = Path(__file__).parent.parent.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        manifest_source = os.getenv("MANIFEST_SOURCE")
        output_sink = os.getenv("OUTPUT_SINK")

        if not manifest_source:
            raise ValueError(
                "MANIFEST_SOURCE environment variable is required. "
                "Set it in .env or export it."
            )
        if not output_sink:
            raise ValueError(
                "OUTPUT_SINK environment variable is required. "
                "Set it in .env or export it."
            )

        variants_raw = os.getenv("VARIANTS")
        return cls(
            manifest_source=manifest_source,
            output_sink=output_sink,
            base_variant=os.getenv("BASE_VARIANT", DEFAULT_BASE_VARIANT),
            variants_to_generate=(
                parse_variant_list(variants_raw) if variants_raw else DEFAULT_VARIANTS
            ),
            asset_root=os.getenv("ASSET_ROOT") or None,
            skip_empty_patches=os.getenv("SKIP_EMPTY_PATCHES", "true").lower()
            not in ("0", "false", "no"),
        )


# Global config instance (lazy-loaded)
_config: Optional[CompilerConfig] = None


def get_config() -> CompilerConfig:
    """
    Get or create the environment-backed configuration singleton.

    Example:
        >>> config = get_config()
        >>> print(config.base_variant)
        Variant A
    """
    global _config
    if _config is None:
        _config = CompilerConfig.from_env()
    return _config
