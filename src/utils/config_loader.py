"""
Job file loader and validator.

Loads YAML job files describing compilation runs and validates them against
the expected schema.

Example job file (jobs/all_variants.yaml):
    ```yaml
    version: "1.0"
    workflow: compile_motion_graph

    manifest: Assets/Data/animationList.json
    output: build/animators
    base_variant: Variant A
    variants:
      - Variant A
      - Variant B
      - Variant C
    asset_root: /work/unity-project
    skip_empty_patches: true
    ```

Usage:
    >>> from src.utils.config_loader import load_config, validate_config
    >>> job = load_config("jobs/all_variants.yaml")
    >>> errors = validate_config(job)
    >>> if not errors:
    ...     config = config_from_job(job)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from src.utils.config import DEFAULT_BASE_VARIANT, DEFAULT_VARIANTS, CompilerConfig
from src.utils.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_VERSIONS = ["1.0"]

VALID_WORKFLOWS = [
    "compile_motion_graph",
    "scan_manifest",
]


@dataclass
class ConfigError:
    """Validation error in a job file."""

    field: str
    message: str
    value: Optional[Any] = None

    def __str__(self) -> str:
        """Format error message."""
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value})"
        return f"{self.field}: {self.message}"


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a job from a YAML file.

    Args:
        config_path: Path to YAML job file

    Returns:
        Dictionary containing the parsed job

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the path is not a file, the file is empty, or the
            top level is not a mapping
        yaml.YAMLError: If YAML is malformed
    """
    path = Path(config_path)
    logger.info(f"Loading job file from: {path}")

    if not path.exists():
        raise FileNotFoundError(f"Job file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Job path is not a file: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise

    if config is None:
        raise ValueError("Job file is empty")
    if not isinstance(config, dict):
        raise ValueError(f"Job file must contain a mapping, got {type(config).__name__}")

    logger.info(f"✓ Job loaded: {config.get('workflow', 'unknown')}")
    return dict(config)


def validate_config(config: Dict[str, Any]) -> List[ConfigError]:
    """
    Validate a job against the expected schema.

    Args:
        config: Job dictionary to validate

    Returns:
        List of validation errors (empty if valid)

    Example:
        >>> errors = validate_config({"version": "1.0", "workflow": "compile_motion_graph"})
        >>> for error in errors:
        ...     print(f"❌ {error}")
        ❌ manifest: Missing required field for compile_motion_graph
        ❌ output: Missing required field for compile_motion_graph
    """
    errors: List[ConfigError] = []

    if "version" not in config:
        errors.append(ConfigError("version", "Missing required field"))
    elif str(config["version"]) not in SUPPORTED_VERSIONS:
        errors.append(
            ConfigError(
                "version",
                f"Unsupported version (supported: {SUPPORTED_VERSIONS})",
                config["version"],
            )
        )

    if "workflow" not in config:
        errors.append(ConfigError("workflow", "Missing required field"))
    elif config["workflow"] not in VALID_WORKFLOWS:
        errors.append(
            ConfigError(
                "workflow",
                f"Invalid workflow type (valid: {VALID_WORKFLOWS})",
                config["workflow"],
            )
        )

    workflow = config.get("workflow")
    if workflow == "compile_motion_graph":
        errors.extend(_validate_compile(config))
    elif workflow == "scan_manifest":
        errors.extend(_validate_scan(config))

    if errors:
        logger.warning(f"Job validation failed with {len(errors)} errors")
    else:
        logger.info("✓ Job validation passed")

    return errors


def _require_string(config: Dict[str, Any], field: str, workflow: str) -> List[ConfigError]:
    if field not in config:
        return [ConfigError(field, f"Missing required field for {workflow}")]
    if not isinstance(config[field], str) or not config[field].strip():
        return [ConfigError(field, "Must be a non-empty string", config[field])]
    return []


def _validate_compile(config: Dict[str, Any]) -> List[ConfigError]:
    """Validate compile_motion_graph job configuration."""
    errors: List[ConfigError] = []
    errors.extend(_require_string(config, "manifest", "compile_motion_graph"))
    errors.extend(_require_string(config, "output", "compile_motion_graph"))

    if "base_variant" in config:
        base = config["base_variant"]
        if not isinstance(base, str) or not base.strip():
            errors.append(ConfigError("base_variant", "Must be a non-empty string", base))

    if "variants" in config:
        variants = config["variants"]
        if not isinstance(variants, list):
            errors.append(ConfigError("variants", "Must be a list", type(variants).__name__))
        else:
            for i, variant in enumerate(variants):
                if not isinstance(variant, str) or not variant.strip():
                    errors.append(
                        ConfigError(f"variants[{i}]", "Must be a non-empty string", variant)
                    )

    if "asset_root" in config and not isinstance(config["asset_root"], str):
        errors.append(
            ConfigError("asset_root", "Must be a string", type(config["asset_root"]).__name__)
        )

    if "skip_empty_patches" in config and not isinstance(config["skip_empty_patches"], bool):
        errors.append(
            ConfigError("skip_empty_patches", "Must be true or false", config["skip_empty_patches"])
        )

    return errors


def _validate_scan(config: Dict[str, Any]) -> List[ConfigError]:
    """Validate scan_manifest job configuration."""
    errors: List[ConfigError] = []
    errors.extend(_require_string(config, "clips_root", "scan_manifest"))
    errors.extend(_require_string(config, "manifest", "scan_manifest"))

    if "extensions" in config:
        extensions = config["extensions"]
        if not isinstance(extensions, list) or not all(
            isinstance(ext, str) and ext.startswith(".") for ext in extensions
        ):
            errors.append(
                ConfigError("extensions", "Must be a list of suffixes like '.anim'", extensions)
            )

    return errors


def config_from_job(job: Dict[str, Any]) -> CompilerConfig:
    """
    Convert a validated compile_motion_graph job into a CompilerConfig.

    Raises:
        ValueError: If the job is not valid
    """
    errors = validate_config(job)
    if errors:
        raise ValueError("Invalid job: " + "; ".join(str(e) for e in errors))
    if job["workflow"] != "compile_motion_graph":
        raise ValueError(f"Job workflow is {job['workflow']}, not compile_motion_graph")

    return CompilerConfig(
        manifest_source=job["manifest"],
        output_sink=job["output"],
        base_variant=job.get("base_variant", DEFAULT_BASE_VARIANT),
        variants_to_generate=tuple(job.get("variants", DEFAULT_VARIANTS)),
        asset_root=job.get("asset_root"),
        skip_empty_patches=job.get("skip_empty_patches", True),
    )


def get_config_examples() -> Dict[str, str]:
    """
    Get example job templates.

    Returns:
        Dictionary mapping workflow names to YAML templates
    """
    return {
        "compile_motion_graph": """version: "1.0"
workflow: compile_motion_graph

manifest: Assets/Data/animationList.json
output: build/animators
base_variant: Variant A
variants:
  - Variant A
  - Variant B
  - Variant C
  - Variant D
  - Variant E
""",
        "scan_manifest": """version: "1.0"
workflow: scan_manifest

clips_root: Assets/Animations
manifest: Assets/Data/animationList.json
extensions:
  - .anim
""",
    }
