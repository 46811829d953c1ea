"""Tests for job file loader and validator."""

from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from src.utils.config_loader import (
    ConfigError,
    config_from_job,
    get_config_examples,
    load_config,
    validate_config,
)


def compile_job(**overrides: Any) -> Dict[str, Any]:
    job: Dict[str, Any] = {
        "version": "1.0",
        "workflow": "compile_motion_graph",
        "manifest": "Assets/Data/animationList.json",
        "output": "build/animators",
    }
    job.update(overrides)
    return job


class TestConfigLoader:
    """Tests for load_config function."""

    def test_load_valid_yaml(self, tmp_path: Path):
        """Test loading valid YAML job."""
        config_file = tmp_path / "job.yaml"
        config_file.write_text(
            """
version: "1.0"
workflow: compile_motion_graph
manifest: animationList.json
output: build
variants:
  - Variant B
  - Variant C
"""
        )

        config = load_config(config_file)
        assert config["version"] == "1.0"
        assert config["workflow"] == "compile_motion_graph"
        assert config["variants"] == ["Variant B", "Variant C"]

    def test_load_nonexistent_file(self):
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_load_empty_file(self, tmp_path: Path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        with pytest.raises(ValueError, match="empty"):
            load_config(config_file)

    def test_load_non_mapping(self, tmp_path: Path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(config_file)

    def test_load_invalid_yaml(self, tmp_path: Path):
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text(
            """
version: "1.0"
workflow: [unclosed bracket
"""
        )

        with pytest.raises(yaml.YAMLError):
            load_config(config_file)

    def test_load_directory_raises_error(self, tmp_path: Path):
        with pytest.raises(ValueError, match="not a file"):
            load_config(tmp_path)


class TestConfigValidation:
    """Tests for validate_config function."""

    def test_valid_compile_job(self):
        assert validate_config(compile_job()) == []

    def test_valid_compile_job_with_options(self):
        job = compile_job(
            base_variant="Variant A",
            variants=["Variant B"],
            asset_root="/work",
            skip_empty_patches=False,
        )

        assert validate_config(job) == []

    def test_missing_version(self):
        job = compile_job()
        del job["version"]

        assert any(e.field == "version" for e in validate_config(job))

    def test_unsupported_version(self):
        errors = validate_config(compile_job(version="99.0"))

        version_errors = [e for e in errors if e.field == "version"]
        assert "unsupported" in str(version_errors[0]).lower()

    def test_missing_workflow(self):
        errors = validate_config({"version": "1.0"})

        assert [e.field for e in errors] == ["workflow"]

    def test_invalid_workflow(self):
        errors = validate_config({"version": "1.0", "workflow": "blend_batch"})

        assert any(e.field == "workflow" for e in errors)

    def test_every_missing_field_reported(self):
        """Test that all missing required fields are reported together."""
        errors = validate_config({"version": "1.0", "workflow": "compile_motion_graph"})

        assert [e.field for e in errors] == ["manifest", "output"]

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"manifest": ""}, "manifest"),
            ({"output": 42}, "output"),
            ({"base_variant": ""}, "base_variant"),
            ({"variants": "Variant B"}, "variants"),
            ({"variants": ["Variant B", ""]}, "variants[1]"),
            ({"asset_root": 3}, "asset_root"),
            ({"skip_empty_patches": "yes please"}, "skip_empty_patches"),
        ],
    )
    def test_invalid_compile_fields(self, overrides, field: str):
        errors = validate_config(compile_job(**overrides))

        assert [e.field for e in errors] == [field]

    def test_scan_job(self):
        job = {
            "version": "1.0",
            "workflow": "scan_manifest",
            "clips_root": "Assets/Animations",
            "manifest": "animationList.json",
            "extensions": [".anim"],
        }

        assert validate_config(job) == []

    def test_scan_job_invalid(self):
        errors = validate_config(
            {"version": "1.0", "workflow": "scan_manifest", "extensions": ["anim"]}
        )

        assert [e.field for e in errors] == ["clips_root", "manifest", "extensions"]

    def test_examples_are_valid(self):
        """Test that every shipped template passes validation."""
        for name, template in get_config_examples().items():
            job = yaml.safe_load(template)
            assert job["workflow"] == name
            assert validate_config(job) == []


class TestConfigFromJob:
    """Tests for config_from_job function."""

    def test_defaults(self):
        config = config_from_job(compile_job())

        assert config.manifest_source == "Assets/Data/animationList.json"
        assert config.output_sink == "build/animators"
        assert config.base_variant == "Variant A"
        assert len(config.variants_to_generate) == 5

    def test_overrides(self):
        config = config_from_job(
            compile_job(base_variant="Variant B", variants=["Variant C"], skip_empty_patches=False)
        )

        assert config.base_variant == "Variant B"
        assert config.variants_to_generate == ("Variant C",)
        assert config.skip_empty_patches is False

    def test_invalid_job(self):
        with pytest.raises(ValueError, match="manifest"):
            config_from_job({"version": "1.0", "workflow": "compile_motion_graph"})

    def test_wrong_workflow(self):
        job = {
            "version": "1.0",
            "workflow": "scan_manifest",
            "clips_root": "a",
            "manifest": "b.json",
        }

        with pytest.raises(ValueError, match="not compile_motion_graph"):
            config_from_job(job)


class TestConfigError:
    """Tests for ConfigError class."""

    def test_config_error_string_without_value(self):
        error = ConfigError("field_name", "error message")
        assert str(error) == "field_name: error message"

    def test_config_error_string_with_value(self):
        error = ConfigError("version", "Unsupported", "2.0")
        assert str(error) == "version: Unsupported (got: 2.0)"
