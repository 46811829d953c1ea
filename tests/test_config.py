"""Tests for compiler configuration module."""

import pytest

from src.utils.config import (
    DEFAULT_VARIANTS,
    CompilerConfig,
    get_config,
    parse_variant_list,
)

ENV_VARS = (
    "MANIFEST_SOURCE",
    "OUTPUT_SINK",
    "BASE_VARIANT",
    "VARIANTS",
    "ASSET_ROOT",
    "SKIP_EMPTY_PATCHES",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestCompilerConfig:
    """Test CompilerConfig dataclass and loading."""

    def test_config_creation(self):
        """Test direct CompilerConfig instantiation with defaults."""
        config = CompilerConfig(
            manifest_source="animationList.json",
            output_sink="build/animators",
        )

        assert config.base_variant == "Variant A"
        assert config.variants_to_generate == DEFAULT_VARIANTS
        assert config.asset_root is None
        assert config.skip_empty_patches is True

    def test_variants_become_tuple(self):
        config = CompilerConfig("m.json", "out", variants_to_generate=["Variant B"])

        assert config.variants_to_generate == ("Variant B",)

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"manifest_source": ""}, "manifest_source"),
            ({"output_sink": ""}, "output_sink"),
            ({"base_variant": " "}, "base_variant"),
            ({"variants_to_generate": ["Variant B", ""]}, "empty variants"),
        ],
    )
    def test_invalid_values(self, kwargs, message: str):
        values = {"manifest_source": "m.json", "output_sink": "out"}
        values.update(kwargs)

        with pytest.raises(ValueError, match=message):
            CompilerConfig(**values)

    def test_from_env_missing_required(self, clean_env):
        """Test from_env raises ValueError when required vars missing."""
        with pytest.raises(ValueError, match="MANIFEST_SOURCE.*required"):
            CompilerConfig.from_env()

        clean_env.setenv("MANIFEST_SOURCE", "m.json")
        with pytest.raises(ValueError, match="OUTPUT_SINK.*required"):
            CompilerConfig.from_env()

    def test_from_env_with_required_only(self, clean_env):
        clean_env.setenv("MANIFEST_SOURCE", "env.json")
        clean_env.setenv("OUTPUT_SINK", "gs://bucket/out")

        config = CompilerConfig.from_env()

        assert config.manifest_source == "env.json"
        assert config.output_sink == "gs://bucket/out"
        assert config.base_variant == "Variant A"
        assert config.variants_to_generate == DEFAULT_VARIANTS
        assert config.asset_root is None
        assert config.skip_empty_patches is True

    def test_from_env_with_all_vars(self, clean_env):
        clean_env.setenv("MANIFEST_SOURCE", "env.json")
        clean_env.setenv("OUTPUT_SINK", "out")
        clean_env.setenv("BASE_VARIANT", "Variant C")
        clean_env.setenv("VARIANTS", "Variant D, Variant E")
        clean_env.setenv("ASSET_ROOT", "/work/project")
        clean_env.setenv("SKIP_EMPTY_PATCHES", "false")

        config = CompilerConfig.from_env()

        assert config.base_variant == "Variant C"
        assert config.variants_to_generate == ("Variant D", "Variant E")
        assert config.asset_root == "/work/project"
        assert config.skip_empty_patches is False

    def test_get_config_singleton(self, clean_env):
        clean_env.setenv("MANIFEST_SOURCE", "singleton.json")
        clean_env.setenv("OUTPUT_SINK", "out")

        import src.utils.config as config_module

        clean_env.setattr(config_module, "_config", None)

        config1 = get_config()
        config2 = get_config()

        assert config1 is config2
        assert config1.manifest_source == "singleton.json"


class TestParseVariantList:
    def test_split_and_strip(self):
        assert parse_variant_list(" Variant B ,Variant C,, ") == ("Variant B", "Variant C")

    def test_empty(self):
        assert parse_variant_list("") == ()
