"""Tests for parser configuration."""

import dataclasses
import json

import pytest

from mini_xml_tree.shared import ConfigError, ConfigValidationError, ParserConfig
from mini_xml_tree.shared.config import DEFAULT_MAX_DEPTH


class TestParserConfig:
    """Test ParserConfig defaults and validation."""

    def test_defaults(self) -> None:
        """Test default configuration values."""
        config = ParserConfig()

        assert config.max_depth == DEFAULT_MAX_DEPTH
        assert config.strict_end_of_input is True
        assert config.strip_bom is True
        assert config.name is None

    def test_config_is_immutable(self) -> None:
        """Test configuration instances cannot be mutated."""
        config = ParserConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_depth = 3  # type: ignore[misc]

    @pytest.mark.parametrize("max_depth", [0, -1])
    def test_invalid_max_depth(self, max_depth: int) -> None:
        """Test non-positive depth limits are rejected."""
        with pytest.raises(ConfigValidationError, match="max_depth must be >= 1") as exc_info:
            ParserConfig(max_depth=max_depth)

        assert exc_info.value.field_name == "max_depth"
        assert exc_info.value.suggestions

    @pytest.mark.parametrize("max_depth", ["10", 2.5, True])
    def test_non_integer_max_depth(self, max_depth: object) -> None:
        """Test depth limits must be integers."""
        with pytest.raises(ConfigValidationError, match="must be an integer"):
            ParserConfig(max_depth=max_depth)  # type: ignore[arg-type]

    def test_presets(self) -> None:
        """Test strict and lenient presets."""
        assert ParserConfig.strict().strict_end_of_input is True
        assert ParserConfig.lenient().strict_end_of_input is False
        assert ParserConfig.lenient().name == "lenient"


class TestConfigOverride:
    """Test derived configurations."""

    def test_override_returns_new_instance(self) -> None:
        """Test overrides leave the original untouched."""
        original = ParserConfig()

        derived = original.override(max_depth=8, name="shallow")

        assert derived.max_depth == 8
        assert derived.name == "shallow"
        assert original.max_depth == DEFAULT_MAX_DEPTH

    def test_override_unknown_field(self) -> None:
        """Test unknown fields are rejected with suggestions."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration field") as exc_info:
            ParserConfig().override(depth=3)

        assert exc_info.value.field_name == "depth"
        assert "max_depth" in exc_info.value.suggestions

    def test_override_is_validated(self) -> None:
        """Test overridden values pass validation again."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(max_depth=0)


class TestConfigSerialization:
    """Test dictionary and JSON conversion."""

    def test_to_dict(self) -> None:
        """Test conversion to a plain dictionary."""
        assert ParserConfig(max_depth=5).to_dict() == {
            "max_depth": 5,
            "strict_end_of_input": True,
            "strip_bom": True,
            "name": None,
        }

    def test_json_round_trip(self) -> None:
        """Test JSON serialization restores an equal configuration."""
        config = ParserConfig(max_depth=12, strict_end_of_input=False, name="x")

        assert ParserConfig.from_json(config.to_json()) == config

    def test_from_dict_ignores_unknown_keys(self) -> None:
        """Test unknown keys in stored configuration are ignored."""
        config = ParserConfig.from_dict({"max_depth": 3, "legacy": True})

        assert config.max_depth == 3

    def test_from_json_invalid(self) -> None:
        """Test invalid JSON raises ConfigError."""
        with pytest.raises(ConfigError, match="Invalid configuration JSON"):
            ParserConfig.from_json("{not json")
        with pytest.raises(ConfigError, match="must be an object"):
            ParserConfig.from_json(json.dumps([1, 2]))
