#!/usr/bin/env python3
"""
Tests for parser configuration and config file loading.

This module tests loading ParserOptions from JSON and YAML files, as well as
the validation of the loaded values.
"""

import json
import os
import tempfile
import textwrap

import pytest
from result import Err, Ok

from dataclass_cmdline import (
    STANDARD,
    STRICT_COMMAND_NAME,
    STRICT_OPTION_NAME,
    ParserOptions,
    load_config_file,
)


class TestConfigFiles:
    """Test suite for config file functionality."""

    def test_json_config(self):
        """Test loading from JSON config file."""
        config_data = {"strict_command_name": True, "auto_alias": True}

        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump(config_data, f)
            config_path = f.name

        try:
            options = ParserOptions.from_file(config_path)
            assert options.strict_command_name is True
            assert options.auto_alias is True
            assert options.positional_required is True
            assert options.show_usage is True
        finally:
            os.unlink(config_path)

    def test_yaml_config(self):
        """Test loading from YAML config file."""
        yaml_content = textwrap.dedent(
            """
            strict_option_name: true
            show_usage: false
            display_command_list_as_help: true
            """
        )

        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write(yaml_content)
            config_path = f.name

        try:
            options = ParserOptions.from_file(config_path)
            assert options.strict_option_name is True
            assert options.show_usage is False
            assert options.display_command_list_as_help is True
            assert options.strict_command_name is False
        finally:
            os.unlink(config_path)

    def test_empty_yaml_config(self, tmp_path):
        """An empty file yields the standard options."""
        config_path = tmp_path / "empty.yml"
        config_path.write_text("")
        assert ParserOptions.from_file(str(config_path)) == STANDARD

    def test_config_file_not_found(self):
        """Test error handling for missing config file."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            ParserOptions.from_file("/nonexistent/config.json")

    def test_unsupported_config_format(self, tmp_path):
        """Test error handling for unsupported config file format."""
        config_path = tmp_path / "config.txt"
        config_path.write_text("some content")
        with pytest.raises(ValueError, match="Unsupported file format"):
            load_config_file(str(config_path))

    def test_invalid_json(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("{ invalid json }")
        with pytest.raises(ValueError, match="Invalid JSON file"):
            load_config_file(str(config_path))

    def test_invalid_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("key: [unclosed")
        with pytest.raises(ValueError, match="Invalid YAML file"):
            load_config_file(str(config_path))

    def test_non_mapping_config(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config_file(str(config_path))

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown parser options: strict"):
            ParserOptions.from_mapping({"strict": True})

    def test_non_bool_value(self):
        with pytest.raises(TypeError, match="expects bool"):
            ParserOptions.from_mapping({"auto_alias": "yes"})

    def test_safe_from_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"auto_alias": True}))
        result = ParserOptions.safe_from_file(str(config_path))
        assert isinstance(result, Ok)
        assert result.unwrap().auto_alias is True

        result = ParserOptions.safe_from_file(str(tmp_path / "missing.json"))
        assert isinstance(result, Err)
        assert "Configuration file not found" in result.unwrap_err()


class TestPresets:
    """Test suite for the predefined parser options."""

    def test_presets(self):
        assert STANDARD == ParserOptions()
        assert STRICT_COMMAND_NAME.strict_command_name is True
        assert STRICT_COMMAND_NAME.strict_option_name is False
        assert STRICT_OPTION_NAME.strict_option_name is True
        assert STRICT_OPTION_NAME.strict_command_name is False

    def test_replace_returns_new_options(self):
        options = STANDARD.replace(auto_alias=True)
        assert options.auto_alias is True
        assert STANDARD.auto_alias is False


if __name__ == "__main__":
    pytest.main([__file__])
