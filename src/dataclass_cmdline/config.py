"""
Parser configuration.

``ParserOptions`` collects the switches that change how commands and options
are resolved. Options can be built in code, taken from one of the presets, or
loaded from a YAML or JSON file:

    # parser.yaml
    strict_command_name: true
    auto_alias: true

    options = ParserOptions.from_file("parser.yaml")
"""

import dataclasses
import json
import logging
import os
from typing import Any, Callable, Optional

import yaml
from result import Err, Ok, Result

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ParserOptions:
    """
    Switches controlling command resolution and option binding.

    Attributes:
        strict_command_name: A command name must always be given (no default command).
        strict_option_name: Unknown option names are reported as errors.
        positional_required: Values without an option name fill required options
            in declaration order.
        auto_alias: Commands without an alias get one made of the initials of
            their hyphen-separated words ('remove-file' becomes 'rf'); 'h' is
            accepted for help.
        display_command_list_as_help: General help shows a one-line command list.
        show_usage: Help output starts with a usage line.
        command_factory: Creates handler instances for class-based commands.
    """

    strict_command_name: bool = False
    strict_option_name: bool = False
    positional_required: bool = True
    auto_alias: bool = False
    display_command_list_as_help: bool = False
    show_usage: bool = True
    command_factory: Optional[Callable[[type], Any]] = dataclasses.field(
        default=None, compare=False
    )

    def replace(self, **changes: Any) -> "ParserOptions":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Optional[dict[str, Any]]) -> "ParserOptions":
        """
        Build options from a mapping of field names to values.

        Raises:
            ValueError: If the mapping contains unknown keys or non-boolean values.
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Parser options must be a mapping, got {type(data).__name__}"
            )

        known = {
            f.name for f in dataclasses.fields(cls) if f.name != "command_factory"
        }
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown parser options: {', '.join(unknown)}")

        for key, value in data.items():
            if not isinstance(value, bool):
                raise TypeError(
                    f"Parser option '{key}' expects bool, got {type(value).__name__}: {value!r}"
                )
        return cls(**data)

    @classmethod
    def from_file(cls, config_path: str) -> "ParserOptions":
        """Load options from a YAML or JSON file (see ``load_config_file``)."""
        return cls.from_mapping(load_config_file(config_path))

    @classmethod
    def safe_from_file(cls, config_path: str) -> Result["ParserOptions", str]:
        """
        Load options from a file without raising.

        Returns:
            Result[ParserOptions, str]:
                - Ok with the loaded options,
                - Err with the error message if the file is missing or invalid.
        """
        try:
            return Ok(cls.from_file(config_path))
        except (OSError, ValueError, TypeError) as e:
            return Err(str(e))


def load_config_file(config_path: str) -> dict[str, Any]:
    """
    Load configuration from a YAML or JSON file.

    Args:
        config_path (str): Path to the configuration file.

    Returns:
        dict[str, Any]: Dictionary containing the configuration data.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the file format is not supported or invalid.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    file_ext = os.path.splitext(config_path)[1].lower()
    logger.debug("Loading configuration from %s", config_path)

    with open(config_path, "r") as f:
        if file_ext in [".yaml", ".yml"]:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML file: {e}")
        elif file_ext == ".json":
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON file: {e}")
        else:
            raise ValueError(
                f"Unsupported file format: {file_ext}. "
                "Supported formats are: .yaml, .yml, .json"
            )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Configuration file must contain a mapping, got {type(data).__name__}"
        )
    return data


STANDARD = ParserOptions()
STRICT_COMMAND_NAME = STANDARD.replace(strict_command_name=True)
STRICT_OPTION_NAME = STANDARD.replace(strict_option_name=True)

__all__ = [
    "ParserOptions",
    "STANDARD",
    "STRICT_COMMAND_NAME",
    "STRICT_OPTION_NAME",
    "load_config_file",
]
