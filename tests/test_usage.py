#!/usr/bin/env python3
"""
Tests for plain-text help output.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

import pytest

from dataclass_cmdline import (
    STANDARD,
    CommandDescriptor,
    CommandRegistry,
    ParseEngine,
    format_help,
)


class Shape(enum.Enum):
    CIRCLE = 1
    SQUARE = 2


@dataclass
class BorderOptions:
    width: int = field(default=1, metadata={"help": "Border width"})


@dataclass
class DrawOptions:
    shape: Shape = field(default=Shape.CIRCLE, metadata={"help": "Shape to draw"})
    title: str = field(default="untitled", metadata={"short": "t", "help": "Title"})
    size: int = field(default=0, metadata={"required": True, "help": "Size"})
    color: Optional[str] = field(default=None, metadata={"help": "Fill color"})
    scale: float = field(default=1.0, metadata={"default_text": "auto", "help": "Scale"})
    border: Optional[BorderOptions] = field(default=None, metadata={"help": "Border"})


def draw(options, args):
    pass


def clear(args):
    pass


def _registry(**changes):
    return CommandRegistry(
        [
            CommandDescriptor("draw", draw, option_type=DrawOptions, description="Draw a shape"),
            CommandDescriptor("clear", clear, description="Clear the canvas"),
        ],
        STANDARD.replace(**changes),
    )


class TestFormatHelp:
    """Test suite for format_help()."""

    def test_command_help(self):
        text = format_help(_registry(), "draw", program="paint")
        lines = text.splitlines()
        assert lines[0] == "Usage: paint draw -option value..."
        assert "draw: Draw a shape" in lines
        assert any(line.strip().startswith("-title, -t <str>") for line in lines)
        assert '(Default: "untitled")' in text
        assert "Shape to draw (Default: CIRCLE)" in text
        assert "Size (Required)" in text
        assert "Fill color (Optional)" in text
        assert "Scale (Default: auto)" in text
        assert "-border {BorderOptions}" in text
        assert "{BorderOptions}" in lines
        assert "Border width (Default: 1)" in text
        assert "Clear the canvas" not in text

    def test_general_help(self):
        text = format_help(_registry(), program="paint")
        lines = text.splitlines()
        assert lines[0] == "Usage: paint <Command> -option value..."
        assert "Commands:" in lines
        assert "  draw (default)" in lines
        assert "  clear" in lines
        assert "clear: Clear the canvas" in lines

    def test_command_list(self):
        text = format_help(
            _registry(show_usage=False, display_command_list_as_help=True)
        )
        assert text == "clear draw"

    def test_help_for_alias(self):
        registry = CommandRegistry(
            [CommandDescriptor("clear", clear, alias="c", description="Clear the canvas")]
        )
        assert "clear: Clear the canvas" in format_help(registry, "c", program="paint")

    def test_errors_come_first(self):
        registry = _registry()
        result = ParseEngine(registry).parse("draw -size big")
        text = format_help(registry, result=result, program="paint")
        lines = text.splitlines()
        assert lines[0] == "Error: draw -size big"
        assert lines[1] == "  Could not convert 'big' to type 'int' (-size big)"
        assert lines[2] == "  Value is required for option 'size' <DrawOptions>"
        assert "Usage: paint draw -option value..." in lines


if __name__ == "__main__":
    pytest.main([__file__])
