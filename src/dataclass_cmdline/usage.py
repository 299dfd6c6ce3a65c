"""Plain-text help output."""

import enum
import os
import sys
from typing import Optional

from .engine import ParseResult
from .registry import CommandDescriptor, CommandRegistry
from .schema import OptionField, OptionSchema, ValueKind

INDENT = "  "
INDENT2 = "    "


def _describe_default(option: OptionField, schema: OptionSchema) -> str:
    if option.required:
        if option.default_text is not None:
            return f" (Required: {option.default_text})"
        return " (Required)"

    if option.default_text is not None:
        if option.value_type is str:
            return f' (Default: "{option.default_text}")'
        return f" (Default: {option.default_text})"

    value = option.get(schema.default_instance)
    if value is None:
        return " (Optional)"
    if option.kind is ValueKind.NESTED:
        return ""
    if isinstance(value, str):
        return f' (Default: "{value}")'
    if isinstance(value, enum.Enum):
        return f" (Default: {value.name})"
    return f" (Default: {value})"


def _append_options(
    lines: list[str], schema: OptionSchema, nested: list[OptionSchema]
) -> None:
    if not schema.fields:
        lines.append("")
        return

    width = max(len(option.option_text) for option in schema.fields)
    for option in schema.fields:
        text = option.option_text.ljust(width)
        lines.append(
            f"{INDENT}{text}{INDENT2}{option.description}"
            f"{_describe_default(option, schema)}".rstrip()
        )
        if option.nested is not None and all(
            s.option_type is not option.nested.option_type for s in nested
        ):
            nested.append(option.nested)
    lines.append("")


def _append_command(
    lines: list[str], command: CommandDescriptor, nested: list[OptionSchema]
) -> None:
    if command.name == "":
        lines.append(command.description)
    else:
        lines.append(f"{command.name}: {command.description}".rstrip())
    _append_options(lines, command.schema, nested)


def format_help(
    registry: CommandRegistry,
    command_name: Optional[str] = None,
    result: Optional[ParseResult] = None,
    program: Optional[str] = None,
) -> str:
    """
    Format help text for one command, or for all commands when
    ``command_name`` is empty or None.

    Errors carried by ``result`` are listed first.
    """
    options = registry.options
    lines: list[str] = []

    if result is not None and result.errors:
        lines.append(f"Error: {result.arguments}")
        lines.extend(f"{INDENT}{message}" for message in result.messages)
        lines.append("")
        if command_name is None:
            command_name = result.help_command

    if options.show_usage:
        program = program or os.path.basename(sys.argv[0]) or "app"
        lines.append(f"Usage: {program} {command_name or '<Command>'} -option value...")
        lines.append("")

    if not command_name and options.display_command_list_as_help:
        lines.append(" ".join(sorted(registry.names())))
        return "\n".join(lines)

    command = registry.lookup(command_name) if command_name else None
    nested: list[OptionSchema] = []
    if command is None:
        lines.append("Commands:")
        for each in registry:
            suffix = " (default)" if each is registry.default_command else ""
            lines.append(f"{INDENT}{each.name}{suffix}")
        lines.append("")
        for each in registry:
            _append_command(lines, each, nested)
    else:
        _append_command(lines, command, nested)

    # nested option types may reference further nested types
    index = 0
    while index < len(nested):
        schema = nested[index]
        lines.append(f"{{{schema.name}}}")
        _append_options(lines, schema, nested)
        index += 1

    return "\n".join(lines)


__all__ = ["format_help"]
