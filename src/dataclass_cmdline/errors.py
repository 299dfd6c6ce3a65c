"""
Exception types raised or collected by dataclass_cmdline.

Construction and registry errors are raised while schemas and command
registries are built (normally once at startup). Parse and validation errors
are never raised across the parse boundary; they are collected in order and
returned with the parse outcome.
"""

from typing import Optional


class CommandLineError(Exception):
    """Base class for all dataclass_cmdline errors."""


class ConstructionError(CommandLineError):
    """An option schema, converter or command handler could not be built."""


class RegistryError(CommandLineError):
    """A command name or alias is registered twice for different commands."""


class ParseError(CommandLineError):
    """
    A recoverable problem found while binding tokens.

    Args:
        message: Human readable description.
        option: Long name of the option involved, if any.
    """

    def __init__(self, message: str, option: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.option = option

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ValidationError(ParseError):
    """A required option is still unset after scanning and environment fallback."""


__all__ = [
    "CommandLineError",
    "ConstructionError",
    "RegistryError",
    "ParseError",
    "ValidationError",
]
