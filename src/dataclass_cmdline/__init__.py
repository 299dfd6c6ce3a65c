"""
dataclass_cmdline - Declarative command-line parsing and dispatch built on dataclasses.

Commands are described by ``CommandDescriptor`` records and their options by
dataclasses whose field metadata names the option. A raw command line is
tokenized (quotes and brace-enclosed nested options stay together), the
command is resolved, tokens are bound to a typed option instance, and the
matching handler is run with the options and the remaining positional
arguments.
"""

from .binder import BindResult, bind, parse_options
from .config import (
    STANDARD,
    STRICT_COMMAND_NAME,
    STRICT_OPTION_NAME,
    ParserOptions,
    load_config_file,
)
from .converters import CONVERTERS, TypeConverterRegistry
from .dispatcher import CommandGroup, Dispatcher, parse_and_run, parse_and_run_async
from .engine import ParseEngine, ParseMode, ParseResult
from .errors import (
    CommandLineError,
    ConstructionError,
    ParseError,
    RegistryError,
    ValidationError,
)
from .registry import CommandDescriptor, CommandRegistry, HandlerKind
from .schema import (
    FieldDescriptor,
    OptionField,
    OptionSchema,
    ValueKind,
    build_schema,
    describe_fields,
)
from .tokenizer import regroup, split_batches, tokenize
from .usage import format_help

__version__ = "1.0.0"
__all__ = [
    "BindResult",
    "CONVERTERS",
    "CommandDescriptor",
    "CommandGroup",
    "CommandLineError",
    "CommandRegistry",
    "ConstructionError",
    "Dispatcher",
    "FieldDescriptor",
    "HandlerKind",
    "OptionField",
    "OptionSchema",
    "ParseEngine",
    "ParseError",
    "ParseMode",
    "ParseResult",
    "ParserOptions",
    "RegistryError",
    "STANDARD",
    "STRICT_COMMAND_NAME",
    "STRICT_OPTION_NAME",
    "TypeConverterRegistry",
    "ValidationError",
    "ValueKind",
    "bind",
    "build_schema",
    "describe_fields",
    "format_help",
    "load_config_file",
    "parse_and_run",
    "parse_and_run_async",
    "parse_options",
    "regroup",
    "split_batches",
    "tokenize",
]
