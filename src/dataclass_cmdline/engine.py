"""
Top-level command-line resolution.

``ParseEngine.parse`` decides what a command line asks for:

    help [command]   -> ParseMode.HELP
    version          -> ParseMode.VERSION
    command options  -> ParseMode.BOUND (or FAILED when binding fails)

When no command name leads the line, the default command is used. The engine
never raises for bad input; every problem is reported in the ``ParseResult``.
"""

import dataclasses
import enum
import logging
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from .binder import bind
from .config import STANDARD, ParserOptions
from .errors import ParseError
from .registry import CommandDescriptor, CommandRegistry
from .tokenizer import is_option_reference, option_equals, tokenize

logger = logging.getLogger(__name__)

HELP = "help"
HELP_ALIAS = "h"
VERSION = "version"


class ParseMode(enum.Enum):
    HELP = "help"
    VERSION = "version"
    BOUND = "bound"
    FAILED = "failed"


@dataclasses.dataclass
class ParseResult:
    """
    Outcome of ``ParseEngine.parse``.

    Attributes:
        mode: What the command line resolved to.
        command: The resolved command, if any.
        instance: The bound option instance (BOUND only).
        remainder: Positional arguments forwarded to the handler.
        errors: Problems found, in order.
        help_command: Command name to show help for; "" means general help.
            Set for HELP and FAILED results.
        arguments: The command line that was parsed.
    """

    mode: ParseMode
    command: Optional[CommandDescriptor] = None
    instance: Any = None
    remainder: list[str] = dataclasses.field(default_factory=list)
    errors: list[ParseError] = dataclasses.field(default_factory=list)
    help_command: Optional[str] = None
    arguments: str = ""

    @property
    def ok(self) -> bool:
        return self.mode is not ParseMode.FAILED

    @property
    def messages(self) -> list[str]:
        return [str(error) for error in self.errors]


class ParseEngine:
    """
    Resolves commands and binds their options.

    Args:
        commands: A ``CommandRegistry`` or the command descriptors to register.
        options: Parser switches; ignored when a registry is passed, which
            carries its own.

    Example:
        engine = ParseEngine([CommandDescriptor("test", run_test, option_type=TestOptions)])
        result = engine.parse("test -n 5")
        if result.mode is ParseMode.BOUND:
            ...
    """

    def __init__(
        self,
        commands: Union[CommandRegistry, Iterable[CommandDescriptor]],
        options: Optional[ParserOptions] = None,
    ) -> None:
        if isinstance(commands, CommandRegistry):
            self.registry = commands
        else:
            self.registry = CommandRegistry(commands, options or STANDARD)
        self.options = self.registry.options

    def _resolve_reserved(self, tokens: Sequence[str], arguments: str) -> Optional[ParseResult]:
        first = tokens[0]
        if option_equals(first, HELP) or (
            self.options.auto_alias and option_equals(first, HELP_ALIAS)
        ):
            target = ""
            command = None
            if len(tokens) >= 2 and not is_option_reference(tokens[1]):
                command = self.registry.lookup(tokens[1])
                if command is not None:
                    target = command.name
            logger.debug("Help requested for %r", target)
            return ParseResult(
                ParseMode.HELP, command=command, help_command=target, arguments=arguments
            )

        if option_equals(first, VERSION):
            return ParseResult(ParseMode.VERSION, arguments=arguments)
        return None

    @staticmethod
    def _help_is_option(command: CommandDescriptor, token: str) -> bool:
        if is_option_reference(token):
            return command.schema.has_name(HELP)
        return HELP in command.schema.long_names

    def parse(
        self,
        arguments: Union[str, Sequence[str]],
        environ: Optional[Mapping[str, str]] = None,
    ) -> ParseResult:
        """
        Parse a command line.

        Args:
            arguments: The raw command line, or a list of arguments which is
                joined with spaces.
            environ: Environment used for options read from the environment;
                defaults to ``os.environ``.

        Returns:
            ParseResult: The resolved mode, command, bound options and errors.
        """
        if not isinstance(arguments, str):
            arguments = " ".join(arguments)
        tokens = tokenize(arguments)

        command = self.registry.default_command
        specified = False
        start = 0
        if tokens:
            first = tokens[0]
            found = None if is_option_reference(first) else self.registry.lookup(first)
            if found is not None:
                command = found
                specified = True
                start = 1
            else:
                reserved = self._resolve_reserved(tokens, arguments)
                if reserved is not None:
                    return reserved

        if command is None:
            return ParseResult(
                ParseMode.FAILED,
                errors=[ParseError("Specify the command name")],
                help_command="",
                arguments=arguments,
            )

        if (
            specified
            and not command.is_subcommand
            and len(tokens) > start
            and option_equals(tokens[start], HELP)
            and not self._help_is_option(command, tokens[start])
        ):
            return ParseResult(
                ParseMode.HELP,
                command=command,
                help_command=command.name,
                arguments=arguments,
            )

        logger.debug(
            "Binding command '%s' (%s)",
            command.name,
            "specified" if specified else "default",
        )
        bound = bind(
            command.schema,
            tokens,
            start,
            command.is_subcommand,
            options=self.options,
            environ=environ,
        )
        if not bound.ok:
            return ParseResult(
                ParseMode.FAILED,
                command=command,
                remainder=bound.remainder,
                errors=bound.errors,
                help_command=command.name if specified else "",
                arguments=arguments,
            )

        return ParseResult(
            ParseMode.BOUND,
            command=command,
            instance=bound.instance,
            remainder=bound.remainder,
            arguments=arguments,
        )


__all__ = ["ParseEngine", "ParseMode", "ParseResult"]
