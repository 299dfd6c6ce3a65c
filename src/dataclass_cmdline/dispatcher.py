"""
Execution of parse results.

The dispatcher runs the handler of a BOUND result, and renders help, version
or error output for the other modes without invoking any handler. Async
handlers are awaited by ``run_async`` and driven to completion by ``run``.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, Sequence, Union

from .config import ParserOptions
from .engine import ParseEngine, ParseMode, ParseResult
from .registry import CommandDescriptor, CommandRegistry
from .usage import format_help

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "1.0.0"


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class Dispatcher:
    """
    Runs parse results produced by a ``ParseEngine``.

    Args:
        engine: The engine whose registry resolves commands.
        version: Text shown for the ``version`` command.
        on_help: Receives formatted help (and error) text. Defaults to print.
        on_version: Receives the version text. Defaults to print.
    """

    def __init__(
        self,
        engine: ParseEngine,
        version: str = DEFAULT_VERSION,
        on_help: Optional[Callable[[str], Any]] = None,
        on_version: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.engine = engine
        self.version = version
        self.on_help = on_help or print
        self.on_version = on_version or print

    @property
    def registry(self) -> CommandRegistry:
        return self.engine.registry

    def _render(self, result: ParseResult) -> None:
        if result.mode is ParseMode.VERSION:
            self.on_version(self.version)
            return
        if result.mode is ParseMode.FAILED:
            logger.debug("Parse failed: %s", "; ".join(result.messages))
        self.on_help(format_help(self.registry, result.help_command, result))

    def _call(self, result: ParseResult) -> Any:
        command = result.command
        handler = command.entry_point(self.engine.options.command_factory)
        args = list(result.remainder)
        logger.debug("Running command '%s' (%s)", command.name, command.kind.value)
        if command.kind.takes_options:
            return handler(result.instance, args)
        return handler(args)

    def run(self, result: ParseResult) -> Any:
        """
        Execute a parse result synchronously.

        Returns:
            The handler's return value, or None when no handler ran.
        """
        if result.mode is not ParseMode.BOUND:
            self._render(result)
            return None

        value = self._call(result)
        if result.command.kind.is_async and inspect.isawaitable(value):
            return asyncio.run(_await(value))
        return value

    async def run_async(self, result: ParseResult) -> Any:
        """Execute a parse result, awaiting async handlers."""
        if result.mode is not ParseMode.BOUND:
            self._render(result)
            return None

        value = self._call(result)
        if result.command.kind.is_async and inspect.isawaitable(value):
            return await value
        return value

    def parse_and_run(self, arguments: Union[str, Sequence[str]]) -> Any:
        return self.run(self.engine.parse(arguments))

    async def parse_and_run_async(self, arguments: Union[str, Sequence[str]]) -> Any:
        return await self.run_async(self.engine.parse(arguments))


def parse_and_run(
    commands: Iterable[CommandDescriptor],
    arguments: Union[str, Sequence[str]],
    options: Optional[ParserOptions] = None,
    **kwargs: Any,
) -> Any:
    """Build an engine for ``commands``, parse ``arguments`` and run the result."""
    return Dispatcher(ParseEngine(commands, options), **kwargs).parse_and_run(arguments)


async def parse_and_run_async(
    commands: Iterable[CommandDescriptor],
    arguments: Union[str, Sequence[str]],
    options: Optional[ParserOptions] = None,
    **kwargs: Any,
) -> Any:
    dispatcher = Dispatcher(ParseEngine(commands, options), **kwargs)
    return await dispatcher.parse_and_run_async(arguments)


GROUP_OPTIONS = ParserOptions(
    strict_command_name=True,
    strict_option_name=True,
    show_usage=False,
    display_command_list_as_help=True,
)


class CommandGroup:
    """
    A command handler that dispatches its arguments to a nested set of commands.

    Register it with ``is_subcommand=True`` so that option names meant for the
    nested commands reach it untouched:

        remote = CommandGroup([CommandDescriptor("add", add_remote, option_type=AddOptions)])
        CommandDescriptor("remote", remote, is_subcommand=True)

    Args:
        commands: The nested commands.
        default_argument: Used as the command line when no arguments are given.
        options: Parser switches for the nested commands; by default command
            and option names are strict and help shows a command list.
    """

    def __init__(
        self,
        commands: Iterable[CommandDescriptor],
        default_argument: Optional[str] = None,
        options: Optional[ParserOptions] = None,
        **kwargs: Any,
    ) -> None:
        self.commands = list(commands)
        self.default_argument = default_argument
        self.options = options or GROUP_OPTIONS
        self._kwargs = kwargs
        self._dispatcher: Optional[Dispatcher] = None

    @property
    def dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            engine = ParseEngine(self.commands, self.options)
            self._dispatcher = Dispatcher(engine, **self._kwargs)
        return self._dispatcher

    async def __call__(self, args: list[str]) -> Any:
        if not args and self.default_argument is not None:
            args = [self.default_argument]
        return await self.dispatcher.parse_and_run_async(args)


__all__ = [
    "CommandGroup",
    "Dispatcher",
    "parse_and_run",
    "parse_and_run_async",
]
