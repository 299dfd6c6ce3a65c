"""
Command descriptors and the command registry.

A command couples a name with a handler and an optional dataclass option
type. Handlers are plain callables or classes exposing exactly one of
``run`` / ``run_async``:

    def greet(options: GreetOptions, args: list[str]) -> None: ...

    class Sync:
        def run(self, args: list[str]) -> None: ...

    registry = CommandRegistry([
        CommandDescriptor("greet", greet, option_type=GreetOptions, alias="g"),
        CommandDescriptor("sync", Sync),
    ])
"""

import dataclasses
import enum
import inspect
import logging
from typing import Any, Callable, Iterable, Optional, Type

from .config import STANDARD, ParserOptions
from .errors import ConstructionError, RegistryError
from .schema import OptionSchema, build_schema
from .tokenizer import create_alias

logger = logging.getLogger(__name__)

RUN_METHOD = "run"
RUN_ASYNC_METHOD = "run_async"


class HandlerKind(enum.Enum):
    """Call shape of a command handler, fixed when the command is declared."""

    SYNC_ARGS = "sync(args)"
    SYNC_OPTIONS_ARGS = "sync(options, args)"
    ASYNC_ARGS = "async(args)"
    ASYNC_OPTIONS_ARGS = "async(options, args)"

    @property
    def is_async(self) -> bool:
        return self in (HandlerKind.ASYNC_ARGS, HandlerKind.ASYNC_OPTIONS_ARGS)

    @property
    def takes_options(self) -> bool:
        return self in (HandlerKind.SYNC_OPTIONS_ARGS, HandlerKind.ASYNC_OPTIONS_ARGS)

    @classmethod
    def of(cls, is_async: bool, takes_options: bool) -> "HandlerKind":
        if is_async:
            return cls.ASYNC_OPTIONS_ARGS if takes_options else cls.ASYNC_ARGS
        return cls.SYNC_OPTIONS_ARGS if takes_options else cls.SYNC_ARGS


def _is_coroutine_callable(target: Any) -> bool:
    if inspect.iscoroutinefunction(target):
        return True
    call = getattr(target, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


def _resolve_entry_point(name: str, handler: Any) -> tuple[Optional[str], bool]:
    """Return the method name to call on class handlers and whether it is async."""
    if inspect.isclass(handler):
        has_run = callable(getattr(handler, RUN_METHOD, None))
        has_run_async = callable(getattr(handler, RUN_ASYNC_METHOD, None))
        if has_run and has_run_async:
            raise ConstructionError(
                f"Type {handler.__name__} can implement only one of "
                f"{RUN_METHOD}() or {RUN_ASYNC_METHOD}()."
            )
        if not has_run and not has_run_async:
            raise ConstructionError(
                f"{RUN_METHOD}() or {RUN_ASYNC_METHOD}() method is required "
                f"in type {handler.__name__}."
            )
        if has_run_async:
            return RUN_ASYNC_METHOD, True
        return RUN_METHOD, inspect.iscoroutinefunction(getattr(handler, RUN_METHOD))

    if not callable(handler):
        raise ConstructionError(f"Handler of command '{name}' is not callable.")
    return None, _is_coroutine_callable(handler)


@dataclasses.dataclass(eq=False)
class CommandDescriptor:
    """
    A command: name, handler and option type plus resolution flags.

    Attributes:
        name: Command name, matched case-insensitively. An empty name makes
            the command default-eligible.
        handler: Callable or class with a ``run``/``run_async`` method.
        option_type: Dataclass holding the command's options, or None.
        alias: Alternate name.
        default: Run this command when no command name is given.
        is_subcommand: Unknown option names are passed through without error.
        description: One-line description used in help output.
    """

    name: str
    handler: Any
    option_type: Optional[Type[Any]] = None
    alias: str = ""
    default: bool = False
    is_subcommand: bool = False
    description: str = ""
    schema: OptionSchema = dataclasses.field(init=False, repr=False)
    kind: HandlerKind = dataclasses.field(init=False)

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        self.alias = (self.alias or "").strip()
        if self.name == "":
            self.default = True

        self._method, is_async = _resolve_entry_point(self.name, self.handler)
        self.kind = HandlerKind.of(is_async, self.option_type is not None)
        self.schema = build_schema(self.option_type)
        self._instance: Any = None

    @property
    def is_class_handler(self) -> bool:
        return self._method is not None

    def entry_point(
        self, factory: Optional[Callable[[type], Any]] = None
    ) -> Callable[..., Any]:
        """
        Return the callable to invoke for this command.

        Class handlers are instantiated once, through ``factory`` when given
        (falling back to the no-argument constructor when it returns None).
        """
        if self._method is None:
            return self.handler

        if self._instance is None:
            if factory is not None:
                self._instance = factory(self.handler)
            if self._instance is None:
                self._instance = self.handler()
        return getattr(self._instance, self._method)


def _check_constructible(command: CommandDescriptor, options: ParserOptions) -> None:
    if not command.is_class_handler or options.command_factory is not None:
        return

    try:
        signature = inspect.signature(command.handler)
    except (TypeError, ValueError):
        return
    required = [
        p.name
        for p in signature.parameters.values()
        if p.default is p.empty and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
    ]
    if required:
        raise ConstructionError(
            f"Default constructor (no arguments) is required for type "
            f"'{command.handler.__name__}' when no command factory is configured."
        )


class CommandRegistry:
    """
    Name and alias index over a set of commands.

    The first registered command is the default unless a later one is
    explicitly marked default. The choice is kept in ``default_command``;
    the registry does not modify descriptors, so they can be shared between
    registries.
    In strict command name mode there is no default command.

    Raises:
        RegistryError: If a name is registered for two different commands or
            an explicit alias is used twice.
        ConstructionError: If a class handler cannot be constructed.
    """

    def __init__(
        self,
        commands: Iterable[CommandDescriptor],
        options: ParserOptions = STANDARD,
    ) -> None:
        self.options = options
        self.commands: dict[str, CommandDescriptor] = {}
        self.aliases: dict[str, CommandDescriptor] = {}

        tentative: Optional[CommandDescriptor] = None
        for command in commands:
            key = command.name.casefold()
            existing = self.commands.get(key)
            if existing is not None:
                if existing.handler is not command.handler:
                    raise RegistryError(
                        f"Command name '{command.name}' ({command.handler!r}) already exists."
                    )
                logger.debug("Command '%s' registered again, ignoring", command.name)
                continue

            _check_constructible(command, options)
            self.commands[key] = command
            logger.debug("Registered command '%s' (%s)", command.name, command.kind.value)

            if tentative is None or (not tentative.default and command.default):
                tentative = command

            if command.alias:
                alias_key = command.alias.casefold()
                if alias_key in self.aliases:
                    raise RegistryError(
                        f"Alias '{command.alias}' ({command.name}) already exists."
                    )
                self.aliases[alias_key] = command

        if options.auto_alias:
            self._add_auto_aliases()

        self.default_command: Optional[CommandDescriptor] = None
        if not options.strict_command_name:
            self.default_command = tentative

    def _add_auto_aliases(self) -> None:
        for command in self.commands.values():
            if command.alias:
                continue
            alias = create_alias(command.name)
            if not alias:
                continue
            if alias.casefold() in self.aliases:
                logger.debug(
                    "Auto alias '%s' for command '%s' is already taken, skipping",
                    alias,
                    command.name,
                )
                continue
            self.aliases[alias.casefold()] = command

    def get(self, name: str) -> Optional[CommandDescriptor]:
        """Find a command by name only."""
        return self.commands.get(name.casefold())

    def lookup(self, word: str) -> Optional[CommandDescriptor]:
        """Find a command by name, then by alias."""
        key = word.casefold()
        command = self.commands.get(key)
        if command is None:
            command = self.aliases.get(key)
        return command

    def names(self) -> list[str]:
        return [command.name for command in self.commands.values()]

    def __iter__(self):
        return iter(self.commands.values())

    def __len__(self) -> int:
        return len(self.commands)

    def __contains__(self, word: str) -> bool:
        return self.lookup(word) is not None


__all__ = ["CommandDescriptor", "CommandRegistry", "HandlerKind"]
