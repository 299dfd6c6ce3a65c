"""
Binding of tokens to option instances.

``bind`` scans a token list against an ``OptionSchema`` and produces a fresh
option instance, the positional remainder and the ordered list of problems it
found. Problems never abort the scan; only a missing required option makes the
result fatal.
"""

import copy
import dataclasses
import os
from typing import Any, Mapping, Optional, Sequence, Type, TypeVar, Union

from result import Err, Ok, Result

from .config import STANDARD, ParserOptions
from .converters import convert_enum
from .errors import ParseError, ValidationError
from .schema import OptionField, OptionSchema, ValueKind, build_schema
from .tokenizer import (
    SEPARATOR,
    is_option_reference,
    strip_prefix,
    tokenize,
    unwrap_braces,
)

T = TypeVar("T")


@dataclasses.dataclass
class BindResult:
    """
    Outcome of one ``bind`` call.

    Attributes:
        instance: The bound option instance, or None when the result is fatal
            (or the schema has no option type).
        remainder: Tokens that were not consumed as option names or values.
        errors: Problems in the order they were found.
        fatal: True when a required option was left unset.
    """

    instance: Any
    remainder: list[str]
    errors: list[ParseError]
    fatal: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [str(error) for error in self.errors]


class _NestedOptionsError(ValueError):
    def __init__(self, errors: list[ParseError]) -> None:
        super().__init__("; ".join(str(error) for error in errors))
        self.errors = errors


def _read_environment(environ: Mapping[str, str], name: str) -> Optional[str]:
    try:
        return environ.get(name)
    except (OSError, ValueError, UnicodeError):
        return None


class _Binding:
    """State of a single bind call."""

    def __init__(
        self,
        schema: OptionSchema,
        options: ParserOptions,
        accept_unknown_names: bool,
        instance: Any,
        environ: Optional[Mapping[str, str]],
    ) -> None:
        self.schema = schema
        self.options = options
        self.accept_unknown_names = accept_unknown_names
        self.instance = schema.new_instance() if instance is None else instance
        self.environ = os.environ if environ is None else environ
        self.bound: set[str] = set()
        self.remainder: list[str] = []
        self.errors: list[ParseError] = []

    def is_set(self, option: OptionField) -> bool:
        return option.long_name in self.bound

    def convert(self, option: OptionField, text: str) -> Any:
        if option.kind is ValueKind.NESTED:
            nested = bind(
                option.nested,
                tokenize(unwrap_braces(text)),
                0,
                self.accept_unknown_names,
                options=self.options,
                environ=self.environ,
            )
            if nested.errors or nested.instance is None:
                raise _NestedOptionsError(nested.errors)
            return nested.instance
        if option.kind is ValueKind.ENUM:
            return convert_enum(option.value_type, text)
        return self.schema.converters.convert(option.value_type, text)

    def assign(self, option: OptionField, text: str) -> Optional[Exception]:
        """Convert and store a value; returns the conversion failure, if any."""
        if self.instance is None:
            return ValueError(f"Option '{option.long_name}' has no instance to bind to")
        try:
            value = self.convert(option, text)
            option.set(self.instance, value)
        except Exception as e:
            return e
        self.bound.add(option.long_name)
        return None

    def report_conversion(
        self, option: OptionField, failure: Exception, previous: str, text: str
    ) -> None:
        if isinstance(failure, _NestedOptionsError):
            self.errors.extend(failure.errors)
        self.errors.append(
            ParseError(
                f"Could not convert '{text}' to type '{option.type_name}' ({previous} {text})",
                option=option.long_name,
            )
        )

    def scan(self, tokens: Sequence[str], start: int) -> None:
        n = start
        while n < len(tokens):
            token = tokens[n]
            if is_option_reference(token):
                n = self.scan_name(tokens, n)
            elif token == SEPARATOR:
                pass
            else:
                self.scan_value(tokens, n)
            n += 1

    def scan_name(self, tokens: Sequence[str], n: int) -> int:
        token = tokens[n]
        name = strip_prefix(token)
        option = self.schema.lookup(name)

        if option is None:
            self.remainder.append(token)
            if self.options.strict_option_name and not self.accept_unknown_names:
                if self.schema.option_type is None:
                    message = f"Option '{name}' is invalid"
                else:
                    message = f"Option '{name}' is not found in type {self.schema.name}"
                self.errors.append(ParseError(message, option=name))
            return n

        if n + 1 >= len(tokens) or is_option_reference(tokens[n + 1]):
            self.errors.append(
                ParseError(
                    f"No corresponding value found for option '{option.long_name}'",
                    option=option.long_name,
                )
            )
            return n

        n += 1
        failure = self.assign(option, tokens[n])
        if failure is not None:
            self.report_conversion(option, failure, token, tokens[n])
        return n

    def scan_value(self, tokens: Sequence[str], n: int) -> None:
        token = tokens[n]
        if self.options.positional_required:
            option = next(
                (o for o in self.schema.fields if o.required and not self.is_set(o)),
                None,
            )
            if option is not None:
                failure = self.assign(option, token)
                # index 0 is where a command name would sit
                if failure is not None and n > 0:
                    self.report_conversion(option, failure, tokens[n - 1], token)
                return

        self.remainder.append(token)

    def load_environment(self) -> None:
        for option in self.schema.fields:
            if self.is_set(option) or not option.env:
                continue

            value = None
            if option.short_name is not None:
                value = _read_environment(self.environ, option.short_name)
            if value is None:
                value = _read_environment(self.environ, option.long_name)
            if value is not None:
                # an unusable environment value counts as absent
                self.assign(option, value)

    def validate(self) -> bool:
        fatal = False
        for option in self.schema.fields:
            if option.required and not self.is_set(option):
                self.errors.append(
                    ValidationError(
                        f"Value is required for option '{option.long_name}' <{self.schema.name}>",
                        option=option.long_name,
                    )
                )
                fatal = True

            if (
                option.nested is not None
                and not self.is_set(option)
                and self.instance is not None
                and option.get(self.instance) is None
            ):
                option.set(self.instance, option.nested.new_instance())
        return fatal

    def run(self, tokens: Sequence[str], start: int) -> BindResult:
        self.scan(tokens, start)
        self.load_environment()
        fatal = self.validate()
        return BindResult(
            instance=None if fatal else self.instance,
            remainder=self.remainder,
            errors=self.errors,
            fatal=fatal,
        )


def bind(
    schema: OptionSchema,
    tokens: Sequence[str],
    start: int = 0,
    accept_unknown_names: bool = False,
    *,
    options: ParserOptions = STANDARD,
    instance: Any = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BindResult:
    """
    Bind tokens to a new instance of the schema's option type.

    Args:
        schema: The compiled option schema.
        tokens: Tokens produced by ``tokenize``.
        start: Index of the first token to scan.
        accept_unknown_names: Do not report unknown option names even in
            strict option name mode (used for subcommands).
        options: Parser switches (strict names, positional filling).
        instance: Bind onto this instance instead of a new one.
        environ: Environment used for options read from the environment;
            defaults to ``os.environ``.

    Returns:
        BindResult: The bound instance, positional remainder and problems found.
    """
    return _Binding(schema, options, accept_unknown_names, instance, environ).run(
        tokens, start
    )


def parse_options(
    arguments: Union[str, Sequence[str]],
    option_type: Type[T],
    original: Optional[T] = None,
) -> Result[T, list[str]]:
    """
    Parse a standalone option type from a command line.

    Unknown option names are accepted and the standard parser options are
    used. When ``original`` is given, values are bound onto a copy of it.

    Returns:
        Result[T, list[str]]:
            - Ok with the bound instance,
            - Err with the error messages if a required option is missing.
    """
    if not isinstance(arguments, str):
        arguments = " ".join(arguments)

    schema = build_schema(option_type)
    instance = copy.copy(original) if original is not None else None
    result = bind(schema, tokenize(arguments), 0, True, instance=instance)
    if result.fatal or result.instance is None:
        return Err(result.messages)
    return Ok(result.instance)


__all__ = ["BindResult", "bind", "parse_options"]
