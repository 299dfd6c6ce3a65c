"""
String to value converters for scalar option types.

A single process-wide ``CONVERTERS`` registry is populated at import time.
Additional scalar types may be registered during application setup; the
registry is frozen as soon as the first option schema is built, after which it
is read-only.
"""

import enum
from decimal import Decimal
from typing import Any, Callable, Optional, Type

from .errors import ConstructionError
from .tokenizer import QUOTE, SINGLE_QUOTE, TRIPLE_QUOTES

Converter = Callable[[str], Any]


def _strict_bool(value: str) -> bool:
    """
    Parse a string to a boolean value strictly.

    Only 'true' and 'false' (in any letter case) are accepted.
    Raises ValueError for any other string.
    """
    lowered = value.lower()
    if lowered == "true":
        return True
    elif lowered == "false":
        return False
    else:
        raise ValueError(
            f"Invalid boolean value: '{value}'. Must be one of: true, false"
        )


def unquote(value: str) -> str:
    """
    Strip one level of quoting from a string value.

    \"\"\"text\"\"\", "text" and 'text' are unwrapped in that order of
    precedence; anything else is returned unchanged.
    """
    triple = len(TRIPLE_QUOTES)
    if (
        len(value) >= triple * 2
        and value.startswith(TRIPLE_QUOTES)
        and value.endswith(TRIPLE_QUOTES)
    ):
        return value[triple:-triple]
    if len(value) >= 2 and value[0] == QUOTE and value[-1] == QUOTE:
        return value[1:-1]
    if len(value) >= 2 and value[0] == SINGLE_QUOTE and value[-1] == SINGLE_QUOTE:
        return value[1:-1]
    return value


def _invariant_int(value: str) -> int:
    # int() alone would also accept '1_000'
    text = value.strip()
    if "_" in text:
        raise ValueError(f"Invalid integer value: '{value}'")
    return int(text, 10)


def _invariant_float(value: str) -> float:
    text = value.strip()
    if "_" in text:
        raise ValueError(f"Invalid float value: '{value}'")
    return float(text)


def _invariant_decimal(value: str) -> Decimal:
    try:
        return Decimal(value.strip())
    except ArithmeticError as e:
        raise ValueError(f"Invalid decimal value: '{value}'") from e


def convert_enum(enum_type: Type[enum.Enum], value: str) -> enum.Enum:
    """Return the member of ``enum_type`` whose name matches ``value`` ignoring case."""
    wanted = value.strip().casefold()
    for member in enum_type:
        if member.name.casefold() == wanted:
            return member
    names = ", ".join(member.name for member in enum_type)
    raise ValueError(
        f"Invalid {enum_type.__name__} value: '{value}'. Must be one of: {names}"
    )


class TypeConverterRegistry:
    """
    Maps scalar types to functions converting a command-line string into a value.

    Example:
        CONVERTERS.register(pathlib.Path, pathlib.Path)
    """

    def __init__(self) -> None:
        self._converters: dict[type, Converter] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, target: type, converter: Converter) -> None:
        """
        Register a converter for ``target``.

        Raises:
            ConstructionError: If the registry has already been frozen.
        """
        if self._frozen:
            raise ConstructionError(
                f"Cannot register a converter for '{target.__name__}' "
                "after option schemas have been built"
            )
        self._converters[target] = converter

    def freeze(self) -> None:
        self._frozen = True

    def get(self, target: Any) -> Optional[Converter]:
        return self._converters.get(target)

    def __contains__(self, target: Any) -> bool:
        return target in self._converters

    def convert(self, target: type, value: str) -> Any:
        converter = self._converters.get(target)
        if converter is None:
            raise ValueError(f"No converter registered for type '{target.__name__}'")
        return converter(value)


def _initialize(registry: TypeConverterRegistry) -> TypeConverterRegistry:
    registry.register(bool, _strict_bool)
    registry.register(str, unquote)
    registry.register(int, _invariant_int)
    registry.register(float, _invariant_float)
    registry.register(Decimal, _invariant_decimal)
    return registry


CONVERTERS = _initialize(TypeConverterRegistry())

__all__ = [
    "CONVERTERS",
    "TypeConverterRegistry",
    "convert_enum",
    "unquote",
]
