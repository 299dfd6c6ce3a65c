"""
Option schemas compiled from dataclass option types.

Each option type is described by its dataclass fields. Option metadata is
carried in the field metadata, next to the help text:

    @dataclass
    class Options:
        number: int = field(default=10, metadata={"short": "n", "help": "A number"})
        text: str = field(default="", metadata={"required": True, "env": True})

Supported metadata keys:
    name          Long option name (defaults to the field name).
    short         Short option name.
    help          Description shown in help output.
    default_text  Text shown instead of the default value in help output.
    required      The option must be supplied (or found in the environment).
    env           Read the value from an environment variable when not supplied.
    option        Set to False to exclude the field from the schema.

A field whose type is not a registered scalar or an Enum is expanded into a
nested schema, which is bound from a brace-enclosed token on the command line.
"""

import dataclasses
import enum
import types
import typing
from typing import Any, Callable, Optional, Type, Union

from .converters import CONVERTERS, TypeConverterRegistry
from .errors import ConstructionError
from .tokenizer import OPTION_PREFIX


def _get_optional_inner_type(type_hint: Any) -> Optional[Any]:
    """
    If type_hint is Optional[T] (i.e., Union[T, None]), return T.
    Otherwise, return None.
    """
    origin = typing.get_origin(type_hint)
    if origin in (Union, types.UnionType):
        args = typing.get_args(type_hint)
        # Optional[T] is Union[T, None], so we check for exactly two args with one being NoneType
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and type(None) in args:
            return non_none_args[0]
    return None


def _type_name(value_type: Any) -> str:
    return getattr(value_type, "__name__", str(value_type))


class ValueKind(enum.Enum):
    SCALAR = "scalar"
    ENUM = "enum"
    NESTED = "nested"


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    """Plain description of one option field, independent of how it was discovered."""

    attribute: str
    long_name: str
    value_type: Any
    short_name: Optional[str] = None
    description: str = ""
    default_text: Optional[str] = None
    required: bool = False
    env: bool = False


def describe_fields(cls: Type[Any]) -> list[FieldDescriptor]:
    """
    Produce field descriptors for a dataclass option type.

    Fields are returned base class first, in declaration order; a field
    redeclared in a subclass replaces the inherited one.
    """
    if not dataclasses.is_dataclass(cls):
        raise ConstructionError(f"Type '{_type_name(cls)}' is not a dataclass")

    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        raise ConstructionError(
            f"Type annotations of '{cls.__name__}' could not be resolved: {e}"
        ) from e

    descriptors = []
    for f in dataclasses.fields(cls):
        metadata = f.metadata
        if not metadata.get("option", True):
            continue

        long_name = str(metadata.get("name", f.name)).strip()
        if not long_name:
            raise ConstructionError(
                f"{cls.__name__}.{f.name}: long option name must not be empty"
            )

        short_name = metadata.get("short")
        if short_name is not None:
            short_name = str(short_name).strip() or None

        descriptors.append(
            FieldDescriptor(
                attribute=f.name,
                long_name=long_name,
                value_type=hints.get(f.name, f.type),
                short_name=short_name,
                description=metadata.get("help", ""),
                default_text=metadata.get("default_text"),
                required=bool(metadata.get("required", False)),
                env=bool(metadata.get("env", False)),
            )
        )
    return descriptors


def _make_accessors(
    cls: Type[Any], attribute: str
) -> tuple[Callable[[Any], Any], Callable[[Any, Any], None]]:
    def getter(instance: Any) -> Any:
        return getattr(instance, attribute, None)

    params = getattr(cls, "__dataclass_params__", None)
    if params is not None and params.frozen:
        # frozen dataclasses reject setattr; options are bound before the
        # instance is handed out
        def setter(instance: Any, value: Any) -> None:
            object.__setattr__(instance, attribute, value)

    else:

        def setter(instance: Any, value: Any) -> None:
            setattr(instance, attribute, value)

    return getter, setter


@dataclasses.dataclass(eq=False)
class OptionField:
    """One bindable option of a schema."""

    long_name: str
    value_type: Any
    kind: ValueKind
    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None]
    short_name: Optional[str] = None
    description: str = ""
    default_text: Optional[str] = None
    required: bool = False
    env: bool = False
    nested: Optional["OptionSchema"] = None

    def get(self, instance: Any) -> Any:
        if instance is None:
            return None
        return self.getter(instance)

    def set(self, instance: Any, value: Any) -> None:
        self.setter(instance, value)

    @property
    def type_name(self) -> str:
        return _type_name(self.value_type)

    @property
    def option_text(self) -> str:
        """Usage text such as ``-number, -n <int>`` or ``-sub {SubOptions}``."""
        text = OPTION_PREFIX + self.long_name
        if self.short_name is not None:
            text += ", " + OPTION_PREFIX + self.short_name
        if self.kind is ValueKind.NESTED:
            return f"{text} {{{self.type_name}}}"
        return f"{text} <{self.type_name}>"


class OptionSchema:
    """
    Compiled field index of an option type.

    Schemas are immutable once built and shared between parse calls; every
    bind works on a fresh instance from ``new_instance()``.
    """

    def __init__(
        self,
        option_type: Optional[Type[Any]],
        fields: list[OptionField],
        converters: TypeConverterRegistry = CONVERTERS,
    ) -> None:
        self.option_type = option_type
        self.fields = fields
        self.converters = converters
        self.long_names: dict[str, OptionField] = {}
        self.short_names: dict[str, OptionField] = {}
        self._default_instance: Any = None
        for option in fields:
            self._index(option)

    def _index(self, option: OptionField) -> None:
        long_key = option.long_name.casefold()
        if long_key in self.long_names or long_key in self.short_names:
            raise ConstructionError(
                f"Long option name '{option.long_name}' ({self.name}) already exists."
            )
        self.long_names[long_key] = option

        if option.short_name is not None:
            short_key = option.short_name.casefold()
            if short_key in self.long_names or short_key in self.short_names:
                raise ConstructionError(
                    f"Short option name '{option.short_name}' ({self.name}) already exists."
                )
            self.short_names[short_key] = option

    @property
    def name(self) -> str:
        return _type_name(self.option_type) if self.option_type is not None else ""

    def lookup(self, name: str) -> Optional[OptionField]:
        """Resolve an option name, long names first, ignoring case."""
        key = name.casefold()
        option = self.long_names.get(key)
        if option is None:
            option = self.short_names.get(key)
        return option

    def has_name(self, name: str) -> bool:
        return self.lookup(name) is not None

    def new_instance(self) -> Any:
        if self.option_type is None:
            return None
        return self.option_type()

    @property
    def default_instance(self) -> Any:
        """A cached instance holding the type's own declared defaults."""
        if self.option_type is None:
            return None
        if self._default_instance is None:
            self._default_instance = self.option_type()
        return self._default_instance

    def __repr__(self) -> str:
        names = ", ".join(option.long_name for option in self.fields)
        return f"OptionSchema({self.name or None}: {names})"


_SCHEMA_CACHE: dict[Any, OptionSchema] = {}
EMPTY_SCHEMA = OptionSchema(None, [])


def _classify(
    descriptor: FieldDescriptor,
    converters: TypeConverterRegistry,
    stack: list[Any],
) -> tuple[Any, ValueKind, Optional[OptionSchema]]:
    value_type = descriptor.value_type
    inner_type = _get_optional_inner_type(value_type)
    if inner_type is not None:
        value_type = inner_type

    if value_type in converters:
        return value_type, ValueKind.SCALAR, None
    if isinstance(value_type, type) and issubclass(value_type, enum.Enum):
        return value_type, ValueKind.ENUM, None

    if not isinstance(value_type, type) or not dataclasses.is_dataclass(value_type):
        raise ConstructionError(
            f"Type: '{_type_name(value_type)}' is not supported for options "
            f"({descriptor.long_name})."
        )

    nested = _build(value_type, None, converters, stack)
    if not nested.fields:
        raise ConstructionError(
            f"Type: '{_type_name(value_type)}' is not supported for options "
            f"(no option fields in {descriptor.long_name})."
        )
    return value_type, ValueKind.NESTED, nested


def _build(
    option_type: Any,
    descriptors: Optional[list[FieldDescriptor]],
    converters: TypeConverterRegistry,
    stack: list[Any],
) -> OptionSchema:
    if option_type in stack:
        chain = OPTION_PREFIX.join(_type_name(t) for t in [*stack, option_type])
        raise ConstructionError(
            f"Circular dependency of option classes is detected ({chain})."
        )

    use_cache = converters is CONVERTERS and descriptors is None
    if use_cache and option_type in _SCHEMA_CACHE:
        return _SCHEMA_CACHE[option_type]

    stack.append(option_type)
    try:
        try:
            default_instance = option_type()
        except TypeError as e:
            raise ConstructionError(
                f"Default constructor (no arguments) is required for type "
                f"'{_type_name(option_type)}'."
            ) from e

        if descriptors is None:
            descriptors = describe_fields(option_type)

        fields = []
        for descriptor in descriptors:
            value_type, kind, nested = _classify(descriptor, converters, stack)
            getter, setter = _make_accessors(option_type, descriptor.attribute)
            fields.append(
                OptionField(
                    long_name=descriptor.long_name,
                    value_type=value_type,
                    kind=kind,
                    getter=getter,
                    setter=setter,
                    short_name=descriptor.short_name,
                    description=descriptor.description,
                    default_text=descriptor.default_text,
                    required=descriptor.required,
                    env=descriptor.env,
                    nested=nested,
                )
            )

        schema = OptionSchema(option_type, fields, converters)
        schema._default_instance = default_instance
    finally:
        stack.pop()

    if use_cache:
        _SCHEMA_CACHE[option_type] = schema
    return schema


def build_schema(
    option_type: Optional[Type[Any]],
    descriptors: Optional[list[FieldDescriptor]] = None,
    converters: TypeConverterRegistry = CONVERTERS,
) -> OptionSchema:
    """
    Compile the option schema of ``option_type``.

    Schemas built from the process-wide converter registry are cached per
    option type. Building a schema freezes the converter registry.

    Args:
        option_type: A dataclass option type, or None for commands without options.
        descriptors: Explicit field descriptors; defaults to ``describe_fields``.
        converters: Scalar converter registry used to classify field types.

    Raises:
        ConstructionError: On duplicate names, circular nesting, unsupported
            or unresolvable field types, or an option type that cannot be
            constructed without arguments.
    """
    converters.freeze()
    if option_type is None:
        return EMPTY_SCHEMA
    return _build(option_type, descriptors, converters, [])


__all__ = [
    "FieldDescriptor",
    "OptionField",
    "OptionSchema",
    "ValueKind",
    "build_schema",
    "describe_fields",
]
