#!/usr/bin/env python3
"""
Tests for option schema construction from dataclass option types.
"""

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytest

from dataclass_cmdline import (
    ConstructionError,
    FieldDescriptor,
    TypeConverterRegistry,
    ValueKind,
    build_schema,
    describe_fields,
)


class Mode(enum.Enum):
    FAST = "fast"
    SLOW = "slow"


@dataclass
class InnerOptions:
    x: int = field(default=1, metadata={"help": "Inner value"})


@dataclass
class SampleOptions:
    number: int = field(default=10, metadata={"short": "n", "help": "A number"})
    text: str = field(default="", metadata={"name": "message", "required": True})
    mode: Mode = Mode.FAST
    inner: Optional[InnerOptions] = None
    hidden: int = field(default=0, metadata={"option": False})


@dataclass
class DuplicateLong:
    a: int = field(default=0, metadata={"name": "value"})
    b: int = field(default=0, metadata={"name": "VALUE"})


@dataclass
class ShortShadowsLong:
    alpha: int = 0
    beta: int = field(default=0, metadata={"short": "alpha"})


@dataclass
class CycleA:
    b: Optional["CycleB"] = None


@dataclass
class CycleB:
    a: Optional[CycleA] = None


@dataclass
class SelfReference:
    child: Optional["SelfReference"] = None


@dataclass
class Empty:
    pass


@dataclass
class HasEmpty:
    empty: Optional[Empty] = None


@dataclass
class HasList:
    items: list = field(default_factory=list)


@dataclass
class NoDefaults:
    value: int


@dataclass
class Base:
    value: int = field(default=1, metadata={"help": "Base value"})
    shared: str = "base"


@dataclass
class Derived(Base):
    value: int = field(default=2, metadata={"help": "Derived value"})
    extra: bool = False


@dataclass
class UnresolvedOptions:
    count: int = 0
    target: "MissingType" = None  # noqa: F821


@dataclass(frozen=True)
class FrozenOptions:
    number: int = 0


class TestDescribeFields:
    """Test suite for describe_fields()."""

    def test_metadata_keys(self):
        descriptors = {d.attribute: d for d in describe_fields(SampleOptions)}
        assert "hidden" not in descriptors
        assert descriptors["number"].short_name == "n"
        assert descriptors["number"].description == "A number"
        assert descriptors["text"].long_name == "message"
        assert descriptors["text"].required is True
        assert descriptors["mode"].long_name == "mode"

    def test_subclass_field_replaces_base_field(self):
        descriptors = describe_fields(Derived)
        assert [d.attribute for d in descriptors] == ["value", "shared", "extra"]
        assert descriptors[0].description == "Derived value"

    def test_not_a_dataclass(self):
        with pytest.raises(ConstructionError, match="is not a dataclass"):
            describe_fields(int)

    def test_unresolvable_annotation(self):
        with pytest.raises(
            ConstructionError, match="'UnresolvedOptions'.*MissingType"
        ):
            describe_fields(UnresolvedOptions)

    def test_unresolvable_annotation_fails_schema_build(self):
        with pytest.raises(ConstructionError, match="could not be resolved"):
            build_schema(UnresolvedOptions)


class TestBuildSchema:
    """Test suite for build_schema()."""

    def test_fields_and_kinds(self):
        schema = build_schema(SampleOptions)
        kinds = {option.long_name: option.kind for option in schema.fields}
        assert kinds == {
            "number": ValueKind.SCALAR,
            "message": ValueKind.SCALAR,
            "mode": ValueKind.ENUM,
            "inner": ValueKind.NESTED,
        }
        inner = schema.lookup("inner")
        assert inner.value_type is InnerOptions
        assert inner.nested.option_type is InnerOptions

    def test_lookup_ignores_case_and_prefers_long_names(self):
        schema = build_schema(SampleOptions)
        assert schema.lookup("NUMBER") is schema.lookup("n")
        assert schema.lookup("N").long_name == "number"
        assert schema.lookup("missing") is None
        assert schema.has_name("message")
        assert not schema.has_name("text")

    def test_schema_is_cached(self):
        assert build_schema(SampleOptions) is build_schema(SampleOptions)

    def test_none_gives_empty_schema(self):
        schema = build_schema(None)
        assert schema.fields == []
        assert schema.new_instance() is None
        assert schema.name == ""

    def test_default_instance(self):
        schema = build_schema(SampleOptions)
        assert schema.default_instance.number == 10
        assert schema.new_instance() is not schema.default_instance

    def test_option_text(self):
        schema = build_schema(SampleOptions)
        assert schema.lookup("number").option_text == "-number, -n <int>"
        assert schema.lookup("inner").option_text == "-inner {InnerOptions}"

    def test_duplicate_long_name(self):
        with pytest.raises(ConstructionError, match="already exists"):
            build_schema(DuplicateLong)

    def test_short_name_shares_namespace_with_long_names(self):
        with pytest.raises(ConstructionError, match="Short option name 'alpha'"):
            build_schema(ShortShadowsLong)

    def test_circular_dependency(self):
        with pytest.raises(ConstructionError, match="CycleA-CycleB-CycleA"):
            build_schema(CycleA)

    def test_self_reference(self):
        with pytest.raises(ConstructionError, match="Circular dependency"):
            build_schema(SelfReference)

    def test_nested_type_without_options(self):
        with pytest.raises(ConstructionError, match="not supported"):
            build_schema(HasEmpty)

    def test_unsupported_type(self):
        with pytest.raises(ConstructionError, match="'list' is not supported"):
            build_schema(HasList)

    def test_default_constructor_required(self):
        with pytest.raises(ConstructionError, match="Default constructor"):
            build_schema(NoDefaults)

    def test_inherited_fields(self):
        schema = build_schema(Derived)
        assert [o.long_name for o in schema.fields] == ["value", "shared", "extra"]
        assert schema.default_instance.value == 2

    def test_frozen_dataclass_fields_can_be_set(self):
        schema = build_schema(FrozenOptions)
        instance = schema.new_instance()
        schema.lookup("number").set(instance, 5)
        assert instance.number == 5

    def test_explicit_descriptors_and_converters(self):
        @dataclass
        class PathOptions:
            target: Path = Path(".")

        converters = TypeConverterRegistry()
        converters.register(Path, Path)
        descriptors = [
            FieldDescriptor(attribute="target", long_name="to", value_type=Path)
        ]
        schema = build_schema(PathOptions, descriptors, converters)
        assert schema.lookup("to").kind is ValueKind.SCALAR
        assert converters.frozen


if __name__ == "__main__":
    pytest.main([__file__])
