"""Tests for property types, the descriptor classifier and reflection helpers."""

import pytest as _pytest

import deepfuse.errors as errors
import deepfuse.structure as structure


def _getter(obj: object) -> int:
    return 1


def _setter(obj: object, value: object) -> None:
    pass


class TestClassifiers:
    """Tests for is_object and is_sequence."""

    @_pytest.mark.parametrize(
        "value", [{}, {"a": 1}, structure.Structure(), structure.Structure({"a": 1})]
    )
    def test_mappings_are_objects(self, value: object) -> None:
        """Any Mapping is a keyed structure."""
        assert structure.is_object(value)

    @_pytest.mark.parametrize("value", [None, 1, "a", [1], (1,), {1, 2}])
    def test_other_values_are_not_objects(self, value: object) -> None:
        """Scalars, sequences and sets are not keyed structures."""
        assert not structure.is_object(value)

    def test_only_lists_are_sequences(self) -> None:
        """Tuples and strings are treated as scalars."""
        assert structure.is_sequence([])
        assert not structure.is_sequence((1, 2))
        assert not structure.is_sequence("ab")


class TestIsPropDescriptor:
    """Tests for the descriptor-shape check."""

    @_pytest.mark.parametrize(
        "record",
        [
            {"value": 1, "writable": False},
            {"value": None, "enumerable": True, "configurable": True},
            {"get": _getter, "enumerable": False},
            {"set": _setter, "configurable": True},
            {"get": _getter, "set": _setter},
            {"get": _getter, "set": None},
        ],
    )
    def test_descriptor_records(self, record: dict) -> None:
        """Records with a value or accessor plus flags are descriptors."""
        assert structure.is_prop_descriptor(record)

    @_pytest.mark.parametrize(
        "record",
        [
            {},
            {"value": 1},
            {"get": _getter},
            {"enumerable": True},
            {"get": "not callable", "enumerable": True},
            {"value": 1, "writable": True, "label": "extra"},
            [("value", 1)],
            None,
        ],
    )
    def test_non_descriptor_values(self, record: object) -> None:
        """Ordinary mappings that merely contain 'value' are not descriptors."""
        assert not structure.is_prop_descriptor(record)


class TestToProperty:
    """Tests for descriptor record conversion."""

    def test_absent_flags_default_true(self) -> None:
        """Missing flags behave like ordinary assignment."""
        assert structure.to_property({"value": 5}) == structure.DataProperty(5)

    def test_explicit_flags_honored(self) -> None:
        """Flags present in the record are kept."""
        prop = structure.to_property({"value": 5, "writable": False, "enumerable": False})
        assert prop == structure.DataProperty(5, writable=False, enumerable=False)

    def test_accessor_record(self) -> None:
        """get/set records become AccessorProperty."""
        prop = structure.to_property({"get": _getter, "configurable": False})
        assert isinstance(prop, structure.AccessorProperty)
        assert prop.get is _getter
        assert prop.set is None
        assert not prop.configurable
        assert not prop.is_setter_only

    def test_setter_only(self) -> None:
        """A setter without a getter is setter-only."""
        assert structure.to_property({"set": _setter}).is_setter_only

    def test_properties_pass_through(self) -> None:
        """Property instances are returned unchanged."""
        prop = structure.DataProperty(1)
        assert structure.to_property(prop) is prop

    def test_mixed_record_rejected(self) -> None:
        """Accessors cannot be combined with a value."""
        with _pytest.raises(errors.PropertyDefinitionError, match="both"):
            structure.to_property({"get": _getter, "value": 1})

    def test_non_callable_accessor_rejected(self) -> None:
        """get/set slots must hold callables."""
        with _pytest.raises(errors.PropertyDefinitionError, match="callable"):
            structure.to_property({"set": 3})

    def test_to_descriptor_round_trip(self) -> None:
        """to_descriptor produces a record to_property accepts."""
        prop = structure.AccessorProperty(get=_getter, enumerable=False)
        assert structure.to_property(structure.to_descriptor(prop)) == prop


class TestReflection:
    """Tests for the reflection helpers over plain mappings and Structures."""

    def test_own_keys(self) -> None:
        """Plain mappings and Structures both report own keys."""
        s = structure.Structure({"a": 1}, proto={"b": 2})
        assert structure.own_keys({"x": 1, "y": 2}) == ["x", "y"]
        assert structure.own_keys(s) == ["a"]

    def test_own_property_of_plain_mapping(self) -> None:
        """Plain mapping values are standard data properties."""
        assert structure.own_property({"a": 1}, "a") == structure.DataProperty(1)
        assert structure.own_property({"a": 1}, "b") is None

    def test_own_property_ignores_inherited(self) -> None:
        """Inherited keys are not own properties."""
        s = structure.Structure(proto={"b": 2})
        assert structure.own_property(s, "b") is None
        assert structure.has_key(s, "b")

    def test_get_proto(self) -> None:
        """Only Structures carry fallback layers."""
        base = {"b": 2}
        assert structure.get_proto(structure.Structure(proto=base)) is base
        assert structure.get_proto({"a": 1}) is None

    def test_error_types_are_type_errors(self) -> None:
        """Package errors can be caught as TypeError."""
        assert issubclass(errors.PropertyDefinitionError, TypeError)
        assert issubclass(errors.PropertyAccessError, errors.DeepfuseError)
