"""
Property types and the descriptor classifier.

A key on a Structure holds exactly one property:

- DataProperty: a stored value plus writable/enumerable/configurable flags
- AccessorProperty: getter and/or setter callables plus enumerable/configurable

Descriptor records are plain mappings using the keys {configurable,
enumerable, value, writable, get, set}. Hooks may return such records to
define a key with explicit flags or accessors. Because an ordinary nested
mapping can also contain a key named "value", the classifier checks the
record's key set rather than trusting its type.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import typing as _typing

import deepfuse.constants as constants
import deepfuse.errors as errors

Getter: _typing.TypeAlias = _typing.Callable[[_typing.Any], _typing.Any]
Setter: _typing.TypeAlias = _typing.Callable[[_typing.Any, _typing.Any], None]


@_dataclasses.dataclass(frozen=True, slots=True)
class DataProperty:
    """A stored value."""

    value: _typing.Any = None
    writable: bool = True
    enumerable: bool = True
    configurable: bool = True


@_dataclasses.dataclass(frozen=True, slots=True)
class AccessorProperty:
    """A computed value: getter called as get(receiver), setter as set(receiver, value)."""

    get: Getter | None = None
    set: Setter | None = None
    enumerable: bool = True
    configurable: bool = True

    @property
    def is_setter_only(self) -> bool:
        """True when the property can be written but not read."""
        return self.set is not None and self.get is None


Property: _typing.TypeAlias = DataProperty | AccessorProperty


def is_object(value: _typing.Any) -> bool:
    """Check if a value is a keyed structure (any Mapping)."""
    return isinstance(value, _abc.Mapping)


def is_sequence(value: _typing.Any) -> bool:
    """Check if a value is a mergeable sequence (a list)."""
    return isinstance(value, list)


def is_prop_descriptor(value: _typing.Any) -> bool:
    """
    Check if a value is shaped like a property descriptor record.

    A record qualifies when all of its keys come from the descriptor
    vocabulary and it has either a "value" slot with at least one flag, or
    a callable "get"/"set" slot together with a flag or with both accessor
    slots present.

    Example:
        >>> is_prop_descriptor({"value": 1, "writable": False})
        True
        >>> is_prop_descriptor({"value": 1})
        False
        >>> is_prop_descriptor({"value": 1, "enumerable": True, "label": "x"})
        False
    """
    if not is_object(value):
        return False

    keys = set(value.keys())
    if not keys or not keys <= constants.DESCRIPTOR_KEYS:
        return False

    has_flag = any(key in keys for key in constants.DESCRIPTOR_FLAG_KEYS)
    has_method = any(
        key in keys and callable(value[key]) for key in constants.ACCESSOR_KEYS
    )
    has_method_keys = all(key in keys for key in constants.ACCESSOR_KEYS)

    return ("value" in keys and has_flag) or (
        has_method and (has_method_keys or has_flag)
    )


def to_property(record: _abc.Mapping[str, _typing.Any] | Property) -> Property:
    """
    Convert a descriptor record to a Property.

    Flags absent from the record default to True, mimicking ordinary
    assignment rather than strict property definition.

    Raises:
        PropertyDefinitionError: If the record mixes accessors with a value
            or writable flag, or if get/set is not callable.
    """
    if isinstance(record, (DataProperty, AccessorProperty)):
        return record

    enumerable = bool(record.get("enumerable", True))
    configurable = bool(record.get("configurable", True))

    if "get" in record or "set" in record:
        if "value" in record or "writable" in record:
            raise errors.PropertyDefinitionError(
                "Descriptor cannot specify both accessors and a value or writable flag"
            )
        getter = record.get("get")
        setter = record.get("set")
        for name, func in (("get", getter), ("set", setter)):
            if func is not None and not callable(func):
                raise errors.PropertyDefinitionError(
                    f"Descriptor {name!r} must be callable, got {type(func).__name__}"
                )
        return AccessorProperty(
            get=getter,
            set=setter,
            enumerable=enumerable,
            configurable=configurable,
        )

    return DataProperty(
        value=record.get("value"),
        writable=bool(record.get("writable", True)),
        enumerable=enumerable,
        configurable=configurable,
    )


def to_descriptor(prop: Property) -> dict[str, _typing.Any]:
    """Convert a Property to a descriptor record."""
    if isinstance(prop, AccessorProperty):
        return {
            "get": prop.get,
            "set": prop.set,
            "enumerable": prop.enumerable,
            "configurable": prop.configurable,
        }
    return {
        "value": prop.value,
        "writable": prop.writable,
        "enumerable": prop.enumerable,
        "configurable": prop.configurable,
    }
