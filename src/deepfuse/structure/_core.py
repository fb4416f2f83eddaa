"""
Structure: a mutable mapping with property descriptors and fallback layers.

Plain dicts store values. A Structure stores a *property* per key, which is
either a data property (value plus flags) or an accessor property (getter
and/or setter). It may also carry a fallback mapping (``proto``) consulted
for keys it does not own; that mapping can itself be a Structure with its
own fallback, forming an ordered chain of default layers.

Read semantics:
- ``s[key]``: own property first, then the fallback chain. Getters are
  called with ``s`` as the receiver, including inherited getters.
- ``key in s``: own keys or any fallback layer.
- Iteration and ``len()``: own enumerable keys only.

Write semantics:
- ``s[key] = v``: own setter or inherited setter is called; read-only data
  properties and setter-less accessors raise PropertyAccessError; anything
  else stores an own data property.
- ``del s[key]``: own keys only; non-configurable keys raise.

Example:
    >>> defaults = Structure({"greeting": "hi"})
    >>> s = Structure({"name": "Ada"}, proto=defaults)
    >>> s["greeting"], list(s)
    ('hi', ['name'])
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import deepfuse.errors as errors
import deepfuse.structure._descriptors as _descriptors


class Structure(_abc.MutableMapping[_typing.Any, _typing.Any]):
    """
    A mapping whose keys are backed by property descriptors.

    Args:
        data: Initial values, stored as standard (writable, enumerable,
            configurable) data properties.
        proto: Fallback mapping consulted for keys not owned here.
        **kwargs: Additional initial values.
    """

    __slots__ = ("_props", "_proto")

    def __init__(
        self,
        data: _abc.Mapping[_typing.Any, _typing.Any] | None = None,
        /,
        *,
        proto: _abc.Mapping[_typing.Any, _typing.Any] | None = None,
        **kwargs: _typing.Any,
    ) -> None:
        self._props: dict[_typing.Any, _descriptors.Property] = {}
        self._proto = proto
        if data is not None:
            for key, value in data.items():
                self._props[key] = _descriptors.DataProperty(value)
        for key, value in kwargs.items():
            self._props[key] = _descriptors.DataProperty(value)

    @classmethod
    def create(
        cls,
        proto: _abc.Mapping[_typing.Any, _typing.Any] | None,
        descriptors: _abc.Mapping[_typing.Any, _typing.Any] | None = None,
    ) -> Structure:
        """
        Build a Structure from descriptor records.

        Args:
            proto: Fallback mapping (or None).
            descriptors: Mapping of key to descriptor record or Property.

        Returns:
            New Structure.
        """
        result = cls(proto=proto)
        for key, record in (descriptors or {}).items():
            result.define_property(key, record)
        return result

    # =========================================================================
    # Fallback layers
    # =========================================================================

    @property
    def proto(self) -> _abc.Mapping[_typing.Any, _typing.Any] | None:
        """The fallback mapping, or None."""
        return self._proto

    @proto.setter
    def proto(self, value: _abc.Mapping[_typing.Any, _typing.Any] | None) -> None:
        current = value
        while isinstance(current, Structure):
            if current is self:
                raise ValueError("Fallback layers cannot form a cycle")
            current = current._proto
        self._proto = value

    def fallback_layers(self) -> list[_abc.Mapping[_typing.Any, _typing.Any]]:
        """
        Return the fallback chain as an ordered list (nearest first).

        Stops at the first mapping that is not a Structure or that has
        already been visited.
        """
        layers: list[_abc.Mapping[_typing.Any, _typing.Any]] = []
        seen: set[int] = {id(self)}
        current = self._proto
        while current is not None and id(current) not in seen:
            layers.append(current)
            seen.add(id(current))
            current = current.proto if isinstance(current, Structure) else None
        return layers

    # =========================================================================
    # Reflection
    # =========================================================================

    def own_keys(self) -> list[_typing.Any]:
        """All own keys, enumerable or not, in definition order."""
        return list(self._props)

    def has_own(self, key: _typing.Any) -> bool:
        """Check if key is an own property."""
        return key in self._props

    def get_own_property(self, key: _typing.Any) -> _descriptors.Property | None:
        """Return the own Property for key, or None."""
        return self._props.get(key)

    def get_own_property_descriptor(
        self,
        key: _typing.Any,
    ) -> dict[str, _typing.Any] | None:
        """Return the own property for key as a descriptor record, or None."""
        prop = self._props.get(key)
        return _descriptors.to_descriptor(prop) if prop is not None else None

    def get_own_property_descriptors(self) -> dict[_typing.Any, dict[str, _typing.Any]]:
        """Return descriptor records for every own key."""
        return {
            key: _descriptors.to_descriptor(prop) for key, prop in self._props.items()
        }

    def define_property(
        self,
        key: _typing.Any,
        descriptor: _abc.Mapping[str, _typing.Any] | _descriptors.Property,
        *,
        redefine: bool = False,
    ) -> None:
        """
        Define or replace the property for key.

        Args:
            key: Key to define.
            descriptor: Descriptor record or Property. Absent flags default
                to True.
            redefine: Replace the key even if it is non-configurable.

        Raises:
            PropertyDefinitionError: If the record is invalid, or the key
                exists, is non-configurable, and redefine is False.
        """
        prop = _descriptors.to_property(descriptor)
        existing = self._props.get(key)
        if (
            existing is not None
            and not existing.configurable
            and not redefine
            and existing != prop
        ):
            raise errors.PropertyDefinitionError(
                f"Cannot redefine non-configurable property {key!r}"
            )
        self._props[key] = prop

    def enumerable_keys(self, *, inherited: bool = False) -> list[_typing.Any]:
        """
        Return enumerable keys.

        Args:
            inherited: Also include enumerable keys of the fallback chain,
                after own keys, without duplicates.
        """
        keys = [key for key, prop in self._props.items() if prop.enumerable]
        if not inherited:
            return keys

        seen = set(self._props)
        for layer in self.fallback_layers():
            layer_keys = (
                layer.enumerable_keys() if isinstance(layer, Structure) else list(layer)
            )
            for key in layer_keys:
                if key not in seen:
                    seen.add(key)
                    keys.append(key)
        return keys

    def _find_property(
        self,
        key: _typing.Any,
    ) -> tuple[_descriptors.Property | None, _abc.Mapping[_typing.Any, _typing.Any] | None]:
        """
        Locate the property for key along the chain.

        Returns:
            (property, None) when found on a Structure layer (own or
            inherited), (None, mapping) when a plain mapping layer holds the
            key, (None, None) when no layer has it.
        """
        prop = self._props.get(key)
        if prop is not None:
            return prop, None
        for layer in self.fallback_layers():
            if isinstance(layer, Structure):
                prop = layer._props.get(key)
                if prop is not None:
                    return prop, None
            elif key in layer:
                return None, layer
        return None, None

    # =========================================================================
    # MutableMapping protocol
    # =========================================================================

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        prop, plain_layer = self._find_property(key)
        if plain_layer is not None:
            return plain_layer[key]
        if prop is None:
            raise KeyError(key)
        if isinstance(prop, _descriptors.AccessorProperty):
            return prop.get(self) if prop.get is not None else None
        return prop.value

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        prop, _ = self._find_property(key)
        if isinstance(prop, _descriptors.AccessorProperty):
            if prop.set is None:
                raise errors.PropertyAccessError(f"Property {key!r} has no setter")
            prop.set(self, value)
            return
        if isinstance(prop, _descriptors.DataProperty) and not prop.writable:
            raise errors.PropertyAccessError(f"Property {key!r} is read-only")

        own = self._props.get(key)
        if isinstance(own, _descriptors.DataProperty):
            self._props[key] = _descriptors.DataProperty(
                value,
                writable=own.writable,
                enumerable=own.enumerable,
                configurable=own.configurable,
            )
        else:
            self._props[key] = _descriptors.DataProperty(value)

    def __delitem__(self, key: _typing.Any) -> None:
        prop = self._props.get(key)
        if prop is None:
            raise KeyError(key)
        if not prop.configurable:
            raise errors.PropertyAccessError(f"Property {key!r} is not configurable")
        del self._props[key]

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        """Iterate over own enumerable keys."""
        return iter(self.enumerable_keys())

    def __len__(self) -> int:
        """Count own enumerable keys."""
        return sum(1 for prop in self._props.values() if prop.enumerable)

    def __contains__(self, key: object) -> bool:
        """Check own keys and the fallback chain."""
        prop, plain_layer = self._find_property(key)
        return prop is not None or plain_layer is not None

    def __repr__(self) -> str:
        parts = []
        for key, prop in self._props.items():
            if not prop.enumerable:
                continue
            if isinstance(prop, _descriptors.AccessorProperty):
                parts.append(f"{key!r}: <accessor>")
            elif prop.value is self:
                parts.append(f"{key!r}: <circular>")
            else:
                parts.append(f"{key!r}: {prop.value!r}")
        suffix = ", proto=..." if self._proto is not None else ""
        return f"Structure({{{', '.join(parts)}}}{suffix})"

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_dict(self) -> dict[_typing.Any, _typing.Any]:
        """
        Return a plain nested dict of own enumerable keys.

        Getters are invoked. Nested mappings become dicts and lists are
        copied.

        Raises:
            ValueError: If the structure contains a circular reference.
        """
        return _to_plain(self, set())


def _to_plain(value: _typing.Any, active: set[int]) -> _typing.Any:
    """Recursively convert mappings to dicts and copy lists."""
    if isinstance(value, (_abc.Mapping, list)):
        if id(value) in active:
            raise ValueError("Cannot convert a circular structure to plain data")
        active.add(id(value))
        try:
            if isinstance(value, list):
                return [_to_plain(item, active) for item in value]
            return {key: _to_plain(value[key], active) for key in value}
        finally:
            active.discard(id(value))
    return value
