"""
List combination, de-duplication and sorting.

Two finishing strategies exist, chosen once per merge call:

- ImmediateArrayFinisher: de-duplicates and sorts each combined list at
  once. Used when an after_each hook exists, since the hook must observe
  the final contents.
- DeferredArrayFinisher: records (target, key) pairs and processes them in
  one pass at the end of each structure pass. Used otherwise; a key
  overwritten several times is processed once.
"""

from __future__ import annotations

import abc as _abc
import collections.abc as _collections_abc
import functools as _functools
import numbers as _numbers
import typing as _typing

import deepfuse.config.types as types
import deepfuse.structure as structure


def combine(
    incoming: list[_typing.Any],
    existing: _typing.Any,
    mode: types.ArrayMode,
) -> list[_typing.Any]:
    """
    Combine an incoming list with the value already at the target key.

    The result is always a new list; neither input is modified.

    Example:
        >>> combine([3], [1, 2], types.ArrayMode.APPEND)
        [1, 2, 3]
        >>> combine([3], [1, 2], types.ArrayMode.PREPEND)
        [3, 1, 2]
    """
    merged = list(incoming)
    if isinstance(existing, list):
        if mode is types.ArrayMode.APPEND:
            merged = [*existing, *merged]
        elif mode is types.ArrayMode.PREPEND:
            merged = [*merged, *existing]
    return merged


def dedup(values: _collections_abc.Iterable[_typing.Any]) -> list[_typing.Any]:
    """
    Remove repeated items, keeping first occurrences in order.

    Hashable items are compared through a set, unhashable items (dicts,
    lists) by equality. Booleans never match the numbers 1 and 0.

    Example:
        >>> dedup([1, 2, 1, True, {"a": 1}, {"a": 1}])
        [1, 2, True, {'a': 1}]
    """
    result: list[_typing.Any] = []
    seen: set[tuple[bool, _typing.Any]] = set()
    seen_unhashable: list[_typing.Any] = []
    for value in values:
        marker = (isinstance(value, bool), value)
        try:
            if marker in seen:
                continue
            seen.add(marker)
        except TypeError:
            if value in seen_unhashable:
                continue
            seen_unhashable.append(value)
        result.append(value)
    return result


def _default_sort_key(value: _typing.Any) -> tuple[int, _typing.Any]:
    """Group by type: numbers, strings, other values by str(), None last."""
    if value is None:
        return (3, 0)
    if isinstance(value, _numbers.Real):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, str(value))


def sort_values(
    values: list[_typing.Any],
    comparator: types.Comparator | None = None,
) -> list[_typing.Any]:
    """
    Return values sorted by a comparator or by the default ordering.

    The default ordering is natural within numbers and within strings;
    numbers come before strings, other values follow by their str(), and
    None sorts last. The sort is stable.

    Args:
        values: Items to sort.
        comparator: cmp(a, b) returning a negative, zero or positive int.
    """
    if comparator is not None:
        return sorted(values, key=_functools.cmp_to_key(comparator))
    return sorted(values, key=_default_sort_key)


class ArrayFinisher(_abc.ABC):
    """Strategy applying de-duplication and sorting to combined lists."""

    def __init__(self, settings: types.MergeSettings) -> None:
        self._dedup = settings.dedup_arrays
        self._sort = bool(settings.sort_arrays)
        self._comparator = settings.sort_comparator

    @property
    def active(self) -> bool:
        """Whether any post-processing is configured."""
        return self._dedup or self._sort

    def _process(self, values: list[_typing.Any]) -> list[_typing.Any]:
        """De-duplicate, then sort."""
        if self._dedup:
            values = dedup(values)
        if self._sort:
            values = sort_values(values, self._comparator)
        return values

    @_abc.abstractmethod
    def finish(
        self,
        target: structure.Structure,
        key: _typing.Any,
        values: list[_typing.Any],
    ) -> list[_typing.Any]:
        """Return the list to store at target[key] now."""

    @_abc.abstractmethod
    def flush(self, target: structure.Structure) -> None:
        """Apply deferred work queued for target."""


class ImmediateArrayFinisher(ArrayFinisher):
    """Processes each combined list as soon as it is built."""

    def finish(
        self,
        target: structure.Structure,
        key: _typing.Any,
        values: list[_typing.Any],
    ) -> list[_typing.Any]:
        return self._process(values) if self.active else values

    def flush(self, target: structure.Structure) -> None:
        pass


class DeferredArrayFinisher(ArrayFinisher):
    """Queues (target, key) pairs and processes them on flush."""

    def __init__(self, settings: types.MergeSettings) -> None:
        super().__init__(settings)
        # id(target) -> (target, keys in first-queued order)
        self._pending: dict[int, tuple[structure.Structure, list[_typing.Any]]] = {}

    def finish(
        self,
        target: structure.Structure,
        key: _typing.Any,
        values: list[_typing.Any],
    ) -> list[_typing.Any]:
        if self.active:
            entry = self._pending.setdefault(id(target), (target, []))
            if key not in entry[1]:
                entry[1].append(key)
        return values

    def flush(self, target: structure.Structure) -> None:
        """Process queued keys of target whose final value is still a list."""
        entry = self._pending.pop(id(target), None)
        if entry is None:
            return
        for key in entry[1]:
            self._flush_key(target, key)

    def _flush_key(self, target: structure.Structure, key: _typing.Any) -> None:
        prop = target.get_own_property(key)
        if isinstance(prop, structure.DataProperty):
            if isinstance(prop.value, list):
                target.define_property(
                    key,
                    structure.DataProperty(
                        self._process(prop.value),
                        writable=prop.writable,
                        enumerable=prop.enumerable,
                        configurable=prop.configurable,
                    ),
                    redefine=True,
                )
        elif isinstance(prop, structure.AccessorProperty) and prop.get is not None:
            # Lists produced by a preserved getter become stored values
            value = target[key]
            if isinstance(value, list):
                target.define_property(
                    key,
                    structure.DataProperty(
                        self._process(value),
                        enumerable=prop.enumerable,
                        configurable=prop.configurable,
                    ),
                    redefine=True,
                )


def select_finisher(
    settings: types.MergeSettings,
    *,
    observed: bool,
) -> ArrayFinisher:
    """
    Choose the finishing strategy for one merge call.

    Args:
        settings: Merge settings.
        observed: Whether an after_each hook observes merged values.
    """
    if observed:
        return ImmediateArrayFinisher(settings)
    return DeferredArrayFinisher(settings)
