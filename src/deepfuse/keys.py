"""
Key-set algebra across N structures.

Given the key lists of several structures, these helpers count how many
lists contain each key and derive the key list a merge pass should visit:

- common: keys in two or more lists
- universal: keys in every list
- skip-common: keys in exactly one list
- skip-universal: keys missing from at least one list

Results keep first-occurrence order across the input lists.
"""

from __future__ import annotations

import collections.abc as _abc
import enum as _enum
import typing as _typing

import deepfuse.structure as structure


class KeySetMode(_enum.Enum):
    """
    Key-set derivation mode for a merge pass.

    When several modes are enabled at once, the first in definition order
    wins: ONLY_COMMON > ONLY_UNIVERSAL > SKIP_COMMON > SKIP_UNIVERSAL.
    """

    ONLY_COMMON = "only_common_keys"
    """Keys found in two or more structures."""

    ONLY_UNIVERSAL = "only_universal_keys"
    """Keys found in every structure."""

    SKIP_COMMON = "skip_common_keys"
    """Keys found in exactly one structure."""

    SKIP_UNIVERSAL = "skip_universal_keys"
    """Keys missing from at least one structure."""


def count_occurrences(
    *key_lists: _abc.Iterable[_typing.Hashable],
) -> dict[_typing.Hashable, int]:
    """
    Count occurrences of each value across lists.

    Example:
        >>> count_occurrences([1, 2], [2, 3])
        {1: 1, 2: 2, 3: 1}
    """
    counts: dict[_typing.Hashable, int] = {}
    for key_list in key_lists:
        for key in key_list:
            counts[key] = counts.get(key, 0) + 1
    return counts


def get_in_all(*key_lists: _abc.Sequence[_typing.Hashable]) -> list[_typing.Hashable]:
    """
    Return values found in every list, in the order of the first list.

    Example:
        >>> get_in_all([1, 2, 3], [2, 3, 4], [3, 4, 5])
        [3]
    """
    if not key_lists:
        return []
    result = list(key_lists[0])
    for key_list in key_lists[1:]:
        members = set(key_list)
        result = [key for key in result if key in members]
    return result


def get_in_multiple(*key_lists: _abc.Sequence[_typing.Hashable]) -> list[_typing.Hashable]:
    """
    Return values found in more than one list.

    Example:
        >>> get_in_multiple([1, 2, 3], [2, 3, 4], [3, 4, 5])
        [2, 3, 4]
    """
    counts = count_occurrences(*key_lists)
    return [key for key, count in counts.items() if count > 1]


def get_not_in_all(*key_lists: _abc.Sequence[_typing.Hashable]) -> list[_typing.Hashable]:
    """
    Return values missing from at least one list.

    Example:
        >>> get_not_in_all([1, 2, 3], [2, 3, 4], [3, 4, 5])
        [1, 2, 4, 5]
    """
    counts = count_occurrences(*key_lists)
    return [key for key, count in counts.items() if count < len(key_lists)]


def get_not_in_multiple(
    *key_lists: _abc.Sequence[_typing.Hashable],
) -> list[_typing.Hashable]:
    """
    Return values found in exactly one list.

    Example:
        >>> get_not_in_multiple([1, 2, 3], [2, 3, 4], [3, 4, 5])
        [1, 5]
    """
    counts = count_occurrences(*key_lists)
    return [key for key, count in counts.items() if count == 1]


def get_intersection(*values: _abc.Sequence[_typing.Hashable]) -> list[_typing.Hashable]:
    """Values found in all sequences."""
    return get_in_all(*values)


def get_difference(*values: _abc.Sequence[_typing.Hashable]) -> list[_typing.Hashable]:
    """Values found in one sequence but not the others."""
    return get_not_in_multiple(*values)


def get_object_keys(
    obj: _abc.Mapping[_typing.Any, _typing.Any],
    hoist_enumerable: bool = False,
) -> list[_typing.Any]:
    """
    Return a mapping's own keys and, optionally, inherited enumerable keys.

    Args:
        obj: Structure or plain mapping.
        hoist_enumerable: Append enumerable keys of the fallback chain that
            are not already own keys.
    """
    keys = structure.own_keys(obj)
    if hoist_enumerable and isinstance(obj, structure.Structure):
        seen = set(keys)
        for key in obj.enumerable_keys(inherited=True):
            if key not in seen:
                seen.add(key)
                keys.append(key)
    return keys


_DERIVATIONS: dict[
    KeySetMode,
    _typing.Callable[..., list[_typing.Hashable]],
] = {
    KeySetMode.ONLY_COMMON: get_in_multiple,
    KeySetMode.ONLY_UNIVERSAL: get_in_all,
    KeySetMode.SKIP_COMMON: get_not_in_multiple,
    KeySetMode.SKIP_UNIVERSAL: get_not_in_all,
}


def derive_keys(
    mode: KeySetMode,
    key_lists: _abc.Sequence[_abc.Sequence[_typing.Hashable]],
) -> list[_typing.Hashable]:
    """
    Derive the key list for a merge pass.

    Args:
        mode: Which key-set to compute.
        key_lists: One key list per structure (two or more).

    Returns:
        Keys to visit, in first-occurrence order.
    """
    return _DERIVATIONS[mode](*key_lists)
