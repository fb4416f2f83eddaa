"""
Uniform reflection over Structures and plain mappings.

A plain mapping behaves like a Structure whose keys are all standard data
properties (writable, enumerable, configurable) and which has no fallback
layer.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import deepfuse.structure._core as _core
import deepfuse.structure._descriptors as _descriptors


def own_keys(obj: _abc.Mapping[_typing.Any, _typing.Any]) -> list[_typing.Any]:
    """All own keys of a mapping, enumerable or not."""
    if isinstance(obj, _core.Structure):
        return obj.own_keys()
    return list(obj.keys())


def own_property(
    obj: _abc.Mapping[_typing.Any, _typing.Any],
    key: _typing.Any,
) -> _descriptors.Property | None:
    """
    Return the own Property for key, or None if key is not owned.

    Plain mappings are read exactly once, so a failing read surfaces here.
    """
    if isinstance(obj, _core.Structure):
        return obj.get_own_property(key)
    try:
        return _descriptors.DataProperty(obj[key])
    except KeyError:
        return None


def has_key(obj: _abc.Mapping[_typing.Any, _typing.Any], key: _typing.Any) -> bool:
    """Check if key is readable from obj, including fallback layers."""
    return key in obj


def get_proto(
    obj: _abc.Mapping[_typing.Any, _typing.Any],
) -> _abc.Mapping[_typing.Any, _typing.Any] | None:
    """Return the fallback mapping of obj, or None for plain mappings."""
    if isinstance(obj, _core.Structure):
        return obj.proto
    return None
