"""
Public entry point: merge() and Merger.

Call shapes:
- ``merge(options)`` or ``merge(**options)``: return a Merger bound to the
  options. A Merger accepts the same shapes, so options can be layered.
- ``merge(a, b, ...)``: merge immediately (keyword options allowed).

Example:
    >>> merge({"a": [1, 2]}, {"a": [3]}).to_dict()
    {'a': [3]}
    >>> append = merge({"appendArrays": True})
    >>> append({"a": [1, 2]}, {"a": [3]}).to_dict()
    {'a': [1, 2, 3]}
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import deepfuse.config.types as types
import deepfuse.engine._engine as _engine
import deepfuse.structure as structure

Options: _typing.TypeAlias = _abc.Mapping[str, _typing.Any] | types.MergeSettings


class Merger:
    """
    A merge function bound to resolved settings.

    Calling it with one positional argument (or only keyword options)
    returns a new Merger with those options layered on top. Calling it with
    two or more structures merges them.
    """

    __slots__ = ("_settings",)

    def __init__(self, settings: types.MergeSettings | None = None) -> None:
        self._settings = settings if settings is not None else types.MergeSettings()

    @property
    def settings(self) -> types.MergeSettings:
        """The settings this Merger applies."""
        return self._settings

    def with_options(
        self,
        options: Options | None = None,
        **kwargs: _typing.Any,
    ) -> Merger:
        """
        Return a Merger with options layered over this one's settings.

        Raises:
            pydantic.ValidationError: If an option value is malformed.
        """
        return Merger(self._settings.layer(options, **kwargs))

    def merge(self, *objects: _typing.Any) -> structure.Structure:
        """
        Merge structures with this Merger's settings.

        Args:
            *objects: Mappings in priority order (last wins). A single
                mapping is cloned.

        Returns:
            New Structure; no argument is modified.

        Raises:
            TypeError: If no structures are given.
            InvalidMergeArgumentError: If an argument is not a mapping.
        """
        if not objects:
            raise TypeError("merge() requires at least one structure")
        return _engine.MergeEngine(self._settings).run(objects)

    @_typing.overload
    def __call__(self, options: Options, /, **kwargs: _typing.Any) -> Merger: ...

    @_typing.overload
    def __call__(self, /, **kwargs: _typing.Any) -> Merger: ...

    @_typing.overload
    def __call__(
        self,
        first: _typing.Any,
        second: _typing.Any,
        /,
        *objects: _typing.Any,
        **kwargs: _typing.Any,
    ) -> structure.Structure: ...

    def __call__(
        self,
        *args: _typing.Any,
        **kwargs: _typing.Any,
    ) -> Merger | structure.Structure:
        if len(args) == 1:
            return self.with_options(args[0], **kwargs)
        if not args:
            if not kwargs:
                raise TypeError("merge() requires options or at least two structures")
            return self.with_options(**kwargs)
        merger = self.with_options(**kwargs) if kwargs else self
        return merger.merge(*args)

    def __repr__(self) -> str:
        changed = ", ".join(sorted(self._settings.model_fields_set))
        return f"Merger({changed})"


_DEFAULT_MERGER = Merger()


@_typing.overload
def merge(options: Options, /, **kwargs: _typing.Any) -> Merger: ...


@_typing.overload
def merge(**kwargs: _typing.Any) -> Merger: ...


@_typing.overload
def merge(
    first: _typing.Any,
    second: _typing.Any,
    /,
    *objects: _typing.Any,
    **kwargs: _typing.Any,
) -> structure.Structure: ...


def merge(*args: _typing.Any, **kwargs: _typing.Any) -> Merger | structure.Structure:
    """
    Deep merge structures, or build a Merger with options.

    Returns a new structure without modifying any input. Lists are replaced
    by default; nested mappings are merged recursively; circular references
    are preserved; accessor properties and fallback layers of Structure
    inputs are carried over.

    Args:
        *args: One options record (returns a Merger), or two or more
            structures to merge.
        **kwargs: Options (snake_case or camelCase names).

    Returns:
        Merger when called with options only, otherwise the merged Structure.

    Raises:
        TypeError: If called with no arguments at all.
        InvalidMergeArgumentError: If a structure argument is not a mapping.
        pydantic.ValidationError: If an option value is malformed.

    Example:
        >>> merge({"a": 1, "b": {"c": 1}}, {"b": {"d": 2}}).to_dict()
        {'a': 1, 'b': {'c': 1, 'd': 2}}
    """
    return _DEFAULT_MERGER(*args, **kwargs)
