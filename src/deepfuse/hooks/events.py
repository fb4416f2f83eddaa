"""
Hook points, context records, and results.

These define the data structures of the merge hook pipeline:
- HookPoint: Enum of the four places the engine calls user hooks
- HookContext: Argument record for filter, before_each and on_circular
- AfterEachContext: Argument record for after_each
- Override: Explicit wrapper for an override value (needed for None)
- HookResult: Normalized outcome of one hook call
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import typing as _typing


class HookPoint(_enum.Enum):
    """
    Points in the per-key merge loop where hooks are called.

    Each hook is called at most once per key per structure pass.
    """

    FILTER = "filter"
    """Before anything else. A falsy override skips the key."""

    BEFORE_EACH = "before_each"
    """Before combination. An override replaces the value to merge."""

    AFTER_EACH = "after_each"
    """After combination. An override replaces the merged value."""

    ON_CIRCULAR = "on_circular"
    """When a value refers to a structure already merged in this call."""

    @property
    def can_skip(self) -> bool:
        """Whether an override from this hook can skip the key."""
        return self is HookPoint.FILTER

    @property
    def context_type(self) -> type[HookContext] | type[AfterEachContext]:
        """The argument record type passed to hooks at this point."""
        if self is HookPoint.AFTER_EACH:
            return AfterEachContext
        return HookContext


@_dataclasses.dataclass(frozen=True)
class HookContext:
    """
    Argument record for filter, before_each and on_circular hooks.

    Attributes:
        depth: Nesting depth of the structure being built (0 = top level)
        key: Key being merged
        src_obj: Source structure the key is read from
        src_val: Value read from the source
        target_obj: Structure being built
        target_val: Current value at key on the target (None if absent)
    """

    depth: int
    key: _typing.Any
    src_obj: _typing.Any
    src_val: _typing.Any
    target_obj: _typing.Any
    target_val: _typing.Any = None


@_dataclasses.dataclass(frozen=True)
class AfterEachContext:
    """
    Argument record for after_each hooks.

    Attributes:
        depth: Nesting depth of the structure being built (0 = top level)
        key: Key being merged
        merge_val: Fully combined value about to be committed
        src_obj: Source structure the key was read from
        target_obj: Structure being built
    """

    depth: int
    key: _typing.Any
    merge_val: _typing.Any
    src_obj: _typing.Any
    target_obj: _typing.Any


@_dataclasses.dataclass(frozen=True, slots=True)
class Override:
    """
    Explicit override returned from a hook.

    Returning None from a hook means "no opinion". Wrap a value in Override
    to use it verbatim, including None itself.

    Example:
        >>> def blank_secrets(ctx):
        ...     if ctx.key == "password":
        ...         return Override(None)
    """

    value: _typing.Any


@_dataclasses.dataclass(frozen=True)
class HookResult:
    """
    Normalized outcome of one hook call.

    Attributes:
        overridden: Whether the hook supplied a value
        value: The supplied value (unwrapped from Override)
    """

    overridden: bool = False
    value: _typing.Any = None

    @classmethod
    def defer(cls) -> HookResult:
        """Create a result meaning "proceed with default behavior"."""
        return cls()

    @classmethod
    def from_return(cls, returned: _typing.Any) -> HookResult:
        """
        Interpret a hook's return value.

        None defers; Override(x) overrides with x; anything else overrides
        with itself.
        """
        if returned is None:
            return cls.defer()
        if isinstance(returned, Override):
            return cls(overridden=True, value=returned.value)
        return cls(overridden=True, value=returned)

    @property
    def skips(self) -> bool:
        """Whether this result, coming from filter, skips the key."""
        return self.overridden and not self.value
