"""Tests for hook points, context records and results."""

import dataclasses as _dataclasses

import pytest as _pytest

import deepfuse.hooks as hooks


class TestHookPoint:
    """Tests for HookPoint."""

    def test_only_filter_can_skip(self) -> None:
        """Skipping a key is reserved to the filter hook."""
        assert [p for p in hooks.HookPoint if p.can_skip] == [hooks.HookPoint.FILTER]

    def test_context_types(self) -> None:
        """after_each receives AfterEachContext, others HookContext."""
        assert hooks.HookPoint.AFTER_EACH.context_type is hooks.AfterEachContext
        for point in (
            hooks.HookPoint.FILTER,
            hooks.HookPoint.BEFORE_EACH,
            hooks.HookPoint.ON_CIRCULAR,
        ):
            assert point.context_type is hooks.HookContext


class TestContexts:
    """Tests for argument records."""

    def test_hook_context_is_frozen(self) -> None:
        """Hooks cannot mutate their argument record."""
        ctx = hooks.HookContext(depth=0, key="a", src_obj={}, src_val=1, target_obj={})
        assert ctx.target_val is None
        with _pytest.raises(_dataclasses.FrozenInstanceError):
            ctx.key = "b"  # type: ignore[misc]

    def test_after_each_context_fields(self) -> None:
        """AfterEachContext carries the merged value."""
        ctx = hooks.AfterEachContext(
            depth=1, key="a", merge_val=[1], src_obj={}, target_obj={}
        )
        assert ctx.merge_val == [1]
        assert ctx.depth == 1


class TestHookResult:
    """Tests for interpreting hook return values."""

    def test_none_defers(self) -> None:
        """Returning None means no opinion."""
        result = hooks.HookResult.from_return(None)
        assert not result.overridden
        assert not result.skips

    @_pytest.mark.parametrize("value", [False, 0, "", [], "x", 5])
    def test_other_values_override(self, value: object) -> None:
        """Any non-None return is an override, falsy values included."""
        result = hooks.HookResult.from_return(value)
        assert result.overridden
        assert result.value == value

    def test_override_wrapper_allows_none(self) -> None:
        """Override(None) overrides with None."""
        result = hooks.HookResult.from_return(hooks.Override(None))
        assert result.overridden
        assert result.value is None

    def test_override_is_unwrapped(self) -> None:
        """Override(x) yields x."""
        assert hooks.HookResult.from_return(hooks.Override([1])).value == [1]

    @_pytest.mark.parametrize(
        ("returned", "skips"),
        [(None, False), (False, True), (0, True), (hooks.Override(None), True), (True, False), ("keep", False)],
    )
    def test_skips(self, returned: object, skips: bool) -> None:
        """Only falsy overrides skip a key."""
        assert hooks.HookResult.from_return(returned).skips is skips
