"""
Hook pipeline - dispatches merge hooks.

The pipeline holds the optional user hooks of one merge call and calls
them with the argument record for their hook point. Hook exceptions
propagate to the merge caller unchanged.
"""

from __future__ import annotations

import typing as _typing

import deepfuse.hooks.events as events

if _typing.TYPE_CHECKING:
    import deepfuse.config.types as types

Hook: _typing.TypeAlias = _typing.Callable[[_typing.Any], _typing.Any]


class HookPipeline:
    """
    The configured hooks of one merge call.

    Hooks are plain callables taking a single context record. A point with
    no hook configured always defers.
    """

    def __init__(
        self,
        *,
        filter: Hook | None = None,
        before_each: Hook | None = None,
        after_each: Hook | None = None,
        on_circular: Hook | None = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            filter: Called per key; a falsy override skips the key.
            before_each: Called per key before combination.
            after_each: Called per key after combination.
            on_circular: Called per detected circular reference.
        """
        self._hooks: dict[events.HookPoint, Hook] = {}
        for point, hook in (
            (events.HookPoint.FILTER, filter),
            (events.HookPoint.BEFORE_EACH, before_each),
            (events.HookPoint.AFTER_EACH, after_each),
            (events.HookPoint.ON_CIRCULAR, on_circular),
        ):
            if hook is not None:
                self._hooks[point] = hook

    @classmethod
    def from_settings(cls, settings: types.MergeSettings) -> HookPipeline:
        """Create a pipeline from the hooks in merge settings."""
        return cls(
            filter=settings.filter,
            before_each=settings.before_each,
            after_each=settings.after_each,
            on_circular=settings.on_circular,
        )

    @classmethod
    def empty(cls) -> HookPipeline:
        """Create a pipeline with no hooks configured."""
        return cls()

    def has(self, point: events.HookPoint) -> bool:
        """Check if a hook is configured for a point."""
        return point in self._hooks

    def dispatch(
        self,
        point: events.HookPoint,
        context: events.HookContext | events.AfterEachContext,
    ) -> events.HookResult:
        """
        Call the hook for a point.

        Args:
            point: Hook point being reached.
            context: Argument record for the hook.

        Returns:
            HookResult; a deferring result if no hook is configured.

        Raises:
            TypeError: If the context record does not match the point.
        """
        if not isinstance(context, point.context_type):
            raise TypeError(
                f"{point.value} hooks take {point.context_type.__name__}, "
                f"got {type(context).__name__}"
            )
        hook = self._hooks.get(point)
        if hook is None:
            return events.HookResult.defer()
        return events.HookResult.from_return(hook(context))

    def __repr__(self) -> str:
        names = ", ".join(point.value for point in self._hooks)
        return f"HookPipeline({names})"
