"""
MergeEngine: recursive deep merge of N structures.

One engine exists per top-level merge call and owns all mutable merge
state:

- circular references: source structure -> Structure built for it
- the list finishing strategy (immediate or deferred)
- the current nesting depth, passed to every hook

Per structure pass, for each selected key of each source (in order):

1. Skip keys the source or the target cannot read
2. Copy (or drop) setter-only accessors verbatim
3. filter hook may skip the key
4. before_each hook may replace the value
5. Resolve circular references (on_circular hook may replace)
6. Combine: lists per array mode, mappings by recursion, others as-is
7. after_each hook may replace the merged value
8. Commit the value as a property of the target

After all sources: flush deferred list work, then merge fallback layers.

Thread safety: an engine must not be shared between concurrent calls.
Independent calls each build their own engine and share nothing.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import deepfuse.config.types as types
import deepfuse.errors as errors
import deepfuse.hooks as hooks
import deepfuse.keys as keys
import deepfuse.engine._arrays as _arrays
import deepfuse.structure as structure

_logger = _logging.getLogger(__name__)

Mapping: _typing.TypeAlias = _abc.Mapping[_typing.Any, _typing.Any]


class MergeEngine:
    """
    State for one top-level merge call.

    Example:
        >>> engine = MergeEngine(types.MergeSettings())
        >>> engine.run([{"a": {"b": 1}}, {"a": {"c": 2}}]).to_dict()
        {'a': {'b': 1, 'c': 2}}
    """

    def __init__(self, settings: types.MergeSettings) -> None:
        """
        Initialize the engine.

        Args:
            settings: Resolved merge settings, read-only for the call.
        """
        self._settings = settings
        self._hooks = hooks.HookPipeline.from_settings(settings)
        self._arrays = _arrays.select_finisher(
            settings,
            observed=self._hooks.has(hooks.HookPoint.AFTER_EACH),
        )
        # id(source) -> (source, target); holding the source keeps ids unique
        self._circular_refs: dict[int, tuple[Mapping, structure.Structure]] = {}
        self._depth = 0

    @property
    def depth(self) -> int:
        """Current nesting depth (0 at the top level)."""
        return self._depth

    def run(self, objects: _abc.Sequence[_typing.Any]) -> structure.Structure:
        """
        Merge structures into a new Structure.

        Args:
            objects: Structures in priority order (last wins).

        Returns:
            New merged Structure. No input is modified.

        Raises:
            InvalidMergeArgumentError: If any argument is not a mapping.
        """
        for index, obj in enumerate(objects):
            if not structure.is_object(obj):
                raise errors.InvalidMergeArgumentError(
                    f"Cannot merge argument {index} of type {type(obj).__name__}; "
                    f"expected a mapping"
                )
        _logger.debug(
            "Merging %d structures (%s)",
            len(objects),
            type(self._arrays).__name__,
        )
        return self._merge(list(objects))

    # =========================================================================
    # Structure pass
    # =========================================================================

    def _object_keys(self, obj: Mapping) -> list[_typing.Any]:
        return keys.get_object_keys(obj, self._settings.hoist_enumerable)

    def _select_keys(self, objects: list[Mapping]) -> list[_typing.Any] | None:
        """
        Compute the shared key list for a pass, or None for per-source keys.

        Key-set derivation applies only to two or more structures. An
        only_keys list intersects with the derived keys, or stands alone.
        """
        settings = self._settings
        key_list: list[_typing.Any] | None = None

        mode = settings.key_set_mode
        if len(objects) > 1 and mode is not None:
            key_list = keys.derive_keys(
                mode, [self._object_keys(obj) for obj in objects]
            )

        if settings.only_keys:
            if key_list is None:
                key_list = list(settings.only_keys)
            else:
                key_list = [key for key in key_list if key in settings.only_keys]

        return key_list

    def _merge(self, objects: list[Mapping]) -> structure.Structure:
        """Merge one level: own keys, deferred list work, fallback layers."""
        key_list = self._select_keys(objects)
        skip_keys = self._settings.skip_keys
        target = structure.Structure()

        for src in objects:
            self._circular_refs[id(src)] = (src, target)

            src_keys = key_list if key_list is not None else self._object_keys(src)
            if skip_keys:
                src_keys = [key for key in src_keys if key not in skip_keys]

            for key in src_keys:
                self._merge_key(src, target, key)

        self._arrays.flush(target)

        if self._settings.skip_proto:
            return target
        return self._merge_fallback_layers(objects, target)

    def _merge_fallback_layers(
        self,
        objects: list[Mapping],
        target: structure.Structure,
    ) -> structure.Structure:
        """
        Merge the sources' fallback layers and attach or hoist the result.

        Returns:
            target with the merged layer as its proto, or a new Structure
            with the layer's keys hoisted under target's keys.
        """
        protos = [
            proto
            for proto in (structure.get_proto(obj) for obj in objects)
            if proto is not None
        ]
        if not protos:
            return target

        merged_proto = self._merge(protos)
        if self._settings.hoist_proto:
            return self._merge([merged_proto, target])

        target.proto = merged_proto
        return target

    # =========================================================================
    # Per-key merge
    # =========================================================================

    def _merge_key(
        self,
        src: Mapping,
        target: structure.Structure,
        key: _typing.Any,
    ) -> None:
        """Merge one key of one source into the target."""
        settings = self._settings

        try:
            src_prop = structure.own_property(src, key)
            if src_prop is None and not structure.has_key(src, key):
                return
            if isinstance(src_prop, structure.DataProperty):
                merge_val = src_prop.value
            elif src_prop is None or not src_prop.is_setter_only:
                merge_val = src[key]
        except Exception as e:
            self._log_read_failure("source", key, e)
            return

        if isinstance(src_prop, structure.AccessorProperty) and src_prop.is_setter_only:
            if not settings.skip_setters:
                target.define_property(key, src_prop, redefine=True)
            return

        try:
            target_val = target.get(key)
        except Exception as e:
            self._log_read_failure("target", key, e)
            return

        hook_provided = False

        if self._hooks.has(hooks.HookPoint.FILTER):
            result = self._hooks.dispatch(
                hooks.HookPoint.FILTER,
                self._context(key, src, merge_val, target, target_val),
            )
            if result.skips:
                return

        if self._hooks.has(hooks.HookPoint.BEFORE_EACH):
            result = self._hooks.dispatch(
                hooks.HookPoint.BEFORE_EACH,
                self._context(key, src, merge_val, target, target_val),
            )
            if result.overridden:
                merge_val = result.value
                hook_provided = True

        if structure.is_object(merge_val) and id(merge_val) in self._circular_refs:
            result = self._hooks.dispatch(
                hooks.HookPoint.ON_CIRCULAR,
                self._context(key, src, merge_val, target, target_val),
            )
            if not result.overridden:
                resolved = self._circular_refs[id(merge_val)][1]
                target.define_property(
                    key, structure.DataProperty(resolved), redefine=True
                )
                return
            merge_val = result.value
            hook_provided = True

        merge_val = self._combine(target, key, merge_val, target_val, hook_provided)

        if self._hooks.has(hooks.HookPoint.AFTER_EACH):
            result = self._hooks.dispatch(
                hooks.HookPoint.AFTER_EACH,
                hooks.AfterEachContext(
                    depth=self._depth,
                    key=key,
                    merge_val=merge_val,
                    src_obj=src,
                    target_obj=target,
                ),
            )
            if result.overridden:
                merge_val = result.value
                hook_provided = True

        if hook_provided:
            self._commit_hook_value(target, key, merge_val)
        else:
            self._commit(target, key, merge_val, src_prop)

    def _log_read_failure(self, side: str, key: _typing.Any, error: Exception) -> None:
        _logger.warning(
            "Skipping key %r: reading it from the %s raised %s: %s",
            key,
            side,
            type(error).__name__,
            error,
        )

    def _context(
        self,
        key: _typing.Any,
        src: Mapping,
        src_val: _typing.Any,
        target: structure.Structure,
        target_val: _typing.Any,
    ) -> hooks.HookContext:
        return hooks.HookContext(
            depth=self._depth,
            key=key,
            src_obj=src,
            src_val=src_val,
            target_obj=target,
            target_val=target_val,
        )

    def _combine(
        self,
        target: structure.Structure,
        key: _typing.Any,
        merge_val: _typing.Any,
        target_val: _typing.Any,
        hook_provided: bool,
    ) -> _typing.Any:
        """Combine lists, recurse into mappings, pass other values through."""
        if structure.is_sequence(merge_val):
            combined = _arrays.combine(merge_val, target_val, self._settings.array_mode)
            return self._arrays.finish(target, key, combined)

        if structure.is_object(merge_val) and not (
            hook_provided and structure.is_prop_descriptor(merge_val)
        ):
            self._depth += 1
            if structure.is_object(target_val):
                merged = self._merge([target_val, merge_val])
            else:
                merged = self._merge([merge_val])
            self._depth -= 1
            return merged

        return merge_val

    # =========================================================================
    # Commit
    # =========================================================================

    def _commit_hook_value(
        self,
        target: structure.Structure,
        key: _typing.Any,
        merge_val: _typing.Any,
    ) -> None:
        """Define a hook-provided value: descriptor records as given, else standard."""
        if structure.is_prop_descriptor(merge_val):
            prop = structure.to_property(merge_val)
        else:
            prop = structure.DataProperty(merge_val)
        target.define_property(key, prop, redefine=True)

    def _commit(
        self,
        target: structure.Structure,
        key: _typing.Any,
        merge_val: _typing.Any,
        src_prop: structure.Property | None,
    ) -> None:
        """
        Define a merged value, carrying over the source property's shape.

        Accessors keep their getter (unless getters are invoked) and their
        setter (unless setters are skipped). Data properties keep their
        flags. Keys inherited through hoist_enumerable become standard.
        """
        if src_prop is None:
            target.define_property(key, structure.DataProperty(merge_val), redefine=True)
            return

        if isinstance(src_prop, structure.DataProperty):
            prop: structure.Property = structure.DataProperty(
                merge_val,
                writable=src_prop.writable,
                enumerable=src_prop.enumerable,
                configurable=src_prop.configurable,
            )
        else:
            invoked = self._settings.invoke_getters and src_prop.get is not None
            getter = None if invoked else src_prop.get
            setter = None
            if not invoked and not self._settings.skip_setters:
                setter = src_prop.set

            if getter is not None or setter is not None:
                prop = structure.AccessorProperty(
                    get=getter,
                    set=setter,
                    enumerable=src_prop.enumerable,
                    configurable=src_prop.configurable,
                )
            else:
                prop = structure.DataProperty(
                    merge_val,
                    enumerable=src_prop.enumerable,
                    configurable=src_prop.configurable,
                )

        target.define_property(key, prop, redefine=True)
