"""Merge option types.

MergeSettings is the single, immutable record of options a merge runs
with. It is resolved once per call from user-supplied options layered over
the defaults and is read-only for the duration of the merge.

Option names are snake_case; the camelCase spellings (``appendArrays``,
``onlyUniversalKeys``, ``beforeEach``, ...) are accepted as aliases.

Design decision: unknown keys are preserved (``extra="allow"``) but have
no effect. Use ``get_extra_fields()`` to audit an options record for typos.
"""

from __future__ import annotations

import collections.abc as _abc
import enum as _enum
import logging as _logging
import typing as _typing

import pydantic as _pydantic
import pydantic.alias_generators as _alias_generators

import deepfuse.keys as keys

_logger = _logging.getLogger(__name__)

Hook: _typing.TypeAlias = _typing.Callable[[_typing.Any], _typing.Any]
Comparator: _typing.TypeAlias = _typing.Callable[[_typing.Any, _typing.Any], int]


class ArrayMode(_enum.Enum):
    """How an incoming list combines with an existing list at the same key."""

    REPLACE = "replace"
    """Incoming list alone (default)."""

    APPEND = "append"
    """Existing items, then incoming items."""

    PREPEND = "prepend"
    """Incoming items, then existing items."""


# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for option records.

    Unknown fields are preserved rather than rejected so they can be
    reported.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Returns:
            Dict of field_name → value for all unrecognized fields.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def has_extra_fields(self) -> bool:
        """Check if this record has any unrecognized fields."""
        return bool(self.model_extra)


# =============================================================================
# Merge settings
# =============================================================================


class MergeSettings(ConfigBase):
    """
    Options for one merge call.

    Example:
        >>> settings = MergeSettings.model_validate({"appendArrays": True})
        >>> settings.array_mode
        <ArrayMode.APPEND: 'append'>
    """

    model_config = _pydantic.ConfigDict(
        extra="allow",
        frozen=True,
        alias_generator=_alias_generators.to_camel,
        populate_by_name=True,
    )

    # Keys
    only_keys: tuple[_typing.Any, ...] = ()
    """Exclusive list of keys to merge (others are skipped)."""

    skip_keys: tuple[_typing.Any, ...] = ()
    """Keys to skip, applied after every other key-set derivation."""

    only_common_keys: bool = False
    """Merge only keys found in two or more structures."""

    only_universal_keys: bool = False
    """Merge only keys found in every structure."""

    skip_common_keys: bool = False
    """Merge only keys found in exactly one structure."""

    skip_universal_keys: bool = False
    """Merge only keys missing from at least one structure."""

    # Values
    invoke_getters: bool = False
    """Invoke getters and store their results as plain values."""

    skip_setters: bool = False
    """Drop setters instead of copying them to the result."""

    # Arrays
    append_arrays: bool = False
    """Append incoming list items to existing lists."""

    prepend_arrays: bool = False
    """Prepend incoming list items to existing lists."""

    dedup_arrays: bool = False
    """Remove duplicate items from merged lists."""

    sort_arrays: bool | Comparator = False
    """Sort merged lists: True for default ordering, or a cmp(a, b) function."""

    # Prototype / fallback layers
    hoist_enumerable: bool = False
    """Merge inherited enumerable keys as if they were own keys."""

    hoist_proto: bool = False
    """Copy merged fallback-layer keys onto the result itself."""

    skip_proto: bool = False
    """Skip fallback-layer merging entirely."""

    # Hooks
    filter: Hook | None = None
    """Called per key; a falsy override skips the key."""

    before_each: Hook | None = None
    """Called per key before combination; an override replaces the value."""

    after_each: Hook | None = None
    """Called per key after combination; an override replaces the result."""

    on_circular: Hook | None = None
    """Called when a value refers back to a structure already being merged."""

    @_pydantic.model_validator(mode="after")
    def _report_conflicts(self) -> MergeSettings:
        """Warn when mutually exclusive options are enabled together."""
        for message in self.conflicts():
            _logger.warning(message)
        return self

    def conflicts(self) -> list[str]:
        """Describe each group of mutually exclusive options enabled together."""
        messages = []
        enabled = [mode for mode in keys.KeySetMode if getattr(self, mode.value)]
        if len(enabled) > 1:
            messages.append(
                f"Multiple key-set modes enabled "
                f"({', '.join(mode.value for mode in enabled)}); "
                f"using {enabled[0].value}"
            )
        if self.append_arrays and self.prepend_arrays:
            messages.append(
                "Both append_arrays and prepend_arrays enabled; using append_arrays"
            )
        return messages

    @property
    def key_set_mode(self) -> keys.KeySetMode | None:
        """The active key-set mode, resolved by precedence."""
        for mode in keys.KeySetMode:
            if getattr(self, mode.value):
                return mode
        return None

    @property
    def array_mode(self) -> ArrayMode:
        """The active list combination mode."""
        if self.append_arrays:
            return ArrayMode.APPEND
        if self.prepend_arrays:
            return ArrayMode.PREPEND
        return ArrayMode.REPLACE

    @property
    def sort_comparator(self) -> Comparator | None:
        """The user comparator, if sort_arrays is a function."""
        return None if isinstance(self.sort_arrays, bool) else self.sort_arrays

    def layer(
        self,
        overrides: _abc.Mapping[str, _typing.Any] | MergeSettings | None = None,
        **kwargs: _typing.Any,
    ) -> MergeSettings:
        """
        Return new settings with overrides applied on top of these.

        Only options explicitly present in overrides replace current values.

        Args:
            overrides: Options record or MergeSettings.
            **kwargs: Additional options (snake_case or camelCase).

        Raises:
            pydantic.ValidationError: If an override value is malformed.
        """
        if isinstance(overrides, MergeSettings) and not kwargs:
            parsed = overrides
        else:
            data: dict[str, _typing.Any] = {}
            if isinstance(overrides, MergeSettings):
                data.update(
                    {name: getattr(overrides, name) for name in overrides.model_fields_set}
                )
            elif overrides is not None:
                data.update(overrides)
            data.update(kwargs)
            parsed = MergeSettings.model_validate(data)

        if parsed.has_extra_fields():
            _logger.debug(
                "Ignoring unknown merge options: %s",
                ", ".join(sorted(parsed.get_extra_fields())),
            )

        known = type(self).model_fields
        update = {
            name: getattr(parsed, name)
            for name in parsed.model_fields_set
            if name in known
        }
        result = self.model_copy(update=update)

        # model_copy skips validation; report conflicts the layers created together
        already_reported = {*self.conflicts(), *parsed.conflicts()}
        for message in result.conflicts():
            if message not in already_reported:
                _logger.warning(message)
        return result
