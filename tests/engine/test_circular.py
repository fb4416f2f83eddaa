"""Tests for circular reference handling."""

import typing as _typing

import pytest as _pytest

import deepfuse
import deepfuse.structure as structure


@_pytest.fixture
def self_ref() -> dict[str, _typing.Any]:
    """A mapping that contains itself."""
    obj: dict[str, _typing.Any] = {"a": 1}
    obj["self"] = obj
    return obj


class TestCircularPreservation:
    """Tests for default cycle resolution."""

    def test_self_reference(self, self_ref) -> None:
        """A self-reference resolves to the result itself."""
        merged = deepfuse.merge({}, self_ref)
        assert merged["a"] == 1
        assert merged["self"] is merged

    def test_single_structure_clone(self, self_ref) -> None:
        """Cloning a single cyclic structure keeps the cycle."""
        clone = deepfuse.Merger().merge(self_ref)
        assert clone["self"] is clone
        assert clone is not self_ref

    def test_back_reference_to_ancestor(self) -> None:
        """A nested value pointing at an ancestor resolves to the ancestor's result."""
        parent: dict[str, _typing.Any] = {"name": "parent", "child": {"name": "child"}}
        parent["child"]["parent"] = parent

        merged = deepfuse.merge({}, parent)
        assert merged["child"]["parent"] is merged
        assert merged["child"]["name"] == "child"

    def test_mutual_references(self) -> None:
        """Two mappings referring to each other stay linked."""
        a: dict[str, _typing.Any] = {}
        b: dict[str, _typing.Any] = {"a": a}
        a["b"] = b

        merged = deepfuse.merge({}, a)
        assert merged["b"]["a"] is merged

    def test_structure_self_reference(self) -> None:
        """Structures are handled like plain mappings."""
        source = structure.Structure({"a": 1})
        source["self"] = source
        merged = deepfuse.merge({}, source)
        assert merged["self"] is merged
        assert merged is not source

    def test_cyclic_result_cannot_be_plain(self, self_ref) -> None:
        """to_dict refuses cycles rather than recursing forever."""
        with _pytest.raises(ValueError):
            deepfuse.merge({}, self_ref).to_dict()


class TestOnCircularHook:
    """Tests for the on_circular hook."""

    def test_override_replaces_resolution(self, self_ref) -> None:
        """A returned value is used instead of the cycle."""
        seen: list[deepfuse.HookContext] = []

        def on_circular(ctx: deepfuse.HookContext) -> str:
            seen.append(ctx)
            return "[circular]"

        merged = deepfuse.merge({"onCircular": on_circular})({}, self_ref)
        assert merged.to_dict() == {"a": 1, "self": "[circular]"}
        assert len(seen) == 1
        assert seen[0].key == "self"
        assert seen[0].src_val is self_ref
        assert seen[0].depth == 0

    def test_none_keeps_default(self, self_ref) -> None:
        """Returning None falls back to default resolution."""
        merged = deepfuse.merge({"onCircular": lambda ctx: None})({}, self_ref)
        assert merged["self"] is merged

    def test_override_none(self, self_ref) -> None:
        """Override(None) stores None."""
        merged = deepfuse.merge({"onCircular": lambda ctx: deepfuse.Override(None)})(
            {}, self_ref
        )
        assert merged.to_dict() == {"a": 1, "self": None}

    def test_depth_reported(self) -> None:
        """Nested cycles report their depth."""
        depths: list[int] = []
        parent: dict[str, _typing.Any] = {"child": {}}
        parent["child"]["parent"] = parent

        def on_circular(ctx: deepfuse.HookContext) -> None:
            depths.append(ctx.depth)

        deepfuse.merge({"onCircular": on_circular})({}, parent)
        assert depths == [1]
