"""
Recursive merge engine and entry point.

Example:
    >>> from deepfuse.engine import merge
    >>> merge({"a": {"b": 1}}, {"a": {"c": 2}})["a"].to_dict()
    {'b': 1, 'c': 2}
"""

from deepfuse.engine._arrays import (
    ArrayFinisher,
    DeferredArrayFinisher,
    ImmediateArrayFinisher,
    combine,
    dedup,
    select_finisher,
    sort_values,
)
from deepfuse.engine._engine import MergeEngine
from deepfuse.engine._entry import Merger, merge

__all__ = [
    "ArrayFinisher",
    "DeferredArrayFinisher",
    "ImmediateArrayFinisher",
    "MergeEngine",
    "Merger",
    "combine",
    "dedup",
    "merge",
    "select_finisher",
    "sort_values",
]
