"""
Hook pipeline for deepfuse merges.

Hooks intercept the per-key merge loop:
- filter: skip keys
- before_each: replace the value to merge
- after_each: replace the merged value
- on_circular: replace the resolution of a circular reference
"""

from deepfuse.hooks.events import (
    AfterEachContext,
    HookContext,
    HookPoint,
    HookResult,
    Override,
)
from deepfuse.hooks.pipeline import HookPipeline

__all__ = [
    "AfterEachContext",
    "HookContext",
    "HookPipeline",
    "HookPoint",
    "HookResult",
    "Override",
]
