"""
deepfuse - deep merge for nested mappings

Merges any number of nested mappings into a new structure without
modifying the inputs, with key-set selection, list combination,
accessor properties, circular references, fallback layers and hooks.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("deepfuse")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "deepfuse Contributors"

from deepfuse.config import MergeSettings  # noqa: E402
from deepfuse.errors import (  # noqa: E402
    DeepfuseError,
    InvalidMergeArgumentError,
    PropertyAccessError,
    PropertyDefinitionError,
)
from deepfuse.hooks import AfterEachContext, HookContext, Override  # noqa: E402
from deepfuse.engine import Merger, merge  # noqa: E402
from deepfuse.structure import Structure  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "AfterEachContext",
    "DeepfuseError",
    "HookContext",
    "InvalidMergeArgumentError",
    "MergeSettings",
    "Merger",
    "Override",
    "PropertyAccessError",
    "PropertyDefinitionError",
    "Structure",
    "merge",
]
