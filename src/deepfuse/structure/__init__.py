"""
Structure: a mapping with property descriptors and fallback layers.

Example:
    >>> from deepfuse.structure import Structure
    >>> s = Structure({"first": "Ada", "last": "Lovelace"})
    >>> s.define_property("full", {"get": lambda o: f"{o['first']} {o['last']}"})
    >>> s["full"]
    'Ada Lovelace'
"""

from deepfuse.structure._core import Structure
from deepfuse.structure._descriptors import (
    AccessorProperty,
    DataProperty,
    Property,
    is_object,
    is_prop_descriptor,
    is_sequence,
    to_descriptor,
    to_property,
)
from deepfuse.structure._reflect import get_proto, has_key, own_keys, own_property

__all__ = [
    "AccessorProperty",
    "DataProperty",
    "Property",
    "Structure",
    "get_proto",
    "has_key",
    "is_object",
    "is_prop_descriptor",
    "is_sequence",
    "own_keys",
    "own_property",
    "to_descriptor",
    "to_property",
]
