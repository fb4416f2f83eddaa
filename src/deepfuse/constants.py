"""
Shared constants for deepfuse.

This module provides a single source of truth for the property descriptor
vocabulary used by the classifier, the Structure type, and the engine.
"""

DESCRIPTOR_FLAG_KEYS: tuple[str, ...] = ("configurable", "enumerable", "writable")
"""Flag slots that mark a mapping as a property descriptor record."""

ACCESSOR_KEYS: tuple[str, ...] = ("get", "set")
"""Accessor slots of a descriptor record."""

DESCRIPTOR_KEYS: frozenset[str] = frozenset(
    {"configurable", "enumerable", "value", "writable", "get", "set"}
)
"""Every key a descriptor record may contain."""

ENV_PREFIX = "DEEPFUSE_"
"""Environment variable prefix for CLI settings."""
