"""
Configuration module for deepfuse.

MergeSettings (pydantic) holds merge options; CliSettings
(pydantic-settings) holds command-line defaults loaded from the environment.
"""

from deepfuse.config.settings import CliSettings
from deepfuse.config.types import ArrayMode, ConfigBase, MergeSettings

__all__ = ["ArrayMode", "CliSettings", "ConfigBase", "MergeSettings"]
