"""Command-line interface for deepfuse."""

from deepfuse.cli.main import cli, main

__all__ = ["cli", "main"]
