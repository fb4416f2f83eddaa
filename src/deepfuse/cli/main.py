"""
Command-line entry point for deepfuse.

Merges YAML or JSON documents in order and prints the result.

Examples:
    deepfuse base.yaml local.yaml
    deepfuse --append-arrays --dedup-arrays a.json b.json --format json
"""

import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import yaml as _yaml

import deepfuse
import deepfuse.config as config
import deepfuse.engine as engine

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _load_document(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """Load a YAML or JSON file that must contain a mapping."""
    try:
        with path.open(encoding="utf-8") as f:
            data = _yaml.safe_load(f)
    except _yaml.YAMLError as e:
        raise _click.ClickException(f"{path}: invalid YAML/JSON: {e}") from e
    except OSError as e:
        raise _click.ClickException(f"{path}: {e.strerror or e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise _click.ClickException(
            f"{path}: top-level document must be a mapping, got {type(data).__name__}"
        )
    return data


def _serialize(data: dict[str, _typing.Any], output_format: str, indent: int) -> str:
    """Serialize merged data as JSON or YAML."""
    if output_format == "json":
        return _json.dumps(data, indent=indent or None, default=str)
    return _yaml.safe_dump(
        data,
        indent=max(indent, 2),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def _should_use_color(color_flag: bool | None) -> tuple[bool, bool]:
    """Determine whether to use color output.

    Returns:
        Tuple of (use_color, force_color).
    """
    if color_flag is True:
        return (True, True)
    if color_flag is False:
        return (False, False)
    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)
    return (_sys.stdout.isatty(), False)


def _print_highlighted(
    text: str,
    lexer: str,
    *,
    color: bool = True,
    force_color: bool = False,
) -> None:
    """Print text, optionally with syntax highlighting.

    Args:
        text: The text to print
        lexer: Pygments lexer name ("yaml" or "json")
        color: Whether to use syntax highlighting
        force_color: Force color even when not a TTY (for piping with --color)
    """
    if not color:
        _click.echo(text, nl=not text.endswith("\n"))
        return

    import rich.console as _rich_console
    import rich.syntax as _rich_syntax

    console = _rich_console.Console(
        force_terminal=force_color,
        no_color=False if force_color else None,
        color_system="truecolor" if force_color else "auto",
    )
    console.print(
        _rich_syntax.Syntax(
            text.rstrip("\n"),
            lexer,
            theme="monokai",
            background_color="default",
        )
    )


def _configure_logging(level: str) -> None:
    """Send library log records to stderr."""
    _logging.basicConfig(
        level=getattr(_logging, level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=_sys.stderr,
    )


@_click.command(context_settings=CONTEXT_SETTINGS)
@_click.version_option(deepfuse.__version__, "-v", "--version", prog_name="deepfuse")
@_click.argument(
    "files",
    nargs=-1,
    required=True,
    type=_click.Path(exists=True, dir_okay=False, path_type=_pathlib.Path),
)
@_click.option("--only-key", "only_keys", multiple=True, help="Merge only this key (repeatable)")
@_click.option("--skip-key", "skip_keys", multiple=True, help="Skip this key (repeatable)")
@_click.option("--only-common-keys", is_flag=True, help="Merge keys found in 2+ files")
@_click.option("--only-universal-keys", is_flag=True, help="Merge keys found in every file")
@_click.option("--skip-common-keys", is_flag=True, help="Merge keys found in one file only")
@_click.option("--skip-universal-keys", is_flag=True, help="Merge keys missing from some file")
@_click.option("--append-arrays", is_flag=True, help="Append list items to existing lists")
@_click.option("--prepend-arrays", is_flag=True, help="Prepend list items to existing lists")
@_click.option("--dedup-arrays", is_flag=True, help="Remove duplicate list items")
@_click.option("--sort-arrays", is_flag=True, help="Sort merged lists")
@_click.option("--hoist-enumerable", is_flag=True, hidden=True)
@_click.option(
    "--format",
    "output_format",
    type=_click.Choice(["json", "yaml"]),
    default=None,
    help="Output format (default: yaml, or DEEPFUSE_OUTPUT_FORMAT)",
)
@_click.option("--indent", type=_click.IntRange(0, 8), default=None, help="Indentation width")
@_click.option(
    "-o",
    "--output",
    type=_click.Path(dir_okay=False, writable=True, path_type=_pathlib.Path),
    default=None,
    help="Write the result to a file instead of stdout",
)
@_click.option("--color/--no-color", default=None, help="Force or disable syntax highlighting")
@_click.option("--verbose", is_flag=True, help="Enable debug logging")
def cli(
    files: tuple[_pathlib.Path, ...],
    only_keys: tuple[str, ...],
    skip_keys: tuple[str, ...],
    output_format: str | None,
    indent: int | None,
    output: _pathlib.Path | None,
    color: bool | None,
    verbose: bool,
    **flags: bool,
) -> None:
    """Deep merge YAML/JSON FILES in order (later files win)."""
    try:
        settings = config.CliSettings()
        base = settings.merge_settings()
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"Invalid DEEPFUSE_* settings:\n{e}") from e

    _configure_logging("DEBUG" if verbose else settings.log_level)

    overrides: dict[str, _typing.Any] = {
        name: True for name, enabled in flags.items() if enabled
    }
    if only_keys:
        overrides["only_keys"] = only_keys
    if skip_keys:
        overrides["skip_keys"] = skip_keys

    merger = engine.Merger(base.layer(overrides))
    documents = [_load_document(path) for path in files]
    _logger.debug("Loaded %d documents", len(documents))

    merged = merger.merge(*documents)

    try:
        data = merged.to_dict()
    except ValueError as e:
        raise _click.ClickException(str(e)) from e

    fmt = output_format or settings.output_format
    text = _serialize(data, fmt, settings.indent if indent is None else indent)

    if output is not None:
        output.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
        return

    use_color, force_color = _should_use_color(settings.color if color is None else color)
    _print_highlighted(text, fmt, color=use_color, force_color=force_color)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="deepfuse")


if __name__ == "__main__":
    main()
