"""Command line entry point for surrogate generation.

Usage:

    jsexpr-codegen "src/**/*.ts" tests/surrogates.py MyApp
"""

from __future__ import annotations

import dataclasses
import glob
import importlib.metadata
from pathlib import Path
from typing import List, Optional

import rich
import tyro
from rich.markup import escape

from .. import __version__
from ._errors import GeneratorError, InputDiscoveryError
from ._traverse import TEST_SPEC_SUFFIX, filter_source_paths, generate_surrogates

TOOL_NAME = "jsexpr"


@dataclasses.dataclass(frozen=True)
class GeneratorConfig:
    """Generate Python expression surrogates from TypeScript declarations."""

    search_path: tyro.conf.Positional[str]
    """Glob matching the TypeScript sources. `**` matches recursively."""

    output_path: tyro.conf.Positional[Path]
    """Python module to write."""

    base_namespace: tyro.conf.Positional[str]
    """Namespace recorded on every generated type."""

    exclude_suffix: str = TEST_SPEC_SUFFIX
    """Files whose name ends with this suffix are skipped."""

    tool_name: Optional[str] = None
    """Tool name recorded on generated types. Defaults to this package's name."""

    tool_version: Optional[str] = None
    """Tool version recorded on generated types. Defaults to this package's
    version."""


def _log(message: str) -> None:
    rich.print(f"[bold](jsexpr)[/bold] {message}")


def _package_version() -> str:
    try:
        return importlib.metadata.version(TOOL_NAME)
    except importlib.metadata.PackageNotFoundError:
        return __version__


def discover_source_paths(search_path: str) -> List[Path]:
    """Files matching a glob, sorted so that output is deterministic.

    Raises:
        InputDiscoveryError: if the file system can't be searched.
    """
    try:
        matches = glob.glob(search_path, recursive=True)
        return sorted(Path(m) for m in matches if Path(m).is_file())
    except OSError as e:
        raise InputDiscoveryError(f"Couldn't search {search_path!r}: {e}") from e


def run(config: GeneratorConfig) -> int:
    """Run the generator. Returns the process exit code."""
    _log(f'Looking for files using "{escape(config.search_path)}"...')
    try:
        paths = discover_source_paths(config.search_path)
    except InputDiscoveryError as e:
        rich.print(f"[bold red](jsexpr)[/bold red] {escape(str(e))}")
        return 1
    if len(paths) == 0:
        _log("No files found.")
        return 0

    paths = filter_source_paths(paths, config.exclude_suffix)
    if len(paths) == 0:
        _log(
            "No files remaining after removing files that end in"
            f' "{escape(config.exclude_suffix)}".'
        )
        return 0

    _log(f"Parsing TypeScript from {len(paths)} file(s)...")
    try:
        text = generate_surrogates(
            paths,
            config.base_namespace,
            config.tool_name or TOOL_NAME,
            config.tool_version or _package_version(),
        )
    except GeneratorError as e:
        rich.print(f"[bold red](jsexpr)[/bold red] {escape(str(e))}")
        return 1

    output_path = config.output_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    _log(f"Wrote surrogates to {escape(str(output_path))}")
    return 0


def entrypoint() -> None:
    raise SystemExit(run(tyro.cli(GeneratorConfig)))
