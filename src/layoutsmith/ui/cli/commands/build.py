"""Implementation of the `layoutsmith build` command."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import typer
import yaml

from layoutsmith.core.config import DEFAULT_CONCURRENCY, DEFAULT_DIRECTORY, DEFAULT_LAYOUT_KEY
from layoutsmith.core.exceptions import ConfigError, LayoutError
from layoutsmith.core.files import read_source_tree, write_output_tree
from layoutsmith.core.pipeline import Layouts

from .._options import (
    ConcurrencyOption,
    DefaultLayoutOption,
    DestinationArgument,
    DirectoryOption,
    EngineOption,
    LayoutExtensionOption,
    LayoutKeyOption,
    MetadataOption,
    ParamOption,
    PartialExtensionOption,
    PartialsOption,
    PatternOption,
    RenameOption,
    RootOption,
    SourceArgument,
)
from ..diagnostics import CliEmitter
from ..state import debug_enabled, emit_error, get_cli_state


def parse_params(entries: list[str] | None) -> dict[str, Any]:
    """Turn ``KEY=VALUE`` entries into a mapping, parsing values as YAML."""
    params: dict[str, Any] = {}
    for entry in entries or []:
        key, sep, raw_value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{entry}'.", param_hint="--param")
        try:
            params[key] = yaml.safe_load(raw_value) if raw_value.strip() else ""
        except yaml.YAMLError:
            params[key] = raw_value
    return params


def load_metadata(path: Path | None) -> dict[str, Any]:
    """Load site metadata from a YAML file."""
    if path is None:
        return {}
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise typer.BadParameter(f"Invalid YAML in '{path}': {exc}", param_hint="--metadata") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise typer.BadParameter("Metadata file must contain a mapping.", param_hint="--metadata")
    return dict(payload)


def build(
    source: SourceArgument,
    destination: DestinationArgument,
    engine: EngineOption = "jinja2",
    directory: DirectoryOption = DEFAULT_DIRECTORY,
    default: DefaultLayoutOption = None,
    pattern: PatternOption = None,
    layout_key: LayoutKeyOption = DEFAULT_LAYOUT_KEY,
    layout_extension: LayoutExtensionOption = "",
    partials: PartialsOption = None,
    partial_extension: PartialExtensionOption = None,
    metadata: MetadataOption = None,
    param: ParamOption = None,
    rename: RenameOption = False,
    concurrency: ConcurrencyOption = DEFAULT_CONCURRENCY,
    root: RootOption = Path("."),
) -> None:
    """Render every file of SOURCE through its layout into DESTINATION."""
    state = get_cli_state()
    options: dict[str, Any] = parse_params(param)
    options.update(
        {
            "engine": engine,
            "directory": directory,
            "default": default,
            "pattern": pattern or None,
            "layout_key": layout_key,
            "layout_extension": layout_extension,
            "partials": partials,
            "partial_extension": partial_extension,
            "rename": rename,
            "concurrency": concurrency,
        }
    )

    try:
        pipeline = Layouts(options, root=root, emitter=CliEmitter(state))
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except LayoutError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    site_metadata = load_metadata(metadata)
    state.events.clear()
    try:
        files = read_source_tree(source)
        selection = pipeline(files, site_metadata)
    except LayoutError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    written = write_output_tree(files, destination)
    renamed = state.consume_events("layout_renamed")
    summary = f"Rendered {len(selection)} of {len(written)} file(s) into {destination}"
    if renamed:
        summary += f" ({len(renamed)} renamed)"
    state.console.print(summary, soft_wrap=True)
