"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
LAYOUT_PANEL = "Layouts"
PARTIALS_PANEL = "Partials"
DATA_PANEL = "Template Data"
OUTPUT_PANEL = "Output"

SourceArgument = Annotated[
    Path,
    typer.Argument(
        metavar="SOURCE",
        help="Directory holding the files to render.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
        resolve_path=True,
    ),
]

DestinationArgument = Annotated[
    Path,
    typer.Argument(
        metavar="DESTINATION",
        help="Directory receiving the rendered files.",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
]

RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        help="Project root against which the layout and partial directories resolve.",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

EngineOption = Annotated[
    str,
    typer.Option(
        "--engine",
        "-e",
        help="Template engine used to render layouts (see `layoutsmith engines`).",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

DirectoryOption = Annotated[
    str,
    typer.Option(
        "--directory",
        "-d",
        help="Directory containing the layout templates.",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

DefaultLayoutOption = Annotated[
    str | None,
    typer.Option(
        "--default",
        help="Layout applied to files that do not declare one.",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

PatternOption = Annotated[
    list[str] | None,
    typer.Option(
        "--pattern",
        "-p",
        help="Glob restricting which files receive the default layout. Repeatable; prefix with '!' to exclude.",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

LayoutKeyOption = Annotated[
    str,
    typer.Option(
        "--layout-key",
        help="Front matter field naming the layout of a file.",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

LayoutExtensionOption = Annotated[
    str,
    typer.Option(
        "--layout-extension",
        help="Extension appended to layout names that lack one.",
        rich_help_panel=LAYOUT_PANEL,
    ),
]

PartialsOption = Annotated[
    str | None,
    typer.Option(
        "--partials",
        help="Directory of partial templates made available to layouts.",
        rich_help_panel=PARTIALS_PANEL,
    ),
]

PartialExtensionOption = Annotated[
    str | None,
    typer.Option(
        "--partial-extension",
        help="Extension identifying partial files (defaults to the engine's extensions).",
        rich_help_panel=PARTIALS_PANEL,
    ),
]

MetadataOption = Annotated[
    Path | None,
    typer.Option(
        "--metadata",
        "-m",
        help="YAML file providing site-wide metadata.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=DATA_PANEL,
    ),
]

ParamOption = Annotated[
    list[str] | None,
    typer.Option(
        "--param",
        "-P",
        metavar="KEY=VALUE",
        help="Extra template parameter; VALUE is parsed as YAML. Repeatable.",
        rich_help_panel=DATA_PANEL,
    ),
]

RenameOption = Annotated[
    bool,
    typer.Option(
        "--rename/--no-rename",
        help="Replace the extension of rendered files with .html.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ConcurrencyOption = Annotated[
    int,
    typer.Option(
        "--concurrency",
        "-j",
        min=1,
        help="Maximum number of files rendered at once.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]
