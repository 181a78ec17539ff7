"""Implementation of the `layoutsmith engines` command."""

from __future__ import annotations

from rich.table import Table

from layoutsmith.engines import available_engines, get_renderer

from ..state import get_cli_state


def engines() -> None:
    """List the registered template engines."""
    table = Table(title="Template engines")
    table.add_column("Name", style="bold")
    table.add_column("Renderer")
    table.add_column("Extensions")
    for name in available_engines():
        renderer = get_renderer(name)
        table.add_row(name, type(renderer).__name__, ", ".join(renderer.extensions))
    get_cli_state().console.print(table)
