"""Process-wide CLI state: verbosity, debug flag and recorded pipeline events."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import sys
from typing import Any

from rich.console import Console
from rich.text import Text

from layoutsmith.core.exceptions import exception_hint


@dataclass(slots=True)
class CLIState:
    verbosity: int = 0
    debug: bool = False
    events: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    # Consoles are bound to the current streams so test runners can swap them.
    @property
    def console(self) -> Console:
        return Console(file=sys.stdout, highlight=False)

    @property
    def err_console(self) -> Console:
        return Console(file=sys.stderr, highlight=False)

    def record_event(self, name: str, payload: Mapping[str, Any] | None = None) -> None:
        self.events.setdefault(name, []).append(dict(payload or {}))

    def consume_events(self, name: str) -> list[dict[str, Any]]:
        """Return the events recorded under ``name`` and forget them."""
        return self.events.pop(name, [])


_STATE = CLIState()


def get_cli_state() -> CLIState:
    return _STATE


def set_cli_state(*, verbosity: int | None = None, debug: bool | None = None) -> None:
    """Apply the global ``--verbose``/``--debug`` flags."""
    if verbosity is not None:
        _STATE.verbosity = max(0, verbosity)
    if debug is not None:
        _STATE.debug = debug


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message`` at ``level``; warnings and errors go to stderr.

    With ``-v`` the root cause of ``exception`` and its type are appended.
    """
    state = get_cli_state()
    if level == "info":
        state.console.print(message)
        return

    style = "red" if level == "error" else "yellow"
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        hint = exception_hint(exception)
        if hint and hint not in message:
            text.append(f"\ncaused by: {hint}", style=style)
        text.append(f"\ntype: {type(exception).__name__}", style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether errors should propagate with full tracebacks."""
    return get_cli_state().debug


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]
