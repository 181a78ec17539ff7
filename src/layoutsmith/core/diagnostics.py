"""Diagnostic abstractions shared across the layout pipeline."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings and structured events."""

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(self, *, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def ensure_emitter(emitter: DiagnosticEmitter | None) -> DiagnosticEmitter:
    """Return a usable emitter, defaulting to module logging."""
    return emitter if emitter is not None else LoggingEmitter()


def record_event(
    emitter: DiagnosticEmitter | None,
    event: str,
    payload: Mapping[str, Any],
) -> None:
    """Forward a structured diagnostic event."""
    ensure_emitter(emitter).event(event, payload)


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "layout_template_seeded":
        template = data.get("template") or "<unknown>"
        file = data.get("file") or "<unknown>"
        return f"Warming layout {template} with {file}"

    if name == "layout_rendered":
        file = data.get("file") or "<unknown>"
        layout = data.get("layout")
        suffix = f" (layout: {layout})" if layout else ""
        return f"Rendered {file}{suffix}"

    if name == "layout_renamed":
        source = data.get("source") or "<unknown>"
        target = data.get("target") or "<unknown>"
        return f"Renamed {source} -> {target}"

    if name == "layout_phase":
        phase = data.get("phase") or "?"
        count = data.get("count", 0)
        noun = "file" if count == 1 else "files"
        return f"Layout phase {phase}: {count} {noun}"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "ensure_emitter",
    "format_event_message",
    "record_event",
]
