"""Custom exception hierarchy for the layout rendering pipeline."""

from __future__ import annotations


class LayoutError(RuntimeError):
    """Base exception for layout failures."""


class ConfigError(LayoutError):
    """Raised at setup when the plugin options are invalid."""


class PartialLoadError(LayoutError):
    """Raised at setup when a partials directory cannot be scanned."""


class RenderError(LayoutError):
    """Raised when a file cannot be rendered through its layout."""

    def __init__(self, file: str, layout: str | None, cause: BaseException) -> None:
        self.file = file
        self.layout = layout
        self.cause = cause
        super().__init__(f"Error rendering template `{layout}` for file `{file}`. {cause}")


class TemplateLoadError(RenderError):
    """Raised when the layout template itself cannot be loaded or compiled."""


def _exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = _exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigError",
    "LayoutError",
    "PartialLoadError",
    "RenderError",
    "TemplateLoadError",
    "exception_hint",
]
