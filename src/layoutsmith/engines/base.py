"""Renderer protocol and helpers shared by the template engines."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


class TemplateSourceError(Exception):
    """Raised when a template or partial cannot be located, read, or compiled."""


@runtime_checkable
class Renderer(Protocol):
    """Capability rendering a template file against a context."""

    name: str
    extensions: tuple[str, ...]

    def render(self, template_path: str, context: Mapping[str, Any]) -> str: ...


def read_template_source(path: str | Path) -> str:
    """Return the text of ``path`` or raise :class:`TemplateSourceError`."""
    candidate = Path(path)
    try:
        return candidate.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise TemplateSourceError(f"Template '{candidate}' does not exist.") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateSourceError(f"Unable to read template '{candidate}': {exc}") from exc


def resolve_partial_path(
    reference: str, template_path: str | Path, root: str | Path | None = None
) -> Path | None:
    """Return the file a partial reference points to, if any.

    References may be absolute, relative to the layout's own folder, or relative
    to the layout ``root``. When the reference has no suffix the layout's suffix
    is tried as well.
    """
    layout = Path(template_path)
    raw = Path(reference)
    if raw.is_absolute():
        bases = [raw]
    else:
        bases = [layout.parent / raw]
        if root is not None:
            bases.append(Path(root) / raw)
    candidates: list[Path] = []
    for candidate in bases:
        candidates.append(candidate)
        if not candidate.suffix and layout.suffix:
            candidates.append(candidate.with_name(candidate.name + layout.suffix))
    for entry in candidates:
        try:
            if entry.is_file():
                return entry
        except (OSError, ValueError):
            continue
    return None


def partial_references(context: Mapping[str, Any]) -> dict[str, str]:
    """Return the string-valued partial references carried by ``context``."""
    partials = context.get("partials")
    if not isinstance(partials, Mapping):
        return {}
    return {str(name): value for name, value in partials.items() if isinstance(value, str)}


def load_partial_source(
    reference: str, template_path: str | Path, root: str | Path | None = None
) -> tuple[str, str | None]:
    """Return ``(source, filename)`` for a partial reference.

    Unresolvable references are treated as inline template source.
    """
    # Multi-line references cannot be paths.
    if "\n" in reference:
        return reference, None
    path = resolve_partial_path(reference, template_path, root)
    if path is None:
        return reference, None
    return read_template_source(path), str(path)


__all__ = [
    "Renderer",
    "TemplateSourceError",
    "load_partial_source",
    "partial_references",
    "read_template_source",
    "resolve_partial_path",
]
