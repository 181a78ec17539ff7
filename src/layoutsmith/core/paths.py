"""Helpers mapping layout identifiers onto template paths."""

from __future__ import annotations

import os.path
from pathlib import Path


def layout_filename(layout: str | None, default: str | None, extension: str = "") -> str:
    """Return the layout identifier with its file extension.

    The default replaces an empty ``layout``. When the last path segment has no
    dot, ``"." + extension`` is appended, even if ``extension`` is empty.
    """
    candidate = layout or default or ""
    if "." not in candidate.split("/")[-1]:
        candidate = f"{candidate}.{extension}"
    return candidate


def layout_directory(directory: str | Path = "layouts", root: str | Path | None = None) -> str:
    """Return the normalised directory holding the layouts."""
    base = Path(directory)
    if root is not None and not base.is_absolute():
        base = Path(root) / base
    return os.path.normpath(base)


def resolve_layout_path(
    layout: str | None,
    default: str | None,
    extension: str = "",
    *,
    directory: str | Path = "layouts",
    root: str | Path | None = None,
) -> str:
    """Return the template path used as cache key for a layout.

    Identifiers naming the same file (``blog/../post`` and ``post``) resolve
    to the same key.
    """
    base = layout_directory(directory, root)
    return os.path.normpath(os.path.join(base, layout_filename(layout, default, extension)))


__all__ = ["layout_directory", "layout_filename", "resolve_layout_path"]
