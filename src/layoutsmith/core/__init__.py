"""Core building blocks of the layout pipeline.

Import :mod:`layoutsmith.core.pipeline` for the :class:`Layouts` driver; this
package module only re-exports the leaf helpers that do not depend on the
engine registry.
"""

from __future__ import annotations

from .context import build_context
from .exceptions import (
    ConfigError,
    LayoutError,
    PartialLoadError,
    RenderError,
    TemplateLoadError,
)
from .paths import layout_filename, resolve_layout_path


__all__ = [
    "ConfigError",
    "LayoutError",
    "PartialLoadError",
    "RenderError",
    "TemplateLoadError",
    "build_context",
    "layout_filename",
    "resolve_layout_path",
]
