"""Apply named layout templates to in-memory file collections."""

from __future__ import annotations

from .core.config import LayoutsConfig
from .core.context import build_context
from .core.exceptions import (
    ConfigError,
    LayoutError,
    PartialLoadError,
    RenderError,
    TemplateLoadError,
)
from .core.partials import read_partials
from .core.paths import resolve_layout_path
from .core.pipeline import Layouts, layouts
from .core.selection import Selection, select_files
from .engines import available_engines, get_renderer, register_engine


__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "LayoutError",
    "Layouts",
    "LayoutsConfig",
    "PartialLoadError",
    "RenderError",
    "Selection",
    "TemplateLoadError",
    "__version__",
    "available_engines",
    "build_context",
    "get_renderer",
    "layouts",
    "read_partials",
    "register_engine",
    "resolve_layout_path",
    "select_files",
]
