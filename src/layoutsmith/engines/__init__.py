"""Registry of template engines addressable by name."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from layoutsmith.core.exceptions import ConfigError

from .base import Renderer, TemplateSourceError
from .jinja import JinjaRenderer
from .latex import LatexRenderer
from .mustache import MustacheRenderer


# Factories receive keyword options such as the layout ``directory``.
RendererFactory = Callable[..., Renderer]

_ENGINES: dict[str, RendererFactory] = {
    "jinja2": JinjaRenderer,
    "jinja": JinjaRenderer,
    "latex": LatexRenderer,
    "mustache": MustacheRenderer,
}


def register_engine(name: str, factory: RendererFactory, *, replace: bool = False) -> None:
    """Make a renderer factory available under ``name``."""
    key = name.strip().lower()
    if not key:
        raise ValueError("Engine name must be a non-empty string.")
    if key in _ENGINES and not replace:
        raise ValueError(f"Template engine '{key}' is already registered.")
    _ENGINES[key] = factory


def is_supported(name: str) -> bool:
    return str(name).strip().lower() in _ENGINES


def available_engines() -> list[str]:
    """Return the sorted list of registered engine names."""
    return sorted(_ENGINES)


def get_renderer(name: str, **options: Any) -> Renderer:
    """Instantiate the renderer registered under ``name`` with ``options``."""
    key = str(name).strip().lower()
    factory = _ENGINES.get(key)
    if factory is None:
        raise ConfigError(f'Unknown template engine: "{name}"')
    return factory(**options)


__all__ = [
    "JinjaRenderer",
    "LatexRenderer",
    "MustacheRenderer",
    "Renderer",
    "RendererFactory",
    "TemplateSourceError",
    "available_engines",
    "get_renderer",
    "is_supported",
    "register_engine",
]
