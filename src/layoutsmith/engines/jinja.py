"""Jinja-backed renderers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from threading import Lock
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    FunctionLoader,
    TemplateNotFound,
    TemplateSyntaxError,
)

from .base import TemplateSourceError, load_partial_source, partial_references


class JinjaRenderer:
    """Render layouts with Jinja2.

    Templates load relative to the layout ``directory`` so a layout in a
    subfolder can extend or include layouts at the root. Layouts outside that
    directory load relative to their own folder. One environment is built per
    search root and partial set; Jinja caches compiled templates inside each
    environment.
    """

    name = "jinja2"
    extensions: tuple[str, ...] = (".html", ".htm", ".j2", ".jinja", ".jinja2", ".njk")

    def __init__(self, directory: str | Path | None = None, **environment_options: Any) -> None:
        self.directory = Path(directory) if directory is not None else None
        self.environment_options: dict[str, Any] = {
            "autoescape": False,
            "keep_trailing_newline": True,
        }
        self.environment_options.update(environment_options)
        self.filters: dict[str, Callable[..., Any]] = {}
        self.globals: dict[str, Any] = {}
        self._environments: dict[tuple[str, tuple[tuple[str, str], ...]], Environment] = {}
        self._lock = Lock()

    def add_filter(self, name: str, func: Callable[..., Any]) -> None:
        """Register a filter applied to every environment built afterwards."""
        self.filters[name] = func

    def add_global(self, name: str, value: Any) -> None:
        """Register a global applied to every environment built afterwards."""
        self.globals[name] = value

    def configure(self, environment: Environment) -> None:
        """Hook for subclasses to customise freshly built environments."""
        environment.filters.update(self.filters)
        environment.globals.update(self.globals)

    def locate(self, template_path: Path) -> tuple[Path, str]:
        """Return the search root and the template name inside it."""
        if self.directory is not None:
            try:
                relative = template_path.relative_to(self.directory)
            except ValueError:
                pass
            else:
                return self.directory, relative.as_posix()
        return template_path.parent, template_path.name

    def environment_for(
        self, search_root: Path, template_path: Path, partials: Mapping[str, str]
    ) -> Environment:
        """Return the cached environment loading templates from ``search_root``."""
        key = (str(search_root), tuple(sorted(partials.items())))
        with self._lock:
            environment = self._environments.get(key)
            if environment is None:
                environment = self._build_environment(search_root, template_path, dict(partials))
                self._environments[key] = environment
        return environment

    def _build_environment(
        self, search_root: Path, template_path: Path, partials: dict[str, str]
    ) -> Environment:
        # Relative partial references resolve from the search root.
        anchor = search_root / template_path.name

        def _load_partial(name: str) -> str | None:
            reference = partials.get(name)
            if reference is None:
                return None
            source, _ = load_partial_source(reference, anchor, self.directory)
            return source

        loader = ChoiceLoader([FunctionLoader(_load_partial), FileSystemLoader(str(search_root))])
        environment = Environment(loader=loader, **self.environment_options)
        self.configure(environment)
        return environment

    def render(self, template_path: str, context: Mapping[str, Any]) -> str:
        path = Path(template_path)
        search_root, name = self.locate(path)
        environment = self.environment_for(search_root, path, partial_references(context))
        try:
            template = environment.get_template(name)
        except TemplateNotFound as exc:
            if exc.name == name:
                raise TemplateSourceError(
                    f"Layout template '{template_path}' does not exist."
                ) from exc
            raise TemplateSourceError(f"Template '{exc.name}' could not be found.") from exc
        except TemplateSyntaxError as exc:
            raise TemplateSourceError(
                f"Invalid layout template '{template_path}' (line {exc.lineno}): {exc.message}"
            ) from exc
        try:
            return template.render(dict(context))
        except TemplateNotFound as exc:
            raise TemplateSourceError(f"Template '{exc.name}' could not be found.") from exc
        except TemplateSyntaxError as exc:
            raise TemplateSourceError(f"Invalid template '{exc.name}': {exc.message}") from exc


__all__ = ["JinjaRenderer"]
