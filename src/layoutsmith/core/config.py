"""Options accepted by the layout pipeline.

`engine` (`str`)
: Name of the template engine used to render layouts. Required; must match a
  registered engine (see `layoutsmith engines`).

`directory` (`str`)
: Directory holding the layout templates, relative to the project root.
  Defaults to `layouts`.

`default` (`str | None`)
: Layout applied to files that do not name one themselves.

`pattern` (`str | list[str] | None`)
: Glob pattern(s) restricting which files receive the default layout. Prefix a
  pattern with `!` to exclude matches. Files naming a layout explicitly are
  always rendered.

`rename` (`bool`)
: Replace the extension of rendered files with `.html`.

`layout_key` (`str`)
: Field of each file holding its layout name. Defaults to `layout`.

`partials` (`str | dict[str, str] | None`)
: Directory of partial templates, or a ready mapping of partial name to
  template reference.

`partial_extension` (`str | None`)
: Suffix identifying partial files inside the partials directory. Defaults to
  the suffixes known to the engine.

`layout_extension` (`str`)
: Suffix appended to layout names lacking one.

`concurrency` (`int`)
: Maximum number of files rendered at once.

`expose_renderer` (`Callable | None`)
: Called once with the engine instance, allowing filters or globals to be
  registered before any file is rendered.

Any other option is forwarded verbatim to every layout as template data.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from layoutsmith.engines import is_supported

from .exceptions import ConfigError


DEFAULT_DIRECTORY = "layouts"
DEFAULT_LAYOUT_KEY = "layout"
DEFAULT_CONCURRENCY = 8

_ALIASES = {
    "layoutKey": "layout_key",
    "partialExtension": "partial_extension",
    "layoutExtension": "layout_extension",
    "exposeRenderer": "expose_renderer",
}

KNOWN_OPTIONS: frozenset[str] = frozenset(
    {
        "engine",
        "directory",
        "default",
        "pattern",
        "rename",
        "layout_key",
        "partials",
        "partial_extension",
        "layout_extension",
        "concurrency",
        "expose_renderer",
        *_ALIASES,
    }
)


class LayoutsConfig(BaseModel):
    """Resolved options for one pipeline instance."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    engine: str
    directory: str = DEFAULT_DIRECTORY
    default: str | None = None
    pattern: tuple[str, ...] = ()
    rename: bool = False
    layout_key: str = DEFAULT_LAYOUT_KEY
    partials: str | dict[str, Any] | None = None
    partial_extension: str | None = None
    layout_extension: str = ""
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    expose_renderer: Callable[[Any], Any] | None = None
    params: dict[str, Any] = Field(default_factory=dict)

    @field_validator("engine")
    @classmethod
    def _normalise_engine(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("pattern", mode="before")
    @classmethod
    def _coerce_pattern(cls, value: Any) -> Any:
        if value is None or value == "":
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("directory", mode="before")
    @classmethod
    def _default_directory(cls, value: Any) -> Any:
        return value or DEFAULT_DIRECTORY

    @field_validator("layout_key", mode="before")
    @classmethod
    def _default_layout_key(cls, value: Any) -> Any:
        return value or DEFAULT_LAYOUT_KEY

    @field_validator("layout_extension", mode="before")
    @classmethod
    def _default_layout_extension(cls, value: Any) -> Any:
        return value or ""

    @field_validator("default", "partial_extension", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return value or None

    @classmethod
    def from_options(cls, options: str | Mapping[str, Any] | None) -> LayoutsConfig:
        """Build a config from raw plugin options.

        A bare string names the engine. Keys outside :data:`KNOWN_OPTIONS`
        become template parameters.
        """
        if isinstance(options, str):
            options = {"engine": options}
        raw = dict(options or {})

        engine = raw.get("engine")
        if not engine:
            raise ConfigError('"engine" option required')
        if not isinstance(engine, str) or not is_supported(engine):
            raise ConfigError(f'Unknown template engine: "{engine}"')

        known: dict[str, Any] = {}
        params: dict[str, Any] = {}
        for key, value in raw.items():
            if key in KNOWN_OPTIONS:
                name = _ALIASES.get(key, key)
                if name in known:
                    raise ConfigError(f'Option "{name}" given more than once (as "{key}")')
                known[name] = value
            else:
                params[key] = value
        known["params"] = params

        try:
            return cls.model_validate(known)
        except ValidationError as exc:
            raise ConfigError(f"Invalid layout options: {exc}") from exc


__all__ = [
    "DEFAULT_CONCURRENCY",
    "DEFAULT_DIRECTORY",
    "DEFAULT_LAYOUT_KEY",
    "KNOWN_OPTIONS",
    "LayoutsConfig",
]
