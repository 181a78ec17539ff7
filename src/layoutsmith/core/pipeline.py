"""Two-phase layout rendering pipeline.

Selected files are split into one *seed* per distinct template path and the
*followers* sharing an already seeded template. Seeds render first so each
engine loads and caches every layout exactly once, with any loading failure
attributed to a single file. Followers render only once every seed succeeded.

Renaming happens after a successful render: a file whose render fails stays
under its original key.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
import logging
from pathlib import Path
from typing import Any

from layoutsmith.engines import Renderer, TemplateSourceError, get_renderer

from .config import LayoutsConfig
from .context import build_context
from .diagnostics import DiagnosticEmitter, ensure_emitter, record_event
from .exceptions import LayoutError, RenderError, TemplateLoadError
from .files import FileCollection, FileRecord, apply, rename, renamed_key
from .partials import read_partials
from .paths import layout_directory, resolve_layout_path
from .selection import Selection, explicit_layout, select_files


logger = logging.getLogger(__name__)


class Layouts:
    """Apply layout templates to a file collection.

    Options are resolved once: the engine is looked up, ``expose_renderer`` is
    invoked and a partials directory is scanned. Each call then performs one
    run over a file collection.
    """

    def __init__(
        self,
        options: str | Mapping[str, Any] | LayoutsConfig | None,
        *,
        root: str | Path | None = None,
        emitter: DiagnosticEmitter | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        if isinstance(options, LayoutsConfig):
            self.config = options
        else:
            self.config = LayoutsConfig.from_options(options)
        self.root = Path(root) if root is not None else None
        self.emitter = ensure_emitter(emitter)
        if renderer is None:
            directory = layout_directory(self.config.directory, self.root)
            renderer = get_renderer(self.config.engine, directory=directory)
        self.renderer = renderer
        if self.config.expose_renderer is not None:
            self.config.expose_renderer(self.renderer)
        self.params = self._resolve_params()

    def _resolve_params(self) -> dict[str, Any]:
        params = dict(self.config.params)
        partials = self.config.partials
        if not partials:
            return params
        if isinstance(partials, str):
            extensions = self.config.partial_extension or self.renderer.extensions
            params["partials"] = read_partials(partials, extensions, root=self.root)
        else:
            params["partials"] = dict(partials)
        return params

    def layout_name(self, record: Mapping[str, Any]) -> str | None:
        """Return the layout applying to ``record`` (explicit or default)."""
        return explicit_layout(record, self.config.layout_key) or self.config.default

    def template_path(self, record: Mapping[str, Any]) -> str:
        """Return the resolved template path for ``record``."""
        return resolve_layout_path(
            explicit_layout(record, self.config.layout_key),
            self.config.default,
            self.config.layout_extension,
            directory=self.config.directory,
            root=self.root,
        )

    def select(self, files: FileCollection) -> Selection:
        """Partition the files of one run into seeds and followers."""
        return select_files(
            files,
            patterns=self.config.pattern,
            default=self.config.default,
            layout_key=self.config.layout_key,
            layout_extension=self.config.layout_extension,
            directory=self.config.directory,
            root=self.root,
        )

    def render_file(
        self,
        files: FileCollection,
        key: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Render the file stored under ``key`` and return its final key."""
        logger.debug("converting file: %s", key)
        record: FileRecord = files[key]
        layout = self.layout_name(record)
        template = self.template_path(record)
        try:
            context = build_context(self.params, metadata, record)
            rendered = self.renderer.render(template, context)
        except TemplateSourceError as exc:
            raise TemplateLoadError(key, layout, exc) from exc
        except Exception as exc:
            raise RenderError(key, layout, exc) from exc

        target = key
        if self.config.rename:
            target = renamed_key(key)
            if target != key:
                rename(files, key, target)
                logger.debug("renamed file to: %s", target)
                record_event(self.emitter, "layout_renamed", {"source": key, "target": target})

        apply(files, target, {"contents": rendered.encode("utf-8")})
        logger.debug("converted file: %s", target)
        record_event(self.emitter, "layout_rendered", {"file": target, "layout": layout})
        return target

    def run_all(
        self,
        keys: Iterable[str],
        files: FileCollection,
        metadata: Mapping[str, Any] | None = None,
    ) -> list[str]:
        """Render ``keys`` concurrently, raising the first failure observed.

        Once a render fails no further renders are started; renders already in
        progress finish before the error propagates.
        """
        keys = list(keys)
        if not keys:
            return []
        workers = min(self.config.concurrency, len(keys))
        rendered: list[str] = []
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="layoutsmith") as executor:
            futures = {executor.submit(self.render_file, files, key, metadata): key for key in keys}
            for future in as_completed(futures):
                try:
                    rendered.append(future.result())
                except Exception:
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise
        return rendered

    def __call__(
        self,
        files: FileCollection,
        metadata: Mapping[str, Any] | None = None,
    ) -> Selection:
        """Render every selected file of ``files`` in place."""
        selection = self.select(files)
        for template, key in selection.templates.items():
            record_event(
                self.emitter, "layout_template_seeded", {"template": template, "file": key}
            )

        record_event(
            self.emitter, "layout_phase", {"phase": "templates", "count": len(selection.templates)}
        )
        try:
            self.run_all(selection.templates.values(), files, metadata)
        except LayoutError:
            if selection.matches:
                self.emitter.warning(
                    f"Skipped {len(selection.matches)} file(s) sharing a layout after a failure."
                )
            raise

        record_event(
            self.emitter, "layout_phase", {"phase": "matches", "count": len(selection.matches)}
        )
        self.run_all(selection.matches, files, metadata)
        return selection


def layouts(
    options: str | Mapping[str, Any] | LayoutsConfig | None,
    **kwargs: Any,
) -> Layouts:
    """Return a configured :class:`Layouts` pipeline."""
    return Layouts(options, **kwargs)


__all__ = ["Layouts", "layouts"]
