"""Logic-less mustache renderer.

Supported tags: ``{{name}}`` (HTML-escaped), ``{{{name}}}`` and ``{{& name}}``
(raw), dotted names, ``{{.}}``, sections ``{{#name}}...{{/name}}``, inverted
sections ``{{^name}}...{{/name}}``, comments ``{{! ...}}`` and partials
``{{> name}}``. Standalone-line whitespace stripping is not performed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
import re
from threading import Lock
from typing import Any, Union

from .base import (
    TemplateSourceError,
    load_partial_source,
    partial_references,
    read_template_source,
)


_TAG_RE = re.compile(
    r"\{\{\{\s*(?P<raw>[^\}]+?)\s*\}\}\}"
    r"|\{\{\s*(?P<sigil>[#^/!>&]?)\s*(?P<name>.*?)\s*\}\}",
    re.DOTALL,
)
_MISSING = object()


@dataclass(slots=True)
class Variable:
    name: str
    escape: bool = True


@dataclass(slots=True)
class Partial:
    name: str


@dataclass(slots=True)
class Section:
    name: str
    inverted: bool = False
    children: list[Node] = field(default_factory=list)


Node = Union[str, Variable, Partial, Section]


def compile_template(source: str, *, origin: str = "<string>") -> list[Node]:
    """Parse ``source`` into a node tree."""
    root: list[Node] = []
    stack: list[Section] = []
    current = root
    position = 0
    for match in _TAG_RE.finditer(source):
        if match.start() > position:
            current.append(source[position : match.start()])
        position = match.end()

        raw = match.group("raw")
        if raw is not None:
            current.append(Variable(raw.strip(), escape=False))
            continue

        sigil = match.group("sigil")
        name = match.group("name").strip()
        if sigil == "!":
            continue
        if not name:
            raise TemplateSourceError(f"Empty tag at offset {match.start()} in {origin}.")
        if sigil in {"#", "^"}:
            section = Section(name, inverted=sigil == "^")
            current.append(section)
            stack.append(section)
            current = section.children
        elif sigil == "/":
            if not stack or stack[-1].name != name:
                raise TemplateSourceError(f"Unexpected closing tag '{name}' in {origin}.")
            stack.pop()
            current = stack[-1].children if stack else root
        elif sigil == ">":
            current.append(Partial(name))
        else:
            current.append(Variable(name, escape=sigil != "&"))

    if stack:
        raise TemplateSourceError(f"Unclosed section '{stack[-1].name}' in {origin}.")
    if position < len(source):
        current.append(source[position:])
    return root


def _lookup(contexts: Sequence[Any], path: str) -> Any:
    if path == ".":
        return contexts[-1] if contexts else _MISSING
    head, *rest = path.split(".")
    for context in reversed(contexts):
        value = _child(context, head)
        if value is _MISSING:
            continue
        for part in rest:
            value = _child(value, part)
            if value is _MISSING:
                return _MISSING
        return value
    return _MISSING


def _child(current: Any, name: str) -> Any:
    if isinstance(current, Mapping):
        return current[name] if name in current else _MISSING
    return getattr(current, name, _MISSING)


# Same table as mustache.js.
_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        "\"": "&quot;",
        "'": "&#39;",
        "/": "&#x2F;",
        "`": "&#x60;",
        "=": "&#x3D;",
    }
)


def escape_html(text: str) -> str:
    """Escape ``text`` the way mustache escapes ``{{name}}`` tags."""
    return text.translate(_HTML_ESCAPES)


def _stringify(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def render_nodes(
    nodes: Sequence[Node],
    contexts: list[Any],
    partial_loader: Callable[[str], list[Node] | None],
) -> str:
    """Render a compiled node tree against a context stack."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
        elif isinstance(node, Variable):
            text = _stringify(_lookup(contexts, node.name))
            parts.append(escape_html(text) if node.escape else text)
        elif isinstance(node, Partial):
            partial = partial_loader(node.name)
            if partial is not None:
                parts.append(render_nodes(partial, contexts, partial_loader))
        else:
            parts.append(_render_section(node, contexts, partial_loader))
    return "".join(parts)


def _render_section(
    node: Section,
    contexts: list[Any],
    partial_loader: Callable[[str], list[Node] | None],
) -> str:
    value = _lookup(contexts, node.name)
    is_list = isinstance(value, (list, tuple))
    empty = value is _MISSING or not value

    if node.inverted:
        return render_nodes(node.children, contexts, partial_loader) if empty else ""
    if empty:
        return ""
    if is_list:
        return "".join(
            render_nodes(node.children, [*contexts, item], partial_loader) for item in value
        )
    if value is True:
        return render_nodes(node.children, contexts, partial_loader)
    return render_nodes(node.children, [*contexts, value], partial_loader)


class MustacheRenderer:
    """Render layouts written in mustache syntax.

    Compiled layouts are cached by path and partials by their resolved file or
    inline source.
    """

    name = "mustache"
    extensions: tuple[str, ...] = (".mustache", ".hbs", ".handlebars", ".html", ".htm")

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory) if directory is not None else None
        self._templates: dict[str, list[Node]] = {}
        self._partials: dict[tuple[str, str], list[Node]] = {}
        self._lock = Lock()

    def load(self, template_path: str) -> list[Node]:
        """Return the compiled layout at ``template_path``."""
        with self._lock:
            cached = self._templates.get(template_path)
        if cached is not None:
            return cached
        nodes = compile_template(read_template_source(template_path), origin=template_path)
        with self._lock:
            return self._templates.setdefault(template_path, nodes)

    def _partial_loader(
        self, template_path: str, references: Mapping[str, str]
    ) -> Callable[[str], list[Node] | None]:
        def _load(name: str) -> list[Node] | None:
            reference = references.get(name)
            if reference is None:
                return None
            key = (str(Path(template_path).parent), reference)
            with self._lock:
                cached = self._partials.get(key)
            if cached is not None:
                return cached
            source, filename = load_partial_source(reference, template_path, self.directory)
            nodes = compile_template(source, origin=filename or f"partial '{name}'")
            with self._lock:
                return self._partials.setdefault(key, nodes)

        return _load

    def render(self, template_path: str, context: Mapping[str, Any]) -> str:
        nodes = self.load(template_path)
        loader = self._partial_loader(template_path, partial_references(context))
        return render_nodes(nodes, [context], loader)


__all__ = ["MustacheRenderer", "compile_template", "escape_html", "render_nodes"]
