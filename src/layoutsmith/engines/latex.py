"""Jinja renderer configured with LaTeX-friendly delimiters."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment
from pylatexenc.latexencode import unicode_to_latex

from .jinja import JinjaRenderer


_BASIC_LATEX_ESCAPE_MAP = {
    "&": r"\&",
    "%": r"\%",
    "#": r"\#",
    "$": r"\$",
    "_": r"\_",
    "^": r"\^",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "\\": r"\textbackslash{}",
}


def escape_latex_chars(text: Any, *, legacy_accents: bool = False) -> str:
    """Escape LaTeX special characters, optionally encoding accents as macros."""
    if text is None:
        return ""
    text = str(text)
    if not text:
        return text
    escaped = "".join(_BASIC_LATEX_ESCAPE_MAP.get(char, char) for char in text)
    if legacy_accents:
        return unicode_to_latex(escaped, non_ascii_only=True, unknown_char_warning=False)
    return escaped


class LatexRenderer(JinjaRenderer):
    """Render ``.tex`` layouts using ``\\VAR{}`` and ``\\BLOCK{}`` delimiters."""

    name = "latex"
    extensions: tuple[str, ...] = (".tex", ".latex")

    def __init__(self, directory: str | Path | None = None, **environment_options: Any) -> None:
        options: dict[str, Any] = {
            "trim_blocks": True,
            "lstrip_blocks": True,
            "block_start_string": r"\BLOCK{",
            "block_end_string": "}",
            "variable_start_string": r"\VAR{",
            "variable_end_string": "}",
            "comment_start_string": r"\#{",
            "comment_end_string": "}",
        }
        options.update(environment_options)
        super().__init__(directory, **options)

    def configure(self, environment: Environment) -> None:
        environment.filters.setdefault("latex_escape", escape_latex_chars)
        environment.filters.setdefault("escape_latex", escape_latex_chars)
        super().configure(environment)


__all__ = ["LatexRenderer", "escape_latex_chars"]
