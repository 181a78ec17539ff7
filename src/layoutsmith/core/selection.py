"""Selection of the files that receive a layout."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
import logging
from pathlib import Path
from typing import Any

from .files import FileCollection, FileRecord, is_text, stringify_contents
from .paths import resolve_layout_path


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Selection:
    """Selected files partitioned into template seeds and followers.

    ``templates`` maps each resolved template path to the first file that
    resolved to it. ``matches`` holds every other selected file.
    """

    templates: dict[str, str] = field(default_factory=dict)
    matches: dict[str, FileRecord] = field(default_factory=dict)

    @property
    def seeds(self) -> list[str]:
        return list(self.templates.values())

    @property
    def followers(self) -> list[str]:
        return list(self.matches)

    def __len__(self) -> int:
        return len(self.templates) + len(self.matches)


def matches_pattern(key: str, patterns: Sequence[str]) -> bool:
    """Return whether ``key`` matches the glob ``patterns``.

    Patterns prefixed with ``!`` exclude keys matched by the others.
    """
    positives = [pattern for pattern in patterns if not pattern.startswith("!")]
    negatives = [pattern[1:] for pattern in patterns if pattern.startswith("!")]
    if positives and not any(fnmatchcase(key, pattern) for pattern in positives):
        return False
    return not any(fnmatchcase(key, pattern) for pattern in negatives)


def explicit_layout(record: Mapping[str, Any], layout_key: str) -> str | None:
    """Return the layout named by the file itself, if any."""
    value = record.get(layout_key)
    if isinstance(value, str) and value:
        return value
    return None


def is_selected(
    key: str,
    record: Mapping[str, Any],
    *,
    patterns: Sequence[str] = (),
    default: str | None = None,
    layout_key: str = "layout",
) -> bool:
    """Return whether ``record`` should be rendered through a layout."""
    if not is_text(record.get("contents", "")):
        return False
    if record.get(layout_key) is False:
        return False
    if explicit_layout(record, layout_key):
        return True
    if not default:
        return False
    return not patterns or matches_pattern(key, patterns)


def select_files(
    files: FileCollection,
    *,
    patterns: Iterable[str] = (),
    default: str | None = None,
    layout_key: str = "layout",
    layout_extension: str = "",
    directory: str | Path = "layouts",
    root: str | Path | None = None,
) -> Selection:
    """Scan ``files`` once and partition the selected ones by template path."""
    patterns = tuple(patterns)
    selection = Selection()
    for key in list(files):
        record = files[key]
        if not is_selected(key, record, patterns=patterns, default=default, layout_key=layout_key):
            continue

        logger.debug("stringifying file: %s", key)
        stringify_contents(record)
        template = resolve_layout_path(
            explicit_layout(record, layout_key),
            default,
            layout_extension,
            directory=directory,
            root=root,
        )
        if template not in selection.templates:
            logger.debug("found new template: %s", template)
            selection.templates[template] = key
        else:
            selection.matches[key] = record
    return selection


__all__ = [
    "Selection",
    "explicit_layout",
    "is_selected",
    "matches_pattern",
    "select_files",
]
