"""File collection helpers.

A file collection maps a key (a POSIX-style relative path) onto a mutable
record. Each record carries ``contents`` plus arbitrary metadata fields.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
import logging
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from .exceptions import LayoutError


logger = logging.getLogger(__name__)

FileRecord = MutableMapping[str, Any]
FileCollection = MutableMapping[str, FileRecord]

RENAMED_EXTENSION = ".html"


def is_text(contents: Any) -> bool:
    """Return whether ``contents`` holds UTF-8 text."""
    if isinstance(contents, str):
        return True
    if isinstance(contents, (bytes, bytearray, memoryview)):
        try:
            bytes(contents).decode("utf-8")
        except UnicodeDecodeError:
            return False
        return True
    return False


def stringify_contents(record: FileRecord) -> str:
    """Decode ``record["contents"]`` to text in place and return it."""
    contents = record.get("contents", "")
    if isinstance(contents, (bytes, bytearray, memoryview)):
        contents = bytes(contents).decode("utf-8")
    elif not isinstance(contents, str):
        contents = str(contents)
    record["contents"] = contents
    return contents


def apply(files: FileCollection, key: str, patch: Mapping[str, Any]) -> FileRecord:
    """Merge ``patch`` into the record stored under ``key``."""
    record = files[key]
    record.update(patch)
    return record


def renamed_key(key: str, extension: str = RENAMED_EXTENSION) -> str:
    """Return ``key`` with its extension replaced by ``extension``."""
    path = PurePosixPath(key)
    return str(path.with_name(path.stem + extension))


def rename(files: FileCollection, old_key: str, new_key: str) -> FileRecord:
    """Move the record stored under ``old_key`` to ``new_key``."""
    record = files.pop(old_key)
    files[new_key] = record
    return record


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split a leading YAML front matter block from ``source``."""
    candidate = source.lstrip("\ufeff")
    prefix_len = len(source) - len(candidate)
    lines = candidate.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, source

    front_matter_lines: list[str] = []
    closing_index: int | None = None
    for idx, line in enumerate(lines[1:], start=1):
        stripped = line.strip()
        if stripped in {"---", "..."}:
            closing_index = idx
            break
        front_matter_lines.append(line)

    if closing_index is None:
        return {}, source

    raw_block = "\n".join(front_matter_lines)
    try:
        metadata = yaml.safe_load(raw_block) or {}
    except yaml.YAMLError:
        return {}, source

    if not isinstance(metadata, dict):
        metadata = {}

    body = "\n".join(lines[closing_index + 1 :])
    if source.endswith("\n"):
        body += "\n"

    prefix = source[:prefix_len]
    return metadata, prefix + body


def read_source_tree(root: Path) -> dict[str, dict[str, Any]]:
    """Load every file below ``root`` into a file collection.

    Text files have their front matter split into fields; ``contents`` is
    always stored as bytes.
    """
    if not root.is_dir():
        raise LayoutError(f"Source directory does not exist: {root}")
    files: dict[str, dict[str, Any]] = {}
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        key = path.relative_to(root).as_posix()
        payload = path.read_bytes()
        record: dict[str, Any] = {}
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError:
            record["contents"] = payload
        else:
            metadata, body = split_front_matter(text)
            record.update(metadata)
            record["contents"] = body.encode("utf-8")
        files[key] = record
        logger.debug("read source file: %s", key)
    return files


def write_output_tree(files: Mapping[str, Mapping[str, Any]], destination: Path) -> list[Path]:
    """Write the contents of each record below ``destination``."""
    written: list[Path] = []
    for key, record in files.items():
        target = destination / Path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        contents = record.get("contents", b"")
        if isinstance(contents, str):
            target.write_text(contents, encoding="utf-8")
        else:
            target.write_bytes(bytes(contents))
        written.append(target)
    return written


__all__ = [
    "RENAMED_EXTENSION",
    "FileCollection",
    "FileRecord",
    "apply",
    "is_text",
    "read_source_tree",
    "rename",
    "renamed_key",
    "split_front_matter",
    "stringify_contents",
    "write_output_tree",
]
