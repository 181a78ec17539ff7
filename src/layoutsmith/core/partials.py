"""Discovery of partial templates stored on disk."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from pathlib import Path

from .exceptions import PartialLoadError


logger = logging.getLogger(__name__)


def _normalise_extension(value: str) -> str:
    value = value.strip()
    if value and not value.startswith("."):
        value = f".{value}"
    return value


def normalise_partial_key(relative: Path | str, extension: str | None = None) -> str:
    """Return the logical partial name for a path relative to the partials root."""
    posix = Path(relative).as_posix()
    if extension and posix.endswith(extension):
        return posix[: -len(extension)]
    return Path(posix).with_suffix("").as_posix()


def read_partials(
    directory: str | Path,
    extensions: str | Iterable[str],
    *,
    root: str | Path | None = None,
) -> dict[str, str]:
    """Map partial names to the absolute paths of the files under ``directory``.

    Only files ending with one of ``extensions`` are considered. Names are the
    path relative to ``directory`` without the extension.
    """
    base = Path(directory)
    if root is not None and not base.is_absolute():
        base = Path(root) / base
    if isinstance(extensions, str):
        extensions = [extensions]
    suffixes = sorted(
        {_normalise_extension(ext) for ext in extensions if ext}, key=len, reverse=True
    )

    if not base.is_dir():
        raise PartialLoadError(f"Unable to read partials directory '{base}'.")
    try:
        entries = sorted(base.rglob("*"))
    except OSError as exc:
        raise PartialLoadError(f"Unable to read partials directory '{base}': {exc}") from exc

    partials: dict[str, str] = {}
    for path in entries:
        if not path.is_file():
            continue
        suffix = next((ext for ext in suffixes if path.name.endswith(ext)), None)
        if suffix is None:
            continue
        name = normalise_partial_key(path.relative_to(base), suffix)
        partials[name] = str(path.resolve())
        logger.debug("registered partial %s -> %s", name, path)
    return partials


__all__ = ["normalise_partial_key", "read_partials"]
