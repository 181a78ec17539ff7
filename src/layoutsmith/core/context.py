"""Render context assembly."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def copy_containers(value: Any) -> Any:
    """Copy nested mappings, lists and tuples; share every other value."""
    if isinstance(value, Mapping):
        return {key: copy_containers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [copy_containers(item) for item in value]
    if isinstance(value, tuple):
        return tuple(copy_containers(item) for item in value)
    return value


def build_context(
    params: Mapping[str, Any],
    metadata: Mapping[str, Any] | None,
    data: Mapping[str, Any],
) -> dict[str, Any]:
    """Return a fresh render context.

    Precedence from lowest to highest: ``params``, site ``metadata``, then the
    file's own ``data``. Containers inside ``params`` are copied so a render
    cannot alter the next one; other objects (clients, locks) are passed by
    reference.
    """
    context: dict[str, Any] = copy_containers(params)
    if metadata:
        context.update(metadata)
    context.update(data)
    return context


__all__ = ["build_context", "copy_containers"]
