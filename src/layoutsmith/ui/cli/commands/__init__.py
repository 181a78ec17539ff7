"""Command implementations for the layoutsmith CLI."""

from __future__ import annotations

from .build import build
from .engines import engines


__all__ = ["build", "engines"]
