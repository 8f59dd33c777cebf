"""Command implementations for the texwatch CLI."""

from __future__ import annotations

from .watch import watch


__all__ = ["watch"]
