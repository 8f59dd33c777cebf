"""High-level orchestration API."""

from __future__ import annotations

from .service import PreparedRun, WatchRequest, WatchService


__all__ = ["PreparedRun", "WatchRequest", "WatchService"]
