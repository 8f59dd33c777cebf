"""Adapters around host tools (container engines, git)."""
