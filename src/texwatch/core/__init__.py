"""Core configuration, document discovery and script generation."""
