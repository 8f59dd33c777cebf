"""User interfaces for texwatch."""
