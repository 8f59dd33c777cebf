"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from collections.abc import Sequence

import click


PASSTHROUGH_SEPARATOR = "--"
PASSTHROUGH_META_KEY = "texwatch.passthrough"


def split_passthrough(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split argv at the first ``--``; the tail is never parsed."""
    tokens = list(args)
    if PASSTHROUGH_SEPARATOR not in tokens:
        return tokens, []
    index = tokens.index(PASSTHROUGH_SEPARATOR)
    return tokens[:index], tokens[index + 1 :]


def passthrough_args(ctx: click.Context) -> list[str]:
    """Return the raw arguments stashed on the context by the command class."""
    return list(ctx.meta.get(PASSTHROUGH_META_KEY, []))
