"""Text helpers."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"[^\w\-]+")
_DASHES_RE = re.compile(r"-{2,}")


def create_slug(value: str) -> str:
    """URL-safe slug of a strategy name, e.g. "Archer Full" -> "archer-full"."""
    slug = _WHITESPACE_RE.sub("-", value.lower().strip())
    slug = _NON_WORD_RE.sub("", slug)
    return _DASHES_RE.sub("-", slug)
