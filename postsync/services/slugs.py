"""Slug generation and allocation."""

import math
import re
from typing import Iterable

_QUOTES = re.compile(r"['\"]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")
_TAGS = re.compile(r"<[^>]*>")

WORDS_PER_MINUTE = 200


def slugify(text) -> str:
    """
    Derive a URL-safe identifier from free text.

    Lower-cases, drops quote characters, collapses every run of characters
    outside ``[a-z0-9]`` to a single hyphen and trims edge hyphens. Inputs
    differing only in case or punctuation map to the same slug.
    """
    value = str(text or "").lower().strip()
    value = _QUOTES.sub("", value)
    value = _NON_ALNUM.sub("-", value)
    return _EDGE_HYPHENS.sub("", value)


def ensure_unique(base_slug: str, existing_slugs: Iterable[str]) -> str:
    """
    Return ``base_slug`` or the first free ``base_slug-N`` (N >= 2).

    Deterministic: the same base and existing set always give the same result.
    """
    taken = {str(s).lower() for s in existing_slugs if s}
    if base_slug.lower() not in taken:
        return base_slug

    suffix = 2
    while f"{base_slug}-{suffix}".lower() in taken:
        suffix += 1
    return f"{base_slug}-{suffix}"


def generate_slug(text) -> str:
    """Slug rules used by the post editor (word characters are kept)."""
    if not text:
        return ""
    value = str(text).lower().strip()
    value = _NON_WORD.sub("", value)
    value = _SEPARATORS.sub("-", value)
    return _EDGE_HYPHENS.sub("", value)


def calculate_read_time(content) -> str:
    """Estimate reading time for HTML content, e.g. ``"3 min read"``."""
    if not content:
        return "1 min read"
    words = len(_TAGS.sub("", str(content)).split())
    minutes = math.ceil(words / WORDS_PER_MINUTE)
    return f"{max(1, minutes)} min read"
