"""Neutral-language post-processing."""

from facemetric.language.sanitizer import (
    BANNED_TERMS,
    REPLACEMENTS,
    contains_banned_terms,
    find_banned_terms,
    neutral_description,
    sanitize,
)

__all__ = [
    "BANNED_TERMS",
    "REPLACEMENTS",
    "contains_banned_terms",
    "find_banned_terms",
    "neutral_description",
    "sanitize",
]
