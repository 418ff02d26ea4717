"""Neutral-language sanitizer for text derived from measurements.

``sanitize`` rewrites a fixed vocabulary of judgmental words into neutral
ones. It is a best-effort rewrite: many banned terms have no replacement,
so ``contains_banned_terms`` is meant as a lint step before publishing
text, not as a post-condition of ``sanitize``.

Example:
    >>> sanitize("A crooked, uneven line")
    'A deviated, asymmetric line'
    >>> contains_banned_terms("This looks weird")
    True
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

BANNED_TERMS: Tuple[str, ...] = (
    "flaw",
    "flawed",
    "defect",
    "defective",
    "ugly",
    "unattractive",
    "abnormal",
    "deformity",
    "deformed",
    "imperfect",
    "imperfection",
    "bad",
    "wrong",
    "crooked",
    "weird",
    "strange",
    "broken",
    "damaged",
    "inferior",
    "subpar",
    "below average",
    "unappealing",
    "unsightly",
    "hideous",
    "grotesque",
    "disfigured",
    "malformed",
    "misshapen",
    "distorted",
    "disproportionate",
    "lopsided",
    "off-putting",
    "unfortunate",
    "problematic features",
    "needs fixing",
    "should be corrected",
)

# Applied in insertion order.
REPLACEMENTS: Dict[str, str] = {
    "crooked": "deviated",
    "uneven": "asymmetric",
    "bad": "atypical",
    "wrong": "different",
    "abnormal": "uncommon",
    "imperfect": "unique",
    "flaw": "variation",
    "defect": "characteristic",
    "problem": "observation",
}

_REPLACEMENT_PATTERNS = [
    (re.compile(re.escape(term), re.IGNORECASE), replacement)
    for term, replacement in REPLACEMENTS.items()
]


def sanitize(text: str) -> str:
    """Replace every occurrence of each replaceable term, case-insensitively.

    Matching is by substring, so words that merely contain a term are
    rewritten too. A replacement can complete another term at its edge
    ("ba" + "wrong" -> "badifferent"), so passes repeat until the text no
    longer changes. The result is stable under repeated application.
    """
    while True:
        previous = text
        for pattern, replacement in _REPLACEMENT_PATTERNS:
            text = pattern.sub(replacement, text)
        if text == previous:
            return text


def find_banned_terms(text: str) -> List[str]:
    """Banned terms occurring in ``text`` (case-insensitive substring match)."""
    lowered = text.lower()
    return [term for term in BANNED_TERMS if term in lowered]


def contains_banned_terms(text: str) -> bool:
    lowered = text.lower()
    return any(term in lowered for term in BANNED_TERMS)


def _bound(value: float) -> str:
    return f"{value:g}"


def neutral_description(
    name: str,
    value: float,
    unit: str,
    typical_min: float,
    typical_max: float,
) -> str:
    """Describe a value relative to its typical range without judgment."""
    range_text = f"{_bound(typical_min)}-{_bound(typical_max)}{unit}"
    if typical_min <= value <= typical_max:
        return (
            f"{name} measures {value:.1f}{unit}. "
            f"This falls within typical human variation ({range_text})."
        )
    direction = "below" if value < typical_min else "above"
    return (
        f"{name} measures {value:.1f}{unit}, "
        f"which is {direction} the typical range ({range_text}). "
        "This is a natural variation."
    )


__all__ = [
    "BANNED_TERMS",
    "REPLACEMENTS",
    "sanitize",
    "find_banned_terms",
    "contains_banned_terms",
    "neutral_description",
]
