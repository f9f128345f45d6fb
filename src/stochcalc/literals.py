"""Inline fraction expansion run before structural parsing.

Users type transition probabilities as ``3/4`` or ``3.5 / 2``. This module
scans the text once, recognizes ``<number> / <number>`` literals and
replaces each by its decimal value, leaving every other character intact.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

_DIGITS = "0123456789"


def _scan_number(text: str, start: int) -> Optional[Tuple[str, int]]:
    """Read ``digits[.digits]`` at ``start``; return (literal, end) or None."""
    end = start
    while end < len(text) and text[end] in _DIGITS:
        end += 1
    if end == start:
        return None
    if end + 1 < len(text) and text[end] == "." and text[end + 1] in _DIGITS:
        end += 1
        while end < len(text) and text[end] in _DIGITS:
            end += 1
    return text[start:end], end


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    return pos


def _scan_fraction(text: str, start: int) -> Optional[Tuple[str, str, int]]:
    """Match ``num ws* / ws* den`` at ``start``; return (num, den, end)."""
    numerator = _scan_number(text, start)
    if numerator is None:
        return None
    num, pos = numerator
    pos = _skip_spaces(text, pos)
    if pos >= len(text) or text[pos] != "/":
        return None
    denominator = _scan_number(text, _skip_spaces(text, pos + 1))
    if denominator is None:
        return None
    den, end = denominator
    return num, den, end


def evaluate_fraction(numerator: str, denominator: str) -> Optional[float]:
    """Return numerator/denominator, or None when it cannot be evaluated."""
    den = float(denominator)
    if den == 0:
        return None
    value = float(numerator) / den
    if not math.isfinite(value):
        return None
    return value


def expand_fractions(text: str) -> str:
    """Replace every ``a/b`` literal in ``text`` by its decimal value.

    A fraction that does not evaluate (zero denominator) is copied through
    unchanged so the structural parser reports it as non-numeric.
    """
    out = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char not in _DIGITS:
            out.append(char)
            pos += 1
            continue

        fraction = _scan_fraction(text, pos)
        if fraction is None:
            # Copy the whole number so its trailing digits never start a match.
            literal, pos = _scan_number(text, pos)
            out.append(literal)
            continue

        num, den, end = fraction
        value = evaluate_fraction(num, den)
        out.append(text[pos:end] if value is None else repr(value))
        pos = end
    return "".join(out)
