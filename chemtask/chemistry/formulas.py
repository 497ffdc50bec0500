"""
Formula text helpers.

Ion formulas carry their charge as trailing Unicode superscripts
(Na⁺, SO₄²⁻) and counts as Unicode subscripts (CaCl₂).
"""

from __future__ import annotations

SUPERSCRIPT_DIGITS = "⁰¹²³⁴⁵⁶⁷⁸⁹"
SUBSCRIPT_DIGITS = "₀₁₂₃₄₅₆₇₈₉"
CHARGE_CHARS = SUPERSCRIPT_DIGITS + "⁺⁻"

_TO_SUPERSCRIPT = str.maketrans("0123456789", SUPERSCRIPT_DIGITS)
_TO_SUBSCRIPT = str.maketrans("0123456789", SUBSCRIPT_DIGITS)


def to_superscript(n: int) -> str:
    """12 -> '¹²'"""
    return str(n).translate(_TO_SUPERSCRIPT)


def to_subscript(n: int) -> str:
    """12 -> '₁₂'"""
    return str(n).translate(_TO_SUBSCRIPT)


def strip_charge(formula: str) -> str:
    """Remove the trailing charge suffix of an ion formula: 'SO₄²⁻' -> 'SO₄'."""
    return formula.rstrip(CHARGE_CHARS)


def is_polyatomic(base: str) -> bool:
    """True when a formula base names more than one element (more than one capital letter)."""
    return sum(1 for ch in base if "A" <= ch <= "Z") > 1


def strip_subscripts(formula: str, digits: str = SUBSCRIPT_DIGITS[2:]) -> str:
    """Drop subscript digits (2-9 by default) from a formula."""
    return "".join(ch for ch in formula if ch not in digits)
