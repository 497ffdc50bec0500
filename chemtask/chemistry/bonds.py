"""
Chemical bond classification by electronegativity difference.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

IONIC_THRESHOLD = 1.7
POLAR_THRESHOLD = 0.4


class BondType(str, Enum):
    IONIC = "ionic"
    COVALENT_POLAR = "covalent_polar"
    COVALENT_NONPOLAR = "covalent_nonpolar"
    METALLIC = "metallic"


class ElementLike(Protocol):
    symbol: str
    metal_type: str
    electronegativity: float | None


def determine_bond_type(a: ElementLike, b: ElementLike) -> BondType:
    """
    Classify the bond between two elements.

    Same element: metallic for metals, otherwise covalent nonpolar.
    Two metals: metallic. Otherwise by Δχ: >= 1.7 ionic, > 0.4 polar,
    else nonpolar. Without electronegativity data a metal/nonmetal pair
    is ionic.
    """
    if a.symbol == b.symbol:
        return BondType.METALLIC if a.metal_type == "metal" else BondType.COVALENT_NONPOLAR

    if a.metal_type == "metal" and b.metal_type == "metal":
        return BondType.METALLIC

    if a.electronegativity is not None and b.electronegativity is not None:
        delta = abs(a.electronegativity - b.electronegativity)
        if delta >= IONIC_THRESHOLD:
            return BondType.IONIC
        if delta > POLAR_THRESHOLD:
            return BondType.COVALENT_POLAR
        return BondType.COVALENT_NONPOLAR

    has_metal = "metal" in (a.metal_type, b.metal_type)
    has_nonmetal = "nonmetal" in (a.metal_type, b.metal_type)
    if has_metal and has_nonmetal:
        return BondType.IONIC
    return BondType.COVALENT_NONPOLAR
