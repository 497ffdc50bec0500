"""
Chemistry domain utilities used by the solvers.

Pure functions only; nothing here reads global state.
"""

from chemtask.chemistry.bonds import BondType, determine_bond_type
from chemtask.chemistry.electron_config import (
    electron_formula,
    format_config,
    get_electron_config,
)
from chemtask.chemistry.formulas import (
    is_polyatomic,
    strip_charge,
    strip_subscripts,
    to_subscript,
    to_superscript,
)

__all__ = [
    "BondType",
    "determine_bond_type",
    "electron_formula",
    "format_config",
    "get_electron_config",
    "is_polyatomic",
    "strip_charge",
    "strip_subscripts",
    "to_subscript",
    "to_superscript",
]
