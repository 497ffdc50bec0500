"""
Ground-state electron configurations.

Subshells fill in Klechkowski (Madelung) order. Elements whose real
configuration differs (Cr, Cu, Pd, ...) are corrected with overrides
taken from the ontology, passed in explicitly by the caller.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from chemtask.chemistry.formulas import to_superscript

FILLING_ORDER: list[tuple[int, str]] = [
    (1, "s"), (2, "s"), (2, "p"), (3, "s"), (3, "p"), (4, "s"), (3, "d"), (4, "p"),
    (5, "s"), (4, "d"), (5, "p"), (6, "s"), (4, "f"), (5, "d"), (6, "p"), (7, "s"),
    (5, "f"), (6, "d"), (7, "p"),
]  # fmt: skip

SUBSHELL_CAPACITY = {"s": 2, "p": 6, "d": 10, "f": 14}
_L_ORDER = {"s": 0, "p": 1, "d": 2, "f": 3}

Filling = tuple[int, str, int]
ConfigOverrides = Mapping[int, Sequence[Sequence]]


def build_aufbau(z: int) -> list[Filling]:
    """Aufbau filling for atomic number ``z`` with no exceptions applied."""
    config: list[Filling] = []
    remaining = z
    for n, subshell in FILLING_ORDER:
        if remaining <= 0:
            break
        electrons = min(remaining, SUBSHELL_CAPACITY[subshell])
        config.append((n, subshell, electrons))
        remaining -= electrons
    return config


def get_electron_config(z: int, overrides: ConfigOverrides | None = None) -> list[Filling]:
    """
    Electron configuration in filling order.

    Args:
        z: Atomic number
        overrides: Exception table by Z, each a list of (n, subshell, electrons)

    Returns:
        List of (n, subshell, electrons); empty subshells are dropped
    """
    config = build_aufbau(z)
    exception = (overrides or {}).get(z)
    if not exception:
        return config

    filled = {(n, subshell): electrons for n, subshell, electrons in config}
    order = [(n, subshell) for n, subshell, _ in config]
    for n, subshell, electrons in exception:
        if (n, subshell) not in filled:
            order.append((n, subshell))
        filled[(n, subshell)] = electrons
    return [(n, s, filled[(n, s)]) for n, s in order if filled[(n, s)] > 0]


def format_config(config: Sequence[Filling], separator: str = " ") -> str:
    """[(1, 's', 2), (2, 's', 1)] -> '1s² 2s¹'"""
    return separator.join(f"{n}{subshell}{to_superscript(e)}" for n, subshell, e in config)


def electron_formula(z: int, overrides: ConfigOverrides | None = None) -> str:
    """Compact formula in conventional (n, l) order, e.g. '1s²2s²2p⁶3s²3p⁶3d⁶4s²'."""
    config = sorted(get_electron_config(z, overrides), key=lambda f: (f[0], _L_ORDER[f[1]]))
    return format_config(config, separator="")
