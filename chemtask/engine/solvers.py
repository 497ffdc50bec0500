"""
Solver stage: compute the canonical answer from slot values.

Solvers are pure: the same slots and ontology always give the same
SolverResult. Each is registered under a ``solver.*`` id and has the
signature ``(params, slots, ontology) -> SolverResult``.

Numeric results use half-up rounding (2 dp for masses, 1 dp for
percentages, 3 dp for amounts of substance).
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from chemtask.chemistry.bonds import determine_bond_type
from chemtask.chemistry.electron_config import electron_formula, format_config, get_electron_config
from chemtask.chemistry.formulas import is_polyatomic, strip_charge, to_subscript
from chemtask.core.errors import InsufficientDataError, MissingSlotDataError, UnknownIdentifierError
from chemtask.core.templates import LiteralParam, RandomFromDomain
from chemtask.core.types import SlotValues, SolverResult, is_number, round_half_up, stringify
from chemtask.ontology.models import Element, OntologyData, PropertyDef

SolverFn = Callable[[dict[str, Any], SlotValues, OntologyData], SolverResult]

# Solver registry - populated by @register decorator
SOLVERS: dict[str, SolverFn] = {}

DRIVING_FORCE_PRIORITY = [
    ("has_precipitate", "precipitate"),
    ("has_gas", "gas"),
    ("has_water", "water"),
    ("has_weak_electrolyte", "weak_electrolyte"),
]


def register(solver_id: str):
    """Decorator to register a solver."""

    def decorator(fn: SolverFn) -> SolverFn:
        SOLVERS[solver_id] = fn
        return fn

    return decorator


def run_solver(
    solver_id: str,
    params: Mapping[str, Any] | None,
    slots: SlotValues,
    ontology: OntologyData,
) -> SolverResult:
    """
    Run a registered solver.

    Raises:
        UnknownIdentifierError: No solver with this id, or an unknown mode
        MissingSlotDataError: A required slot or ontology entry is missing
    """
    fn = SOLVERS.get(solver_id)
    if fn is None:
        raise UnknownIdentifierError(f"Unknown solver: {solver_id}")
    return fn(_plain_params(params), slots, ontology)


def _plain_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    plain = {}
    for key, value in (params or {}).items():
        if isinstance(value, LiteralParam):
            value = value.value
        elif isinstance(value, RandomFromDomain):
            value = f"{{{value.domain}}}"
        plain[key] = value
    return plain


# =============================================================================
# Helpers
# =============================================================================


def _slot(slots: SlotValues, name: str) -> Any:
    value = slots.get(name)
    if value is None:
        raise MissingSlotDataError(f'Slot "{name}" not found in slots')
    return value


def _number(slots: SlotValues, name: str) -> float:
    value = _slot(slots, name)
    if is_number(value):
        return value
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise MissingSlotDataError(f'Slot "{name}" is not numeric: {value!r}') from e


def _clean(value: float) -> int | float:
    """36.0 -> 36; other values unchanged."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _element(symbol: str, ontology: OntologyData) -> Element:
    el = ontology.find_element(symbol)
    if el is None:
        raise MissingSlotDataError(f"Unknown element: {symbol}")
    return el


def _property(property_id: str, ontology: OntologyData) -> PropertyDef:
    prop = ontology.find_property(property_id)
    if prop is None:
        raise UnknownIdentifierError(f"Unknown property: {property_id}")
    return prop


def _property_value(el: Element, prop: PropertyDef) -> float:
    value = el.value_of(prop.value_field)
    if value is None:
        raise MissingSlotDataError(f"Missing {prop.id} value for {el.symbol}")
    return value


def _composition(slots: SlotValues) -> dict[str, int]:
    raw = _slot(slots, "composition")
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MissingSlotDataError(f"Malformed composition slot: {raw!r}") from e


def _truthy(value: Any) -> bool:
    return value is True or value == 1 or value == "true"


# =============================================================================
# Element property solvers
# =============================================================================


@register("solver.compare_property")
def compare_property(params, slots, ontology) -> SolverResult:
    """Element with the larger property value; a tie goes to elementA."""
    symbol_a = str(_slot(slots, "elementA"))
    symbol_b = str(_slot(slots, "elementB"))
    prop = _property(str(_slot(slots, "property")), ontology)

    val_a = _property_value(_element(symbol_a, ontology), prop)
    val_b = _property_value(_element(symbol_b, ontology), prop)

    a_wins = val_a >= val_b
    winner, loser = (symbol_a, symbol_b) if a_wins else (symbol_b, symbol_a)
    win_val, lose_val = (val_a, val_b) if a_wins else (val_b, val_a)
    return SolverResult(
        answer=winner,
        explanation_slots={
            "winner": winner,
            "loser": loser,
            "valA": stringify(win_val),
            "valB": stringify(lose_val),
        },
    )


@register("solver.periodic_trend_order")
def periodic_trend_order(params, slots, ontology) -> SolverResult:
    """Element symbols sorted by property value in the requested order."""
    if isinstance(slots.get("element_symbols"), list):
        symbols = [str(s) for s in slots["element_symbols"]]
    elif isinstance(slots.get("elements"), str):
        symbols = [s.strip() for s in slots["elements"].split(",")]
    else:
        raise MissingSlotDataError("No element_symbols or elements in slots")

    prop = _property(str(_slot(slots, "property")), ontology)
    descending = str(slots.get("order")) == "descending"
    values = {sym: _property_value(_element(sym, ontology), prop) for sym in symbols}
    return SolverResult(answer=sorted(symbols, key=values.__getitem__, reverse=descending))


@register("solver.oxidation_states")
def oxidation_states(params, slots, ontology) -> SolverResult:
    return SolverResult(answer=_clean(_number(slots, "expected_state")))


@register("solver.count_valence")
def count_valence(params, slots, ontology) -> SolverResult:
    """Valence electrons from the group number."""
    group = int(_number(slots, "group"))
    if 13 <= group <= 18:
        return SolverResult(answer=group - 10)
    return SolverResult(answer=group)


@register("solver.electron_config")
def electron_config(params, slots, ontology) -> SolverResult:
    z = int(_number(slots, "Z"))
    if z < 1:
        raise MissingSlotDataError(f"Invalid Z: {z}")
    overrides = ontology.core.electron_config_overrides
    return SolverResult(
        answer=format_config(get_electron_config(z, overrides)),
        explanation_slots={"formula": electron_formula(z, overrides)},
    )


@register("solver.delta_chi")
def delta_chi(params, slots, ontology) -> SolverResult:
    """Bond type between two elements, with the electronegativity difference."""
    el_a = _element(str(_slot(slots, "elementA")), ontology)
    el_b = _element(str(_slot(slots, "elementB")), ontology)
    chi_a, chi_b = el_a.electronegativity, el_b.electronegativity
    has_chi = chi_a is not None and chi_b is not None
    return SolverResult(
        answer=determine_bond_type(el_a, el_b).value,
        explanation_slots={
            "delta": stringify(round_half_up(abs(chi_a - chi_b), 2)) if has_chi else "",
            "chiA": stringify(chi_a),
            "chiB": stringify(chi_b),
        },
    )


@register("solver.select_by_metal_type")
def select_by_metal_type(params, slots, ontology) -> SolverResult:
    """Every element of the set whose metal type matches the target."""
    symbols = _slot(slots, "element_symbols")
    metal_type = str(_slot(slots, "metal_type"))
    return SolverResult(
        answer=[sym for sym in symbols if _element(sym, ontology).metal_type == metal_type]
    )


# =============================================================================
# Ion and salt solvers
# =============================================================================


def _formula_part(base: str, count: int) -> str:
    if count == 1:
        return base
    if is_polyatomic(base):
        return f"({base}){to_subscript(count)}"
    return f"{base}{to_subscript(count)}"


@register("solver.compose_salt_formula")
def compose_salt_formula(params, slots, ontology) -> SolverResult:
    """
    Neutral salt formula from a cation and an anion.

    Subscripts come from the LCM of the charge magnitudes; a polyatomic ion
    is parenthesized when it appears more than once (Ca²⁺ + PO₄³⁻ -> Ca₃(PO₄)₂).
    """
    cation_id = str(_slot(slots, "cation_id"))
    anion_id = str(_slot(slots, "anion_id"))
    cation = ontology.find_ion(cation_id)
    anion = ontology.find_ion(anion_id)
    if cation is None or anion is None:
        raise MissingSlotDataError(f"Cannot find ions: {cation_id}, {anion_id}")

    cation_charge = abs(cation.charge)
    anion_charge = abs(anion.charge)
    lcm = cation_charge * anion_charge // math.gcd(cation_charge, anion_charge)

    formula = _formula_part(strip_charge(cation.formula), lcm // cation_charge) + _formula_part(
        strip_charge(anion.formula), lcm // anion_charge
    )
    return SolverResult(answer=formula)


@register("solver.solubility_check")
def solubility_check(params, slots, ontology) -> SolverResult:
    """Binary solubility: anything other than 'soluble' counts as insoluble."""
    cation_id = str(_slot(slots, "cation_id"))
    anion_id = str(_slot(slots, "anion_id"))
    pair = ontology.find_solubility(cation_id, anion_id)
    if pair is None:
        raise MissingSlotDataError(f"No solubility data for {cation_id} + {anion_id}")
    return SolverResult(answer="soluble" if pair.solubility == "soluble" else "insoluble")


# =============================================================================
# Lookup and comparison solvers
# =============================================================================


@register("solver.slot_lookup")
def slot_lookup(params, slots, ontology) -> SolverResult:
    """The value of the slot named by ``params.answer_field``."""
    value = _slot(slots, str(params.get("answer_field")))
    if is_number(value) or isinstance(value, list):
        return SolverResult(answer=value)
    return SolverResult(answer=str(value))


@register("solver.compare_crystal_melting")
def compare_crystal_melting(params, slots, ontology) -> SolverResult:
    """Substance whose crystal type melts higher; a tie goes to formulaA."""
    if ontology.rules.bond_examples is None:
        raise InsufficientDataError("crystal_melting_rank not available")
    rank = ontology.rules.bond_examples.crystal_melting_rank

    crystal_a = str(_slot(slots, "crystal_typeA"))
    crystal_b = str(_slot(slots, "crystal_typeB"))
    formula_a = str(_slot(slots, "formulaA"))
    formula_b = str(_slot(slots, "formulaB"))

    a_wins = rank.get(crystal_a, 0) >= rank.get(crystal_b, 0)
    winner, loser = (formula_a, formula_b) if a_wins else (formula_b, formula_a)
    return SolverResult(
        answer=winner,
        explanation_slots={
            "winner": winner,
            "loser": loser,
            "crystal_winner": crystal_a if a_wins else crystal_b,
            "crystal_loser": crystal_b if a_wins else crystal_a,
        },
    )


@register("solver.activity_compare")
def activity_compare(params, slots, ontology) -> SolverResult:
    """'yes' when metal A stands before metal B in the activity series."""
    return SolverResult(answer="yes" if _number(slots, "positionA") < _number(slots, "positionB") else "no")


@register("solver.driving_force")
def driving_force(params, slots, ontology) -> SolverResult:
    """Strongest driving force of an exchange reaction, or 'none'."""
    for slot_name, force in DRIVING_FORCE_PRIORITY:
        if _truthy(slots.get(slot_name)):
            return SolverResult(answer=force)
    return SolverResult(answer="none")


@register("solver.predict_observation")
def predict_observation(params, slots, ontology) -> SolverResult:
    observation = slots.get("observation")
    if observation is None:
        raise MissingSlotDataError("observation slot not found")
    return SolverResult(answer=str(observation))


# =============================================================================
# Calculation solvers
# =============================================================================


@register("solver.molar_mass")
def molar_mass(params, slots, ontology) -> SolverResult:
    """M = sum of Ar * count over the composition, 2 dp."""
    total = 0.0
    for symbol, count in _composition(slots).items():
        total += _element(symbol, ontology).atomic_mass * count
    result = _clean(round_half_up(total, 2))
    return SolverResult(answer=result, explanation_slots={"M": stringify(result)})


@register("solver.mass_fraction")
def mass_fraction(params, slots, ontology) -> SolverResult:
    """Mass fraction of an element in percent, 1 dp."""
    target = params.get("target_element") or slots.get("target_element")
    if not target:
        raise MissingSlotDataError("No target_element in params or slots")
    composition = _composition(slots)
    if target not in composition:
        raise MissingSlotDataError(f"Element {target} not in composition")

    ar = _element(target, ontology).atomic_mass
    fraction = ar * composition[target] / _number(slots, "M") * 100
    return SolverResult(answer=_clean(round_half_up(fraction, 1)))


@register("solver.amount_calc")
def amount_calc(params, slots, ontology) -> SolverResult:
    """Mode 'n': n = m / M (3 dp). Mode 'm': m = n * M (2 dp)."""
    mode = params.get("mode", "n")
    if mode == "n":
        result = round_half_up(_number(slots, "mass") / _number(slots, "M"), 3)
    elif mode == "m":
        result = round_half_up(_number(slots, "amount") * _number(slots, "M"), 2)
    else:
        raise UnknownIdentifierError(f"Unknown amount_calc mode: {mode}")
    return SolverResult(answer=_clean(result))


@register("solver.concentration")
def concentration(params, slots, ontology) -> SolverResult:
    """
    Mass-fraction problems, 1 dp.

    Default: ω = m_solute / m_solution * 100.
    'inverse': m_solute = ω * m_solution / 100.
    'dilution': m2 = ω1 * m1 / ω2.
    """
    mode = params.get("mode", "omega")
    if mode == "omega":
        result = _number(slots, "m_solute") / _number(slots, "m_solution") * 100
    elif mode == "inverse":
        result = _number(slots, "omega") * _number(slots, "m_solution") / 100
    elif mode == "dilution":
        result = _number(slots, "omega1") * _number(slots, "m1") / _number(slots, "omega2")
    else:
        raise UnknownIdentifierError(f"Unknown concentration mode: {mode}")
    return SolverResult(answer=_clean(round_half_up(result, 1)))


def _theoretical_mass(slots: SlotValues) -> float:
    moles = _number(slots, "given_mass") / _number(slots, "given_M")
    find_moles = moles / _number(slots, "given_coeff") * _number(slots, "find_coeff")
    return round_half_up(find_moles * _number(slots, "find_M"), 2)


@register("solver.stoichiometry")
def stoichiometry(params, slots, ontology) -> SolverResult:
    """Product mass from a given reactant mass via the coefficient ratio, 2 dp."""
    return SolverResult(answer=_clean(_theoretical_mass(slots)))


@register("solver.reaction_yield")
def reaction_yield(params, slots, ontology) -> SolverResult:
    """Practical mass: theoretical mass scaled by yield_percent, 2 dp."""
    theoretical = _theoretical_mass(slots)
    practical = round_half_up(theoretical * _number(slots, "yield_percent") / 100, 2)
    logger.debug(f"reaction_yield: theoretical={theoretical}, practical={practical}")
    return SolverResult(
        answer=_clean(practical),
        explanation_slots={"theoretical": stringify(_clean(theoretical))},
    )
