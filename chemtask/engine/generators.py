"""
Generator stage: sample domain entities into a slot-value bag.

Each generator is registered under a ``gen.*`` id with the @register
decorator and has the signature ``(params, ontology, rng) -> SlotValues``.
Parameters arrive parsed (LiteralParam / RandomFromDomain). A generator
raises InsufficientDataError when its filtered candidate pool cannot
satisfy the requested cardinality.
"""

from __future__ import annotations

import json
import random
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from loguru import logger

from chemtask.chemistry.electron_config import format_config, get_electron_config
from chemtask.core.errors import InsufficientDataError, UnknownIdentifierError
from chemtask.core.templates import LiteralParam, ParamValue, RandomFromDomain, parse_params
from chemtask.core.types import SlotValues, is_number, round_half_up
from chemtask.ontology.models import Element, OntologyData, PropertyDef

T = TypeVar("T")

GeneratorFn = Callable[[dict[str, ParamValue], OntologyData, random.Random], SlotValues]

# Generator registry - populated by @register decorator
GENERATORS: dict[str, GeneratorFn] = {}

ORDERS = ["ascending", "descending"]
BOND_TYPES = ["ionic", "covalent_polar", "covalent_nonpolar", "metallic"]
SUBSTANCE_CLASSES = ["oxide", "acid", "base", "salt"]
REACTION_TYPES = ["exchange", "substitution", "decomposition", "redox"]
METAL_TYPES = ["metal", "nonmetal"]
ENERGY_MODES = ["rate", "cat", "eq"]
ION_NOMENCLATURE_MODES = ["default", "acid_pair", "paired"]


def register(generator_id: str):
    """Decorator to register a generator."""

    def decorator(fn: GeneratorFn) -> GeneratorFn:
        GENERATORS[generator_id] = fn
        return fn

    return decorator


def run_generator(
    generator_id: str,
    params: Mapping[str, Any] | None,
    ontology: OntologyData,
    rng: random.Random | None = None,
) -> SlotValues:
    """
    Run a registered generator.

    Args:
        generator_id: Registered id, e.g. ``gen.pick_element_pair``
        params: Step parameters, raw or already parsed
        ontology: Reference data snapshot
        rng: Random source (a fresh unseeded one when omitted)

    Returns:
        Slot values for one generation

    Raises:
        UnknownIdentifierError: No generator with this id
        InsufficientDataError: Candidate pool too small
    """
    fn = GENERATORS.get(generator_id)
    if fn is None:
        raise UnknownIdentifierError(f"Unknown generator: {generator_id}")
    slots = fn(parse_params(params), ontology, rng if rng is not None else random.Random())
    logger.debug(f"{generator_id} -> {sorted(slots)}")
    return slots


# =============================================================================
# Helpers
# =============================================================================


def _pick(items: Sequence[T], rng: random.Random, what: str) -> T:
    if not items:
        raise InsufficientDataError(f"No {what} available")
    return rng.choice(items)


def _pick_k(items: Sequence[T], k: int, rng: random.Random, what: str) -> list[T]:
    if len(items) < k:
        raise InsufficientDataError(f"Need {k} {what} but only {len(items)} available")
    return rng.sample(list(items), k)


def _literal(params: Mapping[str, ParamValue], name: str) -> Any:
    """Value of a literal parameter, None when absent or a placeholder."""
    param = params.get(name)
    return param.value if isinstance(param, LiteralParam) else None


def _literal_number(params: Mapping[str, ParamValue], name: str) -> float | None:
    value = _literal(params, name)
    return value if is_number(value) else None


def _choose(param: ParamValue | None, choices: Sequence[str], rng: random.Random) -> str:
    """Explicit string value, or a random choice for placeholders and absent params."""
    if isinstance(param, LiteralParam) and isinstance(param.value, str):
        return param.value
    return rng.choice(choices)


def _domain_value(
    params: Mapping[str, ParamValue],
    name: str,
    domain: Sequence[str],
    rng: random.Random,
) -> str | None:
    """Literal filter value, a random domain value for a placeholder, or None."""
    param = params.get(name)
    if isinstance(param, RandomFromDomain):
        return rng.choice(domain)
    if isinstance(param, LiteralParam) and isinstance(param.value, str):
        return param.value
    return None


def _resolve_property(
    params: Mapping[str, ParamValue],
    ontology: OntologyData,
    rng: random.Random,
    name: str = "require_field",
) -> PropertyDef:
    """
    Resolve the property a generator works on.

    A placeholder naming a known property resolves to it; any other
    placeholder, or no parameter, picks a random property.
    """
    properties = ontology.core.properties
    param = params.get(name)
    if isinstance(param, LiteralParam) and isinstance(param.value, str):
        prop = ontology.find_property(param.value)
        if prop is None:
            raise UnknownIdentifierError(f"Unknown property: {param.value}")
        return prop
    if isinstance(param, RandomFromDomain):
        prop = ontology.find_property(param.domain)
        if prop is not None:
            return prop
    return _pick(properties, rng, "properties")


def _apply_property_filter(elements: list[Element], prop: PropertyDef) -> list[Element]:
    if prop.filter is None:
        return elements
    result = elements
    if prop.filter.min_Z is not None:
        result = [el for el in result if el.Z >= prop.filter.min_Z]
    if prop.filter.max_Z is not None:
        result = [el for el in result if el.Z <= prop.filter.max_Z]
    if prop.filter.exclude_groups:
        excluded = set(prop.filter.exclude_groups)
        result = [el for el in result if el.group not in excluded]
    return result


def _is_main_group(el: Element) -> bool:
    return el.Z <= 86 and el.element_group != "noble_gas"


def _property_candidates(ontology: OntologyData, prop: PropertyDef) -> list[Element]:
    candidates = _apply_property_filter(list(ontology.core.elements), prop)
    return [el for el in candidates if el.value_of(prop.value_field) is not None]


def _random_mass(rng: random.Random, low: float, span: float) -> float:
    return round_half_up(low + rng.random() * span, 1)


# =============================================================================
# Element generators
# =============================================================================


@register("gen.pick_element_pair")
def pick_element_pair(params, ontology, rng) -> SlotValues:
    """Two distinct elements that both have a value for the chosen property."""
    prop = _resolve_property(params, ontology, rng)
    candidates = _apply_property_filter(list(ontology.core.elements), prop)
    if _literal(params, "filter") == "main_group":
        candidates = [el for el in candidates if _is_main_group(el)]
    candidates = [el for el in candidates if el.value_of(prop.value_field) is not None]

    a, b = _pick_k(candidates, 2, rng, f"elements with {prop.id}")
    return {"elementA": a.symbol, "elementB": b.symbol, "property": prop.id}


@register("gen.pick_elements_same_period")
def pick_elements_same_period(params, ontology, rng) -> SlotValues:
    """k elements of one period, plus a sort order."""
    k = _literal(params, "k")
    k = int(k) if is_number(k) else 4
    prop = _resolve_property(params, ontology, rng)

    by_period: dict[int, list[Element]] = {}
    for el in _property_candidates(ontology, prop):
        by_period.setdefault(el.period, []).append(el)
    valid = [els for els in by_period.values() if len(els) >= k]
    if not valid:
        raise InsufficientDataError(f"No period has {k} elements with property {prop.id}")

    chosen = _pick_k(rng.choice(valid), k, rng, "elements")
    symbols = [el.symbol for el in chosen]
    return {
        "elements": ", ".join(symbols),
        "element_symbols": symbols,
        "property": prop.id,
        "order": _choose(params.get("order"), ORDERS, rng),
    }


@register("gen.pick_element_position")
def pick_element_position(params, ontology, rng) -> SlotValues:
    """A main-table element (periods 1-6, no f-block) with its position."""
    candidates = [
        el
        for el in ontology.core.elements
        if 1 <= el.period <= 6
        and 1 <= el.group <= 18
        and el.element_group not in ("lanthanide", "actinide")
    ]
    el = _pick(candidates, rng, "elements")
    states = el.typical_oxidation_states
    return {
        "element": el.symbol,
        "period": el.period,
        "group": el.group,
        "max_oxidation_state": max(states) if states else 0,
        "min_oxidation_state": min(states) if states else 0,
    }


@register("gen.pick_element_for_config")
def pick_element_for_config(params, ontology, rng) -> SlotValues:
    """An element up to Z=36 (by default) with its electron configuration."""
    max_z = _literal_number(params, "max_Z") or 36
    el = _pick([el for el in ontology.core.elements if el.Z <= max_z], rng, f"elements with Z <= {max_z}")
    config = get_electron_config(el.Z, ontology.core.electron_config_overrides)
    return {
        "element": el.symbol,
        "Z": el.Z,
        "period": el.period,
        "group": el.group,
        "config": format_config(config),
    }


@register("gen.pick_element_names")
def pick_element_names(params, ontology, rng) -> SlotValues:
    """k elements paired with their names, as 'symbol:name' entries."""
    k = _literal(params, "k")
    k = int(k) if is_number(k) else 4
    named = [el for el in ontology.core.elements if el.name_en]
    chosen = _pick_k(named, k, rng, "named elements")
    return {
        "element_symbols": [el.symbol for el in chosen],
        "elements": ", ".join(el.symbol for el in chosen),
        "pairs": [f"{el.symbol}:{el.name_en}" for el in chosen],
    }


@register("gen.pick_element_set")
def pick_element_set(params, ontology, rng) -> SlotValues:
    """
    A mixed set of k elements where one to three share the target metal type.

    Feeds choice_multi templates: the learner selects every element of the
    requested type.
    """
    k = _literal(params, "k")
    k = max(2, int(k)) if is_number(k) else 5
    metal_type = _choose(params.get("metal_type"), METAL_TYPES, rng)

    pool = [el for el in ontology.core.elements if _is_main_group(el)]
    matching = [el for el in pool if el.metal_type == metal_type]
    others = [el for el in pool if el.metal_type != metal_type]
    if not matching or not others:
        raise InsufficientDataError(f"Not enough elements to mix {metal_type} with others")

    n_match = rng.randint(1, min(3, len(matching), k - 1))
    chosen = _pick_k(matching, n_match, rng, f"{metal_type} elements")
    chosen += _pick_k(others, k - n_match, rng, "other elements")
    rng.shuffle(chosen)
    symbols = [el.symbol for el in chosen]
    return {
        "element_symbols": symbols,
        "elements": ", ".join(symbols),
        "metal_type": metal_type,
    }


# =============================================================================
# Ion and rule-table generators
# =============================================================================


@register("gen.pick_oxidation_example")
def pick_oxidation_example(params, ontology, rng) -> SlotValues:
    """A compound with a known oxidation state of one element."""
    examples = list(ontology.rules.oxidation_examples)
    difficulty = _literal(params, "difficulty")
    if isinstance(difficulty, str) and difficulty:
        examples = [ex for ex in examples if ex.difficulty == difficulty]
    if not examples:
        raise InsufficientDataError("No oxidation examples match the filter")

    ex = rng.choice(examples)
    return {
        "formula": ex.formula,
        "element": ex.target_element,
        "expected_state": ex.oxidation_state,
    }


@register("gen.pick_ion_pair")
def pick_ion_pair(params, ontology, rng) -> SlotValues:
    """A cation and an anion, optionally bounded by charge magnitude."""
    cations = [ion for ion in ontology.core.ions if ion.type == "cation"]
    anions = [ion for ion in ontology.core.ions if ion.type == "anion"]

    bound = _literal_number(params, "min_cation_charge")
    if bound is not None:
        cations = [c for c in cations if c.charge >= bound]
    bound = _literal_number(params, "max_cation_charge")
    if bound is not None:
        cations = [c for c in cations if c.charge <= bound]
    bound = _literal_number(params, "min_anion_charge")
    if bound is not None:
        anions = [a for a in anions if abs(a.charge) >= bound]
    bound = _literal_number(params, "max_anion_charge")
    if bound is not None:
        anions = [a for a in anions if abs(a.charge) <= bound]

    if not cations or not anions:
        raise InsufficientDataError("No ions match the charge filters")

    cation = rng.choice(cations)
    anion = rng.choice(anions)
    return {
        "cation": cation.formula,
        "anion": anion.formula,
        "cation_id": cation.id,
        "anion_id": anion.id,
        "cation_charge": cation.charge,
        "anion_charge": anion.charge,
    }


@register("gen.pick_salt_pair")
def pick_salt_pair(params, ontology, rng) -> SlotValues:
    """A cation/anion pair from the solubility table with its solubility label."""
    pair = _pick(ontology.rules.solubility_pairs, rng, "solubility pairs")
    cation = ontology.find_ion(pair.cation)
    anion = ontology.find_ion(pair.anion)
    cation_formula = cation.formula if cation else pair.cation
    anion_formula = anion.formula if anion else pair.anion
    return {
        "salt_formula": f"{cation_formula} + {anion_formula}",
        "cation_id": pair.cation,
        "anion_id": pair.anion,
        "cation_formula": cation_formula,
        "anion_formula": anion_formula,
        "expected_solubility": pair.solubility,
    }


@register("gen.pick_bond_example")
def pick_bond_example(params, ontology, rng) -> SlotValues:
    """A substance with its bond and crystal type."""
    if ontology.rules.bond_examples is None:
        raise InsufficientDataError("bond examples not available in data")
    examples = list(ontology.rules.bond_examples.examples)
    bond_type = _domain_value(params, "bond_type", BOND_TYPES, rng)
    if bond_type:
        examples = [ex for ex in examples if ex.bond_type == bond_type]
    ex = _pick(examples, rng, "bond examples")
    return {"formula": ex.formula, "bond_type": ex.bond_type, "crystal_type": ex.crystal_type}


@register("gen.pick_bond_pair")
def pick_bond_pair(params, ontology, rng) -> SlotValues:
    """Two substances with different crystal lattice types."""
    if ontology.rules.bond_examples is None:
        raise InsufficientDataError("bond examples not available in data")
    by_crystal: dict[str, list] = {}
    for ex in ontology.rules.bond_examples.examples:
        by_crystal.setdefault(ex.crystal_type, []).append(ex)

    type_a, type_b = _pick_k(list(by_crystal), 2, rng, "crystal types")
    ex_a = rng.choice(by_crystal[type_a])
    ex_b = rng.choice(by_crystal[type_b])
    return {
        "formulaA": ex_a.formula,
        "formulaB": ex_b.formula,
        "crystal_typeA": ex_a.crystal_type,
        "crystal_typeB": ex_b.crystal_type,
    }


@register("gen.pick_activity_pair")
def pick_activity_pair(params, ontology, rng) -> SlotValues:
    """Two metals from the activity series."""
    series = ontology.rules.activity_series or []
    a, b = _pick_k(series, 2, rng, "activity series entries")
    return {
        "metalA": a.symbol,
        "metalB": b.symbol,
        "nameA": a.name,
        "nameB": b.name,
        "positionA": a.position,
        "positionB": b.position,
        "reduces_H_A": 1 if a.reduces_H else 0,
        "reduces_H_B": 1 if b.reduces_H else 0,
        "more_active": a.symbol if a.position < b.position else b.symbol,
    }


@register("gen.pick_qualitative_test")
def pick_qualitative_test(params, ontology, rng) -> SlotValues:
    """A qualitative test: target ion, reagent, and observation."""
    test = _pick(ontology.rules.qualitative_tests or [], rng, "qualitative tests")
    return {
        "target_id": test.target_id,
        "target_ion": test.target_name or test.target_id,
        "reagent_formula": test.reagent_formula,
        "reagent_name": test.reagent_name,
        "observation": test.observation,
    }


# =============================================================================
# Nomenclature and kinetics generators
# =============================================================================


@register("gen.pick_classification_rule")
def pick_classification_rule(params, ontology, rng) -> SlotValues:
    """A substance classification rule with its formula pattern and examples."""
    if not ontology.rules.classification_rules:
        raise InsufficientDataError("classification rules not available in data")
    rule = rng.choice(ontology.rules.classification_rules)
    return {
        "rule_id": rule.id,
        "class_label": rule.substance_class,
        "subclass": rule.subclass,
        "pattern": rule.pattern,
        "description": rule.description,
        "example": rule.examples[0] if rule.examples else "",
        "examples": list(rule.examples),
    }


@register("gen.pick_naming_rule")
def pick_naming_rule(params, ontology, rng) -> SlotValues:
    """A naming rule plus one random formula/name example of it."""
    if not ontology.rules.naming_rules:
        raise InsufficientDataError("naming rules not available in data")
    rule = rng.choice(ontology.rules.naming_rules)
    example = rng.choice(rule.examples) if rule.examples else None
    return {
        "rule_id": rule.id,
        "class_label": rule.substance_class,
        "pattern": rule.pattern,
        "template": rule.template,
        "example_formula": example.formula if example else "",
        "example_name": example.name if example else "",
    }


@register("gen.pick_energy_catalyst")
def pick_energy_catalyst(params, ontology, rng) -> SlotValues:
    """
    A reaction-rate factor, a catalyst, or an equilibrium shift.

    The ``mode`` parameter selects the table: ``rate``, ``cat`` or ``eq``.
    A placeholder or an absent parameter picks a mode at random.
    """
    theory = ontology.rules.energy_catalyst
    if theory is None:
        raise InsufficientDataError("energy and catalyst data not available in data")
    mode = _choose(params.get("mode"), ENERGY_MODES, rng)

    if mode == "rate":
        factor = _pick(theory.rate_factors, rng, "rate factors")
        return {
            "mode": mode,
            "factor_id": factor.factor_id,
            "factor_name": factor.name,
            "factor_effect": factor.effect,
            "applies_to": factor.applies_to,
        }
    if mode == "cat":
        catalyst = _pick(theory.common_catalysts, rng, "common catalysts")
        return {
            "mode": mode,
            "catalyst": catalyst.catalyst,
            "catalyst_name": catalyst.name,
            "catalyst_reaction": catalyst.reaction,
        }
    if mode == "eq":
        shift = _pick(theory.equilibrium_shifts, rng, "equilibrium shifts")
        return {
            "mode": mode,
            "eq_factor": shift.factor,
            "eq_shift": shift.shift,
            "eq_explanation": shift.explanation,
        }
    raise UnknownIdentifierError(f"Unknown energy mode: {mode}")


@register("gen.pick_ion_nomenclature")
def pick_ion_nomenclature(params, ontology, rng) -> SlotValues:
    """
    Ion naming facts in one of three modes.

    - default: a suffix rule (-ide / -ate / -ite) with its condition
    - acid_pair: an acid and the anion it forms
    - paired: two ions that carry naming data, for comparison

    A literal ``mode`` selects the mode, a placeholder picks one at random,
    and an absent parameter means ``default``.
    """
    param = params.get("mode")
    mode = _choose(param, ION_NOMENCLATURE_MODES, rng) if param is not None else "default"
    nomenclature = ontology.rules.ion_nomenclature

    if mode == "acid_pair":
        pair = _pick(nomenclature.acid_to_anion_pairs if nomenclature else [], rng, "acid/anion pairs")
        anion = ontology.find_ion(pair.anion_id)
        return {
            "mode": mode,
            "acid_formula": pair.acid,
            "acid_name": pair.acid_name,
            "anion_id": pair.anion_id,
            "anion_formula": anion.formula if anion else pair.anion_id,
            "anion_name": anion.name if anion else "",
        }
    if mode == "paired":
        named = [ion for ion in ontology.core.ions if ion.naming is not None]
        ion_a, ion_b = _pick_k(named, 2, rng, "ions with naming data")
        return {
            "mode": mode,
            "ionA_id": ion_a.id,
            "ionA_formula": ion_a.formula,
            "ionA_name": ion_a.name,
            "ionA_suffix": ion_a.naming.suffix,
            "ionB_id": ion_b.id,
            "ionB_formula": ion_b.formula,
            "ionB_name": ion_b.name,
            "ionB_suffix": ion_b.naming.suffix,
        }
    if mode == "default":
        rule = _pick(nomenclature.suffix_rules if nomenclature else [], rng, "ion suffix rules")
        return {
            "mode": mode,
            "rule_id": rule.id,
            "condition": rule.condition,
            "suffix": rule.suffix,
            "description": rule.description,
            "example": rule.examples[0] if rule.examples else "",
            "examples": list(rule.examples),
        }
    raise UnknownIdentifierError(f"Unknown ion nomenclature mode: {mode}")


# =============================================================================
# Substance and reaction generators
# =============================================================================


@register("gen.pick_substance_by_class")
def pick_substance_by_class(params, ontology, rng) -> SlotValues:
    """A substance, optionally restricted to one class."""
    substances = list(ontology.data.substances or [])
    substance_class = _domain_value(params, "substance_class", SUBSTANCE_CLASSES, rng)
    if substance_class:
        substances = [s for s in substances if s.substance_class == substance_class]
    substance = _pick(substances, rng, "substances")
    return {
        "formula": substance.formula,
        "name": substance.name,
        "substance_class": substance.substance_class,
        "substance_subclass": substance.subclass,
    }


@register("gen.pick_reaction")
def pick_reaction(params, ontology, rng) -> SlotValues:
    """A reaction with flags for its driving forces."""
    reactions = list(ontology.data.reactions or [])
    type_tag = _domain_value(params, "type_tag", REACTION_TYPES, rng)
    if type_tag:
        reactions = [r for r in reactions if type_tag in r.type_tags]
    reaction = _pick(reactions, rng, "reactions")
    reaction_type = next(
        (t for t in reaction.type_tags if t in REACTION_TYPES),
        reaction.type_tags[0] if reaction.type_tags else "",
    )
    forces = set(reaction.driving_forces)
    reactants = reaction.equation.split("→")[0].strip()

    slots: SlotValues = {
        "equation": reaction.equation,
        "reaction_id": reaction.reaction_id,
        "reaction_type": reaction_type,
        "reactants": reactants,
        "heat_effect": reaction.heat_effect,
        "has_precipitate": 1 if forces & {"precipitate", "precipitation"} else 0,
        "has_gas": 1 if forces & {"gas", "gas_evolution"} else 0,
        "has_water": 1 if forces & {"water", "water_formation"} else 0,
        "has_weak_electrolyte": 1 if "weak_electrolyte" in forces else 0,
        "will_occur": "yes" if forces else "no",
    }
    if reaction.net_ionic:
        slots["net_ionic"] = reaction.net_ionic
    return slots


@register("gen.pick_chain_step")
def pick_chain_step(params, ontology, rng) -> SlotValues:
    """One step of a genetic chain, with the following substance hidden."""
    chains = [chain for chain in ontology.data.genetic_chains or [] if chain.steps]
    chain = _pick(chains, rng, "genetic chains")
    step_index = rng.randrange(len(chain.steps))
    step = chain.steps[step_index]

    substances = [s.substance for s in chain.steps] + [chain.steps[-1].next]
    gap_index = step_index + 1
    return {
        "chain_id": chain.chain_id,
        "substance": step.substance,
        "reagent": step.reagent,
        "next": step.next,
        "step_type": step.type,
        "gap_index": gap_index,
        "chain_substances": ["?" if i == gap_index else s for i, s in enumerate(substances)],
    }


# =============================================================================
# Calculation generators
# =============================================================================


@register("gen.pick_calc_substance")
def pick_calc_substance(params, ontology, rng) -> SlotValues:
    """A substance with a random sample mass (10-100 g) and its composition."""
    calculations = ontology.data.calculations
    substance = _pick(calculations.calc_substances if calculations else [], rng, "calculation substances")
    mass = _random_mass(rng, 10, 90)
    return {
        "formula": substance.formula,
        "name": substance.name,
        "M": substance.M,
        "mass": mass,
        "amount": round_half_up(mass / substance.M, 4),
        "composition": json.dumps({c.element: c.count for c in substance.composition}),
        "target_element": _pick([c.element for c in substance.composition], rng, "composition entries"),
    }


@register("gen.pick_calc_reaction")
def pick_calc_reaction(params, ontology, rng) -> SlotValues:
    """A reaction with a random given mass for stoichiometry problems."""
    calculations = ontology.data.calculations
    reaction = _pick(calculations.calc_reactions if calculations else [], rng, "calculation reactions")
    given_mass = _random_mass(rng, 10, 90)
    find_moles = given_mass / reaction.given.M * (reaction.find.coeff / reaction.given.coeff)
    slots: SlotValues = {
        "equation": reaction.equation,
        "given_formula": reaction.given.formula,
        "given_coeff": reaction.given.coeff,
        "given_M": reaction.given.M,
        "given_mass": given_mass,
        "find_formula": reaction.find.formula,
        "find_coeff": reaction.find.coeff,
        "find_M": reaction.find.M,
        "find_mass": round_half_up(find_moles * reaction.find.M, 2),
    }
    if _literal(params, "with_yield"):
        slots["yield_percent"] = rng.choice([60, 70, 75, 80, 85, 90])
    return slots


@register("gen.pick_solution_params")
def pick_solution_params(params, ontology, rng) -> SlotValues:
    """Solute and solution masses with the mass fraction in percent."""
    m_solute = _random_mass(rng, 5, 45)
    m_solution = round_half_up(m_solute + 50 + rng.random() * 200, 1)
    return {
        "m_solute": m_solute,
        "m_solution": m_solution,
        "omega": round_half_up(m_solute / m_solution * 100, 1),
    }
