"""
Distractor engine: plausible wrong answers for an exercise.

A template may name its strategy explicitly (``distractor_strategy``).
Untagged templates fall back to an ordered sniff of the slots and the
answer shape; earlier rules win even when a later one would also match:

1. elementA/elementB slots and a string answer -> element comparison
2. a solubility label answer or an expected_solubility slot -> solubility
3. numeric interaction or numeric answer -> numeric neighbours
4. a cation_id slot and a string answer -> ion formula mutations
5. otherwise -> shuffled element symbols

The remaining strategies are only reachable through an explicit tag.

Whatever the strategy, the result never contains the correct answer,
duplicates, or empty strings, and holds at most ``count`` entries.
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterable

from loguru import logger

from chemtask.chemistry.electron_config import build_aufbau, format_config, get_electron_config
from chemtask.chemistry.formulas import strip_charge, strip_subscripts
from chemtask.core.errors import UnknownIdentifierError
from chemtask.core.types import (
    Answer,
    DistractorStrategy,
    InteractionType,
    SlotValues,
    is_number,
    stringify,
)
from chemtask.engine.evaluator import coerce_number
from chemtask.ontology.models import OntologyData

SOLUBILITY_LABELS = ("soluble", "insoluble", "slightly_soluble", "decomposes")
SOLUBILITY_OPTIONS = ("soluble", "insoluble", "slightly_soluble")

DOMAIN_ENUMS: dict[str, tuple[str, ...]] = {
    "bond_type": ("ionic", "covalent_polar", "covalent_nonpolar", "metallic"),
    "crystal_type": ("ionic", "molecular", "atomic", "metallic"),
    "substance_class": ("oxide", "acid", "base", "salt"),
    "reaction_type": ("exchange", "substitution", "decomposition", "redox"),
    "driving_force": ("precipitate", "gas", "water", "weak_electrolyte", "none"),
    "yes_no": ("yes", "no"),
    "eq_shift": ("forward", "reverse", "no_shift"),
    "applies_to": ("all", "homogeneous", "heterogeneous"),
    "suffix": ("-ide", "-ate", "-ite"),
}


def generate_distractors(
    correct_answer: Answer,
    slots: SlotValues,
    interaction: InteractionType | str,
    ontology: OntologyData,
    count: int,
    strategy: DistractorStrategy | str | None = None,
    rng: random.Random | None = None,
) -> list[str]:
    """
    Generate up to ``count`` distinct wrong answers.

    Args:
        correct_answer: Canonical answer from the solver
        slots: Slot values of this generation
        interaction: Interaction kind of the template
        ontology: Reference data snapshot
        count: Maximum number of distractors
        strategy: Explicit strategy tag; sniffed from context when None
        rng: Random source for shuffled strategies

    Returns:
        Distractor texts in first-seen order
    """
    if count <= 0:
        return []
    rng = rng if rng is not None else random.Random()
    if strategy is None:
        strategy = select_strategy(correct_answer, slots, interaction)
    else:
        try:
            strategy = DistractorStrategy(strategy)
        except ValueError:
            raise UnknownIdentifierError(f"Unknown distractor strategy: {strategy}") from None

    candidates = _STRATEGIES[strategy](correct_answer, slots, ontology, rng)
    result = _finalize(candidates, correct_answer, count)
    if not result:
        logger.warning(f"No distractors produced by {strategy.value} for answer {stringify(correct_answer)!r}")
    return result


def select_strategy(
    correct_answer: Answer,
    slots: SlotValues,
    interaction: InteractionType | str,
) -> DistractorStrategy:
    """Pick a strategy from slot keys and answer shape."""
    is_text = isinstance(correct_answer, str)
    if slots.get("elementA") and slots.get("elementB") and is_text:
        return DistractorStrategy.ELEMENT_COMPARISON
    if is_text and ("expected_solubility" in slots or correct_answer in SOLUBILITY_LABELS):
        return DistractorStrategy.SOLUBILITY
    if interaction == InteractionType.NUMERIC_INPUT or is_number(correct_answer):
        return DistractorStrategy.NUMERIC
    if slots.get("cation_id") and is_text:
        return DistractorStrategy.ION_FORMULA
    return DistractorStrategy.GENERIC


def _finalize(candidates: Iterable[str], correct_answer: Answer, count: int) -> list[str]:
    seen = {stringify(correct_answer)}
    # A list answer's members are correct options too
    if isinstance(correct_answer, list):
        seen.update(stringify(item) for item in correct_answer)
    result: list[str] = []
    for candidate in candidates:
        if candidate and candidate not in seen:
            seen.add(candidate)
            result.append(candidate)
        if len(result) >= count:
            break
    return result


def _shuffled(items: list[str], rng: random.Random) -> list[str]:
    rng.shuffle(items)
    return items


# =============================================================================
# Strategies
# =============================================================================


def _element_comparison(correct, slots, ontology, rng) -> list[str]:
    """The other member of the compared pair plus the tie and indeterminate labels."""
    if slots.get("elementA") and slots.get("elementB"):
        a, b = str(slots["elementA"]), str(slots["elementB"])
    elif slots.get("formulaA") and slots.get("formulaB"):
        a, b = str(slots["formulaA"]), str(slots["formulaB"])
    else:
        return []
    other = b if stringify(correct) == a else a
    labels = ontology.i18n.labels
    return [other, labels.tie, labels.indeterminate]


def _solubility(correct, slots, ontology, rng) -> list[str]:
    return [label for label in SOLUBILITY_OPTIONS if label != correct]


def _numeric(correct, slots, ontology, rng) -> list[str]:
    """Nearby values: integer offsets and a sign flip, or half steps and scaling."""
    num = coerce_number(correct)
    if math.isnan(num):
        return []
    if math.isfinite(num) and float(num).is_integer():
        candidates = [stringify(num + offset) for offset in (1, -1, 2, -2)]
        if num != 0:
            candidates.append(stringify(-num))
        candidates.append("0")
        return candidates

    candidates = [stringify(num + offset) for offset in (0.5, -0.5, 1, -1)]
    if num != 0:
        candidates += [stringify(num * 2), stringify(num / 2)]
    return candidates


def _ion_formula(correct, slots, ontology, rng) -> list[str]:
    """Other anions' base formulas, then two mutations of the correct formula."""
    current_anion = str(slots.get("anion_id", ""))
    candidates = [
        strip_charge(ion.formula)
        for ion in ontology.core.ions
        if ion.type == "anion" and ion.id != current_anion
    ]
    text = stringify(correct)
    if len(text) > 1:
        candidates.append(text.replace("₂", "₃"))
        candidates.append(strip_subscripts(text))
    return candidates


def _generic(correct, slots, ontology, rng) -> list[str]:
    text = stringify(correct)
    return _shuffled([el.symbol for el in ontology.core.elements if el.symbol != text], rng)


def _domain_enum(correct, slots, ontology, rng) -> list[str]:
    """Other values of the enumerated domain the answer belongs to."""
    text = stringify(correct)
    # A domain whose slot holds the answer wins over declaration order
    for domain, values in DOMAIN_ENUMS.items():
        if slots.get(domain) == text and text in values:
            return [v for v in values if v != text]
    for values in DOMAIN_ENUMS.values():
        if text in values:
            return [v for v in values if v != text]
    return []


def _substance_formula(correct, slots, ontology, rng) -> list[str]:
    """Formulas of other substances from the matching data source."""
    text = stringify(correct)
    candidates: list[str] = []
    if slots.get("bond_type") and ontology.rules.bond_examples is not None:
        candidates += [ex.formula for ex in ontology.rules.bond_examples.examples]
    substances = ontology.data.substances or []
    if slots.get("substance_class"):
        candidates += [s.formula for s in substances if s.substance_class != slots["substance_class"]]
    elif not candidates:
        candidates += [s.formula for s in substances]
    if not candidates:
        candidates = [el.symbol for el in ontology.core.elements]
    return _shuffled([c for c in candidates if c != text], rng)


def _set_complement(correct, slots, ontology, rng) -> list[str]:
    """Members of the presented set that are not part of the answer."""
    chosen = set(correct) if isinstance(correct, list) else {stringify(correct)}
    pool = slots.get("element_symbols") or []
    return [str(item) for item in pool if str(item) not in chosen]


def _permutation(correct, slots, ontology, rng) -> list[str]:
    """Reorderings of a list answer: reversed, adjacent swaps, then random shuffles."""
    if not isinstance(correct, list) or len(correct) < 2:
        return []
    items = [stringify(item) for item in correct]
    orders = [items[::-1]]
    for i in range(len(items) - 1):
        swapped = list(items)
        swapped[i], swapped[i + 1] = swapped[i + 1], swapped[i]
        orders.append(swapped)
    for _ in range(len(items)):
        orders.append(_shuffled(list(items), rng))
    return [",".join(order) for order in orders]


def _observation(correct, slots, ontology, rng) -> list[str]:
    """Observations of other qualitative tests."""
    text = stringify(correct)
    tests = ontology.rules.qualitative_tests or []
    return _shuffled([t.observation for t in tests if t.observation != text], rng)


def _activity(correct, slots, ontology, rng) -> list[str]:
    """The opposite yes/no answer plus the conditional displacement labels."""
    labels = ontology.i18n.labels
    opposite = "no" if stringify(correct) == "yes" else "yes"
    return [opposite, labels.only_with_heating, labels.depends_on_concentration]


CALCULATION_MULTIPLIERS = (0.5, 2, 0.8, 1.2, 1.5, 0.1, 10, 3)


def _calculation_multiplier(correct, slots, ontology, rng) -> list[str]:
    """Typical calculation slips: the answer scaled by common wrong factors."""
    num = coerce_number(correct)
    if not math.isfinite(num) or num == 0:
        return []
    return [stringify(round(num * factor, 2)) for factor in CALCULATION_MULTIPLIERS]


def _electron_config(correct, slots, ontology, rng) -> list[str]:
    """
    Configurations an unsure learner might pick.

    The plain Aufbau filling comes first (it differs from the answer only
    for exception elements such as Cr and Cu), then the configurations of
    the neighbouring elements Z-1, Z+1, Z-2, Z+2.
    """
    z = coerce_number(slots.get("Z"))
    if not math.isfinite(z) or not float(z).is_integer() or z < 1:
        return []
    z = int(z)
    overrides = ontology.core.electron_config_overrides
    candidates = [format_config(build_aufbau(z))]
    for offset in (-1, 1, -2, 2):
        if z + offset >= 1:
            candidates.append(format_config(get_electron_config(z + offset, overrides)))
    return candidates


_STRATEGIES = {
    DistractorStrategy.ELEMENT_COMPARISON: _element_comparison,
    DistractorStrategy.SOLUBILITY: _solubility,
    DistractorStrategy.NUMERIC: _numeric,
    DistractorStrategy.ION_FORMULA: _ion_formula,
    DistractorStrategy.GENERIC: _generic,
    DistractorStrategy.DOMAIN_ENUM: _domain_enum,
    DistractorStrategy.SUBSTANCE_FORMULA: _substance_formula,
    DistractorStrategy.SET_COMPLEMENT: _set_complement,
    DistractorStrategy.PERMUTATION: _permutation,
    DistractorStrategy.OBSERVATION: _observation,
    DistractorStrategy.ACTIVITY: _activity,
    DistractorStrategy.CALCULATION_MULTIPLIER: _calculation_multiplier,
    DistractorStrategy.ELECTRON_CONFIG: _electron_config,
}
