"""
Shared domain types for the exercise engine.

Design:
- Enums for the closed vocabularies (interaction kinds, evaluation modes,
  distractor strategies, competency weights)
- Frozen dataclasses for pipeline outputs (SolverResult, GeneratedTask,
  EvaluationResult, Exercise)
- Small value helpers shared by solvers, renderer, and distractors
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Union

# A slot value produced by a generator: text, a number, or a list of strings
SlotValue = Union[str, int, float, list[str]]
SlotValues = dict[str, SlotValue]
Answer = Union[str, int, float, list[str]]


# =============================================================================
# Enums
# =============================================================================


class InteractionType(str, Enum):
    """How the learner interacts with an exercise."""

    CHOICE_SINGLE = "choice_single"
    CHOICE_MULTI = "choice_multi"
    ORDER_DRAGDROP = "order_dragdrop"
    NUMERIC_INPUT = "numeric_input"
    MATCH_PAIRS = "match_pairs"
    INTERACTIVE_ORBITAL = "interactive_orbital"
    GUIDED_SELECTION = "guided_selection"


class EvaluationMode(str, Enum):
    """Answer checking semantics."""

    EXACT = "exact"
    TOLERANCE = "tolerance"
    PARTIAL_CREDIT = "partial_credit"
    SET_EQUIVALENCE = "set_equivalence"


class DistractorStrategy(str, Enum):
    """Wrong-answer strategy tag set on a template."""

    ELEMENT_COMPARISON = "element_comparison"
    SOLUBILITY = "solubility"
    NUMERIC = "numeric"
    ION_FORMULA = "ion_formula"
    GENERIC = "generic"
    DOMAIN_ENUM = "domain_enum"
    SUBSTANCE_FORMULA = "substance_formula"
    SET_COMPLEMENT = "set_complement"
    PERMUTATION = "permutation"
    OBSERVATION = "observation"
    ACTIVITY = "activity"
    CALCULATION_MULTIPLIER = "calculation_multiplier"
    ELECTRON_CONFIG = "electron_config"


class CompetencyWeight(str, Enum):
    """Primary or secondary coverage of a competency by a template."""

    PRIMARY = "P"
    SECONDARY = "S"


class ExerciseFormat(str, Enum):
    """Presentation format of an Exercise."""

    MULTIPLE_CHOICE = "multiple_choice"
    MULTIPLE_SELECT = "multiple_select"
    MATCH_PAIRS = "match_pairs"
    INTERACTIVE_ORBITAL = "interactive_orbital"
    GUIDED_SELECTION = "guided_selection"


# =============================================================================
# Pipeline outputs
# =============================================================================


@dataclass(frozen=True)
class SolverResult:
    """Canonical answer plus optional values for the explanation template."""

    answer: Answer
    explanation_slots: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GeneratedTask:
    """One fully resolved exercise instance."""

    template_id: str
    interaction: InteractionType
    question: str
    correct_answer: Answer
    distractors: list[str]
    explanation: str
    competency_map: dict[str, str]
    difficulty: float
    exam_tags: list[str]
    slots: SlotValues


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of checking one answer."""

    correct: bool
    score: float  # 0..1


@dataclass(frozen=True)
class ExerciseOption:
    id: str
    text: str


@dataclass
class Exercise:
    """UI-ready shape of a GeneratedTask."""

    type: str
    question: str
    format: ExerciseFormat
    options: list[ExerciseOption]
    explanation: str
    competency_map: dict[str, str]
    correct_id: str | None = None
    correct_ids: list[str] | None = None
    pairs: list[tuple[str, str]] | None = None
    target_z: int | None = None
    context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output, dropping unset optional fields."""
        data = asdict(self)
        data["format"] = self.format.value
        return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# Helpers
# =============================================================================


def stringify(value: Any) -> str:
    """
    Render a slot or answer value as display text.

    Integral floats drop the trailing ``.0`` and lists join with commas,
    so ``36.0`` renders as ``"36"`` and ``["Na", "Cl"]`` as ``"Na,Cl"``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    return str(value)


def round_half_up(value: float, digits: int) -> float:
    """Round to ``digits`` decimals, halves away from negative infinity."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
