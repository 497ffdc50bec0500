"""
Answer evaluation.

Modes:
 - exact:           canonical JSON equality
 - tolerance:       numeric |user - correct| <= tolerance (exact for non-numbers)
 - partial_credit:  position-by-position list match -> fractional score
 - set_equivalence: order-independent set equality

Evaluation never raises. Numbers are coerced the way a JavaScript
``Number()`` call would: blank text is 0 and malformed text is NaN, which
then compares unequal instead of failing.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from chemtask.core.templates import EvaluationSpec
from chemtask.core.types import EvaluationMode, EvaluationResult, stringify

_CORRECT = EvaluationResult(correct=True, score=1.0)
_WRONG = EvaluationResult(correct=False, score=0.0)

_INFINITIES = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def evaluate(
    user_answer: Any,
    correct_answer: Any,
    spec: EvaluationSpec | Mapping[str, Any] | None = None,
) -> EvaluationResult:
    """
    Check a learner's answer.

    Args:
        user_answer: Submitted answer (text, number, or list)
        correct_answer: Canonical answer from the solver
        spec: Evaluation spec; exact matching when omitted or unknown

    Returns:
        EvaluationResult with a score in [0, 1]
    """
    if spec is None:
        spec = EvaluationSpec()
    elif isinstance(spec, Mapping):
        try:
            spec = EvaluationSpec.model_validate(dict(spec))
        except ValidationError:
            spec = EvaluationSpec()

    try:
        mode = EvaluationMode(spec.mode)
    except ValueError:
        mode = EvaluationMode.EXACT

    if mode == EvaluationMode.TOLERANCE:
        return _tolerance(user_answer, correct_answer, spec.tolerance or 0.0)
    if mode == EvaluationMode.PARTIAL_CREDIT:
        return _partial_credit(user_answer, correct_answer)
    if mode == EvaluationMode.SET_EQUIVALENCE:
        return _set_equivalence(user_answer, correct_answer)
    return _exact(user_answer, correct_answer)


# =============================================================================
# Value helpers
# =============================================================================


def _normalize(value: Any) -> Any:
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): _normalize(v) for k, v in value.items()}
    return value


def canonical(value: Any) -> str:
    """Canonical JSON text; 2.0 and 2 serialize the same."""
    return json.dumps(_normalize(value), ensure_ascii=False, sort_keys=True, default=str)


def coerce_number(value: Any) -> float:
    """Convert like JavaScript Number(): '' -> 0, [x] -> x, malformed -> NaN."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return 0.0
        if len(value) == 1:
            return coerce_number(stringify(value[0]))
        return math.nan
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if text in _INFINITIES:
            return _INFINITIES[text]
        if text.lower().startswith(("0x", "0o", "0b")):
            try:
                return float(int(text, 0))
            except ValueError:
                return math.nan
        # Python accepts spellings JavaScript does not
        if "_" in text or any(word in text.lower() for word in ("inf", "nan")):
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


# =============================================================================
# Modes
# =============================================================================


def _exact(user: Any, correct: Any) -> EvaluationResult:
    return _CORRECT if canonical(user) == canonical(correct) else _WRONG


def _tolerance(user: Any, correct: Any, tolerance: float) -> EvaluationResult:
    u = coerce_number(user)
    c = coerce_number(correct)
    if math.isnan(u) or math.isnan(c):
        return _exact(user, correct)
    return _CORRECT if abs(u - c) <= tolerance else _WRONG


def _partial_credit(user: Any, correct: Any) -> EvaluationResult:
    if not isinstance(user, list) or not isinstance(correct, list):
        return _exact(user, correct)
    if len(user) != len(correct):
        return _WRONG
    if not correct:
        return _CORRECT
    matches = sum(1 for u, c in zip(user, correct) if canonical(u) == canonical(c))
    score = matches / len(correct)
    return EvaluationResult(correct=score == 1, score=score)


def _as_set(value: Any) -> set[str]:
    items = value if isinstance(value, list) else [stringify(value)]
    return {canonical(item) for item in items}


def _set_equivalence(user: Any, correct: Any) -> EvaluationResult:
    return _CORRECT if _as_set(user) == _as_set(correct) else _WRONG
