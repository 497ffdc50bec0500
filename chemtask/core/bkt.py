"""
Bayesian Knowledge Tracing.

Each competency carries an independent scalar P(L), the probability that
the learner has mastered it. After every observed answer the estimate is
updated in two steps:

1. Posterior given the observation, using slip (P_S) and guess (P_G)
2. Learning transition toward mastery with rate P_T

Using a hint makes a correct answer less informative (higher effective
guess and slip) and slows the learning transition. Results are clamped
to [0.001, 0.999] so the filter can always move in both directions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

CLAMP_MIN = 0.001
CLAMP_MAX = 0.999

# Hint modifiers
HINT_GUESS_BONUS = 0.25
HINT_SLIP_BONUS = 0.10
HINT_TRANSITION_PENALTY = 0.03
NO_HINT_TRANSITION_BONUS = 0.05
MAX_GUESS = 0.60
MAX_SLIP = 0.60
MIN_TRANSITION = 0.01
MAX_TRANSITION = 0.35


class BktParams(BaseModel):
    """Static BKT parameters for one competency."""

    competency_id: str = ""
    P_L0: float = Field(0.25, ge=0, le=1, description="Prior probability of mastery")
    P_T: float = Field(0.1, ge=0, le=1, description="Learning transition probability")
    P_S: float = Field(0.1, ge=0, le=1, description="Slip probability")
    P_G: float = Field(0.2, ge=0, le=1, description="Guess probability")


@dataclass
class BktState:
    """Persisted mastery estimate for one competency."""

    competency_id: str
    P_L: float
    updated_at: datetime | None = None

    @property
    def level(self) -> CompetencyLevel:
        return CompetencyLevel.from_p_l(self.P_L)


class CompetencyLevel(str, Enum):
    """Mastery band derived from P(L)."""

    NONE = "none"
    BASIC = "basic"
    CONFIDENT = "confident"
    AUTOMATIC = "automatic"

    @classmethod
    def from_p_l(cls, p_l: float) -> CompetencyLevel:
        """
        Convert a P(L) estimate to a level.

        Args:
            p_l: Mastery probability between 0 and 1

        Returns:
            Corresponding CompetencyLevel
        """
        if p_l >= 0.93:
            return cls.AUTOMATIC
        elif p_l >= 0.8:
            return cls.CONFIDENT
        elif p_l >= 0.6:
            return cls.BASIC
        else:
            return cls.NONE


def _clamp(value: float) -> float:
    return min(CLAMP_MAX, max(CLAMP_MIN, value))


def bkt_update(p_l: float, params: BktParams, correct: bool, hint_used: bool) -> float:
    """
    Compute the new P(L) after one observed answer.

    Args:
        p_l: Current mastery estimate
        params: BKT parameters of the competency
        correct: Whether the answer was correct
        hint_used: Whether the learner used a hint

    Returns:
        Updated estimate, clamped to [0.001, 0.999]
    """
    guess = params.P_G
    slip = params.P_S
    transition = params.P_T

    if hint_used:
        guess = min(MAX_GUESS, guess + HINT_GUESS_BONUS)
        slip = min(MAX_SLIP, slip + HINT_SLIP_BONUS)
        transition = max(MIN_TRANSITION, transition - HINT_TRANSITION_PENALTY)
    else:
        transition = min(MAX_TRANSITION, transition + NO_HINT_TRANSITION_BONUS)

    if correct:
        num = p_l * (1 - slip)
        denom = num + (1 - p_l) * guess
    else:
        num = p_l * slip
        denom = num + (1 - p_l) * (1 - guess)
    posterior = p_l if denom == 0 else num / denom

    return _clamp(posterior + (1 - posterior) * transition)


def get_level(p_l: float) -> CompetencyLevel:
    """Mastery level for a P(L) estimate."""
    return CompetencyLevel.from_p_l(p_l)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
