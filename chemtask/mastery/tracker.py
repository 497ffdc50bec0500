"""
Mastery tracker: applies answers to BKT estimates and picks exercises.

One answer updates every competency in the exercise's competency map
independently. Primary competencies take the answer at face value;
secondary ones are treated as hint-assisted observations, so they move
more slowly.
"""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from chemtask.core.bkt import BktParams, CompetencyLevel, bkt_update, get_level
from chemtask.core.errors import InsufficientDataError
from chemtask.core.types import CompetencyWeight, GeneratedTask
from chemtask.engine.task_engine import TaskEngine
from chemtask.mastery.state_store import BktStateStore

DEFAULT_MAX_ATTEMPTS = 30


class MasteryTracker:
    """
    Per-learner mastery estimates backed by a BktStateStore.

    Example:
        tracker = MasteryTracker(store, params)
        task = tracker.next_exercise(engine, "electronegativity")
        tracker.record_answer(task.competency_map, correct=True)
    """

    def __init__(self, store: BktStateStore, params: Mapping[str, BktParams]):
        self.store = store
        self.params = dict(params)

    def current(self, competency_id: str) -> float:
        """
        Current P(L) for a competency.

        Falls back to the competency's prior, then to the default prior.
        """
        state = self.store.load_bkt_state().get(competency_id)
        if state is not None:
            return state.P_L
        params = self.params.get(competency_id)
        return params.P_L0 if params else BktParams().P_L0

    def level(self, competency_id: str) -> CompetencyLevel:
        return get_level(self.current(competency_id))

    def levels(self) -> dict[str, tuple[float, CompetencyLevel]]:
        """P(L) and level for every competency with parameters or stored state."""
        stored = self.store.load_bkt_state()
        result = {}
        for competency_id in sorted(set(self.params) | set(stored)):
            if competency_id in stored:
                p_l = stored[competency_id].P_L
            else:
                p_l = self.params[competency_id].P_L0
            result[competency_id] = (p_l, get_level(p_l))
        return result

    def record_answer(
        self,
        competency_map: Mapping[str, str],
        correct: bool,
        hint_used: bool = False,
    ) -> dict[str, float]:
        """
        Update every competency touched by an exercise.

        Args:
            competency_map: Competency id -> 'P' (primary) or 'S' (secondary)
            correct: Whether the answer was correct
            hint_used: Whether the learner used a hint (primary only)

        Returns:
            Competency id -> new P(L), for competencies that were updated
        """
        stored = self.store.load_bkt_state()
        updated = {}
        for competency_id, weight in competency_map.items():
            params = self.params.get(competency_id)
            if params is None:
                logger.debug(f"No BKT parameters for {competency_id}, skipping")
                continue

            state = stored.get(competency_id)
            p_l = state.P_L if state is not None else params.P_L0
            is_primary = weight == CompetencyWeight.PRIMARY.value
            new_p_l = bkt_update(p_l, params, correct, hint_used if is_primary else True)

            self.store.save_bkt_pl(competency_id, new_p_l)
            updated[competency_id] = new_p_l
            logger.debug(f"{competency_id}: P(L) {p_l:.3f} -> {new_p_l:.3f}")
        return updated

    def next_exercise(
        self,
        engine: TaskEngine,
        competency_id: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> GeneratedTask | None:
        """
        Generate a task exercising a competency.

        Templates where the competency is primary are tried first, then
        those where it is secondary. Each group gets up to ``max_attempts``
        tries; a try fails only on InsufficientDataError.

        Returns:
            The generated task, or None when no template covers the competency

        Raises:
            InsufficientDataError: Every attempt failed
        """
        templates = engine.registry.get_by_competency(competency_id)
        groups = [
            [t for t in templates if t.competency_hint[competency_id] == CompetencyWeight.PRIMARY],
            [t for t in templates if t.competency_hint[competency_id] == CompetencyWeight.SECONDARY],
        ]

        last_error: InsufficientDataError | None = None
        for group in groups:
            if not group:
                continue
            for _ in range(max_attempts):
                try:
                    return engine.generate_from(group)
                except InsufficientDataError as e:
                    last_error = e
                    logger.debug(f"Retrying exercise for {competency_id}: {e}")

        if last_error is not None:
            raise last_error
        return None
