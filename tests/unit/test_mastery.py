"""
Unit tests for mastery persistence and the MasteryTracker.

Tests:
- InMemory and SQLite state stores behave the same
- Primary/secondary weighting in record_answer
- Template fallback and retries in next_exercise
"""

import random
from datetime import timezone

import pytest

from chemtask.core.bkt import BktParams, CompetencyLevel, bkt_update
from chemtask.core.errors import InsufficientDataError
from chemtask.engine.task_engine import TaskEngine
from chemtask.mastery.state_store import InMemoryBktStateStore, SQLiteBktStateStore
from chemtask.mastery.tracker import MasteryTracker


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each store test runs against both implementations."""
    if request.param == "memory":
        s = InMemoryBktStateStore()
    else:
        s = SQLiteBktStateStore(tmp_path / "state.db")
    yield s
    s.close()


@pytest.fixture
def bkt_params():
    return {
        "electronegativity": BktParams(competency_id="electronegativity", P_L0=0.3, P_T=0.1, P_S=0.1, P_G=0.2),
        "periodic_trends": BktParams(competency_id="periodic_trends", P_L0=0.2, P_T=0.1, P_S=0.1, P_G=0.25),
        "ion_formulas": BktParams(competency_id="ion_formulas", P_L0=0.2, P_T=0.1, P_S=0.1, P_G=0.2),
    }


# ========================================
# State stores
# ========================================


class TestStateStore:
    """Tests shared by both store implementations."""

    def test_empty(self, store):
        assert store.load_bkt_state() == {}
        assert not store.has_bkt_state()

    def test_save_and_load(self, store):
        store.save_bkt_pl("bond_type", 0.42)
        state = store.load_bkt_state()["bond_type"]
        assert state.P_L == pytest.approx(0.42)
        assert state.competency_id == "bond_type"
        assert state.updated_at is not None
        assert state.updated_at.tzinfo == timezone.utc
        assert store.has_bkt_state()

    def test_overwrite(self, store):
        store.save_bkt_pl("bond_type", 0.42)
        store.save_bkt_pl("bond_type", 0.7)
        states = store.load_bkt_state()
        assert len(states) == 1
        assert states["bond_type"].P_L == pytest.approx(0.7)

    def test_bulk_save_and_clear(self, store):
        store.save_bkt_state({"a": 0.1, "b": 0.9})
        assert set(store.load_bkt_state()) == {"a", "b"}
        store.clear_bkt_state()
        assert store.load_bkt_state() == {}


class TestSQLiteStore:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "state.db"
        first = SQLiteBktStateStore(path)
        first.save_bkt_pl("solubility", 0.55)
        first.close()

        second = SQLiteBktStateStore(path)
        assert second.load_bkt_state()["solubility"].P_L == pytest.approx(0.55)
        second.close()

    def test_initial_in_memory_state(self):
        store = InMemoryBktStateStore({"solubility": 0.5})
        assert store.load_bkt_state()["solubility"].P_L == 0.5


# ========================================
# Tracker
# ========================================


class TestRecordAnswer:
    """Tests for MasteryTracker.record_answer."""

    def test_primary_and_secondary_weighting(self, bkt_params):
        tracker = MasteryTracker(InMemoryBktStateStore(), bkt_params)
        updated = tracker.record_answer({"electronegativity": "P", "periodic_trends": "S"}, correct=True)

        assert updated["electronegativity"] == pytest.approx(
            bkt_update(0.3, bkt_params["electronegativity"], True, False)
        )
        assert updated["periodic_trends"] == pytest.approx(
            bkt_update(0.2, bkt_params["periodic_trends"], True, True)
        )

    def test_primary_hint_flag(self, bkt_params):
        tracker = MasteryTracker(InMemoryBktStateStore(), bkt_params)
        updated = tracker.record_answer({"electronegativity": "P"}, correct=True, hint_used=True)
        assert updated["electronegativity"] == pytest.approx(
            bkt_update(0.3, bkt_params["electronegativity"], True, True)
        )

    def test_uses_stored_estimate(self, bkt_params):
        store = InMemoryBktStateStore({"electronegativity": 0.7})
        tracker = MasteryTracker(store, bkt_params)
        tracker.record_answer({"electronegativity": "P"}, correct=False)
        expected = bkt_update(0.7, bkt_params["electronegativity"], False, False)
        assert tracker.current("electronegativity") == pytest.approx(expected)

    def test_unknown_competency_skipped(self, bkt_params):
        store = InMemoryBktStateStore()
        tracker = MasteryTracker(store, bkt_params)
        assert tracker.record_answer({"astrology": "P"}, correct=True) == {}
        assert not store.has_bkt_state()

    def test_current_fallbacks(self, bkt_params):
        tracker = MasteryTracker(InMemoryBktStateStore(), bkt_params)
        assert tracker.current("electronegativity") == 0.3
        assert tracker.current("astrology") == BktParams().P_L0
        assert tracker.level("electronegativity") == CompetencyLevel.NONE

    def test_levels_merge_params_and_state(self, bkt_params):
        tracker = MasteryTracker(InMemoryBktStateStore({"legacy": 0.95}), bkt_params)
        levels = tracker.levels()
        assert list(levels) == sorted(["electronegativity", "periodic_trends", "ion_formulas", "legacy"])
        assert levels["legacy"] == (0.95, CompetencyLevel.AUTOMATIC)
        assert levels["ion_formulas"] == (0.2, CompetencyLevel.NONE)


class TestNextExercise:
    """Tests for MasteryTracker.next_exercise."""

    def test_prefers_primary(self, ontology, compare_template, salt_template, bkt_params):
        engine = TaskEngine([compare_template, salt_template], ontology, rng=random.Random(1))
        tracker = MasteryTracker(InMemoryBktStateStore(), bkt_params)
        for _ in range(5):
            assert tracker.next_exercise(engine, "ion_formulas").template_id == "salt_formula"

    def test_secondary_when_no_primary(self, ontology, compare_template, bkt_params):
        engine = TaskEngine([compare_template], ontology, rng=random.Random(1))
        tracker = MasteryTracker(InMemoryBktStateStore(), bkt_params)
        task = tracker.next_exercise(engine, "periodic_trends")
        assert task.template_id == "compare_electronegativity"

    def test_no_templates(self, ontology, compare_template, bkt_params):
        engine = TaskEngine([compare_template], ontology)
        tracker = MasteryTracker(InMemoryBktStateStore(), bkt_params)
        assert tracker.next_exercise(engine, "calc_stoichiometry") is None

    def test_failing_primary_falls_back_to_secondary(self, ontology, template_factory, bkt_params):
        broken = template_factory(
            "broken",
            "gen.pick_ion_pair",
            "solver.compose_salt_formula",
            "salt_formula",
            generator_params={"min_cation_charge": 9},
            competency_hint={"ion_formulas": "P"},
        )
        working = template_factory(
            "working",
            "gen.pick_ion_pair",
            "solver.compose_salt_formula",
            "salt_formula",
            competency_hint={"ion_formulas": "S"},
        )
        engine = TaskEngine([broken, working], ontology, rng=random.Random(1))
        tracker = MasteryTracker(InMemoryBktStateStore(), bkt_params)
        assert tracker.next_exercise(engine, "ion_formulas", max_attempts=3).template_id == "working"

    def test_all_attempts_fail(self, ontology, template_factory, bkt_params):
        broken = template_factory(
            "broken",
            "gen.pick_ion_pair",
            "solver.compose_salt_formula",
            "salt_formula",
            generator_params={"min_cation_charge": 9},
            competency_hint={"ion_formulas": "P"},
        )
        engine = TaskEngine([broken], ontology)
        tracker = MasteryTracker(InMemoryBktStateStore(), bkt_params)
        with pytest.raises(InsufficientDataError):
            tracker.next_exercise(engine, "ion_formulas", max_attempts=2)
