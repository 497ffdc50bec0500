"""
Unit tests for the solver stage.

Solvers are pure functions of (params, slots, ontology), so every test
builds slots by hand.
"""

import pytest

from chemtask.core.errors import MissingSlotDataError, UnknownIdentifierError
from chemtask.engine.solvers import run_solver


def solve(solver_id, slots, ontology, **params):
    return run_solver(solver_id, params, slots, ontology)


class TestRegistry:
    def test_unknown_solver(self, ontology):
        with pytest.raises(UnknownIdentifierError, match="solver.nope"):
            solve("solver.nope", {}, ontology)


class TestSaltFormula:
    """Tests for compose_salt_formula."""

    @pytest.mark.parametrize(
        "cation,anion,expected",
        [
            ("Na_plus", "Cl_minus", "NaCl"),
            ("Ca_2plus", "Cl_minus", "CaCl₂"),
            ("Al_3plus", "PO4_3minus", "AlPO₄"),
            ("Ca_2plus", "PO4_3minus", "Ca₃(PO₄)₂"),
            ("Na_plus", "SO4_2minus", "Na₂SO₄"),
            ("Al_3plus", "SO4_2minus", "Al₂(SO₄)₃"),
        ],
    )
    def test_formula(self, ontology, cation, anion, expected):
        result = solve("solver.compose_salt_formula", {"cation_id": cation, "anion_id": anion}, ontology)
        assert result.answer == expected

    def test_unknown_ion(self, ontology):
        with pytest.raises(MissingSlotDataError):
            solve("solver.compose_salt_formula", {"cation_id": "K_plus", "anion_id": "Cl_minus"}, ontology)

    def test_missing_slot(self, ontology):
        with pytest.raises(MissingSlotDataError, match="anion_id"):
            solve("solver.compose_salt_formula", {"cation_id": "Na_plus"}, ontology)


class TestElementSolvers:
    """Tests for element property solvers."""

    def test_compare_property(self, ontology):
        slots = {"elementA": "Na", "elementB": "Cl", "property": "electronegativity"}
        result = solve("solver.compare_property", slots, ontology)
        assert result.answer == "Cl"
        assert result.explanation_slots == {"winner": "Cl", "loser": "Na", "valA": "3.16", "valB": "0.93"}

    def test_compare_property_tie_goes_to_a(self, ontology):
        slots = {"elementA": "O", "elementB": "O", "property": "electronegativity"}
        assert solve("solver.compare_property", slots, ontology).answer == "O"

    def test_compare_property_missing_value(self, ontology):
        slots = {"elementA": "Ne", "elementB": "Cl", "property": "electronegativity"}
        with pytest.raises(MissingSlotDataError):
            solve("solver.compare_property", slots, ontology)

    def test_trend_order(self, ontology):
        slots = {"element_symbols": ["Na", "Cl", "Mg"], "property": "electronegativity", "order": "ascending"}
        assert solve("solver.periodic_trend_order", slots, ontology).answer == ["Na", "Mg", "Cl"]

    def test_trend_order_descending_from_text(self, ontology):
        slots = {"elements": "Na, Cl, Mg", "property": "electronegativity", "order": "descending"}
        assert solve("solver.periodic_trend_order", slots, ontology).answer == ["Cl", "Mg", "Na"]

    @pytest.mark.parametrize("group,expected", [(1, 1), (2, 2), (14, 4), (17, 7), (8, 8)])
    def test_count_valence(self, ontology, group, expected):
        assert solve("solver.count_valence", {"group": group}, ontology).answer == expected

    def test_electron_config_uses_overrides(self, ontology):
        result = solve("solver.electron_config", {"Z": 24}, ontology)
        assert result.answer == "1s² 2s² 2p⁶ 3s² 3p⁶ 4s¹ 3d⁵"
        assert result.explanation_slots["formula"] == "1s²2s²2p⁶3s²3p⁶3d⁵4s¹"

    def test_electron_config_invalid_z(self, ontology):
        with pytest.raises(MissingSlotDataError):
            solve("solver.electron_config", {"Z": 0}, ontology)

    def test_delta_chi(self, ontology):
        result = solve("solver.delta_chi", {"elementA": "Na", "elementB": "Cl"}, ontology)
        assert result.answer == "ionic"
        assert result.explanation_slots["delta"] == "2.23"

    def test_select_by_metal_type(self, ontology):
        slots = {"element_symbols": ["Na", "Cl", "Fe", "O"], "metal_type": "metal"}
        assert solve("solver.select_by_metal_type", slots, ontology).answer == ["Na", "Fe"]

    def test_oxidation_state(self, ontology):
        assert solve("solver.oxidation_states", {"expected_state": 6}, ontology).answer == 6


class TestLookupSolvers:
    """Tests for table lookups and comparisons."""

    def test_solubility_binary(self, ontology):
        soluble = solve("solver.solubility_check", {"cation_id": "Na_plus", "anion_id": "Cl_minus"}, ontology)
        slightly = solve("solver.solubility_check", {"cation_id": "Ca_2plus", "anion_id": "SO4_2minus"}, ontology)
        assert soluble.answer == "soluble"
        assert slightly.answer == "insoluble"

    def test_solubility_unknown_pair(self, ontology):
        with pytest.raises(MissingSlotDataError):
            solve("solver.solubility_check", {"cation_id": "Al_3plus", "anion_id": "Cl_minus"}, ontology)

    def test_slot_lookup(self, ontology):
        assert solve("solver.slot_lookup", {"period": 3}, ontology, answer_field="period").answer == 3
        assert solve("solver.slot_lookup", {"pairs": ["H:Hydrogen"]}, ontology, answer_field="pairs").answer == [
            "H:Hydrogen"
        ]

    def test_slot_lookup_missing(self, ontology):
        with pytest.raises(MissingSlotDataError, match="period"):
            solve("solver.slot_lookup", {}, ontology, answer_field="period")

    def test_crystal_melting(self, ontology):
        slots = {"formulaA": "H₂O", "formulaB": "NaCl", "crystal_typeA": "molecular", "crystal_typeB": "ionic"}
        result = solve("solver.compare_crystal_melting", slots, ontology)
        assert result.answer == "NaCl"
        assert result.explanation_slots["crystal_winner"] == "ionic"
        assert result.explanation_slots["crystal_loser"] == "molecular"

    def test_activity_compare(self, ontology):
        assert solve("solver.activity_compare", {"positionA": 3, "positionB": 10}, ontology).answer == "yes"
        assert solve("solver.activity_compare", {"positionA": 15, "positionB": 3}, ontology).answer == "no"

    @pytest.mark.parametrize(
        "slots,expected",
        [
            ({"has_precipitate": 1, "has_gas": 1}, "precipitate"),
            ({"has_gas": 1, "has_water": 1}, "gas"),
            ({"has_water": 1}, "water"),
            ({"has_weak_electrolyte": 1}, "weak_electrolyte"),
            ({"has_precipitate": 0}, "none"),
        ],
    )
    def test_driving_force(self, ontology, slots, expected):
        assert solve("solver.driving_force", slots, ontology).answer == expected

    def test_predict_observation(self, ontology):
        assert solve("solver.predict_observation", {"observation": "white precipitate"}, ontology).answer == (
            "white precipitate"
        )


class TestCalculationSolvers:
    """Tests for numeric solvers and their rounding."""

    def test_molar_mass(self, ontology):
        result = solve("solver.molar_mass", {"composition": '{"H": 2, "O": 1}'}, ontology)
        assert result.answer == 18.02
        assert result.explanation_slots["M"] == "18.02"

    def test_molar_mass_accepts_mapping(self, ontology):
        assert solve("solver.molar_mass", {"composition": {"Na": 1, "Cl": 1}}, ontology).answer == 58.44

    def test_molar_mass_malformed(self, ontology):
        with pytest.raises(MissingSlotDataError):
            solve("solver.molar_mass", {"composition": "{not json"}, ontology)

    def test_mass_fraction(self, ontology):
        slots = {"composition": '{"H": 2, "O": 1}', "M": 18.02, "target_element": "O"}
        assert solve("solver.mass_fraction", slots, ontology).answer == 88.8

    def test_mass_fraction_param_overrides_slot(self, ontology):
        slots = {"composition": '{"H": 2, "O": 1}', "M": 18.02, "target_element": "O"}
        assert solve("solver.mass_fraction", slots, ontology, target_element="H").answer == 11.2

    def test_mass_fraction_element_not_in_composition(self, ontology):
        slots = {"composition": '{"H": 2, "O": 1}', "M": 18.02, "target_element": "Na"}
        with pytest.raises(MissingSlotDataError):
            solve("solver.mass_fraction", slots, ontology)

    def test_amount_modes(self, ontology):
        slots = {"mass": 36.04, "M": 18.02, "amount": 0.5}
        assert solve("solver.amount_calc", slots, ontology).answer == 2
        assert solve("solver.amount_calc", slots, ontology, mode="m").answer == 9.01

    def test_amount_unknown_mode(self, ontology):
        with pytest.raises(UnknownIdentifierError):
            solve("solver.amount_calc", {"mass": 1, "M": 1}, ontology, mode="volume")

    def test_concentration_modes(self, ontology):
        assert solve("solver.concentration", {"m_solute": 20, "m_solution": 200}, ontology).answer == 10
        inverse = solve("solver.concentration", {"omega": 10, "m_solution": 250}, ontology, mode="inverse")
        assert inverse.answer == 25
        dilution = solve(
            "solver.concentration", {"omega1": 20, "m1": 100, "omega2": 10}, ontology, mode="dilution"
        )
        assert dilution.answer == 200

    def test_concentration_unknown_mode(self, ontology):
        with pytest.raises(UnknownIdentifierError):
            solve("solver.concentration", {}, ontology, mode="molarity")

    def test_stoichiometry_and_yield(self, ontology):
        slots = {
            "given_mass": 48,
            "given_M": 24,
            "given_coeff": 2,
            "find_M": 40,
            "find_coeff": 2,
            "yield_percent": 75,
        }
        assert solve("solver.stoichiometry", slots, ontology).answer == 80
        result = solve("solver.reaction_yield", slots, ontology)
        assert result.answer == 60
        assert result.explanation_slots["theoretical"] == "80"

    def test_non_numeric_slot(self, ontology):
        with pytest.raises(MissingSlotDataError, match="not numeric"):
            solve("solver.stoichiometry", {"given_mass": "lots", "given_M": 24}, ontology)
