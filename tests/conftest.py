"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests:
a small hand-built ontology, a template factory, and a seeded RNG.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from chemtask.core.templates import TaskTemplate  # noqa: E402
from chemtask.ontology.models import OntologyData  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Tests against the bundled data")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# ========================================
# Ontology
# ========================================

MOCK_ELEMENTS = [
    {"Z": 1, "symbol": "H", "name_en": "Hydrogen", "group": 1, "period": 1, "metal_type": "nonmetal",
     "element_group": "nonmetal", "atomic_mass": 1.008, "typical_oxidation_states": [1, -1],
     "electronegativity": 2.2},
    {"Z": 6, "symbol": "C", "name_en": "Carbon", "group": 14, "period": 2, "metal_type": "nonmetal",
     "element_group": "nonmetal", "atomic_mass": 12.011, "typical_oxidation_states": [4, 2, -4],
     "electronegativity": 2.55},
    {"Z": 8, "symbol": "O", "name_en": "Oxygen", "group": 16, "period": 2, "metal_type": "nonmetal",
     "element_group": "nonmetal", "atomic_mass": 16.0, "typical_oxidation_states": [-2],
     "electronegativity": 3.44},
    {"Z": 10, "symbol": "Ne", "name_en": "Neon", "group": 18, "period": 2, "metal_type": "nonmetal",
     "element_group": "noble_gas", "atomic_mass": 20.18, "typical_oxidation_states": []},
    {"Z": 11, "symbol": "Na", "name_en": "Sodium", "group": 1, "period": 3, "metal_type": "metal",
     "element_group": "alkali_metal", "atomic_mass": 22.99, "typical_oxidation_states": [1],
     "electronegativity": 0.93},
    {"Z": 12, "symbol": "Mg", "name_en": "Magnesium", "group": 2, "period": 3, "metal_type": "metal",
     "element_group": "alkaline_earth_metal", "atomic_mass": 24.305, "typical_oxidation_states": [2],
     "electronegativity": 1.31},
    {"Z": 17, "symbol": "Cl", "name_en": "Chlorine", "group": 17, "period": 3, "metal_type": "nonmetal",
     "element_group": "halogen", "atomic_mass": 35.45, "typical_oxidation_states": [7, 5, 1, -1],
     "electronegativity": 3.16},
    {"Z": 24, "symbol": "Cr", "name_en": "Chromium", "group": 6, "period": 4, "metal_type": "metal",
     "element_group": "transition_metal", "atomic_mass": 51.996, "typical_oxidation_states": [6, 3, 2],
     "electronegativity": 1.66,
     "electron_exception": {"config_override": [[4, "s", 1], [3, "d", 5]]}},
    {"Z": 26, "symbol": "Fe", "name_en": "Iron", "group": 8, "period": 4, "metal_type": "metal",
     "element_group": "transition_metal", "atomic_mass": 55.845, "typical_oxidation_states": [3, 2],
     "electronegativity": 1.83},
]

MOCK_IONS = [
    {"id": "Na_plus", "formula": "Na⁺", "charge": 1, "type": "cation"},
    {"id": "Ca_2plus", "formula": "Ca²⁺", "charge": 2, "type": "cation"},
    {"id": "Al_3plus", "formula": "Al³⁺", "charge": 3, "type": "cation"},
    {"id": "Cl_minus", "formula": "Cl⁻", "charge": -1, "type": "anion", "name": "chloride", "naming": {"suffix": "-ide"}},
    {"id": "SO4_2minus", "formula": "SO₄²⁻", "charge": -2, "type": "anion", "name": "sulfate", "naming": {"suffix": "-ate"}},
    {"id": "PO4_3minus", "formula": "PO₄³⁻", "charge": -3, "type": "anion"},
]

MOCK_PROPERTIES = [
    {
        "id": "electronegativity",
        "value_field": "electronegativity",
        "filter": {"exclude_groups": [18]},
        "i18n": {"en": {"name": "electronegativity", "higher": "higher electronegativity"}},
    },
    {
        "id": "atomic_mass",
        "value_field": "atomic_mass",
        "unit": "g/mol",
        "i18n": {"en": {"name": "atomic mass", "higher": "larger atomic mass"}},
    },
]

MOCK_PROMPTS = {
    "compare_property": {
        "question": "Which element has the {property_higher}: {elementA} or {elementB}?",
        "slots": {"property_higher": "lookup:properties.{property}.i18n.en.higher"},
    },
    "compare_property_explain": {
        "question": "{winner} ({valA}) beats {loser} ({valB}).",
    },
    "broken_explain": {
        "question": "Missing {nothing_here}",
        "slots": {"nothing_here": "lookup:properties.{no_such_slot}.i18n.en.name"},
    },
    "order_by_property": {
        "question": "Arrange {elements} in order of {order_word} {property_name}.",
        "slots": {
            "order_word": "morph:order.{order}.adjective",
            "property_name": "lookup:properties.{property}.i18n.en.name",
        },
    },
    "salt_formula": {"question": "Formula of the salt of {cation} and {anion}?"},
    "solubility": {
        "question": "Is {salt_formula} {expected_solubility}?",
        "slots": {"expected_solubility": {"soluble": "soluble", "insoluble": "insoluble"}},
    },
    "valence_electrons": {"question": "How many valence electrons does {element} have?"},
    "electron_config_orbital": {"question": "Fill the orbitals of {element} (Z = {Z})."},
    "select_metals": {
        "question": "Select all {metal_type} among: {elements}.",
        "slots": {"metal_type": "morph:metal_type.{metal_type}.plural"},
    },
    "match_names": {"question": "Match: {elements}."},
    "genetic_chain": {"question": "Chain: {chain_substances}. {substance} + {reagent} → ?"},
    "molar_mass": {"question": "Molar mass of {formula}?"},
}

MOCK_MORPHOLOGY = {
    "order": {
        "ascending": {"adjective": "increasing"},
        "descending": {"adjective": "decreasing"},
    },
    "metal_type": {
        "metal": {"plural": "metals"},
        "nonmetal": {"plural": "non-metals"},
    },
}


def build_ontology(**overrides) -> OntologyData:
    """Build the mock ontology, optionally replacing whole sections."""
    raw = {
        "core": {"elements": MOCK_ELEMENTS, "ions": MOCK_IONS, "properties": MOCK_PROPERTIES},
        "rules": {
            "solubility_pairs": [
                {"cation": "Na_plus", "anion": "Cl_minus", "solubility": "soluble"},
                {"cation": "Ca_2plus", "anion": "SO4_2minus", "solubility": "slightly_soluble"},
                {"cation": "Ca_2plus", "anion": "PO4_3minus", "solubility": "insoluble"},
            ],
            "oxidation_examples": [
                {"formula": "H₂SO₄", "target_element": "S", "oxidation_state": 6, "difficulty": "medium"},
                {"formula": "NH₃", "target_element": "N", "oxidation_state": -3, "difficulty": "easy"},
            ],
            "bond_examples": {
                "examples": [
                    {"formula": "NaCl", "bond_type": "ionic", "crystal_type": "ionic"},
                    {"formula": "H₂O", "bond_type": "covalent_polar", "crystal_type": "molecular"},
                    {"formula": "SiO₂", "bond_type": "covalent_polar", "crystal_type": "atomic"},
                    {"formula": "Fe", "bond_type": "metallic", "crystal_type": "metallic"},
                ],
                "crystal_melting_rank": {"molecular": 1, "metallic": 2, "ionic": 3, "atomic": 4},
            },
            "activity_series": [
                {"symbol": "Na", "name": "sodium", "position": 3, "reduces_H": True},
                {"symbol": "Fe", "name": "iron", "position": 10, "reduces_H": True},
                {"symbol": "Cu", "name": "copper", "position": 15, "reduces_H": False},
            ],
            "qualitative_tests": [
                {"target_id": "Cl_minus", "reagent_formula": "AgNO₃", "observation": "white precipitate"},
                {"target_id": "SO4_2minus", "reagent_formula": "BaCl₂", "observation": "white precipitate insoluble in acids"},
                {"target_id": "CO3_2minus", "reagent_formula": "HCl", "observation": "colourless gas"},
            ],
            "classification_rules": [
                {"id": "basic_oxide", "class": "oxide", "subclass": "basic", "pattern": "MₓOᵧ",
                 "description": "metal oxides that react with acids", "examples": ["CaO", "Na₂O"]},
                {"id": "normal_salt", "class": "salt", "pattern": "MₓAᵧ", "examples": []},
            ],
            "naming_rules": [
                {"id": "salt_naming", "class": "salt", "pattern": "MₓAᵧ", "template": "<metal> <acid residue>",
                 "examples": [{"formula": "NaCl", "name": "sodium chloride"},
                              {"formula": "CuSO₄", "name": "copper(II) sulfate"}]},
            ],
            "energy_catalyst": {
                "rate_factors": [
                    {"factor_id": "surface_area", "name": "grinding the solid", "effect": "speeds up the reaction",
                     "applies_to": "heterogeneous"},
                ],
                "common_catalysts": [
                    {"catalyst": "MnO₂", "name": "manganese(IV) oxide", "reaction": "decomposition of H₂O₂"},
                ],
                "equilibrium_shifts": [
                    {"factor": "a catalyst is added", "shift": "no_shift", "explanation": "both directions speed up"},
                ],
            },
            "ion_nomenclature": {
                "suffix_rules": [
                    {"id": "binary", "condition": "an oxygen-free anion", "suffix": "-ide",
                     "description": "monatomic anions take -ide", "examples": ["Cl⁻ chloride"]},
                ],
                "acid_to_anion_pairs": [
                    {"acid": "H₂SO₄", "acid_name": "sulfuric acid", "anion_id": "SO4_2minus"},
                ],
            },
        },
        "data": {
            "substances": [
                {"formula": "CaO", "name": "calcium oxide", "class": "oxide"},
                {"formula": "HCl", "name": "hydrochloric acid", "class": "acid"},
                {"formula": "NaOH", "name": "sodium hydroxide", "class": "base"},
                {"formula": "NaCl", "name": "sodium chloride", "class": "salt"},
            ],
            "reactions": [
                {"reaction_id": "r1", "equation": "NaOH + HCl → NaCl + H₂O",
                 "type_tags": ["exchange"], "driving_forces": ["water"]},
                {"reaction_id": "r2", "equation": "Fe + CuSO₄ → FeSO₄ + Cu",
                 "type_tags": ["substitution", "redox"], "driving_forces": []},
            ],
            "genetic_chains": [
                {"chain_id": "calcium", "steps": [
                    {"substance": "Ca", "reagent": "O₂", "next": "CaO"},
                    {"substance": "CaO", "reagent": "H₂O", "next": "Ca(OH)₂"},
                ]},
            ],
            "calculations": {
                "calc_substances": [
                    {"formula": "H₂O", "name": "water", "M": 18.02, "composition": [
                        {"element": "H", "Ar": 1.008, "count": 2},
                        {"element": "O", "Ar": 16.0, "count": 1},
                    ]},
                ],
                "calc_reactions": [
                    {"equation": "2Mg + O₂ → 2MgO",
                     "given": {"formula": "Mg", "coeff": 2, "M": 24},
                     "find": {"formula": "MgO", "coeff": 2, "M": 40}},
                ],
            },
        },
        "i18n": {
            "morphology": MOCK_MORPHOLOGY,
            "prompt_templates": MOCK_PROMPTS,
            "labels": {"tie": "they are equal", "indeterminate": "cannot be determined"},
        },
    }
    raw.update(overrides)
    return OntologyData.model_validate(raw)


@pytest.fixture
def ontology() -> OntologyData:
    """Small hand-built ontology snapshot."""
    return build_ontology()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible generation."""
    return random.Random(42)


# ========================================
# Templates
# ========================================


def make_template(
    template_id: str,
    generator: str,
    solver: str | None,
    prompt: str,
    interaction: str = "choice_single",
    generator_params: dict | None = None,
    solver_params: dict | None = None,
    **extra,
) -> TaskTemplate:
    """Build a validated TaskTemplate with sensible defaults."""
    record = {
        "template_id": template_id,
        "meta": {"interaction": interaction, "evaluation": extra.pop("evaluation", {"mode": "exact"})},
        "pipeline": {
            "generator": {"id": generator, "params": generator_params or {}},
            "solvers": [{"id": solver, "params": solver_params or {}}] if solver else [],
        },
        "prompt_template_id": prompt,
        "difficulty_model": {"features": {}, "target_band": extra.pop("target_band", [0.2, 0.4])},
        "competency_hint": extra.pop("competency_hint", {"electronegativity": "P"}),
    }
    record.update(extra)
    return TaskTemplate.model_validate(record)


@pytest.fixture
def compare_template() -> TaskTemplate:
    return make_template(
        "compare_electronegativity",
        "gen.pick_element_pair",
        "solver.compare_property",
        "compare_property",
        generator_params={"require_field": "electronegativity"},
        explanation_template_id="compare_property_explain",
        exam_tags=["oge", "ege"],
        competency_hint={"electronegativity": "P", "periodic_trends": "S"},
    )


@pytest.fixture
def salt_template() -> TaskTemplate:
    return make_template(
        "salt_formula",
        "gen.pick_ion_pair",
        "solver.compose_salt_formula",
        "salt_formula",
        exam_tags=["oge"],
        competency_hint={"ion_formulas": "P"},
    )


@pytest.fixture
def template_factory():
    """Expose make_template to tests as a fixture."""
    return make_template
