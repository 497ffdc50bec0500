"""
Ontology snapshot models.

The ontology is the read-only reference data every pipeline stage
receives whole: elements, ions, property definitions, fact tables, and
i18n resources. Models are frozen pydantic models so a snapshot cannot be
mutated once loaded. Unknown fields are kept (``extra="allow"``) so data
files may carry more than the engine reads.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from chemtask.core.templates import PromptTemplate

# (n, subshell letter, electrons)
SubshellFilling = tuple[int, str, int]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


# =============================================================================
# Core
# =============================================================================


class ElectronException(_Frozen):
    config_override: list[SubshellFilling]


class Element(_Frozen):
    """A chemical element."""

    Z: int
    symbol: str
    name_en: str = ""
    group: int
    period: int
    metal_type: str = Field(..., description="metal, nonmetal, or metalloid")
    element_group: str = ""
    atomic_mass: float
    typical_oxidation_states: list[int] = Field(default_factory=list)
    electronegativity: float | None = None
    electron_exception: ElectronException | None = None

    def value_of(self, field: str) -> float | None:
        """Numeric value of a property field, or None when absent or non-numeric."""
        value = getattr(self, field, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value


class IonNaming(_Frozen):
    suffix: str


class Ion(_Frozen):
    """A cation or anion. Formulas carry Unicode charge suffixes, e.g. SO₄²⁻."""

    id: str
    formula: str
    charge: int
    type: Literal["cation", "anion"]
    name: str = ""
    tags: list[str] = Field(default_factory=list)
    naming: IonNaming | None = None


class PropertyFilter(_Frozen):
    min_Z: int | None = None
    max_Z: int | None = None
    exclude_groups: list[int] = Field(default_factory=list)


class PropertyDef(_Frozen):
    """A comparable element property such as electronegativity."""

    id: str
    value_field: str
    object: str = "element"
    unit: str | None = None
    trend_hint: dict[str, str | None] | None = None
    filter: PropertyFilter | None = None
    i18n: dict[str, dict[str, str]] = Field(default_factory=dict)


class OntologyCore(_Frozen):
    elements: list[Element] = Field(default_factory=list)
    ions: list[Ion] = Field(default_factory=list)
    properties: list[PropertyDef] = Field(default_factory=list)
    electron_config_overrides: dict[int, list[SubshellFilling]] = Field(
        default_factory=dict,
        description="Electron-configuration exceptions by Z, derived from element data",
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_config_overrides(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "electron_config_overrides" in data:
            return data
        overrides: dict[int, Any] = {}
        for element in data.get("elements", []):
            raw = element if isinstance(element, dict) else element.model_dump()
            exception = raw.get("electron_exception")
            if exception:
                overrides[raw["Z"]] = exception["config_override"]
        return {**data, "electron_config_overrides": overrides}


# =============================================================================
# Rules (fact tables)
# =============================================================================


class SolubilityPair(_Frozen):
    cation: str
    anion: str
    solubility: str


class OxidationExample(_Frozen):
    formula: str
    target_element: str
    oxidation_state: int
    difficulty: str = ""


class BondExample(_Frozen):
    formula: str
    bond_type: str
    crystal_type: str


class BondExamples(_Frozen):
    examples: list[BondExample] = Field(default_factory=list)
    crystal_melting_rank: dict[str, int] = Field(default_factory=dict)


class ActivityEntry(_Frozen):
    symbol: str
    name: str = ""
    position: int
    reduces_H: bool = False


class QualitativeTest(_Frozen):
    target_id: str
    target_name: str = ""
    reagent_formula: str
    reagent_name: str = ""
    observation: str


class ClassificationRule(_Frozen):
    """How a formula pattern identifies a substance class."""

    id: str
    substance_class: str = Field(..., alias="class")
    subclass: str = ""
    pattern: str
    description: str = ""
    examples: list[str] = Field(default_factory=list)


class NamingExample(_Frozen):
    formula: str
    name: str


class NamingRule(_Frozen):
    id: str
    substance_class: str = Field(..., alias="class")
    pattern: str
    template: str
    examples: list[NamingExample] = Field(default_factory=list)


class RateFactor(_Frozen):
    factor_id: str
    name: str
    effect: str
    detail: str = ""
    applies_to: Literal["all", "homogeneous", "heterogeneous"]


class CatalystProperties(_Frozen):
    changes: list[str] = Field(default_factory=list)
    does_not_change: list[str] = Field(default_factory=list)


class CommonCatalyst(_Frozen):
    catalyst: str
    name: str = ""
    reaction: str


class EquilibriumShift(_Frozen):
    factor: str
    shift: Literal["forward", "reverse", "no_shift"]
    explanation: str = ""


class EnergyCatalyst(_Frozen):
    """Reaction rate, catalysis, and equilibrium facts."""

    rate_factors: list[RateFactor] = Field(default_factory=list)
    catalyst_properties: CatalystProperties | None = None
    common_catalysts: list[CommonCatalyst] = Field(default_factory=list)
    equilibrium_shifts: list[EquilibriumShift] = Field(default_factory=list)


class SuffixRule(_Frozen):
    id: str
    condition: str
    suffix: str
    description: str = ""
    examples: list[str] = Field(default_factory=list)


class AcidAnionPair(_Frozen):
    acid: str
    acid_name: str = ""
    anion_id: str


class IonNomenclature(_Frozen):
    suffix_rules: list[SuffixRule] = Field(default_factory=list)
    acid_to_anion_pairs: list[AcidAnionPair] = Field(default_factory=list)


class OntologyRules(_Frozen):
    solubility_pairs: list[SolubilityPair] = Field(default_factory=list)
    oxidation_examples: list[OxidationExample] = Field(default_factory=list)
    bond_examples: BondExamples | None = None
    activity_series: list[ActivityEntry] | None = None
    qualitative_tests: list[QualitativeTest] | None = None
    classification_rules: list[ClassificationRule] | None = None
    naming_rules: list[NamingRule] | None = None
    energy_catalyst: EnergyCatalyst | None = None
    ion_nomenclature: IonNomenclature | None = None


# =============================================================================
# Data sources
# =============================================================================


class Substance(_Frozen):
    formula: str
    name: str = ""
    substance_class: str = Field(..., alias="class")
    subclass: str = ""


class Reaction(_Frozen):
    reaction_id: str
    equation: str
    type_tags: list[str] = Field(default_factory=list)
    driving_forces: list[str] = Field(default_factory=list)
    heat_effect: str = "unknown"
    net_ionic: str | None = None


class CompositionEntry(_Frozen):
    element: str
    Ar: float
    count: int


class CalcSubstance(_Frozen):
    formula: str
    name: str = ""
    M: float
    composition: list[CompositionEntry] = Field(default_factory=list)


class CalcParticipant(_Frozen):
    formula: str
    coeff: int
    M: float


class CalcReaction(_Frozen):
    equation: str
    given: CalcParticipant
    find: CalcParticipant


class Calculations(_Frozen):
    calc_substances: list[CalcSubstance] = Field(default_factory=list)
    calc_reactions: list[CalcReaction] = Field(default_factory=list)


class ChainStep(_Frozen):
    substance: str
    reagent: str
    next: str
    type: str = ""


class GeneticChain(_Frozen):
    chain_id: str
    steps: list[ChainStep] = Field(default_factory=list)


class OntologyDataSources(_Frozen):
    substances: list[Substance] | None = None
    reactions: list[Reaction] | None = None
    genetic_chains: list[GeneticChain] | None = None
    calculations: Calculations | None = None


# =============================================================================
# i18n
# =============================================================================


class Labels(_Frozen):
    """Fixed answer labels shown as comparison and displacement distractors."""

    tie: str = "they are equal"
    indeterminate: str = "cannot be determined"
    only_with_heating: str = "only with heating"
    depends_on_concentration: str = "depends on concentration"


class OntologyI18n(_Frozen):
    # domain -> key -> grammatical field -> form
    morphology: dict[str, dict[str, dict[str, str]]] | None = None
    prompt_templates: dict[str, PromptTemplate] = Field(default_factory=dict)
    labels: Labels = Field(default_factory=Labels)


# =============================================================================
# Snapshot
# =============================================================================


class OntologyData(_Frozen):
    """Immutable reference-data bundle supplied to every pipeline stage."""

    core: OntologyCore = Field(default_factory=OntologyCore)
    rules: OntologyRules = Field(default_factory=OntologyRules)
    data: OntologyDataSources = Field(default_factory=OntologyDataSources)
    i18n: OntologyI18n = Field(default_factory=OntologyI18n)

    def find_element(self, symbol: str) -> Element | None:
        return next((el for el in self.core.elements if el.symbol == symbol), None)

    def find_ion(self, ion_id: str) -> Ion | None:
        return next((ion for ion in self.core.ions if ion.id == ion_id), None)

    def find_property(self, property_id: str) -> PropertyDef | None:
        return next((p for p in self.core.properties if p.id == property_id), None)

    def find_solubility(self, cation_id: str, anion_id: str) -> SolubilityPair | None:
        return next(
            (
                pair
                for pair in self.rules.solubility_pairs
                if pair.cation == cation_id and pair.anion == anion_id
            ),
            None,
        )
