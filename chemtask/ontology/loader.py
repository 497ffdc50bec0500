"""
Ontology loader for the bundled JSON reference data.

Reads a data directory laid out as:

    data/
      elements.json  ions.json  properties.json          (required)
      solubility.json  oxidation_examples.json           (rules)
      bond_examples.json  activity_series.json  qualitative_tests.json
      classification_rules.json  naming_rules.json
      energy_catalyst.json  ion_nomenclature.json
      substances.json  reactions.json  genetic_chains.json  calculations.json
      morphology.json  prompts.json  labels.json         (i18n)
      templates.json  bkt_params.json

Optional files may be missing; the stages that need them raise
InsufficientDataError when they run.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from chemtask.core.bkt import BktParams
from chemtask.core.templates import TaskTemplate, load_templates
from chemtask.ontology.models import OntologyData

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"

_REQUIRED = ("elements", "ions", "properties")

_SECTIONS: dict[str, dict[str, str]] = {
    "core": {
        "elements": "elements.json",
        "ions": "ions.json",
        "properties": "properties.json",
    },
    "rules": {
        "solubility_pairs": "solubility.json",
        "oxidation_examples": "oxidation_examples.json",
        "bond_examples": "bond_examples.json",
        "activity_series": "activity_series.json",
        "qualitative_tests": "qualitative_tests.json",
        "classification_rules": "classification_rules.json",
        "naming_rules": "naming_rules.json",
        "energy_catalyst": "energy_catalyst.json",
        "ion_nomenclature": "ion_nomenclature.json",
    },
    "data": {
        "substances": "substances.json",
        "reactions": "reactions.json",
        "genetic_chains": "genetic_chains.json",
        "calculations": "calculations.json",
    },
    "i18n": {
        "morphology": "morphology.json",
        "prompt_templates": "prompts.json",
        "labels": "labels.json",
    },
}


class OntologyLoader:
    """Load ontology snapshots, templates, and BKT parameters from JSON files."""

    def __init__(self, base_path: Path | str | None = None):
        """
        Initialize loader.

        Args:
            base_path: Data directory. Defaults to the package's bundled data/.
        """
        self.base_path = Path(base_path) if base_path is not None else DEFAULT_DATA_DIR

    def _read(self, filename: str) -> Any | None:
        path = self.base_path / filename
        if not path.exists():
            return None
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)

    def load_ontology(self) -> OntologyData:
        """
        Build an immutable OntologyData snapshot.

        Raises:
            FileNotFoundError: A required core file is missing
        """
        raw: dict[str, dict[str, Any]] = {section: {} for section in _SECTIONS}

        for section, files in _SECTIONS.items():
            for key, filename in files.items():
                content = self._read(filename)
                if content is None:
                    if key in _REQUIRED:
                        raise FileNotFoundError(f"Required data file not found: {self.base_path / filename}")
                    logger.debug(f"Optional data file missing: {filename}")
                    continue
                raw[section][key] = content

        ontology = OntologyData.model_validate(raw)
        logger.debug(
            f"Loaded ontology from {self.base_path}: "
            f"{len(ontology.core.elements)} elements, {len(ontology.core.ions)} ions, "
            f"{len(ontology.core.properties)} properties, "
            f"{len(ontology.i18n.prompt_templates)} prompts"
        )
        return ontology

    def load_templates(self, filename: str = "templates.json") -> list[TaskTemplate]:
        """Load and validate task templates."""
        return load_templates(self.base_path / filename)

    def load_bkt_params(self, filename: str = "bkt_params.json") -> dict[str, BktParams]:
        """Load BKT parameters keyed by competency id. Missing file yields {}."""
        records = self._read(filename) or []
        params = {}
        for record in records:
            entry = BktParams.model_validate(record)
            params[entry.competency_id] = entry
        return params


def load_ontology(data_dir: Path | str | None = None) -> OntologyData:
    """Load the ontology snapshot from ``data_dir`` (bundled data by default)."""
    return OntologyLoader(data_dir).load_ontology()
