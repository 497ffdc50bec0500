"""
Ontology - read-only chemistry reference data.

Components:
- models: Frozen pydantic models for the snapshot (OntologyData and parts)
- loader: JSON data directory loader (OntologyLoader, load_ontology)
"""

from chemtask.ontology.loader import DEFAULT_DATA_DIR, OntologyLoader, load_ontology
from chemtask.ontology.models import (
    Element,
    Ion,
    OntologyCore,
    OntologyData,
    OntologyDataSources,
    OntologyI18n,
    OntologyRules,
    PropertyDef,
)

__all__ = [
    "DEFAULT_DATA_DIR",
    "Element",
    "Ion",
    "OntologyCore",
    "OntologyData",
    "OntologyDataSources",
    "OntologyI18n",
    "OntologyLoader",
    "OntologyRules",
    "PropertyDef",
    "load_ontology",
]
