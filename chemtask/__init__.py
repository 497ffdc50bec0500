"""
Chemistry adaptive exercise engine.

Generates school chemistry exercises from declarative templates over a
read-only ontology snapshot, checks answers, and tracks per-competency
mastery with Bayesian Knowledge Tracing.

Components:
- ontology: Reference data models and the JSON loader
- engine: Generators, solvers, prompt rendering, distractors, TaskEngine
- mastery: BKT state stores and the MasteryTracker
- core: Shared types, template models, BKT math, errors
"""
from chemtask.core import (
    BktParams,
    BktState,
    CompetencyLevel,
    EvaluationResult,
    Exercise,
    ExerciseFormat,
    GeneratedTask,
    InsufficientDataError,
    InteractionType,
    MissingSlotDataError,
    TaskEngineError,
    TaskTemplate,
    UnknownIdentifierError,
    bkt_update,
    get_level,
)
from chemtask.engine import TaskEngine, TemplateRegistry, evaluate
from chemtask.mastery import InMemoryBktStateStore, MasteryTracker, SQLiteBktStateStore
from chemtask.ontology import OntologyData, OntologyLoader, load_ontology

__version__ = "0.1.0"

__all__ = [
    # Engine
    "TaskEngine",
    "TemplateRegistry",
    "evaluate",
    # Ontology
    "OntologyData",
    "OntologyLoader",
    "load_ontology",
    # Mastery
    "BktParams",
    "BktState",
    "CompetencyLevel",
    "InMemoryBktStateStore",
    "MasteryTracker",
    "SQLiteBktStateStore",
    "bkt_update",
    "get_level",
    # Types
    "EvaluationResult",
    "Exercise",
    "ExerciseFormat",
    "GeneratedTask",
    "InteractionType",
    "TaskTemplate",
    # Errors
    "InsufficientDataError",
    "MissingSlotDataError",
    "TaskEngineError",
    "UnknownIdentifierError",
]
