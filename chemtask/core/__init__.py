"""
Core types shared by every pipeline stage.

Components:
- types: Enums, pipeline outputs (GeneratedTask, Exercise) and value helpers
- templates: Validated task/prompt template models and their loaders
- bkt: Bayesian Knowledge Tracing update and mastery levels
- errors: TaskEngineError taxonomy
"""

from chemtask.core.bkt import BktParams, BktState, CompetencyLevel, bkt_update, get_level
from chemtask.core.errors import (
    InsufficientDataError,
    MissingSlotDataError,
    TaskEngineError,
    UnknownIdentifierError,
)
from chemtask.core.templates import (
    EvaluationSpec,
    LiteralParam,
    PromptTemplate,
    RandomFromDomain,
    TaskTemplate,
    load_prompt_templates,
    load_templates,
)
from chemtask.core.types import (
    CompetencyWeight,
    DistractorStrategy,
    EvaluationMode,
    EvaluationResult,
    Exercise,
    ExerciseFormat,
    ExerciseOption,
    GeneratedTask,
    InteractionType,
    SolverResult,
)

__all__ = [
    # Types
    "CompetencyWeight",
    "DistractorStrategy",
    "EvaluationMode",
    "EvaluationResult",
    "Exercise",
    "ExerciseFormat",
    "ExerciseOption",
    "GeneratedTask",
    "InteractionType",
    "SolverResult",
    # Templates
    "EvaluationSpec",
    "LiteralParam",
    "PromptTemplate",
    "RandomFromDomain",
    "TaskTemplate",
    "load_prompt_templates",
    "load_templates",
    # Mastery
    "BktParams",
    "BktState",
    "CompetencyLevel",
    "bkt_update",
    "get_level",
    # Errors
    "InsufficientDataError",
    "MissingSlotDataError",
    "TaskEngineError",
    "UnknownIdentifierError",
]
