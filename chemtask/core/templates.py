"""
Task and prompt template models.

Templates are declarative JSON records interpreted by the engine. They are
validated once at load time with pydantic; generator/solver parameters are
parsed into a tagged variant so a ``"{name}"`` placeholder is recognised
here instead of being re-parsed on every generation call.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from chemtask.core.types import (
    CompetencyWeight,
    DistractorStrategy,
    EvaluationMode,
    InteractionType,
)

PLACEHOLDER_RE = re.compile(r"^\{(.+)\}$")


# =============================================================================
# Step parameters
# =============================================================================


@dataclass(frozen=True)
class LiteralParam:
    """A parameter used as written."""

    value: Any


@dataclass(frozen=True)
class RandomFromDomain:
    """A ``"{domain}"`` placeholder: resolve to a random valid choice."""

    domain: str


ParamValue = Union[LiteralParam, RandomFromDomain]


def parse_param(raw: Any) -> ParamValue:
    if isinstance(raw, (LiteralParam, RandomFromDomain)):
        return raw
    if isinstance(raw, str):
        match = PLACEHOLDER_RE.match(raw)
        if match:
            return RandomFromDomain(match.group(1))
    return LiteralParam(raw)


def parse_params(raw: Mapping[str, Any] | None) -> dict[str, ParamValue]:
    """Parse a raw params mapping. Already-parsed values pass through unchanged."""
    return {key: parse_param(value) for key, value in (raw or {}).items()}


# =============================================================================
# Task templates
# =============================================================================


class EvaluationSpec(BaseModel):
    """How a learner's answer is checked."""

    model_config = ConfigDict(frozen=True)

    mode: EvaluationMode | str = Field(EvaluationMode.EXACT, description="Evaluation mode")
    tolerance: float | None = Field(None, ge=0, description="Absolute numeric tolerance")
    partial_credit: bool | None = None


class PipelineStep(BaseModel):
    """A generator, solver, or renderer reference with its parameters."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(..., description="Registered step id, e.g. gen.pick_element_pair")
    params: dict[str, Any] = Field(default_factory=dict)

    @field_validator("params", mode="before")
    @classmethod
    def _parse_params(cls, value: Any) -> dict[str, ParamValue]:
        return parse_params(value)


class Pipeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    generator: PipelineStep
    solvers: list[PipelineStep] = Field(default_factory=list)
    renderers: list[PipelineStep] = Field(default_factory=list)


class TemplateMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    interaction: InteractionType
    objects: list[str] = Field(default_factory=list)
    reasoning: list[str] = Field(default_factory=list)
    evaluation: EvaluationSpec = Field(default_factory=EvaluationSpec)


class DifficultyModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    features: dict[str, Any] = Field(default_factory=dict)
    target_band: tuple[float, float] = Field(..., description="Difficulty band [lo, hi]")


class TaskTemplate(BaseModel):
    """Declarative description of one exercise shape."""

    model_config = ConfigDict(frozen=True)

    template_id: str
    meta: TemplateMeta
    pipeline: Pipeline
    prompt_template_id: str
    explanation_template_id: str | None = None
    evidence_rules: list[str] = Field(default_factory=list)
    difficulty_model: DifficultyModel
    exam_tags: list[str] = Field(default_factory=list)
    competency_hint: dict[str, CompetencyWeight] = Field(default_factory=dict)
    distractor_strategy: DistractorStrategy | None = Field(
        None,
        description="Explicit wrong-answer strategy; inferred from slots when absent",
    )

    @property
    def interaction(self) -> InteractionType:
        return self.meta.interaction

    def competency_map(self) -> dict[str, str]:
        """Competency hint as plain 'P'/'S' strings."""
        return {comp: weight.value for comp, weight in self.competency_hint.items()}


class PromptTemplate(BaseModel):
    """Question text with ``{slot}`` tokens and per-slot directives."""

    model_config = ConfigDict(frozen=True)

    question: str
    slots: dict[str, str | dict[str, str]] = Field(default_factory=dict)


# =============================================================================
# Loading
# =============================================================================


def load_templates(source: Path | str | Iterable[Mapping[str, Any]]) -> list[TaskTemplate]:
    """
    Validate task templates from a JSON file or already-decoded records.

    Args:
        source: Path to a JSON array of template records, or the records

    Returns:
        Validated templates in source order
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        records = json.loads(path.read_text(encoding="utf-8"))
        logger.debug(f"Loaded {len(records)} template records from {path}")
    else:
        records = list(source)

    return [
        record if isinstance(record, TaskTemplate) else TaskTemplate.model_validate(record)
        for record in records
    ]


def load_prompt_templates(source: Path | str | Mapping[str, Any]) -> dict[str, PromptTemplate]:
    """Validate a mapping of prompt template id to prompt template."""
    if isinstance(source, (str, Path)):
        raw = json.loads(Path(source).read_text(encoding="utf-8"))
    else:
        raw = source
    return {
        key: value if isinstance(value, PromptTemplate) else PromptTemplate.model_validate(value)
        for key, value in raw.items()
    }
