"""
Task engine: wires the pipeline stages into exercise generation.

Pipeline per template:
    generator -> solver(s) -> prompt -> explanation -> distractors

When a template lists several solver steps they all run in order and
only the last result is kept.
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterable

from loguru import logger

from chemtask.core.errors import InsufficientDataError, MissingSlotDataError, UnknownIdentifierError
from chemtask.core.templates import TaskTemplate
from chemtask.core.types import (
    Exercise,
    ExerciseFormat,
    ExerciseOption,
    GeneratedTask,
    InteractionType,
    SolverResult,
    stringify,
)
from chemtask.engine.distractors import generate_distractors
from chemtask.engine.evaluator import coerce_number
from chemtask.engine.generators import run_generator
from chemtask.engine.prompt_renderer import render_prompt
from chemtask.engine.registry import TemplateRegistry
from chemtask.engine.solvers import run_solver
from chemtask.ontology.models import OntologyData

DEFAULT_DISTRACTOR_COUNT = 3


def execute_template(
    template: TaskTemplate,
    ontology: OntologyData,
    rng: random.Random | None = None,
    distractor_count: int = DEFAULT_DISTRACTOR_COUNT,
) -> GeneratedTask:
    """
    Run one template through the full pipeline.

    Args:
        template: Validated task template
        ontology: Reference data snapshot
        rng: Random source shared by generator and distractors
        distractor_count: Number of distractors to request

    Returns:
        A fully resolved GeneratedTask

    Raises:
        TaskEngineError: Any stage failure other than explanation rendering
    """
    rng = rng if rng is not None else random.Random()
    step = template.pipeline.generator
    slots = run_generator(step.id, step.params, ontology, rng)

    result = SolverResult(answer="")
    for solver in template.pipeline.solvers:
        result = run_solver(solver.id, solver.params, slots, ontology)

    question = render_prompt(template.prompt_template_id, slots, ontology)

    explanation = ""
    if template.explanation_template_id:
        explanation_slots = {
            **slots,
            **result.explanation_slots,
            "correct_answer": stringify(result.answer),
        }
        try:
            explanation = render_prompt(template.explanation_template_id, explanation_slots, ontology)
        except Exception as e:
            logger.warning(f"Explanation for {template.template_id} not rendered: {e}")
            explanation = ""

    distractors = generate_distractors(
        result.answer,
        slots,
        template.interaction,
        ontology,
        distractor_count,
        strategy=template.distractor_strategy,
        rng=rng,
    )

    lo, hi = template.difficulty_model.target_band
    return GeneratedTask(
        template_id=template.template_id,
        interaction=template.interaction,
        question=question,
        correct_answer=result.answer,
        distractors=distractors,
        explanation=explanation,
        competency_map=template.competency_map(),
        difficulty=(lo + hi) / 2,
        exam_tags=list(template.exam_tags),
        slots=slots,
    )


class TaskEngine:
    """
    Exercise generation over a fixed template set and ontology snapshot.

    Example:
        engine = TaskEngine(templates, ontology)
        task = engine.generate("compare_electronegativity")
        exercise = engine.to_exercise(task)
    """

    def __init__(
        self,
        templates: Iterable[TaskTemplate] | TemplateRegistry,
        ontology: OntologyData,
        rng: random.Random | None = None,
        distractor_count: int = DEFAULT_DISTRACTOR_COUNT,
    ):
        self.registry = templates if isinstance(templates, TemplateRegistry) else TemplateRegistry(templates)
        self.ontology = ontology
        self.distractor_count = distractor_count
        self._rng = rng if rng is not None else random.Random()

    def _execute(self, template: TaskTemplate) -> GeneratedTask:
        logger.debug(f"Generating task from template {template.template_id}")
        return execute_template(template, self.ontology, self._rng, self.distractor_count)

    def generate(self, template_id: str) -> GeneratedTask:
        """Generate a task from a specific template."""
        template = self.registry.get_by_id(template_id)
        if template is None:
            raise UnknownIdentifierError(f"Unknown template: {template_id}")
        return self._execute(template)

    def generate_random(self) -> GeneratedTask:
        """Generate a task from a uniformly random template."""
        templates = self.registry.all()
        if not templates:
            raise InsufficientDataError("No templates registered")
        return self._execute(self._rng.choice(templates))

    def generate_for_competency(self, competency_id: str) -> GeneratedTask | None:
        """Generate a task from a random template covering the competency, or None."""
        matching = self.registry.get_by_competency(competency_id)
        if not matching:
            return None
        return self._execute(self._rng.choice(matching))

    def generate_from(self, templates: list[TaskTemplate]) -> GeneratedTask:
        """Generate a task from a random template of the given list."""
        if not templates:
            raise InsufficientDataError("No templates to choose from")
        return self._execute(self._rng.choice(templates))

    # =========================================================================
    # Exercise shaping
    # =========================================================================

    def _shuffle(self, options: list[ExerciseOption]) -> None:
        """Fisher-Yates shuffle in place."""
        for i in range(len(options) - 1, 0, -1):
            j = self._rng.randint(0, i)
            options[i], options[j] = options[j], options[i]

    def _wrong_options(self, task: GeneratedTask) -> list[ExerciseOption]:
        return [ExerciseOption(f"wrong_{i}", text) for i, text in enumerate(task.distractors)]

    def to_exercise(self, task: GeneratedTask) -> Exercise:
        """
        Shape a GeneratedTask for presentation.

        - choice_multi: one option per correct entry (correct_0..k) plus distractors
        - match_pairs: 'left:right' entries become pairs, no options
        - interactive_orbital: no options, target Z from the slots
        - guided_selection: single choice plus the chain context
        - anything else: single choice with one 'correct' option
        """
        base = {
            "type": task.template_id,
            "question": task.question,
            "explanation": task.explanation,
            "competency_map": dict(task.competency_map),
        }
        interaction = task.interaction
        answers = task.correct_answer if isinstance(task.correct_answer, list) else [task.correct_answer]

        if interaction == InteractionType.CHOICE_MULTI:
            correct = [ExerciseOption(f"correct_{i}", stringify(a)) for i, a in enumerate(answers)]
            options = correct + self._wrong_options(task)
            self._shuffle(options)
            return Exercise(
                **base,
                format=ExerciseFormat.MULTIPLE_SELECT,
                options=options,
                correct_ids=[opt.id for opt in correct],
            )

        if interaction == InteractionType.MATCH_PAIRS:
            pairs = []
            for entry in answers:
                left, _, right = stringify(entry).partition(":")
                pairs.append((left, right))
            return Exercise(**base, format=ExerciseFormat.MATCH_PAIRS, options=[], pairs=pairs)

        if interaction == InteractionType.INTERACTIVE_ORBITAL:
            return Exercise(
                **base,
                format=ExerciseFormat.INTERACTIVE_ORBITAL,
                options=[],
                target_z=_target_z(task),
            )

        options = [ExerciseOption("correct", stringify(task.correct_answer))] + self._wrong_options(task)
        self._shuffle(options)

        if interaction == InteractionType.GUIDED_SELECTION:
            return Exercise(
                **base,
                format=ExerciseFormat.GUIDED_SELECTION,
                options=options,
                correct_id="correct",
                context={
                    "chain": task.slots.get("chain_substances"),
                    "gap_index": task.slots.get("gap_index"),
                },
            )

        return Exercise(**base, format=ExerciseFormat.MULTIPLE_CHOICE, options=options, correct_id="correct")


def _target_z(task: GeneratedTask) -> int:
    """Atomic number an orbital exercise asks the learner to fill."""
    z = coerce_number(task.slots.get("Z"))
    if "Z" not in task.slots or not math.isfinite(z) or not z.is_integer() or z < 1:
        raise MissingSlotDataError(
            f"{task.template_id}: orbital exercise needs a valid Z slot, got {task.slots.get('Z')!r}"
        )
    return int(z)
