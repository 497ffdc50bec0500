"""
Exercise generation pipeline.

generator -> solver(s) -> prompt renderer -> distractors, assembled by
TaskEngine. The evaluator checks answers after presentation.
"""

from chemtask.engine.distractors import generate_distractors, select_strategy
from chemtask.engine.evaluator import evaluate
from chemtask.engine.generators import GENERATORS, run_generator
from chemtask.engine.prompt_renderer import render_prompt
from chemtask.engine.registry import TemplateRegistry
from chemtask.engine.slot_resolver import resolve_slots
from chemtask.engine.solvers import SOLVERS, run_solver
from chemtask.engine.task_engine import TaskEngine, execute_template

__all__ = [
    "GENERATORS",
    "SOLVERS",
    "TaskEngine",
    "TemplateRegistry",
    "evaluate",
    "execute_template",
    "generate_distractors",
    "render_prompt",
    "resolve_slots",
    "run_generator",
    "run_solver",
    "select_strategy",
]
