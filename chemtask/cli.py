"""
Typer CLI for the chemtask exercise engine.

Commands:
    chemtask templates              - List task templates
    chemtask generate <id>          - Generate one exercise from a template
    chemtask random                 - Generate one exercise from a random template
    chemtask practice <competency>  - Adaptive practice session for a competency
    chemtask mastery show           - Show BKT mastery estimates
    chemtask mastery reset          - Delete all mastery estimates

Usage:
    chemtask --help
    chemtask templates --tag oge
    chemtask generate compare_electronegativity --json
    chemtask practice electronegativity --count 5
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass

import typer
from loguru import logger
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from chemtask.core.errors import TaskEngineError
from chemtask.core.types import Exercise, ExerciseFormat, GeneratedTask, stringify
from chemtask.engine.evaluator import evaluate
from chemtask.engine.task_engine import TaskEngine
from chemtask.mastery.state_store import SQLiteBktStateStore
from chemtask.mastery.tracker import MasteryTracker
from chemtask.ontology.loader import OntologyLoader
from config import Settings, get_settings

app = typer.Typer(
    help="chemtask: adaptive chemistry exercise generator",
    no_args_is_help=True,
)
mastery_app = typer.Typer(help="BKT mastery estimates")
app.add_typer(mastery_app, name="mastery")

console = Console()

LEVEL_STYLES = {
    "none": "red",
    "basic": "yellow",
    "confident": "cyan",
    "automatic": "green",
}


def configure_logging(settings: Settings) -> None:
    """Route loguru output to stderr (and the optional log file)."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level, format="<level>{message}</level>")
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB")


@app.callback()
def main_callback() -> None:
    """Adaptive chemistry exercise generator."""
    configure_logging(get_settings())


# ========================================
# Context
# ========================================


@dataclass
class CLIContext:
    """Engine and mastery tracker built from settings."""

    settings: Settings
    engine: TaskEngine
    tracker: MasteryTracker
    store: SQLiteBktStateStore

    def close(self) -> None:
        self.store.close()


def _build_context() -> CLIContext:
    settings = get_settings()
    loader = OntologyLoader(settings.data_dir)
    ontology = loader.load_ontology()
    templates = loader.load_templates()
    engine = TaskEngine(templates, ontology, distractor_count=settings.distractor_count)

    store = SQLiteBktStateStore(settings.state_db_path)
    tracker = MasteryTracker(store, loader.load_bkt_params())
    return CLIContext(settings=settings, engine=engine, tracker=tracker, store=store)


def _fail(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")
    raise typer.Exit(code=1)


def _context_or_fail() -> CLIContext:
    try:
        return _build_context()
    except (FileNotFoundError, ValueError) as exc:
        # pydantic ValidationError subclasses ValueError
        _fail(f"Could not load data: {exc}")


# ========================================
# Presentation
# ========================================


def _show_question(exercise: Exercise) -> None:
    panel = Panel(
        exercise.question,
        title=f"[bold cyan]{exercise.type}[/bold cyan]",
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    )
    console.print(panel)


def _show_options(exercise: Exercise) -> None:
    if exercise.format == ExerciseFormat.MATCH_PAIRS:
        table = Table(box=box.MINIMAL, show_header=False)
        table.add_column("Left", style="cyan")
        table.add_column("Right", style="white")
        rights = sorted(right for _, right in exercise.pairs or [])
        for i, (left, _) in enumerate(exercise.pairs or []):
            table.add_row(left, f"{chr(ord('a') + i)}) {rights[i]}")
        console.print(table)
        return

    if exercise.format == ExerciseFormat.INTERACTIVE_ORBITAL:
        console.print(f"[dim]Target element: Z = {exercise.target_z}[/dim]")
        return

    if exercise.context and exercise.context.get("chain"):
        chain = [stringify(s) for s in exercise.context["chain"]]
        gap = exercise.context.get("gap_index")
        if isinstance(gap, int) and 0 <= gap < len(chain):
            chain[gap] = "[bold yellow]?[/bold yellow]"
        console.print(" → ".join(chain))

    table = Table(box=box.MINIMAL, show_header=False)
    table.add_column("Index", style="cyan", justify="right", width=4)
    table.add_column("Option", style="white")
    for i, option in enumerate(exercise.options):
        table.add_row(f"[{i + 1}]", option.text)
    console.print(table)


def _correct_text(exercise: Exercise, task: GeneratedTask) -> str:
    if exercise.format == ExerciseFormat.MATCH_PAIRS:
        return "; ".join(f"{left} → {right}" for left, right in exercise.pairs or [])
    if isinstance(task.correct_answer, list):
        return ", ".join(stringify(a) for a in task.correct_answer)
    return stringify(task.correct_answer)


def _print_task(engine: TaskEngine, task: GeneratedTask, as_json: bool, show_answer: bool) -> None:
    exercise = engine.to_exercise(task)
    if as_json:
        payload = exercise.to_dict()
        payload["correct_answer"] = task.correct_answer
        payload["difficulty"] = task.difficulty
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    _show_question(exercise)
    _show_options(exercise)
    if show_answer:
        console.print(f"[green]Answer:[/green] {_correct_text(exercise, task)}")
        if exercise.explanation:
            console.print(f"[dim]{exercise.explanation}[/dim]")


# ========================================
# GENERATION COMMANDS
# ========================================


@app.command("templates")
def list_templates(
    tag: str | None = typer.Option(None, "--tag", "-t", help="Only templates with this exam tag"),
    competency: str | None = typer.Option(None, "--competency", "-c", help="Only templates for this competency"),
) -> None:
    """List task templates."""
    ctx = _context_or_fail()
    try:
        registry = ctx.engine.registry
        templates = registry.all()
        if tag:
            templates = [t for t in templates if t in registry.get_by_exam_tag(tag)]
        if competency:
            templates = [t for t in templates if t in registry.get_by_competency(competency)]

        table = Table(title=f"Task Templates ({len(templates)})")
        table.add_column("Template", style="cyan")
        table.add_column("Interaction", style="magenta")
        table.add_column("Competencies", style="green")
        table.add_column("Tags", style="dim")
        for template in templates:
            comps = ", ".join(f"{c} ({w})" for c, w in template.competency_map().items())
            table.add_row(template.template_id, template.interaction.value, comps, ", ".join(template.exam_tags))
        console.print(table)
    finally:
        ctx.close()


@app.command("generate")
def generate(
    template_id: str = typer.Argument(..., help="Template id"),
    as_json: bool = typer.Option(False, "--json", help="Print the exercise as JSON"),
    show_answer: bool = typer.Option(True, "--answer/--no-answer", help="Show answer and explanation"),
) -> None:
    """Generate one exercise from a template."""
    ctx = _context_or_fail()
    try:
        task = ctx.engine.generate(template_id)
        _print_task(ctx.engine, task, as_json, show_answer)
    except TaskEngineError as exc:
        _fail(str(exc))
    finally:
        ctx.close()


@app.command("random")
def generate_random(
    as_json: bool = typer.Option(False, "--json", help="Print the exercise as JSON"),
    show_answer: bool = typer.Option(True, "--answer/--no-answer", help="Show answer and explanation"),
) -> None:
    """Generate one exercise from a random template."""
    ctx = _context_or_fail()
    try:
        task = ctx.engine.generate_random()
        _print_task(ctx.engine, task, as_json, show_answer)
    except TaskEngineError as exc:
        _fail(str(exc))
    finally:
        ctx.close()


# ========================================
# PRACTICE
# ========================================


def _ask_choice(exercise: Exercise) -> tuple[object, bool] | None:
    """
    Ask for an option-based answer.

    Returns:
        (answer, hint_used), or None when the learner does not know
    """
    multi = exercise.format == ExerciseFormat.MULTIPLE_SELECT
    if multi:
        console.print("[dim]Enter choices (e.g., 1 3). 'h'=hint, '?'=I don't know[/dim]")
    else:
        console.print("[dim]Enter choice (e.g., 1). 'h'=hint, '?'=I don't know[/dim]")

    prompt_text = f"[1-{len(exercise.options)}]"
    hint_used = False
    choice = Prompt.ask(prompt_text, console=console)
    if choice.strip().lower() == "h":
        hint_used = True
        wrong = [o.text for o in exercise.options if o.id.startswith("wrong_")]
        if wrong:
            console.print(f"[yellow]Hint: '{wrong[0]}' is NOT the answer[/yellow]")
        choice = Prompt.ask(prompt_text, console=console)
    if choice.strip() == "?":
        return None

    picked = []
    for part in choice.replace(",", " ").split():
        if part.isdigit() and 1 <= int(part) <= len(exercise.options):
            picked.append(exercise.options[int(part) - 1].id)
    if multi:
        return picked, hint_used
    return (picked[0] if picked else ""), hint_used


def _ask_pairs(exercise: Exercise) -> tuple[object, bool] | None:
    rights = sorted(right for _, right in exercise.pairs or [])
    console.print("[dim]Enter the letter matching each item. '?'=I don't know[/dim]")
    answer = []
    for left, _ in exercise.pairs or []:
        choice = Prompt.ask(f"{left}", console=console).strip().lower()
        if choice == "?":
            return None
        index = ord(choice[0]) - ord("a") if choice else -1
        right = rights[index] if 0 <= index < len(rights) else ""
        answer.append(f"{left}:{right}")
    return answer, False


def _ask_text() -> tuple[object, bool] | None:
    console.print("[dim]Type your answer. '?'=I don't know[/dim]")
    choice = Prompt.ask(">", console=console).strip()
    if choice == "?":
        return None
    return choice, False


def _run_exercise(ctx: CLIContext, task: GeneratedTask) -> tuple[bool, bool]:
    """Present one task and check the learner's answer. Returns (correct, hint_used)."""
    engine = ctx.engine
    exercise = engine.to_exercise(task)
    _show_question(exercise)
    _show_options(exercise)

    if exercise.format == ExerciseFormat.MATCH_PAIRS:
        response = _ask_pairs(exercise)
    elif exercise.format == ExerciseFormat.INTERACTIVE_ORBITAL:
        response = _ask_text()
    else:
        response = _ask_choice(exercise)

    if response is None:
        console.print(f"[yellow]Let's learn this one![/yellow] Answer: {_correct_text(exercise, task)}")
        correct, hint_used = False, False
    else:
        answer, hint_used = response
        template = engine.registry.get_by_id(task.template_id)
        if exercise.format == ExerciseFormat.MULTIPLE_SELECT:
            result = evaluate(answer, exercise.correct_ids, {"mode": "set_equivalence"})
        elif exercise.correct_id is not None:
            result = evaluate(answer, exercise.correct_id)
        elif exercise.format == ExerciseFormat.MATCH_PAIRS:
            expected = [f"{left}:{right}" for left, right in exercise.pairs or []]
            result = evaluate(answer, expected, template.meta.evaluation if template else None)
        else:
            result = evaluate(answer, stringify(task.correct_answer), template.meta.evaluation if template else None)

        correct = result.correct
        if correct:
            console.print("[green]✓ Correct[/green]")
        else:
            console.print(f"[red]✗ Incorrect[/red] (score {result.score:.2f}) Answer: {_correct_text(exercise, task)}")

    if exercise.explanation:
        console.print(f"[dim]{exercise.explanation}[/dim]")
    return correct, hint_used


@app.command("practice")
def practice(
    competency: str = typer.Argument(..., help="Competency id"),
    count: int = typer.Option(5, "--count", "-n", min=1, help="Number of exercises"),
) -> None:
    """Adaptive practice for one competency; updates mastery after every answer."""
    ctx = _context_or_fail()
    try:
        start = ctx.tracker.current(competency)
        console.print(f"[bold]{competency}[/bold]: P(L) = {start:.2f} ({ctx.tracker.level(competency).value})")

        answered = 0
        for _ in range(count):
            task = ctx.tracker.next_exercise(ctx.engine, competency, ctx.settings.competency_max_attempts)
            if task is None:
                _fail(f"No templates cover competency: {competency}")

            correct, hint_used = _run_exercise(ctx, task)
            ctx.tracker.record_answer(task.competency_map, correct, hint_used)
            answered += 1

            p_l = ctx.tracker.current(competency)
            level = ctx.tracker.level(competency).value
            console.print(f"P(L) = {p_l:.2f} [{LEVEL_STYLES[level]}]{level}[/{LEVEL_STYLES[level]}]\n")

        console.print(f"[bold]Session complete:[/bold] {answered} exercises")
    except TaskEngineError as exc:
        _fail(str(exc))
    finally:
        ctx.close()


# ========================================
# MASTERY COMMANDS
# ========================================


@mastery_app.command("show")
def mastery_show() -> None:
    """Show mastery estimates for every competency."""
    ctx = _context_or_fail()
    try:
        table = Table(title="Competency Mastery")
        table.add_column("Competency", style="cyan")
        table.add_column("P(L)", justify="right")
        table.add_column("Level")
        for competency_id, (p_l, level) in ctx.tracker.levels().items():
            style = LEVEL_STYLES[level.value]
            table.add_row(competency_id, f"{p_l:.3f}", f"[{style}]{level.value}[/{style}]")
        console.print(table)
    finally:
        ctx.close()


@mastery_app.command("reset")
def mastery_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete all mastery estimates."""
    ctx = _context_or_fail()
    try:
        if not ctx.store.has_bkt_state():
            console.print("[dim]No mastery data stored[/dim]")
            return
        if not yes and not Confirm.ask("Delete all mastery estimates?", console=console):
            console.print("Reset cancelled.")
            return
        ctx.store.clear_bkt_state()
        console.print("[green]✓[/green] Mastery estimates cleared")
    finally:
        ctx.close()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
