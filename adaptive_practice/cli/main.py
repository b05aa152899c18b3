"""
Typer CLI for the adaptive practice engine.

Commands:
    practice init-db                 - Create database tables
    practice config                  - Show the effective configuration
    practice add-question <id> ...   - Add or update a question in the bank
    practice select <user>           - Build a regular practice session
    practice next <user>             - Pick the next single question
    practice drill <user> <module>   - Build an adaptive drill for a module
    practice complete-drill <user> <module> - Record a finished drill
    practice record <user> <qid>     - Record a graded attempt
    practice confidence              - Score one answer without persisting
    practice skills <user>           - Show a learner's skill states

Usage:
    practice --help
    practice select alice --size 10 --focus 3 --focus 4
    practice complete-drill alice 3 -c q-7 -c q-9 -i q-12
    practice record alice q-101 --correct --time 42 --hints 1
    practice confidence --correct --time 55 --expected 60 --difficulty 7
"""

from __future__ import annotations

import json
import sys
import uuid
from datetime import UTC, datetime

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from adaptive_practice.core.decay import effective_mastery, skill_decay
from adaptive_practice.core.exceptions import PracticeEngineError
from adaptive_practice.core.models import (
    DrillAnswer,
    DrillHistory,
    QuestionItem,
    SelectionResult,
    SkillCategory,
)
from adaptive_practice.scoring.confidence import (
    ConfidenceRequest,
    calculate_confidence_score,
    validate_confidence_input,
)
from adaptive_practice.selection.classifier import categorize
from config import get_settings

app = typer.Typer(
    name="practice",
    help="Adaptive practice engine: session selection, adaptive drills, confidence scoring",
    no_args_is_help=True,
)

console = Console()


# ========================================
# Context Builder (Dependency Injection)
# ========================================


class CLIContext:
    """
    Dependency container for CLI commands.

    Stores and services are built lazily so commands that do not touch the
    database (confidence) never open a connection.
    """

    def __init__(self):
        self.settings = get_settings()
        self._skill_states = None
        self._questions = None
        self._drills = None

    @property
    def skill_states(self):
        if self._skill_states is None:
            from adaptive_practice.stores.sql import SqlSkillStateStore

            self._skill_states = SqlSkillStateStore()
        return self._skill_states

    @property
    def questions(self):
        if self._questions is None:
            from adaptive_practice.stores.sql import SqlQuestionRepository

            self._questions = SqlQuestionRepository()
        return self._questions

    @property
    def drills(self):
        if self._drills is None:
            from adaptive_practice.stores.sql import SqlDrillHistoryStore

            self._drills = SqlDrillHistoryStore()
        return self._drills

    def selection_service(self):
        from adaptive_practice.selection.service import QuestionSelectionService

        return QuestionSelectionService.from_settings(
            self.settings, self.skill_states, self.questions, self.drills
        )

    def attempt_recorder(self):
        from adaptive_practice.adaptive.attempts import AttemptRecorder

        return AttemptRecorder(self.skill_states)


def _fail(message: str) -> None:
    rprint(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


def _print_selection(results: list[SelectionResult], title: str, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2))
        return

    if not results:
        rprint("[yellow]No questions available.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Question", style="cyan")
    table.add_column("Module", justify="right")
    table.add_column("Skill", justify="right")
    table.add_column("Difficulty", justify="right")
    table.add_column("Category")
    table.add_column("Reason")

    for i, result in enumerate(results, 1):
        category = result.target_skill.category
        table.add_row(
            str(i),
            result.question.id,
            str(result.question.module_id),
            str(result.question.skill_id),
            str(result.question.difficulty),
            f"[{category.color}]{category.value}[/{category.color}]",
            result.reason,
        )
    console.print(table)


# ========================================
# Database Commands
# ========================================


@app.command("init-db")
def init_db_command() -> None:
    """Create the practice engine tables."""
    from adaptive_practice.db.database import init_db

    try:
        init_db()
    except Exception as e:  # Intentionally broad - report any connection failure
        _fail(f"Database initialization failed: {e}")
    rprint("[green]Database tables initialized[/green]")


@app.command("config")
def show_config() -> None:
    """Print the effective configuration as JSON."""
    settings = get_settings()
    typer.echo(
        json.dumps(
            {
                "database_url": settings.database_url,
                "logging": {"level": settings.log_level, "file": settings.log_file},
                "selection": settings.get_selection_config(),
            },
            indent=2,
        )
    )


@app.command("add-question")
def add_question(
    question_id: str = typer.Argument(..., help="Question id"),
    module_id: int = typer.Option(..., "--module", "-m", help="Module id"),
    skill_id: int = typer.Option(..., "--skill", "-s", help="Micro-skill id"),
    difficulty: int = typer.Option(..., "--difficulty", "-d", min=1, max=10),
    expected_time: float = typer.Option(60.0, "--expected-time", min=0.1),
    max_hints: int = typer.Option(2, "--max-hints", min=0),
) -> None:
    """Add or update a single question in the bank."""
    ctx = CLIContext()
    ctx.questions.add(
        [
            QuestionItem(
                id=question_id,
                module_id=module_id,
                skill_id=skill_id,
                difficulty=difficulty,
                expected_time_seconds=expected_time,
                max_hints=max_hints,
            )
        ]
    )
    rprint(f"[green]Stored question[/green] {question_id}")


# ========================================
# Selection Commands
# ========================================


@app.command("select")
def select_session(
    user_id: str = typer.Argument(..., help="Learner id"),
    size: int | None = typer.Option(None, "--size", "-n", min=1, help="Session size"),
    exclude: list[str] = typer.Option([], "--exclude", "-x", help="Question ids to skip"),
    focus: list[int] = typer.Option([], "--focus", "-f", help="Restrict to module ids"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Build a balanced practice session for a learner."""
    ctx = CLIContext()
    session_size = size or ctx.settings.default_session_size
    results = ctx.selection_service().select_questions_for_session(
        user_id,
        session_size=session_size,
        exclude_ids=exclude,
        focus_modules=focus,
    )
    _print_selection(results, f"Practice Session for {user_id}", as_json)


@app.command("next")
def next_question(
    user_id: str = typer.Argument(..., help="Learner id"),
    attempted: list[str] = typer.Option([], "--attempted", "-a", help="Already attempted ids"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Pick the next question for an ongoing session."""
    ctx = CLIContext()
    result = ctx.selection_service().get_next_question(user_id, attempted)
    _print_selection([result] if result else [], f"Next Question for {user_id}", as_json)


@app.command("drill")
def adaptive_drill(
    user_id: str = typer.Argument(..., help="Learner id"),
    module_id: int = typer.Argument(..., help="Module to drill"),
    size: int | None = typer.Option(None, "--size", "-n", min=1, help="Drill size"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Build the next adaptive drill for a module."""
    ctx = CLIContext()
    results = ctx.selection_service().select_adaptive_drill_questions(
        user_id, module_id, session_size=size or ctx.settings.drill_size
    )
    _print_selection(results, f"Adaptive Drill - Module {module_id}", as_json)


@app.command("complete-drill")
def complete_drill(
    user_id: str = typer.Argument(..., help="Learner id"),
    module_id: int = typer.Argument(..., help="Drilled module"),
    correct_ids: list[str] = typer.Option([], "--correct", "-c", help="Correctly answered ids"),
    incorrect_ids: list[str] = typer.Option([], "--incorrect", "-i", help="Incorrectly answered ids"),
    drill_id: str | None = typer.Option(None, "--drill-id", help="Drill id (generated if omitted)"),
) -> None:
    """Record a finished adaptive drill so the next one adapts to it."""
    graded = [(qid, True) for qid in correct_ids] + [(qid, False) for qid in incorrect_ids]
    if not graded:
        _fail("No answers given; use --correct and/or --incorrect")

    ctx = CLIContext()
    answers = []
    for qid, is_correct in graded:
        question = ctx.questions.get(qid)
        if question is None:
            _fail(f"Question not found: {qid}")
        if question.module_id != module_id:
            _fail(f"Question {qid} belongs to module {question.module_id}, not {module_id}")
        answers.append(
            DrillAnswer(
                question_id=qid,
                skill_id=question.skill_id,
                difficulty=question.difficulty,
                is_correct=is_correct,
            )
        )

    drill = DrillHistory(
        drill_id=drill_id or uuid.uuid4().hex,
        user_id=user_id,
        module_id=module_id,
        completed_at=datetime.now(UTC),
        answers=tuple(answers),
    )
    ctx.drills.save(drill)

    table = Table(title=f"Drill {drill.drill_id} - Module {module_id}")
    table.add_column("Skill", justify="right")
    table.add_column("Answered", justify="right")
    table.add_column("Accuracy", justify="right")
    for skill_id in sorted({a.skill_id for a in answers}):
        table.add_row(
            str(skill_id),
            str(len(drill.answers_for_skill(skill_id))),
            f"{drill.skill_accuracy(skill_id):.0%}",
        )
    console.print(table)


# ========================================
# Attempt & Scoring Commands
# ========================================


@app.command("record")
def record_attempt(
    user_id: str = typer.Argument(..., help="Learner id"),
    question_id: str = typer.Argument(..., help="Answered question id"),
    correct: bool = typer.Option(False, "--correct/--incorrect", help="Grading result"),
    time_taken: float = typer.Option(..., "--time", "-t", min=0, help="Seconds spent"),
    hints: int = typer.Option(0, "--hints", min=0, help="Hints used"),
) -> None:
    """Record a graded attempt and update the learner's skill state."""
    ctx = CLIContext()
    question = ctx.questions.get(question_id)
    if question is None:
        _fail(f"Question not found: {question_id}")

    outcome = ctx.attempt_recorder().record_attempt(
        user_id, question, is_correct=correct, time_taken_seconds=time_taken, hints_used=hints
    )
    state = outcome.state
    rprint(
        f"[bold]Skill {state.skill_id}[/bold] (module {state.module_id}): "
        f"mastery [cyan]{state.mastery_level:.0%}[/cyan], "
        f"difficulty {outcome.update.previous_difficulty} -> {outcome.update.new_difficulty}, "
        f"confidence {outcome.confidence.confidence_score:.2f} "
        f"({outcome.confidence.interpretation})"
    )


@app.command("confidence")
def confidence(
    correct: bool = typer.Option(False, "--correct/--incorrect", help="Grading result"),
    time_taken: float = typer.Option(..., "--time", "-t", help="Seconds spent"),
    expected: float = typer.Option(60.0, "--expected", "-e", help="Expected seconds"),
    hints: int = typer.Option(0, "--hints", help="Hints used"),
    max_hints: int = typer.Option(2, "--max-hints", help="Hints available"),
    difficulty: int = typer.Option(1, "--difficulty", "-d", help="Question difficulty"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Score a single answer's confidence without touching the database."""
    payload = {
        "is_correct": correct,
        "time_taken_seconds": time_taken,
        "expected_time_seconds": expected,
        "hints_used": hints,
        "max_hints": max_hints,
        "difficulty_level": difficulty,
    }
    report = validate_confidence_input(payload)
    if not report.valid:
        _fail("; ".join(report.errors))

    result = calculate_confidence_score(ConfidenceRequest.model_validate(payload).to_input())

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    table = Table(title="Confidence Score")
    table.add_column("Factor", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in result.to_dict()["factors"].items():
        table.add_row(name, f"{value:.3f}")
    table.add_row("[bold]score[/bold]", f"[bold]{result.confidence_score:.3f}[/bold]")
    console.print(table)
    rprint(f"[dim]{result.interpretation}[/dim]")


@app.command("skills")
def show_skills(
    user_id: str = typer.Argument(..., help="Learner id"),
) -> None:
    """Show a learner's skill states with decayed mastery."""
    ctx = CLIContext()
    states = ctx.skill_states.list_by_user(user_id)
    if not states:
        rprint(f"[yellow]No skill data for {user_id} yet.[/yellow]")
        return

    table = Table(title=f"Skills for {user_id}")
    table.add_column("Module", justify="right")
    table.add_column("Skill", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Mastery", justify="right")
    table.add_column("Decay", justify="right")
    table.add_column("Effective", justify="right")
    table.add_column("Difficulty", justify="right")
    table.add_column("Category")

    for state in states:
        factor = skill_decay(
            state.last_practiced,
            rate=ctx.settings.decay_rate,
            floor=ctx.settings.decay_floor,
        )
        effective = effective_mastery(state.mastery_level, factor)
        category: SkillCategory = categorize(effective)
        table.add_row(
            str(state.module_id),
            str(state.skill_id),
            str(state.attempts),
            f"{state.mastery_level:.0%}",
            f"{factor:.0%}",
            f"{effective:.0%}",
            str(state.current_difficulty),
            f"[{category.color}]{category.value}[/{category.color}]",
        )
    console.print(table)


# ========================================
# Entry Point
# ========================================


def configure_logging() -> None:
    """Route loguru output according to settings."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB")


def main() -> None:
    """Console script entry point."""
    configure_logging()
    try:
        app()
    except PracticeEngineError as e:
        rprint(f"[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
