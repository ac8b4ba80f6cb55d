"""
CLI interface for KidGuard AI.

Inspect prompts offline, run generation and validation against the live
API, and smoke-test the whole pipeline.
"""

import logging
import sys
import time
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from kidguard_ai.config.loader import load_service_config
from kidguard_ai.core.errors import ConfigurationError, KidGuardError
from kidguard_ai.core.guidelines import GUIDELINE_TABLE
from kidguard_ai.core.schemas import GeneratedExercise
from kidguard_ai.core.service import ExerciseService
from kidguard_ai.prompts import build_generation_prompt, build_validation_prompt
from kidguard_ai.storage.ledger import LedgerStats

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

SMOKE_TIME_LIMIT_MS = 5000


def _build_service(config_path: Optional[str]) -> ExerciseService:
    """Load configuration and build the service, exiting on bad config."""
    try:
        return ExerciseService.from_config(load_service_config(config_path))
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[red]Configuration error:[/] {e}")
        console.print("Set DEEPSEEK_API_KEY or pass --config with a gateway.api_key")
        sys.exit(EXIT_CODE_FAIL)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """KidGuard AI CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    if ctx.invoked_subcommand is None:
        console.print("KidGuard AI - Use --help to see available commands")


@app.command()
def guidelines():
    """Show the pedagogical guidelines for every age band."""
    table = Table(title="Age band guidelines")
    table.add_column("Ages")
    table.add_column("Cognitive level")
    table.add_column("Attention")
    table.add_column("Math")
    table.add_column("Reading")
    table.add_column("Typical activities")

    for band, entry in GUIDELINE_TABLE.items():
        table.add_row(
            band.value, entry.cognitive_level, entry.attention_span, entry.math_level, entry.reading_level,
            ", ".join(entry.examples),
        )

    console.print(table)


@app.command()
def prompt(
    subject: str = typer.Argument(..., help="math, reading, logic or vocabulary"),
    age: int = typer.Option(..., "--age", "-a", help="Child age (6-14)"),
    difficulty: str = typer.Option("medium", "--difficulty", "-d", help="easy, medium or hard"),
    count: int = typer.Option(1, "--count", "-n", help="Number of exercises (1-10)"),
    question: Optional[str] = typer.Option(None, "--question", help="Show the validation prompt for this question"),
    expected: Optional[str] = typer.Option(None, "--expected", help="Expected answer (validation prompt)"),
    answer: Optional[str] = typer.Option(None, "--answer", help="Child's answer (validation prompt)"),
):
    """Print the prompts sent to the model. No network call is made."""
    try:
        if question is not None:
            text = build_validation_prompt(question, expected or "", answer or "", age, subject)
            console.print("[bold]Validation prompt[/bold]")
            console.print(text, markup=False)
        else:
            generation = build_generation_prompt(subject, age, difficulty, count)
            console.print("[bold]System prompt[/bold]")
            console.print(generation.system_prompt, markup=False)
            console.print("\n[bold]User prompt[/bold]")
            console.print(generation.user_prompt, markup=False)
    except KidGuardError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def generate(
    subject: str = typer.Argument(..., help="math, reading, logic or vocabulary"),
    age: int = typer.Option(..., "--age", "-a", help="Child age (6-14)"),
    difficulty: str = typer.Option("medium", "--difficulty", "-d", help="easy, medium or hard"),
    count: int = typer.Option(1, "--count", "-n", help="Number of exercises (1-10)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML configuration"),
):
    """Generate exercises with the live API."""
    service = _build_service(config)
    try:
        exercises = service.generate(subject, age, difficulty, count)
    except KidGuardError as e:
        console.print(f"[red]Generation failed ({e.kind.value}):[/] {e}")
        _display_stats(service.stats())
        sys.exit(EXIT_CODE_FAIL)

    _display_exercises(exercises)
    _display_stats(service.stats())


@app.command()
def validate(
    question: str = typer.Option(..., "--question", "-q", help="Exercise question"),
    expected: str = typer.Option(..., "--expected", "-e", help="Expected answer"),
    answer: str = typer.Option(..., "--answer", help="Child's answer"),
    age: int = typer.Option(..., "--age", "-a", help="Child age (6-14)"),
    subject: str = typer.Option("math", "--subject", "-s", help="math, reading, logic or vocabulary"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML configuration"),
):
    """Validate a child's answer with the live API."""
    service = _build_service(config)
    verdict = service.validate(question, expected, answer, age, subject)

    status = "[green]✓ CORRECT[/]" if verdict.is_correct else "[red]✗ INCORRECT[/]"
    console.print(f"\n[bold]Verdict:[/bold] {status}")
    console.print(f"Feedback: {verdict.feedback}")
    console.print(f"Leniency applied: {'yes' if verdict.leniency_applied else 'no'}")
    if verdict.reasoning:
        console.print(f"Reasoning: {verdict.reasoning}")
    if verdict.fallback_used:
        console.print("[yellow]AI validation unavailable, exact match used[/]")
    _display_stats(service.stats())


@app.command()
def smoke(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML configuration"),
):
    """
    End-to-end check against the live API.

    Generates two easy math exercises for an 8-year-old, validates a right
    and a wrong answer, then reports statistics and acceptance checks.
    """
    service = _build_service(config)

    started = time.monotonic()
    try:
        exercises = service.generate("math", 8, "easy", 2)
    except KidGuardError as e:
        console.print(f"[red]Generation failed ({e.kind.value}):[/] {e}")
        _display_stats(service.stats())
        sys.exit(EXIT_CODE_FAIL)
    generation_ms = int((time.monotonic() - started) * 1000)
    _display_exercises(exercises)

    first = exercises[0]
    started = time.monotonic()
    right = service.validate(first.question, first.correct_answer, first.correct_answer, 8, "math")
    validation_ms = int((time.monotonic() - started) * 1000)
    wrong = service.validate(first.question, first.correct_answer, "wrong answer", 8, "math")

    stats = service.stats()
    _display_stats(stats)

    checks = [
        ("Exercises generated", len(exercises) > 0),
        ("Correct answer accepted", right.is_correct),
        ("Wrong answer rejected", not wrong.is_correct),
        ("Validation answered by the model", not right.fallback_used and not wrong.fallback_used),
        ("Costs tracked", stats.total_cost_usd > 0),
        (f"Response times < {SMOKE_TIME_LIMIT_MS}ms",
         generation_ms < SMOKE_TIME_LIMIT_MS and validation_ms < SMOKE_TIME_LIMIT_MS),
    ]

    console.print("\n[bold]Acceptance checks[/bold]")
    for name, passed in checks:
        console.print(f"{'[green]✓[/]' if passed else '[red]✗[/]'} {name}")

    sys.exit(EXIT_CODE_PASS if all(passed for _, passed in checks) else EXIT_CODE_FAIL)


def _display_exercises(exercises: List[GeneratedExercise]):
    """Display generated exercises."""
    for index, exercise in enumerate(exercises, start=1):
        console.print(f"\n[bold]Exercise {index}[/bold] [dim]({exercise.topic}, {exercise.age_range.value})[/]")
        console.print(exercise.question, markup=False)
        console.print(f"Answer: {exercise.correct_answer}", markup=False)
        for number, hint in enumerate(exercise.hints, start=1):
            console.print(f"  {number}. {hint}", markup=False)


def _display_stats(stats: LedgerStats):
    """Display ledger statistics."""
    table = Table(title="API statistics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    table.add_row("Total requests", str(stats.total_requests))
    table.add_row("Successful", str(stats.success_count))
    table.add_row("Failed", str(stats.failure_count))
    table.add_row("Success rate", f"{stats.success_rate:.2f}%")
    table.add_row("Tokens used", f"{stats.total_tokens:,}")
    table.add_row("Total cost", f"${stats.total_cost_usd:.6f}")
    table.add_row("Avg response time", f"{stats.avg_response_time_ms:.0f}ms")
    for error_type, count in sorted(stats.error_type_histogram.items()):
        table.add_row(f"Errors: {error_type}", str(count))

    console.print(table)


if __name__ == "__main__":
    app()
