"""
Command-line interface for FocusFit.

Provides commands for:
- Onboarding a user and generating their first plan
- Generating, showing and completing weekly plans
- Chatting with the AI body double and simplifying tasks
"""

import json
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from focusfit.coach import BodyDoubleCoach
from focusfit.config import get_settings
from focusfit.errors import FocusFitError
from focusfit.generator import HttpTextGenerator
from focusfit.logging_config import configure_logging
from focusfit.planner import DEFAULT_HURDLES, FocusPlanGenerator
from focusfit.repository import PlanRepository
from focusfit.schemas import (
    DIETARY_LABELS,
    HURDLE_LABELS,
    DietaryRestriction,
    Hurdle,
    TaskType,
    WeeklyPlan,
)

# Initialize Typer app and Rich console
app = typer.Typer(
    help="FocusFit - ADHD-friendly weekly workout and meal-prep plans"
)
console = Console()


# ===== SERVICE WIRING =====


def _repository() -> PlanRepository:
    return PlanRepository.from_url(get_settings().database_url)


def _generator() -> HttpTextGenerator:
    return HttpTextGenerator.from_settings(get_settings())


@app.callback()
def main() -> None:
    """Configure logging once for every command."""
    configure_logging(get_settings())


# ===== DISPLAY HELPER FUNCTIONS =====


def _display_plan(plan: WeeklyPlan):
    """
    Display a weekly plan as two tables.

    Args:
        plan: WeeklyPlan to show
    """
    source = "[green]AI-generated[/green]" if plan.generated_by_ai else "[yellow]default plan[/yellow]"
    summary = plan.completion_summary()
    console.print(
        f"\n[bold]Week {plan.week_number}[/bold] ({source}) "
        f"- {summary['completed']}/{summary['total']} done  [dim]id: {plan.id}[/dim]"
    )

    workouts = Table(title="Workouts", box=box.ROUNDED)
    workouts.add_column("ID", style="dim")
    workouts.add_column("Workout", style="cyan")
    workouts.add_column("Type")
    workouts.add_column("Min", justify="right")
    workouts.add_column("Overwhelmed? Try", style="magenta")
    workouts.add_column("Done", justify="center")
    for task in plan.workouts:
        simple = task.simplified_version
        workouts.add_row(
            task.id,
            task.title,
            task.category.value,
            str(task.duration),
            f"{simple.title} ({simple.duration} min)" if simple else "-",
            "✓" if task.is_completed else "",
        )
    console.print(workouts)

    meals = Table(title="Meals", box=box.ROUNDED)
    meals.add_column("ID", style="dim")
    meals.add_column("Meal", style="cyan")
    meals.add_column("Prep", justify="right")
    meals.add_column("Serves", justify="right")
    meals.add_column("Difficulty")
    meals.add_column("Diet tags", style="green")
    meals.add_column("Done", justify="center")
    for task in plan.meals:
        meals.add_row(
            task.id,
            task.title,
            f"{task.prep_time} min",
            str(task.servings),
            task.difficulty.value,
            ", ".join(task.dietary_tags) or "-",
            "✓" if task.is_completed else "",
        )
    console.print(meals)


# ===== CLI COMMANDS =====


@app.command()
def options():
    """List the ADHD hurdles and dietary restrictions you can pick."""
    table = Table(title="ADHD Hurdles", box=box.ROUNDED)
    table.add_column("Value", style="cyan")
    table.add_column("Label")
    for hurdle, label in HURDLE_LABELS.items():
        table.add_row(hurdle.value, label)
    console.print(table)

    table = Table(title="Dietary Restrictions", box=box.ROUNDED)
    table.add_column("Value", style="cyan")
    table.add_column("Label")
    for restriction, label in DIETARY_LABELS.items():
        table.add_row(restriction.value, label)
    console.print(table)


@app.command()
def onboard(
    user_id: str = typer.Argument(..., help="User id to create"),
    email: str = typer.Option("guest@focusfit.app", "--email", "-e", help="Account email"),
    hurdle: Optional[List[Hurdle]] = typer.Option(
        None, "--hurdle", "-H", help="ADHD hurdle (repeatable)"
    ),
    diet: Optional[List[DietaryRestriction]] = typer.Option(
        None, "--diet", "-d", help="Dietary restriction (repeatable)"
    ),
):
    """Create a user profile and generate their first plan."""
    hurdles = hurdle or DEFAULT_HURDLES
    repository = _repository()

    try:
        repository.create_user_profile(user_id, email, hurdles, diet or [])
    except ValueError as e:
        console.print(f"[red]✗ Invalid profile:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"✓ Created profile for [green]{user_id}[/green]")

    with _generator() as text_generator:
        plan = FocusPlanGenerator(text_generator, repository).generate_plan(
            hurdles, diet or None, user_id=user_id
        )
    _display_plan(plan)


@app.command()
def plan(
    hurdle: Optional[List[Hurdle]] = typer.Option(
        None, "--hurdle", "-H", help="ADHD hurdle (repeatable)"
    ),
    diet: Optional[List[DietaryRestriction]] = typer.Option(
        None, "--diet", "-d", help="Dietary restriction (repeatable)"
    ),
    user_id: Optional[str] = typer.Option(
        None, "--user-id", "-u", help="Save as this user's current plan"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
):
    """Generate a weekly plan."""
    if not hurdle:
        console.print(
            f"[yellow]No hurdles given; using {', '.join(h.value for h in DEFAULT_HURDLES)}[/yellow]"
        )
    hurdles = hurdle or DEFAULT_HURDLES
    repository = _repository() if user_id else None

    with console.status("Building your plan..."), _generator() as text_generator:
        weekly_plan = FocusPlanGenerator(text_generator, repository).generate_plan(
            hurdles, diet or None, user_id=user_id
        )

    if as_json:
        console.print_json(json.dumps(weekly_plan.to_payload()))
    else:
        _display_plan(weekly_plan)


@app.command()
def show(user_id: str = typer.Argument(..., help="User whose plan to show")):
    """Show a user's current plan."""
    current = _repository().get_current_plan(user_id)
    if current is None:
        console.print(f"[yellow]No current plan for {user_id}[/yellow]")
        raise typer.Exit(1)
    _display_plan(current)


@app.command()
def complete(
    user_id: str = typer.Argument(..., help="User completing the task"),
    task_id: str = typer.Argument(..., help="Task id, e.g. workout-0 or meal-2"),
    undo: bool = typer.Option(False, "--undo", help="Mark the task as not done"),
):
    """Mark a task in the user's current plan as done."""
    repository = _repository()
    plan_id = repository.get_current_plan_id(user_id)
    if plan_id is None:
        console.print(f"[yellow]No current plan for {user_id}[/yellow]")
        raise typer.Exit(1)

    task_type = TaskType.WORKOUTS if task_id.startswith("workout") else TaskType.MEALS
    current = repository.get_plan(plan_id)
    task = current.find_task(task_type, task_id) if current else None
    was_completed = task is not None and task.is_completed

    try:
        updated = repository.update_task_status(user_id, plan_id, task_id, not undo, task_type)
    except FocusFitError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    if not undo and was_completed:
        console.print(f"[dim]{task_id} was already done[/dim]")
    elif not undo:
        console.print(Panel("🎉 Dopamine win logged!", box=box.ROUNDED, style="green"))
    _display_plan(updated)


@app.command()
def chat(
    message: str = typer.Argument(..., help="What you want to tell your body double"),
    user_id: Optional[str] = typer.Option(None, "--user-id", "-u", help="Personalize replies"),
):
    """Talk to the AI body double."""
    repository = _repository() if user_id else None
    with _generator() as text_generator:
        reply = BodyDoubleCoach(text_generator, repository).generate_body_double_response(
            message,
            context="User is working on fitness and meal prep tasks",
            user_id=user_id,
        )
    console.print(Panel(reply, title="Body Double", box=box.ROUNDED, style="cyan"))


@app.command()
def simplify(
    title: str = typer.Argument(..., help="Task you feel overwhelmed by"),
    task_type: str = typer.Option("workout", "--type", "-t", help="Task category"),
    description: str = typer.Option("", "--description", help="Task description"),
):
    """Shrink a task into a 1-3 minute version."""
    with _generator() as text_generator:
        simplified = BodyDoubleCoach(text_generator).simplify_task(title, task_type, description)
    console.print(
        Panel(
            f"[bold]{simplified.title}[/bold] ({simplified.duration} min)\n{simplified.description}",
            title="Smaller step",
            box=box.ROUNDED,
        )
    )


if __name__ == "__main__":
    app()
