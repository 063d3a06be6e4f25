"""
Validation and normalization of parsed plan payloads.

The normalizer runs in two steps:
1. ``check_plan_payload`` validates the loose payload shape and returns a
   ``PayloadCheck`` result without raising.
2. ``normalize_plan`` builds a typed ``WeeklyPlan`` from a payload that passed
   the check. It assigns stable ``<kind>-<index>`` ids, fills defaults and
   clears every completion flag.

A payload that fails either step raises ``SchemaViolation``; callers must
substitute the fallback plan rather than keep a partial result.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, ValidationError

from focusfit.errors import SchemaViolation
from focusfit.prompts import MEALS_PER_PLAN, WORKOUTS_PER_PLAN
from focusfit.schemas import (
    Ingredient,
    MealTask,
    PlanProvenance,
    RecipeStep,
    SimplifiedVersion,
    WeeklyPlan,
    WorkoutTask,
    active_restrictions,
    utc_now,
)

ANONYMOUS_USER_ID = "anonymous"

WORKOUT_REQUIRED_FIELDS = ("title", "duration", "type")
MEAL_REQUIRED_FIELDS = ("title", "prepTime", "difficulty")


class PayloadCheck(BaseModel):
    """Outcome of validating a parsed plan payload."""

    ok: bool = Field(..., description="True when the payload can be normalized")
    errors: List[str] = Field(default_factory=list, description="Problems found")


def new_plan_id() -> str:
    return uuid.uuid4().hex


def _check_task_list(
    data: Dict[str, Any],
    key: str,
    required_fields: Iterable[str],
    expected_count: int,
) -> List[str]:
    errors: List[str] = []
    items = data.get(key)

    if items is None:
        return [f"'{key}' is missing"]
    if not isinstance(items, list):
        return [f"'{key}' must be a list, got {type(items).__name__}"]
    if len(items) != expected_count:
        errors.append(f"'{key}' must contain exactly {expected_count} items, got {len(items)}")

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            errors.append(f"{key}[{index}] must be an object")
            continue
        for field_name in required_fields:
            if item.get(field_name) in (None, ""):
                errors.append(f"{key}[{index}] is missing required field '{field_name}'")

    return errors


def check_plan_payload(
    data: Any,
    expected_workouts: int = WORKOUTS_PER_PLAN,
    expected_meals: int = MEALS_PER_PLAN,
) -> PayloadCheck:
    """
    Validate the shape of a parsed plan payload.

    Args:
        data: Deserialized model response
        expected_workouts: Number of workouts the prompt asked for
        expected_meals: Number of meals the prompt asked for

    Returns:
        PayloadCheck with ok=False and the list of problems when invalid
    """
    if not isinstance(data, dict):
        return PayloadCheck(ok=False, errors=["Plan payload must be a JSON object"])

    errors = _check_task_list(data, "workouts", WORKOUT_REQUIRED_FIELDS, expected_workouts)
    errors += _check_task_list(data, "meals", MEAL_REQUIRED_FIELDS, expected_meals)
    return PayloadCheck(ok=not errors, errors=errors)


# ============================================================================
# Field coercion
# ============================================================================

def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


def _coerce_simplified(value: Any) -> Optional[SimplifiedVersion]:
    """Keep a usable simplified variant; drop one the model got wrong."""
    if not value:
        return None
    try:
        return SimplifiedVersion.model_validate(value)
    except ValidationError:
        return None


def _coerce_steps(task_id: str, raw_steps: Any) -> List[RecipeStep]:
    if not isinstance(raw_steps, list):
        return []

    steps: List[RecipeStep] = []
    for raw in raw_steps:
        if isinstance(raw, dict):
            instruction = raw.get("instruction") or raw.get("text") or ""
            estimated_time = raw.get("estimatedTime", raw.get("estimated_time", 1))
        else:
            instruction = str(raw) if raw is not None else ""
            estimated_time = 1
        if not str(instruction).strip():
            continue

        number = len(steps) + 1
        steps.append(
            RecipeStep(
                id=f"{task_id}-step-{number - 1}",
                step_number=number,
                instruction=str(instruction).strip(),
                estimated_time=estimated_time if isinstance(estimated_time, int) else 1,
            )
        )
    return steps


def _coerce_ingredients(task_id: str, raw_ingredients: Any) -> List[Ingredient]:
    if not isinstance(raw_ingredients, list):
        return []

    ingredients: List[Ingredient] = []
    for raw in raw_ingredients:
        if isinstance(raw, dict):
            name = raw.get("name") or ""
            quantity = raw.get("quantity", "")
            unit = raw.get("unit") or ""
            aisle = raw.get("aisle") or "other"
        else:
            name = str(raw) if raw is not None else ""
            quantity, unit, aisle = "", "", "other"
        if not str(name).strip():
            continue

        ingredients.append(
            Ingredient(
                id=f"{task_id}-ingredient-{len(ingredients)}",
                name=str(name).strip(),
                quantity="" if quantity is None else str(quantity),
                unit=str(unit),
                aisle=str(aisle),
            )
        )
    return ingredients


def _normalize_workout(item: Dict[str, Any], index: int) -> WorkoutTask:
    return WorkoutTask.model_validate(
        {
            "id": f"workout-{index}",
            "title": item["title"],
            "duration": item["duration"],
            "type": _lower(item["type"]),
            "description": item.get("description") or "",
            "isCompleted": False,
            "simplifiedVersion": _coerce_simplified(item.get("simplifiedVersion")),
        }
    )


def _normalize_meal(item: Dict[str, Any], index: int) -> MealTask:
    task_id = f"meal-{index}"
    servings = item.get("servings")
    return MealTask.model_validate(
        {
            "id": task_id,
            "title": item["title"],
            "prepTime": item["prepTime"],
            "servings": 1 if servings is None else servings,
            "difficulty": _lower(item["difficulty"]),
            "description": item.get("description") or "",
            "isCompleted": False,
            "steps": _coerce_steps(task_id, item.get("steps")),
            "ingredients": _coerce_ingredients(task_id, item.get("ingredients")),
            "dietaryTags": item.get("dietaryTags") or [],
            "simplifiedVersion": _coerce_simplified(item.get("simplifiedVersion")),
        }
    )


def _validation_messages(prefix: str, error: ValidationError) -> List[str]:
    return [
        f"{prefix}.{'.'.join(str(p) for p in detail['loc'])}: {detail['msg']}"
        for detail in error.errors()
    ]


def normalize_plan(
    data: Any,
    user_id: str = ANONYMOUS_USER_ID,
    week_number: int = 1,
    plan_id: Optional[str] = None,
    expected_workouts: int = WORKOUTS_PER_PLAN,
    expected_meals: int = MEALS_PER_PLAN,
) -> WeeklyPlan:
    """
    Turn a parsed model payload into a typed weekly plan.

    Args:
        data: Deserialized model response with "workouts" and "meals"
        user_id: Owner of the plan
        week_number: Week number to stamp on the plan
        plan_id: Plan id to use (a new one is generated if omitted)
        expected_workouts: Required number of workouts
        expected_meals: Required number of meals

    Returns:
        WeeklyPlan with provenance MODEL_GENERATED

    Raises:
        SchemaViolation: If the payload is missing fields, has the wrong
            number of tasks, or holds values outside the task enumerations
    """
    check = check_plan_payload(data, expected_workouts, expected_meals)
    if not check.ok:
        raise SchemaViolation(check.errors)

    errors: List[str] = []
    workouts: List[WorkoutTask] = []
    meals: List[MealTask] = []

    for index, item in enumerate(data["workouts"]):
        try:
            workouts.append(_normalize_workout(item, index))
        except ValidationError as e:
            errors.extend(_validation_messages(f"workouts[{index}]", e))

    for index, item in enumerate(data["meals"]):
        try:
            meals.append(_normalize_meal(item, index))
        except ValidationError as e:
            errors.extend(_validation_messages(f"meals[{index}]", e))

    if errors:
        raise SchemaViolation(errors)

    return WeeklyPlan(
        id=plan_id or new_plan_id(),
        user_id=user_id,
        week_number=week_number,
        workouts=workouts,
        meals=meals,
        created_at=utc_now(),
        provenance=PlanProvenance.MODEL_GENERATED,
    )


def non_compliant_meals(plan: WeeklyPlan, dietary_tags: Optional[Iterable[Any]]) -> List[str]:
    """
    List meals whose echoed tags do not cover every requested restriction.

    This only compares the tags the model reported. It does not inspect
    ingredients, and the result is advisory.
    """
    required = {r.value for r in active_restrictions(dietary_tags)}
    if not required:
        return []
    return [meal.id for meal in plan.meals if not required.issubset(meal.dietary_tags)]
