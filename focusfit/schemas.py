"""
Pydantic models for FocusFit plans, profiles and coaching data.

This module defines the core data structures for:
- Weekly Plans: workout and meal tasks for one week, with provenance
- User Profiles: ADHD hurdles, dietary restrictions and app preferences
- Dopamine Wins: completion events recorded when tasks are finished
- Coaching: chat messages and smart workout suggestions

Task and plan fields serialize in camelCase (``prepTime``, ``isCompleted``)
so that a dumped plan has the same shape the language model is asked to
produce. Models accept either the camelCase alias or the Python field name.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Enumerations
# ============================================================================

class Hurdle(str, Enum):
    """Behavioral friction points a user picks during onboarding."""
    FORGETTING_TO_EAT = "forgetting_to_eat"
    STARTING_IS_HARD = "starting_is_hard"
    STAYING_FOCUSED = "staying_focused"
    DECISION_PARALYSIS = "decision_paralysis"
    TIME_BLINDNESS = "time_blindness"


class DietaryRestriction(str, Enum):
    """Dietary restrictions, plus the NONE sentinel."""
    LACTOSE_FREE = "lactose_free"
    GLUTEN_FREE = "gluten_free"
    NUT_FREE = "nut_free"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    NONE = "none"


class WorkoutType(str, Enum):
    CARDIO = "cardio"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"
    MINDFULNESS = "mindfulness"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class PlanProvenance(str, Enum):
    """Where a weekly plan came from."""
    MODEL_GENERATED = "model_generated"
    FALLBACK = "fallback"


class TaskType(str, Enum):
    """Task collections inside a weekly plan."""
    WORKOUTS = "workouts"
    MEALS = "meals"


class WinType(str, Enum):
    WORKOUT = "workout"
    MEAL = "meal"
    FOCUS = "focus"
    MILESTONE = "milestone"


HURDLE_LABELS: Dict[Hurdle, str] = {
    Hurdle.FORGETTING_TO_EAT: "Forgetting to eat",
    Hurdle.STARTING_IS_HARD: "Starting is hard",
    Hurdle.STAYING_FOCUSED: "Staying focused",
    Hurdle.DECISION_PARALYSIS: "Decision paralysis",
    Hurdle.TIME_BLINDNESS: "Time blindness",
}

DIETARY_LABELS: Dict[DietaryRestriction, str] = {
    DietaryRestriction.LACTOSE_FREE: "Lactose-Free",
    DietaryRestriction.GLUTEN_FREE: "Gluten-Free",
    DietaryRestriction.NUT_FREE: "Nut-Free",
    DietaryRestriction.VEGETARIAN: "Vegetarian",
    DietaryRestriction.VEGAN: "Vegan",
    DietaryRestriction.NONE: "No restrictions",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Dietary selection helpers
# ============================================================================

def toggle_dietary_restriction(
    selected: Iterable[DietaryRestriction],
    restriction: DietaryRestriction,
) -> List[DietaryRestriction]:
    """
    Toggle one restriction in a selection, keeping NONE exclusive.

    Selecting NONE clears every other restriction (or clears NONE itself if it
    was already selected). Selecting any other restriction removes NONE.

    Args:
        selected: Current selection
        restriction: Restriction the user tapped

    Returns:
        New selection, in the order restrictions were picked
    """
    current = [DietaryRestriction(r) for r in selected]
    restriction = DietaryRestriction(restriction)

    if restriction == DietaryRestriction.NONE:
        return [] if DietaryRestriction.NONE in current else [DietaryRestriction.NONE]

    filtered = [r for r in current if r != DietaryRestriction.NONE]
    if restriction in filtered:
        return [r for r in filtered if r != restriction]
    return filtered + [restriction]


def active_restrictions(
    tags: Optional[Iterable[Any]],
) -> List[DietaryRestriction]:
    """
    Return the real restrictions in a tag list, dropping NONE and duplicates.

    Raises:
        ValueError: If a tag is not a known dietary restriction
    """
    result: List[DietaryRestriction] = []
    for tag in tags or []:
        restriction = DietaryRestriction(tag)
        if restriction != DietaryRestriction.NONE and restriction not in result:
            result.append(restriction)
    return result


# ============================================================================
# Plan Tasks
# ============================================================================

class CamelModel(BaseModel):
    """Base model that accepts both field names and camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)


class SimplifiedVersion(CamelModel):
    """Smaller version of a task, offered in overwhelm mode."""

    title: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0, description="Duration in minutes")
    description: str = ""


class RecipeStep(CamelModel):
    id: str
    step_number: int = Field(..., ge=1, alias="stepNumber")
    instruction: str = Field(..., min_length=1)
    estimated_time: int = Field(1, ge=0, alias="estimatedTime", description="Minutes")


class Ingredient(CamelModel):
    id: str
    name: str = Field(..., min_length=1)
    quantity: str = ""
    unit: str = ""
    aisle: str = Field("other", description="Grocery aisle, used for shopping lists")


class WorkoutTask(CamelModel):
    """A short workout inside a weekly plan."""

    id: str
    title: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0, description="Duration in minutes")
    category: WorkoutType = Field(..., alias="type")
    description: str = ""
    is_completed: bool = Field(False, alias="isCompleted")
    simplified_version: Optional[SimplifiedVersion] = Field(
        None, alias="simplifiedVersion"
    )


class MealTask(CamelModel):
    """A simple meal-prep recipe inside a weekly plan."""

    id: str
    title: str = Field(..., min_length=1)
    prep_time: int = Field(..., gt=0, alias="prepTime", description="Prep time in minutes")
    servings: int = Field(1, gt=0)
    difficulty: Difficulty
    description: str = ""
    is_completed: bool = Field(False, alias="isCompleted")
    steps: List[RecipeStep] = Field(default_factory=list)
    ingredients: List[Ingredient] = Field(default_factory=list)
    dietary_tags: List[str] = Field(
        default_factory=list,
        alias="dietaryTags",
        description="Restrictions this meal complies with, as echoed by the model",
    )
    simplified_version: Optional[SimplifiedVersion] = Field(
        None, alias="simplifiedVersion"
    )


class WeeklyPlan(CamelModel):
    """
    One week of workout and meal tasks.

    Plans are produced either by the generation pipeline or by the fallback
    provider; ``provenance`` records which.
    """

    id: str
    user_id: str = Field(..., alias="userId")
    week_number: int = Field(1, ge=1, alias="weekNumber")
    workouts: List[WorkoutTask] = Field(default_factory=list)
    meals: List[MealTask] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    provenance: PlanProvenance = PlanProvenance.MODEL_GENERATED

    @property
    def generated_by_ai(self) -> bool:
        return self.provenance == PlanProvenance.MODEL_GENERATED

    def tasks(self, task_type: TaskType) -> List[Any]:
        return self.workouts if TaskType(task_type) == TaskType.WORKOUTS else self.meals

    def find_task(self, task_type: TaskType, task_id: str):
        """Return the task with the given id, or None."""
        for task in self.tasks(task_type):
            if task.id == task_id:
                return task
        return None

    def completion_summary(self) -> Dict[str, int]:
        """Count completed and total tasks across both collections."""
        all_tasks = list(self.workouts) + list(self.meals)
        return {
            "completed": sum(1 for t in all_tasks if t.is_completed),
            "total": len(all_tasks),
        }

    def to_payload(self) -> Dict[str, Any]:
        """Dump to the camelCase JSON shape used for storage and the API."""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# User Profile & Wins
# ============================================================================

class UserPreferences(CamelModel):
    enable_haptics: bool = Field(True, alias="enableHaptics")
    enable_confetti: bool = Field(True, alias="enableConfetti")
    enable_voice_logging: bool = Field(True, alias="enableVoiceLogging")


class UserProfile(CamelModel):
    """
    Stored profile for one user.

    ``dietary_restrictions`` is either ``[NONE]`` or a list of real
    restrictions; the two are never mixed.
    """

    id: str
    email: str
    adhd_hurdles: List[Hurdle] = Field(default_factory=list, alias="adhdHurdles")
    dietary_restrictions: List[DietaryRestriction] = Field(
        default_factory=list, alias="dietaryRestrictions"
    )
    current_plan_id: Optional[str] = Field(None, alias="currentPlanId")
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    @field_validator("dietary_restrictions")
    @classmethod
    def validate_none_is_exclusive(
        cls, v: List[DietaryRestriction]
    ) -> List[DietaryRestriction]:
        """Reject selections that mix NONE with real restrictions."""
        if DietaryRestriction.NONE in v and len(set(v)) > 1:
            raise ValueError("'none' cannot be combined with other dietary restrictions")
        return v


class DopamineWin(CamelModel):
    """A small celebrated completion event."""

    id: Optional[str] = None
    user_id: str = Field(..., alias="userId")
    win_type: WinType = Field(..., alias="type")
    title: str
    description: str = ""
    timestamp: datetime = Field(default_factory=utc_now)


class UserContext(CamelModel):
    """Profile summary handed to the body-double prompt."""

    name: str
    adhd_hurdles: List[Hurdle] = Field(default_factory=list, alias="adhdHurdles")
    dietary_restrictions: List[DietaryRestriction] = Field(
        default_factory=list, alias="dietaryRestrictions"
    )
    recent_wins: int = Field(0, ge=0, alias="recentWins")

    def describe(self) -> str:
        """Render the context as one line of prompt text."""
        hurdles = ", ".join(h.value.replace("_", " ") for h in self.adhd_hurdles)
        restrictions = ", ".join(
            r.value.replace("_", " ") for r in active_restrictions(self.dietary_restrictions)
        )
        parts = [f"The user's name is {self.name}."]
        if hurdles:
            parts.append(f"Their ADHD hurdles: {hurdles}.")
        if restrictions:
            parts.append(f"Dietary restrictions: {restrictions}.")
        parts.append(f"They logged {self.recent_wins} wins in the past week.")
        return " ".join(parts)


# ============================================================================
# Coaching
# ============================================================================

class ChatMessage(CamelModel):
    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=utc_now)


class SmartSuggestions(CamelModel):
    """Suggested workout times and types derived from completion history."""

    optimal_times: List[str] = Field(default_factory=list, alias="optimalTimes")
    preferred_workout_types: List[str] = Field(
        default_factory=list, alias="preferredWorkoutTypes"
    )
    insights: str = ""
