"""
Fixed weekly plan returned whenever generation cannot produce one.
"""

from typing import Optional

from focusfit.normalizer import ANONYMOUS_USER_ID, new_plan_id
from focusfit.schemas import (
    Difficulty,
    MealTask,
    PlanProvenance,
    SimplifiedVersion,
    WeeklyPlan,
    WorkoutTask,
    WorkoutType,
    utc_now,
)

FALLBACK_WORKOUT_TITLES = (
    "5-Minute Morning Stretch",
    "10-Minute Walk",
    "7-Minute Bodyweight Circuit",
)

FALLBACK_MEAL_TITLES = (
    "Quick Chicken & Veggie Stir-Fry",
    "Protein Smoothie Bowl",
    "Simple Avocado Toast",
)


def get_fallback_plan(user_id: Optional[str] = None, week_number: int = 1) -> WeeklyPlan:
    """
    Build the default plan: 3 workouts and 3 meals.

    Each call returns a fresh plan object with a new id, so callers may
    mutate it freely.
    """
    workouts = [
        WorkoutTask(
            id="workout-0",
            title=FALLBACK_WORKOUT_TITLES[0],
            duration=5,
            category=WorkoutType.FLEXIBILITY,
            description="Gentle stretches to start your day",
            simplified_version=SimplifiedVersion(
                title="2-Minute Quick Stretch",
                duration=2,
                description="Just stretch your arms overhead",
            ),
        ),
        WorkoutTask(
            id="workout-1",
            title=FALLBACK_WORKOUT_TITLES[1],
            duration=10,
            category=WorkoutType.CARDIO,
            description="Easy neighborhood walk",
            simplified_version=SimplifiedVersion(
                title="5-Minute Walk",
                duration=5,
                description="Walk around your block",
            ),
        ),
        WorkoutTask(
            id="workout-2",
            title=FALLBACK_WORKOUT_TITLES[2],
            duration=7,
            category=WorkoutType.STRENGTH,
            description="Simple exercises at home",
            simplified_version=SimplifiedVersion(
                title="3-Minute Movement",
                duration=3,
                description="Just do 10 squats",
            ),
        ),
    ]

    meals = [
        MealTask(
            id="meal-0",
            title=FALLBACK_MEAL_TITLES[0],
            prep_time=5,
            servings=2,
            difficulty=Difficulty.EASY,
        ),
        MealTask(
            id="meal-1",
            title=FALLBACK_MEAL_TITLES[1],
            prep_time=3,
            servings=1,
            difficulty=Difficulty.EASY,
        ),
        MealTask(
            id="meal-2",
            title=FALLBACK_MEAL_TITLES[2],
            prep_time=5,
            servings=1,
            difficulty=Difficulty.EASY,
        ),
    ]

    return WeeklyPlan(
        id=new_plan_id(),
        user_id=user_id or ANONYMOUS_USER_ID,
        week_number=week_number,
        workouts=workouts,
        meals=meals,
        created_at=utc_now(),
        provenance=PlanProvenance.FALLBACK,
    )
