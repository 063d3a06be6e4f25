"""
Tests for Pydantic schema validation.

Ensures that schemas accept both field names and camelCase aliases, enforce
constraints and keep the NONE dietary sentinel exclusive.
"""

import pytest
from pydantic import ValidationError

from focusfit.schemas import (
    DietaryRestriction,
    DopamineWin,
    Hurdle,
    MealTask,
    SimplifiedVersion,
    TaskType,
    UserContext,
    UserProfile,
    WeeklyPlan,
    WinType,
    WorkoutTask,
    WorkoutType,
    active_restrictions,
    toggle_dietary_restriction,
)


# Dietary selection tests

def test_toggle_adds_and_removes_restriction():
    """Test that tapping a restriction twice removes it again."""
    selected = toggle_dietary_restriction([], DietaryRestriction.VEGAN)
    assert selected == [DietaryRestriction.VEGAN]

    selected = toggle_dietary_restriction(selected, DietaryRestriction.NUT_FREE)
    assert selected == [DietaryRestriction.VEGAN, DietaryRestriction.NUT_FREE]

    selected = toggle_dietary_restriction(selected, DietaryRestriction.VEGAN)
    assert selected == [DietaryRestriction.NUT_FREE]


def test_toggle_none_clears_other_restrictions():
    """Test that selecting NONE replaces every other restriction."""
    selected = [DietaryRestriction.VEGAN, DietaryRestriction.GLUTEN_FREE]

    assert toggle_dietary_restriction(selected, DietaryRestriction.NONE) == [DietaryRestriction.NONE]


def test_toggle_none_twice_clears_selection():
    assert toggle_dietary_restriction([DietaryRestriction.NONE], "none") == []


def test_toggle_restriction_removes_none():
    """Test that picking a real restriction deselects NONE."""
    selected = toggle_dietary_restriction([DietaryRestriction.NONE], DietaryRestriction.VEGETARIAN)

    assert selected == [DietaryRestriction.VEGETARIAN]


def test_active_restrictions_drops_none_and_duplicates():
    assert active_restrictions(["none"]) == []
    assert active_restrictions(None) == []
    assert active_restrictions(["vegan", DietaryRestriction.VEGAN, "nut_free"]) == [
        DietaryRestriction.VEGAN,
        DietaryRestriction.NUT_FREE,
    ]


def test_active_restrictions_rejects_unknown_tag():
    with pytest.raises(ValueError):
        active_restrictions(["paleo"])


# User profile tests

def test_profile_rejects_none_mixed_with_restrictions():
    """Test that NONE cannot be combined with real restrictions."""
    with pytest.raises(ValidationError, match="cannot be combined"):
        UserProfile(
            id="user_001",
            email="sam@example.com",
            adhd_hurdles=[Hurdle.STARTING_IS_HARD],
            dietary_restrictions=[DietaryRestriction.NONE, DietaryRestriction.VEGAN],
        )


def test_profile_accepts_camel_case_aliases():
    profile = UserProfile.model_validate(
        {
            "id": "user_001",
            "email": "sam@example.com",
            "adhdHurdles": ["time_blindness"],
            "dietaryRestrictions": ["none"],
        }
    )

    assert profile.adhd_hurdles == [Hurdle.TIME_BLINDNESS]
    assert profile.dietary_restrictions == [DietaryRestriction.NONE]
    assert profile.preferences.enable_confetti


def test_profile_rejects_unknown_hurdle():
    with pytest.raises(ValidationError):
        UserProfile(id="u", email="e", adhd_hurdles=["procrastination"])


# Task and plan tests

def test_workout_requires_positive_duration():
    """Test that durations must be whole positive minutes."""
    with pytest.raises(ValidationError):
        WorkoutTask(id="workout-0", title="Walk", duration=0, category=WorkoutType.CARDIO)


def test_simplified_version_requires_title():
    with pytest.raises(ValidationError):
        SimplifiedVersion(title="", duration=2)


def test_meal_defaults():
    meal = MealTask(id="meal-0", title="Toast", prep_time=3, difficulty="easy")

    assert meal.servings == 1
    assert meal.steps == []
    assert meal.ingredients == []
    assert meal.dietary_tags == []
    assert not meal.is_completed


def test_plan_serializes_camel_case():
    """Test that dumped plans use the same field names the model produces."""
    plan = WeeklyPlan(
        id="plan-1",
        user_id="user_001",
        workouts=[WorkoutTask(id="workout-0", title="Walk", duration=10, category="cardio")],
        meals=[MealTask(id="meal-0", title="Toast", prep_time=3, difficulty="easy")],
    )

    payload = plan.to_payload()

    assert payload["userId"] == "user_001"
    assert payload["workouts"][0]["type"] == "cardio"
    assert payload["workouts"][0]["isCompleted"] is False
    assert payload["meals"][0]["prepTime"] == 3
    assert payload["provenance"] == "model_generated"
    assert WeeklyPlan.model_validate(payload) == plan


def test_plan_find_task_and_summary():
    plan = WeeklyPlan(
        id="plan-1",
        user_id="user_001",
        workouts=[
            WorkoutTask(id="workout-0", title="Walk", duration=10, category="cardio", is_completed=True),
            WorkoutTask(id="workout-1", title="Stretch", duration=5, category="flexibility"),
        ],
        meals=[MealTask(id="meal-0", title="Toast", prep_time=3, difficulty="easy")],
    )

    assert plan.find_task(TaskType.WORKOUTS, "workout-1").title == "Stretch"
    assert plan.find_task("meals", "workout-1") is None
    assert plan.completion_summary() == {"completed": 1, "total": 3}


def test_dopamine_win_type_alias():
    win = DopamineWin.model_validate({"userId": "user_001", "type": "meal", "title": "Toast"})

    assert win.win_type == WinType.MEAL
    assert win.id is None


def test_user_context_describe_skips_none_restriction():
    context = UserContext(
        name="sam",
        adhd_hurdles=[Hurdle.DECISION_PARALYSIS],
        dietary_restrictions=[DietaryRestriction.NONE],
        recent_wins=4,
    )

    text = context.describe()

    assert "The user's name is sam." in text
    assert "decision paralysis" in text
    assert "Dietary restrictions" not in text
    assert "4 wins" in text
