"""
Tests for the AI body double.

Covers:
- Chat replies, personalization and the encouragement fallback
- Overwhelm-mode task simplification
- Smart workout suggestions from completion history
"""

import json

from focusfit.coach import (
    DEFAULT_SUGGESTIONS,
    FALLBACK_ENCOURAGEMENT,
    BodyDoubleCoach,
)
from focusfit.errors import TransportFailure
from focusfit.normalizer import normalize_plan
from focusfit.schemas import TaskType


# Chat

def test_body_double_returns_trimmed_reply(scripted_generator):
    text_generator = scripted_generator("  You've got this. Just put your shoes on.  \n")
    coach = BodyDoubleCoach(text_generator)

    reply = coach.generate_body_double_response("I can't get started", context="Dashboard")

    assert reply == "You've got this. Just put your shoes on."
    assert "Context: Dashboard" in text_generator.prompts[0]


def test_body_double_adds_user_context(scripted_generator, repository, user):
    text_generator = scripted_generator("Nice work this week!")
    coach = BodyDoubleCoach(text_generator, repository)

    coach.generate_body_double_response("hi", user_id=user.id)

    assert "The user's name is sam." in text_generator.prompts[0]
    assert "vegan, gluten free" in text_generator.prompts[0]


def test_body_double_falls_back_on_failure(scripted_generator):
    coach = BodyDoubleCoach(scripted_generator(TransportFailure("HTTP 503", status_code=503)))

    assert coach.generate_body_double_response("help") == FALLBACK_ENCOURAGEMENT


def test_body_double_falls_back_on_empty_reply(scripted_generator):
    coach = BodyDoubleCoach(scripted_generator("   "))

    assert coach.generate_body_double_response("help") == FALLBACK_ENCOURAGEMENT


def test_body_double_wraps_unexpected_errors(scripted_generator):
    coach = BodyDoubleCoach(scripted_generator(ConnectionResetError("reset by peer")))

    assert coach.generate_body_double_response("help") == FALLBACK_ENCOURAGEMENT


# Simplification

def test_simplify_task_parses_model_json(scripted_generator):
    reply = 'Sure!\n{"title": "Shoes On", "duration": 1, "description": "Only put your shoes on"}'
    text_generator = scripted_generator(reply)
    coach = BodyDoubleCoach(text_generator)

    simplified = coach.simplify_task("10-Minute Walk", "cardio", "Easy neighborhood walk")

    assert simplified.title == "Shoes On"
    assert simplified.duration == 1
    assert "Title: 10-Minute Walk" in text_generator.prompts[0]


def test_simplify_task_falls_back_on_invalid_shape(scripted_generator):
    coach = BodyDoubleCoach(scripted_generator('{"title": "Shoes On"}'))

    simplified = coach.simplify_task("10-Minute Walk", "cardio")

    assert simplified.title == "Tiny start: 10-Minute Walk"
    assert simplified.duration == 2


def test_simplify_task_falls_back_on_non_json(scripted_generator):
    coach = BodyDoubleCoach(scripted_generator("Just walk to the door."))

    assert coach.simplify_task("10-Minute Walk", "cardio").title == "Tiny start: 10-Minute Walk"


# Smart suggestions

def test_suggestions_without_repository_are_defaults(scripted_generator):
    text_generator = scripted_generator("{}")
    coach = BodyDoubleCoach(text_generator)

    suggestions = coach.generate_smart_workout_suggestions("user_001")

    assert suggestions == DEFAULT_SUGGESTIONS
    assert suggestions is not DEFAULT_SUGGESTIONS
    assert text_generator.prompts == []


def test_suggestions_for_unknown_user_are_defaults(scripted_generator, repository):
    coach = BodyDoubleCoach(scripted_generator("{}"), repository)

    assert coach.generate_smart_workout_suggestions("nobody") == DEFAULT_SUGGESTIONS


def test_suggestions_use_workout_history(scripted_generator, repository, user, payload):
    plan = normalize_plan(payload, user_id=user.id)
    repository.save_plan(user.id, plan)
    repository.update_task_status(user.id, plan.id, "workout-0", True, TaskType.WORKOUTS)
    repository.update_task_status(user.id, plan.id, "meal-0", True, TaskType.MEALS)

    reply = json.dumps(
        {
            "optimalTimes": ["7:00 AM"],
            "preferredWorkoutTypes": ["dance"],
            "insights": "Mornings work for you.",
        }
    )
    text_generator = scripted_generator(reply)
    coach = BodyDoubleCoach(text_generator, repository)

    suggestions = coach.generate_smart_workout_suggestions(user.id)

    assert suggestions.optimal_times == ["7:00 AM"]
    assert suggestions.preferred_workout_types == ["dance"]
    assert suggestions.insights == "Mornings work for you."
    prompt = text_generator.prompts[0]
    assert "Total Workouts Completed: 1" in prompt
    assert "Workout Types Completed: Dance Break" in prompt


def test_suggestions_fill_missing_fields(scripted_generator, repository, user):
    coach = BodyDoubleCoach(scripted_generator('{"optimalTimes": ["6:30 AM"]}'), repository)

    suggestions = coach.generate_smart_workout_suggestions(user.id)

    assert suggestions.optimal_times == ["6:30 AM"]
    assert suggestions.preferred_workout_types == ["Quick exercises"]
    assert suggestions.insights.startswith("Keep building your workout habit")


def test_suggestions_fall_back_on_garbage(scripted_generator, repository, user):
    coach = BodyDoubleCoach(scripted_generator("no idea"), repository)

    assert coach.generate_smart_workout_suggestions(user.id) == DEFAULT_SUGGESTIONS
