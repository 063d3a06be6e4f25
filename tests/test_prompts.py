"""
Tests for prompt construction.

Covers:
- Required task counts and JSON shape in the plan prompt
- Dietary requirement block (present, absent, NONE-only)
- InvalidInput for empty or unknown hurdles
- Coach prompt builders
"""

import pytest

from focusfit.errors import InvalidInput
from focusfit.prompts import (
    build_body_double_prompt,
    build_plan_prompt,
    build_simplify_prompt,
    build_smart_profile_prompt,
)
from focusfit.schemas import DietaryRestriction, Hurdle


def test_plan_prompt_mentions_hurdles_and_counts():
    prompt = build_plan_prompt([Hurdle.STARTING_IS_HARD, "time_blindness"])

    assert "starting is hard, time blindness" in prompt
    assert "Exactly 3 short workouts" in prompt
    assert "5-15 minutes" in prompt
    assert "Exactly 3 simple meal prep recipes" in prompt
    assert "5-10 minutes prep" in prompt
    assert "simplified version" in prompt


def test_plan_prompt_describes_json_shape():
    prompt = build_plan_prompt(["forgetting_to_eat"])

    for field in ('"workouts"', '"meals"', '"prepTime"', '"simplifiedVersion"',
                  '"difficulty"', '"dietaryTags"', '"servings"'):
        assert field in prompt
    assert "cardio, strength, flexibility, mindfulness" in prompt


def test_plan_prompt_adds_dietary_requirements():
    prompt = build_plan_prompt(
        ["starting_is_hard"], [DietaryRestriction.VEGAN, DietaryRestriction.GLUTEN_FREE]
    )

    assert "Dietary restrictions (mandatory): vegan, gluten free." in prompt
    assert "MUST honor all of these restrictions" in prompt
    assert '"vegan", "gluten_free"' in prompt


@pytest.mark.parametrize("dietary_tags", [None, [], ["none"]])
def test_plan_prompt_skips_dietary_block_without_restrictions(dietary_tags):
    prompt = build_plan_prompt(["starting_is_hard"], dietary_tags)

    assert "Dietary restrictions (mandatory)" not in prompt


def test_plan_prompt_includes_context():
    prompt = build_plan_prompt(["staying_focused"], context="  Works night shifts  ")

    assert "About the user: Works night shifts" in prompt


def test_empty_hurdles_raise_invalid_input():
    with pytest.raises(InvalidInput):
        build_plan_prompt([])


def test_unknown_hurdle_raises_invalid_input():
    with pytest.raises(InvalidInput, match="Unknown ADHD hurdle"):
        build_plan_prompt(["procrastination"])


def test_unknown_dietary_tag_raises_invalid_input():
    with pytest.raises(InvalidInput, match="Unknown dietary restriction"):
        build_plan_prompt(["starting_is_hard"], ["keto"])


def test_body_double_prompt_with_and_without_context():
    with_context = build_body_double_prompt("I can't start", context="Dashboard")
    without_context = build_body_double_prompt("I can't start")

    assert 'User says: "I can\'t start"' in with_context
    assert "Context: Dashboard" in with_context
    assert "Context:" not in without_context
    assert without_context.rstrip().endswith("Response:")


def test_simplify_prompt_keeps_literal_json_braces():
    prompt = build_simplify_prompt("10-Minute Walk", "cardio")

    assert "Title: 10-Minute Walk" in prompt
    assert "Description: (none)" in prompt
    assert '"duration": 2' in prompt
    assert prompt.count("{") == prompt.count("}") == 1


def test_smart_profile_prompt_summarizes_history():
    prompt = build_smart_profile_prompt(
        [Hurdle.TIME_BLINDNESS], 2, [7, 18], ["10-Minute Walk", "Dance Break"]
    )

    assert "User's ADHD Hurdles: time blindness" in prompt
    assert "Total Workouts Completed: 2" in prompt
    assert "Completion Times (hours): 7, 18" in prompt
    assert "Workout Types Completed: 10-Minute Walk, Dance Break" in prompt
