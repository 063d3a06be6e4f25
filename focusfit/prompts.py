"""
Prompt construction for the text-generation API.

Every builder here is a pure function: it turns user data into a single
instruction string. The plan prompt spells out the exact JSON shape the
response parser and normalizer expect.
"""

from textwrap import dedent
from typing import Any, Iterable, List, Optional, Sequence

from focusfit.errors import InvalidInput
from focusfit.schemas import DietaryRestriction, Hurdle, active_restrictions

WORKOUTS_PER_PLAN = 3
MEALS_PER_PLAN = 3

PLAN_JSON_SHAPE = dedent(
    """\
    {
      "workouts": [
        {
          "title": "5-Minute Morning Stretch",
          "duration": 5,
          "type": "flexibility",
          "description": "Gentle stretches to wake up your body",
          "simplifiedVersion": {
            "title": "2-Minute Quick Stretch",
            "duration": 2,
            "description": "Just stretch your arms overhead and touch your toes"
          }
        }
      ],
      "meals": [
        {
          "title": "Quick Protein Bowl",
          "prepTime": 5,
          "servings": 2,
          "difficulty": "easy",
          "description": "Simple protein-rich meal",
          "ingredients": ["1 cup cooked rice", "1 can chickpeas"],
          "steps": ["Warm the rice", "Top with chickpeas"],
          "dietaryTags": [],
          "simplifiedVersion": {
            "title": "Grab-and-Go Bowl",
            "duration": 2,
            "description": "Microwave a pre-cooked rice cup and add chickpeas"
          }
        }
      ]
    }"""
)

FIELD_RULES = dedent(
    """\
    Field rules:
    - "duration" and "prepTime" are whole numbers of minutes
    - "type" is one of: cardio, strength, flexibility, mindfulness
    - "difficulty" is one of: easy, medium, hard
    - "servings" is a whole number of at least 1
    - "ingredients" and "steps" are arrays of short strings"""
)


def _humanize(tag: Any) -> str:
    value = tag.value if hasattr(tag, "value") else str(tag)
    return value.replace("_", " ")


def coerce_hurdles(hurdles: Optional[Iterable[Any]]) -> List[Hurdle]:
    """
    Validate a hurdle list.

    Raises:
        InvalidInput: If the list is empty or contains an unknown hurdle
    """
    hurdle_list = list(hurdles or [])
    if not hurdle_list:
        raise InvalidInput("At least one ADHD hurdle is required to build a plan prompt")

    try:
        return [Hurdle(h) for h in hurdle_list]
    except ValueError as e:
        raise InvalidInput(f"Unknown ADHD hurdle: {e}") from e


def coerce_dietary_tags(dietary_tags: Optional[Iterable[Any]]) -> List[DietaryRestriction]:
    """
    Validate dietary tags and drop the NONE sentinel.

    Raises:
        InvalidInput: If a tag is not a known dietary restriction
    """
    try:
        return active_restrictions(dietary_tags)
    except ValueError as e:
        raise InvalidInput(f"Unknown dietary restriction: {e}") from e


def build_plan_prompt(
    hurdles: Sequence[Any],
    dietary_tags: Optional[Sequence[Any]] = None,
    context: Optional[str] = None,
) -> str:
    """
    Build the weekly plan instruction.

    Args:
        hurdles: Non-empty list of ADHD hurdle tags
        dietary_tags: Optional dietary restrictions; NONE adds no requirement
        context: Optional free-text user context

    Returns:
        Prompt requesting exactly 3 workouts and 3 meals as JSON

    Raises:
        InvalidInput: If hurdles is empty or any tag is unknown
    """
    hurdle_list = coerce_hurdles(hurdles)
    restrictions = coerce_dietary_tags(dietary_tags)
    hurdle_text = ", ".join(_humanize(h) for h in hurdle_list)

    lines = [
        "You are an ADHD-focused fitness and meal planning expert. "
        "Create a simple, low-friction 1-week plan for someone with these "
        f"challenges: {hurdle_text}.",
    ]
    if context:
        lines.append(f"\nAbout the user: {context.strip()}")

    lines.append(
        dedent(
            f"""
            Requirements:
            - Exactly {WORKOUTS_PER_PLAN} short workouts per week (5-15 minutes each)
            - Exactly {MEALS_PER_PLAN} simple meal prep recipes (5-10 minutes prep time)
            - Each task should have a simplified version for overwhelm
            - Focus on building sustainable habits, not perfection"""
        )
    )

    if restrictions:
        restriction_text = ", ".join(_humanize(r) for r in restrictions)
        tag_list = ", ".join(f'"{r.value}"' for r in restrictions)
        lines.append(
            dedent(
                f"""
                Dietary restrictions (mandatory): {restriction_text}.
                - Every meal's ingredient list MUST honor all of these restrictions
                - Every meal MUST include a "dietaryTags" array listing the restrictions it complies with, using these values: {tag_list}"""
            )
        )

    lines.append(
        "\nRespond with JSON only, using exactly this structure:\n"
        + PLAN_JSON_SHAPE
        + "\n\n"
        + FIELD_RULES
    )
    return "\n".join(lines)


BODY_DOUBLE_TEMPLATE = dedent(
    """\
    You are a supportive AI Body Double helping someone with ADHD complete their fitness and meal prep tasks.{context_line}

    User says: "{user_message}"

    Respond in a warm, encouraging, and non-judgmental way. Keep responses short (1-2 sentences). Focus on:
    - Breaking tasks into tiny steps
    - Celebrating small wins
    - Reducing overwhelm
    - Being a supportive presence

    Response:"""
)

SIMPLIFY_TEMPLATE = dedent(
    """\
    Someone with ADHD feels overwhelmed by this {task_type} task:
    Title: {title}
    Description: {description}

    Make it much smaller: a version that takes 1-3 minutes and needs no planning.

    Format as JSON:
    {{
      "title": "2-Minute Quick Stretch",
      "duration": 2,
      "description": "Just stretch your arms overhead"
    }}"""
)

SMART_PROFILE_TEMPLATE = dedent(
    """\
    You are an AI fitness analyst. Analyze this user's workout history and provide smart insights.

    User's ADHD Hurdles: {hurdles}
    Total Workouts Completed: {workout_count}
    Completion Times (hours): {completion_hours}
    Workout Types Completed: {workout_titles}

    Based on this data, suggest:
    1. The 2-3 optimal times of day for this user to exercise (considering their ADHD hurdles)
    2. Their preferred workout types
    3. Personalized insights about their workout patterns

    Format as JSON:
    {{
      "optimalTimes": ["7:00 AM", "5:30 PM"],
      "preferredWorkoutTypes": ["short cardio", "bodyweight exercises"],
      "insights": "You tend to complete workouts in the morning. Consider scheduling your most important workout then."
    }}"""
)


def build_body_double_prompt(user_message: str, context: Optional[str] = None) -> str:
    """Build the prompt for a short, supportive body-double reply."""
    return BODY_DOUBLE_TEMPLATE.format(
        context_line=f" Context: {context}" if context else "",
        user_message=user_message.strip(),
    )


def build_simplify_prompt(title: str, task_type: str, description: str = "") -> str:
    """Build the prompt that shrinks a task for overwhelm mode."""
    return SIMPLIFY_TEMPLATE.format(
        task_type=task_type,
        title=title,
        description=description or "(none)",
    )


def build_smart_profile_prompt(
    hurdles: Sequence[Any],
    workout_count: int,
    completion_hours: Sequence[int],
    workout_titles: Sequence[str],
) -> str:
    """Build the prompt that turns workout history into scheduling insights."""
    return SMART_PROFILE_TEMPLATE.format(
        hurdles=", ".join(_humanize(h) for h in hurdles) or "none listed",
        workout_count=workout_count,
        completion_hours=", ".join(str(h) for h in completion_hours) or "none yet",
        workout_titles=", ".join(workout_titles) or "none yet",
    )
