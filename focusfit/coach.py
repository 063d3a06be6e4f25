"""
AI body double: chat replies, overwhelm-mode task simplification and smart
workout suggestions.

Like plan generation, every coaching call degrades to a fixed default
instead of raising.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from focusfit.errors import FocusFitError, MalformedResponse, ProfileNotFound, TransportFailure
from focusfit.generator import TextGenerator
from focusfit.parser import parse_response
from focusfit.prompts import (
    build_body_double_prompt,
    build_simplify_prompt,
    build_smart_profile_prompt,
)
from focusfit.repository import PlanRepository
from focusfit.schemas import SimplifiedVersion, SmartSuggestions, WinType

logger = structlog.get_logger(__name__)

FALLBACK_ENCOURAGEMENT = "I'm here with you! Let's take this one small step at a time. 💪"

DEFAULT_SUGGESTIONS = SmartSuggestions(
    optimal_times=["Morning (7-9 AM)", "Evening (5-7 PM)"],
    preferred_workout_types=["Short workouts", "Low-pressure exercises"],
    insights=(
        "Start with short, manageable workouts. "
        "The best time to exercise is whenever you can show up!"
    ),
)


def default_simplified_task(title: str) -> SimplifiedVersion:
    return SimplifiedVersion(
        title=f"Tiny start: {title}",
        duration=2,
        description="Set a 2-minute timer and do only the very first step.",
    )


class BodyDoubleCoach:
    """
    Supportive conversational helper backed by the text generator.

    Args:
        text_generator: Client for the text-generation API
        repository: Optional store used to personalize replies and suggestions
    """

    def __init__(
        self,
        text_generator: TextGenerator,
        repository: Optional[PlanRepository] = None,
    ):
        self.text_generator = text_generator
        self.repository = repository

    def _generate(self, prompt: str) -> str:
        try:
            return self.text_generator.generate(prompt)
        except FocusFitError:
            raise
        except Exception as e:
            raise TransportFailure(f"Generation call failed: {e}") from e

    def generate_body_double_response(
        self,
        user_message: str,
        context: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> str:
        """
        Reply to a chat message in one or two encouraging sentences.

        When a user id and repository are available, the user's hurdles,
        restrictions and recent wins are added to the prompt context.
        """
        try:
            if user_id and self.repository is not None:
                user_context = self.repository.get_user_context_for_ai(user_id).describe()
                context = f"{context} {user_context}" if context else user_context

            reply = self._generate(build_body_double_prompt(user_message, context)).strip()
            if not reply:
                raise MalformedResponse("Empty body double reply")
            return reply
        except FocusFitError as e:
            logger.warning("body_double_fallback", error_kind=e.kind, error=str(e))
            return FALLBACK_ENCOURAGEMENT

    def simplify_task(
        self, title: str, task_type: str, description: str = ""
    ) -> SimplifiedVersion:
        """Shrink a task to a 1-3 minute version for overwhelm mode."""
        try:
            data = parse_response(
                self._generate(build_simplify_prompt(title, task_type, description))
            )
            return SimplifiedVersion.model_validate(data)
        except ValidationError as e:
            logger.warning("simplify_task_fallback", error_kind="schema_violation", error=str(e))
        except FocusFitError as e:
            logger.warning("simplify_task_fallback", error_kind=e.kind, error=str(e))
        return default_simplified_task(title)

    def generate_smart_workout_suggestions(self, user_id: str) -> SmartSuggestions:
        """
        Suggest workout times and types from the user's completed workouts.

        Fields the model leaves out are filled from DEFAULT_SUGGESTIONS.
        """
        if self.repository is None:
            return DEFAULT_SUGGESTIONS.model_copy(deep=True)

        try:
            profile = self.repository.get_user_profile(user_id)
            if profile is None:
                raise ProfileNotFound(f"No profile for user '{user_id}'")

            workout_wins = [
                w for w in self.repository.get_dopamine_wins(user_id)
                if w.win_type == WinType.WORKOUT
            ]
            prompt = build_smart_profile_prompt(
                hurdles=profile.adhd_hurdles,
                workout_count=len(workout_wins),
                completion_hours=[w.timestamp.hour for w in workout_wins],
                workout_titles=[w.title for w in workout_wins],
            )
            data = parse_response(self._generate(prompt))

            return SmartSuggestions(
                optimal_times=data.get("optimalTimes") or ["Morning", "Evening"],
                preferred_workout_types=data.get("preferredWorkoutTypes") or ["Quick exercises"],
                insights=data.get("insights")
                or "Keep building your workout habit! Consistency matters more than perfection.",
            )
        except ValidationError as e:
            logger.warning("smart_suggestions_fallback", error_kind="schema_violation", error=str(e))
        except FocusFitError as e:
            logger.warning("smart_suggestions_fallback", error_kind=e.kind, error=str(e))
        return DEFAULT_SUGGESTIONS.model_copy(deep=True)
