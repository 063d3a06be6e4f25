"""
Weekly focus plan generation with an always-valid fallback.

This module wires the plan acquisition pipeline together:

    build prompt -> call generator -> parse response -> normalize -> [persist]

The pipeline is linear. There are no retries: the first failure anywhere in
the chain returns the fallback plan instead. ``generate_plan`` never raises.
Each call reports one event to the injected observer.
"""

import time
from typing import Any, List, Optional, Sequence

import structlog

from focusfit.errors import FocusFitError, TransportFailure
from focusfit.fallback import get_fallback_plan
from focusfit.generator import TextGenerator
from focusfit.normalizer import ANONYMOUS_USER_ID, non_compliant_meals, normalize_plan
from focusfit.observability import PlanGenerationEvent, PlanObserver, log_plan_event
from focusfit.parser import parse_response
from focusfit.prompts import build_plan_prompt
from focusfit.repository import PlanRepository
from focusfit.schemas import Hurdle, PlanProvenance, WeeklyPlan

logger = structlog.get_logger(__name__)

# Hurdles substituted by callers that must not send an empty list
DEFAULT_HURDLES: List[Hurdle] = [Hurdle.STARTING_IS_HARD]


class FocusPlanGenerator:
    """
    Generates personalized weekly plans from ADHD hurdles and dietary needs.

    The generator:
    1. Builds a prompt describing the exact JSON plan shape
    2. Sends it to the text generator
    3. Extracts the JSON object from the reply
    4. Validates and normalizes it into a WeeklyPlan
    5. Stores it as the user's current plan (when a user id and repository are given)

    Any failure in steps 1-5 yields the fallback plan.
    """

    def __init__(
        self,
        text_generator: TextGenerator,
        repository: Optional[PlanRepository] = None,
        observer: PlanObserver = log_plan_event,
    ):
        """
        Initialize the plan generator.

        Args:
            text_generator: Client for the text-generation API
            repository: Optional persistence adapter for generated plans
            observer: Hook called once per generate_plan call
        """
        self.text_generator = text_generator
        self.repository = repository
        self.observer = observer

    def generate_plan(
        self,
        hurdles: Sequence[Any],
        dietary_tags: Optional[Sequence[Any]] = None,
        user_id: Optional[str] = None,
        context: Optional[str] = None,
    ) -> WeeklyPlan:
        """
        Generate a weekly plan, falling back to the default plan on any failure.

        Args:
            hurdles: ADHD hurdle tags (an empty list yields the fallback plan)
            dietary_tags: Optional dietary restrictions
            user_id: Owner of the plan; when set, the plan is persisted
            context: Optional free-text context for the prompt

        Returns:
            A plan with exactly 3 workouts and 3 meals
        """
        started = time.perf_counter()
        persisted = False

        try:
            # 1. Build prompt
            prompt = build_plan_prompt(hurdles, dietary_tags, context)

            # 2. Call generator
            text = self._call_generator(prompt)

            # 3. Parse response
            data = parse_response(text)

            # 4. Normalize
            plan = normalize_plan(data, user_id=user_id or ANONYMOUS_USER_ID)

            # 5. Persist
            if user_id and self.repository is not None:
                plan.id = self._persist(user_id, plan)
                persisted = True

        except FocusFitError as e:
            plan = get_fallback_plan(user_id)
            self._report(
                PlanGenerationEvent(
                    outcome="fallback",
                    provenance=PlanProvenance.FALLBACK,
                    plan_id=plan.id,
                    user_id=user_id,
                    error_kind=e.kind,
                    error_message=str(e),
                    elapsed_ms=(time.perf_counter() - started) * 1000,
                )
            )
            return plan

        self._report(
            PlanGenerationEvent(
                outcome="success",
                provenance=plan.provenance,
                plan_id=plan.id,
                user_id=user_id,
                persisted=persisted,
                elapsed_ms=(time.perf_counter() - started) * 1000,
                non_compliant_meals=non_compliant_meals(plan, dietary_tags),
            )
        )
        return plan

    def regenerate_for_user(self, user_id: str) -> WeeklyPlan:
        """
        Generate a fresh plan from the user's stored hurdles and restrictions.

        Users without a profile or without hurdles get DEFAULT_HURDLES.
        """
        profile = None
        if self.repository is not None:
            try:
                profile = self.repository.get_user_profile(user_id)
            except FocusFitError as e:
                logger.warning("profile_lookup_failed", user_id=user_id, error=str(e))

        hurdles = profile.adhd_hurdles if profile and profile.adhd_hurdles else DEFAULT_HURDLES
        dietary_tags = profile.dietary_restrictions if profile else None
        return self.generate_plan(hurdles, dietary_tags, user_id=user_id)

    def _call_generator(self, prompt: str) -> str:
        try:
            return self.text_generator.generate(prompt)
        except FocusFitError:
            raise
        except Exception as e:
            raise TransportFailure(f"Generation call failed: {e}") from e

    def _persist(self, user_id: str, plan: WeeklyPlan) -> str:
        try:
            return self.repository.save_plan(user_id, plan)
        except FocusFitError:
            raise
        except Exception as e:
            raise TransportFailure(f"Persistence call failed: {e}", operation="persist") from e

    def _report(self, event: PlanGenerationEvent) -> None:
        try:
            self.observer(event)
        except Exception:
            logger.exception("plan_observer_failed", plan_id=event.plan_id)
