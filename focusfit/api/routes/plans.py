"""
Weekly Plans API Routes

Endpoints for plan generation, retrieval and task completion.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from focusfit.api.dependencies import get_plan_generator, get_repository
from focusfit.api.models.requests import PlanGenerationRequest, TaskStatusRequest
from focusfit.api.models.responses import ErrorResponse, PlanGenerationResponse
from focusfit.errors import PlanNotFound, TaskNotFound
from focusfit.normalizer import non_compliant_meals
from focusfit.planner import FocusPlanGenerator
from focusfit.repository import PlanRepository
from focusfit.schemas import WeeklyPlan

router = APIRouter()


@router.post("/plans", response_model=PlanGenerationResponse)
def generate_plan(
    request: PlanGenerationRequest,
    generator: FocusPlanGenerator = Depends(get_plan_generator),
) -> PlanGenerationResponse:
    """
    Generate a weekly plan.

    Never fails because of the model: if generation, parsing or validation
    fails, the fixed fallback plan is returned with generated_by_ai=false.

    Args:
        request: PlanGenerationRequest with hurdles, restrictions and optional user id

    Returns:
        PlanGenerationResponse with the plan and any warnings
    """
    plan = generator.generate_plan(
        request.hurdles,
        request.dietary_restrictions,
        user_id=request.user_id,
        context=request.context,
    )

    warnings = []
    if not plan.generated_by_ai:
        warnings.append("Personalized plan unavailable right now; showing the default plan")
    else:
        gaps = non_compliant_meals(plan, request.dietary_restrictions)
        if gaps:
            warnings.append(
                f"Meals {', '.join(gaps)} may not match every dietary restriction; check ingredients"
            )

    return PlanGenerationResponse(
        plan=plan,
        generated_by_ai=plan.generated_by_ai,
        warnings=warnings,
    )


@router.get(
    "/users/{user_id}/plan",
    response_model=WeeklyPlan,
    responses={404: {"model": ErrorResponse}},
)
def get_current_plan(
    user_id: str,
    repository: PlanRepository = Depends(get_repository),
) -> WeeklyPlan:
    """Return the user's current plan."""
    plan = repository.get_current_plan(user_id)
    if plan is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No current plan for user '{user_id}'",
        )
    return plan


@router.post("/users/{user_id}/plan/refresh", response_model=PlanGenerationResponse)
def refresh_plan(
    user_id: str,
    generator: FocusPlanGenerator = Depends(get_plan_generator),
) -> PlanGenerationResponse:
    """Generate a new plan from the user's stored hurdles and restrictions."""
    plan = generator.regenerate_for_user(user_id)
    warnings = [] if plan.generated_by_ai else [
        "Personalized plan unavailable right now; showing the default plan"
    ]
    return PlanGenerationResponse(plan=plan, generated_by_ai=plan.generated_by_ai, warnings=warnings)


@router.patch(
    "/plans/{plan_id}/tasks/{task_id}",
    response_model=WeeklyPlan,
    responses={404: {"model": ErrorResponse}},
)
def update_task_status(
    plan_id: str,
    task_id: str,
    request: TaskStatusRequest,
    repository: PlanRepository = Depends(get_repository),
) -> WeeklyPlan:
    """Mark a workout or meal complete; completing a task records a dopamine win."""
    try:
        return repository.update_task_status(
            request.user_id,
            plan_id,
            task_id,
            request.is_completed,
            request.task_type,
        )
    except (PlanNotFound, TaskNotFound) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
