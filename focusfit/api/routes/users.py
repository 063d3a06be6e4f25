"""
User Profile API Routes

Endpoints for onboarding profiles, dopamine wins and guest account linking.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from focusfit.api.dependencies import get_coach, get_plan_generator, get_repository
from focusfit.api.models.requests import CreateProfileRequest, UpdateProfileRequest
from focusfit.api.models.responses import (
    ErrorResponse,
    LinkResponse,
    ProfileResponse,
    WinsResponse,
)
from focusfit.coach import BodyDoubleCoach
from focusfit.errors import ProfileNotFound
from focusfit.planner import DEFAULT_HURDLES, FocusPlanGenerator
from focusfit.repository import PlanRepository
from focusfit.schemas import SmartSuggestions

router = APIRouter()


@router.post("/users", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_profile(
    request: CreateProfileRequest,
    repository: PlanRepository = Depends(get_repository),
    generator: FocusPlanGenerator = Depends(get_plan_generator),
) -> ProfileResponse:
    """
    Create a profile at the end of onboarding.

    Users who skipped the hurdle quiz get DEFAULT_HURDLES. When
    generate_plan is set, a first plan is generated and saved.
    """
    hurdles = request.adhd_hurdles or DEFAULT_HURDLES
    try:
        profile = repository.create_user_profile(
            request.user_id,
            request.email,
            hurdles,
            request.dietary_restrictions,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    plan = None
    if request.generate_plan:
        plan = generator.generate_plan(
            hurdles,
            request.dietary_restrictions or None,
            user_id=request.user_id,
        )
        profile = repository.get_user_profile(request.user_id) or profile

    return ProfileResponse(profile=profile, plan=plan)


@router.get(
    "/users/{user_id}",
    response_model=ProfileResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_profile(
    user_id: str,
    repository: PlanRepository = Depends(get_repository),
) -> ProfileResponse:
    profile = repository.get_user_profile(user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No profile for user '{user_id}'",
        )
    return ProfileResponse(profile=profile, plan=repository.get_current_plan(user_id))


@router.patch(
    "/users/{user_id}",
    response_model=ProfileResponse,
    responses={404: {"model": ErrorResponse}},
)
def update_profile(
    user_id: str,
    request: UpdateProfileRequest,
    repository: PlanRepository = Depends(get_repository),
) -> ProfileResponse:
    updates = request.model_dump(exclude_none=True)
    try:
        profile = repository.update_user_profile(user_id, **updates)
    except ProfileNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return ProfileResponse(profile=profile, plan=repository.get_current_plan(user_id))


@router.get("/users/{user_id}/wins", response_model=WinsResponse)
def list_wins(
    user_id: str,
    repository: PlanRepository = Depends(get_repository),
) -> WinsResponse:
    """List the user's dopamine wins, newest first."""
    wins = repository.get_dopamine_wins(user_id)
    return WinsResponse(wins=wins, count=len(wins))


@router.get("/users/{user_id}/suggestions", response_model=SmartSuggestions)
def smart_suggestions(
    user_id: str,
    coach: BodyDoubleCoach = Depends(get_coach),
) -> SmartSuggestions:
    """Suggest workout times and types from the user's completion history."""
    return coach.generate_smart_workout_suggestions(user_id)


@router.post(
    "/users/{anonymous_id}/link/{permanent_id}",
    response_model=LinkResponse,
    responses={404: {"model": ErrorResponse}},
)
def link_accounts(
    anonymous_id: str,
    permanent_id: str,
    repository: PlanRepository = Depends(get_repository),
) -> LinkResponse:
    """Move a guest's profile data, plans and wins to their permanent account."""
    try:
        linked = repository.link_anonymous_data(anonymous_id, permanent_id)
    except ProfileNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return LinkResponse(linked=linked)
