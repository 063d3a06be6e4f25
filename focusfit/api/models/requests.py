"""
API Request Models

Pydantic models for API request validation.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from focusfit.schemas import (
    DietaryRestriction,
    Hurdle,
    TaskType,
    UserPreferences,
)


class PlanGenerationRequest(BaseModel):
    """Request model for weekly plan generation."""

    hurdles: List[Hurdle] = Field(
        default_factory=list,
        description="ADHD hurdles; an empty list returns the fallback plan",
    )
    dietary_restrictions: Optional[List[DietaryRestriction]] = Field(
        None, description="Dietary restrictions to honor"
    )
    user_id: Optional[str] = Field(
        None, description="When set, the plan is saved as the user's current plan"
    )
    context: Optional[str] = Field(None, description="Free-text context for the prompt")


class TaskStatusRequest(BaseModel):
    """Request model for marking a plan task complete or incomplete."""

    user_id: str = Field(..., description="User completing the task")
    task_type: TaskType = Field(..., description="'workouts' or 'meals'")
    is_completed: bool = Field(True, description="New completion status")


class CreateProfileRequest(BaseModel):
    """Request model for creating a user profile after onboarding."""

    user_id: str = Field(..., min_length=1, description="Auth provider user id")
    email: str = Field("guest@focusfit.app", description="Account email")
    adhd_hurdles: List[Hurdle] = Field(default_factory=list)
    dietary_restrictions: List[DietaryRestriction] = Field(default_factory=list)
    generate_plan: bool = Field(
        True, description="Generate and save a first plan right after creating the profile"
    )


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    email: Optional[str] = None
    adhd_hurdles: Optional[List[Hurdle]] = None
    dietary_restrictions: Optional[List[DietaryRestriction]] = None
    preferences: Optional[UserPreferences] = None


class ChatRequest(BaseModel):
    """Request model for a body-double chat message."""

    message: str = Field(..., min_length=1, description="What the user said")
    context: Optional[str] = Field(
        "User is working on fitness and meal prep tasks",
        description="What the user is doing right now",
    )
    user_id: Optional[str] = Field(None, description="Personalize with this user's profile")


class SimplifyRequest(BaseModel):
    """Request model for overwhelm-mode task simplification."""

    title: str = Field(..., min_length=1)
    task_type: str = Field("workout", description="Task category, e.g. 'cardio' or 'meal'")
    description: str = ""
