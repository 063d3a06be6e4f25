"""
API Response Models

Pydantic models for API responses.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from focusfit.schemas import (
    ChatMessage,
    DopamineWin,
    SimplifiedVersion,
    UserProfile,
    WeeklyPlan,
)


class PlanGenerationResponse(BaseModel):
    """Response for POST /api/plans."""

    plan: WeeklyPlan = Field(..., description="Generated (or fallback) weekly plan")
    generated_by_ai: bool = Field(..., description="False when the fallback plan was used")
    warnings: List[str] = Field(default_factory=list, description="Plan warnings")


class ProfileResponse(BaseModel):
    """Response for profile endpoints."""

    profile: UserProfile
    plan: Optional[WeeklyPlan] = Field(None, description="Current plan, if any")


class WinsResponse(BaseModel):
    """Response for GET /api/users/{user_id}/wins."""

    wins: List[DopamineWin]
    count: int


class LinkResponse(BaseModel):
    """Response for POST /api/users/{anonymous_id}/link/{permanent_id}."""

    linked: bool = Field(..., description="False when the guest had no data")


class ChatResponse(BaseModel):
    """Response for POST /api/coach/chat."""

    message: ChatMessage


class SimplifyResponse(BaseModel):
    """Response for POST /api/coach/simplify."""

    simplified: SimplifiedVersion


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional details")
