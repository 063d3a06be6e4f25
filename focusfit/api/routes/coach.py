"""
Body Double API Routes

Endpoints for the supportive chat and overwhelm-mode task simplification.
"""

import uuid

from fastapi import APIRouter, Depends

from focusfit.api.dependencies import get_coach
from focusfit.api.models.requests import ChatRequest, SimplifyRequest
from focusfit.api.models.responses import ChatResponse, SimplifyResponse
from focusfit.coach import BodyDoubleCoach
from focusfit.schemas import ChatMessage

router = APIRouter()


@router.post("/coach/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    coach: BodyDoubleCoach = Depends(get_coach),
) -> ChatResponse:
    """Reply to the user in one or two encouraging sentences."""
    content = coach.generate_body_double_response(
        request.message,
        context=request.context,
        user_id=request.user_id,
    )
    return ChatResponse(
        message=ChatMessage(id=uuid.uuid4().hex, role="assistant", content=content)
    )


@router.post("/coach/simplify", response_model=SimplifyResponse)
def simplify(
    request: SimplifyRequest,
    coach: BodyDoubleCoach = Depends(get_coach),
) -> SimplifyResponse:
    """Return a 1-3 minute version of a task the user feels overwhelmed by."""
    simplified = coach.simplify_task(request.title, request.task_type, request.description)
    return SimplifyResponse(simplified=simplified)
