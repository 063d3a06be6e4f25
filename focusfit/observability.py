"""
Observability hook for the plan generation boundary.

``FocusPlanGenerator`` reports exactly one ``PlanGenerationEvent`` per
``generate_plan`` call to an injected ``PlanObserver``. The default observer
writes the event to the structured log.
"""

from typing import Callable, List, Optional

import structlog
from pydantic import BaseModel, Field

from focusfit.schemas import PlanProvenance

logger = structlog.get_logger(__name__)


class PlanGenerationEvent(BaseModel):
    """Outcome of one plan generation request."""

    outcome: str = Field(..., description="'success' or 'fallback'")
    provenance: PlanProvenance
    plan_id: str
    user_id: Optional[str] = None
    error_kind: Optional[str] = Field(
        None, description="Taxonomy kind of the failure that forced the fallback"
    )
    error_message: Optional[str] = None
    persisted: bool = False
    elapsed_ms: float = Field(0.0, ge=0)
    non_compliant_meals: List[str] = Field(
        default_factory=list,
        description="Meals whose dietary tags do not cover the requested restrictions",
    )


PlanObserver = Callable[[PlanGenerationEvent], None]


def log_plan_event(event: PlanGenerationEvent) -> None:
    """Default observer: one structured log line per request."""
    fields = event.model_dump(mode="json", exclude_none=True)
    if event.outcome == "success":
        if event.non_compliant_meals:
            logger.warning("plan_generated_with_dietary_gaps", **fields)
        else:
            logger.info("plan_generated", **fields)
    else:
        logger.warning("plan_fallback_used", **fields)
