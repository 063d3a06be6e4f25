"""
Error taxonomy for the FocusFit planner.

Plan generation failures share a common base class so the plan generator can
catch them in one place and substitute the fallback plan. Lookup failures
raised by the repository also subclass ``LookupError``.
"""

from typing import List, Optional


class FocusFitError(Exception):
    """Base class for all FocusFit errors."""

    kind = "focusfit_error"


class PlanGenerationError(FocusFitError):
    """A failure somewhere in the plan acquisition pipeline."""

    kind = "plan_generation_error"


class InvalidInput(PlanGenerationError):
    """The caller supplied input the prompt builder cannot use."""

    kind = "invalid_input"


class TransportFailure(PlanGenerationError):
    """
    The generation call or a persistence call failed.

    Attributes:
        operation: Which external call failed ("generate", "persist", ...)
        status_code: HTTP status returned by the generation API, if any
    """

    kind = "transport_failure"

    def __init__(
        self,
        message: str,
        operation: str = "generate",
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


class MalformedResponse(PlanGenerationError):
    """No JSON object could be extracted from the model response."""

    kind = "malformed_response"


class SchemaViolation(PlanGenerationError):
    """The parsed response does not have the shape of a weekly plan."""

    kind = "schema_violation"

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors) or "Plan payload failed validation")
        self.errors = errors


class ProfileNotFound(FocusFitError, LookupError):
    kind = "profile_not_found"


class PlanNotFound(FocusFitError, LookupError):
    kind = "plan_not_found"


class TaskNotFound(FocusFitError, LookupError):
    kind = "task_not_found"
