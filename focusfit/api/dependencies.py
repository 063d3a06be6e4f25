"""
FastAPI dependencies.

Services are built once in ``create_app`` and kept on ``app.state``.
"""

from fastapi import Request

from focusfit.coach import BodyDoubleCoach
from focusfit.planner import FocusPlanGenerator
from focusfit.repository import PlanRepository


def get_repository(request: Request) -> PlanRepository:
    return request.app.state.repository


def get_plan_generator(request: Request) -> FocusPlanGenerator:
    return request.app.state.plan_generator


def get_coach(request: Request) -> BodyDoubleCoach:
    return request.app.state.coach
