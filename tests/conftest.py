"""
Shared fixtures: scripted text generators, plan payloads and an in-memory
repository.
"""

import json
from typing import Callable, List, Optional, Union

import pytest

from focusfit.repository import PlanRepository
from focusfit.schemas import DietaryRestriction, Hurdle


class ScriptedGenerator:
    """
    Text generator that replays canned replies.

    Each reply is either a string to return or an exception to raise. The
    last reply is reused once the script runs out.
    """

    def __init__(self, *replies: Union[str, Exception]):
        self.replies = list(replies) or [""]
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_payload(dietary_tags: Optional[List[str]] = None) -> dict:
    """A well-formed model payload with 3 workouts and 3 meals."""
    tags = list(dietary_tags or [])
    return {
        "workouts": [
            {
                "title": "Dance Break",
                "duration": 10,
                "type": "cardio",
                "description": "Put on two songs and move",
                "simplifiedVersion": {
                    "title": "One Song Dance",
                    "duration": 3,
                    "description": "Just one song",
                },
            },
            {
                "title": "Wall Push-Ups",
                "duration": 8,
                "type": "strength",
                "description": "Three sets against the kitchen wall",
                "simplifiedVersion": {
                    "title": "Five Push-Ups",
                    "duration": 1,
                    "description": "Do five, then stop",
                },
            },
            {
                "title": "Box Breathing",
                "duration": 5,
                "type": "mindfulness",
                "simplifiedVersion": {
                    "title": "Three Breaths",
                    "duration": 1,
                    "description": "Three slow breaths",
                },
            },
        ],
        "meals": [
            {
                "title": "Chickpea Rice Bowl",
                "prepTime": 5,
                "servings": 2,
                "difficulty": "easy",
                "description": "Rice, chickpeas and salsa",
                "ingredients": ["1 cup cooked rice", "1 can chickpeas", "salsa"],
                "steps": ["Warm the rice", "Top with chickpeas and salsa"],
                "dietaryTags": list(tags),
            },
            {
                "title": "Peanut-Free Oat Jar",
                "prepTime": 5,
                "servings": 1,
                "difficulty": "easy",
                "ingredients": ["rolled oats", "oat milk", "berries"],
                "dietaryTags": list(tags),
            },
            {
                "title": "Veggie Tacos",
                "prepTime": 10,
                "servings": 2,
                "difficulty": "medium",
                "ingredients": ["corn tortillas", "black beans", "peppers"],
                "steps": ["Warm tortillas", "Fill and fold"],
                "dietaryTags": list(tags),
            },
        ],
    }


@pytest.fixture
def payload() -> dict:
    return make_payload()


@pytest.fixture
def payload_factory() -> Callable[..., dict]:
    return make_payload


@pytest.fixture
def model_reply() -> Callable[[dict], str]:
    """Wrap a payload the way chatty models do."""

    def wrap(data: dict) -> str:
        return "Here is your plan!\n```json\n" + json.dumps(data, indent=2) + "\n```\nEnjoy!"

    return wrap


@pytest.fixture
def scripted_generator() -> Callable[..., ScriptedGenerator]:
    return ScriptedGenerator


@pytest.fixture
def repository() -> PlanRepository:
    """Fresh in-memory SQLite repository."""
    return PlanRepository.from_url("sqlite:///:memory:")


@pytest.fixture
def user(repository):
    """A stored user with one hurdle and two dietary restrictions."""
    return repository.create_user_profile(
        "user_001",
        "sam@example.com",
        [Hurdle.STARTING_IS_HARD],
        [DietaryRestriction.VEGAN, DietaryRestriction.GLUTEN_FREE],
    )


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def observer(events):
    return events.append
