"""The fixed catalog of journey activities and selectable characters.

A Roster is built once per session and never mutated. Every ``build_*`` call
returns fresh model instances so the ledger can own and mutate its copies
without touching the templates.

Activity types are assigned with a seeded ``random.Random`` so the same seed
always produces the same 30-day journey.
"""

from __future__ import annotations

import math
import random
from typing import Sequence

from journey.errors import ConfigurationError, ValidationError
from journey.models import (
    ACTIVITY_TYPES,
    DIFFICULTIES,
    JOURNEY_LENGTH,
    Activity,
    Character,
    Position,
)

ACTIVITY_TITLES: tuple[str, ...] = (
    "Te Tiriti o Waitangi", "Māori Alphabet", "Traditional Greetings", "Family Words",
    "Numbers in Te Reo", "Colours of Aotearoa", "Traditional Foods", "Sacred Mountains",
    "Rivers and Lakes", "Ocean Stories", "Bird Life", "Forest Wisdom",
    "Traditional Crafts", "Weaving Patterns", "Carving Stories", "Music and Songs",
    "Dance Movements", "Legends of Maui", "Creation Stories", "Land and Sea",
    "Seasons and Weather", "Traditional Games", "Healing Plants", "Star Navigation",
    "Fishing Methods", "Garden Knowledge", "Tribal Histories", "Modern Māori",
    "Language Preservation", "Cultural Celebration",
)

# Horizontal spacing between stops on the journey map, in pixels.
STOP_SPACING = 300

DEFAULT_CHARACTERS: tuple[dict, ...] = (
    {
        "id": "kaea",
        "name": "Kaea",
        "description": "A young warrior with courage and determination",
        "avatar": "🏹",
        "unlocked": True,
    },
    {
        "id": "aroha",
        "name": "Aroha",
        "description": "A wise healer who understands the land",
        "avatar": "🌿",
        "unlocked": True,
    },
    {
        "id": "rangi",
        "name": "Rangi",
        "description": "A navigator who reads the stars",
        "avatar": "⭐",
        "unlocked": True,
    },
    {
        "id": "moana",
        "name": "Moana",
        "description": "A guardian of the ocean and its creatures",
        "avatar": "🌊",
        "unlocked": False,
        "required_completions": 5,
    },
)


def activity_id(day: int) -> str:
    return f"day-{day}"


def describe_day(day: int) -> str:
    return (
        f"Discover the rich heritage and knowledge of Day {day}. Complete this "
        "activity to unlock cultural wisdom and earn rewards on your journey."
    )


def map_position(day: int) -> Position:
    """Gentle wave along the horizontal journey map."""
    return Position(
        x=(day - 1) * STOP_SPACING + 200,
        y=50 + math.sin(day * 0.5) * 30,
    )


class Roster:
    """Deterministic activity and character templates for one journey."""

    def __init__(
        self,
        seed: int = 0,
        titles: Sequence[str] = ACTIVITY_TITLES,
        characters: Sequence[dict] = DEFAULT_CHARACTERS,
    ) -> None:
        self.seed = seed
        self._titles = tuple(titles)
        self._characters = tuple(Character.model_validate(c) for c in characters)
        rng = random.Random(seed)
        self._types = tuple(rng.choice(ACTIVITY_TYPES) for _ in range(JOURNEY_LENGTH))

    def build_activities(self, difficulty: str = "beginner") -> list[Activity]:
        """Return the 30 activities with only day 1 unlocked.

        A title table shorter than the journey is a ConfigurationError; days
        are never padded with a generic title.
        """
        if len(self._titles) < JOURNEY_LENGTH:
            raise ConfigurationError(
                f"Roster needs {JOURNEY_LENGTH} activity titles, got {len(self._titles)}",
                expected=JOURNEY_LENGTH,
                actual=len(self._titles),
            )
        if difficulty not in DIFFICULTIES:
            raise ValidationError(
                f"Unknown difficulty '{difficulty}'",
                field="difficulty",
                value=difficulty,
            )
        return [
            Activity(
                id=activity_id(day),
                day=day,
                title=f"Rā {day} - {self._titles[day - 1]}",
                description=describe_day(day),
                difficulty=difficulty,
                type=self._types[day - 1],
                completed=False,
                unlocked=day == 1,
                position=map_position(day),
            )
            for day in range(1, JOURNEY_LENGTH + 1)
        ]

    def build_characters(self) -> list[Character]:
        if not any(c.unlocked for c in self._characters):
            raise ConfigurationError(
                "At least one character must be unlocked by default",
                characters=[c.id for c in self._characters],
            )
        return [c.model_copy(deep=True) for c in self._characters]
