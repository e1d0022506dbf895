"""Models - Enums, domain schemas and API schemas."""

from .enums import (
    QUESTION_CHARACTERS,
    BadgeRarity,
    HalloweenCharacter,
    LeaderboardCategory,
    QuizDifficulty,
    StoryDifficulty,
)
from .schemas import (
    POINTS_PER_QUESTION,
    Badge,
    Quiz,
    QuizQuestion,
    QuizResult,
    SpookyStory,
    StorySummary,
    UserProgress,
)

__all__ = [
    # Enums
    "QuizDifficulty",
    "StoryDifficulty",
    "HalloweenCharacter",
    "QUESTION_CHARACTERS",
    "BadgeRarity",
    "LeaderboardCategory",
    # Schemas
    "POINTS_PER_QUESTION",
    "QuizQuestion",
    "Quiz",
    "QuizResult",
    "Badge",
    "StorySummary",
    "UserProgress",
    "SpookyStory",
]
