"""Enums - Difficulty levels, characters and badge rarity."""

from enum import Enum


class QuizDifficulty(str, Enum):
    """Quiz difficulty levels."""

    EASY = "easy"  # 3 questions, 60s each
    MEDIUM = "medium"  # 5 questions, 90s each
    HARD = "hard"  # 7 questions, 120s each


class StoryDifficulty(str, Enum):
    """Reading level tag stored on a story."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class HalloweenCharacter(str, Enum):
    """Decorative characters. Cosmetic only, never affects scoring."""

    GHOST = "ghost"
    VAMPIRE = "vampire"
    WITCH = "witch"
    SKELETON = "skeleton"
    PUMPKIN = "pumpkin"


# Round-robin order for quiz questions (pumpkin is favorite-only)
QUESTION_CHARACTERS: tuple[HalloweenCharacter, ...] = (
    HalloweenCharacter.GHOST,
    HalloweenCharacter.VAMPIRE,
    HalloweenCharacter.WITCH,
    HalloweenCharacter.SKELETON,
)


class BadgeRarity(str, Enum):
    """Badge rarity tiers."""

    COMMON = "common"
    RARE = "rare"
    LEGENDARY = "legendary"


class LeaderboardCategory(str, Enum):
    """Sort keys accepted by the leaderboard."""

    XP = "xp"
    LEVEL = "level"
    STREAK = "streak"
    BADGES = "badges"
