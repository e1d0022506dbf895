"""Domain schemas - Quiz, results, badges, progress and stories.

All models serialize with camelCase aliases (the wire and storage format) and
accept either camelCase or snake_case on input.
"""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .enums import BadgeRarity, HalloweenCharacter, QuizDifficulty, StoryDifficulty

POINTS_PER_QUESTION = 10
OPTIONS_PER_QUESTION = 4


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    """Immutable variant for values that never change once created."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# =============================================================================
# QUIZ
# =============================================================================


class QuizQuestion(FrozenCamelModel):
    """Multiple-choice question with exactly four distinct options."""

    id: str = Field(..., description="Question ID, unique within the quiz")
    prompt: str = Field(..., min_length=1, description="Question text or blanked sentence")
    options: list[str] = Field(..., description="4 distinct options in display order")
    correct_answer_index: int = Field(..., ge=0, le=3, description="Index of the correct option (0-3)")
    explanation: str = Field(..., min_length=1, description="Why the correct option is correct")
    character: HalloweenCharacter = Field(..., description="Decorative character")

    @model_validator(mode="after")
    def _check_options(self) -> "QuizQuestion":
        if len(self.options) != OPTIONS_PER_QUESTION:
            raise ValueError(f"expected {OPTIONS_PER_QUESTION} options, got {len(self.options)}")
        if len(set(self.options)) != OPTIONS_PER_QUESTION:
            raise ValueError("options must be distinct")
        return self


class Quiz(FrozenCamelModel):
    """Generated quiz. Question order is display order."""

    id: str
    source_id: str = Field(..., description="ID of the story the quiz was built from")
    questions: list[QuizQuestion] = Field(..., min_length=1)
    total_points: int
    difficulty: QuizDifficulty
    time_limit_seconds: int = Field(..., ge=0)
    created_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _check_points(self) -> "Quiz":
        expected = POINTS_PER_QUESTION * len(self.questions)
        if self.total_points != expected:
            raise ValueError(f"total_points must be {expected}, got {self.total_points}")
        return self

    def get_question(self, question_id: str) -> Optional[QuizQuestion]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None


class QuizResult(FrozenCamelModel):
    """Outcome of one quiz submission."""

    quiz_id: str
    score: int = Field(..., ge=0, le=100)
    total_questions: int = Field(..., ge=1)
    correct_answers: int = Field(..., ge=0)
    time_spent_seconds: float = Field(..., ge=0)
    feedback_text: str = ""
    badges_awarded_this_submission: list[str] = Field(default_factory=list)
    submitted_at: datetime = Field(default_factory=utc_now)
    difficulty: Optional[QuizDifficulty] = None

    @model_validator(mode="after")
    def _check_counts(self) -> "QuizResult":
        if self.correct_answers > self.total_questions:
            raise ValueError("correct_answers cannot exceed total_questions")
        if len(set(self.badges_awarded_this_submission)) != len(self.badges_awarded_this_submission):
            raise ValueError("badges_awarded_this_submission must not repeat ids")
        return self


# =============================================================================
# GAMIFICATION
# =============================================================================


class Badge(FrozenCamelModel):
    """Badge minted into a user's progress."""

    id: str
    name: str
    description: str
    icon: str
    rarity: BadgeRarity
    unlocked_at: datetime = Field(default_factory=utc_now)


class StorySummary(CamelModel):
    """Compact record of a story kept in progress history."""

    id: str
    title: str = "Untitled story"
    original_topic: str = "Direct text input"
    read_at: datetime = Field(default_factory=utc_now)


class UserProgress(CamelModel):
    """Long-lived progress record, one per user.

    Collections are append-only; ``level`` is always derived from
    ``experience_points``.
    """

    user_id: str
    level: int = Field(default=1, ge=1)
    experience_points: int = Field(default=0, ge=0)
    stories_read: list[StorySummary] = Field(default_factory=list)
    quizzes_taken: list[QuizResult] = Field(default_factory=list)
    badges: list[Badge] = Field(default_factory=list)
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    favorite_character: Optional[HalloweenCharacter] = None
    last_activity_date: Optional[date] = None

    def badge_ids(self) -> set[str]:
        return {badge.id for badge in self.badges}

    def has_badge(self, badge_id: str) -> bool:
        return any(badge.id == badge_id for badge in self.badges)

    def has_read(self, story_id: str) -> bool:
        return any(story.id == story_id for story in self.stories_read)


# =============================================================================
# STORIES
# =============================================================================


class SpookyStory(CamelModel):
    """Study material wrapped in a Halloween narrative."""

    id: str
    title: str
    content: str
    original_content: str = ""
    original_topic: str = "Direct text input"
    characters: list[str] = Field(default_factory=list)
    key_learning_points: list[str] = Field(default_factory=list)
    difficulty: StoryDifficulty = StoryDifficulty.INTERMEDIATE
    estimated_read_time: int = Field(default=1, ge=0, description="Minutes")
    created_at: datetime = Field(default_factory=utc_now)
    shareable_link: Optional[str] = None

    def summary(self, read_at: Optional[datetime] = None) -> StorySummary:
        return StorySummary(
            id=self.id,
            title=self.title,
            original_topic=self.original_topic,
            read_at=read_at or utc_now(),
        )
