"""API schemas - Request/response models and read models."""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from .schemas import (
    Badge,
    CamelModel,
    Quiz,
    QuizResult,
    SpookyStory,
    StorySummary,
    UserProgress,
)

# =============================================================================
# READ MODELS
# =============================================================================


class QuestionFeedback(CamelModel):
    """Per-question review returned after a submission."""

    question_id: str
    is_correct: bool
    user_answer: int = Field(..., description="Submitted index, -1 when unanswered")
    correct_answer: int
    explanation: str


class DetailedFeedback(CamelModel):
    """Performance feedback split into display sections."""

    overall_message: str
    encouragement: str
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)


class HalloweenMetrics(CamelModel):
    pumpkins_collected: int = 0
    ghosts_befriended: int = 0
    spells_cast: int = 0
    candy_earned: int = 0


class LearningStats(CamelModel):
    average_score: float = 0.0
    total_time_spent: float = 0.0
    improvement_trend: float = 0.0
    favorite_topics: list[str] = Field(default_factory=list)


class LevelInfo(CamelModel):
    level: int
    title: str
    icon: str
    description: str
    required_xp: int
    next_level_xp: int
    progress_percent: float


class UserQuizStats(CamelModel):
    """Aggregates over every stored quiz result."""

    total_quizzes: int = 0
    average_score: int = 0
    total_correct_answers: int = 0
    total_questions: int = 0
    best_score: int = 0
    recent_scores: list[int] = Field(default_factory=list)


class LeaderboardEntry(CamelModel):
    user_id: str
    rank: int
    score: int
    category: str


# =============================================================================
# ERRORS
# =============================================================================


class ErrorCharacter(CamelModel):
    name: str
    personality: str
    catchphrase: str


class ErrorResponse(CamelModel):
    """Uniform themed error payload."""

    error: bool = True
    message: str
    character: ErrorCharacter
    suggested_action: Optional[str] = None
    error_code: str
    timestamp: datetime


# =============================================================================
# STORIES
# =============================================================================


class GenerateStoryRequest(CamelModel):
    content: Optional[str] = Field(None, description="Study text to transform")
    file_name: Optional[str] = Field(None, description="Topic label for pasted text")


class GenerateStoryResponse(CamelModel):
    success: bool = True
    story: SpookyStory
    processing_time: float = Field(..., description="Seconds spent generating")
    message: str = ""


class StoryDetailResponse(CamelModel):
    success: bool = True
    data: SpookyStory


class StoryListResponse(CamelModel):
    success: bool = True
    stories: list[SpookyStory]
    count: int
    message: str = ""


# =============================================================================
# QUIZZES
# =============================================================================


class GenerateQuizRequest(CamelModel):
    story_id: Optional[str] = Field(None, description="Story to build the quiz from")
    difficulty: str = Field("medium", description="easy, medium or hard")
    question_count: Optional[int] = Field(None, description="Override for the difficulty default (1-20)")


class RetryQuizRequest(CamelModel):
    difficulty: str = "medium"
    question_count: Optional[int] = None


class GenerateQuizResponse(CamelModel):
    success: bool = True
    quiz: Quiz
    estimated_time: int = Field(..., description="Time limit in minutes, rounded up")
    message: str = ""


class SubmitQuizRequest(CamelModel):
    quiz_id: Optional[str] = None
    answers: Optional[dict[str, int]] = Field(None, description="questionId -> selected index")
    time_spent: float = Field(0, ge=0, description="Seconds spent on the quiz")


class SubmitQuizResponse(CamelModel):
    success: bool = True
    results: QuizResult
    celebration_message: str
    retry_suggestions: list[str] = Field(default_factory=list)
    detailed_feedback: DetailedFeedback
    question_feedback: list[QuestionFeedback] = Field(default_factory=list)
    message: str = ""


class QuizDetailResponse(CamelModel):
    success: bool = True
    quiz: Quiz


class QuizResultsListResponse(CamelModel):
    success: bool = True
    results: list[QuizResult]


class QuizStatsResponse(CamelModel):
    success: bool = True
    stats: UserQuizStats


# =============================================================================
# PROGRESS
# =============================================================================


class StoryReadRequest(CamelModel):
    user_id: str = "default"
    story_id: Optional[str] = None
    story: Optional[StorySummary] = None


class QuizCompletedRequest(CamelModel):
    user_id: str = "default"
    quiz_result: Optional[QuizResult] = None


class FavoriteCharacterRequest(CamelModel):
    user_id: str = "default"
    character: Optional[str] = None


class ProgressResponse(CamelModel):
    success: bool = True
    progress: UserProgress
    halloween_metrics: HalloweenMetrics
    learning_stats: Optional[LearningStats] = None
    level_info: Optional[LevelInfo] = None
    message: str = ""


class QuizCompletedResponse(ProgressResponse):
    new_badges: list[Badge] = Field(default_factory=list)
    xp_earned: int = 0
    leveled_up: bool = False


class FavoriteCharacterResponse(CamelModel):
    success: bool = True
    progress: UserProgress
    message: str = ""


class LeaderboardResponse(CamelModel):
    success: bool = True
    leaderboard: list[LeaderboardEntry]
    category: str
    message: str = ""


class HealthResponse(CamelModel):
    status: str = "OK"
    message: str
    timestamp: datetime
    ai_enabled: bool
    details: dict[str, Any] = Field(default_factory=dict)
