"""Progress endpoints - XP, badges, streaks and leaderboard."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app_state import Services, get_services
from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from spooky.engine.progress_engine import ProgressUpdate
from spooky.models.api import (
    FavoriteCharacterRequest,
    FavoriteCharacterResponse,
    LeaderboardResponse,
    ProgressResponse,
    QuizCompletedRequest,
    QuizCompletedResponse,
    StoryReadRequest,
)
from spooky.models.schemas import StorySummary, UserProgress
from utils.validators import (
    validate_character,
    validate_entity_id,
    validate_leaderboard_category,
)

router = APIRouter(prefix="/progress", tags=["Progress"])
logger = get_logger("progress")

DEFAULT_USER = "default"
MAX_LEADERBOARD_LIMIT = 100


def _progress_response(services: Services, progress: UserProgress, message: str) -> ProgressResponse:
    engine = services.progress_engine
    return ProgressResponse(
        progress=progress,
        halloween_metrics=engine.halloween_metrics(progress),
        learning_stats=engine.learning_stats(progress),
        level_info=engine.level_info(progress),
        message=message,
    )


def quiz_completed_message(update: ProgressUpdate) -> str:
    if update.leveled_up:
        return f"🎉 Level up! You're now level {update.progress.level}!"
    count = len(update.new_badges)
    if count:
        return f"🏆 Quiz completed! You earned {count} new badge{'s' if count > 1 else ''}!"
    return "🧙‍♀️ Quiz completion recorded!"


# =============================================================================
# LEADERBOARD
# =============================================================================


@router.get("/leaderboard", response_model=LeaderboardResponse)
@router.get("/leaderboard/{category}", response_model=LeaderboardResponse)
async def get_leaderboard(
    category: Optional[str] = None,
    limit: int = Query(10, ge=1, le=MAX_LEADERBOARD_LIMIT),
    services: Services = Depends(get_services),
):
    """Rank every stored user by xp, level, streak or badges."""
    sort_key = validate_leaderboard_category(category)
    records = await services.progress.list_all()
    entries = services.progress_engine.leaderboard(records, sort_key, limit=limit)
    return LeaderboardResponse(
        leaderboard=entries,
        category=sort_key.value,
        message="🏆 Leaderboard summoned from the spirit realm!",
    )


# =============================================================================
# PROGRESS
# =============================================================================


@router.get("", response_model=ProgressResponse)
@router.get("/{user_id}", response_model=ProgressResponse)
async def get_progress(user_id: str = DEFAULT_USER, services: Services = Depends(get_services)):
    """Progress record with metrics, learning stats and level info."""
    user_id = validate_entity_id(user_id, "userId")
    progress = await services.progress.get(user_id)
    return _progress_response(services, progress, "📊 Progress data retrieved from the spirit realm!")


@router.post("/story-read", response_model=ProgressResponse)
async def record_story_read(request: StoryReadRequest, services: Services = Depends(get_services)):
    """Record a story read by id or by summary. Repeat reads award nothing."""
    user_id = validate_entity_id(request.user_id, "userId")

    summary: Optional[StorySummary] = None
    if request.story_id:
        story = await services.stories.get(validate_entity_id(request.story_id, "storyId"))
        if story is None:
            raise NotFoundError(
                "Story not found",
                suggested_action="This story seems to have vanished into the spirit realm!",
            )
        summary = story.summary()
    elif request.story is not None:
        summary = request.story

    if summary is None:
        raise ValidationError(
            "Story data required",
            suggested_action="Please provide story information to record progress!",
        )

    progress = await services.progress.get(user_id)
    update = services.progress_engine.record_story_read(progress, summary)
    await services.progress.save(update.progress)

    return _progress_response(services, update.progress, "📚 Story reading progress recorded!")


@router.post("/quiz-completed", response_model=QuizCompletedResponse)
async def record_quiz_completed(request: QuizCompletedRequest, services: Services = Depends(get_services)):
    """Append a quiz result and award XP, streak and badges."""
    user_id = validate_entity_id(request.user_id, "userId")
    if request.quiz_result is None:
        raise ValidationError(
            "Quiz result data required",
            suggested_action="Please provide quiz result information to record progress!",
        )

    progress = await services.progress.get(user_id)
    update = services.progress_engine.record_quiz_completed(progress, request.quiz_result)
    await services.progress.save(update.progress)

    base = _progress_response(services, update.progress, quiz_completed_message(update))
    return QuizCompletedResponse(
        **dict(base),
        new_badges=update.new_badges,
        xp_earned=update.xp_earned,
        leveled_up=update.leveled_up,
    )


@router.put("/favorite-character", response_model=FavoriteCharacterResponse)
async def set_favorite_character(request: FavoriteCharacterRequest, services: Services = Depends(get_services)):
    user_id = validate_entity_id(request.user_id, "userId")
    character = validate_character(request.character)

    progress = await services.progress.get(user_id)
    progress = services.progress_engine.set_favorite_character(progress, character)
    await services.progress.save(progress)

    logger.info("Favorite character set", user_id=user_id, character=character.value)
    return FavoriteCharacterResponse(
        progress=progress,
        message=f"👻 {character.value} is now your favorite spooky companion!",
    )
