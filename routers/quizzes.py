"""Quizzes endpoints."""

import math
from typing import Optional

from fastapi import APIRouter, Depends

from app_state import Services, get_services
from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from spooky.models.api import (
    GenerateQuizRequest,
    GenerateQuizResponse,
    QuizDetailResponse,
    QuizResultsListResponse,
    QuizStatsResponse,
    RetryQuizRequest,
    SubmitQuizRequest,
    SubmitQuizResponse,
)
from spooky.models.enums import QuizDifficulty
from spooky.models.schemas import Quiz
from utils.validators import validate_difficulty, validate_entity_id, validate_question_count

router = APIRouter(prefix="/quizzes", tags=["Quizzes"])
logger = get_logger("quizzes")


def estimated_minutes(quiz: Quiz) -> int:
    return math.ceil(quiz.time_limit_seconds / 60)


async def _generate_for_story(
    services: Services,
    story_id: str,
    difficulty: QuizDifficulty,
    question_count: Optional[int],
    missing_message: str,
) -> Quiz:
    story = await services.stories.get(story_id)
    if story is None:
        raise NotFoundError("Story not found", suggested_action=missing_message)

    quiz = await services.quiz_generator.generate(story.content, story.id, difficulty, question_count)
    await services.quizzes.save_quiz(quiz)

    logger.info(
        "Quiz generated",
        quiz_id=quiz.id,
        story_id=story.id,
        difficulty=difficulty.value,
        questions=len(quiz.questions),
    )
    return quiz


@router.post("/generate", response_model=GenerateQuizResponse)
async def generate_quiz(request: GenerateQuizRequest, services: Services = Depends(get_services)):
    """Build a quiz from a stored story."""
    if not request.story_id:
        raise ValidationError(
            "Story ID required",
            suggested_action="Please provide a story ID to generate a quiz from!",
        )
    story_id = validate_entity_id(request.story_id, "storyId")
    difficulty = validate_difficulty(request.difficulty)
    question_count = validate_question_count(request.question_count)

    quiz = await _generate_for_story(
        services,
        story_id,
        difficulty,
        question_count,
        "The story you want to quiz on has vanished into the mist!",
    )
    return GenerateQuizResponse(
        quiz=quiz,
        estimated_time=estimated_minutes(quiz),
        message="🧙‍♀️ Your spooky quiz has been brewed!",
    )


@router.post("/submit", response_model=SubmitQuizResponse)
async def submit_quiz(request: SubmitQuizRequest, services: Services = Depends(get_services)):
    """Score answers, store the result and return feedback."""
    if not request.quiz_id or request.answers is None:
        raise ValidationError(
            "Missing quiz data",
            suggested_action="Please provide quiz ID and answers to submit!",
        )
    quiz_id = validate_entity_id(request.quiz_id, "quizId")

    quiz = await services.quizzes.get_quiz(quiz_id)
    if quiz is None:
        raise NotFoundError(
            "Quiz not found",
            suggested_action="This quiz has disappeared into the shadow realm!",
        )

    scored = services.scoring.score_submission(quiz, request.answers, request.time_spent)
    await services.quizzes.save_result(scored.result)

    logger.info(
        "Quiz submitted",
        quiz_id=quiz.id,
        score=scored.result.score,
        correct=scored.result.correct_answers,
        total=scored.result.total_questions,
        badges=scored.result.badges_awarded_this_submission,
    )
    return SubmitQuizResponse(
        results=scored.result,
        celebration_message=scored.celebration_message,
        retry_suggestions=scored.retry_suggestions,
        detailed_feedback=scored.detailed_feedback,
        question_feedback=scored.question_feedback,
        message="👻 Quiz submitted successfully!",
    )


@router.get("/results/{quiz_id}", response_model=QuizResultsListResponse)
async def get_quiz_results(quiz_id: str, services: Services = Depends(get_services)):
    """Stored results for one quiz, newest first."""
    validate_entity_id(quiz_id, "quizId")
    results = await services.quizzes.get_results(quiz_id)
    return QuizResultsListResponse(results=results)


@router.get("/stats/user", response_model=QuizStatsResponse)
async def get_user_stats(services: Services = Depends(get_services)):
    """Aggregate statistics over every stored result."""
    stats = await services.quizzes.user_stats()
    return QuizStatsResponse(stats=stats)


@router.get("/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz(quiz_id: str, services: Services = Depends(get_services)):
    validate_entity_id(quiz_id, "quizId")
    quiz = await services.quizzes.get_quiz(quiz_id)
    if quiz is None:
        raise NotFoundError(
            "Quiz not found",
            suggested_action="This quiz has disappeared into the shadow realm!",
        )
    return QuizDetailResponse(quiz=quiz)


@router.post("/retry/{story_id}", response_model=GenerateQuizResponse)
async def retry_quiz(
    story_id: str,
    request: Optional[RetryQuizRequest] = None,
    services: Services = Depends(get_services),
):
    """Generate a fresh quiz for the same story."""
    request = request or RetryQuizRequest()
    validate_entity_id(story_id, "storyId")
    difficulty = validate_difficulty(request.difficulty)
    question_count = validate_question_count(request.question_count)

    quiz = await _generate_for_story(
        services,
        story_id,
        difficulty,
        question_count,
        "The story has vanished! Cannot generate retry quiz.",
    )
    return GenerateQuizResponse(
        quiz=quiz,
        estimated_time=estimated_minutes(quiz),
        message="🔄 New spooky quiz brewed for your retry!",
    )
