"""Quiz Store - Quizzes, submission results and aggregate stats."""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from core.exceptions import StorageError
from core.logger import get_logger

from ..engine.scoring_engine import round_half_up
from ..models.api import UserQuizStats
from ..models.schemas import Quiz, QuizResult
from .repository import Repository

logger = get_logger("quiz_store")

RECENT_SCORES = 10


def result_key(result: QuizResult) -> str:
    """``<quizId>-<timestamp>`` with ``:`` and ``.`` replaced by ``-``."""
    timestamp = result.submitted_at.isoformat().replace(":", "-").replace(".", "-")
    return f"{result.quiz_id}-{timestamp}"


class QuizStore:
    """Persistence for quizzes and their results.

    Structure:
        - quizzes/<quizId>.json -> Quiz
        - quiz-results/<quizId>-<timestamp>.json -> QuizResult

    Example:
        >>> store = QuizStore(JsonFileRepository(root / "quizzes"), JsonFileRepository(root / "quiz-results"))
        >>> await store.save_quiz(quiz)
        >>> loaded = await store.get_quiz(quiz.id)
    """

    def __init__(self, quizzes: Repository, results: Repository):
        self.quizzes = quizzes
        self.results = results

    async def save_quiz(self, quiz: Quiz) -> None:
        await self.quizzes.put(quiz.id, quiz.model_dump(mode="json", by_alias=True))
        logger.debug("Quiz saved", quiz_id=quiz.id)

    async def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        raw = await self.quizzes.get(quiz_id)
        if raw is None:
            return None
        try:
            return Quiz.model_validate(raw)
        except PydanticValidationError as e:
            raise StorageError(f"Stored quiz {quiz_id} is invalid") from e

    async def save_result(self, result: QuizResult) -> str:
        """Store a result in its own timestamped file. Returns the key."""
        key = result_key(result)
        await self.results.put(key, result.model_dump(mode="json", by_alias=True))
        logger.info("Quiz result saved", quiz_id=result.quiz_id, key=key, score=result.score)
        return key

    async def list_results(self) -> list[QuizResult]:
        """All readable results, newest first."""
        results = []
        for raw in await self.results.list():
            try:
                results.append(QuizResult.model_validate(raw))
            except PydanticValidationError as e:
                logger.warning("Skipping invalid quiz result", error=str(e))
        return sorted(results, key=lambda r: r.submitted_at, reverse=True)

    async def get_results(self, quiz_id: str) -> list[QuizResult]:
        return [r for r in await self.list_results() if r.quiz_id == quiz_id]

    async def user_stats(self) -> UserQuizStats:
        """Totals, rounded average, best and last ten scores."""
        results = await self.list_results()
        if not results:
            return UserQuizStats()

        return UserQuizStats(
            total_quizzes=len(results),
            average_score=round_half_up(sum(r.score for r in results) / len(results)),
            total_correct_answers=sum(r.correct_answers for r in results),
            total_questions=sum(r.total_questions for r in results),
            best_score=max(r.score for r in results),
            recent_scores=[r.score for r in results[:RECENT_SCORES]],
        )
