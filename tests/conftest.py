# =============================================================================
# CONFTEST - Shared fixtures for all tests
# =============================================================================
# Configs, seeded generators, sample quizzes and the FastAPI client
# =============================================================================

import random
from datetime import datetime, timezone
from pathlib import Path

import pytest

STUDY_TEXT = (
    "Photosynthesis converts light energy into chemical energy inside plant cells. "
    "Chlorophyll absorbs mostly red and blue wavelengths of sunlight. "
    "The Calvin cycle builds glucose molecules from carbon dioxide and water. "
    "Stomata on leaves regulate the exchange of gases with the atmosphere. "
    "Mitochondria release stored energy through cellular respiration. "
    "Oxygen is produced as a byproduct when water molecules are split."
)


# =============================================================================
# CONFIG FIXTURES
# =============================================================================


@pytest.fixture
def config(tmp_path: Path):
    """Config with a temp data dir, no AI and no cleanup task."""
    from core.config import StudyBuddyConfig

    return StudyBuddyConfig(
        data_dir=tmp_path / "data",
        openai_api_key=None,
        cleanup_interval_hours=0,
        environment="test",
        log_level="ERROR",
        timezone="UTC",
    )


@pytest.fixture
def rng():
    """Seeded random generator for deterministic tests."""
    return random.Random(42)


@pytest.fixture
def fixed_now():
    return datetime(2025, 10, 31, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def study_text():
    return STUDY_TEXT


# =============================================================================
# FASTAPI FIXTURES
# =============================================================================


@pytest.fixture
def services(config, rng):
    from app_state import build_services

    return build_services(config, rng=rng)


@pytest.fixture
def app(config, services):
    from server import create_app

    return create_app(config, services=services)


@pytest.fixture
def client(app):
    """FastAPI test client with the lifespan running."""
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SAMPLE DATA
# =============================================================================


def make_question(index: int, correct: int = 0):
    from spooky.models.enums import QUESTION_CHARACTERS
    from spooky.models.schemas import QuizQuestion

    return QuizQuestion(
        id=f"q{index + 1}",
        prompt=f"Question number {index + 1}?",
        options=[f"option-{index}-{i}" for i in range(4)],
        correct_answer_index=correct,
        explanation=f"Explanation {index + 1}",
        character=QUESTION_CHARACTERS[index % len(QUESTION_CHARACTERS)],
    )


def make_quiz(count: int = 5, difficulty=None, quiz_id: str = "quiz-sample"):
    from spooky.engine.quiz_builder import build_quiz
    from spooky.models.enums import QuizDifficulty

    difficulty = difficulty or QuizDifficulty.MEDIUM
    questions = [make_question(i, correct=i % 4) for i in range(count)]
    return build_quiz(questions, "story-sample", difficulty, quiz_id=quiz_id)


def make_result(score: int = 80, time_spent: float = 120.0, submitted_at=None, quiz_id: str = "quiz-sample"):
    from spooky.models.schemas import QuizResult

    total = 5
    return QuizResult(
        quiz_id=quiz_id,
        score=score,
        total_questions=total,
        correct_answers=min(total, round(score / 100 * total)),
        time_spent_seconds=time_spent,
        submitted_at=submitted_at or datetime(2025, 10, 31, 12, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_quiz():
    """Medium quiz with five questions, answer for q{n} is (n-1) % 4."""
    return make_quiz()


@pytest.fixture
def correct_answers(sample_quiz):
    return {q.id: q.correct_answer_index for q in sample_quiz.questions}


@pytest.fixture
def quiz_factory():
    """``make_quiz(count=5, difficulty=None, quiz_id="quiz-sample")``."""
    return make_quiz


@pytest.fixture
def result_factory():
    """``make_result(score=80, time_spent=120.0, submitted_at=None, quiz_id="quiz-sample")``."""
    return make_result
