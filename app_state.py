"""Shared application state - service construction and FastAPI dependencies.

Services are built once per app by ``build_services`` and attached to
``app.state.services``; routes receive them through the ``get_*``
dependencies below.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from core.config import StudyBuddyConfig
from core.logger import get_logger
from spooky.cleanup import CleanupService
from spooky.engine.progress_engine import ProgressEngine
from spooky.engine.scoring_engine import QuizScoringEngine
from spooky.llm.factory import GeneratorFactory
from spooky.llm.generators import QuizGenerator, StoryGenerator
from spooky.storage import (
    JsonDocumentRepository,
    JsonFileRepository,
    ProgressStore,
    QuizStore,
    StoryStore,
)

logger = get_logger("app_state")


# =============================================================================
# SERVICES
# =============================================================================


@dataclass
class Services:
    """Everything the routes need, wired for one application instance."""

    config: StudyBuddyConfig
    stories: StoryStore
    quizzes: QuizStore
    progress: ProgressStore
    story_generator: StoryGenerator
    quiz_generator: QuizGenerator
    scoring: QuizScoringEngine
    progress_engine: ProgressEngine
    cleanup: CleanupService


def build_services(config: StudyBuddyConfig, rng: Optional[random.Random] = None) -> Services:
    """Construct stores, engines and generators from configuration.

    Layout under ``config.data_dir``:
        stories/<id>.json, stories/index.json, quizzes/<id>.json,
        quiz-results/<quizId>-<timestamp>.json, progress/user_progress.json
    """
    rng = rng or random.Random()
    data_dir = config.data_dir

    stories = StoryStore(
        stories=JsonFileRepository(data_dir / "stories", exclude=("index",)),
        index=JsonDocumentRepository(data_dir / "stories" / "index.json"),
        ttl_days=config.story_ttl_days,
    )
    quizzes = QuizStore(
        quizzes=JsonFileRepository(data_dir / "quizzes"),
        results=JsonFileRepository(data_dir / "quiz-results"),
    )
    progress_engine = ProgressEngine(timezone=config.timezone)
    progress = ProgressStore(
        JsonDocumentRepository(data_dir / "progress" / "user_progress.json"),
        factory=progress_engine.new_progress,
    )
    factory = GeneratorFactory(config, rng=rng)

    logger.info("Services built", data_dir=str(data_dir), ai_enabled=config.ai_enabled)
    return Services(
        config=config,
        stories=stories,
        quizzes=quizzes,
        progress=progress,
        story_generator=factory.create_story_generator(),
        quiz_generator=factory.create_quiz_generator(),
        scoring=QuizScoringEngine(rng=rng),
        progress_engine=progress_engine,
        cleanup=CleanupService(stories, interval_hours=config.cleanup_interval_hours),
    )


# =============================================================================
# DEPENDENCIES
# =============================================================================


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_config(request: Request) -> StudyBuddyConfig:
    return get_services(request).config
