"""Generator Factory - Picks template or AI-backed generators from config."""

import random
from typing import Optional

from core.config import StudyBuddyConfig
from core.logger import get_logger

from ..engine.quiz_builder import TemplateQuizBuilder
from ..engine.story_generator import TemplateStoryGenerator
from .client import ChatCompletionClient
from .generators import (
    FallbackQuizGenerator,
    FallbackStoryGenerator,
    QuizGenerator,
    RemoteQuizGenerator,
    RemoteStoryGenerator,
    StoryGenerator,
)

logger = get_logger("generator_factory")


class GeneratorFactory:
    """Builds the quiz and story generators used by the API.

    Without an API key the template generators are returned directly. With
    one, the remote generators are wrapped in fallbacks to the templates.

    Example:
        >>> factory = GeneratorFactory(StudyBuddyConfig.from_env())
        >>> quizzes = factory.create_quiz_generator()
        >>> quiz = await quizzes.generate(story.content, story.id, QuizDifficulty.MEDIUM)
    """

    def __init__(self, config: StudyBuddyConfig, rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng or random.Random()

    def create_client(self) -> ChatCompletionClient:
        return ChatCompletionClient(
            api_key=self.config.openai_api_key or "",
            model=self.config.openai_model,
            base_url=self.config.openai_base_url,
            timeout=self.config.ai_timeout_seconds,
        )

    def create_quiz_generator(self) -> QuizGenerator:
        template = TemplateQuizBuilder(rng=self.rng)
        if not self.config.ai_enabled:
            logger.info("AI disabled, using template quiz generation")
            return template
        return FallbackQuizGenerator(RemoteQuizGenerator(self.create_client()), template)

    def create_story_generator(self) -> StoryGenerator:
        template = TemplateStoryGenerator(rng=self.rng)
        if not self.config.ai_enabled:
            logger.info("AI disabled, using template story generation")
            return template
        return FallbackStoryGenerator(RemoteStoryGenerator(self.create_client(), rng=self.rng), template)
