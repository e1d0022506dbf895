"""Generators - Remote and fallback quiz/story generation.

Both generator kinds share one async interface, so routes never know which
backend produced a story or quiz. Remote output is validated before it is
accepted; any upstream failure is replaced by the template result for that
call.
"""

import json
import random
import re
from typing import Any, Optional, Protocol

import httpx

from core.exceptions import UpstreamServiceError
from core.logger import get_logger

from ..engine.quiz_builder import build_quiz, default_question_count
from ..engine.sentence_extractor import extract_key_learning_points
from ..engine.story_generator import (
    DEFAULT_TOPIC,
    estimate_read_time,
    new_story_id,
)
from ..models.enums import QUESTION_CHARACTERS, QuizDifficulty, StoryDifficulty
from ..models.schemas import OPTIONS_PER_QUESTION, Quiz, QuizQuestion, SpookyStory, utc_now
from ..prompts.templates import (
    DIFFICULTY_INSTRUCTIONS,
    QUIZ_GENERATION_PROMPT,
    QUIZ_SYSTEM_PROMPT,
    STORY_CHARACTERS,
    STORY_GENERATION_PROMPT,
    STORY_SYSTEM_PROMPT,
    STORY_TITLE_PROMPT,
)
from .client import ChatCompletionClient

logger = get_logger("generators")

REMOTE_STORY_TITLE = "🎃 A Spooky Learning Adventure"

_FENCE = re.compile(r"```(?:json)?\s*")


class QuizGenerator(Protocol):
    async def generate(
        self,
        content: str,
        source_id: str,
        difficulty: QuizDifficulty,
        question_count: Optional[int] = None,
    ) -> Quiz: ...


class StoryGenerator(Protocol):
    async def generate(self, content: str, file_name: Optional[str] = None) -> SpookyStory: ...


# =============================================================================
# QUIZ
# =============================================================================


def parse_quiz_response(text: str) -> list[dict[str, Any]]:
    """Parse and validate the JSON array returned by the model.

    Markdown code fences are stripped first. Every item must have a
    non-empty question, exactly four distinct options, an integer
    ``correctAnswer`` in [0, 4) and a non-empty explanation.

    Raises:
        UpstreamServiceError: If the payload is not a valid question list
    """
    cleaned = _FENCE.sub("", text).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise UpstreamServiceError("AI quiz response is not valid JSON") from e

    if not isinstance(parsed, list) or not parsed:
        raise UpstreamServiceError("AI quiz response is not a non-empty array")

    for index, item in enumerate(parsed):
        if not isinstance(item, dict):
            raise UpstreamServiceError(f"Invalid question structure at index {index}")

        question = item.get("question")
        options = item.get("options")
        answer = item.get("correctAnswer")
        explanation = item.get("explanation")

        valid = (
            isinstance(question, str)
            and question.strip()
            and isinstance(options, list)
            and len(options) == OPTIONS_PER_QUESTION
            and all(isinstance(o, str) and o.strip() for o in options)
            and len({o.strip() for o in options}) == OPTIONS_PER_QUESTION
            and isinstance(answer, int)
            and not isinstance(answer, bool)
            and 0 <= answer < OPTIONS_PER_QUESTION
            and isinstance(explanation, str)
            and explanation.strip()
        )
        if not valid:
            raise UpstreamServiceError(f"Invalid question structure at index {index}")

    return parsed


class RemoteQuizGenerator:
    """Quiz generation through the chat completion API."""

    def __init__(self, client: ChatCompletionClient):
        self.client = client

    async def generate(
        self,
        content: str,
        source_id: str,
        difficulty: QuizDifficulty,
        question_count: Optional[int] = None,
    ) -> Quiz:
        target = question_count or default_question_count(difficulty)
        prompt = QUIZ_GENERATION_PROMPT.format(
            question_count=target,
            content=content,
            difficulty=difficulty.value,
            instructions=DIFFICULTY_INSTRUCTIONS[difficulty.value],
        )
        text = await self.client.complete(prompt, system=QUIZ_SYSTEM_PROMPT, temperature=0.7, max_tokens=2000)

        questions = [
            QuizQuestion(
                id=f"q{i + 1}",
                prompt=item["question"].strip(),
                options=[o.strip() for o in item["options"]],
                correct_answer_index=item["correctAnswer"],
                explanation=item["explanation"].strip(),
                character=QUESTION_CHARACTERS[i % len(QUESTION_CHARACTERS)],
            )
            for i, item in enumerate(parse_quiz_response(text)[:target])
        ]
        quiz = build_quiz(questions, source_id, difficulty)
        logger.info("AI quiz generated", quiz_id=quiz.id, source_id=source_id, questions=len(questions))
        return quiz


class FallbackQuizGenerator:
    """Tries the remote generator and substitutes the template builder on failure.

    The substitution is permanent for that call; nothing is retried.
    """

    def __init__(self, primary: QuizGenerator, fallback: QuizGenerator):
        self.primary = primary
        self.fallback = fallback

    async def generate(
        self,
        content: str,
        source_id: str,
        difficulty: QuizDifficulty,
        question_count: Optional[int] = None,
    ) -> Quiz:
        try:
            return await self.primary.generate(content, source_id, difficulty, question_count)
        except (UpstreamServiceError, httpx.HTTPError) as e:
            logger.warning("AI quiz generation failed, using template", source_id=source_id, error=str(e))
            return await self.fallback.generate(content, source_id, difficulty, question_count)


# =============================================================================
# STORY
# =============================================================================


class RemoteStoryGenerator:
    """Story and title generation through the chat completion API."""

    def __init__(self, client: ChatCompletionClient, rng: Optional[random.Random] = None):
        self.client = client
        self.rng = rng or random.Random()

    async def generate(self, content: str, file_name: Optional[str] = None) -> SpookyStory:
        characters = self.rng.sample(list(STORY_CHARACTERS), 2)
        descriptions = "\n".join(
            f'{c.name} ({c.type.value}): {c.personality}. Says "{c.catchphrase}"' for c in characters
        )

        story_content = await self.client.complete(
            STORY_GENERATION_PROMPT.format(characters=descriptions, content=content),
            system=STORY_SYSTEM_PROMPT,
            temperature=0.8,
            max_tokens=1500,
        )
        title = await self.client.complete(
            STORY_TITLE_PROMPT.format(excerpt=story_content[:200]),
            temperature=0.9,
            max_tokens=50,
        )

        story = SpookyStory(
            id=new_story_id(),
            title=title.strip().strip('"') or REMOTE_STORY_TITLE,
            content=story_content,
            original_content=content,
            original_topic=file_name or DEFAULT_TOPIC,
            characters=[c.name for c in characters],
            key_learning_points=extract_key_learning_points(content),
            difficulty=StoryDifficulty.INTERMEDIATE,
            estimated_read_time=estimate_read_time(story_content),
            created_at=utc_now(),
        )
        logger.info("AI story generated", story_id=story.id, topic=story.original_topic)
        return story


class FallbackStoryGenerator:
    """Tries the remote story generator and falls back to the template."""

    def __init__(self, primary: StoryGenerator, fallback: StoryGenerator):
        self.primary = primary
        self.fallback = fallback

    async def generate(self, content: str, file_name: Optional[str] = None) -> SpookyStory:
        try:
            return await self.primary.generate(content, file_name)
        except (UpstreamServiceError, httpx.HTTPError) as e:
            logger.warning("AI story generation failed, using template", topic=file_name, error=str(e))
            return await self.fallback.generate(content, file_name)
