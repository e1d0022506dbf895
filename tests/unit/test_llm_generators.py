# =============================================================================
# TESTS - AI client and generators
# =============================================================================
# Chat completion client (httpx.MockTransport), response parsing, fallbacks
# =============================================================================

import json
import random
from unittest.mock import AsyncMock

import httpx
import pytest

VALID_QUIZ = [
    {
        "question": "What does chlorophyll absorb?",
        "options": ["Sound", "Red and blue light", "Heat only", "Nothing"],
        "correctAnswer": 1,
        "explanation": "Chlorophyll absorbs mostly red and blue wavelengths.",
    },
    {
        "question": "What does the Calvin cycle build?",
        "options": ["Glucose", "Bones", "Pumpkins", "Ghosts"],
        "correctAnswer": 0,
        "explanation": "The Calvin cycle builds glucose.",
    },
]


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def mock_client(handler):
    from spooky.llm.client import ChatCompletionClient

    return ChatCompletionClient(
        api_key="sk-test",
        model="test-model",
        base_url="https://llm.example/v1/",
        transport=httpx.MockTransport(handler),
    )


class TestChatCompletionClient:
    """Tests for the httpx chat client."""

    @pytest.mark.asyncio
    async def test_sends_messages_and_returns_content(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("  A spooky answer  "))

        text = await mock_client(handler).complete("Hello?", system="Be spooky", temperature=0.2, max_tokens=10)

        assert text == "A spooky answer"
        assert seen["url"] == "https://llm.example/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["model"] == "test-model"
        assert seen["body"]["messages"][0] == {"role": "system", "content": "Be spooky"}
        assert seen["body"]["messages"][1] == {"role": "user", "content": "Hello?"}
        assert seen["body"]["max_tokens"] == 10

    @pytest.mark.asyncio
    async def test_http_error_becomes_upstream_error(self):
        from core.exceptions import UpstreamServiceError

        client = mock_client(lambda request: httpx.Response(500, json={"error": "boom"}))

        with pytest.raises(UpstreamServiceError):
            await client.complete("Hello?")

    @pytest.mark.asyncio
    async def test_empty_completion_is_error(self):
        from core.exceptions import UpstreamServiceError

        client = mock_client(lambda request: httpx.Response(200, json=completion("   ")))

        with pytest.raises(UpstreamServiceError):
            await client.complete("Hello?")

    @pytest.mark.asyncio
    async def test_missing_choices_is_error(self):
        from core.exceptions import UpstreamServiceError

        client = mock_client(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(UpstreamServiceError):
            await client.complete("Hello?")

    @pytest.mark.asyncio
    async def test_non_json_body_is_error(self):
        from core.exceptions import UpstreamServiceError

        client = mock_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(UpstreamServiceError):
            await client.complete("Hello?")


class TestParseQuizResponse:
    """Tests for validating model output."""

    def test_accepts_fenced_json(self):
        from spooky.llm.generators import parse_quiz_response

        text = "```json\n" + json.dumps(VALID_QUIZ) + "\n```"

        assert parse_quiz_response(text) == VALID_QUIZ

    @pytest.mark.parametrize(
        "payload",
        [
            "not json at all",
            "[]",
            '{"question": "x"}',
            json.dumps([{**VALID_QUIZ[0], "options": ["a", "b", "c"]}]),
            json.dumps([{**VALID_QUIZ[0], "options": ["a", "a", "b", "c"]}]),
            json.dumps([{**VALID_QUIZ[0], "correctAnswer": 4}]),
            json.dumps([{**VALID_QUIZ[0], "correctAnswer": True}]),
            json.dumps([{**VALID_QUIZ[0], "correctAnswer": "1"}]),
            json.dumps([{**VALID_QUIZ[0], "explanation": ""}]),
            json.dumps([VALID_QUIZ[0], "oops"]),
        ],
    )
    def test_rejects_invalid(self, payload):
        from core.exceptions import UpstreamServiceError
        from spooky.llm.generators import parse_quiz_response

        with pytest.raises(UpstreamServiceError):
            parse_quiz_response(payload)


class TestRemoteQuizGenerator:
    """Tests for AI quiz generation."""

    @pytest.mark.asyncio
    async def test_builds_quiz_from_completion(self):
        from spooky.llm.generators import RemoteQuizGenerator
        from spooky.models.enums import QuizDifficulty

        client = AsyncMock()
        client.complete.return_value = json.dumps(VALID_QUIZ)

        quiz = await RemoteQuizGenerator(client).generate("content", "story-1", QuizDifficulty.EASY, 2)

        assert [q.id for q in quiz.questions] == ["q1", "q2"]
        assert quiz.questions[0].correct_answer_index == 1
        assert quiz.time_limit_seconds == 120
        assert quiz.source_id == "story-1"
        prompt = client.complete.call_args.args[0]
        assert "2" in prompt and "content" in prompt

    @pytest.mark.asyncio
    async def test_truncates_to_target(self):
        from spooky.llm.generators import RemoteQuizGenerator
        from spooky.models.enums import QuizDifficulty

        client = AsyncMock()
        client.complete.return_value = json.dumps(VALID_QUIZ)

        quiz = await RemoteQuizGenerator(client).generate("content", "story-1", QuizDifficulty.EASY, 1)

        assert len(quiz.questions) == 1


class TestFallbacks:
    """Tests for template substitution."""

    @pytest.mark.asyncio
    async def test_quiz_fallback_on_upstream_error(self, study_text):
        from core.exceptions import UpstreamServiceError
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.llm.generators import FallbackQuizGenerator
        from spooky.models.enums import QuizDifficulty

        primary = AsyncMock()
        primary.generate.side_effect = UpstreamServiceError("down")
        generator = FallbackQuizGenerator(primary, TemplateQuizBuilder(rng=random.Random(1)))

        quiz = await generator.generate(study_text, "story-1", QuizDifficulty.MEDIUM)

        assert len(quiz.questions) == 5
        primary.generate.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_quiz_fallback_end_to_end(self, study_text):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.llm.generators import FallbackQuizGenerator, RemoteQuizGenerator
        from spooky.models.enums import QuizDifficulty

        client = mock_client(lambda request: httpx.Response(200, json=completion("Sorry, no JSON today")))
        generator = FallbackQuizGenerator(RemoteQuizGenerator(client), TemplateQuizBuilder(rng=random.Random(1)))

        quiz = await generator.generate(study_text, "story-1", QuizDifficulty.EASY)

        assert len(quiz.questions) == 3

    @pytest.mark.asyncio
    async def test_generation_failed_is_not_swallowed(self):
        from core.exceptions import GenerationFailed
        from spooky.llm.generators import FallbackQuizGenerator
        from spooky.models.enums import QuizDifficulty

        primary = AsyncMock()
        primary.generate.side_effect = GenerationFailed("nothing to ask")
        fallback = AsyncMock()

        with pytest.raises(GenerationFailed):
            await FallbackQuizGenerator(primary, fallback).generate("x", "story-1", QuizDifficulty.EASY)
        fallback.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remote_story(self, study_text):
        from spooky.llm.generators import RemoteStoryGenerator

        client = AsyncMock()
        client.complete.side_effect = ["Once upon a haunted lecture...", '"The Ghost of Glucose"']

        story = await RemoteStoryGenerator(client, rng=random.Random(0)).generate(study_text, "bio.txt")

        assert story.content == "Once upon a haunted lecture..."
        assert story.title == "The Ghost of Glucose"
        assert story.original_topic == "bio.txt"
        assert len(story.characters) == 2
        assert client.complete.await_count == 2

    @pytest.mark.asyncio
    async def test_story_fallback(self, study_text):
        from spooky.engine.story_generator import TemplateStoryGenerator
        from spooky.llm.generators import FallbackStoryGenerator, RemoteStoryGenerator

        client = mock_client(lambda request: httpx.Response(503))
        generator = FallbackStoryGenerator(
            RemoteStoryGenerator(client, rng=random.Random(0)),
            TemplateStoryGenerator(rng=random.Random(0)),
        )

        story = await generator.generate(study_text, "bio.txt")

        assert "Ancient Knowledge" in story.content


class TestGeneratorFactory:
    """Tests for generator selection."""

    def test_templates_without_key(self, config):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.engine.story_generator import TemplateStoryGenerator
        from spooky.llm.factory import GeneratorFactory

        factory = GeneratorFactory(config)

        assert isinstance(factory.create_quiz_generator(), TemplateQuizBuilder)
        assert isinstance(factory.create_story_generator(), TemplateStoryGenerator)

    def test_fallbacks_with_key(self, config):
        from dataclasses import replace

        from spooky.llm.factory import GeneratorFactory
        from spooky.llm.generators import FallbackQuizGenerator, FallbackStoryGenerator

        factory = GeneratorFactory(replace(config, openai_api_key="sk-live"))

        assert isinstance(factory.create_quiz_generator(), FallbackQuizGenerator)
        assert isinstance(factory.create_story_generator(), FallbackStoryGenerator)
        assert factory.create_client().api_key == "sk-live"
