"""LLM Module - Chat completion client and generator selection."""

from .client import ChatCompletionClient
from .factory import GeneratorFactory
from .generators import (
    FallbackQuizGenerator,
    FallbackStoryGenerator,
    QuizGenerator,
    RemoteQuizGenerator,
    RemoteStoryGenerator,
    StoryGenerator,
    parse_quiz_response,
)

__all__ = [
    "ChatCompletionClient",
    "GeneratorFactory",
    "QuizGenerator",
    "StoryGenerator",
    "RemoteQuizGenerator",
    "RemoteStoryGenerator",
    "FallbackQuizGenerator",
    "FallbackStoryGenerator",
    "parse_quiz_response",
]
