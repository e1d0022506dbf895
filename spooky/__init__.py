"""Spooky Study Buddy - Halloween-themed study stories, quizzes and progress.

Architecture:
- models/: Enums, domain schemas, API schemas
- engine/: Sentence extraction, distractors, quiz builder, scoring, progress, stories
- llm/: Chat completion client, remote/fallback generators, factory
- storage/: JSON repositories, StoryStore, QuizStore, ProgressStore
- prompts/: Prompt templates and fixed text
- cleanup.py: Expired-story sweeper
"""

from .cleanup import CleanupService
from .engine import (
    DistractorGenerator,
    ProgressEngine,
    QuizScoringEngine,
    TemplateQuizBuilder,
    TemplateStoryGenerator,
)
from .llm import GeneratorFactory
from .models import Badge, Quiz, QuizDifficulty, QuizQuestion, QuizResult, SpookyStory, UserProgress
from .storage import ProgressStore, QuizStore, StoryStore

__all__ = [
    # Models
    "QuizDifficulty",
    "Quiz",
    "QuizQuestion",
    "QuizResult",
    "Badge",
    "UserProgress",
    "SpookyStory",
    # Engines
    "DistractorGenerator",
    "TemplateQuizBuilder",
    "QuizScoringEngine",
    "ProgressEngine",
    "TemplateStoryGenerator",
    # LLM
    "GeneratorFactory",
    # Storage
    "StoryStore",
    "QuizStore",
    "ProgressStore",
    "CleanupService",
]
