"""Spooky Engines - Business logic."""

from .distractors import DistractorGenerator
from .progress_engine import BADGE_CATALOG, BadgeRule, ProgressEngine, ProgressUpdate
from .quiz_builder import TemplateQuizBuilder, build_quiz, default_question_count
from .scoring_engine import QuizScoringEngine, ScoredSubmission, round_half_up
from .sentence_extractor import (
    extract_key_learning_points,
    extract_sentences,
    extract_study_section,
)
from .story_generator import TemplateStoryGenerator

__all__ = [
    "DistractorGenerator",
    "TemplateQuizBuilder",
    "build_quiz",
    "default_question_count",
    "QuizScoringEngine",
    "ScoredSubmission",
    "round_half_up",
    "ProgressEngine",
    "ProgressUpdate",
    "BadgeRule",
    "BADGE_CATALOG",
    "TemplateStoryGenerator",
    "extract_sentences",
    "extract_study_section",
    "extract_key_learning_points",
]
