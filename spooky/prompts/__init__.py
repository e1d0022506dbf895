"""Prompts - Templates and fixed text for stories and quizzes."""

from .templates import (
    BLANK,
    COMPREHENSION_QUESTIONS,
    DEFAULT_STORY_TITLE,
    DIFFICULTY_INSTRUCTIONS,
    DISTRACTOR_STOPWORDS,
    ERROR_CHARACTERS,
    GENERIC_DISTRACTORS,
    LESSON_SECTION_HEADER,
    LEVEL_TITLES,
    QUIZ_GENERATION_PROMPT,
    QUIZ_SYSTEM_PROMPT,
    STORY_CHARACTERS,
    STORY_GENERATION_PROMPT,
    STORY_SYSTEM_PROMPT,
    STORY_TITLE_PROMPT,
    STUDY_SECTION_HEADER,
    CharacterProfile,
)

__all__ = [
    "BLANK",
    "CharacterProfile",
    "COMPREHENSION_QUESTIONS",
    "DEFAULT_STORY_TITLE",
    "DIFFICULTY_INSTRUCTIONS",
    "DISTRACTOR_STOPWORDS",
    "ERROR_CHARACTERS",
    "GENERIC_DISTRACTORS",
    "LESSON_SECTION_HEADER",
    "LEVEL_TITLES",
    "QUIZ_GENERATION_PROMPT",
    "QUIZ_SYSTEM_PROMPT",
    "STORY_CHARACTERS",
    "STORY_GENERATION_PROMPT",
    "STORY_SYSTEM_PROMPT",
    "STORY_TITLE_PROMPT",
    "STUDY_SECTION_HEADER",
]
