"""Sentence Extractor - Splits study text into quiz and story material."""

import re

from ..prompts.templates import LESSON_SECTION_HEADER, STUDY_SECTION_HEADER

SENTENCE_SPLIT = re.compile(r"[.!?]+")

# Exclusive bounds on candidate sentence length
MIN_SENTENCE_LENGTH = 30
MAX_SENTENCE_LENGTH = 200

KEY_POINT_MIN_LENGTH = 20
MAX_KEY_POINTS = 5


def split_sentences(text: str) -> list[str]:
    """Split on runs of ``.``, ``!`` and ``?`` and drop empty pieces."""
    return [piece.strip() for piece in SENTENCE_SPLIT.split(text) if piece.strip()]


def extract_sentences(text: str) -> list[str]:
    """Return candidate quiz sentences in source order.

    A candidate is a trimmed sentence strictly longer than 30 and strictly
    shorter than 200 characters.

    Args:
        text: Raw study text

    Returns:
        Candidate sentences (may be empty)
    """
    return [
        sentence
        for sentence in split_sentences(text)
        if MIN_SENTENCE_LENGTH < len(sentence) < MAX_SENTENCE_LENGTH
    ]


def extract_study_section(story_content: str) -> str:
    """Pull the study-material section out of a generated story.

    The template story places the original material right after the
    "Ancient Knowledge" header and before the closing lesson section.
    Stories without that header (remote stories, plain text) are returned
    unchanged.
    """
    start = story_content.find(STUDY_SECTION_HEADER)
    if start == -1:
        return story_content

    body = story_content[start + len(STUDY_SECTION_HEADER):]
    end = body.find(f"\n\n{LESSON_SECTION_HEADER}")
    if end != -1:
        body = body[:end]

    body = body.strip()
    return body or story_content


def extract_key_learning_points(text: str) -> list[str]:
    """First five sentences longer than 20 characters."""
    points = [s for s in split_sentences(text) if len(s) > KEY_POINT_MIN_LENGTH]
    return points[:MAX_KEY_POINTS]
