"""Story Generator - Template Halloween narratives around study text."""

import math
import random
import re
import uuid
from datetime import datetime
from typing import Callable, Optional

from core.logger import get_logger

from ..models.enums import StoryDifficulty
from ..models.schemas import SpookyStory, utc_now
from ..prompts.templates import (
    DEFAULT_STORY_TITLE,
    LESSON_SECTION_HEADER,
    STORY_CHARACTERS,
    STUDY_SECTION_HEADER,
    CharacterProfile,
)
from .sentence_extractor import extract_key_learning_points

logger = get_logger("story_generator")

WORDS_PER_MINUTE = 200
MAX_TITLE_LENGTH = 60
CHARACTERS_PER_STORY = 2
DEFAULT_TOPIC = "Direct text input"

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n+")


def new_story_id() -> str:
    return f"story-{uuid.uuid4().hex[:12]}"


def estimate_read_time(text: str) -> int:
    """Minutes at 200 words per minute, rounded up."""
    return math.ceil(len(text.split()) / WORDS_PER_MINUTE)


def story_title(content: str, narrator: CharacterProfile) -> str:
    """Title from the first three words, or the default when too long."""
    topic_hint = " ".join(content[:50].strip().split(" ")[:3])
    title = f"🎃 {narrator.name}'s Guide to {topic_hint}... 👻"
    return DEFAULT_STORY_TITLE if len(title) > MAX_TITLE_LENGTH else title


class TemplateStoryGenerator:
    """Wraps study text in a fixed Halloween narrative.

    The full study text is kept verbatim between the "Ancient Knowledge"
    header and the closing lesson, so quiz generation can recover it with
    ``extract_study_section``.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rng = rng or random.Random()
        self.clock = clock

    def pick_characters(self) -> list[CharacterProfile]:
        return self.rng.sample(list(STORY_CHARACTERS), CHARACTERS_PER_STORY)

    def compose(self, content: str, topic: str, characters: list[CharacterProfile]) -> str:
        narrator, helper = characters[0], characters[1]
        paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(content) if p.strip()]

        parts = [
            "🎃 **The Haunted Library of Knowledge** 🎃",
            (
                f"On a dark and stormy night, {narrator.name} the {narrator.type.value} discovered "
                "an ancient tome in the depths of the haunted library. The dusty pages glowed with "
                f"an eerie light as they revealed secrets about {topic}."
            ),
            f'"{narrator.catchphrase}" {narrator.name} exclaimed, their spectral form shimmering with excitement.',
            (
                f"{helper.name} the {helper.type.value} appeared in a swirl of mist, "
                "ready to help decode the mysterious text:"
            ),
            STUDY_SECTION_HEADER,
            *paragraphs,
            LESSON_SECTION_HEADER,
            f'"{helper.catchphrase}" {helper.name} said with a knowing smile. "Now you understand the mysteries within!"',
            (
                "The spooky characters had successfully transformed the lesson into an unforgettable "
                "adventure. The knowledge was no longer just words on a page, it was a story that "
                "would haunt your memory forever! 👻📖"
            ),
        ]
        return "\n\n".join(parts)

    def build(self, content: str, file_name: Optional[str] = None) -> SpookyStory:
        """Build a template story.

        Args:
            content: Study text (already validated)
            file_name: Uploaded file name, used as the topic

        Returns:
            New SpookyStory
        """
        characters = self.pick_characters()
        topic = file_name or DEFAULT_TOPIC
        story_content = self.compose(content, file_name or "an important subject", characters)

        story = SpookyStory(
            id=new_story_id(),
            title=story_title(content, characters[0]),
            content=story_content,
            original_content=content,
            original_topic=topic,
            characters=[c.name for c in characters],
            key_learning_points=extract_key_learning_points(content),
            difficulty=StoryDifficulty.INTERMEDIATE,
            estimated_read_time=estimate_read_time(story_content),
            created_at=self.clock(),
        )
        logger.info("Template story built", story_id=story.id, topic=topic, words=len(content.split()))
        return story

    async def generate(self, content: str, file_name: Optional[str] = None) -> SpookyStory:
        return self.build(content, file_name)
