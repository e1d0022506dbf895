# =============================================================================
# TESTS - Template Story Generator
# =============================================================================
# Narrative layout, titles, read time and story metadata
# =============================================================================

import random

import pytest


class TestHelpers:
    """Tests for module helpers."""

    def test_story_id_format(self):
        from spooky.engine.story_generator import new_story_id

        story_id = new_story_id()

        assert story_id.startswith("story-")
        assert len(story_id) == len("story-") + 12

    def test_read_time_rounds_up(self):
        from spooky.engine.story_generator import estimate_read_time

        assert estimate_read_time("word " * 200) == 1
        assert estimate_read_time("word " * 201) == 2
        assert estimate_read_time("") == 0

    def test_short_title_uses_first_words(self):
        from spooky.engine.story_generator import story_title
        from spooky.prompts import STORY_CHARACTERS

        title = story_title("Cells divide often and quickly", STORY_CHARACTERS[3])

        assert title == "🎃 Bonnie Bones's Guide to Cells divide often... 👻"

    def test_long_title_falls_back(self):
        from spooky.engine.story_generator import story_title
        from spooky.prompts import DEFAULT_STORY_TITLE, STORY_CHARACTERS

        title = story_title("Photosynthesis converts light energy", STORY_CHARACTERS[0])

        assert title == DEFAULT_STORY_TITLE


class TestBuild:
    """Tests for story building."""

    def test_story_fields(self, study_text, fixed_now):
        from spooky.engine.story_generator import TemplateStoryGenerator
        from spooky.models.enums import StoryDifficulty

        generator = TemplateStoryGenerator(rng=random.Random(4), clock=lambda: fixed_now)

        story = generator.build(study_text, "biology.txt")

        assert story.id.startswith("story-")
        assert story.original_content == study_text
        assert story.original_topic == "biology.txt"
        assert len(story.characters) == 2
        assert len(set(story.characters)) == 2
        assert len(story.key_learning_points) == 5
        assert story.difficulty == StoryDifficulty.INTERMEDIATE
        assert story.created_at == fixed_now
        assert story.shareable_link is None

    def test_default_topic(self, study_text):
        from spooky.engine.story_generator import DEFAULT_TOPIC, TemplateStoryGenerator

        story = TemplateStoryGenerator(rng=random.Random(4)).build(study_text)

        assert story.original_topic == DEFAULT_TOPIC
        assert "an important subject" in story.content

    def test_study_text_kept_between_headers(self, study_text):
        from spooky.engine.sentence_extractor import extract_study_section
        from spooky.engine.story_generator import TemplateStoryGenerator
        from spooky.prompts import LESSON_SECTION_HEADER, STUDY_SECTION_HEADER

        story = TemplateStoryGenerator(rng=random.Random(4)).build(study_text, "notes.md")

        assert story.content.index(STUDY_SECTION_HEADER) < story.content.index(LESSON_SECTION_HEADER)
        assert extract_study_section(story.content) == study_text

    def test_paragraphs_preserved(self):
        from spooky.engine.sentence_extractor import extract_study_section
        from spooky.engine.story_generator import TemplateStoryGenerator

        text = "First paragraph about cells.\n\n\n  Second paragraph about atoms.  "

        story = TemplateStoryGenerator(rng=random.Random(4)).build(text)

        assert extract_study_section(story.content) == (
            "First paragraph about cells.\n\nSecond paragraph about atoms."
        )

    def test_characters_named_in_story(self, study_text):
        from spooky.engine.story_generator import TemplateStoryGenerator

        story = TemplateStoryGenerator(rng=random.Random(8)).build(study_text)

        for name in story.characters:
            assert name in story.content

    @pytest.mark.asyncio
    async def test_generate(self, study_text):
        from spooky.engine.story_generator import TemplateStoryGenerator

        story = await TemplateStoryGenerator(rng=random.Random(1)).generate(study_text, "x.txt")

        assert story.original_topic == "x.txt"
