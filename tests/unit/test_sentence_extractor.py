# =============================================================================
# TESTS - Sentence Extractor
# =============================================================================
# Sentence splitting, candidate filtering and study-section extraction
# =============================================================================


class TestSplitSentences:
    """Tests for sentence splitting."""

    def test_splits_on_terminal_punctuation(self):
        from spooky.engine.sentence_extractor import split_sentences

        text = "First one. Second one! Third one? Fourth"

        assert split_sentences(text) == ["First one", "Second one", "Third one", "Fourth"]

    def test_runs_of_punctuation_and_blanks_are_dropped(self):
        from spooky.engine.sentence_extractor import split_sentences

        assert split_sentences("Wait... what?!   ") == ["Wait", "what"]
        assert split_sentences("") == []


class TestExtractSentences:
    """Tests for candidate sentence filtering."""

    def test_keeps_sentences_between_bounds(self):
        from spooky.engine.sentence_extractor import extract_sentences

        keep = "Photosynthesis converts light energy into sugar"
        text = f"Too short here. {keep}. " + "x" * 250 + "."

        assert extract_sentences(text) == [keep]

    def test_bounds_are_exclusive(self):
        from spooky.engine.sentence_extractor import extract_sentences

        exactly_30 = "a" * 30
        exactly_31 = "b" * 31
        exactly_200 = "c" * 200
        text = f"{exactly_30}. {exactly_31}. {exactly_200}."

        assert extract_sentences(text) == [exactly_31]

    def test_preserves_source_order(self, study_text):
        from spooky.engine.sentence_extractor import extract_sentences

        sentences = extract_sentences(study_text)

        assert sentences[0].startswith("Photosynthesis")
        assert sentences[-1].startswith("Oxygen")
        assert len(sentences) == 6

    def test_no_candidates_returns_empty(self):
        from spooky.engine.sentence_extractor import extract_sentences

        assert extract_sentences("Short. Tiny. Small!") == []


class TestExtractStudySection:
    """Tests for isolating the study material inside a story."""

    def test_returns_text_between_headers(self):
        from spooky.engine.sentence_extractor import extract_study_section
        from spooky.prompts import LESSON_SECTION_HEADER, STUDY_SECTION_HEADER

        story = (
            "Once upon a midnight dreary...\n\n"
            f"{STUDY_SECTION_HEADER}\n\n"
            "The real study material lives here.\n\n"
            f"{LESSON_SECTION_HEADER}\n\nThe end."
        )

        assert extract_study_section(story) == "The real study material lives here."

    def test_without_header_returns_full_text(self):
        from spooky.engine.sentence_extractor import extract_study_section

        text = "Plain study notes without any story around them."

        assert extract_study_section(text) == text

    def test_missing_lesson_header_keeps_rest(self):
        from spooky.engine.sentence_extractor import extract_study_section
        from spooky.prompts import STUDY_SECTION_HEADER

        story = f"Intro\n\n{STUDY_SECTION_HEADER}\n\nEverything after the header."

        assert extract_study_section(story) == "Everything after the header."


class TestKeyLearningPoints:
    """Tests for key learning points."""

    def test_first_five_long_sentences(self, study_text):
        from spooky.engine.sentence_extractor import extract_key_learning_points

        points = extract_key_learning_points("Short. " + study_text)

        assert len(points) == 5
        assert "Short" not in points
        assert points[0].startswith("Photosynthesis")
