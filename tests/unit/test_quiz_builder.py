# =============================================================================
# TESTS - Template Quiz Builder
# =============================================================================
# Question construction, counts, time limits and the comprehension top-up
# =============================================================================

import random

import pytest


class TestQuizTables:
    """Tests for difficulty tables."""

    def test_default_question_counts(self):
        from spooky.engine.quiz_builder import default_question_count
        from spooky.models.enums import QuizDifficulty

        assert default_question_count(QuizDifficulty.EASY) == 3
        assert default_question_count(QuizDifficulty.MEDIUM) == 5
        assert default_question_count(QuizDifficulty.HARD) == 7

    def test_time_limits(self):
        from spooky.engine.quiz_builder import time_limit_seconds
        from spooky.models.enums import QuizDifficulty

        assert time_limit_seconds(3, QuizDifficulty.EASY) == 180
        assert time_limit_seconds(5, QuizDifficulty.MEDIUM) == 450
        assert time_limit_seconds(7, QuizDifficulty.HARD) == 840

    def test_build_quiz_rejects_empty(self):
        from core.exceptions import GenerationFailed
        from spooky.engine.quiz_builder import build_quiz
        from spooky.models.enums import QuizDifficulty

        with pytest.raises(GenerationFailed):
            build_quiz([], "story-x", QuizDifficulty.EASY)

    def test_quiz_id_format(self):
        from spooky.engine.quiz_builder import new_quiz_id

        quiz_id = new_quiz_id()

        assert quiz_id.startswith("quiz-")
        assert len(quiz_id) == len("quiz-") + 12


class TestKeyTerms:
    """Tests for key term selection."""

    def test_words_strip_punctuation(self):
        from spooky.engine.quiz_builder import TemplateQuizBuilder

        assert TemplateQuizBuilder.words('Cells, "mitochondria" (powerhouse)!') == [
            "Cells",
            "mitochondria",
            "powerhouse",
        ]

    def test_key_term_from_first_three_long_words(self):
        from spooky.engine.quiz_builder import TemplateQuizBuilder

        builder = TemplateQuizBuilder(rng=random.Random(0))
        sentence = "The quick brown foxes jumped over lazy sleeping dogs"

        for seed in range(20):
            builder.rng.seed(seed)
            assert builder.pick_key_term(sentence) in {"quick", "brown", "foxes"}

    def test_no_long_words_gives_none(self):
        from spooky.engine.quiz_builder import TemplateQuizBuilder

        builder = TemplateQuizBuilder(rng=random.Random(0))

        assert builder.pick_key_term("a bb ccc dddd") is None
        assert builder.blank_question("a bb ccc dddd", "q1", 0) is None


class TestBlankQuestion:
    """Tests for a single fill-in-the-blank question."""

    def test_blank_replaces_first_occurrence(self):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.prompts import BLANK

        builder = TemplateQuizBuilder(rng=random.Random(3))
        sentence = "Chlorophyll absorbs mostly red and blue wavelengths of sunlight"

        question = builder.blank_question(sentence, "q1", 0)
        key_term = question.options[question.correct_answer_index]

        assert BLANK in question.prompt
        assert key_term in {"Chlorophyll", "absorbs", "mostly"}
        assert key_term in question.explanation
        assert sentence in question.explanation

    def test_characters_rotate(self):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.models.enums import QUESTION_CHARACTERS

        builder = TemplateQuizBuilder(rng=random.Random(3))
        sentence = "Stomata on leaves regulate the exchange of gases with the atmosphere"

        characters = [builder.blank_question(sentence, f"q{i}", i).character for i in range(5)]

        assert characters[:4] == list(QUESTION_CHARACTERS)
        assert characters[4] == QUESTION_CHARACTERS[0]


class TestBuild:
    """Tests for whole quizzes."""

    @pytest.mark.parametrize(
        "difficulty,expected",
        [("easy", 3), ("medium", 5), ("hard", 7)],
    )
    def test_question_count_per_difficulty(self, study_text, difficulty, expected):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.models.enums import QuizDifficulty

        builder = TemplateQuizBuilder(rng=random.Random(42))

        quiz = builder.build(study_text, "story-abc", QuizDifficulty(difficulty))

        assert len(quiz.questions) == expected
        assert quiz.total_points == 10 * expected
        assert quiz.source_id == "story-abc"

    def test_every_question_is_valid(self, study_text):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.models.enums import QuizDifficulty

        builder = TemplateQuizBuilder(rng=random.Random(42))

        quiz = builder.build(study_text, "story-abc", QuizDifficulty.HARD)

        assert [q.id for q in quiz.questions] == [f"q{i}" for i in range(1, 8)]
        for question in quiz.questions:
            assert len(question.options) == 4
            assert len(set(question.options)) == 4
            assert 0 <= question.correct_answer_index <= 3

    def test_short_text_topped_up_with_comprehension(self):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.models.enums import QuizDifficulty
        from spooky.prompts import COMPREHENSION_QUESTIONS

        builder = TemplateQuizBuilder(rng=random.Random(1))
        text = "Photosynthesis converts light energy into chemical energy."

        quiz = builder.build(text, "story-short", QuizDifficulty.EASY)

        assert len(quiz.questions) == 3
        assert quiz.questions[1].prompt == COMPREHENSION_QUESTIONS[0][0]
        assert quiz.questions[1].correct_answer_index == COMPREHENSION_QUESTIONS[0][2]

    def test_question_count_override(self, study_text):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.models.enums import QuizDifficulty

        builder = TemplateQuizBuilder(rng=random.Random(42))

        quiz = builder.build(study_text, "story-abc", QuizDifficulty.EASY, question_count=2)

        assert len(quiz.questions) == 2
        assert quiz.time_limit_seconds == 120

    def test_uses_story_study_section(self, study_text):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.engine.story_generator import TemplateStoryGenerator
        from spooky.models.enums import QuizDifficulty

        story = TemplateStoryGenerator(rng=random.Random(2)).build(study_text, "biology.txt")
        builder = TemplateQuizBuilder(rng=random.Random(2))

        quiz = builder.build(story.content, story.id, QuizDifficulty.MEDIUM)

        for question in quiz.questions:
            assert "Ancient Knowledge" not in question.prompt
            assert "Lesson Learned" not in question.prompt

    @pytest.mark.asyncio
    async def test_generate_is_async_build(self, study_text):
        from spooky.engine.quiz_builder import TemplateQuizBuilder
        from spooky.models.enums import QuizDifficulty

        builder = TemplateQuizBuilder(rng=random.Random(9))

        quiz = await builder.generate(study_text, "story-abc", QuizDifficulty.EASY)

        assert len(quiz.questions) == 3
