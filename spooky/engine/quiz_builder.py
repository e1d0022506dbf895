"""Quiz Builder - Template quiz generation from study text."""

import random
import string
import uuid
from datetime import datetime
from typing import Callable, Optional

from core.exceptions import GenerationFailed
from core.logger import get_logger

from ..models.enums import QUESTION_CHARACTERS, QuizDifficulty
from ..models.schemas import POINTS_PER_QUESTION, Quiz, QuizQuestion, utc_now
from ..prompts.templates import BLANK, COMPREHENSION_QUESTIONS
from .distractors import DistractorGenerator
from .sentence_extractor import extract_sentences, extract_study_section

logger = get_logger("quiz_builder")

# Default number of questions per difficulty
QUESTION_COUNTS = {
    QuizDifficulty.EASY: 3,
    QuizDifficulty.MEDIUM: 5,
    QuizDifficulty.HARD: 7,
}

# Time allowance per question when building a quiz (seconds).
# Scoring uses its own, stricter table in scoring_engine.
SECONDS_PER_QUESTION = {
    QuizDifficulty.EASY: 60,
    QuizDifficulty.MEDIUM: 90,
    QuizDifficulty.HARD: 120,
}

KEY_TERM_MIN_LENGTH = 5
KEY_TERM_CANDIDATES = 3

_STRIP_CHARS = string.punctuation + "“”‘’"


def default_question_count(difficulty: QuizDifficulty) -> int:
    return QUESTION_COUNTS[difficulty]


def time_limit_seconds(question_count: int, difficulty: QuizDifficulty) -> int:
    return question_count * SECONDS_PER_QUESTION[difficulty]


def new_quiz_id() -> str:
    return f"quiz-{uuid.uuid4().hex[:12]}"


def build_quiz(
    questions: list[QuizQuestion],
    source_id: str,
    difficulty: QuizDifficulty,
    quiz_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Quiz:
    """Wrap questions into a ``Quiz`` with derived points and time limit."""
    if not questions:
        raise GenerationFailed("No quiz questions could be generated from this material")
    return Quiz(
        id=quiz_id or new_quiz_id(),
        source_id=source_id,
        questions=questions,
        total_points=POINTS_PER_QUESTION * len(questions),
        difficulty=difficulty,
        time_limit_seconds=time_limit_seconds(len(questions), difficulty),
        created_at=created_at or utc_now(),
    )


class TemplateQuizBuilder:
    """Builds fill-in-the-blank quizzes without any external service.

    Pipeline:
        1. Isolate the study section of the story
        2. Pick candidate sentences at random, without replacement
        3. Blank out a key term and add three distractors
        4. Top up with fixed comprehension questions if the text is short

    Example:
        >>> builder = TemplateQuizBuilder(rng=random.Random(42))
        >>> quiz = builder.build(story.content, story.id, QuizDifficulty.EASY)
        >>> len(quiz.questions)
        3
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        distractors: Optional[DistractorGenerator] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rng = rng or random.Random()
        self.distractors = distractors or DistractorGenerator(self.rng)
        self.clock = clock

    @staticmethod
    def words(sentence: str) -> list[str]:
        """Sentence words with surrounding punctuation stripped."""
        stripped = (word.strip(_STRIP_CHARS) for word in sentence.split())
        return [word for word in stripped if word]

    def pick_key_term(self, sentence: str) -> Optional[str]:
        """Random word longer than four characters among the first three such words."""
        qualifying = [w for w in self.words(sentence) if len(w) >= KEY_TERM_MIN_LENGTH]
        if not qualifying:
            return None
        return self.rng.choice(qualifying[:KEY_TERM_CANDIDATES])

    def blank_question(self, sentence: str, question_id: str, position: int) -> Optional[QuizQuestion]:
        """Fill-in-the-blank question for one sentence, or None if it has no key term."""
        key_term = self.pick_key_term(sentence)
        if key_term is None:
            return None

        blanked = sentence.replace(key_term, BLANK, 1)
        options, correct_index = self.distractors.build_options(key_term, self.words(sentence))
        return QuizQuestion(
            id=question_id,
            prompt=f'Complete the statement: "{blanked}"',
            options=options,
            correct_answer_index=correct_index,
            explanation=(
                f'The correct answer is "{key_term}". '
                f'This comes directly from your study material: "{sentence}"'
            ),
            character=QUESTION_CHARACTERS[position % len(QUESTION_CHARACTERS)],
        )

    def build_questions(self, content: str, target: int) -> list[QuizQuestion]:
        sentences = extract_sentences(extract_study_section(content))
        picked = self.rng.sample(sentences, min(target, len(sentences)))

        questions: list[QuizQuestion] = []
        for sentence in picked:
            question = self.blank_question(sentence, f"q{len(questions) + 1}", len(questions))
            if question is not None:
                questions.append(question)

        for prompt, options, correct_index, explanation in COMPREHENSION_QUESTIONS:
            if len(questions) >= target:
                break
            position = len(questions)
            questions.append(
                QuizQuestion(
                    id=f"q{position + 1}",
                    prompt=prompt,
                    options=list(options),
                    correct_answer_index=correct_index,
                    explanation=explanation,
                    character=QUESTION_CHARACTERS[position % len(QUESTION_CHARACTERS)],
                )
            )

        return questions

    def build(
        self,
        content: str,
        source_id: str,
        difficulty: QuizDifficulty,
        question_count: Optional[int] = None,
    ) -> Quiz:
        """Build a quiz from story or study text.

        Args:
            content: Story content (or raw study text)
            source_id: ID of the originating story
            difficulty: Quiz difficulty
            question_count: Override for the difficulty default

        Returns:
            Quiz with at least one question

        Raises:
            GenerationFailed: If no question can be produced
        """
        target = question_count or default_question_count(difficulty)
        questions = self.build_questions(content, target)
        quiz = build_quiz(questions, source_id, difficulty, created_at=self.clock())

        logger.info(
            "Template quiz built",
            quiz_id=quiz.id,
            source_id=source_id,
            difficulty=difficulty.value,
            requested=target,
            questions=len(questions),
        )
        return quiz

    async def generate(
        self,
        content: str,
        source_id: str,
        difficulty: QuizDifficulty,
        question_count: Optional[int] = None,
    ) -> Quiz:
        return self.build(content, source_id, difficulty, question_count)
