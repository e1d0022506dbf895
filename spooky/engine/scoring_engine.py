"""Quiz Scoring Engine - Scores, feedback and per-submission badges."""

import math
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Mapping, Optional

from ..models.api import DetailedFeedback, QuestionFeedback
from ..models.enums import QuizDifficulty
from ..models.schemas import Quiz, QuizResult, utc_now

UNANSWERED = -1


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return math.floor(value + 0.5)


@dataclass
class ScoredSubmission:
    """Everything the submit endpoint returns for one attempt."""

    result: QuizResult
    detailed_feedback: DetailedFeedback
    question_feedback: list[QuestionFeedback]
    celebration_message: str
    retry_suggestions: list[str] = field(default_factory=list)


class QuizScoringEngine:
    """Scoring engine for quiz submissions.

    Score pipeline:
        1. base = round(100 * correct / total)
        2. difficulty multiplier (easy 1.0, medium 1.1, hard 1.2), rounded
        3. speed bonus x1.1 when score >= 70 and the average time per
           question is under 80% of the expected time
        4. clamp to [0, 100]

    Feedback bands:
        - >= 95: phenomenal
        - >= 85: excellent
        - >= 70: good
        - >= 50: learning
        - else: keep trying

    Example:
        >>> engine = QuizScoringEngine()
        >>> result = engine.calculate_score(quiz, {"q1": 2, "q2": 0}, time_spent=40)
        >>> result.score
        100
    """

    DIFFICULTY_MULTIPLIERS = {
        QuizDifficulty.EASY: 1.0,
        QuizDifficulty.MEDIUM: 1.1,
        QuizDifficulty.HARD: 1.2,
    }

    # Expected seconds per question for speed comparisons
    EXPECTED_SECONDS = {
        QuizDifficulty.EASY: 45,
        QuizDifficulty.MEDIUM: 60,
        QuizDifficulty.HARD: 90,
    }

    SPEED_BONUS = 1.1
    SPEED_BONUS_MIN_SCORE = 70
    SPEED_BONUS_RATIO = 0.8

    # (threshold, overall message, encouragement, strengths, improvements, next steps)
    FEEDBACK_BANDS = [
        (
            95,
            "🎉 Absolutely phenomenal! You scored {score}% ({correct}/{total} correct)! "
            "You've mastered this material with spook-tacular precision!",
            "You're a true Halloween scholar! Your knowledge shines brighter than a jack-o'-lantern! 🎃✨",
            ["Perfect or near-perfect accuracy", "Excellent understanding of key concepts"],
            [],
            [
                "Try a harder difficulty level to challenge yourself further",
                "Share your knowledge by helping other students",
            ],
        ),
        (
            85,
            "👻 Excellent work! You scored {score}% ({correct}/{total} correct)! "
            "The spirits are thoroughly impressed with your performance!",
            "You're well on your way to becoming a master of spooky studies! Keep up the fantastic work! 🧙‍♀️",
            ["Strong grasp of most concepts", "Consistent performance across questions"],
            ["Review the questions you missed for even better results"],
            ["Try the next difficulty level when you're ready"],
        ),
        (
            70,
            "🎃 Good job! You scored {score}% ({correct}/{total} correct)! "
            "You're getting the hang of this spooky learning adventure!",
            "You're making solid progress! Every ghost was once a beginner, and you're well on your way! 💀",
            ["Good understanding of basic concepts"],
            [
                "Focus on the areas where you missed questions",
                "Take your time to read questions carefully",
            ],
            [
                "Review the story content for better understanding",
                "Try the quiz again to improve your score",
            ],
        ),
        (
            50,
            "🧙‍♀️ You're learning! You scored {score}% ({correct}/{total} correct). "
            "Don't worry, even the wisest witches had to start somewhere!",
            "Keep practicing! Your spooky study journey is just beginning, and every attempt makes you stronger! 🌟",
            [],
            [
                "Spend more time reviewing the story content",
                "Focus on understanding key concepts rather than memorizing",
                "Take your time with each question",
            ],
            [
                "Re-read the story and try the quiz again",
                "Break down complex concepts into smaller parts",
            ],
        ),
        (
            0,
            "💀 Keep trying! You scored {score}% ({correct}/{total} correct). "
            "Remember, even skeletons need to study their bones! Don't give up!",
            "Every expert was once a beginner! This is just the start of your learning adventure! 🎭",
            [],
            [
                "Review the story content thoroughly before retaking",
                "Focus on understanding rather than speed",
                "Take notes while reading the story",
            ],
            [
                "Read the story again more carefully",
                "Try an easier difficulty level first",
                "Ask for help if you need it",
            ],
        ),
    ]

    # Badges awarded from a single submission (id -> display name)
    SUBMISSION_BADGES = {
        "perfect-score-phantom": "Perfect Score Phantom",
        "hard-mode-hero": "Hard Mode Hero",
        "spooky-scholar-supreme": "Spooky Scholar Supreme",
        "spooky-scholar": "Spooky Scholar",
        "ghostly-graduate": "Ghostly Graduate",
        "haunted-honor-roll": "Haunted Honor Roll",
        "lightning-learner": "Lightning Learner",
        "quick-thinker": "Quick Thinker",
        "brave-soul": "Brave Soul",
        "rising-star": "Rising Star",
        "precision-phantom": "Precision Phantom",
        "sharp-shooter": "Sharp Shooter",
        "quiz-conqueror": "Quiz Conqueror",
        "first-steps": "First Steps",
        "knowledge-seeker": "Knowledge Seeker",
    }

    # Participation badges not counted in the celebration message
    ROUTINE_BADGES = frozenset({"quiz-conqueror", "first-steps", "knowledge-seeker"})

    # (min score, messages); a perfect score has its own list
    CELEBRATIONS = [
        (
            100,
            [
                "🎉 PERFECT SCORE! You're absolutely spook-tacular!",
                "👻 FLAWLESS VICTORY! The spirits bow to your knowledge!",
                "🎃 PERFECT! You've achieved Halloween learning mastery!",
            ],
        ),
        (
            85,
            [
                "🌟 EXCELLENT! You're a true spooky scholar!",
                "🧙‍♀️ OUTSTANDING! Your knowledge is magical!",
                "👻 SUPERB! The ghosts are cheering for you!",
            ],
        ),
        (
            70,
            [
                "🎃 WELL DONE! You're making great progress!",
                "💀 GOOD JOB! You're getting the hang of this!",
                "🧙‍♀️ NICE WORK! Keep up the spooky studies!",
            ],
        ),
        (
            50,
            [
                "🌟 KEEP GOING! You're on the right track!",
                "👻 GOOD EFFORT! Practice makes perfect!",
                "🎭 NICE TRY! Every attempt makes you stronger!",
            ],
        ),
        (
            0,
            [
                "💪 DON'T GIVE UP! You're learning and growing!",
                "🌟 KEEP TRYING! Every expert was once a beginner!",
                "🎃 STAY STRONG! Your next attempt will be better!",
            ],
        ),
    ]

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.rng = rng or random.Random()
        self.clock = clock

    # ------------------------------------------------------------------
    # Score
    # ------------------------------------------------------------------

    def expected_seconds(self, difficulty: QuizDifficulty) -> int:
        return self.EXPECTED_SECONDS.get(difficulty, 60)

    def count_correct(self, quiz: Quiz, answers: Mapping[str, int]) -> int:
        return sum(
            1
            for question in quiz.questions
            if answers.get(question.id, UNANSWERED) == question.correct_answer_index
        )

    def compute_final_score(
        self,
        correct: int,
        total: int,
        time_spent: float,
        difficulty: QuizDifficulty,
    ) -> int:
        """Apply multiplier, speed bonus and clamp.

        Args:
            correct: Number of correct answers
            total: Number of questions (>= 1)
            time_spent: Seconds spent on the whole quiz
            difficulty: Quiz difficulty

        Returns:
            Final score in [0, 100]
        """
        score = round_half_up(100 * correct / total)
        score = round_half_up(score * self.DIFFICULTY_MULTIPLIERS.get(difficulty, 1.0))

        average = time_spent / total
        if (
            score >= self.SPEED_BONUS_MIN_SCORE
            and average < self.expected_seconds(difficulty) * self.SPEED_BONUS_RATIO
        ):
            score = round_half_up(score * self.SPEED_BONUS)

        return max(0, min(100, score))

    def calculate_score(
        self, quiz: Quiz, answers: Optional[Mapping[str, int]], time_spent: float
    ) -> QuizResult:
        """Score a submission.

        Missing answers count as unanswered (-1) and are wrong.

        Args:
            quiz: The quiz being answered
            answers: Map of question id to selected option index
            time_spent: Seconds spent on the quiz

        Returns:
            Immutable QuizResult
        """
        answers = answers or {}
        total = len(quiz.questions)
        correct = self.count_correct(quiz, answers)
        score = self.compute_final_score(correct, total, time_spent, quiz.difficulty)
        feedback = self.build_detailed_feedback(score, correct, total, time_spent, quiz.difficulty)

        return QuizResult(
            quiz_id=quiz.id,
            score=score,
            total_questions=total,
            correct_answers=correct,
            time_spent_seconds=time_spent,
            feedback_text=feedback.overall_message,
            badges_awarded_this_submission=self.submission_badges(
                score, correct, total, time_spent, quiz.difficulty
            ),
            submitted_at=self.clock(),
            difficulty=quiz.difficulty,
        )

    def review_answers(self, quiz: Quiz, answers: Optional[Mapping[str, int]]) -> list[QuestionFeedback]:
        """Per-question correctness in display order."""
        answers = answers or {}
        review = []
        for question in quiz.questions:
            user_answer = answers.get(question.id, UNANSWERED)
            review.append(
                QuestionFeedback(
                    question_id=question.id,
                    is_correct=user_answer == question.correct_answer_index,
                    user_answer=user_answer,
                    correct_answer=question.correct_answer_index,
                    explanation=question.explanation,
                )
            )
        return review

    def score_submission(
        self, quiz: Quiz, answers: Optional[Mapping[str, int]], time_spent: float
    ) -> ScoredSubmission:
        """Score a submission and build all presentation pieces."""
        result = self.calculate_score(quiz, answers, time_spent)
        retry = self.retry_suggestions(result.score, quiz.difficulty) if result.score < 90 else []
        return ScoredSubmission(
            result=result,
            detailed_feedback=self.build_detailed_feedback(
                result.score, result.correct_answers, result.total_questions, time_spent, quiz.difficulty
            ),
            question_feedback=self.review_answers(quiz, answers),
            celebration_message=self.celebration_message(
                result.score, result.badges_awarded_this_submission
            ),
            retry_suggestions=retry,
        )

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    def build_detailed_feedback(
        self,
        score: int,
        correct: int,
        total: int,
        time_spent: float,
        difficulty: QuizDifficulty,
    ) -> DetailedFeedback:
        """Feedback sections for a score, adjusted for pace and difficulty."""
        band = next(b for b in self.FEEDBACK_BANDS if score >= b[0])
        _, message, encouragement, strengths, improvements, next_steps = band

        strengths = list(strengths)
        improvements = list(improvements)
        next_steps = list(next_steps)

        average = time_spent / total if total else 0
        expected = self.expected_seconds(difficulty)
        if average < expected * 0.7:
            strengths.append("Quick thinking and fast responses")
        elif average > expected * 1.5:
            improvements.append("Try to work a bit faster while maintaining accuracy")

        if difficulty == QuizDifficulty.HARD and score >= 60:
            encouragement += " Tackling hard questions shows real courage! 🦇"
        elif difficulty == QuizDifficulty.EASY and score >= 80:
            next_steps.append("You're ready to try medium difficulty!")

        return DetailedFeedback(
            overall_message=message.format(score=score, correct=correct, total=total),
            encouragement=encouragement,
            strengths=strengths,
            improvements=improvements,
            next_steps=next_steps,
        )

    def submission_badges(
        self,
        score: int,
        correct: int,
        total: int,
        time_spent: float,
        difficulty: QuizDifficulty,
    ) -> list[str]:
        """Badge ids earned by this submission alone, in award order."""
        badges: list[str] = []
        average = time_spent / total
        expected = self.expected_seconds(difficulty)

        if score == 100:
            badges.append("perfect-score-phantom")
            if difficulty == QuizDifficulty.HARD:
                badges.append("hard-mode-hero")

        if score >= 95:
            badges.append("spooky-scholar-supreme")
        elif score >= 90:
            badges.append("spooky-scholar")
        elif score >= 85:
            badges.append("ghostly-graduate")
        elif score >= 80:
            badges.append("haunted-honor-roll")

        if average < expected * 0.6 and score >= 80:
            badges.append("lightning-learner")
        elif average < expected * 0.8 and score >= 70:
            badges.append("quick-thinker")

        if difficulty == QuizDifficulty.HARD and score >= 70:
            badges.append("brave-soul")
        elif difficulty == QuizDifficulty.MEDIUM and score >= 85:
            badges.append("rising-star")

        if correct == total:
            badges.append("precision-phantom")
        elif correct * 100 >= total * 90:
            badges.append("sharp-shooter")

        badges.append("quiz-conqueror")
        if len(badges) == 1:
            badges.append("first-steps")
        if score >= 70:
            badges.append("knowledge-seeker")

        return badges

    def celebration_message(self, score: int, badge_ids: list[str]) -> str:
        """Random message for the score band, plus a count of special badges."""
        messages = next(m for threshold, m in self.CELEBRATIONS if score >= threshold)
        message = self.rng.choice(messages)

        special = [b for b in badge_ids if b not in self.ROUTINE_BADGES]
        if special:
            plural = "s" if len(special) > 1 else ""
            return f"{message} You've earned {len(special)} special badge{plural}! 🏆"
        return message

    def retry_suggestions(self, score: int, difficulty: QuizDifficulty) -> list[str]:
        """Study tips for the next attempt."""
        suggestions: list[str] = []

        if score < 70:
            suggestions.append("📖 Review the story content more carefully")
            suggestions.append("📝 Take notes while reading to remember key points")
            suggestions.append("🐌 Take your time - there's no rush to answer")

        if score < 50:
            suggestions.append("📚 Try reading the story multiple times")
            suggestions.append("🎯 Focus on understanding main concepts first")
            if difficulty != QuizDifficulty.EASY:
                suggestions.append("⬇️ Consider trying an easier difficulty level")

        if 70 <= score < 90:
            suggestions.append("🔍 Pay closer attention to question details")
            suggestions.append("💭 Think through each answer choice carefully")
            suggestions.append("📊 Review the explanations for missed questions")

        if score >= 90 and difficulty != QuizDifficulty.HARD:
            suggestions.append("⬆️ Try a harder difficulty for more challenge")
            suggestions.append("🎯 Aim for that perfect 100% score")

        return suggestions
