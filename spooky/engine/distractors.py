"""Distractor Generator - Plausible wrong answers for blank questions."""

import random
from typing import Iterable, Optional

from core.exceptions import GenerationFailed

from ..prompts.templates import DISTRACTOR_STOPWORDS, GENERIC_DISTRACTORS


class DistractorGenerator:
    """Produces exactly three wrong answers for a key term.

    Up to two distractors come from the sentence's own words; the rest are
    drawn at random from a fixed Halloween vocabulary. All comparisons are
    case-insensitive, so "Shadow" and "shadow" count as the same option.

    Example:
        >>> generator = DistractorGenerator(random.Random(7))
        >>> generator.generate("variable", ["the", "algebra", "variable", "equation"])[:2]
        ['algebra', 'equation']
    """

    DISTRACTOR_COUNT = 3
    MAX_CONTEXTUAL = 2
    MIN_CONTEXT_WORD_LENGTH = 4

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        generic_pool: Iterable[str] = GENERIC_DISTRACTORS,
    ):
        self.rng = rng or random.Random()
        self.generic_pool = tuple(generic_pool)

    def contextual_candidates(self, correct: str, context_words: Iterable[str]) -> list[str]:
        """Context words usable as distractors, de-duplicated, in order."""
        seen = {correct.lower()}
        candidates: list[str] = []
        for word in context_words:
            key = word.lower()
            if len(word) < self.MIN_CONTEXT_WORD_LENGTH or key in DISTRACTOR_STOPWORDS:
                continue
            if key in seen:
                continue
            seen.add(key)
            candidates.append(word)
        return candidates

    def generate(self, correct: str, context_words: Iterable[str]) -> list[str]:
        """Return three distractors, distinct from each other and from ``correct``.

        Args:
            correct: The correct answer
            context_words: Words from the source sentence

        Returns:
            Exactly three strings

        Raises:
            GenerationFailed: If the generic vocabulary cannot fill the gap
        """
        distractors = self.contextual_candidates(correct, context_words)[: self.MAX_CONTEXTUAL]
        taken = {correct.lower(), *(d.lower() for d in distractors)}

        pool = list(self.generic_pool)
        self.rng.shuffle(pool)
        for word in pool:
            if len(distractors) == self.DISTRACTOR_COUNT:
                break
            if word.lower() not in taken:
                distractors.append(word)
                taken.add(word.lower())

        if len(distractors) < self.DISTRACTOR_COUNT:
            raise GenerationFailed(
                f"Could not find enough wrong answers for '{correct}'",
                details={"correct": correct, "found": distractors},
            )
        return distractors

    def build_options(self, correct: str, context_words: Iterable[str]) -> tuple[list[str], int]:
        """Correct answer plus distractors, shuffled.

        Returns:
            Tuple of (options, index of the correct answer)
        """
        options = [correct, *self.generate(correct, context_words)]
        self.rng.shuffle(options)
        return options, options.index(correct)
