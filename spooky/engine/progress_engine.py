"""Progress Engine - XP, levels, streaks and the badge catalog."""

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.logger import get_logger

from ..models.api import HalloweenMetrics, LeaderboardEntry, LearningStats, LevelInfo
from ..models.enums import BadgeRarity, HalloweenCharacter, LeaderboardCategory
from ..models.schemas import Badge, QuizResult, StorySummary, UserProgress, utc_now
from ..prompts.templates import LEVEL_TITLES
from .scoring_engine import round_half_up

logger = get_logger("progress_engine")

BadgeCondition = Callable[[UserProgress, Optional[tzinfo]], bool]


@dataclass(frozen=True)
class BadgeRule:
    """Catalog entry: a badge template plus the condition that unlocks it."""

    id: str
    name: str
    description: str
    icon: str
    rarity: BadgeRarity
    condition: BadgeCondition

    def mint(self, unlocked_at: datetime) -> Badge:
        return Badge(
            id=self.id,
            name=self.name,
            description=self.description,
            icon=self.icon,
            rarity=self.rarity,
            unlocked_at=unlocked_at,
        )


@dataclass
class ProgressUpdate:
    """Outcome of folding one event into a progress record."""

    progress: UserProgress
    new_badges: list[Badge] = field(default_factory=list)
    xp_earned: int = 0
    previous_level: int = 1

    @property
    def leveled_up(self) -> bool:
        return self.progress.level > self.previous_level


def _perfect_count(progress: UserProgress) -> int:
    return sum(1 for quiz in progress.quizzes_taken if quiz.score == 100)


def _average_at_least(progress: UserProgress, min_quizzes: int, threshold: float) -> bool:
    quizzes = progress.quizzes_taken
    if len(quizzes) < min_quizzes:
        return False
    return sum(q.score for q in quizzes) / len(quizzes) >= threshold


def _night_owl(progress: UserProgress, tz: Optional[tzinfo]) -> bool:
    return any(0 <= q.submitted_at.astimezone(tz).hour < 6 for q in progress.quizzes_taken)


BADGE_CATALOG: tuple[BadgeRule, ...] = (
    # Stories
    BadgeRule("first-story", "Story Seeker", "Read your first spooky story!", "👻",
              BadgeRarity.COMMON, lambda p, tz: len(p.stories_read) >= 1),
    BadgeRule("story-collector", "Story Collector", "Read 5 spooky stories!", "📖",
              BadgeRarity.RARE, lambda p, tz: len(p.stories_read) >= 5),
    BadgeRule("story-master", "Story Master", "Read 10 spooky stories!", "📚",
              BadgeRarity.LEGENDARY, lambda p, tz: len(p.stories_read) >= 10),
    # Quizzes
    BadgeRule("first-quiz", "First Quiz Master", "Completed your first spooky quiz!", "🧙‍♀️",
              BadgeRarity.COMMON, lambda p, tz: len(p.quizzes_taken) >= 1),
    BadgeRule("quiz-apprentice", "Quiz Apprentice", "Completed 5 spooky quizzes!", "🎃",
              BadgeRarity.COMMON, lambda p, tz: len(p.quizzes_taken) >= 5),
    BadgeRule("quiz-scholar", "Quiz Scholar", "Completed 10 spooky quizzes!", "📚",
              BadgeRarity.RARE, lambda p, tz: len(p.quizzes_taken) >= 10),
    # Perfect scores
    BadgeRule("perfect-first", "Perfect Spell", "Got your first perfect score!", "⭐",
              BadgeRarity.RARE, lambda p, tz: _perfect_count(p) >= 1),
    BadgeRule("perfect-trio", "Triple Perfect", "Three perfect scores!", "🌟",
              BadgeRarity.LEGENDARY, lambda p, tz: _perfect_count(p) >= 3),
    # Streaks
    BadgeRule("streak-3", "Three Day Streak", "Studied for 3 days in a row!", "🔥",
              BadgeRarity.COMMON, lambda p, tz: p.current_streak >= 3),
    BadgeRule("streak-7", "Weekly Warrior", "Studied for 7 days in a row!", "👑",
              BadgeRarity.RARE, lambda p, tz: p.current_streak >= 7),
    BadgeRule("streak-30", "Monthly Master", "Studied for 30 days in a row!", "💎",
              BadgeRarity.LEGENDARY, lambda p, tz: p.current_streak >= 30),
    # Averages
    BadgeRule("high-scorer", "High Scorer", "Maintain an 80% average score!", "🎯",
              BadgeRarity.RARE, lambda p, tz: _average_at_least(p, 3, 80)),
    BadgeRule("perfectionist", "Perfectionist", "Maintain a 95% average score!", "💯",
              BadgeRarity.LEGENDARY, lambda p, tz: _average_at_least(p, 5, 95)),
    # Special
    BadgeRule("speed-demon", "Speed Demon", "Complete a quiz in under 30 seconds!", "⚡",
              BadgeRarity.RARE, lambda p, tz: any(q.time_spent_seconds < 30 for q in p.quizzes_taken)),
    BadgeRule("night-owl", "Night Owl", "Complete a quiz after midnight!", "🦉",
              BadgeRarity.COMMON, _night_owl),
)

WELCOME_BADGE = BadgeRule(
    "welcome", "Welcome to the Coven", "Joined the Spooky Study Buddy family!", "🎭",
    BadgeRarity.COMMON, lambda p, tz: True,
)


class ProgressEngine:
    """Folds story reads and quiz results into ``UserProgress``.

    Every ``record_*`` method works on a deep copy and returns a
    ``ProgressUpdate``; the caller decides when to persist it.

    XP rules:
        - Story: +10 XP the first time a story id is recorded
        - Quiz: round(15 * score / 100), boosted by +50% for a perfect
          score, +20% under 60 seconds and +30% (streak >= 7) or +20%
          (streak >= 3), using the streak before the submission

    Level: floor(sqrt(xp / 100)) + 1. Reaching a new level mints a
    ``level-N`` badge.

    Example:
        >>> engine = ProgressEngine()
        >>> progress = engine.new_progress("default")
        >>> update = engine.record_quiz_completed(progress, result)
        >>> [b.id for b in update.new_badges]
        ['first-quiz']
    """

    STORY_XP = 10
    QUIZ_BASE_XP = 15
    PERFECT_BONUS = 0.5
    FAST_BONUS = 0.2
    FAST_SECONDS = 60
    LONG_STREAK_BONUS = 0.3
    SHORT_STREAK_BONUS = 0.2

    def __init__(
        self,
        timezone: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
        catalog: Iterable[BadgeRule] = BADGE_CATALOG,
    ):
        self.tz = self.resolve_timezone(timezone)
        self.clock = clock
        self.catalog = tuple(catalog)

    # ------------------------------------------------------------------
    # Pure rules
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
        """Named zone, or None (server local time) when unset or unknown."""
        if not name:
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone, using server local time", timezone=name)
            return None

    @staticmethod
    def calculate_level(xp: int) -> int:
        return math.floor(math.sqrt(xp / 100)) + 1

    @staticmethod
    def xp_for_level(level: int) -> int:
        """Total XP at which ``level`` starts."""
        return (level - 1) ** 2 * 100

    def local_date(self, moment: datetime) -> date:
        return moment.astimezone(self.tz).date()

    def quiz_xp(self, result: QuizResult, streak_before: int) -> int:
        base = round_half_up(self.QUIZ_BASE_XP * result.score / 100)

        multiplier = 1.0
        if result.score == 100:
            multiplier += self.PERFECT_BONUS
        if result.time_spent_seconds < self.FAST_SECONDS:
            multiplier += self.FAST_BONUS
        if streak_before >= 7:
            multiplier += self.LONG_STREAK_BONUS
        elif streak_before >= 3:
            multiplier += self.SHORT_STREAK_BONUS

        return round_half_up(base * multiplier)

    def update_streak(self, progress: UserProgress, activity_date: date) -> None:
        """Count consecutive calendar days with activity.

        Same day keeps the streak, the next day extends it and any other gap
        restarts it at 1.
        """
        last = progress.last_activity_date
        if last is not None and activity_date == last:
            progress.current_streak = max(progress.current_streak, 1)
        elif last is not None and activity_date == last + timedelta(days=1):
            progress.current_streak += 1
        else:
            progress.current_streak = 1

        progress.last_activity_date = activity_date
        progress.longest_streak = max(progress.longest_streak, progress.current_streak)

    # ------------------------------------------------------------------
    # Badges and levels
    # ------------------------------------------------------------------

    def evaluate_badges(self, progress: UserProgress) -> list[Badge]:
        """Mint every catalog badge whose condition holds and id is absent.

        Mutates ``progress``. Running it again on unchanged progress mints
        nothing.
        """
        owned = progress.badge_ids()
        now = self.clock()
        minted = []
        for rule in self.catalog:
            if rule.id in owned or not rule.condition(progress, self.tz):
                continue
            badge = rule.mint(now)
            progress.badges.append(badge)
            owned.add(rule.id)
            minted.append(badge)
        return minted

    def level_badge(self, level: int) -> Badge:
        if level >= 10:
            rarity = BadgeRarity.LEGENDARY
        elif level >= 5:
            rarity = BadgeRarity.RARE
        else:
            rarity = BadgeRarity.COMMON
        return Badge(
            id=f"level-{level}",
            name=f"Level {level} Sorcerer",
            description=f"Reached level {level} in your magical studies!",
            icon="🔮",
            rarity=rarity,
            unlocked_at=self.clock(),
        )

    def award_xp(self, progress: UserProgress, amount: int) -> list[Badge]:
        """Add XP, recompute the level and mint a level badge on level-up."""
        progress.experience_points += max(0, amount)
        new_level = self.calculate_level(progress.experience_points)
        if new_level <= progress.level:
            return []

        progress.level = new_level
        if progress.has_badge(f"level-{new_level}"):
            return []
        badge = self.level_badge(new_level)
        progress.badges.append(badge)
        return [badge]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def new_progress(self, user_id: str) -> UserProgress:
        """Fresh record with the welcome badge and zero XP."""
        return UserProgress(user_id=user_id, badges=[WELCOME_BADGE.mint(self.clock())])

    def record_story_read(self, progress: UserProgress, story: StorySummary) -> ProgressUpdate:
        """Record a story read. Repeat reads of the same story change nothing."""
        updated = progress.model_copy(deep=True)
        update = ProgressUpdate(progress=updated, previous_level=progress.level)
        if updated.has_read(story.id):
            return update

        updated.stories_read.append(story)
        update.xp_earned = self.STORY_XP
        update.new_badges.extend(self.evaluate_badges(updated))
        update.new_badges.extend(self.award_xp(updated, self.STORY_XP))

        logger.info(
            "Story read recorded",
            user_id=updated.user_id,
            story_id=story.id,
            xp=updated.experience_points,
            new_badges=[b.id for b in update.new_badges],
        )
        return update

    def record_quiz_completed(self, progress: UserProgress, result: QuizResult) -> ProgressUpdate:
        """Append a quiz result, award XP, update the streak and mint badges."""
        updated = progress.model_copy(deep=True)
        update = ProgressUpdate(progress=updated, previous_level=progress.level)

        updated.quizzes_taken.append(result)
        update.xp_earned = self.quiz_xp(result, streak_before=updated.current_streak)
        self.update_streak(updated, self.local_date(result.submitted_at))

        update.new_badges.extend(self.evaluate_badges(updated))
        update.new_badges.extend(self.award_xp(updated, update.xp_earned))

        logger.info(
            "Quiz completion recorded",
            user_id=updated.user_id,
            quiz_id=result.quiz_id,
            score=result.score,
            xp_earned=update.xp_earned,
            streak=updated.current_streak,
            level=updated.level,
            new_badges=[b.id for b in update.new_badges],
        )
        return update

    def set_favorite_character(self, progress: UserProgress, character: HalloweenCharacter) -> UserProgress:
        updated = progress.model_copy(deep=True)
        updated.favorite_character = character
        return updated

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    def halloween_metrics(self, progress: UserProgress) -> HalloweenMetrics:
        return HalloweenMetrics(
            pumpkins_collected=len(progress.stories_read),
            ghosts_befriended=sum(1 for q in progress.quizzes_taken if q.score >= 80),
            spells_cast=len(progress.quizzes_taken),
            candy_earned=progress.experience_points // 10,
        )

    def learning_stats(self, progress: UserProgress) -> LearningStats:
        """Averages, time and trend over the quiz history plus top topics."""
        quizzes = progress.quizzes_taken
        topics = Counter(story.original_topic or "General" for story in progress.stories_read)
        favorite_topics = [topic for topic, _ in topics.most_common(3)]

        if not quizzes:
            return LearningStats(favorite_topics=favorite_topics)

        average = sum(q.score for q in quizzes) / len(quizzes)
        trend = 0.0
        if len(quizzes) >= 5:
            first = sum(q.score for q in quizzes[:5]) / 5
            last = sum(q.score for q in quizzes[-5:]) / 5
            trend = last - first

        return LearningStats(
            average_score=round_half_up(average * 10) / 10,
            total_time_spent=sum(q.time_spent_seconds for q in quizzes),
            improvement_trend=round_half_up(trend * 10) / 10,
            favorite_topics=favorite_topics,
        )

    def level_info(self, progress: UserProgress) -> LevelInfo:
        level = progress.level
        _, title, icon = next(
            (entry for entry in LEVEL_TITLES if entry[0] == level), LEVEL_TITLES[-1]
        )
        current = self.xp_for_level(level)
        upcoming = self.xp_for_level(level + 1)
        percent = min(100.0, (progress.experience_points - current) / (upcoming - current) * 100)

        return LevelInfo(
            level=level,
            title=title,
            icon=icon,
            description=f"You are a {title} with {progress.experience_points} experience points!",
            required_xp=current,
            next_level_xp=upcoming,
            progress_percent=round_half_up(percent * 10) / 10,
        )

    def leaderboard(
        self,
        records: Iterable[UserProgress],
        category: LeaderboardCategory = LeaderboardCategory.XP,
        limit: int = 10,
    ) -> list[LeaderboardEntry]:
        """Rank users by XP, level, current streak or badge count."""
        metric: Callable[[UserProgress], int] = {
            LeaderboardCategory.XP: lambda p: p.experience_points,
            LeaderboardCategory.LEVEL: lambda p: p.level,
            LeaderboardCategory.STREAK: lambda p: p.current_streak,
            LeaderboardCategory.BADGES: lambda p: len(p.badges),
        }[category]

        ranked = sorted(records, key=lambda p: (-metric(p), p.user_id))[:limit]
        return [
            LeaderboardEntry(user_id=p.user_id, rank=i + 1, score=metric(p), category=category.value)
            for i, p in enumerate(ranked)
        ]
