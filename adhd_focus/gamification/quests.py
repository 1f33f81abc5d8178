"""
Daily Quests

Each user gets a small set of quests per calendar day, chosen from a pool
filtered by level. The choice is reproducible: the same user on the same
date always gets the same quests, with no stored seed.
"""

from typing import Iterable, List, Optional, Sequence
from datetime import date
import logging
import random

from adhd_focus.exceptions import InvalidInputError
from adhd_focus.models.quest import DailyQuest, QuestProgressResult, QuestTemplate

logger = logging.getLogger(__name__)

DAILY_QUEST_COUNT = 3

QUEST_POOL: List[QuestTemplate] = [
    # Beginner (level 1+)
    QuestTemplate(quest_type="complete_tasks", label="Complete 1 task", emoji="✅", target=1, xp_reward=10, min_level=1),
    QuestTemplate(quest_type="add_tasks", label="Add 2 tasks to inbox", emoji="📝", target=2, xp_reward=10, min_level=1),
    # Intermediate (level 2+)
    QuestTemplate(quest_type="complete_tasks_3", label="Complete 3 tasks", emoji="🎯", target=3, xp_reward=25, min_level=2),
    QuestTemplate(quest_type="check_habits", label="Check all habits", emoji="🧘", target=1, xp_reward=20, min_level=2),
    # Active (level 3+)
    QuestTemplate(quest_type="complete_tasks_5", label="Complete 5 tasks", emoji="⚡", target=5, xp_reward=40, min_level=3),
    QuestTemplate(quest_type="focus_session", label="Do 1 pomodoro", emoji="🍅", target=1, xp_reward=20, min_level=3),
    # Advanced (level 5+)
    QuestTemplate(quest_type="focus_sessions_3", label="Do 3 pomodoros", emoji="🔥", target=3, xp_reward=40, min_level=5),
    QuestTemplate(quest_type="complete_must", label="Complete a Must-do task", emoji="🏆", target=1, xp_reward=30, min_level=5),
    # Power user (level 8+)
    QuestTemplate(quest_type="complete_tasks_7", label="Complete 7 tasks", emoji="💪", target=7, xp_reward=60, min_level=8),
    QuestTemplate(quest_type="clear_inbox", label="Clear your inbox", emoji="📭", target=1, xp_reward=35, min_level=8),
]


def hash_code(text: str) -> int:
    """
    32-bit polynomial rolling hash (hash * 31 + code unit)

    Iterates UTF-16 code units and wraps to a signed 32-bit integer after
    every step, so results match the same hash computed in a browser.
    """
    units = text.encode("utf-16-le")
    value = 0
    for i in range(0, len(units), 2):
        code_unit = units[i] | (units[i + 1] << 8)
        value = ((value << 5) - value) + code_unit
        value = ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000
    return value


def quest_seed(quest_date: date, user_id: str) -> int:
    return hash_code(f"{quest_date.isoformat()}-{user_id}")


def select_quests(
    user_level: int,
    user_id: str,
    quest_date: date,
    pool: Sequence[QuestTemplate] = QUEST_POOL,
    count: int = DAILY_QUEST_COUNT,
) -> List[QuestTemplate]:
    """
    Pick the day's quest templates for a user

    Args:
        user_level: Filters out templates above this level
        user_id: Part of the seed
        quest_date: Part of the seed
        pool: Template pool
        count: How many quests to pick

    Returns:
        All eligible templates when there are no more than `count`,
        otherwise the first `count` of a seeded shuffle
    """
    eligible = [q for q in pool if q.min_level <= user_level]
    if len(eligible) <= count:
        return eligible

    rng = random.Random(quest_seed(quest_date, user_id))
    shuffled = list(eligible)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return shuffled[:count]


def create_daily_quests(
    user_id: str,
    user_level: int,
    quest_date: date,
    pool: Sequence[QuestTemplate] = QUEST_POOL,
    count: int = DAILY_QUEST_COUNT,
) -> List[DailyQuest]:
    """Instantiate today's quests from the selected templates"""
    templates = select_quests(user_level, user_id, quest_date, pool, count)
    quests = [
        DailyQuest(
            user_id=user_id,
            date=quest_date,
            quest_type=t.quest_type,
            label=t.label,
            emoji=t.emoji,
            target=t.target,
            xp_reward=t.xp_reward,
        )
        for t in templates
    ]
    logger.info(f"Created {len(quests)} daily quests for user {user_id} on {quest_date}")
    return quests


def ensure_daily_quests(
    existing: Iterable[DailyQuest],
    user_id: str,
    user_level: int,
    quest_date: date,
    pool: Sequence[QuestTemplate] = QUEST_POOL,
    count: int = DAILY_QUEST_COUNT,
) -> tuple[List[DailyQuest], bool]:
    """
    Lazily create the day's quests

    Returns:
        (quests for quest_date, created) where created is False when rows
        for that date already existed
    """
    todays = [q for q in existing if q.date == quest_date]
    if todays:
        return todays, False
    return create_daily_quests(user_id, user_level, quest_date, pool, count), True


def update_quest_progress(quest: DailyQuest, increment: int = 1) -> QuestProgressResult:
    """
    Advance a quest, capping progress at its target

    A completed quest is returned unchanged.

    Raises:
        InvalidInputError: increment below 1
    """
    if increment < 1:
        raise InvalidInputError("Quest increment must be at least 1", field="increment", value=increment)

    if quest.completed:
        return QuestProgressResult(quest=quest)

    progress = min(quest.progress + increment, quest.target)
    just_completed = progress >= quest.target
    updated = quest.model_copy(update={"progress": progress, "completed": just_completed})

    if just_completed:
        logger.info(f"Quest completed: {quest.quest_type} for user {quest.user_id} (+{quest.xp_reward} XP)")

    return QuestProgressResult(
        quest=updated,
        just_completed=just_completed,
        xp_awarded=quest.xp_reward if just_completed else 0,
    )


def find_quest(quests: Iterable[DailyQuest], quest_type: str) -> Optional[DailyQuest]:
    return next((q for q in quests if q.quest_type == quest_type), None)
