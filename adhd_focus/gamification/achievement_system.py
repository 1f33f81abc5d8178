"""
Achievement System

Checks locked achievements against the user's state after an event:
- Progress (lifetime completed tasks)
- Streaks (current and best)
- Mastery (level milestones)
- Hidden time-of-day achievements

Special achievements are granted by dedicated host logic and never unlock
here.
"""

from typing import Iterable, List
from datetime import datetime
import logging

from adhd_focus.models.achievement import AchievementConditionType, AchievementDefinition
from adhd_focus.models.feature import FeatureCode
from adhd_focus.models.game_state import UserGameState

logger = logging.getLogger(__name__)

_T = AchievementConditionType

DEFAULT_ACHIEVEMENTS: List[AchievementDefinition] = [
    # Progress
    AchievementDefinition(code="first_task", name="First Steps", description="Complete your first task", icon="🎯", category="progress", condition_type=_T.TASK_COUNT, condition_value={"count": 1}, xp_reward=10),
    AchievementDefinition(code="task_10", name="Getting Started", description="Complete 10 tasks", icon="🌱", category="progress", condition_type=_T.TASK_COUNT, condition_value={"count": 10}, xp_reward=25),
    AchievementDefinition(code="task_50", name="Halfway There", description="Complete 50 tasks", icon="🌿", category="progress", condition_type=_T.TASK_COUNT, condition_value={"count": 50}, xp_reward=50),
    AchievementDefinition(code="task_100", name="Centurion", description="Complete 100 tasks", icon="🌳", category="progress", condition_type=_T.TASK_COUNT, condition_value={"count": 100}, xp_reward=100),
    AchievementDefinition(code="task_500", name="Task Master", description="Complete 500 tasks", icon="🏔️", category="progress", condition_type=_T.TASK_COUNT, condition_value={"count": 500}, xp_reward=250),
    # Streaks
    AchievementDefinition(code="streak_3", name="Spark", description="3 day streak", icon="✨", category="streak", condition_type=_T.STREAK_DAYS, condition_value={"days": 3}, xp_reward=15, unlocks_feature=FeatureCode.CHECKLIST),
    AchievementDefinition(code="streak_7", name="Flame", description="7 day streak", icon="🔥", category="streak", condition_type=_T.STREAK_DAYS, condition_value={"days": 7}, xp_reward=35),
    AchievementDefinition(code="streak_14", name="Blaze", description="14 day streak", icon="🔥🔥", category="streak", condition_type=_T.STREAK_DAYS, condition_value={"days": 14}, xp_reward=70),
    AchievementDefinition(code="streak_30", name="Inferno", description="30 day streak", icon="🌋", category="streak", condition_type=_T.STREAK_DAYS, condition_value={"days": 30}, xp_reward=150),
    AchievementDefinition(code="streak_100", name="Eternal Flame", description="100 day streak", icon="💎", category="streak", condition_type=_T.LONGEST_STREAK, condition_value={"days": 100}, xp_reward=500),
    # Mastery
    AchievementDefinition(code="level_5", name="Apprentice", description="Reach level 5", icon="🥉", category="mastery", condition_type=_T.LEVEL, condition_value={"level": 5}, xp_reward=25),
    AchievementDefinition(code="level_10", name="Journeyman", description="Reach level 10", icon="🥈", category="mastery", condition_type=_T.LEVEL, condition_value={"level": 10}, xp_reward=50),
    AchievementDefinition(code="level_25", name="Expert", description="Reach level 25", icon="🥇", category="mastery", condition_type=_T.LEVEL, condition_value={"level": 25}, xp_reward=125),
    # Hidden
    AchievementDefinition(code="night_owl", name="Night Owl", description="Complete a task after midnight", icon="🦉", category="hidden", condition_type=_T.TIME, condition_value={"hour": 0}, xp_reward=20),
    AchievementDefinition(code="early_bird", name="Early Bird", description="Complete a task before 6 AM", icon="🐦", category="hidden", condition_type=_T.TIME, condition_value={"hour": 5}, xp_reward=20),
    AchievementDefinition(code="triple_three", name="3:33 AM", description="Complete a task at 3:33 AM", icon="👁️", category="secret", condition_type=_T.TIME, condition_value={"hour": 3, "minute": 33}, xp_reward=66),
    AchievementDefinition(code="friday_13", name="Fearless", description="Complete a task on Friday the 13th", icon="🎃", category="secret", condition_type=_T.SPECIAL, condition_value={"special": "friday_13"}, xp_reward=113),
]

# datetime attribute each time key is matched against; day_of_week is Monday=0
_TIME_FIELDS = {
    "hour": lambda now: now.hour,
    "minute": lambda now: now.minute,
    "day_of_week": lambda now: now.weekday(),
    "day_of_month": lambda now: now.day,
    "month": lambda now: now.month,
}


def _check_time(condition: dict, now: datetime) -> bool:
    matched_any = False
    for key, expected in condition.items():
        getter = _TIME_FIELDS.get(key)
        if getter is None:
            continue
        matched_any = True
        if getter(now) != expected:
            return False
    return matched_any


def check_condition(achievement: AchievementDefinition, state: UserGameState, now: datetime) -> bool:
    """Does the state (at time `now`) meet this achievement's condition?"""
    value = achievement.condition_value
    kind = achievement.condition_type

    if kind == AchievementConditionType.TASK_COUNT:
        return "count" in value and state.total_tasks_completed >= value["count"]
    if kind == AchievementConditionType.STREAK_DAYS:
        return "days" in value and state.current_streak >= value["days"]
    if kind == AchievementConditionType.LONGEST_STREAK:
        return "days" in value and state.longest_streak >= value["days"]
    if kind == AchievementConditionType.LEVEL:
        return "level" in value and state.level >= value["level"]
    if kind == AchievementConditionType.TIME:
        return _check_time(value, now)

    # Special conditions are granted by dedicated host logic
    return False


def check_achievements(
    state: UserGameState,
    catalog: Iterable[AchievementDefinition],
    now: datetime,
) -> List[AchievementDefinition]:
    """
    Find achievements the user just earned

    Args:
        state: State after the current event's XP and streak updates
        catalog: Achievement definitions
        now: Event time, from the injected clock

    Returns:
        Newly met achievements, in catalog order
    """
    newly_unlocked = []
    for achievement in catalog:
        if achievement.code in state.unlocked_achievements:
            continue
        if check_condition(achievement, state, now):
            newly_unlocked.append(achievement)
            logger.info(f"Achievement unlocked: {achievement.code} (+{achievement.xp_reward} XP)")
    return newly_unlocked
