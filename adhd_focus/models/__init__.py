"""Pydantic models for the gamification engine"""

from adhd_focus.models.rarity import RewardRarity, CreatureRarity
from adhd_focus.models.feature import FeatureCode, FeatureDefinition, FeatureUnlockResult
from adhd_focus.models.creature import (
    CreatureDefinition,
    SpawnConditions,
    SpawnContext,
    SpawnOutcome,
    SpawnResult,
    TimeRange,
)
from adhd_focus.models.quest import QuestTemplate, DailyQuest, QuestProgressResult
from adhd_focus.models.achievement import AchievementDefinition, AchievementConditionType
from adhd_focus.models.game_state import UserGameState, new_user_state
from adhd_focus.models.event import (
    EventType,
    GamificationEvent,
    GamificationEventResult,
    LevelProgress,
    RewardLogEntry,
    RewardRoll,
    StreakResult,
    XpAward,
)

__all__ = [
    "RewardRarity",
    "CreatureRarity",
    "FeatureCode",
    "FeatureDefinition",
    "FeatureUnlockResult",
    "CreatureDefinition",
    "SpawnConditions",
    "SpawnContext",
    "SpawnOutcome",
    "SpawnResult",
    "TimeRange",
    "QuestTemplate",
    "DailyQuest",
    "QuestProgressResult",
    "AchievementDefinition",
    "AchievementConditionType",
    "UserGameState",
    "new_user_state",
    "EventType",
    "GamificationEvent",
    "GamificationEventResult",
    "LevelProgress",
    "RewardLogEntry",
    "RewardRoll",
    "StreakResult",
    "XpAward",
]
