"""Gamification event and result models"""
from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from adhd_focus.models.creature import SpawnResult
from adhd_focus.models.feature import FeatureCode
from adhd_focus.models.game_state import UserGameState
from adhd_focus.models.rarity import RewardRarity


class EventType(str, Enum):
    """Triggers the host can report to the engine"""
    TASK_COMPLETE = "task_complete"
    HABIT_COMPLETE = "habit_complete"
    QUEST_COMPLETE = "quest_complete"
    FOCUS_SESSION_COMPLETE = "focus_session_complete"
    ACHIEVEMENT_CLAIMED = "achievement_claimed"

    @property
    def is_daily_activity(self) -> bool:
        """Events that count towards the daily streak"""
        return self in (
            EventType.TASK_COMPLETE,
            EventType.HABIT_COMPLETE,
            EventType.FOCUS_SESSION_COMPLETE,
        )


class GamificationEvent(BaseModel):
    event_type: EventType
    xp_amount: int = 0
    is_quick_task: bool = False
    trigger_reward: bool = False
    special: Optional[str] = None
    source_id: Optional[str] = None


class LevelProgress(BaseModel):
    """Numbers for a level progress bar"""
    current_level: int
    xp_in_level: int
    xp_needed: int
    progress: float  # percent, 0-100


class XpAward(BaseModel):
    xp_awarded: int
    old_level: int
    new_level: int
    leveled_up: bool


class StreakResult(BaseModel):
    current_streak: int
    longest_streak: int
    streak_shields: int
    last_active_date: date
    shield_used: bool = False
    shield_earned: bool = False
    streak_broken: bool = False
    changed: bool = True
    message: str = ""


class RewardRoll(BaseModel):
    rarity: RewardRarity
    effect: str


class RewardLogEntry(BaseModel):
    rarity: RewardRarity
    effect: str
    trigger: Optional[str] = None
    logged_at: datetime


class GamificationEventResult(BaseModel):
    """Consolidated outcome of one event, plus the state to persist"""
    xp_awarded: int
    bonus_xp: int = 0
    leveled_up: bool = False
    old_level: int
    new_level: Optional[int] = None
    newly_unlocked_features: list[FeatureCode] = Field(default_factory=list)
    newly_unlocked_achievements: list[str] = Field(default_factory=list)
    streak_result: Optional[StreakResult] = None
    reward_rolled: Optional[RewardRoll] = None
    reward_log_entry: Optional[RewardLogEntry] = None
    creature_spawned: Optional[SpawnResult] = None
    degraded_steps: list[str] = Field(default_factory=list)
    state: UserGameState
    owned_creatures: dict[str, int] = Field(default_factory=dict)
