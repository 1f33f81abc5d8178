"""Per-user gamification state snapshot"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from adhd_focus.models.feature import FeatureCode
from adhd_focus.models.rarity import RewardRarity

XP_PER_LEVEL = 100
MAX_STREAK_SHIELDS = 3


class UserGameState(BaseModel):
    """
    Persisted gamification fields for one user.

    The engine never mutates a snapshot it was given; every transition
    returns a new instance. Level is derived from XP and validated here.
    """
    xp: int = Field(0, ge=0)
    level: int = Field(1, ge=1)
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    streak_shields: int = Field(0, ge=0, le=MAX_STREAK_SHIELDS)
    last_active_date: Optional[date] = None
    total_tasks_completed: int = Field(0, ge=0)
    total_creatures: int = Field(0, ge=0)
    unlocked_features: frozenset[FeatureCode] = frozenset({FeatureCode.INBOX})
    unlocked_achievements: frozenset[str] = frozenset()
    rarest_reward_seen: Optional[RewardRarity] = None

    @model_validator(mode='after')
    def check_invariants(self) -> 'UserGameState':
        expected_level = self.xp // XP_PER_LEVEL + 1
        if self.level != expected_level:
            raise ValueError(
                f"level {self.level} does not match xp {self.xp} (expected {expected_level})"
            )
        if self.longest_streak < self.current_streak:
            raise ValueError(
                f"longest_streak {self.longest_streak} is below current_streak {self.current_streak}"
            )
        return self

    def evolve(self, **changes) -> 'UserGameState':
        """Return a validated copy with the given fields replaced"""
        data = self.model_dump()
        data.update(changes)
        return UserGameState(**data)


def new_user_state() -> UserGameState:
    """Fresh state for an account that has never earned anything"""
    return UserGameState(
        xp=0,
        level=1,
        current_streak=0,
        longest_streak=0,
        streak_shields=0,
        last_active_date=None,
        total_tasks_completed=0,
        total_creatures=0,
        unlocked_features=frozenset({FeatureCode.INBOX}),
        unlocked_achievements=frozenset(),
        rarest_reward_seen=None,
    )
