"""Collectible creature models"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from adhd_focus.models.rarity import CreatureRarity

DEFAULT_SPAWN_WEIGHT = 100


class TimeRange(BaseModel):
    """
    Hour window: start_hour <= hour < end_hour.

    A window with start_hour > end_hour matches nothing unless
    wraps_midnight is set, in which case it runs from start_hour through
    midnight to end_hour.
    """
    start_hour: int = Field(ge=0, le=23)
    end_hour: int = Field(ge=0, le=24)
    wraps_midnight: bool = False

    def contains(self, hour: int) -> bool:
        if self.wraps_midnight and self.start_hour > self.end_hour:
            return hour >= self.start_hour or hour < self.end_hour
        return self.start_hour <= hour < self.end_hour


class SpawnConditions(BaseModel):
    """Every condition that is set must hold for the creature to be eligible"""
    on_task_complete: bool = False
    on_quick_task: bool = False
    on_streak_day: Optional[int] = Field(None, ge=0)
    on_level: Optional[int] = Field(None, ge=0)
    on_time_range: Optional[TimeRange] = None
    on_special: Optional[str] = None


class CreatureDefinition(BaseModel):
    """Catalog row for a collectible creature"""
    code: str = Field(min_length=1)
    name: str
    emoji: str = ""
    description: str = ""
    rarity: CreatureRarity
    spawn_chance: int = Field(DEFAULT_SPAWN_WEIGHT, gt=0)
    spawn_conditions: Optional[SpawnConditions] = None

    @field_validator('spawn_chance', mode='before')
    @classmethod
    def default_weight(cls, v):
        """Missing or zero weight falls back to the default"""
        if v is None or v == 0:
            return DEFAULT_SPAWN_WEIGHT
        return v


class SpawnContext(BaseModel):
    """Situation a spawn is rolled in"""
    on_task_complete: bool = True
    is_quick_task: bool = False
    streak_days: int = Field(0, ge=0)
    level: int = Field(1, ge=1)
    current_hour: int = Field(ge=0, le=23)
    special: Optional[str] = None


class SpawnOutcome(str, Enum):
    SPAWNED = "spawned"
    SPAWN_ROLL_FAILED = "spawn_roll_failed"
    NO_ELIGIBLE_CREATURES = "no_eligible_creatures"


class SpawnResult(BaseModel):
    """Result of a spawn attempt; owned_counts is the updated ownership map"""
    creature: Optional[CreatureDefinition] = None
    is_new: bool = False
    new_count: int = 0
    reason: SpawnOutcome
    owned_counts: dict[str, int] = Field(default_factory=dict)
