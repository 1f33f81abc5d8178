"""Achievement models for gamification"""
from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from adhd_focus.models.feature import FeatureCode


class AchievementConditionType(str, Enum):
    """How an achievement's condition_value is interpreted"""
    TASK_COUNT = "task_count"
    STREAK_DAYS = "streak_days"
    LONGEST_STREAK = "longest_streak"
    LEVEL = "level"
    TIME = "time"
    SPECIAL = "special"


class AchievementDefinition(BaseModel):
    """Achievement definition"""
    code: str
    name: str
    description: str = ""
    icon: str = ""
    category: str = "progress"
    condition_type: AchievementConditionType
    condition_value: dict[str, Any] = Field(default_factory=dict)
    xp_reward: int = Field(0, ge=0)
    unlocks_feature: Optional[FeatureCode] = None
