"""Progressive feature unlock models"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class FeatureCode(str, Enum):
    """App capabilities revealed as the user progresses"""
    INBOX = "inbox"
    TODAY = "today"
    PRIORITY = "priority"
    ENERGY = "energy"
    PROJECTS = "projects"
    SCHEDULED = "scheduled"
    DESCRIPTION = "description"
    QUICK_ACTIONS = "quick_actions"
    TAGS = "tags"
    FOCUS_MODE = "focus_mode"
    STATS = "stats"
    THEMES = "themes"
    SETTINGS = "settings"
    NOTIFICATIONS = "notifications"
    ADVANCED_STATS = "advanced_stats"
    CHECKLIST = "checklist"


class FeatureDefinition(BaseModel):
    """Catalog row: when a feature unlocks (any one criterion is enough)"""
    code: FeatureCode
    name: str
    description: str = ""
    unlock_level: int = Field(ge=0)
    unlock_task_count: Optional[int] = Field(None, ge=0)
    unlock_achievement_code: Optional[str] = None
    sort_order: int = 0


class FeatureUnlockResult(BaseModel):
    """Full unlocked set plus the delta for toasts"""
    unlocked: frozenset[FeatureCode]
    newly_unlocked: list[FeatureCode] = Field(default_factory=list)
