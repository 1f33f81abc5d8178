"""Daily quest models"""
from datetime import date as dt_date
from pydantic import BaseModel, Field, model_validator
from uuid import UUID, uuid4


class QuestTemplate(BaseModel):
    """Pool entry a daily quest is created from"""
    quest_type: str
    label: str
    emoji: str = ""
    target: int = Field(ge=1)
    xp_reward: int = Field(ge=0)
    min_level: int = Field(1, ge=1)


class DailyQuest(BaseModel):
    """A user's quest for one calendar date"""
    id: UUID = Field(default_factory=uuid4)
    user_id: str
    date: dt_date
    quest_type: str
    label: str = ""
    emoji: str = ""
    target: int = Field(ge=1)
    progress: int = Field(0, ge=0)
    completed: bool = False
    xp_reward: int = Field(ge=0)

    @model_validator(mode='after')
    def progress_within_target(self) -> 'DailyQuest':
        if self.progress > self.target:
            raise ValueError(f"progress {self.progress} exceeds target {self.target}")
        return self


class QuestProgressResult(BaseModel):
    quest: DailyQuest
    just_completed: bool = False
    xp_awarded: int = 0
