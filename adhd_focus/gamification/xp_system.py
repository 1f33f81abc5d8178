"""
XP and Leveling System

Linear leveling curve: every level costs 100 XP, level 1 starts at 0 XP.

XP Award Rules (completed task):
- Base: 10 XP
- Quick task (5 minutes or less): +5 XP
- Priority multiplier: must 1.5x, should 1.0x, want 0.8x, someday 0.5x
- Energy bonus: low +0, medium +2, high +5
- Finished on or before the due date: +5 XP
- Streak multiplier: +10% per streak day, capped at 2x
"""

from typing import Optional, Tuple
from datetime import date, datetime
import logging
import math

from adhd_focus.exceptions import InvalidInputError
from adhd_focus.models.event import LevelProgress, XpAward
from adhd_focus.models.game_state import UserGameState, XP_PER_LEVEL

logger = logging.getLogger(__name__)

XP_CONFIG = {
    "task_complete": 10,
    "quick_task_bonus": 5,
    "quick_task_minutes": 5,
    "priority_multiplier": {
        "must": 1.5,
        "should": 1.0,
        "want": 0.8,
        "someday": 0.5,
    },
    "energy_bonus": {
        "low": 0,
        "medium": 2,
        "high": 5,
    },
    "streak_multiplier": 0.1,
    "max_streak_multiplier": 2.0,
    "deadline_bonus": 5,
}


def xp_for_level(level: int) -> int:
    """Total XP at which a level begins"""
    if level <= 1:
        return 0
    return (level - 1) * XP_PER_LEVEL


def level_from_xp(xp: int) -> int:
    """Level reached with this much total XP (xp must not be negative)"""
    return xp // XP_PER_LEVEL + 1


def xp_to_next_level(xp: int) -> LevelProgress:
    """
    Progress within the current level

    Returns:
        LevelProgress with current_level, xp_in_level, xp_needed and
        progress as a percentage
    """
    current_level = level_from_xp(xp)
    level_start = xp_for_level(current_level)
    xp_needed = xp_for_level(current_level + 1) - level_start
    xp_in_level = xp - level_start
    progress = (xp_in_level / xp_needed) * 100 if xp_needed > 0 else 100.0

    return LevelProgress(
        current_level=current_level,
        xp_in_level=xp_in_level,
        xp_needed=xp_needed,
        progress=progress,
    )


def calculate_task_xp(
    priority: Optional[str] = None,
    energy_required: Optional[str] = None,
    estimated_minutes: Optional[int] = None,
    due_date: Optional[date] = None,
    completed_at: Optional[datetime] = None,
    streak_days: int = 0,
) -> int:
    """
    Calculate XP for a completed task

    Args:
        priority: must / should / want / someday (defaults to should)
        energy_required: low / medium / high (defaults to medium)
        estimated_minutes: Estimated duration, quick bonus at 5 or less
        due_date: Task due date
        completed_at: When the task was completed
        streak_days: Current daily streak

    Returns:
        XP amount to award
    """
    xp = float(XP_CONFIG["task_complete"])

    if estimated_minutes and estimated_minutes <= XP_CONFIG["quick_task_minutes"]:
        xp += XP_CONFIG["quick_task_bonus"]

    xp *= XP_CONFIG["priority_multiplier"].get(priority or "should", 1.0)
    xp += XP_CONFIG["energy_bonus"].get(energy_required or "medium", 0)

    if due_date is not None and completed_at is not None:
        if isinstance(due_date, datetime):
            due_date = due_date.date()
        if completed_at.date() <= due_date:
            xp += XP_CONFIG["deadline_bonus"]

    streak_multiplier = min(
        1 + max(streak_days, 0) * XP_CONFIG["streak_multiplier"],
        XP_CONFIG["max_streak_multiplier"],
    )
    xp *= streak_multiplier

    # Round first so 17.999999 from float multiplication floors to 18
    return math.floor(round(xp, 6))


def award_xp(state: UserGameState, amount: int) -> Tuple[UserGameState, XpAward]:
    """
    Add XP to a state snapshot and recompute the level

    Raises:
        InvalidInputError: amount is negative
    """
    if amount < 0:
        raise InvalidInputError("XP amount must not be negative", field="xp_amount", value=amount)

    old_level = state.level
    new_xp = state.xp + amount
    new_level = level_from_xp(new_xp)
    leveled_up = new_level > old_level

    new_state = state.evolve(xp=new_xp, level=new_level)

    logger.debug(f"Awarded {amount} XP: total {new_xp}, level {new_level}")
    if leveled_up:
        logger.info(f"Level up from {old_level} to {new_level}")

    return new_state, XpAward(
        xp_awarded=amount,
        old_level=old_level,
        new_level=new_level,
        leveled_up=leveled_up,
    )
