"""
Daily Streak Tracking System

Tracks one continuous daily-activity streak per user.

Features:
- Streak shields: a shield forgives exactly one missed day
- A shield is earned on every 7-day milestone (max 3 held)
- Best streak tracking
- Idempotent within a calendar day
"""

from typing import Optional
from datetime import date
import logging

from adhd_focus.exceptions import InvalidInputError
from adhd_focus.models.event import StreakResult
from adhd_focus.models.game_state import UserGameState, MAX_STREAK_SHIELDS

logger = logging.getLogger(__name__)

SHIELD_EARN_INTERVAL = 7


def update_streak(
    last_active_date: Optional[date],
    current_streak: int,
    longest_streak: int,
    streak_shields: int,
    today: date,
) -> StreakResult:
    """
    Compute the streak after the first qualifying activity of `today`

    Logic:
    - Same day as last activity: no change
    - First activity ever: streak starts at 1
    - Next day: streak continues
    - Exactly one missed day and a shield held: shield spent, streak continues
    - Any other gap: streak resets to 1
    - Every multiple of 7 earns a shield while fewer than 3 are held
    - Best streak follows the current streak upwards

    Args:
        last_active_date: Date of the previous qualifying activity (None if never)
        current_streak: Streak before this activity
        longest_streak: Best streak so far
        streak_shields: Shields held (0-3)
        today: The activity date, from the injected clock

    Returns:
        StreakResult with the new counters and shield_used / shield_earned /
        streak_broken flags

    Raises:
        InvalidInputError: shields out of range, negative counters, or
            `today` earlier than `last_active_date`
    """
    if not 0 <= streak_shields <= MAX_STREAK_SHIELDS:
        raise InvalidInputError(
            f"Streak shields must be between 0 and {MAX_STREAK_SHIELDS}",
            field="streak_shields",
            value=streak_shields,
        )
    if current_streak < 0 or longest_streak < 0:
        raise InvalidInputError(
            "Streak counters must not be negative",
            field="current_streak",
            value=current_streak,
        )
    if last_active_date is not None and today < last_active_date:
        raise InvalidInputError(
            "Activity date is earlier than the last active date",
            field="today",
            value=today.isoformat(),
        )

    # Already counted for today
    if last_active_date == today:
        return StreakResult(
            current_streak=current_streak,
            longest_streak=longest_streak,
            streak_shields=streak_shields,
            last_active_date=today,
            changed=False,
            message=f"Streak continues! Day {current_streak} 🔥",
        )

    shield_used = False
    shield_earned = False
    streak_broken = False

    if last_active_date is None:
        current_streak = 1
        message = "Streak started! Day 1 🎉"

    else:
        gap_days = (today - last_active_date).days

        if gap_days == 1:
            current_streak += 1
            message = f"Streak continues! Day {current_streak} 🔥"

        elif gap_days == 2 and streak_shields > 0:
            streak_shields -= 1
            current_streak += 1
            shield_used = True
            message = f"Streak protected with a shield! Day {current_streak} 🛡️"
            logger.info(f"Shield used to protect streak, {streak_shields} remaining")

        else:
            old_streak = current_streak
            streak_broken = old_streak > 0
            current_streak = 1
            message = f"Streak reset. Previous: {old_streak} days. Starting fresh! Day 1 💪"
            logger.info(f"Streak broken: was {old_streak}, gap was {gap_days} days")

    if (
        current_streak > 0
        and current_streak % SHIELD_EARN_INTERVAL == 0
        and streak_shields < MAX_STREAK_SHIELDS
    ):
        streak_shields += 1
        shield_earned = True
        message += f"\n🛡️ {current_streak}-day milestone! Shield earned ({streak_shields}/{MAX_STREAK_SHIELDS})"
        logger.info(f"Shield earned at {current_streak}-day streak")

    longest_streak = max(longest_streak, current_streak)

    return StreakResult(
        current_streak=current_streak,
        longest_streak=longest_streak,
        streak_shields=streak_shields,
        last_active_date=today,
        shield_used=shield_used,
        shield_earned=shield_earned,
        streak_broken=streak_broken,
        changed=True,
        message=message,
    )


def apply_streak(state: UserGameState, today: date) -> tuple[UserGameState, StreakResult]:
    """Run update_streak against a state snapshot and return the new snapshot"""
    result = update_streak(
        last_active_date=state.last_active_date,
        current_streak=state.current_streak,
        longest_streak=state.longest_streak,
        streak_shields=state.streak_shields,
        today=today,
    )
    if not result.changed:
        return state, result

    new_state = state.evolve(
        current_streak=result.current_streak,
        longest_streak=result.longest_streak,
        streak_shields=result.streak_shields,
        last_active_date=result.last_active_date,
    )
    return new_state, result


def format_streak_display(result: StreakResult) -> str:
    """
    Format a streak for display

    Args:
        result: Output of update_streak()

    Returns:
        One-line summary such as "🔥 12 days (best: 20) 🛡️×2"
    """
    if result.current_streak == 0:
        return "No streak yet. Finish something today to start one! 💪"

    line = f"🔥 {result.current_streak} day{'s' if result.current_streak != 1 else ''}"
    if result.longest_streak > result.current_streak:
        line += f" (best: {result.longest_streak})"
    if result.streak_shields > 0:
        line += f" 🛡️×{result.streak_shields}"
    return line
