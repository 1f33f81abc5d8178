"""Unit tests for Streak System (adhd_focus/gamification/streak_system.py)"""
import pytest
from datetime import date, timedelta

from adhd_focus.exceptions import InvalidInputError
from adhd_focus.gamification.streak_system import (
    update_streak,
    apply_streak,
    format_streak_display,
)

TODAY = date(2024, 3, 15)


# ============================================================================
# Streak Update Tests
# ============================================================================

def test_update_streak_first_activity():
    """Test first activity creates streak of 1"""
    result = update_streak(None, 0, 0, 0, TODAY)

    assert result.current_streak == 1
    assert result.longest_streak == 1
    assert result.last_active_date == TODAY
    assert result.streak_broken is False


def test_update_streak_consecutive_day():
    """Test consecutive day activity increments streak"""
    result = update_streak(TODAY - timedelta(days=1), 5, 10, 2, TODAY)

    assert result.current_streak == 6
    assert result.longest_streak == 10  # Unchanged
    assert result.streak_shields == 2


def test_update_streak_same_day_no_change():
    """Test activity on same day doesn't increment streak again"""
    result = update_streak(TODAY, 3, 5, 1, TODAY)

    assert result.current_streak == 3
    assert result.streak_shields == 1
    assert result.changed is False
    assert result.message


def test_update_streak_same_day_is_idempotent():
    """Test applying the same day twice equals applying it once"""
    first = update_streak(TODAY - timedelta(days=1), 4, 4, 0, TODAY)
    second = update_streak(
        first.last_active_date, first.current_streak, first.longest_streak, first.streak_shields, TODAY
    )

    assert second.current_streak == first.current_streak
    assert second.longest_streak == first.longest_streak
    assert second.streak_shields == first.streak_shields


def test_update_streak_one_missed_day_without_shield_breaks():
    """Test a 2-day gap with no shield resets to 1"""
    result = update_streak(TODAY - timedelta(days=2), 5, 5, 0, TODAY)

    assert result.current_streak == 1
    assert result.longest_streak == 5
    assert result.streak_broken is True
    assert result.shield_used is False


def test_update_streak_one_missed_day_uses_shield():
    """Test a shield forgives exactly one missed day"""
    result = update_streak(TODAY - timedelta(days=2), 5, 5, 2, TODAY)

    assert result.current_streak == 6
    assert result.streak_shields == 1
    assert result.shield_used is True
    assert result.streak_broken is False


def test_update_streak_longer_gap_breaks_even_with_shields():
    """Test shields do not cover two or more missed days"""
    result = update_streak(TODAY - timedelta(days=3), 9, 12, 3, TODAY)

    assert result.current_streak == 1
    assert result.longest_streak == 12
    assert result.streak_shields == 3
    assert result.streak_broken is True


def test_update_streak_seven_day_milestone_earns_shield():
    """Test reaching day 7 earns a shield"""
    result = update_streak(TODAY - timedelta(days=1), 6, 6, 0, TODAY)

    assert result.current_streak == 7
    assert result.longest_streak == 7
    assert result.streak_shields == 1
    assert result.shield_earned is True


def test_update_streak_fourteen_day_milestone_earns_shield():
    """Test every multiple of 7 earns a shield"""
    result = update_streak(TODAY - timedelta(days=1), 13, 20, 1, TODAY)

    assert result.current_streak == 14
    assert result.streak_shields == 2
    assert result.shield_earned is True


def test_update_streak_shields_capped_at_three():
    """Test no shield is earned while three are held"""
    result = update_streak(TODAY - timedelta(days=1), 6, 6, 3, TODAY)

    assert result.current_streak == 7
    assert result.streak_shields == 3
    assert result.shield_earned is False


def test_update_streak_shield_used_then_milestone():
    """Test a shield spent on day 7 is replaced by the milestone shield"""
    result = update_streak(TODAY - timedelta(days=2), 6, 6, 1, TODAY)

    assert result.current_streak == 7
    assert result.shield_used is True
    assert result.shield_earned is True
    assert result.streak_shields == 1


def test_update_streak_no_milestone_between_multiples():
    """Test non-multiples of 7 earn nothing"""
    result = update_streak(TODAY - timedelta(days=1), 7, 7, 1, TODAY)

    assert result.current_streak == 8
    assert result.shield_earned is False
    assert result.streak_shields == 1


def test_update_streak_date_before_last_active_raises():
    """Test going backwards in time is rejected"""
    with pytest.raises(InvalidInputError):
        update_streak(TODAY, 3, 3, 0, TODAY - timedelta(days=1))


@pytest.mark.parametrize("shields", [-1, 4])
def test_update_streak_invalid_shield_count_raises(shields):
    """Test shields outside 0-3 are rejected"""
    with pytest.raises(InvalidInputError) as exc_info:
        update_streak(TODAY - timedelta(days=1), 3, 3, shields, TODAY)

    assert exc_info.value.field == "streak_shields"


def test_update_streak_negative_counter_raises():
    """Test negative streak counters are rejected"""
    with pytest.raises(InvalidInputError):
        update_streak(TODAY - timedelta(days=1), -1, 3, 0, TODAY)


# ============================================================================
# State Integration Tests
# ============================================================================

def test_apply_streak_updates_state(fresh_state):
    """Test apply_streak writes the new counters into a new snapshot"""
    new_state, result = apply_streak(fresh_state, TODAY)

    assert new_state.current_streak == 1
    assert new_state.last_active_date == TODAY
    assert fresh_state.current_streak == 0
    assert result.changed is True


def test_apply_streak_same_day_returns_same_state(fresh_state):
    """Test same-day activity returns the snapshot untouched"""
    state, _ = apply_streak(fresh_state, TODAY)

    again, result = apply_streak(state, TODAY)

    assert again is state
    assert result.changed is False


# ============================================================================
# Display Tests
# ============================================================================

def test_format_streak_display_with_best_and_shields():
    """Test display includes best streak and shields when relevant"""
    result = update_streak(TODAY - timedelta(days=1), 11, 20, 1, TODAY)

    display = format_streak_display(result)

    assert "12 days" in display
    assert "best: 20" in display
    assert "×1" in display


def test_format_streak_display_single_day():
    """Test singular wording for day 1"""
    result = update_streak(None, 0, 0, 0, TODAY)

    assert "1 day" in format_streak_display(result)
    assert "days" not in format_streak_display(result)
