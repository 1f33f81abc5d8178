"""Unit tests for the gamification orchestrator (adhd_focus/gamification/orchestrator.py)"""
import pytest
import random
from datetime import date, datetime, timezone

from adhd_focus.exceptions import InvalidInputError
from adhd_focus.gamification.achievement_system import DEFAULT_ACHIEVEMENTS
from adhd_focus.gamification.orchestrator import GamificationEngine
from adhd_focus.models import (
    CreatureDefinition,
    CreatureRarity,
    EventType,
    FeatureCode,
    GamificationEvent,
    SpawnOutcome,
    UserGameState,
)


@pytest.fixture
def quiet_engine():
    """Engine without achievements or cosmetic extras"""
    return GamificationEngine(
        achievements=[],
        rng=random.Random(7),
        enable_rewards=False,
        enable_creatures=False,
    )


@pytest.fixture
def one_creature():
    return [CreatureDefinition(code="task_ant", name="Task Ant", rarity=CreatureRarity.COMMON, spawn_chance=200)]


def task_event(xp=10, **kwargs):
    return GamificationEvent(event_type=EventType.TASK_COMPLETE, xp_amount=xp, **kwargs)


# ============================================================================
# Core Flow Tests
# ============================================================================

def test_level_up_unlocks_today(quiet_engine, level_one_state, now):
    """Test 95 XP + 10 XP reaches level 2 and unlocks Today"""
    result = quiet_engine.process_event(level_one_state, task_event(10), now)

    assert result.state.xp == 105
    assert result.state.level == 2
    assert result.leveled_up is True
    assert result.old_level == 1
    assert result.new_level == 2
    assert result.newly_unlocked_features == [FeatureCode.TODAY]
    assert FeatureCode.TODAY in result.state.unlocked_features


def test_task_complete_counts_task_and_starts_streak(quiet_engine, fresh_state, now):
    """Test a completed task bumps the task counter and the streak"""
    result = quiet_engine.process_event(fresh_state, task_event(12), now)

    assert result.state.total_tasks_completed == 1
    assert result.state.current_streak == 1
    assert result.state.last_active_date == now.date()
    assert result.streak_result.current_streak == 1


def test_streak_milestone_earns_shield(quiet_engine, now):
    """Test day 7 of a streak earns a shield"""
    state = UserGameState(current_streak=6, longest_streak=6, last_active_date=date(2024, 3, 14))

    result = quiet_engine.process_event(
        state, GamificationEvent(event_type=EventType.HABIT_COMPLETE, xp_amount=0), now
    )

    assert result.state.current_streak == 7
    assert result.state.streak_shields == 1
    assert result.streak_result.shield_earned is True


def test_quest_complete_does_not_touch_streak(quiet_engine, fresh_state, now):
    """Test non-daily-activity events leave the streak alone"""
    result = quiet_engine.process_event(
        fresh_state, GamificationEvent(event_type=EventType.QUEST_COMPLETE, xp_amount=25), now
    )

    assert result.streak_result is None
    assert result.state.current_streak == 0
    assert result.state.total_tasks_completed == 0
    assert result.state.xp == 25


def test_input_state_not_mutated(quiet_engine, level_one_state, now):
    """Test the engine never modifies the snapshot it was given"""
    before = level_one_state.model_dump()

    quiet_engine.process_event(level_one_state, task_event(500), now)

    assert level_one_state.model_dump() == before


def test_negative_xp_rejected(quiet_engine, fresh_state, now):
    """Test negative XP fails the whole event"""
    with pytest.raises(InvalidInputError):
        quiet_engine.process_event(fresh_state, task_event(-5), now)


def test_no_level_up_still_reports_level(quiet_engine, fresh_state, now):
    """Test new_level is reported even without a level up"""
    result = quiet_engine.process_event(fresh_state, task_event(5), now)

    assert result.leveled_up is False
    assert result.new_level == 1


# ============================================================================
# Achievement Tests
# ============================================================================

def test_first_task_achievement_adds_bonus_xp(fresh_state, now):
    """Test achievement XP is credited on top of the event XP"""
    engine = GamificationEngine(enable_rewards=False, enable_creatures=False)

    result = engine.process_event(fresh_state, task_event(12), now)

    assert result.newly_unlocked_achievements == ["first_task"]
    assert result.bonus_xp == 10
    assert result.state.xp == 22
    assert "first_task" in result.state.unlocked_achievements


def test_achievement_bonus_can_cause_level_up(now):
    """Test bonus XP counts towards the level"""
    engine = GamificationEngine(enable_rewards=False, enable_creatures=False)
    state = UserGameState(xp=85, level=1)

    result = engine.process_event(state, task_event(10), now)

    assert result.state.xp == 105
    assert result.leveled_up is True
    assert FeatureCode.TODAY in result.newly_unlocked_features


def test_streak_achievement_unlocks_checklist(now):
    """Test the 3-day streak achievement grants the checklist"""
    engine = GamificationEngine(enable_rewards=False, enable_creatures=False)
    state = UserGameState(
        current_streak=2,
        longest_streak=2,
        last_active_date=date(2024, 3, 14),
        unlocked_achievements=frozenset({"first_task"}),
        total_tasks_completed=1,
    )

    result = engine.process_event(state, task_event(10), now)

    assert "streak_3" in result.newly_unlocked_achievements
    assert FeatureCode.CHECKLIST in result.newly_unlocked_features
    assert result.newly_unlocked_features.count(FeatureCode.CHECKLIST) == 1


def test_time_achievement_uses_event_clock(fresh_state):
    """Test hidden time achievements read the injected time"""
    night_owl = [a for a in DEFAULT_ACHIEVEMENTS if a.code == "night_owl"]
    engine = GamificationEngine(achievements=night_owl, enable_rewards=False, enable_creatures=False)

    result = engine.process_event(
        fresh_state, task_event(10), datetime(2024, 3, 15, 0, 20, tzinfo=timezone.utc)
    )

    assert result.newly_unlocked_achievements == ["night_owl"]


# ============================================================================
# Cosmetic Extras Tests
# ============================================================================

def test_level_up_rolls_reward(level_one_state, now):
    """Test a level up triggers a celebration roll and tracks rarest"""
    engine = GamificationEngine(achievements=[], rng=random.Random(3), enable_creatures=False)

    result = engine.process_event(level_one_state, task_event(10), now)

    assert result.reward_rolled is not None
    assert result.state.rarest_reward_seen == result.reward_rolled.rarity


def test_level_up_reward_carries_log_entry(level_one_state, now):
    """Test the level-up roll comes back with its reward log entry"""
    engine = GamificationEngine(achievements=[], rng=random.Random(3), enable_creatures=False)

    result = engine.process_event(level_one_state, task_event(10), now)

    entry = result.reward_log_entry
    assert entry is not None
    assert entry.trigger == "level_up"
    assert entry.rarity == result.reward_rolled.rarity
    assert entry.effect == result.reward_rolled.effect
    assert entry.logged_at == now


def test_requested_reward_logged_with_event_type(fresh_state, now):
    """Test a reward asked for by the event is logged under the event type"""
    engine = GamificationEngine(achievements=[], rng=random.Random(3), enable_creatures=False)

    result = engine.process_event(fresh_state, task_event(5, trigger_reward=True), now)

    assert result.new_level == 1
    assert result.reward_log_entry is not None
    assert result.reward_log_entry.trigger == "task_complete"


def test_no_log_entry_without_reward(fresh_state, now):
    """Test no reward means no log entry"""
    engine = GamificationEngine(achievements=[], enable_creatures=False)

    result = engine.process_event(fresh_state, task_event(5), now)

    assert result.reward_log_entry is None


def test_no_reward_without_trigger(fresh_state, now):
    """Test plain events without a level up roll nothing"""
    engine = GamificationEngine(achievements=[], enable_creatures=False)

    result = engine.process_event(fresh_state, task_event(5), now)

    assert result.reward_rolled is None


def test_reward_failure_degrades_gracefully(fresh_state, now):
    """Test a broken effect table keeps the core result"""
    engine = GamificationEngine(achievements=[], enable_creatures=False, effects_by_rarity={})

    result = engine.process_event(fresh_state, task_event(20, trigger_reward=True), now)

    assert result.reward_rolled is None
    assert "reward_roll" in result.degraded_steps
    assert result.state.xp == 20
    assert result.state.rarest_reward_seen is None


def test_creature_spawn_updates_ownership(fresh_state, now, one_creature):
    """Test a guaranteed spawn adds the creature and counts it once"""
    engine = GamificationEngine(
        achievements=[], creatures=one_creature, enable_rewards=False, spawn_chance=1.0, rng=random.Random(1)
    )
    owned = {}

    first = engine.process_event(fresh_state, task_event(10), now, owned)
    second = engine.process_event(first.state, task_event(10), now, first.owned_creatures)

    assert first.creature_spawned.reason == SpawnOutcome.SPAWNED
    assert first.creature_spawned.is_new is True
    assert first.state.total_creatures == 1
    assert second.creature_spawned.is_new is False
    assert second.owned_creatures == {"task_ant": 2}
    assert second.state.total_creatures == 1
    assert owned == {}


def test_creature_spawn_skipped_for_quest_events(fresh_state, now, one_creature):
    """Test only task completions or explicit triggers roll creatures"""
    engine = GamificationEngine(
        achievements=[], creatures=one_creature, enable_rewards=False, spawn_chance=1.0
    )

    result = engine.process_event(
        fresh_state, GamificationEvent(event_type=EventType.QUEST_COMPLETE, xp_amount=10), now
    )

    assert result.creature_spawned is None


def test_empty_creature_catalog_degrades(fresh_state, now):
    """Test an empty creature catalog is reported, not raised"""
    engine = GamificationEngine(achievements=[], creatures=[], enable_rewards=False, spawn_chance=1.0)

    result = engine.process_event(fresh_state, task_event(10), now)

    assert result.creature_spawned is None
    assert result.degraded_steps == ["creature_spawn"]
    assert result.state.xp == 10
