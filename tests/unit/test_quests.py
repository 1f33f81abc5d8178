"""Unit tests for daily quests (adhd_focus/gamification/quests.py)"""
import pytest
from datetime import date, timedelta

from adhd_focus.exceptions import InvalidInputError
from adhd_focus.gamification.quests import (
    QUEST_POOL,
    hash_code,
    select_quests,
    create_daily_quests,
    ensure_daily_quests,
    update_quest_progress,
    find_quest,
)
from adhd_focus.models import DailyQuest

QUEST_DATE = date(2024, 3, 15)


# ============================================================================
# Hash Tests
# ============================================================================

def test_hash_code_known_values():
    """Test the rolling hash on short strings"""
    assert hash_code("") == 0
    assert hash_code("a") == 97
    assert hash_code("ab") == 3105


def test_hash_code_wraps_to_signed_32_bit():
    """Test long inputs stay inside the signed 32-bit range"""
    value = hash_code("2024-03-15-" + "x" * 200)

    assert -(2 ** 31) <= value < 2 ** 31


def test_hash_code_non_ascii():
    """Test characters outside the BMP hash as two code units"""
    # U+1F525 is the surrogate pair D83D DD25
    assert hash_code("🔥") == 0xD83D * 31 + 0xDD25


# ============================================================================
# Selection Tests
# ============================================================================

def test_select_quests_deterministic():
    """Test the same user and date always get the same quests"""
    first = select_quests(10, "user-1", QUEST_DATE)
    second = select_quests(10, "user-1", QUEST_DATE)

    assert [q.quest_type for q in first] == [q.quest_type for q in second]
    assert len(first) == 3


def test_select_quests_varies_across_users_and_days():
    """Test different seeds produce at least some different picks"""
    picks = {
        tuple(q.quest_type for q in select_quests(10, f"user-{i}", QUEST_DATE + timedelta(days=i)))
        for i in range(20)
    }

    assert len(picks) > 1


def test_select_quests_varies_across_users_same_day():
    """Test users get different picks on the same day"""
    picks = {
        tuple(q.quest_type for q in select_quests(10, f"user-{i}", QUEST_DATE))
        for i in range(20)
    }

    assert len(picks) > 1


def test_select_quests_varies_across_days_same_user():
    """Test one user's picks change from day to day"""
    picks = {
        tuple(q.quest_type for q in select_quests(10, "user-1", QUEST_DATE + timedelta(days=i)))
        for i in range(20)
    }

    assert len(picks) > 1


def test_select_quests_respects_min_level():
    """Test templates above the user's level are never chosen"""
    for i in range(20):
        picked = select_quests(2, f"user-{i}", QUEST_DATE)
        assert all(q.min_level <= 2 for q in picked)


def test_select_quests_returns_all_when_pool_small():
    """Test a level 1 user gets every eligible template, in pool order"""
    picked = select_quests(1, "user-1", QUEST_DATE)

    assert [q.quest_type for q in picked] == ["complete_tasks", "add_tasks"]


def test_select_quests_no_duplicates():
    """Test selected quests are distinct"""
    picked = select_quests(10, "user-7", QUEST_DATE)

    assert len({q.quest_type for q in picked}) == len(picked)


def test_select_quests_custom_count():
    """Test the count is configurable"""
    assert len(select_quests(10, "user-1", QUEST_DATE, count=5)) == 5


# ============================================================================
# Creation Tests
# ============================================================================

def test_create_daily_quests_from_templates(test_user_id):
    """Test quests start at zero progress for the given date"""
    quests = create_daily_quests(test_user_id, 5, QUEST_DATE)

    assert len(quests) == 3
    for quest in quests:
        assert quest.user_id == test_user_id
        assert quest.date == QUEST_DATE
        assert quest.progress == 0
        assert quest.completed is False


def test_ensure_daily_quests_creates_once(test_user_id):
    """Test quests are created on first fetch and reused afterwards"""
    quests, created = ensure_daily_quests([], test_user_id, 5, QUEST_DATE)
    again, created_again = ensure_daily_quests(quests, test_user_id, 5, QUEST_DATE)

    assert created is True
    assert created_again is False
    assert [q.id for q in again] == [q.id for q in quests]


def test_ensure_daily_quests_ignores_other_days(test_user_id):
    """Test yesterday's quests do not count for today"""
    yesterday, _ = ensure_daily_quests([], test_user_id, 5, QUEST_DATE - timedelta(days=1))

    today, created = ensure_daily_quests(yesterday, test_user_id, 5, QUEST_DATE)

    assert created is True
    assert all(q.date == QUEST_DATE for q in today)


# ============================================================================
# Progress Tests
# ============================================================================

@pytest.fixture
def three_task_quest(test_user_id):
    return DailyQuest(
        user_id=test_user_id,
        date=QUEST_DATE,
        quest_type="complete_tasks_3",
        label="Complete 3 tasks",
        target=3,
        xp_reward=25,
    )


def test_update_quest_progress_partial(three_task_quest):
    """Test progress below the target"""
    result = update_quest_progress(three_task_quest)

    assert result.quest.progress == 1
    assert result.just_completed is False
    assert result.xp_awarded == 0


def test_update_quest_progress_completes(three_task_quest):
    """Test reaching the target completes the quest once"""
    result = update_quest_progress(three_task_quest, increment=3)

    assert result.quest.completed is True
    assert result.just_completed is True
    assert result.xp_awarded == 25


def test_update_quest_progress_capped_at_target(three_task_quest):
    """Test progress never exceeds the target"""
    result = update_quest_progress(three_task_quest, increment=10)

    assert result.quest.progress == 3


def test_update_quest_progress_completed_unchanged(three_task_quest):
    """Test a completed quest is returned as is with no XP"""
    done = update_quest_progress(three_task_quest, increment=3).quest

    result = update_quest_progress(done)

    assert result.quest == done
    assert result.just_completed is False
    assert result.xp_awarded == 0


@pytest.mark.parametrize("increment", [0, -1])
def test_update_quest_progress_invalid_increment(three_task_quest, increment):
    """Test increments below 1 are rejected"""
    with pytest.raises(InvalidInputError):
        update_quest_progress(three_task_quest, increment=increment)


def test_find_quest(three_task_quest):
    """Test lookup by quest type"""
    assert find_quest([three_task_quest], "complete_tasks_3") is three_task_quest
    assert find_quest([three_task_quest], "clear_inbox") is None


def test_quest_pool_types_unique():
    """Test the pool has no duplicate quest types"""
    types = [q.quest_type for q in QUEST_POOL]

    assert len(types) == len(set(types))
