"""
Gamification engine for ADHD Focus

This package implements the game economy behind task completion:
- Linear XP and leveling
- Daily streak with shield protection
- Progressive feature unlocks
- Celebration reward rolls
- Collectible creature spawns
- Reproducible daily quests
- Achievements

Every function here is pure: it takes a snapshot and returns a new one.
Persistence and per-user serialization live in adhd_focus.services.
"""

from adhd_focus.gamification.xp_system import (
    xp_for_level,
    level_from_xp,
    xp_to_next_level,
    calculate_task_xp,
    award_xp,
)
from adhd_focus.gamification.rewards import roll_reward, weighted_choice, is_rarer, log_reward
from adhd_focus.gamification.streak_system import update_streak, apply_streak
from adhd_focus.gamification.feature_unlocks import check_feature_unlocks, load_feature_catalog
from adhd_focus.gamification.creatures import check_spawn_conditions, spawn_creature, load_creature_catalog
from adhd_focus.gamification.quests import (
    hash_code,
    select_quests,
    create_daily_quests,
    ensure_daily_quests,
    update_quest_progress,
)
from adhd_focus.gamification.achievement_system import check_achievements
from adhd_focus.gamification.orchestrator import GamificationEngine, default_clock

__all__ = [
    "xp_for_level",
    "level_from_xp",
    "xp_to_next_level",
    "calculate_task_xp",
    "award_xp",
    "roll_reward",
    "weighted_choice",
    "is_rarer",
    "log_reward",
    "update_streak",
    "apply_streak",
    "check_feature_unlocks",
    "load_feature_catalog",
    "check_spawn_conditions",
    "spawn_creature",
    "load_creature_catalog",
    "hash_code",
    "select_quests",
    "create_daily_quests",
    "ensure_daily_quests",
    "update_quest_progress",
    "check_achievements",
    "GamificationEngine",
    "default_clock",
]
