"""
Gamification Orchestrator

Runs every gamification step for one triggering event, in order:
1. Award XP
2. Recompute level
3. Update the daily streak (daily-activity events only)
4. Check achievements, then feature unlocks
5. Cosmetic extras: celebration reward roll and creature spawn

Steps 1-4 must succeed or the whole event fails with nothing returned.
Step 5 is best-effort: failures are logged and reported in
`degraded_steps`, never raised.
"""

from typing import Dict, Iterable, Optional
from datetime import datetime
from zoneinfo import ZoneInfo
import logging
import random

from adhd_focus import config
from adhd_focus.exceptions import InvalidInputError
from adhd_focus.gamification.achievement_system import DEFAULT_ACHIEVEMENTS, check_achievements
from adhd_focus.gamification.creatures import DEFAULT_CREATURES, spawn_creature
from adhd_focus.gamification.feature_unlocks import DEFAULT_FEATURES, check_feature_unlocks
from adhd_focus.gamification.rewards import EFFECTS_BY_RARITY, log_reward, roll_reward
from adhd_focus.gamification.streak_system import apply_streak
from adhd_focus.gamification.xp_system import award_xp, level_from_xp
from adhd_focus.models.achievement import AchievementDefinition
from adhd_focus.models.creature import CreatureDefinition, SpawnContext
from adhd_focus.models.event import EventType, GamificationEvent, GamificationEventResult
from adhd_focus.models.feature import FeatureDefinition
from adhd_focus.models.game_state import UserGameState

logger = logging.getLogger(__name__)


def default_clock() -> datetime:
    """Current time in the configured app timezone"""
    return datetime.now(ZoneInfo(config.APP_TIMEZONE))


class GamificationEngine:
    """
    Pure orchestrator over the gamification components.

    Holds only read-only catalogs and an injected random source; every call
    takes a state snapshot and returns a new one.
    """

    def __init__(
        self,
        features: Optional[Iterable[FeatureDefinition]] = None,
        creatures: Optional[Iterable[CreatureDefinition]] = None,
        achievements: Optional[Iterable[AchievementDefinition]] = None,
        rng: Optional[random.Random] = None,
        spawn_chance: Optional[float] = None,
        enable_rewards: Optional[bool] = None,
        enable_creatures: Optional[bool] = None,
        effects_by_rarity: Optional[dict] = None,
    ):
        self.features = list(DEFAULT_FEATURES if features is None else features)
        self.creatures = list(DEFAULT_CREATURES if creatures is None else creatures)
        self.achievements = list(DEFAULT_ACHIEVEMENTS if achievements is None else achievements)
        self.rng = rng or random.Random()
        self.spawn_chance = config.CREATURE_SPAWN_CHANCE if spawn_chance is None else spawn_chance
        self.enable_rewards = config.ENABLE_REWARD_ROLLS if enable_rewards is None else enable_rewards
        self.enable_creatures = config.ENABLE_CREATURE_SPAWNS if enable_creatures is None else enable_creatures
        self.effects_by_rarity = EFFECTS_BY_RARITY if effects_by_rarity is None else effects_by_rarity
        logger.debug(
            f"GamificationEngine initialized: {len(self.features)} features, "
            f"{len(self.creatures)} creatures, {len(self.achievements)} achievements"
        )

    def process_event(
        self,
        state: UserGameState,
        event: GamificationEvent,
        now: datetime,
        owned_creatures: Optional[Dict[str, int]] = None,
    ) -> GamificationEventResult:
        """
        Apply one event to a state snapshot

        Args:
            state: Current persisted state (not modified)
            event: What happened and how much XP it is worth
            now: Event time from the injected clock; its date drives the
                streak and its hour drives creature time windows
            owned_creatures: creature code -> owned count (not modified)

        Returns:
            GamificationEventResult carrying the new state and ownership map

        Raises:
            InvalidInputError: negative XP amount or inconsistent dates
        """
        if event.xp_amount < 0:
            raise InvalidInputError(
                "XP amount must not be negative", field="xp_amount", value=event.xp_amount
            )

        old_level = state.level

        # 1-2. XP and level
        new_state, _ = award_xp(state, event.xp_amount)
        if event.event_type == EventType.TASK_COMPLETE:
            new_state = new_state.evolve(total_tasks_completed=new_state.total_tasks_completed + 1)

        # 3. Streak
        streak_result = None
        if event.event_type.is_daily_activity:
            new_state, streak_result = apply_streak(new_state, now.date())

        # 4. Achievements, then feature unlocks
        earned = check_achievements(new_state, self.achievements, now)
        bonus_xp = sum(a.xp_reward for a in earned)
        if earned:
            total_xp = new_state.xp + bonus_xp
            new_state = new_state.evolve(
                xp=total_xp,
                level=level_from_xp(total_xp),
                unlocked_achievements=new_state.unlocked_achievements | {a.code for a in earned},
            )

        unlock_result = check_feature_unlocks(
            level=new_state.level,
            total_tasks_completed=new_state.total_tasks_completed,
            unlocked_achievements=new_state.unlocked_achievements,
            catalog=self.features,
            already_unlocked=new_state.unlocked_features,
        )
        unlocked = set(unlock_result.unlocked)
        newly_unlocked = list(unlock_result.newly_unlocked)
        for achievement in earned:
            if achievement.unlocks_feature and achievement.unlocks_feature not in unlocked:
                unlocked.add(achievement.unlocks_feature)
                newly_unlocked.append(achievement.unlocks_feature)
        new_state = new_state.evolve(unlocked_features=frozenset(unlocked))

        leveled_up = new_state.level > old_level

        # 5. Cosmetic extras
        degraded_steps = []
        owned = dict(owned_creatures or {})

        reward = None
        reward_entry = None
        if self.enable_rewards and (leveled_up or event.trigger_reward):
            try:
                reward = roll_reward(self.rng, self.effects_by_rarity)
                trigger = "level_up" if leveled_up else event.event_type.value
                new_state, reward_entry = log_reward(new_state, reward, trigger=trigger, logged_at=now)
            except Exception as e:
                logger.warning(f"Reward roll skipped: {e}", exc_info=True)
                degraded_steps.append("reward_roll")
                reward = None
                reward_entry = None

        spawn = None
        if self.enable_creatures and (event.event_type == EventType.TASK_COMPLETE or event.trigger_reward):
            if not self.creatures:
                logger.warning("Creature spawn skipped: creature catalog is empty")
                degraded_steps.append("creature_spawn")
            else:
                try:
                    context = SpawnContext(
                        on_task_complete=event.event_type == EventType.TASK_COMPLETE,
                        is_quick_task=event.is_quick_task,
                        streak_days=new_state.current_streak,
                        level=new_state.level,
                        current_hour=now.hour,
                        special=event.special,
                    )
                    spawn = spawn_creature(self.creatures, context, owned, self.rng, self.spawn_chance)
                    owned = spawn.owned_counts
                    if spawn.is_new:
                        new_state = new_state.evolve(total_creatures=new_state.total_creatures + 1)
                except Exception as e:
                    logger.warning(f"Creature spawn skipped: {e}", exc_info=True)
                    degraded_steps.append("creature_spawn")
                    spawn = None

        logger.info(
            f"Processed {event.event_type.value}: +{event.xp_amount} XP"
            f"{f' (+{bonus_xp} bonus)' if bonus_xp else ''}, level {new_state.level}, "
            f"streak {new_state.current_streak}, unlocked {len(newly_unlocked)} features"
        )

        return GamificationEventResult(
            xp_awarded=event.xp_amount,
            bonus_xp=bonus_xp,
            leveled_up=leveled_up,
            old_level=old_level,
            new_level=new_state.level,
            newly_unlocked_features=newly_unlocked,
            newly_unlocked_achievements=[a.code for a in earned],
            streak_result=streak_result,
            reward_rolled=reward,
            reward_log_entry=reward_entry,
            creature_spawned=spawn,
            degraded_steps=degraded_steps,
            state=new_state,
            owned_creatures=owned,
        )
