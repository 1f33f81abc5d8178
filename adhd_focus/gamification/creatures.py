"""
Creature Collection

Completing tasks can attract a collectible creature:
1. Base roll: 30% chance that any creature shows up at all
2. Only creatures whose spawn conditions match the moment are eligible
3. One eligible creature is picked by spawn weight (default 100)
4. Ownership count goes up; a first catch counts towards the lifetime total
"""

from typing import Dict, Iterable, List, Optional
import logging
import random

from pydantic import ValidationError as PydanticValidationError

from adhd_focus.exceptions import CatalogError
from adhd_focus.gamification.rewards import weighted_choice
from adhd_focus.models.creature import (
    CreatureDefinition,
    SpawnConditions,
    SpawnContext,
    SpawnOutcome,
    SpawnResult,
)
from adhd_focus.models.rarity import CreatureRarity

logger = logging.getLogger(__name__)

BASE_SPAWN_CHANCE = 0.30


def _creature(code, name, emoji, description, rarity, spawn_chance, **conditions) -> CreatureDefinition:
    return CreatureDefinition(
        code=code,
        name=name,
        emoji=emoji,
        description=description,
        rarity=rarity,
        spawn_chance=spawn_chance,
        spawn_conditions=SpawnConditions(**conditions) if conditions else None,
    )


DEFAULT_CREATURES: List[CreatureDefinition] = [
    # Common
    _creature("task_ant", "Task Ant", "🐜", "A diligent worker that appears when you complete tasks", CreatureRarity.COMMON, 200, on_task_complete=True),
    _creature("focus_snail", "Focus Snail", "🐌", "Slow but steady wins the race", CreatureRarity.COMMON, 150, on_task_complete=True),
    _creature("busy_bee", "Busy Bee", "🐝", "Always buzzing with productivity", CreatureRarity.COMMON, 150, on_task_complete=True),
    # Uncommon
    _creature("quick_fox", "Quick Fox", "🦊", "Appears when you complete quick tasks", CreatureRarity.UNCOMMON, 100, on_quick_task=True),
    _creature("night_owl", "Night Owl", "🦉", "A nocturnal companion for late work", CreatureRarity.UNCOMMON, 80, on_time_range={"start_hour": 22, "end_hour": 6, "wraps_midnight": True}),
    _creature("morning_rooster", "Morning Rooster", "🐓", "Greets the early birds", CreatureRarity.UNCOMMON, 80, on_time_range={"start_hour": 5, "end_hour": 8}),
    _creature("streak_cat", "Streak Cat", "🐱", "Loves consistency", CreatureRarity.UNCOMMON, 70, on_streak_day=3),
    # Rare
    _creature("fire_spirit", "Flame Spirit", "🔥", "Born from a week of dedication", CreatureRarity.RARE, 50, on_streak_day=7),
    _creature("crystal_butterfly", "Crystal Butterfly", "🦋", "A beautiful transformation", CreatureRarity.RARE, 40, on_level=5),
    _creature("thunder_wolf", "Thunder Wolf", "🐺", "Strikes with speed and power", CreatureRarity.RARE, 30, on_quick_task=True, on_streak_day=5),
    # Legendary
    _creature("deadline_dragon", "Deadline Dragon", "🐉", "Master of time management", CreatureRarity.LEGENDARY, 20, on_streak_day=30),
    _creature("phoenix", "Phoenix", "🔥", "Rises from the ashes of procrastination", CreatureRarity.LEGENDARY, 15, on_level=25),
    _creature("flow_unicorn", "Flow Unicorn", "🦄", "Appears in states of deep focus", CreatureRarity.LEGENDARY, 10, on_task_complete=True, on_streak_day=14),
    # Mythic
    _creature("cosmic_whale", "Cosmic Whale", "🐋", "Swims through the stars of achievement", CreatureRarity.MYTHIC, 5, on_level=50),
    _creature("time_turtle", "Time Turtle", "🐢", "Ancient wisdom of consistency", CreatureRarity.MYTHIC, 3, on_streak_day=100),
    # Secret
    _creature("ghost", "Midnight Ghost", "👻", "???", CreatureRarity.SECRET, 10, on_time_range={"start_hour": 0, "end_hour": 1}, on_special="midnight_task"),
]


def load_creature_catalog(rows: Iterable[dict]) -> List[CreatureDefinition]:
    """
    Validate raw catalog rows (e.g. from the creatures table)

    Raises:
        CatalogError: unknown rarity, bad weight, malformed conditions, or
            duplicate code
    """
    catalog: List[CreatureDefinition] = []
    seen = set()

    for row in rows:
        code = row.get("code")
        try:
            creature = CreatureDefinition.model_validate(row)
        except PydanticValidationError as e:
            raise CatalogError(
                f"Invalid creature definition '{code}': {e.errors()[0]['msg']}",
                catalog="creatures",
                code=code,
                cause=e,
            )
        if creature.code in seen:
            raise CatalogError(f"Duplicate creature code '{code}'", catalog="creatures", code=code)
        seen.add(creature.code)
        catalog.append(creature)

    return catalog


def check_spawn_conditions(conditions: Optional[SpawnConditions], context: SpawnContext) -> bool:
    """
    Check a creature's spawn conditions against the current moment

    No conditions means always eligible; otherwise every condition that is
    set must hold.
    """
    if conditions is None:
        return True

    if conditions.on_task_complete and not context.on_task_complete:
        return False
    if conditions.on_quick_task and not context.is_quick_task:
        return False
    if conditions.on_streak_day is not None and context.streak_days < conditions.on_streak_day:
        return False
    if conditions.on_level is not None and context.level < conditions.on_level:
        return False
    if conditions.on_time_range is not None and not conditions.on_time_range.contains(context.current_hour):
        return False
    if conditions.on_special is not None and context.special != conditions.on_special:
        return False

    return True


def eligible_creatures(
    catalog: Iterable[CreatureDefinition],
    context: SpawnContext,
) -> List[CreatureDefinition]:
    return [c for c in catalog if check_spawn_conditions(c.spawn_conditions, context)]


def spawn_creature(
    catalog: Iterable[CreatureDefinition],
    context: SpawnContext,
    owned_counts: Optional[Dict[str, int]] = None,
    rng: Optional[random.Random] = None,
    spawn_chance: float = BASE_SPAWN_CHANCE,
) -> SpawnResult:
    """
    Roll for a creature and update the ownership map

    Args:
        catalog: Creature definitions
        context: Task/streak/level/hour situation of this roll
        owned_counts: creature code -> count the user already owns (not modified)
        rng: Random source, injectable for tests
        spawn_chance: Base probability that any creature appears

    Returns:
        SpawnResult; `creature` is None with a reason when the base roll
        fails or nothing is eligible
    """
    rng = rng or random
    owned = dict(owned_counts or {})

    if rng.random() > spawn_chance:
        logger.debug("Creature spawn roll failed")
        return SpawnResult(reason=SpawnOutcome.SPAWN_ROLL_FAILED, owned_counts=owned)

    candidates = eligible_creatures(catalog, context)
    if not candidates:
        logger.debug("No eligible creatures for spawn context")
        return SpawnResult(reason=SpawnOutcome.NO_ELIGIBLE_CREATURES, owned_counts=owned)

    creature = weighted_choice(candidates, lambda c: c.spawn_chance, rng)

    previous = owned.get(creature.code, 0)
    is_new = previous == 0
    new_count = previous + 1
    owned[creature.code] = new_count

    logger.info(
        f"Creature caught: {creature.code} ({creature.rarity.value}), "
        f"{'new' if is_new else f'count {new_count}'}"
    )

    return SpawnResult(
        creature=creature,
        is_new=is_new,
        new_count=new_count,
        reason=SpawnOutcome.SPAWNED,
        owned_counts=owned,
    )
