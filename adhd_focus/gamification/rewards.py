"""
Celebration Rewards

Cosmetic reward rolls for "celebration" moments. Rolls never touch
game-affecting state; the caller decides whether to log them and track the
rarest reward seen.

Rarity weights (out of 1000):
- common: 600
- uncommon: 250
- rare: 120
- legendary: 29
- mythic: 1
"""

from typing import Callable, Optional, Sequence, Tuple, TypeVar
from datetime import datetime, timezone
import logging
import random

from adhd_focus.models.event import RewardLogEntry, RewardRoll
from adhd_focus.models.game_state import UserGameState
from adhd_focus.models.rarity import RewardRarity

logger = logging.getLogger(__name__)

T = TypeVar("T")

RARITY_WEIGHTS: Tuple[Tuple[RewardRarity, int], ...] = (
    (RewardRarity.COMMON, 600),
    (RewardRarity.UNCOMMON, 250),
    (RewardRarity.RARE, 120),
    (RewardRarity.LEGENDARY, 29),
    (RewardRarity.MYTHIC, 1),
)

EFFECTS_BY_RARITY = {
    RewardRarity.COMMON: ["sparkle", "wave", "star", "glow"],
    RewardRarity.UNCOMMON: ["glitch", "rainbow", "music", "fire", "crystal"],
    RewardRarity.RARE: ["portal", "creature", "fireworks", "warp", "stars"],
    RewardRarity.LEGENDARY: ["unicorn", "volcano", "invert", "rocket", "aurora"],
    RewardRarity.MYTHIC: ["takeover", "golden", "eye"],
}


def weighted_choice(
    items: Sequence[T],
    weight: Callable[[T], float],
    rng: Optional[random.Random] = None,
) -> T:
    """
    First-fit cumulative weight draw

    Draws a uniform value in [0, total), subtracts each item's weight in
    order and returns the item at which the remainder drops to zero or
    below. Falls back to the first item if rounding leaves a remainder.

    Raises:
        ValueError: items is empty
    """
    if not items:
        raise ValueError("weighted_choice() needs at least one item")

    rng = rng or random
    total = sum(weight(item) for item in items)
    remainder = rng.random() * total

    for item in items:
        remainder -= weight(item)
        if remainder <= 0:
            return item

    return items[0]


def roll_reward(
    rng: Optional[random.Random] = None,
    effects_by_rarity: Optional[dict] = None,
) -> RewardRoll:
    """
    Roll a rarity tier, then pick an effect uniformly within it

    Raises:
        KeyError / IndexError: the effect table has no entry for the rolled tier
    """
    rng = rng or random
    effects_by_rarity = effects_by_rarity if effects_by_rarity is not None else EFFECTS_BY_RARITY

    rarity, _ = weighted_choice(RARITY_WEIGHTS, lambda entry: entry[1], rng)
    effects = effects_by_rarity[rarity]
    if not effects:
        raise IndexError(f"No effects configured for rarity '{rarity.value}'")
    effect = effects[int(rng.random() * len(effects))]

    logger.debug(f"Rolled {rarity.value} reward: {effect}")
    return RewardRoll(rarity=rarity, effect=effect)


def is_rarer(candidate: RewardRarity, current: Optional[RewardRarity]) -> bool:
    """True when candidate outranks the current rarest (or nothing seen yet)"""
    if current is None:
        return True
    return candidate > current


def log_reward(
    state: UserGameState,
    roll: RewardRoll,
    trigger: Optional[str] = None,
    logged_at: Optional[datetime] = None,
) -> Tuple[UserGameState, RewardLogEntry]:
    """
    Build a reward log entry and update the rarest reward seen

    Returns:
        (new state, log entry); the state is unchanged unless the roll is
        strictly rarer than anything seen before
    """
    entry = RewardLogEntry(
        rarity=roll.rarity,
        effect=roll.effect,
        trigger=trigger,
        logged_at=logged_at or datetime.now(timezone.utc),
    )

    if is_rarer(roll.rarity, state.rarest_reward_seen):
        logger.info(
            f"New rarest reward: {roll.rarity.value} "
            f"(was {state.rarest_reward_seen.value if state.rarest_reward_seen else 'none'})"
        )
        state = state.evolve(rarest_reward_seen=roll.rarity)

    return state, entry
