"""Rarity tiers for rewards and creatures

Reward rarity and creature rarity share four names but are separate ordered
types: creatures have an extra ``secret`` tier that sits outside the reward
ordering. Comparing across the two types is a TypeError.
"""
from enum import Enum


class _OrderedTier(str, Enum):
    """String enum ordered by declaration position within its own class"""

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def _check(self, other) -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot compare {type(self).__name__} with {type(other).__name__}"
            )

    def __lt__(self, other):
        self._check(other)
        return self.rank < other.rank

    def __le__(self, other):
        self._check(other)
        return self.rank <= other.rank

    def __gt__(self, other):
        self._check(other)
        return self.rank > other.rank

    def __ge__(self, other):
        self._check(other)
        return self.rank >= other.rank


class RewardRarity(_OrderedTier):
    """Celebration reward tiers, least to most rare"""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"


class CreatureRarity(_OrderedTier):
    """Collectible creature tiers, least to most rare"""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"
    SECRET = "secret"
