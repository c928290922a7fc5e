"""Rarity tiers for fishing rewards."""

from __future__ import annotations

from enum import Enum


class RarityTier(str, Enum):
    """Reward rarity, ordered from most to least common.

    Tiers only select which weight modifier applies to a reward; they never
    change the order rewards are drawn in.
    """

    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"
    MASKED = "MASKED"  # Gated: only reachable with the mask ability

    @classmethod
    def ordered(cls) -> list[RarityTier]:
        """Return all tiers from most to least common."""
        return [cls.COMMON, cls.UNCOMMON, cls.RARE, cls.EPIC, cls.LEGENDARY, cls.MASKED]

    @classmethod
    def parse(cls, value: str | RarityTier) -> RarityTier:
        """Parse a tier name case-insensitively."""
        if isinstance(value, RarityTier):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Rarity must be a string, got {type(value).__name__}")
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown rarity: {value}") from None

    @property
    def rank(self) -> int:
        """Position of this tier in `ordered()` (0 = COMMON)."""
        return RarityTier.ordered().index(self)

    @property
    def is_gated(self) -> bool:
        return self is RarityTier.MASKED

    @property
    def receives_ability_bonus(self) -> bool:
        """Whether the mask ability bonus boosts this tier."""
        return self in (RarityTier.RARE, RarityTier.EPIC, RarityTier.LEGENDARY)
