"""The immutable reward catalog."""

from __future__ import annotations

import math
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel, Field, model_validator

from warzone_fishing.models.rarity import RarityTier
from warzone_fishing.models.rewards import Reward


class RewardCatalog(BaseModel, frozen=True):
    """
    Ordered, immutable set of rewards.

    The catalog is never patched in place. A reload builds a new catalog and
    swaps it in, so a draw in progress always sees one consistent snapshot.
    """

    rewards: tuple[Reward, ...] = Field(default=(), description="Rewards in draw order")
    total_base_weight: float = Field(default=0.0, description="Sum of all base weights")

    @model_validator(mode="after")
    def validate_catalog(self) -> "RewardCatalog":
        """Ensure ids are unique and the cached total matches the rewards."""
        seen: set[str] = set()
        for reward in self.rewards:
            if reward.key in seen:
                raise ValueError(f"Duplicate reward id: {reward.id}")
            seen.add(reward.key)

        expected = math.fsum(r.base_weight for r in self.rewards)
        if not math.isclose(self.total_base_weight, expected, rel_tol=1e-12, abs_tol=1e-12):
            raise ValueError(
                f"total_base_weight {self.total_base_weight} does not match sum {expected}"
            )
        return self

    @classmethod
    def from_rewards(cls, rewards: Iterable[Reward]) -> RewardCatalog:
        """Build a catalog sorted by ascending weight with a fresh total."""
        # Stable sort: equal weights keep their configuration order.
        ordered = tuple(sorted(rewards, key=lambda r: r.base_weight))
        return cls(rewards=ordered, total_base_weight=math.fsum(r.base_weight for r in ordered))

    @classmethod
    def empty(cls) -> RewardCatalog:
        return cls()

    def __len__(self) -> int:
        return len(self.rewards)

    def __iter__(self) -> Iterator[Reward]:  # type: ignore[override]
        return iter(self.rewards)

    def __getitem__(self, index: int) -> Reward:
        return self.rewards[index]

    @property
    def is_empty(self) -> bool:
        return not self.rewards

    def get(self, reward_id: str) -> Optional[Reward]:
        """Find a reward by id, ignoring case."""
        key = reward_id.casefold()
        for reward in self.rewards:
            if reward.key == key:
                return reward
        return None

    def by_rarity(self, rarity: RarityTier | str) -> list[Reward]:
        """Return rewards of one tier, in catalog order."""
        tier = RarityTier.parse(rarity)
        return [r for r in self.rewards if r.rarity == tier]

    def rarity_counts(self) -> dict[RarityTier, int]:
        """Count rewards per tier (every tier present, possibly zero)."""
        counts = {tier: 0 for tier in RarityTier.ordered()}
        for reward in self.rewards:
            counts[reward.rarity] += 1
        return counts
