"""Selection engine for warzone fishing - weighted reward draws."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from warzone_fishing.game.capabilities import CapabilityBridge
from warzone_fishing.game.config import EngineConfig
from warzone_fishing.models.actor import ActorState
from warzone_fishing.models.catalog import RewardCatalog
from warzone_fishing.models.rarity import RarityTier
from warzone_fishing.models.rewards import Reward


class UniformSource(Protocol):
    """Anything that can draw a uniform float, e.g. `random.Random`."""

    def uniform(self, a: float, b: float) -> float: ...


class SelectionEngine:
    """
    Engine for drawing fishing rewards.

    Handles:
    - Level-based luck for RARE and better tiers
    - Hard exclusion of level-gated and ability-gated rewards
    - The mask ability bonus on RARE, EPIC and LEGENDARY rewards
    - One weighted draw over the adjusted weights

    The engine holds no state between draws.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def luck_multiplier(self, level: int) -> float:
        """
        Luck from progression level.

        Level 0 or below gives exactly 1.0; each level adds
        `per_level_bonus` up to `level_cap` (1.35 at the default cap).
        """
        if level <= 0:
            return 1.0
        return 1.0 + min(level, self.config.level_cap) * self.config.per_level_bonus

    def tier_multiplier(self, rarity: RarityTier, luck: float) -> float:
        """Weight multiplier for a tier given the actor's luck."""
        if rarity in (RarityTier.COMMON, RarityTier.UNCOMMON):
            return 1.0
        if rarity == RarityTier.RARE:
            return luck
        if rarity == RarityTier.EPIC:
            return luck * self.config.epic_multiplier
        # LEGENDARY and the gated MASKED tier
        return luck * self.config.legendary_multiplier

    def adjusted_weight(self, reward: Reward, state: ActorState) -> float:
        """
        A reward's weight for one actor.

        Returns 0 when the reward is gated away from the actor.
        """
        if reward.requires_special_ability and not state.has_gate_ability:
            return 0.0
        if reward.required_level > 0 and state.level < reward.required_level:
            return 0.0

        weight = reward.base_weight * self.tier_multiplier(
            reward.rarity, self.luck_multiplier(state.level)
        )
        if state.has_gate_ability and reward.rarity.receives_ability_bonus:
            weight *= 1.0 + state.ability_bonus_percent / 100.0
        return weight

    def adjusted_weights(self, catalog: RewardCatalog, state: ActorState) -> list[float]:
        """Adjusted weights for every reward, in catalog order."""
        return [self.adjusted_weight(reward, state) for reward in catalog]

    def actor_state(self, actor: Any, bridge: CapabilityBridge) -> ActorState:
        return bridge.actor_state(actor, self.config.gate_key)

    def select(
        self,
        catalog: RewardCatalog,
        actor: Any,
        bridge: CapabilityBridge,
        rng: UniformSource,
    ) -> Optional[Reward]:
        """
        Draw one reward for an actor.

        Args:
            catalog: Rewards to draw from
            actor: Opaque actor handle passed through to the bridge
            bridge: Capability bridge for level and ability lookups
            rng: Uniform source; a seeded `random.Random` makes draws repeatable

        Returns:
            The drawn reward, or None if the catalog is empty
        """
        if catalog.is_empty:
            return None
        state = self.actor_state(actor, bridge)
        return self.select_for_state(catalog, state, rng)

    def select_for_state(
        self, catalog: RewardCatalog, state: ActorState, rng: UniformSource
    ) -> Optional[Reward]:
        """Draw one reward for an already-resolved actor state."""
        if catalog.is_empty:
            return None

        weights = self.adjusted_weights(catalog, state)
        total = sum(weights)
        if total <= 0:
            # Nothing is eligible. Unless strict, still hand back something.
            return None if self.config.strict_eligibility else catalog[0]

        roll = rng.uniform(0.0, total)
        return self.pick(catalog, weights, roll)

    @staticmethod
    def pick(catalog: RewardCatalog, weights: list[float], roll: float) -> Reward:
        """
        Walk the cumulative weights and return the first reward past `roll`.

        Float accumulation can leave the sum just short of `roll`, so the walk
        falls back to the last reward.
        """
        cumulative = 0.0
        for reward, weight in zip(catalog, weights):
            cumulative += weight
            if roll < cumulative:
                return reward
        return catalog[len(catalog) - 1]
