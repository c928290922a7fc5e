"""Selection odds for a catalog, exact and simulated.

Design goals:
- Same numbers the engine would produce, including its fallbacks
- Vectorised simulation so millions of draws stay cheap
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from warzone_fishing.game.engine import SelectionEngine
from warzone_fishing.models.actor import ActorState
from warzone_fishing.models.catalog import RewardCatalog
from warzone_fishing.models.rarity import RarityTier


def weight_vector(
    catalog: RewardCatalog, state: ActorState, engine: SelectionEngine
) -> np.ndarray:
    """Adjusted weights as a float64 array, in catalog order."""
    return np.asarray(engine.adjusted_weights(catalog, state), dtype=np.float64)


def selection_probabilities(
    catalog: RewardCatalog, state: ActorState, engine: SelectionEngine
) -> dict[str, float]:
    """
    Probability of each reward being drawn for an actor.

    When nothing is eligible the engine falls back to the first reward (or
    nothing in strict mode), and the probabilities reflect that.
    """
    if catalog.is_empty:
        return {}

    weights = weight_vector(catalog, state, engine)
    total = float(weights.sum())
    if total <= 0:
        probs = np.zeros(len(catalog))
        if not engine.config.strict_eligibility:
            probs[0] = 1.0
    else:
        probs = weights / total
    return {reward.id: float(p) for reward, p in zip(catalog, probs)}


def simulate_draws(
    catalog: RewardCatalog,
    state: ActorState,
    engine: SelectionEngine,
    draws: int,
    seed: Optional[int] = None,
) -> dict[str, int]:
    """
    Draw `draws` rewards and count how often each came up.

    Uses the same cumulative walk as the engine: the first reward whose
    running total exceeds the roll, or the last reward if none does.
    """
    if draws < 0:
        raise ValueError("draws must be non-negative")
    counts = {reward.id: 0 for reward in catalog}
    if catalog.is_empty or draws == 0:
        return counts

    weights = weight_vector(catalog, state, engine)
    total = float(weights.sum())
    if total <= 0:
        if not engine.config.strict_eligibility:
            counts[catalog[0].id] = draws
        return counts

    rng = np.random.default_rng(seed)
    rolls = rng.uniform(0.0, total, size=draws)
    cumulative = np.cumsum(weights)
    indices = np.searchsorted(cumulative, rolls, side="right")
    indices = np.minimum(indices, len(catalog) - 1)

    hits = np.bincount(indices, minlength=len(catalog))
    for reward, hit in zip(catalog, hits):
        counts[reward.id] = int(hit)
    return counts


def rarity_breakdown(
    catalog: RewardCatalog, probabilities: dict[str, float]
) -> dict[RarityTier, float]:
    """Sum reward probabilities per rarity tier."""
    breakdown = {tier: 0.0 for tier in RarityTier.ordered()}
    for reward in catalog:
        breakdown[reward.rarity] += probabilities.get(reward.id, 0.0)
    return breakdown
