"""Reward manager - owns the live catalog snapshot and reloads it."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import Any, Collection, Optional

from warzone_fishing.game.capabilities import CapabilityBridge, ProviderRegistry
from warzone_fishing.game.config import EngineConfig, FishingConfig, TriggerSettings
from warzone_fishing.game.engine import SelectionEngine
from warzone_fishing.game.loader import LoadResult, load_catalog
from warzone_fishing.game.zones import ZoneClassifier, build_zone_classifier
from warzone_fishing.models.catalog import RewardCatalog
from warzone_fishing.models.rarity import RarityTier
from warzone_fishing.models.rewards import Reward

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Everything one draw needs, published together."""

    config: FishingConfig
    catalog: RewardCatalog
    bridge: CapabilityBridge
    zone_classifier: ZoneClassifier
    engine: SelectionEngine
    load: LoadResult


class RewardManager:
    """
    Loads rewards and serves draws from the current snapshot.

    Reloading builds a complete new snapshot (catalog, capability bridge,
    zone classifier) and swaps it in with a single assignment, so readers
    never lock and never see a half-updated catalog.
    """

    def __init__(
        self,
        config: Optional[FishingConfig] = None,
        registry: Optional[ProviderRegistry] = None,
        engine_config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
        known_materials: Optional[Collection[str]] = None,
        known_sounds: Optional[Collection[str]] = None,
        known_enchantments: Optional[Collection[str]] = None,
    ):
        """
        Initialize the manager and run the first load.

        Args:
            config: Parsed configuration (defaults to an empty one)
            registry: Optional collaborators (capability, claim, region providers)
            engine_config: Base engine tuning; the gate key comes from settings
            seed: Random seed for reproducible draws
            known_materials: Valid material names for the loader
            known_sounds: Valid sound names for the loader
            known_enchantments: Valid enchantment names for the loader
        """
        self.registry = registry or ProviderRegistry()
        self.engine_config = engine_config or EngineConfig()
        self.known_materials = known_materials
        self.known_sounds = known_sounds
        self.known_enchantments = known_enchantments
        self.rng = random.Random(seed)
        self._reload_lock = threading.Lock()
        self._snapshot: Optional[Snapshot] = None
        self.reload(config or FishingConfig())

    @property
    def snapshot(self) -> Snapshot:
        if self._snapshot is None:
            raise RuntimeError("Rewards not loaded. Call reload() first.")
        return self._snapshot

    @property
    def config(self) -> FishingConfig:
        return self.snapshot.config

    @property
    def settings(self) -> TriggerSettings:
        return self.snapshot.config.settings

    @property
    def catalog(self) -> RewardCatalog:
        return self.snapshot.catalog

    @property
    def bridge(self) -> CapabilityBridge:
        return self.snapshot.bridge

    @property
    def zone_classifier(self) -> ZoneClassifier:
        return self.snapshot.zone_classifier

    @property
    def engine(self) -> SelectionEngine:
        return self.snapshot.engine

    @property
    def last_load(self) -> LoadResult:
        return self.snapshot.load

    @property
    def reward_count(self) -> int:
        return len(self.catalog)

    @property
    def total_weight(self) -> float:
        return self.catalog.total_base_weight

    def reload(self, config: Optional[FishingConfig] = None) -> LoadResult:
        """
        Rebuild the snapshot from a configuration.

        Args:
            config: New configuration; None reloads the current one

        Returns:
            The load result for the new catalog
        """
        with self._reload_lock:
            if config is None:
                config = self.snapshot.config

            result = load_catalog(
                config.rewards, self.known_materials, self.known_sounds, self.known_enchantments
            )
            bridge = CapabilityBridge.discover(self.registry, config.settings.capability_provider)
            zones = build_zone_classifier(config.settings, self.registry)
            engine = SelectionEngine(config.engine_config(self.engine_config))

            self._snapshot = Snapshot(
                config=config,
                catalog=result.catalog,
                bridge=bridge,
                zone_classifier=zones,
                engine=engine,
                load=result,
            )

        logger.info("Configuration reloaded! Loaded %d rewards", result.loaded)
        return result

    def select(self, actor: Any) -> Optional[Reward]:
        """Draw one reward for an actor from the current snapshot."""
        snap = self.snapshot
        return snap.engine.select(snap.catalog, actor, snap.bridge, self.rng)

    def get_reward(self, reward_id: str) -> Optional[Reward]:
        return self.catalog.get(reward_id)

    def rewards_by_rarity(self, rarity: RarityTier | str) -> list[Reward]:
        return self.catalog.by_rarity(rarity)
