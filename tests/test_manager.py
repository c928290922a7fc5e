"""Tests for the reward manager and configuration."""

import threading

import pytest
from pydantic import ValidationError

from warzone_fishing.game.capabilities import ProviderRegistry
from warzone_fishing.game.config import EngineConfig, FishingConfig, TriggerSettings
from warzone_fishing.game.manager import RewardManager
from warzone_fishing.game.zones import ClaimTagMembership, DefaultAllow
from warzone_fishing.models.rarity import RarityTier


class Provider:
    def __init__(self, level=14):
        self.level = level

    def get_level(self, actor):
        return self.level

    def has_ability(self, actor, key):
        return True

    def get_ability_bonus(self, actor, key):
        return 0


def make_config(rewards, **settings):
    return FishingConfig.from_payload({"settings": settings, "rewards": rewards})


class TestFishingConfig:
    def test_defaults(self):
        config = FishingConfig()
        assert config.settings.claim_plugin == "factions"
        assert config.settings.capability_provider == "HeadHunting"
        assert config.rewards == {}

    def test_kebab_case_keys(self):
        config = make_config({}, **{"claim-plugin": " WorldGuard ", "worldguard-region": "pvp", "cooldown": 5})
        assert config.settings.claim_plugin == "worldguard"
        assert config.settings.worldguard_region == "pvp"
        assert config.settings.cooldown == 5

    def test_bad_rewards_section_ignored(self):
        config = FishingConfig.from_payload({"rewards": ["not", "a", "map"]})
        assert config.rewards == {}

    def test_root_must_be_mapping(self):
        with pytest.raises(ValueError):
            FishingConfig.from_payload(["rewards"])

    def test_negative_cooldown_rejected(self):
        with pytest.raises(ValidationError):
            TriggerSettings(cooldown=-1)

    def test_engine_config_gate_key(self):
        config = make_config({}, **{"gate-ability": "CUSTOM"})
        engine_config = config.engine_config(EngineConfig(strict_eligibility=True))
        assert engine_config.gate_key == "CUSTOM"
        assert engine_config.strict_eligibility


class TestRewardManager:
    def test_empty_manager(self):
        manager = RewardManager()
        assert manager.reward_count == 0
        assert manager.select("alice") is None

    def test_loads_config(self):
        manager = RewardManager(
            make_config({"cod": {"weight": 3}, "pearl": {"weight": 1, "rarity": "MASKED"}})
        )
        assert manager.reward_count == 2
        assert manager.total_weight == 4
        assert manager.get_reward("COD").id == "cod"
        assert [r.id for r in manager.rewards_by_rarity("masked")] == ["pearl"]
        assert manager.last_load.failed == 0

    def test_seeded_draws_repeat(self):
        config = make_config({f"r{i}": {"weight": i + 1} for i in range(8)})
        first = RewardManager(config, seed=5)
        second = RewardManager(config, seed=5)
        assert [first.select("a").id for _ in range(30)] == [second.select("a").id for _ in range(30)]

    def test_zone_backend_from_settings(self):
        assert isinstance(RewardManager(make_config({}, **{"claim-plugin": "all"})).zone_classifier, DefaultAllow)
        assert isinstance(RewardManager().zone_classifier, ClaimTagMembership)

    def test_reload_swaps_snapshot(self):
        manager = RewardManager(make_config({"cod": {"weight": 1}}))
        before = manager.snapshot
        result = manager.reload(make_config({"salmon": {"weight": 2}, "bad": {"weight": 0}}))
        assert result.loaded == 1
        assert result.failed == 1
        assert manager.snapshot is not before
        assert before.catalog.get("cod") is not None
        assert manager.get_reward("cod") is None
        assert manager.get_reward("salmon") is not None

    def test_reload_without_config_keeps_current(self):
        manager = RewardManager(make_config({"cod": {"weight": 1}}))
        manager.reload()
        assert manager.get_reward("cod") is not None

    def test_reload_rediscovers_bridge(self):
        registry = ProviderRegistry()
        manager = RewardManager(make_config({"cod": {"weight": 1}}), registry=registry)
        assert not manager.bridge.enabled

        registry.register("HeadHunting", Provider())
        manager.reload()
        assert manager.bridge.enabled

    def test_provider_name_from_settings(self):
        registry = ProviderRegistry({"Levels": Provider()})
        manager = RewardManager(make_config({}, **{"capability-provider": "levels"}), registry=registry)
        assert manager.bridge.enabled
        assert manager.bridge.name == "levels"

    def test_concurrent_reads_see_whole_catalogs(self):
        small = make_config({"a": {"weight": 1}})
        large = make_config({f"r{i}": {"weight": 1} for i in range(50)})
        manager = RewardManager(small)
        seen = set()
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                catalog = manager.catalog
                seen.add(len(catalog))
                assert len(catalog) in (1, 50)

        thread = threading.Thread(target=reader)
        thread.start()
        for i in range(200):
            manager.reload(large if i % 2 == 0 else small)
        stop.set()
        thread.join()
        assert seen <= {1, 50}

    def test_masked_requires_ability(self):
        manager = RewardManager(make_config({"pearl": {"weight": 1, "rarity": RarityTier.MASKED.value}}))
        assert manager.catalog[0].requires_special_ability
