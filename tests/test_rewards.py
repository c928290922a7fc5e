"""Tests for rarity tiers, rewards and the catalog."""

import math

import pytest
from pydantic import ValidationError

from warzone_fishing.models.catalog import RewardCatalog
from warzone_fishing.models.rarity import RarityTier
from warzone_fishing.models.rewards import Reward, RewardPayload, RewardType


def make_reward(reward_id: str, weight: float, rarity: RarityTier = RarityTier.COMMON, **kwargs) -> Reward:
    return Reward(id=reward_id, base_weight=weight, rarity=rarity, **kwargs)


class TestRarityTier:
    def test_ordered(self):
        assert RarityTier.ordered() == [
            RarityTier.COMMON,
            RarityTier.UNCOMMON,
            RarityTier.RARE,
            RarityTier.EPIC,
            RarityTier.LEGENDARY,
            RarityTier.MASKED,
        ]

    def test_parse_case_insensitive(self):
        assert RarityTier.parse("legendary") == RarityTier.LEGENDARY
        assert RarityTier.parse(" Epic ") == RarityTier.EPIC
        assert RarityTier.parse(RarityTier.RARE) is RarityTier.RARE

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown rarity"):
            RarityTier.parse("MYTHIC")
        with pytest.raises(ValueError):
            RarityTier.parse(3)

    def test_rank(self):
        assert RarityTier.COMMON.rank == 0
        assert RarityTier.MASKED.rank == 5

    def test_only_masked_is_gated(self):
        assert [t for t in RarityTier if t.is_gated] == [RarityTier.MASKED]

    def test_ability_bonus_tiers(self):
        bonus = {t for t in RarityTier if t.receives_ability_bonus}
        assert bonus == {RarityTier.RARE, RarityTier.EPIC, RarityTier.LEGENDARY}


class TestReward:
    def test_defaults(self):
        reward = make_reward("cod", 10)
        assert reward.rarity == RarityTier.COMMON
        assert reward.required_level == 0
        assert not reward.requires_special_ability
        assert reward.payload.type == RewardType.ITEM
        assert reward.payload.title_message == "&3Fish Caught!"

    @pytest.mark.parametrize("weight", [0, -1, math.inf, math.nan])
    def test_rejects_bad_weight(self, weight):
        with pytest.raises(ValidationError):
            make_reward("bad", weight)

    def test_rejects_empty_id(self):
        with pytest.raises(ValidationError):
            make_reward("", 1)

    def test_rejects_negative_level(self):
        with pytest.raises(ValidationError):
            make_reward("bad", 1, required_level=-1)

    def test_immutable(self):
        reward = make_reward("cod", 10)
        with pytest.raises(ValidationError):
            reward.base_weight = 20

    def test_equality_ignores_case(self):
        assert make_reward("Cod", 1) == make_reward("cod", 2)
        assert hash(make_reward("Cod", 1)) == hash(make_reward("COD", 1))

    def test_command_payload_has_no_item(self):
        payload = RewardPayload(type=RewardType.COMMAND, commands=("say hi",))
        assert not payload.has_item
        assert RewardPayload().has_item


class TestRewardCatalog:
    def test_sorted_by_weight(self):
        catalog = RewardCatalog.from_rewards(
            [make_reward("a", 5), make_reward("b", 1), make_reward("c", 3)]
        )
        assert [r.id for r in catalog] == ["b", "c", "a"]

    def test_sort_is_stable(self):
        catalog = RewardCatalog.from_rewards(
            [make_reward("first", 2), make_reward("second", 2), make_reward("low", 1)]
        )
        assert [r.id for r in catalog] == ["low", "first", "second"]

    def test_total_weight(self):
        catalog = RewardCatalog.from_rewards(
            [make_reward("a", 0.1), make_reward("b", 0.2), make_reward("c", 0.3)]
        )
        assert catalog.total_base_weight == math.fsum([0.1, 0.2, 0.3])

    def test_empty(self):
        catalog = RewardCatalog.empty()
        assert catalog.is_empty
        assert len(catalog) == 0
        assert catalog.total_base_weight == 0.0

    def test_rejects_duplicates(self):
        with pytest.raises(ValidationError, match="Duplicate reward id"):
            RewardCatalog.from_rewards([make_reward("cod", 1), make_reward("COD", 2)])

    def test_rejects_wrong_total(self):
        with pytest.raises(ValidationError):
            RewardCatalog(rewards=(make_reward("a", 1),), total_base_weight=5.0)

    def test_get_case_insensitive(self):
        catalog = RewardCatalog.from_rewards([make_reward("Golden_Apple", 1)])
        assert catalog.get("golden_apple").id == "Golden_Apple"
        assert catalog.get("missing") is None

    def test_by_rarity(self):
        catalog = RewardCatalog.from_rewards(
            [
                make_reward("a", 3, RarityTier.RARE),
                make_reward("b", 1, RarityTier.COMMON),
                make_reward("c", 2, RarityTier.RARE),
            ]
        )
        assert [r.id for r in catalog.by_rarity("rare")] == ["c", "a"]
        assert catalog.by_rarity(RarityTier.EPIC) == []

    def test_rarity_counts_include_every_tier(self):
        catalog = RewardCatalog.from_rewards([make_reward("a", 1, RarityTier.EPIC)])
        counts = catalog.rarity_counts()
        assert set(counts) == set(RarityTier)
        assert counts[RarityTier.EPIC] == 1
        assert counts[RarityTier.COMMON] == 0
