"""Pydantic schemas for admin API request/response models."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from warzone_fishing.game.trigger import RewardDelivery, TriggerStatus
from warzone_fishing.models.rarity import RarityTier
from warzone_fishing.models.rewards import Reward, RewardType


class RewardSummarySchema(BaseModel):
    """A reward as shown in lists."""
    id: str
    rarity: RarityTier
    weight: float
    type: RewardType
    display_name: str


class RewardDetailSchema(RewardSummarySchema):
    """Full reward preview."""
    material: Optional[str] = None
    amount: int
    required_level: int
    requires_special_ability: bool
    commands: List[str]
    broadcast: bool
    title: str
    subtitle: str


class RewardListResponse(BaseModel):
    rewards: List[RewardSummarySchema]
    total: int


class InfoResponse(BaseModel):
    reward_count: int
    total_weight: float
    claim_plugin: str
    capability_provider: str
    capability_enabled: bool
    rarity_counts: Dict[str, int]


class ReloadResponse(BaseModel):
    loaded: int
    failed: int
    errors: List[str]


class RollRequest(BaseModel):
    actor: str = Field(description="Actor name passed to the capability provider")
    world: Optional[str] = Field(
        default=None, description="Run the full catch flow (zone, cooldown) when given"
    )
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    bypass_cooldown: bool = False


class DeliverySchema(BaseModel):
    """Rendered messages for one catch."""
    player: str
    title: str
    subtitle: str
    commands: List[str]
    broadcast: Optional[str] = None
    action_bar: Optional[str] = None
    drop_at_hook: bool = False


class RollResponse(BaseModel):
    eligible: bool
    status: TriggerStatus
    reward: Optional[RewardSummarySchema] = None
    delivery: Optional[DeliverySchema] = None
    cooldown_remaining: int = 0


class OddsEntrySchema(BaseModel):
    id: str
    rarity: RarityTier
    adjusted_weight: float
    probability: float


class OddsResponse(BaseModel):
    actor: str
    level: int
    has_gate_ability: bool
    entries: List[OddsEntrySchema]


def reward_summary(reward: Reward) -> RewardSummarySchema:
    return RewardSummarySchema(
        id=reward.id,
        rarity=reward.rarity,
        weight=reward.base_weight,
        type=reward.payload.type,
        display_name=reward.payload.display_name,
    )


def reward_detail(reward: Reward) -> RewardDetailSchema:
    payload = reward.payload
    return RewardDetailSchema(
        id=reward.id,
        rarity=reward.rarity,
        weight=reward.base_weight,
        type=payload.type,
        display_name=payload.display_name,
        material=payload.material,
        amount=payload.amount,
        required_level=reward.required_level,
        requires_special_ability=reward.requires_special_ability,
        commands=list(payload.commands),
        broadcast=payload.broadcast,
        title=payload.title_message,
        subtitle=payload.subtitle_message,
    )


def delivery_schema(delivery: RewardDelivery) -> DeliverySchema:
    return DeliverySchema(
        player=delivery.player,
        title=delivery.title,
        subtitle=delivery.subtitle,
        commands=list(delivery.commands),
        broadcast=delivery.broadcast,
        action_bar=delivery.action_bar,
        drop_at_hook=delivery.drop_at_hook,
    )
