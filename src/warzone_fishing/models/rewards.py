"""Reward definitions for warzone fishing."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from warzone_fishing.models.rarity import RarityTier


class RewardType(str, Enum):
    """How a reward is handed out."""

    ITEM = "ITEM"  # Normal item
    CUSTOM = "CUSTOM"  # Item with skull texture or other special properties
    COMMAND = "COMMAND"  # Commands only, no item given


class RewardPayload(BaseModel, frozen=True):
    """
    Everything a reward carries for the presentation and inventory side.

    The selection engine never looks inside a payload. It is kept intact so
    the collaborators that build items, show titles and run commands get the
    configuration exactly as written.
    """

    type: RewardType = Field(default=RewardType.ITEM, description="Delivery kind")
    material: Optional[str] = Field(default=None, description="Item material token")
    amount: int = Field(default=1, ge=1, description="Stack size")
    data: int = Field(default=0, description="Legacy item damage/data value")
    display_name: str = Field(default="", description="Item display name (& colour codes)")
    lore: tuple[str, ...] = Field(default=(), description="Item lore lines")
    enchantments: dict[str, int] = Field(
        default_factory=dict, description="Enchantment name to level"
    )
    nbt: dict[str, Any] = Field(default_factory=dict, description="Custom NBT tags")
    skull_texture: Optional[str] = None
    skull_owner: Optional[str] = None
    title_message: str = Field(default="&3Fish Caught!", description="Title shown on catch")
    subtitle_message: str = Field(default="", description="Subtitle shown on catch")
    sound: str = Field(default="NOTE_PLING", description="Sound played on catch")
    sound_pitch: float = 1.0
    sound_volume: float = 1.0
    commands: tuple[str, ...] = Field(default=(), description="Console commands to run")
    broadcast: bool = Field(default=False, description="Announce the catch server-wide")
    broadcast_message: str = Field(default="", description="Broadcast template")
    hide_flags: bool = False
    unbreakable: bool = False
    glow: bool = False
    extra: dict[str, Any] = Field(
        default_factory=dict, description="Unrecognised configuration keys"
    )

    @property
    def has_item(self) -> bool:
        """Whether delivering this payload gives the actor an item."""
        return self.type != RewardType.COMMAND


class Reward(BaseModel, frozen=True):
    """
    A single entry in the reward catalog.

    Rewards:
    - Have a positive base weight used for the weighted draw
    - Have a rarity tier selecting the luck modifier that applies
    - May require a minimum progression level (0 = no requirement)
    - May require the special mask ability to be drawn at all
    """

    id: str = Field(min_length=1, description="Unique identifier (case-insensitive)")
    base_weight: float = Field(gt=0, description="Relative selection weight")
    rarity: RarityTier = Field(default=RarityTier.COMMON, description="Rarity tier")
    required_level: int = Field(default=0, ge=0, description="Minimum level (0 = none)")
    requires_special_ability: bool = Field(
        default=False, description="Only drawable with the gate ability"
    )
    payload: RewardPayload = Field(default_factory=RewardPayload)

    @field_validator("base_weight")
    @classmethod
    def validate_finite_weight(cls, value: float) -> float:
        """Reject infinite weights; they would swallow every other reward."""
        if not math.isfinite(value):
            raise ValueError("Reward weight must be finite")
        return value

    @property
    def key(self) -> str:
        """Case-folded id used for lookups and equality."""
        return self.id.casefold()

    def __hash__(self) -> int:
        return hash(self.key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reward):
            return NotImplemented
        return self.key == other.key
