"""Configuration objects for reward selection and the fishing trigger."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


# Luck: +2.5% per level, capped at level 14 (max +35%)
LEVEL_CAP = 14
PER_LEVEL_BONUS = 0.025

# Extra multipliers on top of luck for the higher tiers
EPIC_MULTIPLIER = 1.25
LEGENDARY_MULTIPLIER = 1.5

# Ability that unlocks masked rewards and grants the rare+ luck bonus
GATE_ABILITY = "MASK_FISHING_REWARDS"


class EngineConfig(BaseModel, frozen=True):
    """Tuning knobs for the selection engine."""

    level_cap: int = Field(default=LEVEL_CAP, ge=0, description="Highest level that adds luck")
    per_level_bonus: float = Field(
        default=PER_LEVEL_BONUS, ge=0, description="Luck added per level"
    )
    epic_multiplier: float = Field(default=EPIC_MULTIPLIER, gt=0)
    legendary_multiplier: float = Field(default=LEGENDARY_MULTIPLIER, gt=0)
    gate_key: str = Field(default=GATE_ABILITY, min_length=1, description="Gate ability key")
    strict_eligibility: bool = Field(
        default=False,
        description="Return no reward instead of the first one when nothing is eligible",
    )


class TriggerSettings(BaseModel, frozen=True, populate_by_name=True):
    """The `settings` section of the fishing configuration file."""

    claim_plugin: str = Field(
        default="factions", alias="claim-plugin", description="Zone backend to use"
    )
    worldguard_region: str = Field(default="warzone", alias="worldguard-region")
    allowed_worlds: tuple[str, ...] = Field(default=(), alias="allowed-worlds")
    cooldown: int = Field(default=0, ge=0, description="Seconds between rewards per actor")
    drop_at_hook: bool = Field(default=False, alias="drop-at-hook")
    title_fade_in: int = Field(default=10, ge=0, alias="title-fade-in")
    title_stay: int = Field(default=40, ge=0, alias="title-stay")
    title_fade_out: int = Field(default=10, ge=0, alias="title-fade-out")
    action_bar_message: str = Field(default="", alias="action-bar-message")
    capability_provider: str = Field(
        default="HeadHunting",
        alias="capability-provider",
        description="Registry name of the optional level/ability provider",
    )
    gate_ability: str = Field(default=GATE_ABILITY, alias="gate-ability", min_length=1)

    @field_validator("claim_plugin")
    @classmethod
    def normalize_claim_plugin(cls, value: str) -> str:
        return value.strip().lower()


class FishingConfig(BaseModel, frozen=True):
    """A whole configuration file: settings plus raw reward entries.

    Reward entries stay raw here; the catalog loader validates them one by
    one so a bad entry never takes the rest down with it.
    """

    settings: TriggerSettings = Field(default_factory=TriggerSettings)
    rewards: dict[str, Any] = Field(default_factory=dict, description="Reward id to raw entry")

    @classmethod
    def from_payload(cls, payload: Any) -> FishingConfig:
        """Build a config from parsed JSON/YAML, tolerating a bad rewards section."""
        if not isinstance(payload, dict):
            raise ValueError("Configuration root must be a mapping")
        rewards = payload.get("rewards")
        if not isinstance(rewards, dict):
            rewards = {}
        return cls(settings=payload.get("settings") or {}, rewards=rewards)

    def engine_config(self, base: EngineConfig | None = None) -> EngineConfig:
        """Engine config with the gate key taken from these settings."""
        base = base or EngineConfig()
        return base.model_copy(update={"gate_key": self.settings.gate_ability})
