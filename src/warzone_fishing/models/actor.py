"""Per-call actor state and trigger locations."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ActorState(BaseModel, frozen=True):
    """
    What the selection engine knows about an actor for one draw.

    Built fresh from the capability bridge on every selection; never stored.
    """

    level: int = Field(default=1, ge=0, description="Progression level (1 when unknown)")
    equipped_ability_key: Optional[str] = Field(
        default=None, description="Gate ability the actor holds, if any"
    )
    ability_bonus_percent: int = Field(
        default=0, ge=0, description="Luck bonus from the held ability (percent)"
    )

    @property
    def has_gate_ability(self) -> bool:
        return self.equipped_ability_key is not None


class Location(BaseModel, frozen=True):
    """A point in a named world where a triggering action happened."""

    world: str = Field(description="World name")
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
