"""Trigger flow - turns a catch into a delivered reward."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Hashable, Optional, Protocol

from pydantic import BaseModel, Field

from warzone_fishing.display import theme
from warzone_fishing.game.manager import RewardManager
from warzone_fishing.models.actor import Location
from warzone_fishing.models.rewards import Reward

logger = logging.getLogger(__name__)


class TriggerStatus(str, Enum):
    OUT_OF_ZONE = "out_of_zone"
    ON_COOLDOWN = "on_cooldown"
    NO_REWARD = "no_reward"
    REWARDED = "rewarded"


class RewardDelivery(BaseModel, frozen=True):
    """
    Everything the presentation and inventory side needs for one catch.

    Text is already coloured and has placeholders filled in.
    """

    reward: Reward
    player: str = Field(description="Actor display name")
    location: Location
    title: str
    subtitle: str
    fade_in: int = 10
    stay: int = 40
    fade_out: int = 10
    commands: tuple[str, ...] = Field(default=(), description="Console commands to dispatch")
    broadcast: Optional[str] = Field(default=None, description="Server-wide message, if any")
    action_bar: Optional[str] = Field(default=None, description="Action bar text, if any")
    drop_at_hook: bool = Field(default=False, description="Drop the item at the hook")


class TriggerOutcome(BaseModel, frozen=True):
    status: TriggerStatus
    delivery: Optional[RewardDelivery] = None
    cooldown_remaining: int = Field(default=0, ge=0, description="Seconds left on cooldown")

    @property
    def rewarded(self) -> bool:
        return self.status == TriggerStatus.REWARDED


class RewardSink(Protocol):
    """Presentation/inventory collaborator that acts on a delivery."""

    def deliver(self, actor: Any, delivery: RewardDelivery) -> None: ...


def _actor_name(actor: Any) -> str:
    name = getattr(actor, "name", None)
    return name if isinstance(name, str) else str(actor)


def _actor_key(actor: Any) -> Hashable:
    key = getattr(actor, "id", None)
    return key if key is not None else actor


class TriggerFlow:
    """
    Handles one triggering action at a time.

    Order: zone check, cooldown, draw, delivery.
    """

    def __init__(
        self,
        manager: RewardManager,
        sink: Optional[RewardSink] = None,
        clock: Callable[[], float] = time.monotonic,
        key_fn: Callable[[Any], Hashable] = _actor_key,
        name_fn: Callable[[Any], str] = _actor_name,
    ):
        self.manager = manager
        self.sink = sink
        self._clock = clock
        self._key_fn = key_fn
        self._name_fn = name_fn
        self._last_reward: dict[Hashable, float] = {}

    def handle(
        self, actor: Any, location: Location, *, bypass_cooldown: bool = False
    ) -> TriggerOutcome:
        """
        Run the full flow for one catch.

        Args:
            actor: Opaque actor handle (passed to providers and the sink)
            location: Where the hook landed
            bypass_cooldown: Skip the per-actor cooldown (admin permission)

        Returns:
            What happened; on REWARDED the delivery has already been sent
        """
        settings = self.manager.settings

        if not self.manager.zone_classifier.is_eligible(location):
            return TriggerOutcome(status=TriggerStatus.OUT_OF_ZONE)

        if not bypass_cooldown:
            remaining = self._check_cooldown(actor, settings.cooldown)
            if remaining > 0:
                return TriggerOutcome(status=TriggerStatus.ON_COOLDOWN, cooldown_remaining=remaining)

        reward = self.manager.select(actor)
        if reward is None:
            logger.warning("No rewards configured! Using default catch.")
            return TriggerOutcome(status=TriggerStatus.NO_REWARD)

        delivery = self.build_delivery(actor, reward, location)
        if self.sink is not None:
            self.sink.deliver(actor, delivery)
        return TriggerOutcome(status=TriggerStatus.REWARDED, delivery=delivery)

    def _check_cooldown(self, actor: Any, cooldown_seconds: int) -> int:
        """Return seconds left on cooldown, or 0 after recording this catch."""
        if cooldown_seconds <= 0:
            return 0

        key = self._key_fn(actor)
        now = self._clock()
        last = self._last_reward.get(key)
        if last is not None and now - last < cooldown_seconds:
            return max(1, int(cooldown_seconds - (now - last)))

        self._prune(now, cooldown_seconds)
        self._last_reward[key] = now
        return 0

    def _prune(self, now: float, cooldown_seconds: int) -> None:
        """Forget actors whose cooldown has already run out."""
        expired = [k for k, t in self._last_reward.items() if now - t >= cooldown_seconds]
        for key in expired:
            del self._last_reward[key]

    @property
    def tracked_actors(self) -> int:
        """Number of actors currently on cooldown."""
        return len(self._last_reward)

    def build_delivery(self, actor: Any, reward: Reward, location: Location) -> RewardDelivery:
        """Render every message of a reward for one actor."""
        settings = self.manager.settings
        payload = reward.payload
        player = self._name_fn(actor)

        def render(text: str) -> str:
            return theme.render_placeholders(theme.color(text), player, reward)

        broadcast = render(payload.broadcast_message) if payload.broadcast else None
        action_bar = render(settings.action_bar_message) if settings.action_bar_message else None

        return RewardDelivery(
            reward=reward,
            player=player,
            location=location,
            title=render(payload.title_message),
            subtitle=render(payload.subtitle_message),
            fade_in=settings.title_fade_in,
            stay=settings.title_stay,
            fade_out=settings.title_fade_out,
            commands=tuple(theme.render_placeholders(cmd, player, reward) for cmd in payload.commands),
            broadcast=broadcast,
            action_bar=action_bar,
            drop_at_hook=settings.drop_at_hook,
        )
