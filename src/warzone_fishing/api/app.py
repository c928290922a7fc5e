"""FastAPI admin surface for a reward manager."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request

from warzone_fishing.analysis.odds import selection_probabilities
from warzone_fishing.api.schemas import (
    InfoResponse,
    OddsEntrySchema,
    OddsResponse,
    ReloadResponse,
    RewardDetailSchema,
    RewardListResponse,
    RollRequest,
    RollResponse,
    delivery_schema,
    reward_detail,
    reward_summary,
)
from warzone_fishing.api.settings import ServiceSettings, get_settings
from warzone_fishing.data import load_config
from warzone_fishing.game.capabilities import ProviderRegistry
from warzone_fishing.game.manager import RewardManager
from warzone_fishing.game.trigger import TriggerFlow, TriggerStatus
from warzone_fishing.models.actor import Location
from warzone_fishing.models.rarity import RarityTier
from warzone_fishing.models.rewards import Reward

logger = logging.getLogger(__name__)


def build_manager(settings: ServiceSettings) -> RewardManager:
    """Create a manager from service settings (config file, seed, entry points)."""
    registry = ProviderRegistry.from_entry_points() if settings.load_entry_points else ProviderRegistry()
    return RewardManager(
        config=load_config(settings.config_path),
        registry=registry,
        seed=settings.seed,
    )


def create_app(
    manager: Optional[RewardManager] = None,
    settings: Optional[ServiceSettings] = None,
) -> FastAPI:
    """
    Build the admin API.

    Args:
        manager: Manager to serve; built from settings when omitted
        settings: Service settings (defaults to the environment)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    manager = manager or build_manager(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Inspect, preview and reload warzone fishing rewards",
        version="1.0.0",
    )
    app.state.manager = manager
    app.state.settings = settings
    app.state.flow = TriggerFlow(manager)

    def get_manager(request: Request) -> RewardManager:
        return request.app.state.manager

    def get_reward_or_404(request: Request, reward_id: str) -> Reward:
        reward = get_manager(request).get_reward(reward_id)
        if reward is None:
            raise HTTPException(status_code=404, detail=f"Reward not found: {reward_id}")
        return reward

    @app.get("/")
    async def root():
        return {"status": "ok", "service": settings.app_name}

    @app.get("/rewards", response_model=RewardListResponse)
    async def list_rewards(request: Request, rarity: Optional[str] = None):
        mgr = get_manager(request)
        if rarity is None:
            rewards = list(mgr.catalog)
        else:
            try:
                tier = RarityTier.parse(rarity)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            rewards = mgr.rewards_by_rarity(tier)
        return RewardListResponse(
            rewards=[reward_summary(r) for r in rewards],
            total=len(rewards),
        )

    @app.get("/rewards/{reward_id}", response_model=RewardDetailSchema)
    async def get_reward(request: Request, reward_id: str):
        return reward_detail(get_reward_or_404(request, reward_id))

    @app.get("/info", response_model=InfoResponse)
    async def info(request: Request):
        mgr = get_manager(request)
        return InfoResponse(
            reward_count=mgr.reward_count,
            total_weight=mgr.total_weight,
            claim_plugin=mgr.settings.claim_plugin,
            capability_provider=mgr.bridge.name,
            capability_enabled=mgr.bridge.enabled,
            rarity_counts={tier.value: n for tier, n in mgr.catalog.rarity_counts().items()},
        )

    @app.get("/odds", response_model=OddsResponse)
    async def odds(request: Request, actor: str):
        snap = get_manager(request).snapshot
        state = snap.engine.actor_state(actor, snap.bridge)
        weights = snap.engine.adjusted_weights(snap.catalog, state)
        probabilities = selection_probabilities(snap.catalog, state, snap.engine)
        return OddsResponse(
            actor=actor,
            level=state.level,
            has_gate_ability=state.has_gate_ability,
            entries=[
                OddsEntrySchema(
                    id=reward.id,
                    rarity=reward.rarity,
                    adjusted_weight=weight,
                    probability=probabilities[reward.id],
                )
                for reward, weight in zip(snap.catalog, weights)
            ],
        )

    @app.post("/roll", response_model=RollResponse)
    async def roll(request: Request, body: RollRequest):
        if body.world is None:
            # Plain draw without the zone and cooldown checks
            reward = get_manager(request).select(body.actor)
            if reward is None:
                return RollResponse(eligible=True, status=TriggerStatus.NO_REWARD)
            return RollResponse(
                eligible=True, status=TriggerStatus.REWARDED, reward=reward_summary(reward)
            )

        flow: TriggerFlow = request.app.state.flow
        location = Location(world=body.world, x=body.x, y=body.y, z=body.z)
        outcome = flow.handle(body.actor, location, bypass_cooldown=body.bypass_cooldown)
        delivery = outcome.delivery
        return RollResponse(
            eligible=outcome.status != TriggerStatus.OUT_OF_ZONE,
            status=outcome.status,
            reward=reward_summary(delivery.reward) if delivery is not None else None,
            delivery=delivery_schema(delivery) if delivery is not None else None,
            cooldown_remaining=outcome.cooldown_remaining,
        )

    @app.post("/reload", response_model=ReloadResponse)
    async def reload(request: Request):
        mgr = get_manager(request)
        try:
            config = load_config(request.app.state.settings.config_path)
        except (OSError, ValueError) as e:
            logger.error("Reload failed: %s", e)
            raise HTTPException(status_code=400, detail=f"Reload failed: {e}")
        result = mgr.reload(config)
        return ReloadResponse(
            loaded=result.loaded,
            failed=result.failed,
            errors=[str(e) for e in result.errors],
        )

    return app
