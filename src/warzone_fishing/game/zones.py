"""Zone classifiers - where fishing rewards may trigger."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Protocol

from warzone_fishing.game.capabilities import ProviderRegistry
from warzone_fishing.game.config import TriggerSettings
from warzone_fishing.models.actor import Location

logger = logging.getLogger(__name__)

WARZONE_TAG = "warzone"
FACTIONS_PROVIDER = "Factions"
WORLDGUARD_PROVIDER = "WorldGuard"


class ZoneClassifier(Protocol):
    def is_eligible(self, location: Location) -> bool: ...


class RegionProvider(Protocol):
    """A region system that can list the regions covering a location."""

    def regions_at(self, location: Location) -> Iterable[str]: ...


class ClaimProvider(Protocol):
    """A land-claim system that reports the claim covering a location."""

    def claim_at(self, location: Location) -> Optional[Any]: ...


class DefaultAllow:
    """Every location is eligible."""

    def is_eligible(self, location: Location) -> bool:
        return True


class ConfiguredWorldList:
    """Eligible in the configured worlds; an empty list allows every world."""

    def __init__(self, worlds: Iterable[str] = ()):
        self.worlds = frozenset(worlds)

    def is_eligible(self, location: Location) -> bool:
        if not self.worlds:
            return True
        return location.world in self.worlds


def _bind(provider: Any, method: str, label: str) -> Any:
    """Return the provider if it exposes `method`, else None."""
    if provider is None:
        return None
    try:
        if callable(getattr(provider, method, None)):
            return provider
    except Exception as e:
        logger.warning("%s probe failed: %s", label, e)
        return None
    logger.warning("%s does not expose %s(); zone checks will fail closed", label, method)
    return None


class NamedRegionMembership:
    """Eligible inside a named region (WorldGuard-style)."""

    def __init__(self, region_id: str, provider: Optional[RegionProvider] = None):
        self.region_id = region_id
        self._provider = _bind(provider, "regions_at", "Region provider")

    @property
    def enabled(self) -> bool:
        return self._provider is not None

    def is_eligible(self, location: Location) -> bool:
        if self._provider is None:
            return False
        wanted = self.region_id.casefold()
        try:
            regions = self._provider.regions_at(location)
            return any(str(region).casefold() == wanted for region in regions)
        except Exception as e:
            logger.warning("Error checking region '%s': %s", self.region_id, e)
            return False


class ClaimTagMembership:
    """Eligible inside a claim flagged as a war zone (Factions-style)."""

    def __init__(self, tag: str = WARZONE_TAG, provider: Optional[ClaimProvider] = None):
        self.tag = tag
        self._provider = _bind(provider, "claim_at", "Claim provider")

    @property
    def enabled(self) -> bool:
        return self._provider is not None

    def is_eligible(self, location: Location) -> bool:
        if self._provider is None:
            return False
        try:
            claim = self._provider.claim_at(location)
            return claim is not None and self._matches(claim)
        except Exception as e:
            logger.warning("Error checking claim at %s: %s", location, e)
            return False

    def _matches(self, claim: Any) -> bool:
        flag = getattr(claim, "is_war_zone", None)
        if callable(flag):
            flag = flag()
        if flag is True:
            return True

        wanted = self.tag.casefold()
        for attr in ("tag", "id"):
            value = getattr(claim, attr, None)
            if isinstance(value, str) and value.casefold() == wanted:
                return True
        return False


def build_zone_classifier(
    settings: TriggerSettings, registry: Optional[ProviderRegistry] = None
) -> ZoneClassifier:
    """Pick the zone backend named by `settings.claim_plugin`."""
    registry = registry or ProviderRegistry()
    backend = settings.claim_plugin

    if backend == "all":
        return DefaultAllow()
    if backend == "none":
        logger.info("Running in 'none' mode - fishing allowed in configured worlds")
        return ConfiguredWorldList(settings.allowed_worlds)
    if backend == "worldguard":
        provider = registry.get(WORLDGUARD_PROVIDER)
        if provider is None:
            logger.warning("WorldGuard not found! Region detection may not work")
        return NamedRegionMembership(settings.worldguard_region, provider)

    if backend not in ("factions", "factionsuuid"):
        logger.warning("Unknown claim plugin '%s', using factions", backend)
    provider = registry.get(FACTIONS_PROVIDER)
    if provider is None:
        logger.warning("Factions not found! Warzone detection may not work")
    return ClaimTagMembership(WARZONE_TAG, provider)

