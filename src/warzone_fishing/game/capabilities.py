"""Optional capability provider discovery and the fail-safe bridge over it.

The provider (a progression plugin exposing levels and mask abilities) may not
be installed at all. Discovery happens once: a provider that is present and
passes a structural probe is bound; anything else binds a no-op adapter. Every
query on the bridge is total. Failures resolve to "no bonus, no special
access" and are never raised to the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from importlib.metadata import entry_points
from typing import Any, Optional, Protocol, runtime_checkable

from warzone_fishing.models.actor import ActorState

logger = logging.getLogger(__name__)

PROVIDER_ENTRY_POINT_GROUP = "warzone_fishing.providers"

# Query surface a capability provider must expose to be bound.
REQUIRED_METHODS = ("get_level", "has_ability", "get_ability_bonus")

DEFAULT_LEVEL = 1
DEFAULT_BONUS = 0


@runtime_checkable
class CapabilityProvider(Protocol):
    """Actor progression data supplied by an optional external system."""

    def get_level(self, actor: Any) -> int: ...

    def has_ability(self, actor: Any, key: str) -> bool: ...

    def get_ability_bonus(self, actor: Any, key: str) -> int: ...


class ProviderRegistry:
    """
    Named optional collaborators, looked up case-insensitively.

    This plays the part of a server's plugin manager: providers are
    registered by name (directly or from installed entry points), and the
    bridge and zone backends ask for them by name at startup.
    """

    def __init__(self, providers: Optional[dict[str, Any]] = None):
        self._providers: dict[str, Any] = {}
        for name, provider in (providers or {}).items():
            self.register(name, provider)

    def register(self, name: str, provider: Any) -> None:
        self._providers[name.casefold()] = provider

    def unregister(self, name: str) -> None:
        self._providers.pop(name.casefold(), None)

    def get(self, name: str) -> Optional[Any]:
        return self._providers.get(name.casefold())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._providers

    def names(self) -> list[str]:
        return sorted(self._providers)

    @classmethod
    def from_entry_points(cls, group: str = PROVIDER_ENTRY_POINT_GROUP) -> ProviderRegistry:
        """
        Build a registry from installed entry points.

        Each entry point loads a provider object; if it loads a class or
        factory, it is called with no arguments. A provider that fails to
        load is logged and left out.
        """
        registry = cls()
        for ep in entry_points(group=group):
            try:
                provider = ep.load()
                if isinstance(provider, type) or (
                    callable(provider) and not _has_query_surface(provider)
                ):
                    provider = provider()
            except Exception as e:
                logger.warning("Failed to load provider '%s': %s", ep.name, e)
                continue
            registry.register(ep.name, provider)
            logger.debug("Registered provider '%s' from entry point", ep.name)
        return registry


class BridgeState(str, Enum):
    DISABLED = "disabled"
    ENABLED = "enabled"


class _NullCapabilities:
    """Adapter used when no provider is bound: neutral answers only."""

    def get_level(self, actor: Any) -> int:
        return DEFAULT_LEVEL

    def has_ability(self, actor: Any, key: str) -> bool:
        return False

    def get_ability_bonus(self, actor: Any, key: str) -> int:
        return DEFAULT_BONUS


class _BoundCapabilities:
    """Adapter over a provider that passed the probe."""

    def __init__(self, provider: Any):
        self._get_level = provider.get_level
        self._has_ability = provider.has_ability
        self._get_ability_bonus = provider.get_ability_bonus

    def get_level(self, actor: Any) -> Any:
        return self._get_level(actor)

    def has_ability(self, actor: Any, key: str) -> Any:
        return self._has_ability(actor, key)

    def get_ability_bonus(self, actor: Any, key: str) -> Any:
        return self._get_ability_bonus(actor, key)


def _has_query_surface(provider: Any) -> bool:
    return all(callable(getattr(provider, name, None)) for name in REQUIRED_METHODS)


def _is_disabled(provider: Any) -> bool:
    """A provider reporting itself as disabled (like an unloaded plugin)."""
    for attr in ("is_enabled", "enabled"):
        flag = getattr(provider, attr, None)
        if flag is None:
            continue
        if callable(flag):
            flag = flag()
        return not flag
    return False


def probe_provider(provider: Any) -> bool:
    """Check that a provider is present, enabled and exposes the query surface."""
    if provider is None:
        return False
    try:
        if _is_disabled(provider):
            return False
        return _has_query_surface(provider)
    except Exception as e:
        logger.warning("Capability provider probe failed: %s", e)
        return False


class CapabilityBridge:
    """
    Read-only, never-failing view of actor capabilities.

    The bridge state is decided once at construction and does not change.
    Build a new bridge (e.g. on reload) to re-probe.
    """

    def __init__(self, provider: Any = None, name: str = "provider"):
        self.name = name
        if probe_provider(provider):
            self._adapter: Any = _BoundCapabilities(provider)
            self._state = BridgeState.ENABLED
            logger.info("Hooked into %s for level-based rewards", name)
        else:
            self._adapter = _NullCapabilities()
            self._state = BridgeState.DISABLED
            if provider is not None:
                logger.warning("Failed to hook into %s; level bonuses disabled", name)

    @classmethod
    def discover(cls, registry: Optional[ProviderRegistry], name: str) -> CapabilityBridge:
        """Look up a provider by name and bind it if it passes the probe."""
        provider = registry.get(name) if registry is not None else None
        if provider is None:
            logger.info("%s not found - fishing luck bonus disabled", name)
        return cls(provider, name=name)

    @classmethod
    def disabled(cls) -> CapabilityBridge:
        return cls(None)

    @property
    def state(self) -> BridgeState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._state == BridgeState.ENABLED

    def level(self, actor: Any) -> int:
        """Actor level; 1 when unknown or when the provider misbehaves."""
        try:
            value = self._adapter.get_level(actor)
        except Exception:
            logger.debug("Level query failed for %r", actor, exc_info=True)
            return DEFAULT_LEVEL
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.debug("Provider returned invalid level %r", value)
            return DEFAULT_LEVEL
        return value

    def has_ability(self, actor: Any, key: str) -> bool:
        """Whether the actor holds an ability; False on any failure."""
        try:
            value = self._adapter.has_ability(actor, key)
        except Exception:
            logger.debug("Ability query failed for %r", actor, exc_info=True)
            return False
        return value is True

    def ability_bonus_percent(self, actor: Any, key: str) -> int:
        """Luck bonus percent from an ability; 0 on any failure."""
        try:
            value = self._adapter.get_ability_bonus(actor, key)
        except Exception:
            logger.debug("Ability bonus query failed for %r", actor, exc_info=True)
            return DEFAULT_BONUS
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.debug("Provider returned invalid ability bonus %r", value)
            return DEFAULT_BONUS
        return value

    def actor_state(self, actor: Any, gate_key: str) -> ActorState:
        """Snapshot everything the engine needs about an actor."""
        has_gate = self.has_ability(actor, gate_key)
        return ActorState(
            level=self.level(actor),
            equipped_ability_key=gate_key if has_gate else None,
            ability_bonus_percent=self.ability_bonus_percent(actor, gate_key) if has_gate else 0,
        )
