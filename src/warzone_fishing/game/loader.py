"""Build a reward catalog from raw configuration entries."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Collection, Mapping, Optional

from pydantic import ValidationError

from warzone_fishing.game.errors import RewardLoadError
from warzone_fishing.models.catalog import RewardCatalog
from warzone_fishing.models.rarity import RarityTier
from warzone_fishing.models.rewards import Reward, RewardPayload, RewardType

logger = logging.getLogger(__name__)

DEFAULT_MATERIAL = "STONE"
SKULL_MATERIAL = "SKULL_ITEM"
DEFAULT_TITLE = "&3Fish Caught!"
DEFAULT_SOUND = "NOTE_PLING"

_MATERIAL_TOKEN = re.compile(r"^[A-Z][A-Z0-9_]*$")

# Keys consumed by the loader; anything else lands in `payload.extra`.
_KNOWN_KEYS = frozenset(
    {
        "type", "material", "amount", "data", "display-name", "lore", "enchantments",
        "nbt", "skull-texture", "skull-owner", "title-message", "subtitle-message",
        "sound", "sound-pitch", "sound-volume", "commands", "broadcast",
        "broadcast-message", "hide-flags", "unbreakable", "glow", "weight", "chance",
        "rarity", "required-level", "requires-ability", "requires-guardian-mask",
    }
)


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one load pass: the new catalog plus every rejected entry."""

    catalog: RewardCatalog
    errors: tuple[RewardLoadError, ...] = ()

    @property
    def loaded(self) -> int:
        return len(self.catalog)

    @property
    def failed(self) -> int:
        return len(self.errors)


def load_catalog(
    raw_entries: Optional[Mapping[str, Any]],
    known_materials: Optional[Collection[str]] = None,
    known_sounds: Optional[Collection[str]] = None,
    known_enchantments: Optional[Collection[str]] = None,
) -> LoadResult:
    """
    Load every reward entry, skipping the ones that are malformed.

    Args:
        raw_entries: Mapping of reward id to its raw configuration record
        known_materials: Valid material names; when omitted any well-formed
            material token is accepted
        known_sounds: Valid sound names; unknown sounds fall back to NOTE_PLING
        known_enchantments: Valid enchantment names; unknown ones are dropped

    Returns:
        LoadResult with a catalog sorted by ascending weight
    """
    if not raw_entries:
        logger.warning("No rewards configured; the catalog is empty")
        return LoadResult(catalog=RewardCatalog.empty())

    materials = _upper_set(known_materials)
    sounds = _upper_set(known_sounds)
    enchantments = _upper_set(known_enchantments)

    rewards: list[Reward] = []
    errors: list[RewardLoadError] = []
    seen: set[str] = set()

    for reward_id, section in raw_entries.items():
        try:
            reward = parse_reward(str(reward_id), section, materials, sounds, enchantments)
            if reward.key in seen:
                raise RewardLoadError(reward.id, "duplicate reward id")
        except RewardLoadError as e:
            logger.warning("%s", e)
            errors.append(e)
            continue
        seen.add(reward.key)
        rewards.append(reward)

    catalog = RewardCatalog.from_rewards(rewards)

    if errors:
        logger.warning("Failed to load %d reward(s). Check your config!", len(errors))
    logger.info(
        "Loaded %d rewards with total weight %.2f", len(catalog), catalog.total_base_weight
    )
    return LoadResult(catalog=catalog, errors=tuple(errors))


def parse_reward(
    reward_id: str,
    section: Any,
    known_materials: Optional[Collection[str]] = None,
    known_sounds: Optional[Collection[str]] = None,
    known_enchantments: Optional[Collection[str]] = None,
) -> Reward:
    """Parse one raw entry into a Reward, raising RewardLoadError if it is unusable."""
    if not reward_id.strip():
        raise RewardLoadError(reward_id, "reward id must not be empty")
    if not isinstance(section, Mapping):
        raise RewardLoadError(reward_id, "entry must be a mapping")

    known_materials = _upper_set(known_materials)
    known_sounds = _upper_set(known_sounds)
    known_enchantments = _upper_set(known_enchantments)

    reward_type = _parse_type(section.get("type", RewardType.ITEM.value))
    material = _resolve_material(reward_id, section, reward_type, known_materials)

    weight = _parse_weight(reward_id, section)
    try:
        rarity = RarityTier.parse(section.get("rarity", RarityTier.COMMON.value))
    except ValueError as e:
        raise RewardLoadError(reward_id, str(e)) from None

    required_level = _parse_int(reward_id, section, "required-level", 0)
    if required_level < 0:
        raise RewardLoadError(reward_id, f"required-level must be >= 0, got {required_level}")

    requires_ability = rarity.is_gated
    for key in ("requires-ability", "requires-guardian-mask"):
        if key in section:
            requires_ability = _parse_bool(reward_id, section, key, False)
            break

    try:
        payload = _build_payload(
            reward_id, section, reward_type, material, known_sounds, known_enchantments
        )
        return Reward(
            id=reward_id,
            base_weight=weight,
            rarity=rarity,
            required_level=required_level,
            requires_special_ability=requires_ability,
            payload=payload,
        )
    except ValidationError as e:
        raise RewardLoadError(reward_id, _first_error(e)) from None


def _parse_type(value: Any) -> RewardType:
    try:
        return RewardType(str(value).strip().upper())
    except ValueError:
        return RewardType.ITEM


def _resolve_material(
    reward_id: str,
    section: Mapping[str, Any],
    reward_type: RewardType,
    known_materials: Optional[Collection[str]],
) -> Optional[str]:
    """Resolve the item material; command-only rewards don't need one."""
    if reward_type == RewardType.COMMAND:
        return None

    name = str(section.get("material", DEFAULT_MATERIAL)).strip().upper()
    if _is_known_material(name, known_materials):
        return name

    logger.warning("Invalid material for reward '%s': %s", reward_id, name)
    if reward_type == RewardType.CUSTOM and (
        section.get("skull-texture") or section.get("skull-owner")
    ):
        return SKULL_MATERIAL
    raise RewardLoadError(reward_id, f"invalid material: {name}")


def _upper_set(names: Optional[Collection[str]]) -> Optional[frozenset[str]]:
    if names is None:
        return None
    return frozenset(str(n).upper() for n in names)


def _is_known_material(name: str, known_materials: Optional[Collection[str]]) -> bool:
    if known_materials is not None:
        return name in known_materials
    return bool(_MATERIAL_TOKEN.match(name))


def _parse_weight(reward_id: str, section: Mapping[str, Any]) -> float:
    raw = section.get("weight", section.get("chance", 1.0))
    if isinstance(raw, bool):
        raise RewardLoadError(reward_id, f"weight must be a number, got {raw!r}")
    try:
        weight = float(raw)
    except (TypeError, ValueError):
        raise RewardLoadError(reward_id, f"weight must be a number, got {raw!r}") from None
    if not math.isfinite(weight) or weight <= 0:
        raise RewardLoadError(reward_id, f"invalid weight {weight}, must be > 0")
    return weight


def _parse_int(reward_id: str, section: Mapping[str, Any], key: str, default: int) -> int:
    raw = section.get(key, default)
    if isinstance(raw, bool):
        raise RewardLoadError(reward_id, f"{key} must be an integer, got {raw!r}")
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    raise RewardLoadError(reward_id, f"{key} must be an integer, got {raw!r}")


def _parse_bool(reward_id: str, section: Mapping[str, Any], key: str, default: bool) -> bool:
    raw = section.get(key, default)
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
        return raw.strip().lower() == "true"
    raise RewardLoadError(reward_id, f"{key} must be true or false, got {raw!r}")


def _string_list(reward_id: str, section: Mapping[str, Any], key: str) -> tuple[str, ...]:
    raw = section.get(key) or []
    if isinstance(raw, str):
        return (raw,)
    if not isinstance(raw, (list, tuple)):
        raise RewardLoadError(reward_id, f"{key} must be a list of strings")
    return tuple(str(line) for line in raw)


def _load_enchantments(
    reward_id: str,
    section: Mapping[str, Any],
    known_enchantments: Optional[Collection[str]] = None,
) -> dict[str, int]:
    raw = section.get("enchantments") or {}
    if not isinstance(raw, Mapping):
        raise RewardLoadError(reward_id, "enchantments must be a mapping")

    enchantments: dict[str, int] = {}
    for name, level in raw.items():
        if isinstance(level, bool) or not isinstance(level, int) or level < 1:
            logger.warning("Unknown enchantment level for '%s': %s=%r", reward_id, name, level)
            continue
        key = str(name).upper()
        if known_enchantments is not None and key not in known_enchantments:
            logger.warning("Unknown enchantment for '%s': %s", reward_id, name)
            continue
        enchantments[key] = level
    return enchantments


def _resolve_sound(
    reward_id: str, section: Mapping[str, Any], known_sounds: Optional[Collection[str]]
) -> str:
    name = str(section.get("sound") or DEFAULT_SOUND).strip().upper()
    if known_sounds is not None and name not in known_sounds:
        logger.warning("Invalid sound for reward '%s': %s, using %s", reward_id, name, DEFAULT_SOUND)
        return DEFAULT_SOUND
    return name


def _build_payload(
    reward_id: str,
    section: Mapping[str, Any],
    reward_type: RewardType,
    material: Optional[str],
    known_sounds: Optional[Collection[str]] = None,
    known_enchantments: Optional[Collection[str]] = None,
) -> RewardPayload:
    display_name = str(section.get("display-name", ""))
    nbt = section.get("nbt") or {}
    if not isinstance(nbt, Mapping):
        raise RewardLoadError(reward_id, "nbt must be a mapping")

    return RewardPayload(
        type=reward_type,
        material=material,
        amount=_parse_int(reward_id, section, "amount", 1),
        data=_parse_int(reward_id, section, "data", 0),
        display_name=display_name,
        lore=_string_list(reward_id, section, "lore"),
        enchantments=_load_enchantments(reward_id, section, known_enchantments),
        nbt=dict(nbt),
        skull_texture=section.get("skull-texture"),
        skull_owner=section.get("skull-owner"),
        title_message=str(section.get("title-message", DEFAULT_TITLE)),
        subtitle_message=str(section.get("subtitle-message", f"&b{display_name}")),
        sound=_resolve_sound(reward_id, section, known_sounds),
        sound_pitch=section.get("sound-pitch", 1.0),
        sound_volume=section.get("sound-volume", 1.0),
        commands=_string_list(reward_id, section, "commands"),
        broadcast=_parse_bool(reward_id, section, "broadcast", False),
        broadcast_message=str(
            section.get(
                "broadcast-message",
                f"&3&l[FISHING] &b{{player}} &fcaught a {display_name}&f!",
            )
        ),
        hide_flags=_parse_bool(reward_id, section, "hide-flags", False),
        unbreakable=_parse_bool(reward_id, section, "unbreakable", False),
        glow=_parse_bool(reward_id, section, "glow", False),
        extra={k: v for k, v in section.items() if k not in _KNOWN_KEYS},
    )


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
