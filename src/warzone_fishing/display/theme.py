"""Message formatting with the teal/aqua fishing theme.

Pure functions over strings and rewards. `&` colour codes are translated to
the section-sign form game clients render.
"""

from __future__ import annotations

import re
from typing import Optional

from warzone_fishing.models.rarity import RarityTier
from warzone_fishing.models.rewards import Reward

COLOR_CHAR = "§"
ALT_COLOR_CHAR = "&"

PREFIX = "&3&l「&b&lWZ&3&l」&r "

# Rarity colours
RARITY_COLORS: dict[RarityTier, str] = {
    RarityTier.COMMON: "&7",  # Gray
    RarityTier.UNCOMMON: "&a",  # Green
    RarityTier.RARE: "&3",  # Dark aqua
    RarityTier.EPIC: "&5",  # Dark purple
    RarityTier.LEGENDARY: "&6",  # Gold
}
DEFAULT_RARITY_COLOR = RARITY_COLORS[RarityTier.COMMON]

_ALT_CODE = re.compile(r"&([0-9a-fk-orA-FK-OR])")
_COLOR_CODE = re.compile(f"{COLOR_CHAR}[0-9a-fk-orA-FK-OR]")


def color(message: Optional[str]) -> str:
    """Translate `&` colour codes."""
    if message is None:
        return ""
    return _ALT_CODE.sub(lambda m: COLOR_CHAR + m.group(1).lower(), message)


def strip_color(message: Optional[str]) -> str:
    """Remove colour codes (either form)."""
    return _COLOR_CODE.sub("", color(message))


def rarity_color(rarity: RarityTier | str | None) -> str:
    """Colour code for a rarity; unknown tiers use the common colour."""
    if rarity is None:
        return DEFAULT_RARITY_COLOR
    try:
        tier = RarityTier.parse(rarity)
    except ValueError:
        return DEFAULT_RARITY_COLOR
    return RARITY_COLORS.get(tier, DEFAULT_RARITY_COLOR)


def format_rarity(rarity: RarityTier | str) -> str:
    name = rarity.value if isinstance(rarity, RarityTier) else str(rarity)
    return color(rarity_color(rarity) + name)


def prefixed(message: str) -> str:
    return color(PREFIX + message)


def header(title: str) -> str:
    return color(f"&3═══════ &b{title} &3═══════")


def footer() -> str:
    return color("&3" + "═" * 31)


def item_display_name(reward: Reward) -> str:
    """
    Name used for `{item}`.

    The display name if set, else the material as title case
    (GOLDEN_APPLE -> Golden Apple), else "Unknown Item".
    """
    payload = reward.payload
    if payload.display_name:
        return color(payload.display_name)
    if payload.material:
        return payload.material.replace("_", " ").title()
    return "Unknown Item"


def render_placeholders(text: Optional[str], player: str, reward: Reward) -> str:
    """Fill `{player}`, `{item}`, `{rarity}`, `{rarity_color}` and `{id}`."""
    if text is None:
        return ""
    return (
        text.replace("{player}", player)
        .replace("{item}", item_display_name(reward))
        .replace("{rarity}", reward.rarity.value)
        .replace("{rarity_color}", color(rarity_color(reward.rarity)))
        .replace("{id}", reward.id)
    )


def list_entry(reward: Reward) -> str:
    """One line of the reward list."""
    code = rarity_color(reward.rarity)
    return color(
        f"{code}• &f{reward.id} &7- Chance: &b{reward.base_weight:.2f}"
        f" &7- Rarity: {code}{reward.rarity.value}"
    )
