"""Configuration file loading utilities."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from warzone_fishing.game.config import FishingConfig

_DATA_DIR = Path(__file__).parent

DEFAULT_CONFIG_PATH = _DATA_DIR / "rewards.json"


def read_config_file(path: str | Path) -> Any:
    """Parse a JSON or YAML (by suffix) configuration file."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in (".yml", ".yaml"):
            import yaml

            return yaml.safe_load(f) or {}
        return json.load(f)


def load_config(path: Optional[str | Path] = None) -> FishingConfig:
    """Load a fishing configuration, defaulting to the bundled rewards file."""
    from warzone_fishing.game.config import FishingConfig

    return FishingConfig.from_payload(read_config_file(path or DEFAULT_CONFIG_PATH))


__all__ = ["DEFAULT_CONFIG_PATH", "read_config_file", "load_config"]
