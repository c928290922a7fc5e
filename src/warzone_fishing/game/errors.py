"""Exceptions raised by warzone fishing."""

from __future__ import annotations


class WarzoneFishingError(Exception):
    """Base class for all warzone fishing errors."""


class RewardLoadError(WarzoneFishingError, ValueError):
    """A single reward entry could not be loaded.

    Load errors are collected and reported; they never abort the load of the
    remaining entries.
    """

    def __init__(self, reward_id: str, reason: str):
        super().__init__(f"Failed to load reward '{reward_id}': {reason}")
        self.reward_id = reward_id
        self.reason = reason
