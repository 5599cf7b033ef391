"""Bookmaker risk profile reference data."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RiskTier(str, Enum):
    """How quickly a bookmaker limits winning accounts."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class RoundingPolicy(str, Enum):
    """Stake rounding granularity policy."""
    AGGRESSIVE = "aggressive"      # Finer rounding, keeps more profit
    MODERATE = "moderate"
    CONSERVATIVE = "conservative"  # Coarser, rounder numbers


class BookmakerProfile(BaseModel):
    """Static risk guidance for one bookmaker."""
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    risk_tier: RiskTier = RiskTier.MEDIUM
    rounding: RoundingPolicy = RoundingPolicy.MODERATE
    limiting_speed: str = "months"
    avg_account_lifespan: str = ""
    notes: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()


def normalize_name(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


class ProfileTable(BaseModel):
    """
    Read-only table of bookmaker profiles.

    Lookups accept API keys, display names and common aliases.
    """
    model_config = ConfigDict(frozen=True)

    profiles: dict[str, BookmakerProfile] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)
    default: BookmakerProfile = BookmakerProfile(key="unknown", name="Unknown")

    def find(self, name: str) -> Optional[BookmakerProfile]:
        """Resolve a bookmaker key or name, or None if unknown."""
        if name in self.profiles:
            return self.profiles[name]

        normalized = normalize_name(name)
        by_normalized_key = {normalize_name(k): p for k, p in self.profiles.items()}
        for candidate in (normalized, f"{normalized}au"):
            if candidate in by_normalized_key:
                return by_normalized_key[candidate]

        alias = self.aliases.get(normalized)
        if alias and alias in self.profiles:
            return self.profiles[alias]

        for profile in self.profiles.values():
            profile_name = normalize_name(profile.name)
            if profile_name and normalized and (profile_name in normalized or normalized in profile_name):
                return profile

        return None

    def lookup(self, name: str) -> BookmakerProfile:
        """Resolve a bookmaker, falling back to the default profile."""
        profile = self.find(name)
        if profile is None:
            return self.default.model_copy(update={"key": name, "name": name})
        return profile
