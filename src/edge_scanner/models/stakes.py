"""Stake allocation and naturalization results."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AllocationMode(str, Enum):
    """Stake allocation mode."""
    OPTIMAL = "optimal"  # Equal return on every leg
    FAVOUR = "favour"    # Break even on the others, extra profit on one leg


class LegAllocation(BaseModel):
    """Stake and outcome figures for one leg, rounded to cents."""
    model_config = ConfigDict(frozen=True)

    odds: float
    stake: float = Field(ge=0)
    payout: float = Field(description="Return if this leg wins")
    profit: float = Field(description="Net profit across all legs if this leg wins")


class AllocationResult(BaseModel):
    """Output of the stake allocator."""
    model_config = ConfigDict(frozen=True)

    mode: AllocationMode
    legs: tuple[LegAllocation, ...]
    total_staked: float
    min_profit: float = Field(description="Guaranteed figure in optimal mode")
    max_profit: float
    roi_pct: float = Field(description="min_profit / total_staked * 100")
    combined_implied: float
    favoured_index: Optional[int] = None
    fallback: bool = Field(default=False, description="Favour mode fell back to optimal stakes")
    warnings: tuple[str, ...] = ()

    @property
    def guaranteed(self) -> bool:
        return self.min_profit >= 0

    @property
    def stakes(self) -> tuple[float, ...]:
        return tuple(leg.stake for leg in self.legs)


class BackLayStakes(BaseModel):
    """Commission-aware back/lay stakes for an exchange arb."""
    model_config = ConfigDict(frozen=True)

    back_stake: float
    lay_stake: float
    lay_liability: float
    commission: float
    profit_if_back_wins: float
    profit_if_lay_wins: float
    guaranteed_profit: float
    profit_pct: float = Field(description="Guaranteed profit over total outlay")


class NaturalizedStake(BaseModel):
    """One leg's stake before and after rounding."""
    model_config = ConfigDict(frozen=True)

    bookmaker: str
    original: float
    rounded: float
    difference: float
    difference_pct: float
    granularity: float
    strategy: str
    warning: Optional[str] = None


class NaturalizedResult(BaseModel):
    """
    A view over an allocation with human-looking stakes.

    `allocation` holds the figures realized by the rounded stakes.
    """
    model_config = ConfigDict(frozen=True)

    stealth: bool
    legs: tuple[NaturalizedStake, ...]
    requested_total: float
    naturalized_total: float
    allocation: AllocationResult
    profit_impact: str
    warnings: tuple[str, ...] = ()

    @property
    def total_difference(self) -> float:
        return round(self.naturalized_total - self.requested_total, 2)
