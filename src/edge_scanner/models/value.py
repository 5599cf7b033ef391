"""Value bet records."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from edge_scanner.models.odds import EventRef, MarketType
from edge_scanner.models.opportunity import Leg


class ValueBet(BaseModel):
    """
    A single outcome priced above the market consensus.

    Profitable in expectation only; never a guaranteed return.
    """
    model_config = ConfigDict(frozen=True)

    event: EventRef
    market: MarketType
    leg: Leg
    market_average: float = Field(description="Mean decimal odds across all quotes for the outcome")
    edge_pct: float = Field(description="(best / market_average - 1) * 100")
    quote_count: int = Field(ge=2)
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ValueBetProjection(BaseModel):
    """Expected value of a stake, taking the market average as the true price."""
    model_config = ConfigDict(frozen=True)

    stake: float
    win_probability: float = Field(ge=0, le=1)
    potential_profit: float
    expected_value: float
    ev_pct: float
