"""Bookmaker price quotes and events."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OddsFormat(str, Enum):
    """Odds format types."""
    AMERICAN = "american"  # e.g., -110, +150
    DECIMAL = "decimal"    # e.g., 1.91, 2.50
    FRACTIONAL = "fractional"  # e.g., 10/11, 3/2


class MarketType(str, Enum):
    """Market types, keyed as the odds provider keys them."""
    H2H = "h2h"  # Head-to-head (moneyline), 2-way or 3-way
    H2H_LAY = "h2h_lay"  # Exchange lay prices on h2h outcomes
    SPREADS = "spreads"
    TOTALS = "totals"

    @property
    def is_line_market(self) -> bool:
        return self in (MarketType.SPREADS, MarketType.TOTALS)


class PriceQuote(BaseModel):
    """
    A single decimal price from one bookmaker.

    Quotes are stored as read; unusable ones are filtered at
    combination time, never patched.
    """
    model_config = ConfigDict(frozen=True)

    bookmaker: str = Field(description="Bookmaker key (e.g., 'sportsbet')")
    outcome: str = Field(description="Outcome label (team, 'Draw', 'Over', 'Under')")
    odds: float = Field(description="Decimal odds")
    point: Optional[float] = Field(default=None, description="Line for spreads/totals")
    last_update: Optional[datetime] = None

    def is_usable(self, min_odds: float, needs_point: bool = False) -> bool:
        if self.odds <= min_odds:
            return False
        if needs_point and self.point is None:
            return False
        return True


class EventRef(BaseModel):
    """Reference to the originating event carried by every result."""
    model_config = ConfigDict(frozen=True)

    id: str
    sport: str
    sport_title: str = ""
    home: str
    away: str
    commence_time: Optional[datetime] = None

    @property
    def label(self) -> str:
        return f"{self.home} vs {self.away}"


class SportEvent(BaseModel):
    """
    One real-world event with every bookmaker's quotes, per market.

    Refreshed wholesale on each scan pass.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    sport: str
    sport_title: str = ""
    home: str
    away: str
    commence_time: Optional[datetime] = None
    markets: dict[MarketType, tuple[PriceQuote, ...]] = Field(default_factory=dict)

    def quotes(self, market: MarketType) -> tuple[PriceQuote, ...]:
        return self.markets.get(market, ())

    @property
    def bookmakers(self) -> set[str]:
        return {q.bookmaker for quotes in self.markets.values() for q in quotes}

    @property
    def quote_count(self) -> int:
        return sum(len(quotes) for quotes in self.markets.values())

    @property
    def ref(self) -> EventRef:
        return EventRef(
            id=self.id,
            sport=self.sport,
            sport_title=self.sport_title,
            home=self.home,
            away=self.away,
            commence_time=self.commence_time,
        )
