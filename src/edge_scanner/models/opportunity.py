"""Opportunity records produced by the classifiers."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from edge_scanner.models.odds import EventRef, MarketType


class Classification(str, Enum):
    """How an outcome set's combined implied probability was classified."""
    ARBITRAGE = "arbitrage"
    NEAR_ARBITRAGE = "near_arbitrage"


class Leg(BaseModel):
    """One bet of an opportunity."""
    model_config = ConfigDict(frozen=True)

    outcome: str
    bookmaker: str
    odds: float
    point: Optional[float] = None


class _OpportunityBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    classification: Classification
    combined_implied: float = Field(description="Sum of the legs' implied probabilities")
    profit_pct: float = Field(description="(1 / combined_implied - 1) * 100")
    event: EventRef
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def legs(self) -> tuple[Leg, ...]:
        raise NotImplementedError

    @property
    def bookmakers(self) -> frozenset[str]:
        return frozenset(leg.bookmaker for leg in self.legs)

    @property
    def is_arbitrage(self) -> bool:
        return self.classification == Classification.ARBITRAGE


class HeadToHeadArb(_OpportunityBase):
    """Book-vs-book arb on a 2-way or 3-way head-to-head market."""
    kind: Literal["h2h", "h2h_3way"]
    outcomes: tuple[Leg, ...] = Field(min_length=2, max_length=3)

    @property
    def legs(self) -> tuple[Leg, ...]:
        return self.outcomes


class ExchangeArb(_OpportunityBase):
    """
    Back at a bookmaker, lay the same outcome at an exchange.

    `lay.odds` are the raw lay odds; commission is not applied here.
    """
    kind: Literal["exchange"] = "exchange"
    back: Leg
    lay: Leg

    @property
    def legs(self) -> tuple[Leg, ...]:
        return (self.back, self.lay)


class SpreadArb(_OpportunityBase):
    """Favourite -line against underdog +line at the same magnitude."""
    kind: Literal["spread"] = "spread"
    line: float
    favourite: Leg
    underdog: Leg

    @property
    def legs(self) -> tuple[Leg, ...]:
        return (self.favourite, self.underdog)


class TotalsArb(_OpportunityBase):
    """Over against under at an identical totals line."""
    kind: Literal["totals"] = "totals"
    line: float
    over: Leg
    under: Leg

    @property
    def legs(self) -> tuple[Leg, ...]:
        return (self.over, self.under)


class MiddleZone(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: float
    high: float
    description: str

    @property
    def width(self) -> float:
        return self.high - self.low


class Middle(_OpportunityBase):
    """
    Divergent lines where both legs can win at once.

    Money figures are for `reference_stake` split optimally across both legs.

    Middles are kept on expected value, not on the near-arb threshold, so
    `classification` only separates a locked-in profit (ARBITRAGE) from
    everything else. NEAR_ARBITRAGE on a middle means "not an arb"; the
    combined book may sit well above 1 + near_arb_threshold.
    """
    kind: Literal["middle"] = "middle"
    market: MarketType
    side1: Leg
    side2: Leg
    zone: MiddleZone
    probability: float = Field(ge=0, le=1, description="Estimated chance of landing in the zone")
    reference_stake: float
    guaranteed_loss: float = Field(description="Loss if the zone misses (negative means profit)")
    potential_profit: float = Field(description="Profit if both legs win")
    expected_value: float

    @property
    def legs(self) -> tuple[Leg, ...]:
        return (self.side1, self.side2)


Opportunity = Annotated[
    Union[HeadToHeadArb, ExchangeArb, SpreadArb, TotalsArb, Middle],
    Field(discriminator="kind"),
]

HEAD_TO_HEAD_KINDS = frozenset({"h2h", "h2h_3way", "exchange"})
LINE_KINDS = frozenset({"spread", "totals", "middle"})
