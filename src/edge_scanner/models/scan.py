"""Detection pass output."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from edge_scanner.models.opportunity import HEAD_TO_HEAD_KINDS, LINE_KINDS, Opportunity
from edge_scanner.models.value import ValueBet


class ScanStats(BaseModel):
    """Summary counts for one detection pass."""
    model_config = ConfigDict(frozen=True)

    total_events: int = 0
    events_with_multiple_bookmakers: int = 0
    total_bookmakers: int = 0
    arbs_found: int = Field(default=0, description="Arbitrage finds, middles excluded")
    near_arbs_found: int = Field(default=0, description="Near-arbitrage finds, middles excluded")
    middles_found: int = 0
    value_bets_found: int = 0
    sports_scanned: tuple[str, ...] = ()


class DetectionResult(BaseModel):
    """
    Everything one detection pass found.

    Opportunities are sorted by profit_pct, value bets by edge_pct,
    both highest first.
    """
    model_config = ConfigDict(frozen=True)

    opportunities: tuple[Opportunity, ...] = ()
    value_bets: tuple[ValueBet, ...] = ()
    stats: ScanStats = Field(default_factory=ScanStats)
    computed_at: datetime

    def head_to_head(self) -> list[Opportunity]:
        """Book-vs-book and exchange opportunities."""
        return [o for o in self.opportunities if o.kind in HEAD_TO_HEAD_KINDS]

    def line_markets(self) -> list[Opportunity]:
        """Spread, totals and middle opportunities."""
        return [o for o in self.opportunities if o.kind in LINE_KINDS]
