"""Book-vs-exchange back/lay classifier."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from edge_scanner.core.combinations import Candidate, best_by_key, candidate, usable
from edge_scanner.core.odds_math import classify, lay_to_back_odds, profit_pct
from edge_scanner.models.odds import MarketType, PriceQuote, SportEvent
from edge_scanner.models.opportunity import ExchangeArb, Leg


def find_exchange_arbs(
    event: SportEvent,
    near_arb_threshold: float,
    min_odds: float = 1.01,
    computed_at: Optional[datetime] = None,
) -> list[ExchangeArb]:
    """
    Pair bookmaker back prices with exchange lay prices on the same outcome.

    A lay at L is priced as a back on the other side at L / (L - 1), so the
    pair is an arb when 1/back + (1 - 1/lay) < 1. Commission is ignored here.
    """
    backs = usable(event.quotes(MarketType.H2H), min_odds)
    lays = usable(event.quotes(MarketType.H2H_LAY), min_odds)
    if not backs or not lays:
        return []

    computed_at = computed_at or datetime.now(timezone.utc)

    candidates: list[Candidate] = []
    for back in backs:
        for lay in lays:
            if lay.outcome != back.outcome or lay.bookmaker == back.bookmaker:
                continue
            opposite = PriceQuote(
                bookmaker=lay.bookmaker,
                outcome=lay.outcome,
                odds=lay_to_back_odds(lay.odds),
            )
            c = candidate(
                (back, opposite),
                key=(back.outcome, frozenset((back.bookmaker, lay.bookmaker))),
                placed=(back, lay),
            )
            if c is not None:
                candidates.append(c)

    arbs: list[ExchangeArb] = []
    for c in best_by_key(candidates):
        classification = classify(c.combined, near_arb_threshold)
        if classification is None:
            continue
        back, lay = c.legs
        arbs.append(
            ExchangeArb(
                back=Leg(outcome=back.outcome, bookmaker=back.bookmaker, odds=back.odds),
                lay=Leg(outcome=lay.outcome, bookmaker=lay.bookmaker, odds=lay.odds),
                classification=classification,
                combined_implied=c.combined,
                profit_pct=profit_pct(c.combined),
                event=event.ref,
                computed_at=computed_at,
            )
        )

    arbs.sort(key=lambda a: a.profit_pct, reverse=True)
    return arbs
