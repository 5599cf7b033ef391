"""
Head-to-head book-vs-book classifier.

Handles both 2-way (tennis, basketball) and 3-way (soccer, boxing with
draw) markets.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from itertools import product
from typing import Optional

import structlog

from edge_scanner.core.combinations import Candidate, best_by_key, candidate, spans_bookmakers, usable
from edge_scanner.core.odds_math import classify, profit_pct
from edge_scanner.errors import IncompleteMarket
from edge_scanner.models.odds import MarketType, PriceQuote, SportEvent
from edge_scanner.models.opportunity import HeadToHeadArb, Leg

logger = structlog.get_logger(__name__)

# Sports that never offer a draw
ALWAYS_TWO_WAY_SPORTS = (
    "tennis",
    "basketball",
    "baseball",
    "americanfootball",
    "aussierules",
)

# Sports that can be priced with or without a draw
FLEXIBLE_SPORTS = (
    "icehockey",
    "mma",
    "boxing",
    "cricket",
    "rugbyleague",
    "rugbyunion",
)


def allowed_outcome_counts(sport: str) -> tuple[int, ...]:
    """Number of outcomes an h2h market for this sport may have."""
    sport = sport.lower()
    if any(s in sport for s in ALWAYS_TWO_WAY_SPORTS):
        return (2,)
    if "soccer" in sport:
        return (3,)
    return (2, 3)


def group_outcomes(event: SportEvent, min_odds: float) -> dict[str, list[PriceQuote]]:
    """
    Group usable h2h quotes by outcome label.

    Raises:
        IncompleteMarket: wrong outcome count for the sport, or fewer
            than two bookmakers quoting
    """
    by_outcome: dict[str, list[PriceQuote]] = defaultdict(list)
    for q in usable(event.quotes(MarketType.H2H), min_odds):
        by_outcome[q.outcome].append(q)

    allowed = allowed_outcome_counts(event.sport)
    if len(by_outcome) not in allowed:
        raise IncompleteMarket(
            f"{event.sport} h2h needs {'/'.join(map(str, allowed))} outcomes, got {len(by_outcome)}"
        )

    bookmakers = {q.bookmaker for quotes in by_outcome.values() for q in quotes}
    if len(bookmakers) < 2:
        raise IncompleteMarket(f"h2h quoted by {len(bookmakers)} bookmaker(s)")

    return dict(by_outcome)


def find_h2h_arbs(
    event: SportEvent,
    near_arb_threshold: float,
    min_odds: float = 1.01,
    computed_at: Optional[datetime] = None,
) -> list[HeadToHeadArb]:
    """
    Find arbs and near-arbs across bookmakers in one event's h2h market.

    Every cross-bookmaker combination covering all outcomes is scored;
    only the best per bookmaker set is kept.
    """
    try:
        by_outcome = group_outcomes(event, min_odds)
    except IncompleteMarket as e:
        logger.debug("h2h_market_skipped", event_id=event.id, reason=str(e))
        return []

    computed_at = computed_at or datetime.now(timezone.utc)
    outcome_names = sorted(by_outcome)

    candidates: list[Candidate] = []
    for combo in product(*(by_outcome[name] for name in outcome_names)):
        if not spans_bookmakers(combo):
            continue
        c = candidate(combo, key=frozenset(q.bookmaker for q in combo))
        if c is not None:
            candidates.append(c)

    arbs: list[HeadToHeadArb] = []
    for c in best_by_key(candidates):
        classification = classify(c.combined, near_arb_threshold)
        if classification is None:
            continue
        arbs.append(
            HeadToHeadArb(
                kind="h2h" if len(c.quotes) == 2 else "h2h_3way",
                outcomes=tuple(Leg(outcome=q.outcome, bookmaker=q.bookmaker, odds=q.odds) for q in c.quotes),
                classification=classification,
                combined_implied=c.combined,
                profit_pct=profit_pct(c.combined),
                event=event.ref,
                computed_at=computed_at,
            )
        )

    arbs.sort(key=lambda a: a.profit_pct, reverse=True)
    return arbs
