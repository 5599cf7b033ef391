"""
Value bet detector.

Compares each bookmaker's price against the market average for the same
outcome. A price well above the consensus is +EV if the consensus is right.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

import numpy as np
import structlog

from edge_scanner.core.combinations import usable
from edge_scanner.models.odds import MarketType, PriceQuote, SportEvent
from edge_scanner.models.opportunity import Leg
from edge_scanner.models.value import ValueBet, ValueBetProjection

logger = structlog.get_logger(__name__)

VALUE_MARKETS = (MarketType.H2H, MarketType.SPREADS, MarketType.TOTALS)


def market_average(odds: list[float]) -> float:
    """Simple mean of decimal odds."""
    return float(np.mean(odds))


def edge_pct(best_odds: float, average: float) -> float:
    """
    Edge of a price over the market average, in percent.

    Examples:
        >>> round(edge_pct(2.30, 2.05), 1)
        12.2
    """
    return (best_odds / average - 1.0) * 100.0


def _group(event: SportEvent, market: MarketType, min_odds: float) -> dict[tuple, list[PriceQuote]]:
    groups: dict[tuple, list[PriceQuote]] = defaultdict(list)
    for q in usable(event.quotes(market), min_odds, needs_point=market.is_line_market):
        groups[(q.outcome, q.point)].append(q)
    return groups


def find_value_bets(
    event: SportEvent,
    value_threshold: float,
    min_odds: float = 1.01,
    computed_at: Optional[datetime] = None,
) -> list[ValueBet]:
    """
    Emit one value bet per outcome whose best price beats the average.

    The average includes the best quote itself, so two quotes are enough.
    Leaving the best quote out (and requiring three) is a stricter variant
    that reports fewer and larger edges; it is not what this computes.

    Args:
        event: Event to scan
        value_threshold: Minimum edge in percent (strictly exceeded)
        min_odds: Quotes at or below this are ignored
        computed_at: Timestamp stamped on every result

    Returns:
        Value bets sorted by edge, highest first
    """
    computed_at = computed_at or datetime.now(timezone.utc)
    bets: list[ValueBet] = []

    for market in VALUE_MARKETS:
        for (outcome, point), quotes in _group(event, market, min_odds).items():
            if len(quotes) < 2:
                continue

            average = market_average([q.odds for q in quotes])
            best = min(quotes, key=lambda q: (-q.odds, q.bookmaker))
            edge = edge_pct(best.odds, average)
            if edge <= value_threshold:
                continue

            bets.append(
                ValueBet(
                    event=event.ref,
                    market=market,
                    leg=Leg(outcome=outcome, bookmaker=best.bookmaker, odds=best.odds, point=point),
                    market_average=average,
                    edge_pct=edge,
                    quote_count=len(quotes),
                    computed_at=computed_at,
                )
            )

    bets.sort(key=lambda b: b.edge_pct, reverse=True)
    if bets:
        logger.debug("value_bets_found", event_id=event.id, count=len(bets))
    return bets


def project_value_bet(value_bet: ValueBet, stake: float) -> ValueBetProjection:
    """
    Expected value of backing a value bet.

    The market average's implied probability is taken as the true chance
    of the outcome.
    """
    if stake <= 0:
        raise ValueError(f"Stake must be > 0, got {stake}")

    win_probability = 1.0 / value_bet.market_average
    potential_profit = stake * (value_bet.leg.odds - 1.0)
    expected_value = win_probability * potential_profit - (1.0 - win_probability) * stake

    return ValueBetProjection(
        stake=stake,
        win_probability=min(1.0, win_probability),
        potential_profit=round(potential_profit, 2),
        expected_value=round(expected_value, 2),
        ev_pct=round(expected_value / stake * 100.0, 4),
    )
