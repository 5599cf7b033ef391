"""
Shared combination bookkeeping for the classifiers.

Every classifier enumerates cross-bookmaker leg combinations, then keeps
only the best combination per bookmaker set (and line, where relevant).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable, Sequence

import structlog

from edge_scanner.core.odds_math import implied_probability
from edge_scanner.errors import InvalidOdds
from edge_scanner.models.odds import PriceQuote

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A combination of quotes and its combined implied probability."""

    quotes: tuple[PriceQuote, ...]
    combined: float
    key: Hashable = field(default=None, compare=False)
    # Quotes as actually placed, when they differ from the scored ones
    placed: tuple[PriceQuote, ...] = field(default=(), compare=False)

    @property
    def legs(self) -> tuple[PriceQuote, ...]:
        return self.placed or self.quotes

    @property
    def worst_odds(self) -> float:
        return min(q.odds for q in self.quotes)

    @property
    def bookmakers(self) -> frozenset[str]:
        return frozenset(q.bookmaker for q in self.quotes)

    def rank(self) -> tuple[float, float]:
        # Lower combined wins; ties go to the higher worst-leg odds
        return (round(self.combined, 12), -self.worst_odds)


def usable(
    quotes: Iterable[PriceQuote],
    min_odds: float,
    needs_point: bool = False,
) -> list[PriceQuote]:
    """Drop quotes that must not enter combination generation."""
    kept: list[PriceQuote] = []
    for q in quotes:
        if not q.is_usable(min_odds, needs_point):
            logger.debug(
                "quote_excluded",
                bookmaker=q.bookmaker,
                outcome=q.outcome,
                odds=q.odds,
                point=q.point,
            )
            continue
        kept.append(q)
    return kept


def spans_bookmakers(quotes: Sequence[PriceQuote]) -> bool:
    """A combination must involve at least two distinct bookmakers."""
    return len({q.bookmaker for q in quotes}) >= 2


def candidate(
    quotes: Sequence[PriceQuote],
    key: Hashable = None,
    placed: Sequence[PriceQuote] = (),
) -> Candidate | None:
    """Build a candidate, or None if any leg has invalid odds."""
    try:
        combined = sum(implied_probability(q.odds) for q in quotes)
    except InvalidOdds as e:
        logger.debug("leg_rejected", odds=e.odds)
        return None
    return Candidate(quotes=tuple(quotes), combined=combined, key=key, placed=tuple(placed))


def best_by_key(candidates: Iterable[Candidate]) -> list[Candidate]:
    """Keep the best-ranked candidate for each key, in first-seen key order."""
    best: dict[Hashable, Candidate] = {}
    for c in candidates:
        current = best.get(c.key)
        if current is None or c.rank() < current.rank():
            best[c.key] = c
    return list(best.values())
