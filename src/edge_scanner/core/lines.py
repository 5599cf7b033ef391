"""
Spread and totals classifiers, and middles.

Arbs need both legs at the same line. Legs at different lines are never
arbs; when the lines leave a result zone where both legs win, they are
scored as middles instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import structlog

from edge_scanner.config import MiddleHeuristic, Settings
from edge_scanner.core.allocator import allocate
from edge_scanner.core.combinations import Candidate, best_by_key, candidate, usable
from edge_scanner.core.odds_math import classify, profit_pct
from edge_scanner.models.odds import MarketType, PriceQuote, SportEvent
from edge_scanner.models.opportunity import (
    Classification,
    Leg,
    Middle,
    MiddleZone,
    SpreadArb,
    TotalsArb,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MiddleRules:
    """Sizing and filtering rules for middles in one sport."""

    heuristic: MiddleHeuristic
    reference_stake: float = 200.0
    min_spread_gap: float = 1.0
    min_totals_gap: float = 0.5
    max_loss_pct: float = 5.0
    max_ev_loss_pct: float = 5.0

    @classmethod
    def from_settings(cls, settings: Settings, sport: str) -> MiddleRules:
        return cls(
            heuristic=settings.middle_heuristic(sport),
            reference_stake=settings.middle_reference_stake,
            min_spread_gap=settings.min_spread_gap,
            min_totals_gap=settings.min_totals_gap,
            max_loss_pct=settings.max_middle_loss_pct,
            max_ev_loss_pct=settings.max_middle_ev_loss_pct,
        )

    def zone_probability(self, market: MarketType, width: float) -> float:
        if market == MarketType.SPREADS:
            pct = min(self.heuristic.spread_cap_pct, width * self.heuristic.spread_pct_per_point)
        else:
            pct = min(self.heuristic.totals_cap_pct, width * self.heuristic.totals_pct_per_point)
        return max(0.0, pct) / 100.0


def _leg(q: PriceQuote) -> Leg:
    return Leg(outcome=q.outcome, bookmaker=q.bookmaker, odds=q.odds, point=q.point)


def _side(q: PriceQuote) -> Optional[str]:
    name = q.outcome.lower()
    if "over" in name:
        return "over"
    if "under" in name:
        return "under"
    return None


def _whole_zone(low_line: float, high_line: float) -> tuple[int, int]:
    """Whole-number results strictly between two lines."""
    return math.floor(low_line) + 1, math.ceil(high_line) - 1


def _split_spreads(event: SportEvent, min_odds: float) -> tuple[list[PriceQuote], list[PriceQuote]]:
    quotes = usable(event.quotes(MarketType.SPREADS), min_odds, needs_point=True)
    favourites = [q for q in quotes if q.point < 0]  # type: ignore[operator]
    underdogs = [q for q in quotes if q.point > 0]  # type: ignore[operator]
    return favourites, underdogs


def _split_totals(event: SportEvent, min_odds: float) -> tuple[list[PriceQuote], list[PriceQuote]]:
    quotes = usable(event.quotes(MarketType.TOTALS), min_odds, needs_point=True)
    overs = [q for q in quotes if _side(q) == "over"]
    unders = [q for q in quotes if _side(q) == "under"]
    return overs, unders


def find_spread_arbs(
    event: SportEvent,
    near_arb_threshold: float,
    min_odds: float = 1.01,
    computed_at: Optional[datetime] = None,
) -> list[SpreadArb]:
    """Favourite -x against underdog +x across bookmakers."""
    favourites, underdogs = _split_spreads(event, min_odds)
    computed_at = computed_at or datetime.now(timezone.utc)

    candidates: list[Candidate] = []
    for fav in favourites:
        for dog in underdogs:
            if fav.outcome == dog.outcome or fav.bookmaker == dog.bookmaker:
                continue
            if not math.isclose(-fav.point, dog.point):  # type: ignore[operator]
                continue
            line = abs(fav.point)  # type: ignore[arg-type]
            c = candidate((fav, dog), key=(line, frozenset((fav.bookmaker, dog.bookmaker))))
            if c is not None:
                candidates.append(c)

    arbs: list[SpreadArb] = []
    for c in best_by_key(candidates):
        classification = classify(c.combined, near_arb_threshold)
        if classification is None:
            continue
        fav, dog = c.quotes
        arbs.append(
            SpreadArb(
                line=c.key[0],
                favourite=_leg(fav),
                underdog=_leg(dog),
                classification=classification,
                combined_implied=c.combined,
                profit_pct=profit_pct(c.combined),
                event=event.ref,
                computed_at=computed_at,
            )
        )

    arbs.sort(key=lambda a: a.profit_pct, reverse=True)
    return arbs


def find_totals_arbs(
    event: SportEvent,
    near_arb_threshold: float,
    min_odds: float = 1.01,
    computed_at: Optional[datetime] = None,
) -> list[TotalsArb]:
    """Over against under at the identical line across bookmakers."""
    overs, unders = _split_totals(event, min_odds)
    computed_at = computed_at or datetime.now(timezone.utc)

    candidates: list[Candidate] = []
    for over in overs:
        for under in unders:
            if over.bookmaker == under.bookmaker:
                continue
            if not math.isclose(over.point, under.point):  # type: ignore[arg-type]
                continue
            c = candidate((over, under), key=(over.point, frozenset((over.bookmaker, under.bookmaker))))
            if c is not None:
                candidates.append(c)

    arbs: list[TotalsArb] = []
    for c in best_by_key(candidates):
        classification = classify(c.combined, near_arb_threshold)
        if classification is None:
            continue
        over, under = c.quotes
        arbs.append(
            TotalsArb(
                line=c.key[0],
                over=_leg(over),
                under=_leg(under),
                classification=classification,
                combined_implied=c.combined,
                profit_pct=profit_pct(c.combined),
                event=event.ref,
                computed_at=computed_at,
            )
        )

    arbs.sort(key=lambda a: a.profit_pct, reverse=True)
    return arbs


def _score_middle(
    event: SportEvent,
    market: MarketType,
    side1: PriceQuote,
    side2: PriceQuote,
    zone: MiddleZone,
    width: float,
    rules: MiddleRules,
    computed_at: datetime,
) -> Optional[Middle]:
    c = candidate((side1, side2))
    if c is None:
        return None

    allocation = allocate([side1.odds, side2.odds], rules.reference_stake)
    total = allocation.total_staked
    payouts = [leg.payout for leg in allocation.legs]
    loss_if_miss = total - max(payouts)
    profit_if_hit = sum(payouts) - total

    probability = rules.zone_probability(market, width)
    ev = probability * profit_if_hit - (1 - probability) * loss_if_miss

    keep = (
        ev >= -rules.max_ev_loss_pct / 100.0 * total
        or loss_if_miss <= rules.max_loss_pct / 100.0 * total
    )
    if not keep:
        return None

    return Middle(
        market=market,
        side1=_leg(side1),
        side2=_leg(side2),
        zone=zone,
        probability=probability,
        reference_stake=total,
        guaranteed_loss=round(loss_if_miss, 2),
        potential_profit=round(profit_if_hit, 2),
        expected_value=round(ev, 2),
        classification=Classification.ARBITRAGE if c.combined < 1 else Classification.NEAR_ARBITRAGE,
        combined_implied=c.combined,
        profit_pct=profit_pct(c.combined),
        event=event.ref,
        computed_at=computed_at,
    )


def find_middles(
    event: SportEvent,
    rules: MiddleRules,
    min_odds: float = 1.01,
    computed_at: Optional[datetime] = None,
) -> list[Middle]:
    """
    Find spread and totals middles in one event.

    Spreads: favourite -a with underdog +b, b > a. Favourite winning by
    more than a and less than b wins both.
    Totals: over L1 with under L2, L2 > L1. A total between them wins both.
    """
    computed_at = computed_at or datetime.now(timezone.utc)
    best: dict[tuple, Middle] = {}

    def _keep(key: tuple, middle: Optional[Middle]) -> None:
        if middle is None:
            return
        current = best.get(key)
        if current is None or middle.expected_value > current.expected_value:
            best[key] = middle

    favourites, underdogs = _split_spreads(event, min_odds)
    for fav in favourites:
        for dog in underdogs:
            if fav.outcome == dog.outcome or fav.bookmaker == dog.bookmaker:
                continue
            fav_line = -fav.point  # type: ignore[operator]
            dog_line = dog.point
            width = dog_line - fav_line  # type: ignore[operator]
            if width < rules.min_spread_gap or math.isclose(fav_line, dog_line):
                continue
            low, high = _whole_zone(fav_line, dog_line)  # type: ignore[arg-type]
            if low > high:
                continue
            margin = f"{low}" if low == high else f"{low} to {high}"
            zone = MiddleZone(low=fav_line, high=dog_line, description=f"{fav.outcome} wins by {margin}")
            key = (MarketType.SPREADS, frozenset((fav.bookmaker, dog.bookmaker)), fav_line, dog_line)
            _keep(key, _score_middle(event, MarketType.SPREADS, fav, dog, zone, width, rules, computed_at))

    overs, unders = _split_totals(event, min_odds)
    for over in overs:
        for under in unders:
            if over.bookmaker == under.bookmaker:
                continue
            width = under.point - over.point  # type: ignore[operator]
            if width < rules.min_totals_gap or math.isclose(over.point, under.point):  # type: ignore[arg-type]
                continue
            low, high = _whole_zone(over.point, under.point)  # type: ignore[arg-type]
            if low > high:
                continue
            zone = MiddleZone(
                low=over.point,  # type: ignore[arg-type]
                high=under.point,  # type: ignore[arg-type]
                description=f"Total lands between {over.point:g} and {under.point:g}",
            )
            key = (MarketType.TOTALS, frozenset((over.bookmaker, under.bookmaker)), over.point, under.point)
            _keep(key, _score_middle(event, MarketType.TOTALS, over, under, zone, width, rules, computed_at))

    middles = list(best.values())
    middles.sort(key=lambda m: m.profit_pct, reverse=True)
    logger.debug("middles_scored", event_id=event.id, count=len(middles))
    return middles
