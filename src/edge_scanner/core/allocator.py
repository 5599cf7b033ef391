"""
Stake allocator.

Splits a total stake across mutually exclusive legs either to equalize
returns (optimal) or to skew profit toward one chosen leg (favour).

Internal arithmetic runs at full float precision; figures are rounded
to cents only when the result model is built.
"""

from __future__ import annotations

from typing import Optional, Sequence

import structlog

from edge_scanner.core.odds_math import implied_probability, lay_to_back_odds
from edge_scanner.errors import NegativeFavourStake
from edge_scanner.models.opportunity import ExchangeArb, Opportunity
from edge_scanner.models.stakes import (
    AllocationMode,
    AllocationResult,
    BackLayStakes,
    LegAllocation,
)

logger = structlog.get_logger(__name__)

FALLBACK_WARNING = "Favour allocation needs a negative stake on the favoured leg; fell back to optimal stakes"


def _cents(value: float) -> float:
    return round(value, 2)


def _optimal_stakes(odds: Sequence[float], total: float) -> list[float]:
    probs = [implied_probability(o) for o in odds]
    combined = sum(probs)
    return [total * p / combined for p in probs]


def _favour_stakes(odds: Sequence[float], total: float, favoured: int) -> list[float]:
    """
    Cover every other leg to break even, put the rest on the favoured leg.

    Raises:
        NegativeFavourStake: the other legs alone need more than the total
    """
    stakes = [0.0] * len(odds)
    others = 0.0
    for i, o in enumerate(odds):
        if i == favoured:
            continue
        stakes[i] = total / o
        others += implied_probability(o)

    favoured_stake = total * (1.0 - others)
    if favoured_stake < 0:
        raise NegativeFavourStake(favoured_stake)
    stakes[favoured] = favoured_stake
    return stakes


def _build_result(
    odds: Sequence[float],
    stakes: Sequence[float],
    mode: AllocationMode,
    favoured: Optional[int] = None,
    fallback: bool = False,
    warnings: Sequence[str] = (),
) -> AllocationResult:
    total = sum(stakes)
    payouts = [s * o for s, o in zip(stakes, odds)]
    profits = [p - total for p in payouts]
    combined = sum(implied_probability(o) for o in odds)

    min_profit = min(profits)
    notes = list(warnings)
    # Fallback stakes are optimal stakes even though the mode says favour
    if min_profit < 0 and (fallback or mode == AllocationMode.OPTIMAL):
        notes.append(f"Guaranteed loss of {abs(min_profit):.2f} (combined implied {combined:.4f} >= 1)")

    return AllocationResult(
        mode=mode,
        legs=tuple(
            LegAllocation(odds=o, stake=_cents(s), payout=_cents(p), profit=_cents(pr))
            for o, s, p, pr in zip(odds, stakes, payouts, profits)
        ),
        total_staked=_cents(total),
        min_profit=_cents(min_profit),
        max_profit=_cents(max(profits)),
        roi_pct=round(min_profit / total * 100.0, 4) if total > 0 else 0.0,
        combined_implied=combined,
        favoured_index=favoured,
        fallback=fallback,
        warnings=tuple(notes),
    )


def allocate(
    odds: Sequence[float],
    total_stake: float,
    mode: AllocationMode = AllocationMode.OPTIMAL,
    favoured: Optional[int] = None,
) -> AllocationResult:
    """
    Split a total stake across legs.

    Args:
        odds: Decimal odds per leg, in leg order
        total_stake: Amount to distribute (> 0)
        mode: OPTIMAL equalizes returns; FAVOUR skews toward `favoured`
        favoured: Index of the favoured leg (FAVOUR mode only)

    Returns:
        AllocationResult with per-leg stake, payout and profit

    Raises:
        InvalidOdds: any leg at 1.0 or below
        ValueError: bad stake, leg count or favoured index

    Optimal mode still runs when the legs do not form an arb; the loss
    shows up as a negative min_profit plus a warning.
    """
    if total_stake <= 0:
        raise ValueError(f"Total stake must be > 0, got {total_stake}")
    if len(odds) < 2:
        raise ValueError(f"Need at least 2 legs, got {len(odds)}")

    if mode == AllocationMode.OPTIMAL:
        return _build_result(odds, _optimal_stakes(odds, total_stake), mode)

    if len(odds) not in (2, 3):
        raise ValueError(f"Favour mode supports 2 or 3 legs, got {len(odds)}")
    if favoured is None or not 0 <= favoured < len(odds):
        raise ValueError(f"Favoured leg index out of range: {favoured}")

    try:
        stakes = _favour_stakes(odds, total_stake, favoured)
    except NegativeFavourStake as e:
        logger.info("favour_fallback_to_optimal", favoured=favoured, favoured_stake=e.favoured_stake)
        return _build_result(
            odds,
            _optimal_stakes(odds, total_stake),
            mode,
            favoured=favoured,
            fallback=True,
            warnings=(FALLBACK_WARNING,),
        )

    return _build_result(odds, stakes, mode, favoured=favoured)


def realize(
    odds: Sequence[float],
    stakes: Sequence[float],
    mode: AllocationMode = AllocationMode.OPTIMAL,
    favoured: Optional[int] = None,
    fallback: bool = False,
) -> AllocationResult:
    """
    Payouts and profits for stakes that are already fixed.

    Pass fallback=True when the stakes came from a favour allocation that
    fell back to optimal; the result keeps the flag and its warning.
    """
    if len(odds) != len(stakes):
        raise ValueError(f"Got {len(stakes)} stakes for {len(odds)} legs")
    if sum(stakes) <= 0:
        raise ValueError("Stakes must sum to more than zero")
    return _build_result(
        odds,
        stakes,
        mode,
        favoured=favoured,
        fallback=fallback,
        warnings=(FALLBACK_WARNING,) if fallback else (),
    )


def opportunity_odds(opportunity: Opportunity) -> list[float]:
    """Leg odds to allocate over; exchange lays use equivalent back odds."""
    if isinstance(opportunity, ExchangeArb):
        return [opportunity.back.odds, lay_to_back_odds(opportunity.lay.odds)]
    return [leg.odds for leg in opportunity.legs]


def allocate_opportunity(
    opportunity: Opportunity,
    total_stake: float,
    mode: AllocationMode = AllocationMode.OPTIMAL,
    favoured: Optional[int] = None,
) -> AllocationResult:
    """Allocate a total stake across an opportunity's legs."""
    return allocate(opportunity_odds(opportunity), total_stake, mode, favoured)


def back_lay_stakes(
    back_odds: float,
    lay_odds: float,
    back_stake: float,
    commission: float = 0.05,
) -> BackLayStakes:
    """
    Lay stake that equalizes profit for a given back stake.

    If back wins: profit = back_stake * (back_odds - 1) - lay liability
    If lay wins:  profit = lay_stake * (1 - commission) - back_stake

    Setting these equal gives:
        lay_stake = back_stake * back_odds / (lay_odds - commission)
    """
    if back_odds <= 1.0 or lay_odds <= 1.0:
        raise ValueError(f"Odds must be > 1.0, got back={back_odds} lay={lay_odds}")
    if not 0 <= commission < 1:
        raise ValueError(f"Commission must be in [0, 1), got {commission}")

    lay_stake = back_stake * back_odds / (lay_odds - commission)
    liability = lay_stake * (lay_odds - 1.0)
    profit_back = back_stake * (back_odds - 1.0) - liability
    profit_lay = lay_stake * (1.0 - commission) - back_stake
    guaranteed = min(profit_back, profit_lay)
    outlay = back_stake + liability

    return BackLayStakes(
        back_stake=_cents(back_stake),
        lay_stake=_cents(lay_stake),
        lay_liability=_cents(liability),
        commission=commission,
        profit_if_back_wins=_cents(profit_back),
        profit_if_lay_wins=_cents(profit_lay),
        guaranteed_profit=_cents(guaranteed),
        profit_pct=round(guaranteed / outlay * 100.0, 4),
    )


def back_lay_from_total(
    back_odds: float,
    lay_odds: float,
    total_outlay: float,
    commission: float = 0.05,
) -> BackLayStakes:
    """Back/lay stakes whose back stake plus lay liability equals `total_outlay`."""
    if lay_odds - commission <= 0:
        raise ValueError(f"Lay odds {lay_odds} too low for commission {commission}")
    lay_factor = back_odds * (lay_odds - 1.0) / (lay_odds - commission)
    back_stake = total_outlay / (1.0 + lay_factor)
    return back_lay_stakes(back_odds, lay_odds, back_stake, commission)
