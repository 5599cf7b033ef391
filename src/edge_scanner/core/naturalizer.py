"""
Stake naturalizer.

Rounds calculator-precise stakes ($47.83) to amounts a recreational bettor
would type ($50). Rounding is per leg, scaled by stake size and by the
bookmaker's risk profile. Profit given up by rounding is reported, never
re-optimized away.

Same stakes and profiles in, same rounded stakes out.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import structlog

from edge_scanner.core.allocator import FALLBACK_WARNING, allocate_opportunity, realize
from edge_scanner.errors import NaturalizationDrift
from edge_scanner.models.opportunity import Opportunity
from edge_scanner.models.profile import BookmakerProfile, ProfileTable, RiskTier, RoundingPolicy
from edge_scanner.models.stakes import (
    AllocationMode,
    AllocationResult,
    NaturalizedResult,
    NaturalizedStake,
)

logger = structlog.get_logger(__name__)

STEP_LADDER = (1.0, 5.0, 10.0, 25.0, 50.0, 100.0)

# (upper bound, ladder index) by stake size
_SIZE_BANDS = ((20.0, 0), (100.0, 1), (500.0, 2))
_LARGE_STAKE_INDEX = 3

_POLICY_OFFSET = {
    RoundingPolicy.AGGRESSIVE: -1,
    RoundingPolicy.MODERATE: 0,
    RoundingPolicy.CONSERVATIVE: 1,
}
_TIER_OFFSET = {RiskTier.EXTREME: 1}

# Per-leg deviation that earns a warning, in percent
DEVIATION_WARNING_PCT = 15.0


def granularity(stake: float, profile: BookmakerProfile) -> float:
    """
    Rounding step for a stake at a bookmaker.

    Examples:
        >>> moderate = BookmakerProfile(key="x", name="X")
        >>> granularity(12.0, moderate), granularity(49.4, moderate), granularity(230.0, moderate)
        (1.0, 5.0, 10.0)
    """
    index = _LARGE_STAKE_INDEX
    for upper, band_index in _SIZE_BANDS:
        if stake < upper:
            index = band_index
            break

    index += _POLICY_OFFSET.get(profile.rounding, 0) + _TIER_OFFSET.get(profile.risk_tier, 0)
    index = max(0, min(index, len(STEP_LADDER) - 1))

    # Never round in steps larger than the stake itself
    while index > 0 and STEP_LADDER[index] > stake:
        index -= 1
    return STEP_LADDER[index]


def round_stake(stake: float, step: float) -> float:
    """Round half-up to the nearest step, never below one step."""
    if stake <= 0:
        return 0.0
    return max(step, math.floor(stake / step + 0.5) * step)


def profit_impact(total_difference: float, requested_total: float) -> str:
    """Human summary of how rounding changed the capital used."""
    pct = total_difference / requested_total * 100.0 if requested_total else 0.0
    if abs(pct) < 1:
        return "Minimal impact on profit"
    if pct > 0:
        return f"Using {pct:.1f}% more capital"
    return f"Using {abs(pct):.1f}% less capital (may affect returns)"


def suspicious_stake(stake: float) -> list[str]:
    """
    Reasons a stake looks calculator-generated. Empty if it looks natural.

    Examples:
        >>> suspicious_stake(50.0)
        []
        >>> suspicious_stake(47.83)
        ['Unusual cents value (not .00, .25, .50, .75)', 'Unusual amount: $47.83 looks calculated', 'Non-round amount in typical betting range']
    """
    reasons: list[str] = []
    cents = round(stake * 100)

    if not math.isclose(stake * 100, cents, abs_tol=1e-6):
        reasons.append("More than 2 decimal places")
    elif cents % 25 != 0:
        reasons.append("Unusual cents value (not .00, .25, .50, .75)")

    if stake > 10 and cents % 100 != 0 and cents % 100 not in (20, 25, 50, 75, 80):
        reasons.append(f"Unusual amount: ${stake:.2f} looks calculated")

    if 20 < stake < 1000 and cents % 100 != 0:
        reasons.append("Non-round amount in typical betting range")

    return reasons


def _strategy(original: float, rounded: float, step: float) -> str:
    step_text = f"${step:g}"
    if math.isclose(rounded, original):
        return f"Already on a {step_text} step"
    direction = "up" if rounded > original else "down"
    return f"Rounded {direction} to ${rounded:g} (nearest {step_text})"


def _check_drift(difference: float, tolerance: float) -> None:
    if abs(difference) > tolerance + 1e-9:
        raise NaturalizationDrift(difference, tolerance)


def _unchanged(result: AllocationResult, profiles: Sequence[BookmakerProfile]) -> NaturalizedResult:
    legs = tuple(
        NaturalizedStake(
            bookmaker=profiles[i].key if i < len(profiles) else "",
            original=leg.stake,
            rounded=leg.stake,
            difference=0.0,
            difference_pct=0.0,
            granularity=0.0,
            strategy="Unchanged",
        )
        for i, leg in enumerate(result.legs)
    )
    return NaturalizedResult(
        stealth=False,
        legs=legs,
        requested_total=result.total_staked,
        naturalized_total=result.total_staked,
        allocation=result,
        profit_impact="No change",
    )


def naturalize(
    result: AllocationResult,
    stealth_enabled: bool,
    profiles: Sequence[BookmakerProfile],
) -> NaturalizedResult:
    """
    Round an allocation's stakes to natural-looking amounts.

    Args:
        result: Allocation to round
        stealth_enabled: When False the allocation passes through untouched
        profiles: One bookmaker profile per leg, in leg order

    Returns:
        NaturalizedResult whose `allocation` holds the figures the rounded
        stakes actually realize. With stealth off, `allocation is result`.

    Raises:
        ValueError: profile count does not match leg count
    """
    if not stealth_enabled:
        return _unchanged(result, profiles)

    if len(profiles) != len(result.legs):
        raise ValueError(f"Got {len(profiles)} profiles for {len(result.legs)} legs")

    legs: list[NaturalizedStake] = []
    steps: list[float] = []
    for leg, profile in zip(result.legs, profiles):
        step = granularity(leg.stake, profile)
        rounded = round_stake(leg.stake, step)
        difference = rounded - leg.stake
        difference_pct = difference / leg.stake * 100.0 if leg.stake > 0 else 0.0

        warning: Optional[str] = None
        if abs(difference_pct) > DEVIATION_WARNING_PCT:
            warning = f"Large deviation ({difference_pct:+.1f}%) may significantly affect profit"

        steps.append(step)
        legs.append(
            NaturalizedStake(
                bookmaker=profile.key,
                original=leg.stake,
                rounded=rounded,
                difference=round(difference, 2),
                difference_pct=round(difference_pct, 2),
                granularity=step,
                strategy=_strategy(leg.stake, rounded, step),
                warning=warning,
            )
        )

    rounded_stakes = [leg.rounded for leg in legs]
    realized = realize(
        [leg.odds for leg in result.legs],
        rounded_stakes,
        mode=result.mode,
        favoured=result.favoured_index,
        fallback=result.fallback,
    )

    naturalized_total = round(sum(rounded_stakes), 2)
    total_difference = naturalized_total - result.total_staked
    impact = profit_impact(total_difference, result.total_staked)

    warnings = [FALLBACK_WARNING] if result.fallback else []
    warnings.extend(leg.warning for leg in legs if leg.warning)
    try:
        _check_drift(total_difference, max(steps))
    except NaturalizationDrift as e:
        logger.debug("naturalization_drift", difference=e.difference, tolerance=e.tolerance)
        warnings.append(f"{e}: {impact}")

    if result.min_profit >= 0 > realized.min_profit:
        warnings.append(f"Rounded stakes no longer lock in a profit (worst case {realized.min_profit:.2f})")

    return NaturalizedResult(
        stealth=True,
        legs=tuple(legs),
        requested_total=result.total_staked,
        naturalized_total=naturalized_total,
        allocation=realized,
        profit_impact=impact,
        warnings=tuple(warnings),
    )


class StakeNaturalizer:
    """
    Naturalizes stakes using a bookmaker profile table.

    Usage:
        naturalizer = StakeNaturalizer(default_profiles())
        out = naturalizer.naturalize(result, ["sportsbet", "bet365_au"])
    """

    def __init__(self, profiles: ProfileTable) -> None:
        self._profiles = profiles

    @property
    def profiles(self) -> ProfileTable:
        return self._profiles

    def profiles_for(self, bookmakers: Sequence[str]) -> list[BookmakerProfile]:
        return [self._profiles.lookup(b) for b in bookmakers]

    def naturalize(
        self,
        result: AllocationResult,
        bookmakers: Sequence[str],
        stealth_enabled: bool = True,
    ) -> NaturalizedResult:
        return naturalize(result, stealth_enabled, self.profiles_for(bookmakers))

    def naturalize_opportunity(
        self,
        opportunity: Opportunity,
        total_stake: float,
        stealth_enabled: bool = True,
        mode: AllocationMode = AllocationMode.OPTIMAL,
        favoured: Optional[int] = None,
    ) -> NaturalizedResult:
        """Allocate across an opportunity's legs, then naturalize."""
        result = allocate_opportunity(opportunity, total_stake, mode, favoured)
        bookmakers = [leg.bookmaker for leg in opportunity.legs]
        return self.naturalize(result, bookmakers, stealth_enabled)
