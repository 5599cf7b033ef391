"""
Odds conversion and implied probability mathematics.

All probability values are decimals in [0, 1].
American odds are integers (e.g., -110, +150).
Decimal odds are floats > 1.0 (e.g., 1.91, 2.50).
"""

from __future__ import annotations

from fractions import Fraction
from typing import Iterable, Optional

from edge_scanner.errors import InvalidOdds
from edge_scanner.models.odds import OddsFormat
from edge_scanner.models.opportunity import Classification


def implied_probability(odds: float) -> float:
    """
    Convert decimal odds to implied probability.

    Args:
        odds: Decimal odds (1.91, 2.50, etc.)

    Returns:
        Implied probability in (0, 1)

    Raises:
        InvalidOdds: odds of 1.0 or below

    Examples:
        >>> implied_probability(2.00)
        0.5
        >>> implied_probability(2.10)
        0.4761...
    """
    if odds <= 1.0:
        raise InvalidOdds(odds)
    return 1.0 / odds


def combined_implied(odds: Iterable[float]) -> float:
    """
    Sum of implied probabilities for a set of mutually exclusive legs.

    Examples:
        >>> combined_implied([2.10, 2.05])
        0.9640...
    """
    return sum(implied_probability(o) for o in odds)


def profit_pct(combined: float) -> float:
    """
    Profit percentage of a perfectly allocated stake set.

    Negative for near-arbs (combined > 1).

    Examples:
        >>> profit_pct(0.9640)
        3.734...
    """
    if combined <= 0:
        raise ValueError(f"Combined implied probability must be > 0, got {combined}")
    return (1.0 / combined - 1.0) * 100.0


def classify(combined: float, near_arb_threshold: float) -> Optional[Classification]:
    """
    Classify a combined implied probability.

    Args:
        combined: Sum of the legs' implied probabilities
        near_arb_threshold: Fractional allowance above 1.0 (0.02 = 2%)

    Returns:
        ARBITRAGE below 1, NEAR_ARBITRAGE within the allowance, else None
    """
    if combined < 1.0:
        return Classification.ARBITRAGE
    if combined <= 1.0 + near_arb_threshold:
        return Classification.NEAR_ARBITRAGE
    return None


def lay_to_back_odds(lay_odds: float) -> float:
    """
    Equivalent back odds on the opposite side of a lay bet.

    Laying at L risks (L - 1) to win 1, the same as backing the
    other side at L / (L - 1).

    Examples:
        >>> lay_to_back_odds(3.0)
        1.5
    """
    if lay_odds <= 1.0:
        raise InvalidOdds(lay_odds)
    return lay_odds / (lay_odds - 1.0)


def american_to_decimal(odds: float) -> float:
    """
    Convert American odds to decimal odds.

    Examples:
        >>> american_to_decimal(-110)
        1.909...
        >>> american_to_decimal(+150)
        2.5
    """
    if -100 < odds < 100:
        raise ValueError(f"American odds must be <= -100 or >= +100, got {odds}")
    if odds < 0:
        return 1.0 + 100.0 / abs(odds)
    return 1.0 + odds / 100.0


def decimal_to_american(odds: float) -> float:
    """Convert decimal odds to American odds."""
    if odds <= 1.0:
        raise InvalidOdds(odds)
    if odds >= 2.0:
        return (odds - 1.0) * 100.0
    return -100.0 / (odds - 1.0)


def fractional_to_decimal(odds: str) -> float:
    """
    Convert fractional odds ("5/2", "10/11", "evs") to decimal odds.

    Examples:
        >>> fractional_to_decimal("5/2")
        3.5
    """
    text = odds.strip().lower()
    if text in ("evs", "evens"):
        return 2.0
    try:
        value = Fraction(text)
    except (ValueError, ZeroDivisionError) as e:
        raise ValueError(f"Invalid fractional odds: {odds!r}") from e
    if value <= 0:
        raise ValueError(f"Fractional odds must be positive, got {odds!r}")
    return 1.0 + float(value)


def to_decimal(value: float | str, odds_format: OddsFormat) -> float:
    """Convert odds in any supported format to decimal odds."""
    if odds_format == OddsFormat.DECIMAL:
        return float(value)
    if odds_format == OddsFormat.AMERICAN:
        return american_to_decimal(float(value))
    return fractional_to_decimal(str(value))


def get_overround(odds: Iterable[float]) -> float:
    """
    Bookmaker overround for one book's complete market.

    Examples:
        >>> get_overround([1.91, 1.91])
        1.0471...
    """
    return combined_implied(odds)


def get_vig_pct(overround: float) -> float:
    """
    Convert overround to vig percentage.

    Examples:
        >>> get_vig_pct(1.0476)
        4.76
    """
    return (overround - 1.0) * 100.0
