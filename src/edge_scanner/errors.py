"""Error taxonomy for the detection engine."""


class EdgeScannerError(Exception):
    """Base class for engine errors."""


class InvalidOdds(EdgeScannerError, ValueError):
    """Odds of 1.0 or below were fed to a probability computation."""

    def __init__(self, odds: float) -> None:
        super().__init__(f"Decimal odds must be > 1.0, got {odds}")
        self.odds = odds


class IncompleteMarket(EdgeScannerError):
    """A market does not have the legs or bookmakers its shape requires."""


class NegativeFavourStake(EdgeScannerError):
    """Favour allocation would need a negative stake on the favoured leg."""

    def __init__(self, favoured_stake: float) -> None:
        super().__init__(f"Favoured stake would be {favoured_stake:.2f}")
        self.favoured_stake = favoured_stake


class NaturalizationDrift(EdgeScannerError):
    """Rounded stakes drifted from the requested total beyond tolerance."""

    def __init__(self, difference: float, tolerance: float) -> None:
        super().__init__(f"Naturalized total drifted by {difference:+.2f} (tolerance {tolerance:.2f})")
        self.difference = difference
        self.tolerance = tolerance


class MalformedEvent(EdgeScannerError, ValueError):
    """Event carries no price quotes at all."""
