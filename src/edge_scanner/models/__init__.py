"""Data models for odds, opportunities, stakes and risk profiles."""

from edge_scanner.models.odds import EventRef, MarketType, OddsFormat, PriceQuote, SportEvent
from edge_scanner.models.opportunity import (
    Classification,
    ExchangeArb,
    HeadToHeadArb,
    Leg,
    Middle,
    MiddleZone,
    Opportunity,
    SpreadArb,
    TotalsArb,
)
from edge_scanner.models.profile import BookmakerProfile, ProfileTable, RiskTier, RoundingPolicy
from edge_scanner.models.scan import DetectionResult, ScanStats
from edge_scanner.models.stakes import (
    AllocationMode,
    AllocationResult,
    BackLayStakes,
    LegAllocation,
    NaturalizedResult,
    NaturalizedStake,
)
from edge_scanner.models.value import ValueBet, ValueBetProjection

__all__ = [
    "EventRef",
    "MarketType",
    "OddsFormat",
    "PriceQuote",
    "SportEvent",
    "Classification",
    "ExchangeArb",
    "HeadToHeadArb",
    "Leg",
    "Middle",
    "MiddleZone",
    "Opportunity",
    "SpreadArb",
    "TotalsArb",
    "BookmakerProfile",
    "ProfileTable",
    "RiskTier",
    "RoundingPolicy",
    "DetectionResult",
    "ScanStats",
    "AllocationMode",
    "AllocationResult",
    "BackLayStakes",
    "LegAllocation",
    "NaturalizedResult",
    "NaturalizedStake",
    "ValueBet",
    "ValueBetProjection",
]
