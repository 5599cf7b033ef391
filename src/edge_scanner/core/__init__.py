"""Detection engine."""

from edge_scanner.core.allocator import (
    allocate,
    allocate_opportunity,
    back_lay_from_total,
    back_lay_stakes,
    realize,
)
from edge_scanner.core.exchange import find_exchange_arbs
from edge_scanner.core.h2h import find_h2h_arbs
from edge_scanner.core.lines import MiddleRules, find_middles, find_spread_arbs, find_totals_arbs
from edge_scanner.core.naturalizer import StakeNaturalizer, granularity, naturalize, suspicious_stake
from edge_scanner.core.odds_math import classify, combined_implied, implied_probability, profit_pct
from edge_scanner.core.profiles import default_profiles, load_profiles
from edge_scanner.core.scanner import Scanner, detect_all
from edge_scanner.core.value import find_value_bets, project_value_bet

__all__ = [
    "allocate",
    "allocate_opportunity",
    "back_lay_from_total",
    "back_lay_stakes",
    "realize",
    "find_exchange_arbs",
    "find_h2h_arbs",
    "MiddleRules",
    "find_middles",
    "find_spread_arbs",
    "find_totals_arbs",
    "StakeNaturalizer",
    "granularity",
    "naturalize",
    "suspicious_stake",
    "classify",
    "combined_implied",
    "implied_probability",
    "profit_pct",
    "default_profiles",
    "load_profiles",
    "Scanner",
    "detect_all",
    "find_value_bets",
    "project_value_bet",
]
