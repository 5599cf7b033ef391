"""
Bookmaker risk profiles.

The built-in table covers Australian bookmakers. A YAML file can extend or
override it:

    default:
      risk_tier: medium
      rounding: moderate
    aliases:
      bet365: bet365_au
    bookmakers:
      - key: bet365_au
        name: Bet365 AU
        risk_tier: extreme
        rounding: conservative
        limiting_speed: days
        notes: ["..."]
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog
import yaml

from edge_scanner.models.profile import (
    BookmakerProfile,
    ProfileTable,
    RiskTier,
    RoundingPolicy,
    normalize_name,
)

logger = structlog.get_logger(__name__)

DEFAULT_PROFILE = BookmakerProfile(
    key="unknown",
    name="Unknown",
    risk_tier=RiskTier.MEDIUM,
    rounding=RoundingPolicy.MODERATE,
    limiting_speed="months",
    notes=("No profile on record",),
    recommendations=("Use naturalized stakes", "Standard precautions apply"),
)

# Common names mapped to provider keys
DEFAULT_ALIASES = {
    "bet365": "bet365_au",
    "ladbrokes": "ladbrokes_au",
    "pointsbet": "pointsbetau",
    "betfair": "betfair_ex_au",
    "betfairexchange": "betfair_ex_au",
    "betr": "betr_au",
    "dabble": "dabble_au",
    "tabwa": "tabtouch",
}


def _profile(
    key: str,
    name: str,
    tier: RiskTier,
    rounding: RoundingPolicy,
    speed: str,
    lifespan: str,
    notes: tuple[str, ...],
    recommendations: tuple[str, ...],
) -> BookmakerProfile:
    return BookmakerProfile(
        key=key,
        name=name,
        risk_tier=tier,
        rounding=rounding,
        limiting_speed=speed,
        avg_account_lifespan=lifespan,
        notes=notes,
        recommendations=recommendations,
    )


_EXTREME = (RiskTier.EXTREME, RoundingPolicy.CONSERVATIVE, "days")
_HIGH = (RiskTier.HIGH, RoundingPolicy.MODERATE, "weeks")
_MEDIUM = (RiskTier.MEDIUM, RoundingPolicy.MODERATE, "months")

_AU_PROFILES = (
    # ── Extreme: limits within days ─────────────────────────────────────────
    _profile(
        "bet365_au", "Bet365 AU", *_EXTREME, "1-4 weeks",
        (
            "Most aggressive limiter in Australia",
            "Known to limit to $2-3 stakes after a single winning week",
            "Monitors closing line value closely",
            "Uses device fingerprinting",
        ),
        (
            "Use round stakes only ($20, $25, $50)",
            "Never bet exact promo minimums",
            "Place mug bets on popular markets",
            "Bet close to event start time",
        ),
    ),
    _profile(
        "ladbrokes_au", "Ladbrokes", *_EXTREME, "1-2 weeks",
        (
            "Can ban promos within days of signup",
            "Stakes limited to as low as 25 cents",
            "Shares data with Neds (same owner)",
        ),
        (
            "Extremely conservative stake rounding",
            "Only bet on major televised events",
            "Never take best odds if significantly higher",
        ),
    ),
    _profile(
        "neds", "Neds", *_EXTREME, "1-2 weeks",
        (
            "Same owner as Ladbrokes and shares its data",
            "Getting limited at one likely affects the other",
        ),
        (
            "Treat identically to Ladbrokes",
            "Extremely conservative stake rounding",
        ),
    ),
    # ── High: limits within weeks ───────────────────────────────────────────
    _profile(
        "sportsbet", "SportsBet", *_HIGH, "2-6 months",
        (
            "Employs dedicated analysts to flag winners",
            "Good liquidity",
        ),
        (
            "Round stakes to nearest $5",
            "Avoid systematic best-odds taking",
            "Withdraw infrequently and in small amounts",
        ),
    ),
    _profile(
        "pointsbetau", "PointsBet AU", *_HIGH, "1-3 months",
        ("Fast to limit individual bettors",),
        (
            "Stick to major sports",
            "Round stakes to natural amounts",
        ),
    ),
    _profile(
        "unibet", "Unibet", *_HIGH, "2-4 months",
        ("Will limit consistent winners",),
        (
            "Round stakes to nearest $5",
            "Mix in recreational bets",
        ),
    ),
    # ── Medium: limits within months ────────────────────────────────────────
    _profile(
        "tab", "TAB", *_MEDIUM, "3-12 months",
        (
            "Slower to act than the corporates",
            "Sports betting can still be limited",
        ),
        (
            "Sports bets should still be naturalized",
            "Still avoid obvious patterns",
        ),
    ),
    _profile(
        "tabtouch", "TABtouch", *_MEDIUM, "3-12 months",
        ("Western Australia TAB",),
        ("Naturalize sports bet stakes",),
    ),
    _profile(
        "betr_au", "Betr", *_MEDIUM, "2-6 months",
        ("Newer bookmaker with little limiting history",),
        ("Still use naturalized stakes", "Don't be their biggest winner"),
    ),
    _profile(
        "betright", "Bet Right", *_MEDIUM, "2-6 months",
        ("Smaller bookmaker, may have lower limits",),
        ("Use naturalized stakes", "Mix in some losing bets"),
    ),
    _profile(
        "playup", "PlayUp", *_MEDIUM, "2-6 months",
        ("Moderate limiting behaviour",),
        ("Avoid obvious arb patterns",),
    ),
    _profile(
        "boombet", "BoomBet", *_MEDIUM, "2-6 months",
        ("May have lower maximum stakes",),
        ("Use naturalized stakes",),
    ),
    _profile(
        "dabble_au", "Dabble AU", *_MEDIUM, "2-6 months",
        ("Unknown long-term limiting behaviour",),
        ("Use naturalized stakes",),
    ),
    # ── Low: exchange, does not limit ───────────────────────────────────────
    _profile(
        "betfair_ex_au", "Betfair Exchange", RiskTier.LOW, RoundingPolicy.AGGRESSIVE, "never", "Unlimited",
        (
            "Exchange model, cannot limit stakes",
            "Charges commission on net winnings",
        ),
        (
            "No stake naturalization needed",
            "Factor commission into lay stakes",
            "Check liquidity before placing the bookmaker leg",
        ),
    ),
)


def default_profiles() -> ProfileTable:
    """Built-in profile table."""
    return ProfileTable(
        profiles={p.key: p for p in _AU_PROFILES},
        aliases=dict(DEFAULT_ALIASES),
        default=DEFAULT_PROFILE,
    )


def load_profiles(path: Path, base: Optional[ProfileTable] = None) -> ProfileTable:
    """
    Load profiles from YAML on top of a base table.

    Entries in the file replace base entries with the same key.

    Raises:
        FileNotFoundError: path does not exist
        ValueError: an entry is missing its key or has a bad tier/policy
    """
    base = base if base is not None else default_profiles()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    profiles = dict(base.profiles)
    for entry in data.get("bookmakers", []):
        key = entry.get("key", "")
        if not key:
            raise ValueError(f"Bookmaker profile without a key in {path}")
        entry = {**entry, "name": entry.get("name", key)}
        for field in ("notes", "recommendations"):
            entry[field] = tuple(entry.get(field, ()))
        profiles[key] = BookmakerProfile(**entry)

    aliases = dict(base.aliases)
    for alias, key in (data.get("aliases") or {}).items():
        aliases[normalize_name(alias)] = key

    default = base.default
    if data.get("default"):
        default = default.model_copy(
            update={
                "risk_tier": RiskTier(data["default"].get("risk_tier", default.risk_tier)),
                "rounding": RoundingPolicy(data["default"].get("rounding", default.rounding)),
            }
        )

    logger.info("profiles_loaded", path=str(path), count=len(profiles))
    return ProfileTable(profiles=profiles, aliases=aliases, default=default)
