"""
Pytest fixtures for testing.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

import pytest

from edge_scanner.config import Settings, get_settings
from edge_scanner.models.odds import MarketType, PriceQuote, SportEvent

COMPUTED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

# (bookmaker, outcome, odds) or (bookmaker, outcome, odds, point)
QuoteRow = tuple

EventFactory = Callable[..., SportEvent]


def _quotes(rows: Optional[list[QuoteRow]]) -> tuple[PriceQuote, ...]:
    quotes = []
    for row in rows or []:
        bookmaker, outcome, odds = row[:3]
        point = row[3] if len(row) > 3 else None
        quotes.append(PriceQuote(bookmaker=bookmaker, outcome=outcome, odds=odds, point=point))
    return tuple(quotes)


@pytest.fixture
def computed_at() -> datetime:
    """Fixed timestamp so results compare equal across runs."""
    return COMPUTED_AT


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults, independent of the environment."""
    return get_settings(max_workers=1, log_level="WARNING")


@pytest.fixture
def make_event() -> EventFactory:
    """Build a SportEvent from quote rows per market."""

    def _make(
        sport: str = "basketball_nba",
        event_id: str = "evt-1",
        home: str = "Home",
        away: str = "Away",
        h2h: Optional[list[QuoteRow]] = None,
        lay: Optional[list[QuoteRow]] = None,
        spreads: Optional[list[QuoteRow]] = None,
        totals: Optional[list[QuoteRow]] = None,
    ) -> SportEvent:
        markets = {
            MarketType.H2H: _quotes(h2h),
            MarketType.H2H_LAY: _quotes(lay),
            MarketType.SPREADS: _quotes(spreads),
            MarketType.TOTALS: _quotes(totals),
        }
        return SportEvent(
            id=event_id,
            sport=sport,
            home=home,
            away=away,
            markets={m: q for m, q in markets.items() if q},
        )

    return _make


@pytest.fixture
def two_way_arb_event(make_event: EventFactory) -> SportEvent:
    """2.10 / 2.05 across two bookmakers: a 3.74% arb."""
    return make_event(
        h2h=[
            ("bookA", "Home", 2.10),
            ("bookA", "Away", 1.80),
            ("bookB", "Home", 1.90),
            ("bookB", "Away", 2.05),
        ],
    )


@pytest.fixture
def spread_middle_event(make_event: EventFactory) -> SportEvent:
    """Favourite -3.5 and underdog +7.5: no arb, a 4-point middle."""
    return make_event(
        sport="americanfootball_nfl",
        event_id="evt-2",
        home="Team A",
        away="Team B",
        spreads=[
            ("bookA", "Team A", 1.95, -3.5),
            ("bookB", "Team B", 1.95, 7.5),
        ],
    )


@pytest.fixture
def single_book_event(make_event: EventFactory) -> SportEvent:
    return make_event(
        sport="tennis_atp",
        event_id="evt-3",
        home="Player 1",
        away="Player 2",
        h2h=[("bookC", "Player 1", 1.90), ("bookC", "Player 2", 1.90)],
    )


@pytest.fixture
def odds_payload() -> list[dict]:
    """A saved /odds response in the provider's shape."""
    return [
        {
            "id": "evt-api-1",
            "sport_key": "basketball_nba",
            "sport_title": "NBA",
            "commence_time": "2026-03-01T19:00:00Z",
            "home_team": "Boston Celtics",
            "away_team": "Miami Heat",
            "bookmakers": [
                {
                    "key": "sportsbet",
                    "title": "SportsBet",
                    "last_update": "2026-03-01T10:00:00Z",
                    "markets": [
                        {
                            "key": "h2h",
                            "outcomes": [
                                {"name": "Boston Celtics", "price": 2.10},
                                {"name": "Miami Heat", "price": 1.80},
                            ],
                        },
                        {
                            "key": "spreads",
                            "outcomes": [
                                {"name": "Boston Celtics", "price": 1.91, "point": -4.5},
                                {"name": "Miami Heat", "price": 1.91, "point": 4.5},
                            ],
                        },
                        {
                            "key": "outrights",
                            "outcomes": [{"name": "Boston Celtics", "price": 5.0}],
                        },
                    ],
                },
                {
                    "key": "unibet",
                    "title": "Unibet",
                    "markets": [
                        {
                            "key": "h2h",
                            "outcomes": [
                                {"name": "Boston Celtics", "price": -111},
                                {"name": "Miami Heat", "price": 105},
                            ],
                        },
                    ],
                },
                {
                    "key": "betfair_ex_au",
                    "title": "Betfair",
                    "markets": [
                        {
                            "key": "h2h_lay",
                            "outcomes": [
                                {"name": "Boston Celtics", "price": 2.0},
                                {"name": "Miami Heat", "price": 2.2},
                            ],
                        },
                    ],
                },
            ],
        },
        {
            "id": "evt-api-2",
            "sport_key": "soccer_epl",
            "sport_title": "EPL",
            "commence_time": "2026-03-02T15:00:00Z",
            "home_team": "Arsenal",
            "away_team": "Chelsea",
            "bookmakers": [],
        },
    ]
