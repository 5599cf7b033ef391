"""Tests for provider payload parsing."""

from datetime import datetime, timezone

import pytest

from edge_scanner.adapters.odds_api import detect_format, parse_event, parse_events
from edge_scanner.core.scanner import detect_all
from edge_scanner.models.odds import MarketType, OddsFormat


class TestDetectFormat:
    """Test market-level price format detection."""

    def test_american(self):
        assert detect_format([-110, 105]) == OddsFormat.AMERICAN
        assert detect_format([150, 120]) == OddsFormat.AMERICAN
        assert detect_format([100.0, -250]) == OddsFormat.AMERICAN

    def test_decimal(self):
        assert detect_format([2.5, 1.6]) == OddsFormat.DECIMAL
        assert detect_format([3, 1]) == OddsFormat.DECIMAL

    def test_decimal_longshot_is_not_american(self):
        assert detect_format([1.01, 151.0]) == OddsFormat.DECIMAL
        assert detect_format([1.002, 101, 250]) == OddsFormat.DECIMAL

    def test_ignores_fractional_and_junk(self):
        assert detect_format(["5/2", -110, 120]) == OddsFormat.AMERICAN
        assert detect_format(["evs", "n/a", None]) == OddsFormat.DECIMAL


class TestParseEvents:
    """Test converting payloads into events."""

    def test_parses_markets(self, odds_payload):
        events = parse_events(odds_payload)

        # The soccer event has no bookmakers and is dropped
        assert len(events) == 1
        event = events[0]
        assert event.id == "evt-api-1"
        assert event.sport == "basketball_nba"
        assert event.sport_title == "NBA"
        assert event.home == "Boston Celtics"
        assert event.away == "Miami Heat"
        assert event.commence_time == datetime(2026, 3, 1, 19, 0, tzinfo=timezone.utc)
        assert set(event.markets) == {MarketType.H2H, MarketType.SPREADS, MarketType.H2H_LAY}
        assert event.bookmakers == {"sportsbet", "unibet", "betfair_ex_au"}

    def test_american_prices_converted(self, odds_payload):
        event = parse_events(odds_payload)[0]
        unibet = {q.outcome: q.odds for q in event.quotes(MarketType.H2H) if q.bookmaker == "unibet"}
        assert unibet["Boston Celtics"] == pytest.approx(1.9009, abs=1e-4)
        assert unibet["Miami Heat"] == pytest.approx(2.05)

    def test_points_and_timestamps(self, odds_payload):
        event = parse_events(odds_payload)[0]
        spreads = event.quotes(MarketType.SPREADS)
        assert {q.point for q in spreads} == {-4.5, 4.5}
        assert all(q.last_update == datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc) for q in spreads)

    def test_keep_empty_events(self, odds_payload):
        events = parse_events(odds_payload, skip_empty=False)
        assert len(events) == 2
        assert events[1].quote_count == 0

    def test_single_event_dict(self, odds_payload):
        assert len(parse_events(odds_payload[0])) == 1

    def test_forced_format(self):
        raw = {
            "id": "e",
            "sport_key": "soccer_epl",
            "home_team": "A",
            "away_team": "B",
            "bookmakers": [
                {
                    "key": "bookA",
                    "markets": [{"key": "h2h", "outcomes": [{"name": "A", "price": "6/4"}]}],
                }
            ],
        }
        event = parse_event(raw, odds_format=OddsFormat.FRACTIONAL)
        assert event.quotes(MarketType.H2H)[0].odds == pytest.approx(2.5)

    def test_decimal_longshot_kept(self):
        raw = {
            "id": "e",
            "sport_key": "tennis_atp",
            "home_team": "A",
            "away_team": "B",
            "bookmakers": [
                {
                    "key": "bookA",
                    "markets": [
                        {
                            "key": "h2h",
                            "outcomes": [{"name": "A", "price": 1.01}, {"name": "B", "price": 151.0}],
                        }
                    ],
                }
            ],
        }
        odds = [q.odds for q in parse_event(raw).quotes(MarketType.H2H)]
        assert odds == [1.01, 151.0]

    def test_forced_american(self):
        raw = {
            "id": "e",
            "sport_key": "tennis_atp",
            "home_team": "A",
            "away_team": "B",
            "bookmakers": [
                {
                    "key": "bookA",
                    "markets": [{"key": "h2h", "outcomes": [{"name": "A", "price": 150}]}],
                }
            ],
        }
        assert parse_event(raw).quotes(MarketType.H2H)[0].odds == pytest.approx(2.5)
        # A lone 150 reads as American unless the caller says otherwise
        assert parse_event(raw, odds_format=OddsFormat.DECIMAL).quotes(MarketType.H2H)[0].odds == 150.0

    def test_unparseable_price_skipped(self):
        raw = {
            "id": "e",
            "sport_key": "soccer_epl",
            "home_team": "A",
            "away_team": "B",
            "bookmakers": [
                {
                    "key": "bookA",
                    "markets": [
                        {
                            "key": "h2h",
                            "outcomes": [
                                {"name": "A", "price": "n/a"},
                                {"name": "B", "price": "abc"},
                                {"name": "Draw", "price": 3.4},
                            ],
                        }
                    ],
                }
            ],
        }
        event = parse_event(raw)
        assert [q.outcome for q in event.quotes(MarketType.H2H)] == ["Draw"]

    def test_payload_feeds_detection(self, odds_payload, settings):
        result = detect_all(parse_events(odds_payload), 0.02, 6.0, settings=settings)

        kinds = sorted(o.kind for o in result.opportunities)
        assert kinds == ["exchange", "h2h"]
        assert result.stats.value_bets_found == 1
        assert result.value_bets[0].leg.outcome == "Miami Heat"
