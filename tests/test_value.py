"""Tests for the value bet detector."""

import pytest

from edge_scanner.core.value import edge_pct, find_value_bets, market_average, project_value_bet
from edge_scanner.models.odds import MarketType


class TestValueBets:
    """Test market-average edge detection."""

    @pytest.fixture
    def event(self, make_event):
        # Home average (2.30 + 1.80) / 2 = 2.05
        return make_event(
            h2h=[
                ("bookA", "Home", 2.30),
                ("bookA", "Away", 1.70),
                ("bookB", "Home", 1.80),
                ("bookB", "Away", 1.70),
            ]
        )

    def test_scenario_edge(self, event, computed_at):
        bets = find_value_bets(event, 12.0, computed_at=computed_at)

        assert len(bets) == 1
        vb = bets[0]
        assert vb.market == MarketType.H2H
        assert vb.leg.outcome == "Home"
        assert vb.leg.bookmaker == "bookA"
        assert vb.leg.odds == 2.30
        assert vb.market_average == pytest.approx(2.05)
        assert vb.edge_pct == pytest.approx(12.2, abs=0.01)
        assert vb.quote_count == 2
        assert vb.computed_at == computed_at

    def test_average_includes_best_quote(self, make_event):
        # Mean of 2.30, 2.00, 1.70 is 2.00; without the best quote it would be 1.85
        event = make_event(
            h2h=[("bookA", "Home", 2.30), ("bookB", "Home", 2.00), ("bookC", "Home", 1.70)]
        )
        vb = find_value_bets(event, 5.0)[0]
        assert vb.market_average == pytest.approx(2.00)
        assert vb.edge_pct == pytest.approx(15.0)
        assert vb.quote_count == 3

    def test_threshold_above_edge(self, event):
        assert find_value_bets(event, 12.2) == []

    def test_single_quote_is_not_enough(self, make_event):
        event = make_event(h2h=[("bookA", "Home", 5.0), ("bookB", "Away", 1.2)])
        assert find_value_bets(event, 0.0) == []

    def test_line_markets_group_by_point(self, make_event):
        event = make_event(
            spreads=[
                ("bookA", "Home", 2.30, -3.5),
                ("bookB", "Home", 1.80, -3.5),
                ("bookC", "Home", 2.50, -4.5),
            ]
        )
        bets = find_value_bets(event, 5.0)

        assert len(bets) == 1
        assert bets[0].market == MarketType.SPREADS
        assert bets[0].leg.point == -3.5
        assert bets[0].leg.odds == 2.30

    def test_best_price_tie_goes_to_first_bookmaker_name(self, make_event):
        event = make_event(
            totals=[
                ("zbook", "Over", 2.30, 210.5),
                ("abook", "Over", 2.30, 210.5),
                ("mbook", "Over", 1.50, 210.5),
            ]
        )
        bets = find_value_bets(event, 5.0)
        assert bets[0].leg.bookmaker == "abook"

    def test_sorted_by_edge(self, make_event):
        event = make_event(
            h2h=[
                ("bookA", "Home", 2.30),
                ("bookB", "Home", 1.80),
                ("bookA", "Away", 3.00),
                ("bookB", "Away", 2.00),
            ]
        )
        bets = find_value_bets(event, 1.0)
        assert [b.leg.outcome for b in bets] == ["Away", "Home"]

    def test_helpers(self):
        assert market_average([2.30, 1.80]) == pytest.approx(2.05)
        assert edge_pct(2.30, 2.05) == pytest.approx(12.195, abs=1e-3)


class TestProjection:
    """Test expected value projection."""

    def test_projection(self, make_event):
        event = make_event(h2h=[("bookA", "Home", 2.30), ("bookB", "Home", 1.80)])
        vb = find_value_bets(event, 5.0)[0]

        projection = project_value_bet(vb, 100)
        assert projection.win_probability == pytest.approx(1 / 2.05)
        assert projection.potential_profit == pytest.approx(130.0)
        assert projection.expected_value == pytest.approx(12.20, abs=0.01)
        # EV% against the market average equals the edge
        assert projection.ev_pct == pytest.approx(vb.edge_pct, abs=1e-3)

    def test_rejects_non_positive_stake(self, make_event):
        event = make_event(h2h=[("bookA", "Home", 2.30), ("bookB", "Home", 1.80)])
        vb = find_value_bets(event, 5.0)[0]
        with pytest.raises(ValueError):
            project_value_bet(vb, 0)
