"""Tests for the back/lay exchange classifier."""

import pytest

from edge_scanner.core.exchange import find_exchange_arbs
from edge_scanner.models.opportunity import Classification


class TestExchangeArbs:
    """Test pairing bookmaker backs with exchange lays."""

    def test_back_lay_arb(self, make_event, computed_at):
        event = make_event(
            h2h=[("bookA", "Home", 3.2), ("bookA", "Away", 1.4)],
            lay=[("betfair_ex_au", "Home", 3.0)],
        )
        arbs = find_exchange_arbs(event, 0.02, computed_at=computed_at)

        assert len(arbs) == 1
        arb = arbs[0]
        assert arb.kind == "exchange"
        assert arb.classification == Classification.ARBITRAGE
        assert arb.back.bookmaker == "bookA"
        assert arb.back.odds == 3.2
        # Raw lay odds are reported, not the equivalent back odds
        assert arb.lay.odds == 3.0
        assert arb.combined_implied == pytest.approx(1 / 3.2 + (1 - 1 / 3.0))
        assert arb.bookmakers == frozenset({"bookA", "betfair_ex_au"})

    def test_lay_must_match_outcome(self, make_event):
        event = make_event(
            h2h=[("bookA", "Home", 3.2)],
            lay=[("betfair_ex_au", "Away", 1.2)],
        )
        assert find_exchange_arbs(event, 0.02) == []

    def test_same_bookmaker_excluded(self, make_event):
        event = make_event(
            h2h=[("betfair_ex_au", "Home", 3.2)],
            lay=[("betfair_ex_au", "Home", 3.0)],
        )
        assert find_exchange_arbs(event, 0.02) == []

    def test_no_lays(self, two_way_arb_event):
        assert find_exchange_arbs(two_way_arb_event, 0.02) == []

    def test_unusable_lay_excluded(self, make_event):
        event = make_event(
            h2h=[("bookA", "Home", 3.2)],
            lay=[("betfair_ex_au", "Home", 1.0)],
        )
        assert find_exchange_arbs(event, 0.02) == []

    def test_lay_above_back_is_not_arb(self, make_event):
        event = make_event(
            h2h=[("bookA", "Home", 2.0)],
            lay=[("betfair_ex_au", "Home", 2.4)],
        )
        assert find_exchange_arbs(event, 0.02) == []

    def test_best_back_per_bookmaker_pair(self, make_event):
        event = make_event(
            h2h=[("bookA", "Home", 3.2), ("bookB", "Home", 3.1)],
            lay=[("betfair_ex_au", "Home", 3.0), ("smarkets", "Home", 2.9)],
        )
        arbs = find_exchange_arbs(event, 0.02)

        assert len(arbs) == 4
        assert arbs[0].back.odds == 3.2
        assert arbs[0].lay.odds == 2.9
        profits = [a.profit_pct for a in arbs]
        assert profits == sorted(profits, reverse=True)
