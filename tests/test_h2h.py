"""Tests for the head-to-head classifier."""

import pytest

from edge_scanner.core.h2h import allowed_outcome_counts, find_h2h_arbs, group_outcomes
from edge_scanner.errors import IncompleteMarket
from edge_scanner.models.opportunity import Classification


class TestOutcomeCounts:
    """Test per-sport outcome count rules."""

    def test_two_way_sports(self):
        assert allowed_outcome_counts("basketball_nba") == (2,)
        assert allowed_outcome_counts("tennis_atp_french_open") == (2,)

    def test_soccer_is_three_way(self):
        assert allowed_outcome_counts("soccer_epl") == (3,)

    def test_flexible_sports(self):
        assert allowed_outcome_counts("icehockey_nhl") == (2, 3)
        assert allowed_outcome_counts("darts_pdc") == (2, 3)

    def test_wrong_count_raises(self, make_event):
        event = make_event(
            sport="soccer_epl",
            h2h=[("bookA", "Home", 2.1), ("bookB", "Away", 2.1)],
        )
        with pytest.raises(IncompleteMarket):
            group_outcomes(event, 1.01)

    def test_single_bookmaker_raises(self, single_book_event):
        with pytest.raises(IncompleteMarket):
            group_outcomes(single_book_event, 1.01)


class TestTwoWay:
    """Test 2-way book-vs-book detection."""

    def test_scenario_arb(self, two_way_arb_event, computed_at):
        arbs = find_h2h_arbs(two_way_arb_event, 0.02, computed_at=computed_at)

        assert len(arbs) == 1
        arb = arbs[0]
        assert arb.kind == "h2h"
        assert arb.classification == Classification.ARBITRAGE
        assert arb.combined_implied == pytest.approx(0.9640, abs=1e-4)
        assert arb.profit_pct == pytest.approx(3.74, abs=0.01)
        assert {(leg.outcome, leg.bookmaker, leg.odds) for leg in arb.legs} == {
            ("Home", "bookA", 2.10),
            ("Away", "bookB", 2.05),
        }
        assert arb.bookmakers == frozenset({"bookA", "bookB"})
        assert arb.computed_at == computed_at
        assert arb.event.id == two_way_arb_event.id

    def test_near_arb(self, make_event):
        event = make_event(h2h=[("bookA", "Home", 1.98), ("bookB", "Away", 1.98)])

        arbs = find_h2h_arbs(event, 0.02)
        assert len(arbs) == 1
        assert arbs[0].classification == Classification.NEAR_ARBITRAGE
        assert arbs[0].profit_pct < 0

        assert find_h2h_arbs(event, 0.005) == []

    def test_same_bookmaker_never_combines(self, make_event):
        event = make_event(
            h2h=[
                ("bookA", "Home", 2.2),
                ("bookA", "Away", 2.2),
                ("bookB", "Home", 1.5),
                ("bookB", "Away", 1.5),
            ]
        )
        for arb in find_h2h_arbs(event, 0.02):
            assert len(arb.bookmakers) >= 2

    def test_single_bookmaker_is_skipped(self, single_book_event):
        assert find_h2h_arbs(single_book_event, 0.5) == []

    def test_unusable_odds_excluded(self, make_event):
        event = make_event(
            h2h=[
                ("bookA", "Home", 1.01),
                ("bookB", "Away", 50.0),
                ("bookC", "Home", 1.0),
            ]
        )
        # Home has no usable quote left, so the market is incomplete
        assert find_h2h_arbs(event, 0.5) == []

    def test_tie_prefers_higher_worst_leg(self, make_event):
        event = make_event(
            h2h=[
                ("bookA", "Home", 2.0),
                ("bookA", "Away", 3.0),
                ("bookB", "Home", 1.5),
                ("bookB", "Away", 2.0),
            ]
        )
        # Home@A 2.0 + Away@B 2.0 and Home@B 1.5 + Away@A 3.0 both sum to 1.0
        arbs = find_h2h_arbs(event, 0.02)
        assert len(arbs) == 1
        assert [leg.odds for leg in arbs[0].legs] == [2.0, 2.0]

    def test_sorted_by_profit(self, make_event):
        event = make_event(
            h2h=[
                ("bookA", "Home", 2.10),
                ("bookB", "Away", 2.05),
                ("bookC", "Away", 2.02),
                ("bookD", "Home", 2.01),
            ]
        )
        arbs = find_h2h_arbs(event, 0.02)
        assert len(arbs) >= 2
        profits = [a.profit_pct for a in arbs]
        assert profits == sorted(profits, reverse=True)
        # One result per bookmaker set
        assert len({a.bookmakers for a in arbs}) == len(arbs)


class TestThreeWay:
    """Test 3-way markets with a draw."""

    def test_soccer_three_way_arb(self, make_event):
        event = make_event(
            sport="soccer_epl",
            h2h=[
                ("bookA", "Home", 2.9),
                ("bookA", "Draw", 3.2),
                ("bookA", "Away", 3.0),
                ("bookB", "Home", 2.5),
                ("bookB", "Draw", 3.6),
                ("bookB", "Away", 3.1),
                ("bookC", "Home", 2.6),
                ("bookC", "Draw", 3.3),
                ("bookC", "Away", 3.8),
            ],
        )
        arbs = find_h2h_arbs(event, 0.02)

        assert arbs
        best = arbs[0]
        assert best.kind == "h2h_3way"
        assert len(best.legs) == 3
        assert best.combined_implied == pytest.approx(1 / 2.9 + 1 / 3.6 + 1 / 3.8)
        assert best.bookmakers == frozenset({"bookA", "bookB", "bookC"})
