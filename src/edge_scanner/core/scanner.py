"""
Scanner – runs every classifier over a batch of events.

Each (event, classifier) pair is independent and read-only, so the pass
fans out over a thread pool with no locking. Results are gathered in
submission order and then sorted, so output does not depend on thread
scheduling.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Iterable, Optional, Sequence

import structlog

from edge_scanner.config import Settings, get_settings
from edge_scanner.core.exchange import find_exchange_arbs
from edge_scanner.core.h2h import find_h2h_arbs
from edge_scanner.core.lines import MiddleRules, find_middles, find_spread_arbs, find_totals_arbs
from edge_scanner.core.value import find_value_bets
from edge_scanner.errors import MalformedEvent
from edge_scanner.models.odds import SportEvent
from edge_scanner.models.opportunity import Classification, Opportunity
from edge_scanner.models.scan import DetectionResult, ScanStats
from edge_scanner.models.value import ValueBet

logger = structlog.get_logger(__name__)

Task = Callable[[], list]


def _summarize(
    events: Sequence[SportEvent],
    opportunities: Sequence[Opportunity],
    value_bets: Sequence[ValueBet],
) -> ScanStats:
    bookmakers: set[str] = set()
    multi_book = 0
    for event in events:
        books = event.bookmakers
        bookmakers |= books
        if len(books) >= 2:
            multi_book += 1

    arbs = near_arbs = middles = 0
    for o in opportunities:
        if o.kind == "middle":
            middles += 1
        elif o.classification == Classification.ARBITRAGE:
            arbs += 1
        else:
            near_arbs += 1

    return ScanStats(
        total_events=len(events),
        events_with_multiple_bookmakers=multi_book,
        total_bookmakers=len(bookmakers),
        arbs_found=arbs,
        near_arbs_found=near_arbs,
        middles_found=middles,
        value_bets_found=len(value_bets),
        sports_scanned=tuple(sorted({e.sport for e in events})),
    )


class Scanner:
    """
    Detection orchestrator.

    Usage:
        scanner = Scanner(get_settings())
        result = scanner.detect_all(events)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        near_arb_threshold: Optional[float] = None,
        value_threshold: Optional[float] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.near_arb_threshold = (
            near_arb_threshold if near_arb_threshold is not None else self.settings.near_arb_threshold
        )
        self.value_threshold = value_threshold if value_threshold is not None else self.settings.value_threshold
        self.max_workers = max_workers if max_workers is not None else self.settings.max_workers

        if self.near_arb_threshold < 0:
            raise ValueError(f"Near-arb threshold must be >= 0, got {self.near_arb_threshold}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    def _opportunity_tasks(self, event: SportEvent, computed_at: datetime) -> list[Task]:
        min_odds = self.settings.min_odds
        threshold = self.near_arb_threshold
        rules = MiddleRules.from_settings(self.settings, event.sport)
        return [
            partial(find_h2h_arbs, event, threshold, min_odds, computed_at),
            partial(find_exchange_arbs, event, threshold, min_odds, computed_at),
            partial(find_spread_arbs, event, threshold, min_odds, computed_at),
            partial(find_totals_arbs, event, threshold, min_odds, computed_at),
            partial(find_middles, event, rules, min_odds, computed_at),
        ]

    def _value_task(self, event: SportEvent, computed_at: datetime) -> Task:
        return partial(find_value_bets, event, self.value_threshold, self.settings.min_odds, computed_at)

    def _run(self, tasks: list[Task]) -> list[list]:
        if self.max_workers == 1 or len(tasks) <= 1:
            return [task() for task in tasks]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(task) for task in tasks]
            return [f.result() for f in futures]

    def detect_all(
        self,
        events: Iterable[SportEvent],
        computed_at: Optional[datetime] = None,
    ) -> DetectionResult:
        """
        Run every classifier and the value detector over a batch.

        Raises:
            MalformedEvent: an event carries no quotes at all
        """
        events = list(events)
        for event in events:
            if event.quote_count == 0:
                raise MalformedEvent(f"Event {event.id} ({event.ref.label}) has no price quotes")

        computed_at = computed_at or datetime.now(timezone.utc)

        opportunity_tasks: list[Task] = []
        value_tasks: list[Task] = []
        for event in events:
            opportunity_tasks.extend(self._opportunity_tasks(event, computed_at))
            value_tasks.append(self._value_task(event, computed_at))

        results = self._run(opportunity_tasks + value_tasks)
        split = len(opportunity_tasks)

        opportunities: list[Opportunity] = [o for batch in results[:split] for o in batch]
        value_bets: list[ValueBet] = [v for batch in results[split:] for v in batch]

        # Stable: ties keep submission order
        opportunities.sort(key=lambda o: o.profit_pct, reverse=True)
        value_bets.sort(key=lambda v: v.edge_pct, reverse=True)

        stats = _summarize(events, opportunities, value_bets)
        logger.info(
            "scan_complete",
            events=stats.total_events,
            arbs=stats.arbs_found,
            near_arbs=stats.near_arbs_found,
            middles=stats.middles_found,
            value_bets=stats.value_bets_found,
        )

        return DetectionResult(
            opportunities=tuple(opportunities),
            value_bets=tuple(value_bets),
            stats=stats,
            computed_at=computed_at,
        )


def detect_all(
    events: Iterable[SportEvent],
    near_arb_threshold: float,
    value_threshold: float,
    settings: Optional[Settings] = None,
    max_workers: Optional[int] = None,
    computed_at: Optional[datetime] = None,
) -> DetectionResult:
    """Run one detection pass with explicit thresholds."""
    scanner = Scanner(
        settings=settings,
        near_arb_threshold=near_arb_threshold,
        value_threshold=value_threshold,
        max_workers=max_workers,
    )
    return scanner.detect_all(events, computed_at=computed_at)
