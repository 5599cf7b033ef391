"""
The Odds API payload parser.

Turns a saved /sports/{sport}/odds response into SportEvent objects.
https://the-odds-api.com/

Parsing only; fetching belongs to the caller.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any, Iterable, Optional

import structlog

from edge_scanner.core.odds_math import to_decimal
from edge_scanner.models.odds import MarketType, OddsFormat, PriceQuote, SportEvent

logger = structlog.get_logger(__name__)


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None


def _is_fractional(price: Any) -> bool:
    return isinstance(price, str) and ("/" in price or price.strip().lower() in ("evs", "evens"))


def _numeric(prices: Iterable[Any]) -> list[float]:
    values = []
    for price in prices:
        if price is None or _is_fractional(price):
            continue
        try:
            values.append(float(price))
        except (ValueError, TypeError):
            continue
    return values


def detect_format(prices: Iterable[Any]) -> OddsFormat:
    """
    Guess the numeric odds format shared by one market's prices.

    American prices are never inside (-100, 100), so a market is American
    only when every numeric price sits at 100 or more in magnitude. One
    price alone is ambiguous (151.0 is a fair decimal longshot), which is
    why the guess is made over the whole market. Fractional strings are
    recognized per price and ignored here.

    Examples:
        >>> detect_format([-110, 105]), detect_format([1.01, 151.0])
        (<OddsFormat.AMERICAN: 'american'>, <OddsFormat.DECIMAL: 'decimal'>)
    """
    values = _numeric(prices)
    if values and all(abs(v) >= 100 for v in values):
        return OddsFormat.AMERICAN
    return OddsFormat.DECIMAL


def _parse_price(price: Any, odds_format: OddsFormat) -> Optional[float]:
    if _is_fractional(price):
        odds_format = OddsFormat.FRACTIONAL
    try:
        return to_decimal(price, odds_format)
    except (ValueError, TypeError):
        return None


def parse_event(raw: dict, odds_format: Optional[OddsFormat] = None) -> SportEvent:
    """
    Parse one event object.

    Args:
        raw: Event dict with a "bookmakers" list
        odds_format: Force a price format instead of guessing per market

    Unknown market keys and unparseable prices are skipped.
    """
    markets: dict[MarketType, list[PriceQuote]] = defaultdict(list)

    for bookmaker in raw.get("bookmakers", []):
        bookmaker_key = bookmaker.get("key", "")
        if not bookmaker_key:
            continue
        book_update = _parse_time(bookmaker.get("last_update"))

        for market in bookmaker.get("markets", []):
            try:
                market_type = MarketType(market.get("key", ""))
            except ValueError:
                continue  # Skip unknown market types

            last_update = _parse_time(market.get("last_update")) or book_update
            outcomes = market.get("outcomes", [])
            market_format = odds_format or detect_format(o.get("price") for o in outcomes)
            for outcome in outcomes:
                price = outcome.get("price")
                if price is None:
                    continue
                odds = _parse_price(price, market_format)
                if odds is None:
                    logger.debug("price_unparseable", bookmaker=bookmaker_key, price=price)
                    continue

                point = outcome.get("point")
                markets[market_type].append(
                    PriceQuote(
                        bookmaker=bookmaker_key,
                        outcome=outcome.get("name", ""),
                        odds=odds,
                        point=float(point) if point is not None else None,
                        last_update=last_update,
                    )
                )

    return SportEvent(
        id=raw.get("id", ""),
        sport=raw.get("sport_key", ""),
        sport_title=raw.get("sport_title", ""),
        home=raw.get("home_team", ""),
        away=raw.get("away_team", ""),
        commence_time=_parse_time(raw.get("commence_time")),
        markets={m: tuple(quotes) for m, quotes in markets.items()},
    )


def parse_events(
    payload: list[dict] | dict,
    odds_format: Optional[OddsFormat] = None,
    skip_empty: bool = True,
) -> list[SportEvent]:
    """
    Parse an odds response into events.

    Args:
        payload: List of event dicts, or a single event dict
        odds_format: Force a price format instead of guessing per market
        skip_empty: Drop events that end up with no quotes

    Returns list of SportEvent objects
    """
    raw_events = [payload] if isinstance(payload, dict) else payload

    events: list[SportEvent] = []
    for raw in raw_events:
        event = parse_event(raw, odds_format)
        if skip_empty and event.quote_count == 0:
            logger.debug("event_without_quotes", event_id=event.id)
            continue
        events.append(event)
    return events
