"""Provider payload adapters."""

from edge_scanner.adapters.odds_api import detect_format, parse_event, parse_events

__all__ = ["detect_format", "parse_event", "parse_events"]
