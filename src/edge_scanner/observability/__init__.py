"""Observability helpers."""

from edge_scanner.observability.logging import setup_logging

__all__ = ["setup_logging"]
