"""
Entry point for running the scanner as a module.

Usage:
    python -m edge_scanner scan odds.json
    python -m edge_scanner stakes 2.10 2.05 --total 100
"""

from edge_scanner.cli import app

if __name__ == "__main__":
    app()
