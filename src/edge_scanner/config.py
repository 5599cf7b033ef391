"""Configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MiddleHeuristic(BaseModel):
    """
    Per-sport zone probability assumption for middles.

    Probability of landing in a middle zone is width * pct_per_point,
    capped at cap_pct. Values are percentages.
    """
    spread_pct_per_point: float = Field(default=5.0, ge=0)
    spread_cap_pct: float = Field(default=30.0, ge=0, le=100)
    totals_pct_per_point: float = Field(default=8.0, ge=0)
    totals_cap_pct: float = Field(default=25.0, ge=0, le=100)


def _default_middle_heuristics() -> dict[str, MiddleHeuristic]:
    return {
        "default": MiddleHeuristic(),
        # High-scoring sports spread the margin over many more points
        "basketball": MiddleHeuristic(
            spread_pct_per_point=3.0,
            spread_cap_pct=20.0,
            totals_pct_per_point=2.5,
            totals_cap_pct=15.0,
        ),
        "americanfootball": MiddleHeuristic(
            spread_pct_per_point=5.0,
            spread_cap_pct=30.0,
            totals_pct_per_point=4.0,
            totals_cap_pct=20.0,
        ),
        "icehockey": MiddleHeuristic(
            spread_pct_per_point=15.0,
            spread_cap_pct=35.0,
            totals_pct_per_point=18.0,
            totals_cap_pct=35.0,
        ),
        "soccer": MiddleHeuristic(
            spread_pct_per_point=20.0,
            spread_cap_pct=35.0,
            totals_pct_per_point=22.0,
            totals_cap_pct=35.0,
        ),
    }


class Settings(BaseSettings):
    """Global settings."""

    model_config = SettingsConfigDict(
        env_prefix="EDGE_SCANNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Detection thresholds ────────────────────────────────────────────────
    near_arb_threshold: float = Field(
        default=0.02,
        ge=0,
        description="Combined implied probability allowance above 1.0 for near-arbs",
    )
    value_threshold: float = Field(default=5.0, description="Min value-bet edge in percent")
    min_odds: float = Field(default=1.01, description="Legs at or below these odds are excluded")

    # ── Middles ─────────────────────────────────────────────────────────────
    middle_reference_stake: float = Field(default=200.0, gt=0, description="Total stake used to size middles")
    min_spread_gap: float = Field(default=1.0, description="Min spread line gap for a middle")
    min_totals_gap: float = Field(default=0.5, description="Min totals line gap for a middle")
    max_middle_loss_pct: float = Field(default=5.0, description="Keep middles losing at most this % on a miss")
    max_middle_ev_loss_pct: float = Field(default=5.0, description="Keep middles with EV above -this %")
    middle_heuristics: dict[str, MiddleHeuristic] = Field(default_factory=_default_middle_heuristics)

    # ── Scanner ─────────────────────────────────────────────────────────────
    max_workers: int = Field(default=4, ge=1, description="Classifier fan-out threads (1 = inline)")

    # ── Stakes ──────────────────────────────────────────────────────────────
    default_total_stake: float = Field(default=100.0, gt=0)
    profiles_file: Optional[str] = Field(default=None, description="YAML bookmaker risk profiles")

    # ── Logging ─────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", description="'json' or 'console'")

    # ── Helpers ─────────────────────────────────────────────────────────────

    @property
    def profiles_path(self) -> Optional[Path]:
        return Path(self.profiles_file) if self.profiles_file else None

    def middle_heuristic(self, sport: str) -> MiddleHeuristic:
        """Longest configured key contained in the sport key wins."""
        sport = sport.lower()
        matches = [k for k in self.middle_heuristics if k != "default" and k in sport]
        if matches:
            return self.middle_heuristics[max(matches, key=len)]
        return self.middle_heuristics.get("default", MiddleHeuristic())


def get_settings(**overrides) -> Settings:  # type: ignore
    """Factory with optional overrides."""
    return Settings(**overrides)
