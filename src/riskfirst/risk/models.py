"""Data models for account risk state."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class RiskStatus(str, Enum):
    """Risk status of the account for the current trading day."""

    SAFE = "safe"
    WARN = "warn"
    TILT = "tilt"

    @property
    def severity(self) -> int:
        """Rank used to compare statuses (safe < warn < tilt)."""
        return _SEVERITY[self]


_SEVERITY = {RiskStatus.SAFE: 0, RiskStatus.WARN: 1, RiskStatus.TILT: 2}


@dataclass(frozen=True)
class AccountEquity:
    """Account equity as supplied by the persistence layer.

    Attributes:
        starting_capital: Capital the account started with.
        current_equity: Equity after realized trade outcomes.
    """

    starting_capital: float
    current_equity: float

    @property
    def sizing_equity(self) -> float:
        """Current equity clamped at 0 for use as a sizing denominator."""
        return max(self.current_equity, 0.0)


@dataclass(frozen=True)
class DailyStat:
    """Realized P&L for one calendar day."""

    date: date
    daily_pnl: float


@dataclass(frozen=True)
class ClosedTrade:
    """A historical trade used to seed the recommended stop distance.

    Attributes:
        entry_price: Price the trade was entered at.
        stop_loss: Stop price, None if the trade had no recorded stop.
        is_closed: Whether the trade has been closed.
        pnl: Realized P&L, None if not yet booked.
    """

    entry_price: float
    stop_loss: float | None = None
    is_closed: bool = True
    pnl: float | None = None


@dataclass(frozen=True)
class RiskSnapshot:
    """Point-in-time risk status of an account.

    Recomputed from scratch on every read; never persisted.

    Attributes:
        daily_pnl: Today's realized P&L.
        daily_limit: Soft daily loss ceiling in fiat.
        drawdown_pct: Fraction of the daily limit consumed (1.0 = limit hit).
        status: safe, warn or tilt.
        recommended_size: Suggested units for the next trade.
        recommended_stop_distance: Suggested stop distance in price units.
        breach_reason: Explanation when status is not safe.
        mdl_limit: Maximum Daily Loss in fiat.
        ml_limit: Maximum Loss in fiat.
        current_daily_loss: Today's realized loss (0 when profitable).
        total_loss: Loss since inception (0 when above starting capital).
        exceeds_mdl: Whether the MDL ceiling is breached and enforced.
        exceeds_ml: Whether the ML ceiling is breached and enforced.
        current_equity: Equity the snapshot was built from.
        starting_capital: Starting capital the snapshot was built from.
    """

    daily_pnl: float
    daily_limit: float
    drawdown_pct: float
    status: RiskStatus
    recommended_size: float
    recommended_stop_distance: float
    breach_reason: str | None
    mdl_limit: float
    ml_limit: float
    current_daily_loss: float
    total_loss: float
    exceeds_mdl: bool
    exceeds_ml: bool
    current_equity: float
    starting_capital: float
