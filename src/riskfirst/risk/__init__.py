"""Account risk state and snapshot building."""

from .models import AccountEquity, ClosedTrade, DailyStat, RiskSnapshot, RiskStatus
from .snapshot_builder import RiskSnapshotBuilder, daily_pnl_for

__all__ = [
    "AccountEquity",
    "ClosedTrade",
    "DailyStat",
    "RiskSnapshot",
    "RiskSnapshotBuilder",
    "RiskStatus",
    "daily_pnl_for",
]
