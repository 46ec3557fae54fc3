"""Data models for serialized per-account admission."""

from dataclasses import dataclass, field
from datetime import datetime

from riskfirst.config.settings import RiskSettings
from riskfirst.gate.models import KillSwitchState, TradeEnforcementResult
from riskfirst.risk.models import AccountEquity, ClosedTrade, RiskSnapshot


@dataclass(frozen=True)
class AccountState:
    """Everything the engine reads for one account at one moment.

    Attributes:
        equity: Account equity.
        todays_daily_pnl: Realized P&L for the current trading day.
        settings: The user's risk settings.
        closed_trades: Trade history for the recommended stop distance.
        kill_switch: Kill switch state, None if the account has none.
    """

    equity: AccountEquity
    todays_daily_pnl: float
    settings: RiskSettings
    closed_trades: list[ClosedTrade] = field(default_factory=list)
    kill_switch: KillSwitchState | None = None


@dataclass(frozen=True)
class AdmissionOutcome:
    """Result of running a trade through the serialized admission path."""

    account_id: str
    snapshot: RiskSnapshot
    result: TradeEnforcementResult
    committed: bool
    timestamp: datetime = field(default_factory=datetime.now)
