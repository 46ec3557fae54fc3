"""Risk-first position sizing and trade admission engine.

The three entry points are pure functions over supplied account state:

- ``size()`` converts a fiat risk amount into an order size.
- ``build_snapshot()`` derives the account's current risk status.
- ``enforce()`` admits, trims or blocks a proposed trade.
"""

from collections.abc import Iterable
from datetime import datetime

from riskfirst.config.settings import RiskSettings
from riskfirst.gate.admission_gate import AdmissionGate
from riskfirst.gate.models import (
    KillSwitchState,
    TradeEnforcementRequest,
    TradeEnforcementResult,
)
from riskfirst.risk.models import AccountEquity, ClosedTrade, RiskSnapshot
from riskfirst.risk.snapshot_builder import RiskSnapshotBuilder
from riskfirst.sizing.models import PositionSizeRequest, PositionSizeResult
from riskfirst.sizing.position_sizer import PositionSizer


_sizer = PositionSizer()
_builder = RiskSnapshotBuilder()
_gate = AdmissionGate()


def size(request: PositionSizeRequest) -> PositionSizeResult:
    """Size a position from a fiat risk amount. See PositionSizer.size."""
    return _sizer.size(request)


def build_snapshot(
    equity: AccountEquity,
    todays_daily_pnl: float,
    settings: RiskSettings,
    closed_trades: Iterable[ClosedTrade] = (),
) -> RiskSnapshot:
    """Build the account's risk snapshot. See RiskSnapshotBuilder.build."""
    return _builder.build(equity, todays_daily_pnl, settings, closed_trades)


def enforce(
    request: TradeEnforcementRequest,
    snapshot: RiskSnapshot,
    settings: RiskSettings,
    kill_switch: KillSwitchState | None = None,
    now: datetime | None = None,
) -> TradeEnforcementResult:
    """Decide admission for a proposed trade. See AdmissionGate.enforce.

    Pass ``now`` whenever ``kill_switch`` may carry a recovery time: without
    it a timed switch keeps blocking until it is released.
    """
    return _gate.enforce(request, snapshot, settings, kill_switch=kill_switch, now=now)


__all__ = ["build_snapshot", "enforce", "size"]
