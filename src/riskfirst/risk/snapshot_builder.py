"""Builds point-in-time risk snapshots from account state."""

import logging
from collections.abc import Iterable
from datetime import date

from riskfirst.config.settings import RiskSettings
from riskfirst.risk.models import (
    AccountEquity,
    ClosedTrade,
    DailyStat,
    RiskSnapshot,
    RiskStatus,
)


logger = logging.getLogger(__name__)

WARN_DRAWDOWN = 0.75
TILT_DRAWDOWN = 1.0

# Stop distance assumed for a historical trade with no recorded stop, as a
# fraction of its entry price.
IMPLIED_STOP_FRACTION = 0.005
# Stop distance assumed with no trade history, as a fraction of equity.
NO_HISTORY_STOP_FRACTION = 0.0005


def daily_pnl_for(daily_stats: Iterable[DailyStat], day: date) -> float:
    """Return the realized P&L recorded for ``day``, 0 if there is none."""
    for stat in daily_stats:
        if stat.date == day:
            return stat.daily_pnl
    return 0.0


class RiskSnapshotBuilder:
    """Aggregates equity, daily P&L and settings into a RiskSnapshot.

    There is no incremental update: callers rebuild the snapshot whenever
    equity, daily stats, settings or trade history change.
    """

    def build(
        self,
        equity: AccountEquity,
        todays_daily_pnl: float,
        settings: RiskSettings,
        closed_trades: Iterable[ClosedTrade] = (),
    ) -> RiskSnapshot:
        """Build the current risk snapshot.

        Status is evaluated in strict priority order: any ML/MDL breach or a
        fully consumed daily limit is tilt, 75% consumed is warn, otherwise
        safe.

        Args:
            equity: Account equity.
            todays_daily_pnl: Realized P&L for the current trading day.
            settings: The user's risk settings.
            closed_trades: Trade history used to recommend a stop distance.

        Returns:
            A freshly computed RiskSnapshot.
        """
        daily_pnl = todays_daily_pnl

        # The better of current and starting equity keeps today's losses from
        # tightening their own ceiling.
        limit_basis = max(equity.current_equity, equity.starting_capital)
        daily_limit = limit_basis * settings.daily_loss_limit_pct / 100
        drawdown_pct = abs(daily_pnl) / daily_limit if daily_limit > 0 else 0.0

        mdl_limit = equity.starting_capital * settings.mdl_percent / 100
        ml_limit = equity.starting_capital * settings.ml_percent / 100

        current_daily_loss = max(0.0, -daily_pnl)
        total_loss = max(0.0, equity.starting_capital - equity.current_equity)

        enforce = settings.enforce_prop_firm_limits
        exceeds_mdl = enforce and current_daily_loss >= mdl_limit
        exceeds_ml = enforce and total_loss >= ml_limit

        if exceeds_ml or exceeds_mdl or drawdown_pct >= TILT_DRAWDOWN:
            status = RiskStatus.TILT
        elif drawdown_pct >= WARN_DRAWDOWN:
            status = RiskStatus.WARN
        else:
            status = RiskStatus.SAFE

        breach_reason = None
        if status != RiskStatus.SAFE:
            breach_reason = self._breach_reason(
                status,
                exceeds_ml=exceeds_ml,
                exceeds_mdl=exceeds_mdl,
                total_loss=total_loss,
                ml_limit=ml_limit,
                current_daily_loss=current_daily_loss,
                mdl_limit=mdl_limit,
                settings=settings,
            )
            logger.info(f"Risk status {status.value}: {breach_reason or 'approaching daily limit'}")

        stop_distance = self._recommended_stop_distance(equity, closed_trades)
        risk_budget = equity.sizing_equity * settings.max_risk_per_trade_pct / 100
        recommended_size = max(0.0, risk_budget / stop_distance) if stop_distance > 0 else 0.0

        return RiskSnapshot(
            daily_pnl=daily_pnl,
            daily_limit=daily_limit,
            drawdown_pct=drawdown_pct,
            status=status,
            recommended_size=recommended_size,
            recommended_stop_distance=stop_distance,
            breach_reason=breach_reason,
            mdl_limit=mdl_limit,
            ml_limit=ml_limit,
            current_daily_loss=current_daily_loss,
            total_loss=total_loss,
            exceeds_mdl=exceeds_mdl,
            exceeds_ml=exceeds_ml,
            current_equity=equity.current_equity,
            starting_capital=equity.starting_capital,
        )

    def _breach_reason(
        self,
        status: RiskStatus,
        *,
        exceeds_ml: bool,
        exceeds_mdl: bool,
        total_loss: float,
        ml_limit: float,
        current_daily_loss: float,
        mdl_limit: float,
        settings: RiskSettings,
    ) -> str | None:
        """Explain a non-safe status. ML outranks MDL, which outranks the daily limit."""
        if exceeds_ml:
            return (
                f"Maximum Loss (ML) limit reached: ${total_loss:.2f} / ${ml_limit:.2f} "
                f"({settings.ml_percent:g}% of starting capital)"
            )
        if exceeds_mdl:
            return (
                f"Maximum Daily Loss (MDL) limit reached: ${current_daily_loss:.2f} / ${mdl_limit:.2f} "
                f"({settings.mdl_percent:g}% of starting capital)"
            )
        if status == RiskStatus.TILT:
            return "Daily loss limit hit"
        return None

    def _recommended_stop_distance(
        self,
        equity: AccountEquity,
        closed_trades: Iterable[ClosedTrade],
    ) -> float:
        """Average stop distance over closed trades, or a fraction of equity."""
        distances = [
            self._stop_distance(trade)
            for trade in closed_trades
            if trade.is_closed and trade.pnl is not None
        ]
        if not distances:
            return equity.sizing_equity * NO_HISTORY_STOP_FRACTION
        return sum(distances) / len(distances)

    @staticmethod
    def _stop_distance(trade: ClosedTrade) -> float:
        if trade.stop_loss is not None:
            return abs(trade.entry_price - trade.stop_loss)
        return abs(trade.entry_price * IMPLIED_STOP_FRACTION)
