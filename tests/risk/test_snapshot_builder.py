"""Tests for RiskSnapshotBuilder class."""

from datetime import date

import pytest

from riskfirst.config.settings import RiskSettings
from riskfirst.risk.models import AccountEquity, ClosedTrade, DailyStat, RiskStatus
from riskfirst.risk.snapshot_builder import RiskSnapshotBuilder, daily_pnl_for


@pytest.fixture
def builder() -> RiskSnapshotBuilder:
    """Create a RiskSnapshotBuilder for testing."""
    return RiskSnapshotBuilder()


@pytest.fixture
def settings() -> RiskSettings:
    """Default risk settings."""
    return RiskSettings()


@pytest.fixture
def equity() -> AccountEquity:
    """A flat $10,000 account."""
    return AccountEquity(starting_capital=10_000.0, current_equity=10_000.0)


class TestDailyLimit:
    """Tests for the daily loss limit and drawdown."""

    def test_daily_limit_from_equity(self, builder, settings, equity):
        """3% of $10,000 is a $300 daily limit."""
        snapshot = builder.build(equity, -150.0, settings)

        assert snapshot.daily_limit == pytest.approx(300.0)
        assert snapshot.drawdown_pct == pytest.approx(0.5)
        assert snapshot.status == RiskStatus.SAFE
        assert snapshot.breach_reason is None

    def test_daily_limit_does_not_shrink_below_starting_capital(self, builder, settings):
        """Losses below starting capital do not tighten the daily limit."""
        equity = AccountEquity(starting_capital=10_000.0, current_equity=9_000.0)

        snapshot = builder.build(equity, 0.0, settings)

        assert snapshot.daily_limit == pytest.approx(300.0)

    def test_daily_limit_grows_with_profits(self, builder, settings):
        """Equity above starting capital raises the daily limit."""
        equity = AccountEquity(starting_capital=10_000.0, current_equity=20_000.0)

        snapshot = builder.build(equity, 0.0, settings)

        assert snapshot.daily_limit == pytest.approx(600.0)

    def test_zero_limit_means_zero_drawdown(self, builder, equity):
        """A 0% daily limit yields 0 drawdown instead of dividing by zero."""
        settings = RiskSettings(daily_loss_limit_pct=0)

        snapshot = builder.build(equity, -50.0, settings)

        assert snapshot.daily_limit == 0.0
        assert snapshot.drawdown_pct == 0.0


class TestStatus:
    """Tests for status evaluation."""

    def test_warn_at_75_percent(self, builder, settings, equity):
        """Consuming 75% of the daily limit is a warning."""
        snapshot = builder.build(equity, -225.0, settings)

        assert snapshot.status == RiskStatus.WARN
        assert snapshot.breach_reason is None

    def test_tilt_when_daily_limit_exceeded(self, builder, settings, equity):
        """A -$310 day on a $300 limit is tilt."""
        snapshot = builder.build(equity, -310.0, settings)

        assert snapshot.drawdown_pct > 1.0
        assert snapshot.status == RiskStatus.TILT
        assert snapshot.breach_reason == "Daily loss limit hit"

    def test_status_monotonic_in_loss(self, builder, settings, equity):
        """Severity never decreases as the daily loss grows."""
        severities = [
            builder.build(equity, -loss, settings).status.severity
            for loss in range(0, 1200, 10)
        ]

        assert severities == sorted(severities)
        assert severities[-1] == RiskStatus.TILT.severity

    def test_tilt_at_full_drawdown_without_prop_limits(self, builder, equity):
        """Full drawdown is tilt even with MDL/ML enforcement off."""
        settings = RiskSettings(enforce_prop_firm_limits=False)

        snapshot = builder.build(equity, -300.0, settings)

        assert snapshot.status == RiskStatus.TILT
        assert snapshot.exceeds_mdl is False
        assert snapshot.exceeds_ml is False


class TestPropFirmLimits:
    """Tests for MDL and ML ceilings."""

    def test_mdl_breach(self, builder, equity):
        """A $520 loss breaches a 5% MDL on $10,000."""
        settings = RiskSettings(daily_loss_limit_pct=10)

        snapshot = builder.build(equity, -520.0, settings)

        assert snapshot.mdl_limit == pytest.approx(500.0)
        assert snapshot.current_daily_loss == 520.0
        assert snapshot.exceeds_mdl is True
        assert snapshot.status == RiskStatus.TILT
        assert "$520.00 / $500.00" in snapshot.breach_reason
        assert snapshot.breach_reason.startswith("Maximum Daily Loss (MDL) limit reached")
        assert "(5% of starting capital)" in snapshot.breach_reason

    def test_ml_breach_dominates_mdl(self, builder):
        """When both ceilings are breached the reason names ML."""
        equity = AccountEquity(starting_capital=10_000.0, current_equity=8_500.0)

        snapshot = builder.build(equity, -600.0, RiskSettings())

        assert snapshot.exceeds_ml is True
        assert snapshot.exceeds_mdl is True
        assert "(ML)" in snapshot.breach_reason
        assert "MDL" not in snapshot.breach_reason
        assert "$1500.00 / $1000.00" in snapshot.breach_reason

    def test_ml_breach_on_quiet_day(self, builder):
        """ML is breached by cumulative loss even with no loss today."""
        equity = AccountEquity(starting_capital=10_000.0, current_equity=9_000.0)

        snapshot = builder.build(equity, 0.0, RiskSettings())

        assert snapshot.total_loss == 1000.0
        assert snapshot.exceeds_ml is True
        assert snapshot.status == RiskStatus.TILT

    def test_limits_not_enforced_when_disabled(self, builder):
        """Breaches are reported as false when enforcement is off."""
        equity = AccountEquity(starting_capital=10_000.0, current_equity=8_000.0)
        settings = RiskSettings(enforce_prop_firm_limits=False, daily_loss_limit_pct=50)

        snapshot = builder.build(equity, -600.0, settings)

        assert snapshot.exceeds_mdl is False
        assert snapshot.exceeds_ml is False
        assert snapshot.total_loss == 2000.0
        assert snapshot.status == RiskStatus.SAFE

    def test_profit_is_not_a_loss(self, builder, settings, equity):
        """A profitable day has no daily loss."""
        snapshot = builder.build(equity, 200.0, settings)

        assert snapshot.current_daily_loss == 0.0
        assert snapshot.total_loss == 0.0


class TestRecommendations:
    """Tests for recommended stop distance and size."""

    def test_no_history_uses_equity_fraction(self, builder, settings, equity):
        """Without history the stop distance is 0.05% of equity."""
        snapshot = builder.build(equity, 0.0, settings)

        assert snapshot.recommended_stop_distance == pytest.approx(5.0)
        assert snapshot.recommended_size == pytest.approx(20.0)

    def test_history_average_stop_distance(self, builder, settings, equity):
        """Recorded stops are averaged; missing stops use 0.5% of entry."""
        trades = [
            ClosedTrade(entry_price=100.0, stop_loss=96.0, pnl=10.0),
            ClosedTrade(entry_price=200.0, stop_loss=None, pnl=-5.0),
        ]

        snapshot = builder.build(equity, 0.0, settings, trades)

        assert snapshot.recommended_stop_distance == pytest.approx(2.5)
        assert snapshot.recommended_size == pytest.approx(40.0)

    def test_open_and_unbooked_trades_ignored(self, builder, settings, equity):
        """Only closed trades with a booked P&L count."""
        trades = [
            ClosedTrade(entry_price=100.0, stop_loss=90.0, is_closed=False, pnl=None),
            ClosedTrade(entry_price=100.0, stop_loss=80.0, is_closed=True, pnl=None),
        ]

        snapshot = builder.build(equity, 0.0, settings, trades)

        assert snapshot.recommended_stop_distance == pytest.approx(5.0)

    def test_negative_equity_recommends_nothing(self, builder, settings):
        """Negative equity is clamped to 0 for sizing."""
        equity = AccountEquity(starting_capital=10_000.0, current_equity=-50.0)

        snapshot = builder.build(equity, 0.0, settings)

        assert snapshot.recommended_stop_distance == 0.0
        assert snapshot.recommended_size == 0.0


class TestIdempotence:
    """Tests that building is free of hidden state."""

    def test_same_inputs_same_snapshot(self, builder, settings, equity):
        """Two builds with identical inputs are identical."""
        trades = [ClosedTrade(entry_price=101.3, stop_loss=99.9, pnl=3.0)]

        first = builder.build(equity, -123.45, settings, trades)
        second = builder.build(equity, -123.45, settings, trades)

        assert first == second


class TestDailyPnlFor:
    """Tests for daily_pnl_for."""

    def test_reads_matching_day(self):
        """Returns the P&L recorded for the requested day."""
        stats = [
            DailyStat(date=date(2026, 3, 2), daily_pnl=40.0),
            DailyStat(date=date(2026, 3, 3), daily_pnl=-75.0),
        ]

        assert daily_pnl_for(stats, date(2026, 3, 3)) == -75.0

    def test_missing_day_is_zero(self):
        """No entry for the day means no P&L."""
        stats = [DailyStat(date=date(2026, 3, 2), daily_pnl=40.0)]

        assert daily_pnl_for(stats, date(2026, 3, 4)) == 0.0
