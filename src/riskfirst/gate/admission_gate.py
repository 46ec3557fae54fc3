"""Trade admission gate: kill switch and per-trade risk enforcement."""

import logging
from datetime import datetime

from riskfirst.config.settings import RiskSettings
from riskfirst.gate.models import (
    GateCheckResult,
    KillSwitchState,
    TradeEnforcementRequest,
    TradeEnforcementResult,
)
from riskfirst.risk.models import RiskSnapshot, RiskStatus
from riskfirst.sizing.models import Side


logger = logging.getLogger(__name__)

DEFAULT_STOP_FRACTION = 0.01
NEAR_CEILING_DRAWDOWN = 0.9


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class AdmissionGate:
    """Decides whether a proposed trade is admitted, trimmed or blocked.

    The gate assumes sanitized numeric input (see
    ``riskfirst.gate.validation``) and a snapshot that is current as of the
    call. It owns no state and never raises for risk conditions.
    """

    def enforce(
        self,
        request: TradeEnforcementRequest,
        snapshot: RiskSnapshot,
        settings: RiskSettings,
        kill_switch: KillSwitchState | None = None,
        now: datetime | None = None,
    ) -> TradeEnforcementResult:
        """Evaluate a proposed trade against the account's risk state.

        All predicates are evaluated so that ``reasons`` lists every ceiling
        the trade runs into, ordered from account-ending to cosmetic.

        Args:
            request: The proposed trade.
            snapshot: Current risk snapshot for the account.
            settings: The user's risk settings.
            kill_switch: Optional kill switch state for the account.
            now: Moment used to evaluate a timed kill switch. When None, a
                timed switch is treated as engaged until released, so
                callers must pass the clock for a cooldown to expire.

        Returns:
            TradeEnforcementResult with the decision and its reasons.

        Raises:
            TypeError: If request is not a TradeEnforcementRequest.
        """
        if not isinstance(request, TradeEnforcementRequest):
            raise TypeError(
                f"Expected TradeEnforcementRequest, got {type(request).__name__}"
            )

        balance = self._resolve_balance(request, snapshot)
        risk_budget = balance * settings.max_risk_per_trade_pct / 100

        if request.stop_loss is not None:
            resolved_stop = request.stop_loss
        elif request.side == Side.LONG:
            resolved_stop = request.entry_price * (1 - DEFAULT_STOP_FRACTION)
        else:
            resolved_stop = request.entry_price * (1 + DEFAULT_STOP_FRACTION)

        stop_distance = abs(request.entry_price - resolved_stop)
        potential_loss = stop_distance * request.size * request.leverage

        if stop_distance > 0:
            trimmed_size = _clamp(
                risk_budget / (stop_distance * request.leverage), 0.0, request.size
            )
        else:
            trimmed_size = request.size

        checks = [
            self._check_kill_switch(kill_switch, now),
            self._check_max_loss(snapshot),
            self._check_max_daily_loss(snapshot),
            self._check_daily_limit(snapshot),
            self._check_near_ceiling(snapshot),
            self._check_leverage(request, settings),
        ]
        breaches_risk = potential_loss > risk_budget
        checks.append(
            GateCheckResult(
                name="per_trade_risk",
                passed=not breaches_risk,
                reason="Size trimmed to stay within per-trade risk" if breaches_risk else None,
                data={
                    "potential_loss": potential_loss,
                    "risk_budget": risk_budget,
                    "adjusted_size": trimmed_size,
                },
            )
        )

        # Every check except per-trade risk blocks; risk breaches only trim.
        blocked = any(not check.passed for check in checks[:-1])
        reasons = [check.reason for check in checks if check.reason]
        adjusted_size = trimmed_size if breaches_risk else request.size

        if blocked:
            logger.info(f"Trade blocked: {'; '.join(reasons)}")
        elif breaches_risk:
            logger.debug(
                f"Trade size trimmed from {request.size} to {adjusted_size} "
                f"(potential loss ${potential_loss:.2f} > budget ${risk_budget:.2f})"
            )

        return TradeEnforcementResult(
            blocked=blocked,
            reasons=reasons,
            adjusted_size=adjusted_size,
            enforced_stop=resolved_stop,
            potential_loss=potential_loss,
            risk_budget=risk_budget,
            checks=checks,
        )

    @staticmethod
    def _resolve_balance(request: TradeEnforcementRequest, snapshot: RiskSnapshot) -> float:
        # Same basis as the snapshot's recommended size: equity clamped at 0.
        if request.current_balance is not None:
            return request.current_balance
        return max(snapshot.current_equity, 0.0)

    def _check_kill_switch(
        self, kill_switch: KillSwitchState | None, now: datetime | None
    ) -> GateCheckResult:
        engaged = kill_switch is not None and kill_switch.is_engaged(now)
        reason = None
        data = {}
        if engaged:
            reason = f"Kill switch active: {kill_switch.reason or 'trading halted'}"
            data = {
                "triggered_by": kill_switch.triggered_by.value,
                "recovery_at": kill_switch.recovery_at,
            }
        return GateCheckResult(name="kill_switch", passed=not engaged, reason=reason, data=data)

    def _check_max_loss(self, snapshot: RiskSnapshot) -> GateCheckResult:
        reason = None
        if snapshot.exceeds_ml:
            reason = (
                f"Maximum Loss (ML) limit exceeded: "
                f"${snapshot.total_loss:.2f} / ${snapshot.ml_limit:.2f}"
            )
        return GateCheckResult(
            name="max_loss",
            passed=not snapshot.exceeds_ml,
            reason=reason,
            data={"total_loss": snapshot.total_loss, "ml_limit": snapshot.ml_limit},
        )

    def _check_max_daily_loss(self, snapshot: RiskSnapshot) -> GateCheckResult:
        reason = None
        if snapshot.exceeds_mdl:
            reason = (
                f"Maximum Daily Loss (MDL) limit exceeded: "
                f"${snapshot.current_daily_loss:.2f} / ${snapshot.mdl_limit:.2f}"
            )
        return GateCheckResult(
            name="max_daily_loss",
            passed=not snapshot.exceeds_mdl,
            reason=reason,
            data={
                "current_daily_loss": snapshot.current_daily_loss,
                "mdl_limit": snapshot.mdl_limit,
            },
        )

    def _check_daily_limit(self, snapshot: RiskSnapshot) -> GateCheckResult:
        tilted = snapshot.status == RiskStatus.TILT
        return GateCheckResult(
            name="daily_limit",
            passed=not tilted,
            reason="Daily loss limit exceeded" if tilted else None,
            data={"status": snapshot.status.value, "drawdown_pct": snapshot.drawdown_pct},
        )

    def _check_near_ceiling(self, snapshot: RiskSnapshot) -> GateCheckResult:
        near = snapshot.drawdown_pct >= NEAR_CEILING_DRAWDOWN
        reason = None
        # A tilted account already reports the daily limit.
        if near and snapshot.status != RiskStatus.TILT:
            reason = f"Approaching daily loss limit: {snapshot.drawdown_pct:.0%} used"
        return GateCheckResult(
            name="near_ceiling",
            passed=not near,
            reason=reason,
            data={"drawdown_pct": snapshot.drawdown_pct, "threshold": NEAR_CEILING_DRAWDOWN},
        )

    def _check_leverage(
        self, request: TradeEnforcementRequest, settings: RiskSettings
    ) -> GateCheckResult:
        exceeds = request.leverage > settings.max_leverage
        return GateCheckResult(
            name="leverage_cap",
            passed=not exceeds,
            reason=f"Leverage cap {settings.max_leverage:g}x" if exceeds else None,
            data={"leverage": request.leverage, "max_leverage": settings.max_leverage},
        )
