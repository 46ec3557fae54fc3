"""Data models for the trade admission gate."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from riskfirst.sizing.models import Side


class KillSwitchTrigger(str, Enum):
    """Who engaged the kill switch."""

    USER = "user"
    SYSTEM = "system"
    RISK_MANAGEMENT = "risk_management"


@dataclass(frozen=True)
class KillSwitchState:
    """Manual or automatic trading halt for an account.

    Attributes:
        is_active: Whether the switch has been engaged.
        reason: Why it was engaged.
        triggered_by: Who engaged it.
        triggered_at: When it was engaged.
        recovery_at: When trading may resume, None to stay halted until released.
        total_activations: How many times it has been engaged.
    """

    is_active: bool = False
    reason: str | None = None
    triggered_by: KillSwitchTrigger = KillSwitchTrigger.USER
    triggered_at: datetime | None = None
    recovery_at: datetime | None = None
    total_activations: int = 0

    def is_engaged(self, now: datetime | None = None) -> bool:
        """Return True if the switch currently halts trading.

        Args:
            now: The moment to evaluate at. Without it a timed switch is
                treated as still engaged.
        """
        if not self.is_active:
            return False
        if self.recovery_at is None or now is None:
            return True
        return now < self.recovery_at

    def engage(
        self,
        reason: str,
        triggered_by: KillSwitchTrigger,
        at: datetime,
        recovery_at: datetime | None = None,
    ) -> "KillSwitchState":
        """Return a new state with the switch engaged."""
        return KillSwitchState(
            is_active=True,
            reason=reason,
            triggered_by=triggered_by,
            triggered_at=at,
            recovery_at=recovery_at,
            total_activations=self.total_activations + 1,
        )

    def release(self) -> "KillSwitchState":
        """Return a new state with the switch released."""
        return replace(self, is_active=False, recovery_at=None)


@dataclass(frozen=True)
class TradeEnforcementRequest:
    """A proposed trade awaiting admission.

    Attributes:
        side: Long or Short.
        entry_price: Intended entry price.
        size: Proposed size in units.
        stop_loss: Stop price, None to use a 1% default stop.
        leverage: Leverage multiplier.
        current_balance: Balance to budget risk against, None to use equity.
    """

    side: Side
    entry_price: float
    size: float
    stop_loss: float | None = None
    leverage: float = 1.0
    current_balance: float | None = None


@dataclass(frozen=True)
class GateCheckResult:
    """Result of a single admission predicate.

    Attributes:
        name: Check identifier (e.g., "max_loss", "leverage_cap").
        passed: Whether the check passed.
        reason: Explanation if the check failed, None if passed.
        data: Observed values used in the check.
    """

    name: str
    passed: bool
    reason: str | None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TradeEnforcementResult:
    """Admission decision for a proposed trade.

    When ``blocked`` is True the trade must not be submitted, whatever
    ``adjusted_size`` says; otherwise ``adjusted_size`` is the size to submit.

    Attributes:
        blocked: Whether the trade is refused.
        reasons: Every applicable reason, most severe first.
        adjusted_size: Size after risk trimming, never above the request.
        enforced_stop: The stop the decision was computed with.
        potential_loss: Loss if the stop is hit at the requested size.
        risk_budget: Per-trade fiat risk budget.
        checks: Individual predicate results, in evaluation order.
    """

    blocked: bool
    reasons: list[str]
    adjusted_size: float
    enforced_stop: float
    potential_loss: float
    risk_budget: float = 0.0
    checks: list[GateCheckResult] = field(default_factory=list)

    def get_failed_checks(self) -> list[GateCheckResult]:
        """Return checks that did not pass."""
        return [check for check in self.checks if not check.passed]
