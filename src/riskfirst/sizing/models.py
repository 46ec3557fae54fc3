"""Data models for risk-first position sizing."""

from dataclasses import dataclass, field
from enum import Enum


class Side(str, Enum):
    """Direction of a position."""

    LONG = "Long"
    SHORT = "Short"


class MarginMode(str, Enum):
    """How margin is allocated for a position."""

    ISOLATED = "isolated"
    CROSS = "cross"


@dataclass(frozen=True)
class PositionSizeRequest:
    """Inputs for sizing a position from a fiat risk amount.

    Attributes:
        risk_amount: Fiat amount the trader is willing to lose on the trade.
        entry_price: Price at which the position will be opened.
        stop_loss_price: Price at which the position is closed at a loss.
        point_value: Fiat value of a one-point move per unit (1 for crypto).
        leverage: Leverage multiplier, 1 for an unleveraged position.
        margin_mode: Isolated or cross margin.
        account_balance: Optional balance used to express the risk as a percentage.
    """

    risk_amount: float
    entry_price: float
    stop_loss_price: float
    point_value: float = 1.0
    leverage: float = 1.0
    margin_mode: MarginMode = MarginMode.ISOLATED
    account_balance: float | None = None


@dataclass(frozen=True)
class PositionSizeResult:
    """Result of sizing a position.

    Attributes:
        position_size: Units to trade (0 when the request is invalid).
        order_value: Notional value of the position.
        margin_required: Margin needed to open the position.
        liquidation_price: Estimated liquidation price, None when invalid.
        is_valid: Whether the request passed validation.
        errors: Every validation error found in the request.
        risk_amount: Fiat risk confirmed for the position.
        stop_distance: Absolute distance between entry and stop.
        risk_percent: Risk as a percentage of the account balance, 0 if unknown.
    """

    position_size: float
    order_value: float
    margin_required: float
    liquidation_price: float | None
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    risk_amount: float = 0.0
    stop_distance: float = 0.0
    risk_percent: float = 0.0
    direction: Side | None = None


@dataclass(frozen=True)
class BalanceCheckedSize:
    """A sizing result checked against the margin available on the account.

    Attributes:
        sizing: The underlying position size result.
        available_balance: Balance available for margin.
        can_open: Whether the account can fund the position's margin.
        is_valid: True only when the position can open with no errors.
        errors: Sizing errors plus any balance or buffer errors.
    """

    sizing: PositionSizeResult
    available_balance: float
    can_open: bool
    is_valid: bool
    errors: list[str] = field(default_factory=list)
