"""Risk-first position sizer.

Position size is derived from a fiat risk amount and the distance to the stop:

    position_size = risk_amount / (|entry - stop| * point_value)
    order_value = position_size * entry
    margin_required = order_value / leverage

Liquidation is estimated as ``entry * (1 -/+ 0.95 / leverage)`` for longs and
shorts respectively. The 0.95 factor approximates maintenance margin eating
into roughly 95% of the nominal leverage capacity; it is a conservative
estimate and does not match any exchange's exact liquidation engine.
"""

import logging

from riskfirst.sizing.models import (
    BalanceCheckedSize,
    MarginMode,
    PositionSizeRequest,
    PositionSizeResult,
    Side,
)


logger = logging.getLogger(__name__)

LIQUIDATION_MAINTENANCE_FACTOR = 0.95
CROSS_MARGIN_BUFFER = 1.1


class PositionSizer:
    """Converts fiat risk into an executable order size.

    Stateless: the same request always produces an identical result.
    """

    def size(self, request: PositionSizeRequest) -> PositionSizeResult:
        """Size a position from a fiat risk amount.

        Every validation rule is checked before any arithmetic, and all
        violations are reported together.

        Args:
            request: The sizing inputs.

        Returns:
            PositionSizeResult. Invalid requests yield ``is_valid=False``,
            zeroed figures, no liquidation price and the list of errors.

        Raises:
            TypeError: If request is not a PositionSizeRequest.
        """
        if not isinstance(request, PositionSizeRequest):
            raise TypeError(
                f"Expected PositionSizeRequest, got {type(request).__name__}"
            )

        errors = self._validate(request)
        if errors:
            logger.warning(f"Rejected sizing request: {'; '.join(errors)}")
            return PositionSizeResult(
                position_size=0.0,
                order_value=0.0,
                margin_required=0.0,
                liquidation_price=None,
                is_valid=False,
                errors=errors,
                risk_amount=request.risk_amount,
            )

        stop_distance = abs(request.entry_price - request.stop_loss_price)
        position_size = request.risk_amount / (stop_distance * request.point_value)
        order_value = position_size * request.entry_price

        # Cross margin uses the same figure; its extra buffer is checked in
        # size_for_balance.
        margin_required = order_value / request.leverage

        # A stop sits on the loss side of entry.
        direction = Side.LONG if request.entry_price > request.stop_loss_price else Side.SHORT
        liquidation_price = self.estimate_liquidation_price(
            request.entry_price, request.leverage, direction
        )

        risk_percent = 0.0
        if request.account_balance is not None and request.account_balance > 0:
            risk_percent = request.risk_amount / request.account_balance * 100

        return PositionSizeResult(
            position_size=position_size,
            order_value=order_value,
            margin_required=margin_required,
            liquidation_price=liquidation_price,
            is_valid=True,
            errors=[],
            risk_amount=request.risk_amount,
            stop_distance=stop_distance,
            risk_percent=risk_percent,
            direction=direction,
        )

    def size_for_balance(
        self,
        request: PositionSizeRequest,
        available_balance: float,
    ) -> BalanceCheckedSize:
        """Size a position and check it against the available balance.

        Cross margin shares collateral with existing positions, so it must
        leave a 10% buffer above the margin the new position needs.

        Args:
            request: The sizing inputs.
            available_balance: Balance available to fund margin.

        Returns:
            BalanceCheckedSize with the sizing result and balance verdict.
        """
        sizing = self.size(request)
        errors = list(sizing.errors)
        can_open = sizing.is_valid

        if sizing.margin_required > available_balance:
            can_open = False
            errors.append(
                f"Insufficient balance. Required: ${sizing.margin_required:.2f}, "
                f"Available: ${available_balance:.2f}"
            )

        if (
            request.margin_mode == MarginMode.CROSS
            and available_balance < sizing.margin_required * CROSS_MARGIN_BUFFER
        ):
            errors.append("Cross-margin requires additional buffer for existing positions")

        return BalanceCheckedSize(
            sizing=sizing,
            available_balance=available_balance,
            can_open=can_open,
            is_valid=can_open and not errors,
            errors=errors,
        )

    @staticmethod
    def estimate_liquidation_price(entry_price: float, leverage: float, direction: Side) -> float:
        """Estimate where a leveraged position would be liquidated."""
        offset = LIQUIDATION_MAINTENANCE_FACTOR / leverage
        if direction == Side.LONG:
            return entry_price * (1 - offset)
        return entry_price * (1 + offset)

    def _validate(self, request: PositionSizeRequest) -> list[str]:
        errors = []
        if request.risk_amount <= 0:
            errors.append("Risk amount must be greater than 0")
        if request.entry_price <= 0:
            errors.append("Entry price must be greater than 0")
        if request.stop_loss_price <= 0:
            errors.append("Stop loss price must be greater than 0")
        if request.point_value <= 0:
            errors.append("Point value must be greater than 0")
        if request.leverage < 1:
            errors.append("Leverage must be at least 1x")
        if request.entry_price == request.stop_loss_price:
            errors.append("Entry price and stop loss price cannot be equal")
        return errors
