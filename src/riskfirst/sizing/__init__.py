"""Risk-first position sizing."""

from .models import (
    BalanceCheckedSize,
    MarginMode,
    PositionSizeRequest,
    PositionSizeResult,
    Side,
)
from .position_sizer import LIQUIDATION_MAINTENANCE_FACTOR, PositionSizer

__all__ = [
    "BalanceCheckedSize",
    "LIQUIDATION_MAINTENANCE_FACTOR",
    "MarginMode",
    "PositionSizeRequest",
    "PositionSizeResult",
    "PositionSizer",
    "Side",
]
