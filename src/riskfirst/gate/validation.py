"""Validation boundary for raw numeric input from forms and routes.

The sizer and the gate assume clean numbers. These factories turn loosely
typed mappings into request objects, or into a list of errors, so that NaN,
infinities and negative values never reach the formulas.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from riskfirst.gate.models import TradeEnforcementRequest
from riskfirst.sizing.models import MarginMode, PositionSizeRequest, Side


RequestT = TypeVar("RequestT")


@dataclass(frozen=True)
class RequestParseOutcome(Generic[RequestT]):
    """Either a validated request or the errors that prevented it."""

    request: RequestT | None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.request is not None


class _RawInput(BaseModel):
    model_config = ConfigDict(
        allow_inf_nan=False,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class _EnforcementInput(_RawInput):
    side: Side
    entry_price: float = Field(gt=0)
    size: float = Field(gt=0)
    stop_loss: float | None = Field(default=None, gt=0)
    leverage: float = Field(default=1.0, ge=1)
    current_balance: float | None = Field(default=None, ge=0)


class _PositionSizeInput(_RawInput):
    # Range checks are left to the sizer, which reports them all at once.
    risk_amount: float
    entry_price: float
    stop_loss_price: float
    point_value: float = 1.0
    leverage: float = 1.0
    margin_mode: MarginMode = MarginMode.ISOLATED
    account_balance: float | None = None


def _format_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]


def parse_enforcement_request(
    raw: Mapping[str, Any],
) -> RequestParseOutcome[TradeEnforcementRequest]:
    """Build a TradeEnforcementRequest from raw input.

    Args:
        raw: Field values keyed by snake_case or camelCase names.

    Returns:
        RequestParseOutcome holding the request, or the validation errors.
    """
    try:
        parsed = _EnforcementInput.model_validate(dict(raw))
    except ValidationError as e:
        return RequestParseOutcome(request=None, errors=_format_errors(e))

    return RequestParseOutcome(
        request=TradeEnforcementRequest(**parsed.model_dump()),
    )


def parse_position_size_request(
    raw: Mapping[str, Any],
) -> RequestParseOutcome[PositionSizeRequest]:
    """Build a PositionSizeRequest from raw input.

    Only type and finiteness are checked here; value ranges are reported by
    the sizer itself.

    Args:
        raw: Field values keyed by snake_case or camelCase names.

    Returns:
        RequestParseOutcome holding the request, or the validation errors.
    """
    try:
        parsed = _PositionSizeInput.model_validate(dict(raw))
    except ValidationError as e:
        return RequestParseOutcome(request=None, errors=_format_errors(e))

    return RequestParseOutcome(
        request=PositionSizeRequest(**parsed.model_dump()),
    )
