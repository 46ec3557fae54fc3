"""Trade admission gate: kill switch and risk enforcement."""

from .admission_gate import AdmissionGate
from .models import (
    GateCheckResult,
    KillSwitchState,
    KillSwitchTrigger,
    TradeEnforcementRequest,
    TradeEnforcementResult,
)
from .validation import (
    RequestParseOutcome,
    parse_enforcement_request,
    parse_position_size_request,
)

__all__ = [
    "AdmissionGate",
    "GateCheckResult",
    "KillSwitchState",
    "KillSwitchTrigger",
    "RequestParseOutcome",
    "TradeEnforcementRequest",
    "TradeEnforcementResult",
    "parse_enforcement_request",
    "parse_position_size_request",
]
