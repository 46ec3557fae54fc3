"""Serialized per-account trade admission."""

from .account_guard import AccountGuard
from .models import AccountState, AdmissionOutcome

__all__ = ["AccountGuard", "AccountState", "AdmissionOutcome"]
