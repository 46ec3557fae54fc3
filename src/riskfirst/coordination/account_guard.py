"""Serializes snapshot, enforcement and commit per account.

Two trades enforced against the same stale snapshot can each pass while
together breaching the daily or MDL ceiling. AccountGuard runs "load state,
build snapshot, enforce, commit" under one lock per account so every
decision sees the effect of the previous one.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from riskfirst.coordination.models import AccountState, AdmissionOutcome
from riskfirst.gate.admission_gate import AdmissionGate
from riskfirst.gate.models import TradeEnforcementRequest, TradeEnforcementResult
from riskfirst.risk.snapshot_builder import RiskSnapshotBuilder


logger = logging.getLogger(__name__)

StateLoader = Callable[[], Awaitable[AccountState]]
Committer = Callable[[TradeEnforcementResult], Awaitable[None]]


class AccountGuard:
    """Per-account critical section around trade admission.

    Accounts are independent: admissions for different accounts run
    concurrently, admissions for the same account run one at a time.
    """

    def __init__(
        self,
        snapshot_builder: RiskSnapshotBuilder | None = None,
        gate: AdmissionGate | None = None,
    ) -> None:
        self._builder = snapshot_builder or RiskSnapshotBuilder()
        self._gate = gate or AdmissionGate()
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @property
    def tracked_accounts(self) -> int:
        """Number of accounts whose lock is currently held or awaited."""
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, account_id: str) -> AsyncIterator[None]:
        """Hold the lock guarding ``account_id``.

        The lock is created on first use and dropped once nobody holds or
        awaits it.
        """
        lock = self._locks.get(account_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[account_id] = lock
        self._holders[account_id] = self._holders.get(account_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[account_id] -= 1
            if self._holders[account_id] == 0:
                del self._holders[account_id]
                del self._locks[account_id]

    async def admit(
        self,
        account_id: str,
        request: TradeEnforcementRequest,
        load_state: StateLoader,
        commit: Committer,
        now: datetime | None = None,
    ) -> AdmissionOutcome:
        """Run a proposed trade through admission inside the account's lock.

        ``load_state`` is awaited inside the lock, so it must read the
        account's latest committed figures. ``commit`` is awaited only for
        admitted trades and must record the trade's effect before returning;
        errors it raises propagate to the caller.

        Args:
            account_id: Account the trade belongs to.
            request: The proposed trade.
            load_state: Async callable returning the account's current state.
            commit: Async callable that submits and records an admitted trade.
            now: Moment used to evaluate a timed kill switch.

        Returns:
            AdmissionOutcome with the snapshot, the decision and whether the
            trade was committed.
        """
        async with self.hold(account_id):
            state = await load_state()
            snapshot = self._builder.build(
                state.equity,
                state.todays_daily_pnl,
                state.settings,
                state.closed_trades,
            )
            result = self._gate.enforce(
                request,
                snapshot,
                state.settings,
                kill_switch=state.kill_switch,
                now=now,
            )

            if result.blocked:
                logger.info(f"Admission refused for account {account_id}")
                return AdmissionOutcome(
                    account_id=account_id,
                    snapshot=snapshot,
                    result=result,
                    committed=False,
                )

            try:
                await commit(result)
            except Exception as e:
                logger.error(f"Commit failed for account {account_id}: {e}")
                raise

            return AdmissionOutcome(
                account_id=account_id,
                snapshot=snapshot,
                result=result,
                committed=True,
            )
