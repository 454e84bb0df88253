"""
executor.py - Two-Phase Schedule/Settle Executor

The Executor is the only object that mutates committed balances. Callers
schedule transactions one at a time and periodically settle the whole batch.

Key responsibilities:
    - Admission: proves address operations and all clawbacks safe against
      committed state before enqueueing them; admits object deposits,
      withdraws and curses without a check
    - Settlement: drains the queue in scheduling order, resolves deferred
      object checks, and commits the next state atomically
    - Never commits a partially settled batch
"""

from __future__ import annotations
from typing import List, Optional, Tuple

from .core import (
    # Types
    Balance, Effects, State, Transaction, TransactionTarget,
    ScheduleResult,
    # Exceptions
    LedgerError, BalanceConstraintViolation,
    # Functions
    check_limit,
)


class Executor:
    """
    Schedules and settles transactions against an address and an object balance.

    Admission tiers:
        - Address transactions of any kind, and clawbacks on either target, are
          checked against the committed balance when scheduled.
        - Object deposits, withdraws and curses are admitted unconditionally
          and checked at settlement. A failed check clears them to zero.

    Thread Safety:
        Not thread-safe. Each thread should maintain its own Executor instance.

    Example:
        executor = Executor("main")
        executor.schedule(Transaction.address_deposit(100))
        executor.settle()
        executor.schedule(Transaction.address_withdraw(100))   # ADMITTED
        results = executor.settle()
    """

    def __init__(
        self,
        name: str = "executor",
        initial_state: Optional[State] = None,
        verbose: bool = False,
        test_mode: bool = False
    ):
        """
        Create an executor.

        Args:
            name: Executor identifier (used in verbose output)
            initial_state: Committed state to start from (default: both balances empty)
            verbose: Print admission and settlement outcomes (default: False)
            test_mode: Enable test mode to allow set_balance() calls (default: False)
        """
        if initial_state is not None and not isinstance(initial_state, State):
            raise TypeError(f"initial_state must be State, got {type(initial_state)}")
        self.name = name
        self._state: State = initial_state or State()
        self._scheduled: List[Transaction] = []
        self.verbose = verbose
        self._test_mode = test_mode

    # ========================================================================
    # READ-ONLY ACCESS
    # ========================================================================

    @property
    def state(self) -> State:
        """Committed state as of the last settlement."""
        return self._state

    @property
    def pending(self) -> Tuple[Transaction, ...]:
        """Transactions admitted since the last settlement, in scheduling order."""
        return tuple(self._scheduled)

    def pending_count(self) -> int:
        return len(self._scheduled)

    def get_balance(self, target: TransactionTarget) -> Balance:
        """Return the committed balance of the given target."""
        return self._state.balance_for(target)

    # ========================================================================
    # TEST SUPPORT (Mutating)
    # ========================================================================

    def set_balance(self, target: TransactionTarget, balance: Balance) -> None:
        """
        Overwrite a committed balance directly.

        WARNING: This bypasses admission and settlement, and can invalidate the
        proofs of transactions already scheduled. It is only available in test
        mode. For production use, use schedule() and settle() instead.

        Raises:
            LedgerError: If called when test_mode is False
        """
        if not self._test_mode:
            raise LedgerError(
                "set_balance() is disabled in production mode. "
                "Use schedule() and settle() to modify balances. "
                "Set test_mode=True when creating Executor for testing."
            )
        if not isinstance(balance, Balance):
            raise TypeError(f"balance must be Balance, got {type(balance)}")
        self._state = self._state.replace_balance(target, balance)

    # ========================================================================
    # ADMISSION (Mutating)
    # ========================================================================

    def schedule(self, transaction: Transaction) -> ScheduleResult:
        """
        Attempt to admit a transaction into the pending batch.

        Checkpoint by (target, is_clawback):
        - ADDRESS, any kind: checked against the committed address balance
        - OBJECT, not a clawback: admitted without a check (checked at settlement)
        - OBJECT clawback: checked against the committed object balance

        Clawbacks are unordered with respect to each other and to withdraws
        drawing on the same cursed capacity, so they must be proven at
        admission even on the object side.

        Args:
            transaction: Transaction to admit

        Returns:
            ScheduleResult.ADMITTED if the transaction was enqueued
            ScheduleResult.REJECTED if it failed its admission check
        """
        if not isinstance(transaction, Transaction):
            raise TypeError(f"schedule() expects Transaction, got {type(transaction)}")

        needs_proof = (
            transaction.target is TransactionTarget.ADDRESS
            or transaction.is_clawback()
        )
        if needs_proof:
            committed = self._state.balance_for(transaction.target)
            if not check_limit(committed, transaction):
                if self.verbose:
                    print(f"✗ REJECTED: {transaction!r} exceeds limit of {committed!r}")
                return ScheduleResult.REJECTED

        self._scheduled.append(transaction)
        return ScheduleResult.ADMITTED

    # ========================================================================
    # SETTLEMENT (Mutating)
    # ========================================================================

    def settle(self) -> List[Tuple[Transaction, Effects]]:
        """
        Settle every scheduled transaction atomically.

        Transactions are applied to a working next state in scheduling order.
        Deferred object checks use the state committed when this call began.
        Once the whole batch is processed the next state is committed and the
        queue is emptied.

        Returns:
            One (transaction, effects) pair per scheduled transaction, in
            scheduling order. A transaction that cleared to zero has Effects().

        Raises:
            BalanceConstraintViolation: If a proven delta would drive a balance
                negative. Nothing is committed and the queue is left intact.
        """
        snapshot = self._state
        next_state = snapshot
        results: List[Tuple[Transaction, Effects]] = []

        for tx in self._scheduled:
            try:
                next_state, effects = self._settle_one(tx, snapshot, next_state)
            except BalanceConstraintViolation:
                if self.verbose:
                    print(f"✗ ABORTED: {tx!r} violates balance invariant, nothing committed")
                raise
            results.append((tx, effects))
            if self.verbose:
                status = "CLEARED" if effects.is_zero() else "APPLIED"
                print(f"✓ {status}: {tx!r} -> {effects.delta_for(tx.target)!r}")

        self._state = next_state
        self._scheduled.clear()
        if self.verbose:
            print(f"✓ SETTLED {len(results)} transaction(s) on {self.name}: "
                  f"address={next_state.address_state!r} object={next_state.object_state!r}")
        return results

    @staticmethod
    def _settle_one(
        tx: Transaction,
        snapshot: State,
        next_state: State
    ) -> Tuple[State, Effects]:
        """
        Settle a single transaction.

        Args:
            tx: Transaction to settle
            snapshot: Committed state at the start of settlement (checked, never applied to)
            next_state: Working state accumulated so far in this batch

        Returns:
            (next_state, effects) after this transaction
        """
        # Address transactions and all clawbacks were proven at schedule time.
        if tx.target is TransactionTarget.ADDRESS or tx.is_clawback():
            return next_state.apply(tx)

        # Object deposits, withdraws and curses must fit the snapshot and must
        # not overdraw what earlier items in this batch left behind.
        fits = (
            check_limit(snapshot.object_state, tx)
            and check_limit(next_state.object_state, tx)
        )
        if not fits:
            return next_state, Effects()
        return next_state.apply(tx)

    # ========================================================================
    # COPYING
    # ========================================================================

    def clone(self) -> Executor:
        """
        Create an independent copy of this executor.

        The clone shares no mutable data with the original: settling the clone
        leaves the original's state and queue untouched. Useful for previewing
        the outcome of a settlement.

        Returns:
            A new Executor with identical state, queue and configuration
        """
        cloned = Executor.__new__(Executor)
        cloned.name = self.name
        cloned._state = self._state
        cloned._scheduled = list(self._scheduled)
        cloned.verbose = self.verbose
        cloned._test_mode = self._test_mode
        return cloned

    def __repr__(self) -> str:
        return (f"Executor({self.name!r}, address={self._state.address_state!r}, "
                f"object={self._state.object_state!r}, pending={len(self._scheduled)})")
