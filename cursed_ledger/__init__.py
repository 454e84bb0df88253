"""
cursed_ledger - Two-Phase Executor for Cursed Balances

Admission and settlement of deposits, withdraws, curses and clawbacks against
an address balance and an object balance.

Usage:
    from cursed_ledger import Executor, Transaction, ScheduleResult

    executor = Executor("main")
    executor.schedule(Transaction.object_deposit(100))
    executor.settle()

    # Object withdraws are admitted optimistically and checked at settlement
    assert executor.schedule(Transaction.object_withdraw(60)) == ScheduleResult.ADMITTED
    for tx, effects in executor.settle():
        print(tx, effects.object_delta)
"""

# Core types
from .core import (
    TransactionTarget,
    ScheduleResult,
    LedgerError,
    BalanceConstraintViolation,
    BalanceDelta,
    Balance,
    Deposit,
    Withdraw,
    Curse,
    Clawback,
    TransactionKind,
    Transaction,
    Effects,
    State,
    into_delta,
    check_limit,
    apply_delta,
    sum_effects,
    MAX_AMOUNT,
    ZERO_DELTA,
)

# Executor
from .executor import Executor

__all__ = [
    # Core
    'TransactionTarget', 'ScheduleResult',
    'LedgerError', 'BalanceConstraintViolation',
    'BalanceDelta', 'Balance',
    'Deposit', 'Withdraw', 'Curse', 'Clawback', 'TransactionKind',
    'Transaction', 'Effects', 'State',
    'into_delta', 'check_limit', 'apply_delta', 'sum_effects',
    'MAX_AMOUNT', 'ZERO_DELTA',
    # Executor
    'Executor',
]

__version__ = '0.1.0'
