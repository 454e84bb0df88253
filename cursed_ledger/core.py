"""
Core types and pure functions for the cursed-balance executor.

This module provides the foundational data structures for scheduling and settling:
1. Enums: TransactionTarget, ScheduleResult
2. Exceptions: LedgerError and the fatal BalanceConstraintViolation
3. Immutable value types: BalanceDelta, Balance, Effects, State
4. Transaction kinds: Deposit, Withdraw, Curse, Clawback (a closed sum type)
5. Pure functions: into_delta, check_limit, apply_delta, sum_effects

All functions in this module are pure. Every value type is frozen; applying a
delta returns a new Balance rather than mutating the old one.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Tuple, Union


# ============================================================================
# CONSTANTS
# ============================================================================

# Largest amount a transaction may carry. Deltas are signed, so an amount must
# fit in a signed 64-bit integer once negated.
MAX_AMOUNT = 2**63 - 1


# ============================================================================
# ENUMS
# ============================================================================

class TransactionTarget(Enum):
    """
    Which of the two balance entries a transaction operates on.

    ADDRESS: Sequenced account. Every operation is proven at schedule time.
    OBJECT:  Optimistic account. Non-clawback operations are checked at settlement.
    """
    ADDRESS = "address"
    OBJECT = "object"


class ScheduleResult(Enum):
    """
    Outcome of a schedule attempt.

    ADMITTED: Transaction was enqueued and will appear in the next settlement.
    REJECTED: Transaction failed its admission check and was dropped.
    """
    ADMITTED = "admitted"
    REJECTED = "rejected"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all executor errors."""
    pass


class BalanceConstraintViolation(LedgerError):
    """
    Raised when applying a delta would drive a balance field below zero.

    This is a broken admission proof, not a business outcome. It is never
    raised for a batch that only contains transactions admitted under the
    documented contract, and callers must not retry after seeing it.
    """
    pass


# ============================================================================
# BALANCES
# ============================================================================

@dataclass(frozen=True, slots=True)
class BalanceDelta:
    """
    Signed change to a Balance.

    Attributes:
        d_balance: Change to the underlying balance.
        d_cursed: Change to the cursed (frozen) amount.
    """
    d_balance: int = 0
    d_cursed: int = 0

    def is_zero(self) -> bool:
        return self.d_balance == 0 and self.d_cursed == 0

    def __add__(self, other: BalanceDelta) -> BalanceDelta:
        if not isinstance(other, BalanceDelta):
            return NotImplemented
        return BalanceDelta(self.d_balance + other.d_balance, self.d_cursed + other.d_cursed)

    def __repr__(self) -> str:
        return f"BalanceDelta({self.d_balance:+d}, {self.d_cursed:+d})"


ZERO_DELTA = BalanceDelta(0, 0)


@dataclass(frozen=True, slots=True)
class Balance:
    """
    Committed quantities of one account.

    Attributes:
        balance: Total funds held. Never negative.
        cursed: Frozen amount. Never negative, and may exceed balance when an
                issuer curses an account pre-emptively.

    This class is immutable (frozen=True) and memory-optimized (slots=True).
    All fields are validated in __post_init__.
    """
    balance: int = 0
    cursed: int = 0

    def __post_init__(self):
        for name in ("balance", "cursed"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Balance {name} must be int, got {type(value)}")
            if value < 0:
                raise ValueError(f"Balance {name} cannot be negative, got {value}")

    @property
    def spendable(self) -> int:
        """Funds not currently frozen (zero when the account is over-cursed)."""
        return max(self.balance - self.cursed, 0)

    @property
    def clawback_limit(self) -> int:
        """Largest amount an issuer may reclaim: bounded by both funds and curse."""
        return min(self.balance, self.cursed)

    def check_limit(self, transaction: Transaction) -> bool:
        return check_limit(self, transaction)

    def apply_delta(self, delta: BalanceDelta) -> Balance:
        return apply_delta(self, delta)

    def __repr__(self) -> str:
        return f"Balance({self.balance}, cursed={self.cursed})"


# ============================================================================
# TRANSACTION KINDS
# ============================================================================

def _validate_amount(kind_name: str, amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{kind_name} amount must be int, got {type(amount)}")
    if amount < 0:
        raise ValueError(f"{kind_name} amount cannot be negative, got {amount}")
    if amount > MAX_AMOUNT:
        raise ValueError(f"{kind_name} amount {amount} exceeds MAX_AMOUNT")


@dataclass(frozen=True, slots=True)
class Deposit:
    """Credit funds to the target. Always admissible."""
    amount: int

    def __post_init__(self):
        _validate_amount("Deposit", self.amount)


@dataclass(frozen=True, slots=True)
class Withdraw:
    """Debit funds from the target. Limited to funds that are not cursed."""
    amount: int

    def __post_init__(self):
        _validate_amount("Withdraw", self.amount)


@dataclass(frozen=True, slots=True)
class Curse:
    """Freeze part of the target's funds without moving them. Always admissible."""
    amount: int

    def __post_init__(self):
        _validate_amount("Curse", self.amount)


@dataclass(frozen=True, slots=True)
class Clawback:
    """
    Issuer reclaim of cursed funds.

    Removes the amount from both the balance and the cursed amount. Taking it
    only from the curse would destroy user funds while leaving them frozen;
    taking it only from the balance would leave the account cursed forever.
    """
    amount: int

    def __post_init__(self):
        _validate_amount("Clawback", self.amount)


TransactionKind = Union[Deposit, Withdraw, Curse, Clawback]

_KIND_TYPES = (Deposit, Withdraw, Curse, Clawback)


# ============================================================================
# TRANSACTION
# ============================================================================

@dataclass(frozen=True, slots=True)
class Transaction:
    """
    An immutable request to change one of the two balances.

    Attributes:
        kind: Deposit, Withdraw, Curse or Clawback, carrying the amount.
        target: The balance entry the transaction operates on.

    Use the named constructors (address_deposit, object_withdraw, ...) in
    preference to building kinds by hand.
    """
    kind: TransactionKind
    target: TransactionTarget

    def __post_init__(self):
        if not isinstance(self.kind, _KIND_TYPES):
            raise ValueError(f"Unknown transaction kind: {self.kind!r}")
        if not isinstance(self.target, TransactionTarget):
            raise ValueError(f"Transaction target must be TransactionTarget, got {self.target!r}")

    @property
    def amount(self) -> int:
        return self.kind.amount

    def is_clawback(self) -> bool:
        return isinstance(self.kind, Clawback)

    def into_delta(self) -> BalanceDelta:
        return into_delta(self)

    @classmethod
    def address_deposit(cls, amount: int) -> Transaction:
        return cls(Deposit(amount), TransactionTarget.ADDRESS)

    @classmethod
    def object_deposit(cls, amount: int) -> Transaction:
        return cls(Deposit(amount), TransactionTarget.OBJECT)

    @classmethod
    def address_withdraw(cls, amount: int) -> Transaction:
        return cls(Withdraw(amount), TransactionTarget.ADDRESS)

    @classmethod
    def object_withdraw(cls, amount: int) -> Transaction:
        return cls(Withdraw(amount), TransactionTarget.OBJECT)

    @classmethod
    def address_curse(cls, amount: int) -> Transaction:
        return cls(Curse(amount), TransactionTarget.ADDRESS)

    @classmethod
    def object_curse(cls, amount: int) -> Transaction:
        return cls(Curse(amount), TransactionTarget.OBJECT)

    @classmethod
    def address_clawback(cls, amount: int) -> Transaction:
        return cls(Clawback(amount), TransactionTarget.ADDRESS)

    @classmethod
    def object_clawback(cls, amount: int) -> Transaction:
        return cls(Clawback(amount), TransactionTarget.OBJECT)

    def __repr__(self) -> str:
        return f"Transaction({self.target.value} {type(self.kind).__name__.lower()} {self.amount})"


# ============================================================================
# EFFECTS AND STATE
# ============================================================================

@dataclass(frozen=True, slots=True)
class Effects:
    """
    Realized outcome of settling one transaction.

    Only the delta matching the transaction's target can be non-zero. A
    transaction that cleared for nothing has Effects() (both deltas zero).
    """
    address_delta: BalanceDelta = ZERO_DELTA
    object_delta: BalanceDelta = ZERO_DELTA

    @classmethod
    def for_target(cls, target: TransactionTarget, delta: BalanceDelta) -> Effects:
        if target is TransactionTarget.ADDRESS:
            return cls(address_delta=delta)
        return cls(object_delta=delta)

    def delta_for(self, target: TransactionTarget) -> BalanceDelta:
        if target is TransactionTarget.ADDRESS:
            return self.address_delta
        return self.object_delta

    def is_zero(self) -> bool:
        """Return True if this settlement changed nothing (cleared to zero)."""
        return self.address_delta.is_zero() and self.object_delta.is_zero()

    def __add__(self, other: Effects) -> Effects:
        if not isinstance(other, Effects):
            return NotImplemented
        return Effects(
            address_delta=self.address_delta + other.address_delta,
            object_delta=self.object_delta + other.object_delta,
        )


@dataclass(frozen=True, slots=True)
class State:
    """
    The two committed balances. Durable between settlement rounds.

    Attributes:
        address_state: Balance of the address account.
        object_state: Balance of the object account.
    """
    address_state: Balance = Balance()
    object_state: Balance = Balance()

    def balance_for(self, target: TransactionTarget) -> Balance:
        if target is TransactionTarget.ADDRESS:
            return self.address_state
        return self.object_state

    def replace_balance(self, target: TransactionTarget, balance: Balance) -> State:
        if target is TransactionTarget.ADDRESS:
            return replace(self, address_state=balance)
        return replace(self, object_state=balance)

    def apply(self, transaction: Transaction) -> Tuple[State, Effects]:
        """
        Apply a transaction's full delta to its target.

        Returns:
            (new_state, effects)

        Raises:
            BalanceConstraintViolation: If the target balance would go negative.
        """
        delta = into_delta(transaction)
        target = transaction.target
        new_balance = apply_delta(self.balance_for(target), delta)
        return self.replace_balance(target, new_balance), Effects.for_target(target, delta)


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def into_delta(transaction: Transaction) -> BalanceDelta:
    """Derive the full delta a transaction applies when it is not cleared."""
    kind = transaction.kind
    if isinstance(kind, Deposit):
        return BalanceDelta(kind.amount, 0)
    if isinstance(kind, Withdraw):
        return BalanceDelta(-kind.amount, 0)
    if isinstance(kind, Curse):
        return BalanceDelta(0, kind.amount)
    if isinstance(kind, Clawback):
        return BalanceDelta(-kind.amount, -kind.amount)
    raise TypeError(f"Unhandled transaction kind: {kind!r}")


def check_limit(balance: Balance, transaction: Transaction) -> bool:
    """
    Decide whether a transaction fits within a balance snapshot.

    Deposits and curses only increase tracked quantities and always fit.
    A withdraw may only draw on funds that are not cursed. A clawback cannot
    exceed either the funds held or the amount currently cursed.

    Args:
        balance: The snapshot to check against (never a delta)
        transaction: Transaction whose kind and amount are checked

    Returns:
        True if the transaction's delta can be applied to this snapshot
    """
    kind = transaction.kind
    if isinstance(kind, (Deposit, Curse)):
        return True
    if isinstance(kind, Withdraw):
        return kind.amount <= balance.spendable
    if isinstance(kind, Clawback):
        return kind.amount <= balance.clawback_limit
    raise TypeError(f"Unhandled transaction kind: {kind!r}")


def apply_delta(balance: Balance, delta: BalanceDelta) -> Balance:
    """
    Add a delta to a balance.

    Raises:
        BalanceConstraintViolation: If either resulting field would be negative.
            This only happens when a delta was applied without a limit check
            against a compatible snapshot.
    """
    new_balance = balance.balance + delta.d_balance
    new_cursed = balance.cursed + delta.d_cursed
    if new_balance < 0 or new_cursed < 0:
        raise BalanceConstraintViolation(
            f"{balance!r} + {delta!r} would give ({new_balance}, {new_cursed})"
        )
    return Balance(new_balance, new_cursed)


def sum_effects(results: Iterable[Tuple[Transaction, Effects]]) -> Effects:
    """
    Net effect of a settlement output.

    The committed state after settle() equals the previous state plus this sum.
    """
    total = Effects()
    for _, effects in results:
        total = total + effects
    return total
