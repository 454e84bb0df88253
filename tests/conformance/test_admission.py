"""
Admission Conformance Tests

INVARIANT: schedule() outcome depends only on the transaction and the
committed balance of its target.

    Deposit(a), any target       ⟹ ADMITTED
    Curse(a), any target         ⟹ ADMITTED
    object Withdraw(a)           ⟹ ADMITTED
    address Withdraw(a)          ⟹ ADMITTED  ⟺  a ≤ max(balance − cursed, 0)
    Clawback(a), any target      ⟹ ADMITTED  ⟺  a ≤ min(balance, cursed)
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from cursed_ledger import (
    Balance, Executor, ScheduleResult, State, Transaction, TransactionTarget,
    Deposit, Withdraw, Curse, Clawback,
)


# =============================================================================
# STRATEGIES FOR PROPERTY-BASED TESTING
# =============================================================================

amounts = st.integers(min_value=0, max_value=10_000)
targets = st.sampled_from(list(TransactionTarget))


@st.composite
def balances(draw):
    """Generate a committed balance, including over-cursed ones."""
    return Balance(draw(amounts), draw(amounts))


def _executor_with(target: TransactionTarget, balance: Balance) -> Executor:
    return Executor("conformance", initial_state=State().replace_balance(target, balance))


# =============================================================================
# ADMISSION PROPERTY TESTS
# =============================================================================

class TestAdmissionProperties:
    """Property-based tests for the admission policy."""

    @given(balances(), targets, amounts)
    @settings(max_examples=100)
    def test_deposit_always_admitted(self, balance, target, amount):
        e = _executor_with(target, balance)
        tx = Transaction(Deposit(amount), target)
        assert e.schedule(tx) == ScheduleResult.ADMITTED

    @given(balances(), targets, amounts)
    @settings(max_examples=100)
    def test_curse_always_admitted(self, balance, target, amount):
        e = _executor_with(target, balance)
        tx = Transaction(Curse(amount), target)
        assert e.schedule(tx) == ScheduleResult.ADMITTED

    @given(balances(), amounts)
    @settings(max_examples=100)
    def test_object_withdraw_always_admitted(self, balance, amount):
        e = _executor_with(TransactionTarget.OBJECT, balance)
        assert e.schedule(Transaction.object_withdraw(amount)) == ScheduleResult.ADMITTED

    @given(balances(), amounts)
    @settings(max_examples=200)
    def test_address_withdraw_bound(self, balance, amount):
        e = _executor_with(TransactionTarget.ADDRESS, balance)
        admitted = e.schedule(Transaction.address_withdraw(amount)) == ScheduleResult.ADMITTED
        assert admitted == (amount <= max(balance.balance - balance.cursed, 0))

    @given(balances(), targets, amounts)
    @settings(max_examples=200)
    def test_clawback_bound(self, balance, target, amount):
        e = _executor_with(target, balance)
        tx = Transaction(Clawback(amount), target)
        admitted = e.schedule(tx) == ScheduleResult.ADMITTED
        assert admitted == (amount <= min(balance.balance, balance.cursed))

    @given(balances(), balances(), targets, amounts)
    @settings(max_examples=100)
    def test_other_target_does_not_affect_admission(self, mine, other, target, amount):
        """
        PROPERTY: The balance of the other account never changes the outcome.
        """
        other_target = (
            TransactionTarget.OBJECT if target is TransactionTarget.ADDRESS
            else TransactionTarget.ADDRESS
        )
        alone = _executor_with(target, mine)
        both = Executor(
            "conformance",
            initial_state=State().replace_balance(target, mine).replace_balance(other_target, other),
        )
        for kind in (Withdraw(amount), Clawback(amount)):
            tx = Transaction(kind, target)
            assert alone.schedule(tx) == both.schedule(tx)
