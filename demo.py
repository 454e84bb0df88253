#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Schedule, Settle, Curse and Claw Back

A step-by-step walkthrough of the two-phase executor. Each step builds on the
previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-2: Address account - proven at schedule time
  3-4: Object account  - admitted optimistically, cleared at settlement
  5-6: Curses          - freezing funds, clawing them back, pre-emptive curses

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

import sys

from cursed_ledger import (
    Executor, Transaction, ScheduleResult, TransactionTarget,
)


QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    """Print a step header with learning objective."""
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def show_schedule(executor: Executor, tx: Transaction) -> ScheduleResult:
    result = executor.schedule(tx)
    print(f">>> executor.schedule({tx!r})  ->  {result.name}")
    return result


def show_settle(executor: Executor) -> None:
    print(">>> executor.settle()")
    for tx, effects in executor.settle():
        delta = effects.delta_for(tx.target)
        label = "cleared" if effects.is_zero() else "applied"
        print(f"    {tx!r:40} {label:8} {delta!r}")
    print(f"    address={executor.get_balance(TransactionTarget.ADDRESS)!r}"
          f"  object={executor.get_balance(TransactionTarget.OBJECT)!r}")


def step_01_address_deposit(executor: Executor):
    step_header(1, "Address Deposit",
        "Deposits are always admitted; balances only change at settlement.")
    show_schedule(executor, Transaction.address_deposit(100))
    show_schedule(executor, Transaction.address_withdraw(100))
    print("\nThe withdraw is rejected: the deposit is still pending.")
    show_settle(executor)
    wait_for_enter()


def step_02_address_withdraw(executor: Executor):
    step_header(2, "Address Withdraw",
        "Address withdraws are checked against committed state when scheduled.")
    show_schedule(executor, Transaction.address_withdraw(100))
    show_settle(executor)
    wait_for_enter()


def step_03_object_optimism(executor: Executor):
    step_header(3, "Object Optimism",
        "Object withdraws are admitted without a check and resolved at settlement.")
    show_schedule(executor, Transaction.object_deposit(100))
    show_schedule(executor, Transaction.object_withdraw(100))
    show_settle(executor)
    print("\nThe withdraw cleared for nothing: it was checked against the state")
    print("committed when settlement began, before the deposit landed.")
    wait_for_enter()


def step_04_object_curse(executor: Executor):
    step_header(4, "Cursed Object Funds",
        "Cursed funds cannot be withdrawn; only an issuer clawback removes them.")
    show_schedule(executor, Transaction.object_curse(50))
    show_settle(executor)
    show_schedule(executor, Transaction.object_withdraw(60))
    show_schedule(executor, Transaction.object_withdraw(50))
    show_schedule(executor, Transaction.object_clawback(60))
    show_schedule(executor, Transaction.object_clawback(50))
    show_settle(executor)
    wait_for_enter()


def step_05_preemptive_curse(executor: Executor):
    step_header(5, "Pre-emptive Curse",
        "An issuer may curse more than an account holds.")
    show_schedule(executor, Transaction.address_curse(100))
    show_schedule(executor, Transaction.address_deposit(110))
    show_settle(executor)
    wait_for_enter()


def step_06_clawback(executor: Executor):
    step_header(6, "Clawback",
        "A clawback removes funds from both the balance and the curse.")
    show_schedule(executor, Transaction.address_withdraw(11))
    show_schedule(executor, Transaction.address_withdraw(10))
    show_schedule(executor, Transaction.address_clawback(50))
    show_settle(executor)
    print("\nThe remaining 50 is still cursed.")


def main():
    executor = Executor("tutorial")
    step_01_address_deposit(executor)
    step_02_address_withdraw(executor)
    step_03_object_optimism(executor)
    step_04_object_curse(executor)
    step_05_preemptive_curse(executor)
    step_06_clawback(executor)
    print(f"\n{executor!r}")


if __name__ == "__main__":
    main()
