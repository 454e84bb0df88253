"""
conftest.py - Shared pytest fixtures for executor tests

Provides common fixtures used across unit, conformance and functional tests:
- An empty executor
- A factory for executors seeded with specific committed balances
"""

import pytest
from typing import Tuple

from cursed_ledger import Balance, Executor, State


@pytest.fixture
def executor() -> Executor:
    """An executor with both balances empty."""
    return Executor("test", verbose=False)


@pytest.fixture
def make_executor():
    """
    Factory for executors starting from given committed balances.

    Usage:
        e = make_executor(address=(110, 100), object=(100, 50))
    """
    def _make(address: Tuple[int, int] = (0, 0), object: Tuple[int, int] = (0, 0)) -> Executor:
        state = State(address_state=Balance(*address), object_state=Balance(*object))
        return Executor("test", initial_state=state, verbose=False)
    return _make
