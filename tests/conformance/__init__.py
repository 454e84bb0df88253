"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the Executor.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. admission.py - Schedule-time limit checks per target and kind
2. settlement.py - Clear-or-apply, non-negativity and atomic commit

These tests use hypothesis for property-based testing.
"""
