"""Tests for the cost-basis ledger."""
