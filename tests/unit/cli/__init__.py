"""Tests for the tradeledger CLI."""
