"""Tests for option pricing and strategy analytics."""
