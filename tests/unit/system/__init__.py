"""Tests for system configuration and logging."""
