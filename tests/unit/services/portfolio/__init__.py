"""Tests for the portfolio aggregator and price-feed fan-out."""
