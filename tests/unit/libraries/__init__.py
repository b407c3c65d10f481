"""Library unit tests."""
