"""Pure computation libraries (no I/O, no service state)."""
