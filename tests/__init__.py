"""tradeledger test suite."""
