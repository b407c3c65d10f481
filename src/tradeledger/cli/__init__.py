"""tradeledger command-line interface."""
