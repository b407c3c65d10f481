"""Option chain value objects supplied by the market-data collaborator."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from tradeledger.libraries.options.pricing import OptionType

STRIKE_TOLERANCE = 0.01


class OptionContract(BaseModel):
    """
    Single listed contract.

    Attributes:
        strike: Strike price
        bid: Best bid (0 if none)
        ask: Best ask (0 if none)
        last_price: Last traded premium
        implied_volatility: IV as decimal (0 if unknown)
        open_interest: Open contracts
    """

    strike: float
    bid: float = 0.0
    ask: float = 0.0
    last_price: float = 0.0
    implied_volatility: float = 0.0
    open_interest: int = 0

    model_config = ConfigDict(frozen=True)


class OptionChain(BaseModel):
    """Calls and puts for one expiration."""

    expiration: date | None = None
    calls: list[OptionContract] = Field(default_factory=list)
    puts: list[OptionContract] = Field(default_factory=list)

    @property
    def strikes(self) -> list[float]:
        """Sorted union of call and put strikes."""
        return sorted({c.strike for c in self.calls} | {p.strike for p in self.puts})

    def contracts(self, option_type: OptionType | str) -> list[OptionContract]:
        """Contracts of one type."""
        return self.calls if OptionType(option_type) == OptionType.CALL else self.puts

    model_config = ConfigDict(frozen=True)


def mid_price(contract: OptionContract | None) -> float:
    """
    Fair premium estimate for a contract.

    Bid/ask midpoint when both sides are quoted, otherwise the last trade,
    otherwise 0.
    """
    if contract is None:
        return 0.0
    if contract.bid > 0 and contract.ask > 0:
        return (contract.bid + contract.ask) / 2
    return contract.last_price or 0.0


def find_contract(contracts: list[OptionContract], strike: float) -> OptionContract | None:
    """First contract whose strike matches within a cent."""
    for contract in contracts:
        if abs(contract.strike - strike) < STRIKE_TOLERANCE:
            return contract
    return None
