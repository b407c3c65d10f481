"""Cost-basis ledger implementation.

Replays a chronologically sorted trade sequence for one instrument into a
PositionState, under either FIFO lot accounting or weighted-average cost.

The ledger is a pure derivation over historical data. It never raises on
sequence content: over-selling is clamped, divisions by an empty position
return zero, and an option premium without details falls back to the
event's total amount.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from decimal import Decimal

from tradeledger.services.ledger.lot_tracker import LotQueue
from tradeledger.services.ledger.models import (
    CostBasisMethod,
    Lot,
    PositionState,
    TradeEvent,
    TradeKind,
    TradeWithPL,
)
from tradeledger.system import LoggerFactory

logger = LoggerFactory.get_logger()

ZERO = Decimal("0")


def sort_trades(trades: Iterable[TradeEvent]) -> list[TradeEvent]:
    """Sort ascending by executed_at; ties keep input order."""
    return sorted(trades, key=lambda t: t.executed_at)


class _Replay(ABC):
    """
    Shared replay state: option premiums, dividends and realized P/L.

    Subclasses own the share/basis state and implement _buy and _sell.
    """

    method: CostBasisMethod

    def __init__(self, symbol: str | None = None) -> None:
        self.symbol = symbol
        self.realized_pl = ZERO
        self.options_premium_net = ZERO
        self.dividends_received = ZERO

    # ==================== Transitions ====================

    def apply(self, trade: TradeEvent) -> tuple[Decimal, Decimal]:
        """
        Apply one event.

        Args:
            trade: Event to apply

        Returns:
            Tuple of (realized_pl, cash_flow) for this event
        """
        if trade.kind == TradeKind.BUY:
            self._buy(trade)
            return ZERO, -(trade.total_amount + trade.fees)

        if trade.kind == TradeKind.SELL:
            realized = self._sell(trade)
            self.realized_pl += realized
            return realized, trade.total_amount - trade.fees

        if trade.kind == TradeKind.OPTION_PREMIUM:
            return ZERO, self._option_premium(trade)

        # DIVIDEND
        self.dividends_received += trade.total_amount
        return ZERO, trade.total_amount

    def _option_premium(self, trade: TradeEvent) -> Decimal:
        """Apply premium cash flow; positive means premium received."""
        details = trade.option_details
        if details is None:
            logger.debug(
                "ledger.option_premium.missing_details",
                symbol=trade.symbol,
                trade_id=trade.trade_id,
                total_amount=str(trade.total_amount),
            )
            cash_flow = trade.total_amount
        elif details.action.is_credit:
            cash_flow = details.premium_total
        else:
            cash_flow = -details.premium_total

        self.options_premium_net += cash_flow
        return cash_flow

    @staticmethod
    def _fee_per_share(trade: TradeEvent) -> Decimal:
        """Sell fee amortized over the event's own shares."""
        if trade.quantity <= 0:
            return ZERO
        return trade.fees / trade.quantity

    @abstractmethod
    def _buy(self, trade: TradeEvent) -> None:
        """Add shares to the position."""

    @abstractmethod
    def _sell(self, trade: TradeEvent) -> Decimal:
        """Remove shares and return the realized P/L."""

    # ==================== State ====================

    @property
    @abstractmethod
    def shares(self) -> Decimal:
        """Shares currently held."""

    @property
    @abstractmethod
    def cost_basis(self) -> Decimal:
        """Cost of the shares currently held."""

    @property
    def lots(self) -> list[Lot]:
        return []

    @property
    def avg_cost_per_share(self) -> Decimal:
        shares = self.shares
        return self.cost_basis / shares if shares > 0 else ZERO

    @property
    def adjusted_cost_basis(self) -> Decimal:
        return self.cost_basis - self.options_premium_net - self.dividends_received - self.realized_pl

    def annotate(self, trade: TradeEvent, realized_pl: Decimal, cash_flow: Decimal) -> TradeWithPL:
        """Snapshot running totals after `trade`."""
        shares = self.shares
        adjusted_per_share = self.adjusted_cost_basis / shares if shares > 0 else ZERO
        return TradeWithPL(
            trade=trade,
            realized_pl=realized_pl,
            cash_flow=cash_flow,
            running_shares=shares,
            running_cost_per_share=self.avg_cost_per_share,
            running_adjusted_cost_per_share=adjusted_per_share,
        )

    def state(self) -> PositionState:
        """Current position."""
        return PositionState(
            symbol=self.symbol,
            method=self.method,
            shares=self.shares,
            cost_basis=self.cost_basis,
            avg_cost_per_share=self.avg_cost_per_share,
            realized_pl=self.realized_pl,
            options_premium_net=self.options_premium_net,
            dividends_received=self.dividends_received,
            adjusted_cost_basis=self.adjusted_cost_basis,
            lots=self.lots,
        )

    def _warn_oversell(self, trade: TradeEvent, unmatched: Decimal) -> None:
        logger.warning(
            "ledger.sell.exceeds_position",
            symbol=trade.symbol,
            trade_id=trade.trade_id,
            method=self.method.value,
            quantity=str(trade.quantity),
            unmatched=str(unmatched),
        )


class FifoReplay(_Replay):
    """Lot-based replay: sells consume the oldest lots first."""

    method = CostBasisMethod.FIFO

    def __init__(self, symbol: str | None = None) -> None:
        super().__init__(symbol)
        self._queue = LotQueue()

    def _buy(self, trade: TradeEvent) -> None:
        if trade.quantity <= 0:
            return
        self._queue.add(
            Lot(
                shares=trade.quantity,
                price=trade.price_per_unit,
                fees=trade.fees,
                acquired_at=trade.executed_at,
                source_trade_id=trade.trade_id,
            )
        )

    def _sell(self, trade: TradeEvent) -> Decimal:
        fee_per_share = self._fee_per_share(trade)
        matches, unmatched = self._queue.consume(trade.quantity)

        realized = ZERO
        for _lot, consumed, cost in matches:
            realized += consumed * (trade.price_per_unit - fee_per_share) - cost

        if unmatched > 0:
            # Unmatched shares have no basis to realize against
            self._warn_oversell(trade, unmatched)

        return realized

    @property
    def shares(self) -> Decimal:
        return self._queue.total_shares()

    @property
    def cost_basis(self) -> Decimal:
        return self._queue.total_cost()

    @property
    def lots(self) -> list[Lot]:
        return self._queue.lots


class AverageReplay(_Replay):
    """Weighted-average replay: one synthetic aggregate position, no lots."""

    method = CostBasisMethod.AVERAGE

    def __init__(self, symbol: str | None = None) -> None:
        super().__init__(symbol)
        self._shares = ZERO
        self._cost_basis = ZERO

    def _buy(self, trade: TradeEvent) -> None:
        self._cost_basis += trade.quantity * trade.price_per_unit + trade.fees
        self._shares += trade.quantity

    def _sell(self, trade: TradeEvent) -> Decimal:
        if self._shares <= 0:
            self._warn_oversell(trade, trade.quantity)
            return ZERO

        avg_cost = self._cost_basis / self._shares
        cost_of_sold = trade.quantity * avg_cost
        realized = trade.quantity * (trade.price_per_unit - self._fee_per_share(trade)) - cost_of_sold

        self._cost_basis -= cost_of_sold
        self._shares -= trade.quantity
        if self._shares <= 0:
            if self._shares < 0:
                self._warn_oversell(trade, -self._shares)
            self._shares = ZERO
            self._cost_basis = ZERO

        return realized

    @property
    def shares(self) -> Decimal:
        return self._shares

    @property
    def cost_basis(self) -> Decimal:
        return self._cost_basis


_REPLAYS: dict[CostBasisMethod, type[_Replay]] = {
    CostBasisMethod.FIFO: FifoReplay,
    CostBasisMethod.AVERAGE: AverageReplay,
}


def _replay_for(method: CostBasisMethod | str, symbol: str | None) -> _Replay:
    return _REPLAYS[CostBasisMethod(method)](symbol)


def compute_position(
    trades: Iterable[TradeEvent],
    method: CostBasisMethod | str,
    symbol: str | None = None,
) -> PositionState:
    """
    Replay trades for one instrument into a position.

    Args:
        trades: Events for a single symbol (sorted here, stable on ties)
        method: FIFO or AVERAGE
        symbol: Optional symbol recorded on the result

    Returns:
        PositionState after the last event

    Example:
        >>> state = compute_position(trades, CostBasisMethod.FIFO)
        >>> print(state.shares, state.cost_basis, state.realized_pl)
    """
    replay = _replay_for(method, symbol)
    ordered = sort_trades(trades)
    for trade in ordered:
        replay.apply(trade)

    state = replay.state()
    logger.debug(
        "ledger.position.computed",
        symbol=symbol,
        method=replay.method.value,
        trades=len(ordered),
        shares=str(state.shares),
        cost_basis=str(state.cost_basis),
        realized_pl=str(state.realized_pl),
    )
    return state


def compute_per_trade_pl(
    trades: Iterable[TradeEvent],
    method: CostBasisMethod | str,
    symbol: str | None = None,
) -> list[TradeWithPL]:
    """
    Replay trades and annotate each with its P/L and running totals.

    Args:
        trades: Events for a single symbol (sorted here, stable on ties)
        method: FIFO or AVERAGE
        symbol: Optional symbol used in log context

    Returns:
        One TradeWithPL per event, in replay order
    """
    replay = _replay_for(method, symbol)
    annotated: list[TradeWithPL] = []
    for trade in sort_trades(trades):
        realized, cash_flow = replay.apply(trade)
        annotated.append(replay.annotate(trade, realized, cash_flow))
    return annotated


class CostBasisLedger:
    """
    Default ICostBasisLedger implementation backed by the module functions.

    Stateless: every call replays its inputs from scratch, so one instance
    can be shared freely.
    """

    def compute_position(
        self,
        trades: Iterable[TradeEvent],
        method: CostBasisMethod | str,
        symbol: str | None = None,
    ) -> PositionState:
        """See compute_position()."""
        return compute_position(trades, method, symbol)

    def compute_per_trade_pl(
        self,
        trades: Iterable[TradeEvent],
        method: CostBasisMethod | str,
        symbol: str | None = None,
    ) -> list[TradeWithPL]:
        """See compute_per_trade_pl()."""
        return compute_per_trade_pl(trades, method, symbol)
