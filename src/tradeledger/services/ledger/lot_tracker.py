"""Lot queue for FIFO cost-basis accounting.

Lots are consumed strictly oldest-first. A partially consumed lot is
replaced at the front of the queue by a smaller lot that keeps the unused
share of the buy fees.
"""

from collections import deque
from decimal import Decimal

from tradeledger.services.ledger.models import Lot


class LotQueue:
    """
    FIFO queue of open lots for one symbol.

    Unlike an order-matching book this queue never refuses a close: selling
    more than is held consumes everything available and reports the
    unmatched remainder to the caller.

    Example:
        >>> queue = LotQueue()
        >>> queue.add(lot)
        >>> matches, unmatched = queue.consume(Decimal("150"))
    """

    def __init__(self) -> None:
        """Initialize empty queue."""
        self._lots: deque[Lot] = deque()

    def add(self, lot: Lot) -> None:
        """
        Append lot to the end of the queue.

        Args:
            lot: Newly acquired lot
        """
        self._lots.append(lot)

    @property
    def lots(self) -> list[Lot]:
        """Open lots, oldest first."""
        return list(self._lots)

    def total_shares(self) -> Decimal:
        """Total shares across open lots."""
        return sum((lot.shares for lot in self._lots), start=Decimal("0"))

    def total_cost(self) -> Decimal:
        """Total basis across open lots."""
        return sum((lot.cost_basis for lot in self._lots), start=Decimal("0"))

    def __len__(self) -> int:
        return len(self._lots)

    def consume(self, quantity: Decimal) -> tuple[list[tuple[Lot, Decimal, Decimal]], Decimal]:
        """
        Consume shares from the oldest lots first.

        Args:
            quantity: Shares to remove (non-negative)

        Returns:
            Tuple of (matches, unmatched) where matches is a list of
            (lot, shares_consumed, cost_consumed) in match order and unmatched
            is the quantity that could not be matched because the queue ran out.

        Example:
            >>> # Consume 150 shares from [100@$150, 100@$155]
            >>> matches, unmatched = queue.consume(Decimal("150"))
            >>> # matches: [(Lot(100@$150), 100, 15000), (Lot(100@$155), 50, 7750)]
            >>> # Leaves: [Lot(50@$155)], unmatched == 0
        """
        matches: list[tuple[Lot, Decimal, Decimal]] = []
        remaining = quantity

        while remaining > 0 and self._lots:
            lot = self._lots[0]

            if lot.shares <= remaining:
                # Full lot close
                self._lots.popleft()
                matches.append((lot, lot.shares, lot.cost_basis))
                remaining -= lot.shares
            else:
                # Partial close - split fees proportionally
                consumed = remaining
                left = lot.shares - consumed
                consumed_fees = lot.fees * consumed / lot.shares

                matches.append((lot, consumed, consumed * lot.price + consumed_fees))
                self._lots[0] = lot.model_copy(update={"shares": left, "fees": lot.fees - consumed_fees})
                remaining = Decimal("0")

        return matches, remaining

    def clear(self) -> None:
        """Drop all lots."""
        self._lots.clear()
