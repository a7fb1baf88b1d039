"""Founder earnings ledger.

Each completed sale gets one entry. Entries move pending -> calculated ->
paid, one step at a time and never backwards. Entries are never deleted.
"""

import uuid
from dataclasses import dataclass, replace
from typing import Callable, Optional

import structlog
from google.protobuf.timestamp_pb2 import Timestamp

from ..config import DEFAULT_FEES, FeeConfig
from ..errors import (
    EntryNotFoundError,
    InsufficientEarningsError,
    InvalidTransitionError,
    NegativePayoutError,
)
from ..helpers import now
from .attribution import SaleRecord, attribute_sale

STATUS_PENDING = "pending"
STATUS_CALCULATED = "calculated"
STATUS_PAID = "paid"

NEXT_STATUS = {
    STATUS_PENDING: STATUS_CALCULATED,
    STATUS_CALCULATED: STATUS_PAID,
}

DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class FounderEarningsEntry:
    id: str
    order_id: str
    founder_id: str
    sale_amount: float
    cost_of_goods: float
    status: str = STATUS_PENDING
    processor_fee: float = 0.0
    gross_profit: float = 0.0
    founder_share_rate: float = 0.0
    founder_share: float = 0.0
    created_at: Optional[Timestamp] = None
    calculated_at: Optional[Timestamp] = None
    paid_at: Optional[Timestamp] = None

    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING

    def is_calculated(self) -> bool:
        return self.status == STATUS_CALCULATED

    def is_paid(self) -> bool:
        return self.status == STATUS_PAID

    def recorded_at(self) -> Optional[Timestamp]:
        return self.calculated_at if self.calculated_at is not None else self.created_at


@dataclass(frozen=True)
class Payout:
    founder_id: str
    amount: float
    entry_ids: tuple[str, ...]
    paid_at: Timestamp


@dataclass(frozen=True)
class EarningsReport:
    founder_id: str
    entry_count: int
    total_revenue: float
    total_cost_of_goods: float
    total_processor_fees: float
    gross_profit: float
    founder_earnings: float
    retained_earnings: float
    average_margin: float


def check_transition(current: str, target: str) -> None:
    """Raise unless ``target`` is the single next status after ``current``."""
    if NEXT_STATUS.get(current) != target:
        raise InvalidTransitionError(current, target)


def _within(ts: Optional[Timestamp], start: Optional[Timestamp], end: Optional[Timestamp]) -> bool:
    if ts is None:
        return start is None and end is None
    if start is not None and ts.ToNanoseconds() < start.ToNanoseconds():
        return False
    if end is not None and ts.ToNanoseconds() > end.ToNanoseconds():
        return False
    return True


class FounderLedger:
    """In-memory store of founder earnings entries."""

    def __init__(
        self,
        clock: Callable[[], Timestamp] = now,
        log: Optional[structlog.BoundLogger] = None,
    ):
        self._clock = clock
        self._log = log or structlog.get_logger()
        self._entries: dict[str, FounderEarningsEntry] = {}

    def record_sale(self, sale: SaleRecord, founder_id: str) -> FounderEarningsEntry:
        """Open a pending entry for a completed sale."""
        entry = FounderEarningsEntry(
            id=f"earnings_{uuid.uuid4().hex[:12]}",
            order_id=sale.order_id,
            founder_id=founder_id,
            sale_amount=sale.sale_amount,
            cost_of_goods=sale.cost_of_goods,
            created_at=self._clock(),
        )
        self._entries[entry.id] = entry
        self._log.info("earnings_recorded", entry_id=entry.id, order_id=sale.order_id)
        return entry

    def calculate(self, entry_id: str, fees: FeeConfig = DEFAULT_FEES) -> FounderEarningsEntry:
        """Attribute a pending entry's sale and mark it calculated."""
        entry = self.get(entry_id)
        check_transition(entry.status, STATUS_CALCULATED)

        breakdown = attribute_sale(
            entry.sale_amount,
            entry.cost_of_goods,
            fees.processor_fee_rate,
            fees.founder_share_rate,
        )
        entry = replace(
            entry,
            status=STATUS_CALCULATED,
            processor_fee=breakdown.processor_fee,
            gross_profit=breakdown.gross_profit,
            founder_share_rate=breakdown.founder_share_rate,
            founder_share=breakdown.founder_share,
            calculated_at=self._clock(),
        )
        self._entries[entry.id] = entry
        self._log.info(
            "earnings_calculated",
            entry_id=entry.id,
            gross_profit=entry.gross_profit,
            founder_share=entry.founder_share,
        )
        return entry

    def attribute(
        self, sale: SaleRecord, founder_id: str, fees: FeeConfig = DEFAULT_FEES
    ) -> FounderEarningsEntry:
        """Record a sale and calculate it in one step."""
        return self.calculate(self.record_sale(sale, founder_id).id, fees)

    def get(self, entry_id: str) -> FounderEarningsEntry:
        try:
            return self._entries[entry_id]
        except KeyError:
            raise EntryNotFoundError(entry_id) from None

    def _matching(
        self,
        founder_id: str,
        status: Optional[str] = None,
        start: Optional[Timestamp] = None,
        end: Optional[Timestamp] = None,
    ) -> list[FounderEarningsEntry]:
        return [
            entry
            for entry in self._entries.values()
            if entry.founder_id == founder_id
            and (status is None or entry.status == status)
            and _within(entry.recorded_at(), start, end)
        ]

    def earnings(
        self,
        founder_id: str,
        status: Optional[str] = None,
        start: Optional[Timestamp] = None,
        end: Optional[Timestamp] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[FounderEarningsEntry]:
        """List a founder's entries in recording order, filtered and paged.

        A zero or missing ``limit`` gives a page of ``DEFAULT_PAGE_SIZE``.
        """
        limit = limit or DEFAULT_PAGE_SIZE
        matches = self._matching(founder_id, status, start, end)
        return matches[offset : offset + limit]

    def process_payout(self, founder_id: str, amount: Optional[float] = None) -> Payout:
        """Pay out every calculated entry for a founder.

        Entries already paid are left alone, so repeating a payout pays
        nothing twice. A zero or missing ``amount`` pays the calculated
        total. Negative amounts and amounts above the total are rejected.
        """
        if amount is not None and amount < 0:
            raise NegativePayoutError(amount)

        payable = self._matching(founder_id, status=STATUS_CALCULATED)
        available = sum(entry.founder_share for entry in payable)
        payout_amount = amount or available
        if payout_amount > available:
            raise InsufficientEarningsError(payout_amount, available)

        paid_at = self._clock()
        for entry in payable:
            check_transition(entry.status, STATUS_PAID)
            self._entries[entry.id] = replace(entry, status=STATUS_PAID, paid_at=paid_at)

        self._log.info(
            "payout_processed",
            founder_id=founder_id,
            amount=payout_amount,
            entries=len(payable),
        )
        return Payout(
            founder_id=founder_id,
            amount=payout_amount,
            entry_ids=tuple(entry.id for entry in payable),
            paid_at=paid_at,
        )

    def report(
        self,
        founder_id: str,
        start: Optional[Timestamp] = None,
        end: Optional[Timestamp] = None,
    ) -> EarningsReport:
        """Summarize a founder's attributed entries over a period.

        Pending entries have no attribution yet and are left out.
        """
        entries = [
            entry
            for entry in self._matching(founder_id, start=start, end=end)
            if not entry.is_pending()
        ]
        total_revenue = sum(e.sale_amount for e in entries)
        gross_profit = sum(e.gross_profit for e in entries)
        founder_earnings = sum(e.founder_share for e in entries)

        return EarningsReport(
            founder_id=founder_id,
            entry_count=len(entries),
            total_revenue=total_revenue,
            total_cost_of_goods=sum(e.cost_of_goods for e in entries),
            total_processor_fees=sum(e.processor_fee for e in entries),
            gross_profit=gross_profit,
            founder_earnings=founder_earnings,
            retained_earnings=gross_profit - founder_earnings,
            average_margin=gross_profit / total_revenue * 100 if total_revenue > 0 else 0.0,
        )
