"""Fee and earnings attribution engine."""

from .attribution import (
    EarningsBreakdown,
    OrderLine,
    SaleRecord,
    attribute_sale,
    cost_of_goods_for_order,
    margin_percentage,
)
from .build_cost import (
    CostBreakdown,
    CostRates,
    calculate_build_cost,
    price_from_margin,
    validate_cost_rates,
)
from .ledger import (
    STATUS_CALCULATED,
    STATUS_PAID,
    STATUS_PENDING,
    EarningsReport,
    FounderEarningsEntry,
    FounderLedger,
    Payout,
    check_transition,
)
