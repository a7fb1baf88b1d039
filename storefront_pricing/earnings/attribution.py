"""Sale fee attribution.

A completed sale splits four ways: processor fee, cost of goods, and the
remaining gross profit, of which a fixed rate goes to the founder pool
and the rest is retained. Nothing is clamped: a sale whose costs exceed
its amount yields a negative gross profit.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping


@dataclass(frozen=True)
class SaleRecord:
    order_id: str
    sale_amount: float
    cost_of_goods: float


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class EarningsBreakdown:
    sale_amount: float
    cost_of_goods: float
    processor_fee: float
    gross_profit: float
    founder_share_rate: float
    founder_share: float
    retained_earnings: float


def attribute_sale(
    sale_amount: float,
    cost_of_goods: float,
    processor_fee_rate: float,
    founder_share_rate: float,
) -> EarningsBreakdown:
    """Split a sale into processor fee, COGS, founder share and retained profit.

    Args:
        sale_amount: Amount charged for the order
        cost_of_goods: Summed COGS for the order
        processor_fee_rate: Processor cut as a 0-1 fraction of the sale
        founder_share_rate: Founder cut as a 0-1 fraction of gross profit
    """
    processor_fee = sale_amount * processor_fee_rate
    gross_profit = sale_amount - cost_of_goods - processor_fee
    founder_share = gross_profit * founder_share_rate
    retained_earnings = gross_profit - founder_share

    return EarningsBreakdown(
        sale_amount=sale_amount,
        cost_of_goods=cost_of_goods,
        processor_fee=processor_fee,
        gross_profit=gross_profit,
        founder_share_rate=founder_share_rate,
        founder_share=founder_share,
        retained_earnings=retained_earnings,
    )


def cost_of_goods_for_order(
    lines: Iterable[OrderLine], cogs_by_product: Mapping[str, float]
) -> float:
    """Sum per-unit COGS over an order's lines.

    Products without a COGS entry contribute nothing.
    """
    return sum(
        cogs_by_product[line.product_id] * line.quantity
        for line in lines
        if line.product_id in cogs_by_product
    )


def margin_percentage(revenue: float, cost: float) -> float:
    """Margin on revenue as a 0-100 percentage; 0 when there is no revenue."""
    if revenue <= 0:
        return 0.0
    return (revenue - cost) / revenue * 100
