"""Cart total computation.

Business Rules:
1. Bundle-eligible products share one pool; every unit in the pool is
   billed at the bundle unit price, grouped in sets of the bundle size.
   A partial set is billed at the same unit price, not at list price.
2. All other products are billed at unit price times quantity.
3. Plus-size units carry a flat surcharge on top of either rule.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from ..config import DEFAULT_PRICING, PricingConfig

if TYPE_CHECKING:
    from .state import LineItem

PLUS_SIZE_TOKENS = (
    "2XL",
    "2X",
    "XXL",
    "3XL",
    "3X",
    "XXXL",
    "4XL",
    "4X",
    "XXXXL",
    "5XL",
    "5X",
    "XXXXXL",
)


def is_plus_size(size: Optional[str]) -> bool:
    """Return True if the size tag contains a plus-size token."""
    if not size:
        return False
    upper = size.upper()
    return any(token in upper for token in PLUS_SIZE_TOKENS)


@dataclass(frozen=True)
class PriceBreakdown:
    standard_subtotal: float
    bundle_subtotal: float
    surcharge_total: float
    bundle_units: int
    complete_bundles: int

    @property
    def total(self) -> float:
        return self.standard_subtotal + self.bundle_subtotal + self.surcharge_total


def price_breakdown(
    items: Iterable["LineItem"], pricing: PricingConfig = DEFAULT_PRICING
) -> PriceBreakdown:
    """Price a set of cart lines, split into standard and bundle pools."""
    standard_subtotal = 0.0
    surcharge_total = 0.0
    bundle_units = 0

    for item in items:
        if is_plus_size(item.selected_size):
            surcharge_total += pricing.plus_size_surcharge * item.quantity
        if item.product.bundle_eligible:
            bundle_units += item.quantity
        else:
            standard_subtotal += item.product.unit_price * item.quantity

    complete_bundles = bundle_units // pricing.bundle_size
    remainder = bundle_units % pricing.bundle_size
    bundle_subtotal = (
        complete_bundles * pricing.bundle_size * pricing.bundle_unit_price
        + remainder * pricing.bundle_unit_price
    )

    return PriceBreakdown(
        standard_subtotal=standard_subtotal,
        bundle_subtotal=bundle_subtotal,
        surcharge_total=surcharge_total,
        bundle_units=bundle_units,
        complete_bundles=complete_bundles,
    )


def compute_total(
    items: Iterable["LineItem"], pricing: PricingConfig = DEFAULT_PRICING
) -> float:
    """Return the cart total before any coupon."""
    return price_breakdown(items, pricing).total
