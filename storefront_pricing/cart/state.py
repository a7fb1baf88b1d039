"""Cart state records."""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from ..config import DEFAULT_PRICING, PricingConfig
from .pricing import compute_total

BUNDLE_FLAG = "isThreeForTwentyFive"


@dataclass(frozen=True)
class ProductRef:
    product_id: str
    unit_price: float
    bundle_eligible: bool = False
    name: str = ""


def product_ref_from_catalog(row: Mapping[str, Any]) -> ProductRef:
    """Build a ProductRef from a catalog row.

    The bundle flag lives either on the row or inside its ``metadata``
    object depending on when the product was created; either being
    truthy makes the product bundle eligible.
    """
    metadata = row.get("metadata") or {}
    eligible = bool(row.get(BUNDLE_FLAG)) or bool(metadata.get(BUNDLE_FLAG))
    return ProductRef(
        product_id=str(row["id"]),
        unit_price=float(row.get("price") or 0),
        bundle_eligible=eligible,
        name=str(row.get("name") or ""),
    )


@dataclass(frozen=True)
class LineItem:
    id: str
    product: ProductRef
    quantity: int
    selected_size: Optional[str] = None
    selected_color: Optional[str] = None
    custom_design: Optional[str] = None
    payment_method: Optional[str] = None

    def merge_key(self) -> tuple:
        return (
            self.product.product_id,
            self.custom_design,
            self.selected_size,
            self.selected_color,
            self.payment_method,
        )


@dataclass(frozen=True)
class AppliedCoupon:
    code: str
    coupon_type: str
    value: float
    discount: float
    free_shipping: bool = False
    coupon_id: str = ""


@dataclass(frozen=True)
class CartState:
    items: tuple[LineItem, ...] = ()
    coupon: Optional[AppliedCoupon] = None
    pricing: PricingConfig = field(default=DEFAULT_PRICING)

    @property
    def total(self) -> float:
        return compute_total(self.items, self.pricing)

    @property
    def discount(self) -> float:
        return self.coupon.discount if self.coupon else 0.0

    @property
    def final_total(self) -> float:
        return max(0.0, self.total - self.discount)

    def find(self, line_id: str) -> Optional[LineItem]:
        for item in self.items:
            if item.id == line_id:
                return item
        return None

    def with_items(self, items) -> "CartState":
        return replace(self, items=tuple(items))
