"""Cart pricing engine."""

from .add_line import add_line
from .apply_coupon import apply_coupon
from .clear_cart import clear, remove_coupon
from .pricing import PLUS_SIZE_TOKENS, PriceBreakdown, compute_total, is_plus_size, price_breakdown
from .remove_line import remove_line
from .state import AppliedCoupon, CartState, LineItem, ProductRef, product_ref_from_catalog
from .update_quantity import set_quantity

__all__ = [
    "AppliedCoupon",
    "CartState",
    "LineItem",
    "PLUS_SIZE_TOKENS",
    "PriceBreakdown",
    "ProductRef",
    "add_line",
    "apply_coupon",
    "clear",
    "compute_total",
    "is_plus_size",
    "price_breakdown",
    "product_ref_from_catalog",
    "remove_coupon",
    "remove_line",
    "set_quantity",
]
