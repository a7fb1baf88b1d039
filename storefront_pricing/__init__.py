"""Storefront pricing and fee attribution core."""

from .cart import (
    AppliedCoupon,
    CartState,
    LineItem,
    PriceBreakdown,
    ProductRef,
    add_line,
    apply_coupon,
    clear,
    compute_total,
    is_plus_size,
    price_breakdown,
    product_ref_from_catalog,
    remove_coupon,
    remove_line,
    set_quantity,
)
from .config import DEFAULT_FEES, DEFAULT_PRICING, FeeConfig, PricingConfig
from .coupons import (
    Coupon,
    CouponBook,
    CouponClient,
    CouponService,
    CouponValidation,
    CouponValidator,
    Redemption,
    add_coupon_service_to_server,
)
from .earnings import (
    CostBreakdown,
    CostRates,
    EarningsBreakdown,
    EarningsReport,
    FounderEarningsEntry,
    FounderLedger,
    OrderLine,
    Payout,
    SaleRecord,
    attribute_sale,
    calculate_build_cost,
    cost_of_goods_for_order,
    margin_percentage,
    price_from_margin,
    validate_cost_rates,
)
from .errors import (
    ConfigError,
    CouponRejectedError,
    EntryNotFoundError,
    InsufficientEarningsError,
    InvalidTransitionError,
    MarginDomainError,
    NegativePayoutError,
    PricingError,
    TransportError,
    errmsg,
)
from .server import configure_logging, create_server, get_transport_config, run_server

__version__ = "0.1.0"
