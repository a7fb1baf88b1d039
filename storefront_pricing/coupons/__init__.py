"""Coupon validation client and reference service."""

from .client import CouponClient
from .service import Coupon, CouponBook, CouponService, Redemption, add_coupon_service_to_server
from .validation import (
    APPLY_METHOD,
    COUPON_FIXED,
    COUPON_FREE_SHIPPING,
    COUPON_PERCENTAGE,
    SERVICE_NAME,
    VALIDATE_METHOD,
    CouponValidation,
    CouponValidator,
)
