"""Coupon validation contract shared by the client and the service."""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

SERVICE_NAME = "storefront.coupons.CouponService"
VALIDATE_METHOD = f"/{SERVICE_NAME}/Validate"
APPLY_METHOD = f"/{SERVICE_NAME}/Apply"

COUPON_PERCENTAGE = "percentage"
COUPON_FIXED = "fixed"
COUPON_FREE_SHIPPING = "free_shipping"


@dataclass(frozen=True)
class CouponValidation:
    """Successful validation result. ``discount`` is already resolved."""

    code: str
    coupon_type: str
    value: float
    discount: float
    free_shipping: bool = False
    coupon_id: str = ""

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> "CouponValidation":
        coupon = response.get("coupon") or {}
        coupon_type = str(coupon.get("type", ""))
        return cls(
            code=str(coupon.get("code", "")),
            coupon_type=coupon_type,
            value=float(coupon.get("value", 0)),
            discount=float(response.get("discountAmount", 0)),
            free_shipping=bool(response.get("freeShipping", coupon_type == COUPON_FREE_SHIPPING)),
            coupon_id=str(coupon.get("id", "")),
        )


class CouponValidator(Protocol):
    """Anything that can validate a coupon code against an order total."""

    def validate(
        self, code: str, order_total: float, user_id: Optional[str] = None
    ) -> CouponValidation: ...
