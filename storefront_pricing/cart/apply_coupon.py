"""ApplyCoupon cart operation."""

from dataclasses import replace
from typing import Optional

import structlog

from ..coupons.validation import CouponValidator
from ..errors import CouponRejectedError, TransportError
from .state import AppliedCoupon, CartState

logger = structlog.get_logger()


def apply_coupon(
    state: CartState,
    code: str,
    validator: CouponValidator,
    user_id: Optional[str] = None,
    log: Optional[structlog.BoundLogger] = None,
) -> CartState:
    """Validate a coupon code and attach it to the cart.

    The discount returned by the validator is stored as-is. A rejection is
    re-raised with the validator's message; transport failures surface
    only the generic network error.
    """
    log = log or logger
    code = code.strip().upper()
    order_total = state.total

    log.info("applying_coupon", code=code, order_total=order_total)
    try:
        result = validator.validate(code, order_total, user_id)
    except CouponRejectedError as e:
        log.info("coupon_rejected", code=code, reason=e.message)
        raise
    except TransportError as e:
        log.warning("coupon_transport_error", code=code, error=str(e.cause))
        raise

    coupon = AppliedCoupon(
        code=result.code or code,
        coupon_type=result.coupon_type,
        value=result.value,
        discount=result.discount,
        free_shipping=result.free_shipping,
        coupon_id=result.coupon_id,
    )
    log.info("coupon_applied", code=coupon.code, discount=coupon.discount)
    return replace(state, coupon=coupon)
