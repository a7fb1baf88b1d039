"""Clear and RemoveCoupon cart operations."""

from dataclasses import replace
from typing import Optional

import structlog

from .state import CartState

logger = structlog.get_logger()


def clear(state: CartState, log: Optional[structlog.BoundLogger] = None) -> CartState:
    """Empty the cart and drop any applied coupon."""
    log = log or logger
    log.info("clearing_cart", lines=len(state.items))
    return replace(state, items=(), coupon=None)


def remove_coupon(state: CartState, log: Optional[structlog.BoundLogger] = None) -> CartState:
    """Drop the applied coupon, leaving the lines alone."""
    log = log or logger
    if state.coupon is None:
        return state
    log.info("removing_coupon", code=state.coupon.code)
    return replace(state, coupon=None)
