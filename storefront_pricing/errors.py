"""Error types for the storefront pricing core."""

from typing import Optional


class errmsg:
    """Error message constants."""

    NETWORK_ERROR = "A network error occurred. Please try again."
    COUPON_CODE_REQUIRED = "Coupon code is required"
    INVALID_COUPON = "Invalid coupon code"
    COUPON_EXPIRED = "Coupon has expired"
    COUPON_USAGE_LIMIT = "Coupon usage limit reached"
    COUPON_ALREADY_USED = "You have already used this coupon"
    MIN_ORDER_AMOUNT = "Minimum order amount of ${amount:.2f} required"
    VALIDATION_FAILED = "Failed to validate coupon"
    MARGIN_OUT_OF_RANGE = "Margin percentage must be below 100, got {margin}"
    INSUFFICIENT_EARNINGS = "Insufficient pending earnings for payout"
    NEGATIVE_PAYOUT = "Payout amount cannot be negative, got {amount}"
    ENTRY_NOT_FOUND = "Earnings entry not found: {entry_id}"
    INVALID_TRANSITION = "Cannot move earnings entry from {current} to {target}"


class PricingError(Exception):
    """Base class for pricing core errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigError(PricingError):
    """Configuration value could not be parsed."""

    def __init__(self, name: str, value: str):
        super().__init__(f"invalid value for {name}: {value!r}")
        self.name = name
        self.value = value


class CouponRejectedError(PricingError):
    """Coupon validation service rejected the code.

    The message comes from the validation service and is shown to the
    user unchanged.
    """


class TransportError(PricingError):
    """Coupon validation could not reach the service.

    The user-facing message is always the generic network error; the
    underlying exception is kept as ``cause`` for logs only.
    """

    def __init__(self, cause: Exception):
        super().__init__(errmsg.NETWORK_ERROR, cause)

    @property
    def user_message(self) -> str:
        """Message that is safe to display."""
        return self.message


class MarginDomainError(PricingError):
    """Margin-on-price is undefined for margins of 100% or more."""

    def __init__(self, margin: float):
        super().__init__(errmsg.MARGIN_OUT_OF_RANGE.format(margin=margin))
        self.margin = margin


class InvalidTransitionError(PricingError):
    """Earnings entry status can only move forward one step at a time."""

    def __init__(self, current: str, target: str):
        super().__init__(errmsg.INVALID_TRANSITION.format(current=current, target=target))
        self.current = current
        self.target = target


class InsufficientEarningsError(PricingError):
    """Requested payout exceeds calculated earnings."""

    def __init__(self, requested: float, available: float):
        super().__init__(errmsg.INSUFFICIENT_EARNINGS)
        self.requested = requested
        self.available = available


class NegativePayoutError(PricingError):
    """Payout amount below zero."""

    def __init__(self, amount: float):
        super().__init__(errmsg.NEGATIVE_PAYOUT.format(amount=amount))
        self.amount = amount


class EntryNotFoundError(PricingError):
    """No earnings entry with the given id."""

    def __init__(self, entry_id: str):
        super().__init__(errmsg.ENTRY_NOT_FOUND.format(entry_id=entry_id))
        self.entry_id = entry_id
