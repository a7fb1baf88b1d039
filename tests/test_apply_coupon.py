"""Tests for applying coupons to a cart."""

import pytest

from storefront_pricing.cart import CartState, ProductRef, add_line, apply_coupon
from storefront_pricing.coupons import CouponValidation
from storefront_pricing.errors import CouponRejectedError, TransportError, errmsg


@pytest.fixture
def cart(empty_cart: CartState, tee: ProductRef) -> CartState:
    return add_line(empty_cart, tee, 2)


class TestApplyCoupon:
    """Tests for apply_coupon."""

    def test_code_is_upper_cased(self, cart: CartState, stub_validator) -> None:
        """The validator sees the normalized code and the pre-coupon total."""
        validator = stub_validator(result=CouponValidation("SAVE10", "percentage", 10, 4.0))
        apply_coupon(cart, " save10 ", validator, user_id="user-1")
        assert validator.calls == [("SAVE10", pytest.approx(40.0), "user-1")]

    def test_discount_stored_verbatim(self, cart: CartState, stub_validator) -> None:
        """The engine keeps the validator's discount without re-deriving it."""
        validator = stub_validator(
            result=CouponValidation("SAVE10", "percentage", 10, 3.33, coupon_id="c-1")
        )
        result = apply_coupon(cart, "save10", validator)
        assert result.coupon.code == "SAVE10"
        assert result.coupon.discount == 3.33
        assert result.coupon.coupon_id == "c-1"
        assert result.final_total == pytest.approx(36.67)
        assert result.items == cart.items

    def test_free_shipping_flag(self, cart: CartState, stub_validator) -> None:
        """Free shipping coupons carry the flag and no discount."""
        validator = stub_validator(
            result=CouponValidation("SHIPFREE", "free_shipping", 0, 0.0, free_shipping=True)
        )
        result = apply_coupon(cart, "shipfree", validator)
        assert result.coupon.free_shipping
        assert result.final_total == result.total

    def test_discount_larger_than_total(self, cart: CartState, stub_validator) -> None:
        """Final total floors at zero."""
        validator = stub_validator(result=CouponValidation("BIG", "fixed", 100, 100.0))
        assert apply_coupon(cart, "big", validator).final_total == 0

    def test_rejection_message_passes_through(self, cart: CartState, stub_validator) -> None:
        """Validation errors surface unchanged and leave the cart alone."""
        validator = stub_validator(error=CouponRejectedError("Coupon has expired"))
        with pytest.raises(CouponRejectedError) as exc_info:
            apply_coupon(cart, "old", validator)
        assert exc_info.value.message == "Coupon has expired"
        assert cart.coupon is None

    def test_transport_error_is_generic(self, cart: CartState, stub_validator) -> None:
        """Network failures carry only the generic message."""
        validator = stub_validator(error=TransportError(OSError("connection reset by peer")))
        with pytest.raises(TransportError) as exc_info:
            apply_coupon(cart, "save10", validator)
        assert exc_info.value.user_message == errmsg.NETWORK_ERROR
        assert "connection reset" not in exc_info.value.user_message
