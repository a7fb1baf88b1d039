"""BDD tests for cart pricing using pytest-bdd."""

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from storefront_pricing.cart import (
    CartState,
    ProductRef,
    add_line,
    apply_coupon,
    clear,
    price_breakdown,
    set_quantity,
)
from storefront_pricing.coupons import COUPON_FIXED, CouponValidation
from storefront_pricing.errors import CouponRejectedError, PricingError

scenarios("cart_pricing.feature")


class CouponStub:
    """Coupon validator with a canned answer."""

    def __init__(self):
        self.accepted = {}
        self.rejection = None

    def validate(self, code, order_total, user_id=None):
        if self.rejection is not None:
            raise CouponRejectedError(self.rejection)
        return self.accepted[code]


class CartTestContext:
    """Test context for cart pricing scenarios."""

    def __init__(self):
        self.products = {}
        self.cart = CartState()
        self.coupons = CouponStub()
        self.error = None


@pytest.fixture
def ctx():
    """Fixture providing fresh test context for each scenario."""
    return CartTestContext()


# --- Given steps ---

@given(parsers.parse('a product "{product_id}" priced at "{price}"'))
def standard_product(ctx, product_id, price):
    ctx.products[product_id] = ProductRef(product_id=product_id, unit_price=float(price))


@given(parsers.parse('a bundle product "{product_id}" priced at "{price}"'))
def bundle_product(ctx, product_id, price):
    ctx.products[product_id] = ProductRef(
        product_id=product_id, unit_price=float(price), bundle_eligible=True
    )


@given(parsers.parse('the coupon service accepts "{code}" with a discount of "{discount}"'))
def coupon_accepted(ctx, code, discount):
    ctx.coupons.accepted[code] = CouponValidation(
        code=code, coupon_type=COUPON_FIXED, value=float(discount), discount=float(discount)
    )


@given(parsers.parse('the coupon service rejects codes with "{message}"'))
def coupon_rejected(ctx, message):
    ctx.coupons.rejection = message


# --- When steps ---

@when(
    parsers.re(r'I add (?P<quantity>\d+) of "(?P<product_id>[^"]+)" in size "(?P<size>[^"]+)"'),
    converters={"quantity": int},
)
def add_sized(ctx, quantity, product_id, size):
    ctx.cart = add_line(ctx.cart, ctx.products[product_id], quantity, selected_size=size)


@when(
    parsers.re(r'I add (?P<quantity>\d+) of "(?P<product_id>[^"]+)"'),
    converters={"quantity": int},
)
def add_plain(ctx, quantity, product_id):
    ctx.cart = add_line(ctx.cart, ctx.products[product_id], quantity)


@when(parsers.parse('I set the quantity of the "{product_id}" line to {quantity:d}'))
def update_quantity(ctx, product_id, quantity):
    line = next(item for item in ctx.cart.items if item.product.product_id == product_id)
    ctx.cart = set_quantity(ctx.cart, line.id, quantity)


@when(parsers.re(r'I apply coupon "(?P<code>[^"]*)"'))
def apply(ctx, code):
    try:
        ctx.cart = apply_coupon(ctx.cart, code, ctx.coupons)
    except PricingError as e:
        ctx.error = e


@when("I clear the cart")
def clear_cart(ctx):
    ctx.cart = clear(ctx.cart)


# --- Then steps ---

@then(parsers.parse('the cart total is "{total}"'))
def cart_total(ctx, total):
    assert ctx.cart.total == pytest.approx(float(total))


@then(parsers.parse('the final total is "{total}"'))
def final_total(ctx, total):
    assert ctx.cart.final_total == pytest.approx(float(total))


@then(parsers.parse("the cart holds {count:d} complete bundle"))
def complete_bundles(ctx, count):
    assert price_breakdown(ctx.cart.items, ctx.cart.pricing).complete_bundles == count


@then(parsers.re(r"the cart has (?P<count>\d+) lines?"), converters={"count": int})
def line_count(ctx, count):
    assert len(ctx.cart.items) == count


@then(parsers.parse('the applied coupon is "{code}"'))
def applied_coupon(ctx, code):
    assert ctx.error is None
    assert ctx.cart.coupon.code == code


@then(parsers.parse('applying the coupon fails with "{message}"'))
def coupon_failed(ctx, message):
    assert isinstance(ctx.error, CouponRejectedError)
    assert ctx.error.message == message


@then("no coupon is applied")
def no_coupon(ctx):
    assert ctx.cart.coupon is None
    assert ctx.cart.discount == 0.0
