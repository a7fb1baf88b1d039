"""Shared fixtures for storefront pricing tests."""

import logging

import pytest
import structlog
from google.protobuf.timestamp_pb2 import Timestamp

from storefront_pricing.cart import CartState, ProductRef
from storefront_pricing.coupons import CouponValidation


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep structlog output out of test runs."""
    structlog.configure(
        processors=[],
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        logger_factory=structlog.ReturnLoggerFactory(),
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def tee() -> ProductRef:
    return ProductRef(product_id="tee", unit_price=20.0, name="Custom T-Shirt")


@pytest.fixture
def hoodie() -> ProductRef:
    return ProductRef(product_id="hoodie", unit_price=45.0, name="Custom Hoodie")


@pytest.fixture
def bundle_tee() -> ProductRef:
    return ProductRef(product_id="bundle-tee", unit_price=12.0, bundle_eligible=True)


@pytest.fixture
def bundle_tank() -> ProductRef:
    return ProductRef(product_id="bundle-tank", unit_price=10.0, bundle_eligible=True)


@pytest.fixture
def empty_cart() -> CartState:
    return CartState()


class StubValidator:
    """CouponValidator that returns a canned result or raises a canned error."""

    def __init__(self, result: CouponValidation = None, error: Exception = None):
        self.result = result
        self.error = error
        self.calls = []

    def validate(self, code, order_total, user_id=None):
        self.calls.append((code, order_total, user_id))
        if self.error is not None:
            raise self.error
        return self.result


class FixedClock:
    """Clock returning a settable Timestamp."""

    def __init__(self, seconds: int = 1_736_500_000):
        self.seconds = seconds

    def __call__(self) -> Timestamp:
        return Timestamp(seconds=self.seconds)

    def advance(self, seconds: int) -> None:
        self.seconds += seconds


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def stub_validator():
    """Factory for StubValidator instances."""
    return StubValidator
