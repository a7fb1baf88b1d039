"""Pricing and fee configuration.

Unit convention: a field named ``*_rate`` is a 0-1 fraction, a field
named ``*_percentage`` is a 0-100 percentage.

Environment variables:
    STOREFRONT_BUNDLE_SIZE: units per bundle (default 3)
    STOREFRONT_BUNDLE_UNIT_PRICE: per-unit price inside the bundle pool (default 25.00)
    STOREFRONT_PLUS_SIZE_SURCHARGE: flat charge per plus-size unit (default 2.50)
    STOREFRONT_PROCESSOR_FEE_RATE: payment processor cut of a sale (default 0.035)
    STOREFRONT_FOUNDER_SHARE_RATE: founder cut of gross profit (default 0.35)
"""

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from .errors import ConfigError

T = TypeVar("T")

ENV_BUNDLE_SIZE = "STOREFRONT_BUNDLE_SIZE"
ENV_BUNDLE_UNIT_PRICE = "STOREFRONT_BUNDLE_UNIT_PRICE"
ENV_PLUS_SIZE_SURCHARGE = "STOREFRONT_PLUS_SIZE_SURCHARGE"
ENV_PROCESSOR_FEE_RATE = "STOREFRONT_PROCESSOR_FEE_RATE"
ENV_FOUNDER_SHARE_RATE = "STOREFRONT_FOUNDER_SHARE_RATE"


def _env(name: str, default: T, parse: Callable[[str], T]) -> T:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return parse(raw)
    except ValueError as e:
        raise ConfigError(name, raw) from e


@dataclass(frozen=True)
class PricingConfig:
    """Cart pricing rules."""

    bundle_size: int = 3
    bundle_unit_price: float = 25.0
    plus_size_surcharge: float = 2.5

    @classmethod
    def from_env(cls) -> "PricingConfig":
        """Load pricing rules from the environment with defaults."""
        return cls(
            bundle_size=_env(ENV_BUNDLE_SIZE, cls.bundle_size, int),
            bundle_unit_price=_env(ENV_BUNDLE_UNIT_PRICE, cls.bundle_unit_price, float),
            plus_size_surcharge=_env(ENV_PLUS_SIZE_SURCHARGE, cls.plus_size_surcharge, float),
        )


@dataclass(frozen=True)
class FeeConfig:
    """Fee split applied to completed sales."""

    processor_fee_rate: float = 0.035
    founder_share_rate: float = 0.35

    @classmethod
    def from_env(cls) -> "FeeConfig":
        """Load fee rates from the environment with defaults."""
        return cls(
            processor_fee_rate=_env(ENV_PROCESSOR_FEE_RATE, cls.processor_fee_rate, float),
            founder_share_rate=_env(ENV_FOUNDER_SHARE_RATE, cls.founder_share_rate, float),
        )


DEFAULT_PRICING = PricingConfig()
DEFAULT_FEES = FeeConfig()
