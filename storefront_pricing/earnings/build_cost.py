"""Manufacturing cost breakdown and suggested pricing."""

from dataclasses import dataclass
from typing import Optional

from ..errors import MarginDomainError


@dataclass(frozen=True)
class CostRates:
    price_per_gram: float
    energy_rate_per_hour: float
    labor_rate_per_hour: float
    flat_packaging_cost: float
    overhead_percentage: float
    default_margin_percentage: float = 25.0


@dataclass(frozen=True)
class CostBreakdown:
    duration_hours: float
    mass_grams: float
    material_cost: float
    energy_cost: float
    labor_cost: float
    packaging_cost: float
    overhead_cost: float
    total_cost: float
    margin_percentage: float
    suggested_price: float

    @property
    def direct_cost(self) -> float:
        return self.material_cost + self.energy_cost + self.labor_cost + self.packaging_cost


def price_from_margin(cost: float, margin_percentage: float) -> float:
    """Price that yields ``margin_percentage`` margin on price (not markup).

    Raises:
        MarginDomainError: margin is 100% or more, where no price exists.
    """
    if margin_percentage >= 100:
        raise MarginDomainError(margin_percentage)
    return cost / (1 - margin_percentage / 100)


def calculate_build_cost(
    rates: CostRates,
    duration_hours: float,
    mass_grams: float,
    labor_override_hours: Optional[float] = None,
    margin_percentage: Optional[float] = None,
) -> CostBreakdown:
    """Estimate the cost of a single build and a price for it.

    Labor is billed on ``labor_override_hours`` when given (zero included),
    otherwise on the build duration. Overhead is a percentage of the four
    direct costs. No rounding is applied.
    """
    if margin_percentage is None:
        margin_percentage = rates.default_margin_percentage
    labor_hours = duration_hours if labor_override_hours is None else labor_override_hours

    material_cost = mass_grams * rates.price_per_gram
    energy_cost = duration_hours * rates.energy_rate_per_hour
    labor_cost = labor_hours * rates.labor_rate_per_hour
    packaging_cost = rates.flat_packaging_cost

    direct_costs = material_cost + energy_cost + labor_cost + packaging_cost
    overhead_cost = direct_costs * (rates.overhead_percentage / 100)
    total_cost = direct_costs + overhead_cost

    return CostBreakdown(
        duration_hours=duration_hours,
        mass_grams=mass_grams,
        material_cost=material_cost,
        energy_cost=energy_cost,
        labor_cost=labor_cost,
        packaging_cost=packaging_cost,
        overhead_cost=overhead_cost,
        total_cost=total_cost,
        margin_percentage=margin_percentage,
        suggested_price=price_from_margin(total_cost, margin_percentage),
    )


def validate_cost_rates(rates: CostRates) -> list[str]:
    """Return human-readable problems with a set of cost rates."""
    errors = []

    if rates.price_per_gram <= 0:
        errors.append("Price per gram must be greater than 0")
    if rates.energy_rate_per_hour <= 0:
        errors.append("Energy rate per hour must be greater than 0")
    if rates.labor_rate_per_hour <= 0:
        errors.append("Labor rate per hour must be greater than 0")
    if not 0 <= rates.overhead_percentage <= 100:
        errors.append("Overhead percentage must be between 0 and 100")
    if not 0 <= rates.default_margin_percentage <= 100:
        errors.append("Default margin percentage must be between 0 and 100")

    return errors
