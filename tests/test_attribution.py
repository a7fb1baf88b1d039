"""Tests for sale fee attribution."""

import pytest

from storefront_pricing.earnings import OrderLine, attribute_sale, cost_of_goods_for_order, margin_percentage


class TestAttributeSale:
    """Tests for attribute_sale."""

    def test_reference_sale(self) -> None:
        """89.99 sale, 35.60 COGS, 3.5% fee, 35% founder share."""
        result = attribute_sale(89.99, 35.60, 0.035, 0.35)
        assert result.processor_fee == pytest.approx(3.14965)
        assert result.gross_profit == pytest.approx(51.24, abs=0.005)
        assert result.founder_share == pytest.approx(17.93, abs=0.005)
        assert result.retained_earnings == pytest.approx(33.31, abs=0.005)
        assert result.founder_share_rate == 0.35

    def test_conservation(self) -> None:
        """Sale splits into COGS, fee and gross profit with nothing left over."""
        result = attribute_sale(156.50, 78.25, 0.035, 0.35)
        assert result.cost_of_goods + result.processor_fee + result.gross_profit == pytest.approx(
            result.sale_amount, abs=1e-9
        )
        assert result.founder_share + result.retained_earnings == pytest.approx(result.gross_profit, abs=1e-9)

    def test_loss_making_sale_not_clamped(self) -> None:
        """COGS above the sale yields negative profit and a negative founder share."""
        result = attribute_sale(20.0, 30.0, 0.035, 0.35)
        assert result.gross_profit == pytest.approx(-10.7)
        assert result.founder_share == pytest.approx(-3.745)
        assert result.retained_earnings < 0

    def test_deterministic(self) -> None:
        """Identical inputs give identical breakdowns."""
        assert attribute_sale(245.0, 110.25, 0.035, 0.35) == attribute_sale(245.0, 110.25, 0.035, 0.35)


class TestCostOfGoodsForOrder:
    """Tests for summing order COGS."""

    def test_sums_per_unit_cogs(self) -> None:
        """COGS is per unit times quantity, summed over lines."""
        lines = [OrderLine("tee", 2), OrderLine("hoodie", 1)]
        cogs = {"tee": 15.50, "hoodie": 32.00}
        assert cost_of_goods_for_order(lines, cogs) == pytest.approx(63.0)

    def test_missing_products_contribute_nothing(self) -> None:
        """Lines without COGS data are skipped."""
        lines = [OrderLine("tee", 1), OrderLine("mystery", 4)]
        assert cost_of_goods_for_order(lines, {"tee": 15.50}) == pytest.approx(15.50)

    def test_empty_order(self) -> None:
        """No lines, no COGS."""
        assert cost_of_goods_for_order([], {"tee": 1.0}) == 0


class TestMarginPercentage:
    """Tests for margin_percentage."""

    def test_margin_on_revenue(self) -> None:
        """Margin is profit over revenue."""
        assert margin_percentage(100.0, 60.0) == pytest.approx(40.0)

    def test_zero_revenue(self) -> None:
        """No revenue means no margin rather than a division error."""
        assert margin_percentage(0.0, 10.0) == 0.0
