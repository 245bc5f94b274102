"""Tests for deal input records."""

from __future__ import annotations

from datetime import date

from repasse.models import (
    CalcMode,
    CalcResult,
    DealInput,
    clamp_quality,
    default_input,
    to_amount,
)


class TestToAmount:
    def test_numbers(self) -> None:
        assert to_amount(3) == 3.0
        assert to_amount("12.5") == 12.5

    def test_missing_or_bad(self) -> None:
        assert to_amount(None) == 0.0
        assert to_amount("abc") == 0.0
        assert to_amount(float("nan")) == 0.0
        assert to_amount(True) == 0.0


class TestClampQuality:
    def test_range(self) -> None:
        assert clamp_quality(0) == 1
        assert clamp_quality("4") == 4
        assert clamp_quality(9) == 5

    def test_unusable_values(self) -> None:
        assert clamp_quality(float("inf")) == 3
        assert clamp_quality(None) == 3
        assert clamp_quality("x") == 3


class TestDefaultInput:
    def test_defaults(self) -> None:
        deal = default_input(date(2024, 1, 10))
        assert deal.mode == CalcMode.SALE_TO_PROFIT
        assert deal.car_price == 0.0
        assert deal.freight == 0.0
        assert deal.target_sale_price == 0.0
        assert deal.target_net_profit == 0.0
        assert deal.opportunity_rate_monthly == 1.0
        assert deal.tax_rate == 15.0
        assert deal.purchase_date == date(2024, 1, 10)
        assert deal.sale_date == date(2024, 1, 25)
        assert deal.quality == 3


class TestDealInputDict:
    def test_to_dict(self) -> None:
        deal = default_input(date(2024, 1, 10)).replace(car_model="Gol")
        data = deal.to_dict()
        assert data["mode"] == "SALE_TO_PROFIT"
        assert data["purchase_date"] == "2024-01-10"
        assert data["car_model"] == "Gol"

    def test_from_dict_loose(self) -> None:
        deal = DealInput.from_dict(
            {
                "mode": "PROFIT_TO_SALE",
                "car_price": "30000",
                "freight": None,
                "tax_rate": "x",
                "purchase_date": "2024-01-10",
                "sale_date": 20240125,
                "quality": 9,
            }
        )
        assert deal.mode == CalcMode.PROFIT_TO_SALE
        assert deal.car_price == 30000.0
        assert deal.freight == 0.0
        assert deal.tax_rate == 0.0
        assert deal.opportunity_rate_monthly == 1.0
        assert deal.purchase_date == "2024-01-10"
        assert deal.sale_date == ""
        assert deal.quality == 5

    def test_from_dict_unknown_mode(self) -> None:
        assert DealInput.from_dict({"mode": "??"}).mode == CalcMode.SALE_TO_PROFIT


class TestCalcResult:
    def test_failed_is_zeroed(self) -> None:
        result = CalcResult.failed("invalid dates")
        assert result.error == "invalid dates"
        assert not result.ok
        assert result.days == 0
        assert result.roi == 0.0
