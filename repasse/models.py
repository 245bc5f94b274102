"""Data models for deal inputs and pricing results."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Any


class CalcMode(str, Enum):
    SALE_TO_PROFIT = "SALE_TO_PROFIT"
    PROFIT_TO_SALE = "PROFIT_TO_SALE"


DEFAULT_OPPORTUNITY_RATE = 1.0
DEFAULT_TAX_RATE = 15.0
DEFAULT_HOLDING_DAYS = 15
DEFAULT_QUALITY = 3

NUMERIC_FIELDS = (
    "car_price",
    "opportunity_rate_monthly",
    "freight",
    "tax_rate",
    "target_sale_price",
    "target_net_profit",
)
TEXT_FIELDS = ("car_model", "car_year", "car_color", "car_origin")


def to_amount(value: Any) -> float:
    """Coerce a loose value to float. Missing or unparseable values are 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def clamp_quality(value: Any) -> int:
    try:
        rating = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_QUALITY
    return min(max(rating, 1), 5)


@dataclass(frozen=True, slots=True)
class DealInput:
    mode: CalcMode = CalcMode.SALE_TO_PROFIT
    car_price: float = 0.0
    purchase_date: date | str = ""
    sale_date: date | str = ""
    opportunity_rate_monthly: float = DEFAULT_OPPORTUNITY_RATE
    freight: float = 0.0
    tax_rate: float = DEFAULT_TAX_RATE
    target_sale_price: float = 0.0
    target_net_profit: float = 0.0
    # Descriptive only; the pricing engine never reads these.
    car_model: str = ""
    car_year: str = ""
    car_color: str = ""
    car_origin: str = ""
    quality: int = DEFAULT_QUALITY

    def replace(self, **changes: Any) -> DealInput:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        for key in ("purchase_date", "sale_date"):
            value = data[key]
            data[key] = value.isoformat() if isinstance(value, date) else value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DealInput:
        """Build a record from a loose mapping such as persisted JSON.

        Numbers fall back to 0, unknown modes to SALE_TO_PROFIT and the
        quality rating is clamped to 1..5. Dates are kept as given so the
        engine can report them as invalid.
        """
        try:
            mode = CalcMode(data.get("mode"))
        except ValueError:
            mode = CalcMode.SALE_TO_PROFIT
        kwargs: dict[str, Any] = {"mode": mode}
        for key in NUMERIC_FIELDS:
            if key in data:
                kwargs[key] = to_amount(data[key])
        for key in TEXT_FIELDS:
            kwargs[key] = str(data.get(key) or "")
        for key in ("purchase_date", "sale_date"):
            value = data.get(key)
            kwargs[key] = value if isinstance(value, (date, str)) else ""
        kwargs["quality"] = clamp_quality(data.get("quality", DEFAULT_QUALITY))
        return cls(**kwargs)


def default_input(today: date | None = None) -> DealInput:
    """Input used when nothing has been saved yet."""
    today = today or date.today()
    return DealInput(
        purchase_date=today,
        sale_date=today + timedelta(days=DEFAULT_HOLDING_DAYS),
    )


@dataclass(slots=True)
class CalcResult:
    days: int = 0
    opp_cost: float = 0.0
    inv_base: float = 0.0
    total_cost: float = 0.0
    sale_price: float = 0.0
    gross_profit: float = 0.0
    tax_amount: float = 0.0
    net_profit: float = 0.0
    roi: float = 0.0
    opportunity_rate_annual: float = 0.0
    error: str | None = field(default=None)

    @classmethod
    def failed(cls, reason: str) -> CalcResult:
        return cls(error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None
