"""Pure pricing functions for resale margin planning."""

from __future__ import annotations

from datetime import date, datetime

from repasse.models import CalcMode, CalcResult, DealInput, to_amount

INVALID_DATES = "invalid dates"
INVERTED_DATE_RANGE = "sale date precedes purchase date"


def parse_calendar_date(value: date | str) -> date | None:
    """Calendar date from a date object or an ISO string, None if unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        return None


def holding_days(purchase: date, sale: date) -> int:
    """Whole days between purchase and sale. Negative if sale comes first."""
    return (sale - purchase).days


def annual_rate(monthly_pct: float) -> float:
    """Simple annual rate from a monthly percentage (1.0 -> 12.0)."""
    return monthly_pct * 12


def daily_rate(annual_pct: float) -> float:
    """Daily rate as a decimal, annual percentage split linearly over 365 days."""
    return (annual_pct / 100) / 365


def opportunity_cost(price: float, rate_per_day: float, days: int) -> float:
    """Simple interest on the purchase price for the holding period."""
    return price * rate_per_day * days


def tax_on(gross_profit: float, tax_pct: float) -> float:
    """Tax due on a gross profit. Losses are never taxed."""
    if gross_profit > 0:
        return gross_profit * (tax_pct / 100)
    return 0.0


def gross_from_net(net_profit: float, tax_pct: float) -> float:
    """Gross profit that leaves `net_profit` after tax.

    With a tax rate of 100% or more there is no positive factor to divide
    by, so the net figure is used as the gross one.
    """
    factor = 1 - (tax_pct / 100)
    if factor > 0:
        return net_profit / factor
    return net_profit


def roi(net_profit: float, invested: float) -> float:
    """Return on investment as a percentage, 0 when nothing was invested."""
    if invested > 0:
        return (net_profit / invested) * 100
    return 0.0


def compute_result(deal: DealInput) -> CalcResult:
    """Solve a deal for profit (SALE_TO_PROFIT) or for sale price (PROFIT_TO_SALE).

    Date problems come back as a result with `error` set and all figures
    zeroed; nothing is raised.
    """
    purchase = parse_calendar_date(deal.purchase_date)
    sale = parse_calendar_date(deal.sale_date)
    if purchase is None or sale is None:
        return CalcResult.failed(INVALID_DATES)

    days = holding_days(purchase, sale)
    if days < 0:
        return CalcResult.failed(INVERTED_DATE_RANGE)

    car_price = to_amount(deal.car_price)
    tax_pct = to_amount(deal.tax_rate)

    rate_annual = annual_rate(to_amount(deal.opportunity_rate_monthly))
    opp_cost = opportunity_cost(car_price, daily_rate(rate_annual), days)
    inv_base = car_price + opp_cost
    total_cost = inv_base + to_amount(deal.freight)

    if deal.mode == CalcMode.PROFIT_TO_SALE:
        net_profit = to_amount(deal.target_net_profit)
        gross_profit = gross_from_net(net_profit, tax_pct)
        sale_price = total_cost + gross_profit
        tax_amount = tax_on(gross_profit, tax_pct)
    else:
        sale_price = to_amount(deal.target_sale_price)
        gross_profit = sale_price - total_cost
        tax_amount = tax_on(gross_profit, tax_pct)
        net_profit = gross_profit - tax_amount

    return CalcResult(
        days=days,
        opp_cost=opp_cost,
        inv_base=inv_base,
        total_cost=total_cost,
        sale_price=sale_price,
        gross_profit=gross_profit,
        tax_amount=tax_amount,
        net_profit=net_profit,
        roi=roi(net_profit, inv_base),
        opportunity_rate_annual=rate_annual,
    )
