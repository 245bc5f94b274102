"""Output formatters: pt-BR money/percent text, deal report, table, JSON and CSV."""

from __future__ import annotations

import csv
import io
import json
import math
import re
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from repasse.models import CalcMode, CalcResult, DealInput

CURRENCY_SYMBOL = "R$"
# pt-BR currency text separates symbol and amount with a no-break space.
SYMBOL_SEPARATOR = "\u00a0"

_PT_BR_SEPARATORS = str.maketrans({",": ".", ".": ","})
_MONEY_CHARS = re.compile(r"[^0-9.,-]")


def _or_zero(value: float | None) -> float:
    """None and NaN read as 0, like an empty field. Infinities pass through."""
    if value is None or math.isnan(value):
        return 0.0
    return value


def format_number(value: float | None) -> str:
    """Two-decimal number with pt-BR grouping: 1234.5 -> '1.234,50'."""
    value = _or_zero(value)
    text = f"{abs(value):,.2f}".translate(_PT_BR_SEPARATORS)
    return f"-{text}" if value < 0 else text


def format_currency(amount: float | None) -> str:
    """Brazilian real: 1234.5 -> 'R$ 1.234,50' (no-break space), '-R$ 10,00'."""
    amount = _or_zero(amount)
    text = f"{CURRENCY_SYMBOL}{SYMBOL_SEPARATOR}{format_number(abs(amount))}"
    return f"-{text}" if amount < 0 else text


def format_percent(value: float | None) -> str:
    """pt-BR percentage with 2 decimals: 11.4246 -> '11,42%'."""
    return f"{format_number(value)}%"


def parse_money(text: str | None) -> float:
    """Read money typed the Brazilian way ('50.000,00' -> 50000.0).

    Dots are thousands separators and the comma is the decimal mark.
    Anything that does not parse is 0.
    """
    cleaned = _MONEY_CHARS.sub("", text or "")
    normalized = cleaned.replace(".", "").replace(",", ".", 1)
    try:
        return float(normalized)
    except ValueError:
        return 0.0


def _rate(value: float | None) -> str:
    """Rate as typed by the user, without trailing zeros: 1.0 -> '1', 1.5 -> '1.5'."""
    text = repr(float(_or_zero(value)))
    return text[:-2] if text.endswith(".0") else text


def format_report(deal: DealInput, result: CalcResult) -> str:
    """Plain-text deal summary for sharing over chat."""
    lines = [
        "💎 *AUTO REPASSE*",
        "---------------------------",
        f"🚗 *VEÍCULO:* {deal.car_model or 'NÃO INFORMADO'}",
        f"📅 *ANO:* {deal.car_year or '-'}",
        f"🎨 *COR:* {deal.car_color or '-'}",
        f"📍 *ORIGEM:* {deal.car_origin or '-'}",
        f"⭐ *NOTA QUALIDADE:* {deal.quality}/5",
        "---------------------------",
        f"💰 *VALOR COMPRA:* {format_currency(deal.car_price)}",
        f"📦 *GASTOS/FRETE:* {format_currency(deal.freight)}",
        f"📈 *TAXA CAPITAL:* {_rate(deal.opportunity_rate_monthly)}% a.m.",
        f"💸 *IMP. SOBRE LUCRO:* {_rate(deal.tax_rate)}%",
        f"📅 *TEMPO DE PÁTIO:* {result.days} Dias",
        "---------------------------",
        f"🏷️ *VENDA SUGERIDA:* {format_currency(result.sale_price)}",
        f"💰 *LUCRO LÍQUIDO:* {format_currency(result.net_profit)}",
        f"🚀 *RETORNO (ROI):* {format_percent(result.roi)}",
        "---------------------------",
        "_Gerado por Auto Repasse_",
    ]
    if result.error:
        lines.insert(-1, f"⚠ {result.error}")
    return "\n".join(lines)


def _mode_label(mode: CalcMode) -> str:
    if mode == CalcMode.PROFIT_TO_SALE:
        return "target net profit -> sale price"
    return "target sale price -> net profit"


def format_table(deal: DealInput, result: CalcResult) -> str:
    """Format the deal breakdown as a Rich table rendered to string."""
    buf = io.StringIO()
    rich_console = Console(file=buf, width=80, no_color=True)

    header = (
        f"Resale Margin\n"
        f"=============\n"
        f"Vehicle: {deal.car_model or '-'}\n"
        f"Mode: {_mode_label(deal.mode)}\n"
    )
    rich_console.print(header, end="")

    if result.error:
        rich_console.print(f"\nError: {result.error}")
        return buf.getvalue()

    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("Item", style="bold")
    table.add_column("Value", justify="right")

    rows = [
        ("Purchase price", format_currency(deal.car_price)),
        ("Holding period", f"{result.days} days"),
        ("Capital rate (annual)", format_percent(result.opportunity_rate_annual)),
        ("Opportunity cost", format_currency(result.opp_cost)),
        ("Invested base", format_currency(result.inv_base)),
        ("Freight / expenses", format_currency(deal.freight)),
        ("Total cost", format_currency(result.total_cost)),
        ("Sale price", format_currency(result.sale_price)),
        ("Gross profit", format_currency(result.gross_profit)),
        ("Tax", format_currency(result.tax_amount)),
        ("Net profit", format_currency(result.net_profit)),
        ("ROI", format_percent(result.roi)),
    ]
    for item, value in rows:
        table.add_row(item, value)

    rich_console.print(table)
    return buf.getvalue()


_RESULT_FIELDS = [
    "days",
    "opp_cost",
    "inv_base",
    "total_cost",
    "sale_price",
    "gross_profit",
    "tax_amount",
    "net_profit",
    "roi",
    "opportunity_rate_annual",
]


def format_json(deal: DealInput, result: CalcResult) -> str:
    """Format input and result as JSON."""
    data: dict[str, Any] = {
        "input": deal.to_dict(),
        "result": {
            "days": result.days,
            **{
                name: round(getattr(result, name), 2)
                for name in _RESULT_FIELDS
                if name != "days"
            },
        },
    }
    if result.error:
        data["error"] = result.error
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_csv(deal: DealInput, result: CalcResult) -> str:
    """Format the result as a single CSV row."""
    buf = io.StringIO()
    fields = ["mode", "car_model", *_RESULT_FIELDS, "error"]

    writer = csv.DictWriter(buf, fieldnames=fields)
    writer.writeheader()

    row: dict[str, str] = {
        "mode": deal.mode.value,
        "car_model": deal.car_model,
        "days": str(result.days),
        "error": result.error or "",
    }
    for name in _RESULT_FIELDS:
        if name != "days":
            row[name] = f"{getattr(result, name):.2f}"
    writer.writerow(row)

    return buf.getvalue()
