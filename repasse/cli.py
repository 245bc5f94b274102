"""CLI entry point for Repasse."""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

import click

from repasse import formatters, store
from repasse.calculator import compute_result
from repasse.models import CalcMode

logger = logging.getLogger(__name__)

_MODES = {"sale": CalcMode.SALE_TO_PROFIT, "profit": CalcMode.PROFIT_TO_SALE}


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter(
            f"Invalid date format: {value!r}. Use YYYY-MM-DD."
        ) from exc


def _parse_rate(value: str) -> float:
    try:
        return float(value.strip().replace(",", "."))
    except ValueError as exc:
        raise click.BadParameter(f"Invalid rate: {value!r}.") from exc


def _overrides(**options: Any) -> dict[str, Any]:
    """Map provided CLI options onto DealInput fields, skipping unset ones."""
    money = ("car_price", "freight", "target_sale_price", "target_net_profit")
    rates = ("opportunity_rate_monthly", "tax_rate")
    dates = ("purchase_date", "sale_date")

    changes: dict[str, Any] = {}
    for name, value in options.items():
        if value is None:
            continue
        if name in money:
            changes[name] = formatters.parse_money(value)
        elif name in rates:
            changes[name] = _parse_rate(value)
        elif name in dates:
            changes[name] = _parse_date(value)
        elif name == "mode":
            changes[name] = _MODES[value]
        else:
            changes[name] = value
    return changes


@click.command()
@click.option(
    "--mode",
    type=click.Choice(sorted(_MODES)),
    help="sale: profit from a sale price; profit: sale price from a net profit",
)
@click.option("--car-price", "car_price", help="Purchase price, e.g. 50.000,00")
@click.option("--purchase-date", help="Purchase date (YYYY-MM-DD)")
@click.option("--sale-date", help="Expected sale date (YYYY-MM-DD)")
@click.option(
    "--rate", "opportunity_rate_monthly", help="Cost of capital, % per month"
)
@click.option("--freight", help="Freight and other acquisition expenses")
@click.option("--tax-rate", help="Tax on gross profit, %")
@click.option("--sale-price", "target_sale_price", help="Target sale price")
@click.option("--net-profit", "target_net_profit", help="Target net profit")
@click.option("--model", "car_model", help="Vehicle model")
@click.option("--year", "car_year", help="Vehicle year")
@click.option("--color", "car_color", help="Vehicle color")
@click.option("--origin", "car_origin", help="Where the vehicle came from")
@click.option("--quality", type=click.IntRange(1, 5), help="Quality rating 1-5")
@click.option(
    "--output",
    "output_format",
    default="table",
    type=click.Choice(["table", "json", "csv", "report"]),
    help="Output format",
)
@click.option(
    "--state-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=store.STATE_PATH,
    envvar="REPASSE_STATE_FILE",
    show_default=True,
    help="Where the last-used input is kept",
)
@click.option("--no-save", is_flag=True, help="Do not remember this input")
@click.option("--reset", is_flag=True, help="Forget the saved input and exit")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def main(
    output_format: str,
    state_file: Path,
    no_save: bool,
    reset: bool,
    verbose: bool,
    **options: Any,
) -> None:
    """Used-car resale margin calculator.

    Computes net profit and ROI from a sale price, or the sale price needed
    for a target net profit, after cost of capital, expenses and tax. Any
    option left out is taken from the last saved input.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    state_store = store.JsonFileStore(state_file)

    if reset:
        if store.clear_state(state_store):
            click.echo("Saved input cleared.")
        else:
            click.echo("No saved input.")
        return

    deal = store.load_state(state_store).replace(**_overrides(**options))
    logger.debug("Computing %s", deal)
    result = compute_result(deal)

    if result.error:
        click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)

    if not no_save:
        store.save_state(state_store, deal)

    if output_format == "json":
        click.echo(formatters.format_json(deal, result))
    elif output_format == "csv":
        click.echo(formatters.format_csv(deal, result), nl=False)
    elif output_format == "report":
        click.echo(formatters.format_report(deal, result))
    else:
        click.echo(formatters.format_table(deal, result), nl=False)


if __name__ == "__main__":
    main()
