"""Render finalized region aggregates as the CSV deliverable.

Column layout is fixed except for the trailing race columns, which follow
the race categories collected during aggregation.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from msa_lending.models.aggregate import AggregationResult, RegionAggregate

logger = logging.getLogger(__name__)

BASE_HEADER: tuple[str, ...] = (
    "MSA Name",
    "MSA ID",
    "Number of Loans",
    "Avg Loan Amount",
    "Avg LTV Ratio",
    "Avg Interest Rate",
    "Avg Loan Cost",
    "Avg Loan Terms (months)",
    "Avg Property Value",
    "Avg Income",
    "Avg Minority Population (percent)",
)


def format_number(value: float | int) -> str:
    """Shortest text for a number: 100.0 -> '100', 12.50 -> '12.5'."""
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def quote_name(name: str) -> str:
    """Always quote; embedded quotes are doubled."""
    return '"' + name.replace('"', '""') + '"'


def _region_row(
    region_id: str,
    region_name: str,
    agg: RegionAggregate,
    race_categories: list[str],
) -> list[str]:
    cells = [
        quote_name(region_name),
        region_id,
        str(agg.loan_count),
    ]
    cells.extend(
        format_number(v)
        for v in (
            agg.avg_loan_amount,
            agg.avg_ltv_ratio,
            agg.avg_interest_rate,
            agg.avg_loan_costs,
            agg.avg_loan_term_months,
            agg.avg_property_value,
            agg.avg_income,
            agg.avg_minority_population,
        )
    )
    cells.extend(str(agg.race_counts.get(race, 0)) for race in race_categories)
    return cells


def render_csv(
    result: AggregationResult,
    regions: Iterable[tuple[str, str]],
) -> list[str]:
    """Return CSV lines: header, then one row per listed region with data.

    Regions without any aggregated loans are left out.
    """
    race_categories = list(result.race_categories)
    lines = [",".join([*BASE_HEADER, *race_categories])]

    omitted = 0
    for region_id, region_name in regions:
        agg = result.aggregates.get(region_id)
        if agg is None:
            omitted += 1
            continue
        lines.append(",".join(_region_row(region_id, region_name, agg, race_categories)))

    if omitted:
        logger.info("Omitted %d regions with no loan records from CSV", omitted)
    return lines


def write_csv(lines: list[str], path: str | Path) -> Path:
    """Write the lines joined by newlines; parent directories are created."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Wrote %d CSV lines to %s", len(lines), path)
    return path
