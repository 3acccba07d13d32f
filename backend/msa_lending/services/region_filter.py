"""Select metro areas whose average household income is under a threshold."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from msa_lending.aggregation.numeric import parse_number
from msa_lending.models.region import RegionIncomeRecord, RegionSelection

logger = logging.getLogger(__name__)

DEFAULT_INCOME_THRESHOLD = 50000


def to_income_record(row: Sequence[Any]) -> RegionIncomeRecord | None:
    """Map a Census row ``[name, income, region_id]`` to a record.

    Returns None for rows too short to carry all three cells.
    """
    if len(row) < 3:
        return None
    name, income, region_id = row[0], row[1], row[2]
    return RegionIncomeRecord(
        region_id=str(region_id),
        region_name="" if name is None else str(name),
        avg_household_income=parse_number(income),
    )


def select_regions(
    rows: Iterable[Sequence[Any]],
    threshold: float = DEFAULT_INCOME_THRESHOLD,
) -> RegionSelection:
    """Keep regions with ``income < threshold``, in input order.

    Non-numeric incomes never qualify, so the header row of the Census
    payload falls out on its own.
    """
    selected: list[tuple[str, str]] = []
    names: dict[str, str] = {}
    skipped = 0

    for row in rows:
        record = to_income_record(row)
        if record is None:
            skipped += 1
            continue
        income = record.avg_household_income
        if income is None or not income < threshold:
            continue
        selected.append((record.region_id, record.region_name))
        names.setdefault(record.region_id, record.region_name)

    if skipped:
        logger.warning("Skipped %d malformed income rows", skipped)
    logger.info("Selected %d regions with income under %s", len(selected), threshold)
    return RegionSelection(regions_under_threshold=selected, region_name_by_id=names)
