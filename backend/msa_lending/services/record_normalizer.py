"""Project raw HMDA loan rows onto LoanRecord.

The data browser CSV carries ~99 columns; we keep ten plus the region id.
The region column is matched by partial, case-insensitive header name
because its source name (``derived_msa-md``) is not a valid identifier.
"""
from __future__ import annotations

import logging
from io import StringIO
from typing import Any, Iterable, Iterator, Mapping

import pandas as pd
from pydantic import ValidationError

from msa_lending.models.loan import LoanRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Column mapping
# ---------------------------------------------------------------------------
REGION_COLUMN_PATTERN = "msa-md"

# LoanRecord field -> HMDA column
_SOURCE_COLUMNS: dict[str, str] = {
    "census_tract": "census_tract",
    "race_category": "derived_race",
    "loan_amount": "loan_amount",
    "loan_to_value_ratio": "loan_to_value_ratio",
    "interest_rate": "interest_rate",
    "total_loan_costs": "total_loan_costs",
    "loan_term_months": "loan_term",
    "property_value": "property_value",
    "income": "income",
    "tract_minority_population_percent": "tract_minority_population_percent",
}

CSV_CHUNK_SIZE = 100_000


def resolve_region_column(headers: Iterable[str]) -> str | None:
    """Return the first header containing ``msa-md`` (case-insensitive)."""
    for header in headers:
        if REGION_COLUMN_PATTERN in str(header).lower().strip():
            return header
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value != value:  # NaN check
        return ""
    return str(value)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def normalize_record(
    row: Mapping[str, Any], region_column: str | None = None
) -> LoanRecord:
    """Keep the fields of interest from one raw row; missing cells become ''."""
    if region_column is None:
        region_column = resolve_region_column(row.keys())

    values = {field: _text(row.get(column)) for field, column in _SOURCE_COLUMNS.items()}
    values["region_id"] = _text(row.get(region_column)) if region_column else ""
    return LoanRecord(**values)


def normalize_records(rows: Iterable[Mapping[str, Any]]) -> Iterator[LoanRecord]:
    """Stream normalized records, resolving the region column once."""
    region_column: str | None = None
    resolved = False
    for row in rows:
        if not resolved:
            region_column = resolve_region_column(row.keys())
            resolved = True
            if region_column is None:
                logger.warning("No %s column in loan rows", REGION_COLUMN_PATTERN)
        yield normalize_record(row, region_column)


def read_loan_csv(text: str, chunk_size: int = CSV_CHUNK_SIZE) -> Iterator[LoanRecord]:
    """Parse HMDA CSV text into LoanRecords, loading only the kept columns.

    Raises ValueError on empty text or when no region column exists.
    """
    if not text or not text.strip():
        raise ValueError("Loan CSV is empty")

    headers = list(pd.read_csv(StringIO(text), nrows=0).columns)
    region_column = resolve_region_column(headers)
    if region_column is None:
        raise ValueError(
            f"Cannot find a region id column. Available columns: {headers}"
        )

    missing = [c for c in _SOURCE_COLUMNS.values() if c not in headers]
    if missing:
        logger.warning("Loan CSV lacks columns %s; treating them as blank", missing)

    keep = set(_SOURCE_COLUMNS.values()) | {region_column}
    with pd.read_csv(
        StringIO(text),
        dtype=str,
        keep_default_na=False,
        usecols=lambda c: c in keep,
        chunksize=chunk_size,
    ) as reader:
        for chunk in reader:
            for row in chunk.to_dict("records"):
                yield normalize_record(row, region_column)


def records_to_json(records: Iterable[LoanRecord]) -> list[dict[str, str]]:
    """Serializable form used for the derived-record cache."""
    return [record.model_dump() for record in records]


def records_from_json(data: Any) -> list[LoanRecord]:
    """Rebuild records from the derived-record cache.

    Raises ValueError when the payload is not a list of record objects.
    """
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of loan records, got {type(data).__name__}")
    try:
        return [LoanRecord.model_validate(item) for item in data]
    except ValidationError as e:
        raise ValueError(f"Malformed loan record in cache: {e}") from e
