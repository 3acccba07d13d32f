"""Aggregation engine: numeric coercion, per-region fold, and finalization."""
from msa_lending.aggregation.numeric import coerce_number, parse_number, round_half_up
from msa_lending.aggregation.engine import (
    AVERAGE_FIELDS,
    AggregationEngine,
    RegionAccumulator,
    aggregate_records,
)

__all__ = [
    "AVERAGE_FIELDS",
    "AggregationEngine",
    "RegionAccumulator",
    "aggregate_records",
    "coerce_number",
    "parse_number",
    "round_half_up",
]
