"""Read-only views of the pipeline output for the HTTP layer.

Both queries answer with an empty list until the pipeline is ready, and
on any failure while reading, instead of raising.
"""
from __future__ import annotations

import logging

from msa_lending.models.aggregate import RegionAggregate
from msa_lending.services.pipeline import AggregationPipeline

logger = logging.getLogger(__name__)


def get_aggregate(pipeline: AggregationPipeline | None = None) -> list[RegionAggregate]:
    """Finalized aggregates, each carrying its region id and name."""
    pipeline = pipeline or AggregationPipeline.get()
    if not pipeline.is_ready:
        return []
    try:
        names = pipeline.selection.region_name_by_id
        return [
            agg if agg.region_name is not None
            else agg.model_copy(update={"region_name": names.get(region_id)})
            for region_id, agg in pipeline.result.aggregates.items()
        ]
    except Exception as e:
        logger.error("Failed to read aggregates: %s", e, exc_info=True)
        return []


def get_aggregate_csv(pipeline: AggregationPipeline | None = None) -> list[str]:
    """Rendered CSV lines, header first."""
    pipeline = pipeline or AggregationPipeline.get()
    if not pipeline.is_ready:
        return []
    try:
        return list(pipeline.csv_lines)
    except Exception as e:
        logger.error("Failed to read aggregate CSV: %s", e, exc_info=True)
        return []
