"""Aggregate data API: per-region JSON and the CSV deliverable."""
from fastapi import APIRouter, Depends

from msa_lending.api.deps import get_pipeline
from msa_lending.models.aggregate import RegionAggregate
from msa_lending.services.pipeline import AggregationPipeline
from msa_lending.services.query_service import get_aggregate, get_aggregate_csv

router = APIRouter(tags=["aggregates"])


@router.get("/aggregateData", response_model=list[RegionAggregate])
def aggregate_data(pipeline: AggregationPipeline = Depends(get_pipeline)):
    """Per-region loan statistics; empty until the pipeline has finished."""
    return get_aggregate(pipeline)


@router.get("/aggregateCsvData", response_model=list[str])
def aggregate_csv_data(pipeline: AggregationPipeline = Depends(get_pipeline)):
    """CSV deliverable as a list of lines, header first."""
    return get_aggregate_csv(pipeline)
