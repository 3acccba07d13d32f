from fastapi import APIRouter, Depends

from msa_lending.api.deps import get_pipeline
from msa_lending.services.pipeline import AggregationPipeline

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(pipeline: AggregationPipeline = Depends(get_pipeline)):
    return {
        "status": "ok",
        "pipeline": pipeline.get_status(),
    }
