from msa_lending.services.pipeline import AggregationPipeline


def get_pipeline() -> AggregationPipeline:
    """FastAPI dependency returning the process-wide aggregation pipeline."""
    return AggregationPipeline.get()
