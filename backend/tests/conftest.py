import pytest

from msa_lending.services.pipeline import AggregationPipeline


@pytest.fixture(autouse=True)
def _reset_pipeline():
    """Each test starts with a fresh process-wide pipeline."""
    AggregationPipeline.reset()
    yield
    AggregationPipeline.reset()
