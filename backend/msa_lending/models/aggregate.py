from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RegionAggregate(BaseModel):
    """Finalized per-region statistics, serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    region_id: str
    region_name: Optional[str] = None
    loan_count: int = 0
    avg_loan_amount: float = 0.0
    avg_ltv_ratio: float = 0.0
    avg_interest_rate: float = 0.0
    avg_loan_costs: float = 0.0
    avg_loan_term_months: float = 0.0
    avg_property_value: float = 0.0
    avg_income: float = 0.0
    avg_minority_population: float = 0.0
    tract_minority_population: dict[str, float] = {}
    race_counts: dict[str, int] = {}
    # Output keys of averages whose denominator was zero (reported as 0.0)
    undefined_averages: list[str] = []


class AggregationResult(BaseModel):
    aggregates: dict[str, RegionAggregate] = {}
    race_categories: list[str] = []

    @property
    def total_loan_count(self) -> int:
        return sum(agg.loan_count for agg in self.aggregates.values())
