"""Per-region aggregation of HMDA loan records.

Two phases:

1. ``fold``: one pass over the records, keeping running sums, per-field
   counts of non-numeric cells, a race tally and one minority-population
   value per census tract for every region.
2. ``finalize``: one pass over the regions turning sums into averages.

Each field is averaged over the records where that field was numeric, so
a missing ``interest_rate`` does not drag down ``avg_loan_amount``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from pydantic.alias_generators import to_camel

from msa_lending.aggregation.numeric import coerce_number, round_half_up
from msa_lending.models.aggregate import AggregationResult, RegionAggregate
from msa_lending.models.loan import NUMERIC_FIELDS, LoanRecord

logger = logging.getLogger(__name__)

# LoanRecord field -> RegionAggregate attribute holding its average
AVERAGE_FIELDS: dict[str, str] = {
    "loan_amount": "avg_loan_amount",
    "loan_to_value_ratio": "avg_ltv_ratio",
    "interest_rate": "avg_interest_rate",
    "total_loan_costs": "avg_loan_costs",
    "loan_term_months": "avg_loan_term_months",
    "property_value": "avg_property_value",
    "income": "avg_income",
}

# HMDA reports applicant income in thousands of dollars
INCOME_MULTIPLIER = 1000


@dataclass
class RegionAccumulator:
    region_id: str
    loan_count: int = 0
    sums: dict[str, float] = field(
        default_factory=lambda: dict.fromkeys(NUMERIC_FIELDS, 0.0)
    )
    excluded: dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(NUMERIC_FIELDS, 0)
    )
    # census tract -> minority population percent, last record wins
    tract_minority_population: dict[str, float] = field(default_factory=dict)
    race_counts: dict[str, int] = field(default_factory=dict)

    def add(self, record: LoanRecord) -> None:
        self.loan_count += 1
        self.race_counts[record.race_category] = (
            self.race_counts.get(record.race_category, 0) + 1
        )

        for name in NUMERIC_FIELDS:
            num = coerce_number(getattr(record, name))
            if num is None:
                self.excluded[name] += 1
            else:
                self.sums[name] += num

        # Tracts with no usable percentage count as 0
        minority = coerce_number(record.tract_minority_population_percent)
        self.tract_minority_population[record.census_tract] = minority or 0.0

    def finalize(self, region_name: str | None = None) -> RegionAggregate:
        averages: dict[str, float] = {}
        undefined: list[str] = []

        for name, attr in AVERAGE_FIELDS.items():
            total = self.sums[name]
            if name == "income":
                total = total * INCOME_MULTIPLIER

            denominator = self.loan_count - self.excluded[name]
            if denominator <= 0:
                averages[attr] = 0.0
                undefined.append(to_camel(attr))
                continue
            averages[attr] = round_half_up(total / denominator, 2)

        if undefined:
            logger.info(
                "Region %s has no numeric values for %s; reporting 0",
                self.region_id,
                ", ".join(undefined),
            )

        tracts = self.tract_minority_population
        avg_minority = (
            round_half_up(sum(tracts.values()) / len(tracts), 2) if tracts else 0.0
        )

        return RegionAggregate(
            region_id=self.region_id,
            region_name=region_name,
            loan_count=self.loan_count,
            avg_minority_population=avg_minority,
            tract_minority_population=dict(tracts),
            race_counts=dict(self.race_counts),
            undefined_averages=undefined,
            **averages,
        )


class AggregationEngine:
    """Folds LoanRecords into per-region accumulators, then finalizes once."""

    def __init__(self) -> None:
        self.accumulators: dict[str, RegionAccumulator] = {}
        # dict keeps first-seen order; values unused
        self._race_categories: dict[str, None] = {}
        self._finalized = False

    def add(self, record: LoanRecord) -> None:
        if self._finalized:
            raise RuntimeError("Aggregation already finalized; start a new engine")

        acc = self.accumulators.get(record.region_id)
        if acc is None:
            acc = RegionAccumulator(region_id=record.region_id)
            self.accumulators[record.region_id] = acc
        acc.add(record)
        self._race_categories.setdefault(record.race_category, None)

    def fold(self, records: Iterable[LoanRecord]) -> int:
        """Fold every record; returns how many were consumed."""
        count = 0
        for record in records:
            self.add(record)
            count += 1
        logger.info(
            "Folded %d loan records into %d regions", count, len(self.accumulators)
        )
        return count

    @property
    def race_categories(self) -> list[str]:
        return list(self._race_categories)

    def finalize(
        self, region_name_by_id: Mapping[str, str] | None = None
    ) -> AggregationResult:
        names = region_name_by_id or {}
        aggregates = {
            region_id: acc.finalize(names.get(region_id))
            for region_id, acc in self.accumulators.items()
        }
        self._finalized = True
        return AggregationResult(
            aggregates=aggregates,
            race_categories=self.race_categories,
        )


def aggregate_records(
    records: Iterable[LoanRecord],
    region_name_by_id: Mapping[str, str] | None = None,
) -> AggregationResult:
    """Fold and finalize in one call."""
    engine = AggregationEngine()
    engine.fold(records)
    return engine.finalize(region_name_by_id)
