"""Aggregation pipeline: fetch, filter, normalize, aggregate, render.

One ``AggregationPipeline`` per process owns every stage output.  Stages
run in order on a single thread; outputs are published and the status
flips to ``ready`` only after the last stage succeeds, so readers never
see a half-built result.
"""
from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Any, Protocol

from msa_lending.aggregation.engine import aggregate_records
from msa_lending.clients.census import CensusIncomeClient
from msa_lending.clients.hmda import HmdaLoanClient
from msa_lending.config import settings
from msa_lending.models.aggregate import AggregationResult
from msa_lending.models.loan import LoanRecord
from msa_lending.models.region import RegionSelection
from msa_lending.services.csv_renderer import render_csv
from msa_lending.services.record_normalizer import (
    read_loan_csv,
    records_from_json,
    records_to_json,
)
from msa_lending.services.region_filter import select_regions
from msa_lending.storage.dataset_cache import DatasetCache

logger = logging.getLogger(__name__)

INCOME_DATASET = "msa.json"
LOAN_CSV_DATASET = "cfpbLoanData.csv"
LOAN_RECORDS_DATASET = "usefulData.json"
OUTPUT_CSV_DATASET = "aggregateOutput.csv"


class PipelineError(Exception):
    """Raised when the pipeline is asked to run more than once."""


class PipelineStatus(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    READY = "ready"
    FAILED = "failed"


class IncomeSource(Protocol):
    def fetch_region_income(self) -> list[list[Any]]: ...


class LoanSource(Protocol):
    def fetch_loan_csv(self, region_ids: list[str]) -> str: ...


class AggregationPipeline:
    """Singleton holding the pipeline state and its published outputs."""

    _instance: "AggregationPipeline | None" = None

    def __init__(self) -> None:
        self.income_rows: list[list[Any]] = []
        self.selection: RegionSelection | None = None
        self.result: AggregationResult | None = None
        self.csv_lines: list[str] = []
        self.record_count = 0
        self.status = PipelineStatus.NOT_STARTED
        self.error: str | None = None
        self.elapsed_seconds: float | None = None
        self._start_lock = threading.Lock()

    @classmethod
    def get(cls) -> "AggregationPipeline":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset singleton, mainly for testing."""
        cls._instance = None

    @property
    def is_ready(self) -> bool:
        return self.status is PipelineStatus.READY

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def run(
        self,
        income_source: IncomeSource | None = None,
        loan_source: LoanSource | None = None,
        input_cache: DatasetCache | None = None,
        output_cache: DatasetCache | None = None,
        income_threshold: float | None = None,
    ) -> bool:
        """Run every stage once. Returns True when results are published.

        Stage failures are logged and leave the pipeline ``failed``.
        Raises PipelineError if a run was already started.
        """
        with self._start_lock:
            if self.status is not PipelineStatus.NOT_STARTED:
                raise PipelineError(f"Pipeline already {self.status.value}")
            self.status = PipelineStatus.RUNNING

        start_time = time.time()
        logger.info("Starting aggregation pipeline")
        try:
            income_source = income_source or CensusIncomeClient()
            loan_source = loan_source or HmdaLoanClient()
            input_cache = input_cache or DatasetCache(settings.INPUT_CACHE_DIR)
            output_cache = output_cache or DatasetCache(settings.OUTPUT_CACHE_DIR)
            threshold = (
                income_threshold
                if income_threshold is not None
                else settings.INCOME_THRESHOLD
            )

            income_rows = self._load_income_rows(income_source, input_cache)
            selection = select_regions(income_rows, threshold)
            records = self._load_loan_records(
                loan_source, input_cache, output_cache, selection
            )
            result = aggregate_records(records, selection.region_name_by_id)
            csv_lines = render_csv(result, selection.regions_under_threshold)
            output_cache.write_text(OUTPUT_CSV_DATASET, "\n".join(csv_lines))
        except Exception as e:
            self.elapsed_seconds = round(time.time() - start_time, 2)
            self.error = str(e)
            self.status = PipelineStatus.FAILED
            logger.error("Aggregation pipeline failed: %s", e, exc_info=True)
            return False

        self.income_rows = income_rows
        self.selection = selection
        self.record_count = len(records)
        self.result = result
        self.csv_lines = csv_lines
        self.elapsed_seconds = round(time.time() - start_time, 2)
        self.status = PipelineStatus.READY
        logger.info(
            "Aggregation pipeline ready in %.2fs: %d records, %d regions",
            self.elapsed_seconds,
            self.record_count,
            len(result.aggregates),
        )
        return True

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------
    def _load_income_rows(
        self, source: IncomeSource, cache: DatasetCache
    ) -> list[list[Any]]:
        rows = cache.read_json(INCOME_DATASET)
        if isinstance(rows, list):
            return rows
        if rows is not None:
            logger.warning("Ignoring cached %s: not a list of rows", INCOME_DATASET)

        rows = source.fetch_region_income()
        cache.write_json(INCOME_DATASET, rows)
        return rows

    def _load_loan_records(
        self,
        source: LoanSource,
        input_cache: DatasetCache,
        output_cache: DatasetCache,
        selection: RegionSelection,
    ) -> list[LoanRecord]:
        cached = output_cache.read_json(LOAN_RECORDS_DATASET)
        if cached is not None:
            try:
                return records_from_json(cached)
            except ValueError as e:
                logger.warning("Ignoring cached %s: %s", LOAN_RECORDS_DATASET, e)

        region_ids = selection.region_ids
        if not region_ids:
            logger.warning("No regions under the income threshold; nothing to fetch")
            return []

        text = input_cache.get_or_fetch_text(
            LOAN_CSV_DATASET, lambda: source.fetch_loan_csv(region_ids)
        )
        records = list(read_loan_csv(text))
        output_cache.write_json(LOAN_RECORDS_DATASET, records_to_json(records))
        return records

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    def get_status(self) -> dict[str, Any]:
        status: dict[str, Any] = {"status": self.status.value}
        if self.status is PipelineStatus.READY:
            status.update(
                {
                    "region_count": len(self.selection.regions_under_threshold),
                    "record_count": self.record_count,
                    "aggregate_count": len(self.result.aggregates),
                    "race_categories": len(self.result.race_categories),
                    "elapsed_seconds": self.elapsed_seconds,
                }
            )
        elif self.status is PipelineStatus.FAILED:
            status["error"] = self.error
            status["elapsed_seconds"] = self.elapsed_seconds
        return status


def run_pipeline() -> bool:
    """Run the process-wide pipeline with configured sources and caches."""
    return AggregationPipeline.get().run()
