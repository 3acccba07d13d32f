#!/usr/bin/env python3
"""Run the aggregation pipeline once, without starting the server.

Fills the input/output caches so the next server start is fast, and
optionally writes the CSV deliverable to an extra location.

Usage:
  cd backend && python scripts/build_aggregates.py
  cd backend && python scripts/build_aggregates.py --threshold 45000 --output /tmp/out.csv
"""
import argparse
import logging
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from msa_lending.config import settings  # noqa: E402
from msa_lending.services.csv_renderer import write_csv  # noqa: E402
from msa_lending.services.pipeline import AggregationPipeline  # noqa: E402
from msa_lending.storage.dataset_cache import DatasetCache  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Build MSA lending aggregates")
    parser.add_argument(
        "--threshold",
        type=float,
        default=settings.INCOME_THRESHOLD,
        help="Average household income cutoff (default: %(default)s)",
    )
    parser.add_argument("--input-cache", default=settings.INPUT_CACHE_DIR)
    parser.add_argument("--output-cache", default=settings.OUTPUT_CACHE_DIR)
    parser.add_argument("--output", help="Also write the CSV deliverable here")
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    pipeline = AggregationPipeline.get()
    ok = pipeline.run(
        input_cache=DatasetCache(args.input_cache),
        output_cache=DatasetCache(args.output_cache),
        income_threshold=args.threshold,
    )

    status = pipeline.get_status()
    print("\n" + "=" * 60)
    print("AGGREGATION SUMMARY")
    print("=" * 60)
    print(f"Status:            {status['status']}")
    if ok:
        print(f"Regions selected:  {status['region_count']}")
        print(f"Loan records:      {status['record_count']}")
        print(f"Regions with data: {status['aggregate_count']}")
        print(f"Race categories:   {status['race_categories']}")
    else:
        print(f"Error:             {status.get('error')}")
    print(f"Elapsed Time:      {status.get('elapsed_seconds')}s")
    print("=" * 60 + "\n")

    if ok and args.output:
        write_csv(pipeline.csv_lines, args.output)

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
