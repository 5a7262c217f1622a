"""Command line entry point: assign a CSV dataset's loans and write the reports"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from loan_allocator.batch import run_batch
from loan_allocator.config import settings
from loan_allocator.domain.exceptions import DatasetError, ReferenceDataError
from loan_allocator.infrastructure.datasets.reader import load_portfolio, stream_loans
from loan_allocator.infrastructure.datasets.writer import (
    write_assignments,
    write_rejections,
    write_yields,
)
from loan_allocator.infrastructure.observability.logging import setup_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="loan-allocator",
        description="Assign loans to the cheapest eligible facility and report expected yields",
    )
    ap.add_argument(
        "dataset_dir",
        nargs="?",
        type=Path,
        default=settings.dataset_dir,
        help="Directory holding banks.csv, facilities.csv, covenants.csv and loans.csv",
    )
    ap.add_argument("--output-dir", type=Path, default=settings.output_dir, help="Defaults to the dataset directory")
    ap.add_argument(
        "--rejections",
        action="store_true",
        default=settings.write_rejections,
        help=f"Also write {settings.rejections_filename} with every facility refusal",
    )
    ap.add_argument("--log-level", default=settings.log_level)
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    dataset_dir: Path = args.dataset_dir
    output_dir: Path = args.output_dir or dataset_dir

    try:
        portfolio = load_portfolio(dataset_dir)
        result = run_batch(portfolio, stream_loans(dataset_dir), collect_rejections=args.rejections)
    except (DatasetError, ReferenceDataError) as e:
        logging.error(f"Cannot process dataset {dataset_dir}: {e}")
        return 1

    output_dir.mkdir(parents=True, exist_ok=True)
    write_assignments(output_dir / settings.assignments_filename, result.assignments)
    write_yields(output_dir / settings.yields_filename, result.yields)
    if args.rejections:
        write_rejections(output_dir / settings.rejections_filename, result.rejections)

    return 0


if __name__ == "__main__":
    sys.exit(main())
