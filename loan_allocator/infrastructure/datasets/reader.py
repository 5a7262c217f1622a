"""CSV dataset reader - streams validated rows from a dataset directory"""

import csv
from pathlib import Path
from typing import Iterator, Type, TypeVar

from pydantic import BaseModel, ValidationError

from loan_allocator.domain.exceptions import DatasetError
from loan_allocator.domain.models import Loan
from loan_allocator.domain.portfolio import Portfolio, build_portfolio
from loan_allocator.infrastructure.datasets.records import (
    BankRecord,
    CovenantRecord,
    FacilityRecord,
    LoanRecord,
)

BANKS_FILE = "banks.csv"
FACILITIES_FILE = "facilities.csv"
COVENANTS_FILE = "covenants.csv"
LOANS_FILE = "loans.csv"

RecordT = TypeVar("RecordT", bound=BaseModel)


def read_records(path: Path, model: Type[RecordT]) -> Iterator[RecordT]:
    """
    Stream rows of a CSV file as validated records.

    Raises:
        DatasetError: file missing, or a row fails validation
    """
    if not path.is_file():
        raise DatasetError(f"Dataset file not found: {path}")

    # utf-8-sig strips a BOM if present
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                yield model.model_validate(row)
            except ValidationError as e:
                raise DatasetError(f"{path.name} line {reader.line_num}: {e}") from e


def load_portfolio(dataset_dir: Path) -> Portfolio:
    """Load banks, facilities and covenants of a dataset"""
    return build_portfolio(
        banks=list(read_records(dataset_dir / BANKS_FILE, BankRecord)),
        facilities=list(read_records(dataset_dir / FACILITIES_FILE, FacilityRecord)),
        covenants=list(read_records(dataset_dir / COVENANTS_FILE, CovenantRecord)),
    )


def stream_loans(dataset_dir: Path) -> Iterator[Loan]:
    """Lazily yield loans in file order"""
    for record in read_records(dataset_dir / LOANS_FILE, LoanRecord):
        yield record.to_domain()
