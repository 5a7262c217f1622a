"""CSV writers for assignment, yield and rejection reports"""

import csv
from pathlib import Path
from typing import Iterable, Tuple

from loan_allocator.domain.assignment import Rejection
from loan_allocator.domain.yields import FacilityYield


def write_assignments(path: Path, assignments: Iterable[Tuple[int, int]]) -> None:
    """Write (loan_id, facility_id) rows in processing order"""
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["loan_id", "facility_id"])
        writer.writerows(assignments)


def write_yields(path: Path, yields: Iterable[FacilityYield]) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["facility_id", "expected_yield"])
        for item in yields:
            writer.writerow([item.facility_id, item.expected_yield])


def write_rejections(path: Path, rejections: Iterable[Rejection]) -> None:
    """Diagnostic report: one row per facility that refused a loan"""
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["loan_id", "facility_id", "reason", "message"])
        for rejection in rejections:
            writer.writerow([rejection.loan_id, rejection.facility_id, rejection.reason, rejection.message])
