"""Batch orchestration: stream loans through the assignment engine and aggregate yields"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from loan_allocator.domain.assignment import LoanAssigner, Rejection
from loan_allocator.domain.models import Loan
from loan_allocator.domain.portfolio import Portfolio
from loan_allocator.domain.yields import FacilityYield, YieldAggregator
from loan_allocator.infrastructure.observability.logging import log_run_summary
from loan_allocator.infrastructure.observability.metrics import (
    record_loan,
    record_rejection,
    run_duration_histogram,
)


@dataclass
class AllocationResult:
    """Output of one allocation run"""

    run_id: str
    assignments: List[Tuple[int, int]] = field(default_factory=list)  # (loan_id, facility_id)
    yields: List[FacilityYield] = field(default_factory=list)
    rejections: List[Rejection] = field(default_factory=list)
    loan_count: int = 0

    @property
    def assigned_count(self) -> int:
        return len(self.assignments)

    @property
    def unassigned_count(self) -> int:
        return self.loan_count - self.assigned_count


def run_batch(
    portfolio: Portfolio,
    loans: Iterable[Loan],
    collect_rejections: bool = False,
) -> AllocationResult:
    """
    Main entry point: assign every loan in arrival order and report yields.

    Loans are consumed lazily and strictly in order; facility capacity in
    the portfolio is debited as loans are accepted. Unassigned loans are
    counted but produce no output row.
    """
    start_time = time.time()
    result = AllocationResult(run_id=str(uuid.uuid4()))

    def on_rejection(rejection: Rejection) -> None:
        record_rejection(rejection.reason)
        if collect_rejections:
            result.rejections.append(rejection)

    assigner = LoanAssigner(portfolio.facilities, on_rejection=on_rejection)
    aggregator = YieldAggregator()

    for loan in loans:
        result.loan_count += 1
        assignment = assigner.assign(loan)
        record_loan(assignment is not None)

        if assignment is not None:
            result.assignments.append((loan.id, assignment.facility_id))
            aggregator.add(assignment)

    result.yields = aggregator.report()

    duration = time.time() - start_time
    run_duration_histogram.observe(duration)
    log_run_summary(
        result.run_id,
        result.loan_count,
        result.assigned_count,
        len(result.yields),
        duration * 1000,
    )

    return result
