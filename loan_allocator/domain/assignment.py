"""Assignment engine - binds each loan to the cheapest facility that accepts it"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from loan_allocator.domain.exceptions import AllocationError
from loan_allocator.domain.models import Assignment, Eligibility, Facility, Loan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rejection:
    """Why one facility refused one loan"""

    loan_id: int
    facility_id: int
    reason: str
    message: str

    @classmethod
    def from_error(cls, loan: Loan, facility: Facility, error: AllocationError) -> "Rejection":
        return cls(loan_id=loan.id, facility_id=facility.id, reason=error.reason, message=str(error))


RejectionHandler = Callable[[Rejection], None]


def check_assignable(loan: Loan, facility: Facility) -> Eligibility:
    """
    Pure eligibility check for a (loan, facility) pair.

    Facility rules and capacity are checked first, then the owning bank's rules.
    """
    eligibility = facility.check_eligible(loan)
    if not eligibility.eligible:
        return eligibility
    return facility.bank.check_eligible(loan)


def assign_loan(loan: Loan, facility: Facility) -> Assignment:
    """
    Bind a loan to a facility.

    Raises the AllocationError of the failed check without touching the
    facility; on success the facility capacity is debited by the loan amount.
    """
    check_assignable(loan, facility).raise_for_error()
    return _commit(loan, facility)


def _commit(loan: Loan, facility: Facility) -> Assignment:
    facility.debit(loan.amount)
    return Assignment(
        loan=loan,
        facility_id=facility.id,
        facility_interest_rate=facility.interest_rate,
    )


class LoanAssigner:
    """
    First-fit assignment over facilities ordered by ascending interest rate.

    The order is computed once. Python's sort is stable, so facilities with
    equal rates keep their input order. A refused loan is never retried:
    capacity only shrinks within a run.
    """

    def __init__(
        self,
        facilities: Iterable[Facility],
        on_rejection: Optional[RejectionHandler] = None,
    ):
        self.facilities: List[Facility] = sorted(facilities, key=lambda f: f.interest_rate)
        self.on_rejection = on_rejection

    def assign(self, loan: Loan) -> Optional[Assignment]:
        """Return the assignment for this loan, or None when no facility accepts it"""
        for facility in self.facilities:
            eligibility = check_assignable(loan, facility)
            if eligibility.eligible:
                return _commit(loan, facility)

            error = eligibility.error
            logger.debug(str(error), extra={"loan_id": loan.id, "facility_id": facility.id, "reason": error.reason})
            if self.on_rejection is not None:
                self.on_rejection(Rejection.from_error(loan, facility, error))

        return None
