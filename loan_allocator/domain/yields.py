"""Expected yield of assignments and per-facility aggregation"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, localcontext
from typing import TYPE_CHECKING, Dict, List

if TYPE_CHECKING:
    from loan_allocator.domain.models import Assignment

CENT = Decimal("0.01")


@dataclass(frozen=True)
class FacilityYield:
    """Reported total expected yield of one facility"""

    facility_id: int
    expected_yield: Decimal


def calculate_expected_yield(assignment: Assignment) -> float:
    """
    Expected value of an assignment for the lender.

    yield = repayment - default loss - facility cost, where
    - repayment    = (1 - p) * loan_rate * amount
    - default loss = p * amount
    - cost         = facility_rate * amount

    Uses the facility rate captured when the loan was assigned.
    """
    loan = assignment.loan
    p = loan.default_likelihood
    amount = float(loan.amount)

    repayment_value = (1 - p) * loan.interest_rate * amount
    default_value = p * amount
    facility_interest = assignment.facility_interest_rate * amount

    return repayment_value - default_value - facility_interest


def truncate_yield(value: float) -> Decimal:
    """
    Floor a yield to cents for reporting.

    Goes through repr() so float noise (e.g. 28.999999999999996 from 0.29 * 100)
    does not leak into the decimal value before flooring. Precision grows with
    the magnitude so large totals keep every digit.
    """
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + 3)
        return exact.quantize(CENT, rounding=ROUND_FLOOR)


class YieldAggregator:
    """Running total of expected yield per facility"""

    def __init__(self) -> None:
        self._totals: Dict[int, float] = {}

    def add(self, assignment: Assignment) -> None:
        facility_id = assignment.facility_id
        self._totals[facility_id] = self._totals.get(facility_id, 0.0) + assignment.expected_yield()

    @property
    def totals(self) -> Dict[int, float]:
        """Full precision totals, keyed by facility id"""
        return dict(self._totals)

    def report(self) -> List[FacilityYield]:
        """Floored totals, one per facility with accepted loans, by ascending facility id"""
        return [
            FacilityYield(facility_id=facility_id, expected_yield=truncate_yield(total))
            for facility_id, total in sorted(self._totals.items())
        ]
