"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AllocationError(DomainException):
    """A facility refused a loan; local to one (loan, facility) pair"""

    reason = "rejected"

    def __init__(self, message: str, loan_id: int | None = None, facility_id: int | None = None):
        super().__init__(message)
        self.loan_id = loan_id
        self.facility_id = facility_id


class EligibilityError(AllocationError):
    """Loan violates a covenant of the facility or its bank"""

    reason = "ineligible"


class BannedStateError(EligibilityError):
    """Loan jurisdiction is banned by a covenant"""

    reason = "banned_state"


class DefaultLikelihoodError(EligibilityError):
    """Loan default likelihood exceeds the covenant cap"""

    reason = "default_likelihood"


class InsufficientCapacityError(AllocationError):
    """Loan amount exceeds the facility's remaining capacity"""

    reason = "insufficient_capacity"


class ReferenceDataError(DomainException):
    """Banks, facilities or covenants do not reference each other consistently"""

    pass


class DatasetError(DomainException):
    """Dataset file is missing or a row cannot be parsed"""

    pass
