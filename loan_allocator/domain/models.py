"""Domain models - pure Python dataclasses representing lending entities"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Protocol, Set, Union

from loan_allocator.domain.exceptions import (
    AllocationError,
    BannedStateError,
    DefaultLikelihoodError,
    InsufficientCapacityError,
)
from loan_allocator.domain.yields import calculate_expected_yield

Amount = Union[Decimal, int, float]


def to_amount(value: Amount) -> Decimal:
    """Money as an exact decimal; floats go through str() so 0.1 stays 0.1"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Loan:
    """Loan record read from the incoming stream"""

    id: int
    interest_rate: float
    amount: Decimal
    default_likelihood: float  # probability in [0, 1]
    state: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_amount(self.amount))


@dataclass(frozen=True)
class Covenant:
    """Restriction attached to a facility or, when no facility is given, to a bank"""

    bank_id: Optional[int] = None
    facility_id: Optional[int] = None
    max_default_likelihood: Optional[float] = None
    banned_state: Optional[str] = None


@dataclass(frozen=True)
class Eligibility:
    """Outcome of a pure eligibility check"""

    error: Optional[AllocationError] = None

    @property
    def eligible(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


ELIGIBLE = Eligibility()


@dataclass
class CovenantRules:
    """
    Aggregated covenant constraints of a bank or facility.

    banned_states only grows (union) and max_default_likelihood only
    shrinks (min), so the attach order never changes the result.
    """

    banned_states: Set[str] = field(default_factory=set)
    max_default_likelihood: Optional[float] = None

    def attach(self, covenant: Covenant) -> None:
        if covenant.max_default_likelihood is not None:
            if self.max_default_likelihood is None:
                self.max_default_likelihood = covenant.max_default_likelihood
            else:
                self.max_default_likelihood = min(
                    self.max_default_likelihood, covenant.max_default_likelihood
                )

        if covenant.banned_state:
            self.banned_states.add(covenant.banned_state)

    def check(self, loan: Loan, owner: str, facility_id: int | None = None) -> Eligibility:
        """Check a loan against the rules; banned state is reported before the cap"""
        if loan.state in self.banned_states:
            return Eligibility(
                BannedStateError(
                    f"{owner} has banned {loan.state}",
                    loan_id=loan.id,
                    facility_id=facility_id,
                )
            )

        cap = self.max_default_likelihood
        if cap is not None and loan.default_likelihood > cap:
            return Eligibility(
                DefaultLikelihoodError(
                    f"{owner}'s max default likelihood ({cap}) is exceeded by "
                    f"loan {loan.id} ({loan.default_likelihood})",
                    loan_id=loan.id,
                    facility_id=facility_id,
                )
            )

        return ELIGIBLE


class Covenantable(Protocol):
    """Anything carrying covenant rules and able to vet a loan against them"""

    rules: CovenantRules
    covenants: List[Covenant]

    def add_covenant(self, covenant: Covenant) -> None: ...

    def check_eligible(self, loan: Loan) -> Eligibility: ...


@dataclass(eq=False)
class Bank:
    """Lender owning one or more facilities"""

    id: int
    name: str
    facilities: List[Facility] = field(default_factory=list, repr=False)
    rules: CovenantRules = field(default_factory=CovenantRules)
    covenants: List[Covenant] = field(default_factory=list, repr=False)

    def add_facility(self, facility: Facility) -> None:
        self.facilities.append(facility)

    def add_covenant(self, covenant: Covenant) -> None:
        self.rules.attach(covenant)
        self.covenants.append(covenant)

    def check_eligible(self, loan: Loan) -> Eligibility:
        # Banks carry no capacity; only their covenants apply.
        return self.rules.check(loan, f"Bank {self.id}")


@dataclass(eq=False)
class Facility:
    """
    Credit line of a bank that loans are assigned to.

    capacity is the remaining amount as a Decimal and is only reduced
    through debit(), so accepted amounts subtract exactly;
    interest_rate is fixed and used for ranking and yield.
    Constructing a facility registers it on its bank.
    """

    id: int
    capacity: Decimal
    interest_rate: float
    bank: Bank = field(repr=False)
    rules: CovenantRules = field(default_factory=CovenantRules)
    covenants: List[Covenant] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.capacity = to_amount(self.capacity)
        self.bank.add_facility(self)

    def add_covenant(self, covenant: Covenant) -> None:
        self.rules.attach(covenant)
        self.covenants.append(covenant)

    def check_eligible(self, loan: Loan) -> Eligibility:
        eligibility = self.rules.check(loan, f"Facility {self.id}", facility_id=self.id)
        if not eligibility.eligible:
            return eligibility

        if loan.amount > self.capacity:
            return Eligibility(
                InsufficientCapacityError(
                    f"Facility {self.id} ({self.capacity}) cannot fund loan {loan.id} ({loan.amount})",
                    loan_id=loan.id,
                    facility_id=self.id,
                )
            )

        return ELIGIBLE

    def debit(self, amount: Amount) -> None:
        amount = to_amount(amount)
        if amount > self.capacity:
            raise InsufficientCapacityError(
                f"Facility {self.id} ({self.capacity}) cannot fund {amount}",
                facility_id=self.id,
            )
        self.capacity -= amount


@dataclass(frozen=True)
class Assignment:
    """Loan bound to the facility that accepted it"""

    loan: Loan
    facility_id: int
    facility_interest_rate: float

    def expected_yield(self) -> float:
        return calculate_expected_yield(self)
