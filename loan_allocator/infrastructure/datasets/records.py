"""Pydantic schemas for bank, facility, covenant and loan input rows"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from loan_allocator.domain.models import Loan


class _Record(BaseModel):
    """CSV cells arrive as strings; blank optional cells mean 'not set'"""

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class BankRecord(_Record):
    id: int
    name: str


class FacilityRecord(_Record):
    id: int
    amount: Decimal = Field(..., ge=0, description="Initial facility capacity")
    interest_rate: float
    bank_id: int


class CovenantRecord(_Record):
    bank_id: Optional[int] = None
    facility_id: Optional[int] = None
    max_default_likelihood: Optional[float] = Field(None, ge=0, le=1)
    banned_state: Optional[str] = None


class LoanRecord(_Record):
    id: int
    interest_rate: float
    amount: Decimal = Field(..., ge=0)
    default_likelihood: float = Field(..., ge=0, le=1)
    state: str

    def to_domain(self) -> Loan:
        return Loan(
            id=self.id,
            interest_rate=self.interest_rate,
            amount=self.amount,
            default_likelihood=self.default_likelihood,
            state=self.state,
        )
