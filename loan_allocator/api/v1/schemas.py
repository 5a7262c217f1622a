"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List

from loan_allocator.infrastructure.datasets.records import (
    BankRecord,
    CovenantRecord,
    FacilityRecord,
    LoanRecord,
)


class AllocationRequest(BaseModel):
    """Request body for POST /v1/allocations"""

    banks: List[BankRecord] = Field(..., min_length=1)
    facilities: List[FacilityRecord] = Field(..., min_length=1)
    covenants: List[CovenantRecord] = Field(default_factory=list)
    loans: List[LoanRecord] = Field(default_factory=list, description="Loans in arrival order")
    include_rejections: bool = False


class AssignmentSchema(BaseModel):
    loan_id: int
    facility_id: int


class YieldSchema(BaseModel):
    facility_id: int
    expected_yield: Decimal


class RejectionSchema(BaseModel):
    """Why one facility refused one loan"""

    loan_id: int
    facility_id: int
    reason: str
    message: str


class AllocationResponse(BaseModel):
    """Response for POST /v1/allocations"""

    run_id: str
    loan_count: int
    assigned_count: int
    unassigned_count: int
    assignments: List[AssignmentSchema]
    yields: List[YieldSchema]
    rejections: List[RejectionSchema] = Field(default_factory=list)


class RunResponse(BaseModel):
    """Response for GET /v1/allocations/{run_id}"""

    run_id: str
    loan_count: int
    assigned_count: int
    assignments: List[AssignmentSchema]
    yields: List[YieldSchema]
    created_at: str


class RunSummary(BaseModel):
    """Single run in the run history"""

    run_id: str
    loan_count: int
    assigned_count: int
    facility_count: int
    created_at: str


class RunHistoryResponse(BaseModel):
    """Response for GET /v1/allocations"""

    runs: List[RunSummary]
