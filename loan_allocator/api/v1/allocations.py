"""/v1/allocations - run loan assignment over a submitted portfolio and browse past runs"""

import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from loan_allocator.api.middleware import get_request_id
from loan_allocator.api.v1.schemas import (
    AllocationRequest,
    AllocationResponse,
    AssignmentSchema,
    RejectionSchema,
    RunHistoryResponse,
    RunResponse,
    RunSummary,
    YieldSchema,
)
from loan_allocator.batch import run_batch
from loan_allocator.domain.exceptions import ReferenceDataError
from loan_allocator.domain.portfolio import build_portfolio
from loan_allocator.infrastructure.database.repositories import AllocationRunRepository
from loan_allocator.infrastructure.database.session import get_db

router = APIRouter()


@router.post("/allocations", response_model=AllocationResponse)
def create_allocation(
    request_body: AllocationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Assign the submitted loans against the submitted portfolio.

    Flow:
    1. Wire banks, facilities and covenants into a fresh portfolio
    2. Assign loans in the order given
    3. Persist the run (assignments + floored yields)
    4. Return assignments, yields and optional rejection diagnostics
    """
    request_id = get_request_id(request)

    try:
        portfolio = build_portfolio(request_body.banks, request_body.facilities, request_body.covenants)
    except ReferenceDataError as e:
        logging.warning(f"Invalid reference data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    loans = (record.to_domain() for record in request_body.loans)
    result = run_batch(portfolio, loans, collect_rejections=request_body.include_rejections)

    try:
        AllocationRunRepository(db).create_run(result)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to store run {result.run_id}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return AllocationResponse(
        run_id=result.run_id,
        loan_count=result.loan_count,
        assigned_count=result.assigned_count,
        unassigned_count=result.unassigned_count,
        assignments=[
            AssignmentSchema(loan_id=loan_id, facility_id=facility_id)
            for loan_id, facility_id in result.assignments
        ],
        yields=[
            YieldSchema(facility_id=item.facility_id, expected_yield=item.expected_yield)
            for item in result.yields
        ],
        rejections=[
            RejectionSchema(
                loan_id=r.loan_id,
                facility_id=r.facility_id,
                reason=r.reason,
                message=r.message,
            )
            for r in result.rejections
        ],
    )


@router.get("/allocations", response_model=RunHistoryResponse)
def list_allocations(
    limit: int = Query(10, ge=1, le=100, description="Maximum number of runs"),
    db: Session = Depends(get_db),
):
    """Most recent runs, newest first"""
    runs = AllocationRunRepository(db).list_runs(limit=limit)

    return RunHistoryResponse(
        runs=[
            RunSummary(
                run_id=str(run.id),
                loan_count=run.loan_count,
                assigned_count=run.assigned_count,
                facility_count=run.facility_count,
                created_at=run.created_at.isoformat(),
            )
            for run in runs
        ]
    )


@router.get("/allocations/{run_id}", response_model=RunResponse)
def get_allocation(run_id: str, db: Session = Depends(get_db)):
    """
    Retrieve a stored run.

    Returns:
        Assignments in processing order and yields by facility
    """
    try:
        run_uuid = uuid.UUID(run_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid run ID format")

    run = AllocationRunRepository(db).get_run(run_uuid)

    if not run:
        raise HTTPException(status_code=404, detail="Run not found")

    return RunResponse(
        run_id=str(run.id),
        loan_count=run.loan_count,
        assigned_count=run.assigned_count,
        assignments=[
            AssignmentSchema(loan_id=a.loan_id, facility_id=a.facility_id)
            for a in run.assignments
        ],
        yields=[
            YieldSchema(facility_id=y.facility_id, expected_yield=y.expected_yield)
            for y in run.yields
        ],
        created_at=run.created_at.isoformat(),
    )
