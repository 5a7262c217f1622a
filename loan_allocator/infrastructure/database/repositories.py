"""Data access layer for allocation runs"""

import uuid
from typing import List, Optional
from sqlalchemy.orm import Session
from loan_allocator.batch import AllocationResult
from loan_allocator.infrastructure.database.models import AllocationRun, FacilityYieldRecord, LoanAssignment


class AllocationRunRepository:
    """Repository for allocation runs with their assignments and yields"""

    def __init__(self, db: Session):
        self.db = db

    def create_run(self, result: AllocationResult) -> AllocationRun:
        """Persist a run; the caller commits"""
        db_run = AllocationRun(
            id=uuid.UUID(result.run_id),
            loan_count=result.loan_count,
            assigned_count=result.assigned_count,
            facility_count=len(result.yields),
        )
        self.db.add(db_run)

        for position, (loan_id, facility_id) in enumerate(result.assignments):
            db_run.assignments.append(
                LoanAssignment(position=position, loan_id=loan_id, facility_id=facility_id)
            )

        for item in result.yields:
            db_run.yields.append(
                FacilityYieldRecord(facility_id=item.facility_id, expected_yield=item.expected_yield)
            )

        self.db.flush()  # Assign row ids without committing
        return db_run

    def get_run(self, run_id: uuid.UUID) -> Optional[AllocationRun]:
        """Fetch run with assignments and yields"""
        return (
            self.db.query(AllocationRun)
            .filter(AllocationRun.id == run_id)
            .first()
        )

    def list_runs(self, limit: int = 10) -> List[AllocationRun]:
        """Fetch most recent runs"""
        return (
            self.db.query(AllocationRun)
            .order_by(AllocationRun.created_at.desc())
            .limit(limit)
            .all()
        )
