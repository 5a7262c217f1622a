"""SQLAlchemy ORM models for persisted allocation runs"""

import uuid
from sqlalchemy import Column, BigInteger, DateTime, Integer, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class AllocationRun(Base):
    """One batch of loans assigned against one portfolio"""

    __tablename__ = "allocation_run"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_count = Column(Integer, nullable=False)
    assigned_count = Column(Integer, nullable=False)
    facility_count = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    assignments = relationship(
        "LoanAssignment",
        back_populates="run",
        cascade="all, delete-orphan",
        order_by="LoanAssignment.position",
    )
    yields = relationship(
        "FacilityYieldRecord",
        back_populates="run",
        cascade="all, delete-orphan",
        order_by="FacilityYieldRecord.facility_id",
    )


class LoanAssignment(Base):
    """Loan accepted by a facility, in processing order"""

    __tablename__ = "loan_assignment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Uuid(as_uuid=True), ForeignKey("allocation_run.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    loan_id = Column(BigInteger, nullable=False)
    facility_id = Column(BigInteger, nullable=False)

    run = relationship("AllocationRun", back_populates="assignments")


class FacilityYieldRecord(Base):
    """Reported expected yield of a facility within a run"""

    __tablename__ = "facility_yield"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Uuid(as_uuid=True), ForeignKey("allocation_run.id", ondelete="CASCADE"), nullable=False, index=True)
    facility_id = Column(BigInteger, nullable=False)
    expected_yield = Column(Numeric(18, 2), nullable=False)

    run = relationship("AllocationRun", back_populates="yields")
