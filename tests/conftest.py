"""Pytest fixtures for testing"""

import pytest
from pathlib import Path
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from loan_allocator.api.main import create_app
from loan_allocator.domain.models import Bank, Facility, Loan
from loan_allocator.infrastructure.database.models import Base
from loan_allocator.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SAMPLE_DATASET = {
    "banks.csv": "id,name\n1,Chase\n2,Bank of America\n",
    "facilities.csv": (
        "amount,interest_rate,id,bank_id\n"
        "1000,0.0625,1,1\n"
        "500,0.125,2,1\n"
        "2000,0.078125,3,2\n"
    ),
    "covenants.csv": (
        "facility_id,max_default_likelihood,bank_id,banned_state\n"
        ",,2,NY\n"
        "1,0.0625,1,\n"
        "2,,1,CA\n"
    ),
    "loans.csv": (
        "interest_rate,amount,id,default_likelihood,state\n"
        "0.25,640,1,0.03125,TX\n"
        "0.25,320,2,0.125,NY\n"
        "0.5,512,3,0.0625,CA\n"
        "0.25,1024,4,0.0625,TX\n"
        "0.5,256,5,0.25,NY\n"
    ),
}


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def dataset_dir(tmp_path: Path) -> Path:
    """
    Small dataset with bank and facility covenants.

    Expected run (facilities scanned F1 0.0625, F3 0.078125, F2 0.125):
    - loan 1 -> F1
    - loan 2 -> F2 (F1 default cap, bank 2 bans NY)
    - loan 3 -> F3 (F1 out of capacity)
    - loan 4 -> F3
    - loan 5 unassigned
    Yields: F1 95.00, F2 -10.00, F3 264.00
    """
    for name, content in SAMPLE_DATASET.items():
        (tmp_path / name).write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def bank() -> Bank:
    return Bank(id=1, name="B1")


@pytest.fixture
def make_loan():
    """Factory for loans with sensible defaults"""

    def _make_loan(
        id: int = 1,
        amount: float = 100,
        interest_rate: float = 0.1,
        default_likelihood: float = 0.1,
        state: str = "TX",
    ) -> Loan:
        return Loan(
            id=id,
            interest_rate=interest_rate,
            amount=amount,
            default_likelihood=default_likelihood,
            state=state,
        )

    return _make_loan


@pytest.fixture
def make_facility(bank: Bank):
    """Factory for facilities owned by the default bank unless one is given"""

    def _make_facility(id: int, capacity: float = 1000, interest_rate: float = 0.05, owner: Bank | None = None) -> Facility:
        return Facility(id=id, capacity=capacity, interest_rate=interest_rate, bank=owner or bank)

    return _make_facility
