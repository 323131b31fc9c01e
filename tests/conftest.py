"""
Test fixtures and shared setup.

Every test gets its own freshly created schema — in-memory SQLite by
default, or the database named by TEST_DATABASE_URL (e.g. a throwaway
Postgres in CI). Services commit for real, so per-test isolation comes from
create_all/drop_all rather than an outer rolled-back transaction.
"""

import os
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# ── Override settings BEFORE importing app modules ────────────────────────────
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.main import app
from app.database import get_db
from app.models import *  # noqa — ensures all models registered
from app.models.base import Base


TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite://")


def _make_engine(url: str):
    if url.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory DB
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


@pytest.fixture
def test_engine():
    engine = _make_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Session:
    TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)
    session = TestSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db: Session) -> TestClient:
    """
    FastAPI test client with DB dependency overridden to use the test session.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── Data builder fixtures ──────────────────────────────────────────────────────


@pytest.fixture
def sample_procedures(db: Session):
    from app.models.catalog import MedicalProcedure

    procedures = [
        MedicalProcedure(
            name="Knee Replacement Surgery",
            description="Total knee arthroplasty",
            category="Orthopedic",
        ),
        MedicalProcedure(
            name="Hip Replacement Surgery",
            description="Total hip arthroplasty",
            category="Orthopedic",
        ),
        MedicalProcedure(
            name="Heart Bypass Surgery",
            description="Coronary artery bypass graft",
            category="Cardiac",
        ),
    ]
    db.add_all(procedures)
    db.commit()
    return procedures


@pytest.fixture
def sample_practices(db: Session):
    from app.models.catalog import MedicalPractice

    practices = [
        MedicalPractice(
            name="City Medical Center",
            address="123 Main Street",
            phone="555-0123",
            email="appointments@citymedical.com",
        ),
        MedicalPractice(name="General Hospital", address="456 Oak Avenue"),
        MedicalPractice(name="Lakeside Orthopedics"),
    ]
    db.add_all(practices)
    db.commit()
    return practices


@pytest.fixture
def add_price(db: Session):
    """Factory: add_price(procedure, practice, "950.00", currency="USD")."""
    from app.models.pricing import ProcedurePricing

    def _add(procedure, practice, cost, currency="USD", notes=None):
        entry = ProcedurePricing(
            procedure_id=procedure.id,
            practice_id=practice.id,
            cost=Decimal(cost),
            currency=currency,
            notes=notes,
        )
        db.add(entry)
        db.commit()
        return entry

    return _add
