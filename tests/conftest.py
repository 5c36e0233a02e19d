"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.api.main import create_app
from finance_tracker.infrastructure.database.models import Base, MemberRecord
from finance_tracker.infrastructure.database.repositories import CategoryRepository, MemberRepository
from finance_tracker.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
def categories(db: Session) -> Dict[str, str]:
    """Seeded default categories, by name"""
    CategoryRepository(db).seed_defaults()
    db.commit()
    return {c.name: c.id for c in CategoryRepository(db).list_categories()}


@pytest.fixture
def member(db: Session) -> MemberRecord:
    """A family member owning the records under test"""
    record = MemberRepository(db).create_member("Ana", "ana@example.com")
    db.commit()
    return record
