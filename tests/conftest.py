# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from infra.db.base import Base
import infra.db.models  # noqa: F401
from infra.services import build_service_dict


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def services(session):
    return build_service_dict(session)


@pytest.fixture(autouse=True)
def _default_task_date_policy(monkeypatch):
    monkeypatch.delenv("PM_TASK_DATE_ERRORS", raising=False)
