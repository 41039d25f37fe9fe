import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from guardify.database import Base
from guardify import models  # noqa: F401

@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()

class FakeTask:
    """Stands in for a Celery task: records .delay() calls."""
    def __init__(self):
        self.calls = []

    def delay(self, *args, **kwargs):
        self.calls.append(args)

@pytest.fixture
def fake_notify(monkeypatch):
    from guardify import celery_worker
    task = FakeTask()
    monkeypatch.setattr(celery_worker, "notify_order_blocked", task)
    return task
