# tests/conftest.py
"""Shared fixtures: in-memory SQLite session, staff users, mock dispatcher."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.pop("API_KEY", None)

import pytest
from datetime import datetime
from unittest.mock import AsyncMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.database import create_tables
from app.models.user import User


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def faculty(db):
    user = User(name="Dr. Rao", email="rao@campus.edu", role="faculty",
                department="Physics", created_at=datetime.utcnow())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def dispatcher():
    mock = AsyncMock()
    mock.notify = AsyncMock()
    return mock
