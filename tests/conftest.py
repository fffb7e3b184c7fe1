"""Pytest configuration and fixtures for follow service tests."""

import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CACHE_BACKEND", "memory")

from followgraph.core.context import RequestContext
from followgraph.core.hooks import HookRegistry
from followgraph.db.base_class import Base
from followgraph.models import User
from followgraph.services.follow_cache import FollowCache, InMemoryCacheStore
from followgraph.services.follow_service import FollowService
from followgraph.services.relationship_store import SQLAlchemyRelationshipStore

TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    return SQLAlchemyRelationshipStore(db_session)


@pytest.fixture
def cache_store():
    return InMemoryCacheStore()


@pytest.fixture
def cache(cache_store):
    return FollowCache(cache_store, prefix="test_follow")


@pytest.fixture
def hooks():
    return HookRegistry()


@pytest.fixture
def service(store, cache, hooks):
    return FollowService(store, cache, hooks)


@pytest.fixture
def ctx():
    """Logged in as user 2, viewing user 1's profile."""
    return RequestContext(loggedin_user_id=2, displayed_user_id=1)


@pytest.fixture
def users(db_session):
    """Create a few members."""
    members = [
        User(id=1, username="alice", user_nicename="alice", display_name="Alice Liddell", email="alice@example.com"),
        User(id=2, username="bob", user_nicename="bob", display_name="Bob", email="bob@example.com"),
        User(id=3, username="carol", user_nicename="carol-k", display_name=None, email="carol@example.com"),
    ]
    db_session.add_all(members)
    db_session.commit()
    return members
