"""Test configuration and fixtures."""

import random

import pytest

from repositories.neighborhood_repo import NeighborhoodRepository
from server import create_app
from tests.fakes import FakeDatabase, FakePool


@pytest.fixture
def fake_db():
    """Empty in-memory database."""
    return FakeDatabase()


@pytest.fixture
def fake_pool(fake_db):
    return FakePool(fake_db)


@pytest.fixture
def repo(fake_pool):
    """Repository over the fake pool with a seeded random source."""
    repository = NeighborhoodRepository(fake_pool, rng=random.Random(1234))
    yield repository
    repository.close()


@pytest.fixture
def app(repo):
    """Flask application wired to the fake-backed repository."""
    application = create_app(repo)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Test client for making requests."""
    return app.test_client()
