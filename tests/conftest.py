"""Shared fixtures: candidates, reference data, app wired to a fake database"""

import pytest
from fastapi.testclient import TestClient

from database.models import Candidate
from server.reference import load_reference_data


@pytest.fixture
def ced():
    return Candidate(id=7, name="Ced Lamour", slug="ced", photo_url="https://img.example/ced.jpg")


@pytest.fixture
def mika():
    return Candidate(id=8, name="Mika Pierre", slug="mika", photo_url="https://img.example/mika.jpg")


@pytest.fixture
def lune():
    return Candidate(id=9, name="Lune Joseph", slug="lune", photo_url="")


@pytest.fixture
def reference():
    return load_reference_data("Haiti")


@pytest.fixture
def make_client():
    """Build a TestClient whose app reads from the given fake database

    The lifespan (real connection pool) is not entered.
    """
    from server.main import create_app

    def _make(db):
        app = create_app()
        app.state.db = db
        return TestClient(app)

    return _make
