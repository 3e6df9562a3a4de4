"""Shared test fixtures and utilities."""

import csv
import tempfile
from pathlib import Path

import pytest

from ..db.session import SessionManager
from ..db.store import CompanyStore, init_db


class FakeInferenceService:
    """Inference service returning canned answers and recording calls."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {}
        self.error = error
        self.calls = []

    def infer(self, context, missing):
        self.calls.append({'context': context, 'missing': list(missing)})
        if self.error:
            raise self.error
        if callable(self.response):
            return self.response(context, missing)
        return self.response


@pytest.fixture
def database_url(tmp_path):
    """SQLite database file private to one test."""
    return f"sqlite:///{tmp_path / 'companies.db'}"


@pytest.fixture
def store(database_url):
    """Company store with the schema created."""
    session_manager = SessionManager(database_url)
    init_db(session_manager.engine)
    yield CompanyStore(session_manager)
    session_manager.engine.dispose()


@pytest.fixture
def fake_inference():
    return FakeInferenceService()


def create_test_csv(rows, fieldnames=None):
    """Create a temporary CSV file with test data."""
    fieldnames = fieldnames or list(rows[0].keys())
    fd, path = tempfile.mkstemp(suffix='.csv')
    with open(fd, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return Path(path)
