"""
pytest configuration and fixtures for the portfolio server tests.
Provides isolated stores, a fake spreadsheet and an API test client.
"""

import os
import tempfile

# Keep the module-level app in portfolio.api away from the real project
# directories and real credentials.
os.environ.setdefault("PORTFOLIO_UPLOAD_DIR", tempfile.mkdtemp(prefix="portfolio-uploads-"))
os.environ.setdefault("PORTFOLIO_CREDENTIALS", os.path.join(tempfile.gettempdir(), "no-such-credentials.json"))

import pytest
from fastapi.testclient import TestClient

from portfolio.api import create_app
from portfolio.dataset_store import DatasetStore
from portfolio.errors import RemoteUnavailable
from portfolio.models import Dataset
from portfolio.uploads import UploadStore


class FakeSheetsClient:
    """In-process stand-in for SheetsClient that records what was written.

    Set ``fail`` to make every call raise RemoteUnavailable, as a network,
    auth or quota failure would.
    """

    def __init__(self, rows=None):
        self.rows = rows if rows is not None else []
        self.fail = False
        self.writes = []

    def get_values(self):
        if self.fail:
            raise RemoteUnavailable("connection refused")
        return self.rows

    def update_values(self, rows):
        if self.fail:
            raise RemoteUnavailable("quota exceeded")
        self.writes.append(rows)
        self.rows = rows


@pytest.fixture
def sheet():
    return FakeSheetsClient()


@pytest.fixture
def memory_store():
    """Dataset store in fallback mode (no credentials)."""
    return DatasetStore()


@pytest.fixture
def sheets_store(sheet):
    """Dataset store backed by the fake spreadsheet."""
    return DatasetStore(client=sheet)


@pytest.fixture
def upload_store(tmp_path):
    return UploadStore(upload_dir=tmp_path / "uploads", max_bytes=1024)


@pytest.fixture
def dist_dir(tmp_path):
    return tmp_path / "dist"


@pytest.fixture
def make_client(upload_store, dist_dir):
    """Build a TestClient around a given dataset store."""
    def _make(store):
        return TestClient(create_app(dataset_store=store, upload_store=upload_store,
                                     dist_dir=dist_dir))
    return _make


@pytest.fixture
def client(make_client, memory_store):
    """API client running in memory-only mode."""
    return make_client(memory_store)


@pytest.fixture
def sample_dataset_json():
    """One user with a fully populated profile, in wire (camelCase) form."""
    return {
        "users": [
            {"id": "u1", "email": "ada@example.com"},
            {"id": "u2", "email": "grace@example.com"},
        ],
        "profiles": [
            {
                "id": "p1",
                "userId": "u1",
                "name": "Ada Lovelace",
                "headline": "Analyst",
                "contactInfo": "ada@example.com",
                "avatarUrl": "/uploads/1700000000000000000-42.jpg",
                "skills": ["math", "poetry"],
                "projects": [
                    {
                        "id": "pr1",
                        "title": "Engine notes",
                        "description": "Note G",
                        "fileUrl": "/uploads/1700000000000000001-7.pdf",
                        "fileName": "notes.pdf",
                        "fileType": "application/pdf",
                    }
                ],
                "awards": [
                    {"id": "a1", "title": "Medal", "issuer": "RS", "date": "1843"},
                    {"id": "a2", "title": "Prize", "issuer": "LMS", "date": "1844",
                     "imageUrl": "/uploads/1700000000000000002-9.jpg"},
                ],
                "experience": [
                    {"id": "e1", "role": "Translator", "company": "Menabrea",
                     "period": "1842-1843", "description": "Sketch of the engine"}
                ],
                "education": [
                    {"id": "ed1", "degree": "Private tutoring", "school": "Home", "year": "1830"}
                ],
            }
        ],
    }


@pytest.fixture
def sample_dataset(sample_dataset_json):
    return Dataset.model_validate(sample_dataset_json)
