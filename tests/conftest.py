"""
Test fixtures for the LiftLog importer.

Provides settings, stores and sample data so tests run offline and
deterministically. No test talks to Hevy or Anthropic.
"""

import sys
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import liftlog_importer...`
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from liftlog_importer.config import Settings
from liftlog_importer.main import create_app
from liftlog_importer.services.credentials import InMemorySecretStore
from liftlog_importer.services.store import InMemoryObjectStore


# ---------------------------------------------------------------------------
# Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Start every test without real credentials and without page delays."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("HEVY_API_KEY", raising=False)
    monkeypatch.delenv("FALLBACK_PROPAGATE_CAPTURES", raising=False)
    monkeypatch.setenv("HEVY_PAGE_DELAY_SECONDS", "0")
    monkeypatch.setenv("LLM_MAX_ATTEMPTS", "1")


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def secret_store() -> InMemorySecretStore:
    return InMemorySecretStore()


# ---------------------------------------------------------------------------
# Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client(settings) -> TestClient:
    """Per-test FastAPI TestClient with a fresh in-memory store."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hevy_csv_text() -> str:
    """Hevy export with two workouts; the first has a repeated exercise."""
    return (
        "title,start_time,end_time,description,exercise_title,superset_id,weight_kg,reps\n"
        "Leg Day,2024-01-15T09:00:00,2024-01-15T10:00:00,,Squat,,100,5\n"
        "Leg Day,2024-01-15T09:00:00,2024-01-15T10:00:00,,Squat,,100,3\n"
        "Leg Day,2024-01-15T09:00:00,2024-01-15T10:00:00,,Leg Press,,150,10\n"
        "Push Day,2024-01-17T18:00:00,2024-01-17T19:00:00,,Bench Press,,80,8\n"
    )


@pytest.fixture
def strong_csv_text() -> str:
    return (
        "Date,Workout Name,Exercise Name,Set Order,Weight,Reps,Distance\n"
        "2024-02-01 07:30:00,Morning Lift,Deadlift,1,315,5,0\n"
        "2024-02-01 07:30:00,Morning Lift,Deadlift,2,335,3,0\n"
        "2024-02-01 07:30:00,Morning Lift,\"Row, Barbell\",1,185,8,0\n"
    )


@pytest.fixture
def hevy_api_page() -> Callable[..., Dict[str, Any]]:
    """Builds one /workouts page."""
    def _page(page: int, page_count: int, workouts: List[Dict[str, Any]] | None = None) -> Dict[str, Any]:
        return {
            "page": page,
            "page_count": page_count,
            "workouts": workouts if workouts is not None else [
                {
                    "id": f"w-{page}",
                    "title": f"Workout {page}",
                    "description": "Felt strong",
                    "start_time": "2024-03-01T10:00:00.000Z",
                    "end_time": "2024-03-01T11:00:00.000Z",
                    "exercises": [
                        {
                            "index": 0,
                            "title": "Bench Press (Barbell)",
                            "notes": None,
                            "sets": [
                                {"index": 0, "type": "warmup", "weight_kg": 40, "reps": 10},
                                {"index": 1, "type": "normal", "weight_kg": 100, "reps": 5},
                            ],
                        }
                    ],
                }
            ],
        }
    return _page
