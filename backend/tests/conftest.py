"""
Shared pytest fixtures for backend tests.
"""
import pytest
import sys
import os
from datetime import datetime

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import Reminder, SpecificDays, Weekday


@pytest.fixture
def monday_anchor():
    """2024-03-04 is a Monday."""
    return datetime(2024, 3, 4, 8, 0)


@pytest.fixture
def mwf_reminder():
    """Recurring Mon/Wed/Fri reminder due on a Monday morning."""
    return Reminder(
        id="rem-1",
        title="Gym",
        due_date="2024-03-04",
        due_time="08:00",
        recurrence=SpecificDays(days_of_week={Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY}),
        is_recurring=True,
    )


@pytest.fixture
def app_client(monkeypatch):
    """
    Create a test client for the FastAPI app with a small preview limit.
    """
    from fastapi.testclient import TestClient
    import main

    monkeypatch.setattr(main, "MAX_PREVIEW_COUNT", 20)

    with TestClient(main.app) as client:
        yield client
