"""
Pytest configuration and shared fixtures.
"""

import itertools
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple

import mongomock
import pytest

from match_engine.db import MongoDBManager
from match_engine.service import JobMatchingService
from match_engine.triggers import BackgroundDispatcher, MatchTriggers

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


class RecordingNotifier:
    """Collects notifications instead of sending them."""

    def __init__(self, fail_first: bool = False):
        self.sent: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_first = fail_first
        self.calls = 0

    def send_match_notification(self, email: str, payload: Dict[str, Any]) -> None:
        self.calls += 1
        if self.fail_first and self.calls == 1:
            raise ConnectionError("smtp unavailable")
        self.sent.append((email, payload))


class LockedCollection:
    """Serializes single-document writes the way the MongoDB server does."""

    def __init__(self, collection):
        self._collection = collection
        self._lock = threading.Lock()

    def find_one_and_update(self, *args, **kwargs):
        with self._lock:
            return self._collection.find_one_and_update(*args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._collection, name)


@pytest.fixture
def db() -> MongoDBManager:
    """Store backed by an in-memory mongomock client."""
    return MongoDBManager(client=mongomock.MongoClient())


@pytest.fixture
def add_candidate(db):
    """Insert an active candidate; later inserts are newer."""
    counter = itertools.count()

    def _add(**fields) -> Any:
        n = next(counter)
        doc = {
            "email": f"candidate{n}@example.com",
            "name": f"Candidate {n}",
            "skills": {"technical": [], "soft": []},
            "experience": {"total_years": 0, "jobs": []},
            "status": "active",
            "created_at": BASE_TIME + timedelta(minutes=n),
        }
        doc.update(fields)
        return db.insert_candidate(doc)

    return _add


@pytest.fixture
def add_job(db):
    """Insert an active job; later inserts are newer."""
    counter = itertools.count()

    def _add(**fields) -> Any:
        n = next(counter)
        doc = {
            "title": f"Engineer {n}",
            "company": {"name": f"Company {n}"},
            "requirements": {"skills": {"technical": [], "soft": []}},
            "location": {"city": "Austin", "state": "TX", "country": "USA", "remote": False},
            "job_type": "full-time",
            "status": "active",
            "created_at": BASE_TIME + timedelta(minutes=n),
        }
        doc.update(fields)
        return db.insert_job(doc)

    return _add


@pytest.fixture
def service(db) -> JobMatchingService:
    return JobMatchingService(db=db, persist_workers=4)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def dispatcher():
    dispatcher = BackgroundDispatcher(max_workers=2)
    yield dispatcher
    dispatcher.shutdown(wait=True)


@pytest.fixture
def triggers(service, dispatcher, notifier) -> MatchTriggers:
    return MatchTriggers(service, dispatcher=dispatcher, notifier=notifier)


def skills(*technical: str) -> Dict[str, List[str]]:
    return {"technical": list(technical), "soft": []}


REMOTE = {"remote": True}
