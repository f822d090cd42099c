"""
Pytest fixtures for the SaaS starter tests
"""

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.utils.errors import GatewayError
from app.utils.task_cache import TaskListCache

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_ID = "22222222-2222-2222-2222-222222222222"
VALID_TOKEN = "valid-token"


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test."
    )


class FakeTaskGateway:
    """In-memory stand-in for the tasks table, scoped like the RLS policies"""

    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.fail_on = set()
        self.writes = 0
        self._clock = itertools.count()
        self._epoch = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _now(self) -> str:
        return (self._epoch + timedelta(seconds=next(self._clock))).isoformat()

    def _check(self, operation: str, label: str):
        if operation in self.fail_on:
            raise GatewayError(f"Failed to {label}: connection reset")

    def seed(self, user_id: str = OWNER_ID, title: str = "Buy groceries",
             description: Optional[str] = None, completed: bool = False) -> Dict[str, Any]:
        now = self._now()
        row = {
            "id": str(uuid.uuid4()),
            "title": title,
            "description": description,
            "completed": completed,
            "user_id": user_id,
            "created_at": now,
            "updated_at": now,
        }
        self.rows[row["id"]] = row
        return dict(row)

    async def insert_task(self, *, user_id, title, description):
        self._check("insert", "create task")
        self.writes += 1
        return self.seed(user_id, title, description)

    async def select_tasks(self, *, user_id):
        self._check("select", "fetch tasks")
        rows = [dict(r) for r in self.rows.values() if r["user_id"] == user_id]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    async def select_task(self, *, task_id, user_id):
        self._check("select_one", "fetch task")
        row = self.rows.get(task_id)
        if row is None or row["user_id"] != user_id:
            return None
        return dict(row)

    async def update_completion(self, *, task_id, user_id, completed, expected_completed, updated_at):
        self._check("update", "toggle task")
        row = self.rows.get(task_id)
        if row is None or row["user_id"] != user_id or row["completed"] != expected_completed:
            return None
        self.writes += 1
        row["completed"] = completed
        row["updated_at"] = max(updated_at, self._now())
        return dict(row)

    async def delete_task(self, *, task_id, user_id):
        self._check("delete", "delete task")
        row = self.rows.get(task_id)
        if row is None or row["user_id"] != user_id:
            return 0
        self.writes += 1
        del self.rows[task_id]
        return 1


class FakeRedis:
    """In-memory stand-in for redis.Redis with decode_responses=True"""

    def __init__(self):
        self.store: Dict[str, str] = {}

    def ping(self):
        return True

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value):
        self.store[key] = str(value)
        return True

    def setex(self, key, ttl, value):
        return self.set(key, value)

    def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def fake_gateway():
    return FakeTaskGateway()


@pytest.fixture
def settings():
    """Settings independent of the process environment"""
    return Settings(
        _env_file=None,
        supabase_url="http://supabase.test",
        supabase_anon_key="anon-key",
        app_url="https://app.example.com",
        robots="index",
        session_cookie_secure=False,
        redis_url=None
    )


@pytest.fixture
def sample_task_row() -> Dict[str, Any]:
    return {
        "id": "3f1c2b9e-8a3d-4c47-9b8e-1a2b3c4d5e6f",
        "title": "Buy groceries",
        "description": "Milk and eggs",
        "completed": False,
        "user_id": OWNER_ID,
        "created_at": "2025-01-01T10:00:00.123456+00:00",
        "updated_at": "2025-01-01T10:00:00.123456+00:00",
    }


def make_supabase_client(user_id: Optional[str] = OWNER_ID, email: str = "owner@example.com"):
    """MagicMock Supabase client whose auth accepts VALID_TOKEN"""
    client = MagicMock()

    def get_user(token):
        if user_id is not None and token == VALID_TOKEN:
            return MagicMock(user=MagicMock(id=user_id, email=email))
        raise Exception("invalid JWT")

    client.auth.get_user.side_effect = get_user
    client.auth.refresh_session.side_effect = Exception("Invalid Refresh Token")
    return client


@pytest.fixture
def supabase_client():
    return make_supabase_client()


@pytest.fixture
def app(settings, supabase_client, fake_gateway):
    """Application wired to mocks; task service uses the in-memory gateway"""
    from app.main import create_app
    from app.services.task_service import TaskService
    from app.utils.dependencies import get_task_service

    application = create_app(
        settings=settings,
        supabase_factory=lambda access_token=None: supabase_client,
        task_cache=TaskListCache()
    )
    application.dependency_overrides[get_task_service] = lambda: TaskService(fake_gateway)
    return application


@pytest.fixture
def client(app):
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def auth_client(app, settings):
    """Client carrying a valid session cookie"""
    test_client = TestClient(app, follow_redirects=False)
    test_client.cookies.set(settings.access_token_cookie, VALID_TOKEN)
    return test_client
