"""
Task Persistence Gateway
Named-parameter queries against the `tasks` table

Ownership is enforced by row-level security in the store; every query is
additionally scoped by user_id. The supabase client is synchronous, so
requests run in the threadpool.
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import httpx
import structlog
from fastapi.concurrency import run_in_threadpool
from postgrest.exceptions import APIError
from supabase import Client

from app.utils.errors import GatewayError

logger = structlog.get_logger(__name__)

TASKS_TABLE = "tasks"


@contextmanager
def remote_call(operation: str):
    """Translate store/transport failures into GatewayError"""
    try:
        yield
    except APIError as e:
        logger.error("Remote store call failed", operation=operation, error=e.message, code=e.code)
        raise GatewayError(f"Failed to {operation}: {e.message}") from e
    except httpx.HTTPError as e:
        logger.error("Remote store unreachable", operation=operation, error=str(e))
        raise GatewayError(f"Failed to {operation}: {e}") from e


class TaskGateway:
    """Thin adapter over the Supabase PostgREST client"""

    def __init__(self, client: Client):
        self.client = client

    def _table(self):
        return self.client.table(TASKS_TABLE)

    async def insert_task(
        self,
        *,
        user_id: str,
        title: str,
        description: Optional[str]
    ) -> Dict[str, Any]:
        """Insert a task and return the stored row"""
        with remote_call("create task"):
            query = self._table().insert({
                "user_id": user_id,
                "title": title,
                "description": description,
                "completed": False,
            })
            response = await run_in_threadpool(query.execute)

        if not response.data:
            raise GatewayError("Failed to create task: no row returned")
        return response.data[0]

    async def select_tasks(self, *, user_id: str) -> List[Dict[str, Any]]:
        """All rows owned by user_id, newest first"""
        with remote_call("fetch tasks"):
            query = (
                self._table()
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
            )
            response = await run_in_threadpool(query.execute)
        return response.data or []

    async def select_task(self, *, task_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """One row matching both identifiers, or None"""
        with remote_call("fetch task"):
            query = (
                self._table()
                .select("*")
                .eq("id", task_id)
                .eq("user_id", user_id)
                .limit(1)
            )
            response = await run_in_threadpool(query.execute)
        return response.data[0] if response.data else None

    async def update_completion(
        self,
        *,
        task_id: str,
        user_id: str,
        completed: bool,
        expected_completed: bool,
        updated_at: str
    ) -> Optional[Dict[str, Any]]:
        """
        Compare-and-set the completion flag

        The write only applies while the row still holds expected_completed.

        Returns:
            The updated row, or None when nothing matched
        """
        with remote_call("toggle task"):
            query = (
                self._table()
                .update({"completed": completed, "updated_at": updated_at})
                .eq("id", task_id)
                .eq("user_id", user_id)
                .eq("completed", expected_completed)
            )
            response = await run_in_threadpool(query.execute)
        return response.data[0] if response.data else None

    async def delete_task(self, *, task_id: str, user_id: str) -> int:
        """Delete matching rows and return how many were removed"""
        with remote_call("delete task"):
            query = (
                self._table()
                .delete()
                .eq("id", task_id)
                .eq("user_id", user_id)
            )
            response = await run_in_threadpool(query.execute)
        return len(response.data or [])
