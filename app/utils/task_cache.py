"""
Task List Cache
Redis-backed cache of each account's task list, invalidated by actions

Entries are keyed by a per-owner generation counter. Invalidation bumps the
counter, so a list read before a mutation and stored after it lands under a
stale generation and is never served.
"""

from typing import List, Optional

import structlog

from app.models.task import Task
from shared.utils.redis_client import RedisClient

logger = structlog.get_logger(__name__)


class TaskListCache:
    """Caches the dashboard task list per owner; a no-op without Redis"""

    key_prefix = "tasks:list"

    def __init__(self, redis_client: Optional[RedisClient] = None, ttl: int = 300):
        self.redis = redis_client
        self.ttl = ttl

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    def generation_key(self, user_id: str) -> str:
        return f"{self.key_prefix}:{user_id}:generation"

    def key(self, user_id: str, generation: int) -> str:
        return f"{self.key_prefix}:{user_id}:{generation}"

    def generation(self, user_id: str) -> int:
        """Current generation for user_id (0 before the first mutation)"""
        if not self.enabled:
            return 0
        try:
            return int(self.redis.get(self.generation_key(user_id), default=0))
        except (TypeError, ValueError):
            return 0

    def get(self, user_id: str, generation: Optional[int] = None) -> Optional[List[Task]]:
        """Cached tasks for user_id, or None on a miss"""
        if not self.enabled:
            return None
        if generation is None:
            generation = self.generation(user_id)

        rows = self.redis.get(self.key(user_id, generation))
        if rows is None:
            return None

        try:
            return [Task.from_row(row) for row in rows]
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed cached task list", user_id=user_id)
            self.redis.delete(self.key(user_id, generation))
            return None

    def set(self, user_id: str, tasks: List[Task], generation: Optional[int] = None) -> None:
        """
        Store tasks read at `generation`

        Nothing is stored when the generation moved on while the list was
        being read.
        """
        if not self.enabled:
            return
        current = self.generation(user_id)
        if generation is not None and generation != current:
            logger.debug("Skipping stale task list", user_id=user_id, generation=generation)
            return
        self.redis.set(self.key(user_id, current), [task.to_dict() for task in tasks], ttl=self.ttl)

    def invalidate(self, user_id: str) -> None:
        """Drop the cached list after a mutation"""
        if not self.enabled:
            return
        previous = self.generation(user_id)
        self.redis.incr(self.generation_key(user_id))
        self.redis.delete(self.key(user_id, previous))
        logger.debug("Task list cache invalidated", user_id=user_id)
