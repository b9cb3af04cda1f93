"""Time-boxed cache in front of the skill reader."""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from lazyskills.skills.loader import SkillRepository
from lazyskills.skills.models import Skill
from lazyskills.utils import get_logger

logger = get_logger(__name__)


class SkillCache:
    """Serve the last skill snapshot until it is older than the TTL.

    An empty snapshot is never served from cache, so a skills directory that
    was empty at start-up is picked up as soon as skills appear. A TTL of 0
    re-reads on every call. Concurrent callers share one in-flight reload.
    """

    def __init__(
        self,
        repository: SkillRepository,
        ttl_ms: int = 5000,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            repository: Skill reader to load from
            ttl_ms: Snapshot lifetime in milliseconds
            clock: Monotonic clock returning seconds
        """
        self.repository = repository
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._skills: tuple[Skill, ...] = ()
        self._loaded_at: float | None = None
        self._lock = asyncio.Lock()
        self._reload_count = 0

    def _is_fresh(self) -> bool:
        if not self._skills or self._loaded_at is None:
            return False
        elapsed_ms = (self._clock() - self._loaded_at) * 1000
        return elapsed_ms < self.ttl_ms

    async def get(self) -> tuple[Skill, ...]:
        """Return the current skill snapshot, reloading when stale."""
        if self._is_fresh():
            return self._skills

        async with self._lock:
            # Another caller may have reloaded while we waited
            if self._is_fresh():
                return self._skills

            loop = asyncio.get_running_loop()
            skills = await loop.run_in_executor(None, self.repository.load_all)
            self._skills = tuple(skills)
            self._loaded_at = self._clock()
            self._reload_count += 1
            logger.debug(
                "Skill cache reloaded",
                extra={"count": len(self._skills), "reloads": self._reload_count},
            )
            return self._skills

    async def find(self, name: str) -> Skill | None:
        """Look up a skill by tool name in the current snapshot."""
        for skill in await self.get():
            if skill.name == name:
                return skill
        return None

    def invalidate(self) -> None:
        """Force the next ``get`` to re-read disk."""
        self._loaded_at = None

    @property
    def reload_count(self) -> int:
        """Number of disk reloads performed so far."""
        return self._reload_count
