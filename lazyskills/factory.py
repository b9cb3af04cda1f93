"""Factory functions wiring the caches, bridge and router together."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from lazyskills.bridge import (
    BridgeClient,
    BridgeConnectionManager,
    BridgeFlag,
    BridgeToolCache,
    StdioBridgeClient,
)
from lazyskills.core import CallRouter, CatalogComposer
from lazyskills.skills import SkillCache, SkillFileSystem, SkillRepository

if TYPE_CHECKING:
    from lazyskills.config import Settings


@dataclass
class SkillsApp:
    """Everything one server process shares across requests."""

    settings: "Settings"
    skills: SkillCache
    bridge: BridgeConnectionManager
    bridge_tools: BridgeToolCache
    composer: CatalogComposer
    router: CallRouter

    async def aclose(self) -> None:
        await self.bridge.close()


def create_bridge_flag(settings: "Settings") -> BridgeFlag:
    return BridgeFlag(
        command=settings.lazy_bridge_command,
        override=settings.lazy_bridge_enabled,
    )


def create_app(
    settings: "Settings",
    *,
    filesystem: SkillFileSystem | None = None,
    flag: Callable[[], bool] | None = None,
    client_factory: Callable[[], BridgeClient] | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> SkillsApp:
    """Create the application from settings.

    Args:
        settings: lazyskills settings
        filesystem: Skill file-system collaborator (default: local disk)
        flag: Bridge-enabled predicate (default: from settings + environment)
        client_factory: Builds bridge clients (default: stdio subprocess)
        clock: Monotonic clock shared by both caches

    Returns:
        Wired application
    """
    if client_factory is None:
        def client_factory() -> BridgeClient:
            return StdioBridgeClient(
                command=settings.lazy_bridge_command,
                args=settings.lazy_bridge_args,
            )

    repository = SkillRepository(settings.skills_dir, filesystem=filesystem)
    skills = SkillCache(repository, ttl_ms=settings.cache_duration, clock=clock)
    bridge = BridgeConnectionManager(
        flag=flag or create_bridge_flag(settings),
        client_factory=client_factory,
        call_timeout=settings.lazy_bridge_call_timeout,
    )
    bridge_tools = BridgeToolCache(
        bridge, ttl_ms=settings.lazy_bridge_cache_duration, clock=clock
    )

    return SkillsApp(
        settings=settings,
        skills=skills,
        bridge=bridge,
        bridge_tools=bridge_tools,
        composer=CatalogComposer(skills, bridge, bridge_tools),
        router=CallRouter(skills, bridge, bridge_tools),
    )
