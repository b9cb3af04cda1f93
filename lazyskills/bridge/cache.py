"""Cache of the flattened lazy-mcp tool set."""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from lazyskills.bridge.hierarchy import BridgeTool, assign_unique_names, scan_hierarchy
from lazyskills.bridge.manager import BridgeConnectionManager
from lazyskills.utils import get_logger

logger = get_logger(__name__)


class BridgeToolCache:
    """Hold the flattened bridge tools for ``ttl_ms`` milliseconds.

    Cleared by the connection manager whenever the bridge becomes disabled.
    A scan that overlaps a clear is discarded rather than stored. If the
    bridge cannot be reached, ``get`` returns an empty tuple.
    """

    def __init__(
        self,
        manager: BridgeConnectionManager,
        ttl_ms: int = 300000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.manager = manager
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._tools: tuple[BridgeTool, ...] = ()
        self._by_name: dict[str, BridgeTool] = {}
        self._loaded_at: float | None = None
        self._generation = 0
        self._lock = asyncio.Lock()
        manager.add_disable_listener(self.clear)

    def _is_fresh(self) -> bool:
        if not self._tools or self._loaded_at is None:
            return False
        return (self._clock() - self._loaded_at) * 1000 < self.ttl_ms

    async def get(self) -> tuple[BridgeTool, ...]:
        """Return the flattened bridge tools, rescanning when stale.

        A fresh list is only served while the bridge is connected; otherwise
        the connection is re-established first.
        """
        if self._is_fresh() and self.manager.is_connected:
            return self._tools

        async with self._lock:
            if not await self.manager.ensure_connected():
                logger.warning("Lazy-MCP not available, no bridge tools")
                return ()

            if self._is_fresh():
                return self._tools

            generation = self._generation
            tools = assign_unique_names(await scan_hierarchy(self.manager))
            if generation != self._generation or not self.manager.is_connected:
                logger.warning(
                    "Lazy-MCP bridge changed during scan, discarding result",
                    extra={"state": self.manager.state.value},
                )
                return ()

            self._tools = tuple(tools)
            self._by_name = {tool.external_name: tool for tool in tools}
            self._loaded_at = self._clock()
            logger.info(
                f"Flattened {len(tools)} lazy-mcp tools",
                extra={"categories": sorted({t.category for t in tools})},
            )
            return self._tools

    async def find(self, external_name: str) -> BridgeTool | None:
        """Look up a bridge tool by its external name."""
        await self.get()
        return self._by_name.get(external_name)

    def clear(self) -> None:
        self._generation += 1
        self._tools = ()
        self._by_name = {}
        self._loaded_at = None
