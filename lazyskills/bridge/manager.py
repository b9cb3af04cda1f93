"""Lifecycle of the single connection to the lazy-mcp bridge."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable

from lazyskills.bridge.client import BridgeClient
from lazyskills.errors import (
    BridgeConnectionLostError,
    BridgeTimeoutError,
    BridgeUnavailableError,
)
from lazyskills.tools import ToolResponse
from lazyskills.utils import get_logger

logger = get_logger(__name__)


class BridgeState(str, Enum):
    DISABLED = "disabled"
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class BridgeConnectionManager:
    """Own the bridge connection and keep it in step with the feature flag.

    The flag is re-evaluated on every ``sync_with_flag``/``ensure_connected``.
    When it reads false, an open connection is closed and every registered
    disable listener runs (the bridge tool cache clears itself this way).
    Connecting is lazy and a failed attempt is retried on the next call that
    needs the bridge, as is a connection that dies after the handshake.
    Transitions are serialized by a lock.

    Example:
        >>> manager = BridgeConnectionManager(flag, lambda: StdioBridgeClient(cmd))
        >>> if await manager.ensure_connected():
        ...     result = await manager.call_tool("get_tools_in_category", {"path": ""})
    """

    def __init__(
        self,
        flag: Callable[[], bool],
        client_factory: Callable[[], BridgeClient],
        call_timeout: float | None = None,
    ):
        """Initialize the manager.

        Args:
            flag: Live "bridge enabled" predicate
            client_factory: Builds a fresh, unconnected client per attempt
            call_timeout: Seconds allowed per proxied call (None = no limit)
        """
        self._flag = flag
        self._client_factory = client_factory
        self.call_timeout = call_timeout
        self._client: BridgeClient | None = None
        self._state = BridgeState.DISCONNECTED
        self._last_error: BaseException | None = None
        self._lock = asyncio.Lock()
        self._disable_listeners: list[Callable[[], None]] = []

    @property
    def state(self) -> BridgeState:
        return self._state

    @property
    def last_error(self) -> BaseException | None:
        """Error from the most recent failed connection attempt."""
        return self._last_error

    @property
    def is_connected(self) -> bool:
        return self._state is BridgeState.CONNECTED

    def add_disable_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback run whenever the bridge becomes disabled."""
        self._disable_listeners.append(listener)

    async def sync_with_flag(self) -> bool:
        """Evaluate the flag and tear down the bridge if it is now off.

        Returns:
            The flag value that was evaluated
        """
        if self._flag():
            if self._state is BridgeState.DISABLED:
                self._state = BridgeState.DISCONNECTED
            return True

        async with self._lock:
            await self._disable()
        return False

    async def ensure_connected(self) -> bool:
        """Connect if enabled and not yet connected.

        Returns:
            True when a connection is available, False when the bridge is
            disabled or the connection attempt failed
        """
        if not await self.sync_with_flag():
            return False

        async with self._lock:
            if self._state is BridgeState.CONNECTED:
                return True
            return await self._connect()

    async def _connect(self) -> bool:
        self._state = BridgeState.CONNECTING
        client: BridgeClient | None = None
        try:
            client = self._client_factory()
            await client.connect()
        except Exception as e:
            self._state = BridgeState.FAILED
            self._last_error = e
            logger.error(f"Failed to connect to lazy-mcp: {e}", exc_info=True)
            if client is not None:
                await self._close_quietly(client)
            return False

        self._client = client
        self._state = BridgeState.CONNECTED
        self._last_error = None
        logger.info("Connected to lazy-mcp successfully")
        return True

    async def _disable(self) -> None:
        previous = self._state
        client, self._client = self._client, None
        self._state = BridgeState.DISABLED
        if client is not None:
            await self._close_quietly(client)
        for listener in self._disable_listeners:
            listener()
        if previous is not BridgeState.DISABLED:
            logger.info(
                "Lazy-MCP bridge disabled",
                extra={"previous_state": previous.value},
            )

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResponse:
        """Call one of the bridge provider's own tools.

        Raises:
            BridgeUnavailableError: Not connected
            BridgeTimeoutError: ``call_timeout`` elapsed first
            BridgeConnectionLostError: The connection died; the next
                ``ensure_connected`` reconnects
        """
        client = self._client
        if client is None or self._state is not BridgeState.CONNECTED:
            raise BridgeUnavailableError("Lazy-MCP bridge is not connected")

        try:
            if self.call_timeout is None:
                return await client.call_tool(name, arguments)
            return await asyncio.wait_for(client.call_tool(name, arguments), self.call_timeout)
        except asyncio.TimeoutError as e:
            raise BridgeTimeoutError(name, self.call_timeout) from e
        except BridgeConnectionLostError as e:
            await self._drop(client, e)
            raise

    async def _drop(self, client: BridgeClient, error: BaseException) -> None:
        async with self._lock:
            # a concurrent call may already have dropped or replaced it
            if self._client is not client:
                return
            self._client = None
            self._state = BridgeState.FAILED
            self._last_error = error
            logger.error(f"Lost connection to lazy-mcp: {error}")
            await self._close_quietly(client)

    async def close(self) -> None:
        """Close the connection, leaving the manager ready to reconnect."""
        async with self._lock:
            client, self._client = self._client, None
            if self._state is not BridgeState.DISABLED:
                self._state = BridgeState.DISCONNECTED
            if client is not None:
                await self._close_quietly(client)

    @staticmethod
    async def _close_quietly(client: BridgeClient) -> None:
        try:
            await client.close()
        except Exception as e:
            logger.warning(f"Error closing lazy-mcp client: {e}")
