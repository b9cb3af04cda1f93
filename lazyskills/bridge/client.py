"""Client side of the connection to the lazy-mcp bridge process."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

import anyio
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError
from mcp.types import CONNECTION_CLOSED, Implementation

from lazyskills import __version__
from lazyskills.errors import (
    BridgeConnectError,
    BridgeConnectionLostError,
)
from lazyskills.tools import ToolResponse
from lazyskills.utils import get_logger

logger = get_logger(__name__)


class BridgeClient(ABC):
    """Request/response channel to the bridge provider."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection.

        Raises:
            BridgeConnectError: The provider could not be started or did not
                complete the handshake.
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""

    @abstractmethod
    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResponse:
        """Call one of the provider's own tools and return its result.

        Raises:
            BridgeConnectionLostError: The connection died after the handshake.
        """


class StdioBridgeClient(BridgeClient):
    """Spawn the bridge command and talk MCP to it over stdio.

    The transport and session live inside one background task for their
    whole lifetime, because anyio cancel scopes must be exited by the task
    that entered them and connect/close happen in different requests.
    """

    def __init__(
        self,
        command: str,
        args: list[str] | None = None,
        env: dict[str, str] | None = None,
    ):
        self.command = command
        self.args = list(args or [])
        self.env = env
        self._session: ClientSession | None = None
        self._runner: asyncio.Task | None = None
        self._ready: asyncio.Event | None = None
        self._shutdown: asyncio.Event | None = None
        self._error: BaseException | None = None

    async def connect(self) -> None:
        if self._runner is not None and not self._runner.done():
            return

        self._ready = asyncio.Event()
        self._shutdown = asyncio.Event()
        self._error = None
        self._runner = asyncio.create_task(self._run(), name="lazy-bridge-session")
        await self._ready.wait()

        if self._session is None:
            await self._runner
            raise BridgeConnectError(
                f"Failed to connect to {self.command}: {self._error}"
            ) from self._error

    async def _run(self) -> None:
        params = StdioServerParameters(command=self.command, args=self.args, env=self.env)
        try:
            async with stdio_client(params) as (read, write):
                async with ClientSession(
                    read,
                    write,
                    client_info=Implementation(
                        name="lazyskills-bridge-client", version=__version__
                    ),
                ) as session:
                    await session.initialize()
                    self._session = session
                    self._ready.set()
                    await self._shutdown.wait()
        except Exception as e:
            self._error = e
            if self._session is not None:
                logger.error(f"Bridge session ended with error: {e}")
        finally:
            self._session = None
            self._ready.set()

    async def close(self) -> None:
        runner = self._runner
        if runner is None:
            return
        self._runner = None
        if self._shutdown is not None:
            self._shutdown.set()
        try:
            await runner
        except Exception as e:
            logger.warning(f"Error while closing bridge connection: {e}")

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResponse:
        session = self._session
        if session is None:
            raise BridgeConnectionLostError("Bridge session has ended")
        try:
            result = await session.call_tool(name, arguments)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError, anyio.EndOfStream) as e:
            raise BridgeConnectionLostError(f"Connection to {self.command} lost") from e
        except McpError as e:
            if e.error.code == CONNECTION_CLOSED:
                raise BridgeConnectionLostError(f"Connection to {self.command} closed") from e
            raise
        return ToolResponse(
            content=[block.model_dump(mode="json", by_alias=True, exclude_none=True) for block in result.content],
            is_error=bool(result.isError),
            structured_content=result.structuredContent,
        )
