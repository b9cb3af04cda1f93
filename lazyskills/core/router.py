"""Route ``tools/call`` requests to skills or the lazy-mcp bridge."""

from __future__ import annotations

from typing import Any

from lazyskills.bridge.cache import BridgeToolCache
from lazyskills.bridge.hierarchy import EXECUTE_TOOL
from lazyskills.bridge.manager import BridgeConnectionManager
from lazyskills.errors import BridgeTimeoutError, ToolExecutionError, ToolNotFoundError
from lazyskills.skills.cache import SkillCache
from lazyskills.skills.instructions import render_executable_skill
from lazyskills.tools import ToolResponse
from lazyskills.utils import get_logger

logger = get_logger(__name__)


class CallRouter:
    """Resolve a tool name to exactly one handler.

    Resolution order is: skills, then (only while the bridge flag is on)
    flattened bridge tools, then ``ToolNotFoundError``.

    Example:
        >>> router = CallRouter(skill_cache, manager, bridge_tools)
        >>> response = await router.invoke("weather", {})
        >>> response.first_text()
        'Always answer in Celsius.'
    """

    def __init__(
        self,
        skills: SkillCache,
        bridge: BridgeConnectionManager,
        bridge_tools: BridgeToolCache,
    ):
        self.skills = skills
        self.bridge = bridge
        self.bridge_tools = bridge_tools
        self._call_count = 0

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        """Invoke a tool by name.

        Args:
            name: Tool name from the catalog
            arguments: Tool arguments, passed to bridge tools unchanged

        Returns:
            The tool response

        Raises:
            ToolNotFoundError: Nothing matches ``name``
            ToolExecutionError: The bridge failed while running the tool
            BridgeTimeoutError: The bridge call exceeded its deadline
        """
        arguments = arguments or {}
        self._call_count += 1

        skill = await self.skills.find(name)
        if skill is not None:
            logger.info(
                "Invoking skill",
                extra={"tool": name, "kind": skill.kind.value, "call_id": self._call_count},
            )
            if skill.is_executable:
                return ToolResponse.text(render_executable_skill(skill, arguments))
            return ToolResponse.text(skill.content)

        if await self.bridge.sync_with_flag():
            tool = await self.bridge_tools.find(name)
            if tool is not None:
                logger.info(
                    "Proxying to lazy-mcp",
                    extra={
                        "tool": name,
                        "tool_path": tool.hierarchical_path,
                        "call_id": self._call_count,
                    },
                )
                try:
                    return await self.bridge.call_tool(
                        EXECUTE_TOOL,
                        {"tool_path": tool.hierarchical_path, "arguments": arguments},
                    )
                except BridgeTimeoutError as e:
                    raise BridgeTimeoutError(name, e.timeout) from e
                except Exception as e:
                    logger.error(
                        f"Error executing lazy-mcp tool {tool.hierarchical_path}: {e}"
                    )
                    raise ToolExecutionError(name, e) from e

        raise ToolNotFoundError(name)

    @property
    def call_count(self) -> int:
        """Total number of calls routed."""
        return self._call_count
