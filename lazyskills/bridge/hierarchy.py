"""Flattening the lazy-mcp category tree into plain tools."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from lazyskills.bridge.manager import BridgeConnectionManager
from lazyskills.tools import ToolDefinition, ToolResponse
from lazyskills.utils import get_logger, safe_json_loads

logger = get_logger(__name__)

# Tools exposed by lazy-mcp itself
BROWSE_TOOL = "get_tools_in_category"
EXECUTE_TOOL = "execute_tool"

DEFAULT_DESCRIPTION = "No description available"


class BridgeTool(BaseModel):
    """A leaf tool found in the lazy-mcp hierarchy."""

    model_config = ConfigDict(frozen=True)

    external_name: str
    hierarchical_path: str
    category: str
    description: str
    input_schema: dict[str, Any]

    def to_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name=self.external_name,
            description=self.description,
            input_schema=self.input_schema,
        )


def external_tool_name(tool_path: str) -> str:
    """Name a tool path for the flat listing.

    Paths nested more than one level get their category as a prefix:
    ``github.repos.create_issue`` becomes ``github_create_issue``, while
    ``filesystem.read_file`` stays ``read_file``.
    """
    parts = tool_path.split(".")
    if len(parts) > 2:
        return f"{parts[0]}_{parts[-1]}"
    return parts[-1]


def infer_input_schema(tool_def: dict[str, Any]) -> dict[str, Any]:
    """Use the tool's own schema, or a generic optional ``input`` string."""
    schema = tool_def.get("inputSchema")
    if isinstance(schema, dict) and schema:
        return schema
    return {
        "type": "object",
        "properties": {
            "input": {
                "type": "string",
                "description": "Input for this tool",
            }
        },
        "required": [],
    }


def create_bridge_tool(tool_path: str, tool_def: dict[str, Any]) -> BridgeTool:
    category = tool_path.split(".")[0]
    description = tool_def.get("description") or DEFAULT_DESCRIPTION
    return BridgeTool(
        external_name=external_tool_name(tool_path),
        hierarchical_path=tool_path,
        category=category,
        description=f"[{category}] {description}",
        input_schema=infer_input_schema(tool_def),
    )


def parse_category_listing(response: ToolResponse) -> dict[str, Any] | None:
    """Decode the JSON body of a ``get_tools_in_category`` response."""
    text = response.first_text()
    if not text:
        return None
    data = safe_json_loads(text, default=None)
    if not isinstance(data, dict) or not data:
        return None
    return data


def _child_path(path: str, child: str) -> str:
    if not path or child.startswith(f"{path}."):
        return child
    return f"{path}.{child}"


async def scan_hierarchy(
    manager: BridgeConnectionManager,
    path: str = "",
    _visited: set[str] | None = None,
) -> list[BridgeTool]:
    """Collect every leaf tool at or below ``path``.

    A category that fails to load is logged and contributes nothing; the
    rest of the tree is still scanned.

    Args:
        manager: Connected bridge manager
        path: Dot-separated category path, "" for the root

    Returns:
        Tools in depth-first order, before name de-duplication
    """
    visited = _visited if _visited is not None else set()
    if path in visited:
        return []
    visited.add(path)

    tools: list[BridgeTool] = []
    try:
        response = await manager.call_tool(BROWSE_TOOL, {"path": path})
        listing = parse_category_listing(response)
    except Exception as e:
        logger.error(f"Error scanning lazy-mcp hierarchy at path {path!r}: {e}")
        return tools

    if listing is None:
        return tools

    leaf_tools = listing.get("tools") or {}
    if isinstance(leaf_tools, dict):
        for tool_name, tool_def in leaf_tools.items():
            tool_path = _child_path(path, tool_name)
            tools.append(create_bridge_tool(tool_path, tool_def if isinstance(tool_def, dict) else {}))

    children = listing.get("children") or {}
    if isinstance(children, dict):
        for child in children:
            tools.extend(await scan_hierarchy(manager, _child_path(path, child), visited))

    return tools


def assign_unique_names(tools: list[BridgeTool]) -> list[BridgeTool]:
    """Rename tools whose external name is already taken.

    The first tool keeps the rule-derived name. Later ones fall back to the
    full path with underscores, then to a numeric suffix.
    """
    taken: set[str] = set()
    unique: list[BridgeTool] = []
    for tool in tools:
        name = tool.external_name
        if name in taken:
            name = tool.hierarchical_path.replace(".", "_")
            suffix = 2
            base = name
            while name in taken:
                name = f"{base}_{suffix}"
                suffix += 1
            logger.warning(
                f"Bridge tool name collision: {tool.hierarchical_path} exposed as {name}"
            )
            tool = tool.model_copy(update={"external_name": name})
        taken.add(name)
        unique.append(tool)
    return unique
