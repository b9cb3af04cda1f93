"""lazy-mcp bridge integration."""

from lazyskills.bridge.cache import BridgeToolCache
from lazyskills.bridge.client import BridgeClient, StdioBridgeClient
from lazyskills.bridge.flag import BridgeFlag, command_exists
from lazyskills.bridge.hierarchy import (
    BridgeTool,
    external_tool_name,
    infer_input_schema,
    scan_hierarchy,
)
from lazyskills.bridge.manager import BridgeConnectionManager, BridgeState

__all__ = [
    "BridgeClient",
    "BridgeConnectionManager",
    "BridgeFlag",
    "BridgeState",
    "BridgeTool",
    "BridgeToolCache",
    "StdioBridgeClient",
    "command_exists",
    "external_tool_name",
    "infer_input_schema",
    "scan_hierarchy",
]
