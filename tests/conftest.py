"""Shared fixtures: skill trees on disk, a fake clock and a fake lazy-mcp."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from lazyskills.bridge.hierarchy import BROWSE_TOOL, EXECUTE_TOOL
from lazyskills.config import Settings
from lazyskills.errors import BridgeConnectError, BridgeConnectionLostError
from lazyskills.factory import create_app
from lazyskills.tools import ToolResponse


def write_skill(
    root: Path,
    dir_name: str,
    name: str | None = None,
    description: str | None = None,
    body: str = "",
    **extra: Any,
) -> Path:
    """Write ``root/dir_name/SKILL.md`` and return its path."""
    metadata: dict[str, Any] = {}
    if name is not None:
        metadata["name"] = name
    if description is not None:
        metadata["description"] = description
    metadata.update(extra)

    skill_dir = root / dir_name
    skill_dir.mkdir(parents=True, exist_ok=True)
    skill_md = skill_dir / "SKILL.md"
    skill_md.write_text(f"---\n{yaml.safe_dump(metadata, sort_keys=False)}---\n{body}")
    return skill_md


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Switch:
    """Mutable stand-in for the bridge feature flag."""

    def __init__(self, on: bool = True):
        self.on = on
        self.calls = 0

    def __call__(self) -> bool:
        self.calls += 1
        return self.on


# filesystem.read_file                -> read_file
# github.search                       -> search
# github.repos.create_issue           -> github_create_issue
# github.repos.search                 -> github_search
LAZY_MCP_TREE: dict[str, dict[str, Any]] = {
    "": {
        "tools": {},
        "children": {"filesystem": {}, "github": {}},
    },
    "filesystem": {
        "tools": {
            "read_file": {
                "description": "Read a file",
                "inputSchema": {
                    "type": "object",
                    "properties": {"path": {"type": "string"}},
                    "required": ["path"],
                },
            },
        },
    },
    "github": {
        "tools": {"search": {"description": "Search GitHub"}},
        "children": {"repos": {}},
    },
    "github.repos": {
        "tools": {
            "create_issue": {"description": "Create an issue"},
            "search": {},
        },
    },
}


class FakeBridgeClient:
    """In-memory lazy-mcp speaking ``get_tools_in_category``/``execute_tool``."""

    def __init__(self, tree: dict[str, dict[str, Any]] | None = None):
        self.tree = tree if tree is not None else LAZY_MCP_TREE
        self.fail_connect = False
        self.fail_paths: set[str] = set()
        self.execute_error: Exception | None = None
        self.execute_delay: float = 0.0
        self.browse_delay: float = 0.0
        self.connected = False
        self.lost = False
        self.connect_count = 0
        self.close_count = 0
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def connect(self) -> None:
        self.connect_count += 1
        if self.fail_connect:
            raise BridgeConnectError("lazy-mcp did not start")
        self.connected = True
        self.lost = False

    def drop_connection(self) -> None:
        """Simulate the lazy-mcp process exiting after the handshake."""
        self.lost = True

    async def close(self) -> None:
        self.close_count += 1
        self.connected = False

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResponse:
        self.calls.append((name, arguments))
        if self.lost:
            raise BridgeConnectionLostError("lazy-mcp exited")
        if name == BROWSE_TOOL:
            if self.browse_delay:
                await asyncio.sleep(self.browse_delay)
            path = arguments["path"]
            if path in self.fail_paths:
                raise RuntimeError(f"category {path} exploded")
            return ToolResponse.text(json.dumps(self.tree.get(path, {})))
        if name == EXECUTE_TOOL:
            if self.execute_delay:
                await asyncio.sleep(self.execute_delay)
            if self.execute_error is not None:
                raise self.execute_error
            return ToolResponse(
                content=[{"type": "text", "text": f"ran {arguments['tool_path']}"}],
                structured_content={"arguments": arguments["arguments"]},
            )
        raise RuntimeError(f"unknown lazy-mcp tool {name}")

    def browse_count(self) -> int:
        return sum(1 for name, _ in self.calls if name == BROWSE_TOOL)


@pytest.fixture
def skills_root(tmp_path: Path) -> Path:
    root = tmp_path / "skills"
    root.mkdir()
    return root


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def switch() -> Switch:
    return Switch(on=False)


@pytest.fixture
def fake_bridge() -> FakeBridgeClient:
    return FakeBridgeClient()


@pytest.fixture
def make_app(skills_root: Path, clock: FakeClock, switch: Switch, fake_bridge: FakeBridgeClient):
    """Build a wired app around the fixtures; keyword args override settings."""

    def factory(**overrides: Any):
        settings = Settings(skills_dir=skills_root, **overrides)
        return create_app(
            settings,
            flag=switch,
            client_factory=lambda: fake_bridge,
            clock=clock,
        )

    return factory
