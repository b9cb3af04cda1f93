"""Exception hierarchy for lazyskills."""

from __future__ import annotations


class LazySkillsError(Exception):
    """Base class for all lazyskills errors."""


class SkillLoadError(LazySkillsError):
    """A single skill could not be loaded.

    Raised inside the skill reader and logged there; it never escapes
    ``SkillRepository.load_all``.
    """


class FrontMatterError(SkillLoadError):
    """A descriptor has no parseable front-matter header."""


class BridgeError(LazySkillsError):
    """Base class for lazy-mcp bridge failures."""


class BridgeUnavailableError(BridgeError):
    """The bridge is disabled or not connected."""


class BridgeConnectError(BridgeError):
    """Spawning the bridge process or the protocol handshake failed."""


class BridgeConnectionLostError(BridgeError):
    """An established bridge connection went away (the process exited)."""


class BridgeTimeoutError(BridgeError):
    """A proxied bridge call did not finish within the configured deadline."""

    def __init__(self, tool_name: str, timeout: float):
        self.tool_name = tool_name
        self.timeout = timeout
        super().__init__(f"Tool '{tool_name}' timed out after {timeout:g}s")


class ToolNotFoundError(LazySkillsError):
    """No skill or bridge tool matches the requested name."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' not found")


class ToolExecutionError(LazySkillsError):
    """The bridge provider failed while executing a proxied call."""

    def __init__(self, tool_name: str, cause: BaseException | str):
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' execution failed: {cause}")
