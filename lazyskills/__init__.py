"""lazyskills - serve local SKILL.md skills as MCP tools with a lazy-mcp bridge."""

__version__ = "0.2.0"
