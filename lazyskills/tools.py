"""Tool descriptor and response models shared by the catalog and router."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ToolDefinition(BaseModel):
    """One entry of the tool catalog, as shown to MCP clients."""

    name: str
    description: str
    input_schema: dict[str, Any]  # JSON Schema

    def to_mcp_format(self) -> dict[str, Any]:
        """Convert to the MCP ``tools/list`` descriptor shape.

        Returns:
            Tool definition with camel-cased ``inputSchema``
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolResponse(BaseModel):
    """Result of a tool call.

    ``content`` holds MCP content blocks as plain dicts so bridge results
    can be passed through without being reinterpreted.
    """

    content: list[dict[str, Any]] = Field(default_factory=list)
    is_error: bool = False
    structured_content: dict[str, Any] | None = None

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        """Create a response holding a single text block.

        Args:
            text: The response body

        Returns:
            ToolResponse with one ``text`` content block
        """
        return cls(content=[{"type": "text", "text": text}])

    def first_text(self) -> str | None:
        """Return the text of the first text block, if any."""
        for block in self.content:
            if block.get("type") == "text":
                return block.get("text", "")
        return None
