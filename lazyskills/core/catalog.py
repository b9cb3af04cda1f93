"""Build the tool catalog returned by ``tools/list``."""

from __future__ import annotations

from lazyskills.bridge.cache import BridgeToolCache
from lazyskills.bridge.manager import BridgeConnectionManager
from lazyskills.skills.cache import SkillCache
from lazyskills.skills.models import Skill
from lazyskills.tools import ToolDefinition
from lazyskills.utils import get_logger

logger = get_logger(__name__)

# Every skill is listed with the same schema, whatever its own parameters
SKILL_INPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "Optional query or context for using this skill",
        }
    },
}


def skill_definition(skill: Skill) -> ToolDefinition:
    """Catalog entry for a skill: name and description only."""
    return ToolDefinition(
        name=skill.name,
        description=skill.description,
        input_schema=SKILL_INPUT_SCHEMA,
    )


class CatalogComposer:
    """Merge skills and bridge tools into one ordered catalog.

    Skills always come first. Bridge tools follow only if the bridge flag is
    on at the moment of the request.
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

    async def build_catalog(self) -> list[ToolDefinition]:
        """Compose the catalog for one listing request."""
        skills = await self.skills.get()
        catalog = [skill_definition(skill) for skill in skills]

        if not await self.bridge.sync_with_flag():
            logger.debug(
                "Lazy-MCP disabled, listing skills only",
                extra={"skills": len(skills)},
            )
            return catalog

        try:
            bridge_tools = await self.bridge_tools.get()
        except Exception as e:
            logger.error(f"Failed to list lazy-mcp tools: {e}", exc_info=True)
            bridge_tools = ()

        catalog.extend(tool.to_definition() for tool in bridge_tools)
        logger.info(
            f"Returning {len(catalog)} tools "
            f"({len(skills)} skills + {len(bridge_tools)} lazy-mcp)"
        )
        return catalog
