"""Invocation text for executable skills."""

from __future__ import annotations

from typing import Any

from lazyskills.skills.models import ExecutionLogic, Skill

_TOOL_STRATEGY = (
    "## Tool Usage Strategy\n"
    "- Analyze the task and select appropriate tools\n"
    "- Use tools in sequence to accomplish the task\n"
    "- Combine tool outputs for comprehensive solutions\n"
    "- Handle errors gracefully and provide alternatives\n\n"
)

_LOGIC_SECTIONS: dict[ExecutionLogic, str] = {
    ExecutionLogic.CONDITIONAL: (
        "## Conditional Logic\n"
        "- Analyze the input and context\n"
        "- Make decisions based on available information\n"
        "- Adapt your approach based on results\n"
    ),
    ExecutionLogic.SEQUENTIAL: (
        "## Sequential Execution\n"
        "- Follow steps in logical order\n"
        "- Use output from previous steps as input to next\n"
        "- Validate each step before proceeding\n"
    ),
    ExecutionLogic.PARALLEL: (
        "## Parallel Execution\n"
        "- Execute multiple operations simultaneously\n"
        "- Coordinate results from parallel operations\n"
        "- Handle dependencies between operations\n"
    ),
}

_STANDARD_SECTION = (
    "## Standard Execution\n"
    "- Follow the provided instructions systematically\n"
    "- Use available tools as needed\n"
    "- Provide comprehensive solutions\n"
)


def render_executable_skill(skill: Skill, arguments: dict[str, Any] | None = None) -> str:
    """Build the instructions returned when an executable skill is invoked.

    Args:
        skill: The skill being invoked
        arguments: Call arguments; ``query`` becomes the task context

    Returns:
        Markdown instructions
    """
    query = (arguments or {}).get("query") or ""
    if not isinstance(query, str):
        query = str(query)

    parts = [f"# {skill.name} - Dynamic Execution\n\n", f"{skill.description}\n\n"]

    if query:
        parts.append(f"## Task Context\n{query}\n\n")

    if skill.allowed_tools:
        parts.append(
            f"## Available Tools\nYou have access to these tools: "
            f"{', '.join(skill.allowed_tools)}\n\n"
        )
        parts.append(_TOOL_STRATEGY)

    parts.append(f"## Execution Instructions\n{skill.content}\n\n")
    parts.append(_LOGIC_SECTIONS.get(skill.execution_logic, _STANDARD_SECTION))
    return "".join(parts)
