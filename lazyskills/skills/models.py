"""Data models for SKILL.md skills."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SkillKind(str, Enum):
    """How a skill answers an invocation."""
    STATIC = "static"
    EXECUTABLE = "executable"


class ExecutionLogic(str, Enum):
    """Orchestration style requested by an executable skill."""
    STATIC = "static"
    CONDITIONAL = "conditional"
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


class Skill(BaseModel):
    """One skill loaded from a ``SKILL.md`` descriptor.

    Only ``name`` and ``description`` appear in tool listings; ``content``
    is returned when the skill is invoked.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    content: str = ""
    source_path: Path
    kind: SkillKind = SkillKind.STATIC
    allowed_tools: tuple[str, ...] = ()
    execution_logic: ExecutionLogic = ExecutionLogic.STATIC
    parameters: dict[str, Any] = Field(default_factory=dict)
    skill_id: str = ""
    version: str = "latest"

    @field_validator("name", "description")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() == SkillKind.EXECUTABLE.value:
            return SkillKind.EXECUTABLE
        if isinstance(value, SkillKind):
            return value
        return SkillKind.STATIC

    @field_validator("execution_logic", mode="before")
    @classmethod
    def _coerce_logic(cls, value: Any) -> Any:
        if isinstance(value, ExecutionLogic):
            return value
        try:
            return ExecutionLogic(str(value).strip().lower())
        except ValueError:
            return ExecutionLogic.STATIC

    @field_validator("allowed_tools", mode="before")
    @classmethod
    def _coerce_tools(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            # "allowed_tools: Read, Grep" is common shorthand
            return tuple(t.strip() for t in value.split(",") if t.strip())
        return tuple(str(t) for t in value)

    @field_validator("parameters", mode="before")
    @classmethod
    def _coerce_parameters(cls, value: Any) -> Any:
        return value or {}

    @model_validator(mode="before")
    @classmethod
    def _default_skill_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("skill_id"):
            data = {**data, "skill_id": data.get("name", "")}
        return data

    @property
    def is_executable(self) -> bool:
        return self.kind is SkillKind.EXECUTABLE
