"""Local SKILL.md skills."""

from lazyskills.skills.cache import SkillCache
from lazyskills.skills.filesystem import (
    DirEntry,
    FrontMatterDocument,
    LocalSkillFileSystem,
    SkillFileSystem,
    parse_front_matter,
)
from lazyskills.skills.instructions import render_executable_skill
from lazyskills.skills.loader import SkillRepository
from lazyskills.skills.models import ExecutionLogic, Skill, SkillKind

__all__ = [
    "DirEntry",
    "ExecutionLogic",
    "FrontMatterDocument",
    "LocalSkillFileSystem",
    "Skill",
    "SkillCache",
    "SkillFileSystem",
    "SkillKind",
    "SkillRepository",
    "parse_front_matter",
    "render_executable_skill",
]
