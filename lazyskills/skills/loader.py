"""SKILL.md reader for the skills directory."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lazyskills.errors import SkillLoadError
from lazyskills.skills.filesystem import LocalSkillFileSystem, SkillFileSystem
from lazyskills.skills.models import Skill
from lazyskills.utils import get_logger

logger = get_logger(__name__)

SKILL_FILENAME = "SKILL.md"

# Directory names are joined onto the skills root
_UNSAFE_NAME_PARTS = ("..", "/", "\\")


def is_safe_skill_dir_name(name: str) -> bool:
    """Return False for directory names that could escape the skills root."""
    return bool(name) and not any(part in name for part in _UNSAFE_NAME_PARTS)


def skill_from_metadata(metadata: dict[str, Any], body: str, source_path: Path) -> Skill:
    """Build a Skill from parsed front matter.

    Raises:
        SkillLoadError: ``name`` or ``description`` is missing or empty, or
            another field has an unusable value.
    """
    name = metadata.get("name")
    description = metadata.get("description")
    if not name or not description or not str(name).strip() or not str(description).strip():
        raise SkillLoadError("missing name or description")

    version = metadata.get("version")
    try:
        return Skill(
            name=str(name),
            description=str(description),
            content=body,
            source_path=source_path,
            kind=metadata.get("type") or "static",
            allowed_tools=metadata.get("allowed_tools"),
            execution_logic=metadata.get("execution_logic") or "static",
            parameters=metadata.get("parameters"),
            skill_id=str(metadata.get("skill_id") or name).strip(),
            version=str(version) if version is not None else "latest",
        )
    except ValidationError as e:
        raise SkillLoadError(str(e)) from e


class SkillRepository:
    """Reads every skill under one root directory.

    Each immediate subdirectory holding a ``SKILL.md`` is one skill. Bad
    skills are logged and skipped; they never abort the whole load.

    Example:
        >>> repo = SkillRepository(Path("~/.skills").expanduser())
        >>> [s.name for s in repo.load_all()]
        ['weather']
    """

    def __init__(self, root: Path, filesystem: SkillFileSystem | None = None):
        """Initialize the repository.

        Args:
            root: Skills root directory
            filesystem: File-system collaborator (defaults to local disk)
        """
        self.root = root
        self._fs = filesystem or LocalSkillFileSystem()

    def load_all(self) -> list[Skill]:
        """Read all skills from disk.

        Always re-reads; caching is the job of ``SkillCache``. When two
        directories declare the same name, the one read last wins.

        Returns:
            Loaded skills in directory-name order, possibly empty
        """
        try:
            self._fs.ensure_directory(self.root)
        except OSError as e:
            logger.error(f"Failed to create skills directory {self.root}: {e}")
            return []

        try:
            entries = self._fs.read_directory_entries(self.root)
        except OSError as e:
            logger.error(f"Failed to read skills directory {self.root}: {e}")
            return []

        skills: dict[str, Skill] = {}
        for entry in entries:
            if not entry.is_directory:
                continue

            if not is_safe_skill_dir_name(entry.name):
                logger.warning(f"Invalid skill directory name: {entry.name!r}, skipping")
                continue

            try:
                skill = self._load_one(entry.name)
            except Exception as e:
                logger.warning(
                    f"Skipping skill {entry.name}: {e}",
                    extra={"skill_dir": entry.name},
                )
                continue
            if skill is None:
                continue

            previous = skills.pop(skill.name, None)
            if previous is not None:
                logger.warning(
                    f"Duplicate skill name '{skill.name}': {skill.source_path} "
                    f"replaces {previous.source_path}"
                )
            skills[skill.name] = skill

        logger.info(
            f"Loaded {len(skills)} skills from {self.root}",
            extra={"skills": list(skills)},
        )
        return list(skills.values())

    def _load_one(self, dir_name: str) -> Skill | None:
        skill_md = self.root / dir_name / SKILL_FILENAME
        if not self._fs.file_exists(skill_md):
            logger.warning(f"{SKILL_FILENAME} not found in {dir_name}, skipping")
            return None

        text = self._fs.read_file_as_text(skill_md)
        document = self._fs.parse_front_matter_document(text)
        return skill_from_metadata(document.metadata, document.body, skill_md)
