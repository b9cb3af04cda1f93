"""File-system collaborator used by the skill reader.

The reader only talks to this protocol, so tests can hand it an in-memory
tree and the on-disk layout stays in one place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import yaml

from lazyskills.errors import FrontMatterError

# YAML front matter, optionally followed by a body
FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n(.*))?$", re.DOTALL)


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_directory: bool


@dataclass(frozen=True)
class FrontMatterDocument:
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""


class SkillFileSystem(Protocol):
    """What the skill reader needs from the file system."""

    def ensure_directory(self, path: Path) -> None: ...

    def read_directory_entries(self, path: Path) -> list[DirEntry]: ...

    def file_exists(self, path: Path) -> bool: ...

    def read_file_as_text(self, path: Path) -> str: ...

    def parse_front_matter_document(self, text: str) -> FrontMatterDocument: ...


def parse_front_matter(text: str) -> FrontMatterDocument:
    """Split a SKILL.md document into YAML metadata and markdown body.

    Raises:
        FrontMatterError: No front matter, invalid YAML, or YAML that is
            not a mapping.
    """
    match = FRONTMATTER_RE.match(text.lstrip("\ufeff"))
    if not match:
        raise FrontMatterError("No valid YAML frontmatter")
    try:
        metadata = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML frontmatter: {e}") from e
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise FrontMatterError("Frontmatter must be a YAML mapping")
    body = (match.group(2) or "").strip()
    return FrontMatterDocument(metadata=metadata, body=body)


class LocalSkillFileSystem:
    """``SkillFileSystem`` backed by the local disk."""

    def ensure_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def read_directory_entries(self, path: Path) -> list[DirEntry]:
        return [
            DirEntry(name=child.name, is_directory=child.is_dir())
            for child in sorted(path.iterdir(), key=lambda p: p.name)
        ]

    def file_exists(self, path: Path) -> bool:
        return path.is_file()

    def read_file_as_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def parse_front_matter_document(self, text: str) -> FrontMatterDocument:
        return parse_front_matter(text)
