"""Catalog composition and call routing."""

from lazyskills.core.catalog import CatalogComposer, skill_definition
from lazyskills.core.router import CallRouter

__all__ = [
    "CallRouter",
    "CatalogComposer",
    "skill_definition",
]
