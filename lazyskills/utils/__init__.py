"""lazyskills utilities."""

from lazyskills.utils.helpers import safe_json_loads
from lazyskills.utils.logging import get_logger, setup_logging

__all__ = [
    "safe_json_loads",
    "setup_logging",
    "get_logger",
]
