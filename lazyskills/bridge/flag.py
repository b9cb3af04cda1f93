"""Live "is the lazy-mcp bridge enabled" predicate."""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping
from pathlib import Path

ENV_VAR = "LAZY_BRIDGE_ENABLED"

TRUE_VALUES = frozenset(("true", "1", "yes", "on"))


def parse_flag_value(value: str) -> bool:
    """Read an explicit flag string; anything but a true value means off."""
    return value.strip().lower() in TRUE_VALUES


def command_exists(command: str) -> bool:
    """Return True if the launch command is a file or is found on PATH."""
    if not command:
        return False
    if Path(command).expanduser().exists():
        return True
    return shutil.which(command) is not None


class BridgeFlag:
    """Zero-argument callable deciding whether the bridge is enabled.

    Evaluated fresh on every call, in this order:

    1. ``LAZY_BRIDGE_ENABLED`` in the live environment, if set
    2. the configured override, if not None
    3. whether the bridge launch command exists

    Example:
        >>> flag = BridgeFlag("../lazy-mcp/run-lazy-mcp.sh")
        >>> flag()
        False
    """

    def __init__(
        self,
        command: str,
        override: bool | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.command = command
        self.override = override
        self._environ = environ if environ is not None else os.environ

    def __call__(self) -> bool:
        value = self._environ.get(ENV_VAR)
        if value is not None:
            return parse_flag_value(value)
        if self.override is not None:
            return self.override
        return command_exists(self.command)
