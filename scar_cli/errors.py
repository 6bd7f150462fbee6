"""Exception hierarchy for Scar.

Only path-level configuration problems are raised. Per-file and per-include
problems are collected as diagnostics and never abort an analysis run.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ScarError(Exception):
    """Base exception for all Scar errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class InvalidProjectPathError(ScarError):
    """Project path does not exist or is not a directory."""

    def __init__(self, path: str, reason: str = "does not exist"):
        super().__init__(
            f"Invalid project path '{path}': {reason}",
            details={"path": path, "reason": reason},
        )


class ConfigError(ScarError):
    """An analysis option has an unusable value."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid value for '{key}': {value!r} ({reason})",
            details={"key": key, "value": value, "reason": reason},
        )
