"""Configuration manager for Scar using TOML files.

Settings are read from the ``[analysis]`` table of the user config
(``~/.scar/config.toml``) and then of the project config
(``<project>/.scar.toml``); later files win. Command-line options are
applied on top by :func:`build_options`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import toml

from . import config
from .errors import ConfigError

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "include_dirs",
    "exclude_dirs",
    "exclude_patterns",
    "extensions",
    "workers",
    "basename_fallback",
    "top_n",
}


@dataclass(frozen=True)
class AnalysisOptions:
    """Immutable, fully merged options for one analysis run."""

    include_dirs: Tuple[Path, ...] = ()
    exclude_dirs: frozenset = field(default_factory=lambda: config.SKIP_DIRS)
    exclude_patterns: Tuple[str, ...] = config.SKIP_PATH_FRAGMENTS
    extensions: frozenset = field(default_factory=lambda: config.SOURCE_EXTENSIONS)
    workers: int = config.DEFAULT_WORKERS
    basename_fallback: bool = True
    top_n: int = config.DEFAULT_TOP_N


def load_toml_file(path: Path) -> Dict[str, Any]:
    """Load the ``[analysis]`` table from *path*.

    Missing files give an empty dict. A file that cannot be parsed is
    logged and treated as empty.
    """
    if not path.is_file():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}

    section = data.get("analysis", {})
    if not isinstance(section, dict):
        logger.warning("Ignoring non-table [analysis] entry in %s", path)
        return {}
    for key in sorted(set(section) - KNOWN_KEYS):
        logger.warning("Unknown config key '%s' in %s", key, path)
    return {k: v for k, v in section.items() if k in KNOWN_KEYS}


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Merge user-level and project-level ``[analysis]`` settings."""
    merged = load_toml_file(config.USER_CONFIG_FILE)
    if project_root is not None:
        merged.update(load_toml_file(project_root / config.PROJECT_CONFIG_NAME))
    return merged


def save_project_config(project_root: Path, settings: Dict[str, Any]) -> Path:
    """Write *settings* as the ``[analysis]`` table of the project config."""
    unknown = set(settings) - KNOWN_KEYS
    if unknown:
        raise ConfigError(sorted(unknown)[0], settings[sorted(unknown)[0]], "unknown key")
    path = project_root / config.PROJECT_CONFIG_NAME
    with open(path, "w", encoding="utf-8") as f:
        toml.dump({"analysis": settings}, f)
    return path


def _normalize_extensions(values: Iterable[str]) -> frozenset:
    exts = set()
    for value in values:
        value = value.strip().lower()
        if not value:
            continue
        exts.add(value if value.startswith(".") else f".{value}")
    return frozenset(exts)


def _str_list(settings: Dict[str, Any], key: str) -> List[str]:
    value = settings[key]
    if isinstance(value, (list, tuple)) and all(isinstance(v, (str, Path)) for v in value):
        return [str(v) for v in value]
    raise ConfigError(key, value, "must be a list of strings")


def _int(settings: Dict[str, Any], key: str) -> int:
    value = settings[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(key, value, "must be an integer")
    return value


def _bool(settings: Dict[str, Any], key: str) -> bool:
    value = settings[key]
    if not isinstance(value, bool):
        raise ConfigError(key, value, "must be true or false")
    return value


def build_options(
    project_root: Path,
    file_settings: Optional[Dict[str, Any]] = None,
    **overrides: Any,
) -> AnalysisOptions:
    """Combine config-file settings with explicit overrides.

    ``None`` overrides are ignored so CLI options left unset fall through to
    the file values and then to the defaults. ``exclude_dirs`` and
    ``exclude_patterns`` extend the built-in skip lists. A value of the
    wrong type raises :class:`ConfigError`.
    """
    settings = dict(file_settings or {})
    settings.update({k: v for k, v in overrides.items() if v is not None})

    kwargs: Dict[str, Any] = {}
    if "include_dirs" in settings:
        roots = []
        for entry in _str_list(settings, "include_dirs"):
            candidate = Path(entry)
            if not candidate.is_absolute():
                candidate = project_root / candidate
            roots.append(candidate.resolve())
        kwargs["include_dirs"] = tuple(roots)
    if "exclude_dirs" in settings:
        kwargs["exclude_dirs"] = config.SKIP_DIRS | frozenset(_str_list(settings, "exclude_dirs"))
    if "exclude_patterns" in settings:
        extra = [p for p in _str_list(settings, "exclude_patterns") if p not in config.SKIP_PATH_FRAGMENTS]
        kwargs["exclude_patterns"] = config.SKIP_PATH_FRAGMENTS + tuple(extra)
    if "extensions" in settings:
        exts = _normalize_extensions(_str_list(settings, "extensions"))
        if not exts:
            raise ConfigError("extensions", settings["extensions"], "no usable extensions")
        kwargs["extensions"] = exts
    if "workers" in settings:
        workers = _int(settings, "workers")
        if workers < 1:
            raise ConfigError("workers", workers, "must be at least 1")
        kwargs["workers"] = workers
    if "basename_fallback" in settings:
        kwargs["basename_fallback"] = _bool(settings, "basename_fallback")
    if "top_n" in settings:
        top_n = _int(settings, "top_n")
        if top_n < 0:
            raise ConfigError("top_n", top_n, "must not be negative")
        kwargs["top_n"] = top_n
    return AnalysisOptions(**kwargs)
