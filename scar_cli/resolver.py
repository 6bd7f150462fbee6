"""Map raw include targets onto discovered project files.

Resolution order:

1. quoted includes: the including file's directory;
2. each search root, in the order given;
3. quoted includes only, when enabled: files with the same basename
   anywhere in the project (candidates whose path ends with the full
   include string are preferred).

Angle-bracket includes that do not resolve are treated as system headers
and are not reported. All lookups read frozen structures built in
``__init__``, so one resolver may be shared by many threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import IncludeForm, RawInclude, SourceFile

logger = logging.getLogger(__name__)


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    SYSTEM = "system"


@dataclass(frozen=True)
class Resolution:
    include: RawInclude
    status: ResolutionStatus
    target: Optional[Path] = None
    candidates: Tuple[Path, ...] = ()

    @property
    def is_ambiguous(self) -> bool:
        return len(self.candidates) > 1


def canonical_path(path: Path) -> Path:
    """Absolute path with symlinks and ``..`` segments resolved."""
    return path.resolve()


class PathResolver:
    """Resolve :class:`RawInclude` entries against a fixed file set."""

    def __init__(
        self,
        files: Iterable[SourceFile],
        search_roots: Sequence[Path] = (),
        basename_fallback: bool = True,
    ) -> None:
        known = frozenset(canonical_path(f.path) for f in files)
        roots: List[Path] = []
        for root in search_roots:
            root = canonical_path(Path(root))
            if root not in roots:
                roots.append(root)

        self.known_files = known
        self.search_roots: Tuple[Path, ...] = tuple(roots)
        self.basename_fallback = basename_fallback

        by_name: Dict[str, List[Path]] = {}
        for path in known:
            by_name.setdefault(path.name, []).append(path)
        self._by_name: Dict[str, Tuple[Path, ...]] = {
            name: tuple(sorted(paths, key=self._root_order_key))
            for name, paths in by_name.items()
        }

    def _root_order_key(self, path: Path) -> Tuple[int, str]:
        for index, root in enumerate(self.search_roots):
            if root == path or root in path.parents:
                return index, str(path)
        return len(self.search_roots), str(path)

    def _lookup(self, base: Path, target: str) -> Optional[Path]:
        candidate = canonical_path(base / target)
        if candidate in self.known_files:
            return candidate
        return None

    def _by_basename(self, target: str) -> Tuple[Path, ...]:
        normalized = target.replace("\\", "/")
        name = normalized.rsplit("/", 1)[-1]
        candidates = self._by_name.get(name, ())
        if "/" in normalized:
            suffix = "/" + normalized.lstrip("./")
            preferred = tuple(c for c in candidates if c.as_posix().endswith(suffix))
            if preferred:
                return preferred
        return candidates

    def resolve(self, include: RawInclude) -> Resolution:
        candidates: List[Path] = []

        if include.form == IncludeForm.QUOTED:
            local = self._lookup(canonical_path(include.origin).parent, include.target)
            if local is not None:
                candidates.append(local)

        for root in self.search_roots:
            found = self._lookup(root, include.target)
            if found is not None and found not in candidates:
                candidates.append(found)

        if not candidates and include.form == IncludeForm.QUOTED and self.basename_fallback:
            candidates.extend(self._by_basename(include.target))

        if not candidates:
            if include.form == IncludeForm.ANGLE:
                return Resolution(include=include, status=ResolutionStatus.SYSTEM)
            logger.debug(
                "Unresolved include '%s' at %s:%d", include.target, include.origin, include.line
            )
            return Resolution(include=include, status=ResolutionStatus.UNRESOLVED)

        if len(candidates) > 1:
            logger.debug(
                "Ambiguous include '%s' at %s:%d, using %s of %d candidates",
                include.target, include.origin, include.line, candidates[0], len(candidates),
            )
        return Resolution(
            include=include,
            status=ResolutionStatus.RESOLVED,
            target=candidates[0],
            candidates=tuple(candidates),
        )

    def resolve_all(self, includes: Iterable[RawInclude]) -> List[Resolution]:
        return [self.resolve(inc) for inc in includes]
