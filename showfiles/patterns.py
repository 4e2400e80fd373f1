"""Root-relative glob matching for ignore and include rules.

Patterns use plain shell-glob semantics (``fnmatch``): ``*`` also crosses
``/``, there is no ``**`` and no ``!`` negation. A path matches a pattern
when it equals it, sits below it, or ends with it on a segment boundary.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from fnmatch import fnmatchcase


def normalize_pattern(pattern: str) -> str:
    pattern = pattern.strip().replace("\\", "/")
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern.rstrip("/")


def _dedupe(patterns: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for raw in patterns:
        pattern = normalize_pattern(raw)
        if not pattern or pattern in seen:
            continue
        seen.add(pattern)
        out.append(pattern)
    return tuple(out)


def path_matches(rel_path: str, pattern: str, ignore_case: bool = False) -> bool:
    """Return whether ``rel_path`` equals, nests under or ends with ``pattern``."""
    if ignore_case:
        rel_path = rel_path.lower()
        pattern = pattern.lower()
    return (
        fnmatchcase(rel_path, pattern)
        or fnmatchcase(rel_path, f"{pattern}/*")
        or fnmatchcase(rel_path, f"*/{pattern}")
        or fnmatchcase(rel_path, f"*/{pattern}/*")
    )


def path_matches_exactly(rel_path: str, pattern: str, ignore_case: bool = False) -> bool:
    if ignore_case:
        return fnmatchcase(rel_path.lower(), pattern.lower())
    return fnmatchcase(rel_path, pattern)


@dataclass(frozen=True)
class PatternSet:
    """Ignore and include rules for one run.

    ``ignore`` is checked first and always wins. An empty ``include`` means
    no include filtering at all.
    """

    ignore: tuple[str, ...] = ()
    include: tuple[str, ...] = ()
    ignore_case: bool = False

    @classmethod
    def build(
        cls,
        ignore: Iterable[str] = (),
        include: Iterable[str] = (),
        ignore_case: bool = False,
    ) -> PatternSet:
        return cls(_dedupe(ignore), _dedupe(include), bool(ignore_case))

    @property
    def has_includes(self) -> bool:
        return bool(self.include)

    def is_ignored(self, rel_path: str) -> bool:
        return any(
            path_matches(rel_path, pattern, self.ignore_case)
            for pattern in self.ignore
        )

    def matches_include(self, rel_path: str) -> bool:
        return any(
            path_matches(rel_path, pattern, self.ignore_case)
            for pattern in self.include
        )

    def matches_include_exactly(self, rel_path: str) -> bool:
        return any(
            path_matches_exactly(rel_path, pattern, self.ignore_case)
            for pattern in self.include
        )
