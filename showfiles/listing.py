"""Flat, ordered candidate file lists for the content pass.

Two strategies share one ``Enumerator`` protocol: a git-backed listing that
lets git apply its own ignore rules, and a filesystem walk that emulates
them with the run's PatternSet. ``choose_enumerator`` picks one per run.
"""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .engine import path_depth
from .gitls import is_inside_work_tree, list_work_tree_files
from .patterns import PatternSet
from .utils import InvalidTargetError


def _log(message: str) -> None:
    from .runtime import get_verbose_logging

    if get_verbose_logging():
        print(f"[listing] {message}", file=sys.stderr, flush=True)


@runtime_checkable
class Enumerator(Protocol):
    name: str

    def list_files(self, root: str) -> list[str]: ...


def content_root(target: str) -> str:
    """Directory that display paths are relative to."""
    if os.path.isdir(target):
        return target
    return os.path.dirname(target) or "."


def _within_depth(rel_path: str, max_depth: int | None) -> bool:
    return max_depth is None or path_depth(rel_path) <= max_depth


@dataclass(frozen=True)
class SingleFileEnumerator:
    name: str = "file"

    def list_files(self, root: str) -> list[str]:
        return [os.path.basename(root)]


@dataclass(frozen=True)
class WalkEnumerator:
    max_depth: int | None = None
    follow_symlinks: bool = False
    patterns: PatternSet = field(default_factory=PatternSet)
    name: str = "walk"

    def list_files(self, root: str) -> list[str]:
        files: list[str] = []
        visited: set[str] = set()
        for dirpath, dirnames, filenames in os.walk(
            root, followlinks=self.follow_symlinks
        ):
            rel_dir = os.path.relpath(dirpath, root).replace(os.sep, "/")
            prefix = "" if rel_dir == "." else f"{rel_dir}/"
            child_depth = path_depth(rel_dir) + 1

            if self.follow_symlinks:
                visited.add(os.path.realpath(dirpath))
                links = []
            else:
                links = [
                    d for d in dirnames if os.path.islink(os.path.join(dirpath, d))
                ]

            keep = []
            for d in sorted(dirnames):
                if d in links:
                    continue
                if self.patterns.is_ignored(prefix + d):
                    continue
                if self.max_depth is not None and child_depth >= self.max_depth:
                    continue
                if (
                    self.follow_symlinks
                    and os.path.realpath(os.path.join(dirpath, d)) in visited
                ):
                    continue
                keep.append(d)
            dirnames[:] = keep

            if self.max_depth is not None and child_depth > self.max_depth:
                continue
            for name in sorted(filenames + links):
                files.append(prefix + name)
        return files


@dataclass(frozen=True)
class GitEnumerator:
    max_depth: int | None = None
    use_vcs_ignore: bool = True
    name: str = "git"

    def list_files(self, root: str) -> list[str]:
        files = list_work_tree_files(root, exclude_standard=self.use_vcs_ignore)
        return [
            rel
            for rel in files
            if _within_depth(rel, self.max_depth)
            and os.path.lexists(os.path.join(root, rel))
        ]


def choose_enumerator(
    target: str,
    *,
    force_walk: bool = False,
    max_depth: int | None = None,
    follow_symlinks: bool = False,
    use_vcs_ignore: bool = True,
    patterns: PatternSet | None = None,
) -> Enumerator:
    patterns = patterns or PatternSet()
    if not os.path.isdir(target):
        return SingleFileEnumerator()
    walk = WalkEnumerator(
        max_depth=max_depth, follow_symlinks=follow_symlinks, patterns=patterns
    )
    if force_walk:
        return walk
    if is_inside_work_tree(target):
        return GitEnumerator(max_depth=max_depth, use_vcs_ignore=use_vcs_ignore)
    return walk


def enumerate_files(
    target: str,
    *,
    force_walk: bool = False,
    max_depth: int | None = None,
    follow_symlinks: bool = False,
    use_vcs_ignore: bool = True,
    patterns: PatternSet | None = None,
) -> list[str]:
    """
    Return candidate files under ``target`` relative to ``content_root``.

    The run's ignore patterns are applied to every directory strategy's
    result, which also covers rules git does not know about
    (``--ignore-file``, excludes).
    """
    if not os.path.lexists(target):
        raise InvalidTargetError(f"Target '{target}' does not exist")
    patterns = patterns or PatternSet()
    enumerator = choose_enumerator(
        target,
        force_walk=force_walk,
        max_depth=max_depth,
        follow_symlinks=follow_symlinks,
        use_vcs_ignore=use_vcs_ignore,
        patterns=patterns,
    )
    try:
        files = enumerator.list_files(target)
    except subprocess.CalledProcessError as e:
        _log(f"git listing failed ({e}); falling back to a filesystem walk")
        files = WalkEnumerator(
            max_depth=max_depth, follow_symlinks=follow_symlinks, patterns=patterns
        ).list_files(target)
    else:
        _log(f"{len(files)} candidate(s) from {enumerator.name} enumerator")
    if isinstance(enumerator, SingleFileEnumerator):
        # an explicitly named file is never filtered by ignore rules
        return files
    return [rel for rel in files if not patterns.is_ignored(rel)]
