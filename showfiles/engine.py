"""Display eligibility for paths under a traversal root.

``should_display`` is the one rule shared by the tree renderer and the
library facade: a file is shown when it survives the ignore and include
rules; a directory is shown when it matches an include rule itself or when
at least one of its children is shown.
"""

from __future__ import annotations

import os

from .patterns import PatternSet


def relative_path(path: str, root: str) -> str:
    rel = os.path.relpath(os.path.abspath(path), os.path.abspath(root))
    if rel == ".":
        return "."
    return rel.replace(os.sep, "/")


def path_depth(rel_path: str) -> int:
    """Root is depth 0, its children depth 1, and so on."""
    if rel_path in ("", "."):
        return 0
    return rel_path.count("/") + 1


def is_directory(path: str, follow_symlinks: bool = False) -> bool:
    if not follow_symlinks and os.path.islink(path):
        return False
    return os.path.isdir(path)


def list_children(path: str) -> list[str]:
    """Direct children in name order; unreadable directories have none."""
    try:
        names = sorted(os.listdir(path))
    except OSError:
        return []
    return [os.path.join(path, name) for name in names]


def should_display(
    path: str,
    root: str,
    max_depth: int | None,
    patterns: PatternSet,
    *,
    follow_symlinks: bool = False,
    _chain: frozenset[str] = frozenset(),
) -> bool:
    rel = relative_path(path, root)
    depth = path_depth(rel)
    is_root = rel == "."

    if not is_root and patterns.is_ignored(rel):
        return False

    is_dir = is_directory(path, follow_symlinks)
    own_include = (
        not is_root and patterns.has_includes and patterns.matches_include(rel)
    )
    if patterns.has_includes and not own_include and not is_dir:
        return False
    if not is_dir:
        return True

    if max_depth is not None and depth >= max_depth:
        if not patterns.has_includes:
            return True
        return not is_root and patterns.matches_include_exactly(rel)

    if own_include:
        return True

    if follow_symlinks:
        real = os.path.realpath(path)
        if real in _chain:
            return False
        _chain = _chain | {real}

    return any(
        should_display(
            child,
            root,
            max_depth,
            patterns,
            follow_symlinks=follow_symlinks,
            _chain=_chain,
        )
        for child in list_children(path)
    )


def displayable_children(
    path: str,
    root: str,
    max_depth: int | None,
    patterns: PatternSet,
    *,
    follow_symlinks: bool = False,
) -> list[str]:
    return [
        child
        for child in list_children(path)
        if should_display(
            child, root, max_depth, patterns, follow_symlinks=follow_symlinks
        )
    ]
