"""Pruned ASCII tree of the paths ``should_display`` accepts."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass

import click

from .engine import (
    displayable_children,
    is_directory,
    path_depth,
    relative_path,
)
from .patterns import PatternSet

STYLE = ("├── ", "└── ", "│   ", "    ")


def _log(message: str) -> None:
    from .runtime import get_verbose_logging

    if get_verbose_logging():
        print(f"[tree] {message}", file=sys.stderr, flush=True)


@dataclass
class TreeCounts:
    dirs: int = 0
    files: int = 0

    def summary(self) -> str:
        dirs = "directory" if self.dirs == 1 else "directories"
        files = "file" if self.files == 1 else "files"
        return f"{self.dirs} {dirs}, {self.files} {files}"


def _entry_label(path: str, is_dir: bool, color: bool) -> str:
    name = os.path.basename(path)
    if is_dir:
        label = f"{name}/"
        return click.style(label, fg="blue", bold=True) if color else label
    if os.path.islink(path):
        try:
            target = os.readlink(path)
        except OSError:
            target = "?"
        label = click.style(name, fg="cyan") if color else name
        return f"{label} -> {target}"
    return name


def _build_lines(
    directory: str,
    root: str,
    max_depth: int | None,
    patterns: PatternSet,
    follow_symlinks: bool,
    color: bool,
    prefix: str,
    lines: list[str],
    counts: TreeCounts,
    chain: frozenset[str] = frozenset(),
) -> None:
    if follow_symlinks:
        chain = chain | {os.path.realpath(directory)}
    children = displayable_children(
        directory, root, max_depth, patterns, follow_symlinks=follow_symlinks
    )
    for i, child in enumerate(children):
        is_last = i == len(children) - 1
        connector = STYLE[1] if is_last else STYLE[0]
        child_is_dir = is_directory(child, follow_symlinks)
        lines.append(f"{prefix}{connector}{_entry_label(child, child_is_dir, color)}")
        if not child_is_dir:
            counts.files += 1
            continue
        counts.dirs += 1
        depth = path_depth(relative_path(child, root))
        if max_depth is not None and depth >= max_depth:
            continue
        if follow_symlinks and os.path.realpath(child) in chain:
            continue
        extension = STYLE[3] if is_last else STYLE[2]
        _build_lines(
            child,
            root,
            max_depth,
            patterns,
            follow_symlinks,
            color,
            prefix + extension,
            lines,
            counts,
            chain,
        )


def tree_command_args(
    root: str,
    max_depth: int | None,
    patterns: PatternSet,
    color: bool,
    follow_symlinks: bool,
) -> list[str] | None:
    """Translate the run's rules into ``tree`` arguments.

    Returns None when the rules cannot be expressed with ``tree``'s
    basename-only ``-I``/``-P`` matching.
    """
    if any("/" in pattern for pattern in patterns.ignore + patterns.include):
        return None
    if max_depth is not None and max_depth < 1:
        return None
    args = ["tree", "-a"]
    if patterns.ignore:
        args.extend(["-I", "|".join(patterns.ignore)])
    if patterns.include:
        args.extend(["-P", "|".join(patterns.include), "--matchdirs"])
    args.append("--prune")
    if max_depth is not None:
        args.extend(["-L", str(max_depth)])
    if patterns.ignore_case:
        args.append("--ignore-case")
    args.append("-C" if color else "-n")
    if follow_symlinks:
        args.append("-l")
    args.append(root)
    return args


def _render_with_tree_command(
    root: str,
    max_depth: int | None,
    patterns: PatternSet,
    color: bool,
    follow_symlinks: bool,
) -> str | None:
    if shutil.which("tree") is None:
        return None
    args = tree_command_args(root, max_depth, patterns, color, follow_symlinks)
    if args is None:
        _log("rules not expressible with tree(1); using built-in renderer")
        return None
    try:
        proc = subprocess.run(args, check=True, capture_output=True, text=True)
    except (OSError, subprocess.CalledProcessError) as e:
        _log(f"tree(1) failed, using built-in renderer: {e}")
        return None
    return proc.stdout.rstrip("\n")


def render_tree(
    root: str,
    max_depth: int | None = None,
    patterns: PatternSet | None = None,
    color: bool = False,
    *,
    follow_symlinks: bool = False,
    prefer_external: bool = False,
) -> str:
    """
    Render the tree under ``root``, listing only displayable entries.

    With ``prefer_external`` the ``tree`` executable is used when present
    and able to express the same rules.
    """
    patterns = patterns or PatternSet()
    if prefer_external:
        rendered = _render_with_tree_command(
            root, max_depth, patterns, color, follow_symlinks
        )
        if rendered is not None:
            return rendered

    root_label = click.style(root, fg="blue", bold=True) if color else root
    lines = [root_label]
    counts = TreeCounts()
    if not is_directory(root, follow_symlinks=True):
        counts.files += 1
    elif max_depth != 0:
        _build_lines(
            root,
            root,
            max_depth,
            patterns,
            follow_symlinks,
            color,
            "",
            lines,
            counts,
        )
    lines.append("")
    lines.append(counts.summary())
    return "\n".join(lines)
