"""Thin wrappers around the git commands the enumerator needs."""

from __future__ import annotations

import shutil
import subprocess


def _run_git(cwd: str, args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", "-C", cwd, *args], check=True, capture_output=True, text=True
    )


def git_available() -> bool:
    return shutil.which("git") is not None


def is_inside_work_tree(path: str) -> bool:
    if not git_available():
        return False
    try:
        out = _run_git(path, ["rev-parse", "--is-inside-work-tree"]).stdout.strip()
    except (subprocess.CalledProcessError, OSError):
        return False
    return out == "true"


def list_work_tree_files(path: str, exclude_standard: bool = True) -> list[str]:
    """
    List tracked and untracked files below ``path``, relative to ``path``.

    With ``exclude_standard`` git applies .gitignore, .git/info/exclude and
    the global excludes file, so ignored untracked files never show up.
    """
    args = ["ls-files", "--cached", "--others", "-z"]
    if exclude_standard:
        args.append("--exclude-standard")
    out = _run_git(path, args).stdout
    files: list[str] = []
    seen: set[str] = set()
    for entry in out.split("\0"):
        if entry and entry not in seen:
            seen.add(entry)
            files.append(entry)
    return files
