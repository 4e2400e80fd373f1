"""Collect ignore rules from nested .gitignore files and an optional extra file."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable

from .patterns import PatternSet
from .utils import ConfigError

VCS_IGNORE_FILENAME = ".gitignore"
ALWAYS_IGNORED = (".git",)


def _log(message: str) -> None:
    from .runtime import get_verbose_logging

    if get_verbose_logging():
        print(f"[ignore] {message}", file=sys.stderr, flush=True)


def read_rule_lines(path: str) -> list[str]:
    """Return the non-blank, non-comment lines of a rule file."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        lines = [line.strip() for line in f]
    return [line for line in lines if line and not line.startswith("#")]


def anchor_rule(rule: str, rel_dir: str) -> str | None:
    """Make ``rule`` relative to the traversal root.

    Rules are always anchored at the directory holding the ignore file;
    a leading slash only marks that explicitly. Negated rules are dropped.
    """
    if rule.startswith("!"):
        return None
    rule = rule.lstrip("/").rstrip("/")
    if not rule:
        return None
    if rel_dir in ("", "."):
        return rule
    return f"{rel_dir}/{rule}"


def find_ignore_files(root: str, filename: str = VCS_IGNORE_FILENAME) -> list[str]:
    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in ALWAYS_IGNORED)
        if filename in filenames:
            found.append(os.path.join(dirpath, filename))
    return found


def vcs_ignore_patterns(root: str) -> list[str]:
    patterns: list[str] = []
    for ignore_path in find_ignore_files(root):
        rel_dir = os.path.relpath(os.path.dirname(ignore_path), root)
        rel_dir = "" if rel_dir == "." else rel_dir.replace(os.sep, "/")
        try:
            rules = read_rule_lines(ignore_path)
        except OSError as e:
            _log(f"cannot read {ignore_path}: {e}")
            continue
        for rule in rules:
            anchored = anchor_rule(rule, rel_dir)
            if anchored:
                patterns.append(anchored)
        _log(f"{len(rules)} rule(s) from {ignore_path}")
    return patterns


def external_ignore_patterns(ignore_file: str) -> list[str]:
    if not os.path.isfile(ignore_file):
        raise ConfigError(f"Ignore file '{ignore_file}' does not exist")
    try:
        return read_rule_lines(ignore_file)
    except OSError as e:
        raise ConfigError(f"Could not read ignore file '{ignore_file}': {e}") from e


def collect(
    root: str,
    include_vcs_ignore: bool = True,
    ignore_file: str | None = None,
    excludes: Iterable[str] = (),
    includes: Iterable[str] = (),
    ignore_case: bool = False,
) -> PatternSet:
    """Build the run's PatternSet.

    ``.git`` is always ignored. Nested ``.gitignore`` rules are anchored at
    their own directory, ``ignore_file`` rules and ``excludes`` are used as
    given, ``includes`` become the include filter.
    """
    if os.path.isfile(root):
        root = os.path.dirname(os.path.abspath(root))

    ignore: list[str] = list(ALWAYS_IGNORED)
    if include_vcs_ignore:
        ignore.extend(vcs_ignore_patterns(root))
    if ignore_file:
        ignore.extend(external_ignore_patterns(ignore_file))
    ignore.extend(excludes)
    return PatternSet.build(ignore=ignore, include=includes, ignore_case=ignore_case)
