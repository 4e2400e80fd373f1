import os
import subprocess

import pytest

from showfiles.gitls import git_available
from showfiles.ignore import collect
from showfiles.listing import (
    GitEnumerator,
    SingleFileEnumerator,
    WalkEnumerator,
    choose_enumerator,
    content_root,
    enumerate_files,
)
from showfiles.patterns import PatternSet
from showfiles.utils import InvalidTargetError

needs_git = pytest.mark.skipif(not git_available(), reason="git is not installed")


def _make_tree(root) -> None:
    (root / "a" / "deep").mkdir(parents=True)
    (root / "b.txt").write_text("b\n")
    (root / "a" / "x.txt").write_text("x\n")
    (root / "a" / "deep" / "y.txt").write_text("y\n")


def _git_init(root) -> None:
    subprocess.run(["git", "init", "-q", str(root)], check=True)


def test_walk_lists_files_in_walk_order(tmp_path) -> None:
    _make_tree(tmp_path)

    files = WalkEnumerator().list_files(str(tmp_path))

    assert files == ["b.txt", "a/x.txt", "a/deep/y.txt"]


def test_walk_honors_max_depth(tmp_path) -> None:
    _make_tree(tmp_path)

    assert WalkEnumerator(max_depth=1).list_files(str(tmp_path)) == ["b.txt"]
    assert WalkEnumerator(max_depth=2).list_files(str(tmp_path)) == [
        "b.txt",
        "a/x.txt",
    ]


def test_walk_prunes_ignored_directories(tmp_path) -> None:
    _make_tree(tmp_path)
    patterns = PatternSet.build(ignore=["a/deep"])

    assert WalkEnumerator(patterns=patterns).list_files(str(tmp_path)) == [
        "b.txt",
        "a/x.txt",
    ]


def test_walk_lists_symlinked_directory_as_entry_unless_following(tmp_path) -> None:
    _make_tree(tmp_path)
    os.symlink(tmp_path / "a", tmp_path / "link")

    plain = WalkEnumerator().list_files(str(tmp_path))
    followed = WalkEnumerator(follow_symlinks=True).list_files(str(tmp_path))

    assert "link" in plain
    assert "link/x.txt" not in plain
    assert "link" not in followed
    assert "a/x.txt" in followed


def test_single_file_target(tmp_path) -> None:
    target = tmp_path / "b.txt"
    target.write_text("b\n")
    patterns = PatternSet.build(ignore=["*.txt"])

    assert isinstance(choose_enumerator(str(target)), SingleFileEnumerator)
    assert enumerate_files(str(target), patterns=patterns) == ["b.txt"]
    assert content_root(str(target)) == str(tmp_path)


def test_missing_target_raises(tmp_path) -> None:
    with pytest.raises(InvalidTargetError):
        enumerate_files(str(tmp_path / "missing"))


def test_post_filter_applies_emulated_gitignore(tmp_path) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".gitignore").write_text("*.txt\n!b.txt\n")
    patterns = collect(str(tmp_path))

    files = enumerate_files(str(tmp_path), force_walk=True, patterns=patterns)

    assert files == [".gitignore"]


@needs_git
def test_git_enumerator_inside_work_tree(tmp_path) -> None:
    _git_init(tmp_path)
    _make_tree(tmp_path)
    (tmp_path / "c.bin").write_bytes(b"\0")
    (tmp_path / ".gitignore").write_text("*.bin\n")
    patterns = collect(str(tmp_path))

    assert isinstance(choose_enumerator(str(tmp_path)), GitEnumerator)
    assert isinstance(
        choose_enumerator(str(tmp_path), force_walk=True), WalkEnumerator
    )
    files = enumerate_files(str(tmp_path), patterns=patterns)

    assert set(files) == {".gitignore", "b.txt", "a/x.txt", "a/deep/y.txt"}


@needs_git
def test_git_enumerator_without_exclude_standard(tmp_path) -> None:
    _git_init(tmp_path)
    (tmp_path / "c.bin").write_bytes(b"\0")
    (tmp_path / ".gitignore").write_text("*.bin\n")

    files = GitEnumerator(use_vcs_ignore=False).list_files(str(tmp_path))

    assert "c.bin" in files


@needs_git
def test_git_enumerator_applies_max_depth(tmp_path) -> None:
    _git_init(tmp_path)
    _make_tree(tmp_path)

    files = GitEnumerator(max_depth=2).list_files(str(tmp_path))

    assert sorted(files) == ["a/x.txt", "b.txt"]
