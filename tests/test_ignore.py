import pytest

from showfiles.ignore import anchor_rule, collect
from showfiles.utils import ConfigError


def test_nested_gitignore_rules_are_anchored_to_their_directory(tmp_path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n# comment\n\n/build/\n")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("tmp\n*.log\n")

    patterns = collect(str(tmp_path))

    assert patterns.ignore == (".git", "*.log", "build", "sub/tmp", "sub/*.log")
    assert patterns.is_ignored("sub/tmp/cache.bin")
    assert not patterns.is_ignored("tmp")


def test_negated_rules_are_dropped(tmp_path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n!keep.log\n")

    patterns = collect(str(tmp_path))

    assert "!keep.log" not in patterns.ignore
    assert "keep.log" not in patterns.ignore
    assert patterns.is_ignored("keep.log")


def test_double_star_is_a_plain_glob(tmp_path) -> None:
    (tmp_path / ".gitignore").write_text("**/generated\n")

    patterns = collect(str(tmp_path))

    assert patterns.is_ignored("a/generated")
    # no special "any leading directories" meaning for a top-level match
    assert not patterns.is_ignored("generated")


def test_git_dir_is_always_ignored_and_gitignore_can_be_skipped(tmp_path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n")

    patterns = collect(str(tmp_path), include_vcs_ignore=False)

    assert patterns.ignore == (".git",)


def test_external_ignore_file_rules_are_not_anchored(tmp_path) -> None:
    sub = tmp_path / "sub"
    sub.mkdir()
    extra = tmp_path / "extra-ignore"
    extra.write_text("# extra\nfixtures\n")

    patterns = collect(str(sub), ignore_file=str(extra))

    assert "fixtures" in patterns.ignore


def test_missing_external_ignore_file_is_a_config_error(tmp_path) -> None:
    with pytest.raises(ConfigError):
        collect(str(tmp_path), ignore_file=str(tmp_path / "nope"))


def test_excludes_and_includes_join_the_pattern_set(tmp_path) -> None:
    patterns = collect(
        str(tmp_path), excludes=["*.tmp"], includes=["*.py"], ignore_case=True
    )

    assert patterns.ignore[-1] == "*.tmp"
    assert patterns.include == ("*.py",)
    assert patterns.is_ignored("A.TMP")


def test_file_target_reads_rules_from_its_directory(tmp_path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n")
    target = tmp_path / "a.txt"
    target.write_text("a\n")

    assert "*.log" in collect(str(target)).ignore


def test_anchor_rule() -> None:
    assert anchor_rule("/dist/", "") == "dist"
    assert anchor_rule("*.o", "lib/c") == "lib/c/*.o"
    assert anchor_rule("!x", "") is None
    assert anchor_rule("/", "") is None
