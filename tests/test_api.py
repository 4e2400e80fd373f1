import showfiles


def test_show_returns_rendered_records(tmp_path) -> None:
    (tmp_path / "a.py").write_text("print('a')\n")
    (tmp_path / "b.txt").write_text("b\n")
    (tmp_path / "big.py").write_text("x" * 4096)

    text = showfiles.show(
        str(tmp_path), include=["*.py"], max_size="1K", format="xml", jobs=2
    )

    assert text == (
        f"<file path='{tmp_path / 'a.py'}'>\nprint('a')\n</file>\n\n"
        f"<file path='{tmp_path / 'big.py'}'>\n"
        "[skipped: too large (4.0K > 1.0K)]\n</file>"
    )


def test_tree_applies_excludes(tmp_path) -> None:
    (tmp_path / "keep").mkdir()
    (tmp_path / "keep" / "a.txt").write_text("a\n")
    (tmp_path / "drop").mkdir()
    (tmp_path / "drop" / "b.txt").write_text("b\n")

    rendered = showfiles.tree(str(tmp_path), exclude=["drop"])

    assert "keep/" in rendered
    assert "drop" not in rendered.replace(str(tmp_path), "")
