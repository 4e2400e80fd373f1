from datetime import datetime

import pytest

from showfiles.runtime import clamp_jobs, get_default_jobs
from showfiles.utils import (
    ConfigError,
    count_lines,
    human_size,
    parse_date,
    parse_size,
    read_config,
    split_globs,
    strip_ansi,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("10M", 10485760),
        ("5K", 5120),
        ("5kb", 5120),
        ("512", 512),
        ("1.5G", 1610612736),
        ("2T", 2 * 1024**4),
    ],
)
def test_parse_size(value, expected) -> None:
    assert parse_size(value) == expected


@pytest.mark.parametrize("value", ["10X", "", "K", "-5K", "1 0M"])
def test_parse_size_rejects_garbage(value) -> None:
    with pytest.raises(ConfigError):
        parse_size(value)


def test_human_size() -> None:
    assert human_size(50) == "50B"
    assert human_size(1024) == "1.0K"
    assert human_size(2048) == "2.0K"
    assert human_size(10485760) == "10.0M"


def test_parse_date_relative_tokens() -> None:
    wednesday = datetime(2026, 10, 14, 15, 30)

    assert parse_date("today", wednesday) == datetime(2026, 10, 14)
    assert parse_date("Yesterday", wednesday) == datetime(2026, 10, 13)
    assert parse_date("thisweek", wednesday) == datetime(2026, 10, 12)
    assert parse_date("lastweek", wednesday) == datetime(2026, 10, 5)


def test_parse_date_absolute_forms() -> None:
    assert parse_date("2024-03-01") == datetime(2024, 3, 1)
    assert parse_date("2024-03-01 08:15") == datetime(2024, 3, 1, 8, 15)
    assert parse_date("2024/03/01 08:15:30") == datetime(2024, 3, 1, 8, 15, 30)
    assert parse_date("2024-03-01T08:15:30") == datetime(2024, 3, 1, 8, 15, 30)


def test_parse_date_rejects_garbage() -> None:
    with pytest.raises(ConfigError):
        parse_date("someday")


def test_count_lines() -> None:
    assert count_lines(b"") == 0
    assert count_lines(b"a") == 1
    assert count_lines(b"a\nb\n") == 2
    assert count_lines(b"a\nb") == 2


def test_split_globs_and_strip_ansi() -> None:
    assert split_globs(["*.go *.md", "  *.py "]) == ["*.go", "*.md", "*.py"]
    assert strip_ansi("\x1b[1;34msrc/\x1b[0m") == "src/"


def test_read_config(tmp_path, monkeypatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("max-size: 1K\ninclude:\n  - '*.py'\n")
    monkeypatch.setenv("SHOWFILES_CONFIG", str(config))

    assert read_config() == {"max_size": "1K", "include": ["*.py"]}


def test_read_config_missing_and_invalid(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("SHOWFILES_CONFIG", raising=False)
    assert read_config() == {}

    broken = tmp_path / "broken.yaml"
    broken.write_text("a: [\n")
    with pytest.raises(ConfigError):
        read_config(str(broken))

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        read_config(str(listing))


def test_default_jobs_from_environment(monkeypatch) -> None:
    monkeypatch.delenv("SHOWFILES_JOBS", raising=False)
    assert get_default_jobs() == 1
    monkeypatch.setenv("SHOWFILES_JOBS", "8")
    assert get_default_jobs() == 8
    monkeypatch.setenv("SHOWFILES_JOBS", "lots")
    assert get_default_jobs() == 1
    monkeypatch.setenv("SHOWFILES_JOBS", "1000")
    assert get_default_jobs() == 64
    assert clamp_jobs(0) == 1
