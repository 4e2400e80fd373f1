import os
import re
from datetime import datetime, timedelta

import click

from .runtime import get_silent

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGT]?)B?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"": 0, "K": 1, "M": 2, "G": 3, "T": 4}
_HUMAN_UNITS = ("K", "M", "G", "T", "P")

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
)


class ShowfilesError(Exception):
    """Base class for fatal showfiles errors."""


class ConfigError(ShowfilesError, ValueError):
    """Malformed size, date, pattern file or config file."""


class InvalidTargetError(ShowfilesError):
    """The target path does not exist or cannot be traversed."""


def get_config_path(custom_path=None):
    if custom_path:
        return custom_path
    env_path = os.environ.get("SHOWFILES_CONFIG")
    if env_path:
        return env_path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return os.path.join(xdg_config_home, "showfiles", "config.yaml")


def read_config(custom_path=None):
    """
    Load option defaults from the YAML config file.

    A missing file yields an empty mapping; a file that is not a mapping of
    option names to values raises ConfigError.
    """
    import yaml

    config_path = get_config_path(custom_path)
    try:
        with open(config_path, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def parse_size(value: str) -> int:
    """
    Parse a byte count with an optional K/M/G/T suffix (powers of 1024).

    Suffixes are case-insensitive and may carry a trailing B: "10M", "5kb",
    "512", "1.5G".
    """
    match = _SIZE_RE.match(value or "")
    if not match:
        raise ConfigError(f"Invalid size: {value!r}")
    number, unit = match.groups()
    return int(float(number) * (1024 ** _SIZE_UNITS[unit.upper()]))


def human_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes}B"
    value = float(num_bytes)
    for unit in _HUMAN_UNITS:
        value /= 1024
        if value < 1024 or unit == _HUMAN_UNITS[-1]:
            return f"{value:.1f}{unit}"
    return f"{num_bytes}B"


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_date(value: str, now: datetime | None = None) -> datetime:
    """
    Parse an absolute date or one of the relative tokens today, yesterday,
    thisweek and lastweek into a naive local datetime.

    Weeks start on Monday.
    """
    now = now or datetime.now()
    token = (value or "").strip().lower()
    today = _start_of_day(now)
    if token == "today":
        return today
    if token == "yesterday":
        return today - timedelta(days=1)
    if token == "thisweek":
        return today - timedelta(days=today.weekday())
    if token == "lastweek":
        return today - timedelta(days=today.weekday() + 7)

    raw = (value or "").strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ConfigError(f"Invalid date: {value!r}") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def split_globs(values) -> list[str]:
    """Flatten repeated glob options, splitting each value on whitespace."""
    globs: list[str] = []
    for value in values or ():
        globs.extend(part for part in str(value).split() if part)
    return globs


def warn(message: str) -> None:
    if get_silent():
        return
    click.echo(f"Warning: {message}", err=True)


def count_lines(data: bytes) -> int:
    lines = data.count(b"\n")
    if data and not data.endswith(b"\n"):
        lines += 1
    return lines
