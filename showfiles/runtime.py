from __future__ import annotations

from contextvars import ContextVar, Token
import os

_VERBOSE_LOGGING: ContextVar[bool] = ContextVar(
    "showfiles_verbose_logging", default=False
)
_SILENT: ContextVar[bool] = ContextVar("showfiles_silent", default=False)

_DEFAULT_JOBS = 1
_MAX_JOBS = 64


def _read_positive_int_env(name: str, default: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    return min(value, _MAX_JOBS)


def get_verbose_logging() -> bool:
    return _VERBOSE_LOGGING.get()


def set_verbose_logging(enabled: bool) -> Token[bool]:
    return _VERBOSE_LOGGING.set(bool(enabled))


def reset_verbose_logging(token: Token[bool]) -> None:
    _VERBOSE_LOGGING.reset(token)


def get_silent() -> bool:
    return _SILENT.get()


def set_silent(enabled: bool) -> Token[bool]:
    return _SILENT.set(bool(enabled))


def reset_silent(token: Token[bool]) -> None:
    _SILENT.reset(token)


def get_default_jobs() -> int:
    return _read_positive_int_env("SHOWFILES_JOBS", _DEFAULT_JOBS)


def clamp_jobs(value: int) -> int:
    return max(1, min(value, _MAX_JOBS))
