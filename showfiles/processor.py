"""Per-file filter chain and record construction.

``FileProcessor`` turns one root-relative path into an ``OutputRecord``
(content or a labeled skip) or ``None`` when the file is dropped silently.
Checks run in a fixed order and stop at the first failure: include/exclude
globs, symlinks, file type, size, age, permissions, binary sniff, line
ceiling and, last, interactive confirmation.
"""

from __future__ import annotations

import codecs
import hashlib
import os
import shutil
import stat
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from .patterns import PatternSet, path_matches
from .render import OutputRecord, number_lines
from .utils import count_lines, human_size

DEFAULT_MAX_LINES = 1000
SNIFF_BYTES = 8192
_TEXT_BYTES = bytes(range(32, 127)) + b"\n\r\t\b\f\x1b"


def _log(message: str) -> None:
    from .runtime import get_verbose_logging

    if get_verbose_logging():
        print(f"[process] {message}", file=sys.stderr, flush=True)


@dataclass(frozen=True)
class RenderContext:
    """Read-only configuration shared by every worker of a run."""

    root: str = "."
    patterns: PatternSet = field(default_factory=PatternSet)
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    ignore_case: bool = False
    max_depth: int | None = None
    max_size: int | None = None
    newer_than: float | None = None
    older_than: float | None = None
    max_lines: int = DEFAULT_MAX_LINES
    long: bool = False
    format: str = "plain"
    color: bool = False
    metadata: bool = False
    checksum: bool = False
    number: bool = False
    full_path: bool = False
    dry_run: bool = False
    interactive: bool = False
    follow_symlinks: bool = False


def confirm_via_tty(prompt: str) -> bool:
    """Ask on the controlling terminal; anything but y/yes means no."""
    try:
        with open("/dev/tty", "r+") as tty:
            tty.write(f"{prompt} [y/N] ")
            tty.flush()
            answer = tty.readline()
    except (KeyboardInterrupt, EOFError, OSError):
        return False
    return answer.strip().lower() in ("y", "yes")


def mime_encoding(path: str) -> str | None:
    """Ask file(1) for the content encoding, or None when it is unavailable."""
    if shutil.which("file") is None:
        return None
    try:
        proc = subprocess.run(
            ["file", "--brief", "--mime-encoding", path],
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return proc.stdout.strip() or None


def looks_binary(chunk: bytes) -> bool:
    if not chunk:
        return False
    if b"\0" in chunk:
        return True
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(chunk, final=False)
        return False
    except UnicodeDecodeError:
        pass
    non_text = sum(1 for byte in chunk if byte not in _TEXT_BYTES)
    return non_text / len(chunk) > 0.30


def is_binary(path: str, chunk: bytes, probe=mime_encoding) -> bool:
    if not chunk:
        return False
    encoding = probe(path) if probe else None
    if encoding is not None:
        return encoding == "binary"
    return looks_binary(chunk)


def _owner_name(uid: int) -> str:
    try:
        import pwd

        return pwd.getpwuid(uid).pw_name
    except (ImportError, KeyError):
        return str(uid)


def _format_mtime(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


class FileProcessor:
    def __init__(
        self,
        context: RenderContext,
        *,
        confirm: Callable[[str], bool] | None = None,
        highlight: Callable[[str, str], str] | None = None,
        probe: Callable[[str], str | None] | None = mime_encoding,
    ) -> None:
        self.context = context
        self.confirm = confirm or confirm_via_tty
        self.highlight = highlight
        self.probe = probe

    def __call__(self, rel_path: str) -> OutputRecord | None:
        return self.process(rel_path)

    def display_path(self, rel_path: str) -> str:
        full = os.path.join(self.context.root, rel_path)
        if self.context.full_path:
            return os.path.abspath(full)
        return os.path.normpath(full)

    def _skip(self, rel_path: str, reason: str) -> OutputRecord:
        _log(f"skip {rel_path}: {reason}")
        return OutputRecord(
            self.display_path(rel_path), skip_reason=reason, format=self.context.format
        )

    def _passes_globs(self, rel_path: str) -> bool:
        ctx = self.context
        if ctx.includes and not any(
            path_matches(rel_path, pattern, ctx.ignore_case) for pattern in ctx.includes
        ):
            return False
        return not any(
            path_matches(rel_path, pattern, ctx.ignore_case) for pattern in ctx.excludes
        )

    def process(self, rel_path: str) -> OutputRecord | None:
        ctx = self.context
        full = os.path.join(ctx.root, rel_path)

        if not self._passes_globs(rel_path):
            return None

        source = full
        if os.path.islink(full):
            if not os.path.exists(full):
                return self._skip(rel_path, "broken symlink")
            if not ctx.follow_symlinks:
                return OutputRecord(
                    self.display_path(rel_path),
                    body=f"symbolic link to {os.readlink(full)}",
                    format=ctx.format,
                )
            source = os.path.realpath(full)

        try:
            st = os.stat(source)
        except OSError:
            return None
        if not stat.S_ISREG(st.st_mode):
            return None

        if ctx.max_size is not None and st.st_size > ctx.max_size:
            return self._skip(
                rel_path,
                f"too large ({human_size(st.st_size)} > {human_size(ctx.max_size)})",
            )

        if (ctx.newer_than is not None and st.st_mtime < ctx.newer_than) or (
            ctx.older_than is not None and st.st_mtime >= ctx.older_than
        ):
            return self._skip(
                rel_path,
                f"modified {_format_mtime(st.st_mtime)}, outside age window",
            )

        if not os.access(source, os.R_OK):
            return self._skip(rel_path, "permission denied")
        try:
            with open(source, "rb") as f:
                head = f.read(SNIFF_BYTES)
                if is_binary(source, head, self.probe):
                    return self._skip(rel_path, "binary")
                data = head + f.read()
        except OSError:
            return self._skip(rel_path, "permission denied")

        lines = count_lines(data)
        if lines > ctx.max_lines and not ctx.long:
            return self._skip(rel_path, f"{lines} lines (use long mode)")

        if ctx.interactive and not self.confirm(f"Show {self.display_path(rel_path)}?"):
            return self._skip(rel_path, "user declined")

        metadata: list[tuple[str, str]] = []
        if ctx.metadata:
            metadata.extend(
                [
                    ("size", human_size(st.st_size)),
                    ("mode", stat.filemode(st.st_mode)),
                    ("owner", _owner_name(st.st_uid)),
                    ("modified", _format_mtime(st.st_mtime)),
                ]
            )
        if ctx.checksum:
            metadata.append(("sha256", hashlib.sha256(data).hexdigest()))

        if ctx.dry_run:
            body = f"[dry run: {lines} lines]"
        else:
            body = data.decode("utf-8", errors="replace")
            if body.endswith("\n"):
                body = body[:-1]
            if ctx.color and self.highlight:
                body = self.highlight(body, source)
            if ctx.number:
                body = number_lines(body)

        return OutputRecord(
            self.display_path(rel_path),
            body=body,
            metadata=tuple(metadata),
            format=ctx.format,
        )
