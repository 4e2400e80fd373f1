"""Where rendered text goes: stdout, a file, a pager or the clipboard."""

from __future__ import annotations

import click
from pyperclip import copy

from .utils import ShowfilesError, strip_ansi


class OutputSink:
    """Callable text sink for one run.

    Plain stdout output is streamed as it arrives. File, pager and
    clipboard targets need the whole text and buffer it until ``close``.
    """

    def __init__(
        self,
        *,
        output_file: str | None = None,
        pager: bool = False,
        copy_to_clipboard: bool = False,
        color: bool = False,
    ) -> None:
        self.output_file = output_file
        self.pager = pager
        self.copy_to_clipboard = copy_to_clipboard
        self.color = color
        self._chunks: list[str] = []
        self._streamed = False

    @property
    def streaming(self) -> bool:
        return not (self.output_file or self.pager or self.copy_to_clipboard)

    def __call__(self, text: str) -> None:
        if not text:
            return
        if self.streaming:
            click.echo(text, nl=False, color=self.color)
            self._streamed = True
        else:
            self._chunks.append(text)

    def getvalue(self) -> str:
        return "".join(self._chunks)

    def close(self) -> None:
        if self.streaming:
            if self._streamed:
                click.echo("")
            return

        text = self.getvalue()
        line_count = text.count("\n") + 1 if text else 0
        if self.output_file:
            try:
                with open(self.output_file, "w", encoding="utf-8") as f:
                    f.write(strip_ansi(text))
                    if text:
                        f.write("\n")
            except OSError as e:
                raise ShowfilesError(
                    f"Could not write {self.output_file}: {e.strerror or e}"
                ) from e
            click.echo(f"Wrote {line_count} lines to {self.output_file}")
        elif self.copy_to_clipboard:
            try:
                copy(strip_ansi(text))
                click.echo(f"Copied {line_count} lines to clipboard.")
            except Exception as e:
                click.echo(f"Error copying to clipboard: {e}", err=True)
        elif self.pager:
            click.echo_via_pager(text + "\n" if text else text, color=self.color)
