from __future__ import annotations

from dataclasses import dataclass

FORMATS = ("plain", "md", "xml")


@dataclass(frozen=True)
class OutputRecord:
    """One file's block: a header plus either a body or a skip reason."""

    path: str
    body: str = ""
    skip_reason: str | None = None
    metadata: tuple[tuple[str, str], ...] = ()
    format: str = "plain"

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None

    def render(self) -> str:
        body = f"[skipped: {self.skip_reason}]" if self.skipped else self.body
        return process_text(
            body,
            format=self.format,
            label=self.path,
            label_suffix=format_label_suffix(self.metadata, self.format),
        )


def process_text(
    text,
    format="plain",
    label="",
    label_suffix: str | None = None,
):
    max_backticks = _count_max_backticks(text)
    return _delimit(text, format, label, max_backticks, label_suffix=label_suffix)


def number_lines(text: str) -> str:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if not lines:
        return text
    width = len(str(len(lines)))
    return "\n".join(f"{i:>{width}}  {line}" for i, line in enumerate(lines, 1))


def format_label_suffix(metadata, format: str) -> str | None:
    if not metadata:
        return None
    if format == "xml":
        return " ".join(f"{key}='{value}'" for key, value in metadata)
    return "(" + ", ".join(f"{key}: {value}" for key, value in metadata) + ")"


def _count_max_backticks(text):
    max_backticks = 0
    for line in text.split("\n"):
        stripped = line.lstrip("`")
        count = len(line) - len(stripped)
        if count > max_backticks:
            max_backticks = count
    return max_backticks


def _delimit(
    text,
    format,
    label,
    max_backticks=0,
    *,
    label_suffix: str | None = None,
):
    if format == "md":
        backticks_str = "`" * max(max_backticks + 2, 3)
        info = f"{label} {label_suffix}" if label_suffix else label
        return f"{backticks_str}{info}\n{text}\n{backticks_str}"
    elif format == "xml":
        suffix_attr = f" {label_suffix}" if label_suffix else ""
        return f"<file path='{label}'{suffix_attr}>\n{text}\n</file>"
    else:
        info = f"{label} {label_suffix}" if label_suffix else label
        return f"==> {info} <==\n{text}"
