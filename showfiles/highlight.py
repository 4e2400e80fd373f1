"""Terminal syntax highlighting through Pygments."""

from __future__ import annotations

from functools import lru_cache

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

DEFAULT_STYLE = "default"


@lru_cache(maxsize=8)
def _formatter(style: str) -> TerminalFormatter:
    return TerminalFormatter(style=style)


def highlight_source(source: str, path: str, style: str = DEFAULT_STYLE) -> str:
    """Return ``source`` with ANSI colors chosen by ``path``'s extension."""
    try:
        lexer = get_lexer_for_filename(path, stripnl=False, ensurenl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False, ensurenl=False)
    return pygments_highlight(source, lexer, _formatter(style))
