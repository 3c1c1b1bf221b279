"""Terminal preview of generated barrel files.

Barrels are highlighted with Pygments for ``--print``; control bytes are
escaped first so a stray byte in a file name cannot drive the terminal.
"""

from __future__ import annotations

import re
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Replace C0/C1 control bytes (except newline, CR, tab) with ``\\xNN``."""
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group()):02x}", source)


def _normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


def colorize_source(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    try:
        lexer = get_lexer_for_filename(path.name, source)
    except ClassNotFound:
        lexer = TextLexer()
    return highlight(source, lexer, TerminalFormatter(style=_normalize_style(style)))


def render_barrel(path: Path, style: str = DEFAULT_STYLE, color: bool = True) -> str:
    """Return the barrel at ``path`` ready for printing, highlighted when ``color``."""
    source = sanitize_terminal_text(read_text(path))
    if not color or not source:
        return source
    return colorize_source(source, path, style)


__all__ = ["DEFAULT_STYLE", "colorize_source", "read_text", "render_barrel", "sanitize_terminal_text"]
