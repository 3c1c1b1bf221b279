"""Glob-style exclusion patterns.

Patterns are compiled to regular expressions that run against POSIX paths:

- ``*`` matches any run of characters inside one path segment
- ``**`` as a whole segment matches any number of segments, including none
- ``?`` matches one character other than ``/``
- ``[...]`` is a character class (``[!...]`` or ``[^...]`` negates it)

A pattern without a slash is matched against the basename only, so
``main.dart`` excludes every ``main.dart`` in the tree. A pattern with a
slash is matched against the full path.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache


def _translate(pattern: str) -> str:
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            run_end = i
            while run_end < n and pattern[run_end] == "*":
                run_end += 1
            is_globstar = (
                run_end - i >= 2
                and (i == 0 or pattern[i - 1] == "/")
                and (run_end == n or pattern[run_end] == "/")
            )
            if not is_globstar:
                out.append("[^/]*")
                i = run_end
                continue
            if run_end < n:
                # "**/" may swallow zero or more leading segments.
                out.append("(?:.*/)?")
                i = run_end + 1
            else:
                out.append(".*")
                i = run_end
            continue
        if ch == "?":
            out.append("[^/]")
            i += 1
            continue
        if ch == "[":
            close = pattern.find("]", i + 2)
            if close < 0:
                out.append(re.escape(ch))
                i += 1
                continue
            body = pattern[i + 1 : close]
            negate = body[:1] in {"!", "^"}
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\")
            out.append(f"[{'^/' if negate else ''}{body}]")
            i = close + 1
            continue
        out.append(re.escape(ch))
        i += 1
    return "".join(out)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile one glob pattern into an anchored regular expression."""
    return re.compile(_translate(pattern), re.DOTALL)


def _matches_basename_only(pattern: str) -> bool:
    return "/" not in pattern.rstrip("/")


def matches_glob(path: str, pattern: str) -> bool:
    """Return whether POSIX ``path`` matches glob ``pattern``."""
    if not pattern:
        return False
    if _matches_basename_only(pattern):
        name = path.rstrip("/").rsplit("/", 1)[-1]
        return compile_pattern(pattern.rstrip("/")).fullmatch(name) is not None
    return compile_pattern(pattern).fullmatch(path) is not None


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(matches_glob(path, pattern) for pattern in patterns)


__all__ = ["compile_pattern", "matches_glob", "matches_any"]
