"""
Source file enumeration with include/exclude glob patterns.

Patterns are matched against the POSIX path relative to the scan root:

    **/      any number of directories (including none)
    **       anything, across directories
    *        anything within one path segment
    ?        one character within a path segment
    {a,b}    alternation

Example:
    >>> matches_any("src/App.tsx", ["**/*.{js,jsx,ts,tsx}"])
    True
    >>> matches_any("node_modules/react/index.js", ["**/node_modules/**"])
    True
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Sequence

from translate_ai.config import DEFAULT_EXCLUDE, DEFAULT_PATTERNS


def _translate(pattern: str) -> str:
    """Convert one glob pattern into a regular expression body."""
    out: list[str] = []
    depth = 0
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    out.append("(?:.*/)?")
                    i += 1
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "{":
            depth += 1
            out.append("(?:")
        elif ch == "}" and depth:
            depth -= 1
            out.append(")")
        elif ch == "," and depth:
            out.append("|")
        else:
            out.append(re.escape(ch))
        i += 1
    # unbalanced "{" is closed so the regex still compiles
    out.append(")" * depth)
    return "".join(out)


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern:
    pattern = pattern.replace("\\", "/")
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return re.compile(_translate(pattern or "**"))


def matches_any(relative_path: str, patterns: Iterable[str]) -> bool:
    """True when the POSIX relative path matches one of the glob patterns."""
    return any(compile_glob(p).fullmatch(relative_path) for p in patterns)


def _prunes_directory(relative_dir: str, patterns: Sequence[str]) -> bool:
    # "**/node_modules/**" excludes everything below node_modules, so the
    # directory itself never needs to be entered
    for pattern in patterns:
        if pattern.endswith("/**") and compile_glob(pattern[:-3]).fullmatch(relative_dir):
            return True
    return False


def find_files(
    root: Path | str,
    patterns: Optional[Sequence[str]] = None,
    exclude: Optional[Sequence[str]] = None,
) -> list[Path]:
    """List files under `root` matching `patterns` and none of `exclude`.

    Args:
        root: Directory to search
        patterns: Include globs (default: all JS/TS sources)
        exclude: Exclude globs (default: dependency, build and VCS directories)

    Returns:
        Absolute paths, sorted by relative path
    """
    root = Path(root).resolve()
    patterns = list(patterns) if patterns else list(DEFAULT_PATTERNS)
    exclude = list(DEFAULT_EXCLUDE) if exclude is None else list(exclude)

    found: list[tuple[str, Path]] = []
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        rel_base = base.relative_to(root).as_posix()
        prefix = "" if rel_base == "." else rel_base + "/"

        dirnames[:] = sorted(
            d for d in dirnames if not _prunes_directory(prefix + d, exclude)
        )
        for filename in filenames:
            rel = prefix + filename
            if matches_any(rel, patterns) and not matches_any(rel, exclude):
                found.append((rel, base / filename))

    found.sort(key=lambda item: item[0])
    return [path for _, path in found]
