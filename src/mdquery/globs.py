"""Glob matching for relative POSIX paths.

Patterns follow the usual shell conventions: ``*``, ``?`` and ``[...]`` match
inside one path segment, ``**`` matches any number of segments, and a leading
``!`` marks an exclusion. Wildcards do not match dotfiles unless the pattern
segment itself starts with a dot; exclusions do match them.
"""

import fnmatch
from typing import List, Sequence, Tuple


def split_globs(globs: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split patterns into (includes, excludes), stripping the ``!`` prefix."""
    includes = [g for g in globs if not g.startswith("!")]
    excludes = [g[1:] for g in globs if g.startswith("!")]
    return includes, excludes


def _segment_matches(name: str, pattern: str, dot: bool) -> bool:
    if name.startswith(".") and not dot and not pattern.startswith("."):
        return False
    return fnmatch.fnmatchcase(name, pattern)


def _match_parts(parts: Sequence[str], pattern: Sequence[str], dot: bool) -> bool:
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        if _match_parts(parts, rest, dot):
            return True
        if not parts or (parts[0].startswith(".") and not dot):
            return False
        return _match_parts(parts[1:], pattern, dot)
    if not parts or not _segment_matches(parts[0], head, dot):
        return False
    return _match_parts(parts[1:], rest, dot)


def glob_match(path: str, pattern: str, dot: bool = False) -> bool:
    """Check a single pattern against a relative path."""
    parts = [p for p in path.split("/") if p not in ("", ".")]
    segments = [s for s in pattern.split("/") if s not in ("", ".")]
    return _match_parts(parts, segments, dot)


def glob_matches(path: str, globs: Sequence[str]) -> bool:
    """Check a relative path against include and ``!``-exclude patterns.

    Args:
        path: POSIX path relative to the directory the globs are rooted at
        globs: Patterns; with no include pattern every path is included

    Returns:
        True if some include matches and no exclude does
    """
    includes, excludes = split_globs(globs)
    if includes and not any(glob_match(path, g) for g in includes):
        return False
    return not any(glob_match(path, g, dot=True) for g in excludes)
