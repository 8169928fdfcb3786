"""Wildcard file name filtering.

Patterns understand two wildcards only: ``*`` matches any run of characters
(including none) and ``?`` matches exactly one character. Everything else is
literal, so ``[`` and ``]`` in a pattern do not open a character class the way
they would with :mod:`fnmatch`. Matching is case-insensitive and anchored to
the whole file name.
"""

import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a wildcard pattern into an anchored, case-insensitive regex."""
    regex = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(regex, re.IGNORECASE | re.DOTALL)


def matches_pattern(name: str, pattern: str) -> bool:
    """Check whether a file name matches a single wildcard pattern."""
    return compile_pattern(pattern).fullmatch(name) is not None


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    """Check whether a file name matches at least one pattern.

    An empty pattern collection means no filtering: every name matches.
    """
    patterns = list(patterns)
    if not patterns:
        return True
    return any(matches_pattern(name, p) for p in patterns)


def filter_paths(paths: Iterable[Path], patterns: Iterable[str]) -> list[Path]:
    """Keep the paths whose file name matches any pattern, preserving order."""
    patterns = list(patterns)
    return [p for p in paths if matches_any(p.name, patterns)]
