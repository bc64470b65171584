"""Decide whether a repository-relative path is excluded by a pattern set."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wcmatch import glob

from git2txt.logging import logger
from git2txt.patterns import PatternSet

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from wcmatch._wcmatch import WcRegexp

GLOBSTAR_PREFIX = "**/"
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB | glob.CASE | glob.FORCEUNIX


def expand_pattern(pattern: str) -> str:
    """Anchor a basename pattern at any depth.

    Patterns without a ``/`` are prefixed with ``**/``; patterns containing a
    ``/`` are matched against the full relative path and left untouched.
    """
    return pattern if "/" in pattern else GLOBSTAR_PREFIX + pattern


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


def compile_patterns(patterns: Iterable[str]) -> list[WcRegexp]:
    """Compile each pattern on its own so a malformed one can be dropped.

    Args:
        patterns (Iterable[str]): expanded glob patterns

    Returns:
        list[WcRegexp]: one compiled matcher per valid pattern
    """
    compiled: list[WcRegexp] = []
    for pattern in patterns:
        try:
            compiled.append(glob.compile(pattern, flags=GLOB_FLAGS))
        except Exception as e:
            logger.warning("invalid_pattern", pattern=pattern, error=str(e))
    return compiled


def _matches_any(path: str, matchers: Sequence[WcRegexp]) -> bool:
    return any(m.match(path) for m in matchers)


class ExclusionMatcher:
    """Compiled form of a pattern set, reused for every file of a walk.

    A path is excluded when it matches at least one positive pattern and no
    negation pattern. Negations on their own never exclude anything.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns = patterns if isinstance(patterns, PatternSet) else PatternSet(patterns)
        self._positives = compile_patterns(expand_pattern(p) for p in self.patterns.positives)
        self._negatives = compile_patterns(expand_pattern(p) for p in self.patterns.negatives)

    def is_excluded(self, relative_path: str) -> bool:
        if not self._positives:
            return False
        path = normalize_path(relative_path)
        if not _matches_any(path, self._positives):
            return False
        return not (self._negatives and _matches_any(path, self._negatives))

    def __repr__(self) -> str:
        return f"ExclusionMatcher({self.patterns!r})"


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    """Check a single path against a pattern set.

    Args:
        relative_path (str): path relative to the repository root
        patterns (Iterable[str]): exclusion patterns, negations prefixed with ``!``

    Returns:
        bool: True if the path should be left out of the output
    """
    if not patterns:
        return False
    return ExclusionMatcher(patterns).is_excluded(relative_path)
