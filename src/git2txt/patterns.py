"""Gather exclusion patterns from the CLI, an explicit file and default files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from git2txt.config import DEFAULT_EXCLUSION_FILES, ExclusionSource
from git2txt.exceptions import PatternFileUnreadableError
from git2txt.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

NEGATION_PREFIX = "!"


class PatternSet:
    """Insertion-ordered, deduplicated collection of exclusion patterns.

    Order is kept for readable debug output only; it never changes the
    outcome of an exclusion decision.
    """

    __slots__ = ("_patterns",)

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self._patterns: dict[str, None] = {}
        self.update(patterns)

    def add(self, pattern: str) -> None:
        self._patterns.setdefault(pattern, None)

    def update(self, patterns: Iterable[str]) -> None:
        for pattern in patterns:
            self.add(pattern)

    def union(self, other: Iterable[str]) -> PatternSet:
        merged = PatternSet(self)
        merged.update(other)
        return merged

    def __or__(self, other: PatternSet) -> PatternSet:
        return self.union(other)

    @property
    def positives(self) -> list[str]:
        return [p for p in self._patterns if not p.startswith(NEGATION_PREFIX)]

    @property
    def negatives(self) -> list[str]:
        """Negation patterns with their leading ``!`` stripped."""
        return [p[len(NEGATION_PREFIX) :] for p in self._patterns if p.startswith(NEGATION_PREFIX)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._patterns

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PatternSet):
            return set(self._patterns) == set(other._patterns)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PatternSet({list(self._patterns)!r})"


def parse_exclusion_file(content: str) -> list[str]:
    """Split pattern file content into patterns.

    Lines are trimmed; blank lines and lines starting with ``#`` are dropped.

    Args:
        content (str): the raw text of a pattern file

    Returns:
        list[str]: the surviving patterns, in file order
    """
    out: list[str] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        out.append(stripped)
    return out


def load_exclusion_file(path: Path) -> list[str]:
    """Read an explicitly requested pattern file.

    Args:
        path (Path): the pattern file given on the command line

    Raises:
        PatternFileUnreadableError: if the file cannot be read or decoded as UTF-8

    Returns:
        list[str]: the patterns found in the file
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PatternFileUnreadableError(file=path, reason=str(e)) from e
    return parse_exclusion_file(content)


def load_default_exclusions(directory: Path) -> list[str]:
    """Load patterns from the first default exclusion file found in `directory`.

    A missing file is expected; any other read error is logged at debug
    level and the file contributes nothing.
    """
    for name in DEFAULT_EXCLUSION_FILES:
        candidate = directory / name
        try:
            content = candidate.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("default_exclusion_file_missing", file=name, directory=str(directory))
            continue
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("default_exclusion_file_unreadable", file=str(candidate), error=str(e))
            continue
        patterns = parse_exclusion_file(content)
        logger.debug(
            "patterns_loaded",
            source=ExclusionSource.DEFAULT_PATTERN_FILE,
            file=str(candidate),
            count=len(patterns),
        )
        return patterns
    return []


def load_patterns(
    directory: Path,
    explicit_patterns: Iterable[str] = (),
    exclude_file: Path | None = None,
) -> PatternSet:
    """Merge every exclusion source into one pattern set.

    Args:
        directory (Path): the repository root probed for default exclusion files
        explicit_patterns (Iterable[str]): patterns passed on the command line
        exclude_file (Path | None): optional explicit pattern file

    Raises:
        PatternFileUnreadableError: if `exclude_file` is given but unreadable

    Returns:
        PatternSet: the deduplicated union of all sources
    """
    patterns = PatternSet(explicit_patterns)
    logger.debug("patterns_loaded", source=ExclusionSource.CLI_PATTERN, count=len(patterns))

    if exclude_file is not None:
        from_file = load_exclusion_file(exclude_file)
        patterns.update(from_file)
        logger.debug(
            "patterns_loaded",
            source=ExclusionSource.PATTERN_FILE,
            file=str(exclude_file),
            count=len(from_file),
        )

    patterns.update(load_default_exclusions(directory))
    logger.debug("patterns_merged", count=len(patterns), patterns=list(patterns))
    return patterns
