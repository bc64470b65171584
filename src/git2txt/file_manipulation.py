from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from git2txt.config import BYTES_PER_MB, PRUNED_DIRECTORIES, SNIFF_BYTES, FileEntry
from git2txt.exceptions import DirectoryListingError
from git2txt.exclusion import ExclusionMatcher
from git2txt.logging import logger
from git2txt.output_construction import ProcessingOutcome
from git2txt.patterns import load_patterns

if TYPE_CHECKING:
    from collections.abc import Iterable


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def is_binary_file(path: Path, nbytes: int = SNIFF_BYTES) -> bool:
    """Check if path points to a binary file.

    The first `nbytes` bytes are inspected: a NUL byte, or content that is
    not valid UTF-8, means binary. A multi-byte sequence cut off at the end
    of the sample is not held against the file.

    Args:
        path (Path): path to test.
        nbytes (int, optional): number of bytes to read for testing. Defaults to 4096.

    Returns:
        bool: True if the file looks binary, False otherwise.
    """
    with path.open("rb") as f:
        chunk = f.read(nbytes)
    if not chunk:
        return False
    if b"\x00" in chunk:
        return True
    try:
        codecs.getincrementaldecoder("utf-8")().decode(chunk, final=False)
    except UnicodeDecodeError:
        return True
    return False


def read_file_content(path: Path) -> str:
    """Read a file as UTF-8 text, keeping its line endings untouched."""
    with path.open(encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def threshold_to_bytes(threshold_mb: float) -> float:
    return threshold_mb * BYTES_PER_MB


@dataclass(frozen=True)
class WalkPolicy:
    """Per-run options consulted for every file of a walk."""

    matcher: ExclusionMatcher
    threshold_bytes: float
    include_all: bool = False


def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            return list(it)
    except OSError as e:
        raise DirectoryListingError(folder=directory, reason=str(e)) from e


def _visit_file(
    entry: os.DirEntry[str],
    root: Path,
    policy: WalkPolicy,
    outcome: ProcessingOutcome,
) -> None:
    path = Path(entry.path)
    rel = relpath(path, root)

    if policy.matcher.is_excluded(rel):
        logger.debug("file_excluded", file=rel)
        outcome.skip()
        return

    try:
        record = FileEntry(path=path, rel=rel, size=path.stat().st_size)

        if not policy.include_all and record.is_too_big(policy.threshold_bytes):
            logger.debug("file_too_large", file=rel, size=record.size)
            outcome.skip()
            return

        if not policy.include_all and is_binary_file(record.path):
            logger.debug("file_binary", file=rel)
            outcome.skip()
            return

        content = read_file_content(record.path)
    except OSError as e:
        logger.debug("file_unreadable", file=rel, error=str(e))
        outcome.skip()
        return

    outcome.append(record.rel, record.size, content)
    logger.debug("file_processed", file=rel)


def _walk_directory(
    directory: Path,
    root: Path,
    policy: WalkPolicy,
    outcome: ProcessingOutcome,
) -> None:
    for entry in _list_directory(directory):
        if entry.is_dir(follow_symlinks=False):
            if entry.name.startswith(".") or entry.name in PRUNED_DIRECTORIES:
                continue
            _walk_directory(directory / entry.name, root, policy, outcome)
            continue

        if not entry.is_file(follow_symlinks=False):
            continue

        if entry.name.startswith("."):
            continue

        _visit_file(entry, root, policy, outcome)


def walk_repository(root: Path, policy: WalkPolicy) -> ProcessingOutcome:
    """Walk `root` depth-first and aggregate every accepted file.

    Dot-directories, ``node_modules`` and ``.git`` are never entered and
    dotfiles are never considered. Remaining files go through the exclusion
    matcher, then the size and binary checks unless `policy.include_all` is
    set. Entries are visited in the order the filesystem lists them.

    Args:
        root (Path): the repository root
        policy (WalkPolicy): exclusion matcher, size threshold and include-all flag

    Raises:
        DirectoryListingError: if a directory's entries cannot be listed

    Returns:
        ProcessingOutcome: processed and skipped counts plus the aggregated text
    """
    outcome = ProcessingOutcome()
    _walk_directory(root, root, policy, outcome)
    return outcome.finalize()


def process_repository(
    directory: Path,
    *,
    threshold: float,
    include_all: bool = False,
    exclude: Iterable[str] = (),
    exclude_file: Path | None = None,
) -> ProcessingOutcome:
    """Load exclusion patterns for `directory` and walk it.

    Args:
        directory (Path): the downloaded repository root
        threshold (float): size threshold in MB
        include_all (bool): disable size and binary filtering
        exclude (Iterable[str]): exclusion patterns from the command line
        exclude_file (Path | None): optional explicit pattern file

    Returns:
        ProcessingOutcome: the result of the walk
    """
    patterns = load_patterns(directory, exclude, exclude_file)
    policy = WalkPolicy(
        matcher=ExclusionMatcher(patterns),
        threshold_bytes=threshold_to_bytes(threshold),
        include_all=include_all,
    )
    return walk_repository(directory, policy)
