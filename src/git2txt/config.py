from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Probed in the repository root, first found wins.
DEFAULT_EXCLUSION_FILES: tuple[str, ...] = (".excludes", "excludes.txt")

# Pruned at directory level in addition to every dot-directory.
PRUNED_DIRECTORIES: frozenset[str] = frozenset({"node_modules", ".git"})

DELIMITER = "=" * 80

BYTES_PER_MB = 1024 * 1024

SIZE_UNITS: tuple[str, ...] = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")

SNIFF_BYTES = 4096


class ExclusionSource(StrEnum):
    """Provenance of an exclusion pattern, only ever used for debug logging."""

    CLI_PATTERN = "cli-pattern"
    PATTERN_FILE = "pattern-file"
    DEFAULT_PATTERN_FILE = "default-pattern-file"


class FileEntry(BaseModel):
    """A file leaf found while walking the repository.

    Attributes:
        path: Absolute path to the file on disk.
        rel: Path relative to the repository root, with POSIX separators.
        size: File size in bytes.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    path: Path = Field(..., description="Absolute file path")
    rel: str = Field(..., description="File path relative to repository root")
    size: int = Field(..., ge=0, description="File size in bytes")

    def is_too_big(self, threshold_bytes: float) -> bool:
        """Check the size against a threshold, strictly greater means too big."""
        return self.size > threshold_bytes
