from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(eq=False)
class Git2TxtError(Exception):
    """Base exception for errors in the git2txt package."""

    message: str = "git2txt failed."

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class InvalidRepositoryError(Git2TxtError):
    """Raised when the repository reference is missing or malformed."""

    message: str = "Repository URL is required"


@dataclass(eq=False)
class RepositoryFetchError(Git2TxtError):
    """Raised when the repository cannot be cloned into the work directory."""

    url: str = ""
    message: str = "Could not access the repository."


@dataclass(eq=False)
class PatternFileUnreadableError(Git2TxtError):
    """Raised when an explicitly requested exclusion file cannot be read."""

    file: Path = Path()
    reason: str = ""
    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Failed to load exclusion file {self.file}: {self.reason}"


@dataclass(eq=False)
class DirectoryListingError(Git2TxtError):
    """Raised when a directory's entries cannot be listed during the walk."""

    folder: Path = Path()
    reason: str = ""
    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Could not list directory {self.folder}: {self.reason}"


@dataclass(eq=False)
class EmptyOutputError(Git2TxtError):
    """Raised when no file content survived filtering."""

    message: str = "No content was generated from the repository"


@dataclass(eq=False)
class OutputWriteError(Git2TxtError):
    """Raised when the aggregated output cannot be persisted."""

    file: Path = Path()
    reason: str = ""
    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Failed to write output file {self.file}: {self.reason}"
