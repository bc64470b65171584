"""Resolve a GitHub repository reference and clone it into a scoped work directory."""

from __future__ import annotations

import re
import shutil
import subprocess  # noqa: S404
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from git2txt.exceptions import InvalidRepositoryError, RepositoryFetchError
from git2txt.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

SHORTHAND_PATTERN = re.compile(r"^[\w-]+/[\w-]+$")
SSH_PREFIX = "git@github.com:"
HTTPS_PREFIX = "https://github.com/"
TEMP_PREFIX = "git2txt-"

FETCH_HINTS: tuple[str, ...] = (
    "Could not access the repository. Please check:",
    "  1. The repository exists and is public",
    "  2. You have the correct repository URL",
    "  3. GitHub is accessible from your network",
    "  4. Git is installed and accessible from command line",
)


def validate_input(args: Sequence[str]) -> str:
    """Return the repository reference from the positional arguments.

    Args:
        args (Sequence[str]): positional command line arguments

    Raises:
        InvalidRepositoryError: if no reference is given, or it is neither a
            github.com URL nor an ``owner/repo`` shorthand

    Returns:
        str: the repository reference, unchanged
    """
    if not args:
        raise InvalidRepositoryError(message="Repository URL is required")
    url = args[0]
    if "github.com" not in url and not SHORTHAND_PATTERN.match(url):
        raise InvalidRepositoryError(message="Only GitHub repositories are supported")
    return url


def normalize_github_url(url: str) -> str:
    """Turn the accepted reference forms into a URL `git clone` understands."""
    url = url.rstrip("/")
    if url.startswith((SSH_PREFIX, HTTPS_PREFIX)):
        return url
    if SHORTHAND_PATTERN.match(url):
        return HTTPS_PREFIX + url
    raise InvalidRepositoryError(message=f"Invalid GitHub URL: {url}")


def repository_name(url: str) -> str:
    name = url.rstrip("/").split("/")[-1]
    return name.removesuffix(".git")


def cleanup(directory: Path) -> None:
    """Remove `directory` recursively; a failure is only reported."""
    try:
        shutil.rmtree(directory)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning("cleanup_failed", directory=str(directory), error=str(e))


@contextmanager
def temporary_directory() -> Iterator[Path]:
    """Provide a fresh work directory, removed on every exit path."""
    directory = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
    logger.debug("temp_directory_created", directory=str(directory))
    try:
        yield directory
    finally:
        cleanup(directory)


def download_repository(url: str, destination: Path) -> Path:
    """Shallow-clone the repository at `url` into `destination`.

    Args:
        url (str): a repository reference accepted by `validate_input`
        destination (Path): an existing, empty directory

    Raises:
        InvalidRepositoryError: if the reference cannot be normalized
        RepositoryFetchError: if git is missing, the clone fails, or the
            checkout is empty

    Returns:
        Path: the directory holding the checkout
    """
    normalized = normalize_github_url(url)
    command = ["git", "clone", "--depth", "1", normalized, str(destination)]
    logger.debug("clone_repository", url=normalized, command=" ".join(command))

    try:
        subprocess.run(  # noqa: S603
            command,
            text=True,
            capture_output=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise RepositoryFetchError(url=normalized, message="git executable not found") from e
    except subprocess.CalledProcessError as e:
        logger.debug("clone_failed", url=normalized, returncode=e.returncode, stderr=e.stderr)
        detail = (e.stderr or "").strip() or f"git exited with status {e.returncode}"
        raise RepositoryFetchError(url=normalized, message=f"Failed to clone {normalized}: {detail}") from e

    if not any(p.name != ".git" for p in destination.iterdir()):
        raise RepositoryFetchError(url=normalized, message="Repository appears to be empty")

    logger.info("repository_downloaded", url=normalized)
    return destination
