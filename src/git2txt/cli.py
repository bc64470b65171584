"""
git2txt: convert a GitHub repository into a single text file.

Overview
--------
The repository is shallow-cloned into a temporary directory, its file tree is
walked depth-first, and every file that survives filtering is appended to one
text document under a header giving its relative path and size::

    ================================================================================
    File: src/index.js
    Size: 1.2 kB
    ================================================================================

    <file content>

Filtering:
   - dot-directories, `node_modules` and `.git` are never entered, dotfiles
     are never read;
   - exclusion globs come from `--exclude` (repeatable), `--exclude-file`
     and the first of `.excludes` / `excludes.txt` found in the repository
     root; `!pattern` re-includes files matched by another pattern;
   - files above `--threshold` MB and binary files are skipped unless
     `--include-all` is given.

The temporary clone is always removed, whatever the outcome.

Usage
-----
    git2txt https://github.com/username/repository
    git2txt username/repository --output out.txt --threshold 0.5
    git2txt username/repository -e "*.test.js" -e "dist/*" -e "!dist/keep.js"
    git2txt username/repository --exclude-file my-excludes.txt --debug
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from git2txt import __version__
from git2txt.exceptions import EmptyOutputError, Git2TxtError, OutputWriteError, RepositoryFetchError
from git2txt.file_manipulation import process_repository
from git2txt.logging import setup_logging
from git2txt.repository import (
    FETCH_HINTS,
    download_repository,
    repository_name,
    temporary_directory,
    validate_input,
)
from git2txt.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = setup_logging()


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    p = argparse.ArgumentParser(
        prog="git2txt",
        description="Convert a GitHub repository into a single text file.",
    )
    p.add_argument(
        "repository",
        nargs="?",
        default=None,
        help="Repository URL, owner/repo shorthand or git@github.com: SSH form.",
    )
    p.add_argument("-o", "--output", type=Path, default=None, help="Output file path.")
    p.add_argument(
        "-t",
        "--threshold",
        type=float,
        default=None,
        help="File size threshold in MB (default: 0.1).",
    )
    p.add_argument(
        "--include-all",
        action="store_true",
        default=None,
        help="Include all files regardless of size or type.",
    )
    p.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=None,
        help="Exclusion glob (repeatable), prefix with ! to re-include.",
    )
    p.add_argument(
        "-f",
        "--exclude-file",
        type=Path,
        default=None,
        help="File with exclusion patterns, one per line.",
    )
    p.add_argument("--debug", action="store_true", default=None, help="Enable verbose logging.")
    p.add_argument("--log-file", type=str, default=None, help="Log file path.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = p.parse_args(argv)
    try:
        return Settings.from_sources(vars(args))
    except ValidationError as e:
        p.error(str(e))


def write_output(content: str, output_path: Path) -> None:
    """Persist the aggregated text.

    Args:
        content (str): the aggregated output
        output_path (Path): the destination file

    Raises:
        OutputWriteError: if the file cannot be written
    """
    try:
        output_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(file=output_path, reason=str(e)) from e


def run(settings: Settings) -> Path:
    """Fetch, flatten and write one repository.

    Returns:
        Path: the output file written
    """
    url = validate_input([settings.repository] if settings.repository else [])
    output_path = settings.output_path(repository_name(url))

    with temporary_directory() as workdir:
        repo_dir = download_repository(url, workdir)
        outcome = process_repository(
            repo_dir,
            threshold=settings.threshold,
            include_all=settings.include_all,
            exclude=settings.exclude,
            exclude_file=settings.exclude_file,
        )
        if not outcome.content:
            raise EmptyOutputError
        write_output(outcome.content, output_path)

    print(f"Processed {outcome.processed} files successfully ({outcome.skipped} skipped)")
    return output_path


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    setup_logging(settings.log_file or None, debug=settings.debug)

    try:
        output_path = run(settings)
    except RepositoryFetchError as e:
        logger.debug("fetch_failed", error=str(e), exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        for hint in FETCH_HINTS:
            print(hint, file=sys.stderr)
        return 1
    except Git2TxtError as e:
        logger.debug("run_failed", error=str(e), exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error("unexpected_error", error=str(e), exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Output saved to {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
