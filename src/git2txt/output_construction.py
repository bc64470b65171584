from __future__ import annotations

import io
from dataclasses import dataclass, field

from git2txt.config import DELIMITER, SIZE_UNITS
from git2txt.logging import logger


def format_size(size: int) -> str:
    """Format a byte count with decimal units, e.g. ``1.2 kB``.

    Args:
        size (int): the size in bytes

    Returns:
        str: the value rounded to two decimals with trailing zeros dropped,
            followed by its unit
    """
    value = float(size)
    unit = SIZE_UNITS[0]
    for unit in SIZE_UNITS:
        if abs(value) < 1000 or unit == SIZE_UNITS[-1]:
            break
        value /= 1000
    text = f"{round(value, 2):.2f}".rstrip("0").rstrip(".")
    return f"{text} {unit}"


def render_file_block(relative_path: str, size: int, content: str) -> str:
    """Render one file's header and content as it appears in the output.

    Args:
        relative_path (str): the forward-slash path relative to the repository root
        size (int): the file size in bytes
        content (str): the raw file content

    Returns:
        str: the delimited block, starting with a newline
    """
    return (
        f"\n{DELIMITER}\n"
        f"File: {relative_path}\n"
        f"Size: {format_size(size)}\n"
        f"{DELIMITER}\n\n"
        f"{content}\n"
    )


@dataclass
class ProcessingOutcome:
    """Running totals and buffer for one walk over a repository."""

    processed: int = 0
    skipped: int = 0
    _buffer: io.StringIO = field(default_factory=io.StringIO, repr=False)

    def append(self, relative_path: str, size: int, content: str) -> None:
        self._buffer.write(render_file_block(relative_path, size, content))
        self.processed += 1

    def skip(self) -> None:
        self.skipped += 1

    @property
    def content(self) -> str:
        return self._buffer.getvalue()

    def finalize(self) -> ProcessingOutcome:
        """Report the totals once traversal completes."""
        logger.info("files_processed", processed=self.processed, skipped=self.skipped)
        if self.processed == 0:
            logger.warning("no_files_processed", skipped=self.skipped)
        return self
