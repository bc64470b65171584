from __future__ import annotations

import pytest

from git2txt.output_construction import ProcessingOutcome, format_size, render_file_block

DELIMITER = "=" * 80


@pytest.mark.unit
@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (512, "512 B"),
        (1200, "1.2 kB"),
        (1234, "1.23 kB"),
        (265_318, "265.32 kB"),
        (1_500_000, "1.5 MB"),
        (3_000_000_000, "3 GB"),
    ],
)
def test_format_size_uses_decimal_units(size: int, expected: str) -> None:
    assert format_size(size) == expected


@pytest.mark.unit
def test_render_file_block_layout() -> None:
    block = render_file_block("src/index.js", 18, "console.log('hi')")

    assert block == (
        f"\n{DELIMITER}\n"
        "File: src/index.js\n"
        "Size: 18 B\n"
        f"{DELIMITER}\n"
        "\n"
        "console.log('hi')\n"
    )


@pytest.mark.unit
def test_outcome_accumulates_in_append_order() -> None:
    outcome = ProcessingOutcome()

    outcome.append("b.txt", 1, "b")
    outcome.skip()
    outcome.append("a.txt", 1, "a")

    assert outcome.processed == 2
    assert outcome.skipped == 1
    assert outcome.content.index("File: b.txt") < outcome.content.index("File: a.txt")
    assert outcome.content.count(DELIMITER) == 4


@pytest.mark.unit
def test_finalize_warns_when_nothing_was_processed(caplog: pytest.LogCaptureFixture) -> None:
    outcome = ProcessingOutcome()
    outcome.skip()

    assert outcome.finalize() is outcome
    assert outcome.content == ""
    assert "no_files_processed" in caplog.text
