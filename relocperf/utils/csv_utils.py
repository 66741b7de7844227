"""Utilities for writing the semicolon-delimited CSV files of online evaluation."""

from typing import Any, Sequence

ONLINE_CSV_DELIMITER = "; "


def write_csv(fpath: str, header: Sequence[str], rows: Sequence[Sequence[Any]], delimiter: str = ONLINE_CSV_DELIMITER) -> None:
    """Write a header line followed by one line per row.

    The csv module only supports single-character delimiters, so lines are joined by hand.
    """
    with open(fpath, "w") as f:
        f.write(delimiter.join(header) + "\n")
        for row in rows:
            f.write(delimiter.join(str(v) for v in row) + "\n")
