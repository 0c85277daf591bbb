"""Maintenance of the log of inscription transfers kept by block height."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class TransferLog:
    """Transfer records, each stored as ``(block height, record)``."""

    rows: list[tuple[int, Any]] = field(default_factory=list)

    def delete(self) -> None:
        """Remove every record."""
        self.rows.clear()

    def trim(self, height: int) -> None:
        """Remove the records of blocks below ``height``."""
        self.rows[:] = [row for row in self.rows if row[0] >= height]

    def stats(self) -> tuple[int, int | None, int | None]:
        """Number of records and the lowest and highest heights they cover."""
        if not self.rows:
            return 0, None, None
        heights = [height for height, _ in self.rows]
        return len(self.rows), min(heights), max(heights)


def run_transfer(log: TransferLog, delete: bool = False, trim: int | None = None) -> list[str]:
    """Delete or trim the log as asked, print what was done and the table's state.

    Returns the lines printed.
    """
    if delete and trim is not None:
        raise ValueError("Cannot use both --delete and --trim")

    lines: list[str] = []

    def say(line: str) -> None:
        print(line)
        lines.append(line)

    if delete:
        say("deleting transfer log table")
        log.delete()
        return lines

    if trim is not None:
        say(f"deleting transfer logs for blocks before {trim}")
        log.trim(trim)

    rows, first, last = log.stats()
    if rows == 0:
        say(f"the transfer table has {rows} rows")
    else:
        say(f"the transfer table has {rows} rows from height {first} to height {last}")
    return lines