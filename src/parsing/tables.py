"""Pipe-table row helpers."""

from __future__ import annotations

from schemas.internal.blocks import Table


def is_table_line(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= 2 and stripped.startswith("|") and stripped.endswith("|")


def is_separator_row(line: str) -> bool:
    return "---" in line


def split_row(line: str) -> list[str]:
    """Split ``| a | b |`` into ``["a", "b"]``."""
    parts = line.strip().split("|")
    return [cell.strip() for cell in parts[1:-1]]


class TableBuffer:
    """Accumulates pipe rows until the table is closed."""

    def __init__(self) -> None:
        self.headers: list[str] | None = None
        self.rows: list[list[str]] = []

    def add(self, line: str) -> None:
        if self.headers is None:
            self.headers = split_row(line)
            return
        if is_separator_row(line):
            return
        self.rows.append(split_row(line))

    def build(self) -> Table | None:
        if self.headers is None:
            return None
        return Table(headers=self.headers, rows=self.rows)


__all__ = ["TableBuffer", "is_separator_row", "is_table_line", "split_row"]
