"""Sources of the raw timing tables."""

from __future__ import annotations

import csv
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Protocol

Row = list[str]


class TimingTableSource(Protocol):
    """Anything that can hand out named tables of string rows."""

    def read_table(self, name: str) -> list[Row] | None:
        """Return the rows of table ``name`` or None if it does not exist."""
        ...

    def describe(self, name: str) -> str:
        """Human readable location of table ``name`` for error messages."""
        ...


class CsvTableSource:
    """Read ``<name>.csv`` files from a directory."""

    def __init__(self, directory: Path | str) -> None:
        """Initialize the source.

        Args:
            directory: Directory holding the CSV tables
        """
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        """Path of the CSV file backing table ``name``."""
        return self.directory / f"{name}.csv"

    def describe(self, name: str) -> str:
        return str(self.path_for(name))

    def read_table(self, name: str) -> list[Row] | None:
        path = self.path_for(name)
        if not path.is_file():
            return None
        with path.open(encoding="utf-8-sig", newline="") as f:
            return [list(row) for row in csv.reader(f)]


class InMemoryTableSource:
    """Serve tables from a mapping, handy for tests and embedding."""

    def __init__(self, tables: Mapping[str, Iterable[Sequence[str]]]) -> None:
        self._tables = {
            name: [list(row) for row in rows] for name, rows in tables.items()
        }

    def describe(self, name: str) -> str:
        return f"<memory:{name}>"

    def read_table(self, name: str) -> list[Row] | None:
        rows = self._tables.get(name)
        if rows is None:
            return None
        return [list(row) for row in rows]
