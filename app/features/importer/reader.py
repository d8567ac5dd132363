"""CSV source reader: the producer side of the import pipeline."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TextIO

from app.core.logging import get_logger
from app.features.importer.parser import ParseError, parse_row
from app.features.importer.streams import ClosableQueue
from app.features.markets.records import MarketRecord

logger = get_logger(__name__)


class ImportFileError(Exception):
    """The input file cannot be used at all; the import does not start."""

    pass


class SourceOpenError(ImportFileError):
    """The input file could not be opened."""

    pass


class HeaderReadError(ImportFileError):
    """The header row could not be read."""

    pass


class RowReadError(Exception):
    """A data row could not be read (bad quoting, bad encoding)."""

    def __init__(self, line: int, reason: str) -> None:
        super().__init__(f"could not read csv row at line {line}: {reason}")
        self.line = line


class CsvSource:
    """An open CSV file positioned after its header row.

    Use :meth:`open` to build one; it fails before any row is read if the
    file or its header is unusable.
    """

    def __init__(self, path: Path, handle: TextIO) -> None:
        self.path = path
        self._handle = handle
        self._reader = csv.reader(handle, strict=True)
        self.width = 0

    @classmethod
    def open(cls, path: str | Path, encoding: str = "utf-8") -> CsvSource:
        """Open ``path`` and consume its header row.

        Args:
            path: CSV file to read.
            encoding: Text encoding of the file.

        Returns:
            Source ready to yield data rows, each as wide as the header.

        Raises:
            SourceOpenError: If the file cannot be opened.
            HeaderReadError: If the header row is missing or unreadable.
        """
        path = Path(path)
        try:
            handle = open(path, encoding=encoding, newline="")  # noqa: SIM115
        except (OSError, LookupError) as e:
            raise SourceOpenError(f"could not open csv file {path}: {e}") from e

        source = cls(path, handle)
        try:
            header: list[str] = []
            while not header:
                header = next(source._reader)
            source.width = len(header)
        except StopIteration as e:
            source.close()
            raise HeaderReadError(f"could not read csv header of {path}: empty file") from e
        except (csv.Error, UnicodeDecodeError) as e:
            source.close()
            raise HeaderReadError(f"could not read csv header of {path}: {e}") from e

        return source

    @property
    def line(self) -> int:
        """Number of physical lines consumed so far."""
        return self._reader.line_num

    def read_row(self) -> list[str] | None:
        """Read the next non-empty data row.

        Returns:
            The row's fields, or None at end of input.

        Raises:
            RowReadError: If the row is malformed or its field count differs
                from the header's; reading can continue.
        """
        while True:
            try:
                row = next(self._reader)
            except StopIteration:
                return None
            except (csv.Error, UnicodeDecodeError) as e:
                raise RowReadError(self.line, str(e)) from e
            if not row:
                continue
            if len(row) != self.width:
                raise RowReadError(
                    self.line,
                    f"wrong number of fields: expected {self.width}, got {len(row)}",
                )
            return row

    def close(self) -> None:
        self._handle.close()


async def produce(
    source: CsvSource,
    records: ClosableQueue[MarketRecord],
    errors: ClosableQueue[Exception],
) -> None:
    """Read every data row and route it to the record or error stream.

    Both streams are closed and the source file is closed when the loop
    exits, whatever the reason.

    Args:
        source: Open source positioned after the header.
        records: Stream receiving parsed records.
        errors: Stream receiving RowReadError and ParseError instances.
    """
    try:
        while True:
            try:
                row = source.read_row()
            except RowReadError as e:
                logger.warning("importer.row_read_failed", line=e.line, error=str(e))
                await errors.put(e)
                continue

            if row is None:
                break

            try:
                record = parse_row(row)
            except ParseError as e:
                logger.warning("importer.row_parse_failed", line=source.line, error=str(e))
                await errors.put(e)
                continue

            await records.put(record)
    finally:
        source.close()
        await records.close()
        await errors.close()
