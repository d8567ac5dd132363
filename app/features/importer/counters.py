"""Run-scoped import counters."""

from dataclasses import dataclass


@dataclass
class ImportCounters:
    """Counters shared by the error consumer and every import worker.

    All increments happen on the event loop thread between awaits, so each
    one is atomic with respect to the other tasks of the run.

    Attributes:
        records_read: Records handed to a worker.
        read_errors: Rows that could not be read or parsed.
        import_errors: Records the store failed to persist.
    """

    records_read: int = 0
    read_errors: int = 0
    import_errors: int = 0

    def record_read(self) -> None:
        self.records_read += 1

    def read_error(self) -> None:
        self.read_errors += 1

    def import_error(self) -> None:
        self.import_errors += 1

    @property
    def total_read(self) -> int:
        """Every data row seen, good or bad."""
        return self.records_read + self.read_errors

    @property
    def imported_count(self) -> int:
        return self.records_read - self.import_errors

    @property
    def total_errors(self) -> int:
        return self.read_errors + self.import_errors
