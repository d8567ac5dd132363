"""Concurrent CSV import of street markets.

One producer task reads the file and feeds two streams. A counter task
drains the error stream while a fixed pool of worker tasks drains the record
stream and upserts each record. Once every worker has exited, the table's id
sequence is realigned and a summary report is returned.

Per-row failures (unreadable row, unparseable row, failed upsert) are only
counted. Only an unusable input file aborts the run, before any task starts.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from pathlib import Path

from app.core.config import get_settings
from app.core.logging import get_logger, import_id_ctx
from app.features.importer.counters import ImportCounters
from app.features.importer.reader import CsvSource, produce
from app.features.importer.report import format_report
from app.features.importer.streams import ClosableQueue
from app.features.markets.records import MarketRecord
from app.features.markets.repository import MarketStore

logger = get_logger(__name__)


class MarketImporter:
    """Imports a street market CSV into a MarketStore.

    Args:
        store: Target store; must tolerate concurrent calls.
        pool_size: Number of upsert workers (defaults to IMPORT_POOL_SIZE).
        queue_size: Capacity of the record and error streams
            (defaults to IMPORT_QUEUE_SIZE).
        encoding: Text encoding of the input files.
    """

    def __init__(
        self,
        store: MarketStore,
        pool_size: int | None = None,
        queue_size: int | None = None,
        encoding: str = "utf-8",
    ) -> None:
        settings = get_settings()
        self.store = store
        self.pool_size = settings.import_pool_size if pool_size is None else pool_size
        self.queue_size = settings.import_queue_size if queue_size is None else queue_size
        self.encoding = encoding

        if self.pool_size < 1:
            raise ValueError(f"pool_size must be at least 1, got {self.pool_size}")
        if self.queue_size < 1:
            raise ValueError(f"queue_size must be at least 1, got {self.queue_size}")

    async def run(self, path: str | Path) -> str:
        """Import ``path`` and return the summary report.

        Raises:
            SourceOpenError: If the file cannot be opened.
            HeaderReadError: If its header row cannot be read.
        """
        token = import_id_ctx.set(uuid.uuid4().hex)
        try:
            counters, sync_error = await self._execute(path)
        finally:
            import_id_ctx.reset(token)
        return format_report(counters, sync_error)

    async def _execute(self, path: str | Path) -> tuple[ImportCounters, str | None]:
        start_time = time.perf_counter()

        source = CsvSource.open(path, encoding=self.encoding)

        logger.info(
            "importer.run_started",
            path=str(source.path),
            pool_size=self.pool_size,
        )

        counters = ImportCounters()
        records: ClosableQueue[MarketRecord] = ClosableQueue(self.queue_size)
        errors: ClosableQueue[Exception] = ClosableQueue(self.queue_size)

        producer = asyncio.create_task(produce(source, records, errors))
        error_counter = asyncio.create_task(self._count_errors(errors, counters))
        workers = [
            asyncio.create_task(self._worker(records, counters)) for _ in range(self.pool_size)
        ]

        await asyncio.gather(*workers)
        await asyncio.gather(producer, error_counter)

        sync_error = await self._sync_sequence()

        logger.info(
            "importer.run_completed",
            path=str(source.path),
            records_read=counters.records_read,
            read_errors=counters.read_errors,
            import_errors=counters.import_errors,
            imported=counters.imported_count,
            sequence_synced=sync_error is None,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

        return counters, sync_error

    @staticmethod
    async def _count_errors(
        errors: ClosableQueue[Exception],
        counters: ImportCounters,
    ) -> None:
        async for _ in errors:
            counters.read_error()

    async def _worker(
        self,
        records: ClosableQueue[MarketRecord],
        counters: ImportCounters,
    ) -> None:
        async for record in records:
            counters.record_read()
            try:
                await self.store.create_or_update(record)
            except Exception as e:
                counters.import_error()
                logger.warning(
                    "importer.persist_failed",
                    record_id=record.id,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    async def _sync_sequence(self) -> str | None:
        try:
            await self.store.sync_sequence()
        except Exception as e:
            logger.error(
                "importer.sequence_sync_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return str(e)
        return None


async def run_import(
    path: str | Path,
    store: MarketStore,
    pool_size: int | None = None,
    encoding: str = "utf-8",
) -> str:
    """Import a street market CSV into ``store`` and return the report.

    Args:
        path: CSV file with a header row.
        store: Target store.
        pool_size: Number of upsert workers; IMPORT_POOL_SIZE when omitted.
        encoding: Text encoding of the file.

    Returns:
        The multi-line summary report.

    Raises:
        SourceOpenError: If the file cannot be opened.
        HeaderReadError: If its header row cannot be read.
    """
    importer = MarketImporter(store, pool_size=pool_size, encoding=encoding)
    return await importer.run(path)
