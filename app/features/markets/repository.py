"""Street market persistence on PostgreSQL.

Every method opens its own session from the shared session maker, so one
repository instance can be used concurrently by many import workers.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.logging import get_logger
from app.features.markets.models import StreetMarket
from app.features.markets.records import MarketRecord
from app.features.markets.schemas import MarketCreate, MarketQueryParams, MarketResponse

logger = get_logger(__name__)

SYNC_SEQUENCE_SQL = text(
    "SELECT setval("
    "pg_get_serial_sequence('feira_livre', 'id'), "
    "(SELECT COALESCE(MAX(id), 0) + 1 FROM feira_livre), "
    "false)"
)

_FILTER_COLUMNS = {
    "distrito": StreetMarket.distrito,
    "regiao5": StreetMarket.regiao5,
    "nome_feira": StreetMarket.nome_feira,
    "bairro": StreetMarket.bairro,
}


@runtime_checkable
class MarketStore(Protocol):
    """The two store operations the import pipeline relies on."""

    async def create_or_update(self, record: MarketRecord) -> MarketResponse:
        """Insert the record, or overwrite the row that has its id."""
        ...

    async def sync_sequence(self) -> None:
        """Move the id sequence past the largest stored id."""
        ...


class MarketRepository:
    """Street market repository backed by an async session maker."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    async def get_by_id(self, market_id: int) -> MarketResponse | None:
        """Get a market by id, or None if it does not exist."""
        async with self._session_maker() as session:
            market = await session.get(StreetMarket, market_id)
            if market is None:
                return None
            return MarketResponse.model_validate(market)

    async def query(self, params: MarketQueryParams) -> list[MarketResponse]:
        """List markets matching the filters, ordered by id.

        Args:
            params: Substring filters plus an already clamped pagination.

        Returns:
            One page of markets; empty when nothing matches.
        """
        stmt = select(StreetMarket)
        for name, value in params.filters().items():
            stmt = stmt.where(_FILTER_COLUMNS[name].ilike(f"%{value}%"))
        stmt = (
            stmt.order_by(StreetMarket.id)
            .offset(params.pagination.offset)
            .limit(params.pagination.limit)
        )

        async with self._session_maker() as session:
            result = await session.scalars(stmt)
            return [MarketResponse.model_validate(market) for market in result]

    async def create(self, data: MarketCreate) -> MarketResponse:
        """Insert a market with an id drawn from the table sequence."""
        async with self._session_maker() as session:
            market = StreetMarket(**data.model_dump())
            session.add(market)
            await session.commit()
            await session.refresh(market)

            logger.info("markets.created", market_id=market.id)
            return MarketResponse.model_validate(market)

    async def create_or_update(self, record: MarketRecord) -> MarketResponse:
        """Upsert a record keyed by its dataset id.

        A new id is inserted with fresh timestamps. An existing id gets every
        field overwritten and ``updated_at`` refreshed; ``created_at`` is kept.
        """
        values = record.as_values()
        insert_stmt = pg_insert(StreetMarket).values(**values)
        upsert_stmt = insert_stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                **{name: insert_stmt.excluded[name] for name in values if name != "id"},
                "updated_at": func.now(),
            },
        ).returning(StreetMarket)

        async with self._session_maker() as session:
            result = await session.scalars(
                upsert_stmt,
                execution_options={"populate_existing": True},
            )
            market = result.one()
            await session.commit()
            return MarketResponse.model_validate(market)

    async def update(self, market_id: int, data: MarketCreate) -> MarketResponse | None:
        """Overwrite every field of an existing market.

        Returns:
            The updated market, or None if the id does not exist.
        """
        stmt = (
            update(StreetMarket)
            .where(StreetMarket.id == market_id)
            .values(**data.model_dump(), updated_at=func.now())
            .returning(StreetMarket)
        )

        async with self._session_maker() as session:
            result = await session.scalars(
                stmt,
                execution_options={"populate_existing": True},
            )
            market = result.one_or_none()
            if market is None:
                return None
            await session.commit()

            logger.info("markets.updated", market_id=market_id)
            return MarketResponse.model_validate(market)

    async def remove(self, market_id: int) -> None:
        """Delete a market; deleting a missing id is not an error."""
        async with self._session_maker() as session:
            await session.execute(delete(StreetMarket).where(StreetMarket.id == market_id))
            await session.commit()

        logger.info("markets.removed", market_id=market_id)

    async def sync_sequence(self) -> None:
        """Set the id sequence to MAX(id) + 1 (1 on an empty table)."""
        async with self._session_maker() as session:
            await session.execute(SYNC_SEQUENCE_SQL)
            await session.commit()
