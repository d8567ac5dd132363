"""Feature-specific test fixtures for markets module.

The ``session_maker`` fixture needs a running PostgreSQL (docker-compose up -d);
tests using it are skipped when the database cannot be reached.
"""

from dataclasses import replace
from datetime import UTC, datetime

import pytest
from sqlalchemy import delete
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.database import Base
from app.features.markets.models import StreetMarket
from app.features.markets.records import MarketRecord
from app.features.markets.schemas import MarketCreate, MarketQueryParams, MarketResponse

# Ids at or above this value belong to the tests and are deleted afterwards
TEST_ID_BASE = 9_000_000


class FakeMarketRepository:
    """In-memory stand-in for MarketRepository used by route tests."""

    def __init__(self) -> None:
        self.markets: dict[int, MarketResponse] = {}
        self.last_params: MarketQueryParams | None = None
        self._next_id = 1

    def add(self, market_id: int, data: MarketCreate) -> MarketResponse:
        now = datetime.now(UTC)
        market = MarketResponse(
            id=market_id,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self.markets[market_id] = market
        self._next_id = max(self._next_id, market_id + 1)
        return market

    async def get_by_id(self, market_id: int) -> MarketResponse | None:
        return self.markets.get(market_id)

    async def query(self, params: MarketQueryParams) -> list[MarketResponse]:
        self.last_params = params
        matches = [
            market
            for market in sorted(self.markets.values(), key=lambda m: m.id)
            if all(
                value.lower() in getattr(market, name).lower()
                for name, value in params.filters().items()
            )
        ]
        start = params.pagination.offset
        return matches[start : start + params.pagination.limit]

    async def create(self, data: MarketCreate) -> MarketResponse:
        return self.add(self._next_id, data)

    async def update(self, market_id: int, data: MarketCreate) -> MarketResponse | None:
        existing = self.markets.get(market_id)
        if existing is None:
            return None
        market = MarketResponse(
            id=market_id,
            created_at=existing.created_at,
            updated_at=datetime.now(UTC),
            **data.model_dump(),
        )
        self.markets[market_id] = market
        return market

    async def remove(self, market_id: int) -> None:
        self.markets.pop(market_id, None)


@pytest.fixture
def sample_market_create() -> MarketCreate:
    """Create a sample valid market payload."""
    return MarketCreate(
        longitude=-46550164,
        latitude=-23558733,
        setor_censitario=355030885000091,
        area_ponderacao=3550308005040,
        codigo_distrito=87,
        distrito="VILA FORMOSA",
        codigo_subprefeitura=26,
        subprefeitura="ARICANDUVA-FORMOSA-CARRAO",
        regiao5="Leste",
        regiao8="Leste 1",
        nome_feira="VILA FORMOSA",
        registro="4041-0",
        logradouro="RUA MARAGOJIPE",
        numero="S/N",
        bairro="VL FORMOSA",
        referencia="TV RUA PRETORIA",
    )


@pytest.fixture
def fake_repository() -> FakeMarketRepository:
    return FakeMarketRepository()


@pytest.fixture
def sample_record(sample_market_create: MarketCreate) -> MarketRecord:
    """Record in the test id range built from the sample payload."""
    return MarketRecord(id=TEST_ID_BASE + 1, **sample_market_create.model_dump())


@pytest.fixture
def make_record(sample_record: MarketRecord):
    """Return a builder deriving records from the sample one."""

    def _make(offset: int, **changes) -> MarketRecord:
        return replace(sample_record, id=TEST_ID_BASE + offset, **changes)

    return _make


@pytest.fixture
async def session_maker():
    """Create a session maker on the configured database.

    Creates the table if needed and removes the test rows afterwards.
    """
    settings = get_settings()
    engine = create_async_engine(settings.database_url, echo=False)

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, OperationalError, DBAPIError) as e:
        await engine.dispose()
        pytest.skip(f"database not available: {e}")

    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    yield maker

    async with maker() as session:
        await session.execute(delete(StreetMarket).where(StreetMarket.id >= TEST_ID_BASE))
        await session.commit()

    await engine.dispose()
