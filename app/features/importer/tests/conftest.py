"""Feature-specific test fixtures for importer module."""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from app.features.markets.records import MarketRecord
from app.features.markets.schemas import MarketResponse

HEADER = (
    "ID,LONG,LAT,SETCENS,AREAP,CODDIST,DISTRITO,CODSUBPREF,SUBPREFE,REGIAO05,"
    "REGIAO08,NOME_FEIRA,REGISTRO,LOGRADOURO,NUMERO,BAIRRO,REFERENCIA"
)

GOOD_ROW = (
    "1,-46548146,-23568390,355030885000019,3550308005040,87,VILA FORMOSA,26,"
    "ARICANDUVA,Leste,Leste 1,PRAÇA LEÃO X,7216-8,RUA CODAJÁS,45,VILA FORMOSA,"
    "PRAÇA MARECHAL LEITE BANDEIRA"
)

# 17 empty columns: every numeric column fails to parse
BLANK_ROW = ",,,,,,,,,,,,,,,,"


def market_row(market_id: int, nome_feira: str = "VILA FORMOSA") -> str:
    """Build a valid data row with the given id."""
    return (
        f"{market_id},-46548146,-23568390,355030885000019,3550308005040,87,"
        f"VILA FORMOSA,26,ARICANDUVA,Leste,Leste 1,{nome_feira},7216-8,"
        "RUA CODAJÁS,45,VILA FORMOSA,PRAÇA MARECHAL LEITE BANDEIRA"
    )


class FakeMarketStore:
    """In-memory MarketStore recording every call.

    Args:
        fail_ids: Record ids whose upsert raises RuntimeError("boom").
        sync_error: Exception raised by sync_sequence, if any.
        delay: Seconds each upsert sleeps, so workers overlap.
    """

    def __init__(
        self,
        fail_ids: set[int] | None = None,
        sync_error: Exception | None = None,
        delay: float = 0,
    ) -> None:
        self.rows: dict[int, MarketRecord] = {}
        self.created_at: dict[int, datetime] = {}
        self.upsert_calls = 0
        self.sync_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._fail_ids = fail_ids or set()
        self._sync_error = sync_error
        self._delay = delay

    async def create_or_update(self, record: MarketRecord) -> MarketResponse:
        self.upsert_calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delay)
            if record.id in self._fail_ids:
                raise RuntimeError("boom")

            now = datetime.now(UTC)
            created_at = self.created_at.setdefault(record.id, now)
            self.rows[record.id] = record
            return MarketResponse(
                **record.as_values(),
                created_at=created_at,
                updated_at=now,
            )
        finally:
            self.in_flight -= 1

    async def sync_sequence(self) -> None:
        self.sync_calls += 1
        if self._sync_error is not None:
            raise self._sync_error


@pytest.fixture
def fake_store() -> FakeMarketStore:
    """Create an empty in-memory store."""
    return FakeMarketStore()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing CSV lines (header first) to a temp file."""

    def _write(*rows: str, header: str | None = HEADER, name: str = "feiras.csv") -> Path:
        lines = ([header] if header is not None else []) + list(rows)
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_record() -> MarketRecord:
    """Record matching GOOD_ROW."""
    return MarketRecord(
        id=1,
        longitude=-46548146.0,
        latitude=-23568390.0,
        setor_censitario=355030885000019,
        area_ponderacao=3550308005040,
        codigo_distrito=87,
        distrito="VILA FORMOSA",
        codigo_subprefeitura=26,
        subprefeitura="ARICANDUVA",
        regiao5="Leste",
        regiao8="Leste 1",
        nome_feira="PRAÇA LEÃO X",
        registro="7216-8",
        logradouro="RUA CODAJÁS",
        numero="45",
        bairro="VILA FORMOSA",
        referencia="PRAÇA MARECHAL LEITE BANDEIRA",
    )


@pytest.fixture
def good_row() -> str:
    return GOOD_ROW


@pytest.fixture
def blank_row() -> str:
    return BLANK_ROW


@pytest.fixture
def make_row() -> Callable[..., str]:
    """Return the valid-row builder."""
    return market_row


@pytest.fixture
def make_store() -> Callable[..., FakeMarketStore]:
    """Return the FakeMarketStore class for tests needing custom behavior."""
    return FakeMarketStore
