"""Immutable street market record shared by the importer and the repository."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class MarketRecord:
    """One street market as read from the dataset, keyed by its dataset id."""

    id: int
    longitude: float
    latitude: float
    setor_censitario: int
    area_ponderacao: int
    codigo_distrito: int
    distrito: str
    codigo_subprefeitura: int
    subprefeitura: str
    regiao5: str
    regiao8: str
    nome_feira: str
    registro: str
    logradouro: str
    numero: str
    bairro: str
    referencia: str

    def as_values(self) -> dict[str, Any]:
        """Return the column values, id included, for an INSERT."""
        return asdict(self)
