"""Pydantic schemas for the street market API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.shared.schemas import Pagination


class MarketBase(BaseModel):
    """Fields shared by every street market payload."""

    longitude: float = Field(..., description="Longitude as published by the dataset")
    latitude: float = Field(..., description="Latitude as published by the dataset")
    setor_censitario: int = Field(..., description="Census sector code")
    area_ponderacao: int = Field(..., description="Weighting area code")
    codigo_distrito: int = Field(..., description="District code")
    distrito: str = Field(..., max_length=100, description="District name")
    codigo_subprefeitura: int = Field(..., description="Subprefecture code")
    subprefeitura: str = Field(..., max_length=100, description="Subprefecture name")
    regiao5: str = Field(..., max_length=20, description="Region (5-region division)")
    regiao8: str = Field(..., max_length=20, description="Region (8-region division)")
    nome_feira: str = Field(..., max_length=100, description="Market name")
    registro: str = Field(..., max_length=20, description="Registration number")
    logradouro: str = Field(..., max_length=200, description="Street name")
    numero: str = Field(..., max_length=20, description="Street number")
    bairro: str = Field(..., max_length=100, description="Neighbourhood")
    referencia: str = Field(..., max_length=200, description="Reference point")


class MarketCreate(MarketBase):
    """Body for POST and PUT /feiras-livres.

    The id is never taken from the body: POST draws it from the table
    sequence and PUT takes it from the path.
    """


class MarketResponse(MarketBase):
    """Street market as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Market id (dataset id for imported rows)")
    created_at: datetime = Field(..., description="When the row was first inserted")
    updated_at: datetime = Field(..., description="When the row was last written")


class MarketQueryParams(BaseModel):
    """Filters and pagination for GET /feiras-livres.

    Text filters are case-insensitive substring matches combined with AND.
    """

    distrito: str | None = None
    regiao5: str | None = None
    nome_feira: str | None = None
    bairro: str | None = None
    pagination: Pagination

    def filters(self) -> dict[str, str]:
        """Return the text filters that were actually provided."""
        values = {
            "distrito": self.distrito,
            "regiao5": self.regiao5,
            "nome_feira": self.nome_feira,
            "bairro": self.bairro,
        }
        return {name: value for name, value in values.items() if value}
